"""Listing models."""

import math
from datetime import datetime
from enum import Enum
from typing import Any, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from marketplace.models.category import ListingCategory


class ListingType(str, Enum):
    """Listing type values."""
    SALE = "sale"
    RENT = "rent"


class PropertyType(str, Enum):
    """Property type values."""
    APARTMENT = "apartment"
    HOUSE = "house"
    FLAT = "flat"
    LAND = "land"
    COMMERCIAL = "commercial"
    OFFICE = "office"
    SHOP = "shop"


class ListingStatus(str, Enum):
    """Listing moderation status values."""
    DRAFT = "draft"
    PENDING = "pending"
    PUBLISHED = "published"
    SOLD = "sold"
    RENTED = "rented"
    REJECTED = "rejected"


class CompletionStatus(str, Enum):
    """Construction completion values."""
    READY = "ready"
    UNDER_CONSTRUCTION = "under_construction"


class FurnishingStatus(str, Enum):
    """Furnishing values."""
    FURNISHED = "furnished"
    SEMI_FURNISHED = "semi_furnished"
    UNFURNISHED = "unfurnished"


class NumericPrice(BaseModel):
    """A price that holds a number."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["numeric"] = "numeric"
    amount: float

    def comparable_amount(self) -> float:
        return self.amount

    def raw(self) -> Union[int, float]:
        return int(self.amount) if self.amount.is_integer() else self.amount


class UnparsedPrice(BaseModel):
    """A free-text price such as "Contact for Price"."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["unparsed"] = "unparsed"
    text: str

    def comparable_amount(self) -> float:
        """Free-text prices compare as zero in range filters and price sorts."""
        return 0.0

    def raw(self) -> str:
        return self.text


Price = Union[NumericPrice, UnparsedPrice]


def parse_price(value: Any) -> Price:
    """
    Convert a stored price (number, numeric string or free text) to a tagged price.

    Strings are numeric only when the whole trimmed string is a finite number.
    """
    if isinstance(value, (NumericPrice, UnparsedPrice)):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if math.isfinite(value):
            return NumericPrice(amount=float(value))
        return UnparsedPrice(text=str(value))
    if value is None:
        return UnparsedPrice(text="")

    text = str(value)
    try:
        amount = float(text.strip())
    except ValueError:
        return UnparsedPrice(text=text)
    if not math.isfinite(amount):
        return UnparsedPrice(text=text)
    return NumericPrice(amount=amount)


class Listing(BaseModel):
    """Real estate listing (read-side projection of a stored row)."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(..., description="Listing ID (text)")
    title: str = Field(..., description="Listing title")
    slug: Optional[str] = Field(None, description="URL slug")
    price: Price = Field(..., description="Numeric price or free text such as 'Contact for Price'")
    price_value: Optional[float] = Field(
        None,
        alias="priceValue",
        exclude=True,
        description="Numeric comparable price maintained on write",
    )
    price_per_sqft: Optional[float] = Field(None, alias="pricePerSqft")
    listing_type: str = Field(..., alias="listingType", description="sale or rent")
    property_type: str = Field(
        ...,
        alias="propertyType",
        description="apartment, house, flat, land, commercial, office, shop",
    )
    property_sub_type: Optional[str] = Field(None, alias="propertySubType")
    address: Optional[str] = None
    city: Optional[str] = None
    area: Optional[str] = None
    completion_status: Optional[str] = Field(None, alias="completionStatus")
    furnishing_status: Optional[str] = Field(None, alias="furnishingStatus")
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    area_sq_ft: Optional[int] = Field(None, alias="areaSqFt")
    amenities: list[str] = Field(default_factory=list)
    is_featured: bool = Field(default=False, alias="isFeatured")
    is_verified: bool = Field(default=False, alias="isVerified")
    status: str = Field(
        default=ListingStatus.DRAFT.value,
        description="draft, pending, published, sold, rented, rejected",
    )
    views: int = Field(default=0, ge=0)
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    @field_validator("price", mode="before")
    @classmethod
    def _tag_price(cls, value: Any) -> Price:
        return parse_price(value)

    @field_validator("amenities", mode="before")
    @classmethod
    def _amenities_list(cls, value: Any) -> list:
        return [] if value is None else value

    @field_serializer("price")
    def _raw_price(self, price: Price) -> Union[int, float, str]:
        return price.raw()


class ListingWithCategory(Listing):
    """Listing with its derived category attached."""
    category: ListingCategory = Field(..., description="Derived category label")
