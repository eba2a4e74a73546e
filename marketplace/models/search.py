"""Search filter and response models."""

from enum import Enum
from math import ceil
from typing import Generic, Optional, TypeVar
from pydantic import BaseModel, ConfigDict, Field

from marketplace.config import Settings
from marketplace.models.category import ListingCategory
from marketplace.models.listing import (
    CompletionStatus,
    FurnishingStatus,
    ListingType,
    PropertyType,
)

T = TypeVar("T")


class SortOption(str, Enum):
    """Accepted sortBy values."""
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    NEWEST = "newest"
    OLDEST = "oldest"
    POPULAR = "popular"


class SearchFilters(BaseModel):
    """Typed listing search constraints. Range ordering (min <= max) is not checked."""
    model_config = ConfigDict(frozen=True)

    q: Optional[str] = None
    city: Optional[str] = None
    area: Optional[str] = None
    listing_type: Optional[ListingType] = None
    property_type: Optional[PropertyType] = None
    category: Optional[ListingCategory] = None
    completion_status: Optional[CompletionStatus] = None
    furnishing_status: Optional[FurnishingStatus] = None
    min_price: Optional[int] = None
    max_price: Optional[int] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    min_area: Optional[int] = None
    max_area: Optional[int] = None
    amenities: tuple[str, ...] = ()
    is_featured: bool = False
    is_verified: bool = False
    sort_by: Optional[SortOption] = None
    page: int = Field(default=Settings.DEFAULT_PAGE, ge=1)
    limit: int = Field(default=Settings.DEFAULT_PAGE_SIZE, gt=0)


class PaginatedResponse(BaseModel, Generic[T]):
    """One page of results plus total-count and page metadata."""
    model_config = ConfigDict(populate_by_name=True)

    data: list[T]
    total: int = Field(..., ge=0, description="Matching rows across all pages")
    page: int
    limit: int
    total_pages: int = Field(..., alias="totalPages")

    @classmethod
    def build(cls, data: list, total: int, page: int, limit: int) -> "PaginatedResponse":
        return cls(
            data=data,
            total=total,
            page=page,
            limit=limit,
            total_pages=ceil(total / limit),
        )
