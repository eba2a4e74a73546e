"""Filter normalizer - coerce raw query parameters into SearchFilters."""

import re
from enum import Enum
from typing import Mapping, Optional, Sequence, Type, TypeVar, Union

from marketplace.config import Settings
from marketplace.models.category import ListingCategory
from marketplace.models.listing import (
    CompletionStatus,
    FurnishingStatus,
    ListingType,
    PropertyType,
)
from marketplace.models.search import SearchFilters, SortOption

RawValue = Union[str, Sequence[str], None]
RawParams = Mapping[str, RawValue]

E = TypeVar("E", bound=Enum)

_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def parse_int(value: Optional[str]) -> Optional[int]:
    """
    Parse the leading integer of a string ("12", " 7 ", "30abc" -> 30).

    Returns None instead of raising when no leading integer is present.
    """
    if value is None:
        return None
    match = _LEADING_INT.match(value)
    if not match:
        return None
    try:
        return int(match.group(1))
    except ValueError:
        # Digit runs past the interpreter's int conversion limit
        return None


def _first(value: RawValue) -> Optional[str]:
    """Repeated query keys arrive as lists; scalar fields use the first value."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    for item in value:
        if item is not None:
            return str(item)
    return None


def _text(raw: RawParams, key: str) -> Optional[str]:
    value = _first(raw.get(key))
    return value if value else None


def _int(raw: RawParams, key: str) -> Optional[int]:
    return parse_int(_first(raw.get(key)))


def _flag(raw: RawParams, key: str) -> bool:
    return _first(raw.get(key)) == "true"


def _enum(raw: RawParams, key: str, enum_cls: Type[E]) -> Optional[E]:
    value = _first(raw.get(key))
    if not value:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return None


def _amenities(value: RawValue) -> tuple[str, ...]:
    if value is None:
        return ()
    parts = [value] if isinstance(value, str) else list(value)
    tags = []
    for part in parts:
        for tag in str(part).split(","):
            tag = tag.strip()
            if tag:
                tags.append(tag)
    return tuple(tags)


def _positive_or(value: Optional[int], default: int) -> int:
    if value is None or value < 1:
        return default
    return value


def normalize_filters(raw: RawParams) -> SearchFilters:
    """
    Convert untyped query parameters into SearchFilters.

    Best-effort coercion: malformed numbers and unknown enum values become
    absent filters rather than errors.
    """
    return SearchFilters(
        q=_text(raw, "q"),
        city=_text(raw, "city"),
        area=_text(raw, "area"),
        listing_type=_enum(raw, "listingType", ListingType),
        property_type=_enum(raw, "propertyType", PropertyType),
        category=_enum(raw, "category", ListingCategory),
        completion_status=_enum(raw, "completionStatus", CompletionStatus),
        furnishing_status=_enum(raw, "furnishingStatus", FurnishingStatus),
        min_price=_int(raw, "minPrice"),
        max_price=_int(raw, "maxPrice"),
        bedrooms=_int(raw, "bedrooms"),
        bathrooms=_int(raw, "bathrooms"),
        min_area=_int(raw, "minArea"),
        max_area=_int(raw, "maxArea"),
        amenities=_amenities(raw.get("amenities")),
        is_featured=_flag(raw, "isFeatured"),
        is_verified=_flag(raw, "isVerified"),
        sort_by=_enum(raw, "sortBy", SortOption),
        page=_positive_or(_int(raw, "page"), Settings.DEFAULT_PAGE),
        limit=_positive_or(_int(raw, "limit"), Settings.DEFAULT_PAGE_SIZE),
    )
