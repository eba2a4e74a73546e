"""Query builder - translate SearchFilters into a store-neutral listing query."""

from typing import Any, Optional, Union
from pydantic import BaseModel, ConfigDict

from marketplace.models.listing import ListingStatus
from marketplace.models.search import SearchFilters, SortOption
from marketplace.services.category_mapping import get_category_filters

# Store column holding the numeric comparable price (free-text prices store 0).
PRICE_VALUE_FIELD = "priceValue"
CREATED_AT_FIELD = "createdAt"
VIEWS_FIELD = "views"

SEARCHABLE_TEXT_FIELDS = ("title", "address", "city")


class _Predicate(BaseModel):
    model_config = ConfigDict(frozen=True)


class Equals(_Predicate):
    field: str
    value: Any


class Contains(_Predicate):
    """Case-insensitive literal substring match."""
    field: str
    text: str


class AnyOf(_Predicate):
    """OR group."""
    options: tuple[Union[Equals, Contains], ...]


class AtLeast(_Predicate):
    field: str
    value: int


class AtMost(_Predicate):
    field: str
    value: int


class PriceRange(_Predicate):
    """Inclusive bounds on the comparable price; free-text prices compare as 0."""
    minimum: Optional[int] = None
    maximum: Optional[int] = None


class ContainsAll(_Predicate):
    """Array field must hold every listed value."""
    field: str
    values: tuple[str, ...]


Predicate = Union[Equals, Contains, AnyOf, AtLeast, AtMost, PriceRange, ContainsAll]


class SortSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: str
    descending: bool = False


class ListingQuery(BaseModel):
    """Predicates (ANDed), sort and page window for one search."""
    model_config = ConfigDict(frozen=True)

    predicates: tuple[Predicate, ...]
    sort: SortSpec
    skip: int
    limit: int


DEFAULT_SORT = SortSpec(field=CREATED_AT_FIELD, descending=True)

_SORTS = {
    SortOption.PRICE_ASC: SortSpec(field=PRICE_VALUE_FIELD, descending=False),
    SortOption.PRICE_DESC: SortSpec(field=PRICE_VALUE_FIELD, descending=True),
    SortOption.OLDEST: SortSpec(field=CREATED_AT_FIELD, descending=False),
    SortOption.POPULAR: SortSpec(field=VIEWS_FIELD, descending=True),
}


def select_sort(sort_by: Optional[SortOption]) -> SortSpec:
    """Unmatched options, newest included, sort newest first."""
    return _SORTS.get(sort_by, DEFAULT_SORT)


def build_predicates(filters: SearchFilters) -> tuple[Predicate, ...]:
    """
    Build the ANDed predicate list for a search.

    Numeric filters of 0 are treated as not supplied.
    """
    predicates: list[Predicate] = [Equals(field="status", value=ListingStatus.PUBLISHED.value)]

    if filters.q:
        predicates.append(AnyOf(options=tuple(
            Contains(field=field, text=filters.q) for field in SEARCHABLE_TEXT_FIELDS
        )))

    # Category takes priority over the individual type filters
    if filters.category:
        expanded = get_category_filters(filters.category)
        if expanded.get("listing_type"):
            predicates.append(Equals(field="listingType", value=expanded["listing_type"].value))
        if expanded.get("property_type"):
            predicates.append(Equals(field="propertyType", value=expanded["property_type"].value))
    else:
        if filters.listing_type:
            predicates.append(Equals(field="listingType", value=filters.listing_type.value))
        if filters.property_type:
            predicates.append(Equals(field="propertyType", value=filters.property_type.value))

    if filters.city:
        predicates.append(Equals(field="city", value=filters.city))
    if filters.area:
        predicates.append(Contains(field="area", text=filters.area))

    if filters.completion_status:
        predicates.append(Equals(field="completionStatus", value=filters.completion_status.value))
    if filters.furnishing_status:
        predicates.append(Equals(field="furnishingStatus", value=filters.furnishing_status.value))

    if filters.min_price or filters.max_price:
        predicates.append(PriceRange(
            minimum=filters.min_price or None,
            maximum=filters.max_price or None,
        ))

    if filters.bedrooms:
        predicates.append(AtLeast(field="bedrooms", value=filters.bedrooms))
    if filters.bathrooms:
        predicates.append(AtLeast(field="bathrooms", value=filters.bathrooms))

    if filters.min_area:
        predicates.append(AtLeast(field="areaSqFt", value=filters.min_area))
    if filters.max_area:
        predicates.append(AtMost(field="areaSqFt", value=filters.max_area))

    if filters.amenities:
        predicates.append(ContainsAll(field="amenities", values=tuple(filters.amenities)))

    if filters.is_featured:
        predicates.append(Equals(field="isFeatured", value=True))
    if filters.is_verified:
        predicates.append(Equals(field="isVerified", value=True))

    return tuple(predicates)


def build_listing_query(filters: SearchFilters) -> ListingQuery:
    """Translate typed filters into predicates, sort and page window."""
    return ListingQuery(
        predicates=build_predicates(filters),
        sort=select_sort(filters.sort_by),
        skip=(filters.page - 1) * filters.limit,
        limit=filters.limit,
    )
