"""
Category mapping - derive display categories from listing type fields.

Categories are computed on every read and never stored, so changing these
rules reclassifies every listing without a migration.
"""

from types import MappingProxyType
from typing import Mapping, Optional, TypedDict

from marketplace.models.category import ListingCategory
from marketplace.models.listing import ListingType, PropertyType


class CategoryFilters(TypedDict, total=False):
    """Partial filter a category expands to."""
    listing_type: ListingType
    property_type: PropertyType


COMMERCIAL_PROPERTY_TYPES = frozenset({"commercial", "office", "shop"})


def derive_category(
    listing_type: Optional[str],
    property_type: Optional[str],
    property_sub_type: Optional[str] = None,
) -> ListingCategory:
    """
    Map (listing_type, property_type, property_sub_type) to a category.

    First match wins; anything unmatched, including unknown type values,
    falls through to Other Properties.
    """
    listing_type = _plain(listing_type)
    property_type = _plain(property_type)

    if listing_type == "sale":
        if property_type == "land":
            return ListingCategory.LAND_FOR_SALE
        if property_type == "apartment":
            return ListingCategory.APARTMENTS_FOR_SALE
        if property_type == "house":
            return ListingCategory.HOUSES_FOR_SALE
        if property_type in COMMERCIAL_PROPERTY_TYPES:
            return ListingCategory.COMMERCIAL_PROPERTIES_FOR_SALE

    if listing_type == "rent":
        if property_type == "land":
            return ListingCategory.LAND_RENTALS
        if property_type == "house":
            return ListingCategory.HOUSE_RENTALS
        if property_type == "apartment":
            if property_sub_type and "room" in property_sub_type.lower():
                return ListingCategory.ROOM_RENTALS
            return ListingCategory.APARTMENT_RENTALS
        if property_type == "flat":
            return ListingCategory.PROPERTY_RENTALS
        if property_type in COMMERCIAL_PROPERTY_TYPES:
            return ListingCategory.COMMERCIAL_PROPERTY_RENTALS

    return ListingCategory.OTHER_PROPERTIES


def _plain(value) -> Optional[str]:
    """Accept enum members or raw strings."""
    if value is None:
        return None
    return value.value if hasattr(value, "value") else value


def _filters(
    listing_type: Optional[ListingType] = None,
    property_type: Optional[PropertyType] = None,
) -> Mapping:
    entry: CategoryFilters = {}
    if listing_type is not None:
        entry["listing_type"] = listing_type
    if property_type is not None:
        entry["property_type"] = property_type
    return MappingProxyType(entry)


# Commercial categories span three property types, so they carry listing_type only.
# Room Rentals cannot express the property_sub_type condition and over-matches
# plain apartment rentals.
_CATEGORY_FILTERS: Mapping[ListingCategory, Mapping] = MappingProxyType({
    ListingCategory.LAND_FOR_SALE: _filters(ListingType.SALE, PropertyType.LAND),
    ListingCategory.APARTMENTS_FOR_SALE: _filters(ListingType.SALE, PropertyType.APARTMENT),
    ListingCategory.APARTMENT_RENTALS: _filters(ListingType.RENT, PropertyType.APARTMENT),
    ListingCategory.COMMERCIAL_PROPERTY_RENTALS: _filters(ListingType.RENT),
    ListingCategory.PROPERTY_RENTALS: _filters(ListingType.RENT, PropertyType.FLAT),
    ListingCategory.HOUSES_FOR_SALE: _filters(ListingType.SALE, PropertyType.HOUSE),
    ListingCategory.COMMERCIAL_PROPERTIES_FOR_SALE: _filters(ListingType.SALE),
    ListingCategory.ROOM_RENTALS: _filters(ListingType.RENT, PropertyType.APARTMENT),
    ListingCategory.HOUSE_RENTALS: _filters(ListingType.RENT, PropertyType.HOUSE),
    ListingCategory.LAND_RENTALS: _filters(ListingType.RENT, PropertyType.LAND),
    ListingCategory.OTHER_PROPERTIES: _filters(),
})

_EMPTY_FILTERS: Mapping = _filters()


def get_category_filters(category) -> Mapping:
    """Return the listing_type/property_type constraints a category expands to."""
    try:
        category = ListingCategory(category)
    except ValueError:
        return _EMPTY_FILTERS
    return _CATEGORY_FILTERS[category]


def get_all_categories() -> list[ListingCategory]:
    """All selectable categories, catch-all excluded."""
    return [
        ListingCategory.LAND_FOR_SALE,
        ListingCategory.APARTMENTS_FOR_SALE,
        ListingCategory.APARTMENT_RENTALS,
        ListingCategory.COMMERCIAL_PROPERTY_RENTALS,
        ListingCategory.PROPERTY_RENTALS,
        ListingCategory.HOUSES_FOR_SALE,
        ListingCategory.COMMERCIAL_PROPERTIES_FOR_SALE,
        ListingCategory.ROOM_RENTALS,
        ListingCategory.HOUSE_RENTALS,
        ListingCategory.LAND_RENTALS,
    ]


def is_commercial_category(category) -> bool:
    return category in (
        ListingCategory.COMMERCIAL_PROPERTIES_FOR_SALE,
        ListingCategory.COMMERCIAL_PROPERTY_RENTALS,
    )
