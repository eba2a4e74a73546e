"""Derived listing categories."""

from enum import Enum


class ListingCategory(str, Enum):
    """Display categories derived from listing type fields (never stored)."""
    # Sale
    LAND_FOR_SALE = "Land For Sale"
    APARTMENTS_FOR_SALE = "Apartments For Sale"
    HOUSES_FOR_SALE = "Houses For Sale"
    COMMERCIAL_PROPERTIES_FOR_SALE = "Commercial Properties For Sale"
    # Rent
    APARTMENT_RENTALS = "Apartment Rentals"
    COMMERCIAL_PROPERTY_RENTALS = "Commercial Property Rentals"
    PROPERTY_RENTALS = "Property Rentals"
    ROOM_RENTALS = "Room Rentals"
    HOUSE_RENTALS = "House Rentals"
    LAND_RENTALS = "Land Rentals"
    # Catch-all
    OTHER_PROPERTIES = "Other Properties"
