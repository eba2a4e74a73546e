"""Test data factories using Faker."""

from faker import Faker
from typing import Optional

from marketplace.services.listing_rows import prepare_listing_row

fake = Faker()


def create_listing_data(
    listing_type: str = "sale",
    property_type: str = "apartment",
    **overrides
) -> dict:
    """Create raw listing input (before derived columns)."""
    data = {
        "title": fake.sentence(nb_words=4).rstrip("."),
        "price": fake.random_int(min=100000, max=2000000),
        "listingType": listing_type,
        "propertyType": property_type,
        "address": fake.street_address(),
        "city": fake.city(),
        "area": fake.city_suffix(),
        "bedrooms": fake.random_int(min=1, max=5),
        "bathrooms": fake.random_int(min=1, max=3),
        "areaSqFt": fake.random_int(min=400, max=4000),
        "amenities": [],
    }
    data.update(overrides)
    return data


def create_listing_row(
    listing_type: str = "sale",
    property_type: str = "apartment",
    status: str = "published",
    created_at: Optional[str] = None,
    **overrides
) -> dict:
    """Create a stored listing row, published by default."""
    data = create_listing_data(listing_type, property_type, **overrides)
    data["status"] = status
    if created_at:
        data["createdAt"] = created_at
    return prepare_listing_row(data)
