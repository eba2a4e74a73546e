"""Tests for the listing search service."""

import pytest
from unittest.mock import AsyncMock
from marketplace.models.category import ListingCategory
from marketplace.models.search import SearchFilters
from marketplace.services.listing_search import (
    execute_search,
    get_listing_by_slug,
    search_listings,
    with_category,
)
from marketplace.services.listing_store import InMemoryListingStore
from marketplace.utils.errors import ListingNotFoundError, ListingStoreError
from tests.utils.assertions import assert_all_published, assert_valid_page
from tests.utils.factories import create_listing_row


def _ids(response):
    return [listing.id for listing in response.data]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_default_search_returns_published_page(memory_store):
    response = await search_listings({}, store=memory_store)

    assert_valid_page(response, limit=12)
    assert_all_published(response)
    assert response.total == 5
    assert response.page == 1
    assert response.total_pages == 1
    assert _ids(response) == ["L5", "L4", "L3", "L2", "L1"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_search_attaches_derived_category(memory_store):
    response = await search_listings({}, store=memory_store)
    categories = {listing.id: listing.category for listing in response.data}

    assert categories == {
        "L1": ListingCategory.APARTMENTS_FOR_SALE,
        "L2": ListingCategory.HOUSES_FOR_SALE,
        "L3": ListingCategory.ROOM_RENTALS,
        "L4": ListingCategory.COMMERCIAL_PROPERTY_RENTALS,
        "L5": ListingCategory.LAND_FOR_SALE,
    }


@pytest.mark.unit
@pytest.mark.asyncio
async def test_min_price_excludes_free_text_price(memory_store):
    """'Contact for Price' compares as 0 and fails a positive minimum."""
    response = await search_listings({"minPrice": "100000"}, store=memory_store)

    assert _ids(response) == ["L1"]
    assert response.total == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_malformed_min_price_searches_unfiltered(memory_store):
    response = await search_listings({"minPrice": "abc"}, store=memory_store)
    assert response.total == 5


@pytest.mark.unit
@pytest.mark.asyncio
async def test_huge_bedroom_count_matches_nothing(memory_store):
    response = await search_listings({"bedrooms": "9" * 400}, store=memory_store)

    assert response.total == 0
    assert response.data == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_huge_price_bounds_filter_numerically(memory_store):
    response = await search_listings(
        {"minPrice": "1", "maxPrice": "9" * 400},
        store=memory_store,
    )

    assert _ids(response) == ["L5", "L4", "L3", "L1"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_amenities_match_all_not_any(memory_store):
    response = await search_listings({"amenities": "Parking,Gym"}, store=memory_store)
    assert sorted(_ids(response)) == ["L1", "L4"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_price_desc_is_numeric_and_keeps_text_prices(memory_store):
    response = await search_listings({"sortBy": "price_desc"}, store=memory_store)

    # 2000 sorts above 300; the free-text price is still returned
    assert _ids(response) == ["L1", "L3", "L4", "L5", "L2"]


@pytest.mark.unit
@pytest.mark.asyncio
@pytest.mark.parametrize("sort_by,expected", [
    ("price_asc", ["L2", "L5", "L4", "L3", "L1"]),
    ("oldest", ["L1", "L2", "L3", "L4", "L5"]),
    ("popular", ["L3", "L1", "L4", "L2", "L5"]),
    ("newest", ["L5", "L4", "L3", "L2", "L1"]),
    ("bogus", ["L5", "L4", "L3", "L2", "L1"]),
])
async def test_sort_options(memory_store, sort_by, expected):
    response = await search_listings({"sortBy": sort_by}, store=memory_store)
    assert _ids(response) == expected


@pytest.mark.unit
@pytest.mark.asyncio
async def test_free_text_search(memory_store):
    response = await search_listings({"q": "ROAD"}, store=memory_store)
    assert _ids(response) == ["L2", "L1"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_category_wins_over_property_type(memory_store):
    response = await search_listings(
        {"category": "Commercial Property Rentals", "propertyType": "house"},
        store=memory_store,
    )
    # Commercial rentals expand to listingType=rent only; propertyType=house is dropped
    assert _ids(response) == ["L4", "L3"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_room_rentals_category_over_matches_apartment_rentals():
    store = InMemoryListingStore([
        create_listing_row("rent", "apartment", id="R1", propertySubType="Single room",
                           created_at="2024-01-02T00:00:00+00:00"),
        create_listing_row("rent", "apartment", id="R2", propertySubType="Studio",
                           created_at="2024-01-01T00:00:00+00:00"),
    ])

    response = await search_listings({"category": "Room Rentals"}, store=store)

    assert _ids(response) == ["R1", "R2"]
    assert [listing.category for listing in response.data] == [
        ListingCategory.ROOM_RENTALS,
        ListingCategory.APARTMENT_RENTALS,
    ]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_combined_filters(memory_store):
    response = await search_listings({
        "city": "Dhaka",
        "area": "gul",
        "bedrooms": "2",
        "isFeatured": "true",
        "completionStatus": "ready",
    }, store=memory_store)

    assert _ids(response) == ["L1"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_pagination_window(memory_store):
    response = await search_listings({"page": "3", "limit": "2"}, store=memory_store)

    assert_valid_page(response, limit=2)
    assert response.page == 3
    assert response.total == 5
    assert response.total_pages == 3
    assert _ids(response) == ["L1"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_page_past_end_is_empty(memory_store):
    response = await search_listings({"page": "9"}, store=memory_store)
    assert response.data == []
    assert response.total == 5


@pytest.mark.unit
@pytest.mark.asyncio
async def test_total_comes_from_separate_count(catalog_rows):
    """count and find are independent reads; total is not len(data)."""
    store = AsyncMock()
    store.count.return_value = 99
    store.find.return_value = catalog_rows[:2]

    response = await execute_search(SearchFilters(limit=2), store)

    assert response.total == 99
    assert response.total_pages == 50
    assert len(response.data) == 2
    store.count.assert_awaited_once()
    store.find.assert_awaited_once()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_store_errors_propagate():
    store = AsyncMock()
    store.count.side_effect = ListingStoreError("Failed to count listings: timeout")
    store.find.return_value = []

    with pytest.raises(ListingStoreError):
        await execute_search(SearchFilters(), store)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_search_uses_installed_store(installed_store):
    response = await search_listings({"listingType": "rent"})
    assert sorted(_ids(response)) == ["L3", "L4"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_get_listing_by_slug_counts_view(memory_store):
    slug = memory_store.rows[2]["slug"]

    listing = await get_listing_by_slug(slug, store=memory_store)

    assert listing.id == "L3"
    assert listing.category == ListingCategory.ROOM_RENTALS
    assert listing.views == 90
    assert memory_store.rows[2]["views"] == 91


@pytest.mark.unit
@pytest.mark.asyncio
async def test_get_listing_by_slug_skips_view_count_for_unpublished(memory_store):
    pending = memory_store.rows[5]

    listing = await get_listing_by_slug(pending["slug"], store=memory_store)

    assert listing.id == "L6"
    assert listing.status == "pending"
    assert memory_store.rows[5]["views"] == 300


@pytest.mark.unit
@pytest.mark.asyncio
async def test_get_listing_by_slug_missing(memory_store):
    with pytest.raises(ListingNotFoundError):
        await get_listing_by_slug("no-such-listing", store=memory_store)


@pytest.mark.unit
def test_with_category_overrides_stored_category(catalog_rows):
    row = {**catalog_rows[4], "category": "Houses For Sale"}
    assert with_category(row).category == ListingCategory.LAND_FOR_SALE
