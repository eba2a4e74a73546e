"""Listing search service - run a search and assemble the paginated envelope."""

import asyncio
from typing import Optional

from marketplace.models.listing import ListingStatus, ListingWithCategory
from marketplace.models.search import PaginatedResponse, SearchFilters
from marketplace.services.category_mapping import derive_category
from marketplace.services.filter_normalizer import RawParams, normalize_filters
from marketplace.services.listing_store import ListingStore, get_listing_store
from marketplace.services.query_builder import build_listing_query
from marketplace.utils.errors import ListingNotFoundError
from marketplace.utils.logging import (
    get_structured_logger,
    log_timing,
    sanitize_query_text,
)

logger = get_structured_logger(__name__)


def with_category(row: dict) -> ListingWithCategory:
    """Validate a stored row and attach its derived category."""
    category = derive_category(
        row.get("listingType"),
        row.get("propertyType"),
        row.get("propertySubType"),
    )
    return ListingWithCategory.model_validate({**row, "category": category})


async def execute_search(
    filters: SearchFilters,
    store: ListingStore,
) -> PaginatedResponse[ListingWithCategory]:
    """
    Run count and fetch for the filters and build the response envelope.

    The two reads share no snapshot: under concurrent writes ``total`` can
    disagree with ``data``. Store errors propagate; nothing is retried.
    """
    query = build_listing_query(filters)

    logger.debug(
        "Listing query built",
        predicate_count=len(query.predicates),
        sort_field=query.sort.field,
        sort_descending=query.sort.descending,
        skip=query.skip,
        limit=query.limit,
    )

    total, rows = await asyncio.gather(
        store.count(query.predicates),
        store.find(query.predicates, query.sort, query.skip, query.limit),
    )

    return PaginatedResponse[ListingWithCategory].build(
        data=[with_category(row) for row in rows],
        total=total,
        page=filters.page,
        limit=filters.limit,
    )


async def search_listings(
    raw_params: RawParams,
    store: Optional[ListingStore] = None,
) -> PaginatedResponse[ListingWithCategory]:
    """Search published listings from raw query parameters."""
    filters = normalize_filters(raw_params)
    store = store or get_listing_store()

    with log_timing(
        "listing_search",
        logger=logger,
        query_text=sanitize_query_text(filters.q),
        category=filters.category.value if filters.category else None,
        page=filters.page,
        limit=filters.limit,
    ):
        result = await execute_search(filters, store)

    logger.info(
        "Listing search completed",
        total=result.total,
        returned=len(result.data),
        total_pages=result.total_pages,
    )
    return result


async def get_listing_by_slug(
    slug: str,
    store: Optional[ListingStore] = None,
) -> ListingWithCategory:
    """
    Fetch a listing for its detail page and count the view.

    Only published listings count views. The returned listing reflects the
    row as read, before the increment.
    """
    store = store or get_listing_store()

    row = await store.get_by_slug(slug)
    if row is None:
        logger.info("Listing not found", slug=slug)
        raise ListingNotFoundError(slug)

    if row.get("status") == ListingStatus.PUBLISHED.value:
        await store.increment_views(row["id"])
    return with_category(row)
