"""
Listing store backends.

Both backends expose the same capability: find(predicates, sort, skip, limit)
and count(predicates) as independent reads, plus the slug lookup and view
counter used by the detail page.
"""

import copy
from typing import Any, Iterable, Optional, Protocol, Sequence

from marketplace.config import Settings
from marketplace.models.listing import parse_price
from marketplace.services.query_builder import (
    PRICE_VALUE_FIELD,
    AnyOf,
    AtLeast,
    AtMost,
    Contains,
    ContainsAll,
    Equals,
    Predicate,
    PriceRange,
    SortSpec,
)
from marketplace.services.supabase_client import SupabaseClient
from marketplace.utils.errors import ConfigurationError, ListingStoreError
from marketplace.utils.logging import get_structured_logger, timed

logger = get_structured_logger(__name__)


class ListingStore(Protocol):
    """Read capability the search executor depends on."""

    async def find(
        self,
        predicates: Sequence[Predicate],
        sort: SortSpec,
        skip: int,
        limit: int,
    ) -> list[dict]:
        ...

    async def count(self, predicates: Sequence[Predicate]) -> int:
        ...

    async def get_by_slug(self, slug: str) -> Optional[dict]:
        ...

    async def increment_views(self, listing_id: str) -> None:
        ...


# ==================== IN-MEMORY ====================

def comparable_price(row: dict) -> float:
    """Numeric comparable price for a row; free-text prices are 0."""
    return parse_price(row.get("price")).comparable_amount()


def _field_value(row: dict, field: str) -> Any:
    if field == PRICE_VALUE_FIELD:
        return comparable_price(row)
    return row.get(field)


def _matches(row: dict, predicate: Predicate) -> bool:
    if isinstance(predicate, Equals):
        return row.get(predicate.field) == predicate.value
    if isinstance(predicate, Contains):
        value = row.get(predicate.field)
        return isinstance(value, str) and predicate.text.lower() in value.lower()
    if isinstance(predicate, AnyOf):
        return any(_matches(row, option) for option in predicate.options)
    if isinstance(predicate, AtLeast):
        value = row.get(predicate.field)
        return value is not None and value >= predicate.value
    if isinstance(predicate, AtMost):
        value = row.get(predicate.field)
        return value is not None and value <= predicate.value
    if isinstance(predicate, PriceRange):
        amount = comparable_price(row)
        if predicate.minimum is not None and amount < predicate.minimum:
            return False
        if predicate.maximum is not None and amount > predicate.maximum:
            return False
        return True
    if isinstance(predicate, ContainsAll):
        present = set(row.get(predicate.field) or [])
        return all(value in present for value in predicate.values)
    raise TypeError(f"Unsupported predicate: {type(predicate).__name__}")


def _sorted(rows: list[dict], sort: SortSpec) -> list[dict]:
    """Stable sort on one field; rows missing the field go last."""
    present = [row for row in rows if _field_value(row, sort.field) is not None]
    missing = [row for row in rows if _field_value(row, sort.field) is None]
    present.sort(key=lambda row: _field_value(row, sort.field), reverse=sort.descending)
    return present + missing


class InMemoryListingStore:
    """Listing store over a list of row dicts, for tests and local runs."""

    def __init__(self, rows: Optional[Iterable[dict]] = None):
        self.rows: list[dict] = [dict(row) for row in rows or []]

    def insert(self, row: dict) -> dict:
        self.rows.append(dict(row))
        return copy.deepcopy(row)

    def _select(self, predicates: Sequence[Predicate]) -> list[dict]:
        return [row for row in self.rows if all(_matches(row, p) for p in predicates)]

    async def find(
        self,
        predicates: Sequence[Predicate],
        sort: SortSpec,
        skip: int,
        limit: int,
    ) -> list[dict]:
        ordered = _sorted(self._select(predicates), sort)
        return [copy.deepcopy(row) for row in ordered[skip:skip + limit]]

    async def count(self, predicates: Sequence[Predicate]) -> int:
        return len(self._select(predicates))

    async def get_by_slug(self, slug: str) -> Optional[dict]:
        for row in self.rows:
            if row.get("slug") == slug:
                return copy.deepcopy(row)
        return None

    async def increment_views(self, listing_id: str) -> None:
        for row in self.rows:
            if row.get("id") == listing_id:
                row["views"] = (row.get("views") or 0) + 1
                return


# ==================== SUPABASE ====================

def _like_pattern(text: str) -> str:
    """
    Wrap text for an ILIKE substring match.

    PostgREST rewrites every `*` to `%` with no escape, so `*` is sent as the
    single-character wildcard `_`. That still matches a literal `*` but also
    any other single character in that position.
    """
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    escaped = escaped.replace("*", "_")
    return f"%{escaped}%"


def _quote(value: str) -> str:
    """Quote a value inside a PostgREST or=() group."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _filter_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def _or_clause(option: Predicate) -> str:
    if isinstance(option, Contains):
        return f"{option.field}.ilike.{_quote(_like_pattern(option.text))}"
    if isinstance(option, Equals):
        return f"{option.field}.eq.{_quote(str(_filter_value(option.value)))}"
    raise TypeError(f"Unsupported predicate in OR group: {type(option).__name__}")


def apply_predicates(query, predicates: Sequence[Predicate]):
    """Apply predicates to a PostgREST request builder."""
    for predicate in predicates:
        if isinstance(predicate, Equals):
            query = query.eq(predicate.field, _filter_value(predicate.value))
        elif isinstance(predicate, Contains):
            query = query.ilike(predicate.field, _like_pattern(predicate.text))
        elif isinstance(predicate, AnyOf):
            query = query.or_(",".join(_or_clause(option) for option in predicate.options))
        elif isinstance(predicate, AtLeast):
            query = query.gte(predicate.field, predicate.value)
        elif isinstance(predicate, AtMost):
            query = query.lte(predicate.field, predicate.value)
        elif isinstance(predicate, PriceRange):
            if predicate.minimum is not None:
                query = query.gte(PRICE_VALUE_FIELD, predicate.minimum)
            if predicate.maximum is not None:
                query = query.lte(PRICE_VALUE_FIELD, predicate.maximum)
        elif isinstance(predicate, ContainsAll):
            query = query.contains(predicate.field, list(predicate.values))
        else:
            raise TypeError(f"Unsupported predicate: {type(predicate).__name__}")
    return query


class SupabaseListingStore:
    """Listing store backed by a Supabase (PostgREST) table."""

    def __init__(self, table: str = Settings.LISTINGS_TABLE):
        self.table = table

    @timed("supabase.find_listings")
    async def find(
        self,
        predicates: Sequence[Predicate],
        sort: SortSpec,
        skip: int,
        limit: int,
    ) -> list[dict]:
        async with SupabaseClient() as client:
            try:
                query = apply_predicates(client.table(self.table).select("*"), predicates)
                result = (
                    query.order(sort.field, desc=sort.descending)
                    .range(skip, skip + limit - 1)
                    .execute()
                )
                return result.data if result.data else []
            except Exception as e:
                raise ListingStoreError(f"Failed to fetch listings: {e}") from e

    @timed("supabase.count_listings")
    async def count(self, predicates: Sequence[Predicate]) -> int:
        async with SupabaseClient() as client:
            try:
                query = client.table(self.table).select("id", count="exact")
                result = apply_predicates(query, predicates).limit(1).execute()
                return result.count or 0
            except Exception as e:
                raise ListingStoreError(f"Failed to count listings: {e}") from e

    async def get_by_slug(self, slug: str) -> Optional[dict]:
        async with SupabaseClient() as client:
            try:
                result = client.table(self.table).select("*").eq("slug", slug).limit(1).execute()
                return result.data[0] if result.data else None
            except Exception as e:
                raise ListingStoreError(f"Failed to get listing by slug: {e}") from e

    async def increment_views(self, listing_id: str) -> None:
        async with SupabaseClient() as client:
            try:
                # Atomic increment in the database
                try:
                    client.rpc("increment_listing_views", {"listing_id": listing_id}).execute()
                except Exception as rpc_error:
                    logger.warning(
                        "increment_listing_views RPC failed, falling back to update",
                        listing_id=listing_id,
                        error=str(rpc_error),
                    )
                    current = client.table(self.table).select("views").eq("id", listing_id).execute()
                    views = (current.data[0].get("views") or 0) if current.data else 0
                    client.table(self.table).update({"views": views + 1}).eq("id", listing_id).execute()
            except Exception as e:
                raise ListingStoreError(f"Failed to increment listing views: {e}") from e


_store: Optional[ListingStore] = None


def get_listing_store(backend: Optional[str] = None) -> ListingStore:
    """Get or create the configured listing store."""
    global _store

    if backend is None and _store is not None:
        return _store

    backend = (backend or Settings.LISTING_STORE_BACKEND).lower()
    if backend == "supabase":
        store: ListingStore = SupabaseListingStore()
    elif backend == "memory":
        store = InMemoryListingStore()
    else:
        raise ConfigurationError(f"Unknown LISTING_STORE_BACKEND: {backend}")

    _store = store
    logger.info("Listing store initialized", backend=backend)
    return store


def set_listing_store(store: Optional[ListingStore]) -> None:
    """Replace the process-wide store (None resets to configuration)."""
    global _store
    _store = store
