"""Listing row preparation - derived columns written alongside a new listing."""

import math
import re
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from ulid import ULID

from marketplace.models.listing import ListingStatus, NumericPrice, parse_price


def generate_listing_id() -> str:
    """Generate a text-based listing ID (ULID format)."""
    return str(ULID())


def generate_slug(title: str) -> str:
    """Lower-case, dash-joined title with a random 8-character suffix."""
    base = title.lower()
    base = re.sub(r"[^\w\s-]", "", base, flags=re.ASCII)
    base = re.sub(r"\s+", "-", base)
    base = re.sub(r"-+", "-", base)
    return f"{base.strip()}-{uuid.uuid4().hex[:8]}"


def compute_price_per_sqft(price: Any, area_sq_ft: Optional[int]) -> Optional[int]:
    """Rounded price per square foot; None for free-text prices or missing area."""
    if not area_sq_ft or area_sq_ft <= 0:
        return None
    tagged = parse_price(price)
    if not isinstance(tagged, NumericPrice):
        return None
    return math.floor(tagged.amount / area_sq_ft + 0.5)


def prepare_listing_row(data: dict, status: str = ListingStatus.PENDING.value) -> dict:
    """
    Build the stored row for a new listing.

    Adds the id, slug, numeric priceValue column, pricePerSqft (unless given),
    zeroed counters and timestamps. Keys follow the stored camelCase names.
    """
    row = dict(data)
    now = datetime.now(timezone.utc).isoformat()

    row.setdefault("id", generate_listing_id())
    row["slug"] = generate_slug(row["title"])
    row["priceValue"] = parse_price(row.get("price")).comparable_amount()
    if not row.get("pricePerSqft"):
        row["pricePerSqft"] = compute_price_per_sqft(row.get("price"), row.get("areaSqFt"))
    row.setdefault("status", status)
    row.setdefault("amenities", [])
    row.setdefault("isFeatured", False)
    row.setdefault("isVerified", False)
    row["views"] = 0
    row["favorites"] = 0
    row["reportCount"] = 0
    row.setdefault("createdAt", now)
    row["updatedAt"] = now
    return row
