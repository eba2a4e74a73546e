"""Listing categories endpoint for Vercel."""

from http.server import BaseHTTPRequestHandler

from marketplace.services.category_mapping import (
    get_all_categories,
    get_category_filters,
    is_commercial_category,
)
from marketplace.utils.http import send_json


def category_payload() -> list[dict]:
    """Selectable categories with the filters each one expands to."""
    payload = []
    for category in get_all_categories():
        filters = get_category_filters(category)
        payload.append({
            "name": category.value,
            "commercial": is_commercial_category(category),
            "listingType": filters["listing_type"].value if "listing_type" in filters else None,
            "propertyType": filters["property_type"].value if "property_type" in filters else None,
        })
    return payload


class handler(BaseHTTPRequestHandler):
    """GET /api/listings/categories."""

    def do_GET(self):
        """Handle GET request."""
        send_json(self, 200, {"categories": category_payload()})
