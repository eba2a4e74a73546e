"""Listing detail endpoint for Vercel."""

from http.server import BaseHTTPRequestHandler

from marketplace.services.listing_search import get_listing_by_slug
from marketplace.utils.errors import ListingNotFoundError
from marketplace.utils.http import query_params, request_correlation_id, run_async, send_json
from marketplace.utils.logging import correlation_context, get_structured_logger, setup_logging

setup_logging()
logger = get_structured_logger(__name__)


class handler(BaseHTTPRequestHandler):
    """GET /api/listings/detail?slug=... - one listing; counts a view."""

    def do_GET(self):
        """Handle GET request."""
        with correlation_context(request_correlation_id(self)) as correlation_id:
            slug = (query_params(self.path).get("slug") or [""])[0]
            if not slug:
                send_json(self, 400, {"error": "slug is required"}, correlation_id)
                return

            try:
                listing = run_async(get_listing_by_slug(slug))
                send_json(
                    self,
                    200,
                    listing.model_dump(mode="json", by_alias=True),
                    correlation_id,
                )
            except ListingNotFoundError:
                send_json(self, 404, {"error": "Listing not found"}, correlation_id)
            except Exception as e:
                logger.error(f"Error fetching listing: {e}", exc_info=True, slug=slug)
                send_json(self, 500, {"error": "Failed to fetch listing"}, correlation_id)
