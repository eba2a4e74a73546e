"""Listing search endpoint for Vercel."""

from http.server import BaseHTTPRequestHandler

from marketplace.services.listing_search import search_listings
from marketplace.utils.http import query_params, request_correlation_id, run_async, send_json
from marketplace.utils.logging import correlation_context, get_structured_logger, setup_logging

setup_logging()
logger = get_structured_logger(__name__)


class handler(BaseHTTPRequestHandler):
    """GET /api/listings/search - paginated search over published listings."""

    def do_GET(self):
        """Handle GET request."""
        with correlation_context(request_correlation_id(self)) as correlation_id:
            try:
                params = query_params(self.path)
                result = run_async(search_listings(params))
                send_json(
                    self,
                    200,
                    result.model_dump(mode="json", by_alias=True),
                    correlation_id,
                )
            except Exception as e:
                logger.error(f"Error fetching listings: {e}", exc_info=True)
                send_json(self, 500, {"error": "Failed to fetch listings"}, correlation_id)
