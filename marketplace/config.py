"""Runtime configuration read from environment variables."""

import os


class Settings:
    """Service settings."""

    LISTINGS_TABLE = os.environ.get("LISTINGS_TABLE", "listings")
    # "supabase" or "memory"
    LISTING_STORE_BACKEND = os.environ.get("LISTING_STORE_BACKEND", "supabase").lower()
    DEFAULT_PAGE = 1
    DEFAULT_PAGE_SIZE = 12
