"""Error handling utilities."""


class MarketplaceError(Exception):
    """Base exception for the marketplace backend."""
    pass


class ConfigurationError(MarketplaceError):
    """Required configuration is missing or invalid."""
    pass


class ListingStoreError(MarketplaceError):
    """Listing store operation error."""
    pass


class ListingNotFoundError(MarketplaceError):
    """No listing matches the requested key."""

    def __init__(self, key: str):
        super().__init__(f"Listing not found: {key}")
        self.key = key
