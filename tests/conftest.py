"""Shared pytest fixtures and configuration."""

import os
import pytest
from unittest.mock import MagicMock
from freezegun import freeze_time

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-key")
os.environ.setdefault("LISTING_STORE_BACKEND", "memory")
os.environ.setdefault("LOG_FORMAT", "text")

from marketplace.services.listing_store import InMemoryListingStore, set_listing_store
from tests.fixtures.listings import listing_catalog


@pytest.fixture
def catalog_rows():
    """Deterministic listing rows (five published, one pending)."""
    return listing_catalog()


@pytest.fixture
def memory_store(catalog_rows):
    """In-memory listing store seeded with the catalog."""
    return InMemoryListingStore(catalog_rows)


@pytest.fixture
def installed_store(memory_store):
    """Install the seeded store as the process-wide listing store."""
    set_listing_store(memory_store)
    yield memory_store
    set_listing_store(None)


@pytest.fixture
def mock_supabase_client():
    """Mock Supabase client for testing."""
    client = MagicMock()
    client.table = MagicMock(return_value=MagicMock())
    return client


@pytest.fixture
def freeze_time_fixture():
    """Fixture for freezing time in tests."""
    with freeze_time("2024-12-09 12:00:00") as frozen_time:
        yield frozen_time
