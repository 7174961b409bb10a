"""
Pytest configuration and fixtures.

Environment variables are loaded here, before test collection.
"""

import pytest
from dotenv import load_dotenv

from config.settings import get_settings
from tools.base import InMemoryInvoiceStore, set_default_store

load_dotenv()


@pytest.fixture
def store() -> InMemoryInvoiceStore:
    """Create a fresh store for each test."""
    return InMemoryInvoiceStore()


@pytest.fixture(autouse=True)
def reset_globals():
    """Reset cached settings and the default store around each test."""
    get_settings.cache_clear()
    set_default_store(None)
    yield
    get_settings.cache_clear()
    set_default_store(None)
