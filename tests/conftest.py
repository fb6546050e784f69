"""
Pytest configuration and fixtures for the draft clock tests.

This file provides test isolation and shared fixtures.
"""
import os
import pytest

# Ensure environment is set up before any imports happen
os.environ.setdefault("API_TOKEN", "test-token")
os.environ.setdefault("DB_URL", "https://api.example.com")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ.setdefault("TESTING", "true")


@pytest.fixture(autouse=True)
def reset_singleton_state():
    """
    Reset any singleton/global state between tests.

    This prevents test pollution from global state in services.
    """
    yield  # Run test

    from utils.logging import clear_context
    clear_context()

    # Reset config singleton to ensure clean state
    import config as cfg
    cfg._config = None

