"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
For standard test utilities, see tests/__init__.py
"""

import os

import pytest

# The web app reads its config once at import; pin a non-production
# environment before any test module imports it.
os.environ["APP_ENV"] = "test"


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "web: marks tests that drive the FastAPI app through TestClient"
    )


@pytest.fixture(autouse=True)
def disable_rate_limits():
    """Sync endpoints are rate limited per client address; TestClient always shares one."""
    from web.backend.routers.sync import limiter

    limiter.enabled = False
    yield
    limiter.enabled = True
