"""Pytest configuration and shared fixtures."""

import os
from urllib.parse import urlparse

import pytest

# Load env vars
from dotenv import load_dotenv
load_dotenv()

from lib.homestay.config import ENV_PREFIX, get_settings


# =============================================================================
# SAFETY CHECK: Prevent online tests from creating bookings on a live site
# =============================================================================

ALLOWED_API_HOSTS = {"localhost", "127.0.0.1", "host.docker.internal", "api", "backend"}


def pytest_configure(config):
    """Register custom markers and check the backend is a local one."""
    config.addinivalue_line("markers", "integration: mark test as integration test (hits the backend)")
    config.addinivalue_line("markers", "online: mark test as online test (hits a running backend)")

    api_url = os.getenv(f"{ENV_PREFIX}API_URL", "http://localhost:3001/api")
    api_host = urlparse(api_url).hostname or ""

    if api_host not in ALLOWED_API_HOSTS:
        pytest.exit(
            f"\n\n"
            f"{'=' * 60}\n"
            f"SAFETY CHECK FAILED: Cannot run tests against a live backend!\n"
            f"{'=' * 60}\n"
            f"\n"
            f"Current {ENV_PREFIX}API_URL: {api_url}\n"
            f"Allowed hosts: {', '.join(sorted(ALLOWED_API_HOSTS))}\n"
            f"\n"
            f"To run tests, point {ENV_PREFIX}API_URL at localhost in your .env\n"
            f"{'=' * 60}\n",
            returncode=1,
        )


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(scope="function", autouse=True)
def isolated_settings(monkeypatch):
    """Give every test default settings, unaffected by the developer's .env."""
    for name in list(os.environ):
        if name.startswith(ENV_PREFIX):
            monkeypatch.delenv(name, raising=False)

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
