"""Shared fixtures for integration tests."""

import os

import pytest

# Skip all integration tests unless RUN_IRACING_NETWORK_TESTS=1
pytestmark = pytest.mark.skipif(
    os.environ.get("RUN_IRACING_NETWORK_TESTS") != "1",
    reason="Requires network access. Set RUN_IRACING_NETWORK_TESTS=1 to run",
)


@pytest.fixture
def credentials():
    email = os.environ.get("IRACING_EMAIL")
    password = os.environ.get("IRACING_PASSWORD")
    if not email or not password:
        pytest.skip("IRACING_EMAIL and IRACING_PASSWORD must be set")
    return email, password
