"""Pytest configuration and shared fixtures for ghink-openapi-sdk tests."""

import pytest

from ghink_openapi import ClientConfig
from ghink_openapi.transport.retry import RetryPolicy


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Auto-cleanup: Clear SDK environment variables before each test.

    This prevents test pollution when testing configuration loading.
    """
    import os

    test_prefixes = ("GHINK_", "TEST_")

    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in test_prefixes):
            monkeypatch.delenv(key, raising=False)

    yield


@pytest.fixture
def sleeps(monkeypatch):
    """Record backoff delays instead of sleeping."""
    recorded: list[float] = []

    async def fake_wait(self, delay):
        recorded.append(delay)

    monkeypatch.setattr(RetryPolicy, "wait", fake_wait)
    return recorded


@pytest.fixture
def make_config():
    """Build a ClientConfig pointed at a fake endpoint."""

    def factory(**overrides) -> ClientConfig:
        settings = {
            "secret_id": "test-id",
            "secret_key": "test-secret",
            "endpoint": "https://api.example.com/v3",
            "max_retries": 3,
            "retry_delay": 1.0,
            "exponential_backoff": True,
        }
        settings.update(overrides)
        return ClientConfig(**settings)

    return factory
