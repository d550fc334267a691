"""Shared test fixtures."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from config.settings import Settings
from src.api.app import create_app
from src.db.cache import MemoryResultCache
from src.parsers.mock_provider import MockMetricsProvider


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        metrics_provider="mock",
        mock_latency_sec=0.0,
        scan_rate_limit="10/minute",
        redis_url="",
        log_file="",
    )


@pytest.fixture
def memory_cache() -> MemoryResultCache:
    return MemoryResultCache(ttl_sec=60, max_age_sec=600)


@pytest.fixture
def client(test_settings: Settings, memory_cache: MemoryResultCache) -> Iterator[TestClient]:
    """TestClient over a fresh app: own limiter, own cache, instant mock provider."""
    app = create_app(
        test_settings,
        provider=MockMetricsProvider(latency_sec=0.0),
        cache=memory_cache,
    )
    with TestClient(app) as test_client:
        yield test_client
