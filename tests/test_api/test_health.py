"""Tests for /api/health and the rate-limit client key."""

from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient
from starlette.requests import Request

from config.settings import Settings
from src.api.app import API_VERSION, create_app
from src.api.dependencies import client_address
from src.db.cache import MemoryResultCache
from src.parsers.mock_provider import USDC_MINT


def _make_request(headers: dict[str, str] | None = None, client: tuple | None = ("1.2.3.4", 5000)) -> Request:
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/api/scan",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": client,
    }
    return Request(scope)


def test_health_ok(client: TestClient) -> None:
    resp = client.get("/api/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["version"] == API_VERSION
    assert body["provider"] == "mock"
    assert body["cache_ok"] is True
    assert body["cache_entries"] == 0
    assert body["uptime_sec"] >= 0


def test_health_counts_cached_results(client: TestClient) -> None:
    client.post("/api/scan", json={"mintAddress": USDC_MINT})
    assert client.get("/api/health").json()["cache_entries"] == 1


def test_health_degraded_when_cache_unreachable(test_settings: Settings) -> None:
    cache = MagicMock()
    cache.size = AsyncMock(side_effect=ConnectionError("redis down"))
    cache.sweep = AsyncMock(return_value=0)
    cache.close = AsyncMock()
    app = create_app(test_settings, cache=cache)

    with TestClient(app) as test_client:
        body = test_client.get("/api/health").json()

    assert body["status"] == "degraded"
    assert body["cache_ok"] is False


def test_docs_hidden_unless_debug(test_settings: Settings) -> None:
    app = create_app(test_settings, cache=MemoryResultCache())
    with TestClient(app) as test_client:
        assert test_client.get("/api/docs").status_code == 404

    debug_app = create_app(
        test_settings.model_copy(update={"api_debug": True}), cache=MemoryResultCache()
    )
    with TestClient(debug_app) as test_client:
        assert test_client.get("/api/docs").status_code == 200


class TestClientAddress:
    def test_first_forwarded_hop(self) -> None:
        request = _make_request({"X-Forwarded-For": "203.0.113.7, 10.0.0.1"})
        assert client_address(request) == "203.0.113.7"

    def test_real_ip(self) -> None:
        request = _make_request({"X-Real-IP": " 198.51.100.2 "})
        assert client_address(request) == "198.51.100.2"

    def test_forwarded_wins_over_real_ip(self) -> None:
        request = _make_request({"X-Forwarded-For": "203.0.113.7", "X-Real-IP": "198.51.100.2"})
        assert client_address(request) == "203.0.113.7"

    def test_blank_forwarded_falls_through(self) -> None:
        request = _make_request({"X-Forwarded-For": " , 10.0.0.1"})
        assert client_address(request) == "1.2.3.4"

    def test_peer_address(self) -> None:
        assert client_address(_make_request()) == "1.2.3.4"
