"""FastAPI dependency injection — per-app provider, cache, client identity, scan rate limit."""

from __future__ import annotations

from fastapi import Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from slowapi.wrappers import Limit

from src.db.cache import ResultCache
from src.parsers.providers import MetricsProvider

SCAN_LIMIT_SCOPE = "scan"


def get_provider(request: Request) -> MetricsProvider:
    """Return the metrics provider owned by this application."""
    return request.app.state.provider


def get_cache(request: Request) -> ResultCache:
    """Return the scan result cache owned by this application."""
    return request.app.state.cache


def client_address(request: Request) -> str:
    """Rate-limit key: first X-Forwarded-For hop, then X-Real-IP, then peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return get_remote_address(request) or "unknown"


def enforce_scan_rate_limit(request: Request) -> None:
    """Count one scan against the client's window; raise once it is spent.

    Runs before the body is read, so malformed requests count too.
    """
    limiter: Limiter = request.app.state.limiter
    scan_limit = request.app.state.scan_limit
    args = [client_address(request), SCAN_LIMIT_SCOPE]
    request.state.view_rate_limit = (scan_limit, args)
    if not limiter.limiter.hit(scan_limit, *args):
        raise RateLimitExceeded(
            Limit(
                limit=scan_limit,
                key_func=client_address,
                scope=SCAN_LIMIT_SCOPE,
                per_method=False,
                methods=None,
                error_message=None,
                exempt_when=None,
                cost=1,
                override_defaults=False,
            )
        )
