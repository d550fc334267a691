"""FastAPI application factory for the token scan API."""

from __future__ import annotations

import asyncio
import contextlib
import math
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from limits import parse
from loguru import logger
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from starlette.middleware.cors import CORSMiddleware

from config.settings import Settings
from config.settings import settings as default_settings
from src.api.dependencies import client_address
from src.api.middleware import SecurityHeadersMiddleware
from src.api.routers.health import router as health_router
from src.api.routers.scan import envelope
from src.api.routers.scan import router as scan_router
from src.db.cache import ResultCache, build_result_cache, run_sweeper
from src.parsers.providers import MetricsProvider, build_provider

API_VERSION = "0.1.0"


def _seconds_until_reset(request: Request, exc: RateLimitExceeded) -> int:
    """Time left in the client's current rate-limit window."""
    view_limit = getattr(request.state, "view_rate_limit", None)
    if view_limit is not None:
        limit_item, args = view_limit
        reset_at, _remaining = request.app.state.limiter.limiter.get_window_stats(
            limit_item, *args
        )
        return max(1, math.ceil(reset_at - time.time()))
    return exc.limit.limit.get_expiry()


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    retry_after = _seconds_until_reset(request, exc)
    logger.info(f"[SCAN] Rate limit hit by {client_address(request)} ({exc.detail})")
    response = envelope(
        status.HTTP_429_TOO_MANY_REQUESTS,
        success=False,
        error=f"Rate limit exceeded. Try again in {retry_after} seconds.",
    )
    response.headers["Retry-After"] = str(retry_after)
    return response


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    cfg: Settings = app.state.settings
    sweeper = asyncio.create_task(
        run_sweeper(app.state.cache, cfg.scan_cache_sweep_interval_sec)
    )
    logger.info(f"Scan API ready (provider={app.state.provider.name})")
    try:
        yield
    finally:
        sweeper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sweeper
        await app.state.provider.close()
        await app.state.cache.close()
        app.state.limiter.reset()
        logger.info("Scan API stopped")


def create_app(
    cfg: Settings | None = None,
    *,
    provider: MetricsProvider | None = None,
    cache: ResultCache | None = None,
) -> FastAPI:
    """Build and configure the FastAPI application.

    Provider, cache and rate limiter are owned by the returned app (on
    ``app.state``); pass ``provider``/``cache`` to inject test doubles.
    """
    cfg = cfg or default_settings
    app = FastAPI(
        title="Degen Scanner API",
        version=API_VERSION,
        docs_url="/api/docs" if cfg.api_debug else None,
        redoc_url=None,
        openapi_url="/api/openapi.json" if cfg.api_debug else None,
        lifespan=lifespan,
    )

    app.state.settings = cfg
    app.state.provider = provider if provider is not None else build_provider(cfg)
    app.state.cache = cache if cache is not None else build_result_cache(cfg)
    app.state.started_at = time.monotonic()

    # Rate limiting: one limiter and window store per app, enforced on POST /api/scan
    app.state.limiter = Limiter(key_func=client_address)
    app.state.scan_limit = parse(cfg.scan_rate_limit)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # Security headers
    app.add_middleware(SecurityHeadersMiddleware)

    origins = [o.strip() for o in cfg.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(scan_router)

    return app
