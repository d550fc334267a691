"""Health check — not rate limited."""

from __future__ import annotations

import time

from fastapi import APIRouter, Request
from loguru import logger
from pydantic import BaseModel

router = APIRouter(prefix="/api", tags=["health"])


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_sec: int
    provider: str
    cache_ok: bool
    cache_entries: int


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Report provider in use and cache reachability."""
    state = request.app.state

    cache_ok = False
    cache_entries = 0
    try:
        cache_entries = await state.cache.size()
        cache_ok = True
    except Exception as e:
        logger.warning(f"[HEALTH] Cache check failed: {e}")

    return HealthResponse(
        status="ok" if cache_ok else "degraded",
        version=request.app.version,
        uptime_sec=int(time.monotonic() - state.started_at),
        provider=state.provider.name,
        cache_ok=cache_ok,
        cache_entries=cache_entries,
    )
