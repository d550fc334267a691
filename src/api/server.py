"""API server — runs uvicorn on the current asyncio event loop."""

from __future__ import annotations

import uvicorn
from loguru import logger

from config.settings import Settings


async def run_api_server(cfg: Settings) -> None:
    """Serve the scan API until uvicorn receives SIGINT/SIGTERM.

    Uses ``uvicorn.Server.serve()`` so the caller owns the event loop.
    """
    from src.api.app import create_app

    app = create_app(cfg)
    config = uvicorn.Config(
        app=app,
        host=cfg.api_host,
        port=cfg.api_port,
        log_level="warning",
        log_config=None,  # keep the loguru intercept installed by setup_logger
        loop="none",
    )
    server = uvicorn.Server(config)
    logger.info(f"Scan API starting on http://{cfg.api_host}:{cfg.api_port}")
    await server.serve()
