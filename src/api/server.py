"""API server: runs uvicorn inside the current asyncio event loop."""

from __future__ import annotations

import uvicorn
from loguru import logger

from config.settings import Settings


async def run_api_server(app_settings: Settings) -> None:
    """Serve the supply API until uvicorn receives a shutdown signal."""
    from src.api.app import create_app

    app = create_app(app_settings)
    config = uvicorn.Config(
        app=app,
        host=app_settings.host,
        port=app_settings.port,
        log_level="warning",
        loop="none",  # use the existing event loop
    )
    server = uvicorn.Server(config)
    logger.info(f"API server running on http://{app_settings.host}:{app_settings.port}")
    await server.serve()
