"""FastAPI application factory for the token supply API."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.settings import Settings, settings as default_settings
from src.parsers.erc20.client import Erc20Client
from src.parsers.etherscan.client import EtherscanClient
from src.parsers.ethplorer.client import EthplorerClient
from src.supply.estimator import CirculatingSupplyEstimator
from src.supply.resolver import TokenDescriptorResolver


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Build the API. Upstream clients live for the lifetime of the app."""
    cfg = app_settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        erc20 = Erc20Client(cfg.rpc_url, timeout=cfg.rpc_timeout_sec)
        ethplorer = EthplorerClient(
            cfg.ethplorer_api_key,
            base_url=cfg.ethplorer_api_url,
            timeout=cfg.http_timeout_sec,
            max_rps=cfg.ethplorer_max_rps,
        )
        etherscan = EtherscanClient(
            cfg.etherscan_api_key,
            base_url=cfg.etherscan_api_url,
            chain_id=cfg.etherscan_chain_id,
            timeout=cfg.http_timeout_sec,
            max_rps=cfg.etherscan_max_rps,
        )
        app.state.resolver = TokenDescriptorResolver(
            erc20, default_decimals=cfg.token_decimals
        )
        app.state.estimator = CirculatingSupplyEstimator(
            ethplorer, etherscan, max_concurrent=cfg.holder_lookup_concurrency
        )
        logger.info(f"[API] Using RPC {cfg.rpc_url}, default token {cfg.default_token}")
        try:
            yield
        finally:
            await erc20.close()
            await ethplorer.close()
            await etherscan.close()

    app = FastAPI(
        title="Token Supply API",
        version="0.1.0",
        docs_url=None,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = cfg

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException
    ) -> PlainTextResponse:
        # Only GET routes exist; a wrong method is reported like a missing path
        if exc.status_code in (404, 405):
            return PlainTextResponse("Not Found", status_code=404)
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> PlainTextResponse:
        logger.exception(f"[API] Unhandled error on {request.url.path}: {exc}")
        return PlainTextResponse("Server Error", status_code=500)

    from src.api.routers.cmc import router as cmc_router
    from src.api.routers.supply import router as supply_router

    app.include_router(supply_router)
    app.include_router(cmc_router)

    return app
