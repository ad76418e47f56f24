"""FastAPI dependency injection: settings, resolver, estimator, token selection."""

from __future__ import annotations

from fastapi import Depends, Query, Request

from config.settings import Settings
from src.supply.estimator import CirculatingSupplyEstimator
from src.supply.resolver import TokenDescriptorResolver


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_resolver(request: Request) -> TokenDescriptorResolver:
    """Resolver built in the app lifespan."""
    return request.app.state.resolver


def get_estimator(request: Request) -> CirculatingSupplyEstimator:
    """Estimator built in the app lifespan."""
    return request.app.state.estimator


def get_token_address(
    token: str | None = Query(None),
    cfg: Settings = Depends(get_settings),
) -> str:
    """``?token=`` or the configured default when absent/empty."""
    return token or cfg.default_token
