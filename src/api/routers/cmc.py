"""Plain-text endpoints for price aggregators (CoinMarketCap / CoinGecko style).

Aggregators ingest the bare response body as a number, so success
responses carry no JSON and no units.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse
from loguru import logger

from src.api.dependencies import get_estimator, get_resolver, get_token_address
from src.supply.estimator import CirculatingSupplyEstimator
from src.supply.resolver import TokenDescriptorResolver
from src.supply.service import circulating_supply
from src.supply.units import format_units, parse_percentage

router = APIRouter(prefix="/cmc", tags=["aggregators"])


@router.get("/circulating", response_class=PlainTextResponse)
async def cmc_circulating(
    token_address: str = Depends(get_token_address),
    percentage: str | None = Query(None),
    resolver: TokenDescriptorResolver = Depends(get_resolver),
    estimator: CirculatingSupplyEstimator = Depends(get_estimator),
) -> PlainTextResponse:
    """Raw circulating supply as a bare integer."""
    logger.info(f"[API] Processing CMC circulating supply request for token: {token_address}")
    try:
        descriptor = await resolver.resolve(token_address)
        circulating = await circulating_supply(
            descriptor, estimator, parse_percentage(percentage)
        )
    except Exception as e:
        logger.error(f"[API] Error in CMC circulating supply endpoint: {e}")
        return PlainTextResponse(f"Error fetching circulating supply: {e}", status_code=500)

    return PlainTextResponse(str(circulating))


@router.get("/total", response_class=PlainTextResponse)
async def cmc_total(
    token_address: str = Depends(get_token_address),
    resolver: TokenDescriptorResolver = Depends(get_resolver),
) -> PlainTextResponse:
    """Total supply in whole tokens (decimal string)."""
    logger.info(f"[API] Processing CMC total supply request for token: {token_address}")
    try:
        descriptor = await resolver.resolve(token_address)
    except Exception as e:
        logger.error(f"[API] Error in CMC total supply endpoint: {e}")
        return PlainTextResponse(f"Error fetching total supply: {e}", status_code=500)

    return PlainTextResponse(format_units(descriptor.total_supply, descriptor.decimals))
