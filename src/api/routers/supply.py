"""JSON supply endpoints: total, circulating, token info, full calculation."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse, Response
from loguru import logger

from src.api.dependencies import get_estimator, get_resolver, get_token_address
from src.api.responses import PrettyJSONResponse
from src.supply.estimator import CirculatingSupplyEstimator
from src.supply.models import SupplyBreakdown, TokenDescriptor
from src.supply.resolver import TokenDescriptorResolver
from src.supply.service import circulating_supply
from src.supply.units import format_decimal, format_units, parse_percentage

router = APIRouter(prefix="/api", tags=["supply"])


def _token_header(token_address: str, descriptor: TokenDescriptor) -> dict[str, Any]:
    return {
        "address": token_address,
        "name": descriptor.name,
        "symbol": descriptor.symbol,
        "decimals": descriptor.decimals,
    }


def _total_section(descriptor: TokenDescriptor) -> dict[str, str]:
    return {
        "raw": str(descriptor.total_supply),
        "formatted": format_units(descriptor.total_supply, descriptor.decimals),
    }


def _circulating_section(
    descriptor: TokenDescriptor, breakdown: SupplyBreakdown
) -> dict[str, str]:
    return {
        "raw": str(breakdown.circulating_supply),
        "formatted": format_units(breakdown.circulating_supply, descriptor.decimals),
        "percentOfTotal": f"{breakdown.circulating_percentage}%",
    }


@router.get("/total-supply")
async def total_supply(
    token_address: str = Depends(get_token_address),
    resolver: TokenDescriptorResolver = Depends(get_resolver),
) -> Response:
    """Total supply, raw and formatted."""
    logger.info(f"[API] Processing total supply request for token: {token_address}")
    try:
        descriptor = await resolver.resolve(token_address)
    except Exception as e:
        logger.error(f"[API] Error in total supply endpoint: {e}")
        return PlainTextResponse(f"Error fetching total supply: {e}", status_code=500)

    return PrettyJSONResponse(
        {
            **_token_header(token_address, descriptor),
            "totalSupply": _total_section(descriptor),
        }
    )


@router.get("/circulating-supply")
async def circulating_supply_endpoint(
    token_address: str = Depends(get_token_address),
    percentage: str | None = Query(None, description="Manual override, 0-100"),
    resolver: TokenDescriptorResolver = Depends(get_resolver),
    estimator: CirculatingSupplyEstimator = Depends(get_estimator),
) -> Response:
    """Circulating supply from the estimator, or from ``percentage`` when given."""
    logger.info(f"[API] Processing circulating supply request for token: {token_address}")
    try:
        descriptor = await resolver.resolve(token_address)
        circulating = await circulating_supply(
            descriptor, estimator, parse_percentage(percentage)
        )
    except Exception as e:
        logger.error(f"[API] Error in circulating supply endpoint: {e}")
        return PlainTextResponse(f"Error fetching circulating supply: {e}", status_code=500)

    return PrettyJSONResponse(
        {
            **_token_header(token_address, descriptor),
            "circulatingSupply": {
                "raw": str(circulating),
                "formattedSupply": format_units(circulating, descriptor.decimals),
            },
        }
    )


@router.get("/token-info")
async def token_info(
    token_address: str = Depends(get_token_address),
    calculate: str | None = Query(None, description="'true' adds the circulating breakdown"),
    resolver: TokenDescriptorResolver = Depends(get_resolver),
    estimator: CirculatingSupplyEstimator = Depends(get_estimator),
) -> Response:
    """Token metadata and total supply; circulating breakdown on ``calculate=true``."""
    logger.info(f"[API] Processing token info request for token: {token_address}")
    try:
        descriptor = await resolver.resolve(token_address)
        payload: dict[str, Any] = {
            **_token_header(token_address, descriptor),
            "totalSupply": _total_section(descriptor),
        }
        if calculate == "true":
            breakdown = await estimator.estimate(
                token_address, descriptor.total_supply, descriptor.decimals
            )
            payload["circulatingSupply"] = _circulating_section(descriptor, breakdown)
            payload["nonCirculatingSupply"] = {"breakdown": breakdown.breakdown_dict()}
    except Exception as e:
        logger.error(f"[API] Error in token info endpoint: {e}")
        return PrettyJSONResponse(
            {"error": True, "message": f"Error fetching token info: {e}"},
            status_code=500,
        )

    return PrettyJSONResponse(payload)


@router.get("/circulating-calculation")
async def circulating_calculation(
    token_address: str = Depends(get_token_address),
    resolver: TokenDescriptorResolver = Depends(get_resolver),
    estimator: CirculatingSupplyEstimator = Depends(get_estimator),
) -> Response:
    """Always runs the estimator; total, circulating and non-circulating sections."""
    logger.info(f"[API] Processing circulating calculation request for token: {token_address}")
    try:
        descriptor = await resolver.resolve(token_address)
        breakdown = await estimator.estimate(
            token_address, descriptor.total_supply, descriptor.decimals
        )
    except Exception as e:
        logger.error(f"[API] Error in circulating calculation endpoint: {e}")
        return PrettyJSONResponse(
            {"error": True, "message": f"Error calculating circulating supply: {e}"},
            status_code=500,
        )

    non_circulating = descriptor.total_supply - breakdown.circulating_supply
    non_circulating_pct = Decimal(100) - Decimal(breakdown.circulating_percentage)

    return PrettyJSONResponse(
        {
            **_token_header(token_address, descriptor),
            "totalSupply": _total_section(descriptor),
            "circulatingSupply": _circulating_section(descriptor, breakdown),
            "nonCirculatingSupply": {
                "raw": str(non_circulating),
                "formatted": format_units(non_circulating, descriptor.decimals),
                "percentOfTotal": f"{format_decimal(non_circulating_pct)}%",
                "breakdown": breakdown.breakdown_dict(),
            },
        }
    )
