"""Request-level orchestration shared by the JSON, aggregator and CLI surfaces."""

from loguru import logger

from src.supply.estimator import CirculatingSupplyEstimator
from src.supply.models import TokenDescriptor
from src.supply.units import apply_percentage_override


async def circulating_supply(
    descriptor: TokenDescriptor,
    estimator: CirculatingSupplyEstimator,
    percentage: float | None,
) -> int:
    """Circulating supply in raw units.

    A manual ``percentage`` (already validated to 0-100) bypasses the
    estimator entirely.
    """
    if percentage is not None:
        logger.info(f"[SUPPLY] Using manual override: {percentage}% of total supply")
        return apply_percentage_override(descriptor.total_supply, percentage)

    logger.info("[SUPPLY] Using holder-based calculation for circulating supply")
    breakdown = await estimator.estimate(
        descriptor.address, descriptor.total_supply, descriptor.decimals
    )
    return breakdown.circulating_supply
