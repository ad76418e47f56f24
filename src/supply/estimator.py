"""Circulating supply estimation from the top holders of a token.

Top holders are classified with a small heuristic over their most recent
transfers; burned, treasury/team and locked/vesting balances are removed
from total supply. Anything that cannot be classified stays circulating.
"""

import asyncio
from fractions import Fraction

from loguru import logger

from src.parsers.etherscan.client import EtherscanClient
from src.parsers.etherscan.models import EtherscanTokenTransfer
from src.parsers.ethplorer.client import EthplorerClient
from src.parsers.ethplorer.models import EthplorerHolder
from src.parsers.http import ProviderError
from src.supply.models import BreakdownGroup, HolderClass, HolderRecord, SupplyBreakdown
from src.supply.units import format_percentage, format_units, share_to_quantity

HOLDERS_FETCH_LIMIT = 100
HOLDERS_SAMPLE_SIZE = 20  # only the top 20 are classified
TRANSFERS_SAMPLE_SIZE = 5

BURN_ADDRESSES = frozenset(
    {
        "0x0000000000000000000000000000000000000000",
        "0x000000000000000000000000000000000000dead",
        "0xdead000000000000000042069420694206942069",
        "0xeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeee",
    }
)


def is_burn_address(address: str) -> bool:
    return address.lower() in BURN_ADDRESSES


def classify_holder(
    address: str, transfers: list[EtherscanTokenTransfer] | None
) -> HolderClass:
    """Decide a holder's class from up to 5 of its latest transfers.

    ``transfers is None`` means the lookup itself failed.
    Outflow-only wallets look like treasuries; inflow-only like locks.
    """
    if is_burn_address(address):
        return HolderClass.BURN
    if transfers is None:
        return HolderClass.ERROR
    if not transfers:
        return HolderClass.NO_TRANSACTIONS

    holder = address.lower()
    if all(tx.from_address.lower() == holder for tx in transfers):
        return HolderClass.TREASURY_TEAM
    if all(tx.to.lower() == holder for tx in transfers):
        return HolderClass.LOCK_VESTING
    return HolderClass.UNKNOWN


class CirculatingSupplyEstimator:
    """Turns a top-holders snapshot into a ``SupplyBreakdown``.

    ``estimate`` never raises: any upstream failure degrades to
    "fully circulating".
    """

    def __init__(
        self,
        holders: EthplorerClient,
        transfers: EtherscanClient,
        *,
        max_concurrent: int = 1,
    ) -> None:
        self._holders = holders
        self._transfers = transfers
        self._max_concurrent = max(1, max_concurrent)

    async def estimate(
        self, token_address: str, total_supply: int, decimals: int
    ) -> SupplyBreakdown:
        logger.info(f"[ESTIMATOR] Calculating circulating supply for token: {token_address}")
        try:
            breakdown = await self._estimate(token_address, total_supply)
        except Exception as e:
            logger.error(f"[ESTIMATOR] Error calculating circulating supply: {e}")
            logger.warning("[ESTIMATOR] Falling back to total supply as circulating supply")
            return SupplyBreakdown.fully_circulating(total_supply)

        logger.info(
            f"[ESTIMATOR] Circulating supply: "
            f"{format_units(breakdown.circulating_supply, decimals)} "
            f"({breakdown.circulating_percentage}% of total)"
        )
        return breakdown

    async def _estimate(self, token_address: str, total_supply: int) -> SupplyBreakdown:
        if total_supply <= 0:
            logger.warning("[ESTIMATOR] Total supply is zero, nothing to classify")
            return SupplyBreakdown.fully_circulating(total_supply)

        holders = await self._holders.get_top_holders(token_address, limit=HOLDERS_FETCH_LIMIT)
        if holders is None:
            logger.warning(
                "[ESTIMATOR] Could not fetch holder data from Ethplorer, "
                "falling back to total supply"
            )
            return SupplyBreakdown.fully_circulating(total_supply)

        sample = holders[:HOLDERS_SAMPLE_SIZE]
        semaphore = asyncio.Semaphore(self._max_concurrent)

        async def _bounded(holder: EthplorerHolder) -> HolderRecord:
            async with semaphore:
                return await self._analyse_holder(token_address, holder, total_supply)

        # gather keeps rank order, so output does not depend on concurrency
        records = await asyncio.gather(*[_bounded(h) for h in sample])
        return aggregate(records, total_supply)

    async def _analyse_holder(
        self, token_address: str, holder: EthplorerHolder, total_supply: int
    ) -> HolderRecord:
        quantity = share_to_quantity(holder.share, total_supply)

        transfers: list[EtherscanTokenTransfer] | None = []
        if not is_burn_address(holder.address):
            try:
                transfers = await self._transfers.get_token_transfers(
                    token_address, holder.address, limit=TRANSFERS_SAMPLE_SIZE
                )
            except ProviderError as e:
                logger.info(f"[ESTIMATOR] Error analyzing holder {holder.address}: {e}")
                transfers = None
            except Exception as e:
                logger.warning(
                    f"[ESTIMATOR] Unexpected error analyzing holder {holder.address}: {e!r}"
                )
                transfers = None

        classification = classify_holder(holder.address, transfers)
        logger.debug(
            f"[ESTIMATOR] {holder.address} share={holder.share}% -> {classification.value}"
        )
        return HolderRecord(
            address=holder.address,
            share=holder.share,
            quantity=quantity,
            classification=classification,
        )


def aggregate(records: list[HolderRecord], total_supply: int) -> SupplyBreakdown:
    """Group non-circulating holders by class and derive circulating supply."""
    groups: dict[str, BreakdownGroup] = {}
    non_circulating = 0
    for record in records:
        if record.classification.is_circulating:
            continue
        groups.setdefault(record.classification.value, BreakdownGroup()).add(record)
        non_circulating += record.quantity

    if non_circulating > total_supply:
        # Provider shares of the top holders summed past 100%
        logger.warning(
            f"[ESTIMATOR] Non-circulating {non_circulating} exceeds total supply "
            f"{total_supply}, clamping circulating supply to 0"
        )
        non_circulating = total_supply

    circulating_pct = Fraction(100) - Fraction(non_circulating * 100, total_supply)
    return SupplyBreakdown(
        circulating_supply=total_supply - non_circulating,
        circulating_percentage=format_percentage(circulating_pct),
        non_circulating=groups,
    )
