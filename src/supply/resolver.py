"""Token descriptor resolution: metadata plus total supply with accessor fallbacks."""

from loguru import logger

from src.parsers.erc20.client import Erc20Client
from src.supply.exceptions import InvalidAddressError, SupplyUnavailableError
from src.supply.models import TokenDescriptor
from src.supply.units import format_units

UNKNOWN_LABEL = "Unknown"

# Tried in order, first success wins
SUPPLY_ACCESSORS = ("totalSupply", "getSupply", "supply", "cap")


class TokenDescriptorResolver:
    """Reads name/symbol/decimals/total supply for one token per call.

    Name, symbol and decimals never fail resolution: each falls back to a
    default. Total supply walks ``SUPPLY_ACCESSORS`` and only raises when
    every accessor failed.
    """

    def __init__(self, erc20: Erc20Client, *, default_decimals: int = 18) -> None:
        self._erc20 = erc20
        self._default_decimals = default_decimals

    async def resolve(self, token_address: str) -> TokenDescriptor:
        logger.info(f"[RESOLVER] Fetching details for token: {token_address}")

        if not Erc20Client.is_address(token_address):
            raise InvalidAddressError(token_address)

        name = await self._read_label(token_address, "name")
        symbol = await self._read_label(token_address, "symbol")
        decimals = await self._read_decimals(token_address)
        total_supply, method = await self._discover_total_supply(token_address)

        if total_supply == 0:
            logger.warning(
                f"[RESOLVER] Total supply of {token_address} is zero, this might be incorrect"
            )
        logger.info(
            f"[RESOLVER] Formatted total supply: {format_units(total_supply, decimals)} {symbol}"
        )

        return TokenDescriptor(
            address=token_address,
            name=name,
            symbol=symbol,
            decimals=decimals,
            total_supply=total_supply,
            total_supply_method=method,
        )

    async def _read_label(self, token_address: str, function_name: str) -> str:
        try:
            value = await self._erc20.call(token_address, function_name)
        except Exception as e:
            logger.info(f"[RESOLVER] Could not get token {function_name}: {e}")
            return UNKNOWN_LABEL
        if not isinstance(value, str):
            logger.info(f"[RESOLVER] Token {function_name} is not a string: {value!r}")
            return UNKNOWN_LABEL
        logger.debug(f"[RESOLVER] Token {function_name}: {value}")
        return value

    async def _read_decimals(self, token_address: str) -> int:
        try:
            decimals = int(await self._erc20.call(token_address, "decimals"))
        except Exception as e:
            logger.info(
                f"[RESOLVER] Could not get decimals from contract, "
                f"using default {self._default_decimals}: {e}"
            )
            return self._default_decimals
        logger.debug(f"[RESOLVER] Token decimals from contract: {decimals}")
        return decimals

    async def _discover_total_supply(self, token_address: str) -> tuple[int, str]:
        for accessor in SUPPLY_ACCESSORS:
            method = f"{accessor}()"
            try:
                value = await self._erc20.call(token_address, accessor)
            except Exception as e:
                logger.info(f"[RESOLVER] {method} failed for {token_address}: {e}")
                continue

            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                logger.info(f"[RESOLVER] {method} returned unusable value {value!r}")
                continue

            logger.info(f"[RESOLVER] Total supply from {method}: {value}")
            return value, method

        logger.error(f"[RESOLVER] All attempts to get total supply failed for {token_address}")
        raise SupplyUnavailableError(token_address)
