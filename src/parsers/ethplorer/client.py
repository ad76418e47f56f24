"""Ethplorer API client: top holders of an ERC-20 token.

Free key ("freekey") is rate limited to roughly 2 requests per second.
Docs: https://github.com/EverexIO/Ethplorer/wiki/Ethplorer-API
"""

import httpx
from loguru import logger
from pydantic import ValidationError

from src.parsers.ethplorer.models import EthplorerHolder, EthplorerTopHolders
from src.parsers.http import ProviderError, RateLimiter, get_json_with_retry

BASE_URL = "https://api.ethplorer.io"
MAX_HOLDERS = 100


class EthplorerError(ProviderError):
    """Ethplorer request failed or returned an unexpected payload."""


class EthplorerClient:
    """Async HTTP client for the Ethplorer public API."""

    def __init__(
        self,
        api_key: str = "freekey",
        *,
        base_url: str = BASE_URL,
        timeout: float = 10.0,
        max_rps: float = 2.0,
    ) -> None:
        self._api_key = api_key
        self._rate_limiter = RateLimiter(max_rps)
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Accept": "application/json"},
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def get_top_holders(
        self, token_address: str, limit: int = MAX_HOLDERS
    ) -> list[EthplorerHolder] | None:
        """Top holders ranked by share, descending (provider order).

        Returns None when the payload carries no ``holders`` list
        (Ethplorer answers 200 with an ``error`` object for unknown
        tokens or exhausted keys). Transport failures raise EthplorerError.
        """
        data = await get_json_with_retry(
            self._client,
            f"/getTopTokenHolders/{token_address}",
            params={"apiKey": self._api_key, "limit": min(limit, MAX_HOLDERS)},
            rate_limiter=self._rate_limiter,
            tag="ETHPLORER",
            error_cls=EthplorerError,
        )
        if not isinstance(data, dict):
            raise EthplorerError("Ethplorer returned a non-object payload")

        if "error" in data:
            logger.warning(f"[ETHPLORER] API error for {token_address}: {data['error']}")

        try:
            parsed = EthplorerTopHolders.model_validate(data)
        except ValidationError as e:
            raise EthplorerError(f"Unexpected holders payload: {e.error_count()} errors") from e

        if parsed.holders is None:
            return None

        logger.debug(f"[ETHPLORER] {len(parsed.holders)} holders for {token_address}")
        return parsed.holders
