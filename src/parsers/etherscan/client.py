"""Etherscan API client: recent ERC-20 transfers of one holder.

Uses the V2 multichain endpoint (``chainid`` selects the network).
"""

import httpx
from loguru import logger
from pydantic import ValidationError

from src.parsers.etherscan.models import EtherscanResponse, EtherscanTokenTransfer
from src.parsers.http import ProviderError, RateLimiter, get_json_with_retry

BASE_URL = "https://api.etherscan.io/v2/api"


class EtherscanError(ProviderError):
    """Etherscan request failed or returned an unexpected payload."""


class EtherscanClient:
    """Async HTTP client for the Etherscan account module."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = BASE_URL,
        chain_id: int = 1,
        timeout: float = 10.0,
        max_rps: float = 4.0,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._chain_id = chain_id
        self._rate_limiter = RateLimiter(max_rps)
        self._client = httpx.AsyncClient(
            timeout=timeout,
            headers={"Accept": "application/json"},
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def get_token_transfers(
        self,
        token_address: str,
        holder_address: str,
        *,
        limit: int = 5,
    ) -> list[EtherscanTokenTransfer]:
        """Most recent token transfers touching ``holder_address``, newest first.

        A non-"1" status (no transfers, invalid key, rate-limit notice) yields
        an empty list. Transport failures and malformed payloads raise
        EtherscanError.
        """
        params = {
            "chainid": self._chain_id,
            "module": "account",
            "action": "tokentx",
            "contractaddress": token_address,
            "address": holder_address,
            "page": 1,
            "offset": limit,
            "sort": "desc",
            "apikey": self._api_key,
        }
        data = await get_json_with_retry(
            self._client,
            self._base_url,
            params=params,
            rate_limiter=self._rate_limiter,
            tag="ETHERSCAN",
            error_cls=EtherscanError,
        )

        try:
            parsed = EtherscanResponse.model_validate(data)
        except ValidationError as e:
            raise EtherscanError(f"Unexpected tokentx payload: {e.error_count()} errors") from e

        if parsed.status != "1" or not isinstance(parsed.result, list):
            logger.debug(
                f"[ETHERSCAN] No transfers for {holder_address[:12]}: "
                f"{parsed.message} {parsed.result if isinstance(parsed.result, str) else ''}"
            )
            return []

        return parsed.result[:limit]
