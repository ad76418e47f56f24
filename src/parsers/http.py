"""Shared plumbing for the block-explorer HTTP clients (Ethplorer, Etherscan)."""

import asyncio
from typing import Any

import httpx
from loguru import logger

MAX_RETRIES = 3
RETRY_DELAYS = [1.0, 2.0, 4.0]


class ProviderError(Exception):
    """An upstream data provider could not deliver a usable response."""


class RateLimiter:
    """Minimum-interval limiter for one provider's outbound calls.

    ``max_rps <= 0`` disables limiting (tests, paid keys).
    """

    def __init__(self, max_rps: float) -> None:
        self._min_interval = 1.0 / max_rps if max_rps > 0 else 0.0
        self._last_request = 0.0
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        if not self._min_interval:
            return
        async with self._lock:
            loop = asyncio.get_running_loop()
            wait = self._min_interval - (loop.time() - self._last_request)
            if wait > 0:
                await asyncio.sleep(wait)
            self._last_request = loop.time()


async def get_json_with_retry(
    client: httpx.AsyncClient,
    url: str,
    *,
    params: dict[str, Any] | None = None,
    rate_limiter: RateLimiter,
    tag: str,
    error_cls: type[ProviderError] = ProviderError,
) -> Any:
    """GET ``url`` and decode JSON, retrying 429 / timeouts / connect errors.

    Raises ``error_cls`` once retries are exhausted, on any other HTTP
    error status and on a body that is not JSON.
    """
    last_error: Exception | None = None
    for attempt in range(MAX_RETRIES):
        delay = RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)]
        await rate_limiter.acquire()
        try:
            response = await client.get(url, params=params)
        except (httpx.TimeoutException, httpx.ConnectError) as e:
            last_error = e
            if attempt < MAX_RETRIES - 1:
                logger.debug(f"[{tag}] {type(e).__name__}, retrying in {delay}s")
                await asyncio.sleep(delay)
            continue
        except httpx.HTTPError as e:
            raise error_cls(f"{tag} request failed: {e}") from e

        if response.status_code == 429:
            last_error = error_cls(f"{tag} rate limited")
            if attempt < MAX_RETRIES - 1:
                retry_after = response.headers.get("Retry-After")
                if retry_after and retry_after.isdigit():
                    delay = max(float(retry_after), delay)
                logger.debug(f"[{tag}] 429 rate limited, retrying in {delay}s")
                await asyncio.sleep(delay)
            continue

        if response.status_code != 200:
            raise error_cls(f"{tag} HTTP {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise error_cls(f"{tag} returned a non-JSON body") from e

    raise error_cls(f"{tag} failed after {MAX_RETRIES} attempts: {last_error}")
