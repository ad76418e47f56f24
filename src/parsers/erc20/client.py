"""Read-only ERC-20 contract access over JSON-RPC (web3.py, async)."""

import asyncio
from typing import Any

import aiohttp
from loguru import logger
from web3 import AsyncHTTPProvider, AsyncWeb3, Web3

from src.parsers.erc20.abi import ERC20_ABI


class Erc20Client:
    """Thin async wrapper around ``AsyncWeb3`` for view calls on token contracts.

    Every call is bounded by ``timeout`` seconds. Errors (revert, missing
    method, undecodable output, transport) propagate to the caller, which
    decides whether a failure is fatal.
    """

    def __init__(self, rpc_url: str, *, timeout: float = 15.0) -> None:
        self._timeout = timeout
        self._w3 = AsyncWeb3(
            AsyncHTTPProvider(
                rpc_url,
                request_kwargs={"timeout": aiohttp.ClientTimeout(total=timeout)},
            )
        )

    @staticmethod
    def is_address(value: str) -> bool:
        return bool(value) and Web3.is_address(value)

    async def call(self, token_address: str, function_name: str) -> Any:
        """Invoke a view function of the token contract and return its decoded output."""
        contract = self._w3.eth.contract(
            address=Web3.to_checksum_address(token_address),
            abi=ERC20_ABI,
        )
        fn = getattr(contract.functions, function_name)
        return await asyncio.wait_for(fn().call(), timeout=self._timeout)

    async def close(self) -> None:
        try:
            await self._w3.provider.disconnect()
        except Exception as e:
            logger.debug(f"[ERC20] provider disconnect failed: {e}")
