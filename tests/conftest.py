"""Shared test fixtures.

No test touches the network: provider clients are replaced by AsyncMocks
and the HTTP layer runs through FastAPI's TestClient.
"""

from collections.abc import Callable
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.parsers.etherscan.models import EtherscanTokenTransfer
from src.parsers.ethplorer.models import EthplorerHolder
from src.supply.models import TokenDescriptor

TOKEN = "0xf4a509313437dfc64e2efed14e2b607b1aed30c5"


@pytest.fixture
def token() -> str:
    return TOKEN


@pytest.fixture
def make_holder() -> Callable[[str, str], EthplorerHolder]:
    def _make(address: str, share: str) -> EthplorerHolder:
        return EthplorerHolder(address=address, share=Decimal(share))

    return _make


@pytest.fixture
def make_transfer() -> Callable[[str, str], EtherscanTokenTransfer]:
    def _make(sender: str, recipient: str) -> EtherscanTokenTransfer:
        return EtherscanTokenTransfer.model_validate(
            {"from": sender, "to": recipient, "value": "1000", "hash": "0xabc"}
        )

    return _make


@pytest.fixture
def address_for() -> Callable[[int], str]:
    """Deterministic lowercase address for rank ``n``, never a burn address."""

    def _addr(n: int) -> str:
        return f"0x{n + 0x1000:040x}"

    return _addr


@pytest.fixture
def descriptor() -> TokenDescriptor:
    return TokenDescriptor(
        address=TOKEN,
        name="Example Token",
        symbol="EXT",
        decimals=18,
        total_supply=500 * 10**18,
        total_supply_method="totalSupply()",
    )


@pytest.fixture
def ethplorer() -> MagicMock:
    client = MagicMock()
    client.get_top_holders = AsyncMock(return_value=[])
    return client


@pytest.fixture
def etherscan() -> MagicMock:
    client = MagicMock()
    client.get_token_transfers = AsyncMock(return_value=[])
    return client
