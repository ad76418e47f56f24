"""Pydantic models for Ethplorer API responses."""

from decimal import Decimal

from pydantic import BaseModel


class EthplorerHolder(BaseModel):
    """Entry of GET /getTopTokenHolders/{token} → holders[]."""

    address: str
    balance: Decimal | None = None  # raw units, may arrive in float notation
    share: Decimal = Decimal(0)  # percent of total supply, 0-100

    model_config = {"extra": "ignore"}


class EthplorerTopHolders(BaseModel):
    holders: list[EthplorerHolder] | None = None

    model_config = {"extra": "ignore"}
