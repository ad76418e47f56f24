"""Pydantic models for Etherscan account API responses."""

from pydantic import BaseModel, Field


class EtherscanTokenTransfer(BaseModel):
    """One row of module=account&action=tokentx."""

    hash: str = ""
    blockNumber: str = ""
    timeStamp: str = ""
    from_address: str = Field(alias="from")
    to: str
    value: str = "0"
    contractAddress: str = ""

    model_config = {"extra": "ignore", "populate_by_name": True}


class EtherscanResponse(BaseModel):
    """Envelope: status "1" carries a list, "0" carries a message string."""

    status: str = "0"
    message: str = ""
    result: list[EtherscanTokenTransfer] | str | None = None

    model_config = {"extra": "ignore"}
