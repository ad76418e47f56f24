"""Request-scoped value objects of the supply engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any

from src.supply.units import format_decimal


class HolderClass(str, Enum):
    """Classification of a top holder; values are the wire labels."""

    BURN = "BURN"
    TREASURY_TEAM = "TREASURY/TEAM"
    LOCK_VESTING = "LOCK/VESTING"
    UNKNOWN = "UNKNOWN"
    NO_TRANSACTIONS = "NO_TRANSACTIONS"
    ERROR = "ERROR"

    @property
    def is_circulating(self) -> bool:
        return self not in NON_CIRCULATING


NON_CIRCULATING = frozenset(
    {HolderClass.BURN, HolderClass.TREASURY_TEAM, HolderClass.LOCK_VESTING}
)


@dataclass(frozen=True)
class TokenDescriptor:
    """Token metadata and total supply as read from the contract."""

    address: str
    name: str
    symbol: str
    decimals: int
    total_supply: int  # raw units
    total_supply_method: str  # e.g. "totalSupply()", "cap()"


@dataclass(frozen=True)
class HolderRecord:
    address: str
    share: Decimal  # percent of total supply, provider reported
    quantity: int  # floor(share * total_supply / 100)
    classification: HolderClass

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "quantity": str(self.quantity),
            "percentage": float(self.share),
        }


@dataclass
class BreakdownGroup:
    """Non-circulating holders sharing one classification."""

    addresses: list[HolderRecord] = field(default_factory=list)
    total_quantity: int = 0
    total_percentage: Decimal = Decimal(0)

    def add(self, record: HolderRecord) -> None:
        self.addresses.append(record)
        self.total_quantity += record.quantity
        self.total_percentage += record.share

    def to_dict(self) -> dict[str, Any]:
        return {
            "addresses": [r.to_dict() for r in self.addresses],
            "totalQuantity": str(self.total_quantity),
            "totalPercentage": format_decimal(self.total_percentage),
        }


@dataclass(frozen=True)
class SupplyBreakdown:
    """Estimated circulating supply and what was excluded from it."""

    circulating_supply: int
    circulating_percentage: str  # "NN.NN"
    non_circulating: dict[str, BreakdownGroup] = field(default_factory=dict)

    @classmethod
    def fully_circulating(cls, total_supply: int) -> SupplyBreakdown:
        """Safe default when holders cannot be analysed."""
        return cls(circulating_supply=total_supply, circulating_percentage="100.00")

    @property
    def non_circulating_supply(self) -> int:
        return sum(g.total_quantity for g in self.non_circulating.values())

    def breakdown_dict(self) -> dict[str, Any]:
        return {label: group.to_dict() for label, group in self.non_circulating.items()}
