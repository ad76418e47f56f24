"""Fixed-point and percentage helpers for raw token amounts.

All amounts are Python ints in the token's smallest unit; nothing here
goes through float except the manual override, whose rounding is part of
the public contract of the aggregator endpoints.
"""

import math
import re
from decimal import ROUND_HALF_UP, Decimal
from fractions import Fraction

TWO_PLACES = Decimal("0.01")
LEADING_NUMBER = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def format_units(value: int, decimals: int) -> str:
    """Render ``value / 10**decimals`` exactly.

    Trailing zeros of the fraction are trimmed but one digit is kept
    (``500 * 10**18, 18 -> "500.0"``); ``decimals == 0`` gives the bare integer.
    """
    if decimals <= 0:
        return str(value)

    sign = "-" if value < 0 else ""
    whole, fraction = divmod(abs(value), 10**decimals)
    fraction_str = str(fraction).rjust(decimals, "0").rstrip("0") or "0"
    return f"{sign}{whole}.{fraction_str}"


def format_percentage(value: Fraction | Decimal | int) -> str:
    """Two decimal places, half-up (``Fraction(200, 3) -> "66.67"``)."""
    frac = Fraction(value)
    sign = "-" if frac < 0 else ""
    cents = math.floor(abs(frac) * 100 + Fraction(1, 2))
    return f"{sign}{cents // 100}.{cents % 100:02d}"


def format_decimal(value: Decimal) -> str:
    return str(value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def share_to_quantity(share: Decimal, total_supply: int) -> int:
    """``floor(share * total_supply / 100)`` without losing precision."""
    numerator, denominator = share.as_integer_ratio()
    return (numerator * total_supply) // (denominator * 100)


def parse_percentage(raw: str | None) -> float | None:
    """Lenient ``?percentage=`` parsing: anything unusable means "no override".

    Only the leading number is read, so ``"50%"`` and ``"50abc"`` both give 50.
    """
    if raw is None:
        return None
    match = LEADING_NUMBER.match(raw)
    if match is None:
        return None
    value = float(match.group())
    if not 0 <= value <= 100:
        return None
    return value


def apply_percentage_override(total_supply: int, percentage: float) -> int:
    """Circulating supply as a fixed share of total.

    The percentage is truncated to hundredths of a percent first
    (33.335 -> 3333 basis points), then applied with integer math.
    """
    basis_points = math.floor(percentage * 100)
    return total_supply * basis_points // 10000
