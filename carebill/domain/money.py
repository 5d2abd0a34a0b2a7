"""Fixed-point money helpers.

All amounts are ``decimal.Decimal`` quantized to two places. Binary floats are
rejected so rounding never depends on float representation.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

Money = Decimal

CENTS = Decimal("0.01")


def to_money(value: Union[Decimal, int, str]) -> Money:
    """Convert an integer, string or Decimal to a two-place Money value.

    Raises:
        TypeError: If value is a float (or bool)
    """
    if isinstance(value, (float, bool)):
        raise TypeError(f"Money must not be built from {type(value).__name__}: {value!r}")
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def format_money(amount: Money, symbol: str = "Rs.") -> str:
    return f"{symbol}{amount:,.2f}"
