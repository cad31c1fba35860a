"""Fixed-point constants and conversions.

Prices travel through the engine as integers on a shared scale, WAD
(1e18) by default. Fees are integers in parts per million.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, localcontext
from typing import Union

from .errors import InvalidPrice

WAD = 10**18
BPS = 10_000
BPS_PER_PERCENT = 100

# Host fee field is a uint24; 1_000_000 ppm is a 100% fee.
FEE_TYPE_MAX = 2**24 - 1
MAX_LP_FEE = 1_000_000

# Prices must fit the host's 256-bit word.
MAX_PRICE = 2**256 - 1

DecimalInput = Union[str, int, float, Decimal]


def to_wad(value: DecimalInput, scale: int = WAD) -> int:
    """Convert a decimal price to fixed point, truncating toward zero.

    Floats go through ``str`` first so ``1.05`` becomes exactly
    ``1.05 * scale`` rather than the nearest binary value.

    Raises:
        InvalidPrice: If the value cannot be parsed or is not finite
    """
    if isinstance(value, bool):
        raise InvalidPrice(f"Cannot use boolean {value!r} as a price")
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise InvalidPrice(f"Cannot parse {value!r} as a price: {e}")
    if not amount.is_finite():
        raise InvalidPrice(f"Price must be finite, got {value!r}")
    with localcontext() as ctx:
        ctx.prec = 96
        return int(amount * scale)


def from_wad(value: int, scale: int = WAD) -> Decimal:
    """Convert a fixed-point integer back to a Decimal (display only)."""
    return Decimal(value) / Decimal(scale)


def check_price(name: str, value) -> int:
    """Return ``value`` if it is a representable positive integer price.

    Raises:
        InvalidPrice: If the price is not an int, not positive, or too large
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidPrice(
            f"{name} must be an integer fixed-point value, got {type(value).__name__}"
        )
    if value <= 0:
        raise InvalidPrice(f"{name} must be strictly positive, got {value}")
    if value > MAX_PRICE:
        raise InvalidPrice(f"{name} {value} exceeds the 256-bit price range")
    return value
