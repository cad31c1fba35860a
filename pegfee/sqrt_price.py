"""Conversions between fixed-point prices and Q64.96 square-root prices.

Concentrated-liquidity pools store their price as ``sqrt(price) * 2**96``.
The fee engine compares plain prices, so pool prices read from a pool and
pegs written toward one go through these helpers. Both directions round
down and are monotonic, which keeps the toward/away comparison correct
at the dead-zone boundary.
"""

from __future__ import annotations

from math import isqrt

from .errors import InvalidPrice
from .fixed_point import WAD

Q96 = 2**96
Q192 = 2**192

# Bounds of the pool's sqrt-price range (ticks -887272 and 887272)
MIN_SQRT_PRICE = 4295128739
MAX_SQRT_PRICE = 1461446703485210103287273052203988822378723970342


def _check_sqrt_price(sqrt_price_x96: int) -> int:
    if isinstance(sqrt_price_x96, bool) or not isinstance(sqrt_price_x96, int):
        raise InvalidPrice(
            f"sqrt price must be an integer, got {type(sqrt_price_x96).__name__}"
        )
    if not MIN_SQRT_PRICE <= sqrt_price_x96 < MAX_SQRT_PRICE:
        raise InvalidPrice(
            f"sqrt price {sqrt_price_x96} outside "
            f"[{MIN_SQRT_PRICE}, {MAX_SQRT_PRICE})"
        )
    return sqrt_price_x96


def sqrt_price_x96_to_price(sqrt_price_x96: int, scale: int = WAD) -> int:
    """Convert a Q64.96 sqrt price to a fixed-point price of token1 per token0.

    Args:
        sqrt_price_x96: Pool sqrt price
        scale: Fixed-point scale of the result (default WAD)

    Returns:
        ``floor(sqrt_price_x96**2 * scale / 2**192)``. Very small sqrt
        prices collapse to 0; the fee engine rejects that as an invalid
        price.

    Raises:
        InvalidPrice: If the sqrt price is outside the pool's range
    """
    _check_sqrt_price(sqrt_price_x96)
    return (sqrt_price_x96 * sqrt_price_x96 * scale) >> 192


def price_to_sqrt_price_x96(price: int, scale: int = WAD) -> int:
    """Convert a fixed-point price to a Q64.96 sqrt price (rounded down).

    Raises:
        InvalidPrice: If the price is not positive or maps outside the
            pool's sqrt-price range
    """
    if isinstance(price, bool) or not isinstance(price, int) or price <= 0:
        raise InvalidPrice(f"price must be a positive integer, got {price!r}")
    sqrt_price = isqrt((price << 192) // scale)
    if not MIN_SQRT_PRICE <= sqrt_price < MAX_SQRT_PRICE:
        raise InvalidPrice(
            f"price {price} maps to sqrt price {sqrt_price} outside the pool range"
        )
    return sqrt_price


def invert_price(price: int, scale: int = WAD) -> int:
    """Quote a price in the opposite token: ``scale**2 // price``.

    Raises:
        InvalidPrice: If the price is not positive
    """
    if isinstance(price, bool) or not isinstance(price, int) or price <= 0:
        raise InvalidPrice(f"price must be a positive integer, got {price!r}")
    return scale * scale // price
