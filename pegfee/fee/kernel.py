"""Peg-aware fee kernels.

``compute_fee`` is the exact integer engine used at swap time. It is a
pure function: no I/O, no state, safe to call from any number of threads.

``compute_fee_batch`` applies the same zone logic element-wise with JAX
for fee-surface sweeps and simulations. It works on floats; the integer
kernel is authoritative wherever the two could differ by rounding.
``compute_fee_from_deviation`` is its zone stage alone, for callers that
measure deviations exactly.
"""

from typing import Union

import jax
import jax.numpy as jnp

from ..errors import InvalidParameters
from ..fixed_point import BPS, BPS_PER_PERCENT, FEE_TYPE_MAX, check_price
from .runtime import FeeBatch, FeeRuntime
from .types import (
    FeeDiagnostics,
    FeeParameters,
    FeeResult,
    FeeZone,
    PriceObservation,
    SwapDirection,
)


def deviation_bps(pool_price: int, peg_price: int) -> int:
    """Absolute distance from the peg in basis points, truncated."""
    return abs(pool_price - peg_price) * BPS // peg_price


def is_toward(pool_price: int, peg_price: int, direction: SwapDirection) -> bool:
    """Whether a trade moving price in ``direction`` closes the gap to the peg.

    At the peg every direction counts as toward.
    """
    if pool_price == peg_price:
        return True
    if direction is SwapDirection.PRICE_DOWN:
        return peg_price <= pool_price
    return peg_price >= pool_price


def compute_fee(
    pool_price: int,
    peg_price: int,
    direction: Union[SwapDirection, bool],
    params: FeeParameters,
) -> FeeResult:
    """Compute the swap fee for one trade attempt.

    Args:
        pool_price: Current pool price, positive fixed-point integer
        peg_price: Reference price on the same scale
        direction: SwapDirection, or a bool meaning "this trade lowers the
            pool price" (the pool's ``zero_for_one`` flag)
        params: Validated FeeParameters

    Returns:
        FeeResult whose fee always lies in ``[params.min_fee, params.max_fee]``

    Raises:
        InvalidPrice: If either price is not a positive integer in range
        InvalidParameters: If ``params`` is not a FeeParameters
    """
    check_price("pool_price", pool_price)
    check_price("peg_price", peg_price)
    if not isinstance(params, FeeParameters):
        raise InvalidParameters(
            f"params must be FeeParameters, got {type(params).__name__}"
        )
    direction = SwapDirection.coerce(direction)

    dev_bps = deviation_bps(pool_price, peg_price)
    toward = is_toward(pool_price, peg_price, direction)
    pct_units = 0

    if dev_bps >= params.arb_trigger_bps:
        zone = FeeZone.ARBITRAGE
        unclamped = params.min_fee if toward else params.max_fee
    elif dev_bps > params.deadzone_bps:
        zone = FeeZone.GRADUATED
        pct_units = (dev_bps - params.deadzone_bps) // BPS_PER_PERCENT
        magnitude = pct_units * params.slope(toward)
        if toward:
            unclamped = max(params.base_fee - magnitude, 0)
        else:
            unclamped = min(params.base_fee + magnitude, FEE_TYPE_MAX)
    else:
        zone = FeeZone.DEADZONE
        unclamped = params.base_fee

    fee = max(params.min_fee, min(params.max_fee, unclamped))

    return FeeResult(
        fee=fee,
        diagnostics=FeeDiagnostics(
            base_fee=params.base_fee,
            unclamped_fee=unclamped,
            clamped_fee=fee,
            dev_bps=dev_bps,
            pct_units=pct_units,
            toward=toward,
            arb_zone=zone is FeeZone.ARBITRAGE,
            zone=zone,
        ),
    )


def compute_fee_for_observation(
    observation: PriceObservation,
    params: FeeParameters,
) -> FeeResult:
    """``compute_fee`` over a PriceObservation."""
    return compute_fee(
        observation.pool_price,
        observation.peg_price,
        observation.direction,
        params,
    )


@jax.jit
def compute_fee_from_deviation(
    runtime: FeeRuntime,
    dev_bps: jax.Array,
    toward: jax.Array,
) -> FeeBatch:
    """Vectorized zone, ramp and clamp logic over precomputed deviations.

    Args:
        runtime: Fee parameters as a FeeRuntime
        dev_bps: Whole-number deviations from the peg in basis points
        toward: Boolean array, True where the trade closes the gap

    Returns:
        FeeBatch with the broadcast shape of the inputs
    """
    dev_bps = jnp.asarray(dev_bps)
    toward = jnp.asarray(toward, dtype=bool)

    base_fee = runtime.base_fee.value
    min_fee = runtime.min_fee.value
    max_fee = runtime.max_fee.value
    deadzone = runtime.deadzone_bps.value
    arb_trigger = runtime.arb_trigger_bps.value

    arb_zone = dev_bps >= arb_trigger
    graduated = jnp.logical_and(~arb_zone, dev_bps > deadzone)

    pct_units = jnp.where(
        graduated, jnp.floor((dev_bps - deadzone) / BPS_PER_PERCENT), 0.0
    )
    slope = jnp.where(toward, runtime.slope_toward.value, runtime.slope_away.value)
    magnitude = pct_units * slope

    ramp_fee = jnp.where(
        toward,
        jnp.maximum(base_fee - magnitude, 0.0),
        jnp.minimum(base_fee + magnitude, float(FEE_TYPE_MAX)),
    )
    unclamped = jnp.where(
        arb_zone,
        jnp.where(toward, min_fee, max_fee),
        jnp.where(graduated, ramp_fee, base_fee),
    )
    fee = jnp.clip(unclamped, min_fee, max_fee)

    return FeeBatch(
        fee=fee,
        unclamped_fee=unclamped,
        dev_bps=dev_bps,
        pct_units=pct_units,
        toward=toward,
        arb_zone=arb_zone,
    )


@jax.jit
def compute_fee_batch(
    runtime: FeeRuntime,
    pool_prices: jax.Array,
    peg_prices: jax.Array,
    price_down: jax.Array,
) -> FeeBatch:
    """Vectorized fee over broadcastable float price and direction arrays.

    The deviation is measured in floating point, so a price whose exact
    deviation is a whole number of basis points can land one below it.
    Use ``compute_fee_from_deviation`` with exact deviations (as
    ``PegFeeAdapter.sweep`` does) when results must match ``compute_fee``.

    Args:
        runtime: Fee parameters as a FeeRuntime
        pool_prices: Pool prices (any positive float scale)
        peg_prices: Peg prices on the same scale
        price_down: Boolean array, True where the trade lowers the price

    Returns:
        FeeBatch with the broadcast shape of the inputs

    Example:
        >>> runtime = FeeRuntime.from_parameters(FeeParameters())
        >>> batch = compute_fee_batch(
        ...     runtime, jnp.array([1.0, 1.25]), jnp.array(1.0), jnp.array(True)
        ... )
    """
    pool = jnp.asarray(pool_prices)
    peg = jnp.asarray(peg_prices)
    down = jnp.asarray(price_down, dtype=bool)

    dev_bps = jnp.floor(jnp.abs(pool - peg) * BPS / peg)
    toward = jnp.where(
        pool == peg,
        True,
        jnp.where(down, peg <= pool, peg >= pool),
    )
    dev_bps, toward = jnp.broadcast_arrays(dev_bps, toward)

    return compute_fee_from_deviation(runtime, dev_bps, toward)
