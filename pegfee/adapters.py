"""High-level adapter for the peg-aware fee.

The adapter wraps a validated configuration with a convenient API for a
swap-execution boundary (exact integer fees per trade) and for analysis
(vectorized fee surfaces through the JAX kernel). It holds no mutable
state; one instance can serve any number of concurrent callers.
"""

from __future__ import annotations
from typing import Dict, Sequence, Union
import logging
import warnings

import numpy as np
import jax.numpy as jnp

from .fixed_point import WAD, DecimalInput, check_price, to_wad
from .fee.config import PegFeeConfig
from .fee.kernel import (
    compute_fee,
    compute_fee_from_deviation,
    deviation_bps,
    is_toward,
)
from .fee.types import FeeParameters, FeeResult, PriceObservation, SwapDirection
from .validation import validate_fee_config


__all__ = [
    'PegFeeAdapter',
]

logger = logging.getLogger(__name__)

PriceInput = Union[int, DecimalInput]


class PegFeeAdapter:
    """High-level adapter for peg-aware fee calculations.

    Integer prices are taken as raw fixed-point values on ``scale``; any
    other numeric input (str, Decimal, float) is converted to that scale.

    Example:
        >>> config = PegFeeConfig(base_fee="30 bps", deadzone="25 bps")
        >>> adapter = PegFeeAdapter(config)
        >>> adapter.fee("1.05", "1.0", SwapDirection.PRICE_DOWN)
        2400

        # Direct kernel access:
        >>> compute_fee(to_wad("1.05"), WAD, SwapDirection.PRICE_DOWN, adapter.params).fee
        2400

    Args:
        config: PegFeeConfig or FeeParameters
        check_config: Emit warnings for suspicious settings (default: True)
        scale: Fixed-point scale for non-integer price inputs (default WAD)

    Attributes:
        config: The PegFeeConfig in use
        params: Validated integer FeeParameters for the exact kernel
        runtime: JAX-ready FeeRuntime for the batch kernel
    """

    def __init__(
        self,
        config: Union[PegFeeConfig, FeeParameters, None] = None,
        *,
        check_config: bool = True,
        scale: int = WAD,
    ):
        """Initialize fee adapter.

        Raises:
            InvalidParameters: If FeeParameters violate their invariants
            pydantic.ValidationError: If a PegFeeConfig is invalid
        """
        if config is None:
            config = PegFeeConfig()
        elif isinstance(config, FeeParameters):
            config = PegFeeConfig.from_parameters(config)

        self.config = config
        self.params = config.to_parameters()
        self.runtime = config.to_runtime()
        self.scale = scale

        if check_config:
            report = validate_fee_config(self.params)
            for message in report.warnings:
                warnings.warn(message, UserWarning, stacklevel=2)

        logger.info(
            "Peg fee adapter ready: base=%d min=%d max=%d deadzone=%dbps arb=%dbps",
            self.params.base_fee,
            self.params.min_fee,
            self.params.max_fee,
            self.params.deadzone_bps,
            self.params.arb_trigger_bps,
        )

    def _to_fixed(self, price: PriceInput) -> int:
        if isinstance(price, int) and not isinstance(price, bool):
            return price
        return to_wad(price, self.scale)

    def fee_with_diagnostics(
        self,
        pool_price: PriceInput,
        peg_price: PriceInput,
        direction: Union[SwapDirection, bool],
    ) -> FeeResult:
        """Compute the fee and its diagnostic trace.

        Raises:
            InvalidPrice: If either price is not strictly positive
        """
        result = compute_fee(
            self._to_fixed(pool_price),
            self._to_fixed(peg_price),
            direction,
            self.params,
        )
        logger.debug("Computed peg fee %d: %s", result.fee, result.diagnostics.as_dict())
        return result

    def fee(
        self,
        pool_price: PriceInput,
        peg_price: PriceInput,
        direction: Union[SwapDirection, bool],
    ) -> int:
        """Compute the fee (ppm) for one trade."""
        return self.fee_with_diagnostics(pool_price, peg_price, direction).fee

    def fee_for_swap(
        self,
        sqrt_price_x96: int,
        peg_price: PriceInput,
        zero_for_one: bool,
    ) -> FeeResult:
        """Compute the fee from the values a pool hands to its fee hook.

        Args:
            sqrt_price_x96: Current pool sqrt price (Q64.96)
            peg_price: Peg as token1 per token0
            zero_for_one: True when the swap sells token0 (price goes down)
        """
        observation = PriceObservation.from_sqrt_price_x96(
            sqrt_price_x96,
            self._to_fixed(peg_price),
            SwapDirection.from_zero_for_one(zero_for_one),
            self.scale,
        )
        return self.fee_with_diagnostics(
            observation.pool_price, observation.peg_price, observation.direction
        )

    def sweep(
        self,
        pool_prices: Union[Sequence[DecimalInput], np.ndarray],
        peg_price: PriceInput,
        direction: Union[SwapDirection, bool],
    ) -> Dict[str, np.ndarray]:
        """Evaluate the fee curve over many pool prices with the JAX kernel.

        Deviations and directionality are measured exactly on the fixed-point
        scale, so every point agrees with ``fee`` for the same prices.

        Args:
            pool_prices: Pool prices as floats, strings or Decimals
            peg_price: Peg price, converted like the ``fee`` inputs
            direction: Direction applied to every point

        Returns:
            Dictionary of numpy arrays: fee, unclamped_fee, dev_bps,
            pct_units (integers) and toward, arb_zone (booleans)

        Raises:
            InvalidPrice: If any price is not strictly positive
        """
        direction = SwapDirection.coerce(direction)
        peg = check_price("peg_price", self._to_fixed(peg_price))

        dev_bps = []
        toward = []
        for price in np.asarray(pool_prices).tolist():
            pool = check_price("pool_price", to_wad(price, self.scale))
            dev_bps.append(deviation_bps(pool, peg))
            toward.append(is_toward(pool, peg, direction))

        batch = compute_fee_from_deviation(
            self.runtime,
            jnp.asarray(np.asarray(dev_bps, dtype=float)),
            jnp.asarray(np.asarray(toward, dtype=bool)),
        )

        return {
            'fee': np.asarray(batch.fee).astype(np.int64),
            'unclamped_fee': np.asarray(batch.unclamped_fee).astype(np.int64),
            'dev_bps': np.asarray(dev_bps, dtype=np.int64),
            'pct_units': np.asarray(batch.pct_units).astype(np.int64),
            'toward': np.asarray(toward, dtype=bool),
            'arb_zone': np.asarray(batch.arb_zone, dtype=bool),
        }
