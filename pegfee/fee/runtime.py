"""Runtime structures for vectorized fee calculations with Penzai/JAX.

This module provides JAX-compatible runtime structures for the fee
parameters that preserve unit metadata through transformations.
"""

from __future__ import annotations

import jax
from penzai.core import struct

from ..runtime import QuantityNode
from ..units import UnitSpec
from .types import FeeParameters

PPM = UnitSpec(dimension="fee", symbol="ppm")
BASIS_POINT = UnitSpec(dimension="bps", symbol="basis_point")


@struct.pytree_dataclass
class FeeRuntime(struct.Struct):
    """Runtime fee parameters for JAX computation.

    All fields are QuantityNodes containing JAX arrays with unit metadata.
    Penzai's @struct.pytree_dataclass registers this as a JAX pytree.
    """

    base_fee: QuantityNode
    min_fee: QuantityNode
    max_fee: QuantityNode
    deadzone_bps: QuantityNode
    slope_toward: QuantityNode
    slope_away: QuantityNode
    arb_trigger_bps: QuantityNode

    @classmethod
    def from_parameters(cls, params: FeeParameters) -> FeeRuntime:
        """Build a runtime from validated integer parameters.

        Units default to the canonical ppm and basis points; configs that
        know the original units pass their own nodes instead.
        """
        return cls(
            base_fee=QuantityNode.from_float(params.base_fee, PPM),
            min_fee=QuantityNode.from_float(params.min_fee, PPM),
            max_fee=QuantityNode.from_float(params.max_fee, PPM),
            deadzone_bps=QuantityNode.from_float(params.deadzone_bps, BASIS_POINT),
            slope_toward=QuantityNode.from_float(params.slope_toward, PPM),
            slope_away=QuantityNode.from_float(params.slope_away, PPM),
            arb_trigger_bps=QuantityNode.from_float(params.arb_trigger_bps, BASIS_POINT),
        )


@struct.pytree_dataclass
class FeeBatch(struct.Struct):
    """Element-wise fee results from the batch kernel.

    Fee-valued fields hold whole numbers in the float dtype of the inputs.
    """

    fee: jax.Array
    unclamped_fee: jax.Array
    dev_bps: jax.Array
    pct_units: jax.Array
    toward: jax.Array
    arb_zone: jax.Array
