"""Runtime structures using Penzai for JAX-compatible unit-aware computations.

This module provides Penzai structs that keep unit metadata attached to
values while remaining compatible with JAX transformations like jit and
vmap.
"""

from __future__ import annotations

from typing import Optional
import dataclasses
import jax
import jax.numpy as jnp
import pint
from penzai.core import struct

from .units import UnitSpec, UnitManager


# Register UnitSpec as static so it can be used as metadata
jax.tree_util.register_static(UnitSpec)


@struct.pytree_dataclass
class QuantityNode(struct.Struct):
    """A Penzai struct that holds a value with unit metadata.

    The value field is a pytree node (participates in transformations),
    while the units field is static metadata.

    Attributes:
        value: JAX array containing the numerical value in canonical units
        units: UnitSpec metadata describing the units
    """
    value: jax.Array
    units: UnitSpec = dataclasses.field(metadata={'pytree_node': False})

    @classmethod
    def from_float(
        cls,
        value: float,
        units: UnitSpec,
        dtype: Optional[jnp.dtype] = None
    ) -> QuantityNode:
        """Create a QuantityNode from a scalar value.

        Args:
            value: Numerical value in canonical units
            units: Unit specification
            dtype: JAX array dtype (default: JAX's default float dtype)

        Returns:
            QuantityNode instance
        """
        return cls(
            value=jnp.asarray(float(value), dtype=dtype),
            units=units
        )

    def to_float(self) -> float:
        """Extract the float value from the node (assumes scalar array)."""
        return float(self.value)

    def to_quantity(self, manager: Optional[UnitManager] = None) -> pint.Quantity:
        """Rebuild the pint Quantity in the units it was supplied in."""
        if manager is None:
            manager = UnitManager.instance()
        return manager.from_canonical(self.to_float(), self.units)

    def __repr__(self) -> str:
        return f"QuantityNode({self.value}, {self.units.symbol})"
