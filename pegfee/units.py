"""Unit management for pegfee using pint.

This module provides the foundation for unit-aware fee configuration:
- UnitManager: Singleton registry management and unit conversions
- UnitSpec: Metadata for units that survives JAX transformations
- Conversion utilities between pint quantities and canonical values

Fees are expressed canonically in parts per million (``ppm``, so 3000 is
0.30%) and deviation thresholds in basis points (``bps``).
"""

from __future__ import annotations

import pint
from dataclasses import dataclass
from pathlib import Path
from typing import Union, Optional, ClassVar

# Type alias for inputs that can be converted to quantities
QuantityInput = Union[str, float, int, pint.Quantity]


@dataclass(frozen=True)
class UnitSpec:
    """Immutable metadata for units that can be attached to JAX arrays.

    Attributes:
        dimension: Dimension name (e.g., "fee", "bps", "price")
        symbol: Unit symbol string the value was supplied in (e.g., "percent")
        to_canonical: Factor to convert from this unit to canonical
    """
    dimension: str
    symbol: str
    to_canonical: float = 1.0

    def __hash__(self):
        return hash((self.dimension, self.symbol, self.to_canonical))


class UnitManager:
    """Manages the unit registry and conversions for pegfee.

    Provides:
    - Singleton pint.UnitRegistry access
    - Canonical unit definitions per dimension
    - Conversion utilities to/from canonical values
    - Custom unit loading from definition files
    """

    _instance: ClassVar[Optional[UnitManager]] = None

    def __init__(self, registry: Optional[pint.UnitRegistry] = None):
        """Initialize with optional custom registry.

        Args:
            registry: Custom pint registry. If None, creates default.
        """
        self.registry = registry or pint.UnitRegistry()

        # Aliases must exist before canonical units reference them
        self._setup_aliases()

        self.canonical_units = {
            "fee": self.registry.ppm,
            "bps": self.registry.basis_point,
            "dimensionless": self.registry.dimensionless,
        }

    @classmethod
    def instance(cls) -> UnitManager:
        """Get or create the singleton instance.

        Returns:
            The global UnitManager instance
        """
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def _setup_aliases(self) -> None:
        """Set up fee-related unit aliases."""
        try:
            if not hasattr(self.registry, 'percent'):
                self.registry.define('percent = 0.01 = %')

            # Basis point (1/100th of a percent)
            if not hasattr(self.registry, 'basis_point'):
                self.registry.define('basis_point = 0.0001 = bps = bp')

            # Fee pips: the ppm granularity used by pool fee fields
            if not hasattr(self.registry, 'ppm'):
                self.registry.define('ppm = 1e-6')
        except (pint.DefinitionSyntaxError, pint.RedefinitionError):
            # May already be defined
            pass

    def load_custom_units(self, paths: list[Path]) -> None:
        """Load custom unit definitions from files, e.g. token-specific pips.

        Args:
            paths: List of paths to pint unit definition files

        Raises:
            FileNotFoundError: If a specified path doesn't exist
        """
        for path in paths:
            if not path.exists():
                raise FileNotFoundError(f"Unit definition file not found: {path}")

            self.registry.load_definitions(str(path))

    def ensure_quantity(
        self,
        value: QuantityInput,
        default_unit: Optional[str] = None
    ) -> pint.Quantity:
        """Convert input to a pint Quantity.

        Args:
            value: String, number, or Quantity to convert
            default_unit: Unit to use if value is a bare number

        Returns:
            pint.Quantity object

        Raises:
            ValueError: If string cannot be parsed as quantity
        """
        if isinstance(value, pint.Quantity):
            return value
        elif isinstance(value, bool):
            raise ValueError(f"Cannot use boolean {value!r} as a quantity")
        elif isinstance(value, str):
            try:
                q = self.registry(value.strip())
            except Exception as e:
                raise ValueError(f"Cannot parse '{value}' as quantity: {e}")
            # Bare numbers parse to plain numbers or unit-free quantities.
            # percent and bps are dimensionless but are still real units.
            if not isinstance(q, pint.Quantity):
                q = self.registry.Quantity(q, default_unit or 'dimensionless')
            elif q.units == self.registry.dimensionless and default_unit:
                q = self.registry.Quantity(q.magnitude, default_unit)
            return q
        else:
            return self.registry.Quantity(value, default_unit or 'dimensionless')

    def to_canonical(
        self,
        quantity: pint.Quantity,
        dimension: str
    ) -> tuple[float, UnitSpec]:
        """Convert quantity to canonical units for dimension.

        Args:
            quantity: pint Quantity to convert
            dimension: Target dimension name

        Returns:
            Tuple of (canonical_value, unit_spec)

        Raises:
            ValueError: If quantity cannot be expressed in the dimension
        """
        if dimension not in self.canonical_units:
            return (
                quantity.magnitude,
                UnitSpec(
                    dimension=dimension,
                    symbol=str(quantity.units),
                    to_canonical=1.0
                )
            )

        canonical_unit = self.canonical_units[dimension]

        try:
            canonical_quantity = quantity.to(canonical_unit)
        except pint.DimensionalityError as e:
            raise ValueError(
                f"Cannot convert {quantity} to dimension '{dimension}': {e}"
            )

        # Factor from units, not magnitudes, so zero values still convert
        original_units = quantity.units
        one_original = self.registry.Quantity(1.0, original_units)
        conversion_factor = float(one_original.to(canonical_unit).magnitude)

        return (
            canonical_quantity.magnitude,
            UnitSpec(
                dimension=dimension,
                symbol=str(original_units),
                to_canonical=conversion_factor
            )
        )

    def from_canonical(
        self,
        value: float,
        spec: UnitSpec
    ) -> pint.Quantity:
        """Reconstruct pint Quantity from canonical value and spec.

        Args:
            value: Canonical value
            spec: UnitSpec with dimension and symbol info

        Returns:
            pint.Quantity in original units
        """
        # original * to_canonical = canonical
        original_value = value / spec.to_canonical if spec.to_canonical != 0 else value
        return self.registry.Quantity(original_value, spec.symbol)

