"""Pydantic field validators for unit-aware fee configurations.

Provides field validators that parse user-friendly unit inputs
("30 bps", "0.3 percent", 3000) and convert them to integer canonical
values with metadata.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from .units import UnitManager, UnitSpec

# Largest distance from a whole number still accepted as that number.
# Absorbs float noise from unit conversion such as 0.3 percent -> ppm.
INTEGRAL_TOLERANCE = 1e-6


def quantity_field(
    dimension: str,
    default_unit: Optional[str] = None,
    min_value: Optional[int] = None,
    max_value: Optional[int] = None,
) -> Callable:
    """Create a Pydantic field validator for integer quantity inputs.

    This validator accepts strings, numbers, or pint Quantities and
    converts them to a whole number of canonical units with metadata.

    Args:
        dimension: Expected dimension (e.g., "fee", "bps")
        default_unit: Unit to apply to bare numbers
        min_value: Optional minimum value in canonical units
        max_value: Optional maximum value in canonical units

    Returns:
        Field validator function for Pydantic models

    Example:
        class MyConfig(BaseModel):
            base_fee: Tuple[int, UnitSpec]

            _validate_base_fee = field_validator("base_fee", mode="before")(
                quantity_field("fee", "ppm", min_value=0)
            )
    """
    def validator(value: Any, info: Optional[Any] = None) -> tuple[int, UnitSpec]:
        """Validate and convert quantity input.

        Args:
            value: Input value to validate
            info: Pydantic validation info (unused but required by signature)

        Returns:
            Tuple of (canonical_int, unit_spec)

        Raises:
            ValueError: If validation fails
        """
        # Canonical (value, spec) pairs, e.g. from from_parameters
        if (
            isinstance(value, tuple)
            and len(value) == 2
            and isinstance(value[1], UnitSpec)
        ):
            whole, spec = value
            if isinstance(whole, bool) or not isinstance(whole, int):
                raise ValueError(f"Canonical value must be an int, got {whole!r}")
        else:
            manager = UnitManager.instance()

            try:
                quantity = manager.ensure_quantity(value, default_unit)
            except Exception as e:
                raise ValueError(f"Cannot parse quantity: {e}")

            try:
                canonical_value, spec = manager.to_canonical(quantity, dimension)
            except ValueError as e:
                raise ValueError(f"Dimension mismatch: {e}")

            # Integers already in canonical units skip the float round trip
            if isinstance(quantity.magnitude, int) and spec.to_canonical == 1.0:
                whole = quantity.magnitude
            else:
                whole = round(float(canonical_value))
                if abs(float(canonical_value) - whole) > INTEGRAL_TOLERANCE:
                    raise ValueError(
                        f"Value {canonical_value} is not a whole number of "
                        f"canonical {dimension} units"
                    )

        if min_value is not None and whole < min_value:
            raise ValueError(
                f"Value {whole} below minimum {min_value} "
                f"(in canonical {dimension} units)"
            )
        if max_value is not None and whole > max_value:
            raise ValueError(
                f"Value {whole} above maximum {max_value} "
                f"(in canonical {dimension} units)"
            )

        return whole, spec

    return validator


def fee_field(min_value: Optional[int] = 0, max_value: Optional[int] = None) -> Callable:
    """Validator for fee quantities; bare numbers are ppm."""
    return quantity_field("fee", "ppm", min_value, max_value)


def bps_field(min_value: Optional[int] = 0, max_value: Optional[int] = None) -> Callable:
    """Validator for deviation thresholds; bare numbers are basis points."""
    return quantity_field("bps", "basis_point", min_value, max_value)
