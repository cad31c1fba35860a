"""Peg fee configuration with unit-aware Pydantic models.

This module provides the user-facing configuration for the peg-aware fee:
fee levels, dead-zone, slopes and the arbitrage trigger.
"""

from __future__ import annotations
from typing import Tuple
from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator
import pint

from ..fixed_point import MAX_LP_FEE
from ..units import UnitManager, UnitSpec
from ..fields import fee_field, bps_field
from ..runtime import QuantityNode
from .runtime import FeeRuntime, PPM, BASIS_POINT
from .types import FeeParameters


class PegFeeConfig(BaseModel):
    """Configuration for the peg-aware swap fee.

    Fee fields accept ppm (bare numbers), basis points or percentages.
    Threshold fields accept basis points (bare numbers) or percentages:
    - Fees: 3000, "3000 ppm", "30 bps", "0.3 percent"
    - Thresholds: 25, "25 bps", "0.25 percent"

    Slopes are the fee change per whole percentage point of deviation
    beyond the dead-zone.

    Example:
        >>> config = PegFeeConfig(
        ...     base_fee="30 bps",
        ...     min_fee="5 bps",
        ...     max_fee="1 percent",
        ...     deadzone="25 bps",
        ...     arb_trigger="50 percent",
        ... )
        >>> params = config.to_parameters()
    """

    base_fee: Tuple[int, UnitSpec] = Field(
        default=(3000, PPM),
        description="Fee inside the dead-zone (ppm)"
    )

    min_fee: Tuple[int, UnitSpec] = Field(
        default=(500, PPM),
        description="Lower clamp bound (ppm)"
    )

    max_fee: Tuple[int, UnitSpec] = Field(
        default=(10_000, PPM),
        description="Upper clamp bound (ppm)"
    )

    deadzone: Tuple[int, UnitSpec] = Field(
        default=(25, BASIS_POINT),
        description="Deviation below which the base fee applies (bps)"
    )

    slope_toward: Tuple[int, UnitSpec] = Field(
        default=(150, PPM),
        description="Discount per percentage point for trades toward the peg"
    )

    slope_away: Tuple[int, UnitSpec] = Field(
        default=(1200, PPM),
        description="Surcharge per percentage point for trades away from the peg"
    )

    arb_trigger: Tuple[int, UnitSpec] = Field(
        default=(5000, BASIS_POINT),
        description="Deviation at which the fee snaps to its bound (bps)"
    )

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    _validate_fees = field_validator(
        "base_fee", "min_fee", "max_fee", mode="before"
    )(fee_field(min_value=0, max_value=MAX_LP_FEE))

    _validate_slopes = field_validator(
        "slope_toward", "slope_away", mode="before"
    )(fee_field(min_value=0))

    _validate_thresholds = field_validator(
        "deadzone", "arb_trigger", mode="before"
    )(bps_field(min_value=0))

    # Cross-field checks run on the whole model so defaulted fields count too
    @model_validator(mode="after")
    def _validate_fee_order(self) -> PegFeeConfig:
        """Ensure min_fee <= base_fee <= max_fee."""
        if self.min_fee[0] > self.base_fee[0]:
            raise ValueError(f"Min fee {self.min_fee[0]} must be <= base fee {self.base_fee[0]}")
        if self.max_fee[0] < self.base_fee[0]:
            raise ValueError(f"Max fee {self.max_fee[0]} must be >= base fee {self.base_fee[0]}")
        return self

    @model_validator(mode="after")
    def _validate_trigger_beyond_deadzone(self) -> PegFeeConfig:
        """Ensure the arbitrage trigger lies beyond the dead-zone."""
        if self.arb_trigger[0] <= self.deadzone[0]:
            raise ValueError(
                f"Arbitrage trigger {self.arb_trigger[0]} bps must be > "
                f"dead-zone {self.deadzone[0]} bps"
            )
        return self

    def to_parameters(self) -> FeeParameters:
        """Convert to integer parameters for the exact kernel."""
        return FeeParameters(
            base_fee=self.base_fee[0],
            min_fee=self.min_fee[0],
            max_fee=self.max_fee[0],
            deadzone_bps=self.deadzone[0],
            slope_toward=self.slope_toward[0],
            slope_away=self.slope_away[0],
            arb_trigger_bps=self.arb_trigger[0],
        )

    def to_runtime(self) -> FeeRuntime:
        """Convert to runtime structure for JAX.

        Returns:
            FeeRuntime with QuantityNodes remembering the supplied units
        """
        def to_node(value_spec: Tuple[int, UnitSpec]) -> QuantityNode:
            return QuantityNode.from_float(value_spec[0], value_spec[1])

        return FeeRuntime(
            base_fee=to_node(self.base_fee),
            min_fee=to_node(self.min_fee),
            max_fee=to_node(self.max_fee),
            deadzone_bps=to_node(self.deadzone),
            slope_toward=to_node(self.slope_toward),
            slope_away=to_node(self.slope_away),
            arb_trigger_bps=to_node(self.arb_trigger),
        )

    @classmethod
    def from_parameters(cls, params: FeeParameters) -> PegFeeConfig:
        """Create a config from integer parameters (canonical units)."""
        return cls(
            base_fee=(params.base_fee, PPM),
            min_fee=(params.min_fee, PPM),
            max_fee=(params.max_fee, PPM),
            deadzone=(params.deadzone_bps, BASIS_POINT),
            slope_toward=(params.slope_toward, PPM),
            slope_away=(params.slope_away, PPM),
            arb_trigger=(params.arb_trigger_bps, BASIS_POINT),
        )

    def summary(self, format: str = "markdown") -> str:
        """Generate summary of fee configuration.

        Args:
            format: Output format ('markdown', 'text', or 'dict')

        Returns:
            Formatted summary string
        """
        if format == "dict":
            return str(self.to_parameters())

        manager = UnitManager.instance()

        def as_supplied(value: Tuple[int, UnitSpec]) -> str:
            qty: pint.Quantity = manager.from_canonical(value[0], value[1])
            return f"{qty.magnitude:.6g} {qty.units}"

        rows = [
            ("Base fee", self.base_fee, "ppm"),
            ("Min fee", self.min_fee, "ppm"),
            ("Max fee", self.max_fee, "ppm"),
            ("Dead-zone", self.deadzone, "bps"),
            ("Slope toward", self.slope_toward, "ppm / pct"),
            ("Slope away", self.slope_away, "ppm / pct"),
            ("Arbitrage trigger", self.arb_trigger, "bps"),
        ]

        lines = []
        if format == "markdown":
            lines.append("# Peg Fee Configuration\n")
            lines.append("| Parameter | Value | Canonical |")
            lines.append("|-----------|-------|-----------|")
            for name, value, unit in rows:
                lines.append(f"| {name} | {as_supplied(value)} | {value[0]} {unit} |")
        else:  # text format
            lines.append("Peg Fee Configuration")
            lines.append("-" * 40)
            for name, value, unit in rows:
                lines.append(f"  {name}: {value[0]} {unit} ({as_supplied(value)})")

        return "\n".join(lines)
