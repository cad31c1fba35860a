"""Sanity checks for fee configurations.

Hard invariants are enforced when parameters are built. This module adds
a report of softer problems: settings that are legal but leave part of
the fee curve unreachable or invert the intended incentive.
"""

from __future__ import annotations
from typing import Any, Dict, Optional, Union
from dataclasses import dataclass, field

from .fixed_point import BPS_PER_PERCENT
from .fee.types import FeeParameters


@dataclass
class ValidationReport:
    """Report from config validation."""
    success: bool
    parameters: Dict[str, int] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        """Format as readable report."""
        lines = ["=== Fee Config Validation Report ==="]
        lines.append(f"Status: {'PASS' if self.success else 'FAIL'}")

        if self.parameters:
            lines.append("\nParameters:")
            for key, value in self.parameters.items():
                lines.append(f"  {key}: {value}")

        if self.warnings:
            lines.append("\nWarnings:")
            for w in self.warnings:
                lines.append(f"  - {w}")

        if self.notes:
            lines.append("\nNotes:")
            for n in self.notes:
                lines.append(f"  - {n}")

        if self.errors:
            lines.append("\nErrors:")
            for e in self.errors:
                lines.append(f"  - {e}")

        return "\n".join(lines)


def parameter_warnings(params: FeeParameters) -> list[str]:
    """List legal-but-suspicious settings in ``params``."""
    warnings = []

    if params.slope_away < params.slope_toward:
        warnings.append(
            f"slope_away ({params.slope_away}) < slope_toward ({params.slope_toward}): "
            "moving away from the peg is cheaper per point than moving toward it"
        )
    if params.base_fee == params.min_fee:
        warnings.append("base_fee equals min_fee: trades toward the peg are never discounted")
    if params.base_fee == params.max_fee:
        warnings.append("base_fee equals max_fee: trades away from the peg are never surcharged")

    return warnings


def saturation_points(params: FeeParameters) -> Dict[str, Optional[int]]:
    """Whole percentage points past the dead-zone at which each ramp hits its bound.

    ``None`` means the ramp stays inside the bounds until the arbitrage
    trigger takes over.
    """
    # Largest point count reachable below the arbitrage trigger
    max_units = (params.arb_trigger_bps - 1 - params.deadzone_bps) // BPS_PER_PERCENT

    def first_hit(gap: int, slope: int) -> Optional[int]:
        if slope == 0:
            return None
        units = -(-gap // slope)
        return units if units <= max_units else None

    return {
        'toward': first_hit(params.base_fee - params.min_fee, params.slope_toward),
        'away': first_hit(params.max_fee - params.base_fee, params.slope_away),
    }


def validate_fee_config(
    config: Union[Any, FeeParameters],
    verbose: bool = False
) -> ValidationReport:
    """Validate a fee config or parameter set.

    Args:
        config: PegFeeConfig (anything with ``to_parameters()``) or FeeParameters
        verbose: If True, print the report

    Returns:
        ValidationReport with results
    """
    report = ValidationReport(success=True)

    try:
        params = config if isinstance(config, FeeParameters) else config.to_parameters()
    except (ValueError, AttributeError) as e:
        report.success = False
        report.errors.append(f"Failed to build parameters: {type(e).__name__}: {e}")
    else:
        report.parameters = {
            'base_fee': params.base_fee,
            'min_fee': params.min_fee,
            'max_fee': params.max_fee,
            'deadzone_bps': params.deadzone_bps,
            'slope_toward': params.slope_toward,
            'slope_away': params.slope_away,
            'arb_trigger_bps': params.arb_trigger_bps,
        }
        report.warnings.extend(parameter_warnings(params))
        for side, units in saturation_points(params).items():
            if units is not None:
                bound = "min_fee" if side == "toward" else "max_fee"
                report.notes.append(
                    f"{side} ramp reaches {bound} {units} points past the dead-zone"
                )

    if verbose:
        print(report)

    return report
