"""Value types for the peg-aware fee engine.

Everything here is immutable. Parameters are validated once when they are
built, so the per-trade kernel only has to validate prices.
"""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass
from typing import Any, Dict, Union

from ..errors import InvalidParameters
from ..fixed_point import MAX_LP_FEE, WAD, DecimalInput, to_wad
from ..sqrt_price import sqrt_price_x96_to_price


class SwapDirection(enum.Enum):
    """Which way the pending trade pushes the pool price."""

    PRICE_DOWN = "down"
    PRICE_UP = "up"

    @classmethod
    def from_zero_for_one(cls, zero_for_one: bool) -> SwapDirection:
        """Selling token0 for token1 lowers the token1-per-token0 price."""
        return cls.PRICE_DOWN if zero_for_one else cls.PRICE_UP

    @classmethod
    def coerce(cls, value: Union[SwapDirection, bool]) -> SwapDirection:
        """Accept the enum, or a bool meaning "this trade lowers the price".

        Raises:
            TypeError: For any other type
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            return cls.from_zero_for_one(value)
        raise TypeError(
            f"direction must be a SwapDirection or bool, got {type(value).__name__}"
        )


class FeeZone(enum.Enum):
    """Deviation band a trade falls into."""

    DEADZONE = "deadzone"
    GRADUATED = "graduated"
    ARBITRAGE = "arbitrage"


@dataclass(frozen=True)
class FeeParameters:
    """Integer fee parameters, validated on construction.

    Fees (``base_fee``, ``min_fee``, ``max_fee``) are in ppm. Slopes are
    ppm per whole percentage point of deviation beyond the dead-zone.
    Thresholds are in basis points of the peg.

    Raises:
        InvalidParameters: If any field is not a non-negative int, if
            ``min_fee <= base_fee <= max_fee <= MAX_LP_FEE`` fails, or if
            ``arb_trigger_bps <= deadzone_bps``
    """

    base_fee: int = 3000
    min_fee: int = 500
    max_fee: int = 10_000
    deadzone_bps: int = 25
    slope_toward: int = 150
    slope_away: int = 1200
    arb_trigger_bps: int = 5000

    def __post_init__(self):
        for field in dataclasses.fields(self):
            value = getattr(self, field.name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidParameters(
                    f"{field.name} must be an int, got {type(value).__name__}"
                )
            if value < 0:
                raise InvalidParameters(f"{field.name} must be >= 0, got {value}")

        if not self.min_fee <= self.base_fee <= self.max_fee:
            raise InvalidParameters(
                f"Expected min_fee <= base_fee <= max_fee, got "
                f"{self.min_fee} / {self.base_fee} / {self.max_fee}"
            )
        if self.max_fee > MAX_LP_FEE:
            raise InvalidParameters(
                f"max_fee {self.max_fee} exceeds the 100% fee ({MAX_LP_FEE} ppm)"
            )
        if self.arb_trigger_bps <= self.deadzone_bps:
            raise InvalidParameters(
                f"arb_trigger_bps {self.arb_trigger_bps} must be greater than "
                f"deadzone_bps {self.deadzone_bps}"
            )

    def slope(self, toward: bool) -> int:
        return self.slope_toward if toward else self.slope_away


@dataclass(frozen=True)
class PriceObservation:
    """Prices and direction for one trade attempt.

    Both prices are integers on the same fixed-point scale. They are
    checked by the kernel, not here, so an observation can be built from
    raw host values and rejected in one place.
    """

    pool_price: int
    peg_price: int
    direction: SwapDirection

    @classmethod
    def from_decimal(
        cls,
        pool_price: DecimalInput,
        peg_price: DecimalInput,
        direction: Union[SwapDirection, bool],
        scale: int = WAD,
    ) -> PriceObservation:
        """Build an observation from human-readable prices."""
        return cls(
            pool_price=to_wad(pool_price, scale),
            peg_price=to_wad(peg_price, scale),
            direction=SwapDirection.coerce(direction),
        )

    @classmethod
    def from_sqrt_price_x96(
        cls,
        sqrt_price_x96: int,
        peg_price: int,
        direction: Union[SwapDirection, bool],
        scale: int = WAD,
    ) -> PriceObservation:
        """Build an observation from the pool's Q64.96 sqrt price.

        ``peg_price`` must already be on ``scale``, quoted as token1 per
        token0 like the pool price.
        """
        return cls(
            pool_price=sqrt_price_x96_to_price(sqrt_price_x96, scale),
            peg_price=peg_price,
            direction=SwapDirection.coerce(direction),
        )


@dataclass(frozen=True)
class FeeDiagnostics:
    """Read-only trace of one fee computation."""

    base_fee: int
    unclamped_fee: int
    clamped_fee: int
    dev_bps: int
    pct_units: int
    toward: bool
    arb_zone: bool
    zone: FeeZone

    def as_dict(self) -> Dict[str, Any]:
        """Plain-Python view, e.g. for logging or JSON."""
        return {
            'base_fee': self.base_fee,
            'unclamped_fee': self.unclamped_fee,
            'clamped_fee': self.clamped_fee,
            'dev_bps': self.dev_bps,
            'pct_units': self.pct_units,
            'toward': self.toward,
            'arb_zone': self.arb_zone,
            'zone': self.zone.value,
        }


@dataclass(frozen=True)
class FeeResult:
    """Final fee plus its diagnostics."""

    fee: int
    diagnostics: FeeDiagnostics
