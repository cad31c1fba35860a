"""Tests for the exact integer fee kernel."""

import pytest
import numpy as np

from pegfee.errors import InvalidParameters, InvalidPrice
from pegfee.fixed_point import FEE_TYPE_MAX, MAX_LP_FEE, MAX_PRICE, WAD, to_wad
from pegfee.fee.kernel import (
    compute_fee,
    compute_fee_for_observation,
    deviation_bps,
    is_toward,
)
from pegfee.fee.types import (
    FeeParameters,
    FeeZone,
    PriceObservation,
    SwapDirection,
)

DOWN = SwapDirection.PRICE_DOWN
UP = SwapDirection.PRICE_UP


@pytest.fixture
def params():
    """base 3000, min 500, max 10000, dead-zone 25 bps, slopes 150/1200, arb 5000 bps."""
    return FeeParameters()


class TestScenarios:
    """Worked examples of each zone."""

    def test_deadzone(self, params):
        """1.0020 vs 1.0 is 20 bps, inside a 25 bps dead-zone."""
        result = compute_fee(to_wad("1.0020"), WAD, DOWN, params)

        assert result.fee == 3000
        assert result.diagnostics.dev_bps == 20
        assert result.diagnostics.zone is FeeZone.DEADZONE
        assert result.diagnostics.pct_units == 0

    def test_graduated_toward(self, params):
        """Selling into a pool priced above the peg is discounted."""
        result = compute_fee(to_wad("1.05"), WAD, DOWN, params)
        diag = result.diagnostics

        assert diag.dev_bps == 500
        assert diag.pct_units == 4
        assert diag.toward is True
        assert diag.unclamped_fee == 2400
        assert result.fee == 2400
        assert diag.zone is FeeZone.GRADUATED

    def test_graduated_away(self, params):
        """Buying into a pool priced above the peg is surcharged."""
        result = compute_fee(to_wad("1.05"), WAD, UP, params)
        diag = result.diagnostics

        assert diag.toward is False
        assert diag.pct_units == 4
        assert diag.unclamped_fee == 7800
        assert result.fee == min(params.max_fee, 7800)

    def test_graduated_away_clamped_to_max(self):
        """The ramp is clamped once it passes max_fee."""
        params = FeeParameters(max_fee=5000)
        result = compute_fee(to_wad("1.05"), WAD, UP, params)

        assert result.diagnostics.unclamped_fee == 7800
        assert result.fee == 5000

    def test_arbitrage_zone(self, params):
        """6000 bps is past the 5000 bps trigger: fee snaps to a bound."""
        toward = compute_fee(to_wad("1.6"), WAD, DOWN, params)
        away = compute_fee(to_wad("1.6"), WAD, UP, params)

        assert toward.diagnostics.dev_bps == 6000
        assert toward.diagnostics.arb_zone is True
        assert toward.fee == params.min_fee
        assert away.fee == params.max_fee
        assert toward.diagnostics.pct_units == 0
        assert away.diagnostics.zone is FeeZone.ARBITRAGE


class TestDeviation:
    """Tests for deviation measurement."""

    def test_symmetric_in_sign(self):
        assert deviation_bps(to_wad("0.95"), WAD) == 500
        assert deviation_bps(to_wad("1.05"), WAD) == 500

    def test_truncates_toward_zero(self):
        # 0.99999 of a bps
        assert deviation_bps(WAD + WAD // 10_000 - 1, WAD) == 0
        assert deviation_bps(WAD + WAD // 10_000, WAD) == 1

    def test_relative_to_peg(self):
        """Deviation is measured in bps of the peg, not of the pool price."""
        assert deviation_bps(to_wad("2"), to_wad("4")) == 5000
        assert deviation_bps(to_wad("4"), to_wad("2")) == 10_000

    def test_no_overflow_at_word_limit(self, params):
        """Python ints hold the intermediate product for 256-bit prices."""
        result = compute_fee(MAX_PRICE, 1, UP, params)

        assert result.diagnostics.dev_bps == (MAX_PRICE - 1) * 10_000
        assert result.fee == params.max_fee


class TestDirectionality:
    """Tests for the toward/away classification."""

    @pytest.mark.parametrize("pool, peg, direction, expected", [
        ("1.1", "1.0", DOWN, True),
        ("1.1", "1.0", UP, False),
        ("0.9", "1.0", UP, True),
        ("0.9", "1.0", DOWN, False),
        ("1.0", "1.0", UP, True),
        ("1.0", "1.0", DOWN, True),
    ])
    def test_is_toward(self, pool, peg, direction, expected):
        assert is_toward(to_wad(pool), to_wad(peg), direction) is expected

    def test_bool_direction_means_price_down(self, params):
        """A bool is read as zero_for_one: True lowers the price."""
        as_bool = compute_fee(to_wad("1.05"), WAD, True, params)
        as_enum = compute_fee(to_wad("1.05"), WAD, DOWN, params)

        assert as_bool == as_enum

    def test_invalid_direction_type(self, params):
        with pytest.raises(TypeError):
            compute_fee(WAD, WAD, "down", params)


class TestProperties:
    """Properties that hold for every valid input."""

    @pytest.mark.parametrize("direction", [DOWN, UP])
    def test_tie_break_at_peg(self, params, direction):
        result = compute_fee(WAD, WAD, direction, params)

        assert result.diagnostics.dev_bps == 0
        assert result.diagnostics.toward is True
        assert result.fee == params.base_fee

    @pytest.mark.parametrize("pool", ["1.0001", "0.9999", "1.0025", "0.9975"])
    def test_deadzone_identity(self, params, pool):
        """Inside the dead-zone the base fee applies in both directions."""
        for direction in (DOWN, UP):
            assert compute_fee(to_wad(pool), WAD, direction, params).fee == params.base_fee

    def test_deadzone_boundary_is_inclusive(self, params):
        """Exactly dead-zone bps is still the dead-zone."""
        result = compute_fee(to_wad("1.0025"), WAD, UP, params)

        assert result.diagnostics.dev_bps == 25
        assert result.diagnostics.zone is FeeZone.DEADZONE

    def test_partial_point_past_deadzone(self, params):
        """Under one whole point past the dead-zone the ramp adds nothing."""
        result = compute_fee(to_wad("1.0100"), WAD, UP, params)

        assert result.diagnostics.zone is FeeZone.GRADUATED
        assert result.diagnostics.pct_units == 0
        assert result.fee == params.base_fee

    def test_arbitrage_boundary_is_inclusive(self, params):
        """Exactly arb_trigger bps snaps to the bound."""
        result = compute_fee(to_wad("1.5"), WAD, UP, params)

        assert result.diagnostics.dev_bps == params.arb_trigger_bps
        assert result.diagnostics.arb_zone is True
        assert result.fee == params.max_fee

    @pytest.mark.parametrize("pool", ["1.01", "1.05", "1.2", "1.49", "1.7"])
    def test_monotonic_asymmetry(self, params, pool):
        """toward fee <= base fee <= away fee at equal deviation."""
        toward = compute_fee(to_wad(pool), WAD, DOWN, params).fee
        away = compute_fee(to_wad(pool), WAD, UP, params).fee

        assert toward <= params.base_fee <= away

    def test_toward_underflow_floors_at_zero(self):
        """A huge discount floors at 0 before clamping to min_fee."""
        params = FeeParameters(min_fee=0, slope_toward=10**30)
        result = compute_fee(to_wad("1.2"), WAD, DOWN, params)

        assert result.diagnostics.unclamped_fee == 0
        assert result.fee == 0

    def test_away_saturates_at_fee_type_max(self):
        """A huge surcharge saturates at the fee type's range, not wraps."""
        params = FeeParameters(max_fee=MAX_LP_FEE, slope_away=10**30)
        result = compute_fee(to_wad("1.2"), WAD, UP, params)

        assert result.diagnostics.unclamped_fee == FEE_TYPE_MAX
        assert result.fee == MAX_LP_FEE

    def test_diagnostics_mirror_fee(self, params):
        result = compute_fee(to_wad("1.05"), WAD, UP, params)

        assert result.diagnostics.clamped_fee == result.fee
        assert result.diagnostics.base_fee == params.base_fee
        assert result.diagnostics.as_dict()['zone'] == "graduated"

    def test_observation_entry_point(self, params):
        observation = PriceObservation.from_decimal("1.05", "1.0", DOWN)

        assert compute_fee_for_observation(observation, params).fee == 2400

    def test_fuzz_bounds(self):
        """Random prices and parameters always land in [min_fee, max_fee]."""
        rng = np.random.default_rng(20240611)

        for _ in range(500):
            low, base, high = sorted(int(x) for x in rng.integers(0, MAX_LP_FEE + 1, size=3))
            deadzone = int(rng.integers(0, 2000))
            params = FeeParameters(
                base_fee=base,
                min_fee=low,
                max_fee=high,
                deadzone_bps=deadzone,
                slope_toward=int(rng.integers(0, 100_000)),
                slope_away=int(rng.integers(0, 100_000)),
                arb_trigger_bps=deadzone + int(rng.integers(1, 30_000)),
            )
            pool = int(rng.integers(1, 2**62))
            peg = int(rng.integers(1, 2**62))

            fees = []
            for direction in (DOWN, UP):
                result = compute_fee(pool, peg, direction, params)
                assert params.min_fee <= result.fee <= params.max_fee
                assert result.diagnostics.clamped_fee == result.fee
                assert 0 <= result.diagnostics.unclamped_fee <= FEE_TYPE_MAX
                if result.diagnostics.dev_bps <= params.deadzone_bps:
                    assert result.fee == params.base_fee
                fees.append((result.diagnostics.toward, result.fee))

            if pool != peg:
                toward_fee = next(fee for toward, fee in fees if toward)
                away_fee = next(fee for toward, fee in fees if not toward)
                assert toward_fee <= params.base_fee <= away_fee


class TestInputValidation:
    """Invalid inputs are rejected before computation."""

    @pytest.mark.parametrize("pool, peg", [
        (0, WAD),
        (WAD, 0),
        (-1, WAD),
        (WAD, -WAD),
        (MAX_PRICE + 1, WAD),
    ])
    def test_invalid_prices(self, params, pool, peg):
        with pytest.raises(InvalidPrice):
            compute_fee(pool, peg, UP, params)

    @pytest.mark.parametrize("bad", [1.0, "1", True, None])
    def test_non_integer_prices(self, params, bad):
        with pytest.raises(InvalidPrice):
            compute_fee(bad, WAD, UP, params)

    def test_invalid_price_is_value_error(self, params):
        with pytest.raises(ValueError):
            compute_fee(0, WAD, UP, params)

    def test_params_must_be_fee_parameters(self):
        with pytest.raises(InvalidParameters):
            compute_fee(WAD, WAD, UP, {"base_fee": 3000})
