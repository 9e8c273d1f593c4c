"""Tests for maximum trade sizes."""

import pytest

from rmm.errors import CurveDomainError, NegativeResultError, PrecisionMismatchError
from rmm.math.fixed_point import FixedPointValue
from rmm.swaps.limits import MaxSwapCalculator, max_delta_in, max_delta_out
from rmm.swaps.types import Direction
from tests.helpers import USDC_DECIMALS, make_pool


def fp(value: object, decimals: int = 18) -> FixedPointValue:
    return FixedPointValue.from_number(value, decimals)  # type: ignore[arg-type]


class TestMaxDeltaIn:
    """Distance to the curve's domain bound, scaled by liquidity."""

    def test_risky_in(self) -> None:
        """0.5 risky per liquidity leaves room for 0.5 more."""
        assert max_delta_in(Direction.RISKY_FOR_STABLE, fp("0.5"), fp(300), fp(1), fp(1000)) == fp("0.5")

    def test_stable_in(self) -> None:
        assert max_delta_in(Direction.STABLE_FOR_RISKY, fp("0.5"), fp(300), fp(1), fp(1000)) == fp(700)

    def test_scaled_by_liquidity(self) -> None:
        assert max_delta_in(Direction.RISKY_FOR_STABLE, fp(1), fp(500), fp(2), fp(1000)) == fp(1)
        assert max_delta_in(Direction.STABLE_FOR_RISKY, fp(1), fp(500), fp(2), fp(1000)) == fp(1500)

    def test_pool_at_bound(self) -> None:
        """One risky per unit of liquidity is the bound itself."""
        assert max_delta_in(Direction.RISKY_FOR_STABLE, fp(1), fp(500), fp(1), fp(1000)).is_zero

    def test_pool_beyond_bound(self) -> None:
        with pytest.raises(NegativeResultError):
            max_delta_in(Direction.RISKY_FOR_STABLE, fp("1.5"), fp(500), fp(1), fp(1000))

    def test_no_liquidity(self) -> None:
        with pytest.raises(CurveDomainError):
            max_delta_in(Direction.RISKY_FOR_STABLE, fp(1), fp(500), fp(0), fp(1000))

    def test_stable_decimals(self) -> None:
        result = max_delta_in(
            Direction.STABLE_FOR_RISKY,
            fp("0.5"),
            fp(300, USDC_DECIMALS),
            fp(1),
            fp(1000, USDC_DECIMALS),
        )
        assert result == fp(700, USDC_DECIMALS)

    def test_strike_precision_must_match_stable(self) -> None:
        with pytest.raises(PrecisionMismatchError):
            max_delta_in(Direction.STABLE_FOR_RISKY, fp("0.5"), fp(300, USDC_DECIMALS), fp(1), fp(1000))


class TestMaxDeltaOut:
    """Reserve paid out minus one raw unit."""

    def test_risky_for_stable(self) -> None:
        result = max_delta_out(Direction.RISKY_FOR_STABLE, fp("0.5"), fp(300), fp(1000))
        assert result.raw == 300 * 10**18 - 1

    def test_stable_for_risky(self) -> None:
        result = max_delta_out(Direction.STABLE_FOR_RISKY, fp("0.5"), fp(300), fp(1000))
        assert result.raw == 5 * 10**17 - 1

    def test_keeps_native_decimals(self) -> None:
        result = max_delta_out(Direction.RISKY_FOR_STABLE, fp("0.5"), fp(300, USDC_DECIMALS), fp(1000))
        assert result == FixedPointValue.from_raw(300 * 10**6 - 1, USDC_DECIMALS)

    def test_empty_reserve(self) -> None:
        with pytest.raises(NegativeResultError):
            max_delta_out(Direction.STABLE_FOR_RISKY, FixedPointValue.zero(18), fp(300), fp(1000))


class TestMaxSwapCalculator:
    def test_matches_functions(self) -> None:
        pool = make_pool()
        calculator = MaxSwapCalculator.for_pool(pool)
        for direction in Direction:
            assert calculator.max_delta_in(direction) == max_delta_in(
                direction, pool.reserve_risky, pool.reserve_stable, pool.reserve_liquidity, pool.strike
            )
            assert calculator.max_delta_out(direction) == max_delta_out(
                direction, pool.reserve_risky, pool.reserve_stable, pool.strike
            )

    def test_usdc_pool(self) -> None:
        calculator = MaxSwapCalculator.for_pool(make_pool(decimals_stable=USDC_DECIMALS))
        assert calculator.max_delta_in(Direction.STABLE_FOR_RISKY) == fp(700, USDC_DECIMALS)
        assert calculator.max_delta_in(Direction.RISKY_FOR_STABLE) == fp("0.5")
