"""Tests for time and fee unit helpers."""

from decimal import Decimal

import pytest

from rmm.constants import YEAR_IN_SECONDS
from rmm.errors import InvalidParameterError
from rmm.units import gamma_from_fee_bps, seconds_to_years, tau_years


class TestTime:
    def test_one_year(self) -> None:
        assert seconds_to_years(YEAR_IN_SECONDS) == 1.0

    def test_half_year(self) -> None:
        assert seconds_to_years(YEAR_IN_SECONDS // 2) == pytest.approx(0.5)

    def test_tau(self) -> None:
        assert tau_years(1_000 + YEAR_IN_SECONDS, 1_000) == 1.0

    def test_tau_after_expiry_is_zero(self) -> None:
        assert tau_years(1_000, 2_000) == 0.0


class TestGamma:
    def test_15_bps(self) -> None:
        assert gamma_from_fee_bps(15) == Decimal("0.9985")

    def test_no_fee(self) -> None:
        assert gamma_from_fee_bps(0) == 1

    @pytest.mark.parametrize("fee_bps", [-1, 10_000, 20_000])
    def test_out_of_range(self, fee_bps: int) -> None:
        with pytest.raises(InvalidParameterError):
            gamma_from_fee_bps(fee_bps)
