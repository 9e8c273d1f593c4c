"""Tests for the standard normal implementations.

The approximate normal must stay within the A&S 7.1.26 error bound of
the scipy reference, and its inverse must be consistent with its own CDF
so that curve round trips close.
"""

import math

import pytest

from rmm.curve.base import NormalDistribution
from rmm.curve.normal import ApproximateNormal, ScipyNormal

APPROX = ApproximateNormal()
EXACT = ScipyNormal()

CDF_GRID = [x / 4 for x in range(-24, 25)]
PPF_GRID = [0.001, 0.01, 0.02, 0.025, 0.1, 0.3, 0.5, 0.7, 0.9, 0.975, 0.98, 0.99, 0.999]


class TestProtocol:
    def test_both_satisfy_protocol(self) -> None:
        assert isinstance(APPROX, NormalDistribution)
        assert isinstance(EXACT, NormalDistribution)


class TestApproximateCdf:
    """Phi from A&S 7.1.26."""

    def test_cdf_at_zero(self) -> None:
        assert APPROX.cdf(0.0) == 0.5
        assert APPROX.cdf(-0.0) == 0.5

    def test_cdf_continuous_at_zero(self) -> None:
        """No jump between the two branches: a tiny negative x stays just below 0.5."""
        below = APPROX.cdf(-1e-12)
        above = APPROX.cdf(1e-12)
        assert below <= 0.5 <= above
        assert above - below < 1e-11

    def test_ppf_of_half_is_zero(self) -> None:
        assert APPROX.ppf(0.5) == 0.0

    @pytest.mark.parametrize("x", CDF_GRID)
    def test_cdf_close_to_reference(self, x: float) -> None:
        """Phi error is half the 1.5e-7 erfc bound, plus float noise."""
        assert abs(APPROX.cdf(x) - EXACT.cdf(x)) < 8e-8

    @pytest.mark.parametrize("x", [0.1, 1.0, 2.5, 5.0])
    def test_cdf_symmetric(self, x: float) -> None:
        assert APPROX.cdf(-x) + APPROX.cdf(x) == pytest.approx(1.0, abs=1e-15)

    def test_cdf_limits(self) -> None:
        assert APPROX.cdf(-math.inf) == 0.0
        assert APPROX.cdf(math.inf) == 1.0

    def test_cdf_nan(self) -> None:
        assert math.isnan(APPROX.cdf(math.nan))

    def test_pdf_at_zero(self) -> None:
        assert APPROX.pdf(0.0) == pytest.approx(1 / math.sqrt(2 * math.pi))


class TestApproximatePpf:
    """Phi^-1 with Halley refinement."""

    @pytest.mark.parametrize("p", PPF_GRID)
    def test_inverse_of_own_cdf(self, p: float) -> None:
        """cdf(ppf(p)) returns p, which keeps curve round trips closed."""
        assert APPROX.cdf(APPROX.ppf(p)) == pytest.approx(p, abs=1e-12)

    @pytest.mark.parametrize("p", [0.05, 0.1, 0.25, 0.5, 0.75, 0.9, 0.95])
    def test_close_to_reference(self, p: float) -> None:
        assert APPROX.ppf(p) == pytest.approx(EXACT.ppf(p), abs=1e-5)

    def test_monotonic(self) -> None:
        values = [APPROX.ppf(p) for p in PPF_GRID]
        assert values == sorted(values)

    def test_endpoints(self) -> None:
        assert APPROX.ppf(0.0) == -math.inf
        assert APPROX.ppf(1.0) == math.inf

    @pytest.mark.parametrize("p", [-0.1, 1.1, math.nan])
    def test_out_of_domain_is_nan(self, p: float) -> None:
        assert math.isnan(APPROX.ppf(p))


class TestScipyNormal:
    """Reference implementation."""

    def test_known_values(self) -> None:
        assert EXACT.cdf(0.0) == 0.5
        assert EXACT.ppf(0.975) == pytest.approx(1.959963984540054)

    @pytest.mark.parametrize("p", [-0.1, 1.1])
    def test_out_of_domain_is_nan(self, p: float) -> None:
        assert math.isnan(EXACT.ppf(p))

    def test_endpoints(self) -> None:
        assert EXACT.ppf(0.0) == -math.inf
        assert EXACT.ppf(1.0) == math.inf
