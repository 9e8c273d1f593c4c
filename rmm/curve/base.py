"""Capability interfaces for the trading-curve primitives.

The quoter never evaluates the covered-call curve itself: it consumes the
primitives below on per-unit-of-liquidity floats. Any object satisfying
CurvePrimitives can be substituted, e.g. a slow reference implementation
in tests or a deliberately broken one to exercise the invariant check.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class NormalDistribution(Protocol):
    """Standard normal distribution functions used to build a curve."""

    def cdf(self, x: float) -> float:
        """Cumulative distribution function Phi(x)."""
        ...

    def ppf(self, p: float) -> float:
        """Inverse CDF Phi^-1(p). NaN outside [0, 1], -inf/inf at 0/1."""
        ...

    def pdf(self, x: float) -> float:
        """Probability density phi(x)."""
        ...


@runtime_checkable
class CurvePrimitives(Protocol):
    """Pure functions of the replicating trading curve.

    All reserves are per unit of liquidity. Inverse functions return None
    when the requested point lies outside the curve's domain.
    """

    name: str

    def invariant(
        self,
        risky_per_liquidity: float,
        stable_per_liquidity: float,
        strike: float,
        sigma: float,
        tau: float,
        fee_adjustment: float = 0.0,
    ) -> float:
        """Trading-function value k for the given reserves.

        Returns NaN when the reserves are outside the curve's domain.
        """
        ...

    def stable_given_risky(
        self,
        risky_per_liquidity: float,
        strike: float,
        sigma: float,
        tau: float,
        invariant: float = 0.0,
    ) -> float | None:
        """Stable reserve on the curve ``k`` for a given risky reserve."""
        ...

    def risky_given_stable(
        self,
        stable_per_liquidity: float,
        strike: float,
        sigma: float,
        tau: float,
        invariant: float = 0.0,
    ) -> float | None:
        """Risky reserve on the curve ``k`` for a given stable reserve."""
        ...

    def spot_price(
        self,
        risky_per_liquidity: float,
        strike: float,
        sigma: float,
        tau: float,
    ) -> float:
        """Reported price of the risky asset in stable units."""
        ...

    def option_delta(
        self,
        strike: float,
        sigma: float,
        tau: float,
        reference_price: float,
    ) -> float:
        """Black-Scholes call delta in [0, 1] for a reference price."""
        ...
