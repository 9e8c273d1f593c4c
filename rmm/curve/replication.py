"""Covered-call replicating trading curve.

For one unit of liquidity with risky reserve R1 and stable reserve R2 the
curve is

    R2 = K * Phi(Phi^-1(1 - R1) - sigma * sqrt(tau)) + k

where K is the strike, sigma the implied volatility, tau the time to
expiry in years and k the invariant. R1 lives in [0, 1] and R2 - k in
[0, K]. Marginal prices follow https://arxiv.org/pdf/2012.08040.pdf.
"""

from __future__ import annotations

import math

from rmm.curve.base import NormalDistribution
from rmm.curve.normal import ApproximateNormal, ScipyNormal

__all__ = [
    "ReplicatingCurve",
    "APPROXIMATE_CURVE",
    "EXACT_CURVE",
    "get_curve",
    "proportional_volatility",
]


def proportional_volatility(sigma: float, tau: float) -> float:
    """sigma * sqrt(tau); zero once the pool has expired."""
    if tau <= 0:
        return 0.0
    return sigma * math.sqrt(tau)


def _finite_or_none(value: float) -> float | None:
    return value if math.isfinite(value) else None


class ReplicatingCurve:
    """Trading-curve primitives evaluated with a given normal distribution.

    Satisfies the CurvePrimitives protocol.
    """

    def __init__(self, normal: NormalDistribution, name: str) -> None:
        self.normal = normal
        self.name = name

    def __repr__(self) -> str:
        return f"ReplicatingCurve({self.name!r})"

    # --- Primitives ---

    def stable_given_risky(
        self,
        risky_per_liquidity: float,
        strike: float,
        sigma: float,
        tau: float,
        invariant: float = 0.0,
    ) -> float | None:
        p = 1.0 - risky_per_liquidity
        if not 0.0 <= p <= 1.0:
            return None
        vol = proportional_volatility(sigma, tau)
        stable = strike * self.normal.cdf(self.normal.ppf(p) - vol) + invariant
        return _finite_or_none(stable)

    def risky_given_stable(
        self,
        stable_per_liquidity: float,
        strike: float,
        sigma: float,
        tau: float,
        invariant: float = 0.0,
    ) -> float | None:
        u = (stable_per_liquidity - invariant) / strike
        if not 0.0 <= u <= 1.0:
            return None
        vol = proportional_volatility(sigma, tau)
        risky = 1.0 - self.normal.cdf(self.normal.ppf(u) + vol)
        return _finite_or_none(risky)

    def invariant(
        self,
        risky_per_liquidity: float,
        stable_per_liquidity: float,
        strike: float,
        sigma: float,
        tau: float,
        fee_adjustment: float = 0.0,
    ) -> float:
        stable = self.stable_given_risky(risky_per_liquidity, strike, sigma, tau, fee_adjustment)
        if stable is None:
            return math.nan
        return stable_per_liquidity - stable

    def spot_price(
        self,
        risky_per_liquidity: float,
        strike: float,
        sigma: float,
        tau: float,
    ) -> float:
        # K * phi(z - vol) / phi(z) with z = Phi^-1(1 - R1)
        p = 1.0 - risky_per_liquidity
        if not 0.0 <= p <= 1.0:
            return math.nan
        vol = proportional_volatility(sigma, tau)
        z = self.normal.ppf(p)
        if math.isinf(z):
            return 0.0 if z < 0 else math.inf
        return strike * math.exp(z * vol - 0.5 * vol * vol)

    def option_delta(
        self,
        strike: float,
        sigma: float,
        tau: float,
        reference_price: float,
    ) -> float:
        if reference_price <= 0:
            return 0.0
        vol = proportional_volatility(sigma, tau)
        if vol == 0.0:
            return 1.0 if reference_price > strike else 0.0
        d1 = (math.log(reference_price / strike) + 0.5 * vol * vol) / vol
        return self.normal.cdf(d1)

    # --- Marginal prices ---

    def marginal_price_risky_in(
        self,
        risky_per_liquidity: float,
        strike: float,
        sigma: float,
        tau: float,
        gamma: float,
        amount_in: float,
    ) -> float:
        """Marginal price (stable per risky) after adding ``amount_in`` risky per liquidity."""
        if amount_in < 0:
            return 0.0
        p = 1.0 - risky_per_liquidity - gamma * amount_in
        if not 0.0 <= p <= 1.0:
            return math.nan
        vol = proportional_volatility(sigma, tau)
        z = self.normal.ppf(p)
        if math.isinf(z):
            return 0.0 if z < 0 else math.inf
        # gamma * K * phi(z - vol) * quantile'(p), with quantile'(p) = 1 / phi(z)
        return gamma * strike * math.exp(z * vol - 0.5 * vol * vol)

    def marginal_price_stable_in(
        self,
        stable_per_liquidity: float,
        strike: float,
        sigma: float,
        tau: float,
        gamma: float,
        amount_in: float,
        invariant: float = 0.0,
    ) -> float:
        """Marginal price (stable per risky) after adding ``amount_in`` stable per liquidity."""
        if amount_in < 0:
            return 0.0
        u = (stable_per_liquidity + gamma * amount_in - invariant) / strike
        if not 0.0 <= u <= 1.0:
            return math.nan
        vol = proportional_volatility(sigma, tau)
        z = self.normal.ppf(u)
        if math.isinf(z):
            return 0.0 if z < 0 else math.inf
        # 1 / (gamma * phi(z + vol) * quantile'(u) / K)
        return strike * math.exp(z * vol + 0.5 * vol * vol) / gamma


APPROXIMATE_CURVE = ReplicatingCurve(ApproximateNormal(), "approximate")
EXACT_CURVE = ReplicatingCurve(ScipyNormal(), "exact")

_CURVES = {
    APPROXIMATE_CURVE.name: APPROXIMATE_CURVE,
    EXACT_CURVE.name: EXACT_CURVE,
}


def get_curve(name: str) -> ReplicatingCurve:
    """Look up a curve implementation by name ("approximate" or "exact").

    Raises:
        ValueError: If the name is unknown
    """
    try:
        return _CURVES[name]
    except KeyError:
        raise ValueError(f"Unknown curve '{name}', expected one of {sorted(_CURVES)}") from None
