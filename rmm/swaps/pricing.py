"""Price views of a pool.

These are read-only helpers for collaborators: the reported (spot) price,
the reserves a pool is created with for a reference price, and the
marginal price a trade would leave behind. The quoting algorithm itself
does not need any of them.
"""

from __future__ import annotations

import math

from rmm.curve.base import CurvePrimitives
from rmm.curve.replication import APPROXIMATE_CURVE, ReplicatingCurve
from rmm.errors import CurveDomainError, InvalidParameterError
from rmm.math.fixed_point import FixedPointValue, Scalar
from rmm.swaps.quoter import parse_amount
from rmm.swaps.types import Asset, PoolState, SwapKind

__all__ = [
    "marginal_price_after_swap",
    "reported_price_of_risky",
    "risky_reserves_given_reference_price",
]


def reported_price_of_risky(pool: PoolState, curve: CurvePrimitives | None = None) -> float:
    """Spot price of the risky asset in stable units."""
    return pool.reported_price(curve if curve is not None else APPROXIMATE_CURVE)


def risky_reserves_given_reference_price(
    strike: float,
    sigma: float,
    tau: float,
    reference_price: float,
    curve: CurvePrimitives | None = None,
) -> float:
    """Risky reserve per unit of liquidity for a pool created at ``reference_price``.

    Equal to one minus the call delta.
    """
    curve = curve if curve is not None else APPROXIMATE_CURVE
    return 1.0 - curve.option_delta(strike, sigma, tau, reference_price)


def marginal_price_after_swap(
    kind: SwapKind,
    pool: PoolState,
    amount_in: FixedPointValue | Scalar,
    curve: ReplicatingCurve | None = None,
) -> float:
    """Marginal price (stable per risky) after an exact-in trade of ``amount_in``.

    See https://arxiv.org/pdf/2012.08040.pdf for the derivation.

    Raises:
        InvalidParameterError: If ``kind`` is an exact-out kind
        CurveDomainError: If the pool has no liquidity or the price is undefined
    """
    if not kind.exact_in:
        raise InvalidParameterError(f"Marginal price is only defined for exact-in swaps, got {kind.label}")

    curve = curve if curve is not None else APPROXIMATE_CURVE
    params = pool.params
    strike = float(params.strike)
    gamma = float(params.gamma)

    amount = parse_amount(amount_in, pool.reserve(kind.known_side).decimals)
    reserve_per_liquidity = pool.per_liquidity(kind.known_side).normalized
    amount_per_liquidity = amount.div(pool.reserve_liquidity).normalized

    if kind.known_side is Asset.RISKY:
        price = curve.marginal_price_risky_in(
            reserve_per_liquidity, strike, params.sigma, params.tau, gamma, amount_per_liquidity
        )
    else:
        price = curve.marginal_price_stable_in(
            reserve_per_liquidity,
            strike,
            params.sigma,
            params.tau,
            gamma,
            amount_per_liquidity,
            pool.invariant(curve),
        )

    if math.isnan(price):
        raise CurveDomainError(f"Marginal price is undefined after {kind.label} of {amount}")
    return price
