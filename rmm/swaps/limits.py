"""Maximum trade sizes for a pool.

The curve confines one unit of liquidity to at most 1 risky and at most
K stable (K = strike). How much more of either asset the pool can take
in is therefore the distance to that bound, scaled by liquidity. Outputs
are bounded by the reserve itself, minus one raw unit so a reserve never
empties completely.
"""

from __future__ import annotations

from dataclasses import dataclass

from rmm.errors import CurveDomainError
from rmm.math.fixed_point import FixedPointValue
from rmm.swaps.types import Direction, PoolState

__all__ = [
    "MaxSwapCalculator",
    "max_delta_in",
    "max_delta_out",
]


def max_delta_in(
    direction: Direction,
    reserve_risky: FixedPointValue,
    reserve_stable: FixedPointValue,
    reserve_liquidity: FixedPointValue,
    strike: FixedPointValue,
) -> FixedPointValue:
    """Largest input the curve can absorb before reaching its domain bound.

    This is the fee-less bound: it measures the amount that enters the
    curve, so with gamma < 1 a trader may pay ``max / gamma``.

    Args:
        direction: Which asset is paid in
        reserve_risky: Risky reserve, risky decimals
        reserve_stable: Stable reserve, stable decimals
        reserve_liquidity: Total liquidity, 18 decimals
        strike: Strike, stable decimals

    Returns:
        Max input at the decimals of the asset paid in. Zero when the pool
        already sits on the bound.

    Raises:
        CurveDomainError: If the pool has no liquidity
        NegativeResultError: If the reserves are already beyond the bound
        PrecisionMismatchError: If strike and stable reserve disagree on decimals
    """
    if reserve_liquidity.is_zero:
        raise CurveDomainError("Pool has no liquidity")

    if direction is Direction.RISKY_FOR_STABLE:
        risky_per_liquidity = reserve_risky.div(reserve_liquidity)
        bound = FixedPointValue.from_number(1, reserve_risky.decimals)
        return bound.sub(risky_per_liquidity).mul(reserve_liquidity)

    stable_per_liquidity = reserve_stable.div(reserve_liquidity)
    return strike.sub(stable_per_liquidity).mul(reserve_liquidity)


def max_delta_out(
    direction: Direction,
    reserve_risky: FixedPointValue,
    reserve_stable: FixedPointValue,
    strike: FixedPointValue,
) -> FixedPointValue:
    """Largest output the pool can pay: the reserve paid out minus one raw unit.

    ``strike`` is accepted for symmetry with max_delta_in and is not used.

    Raises:
        NegativeResultError: If the reserve paid out is empty
    """
    if direction is Direction.RISKY_FOR_STABLE:
        return reserve_stable.sub(FixedPointValue.from_raw(1, reserve_stable.decimals))
    return reserve_risky.sub(FixedPointValue.from_raw(1, reserve_risky.decimals))


@dataclass(frozen=True)
class MaxSwapCalculator:
    """Max trade sizes bound to one pool state."""

    pool: PoolState

    @classmethod
    def for_pool(cls, pool: PoolState) -> MaxSwapCalculator:
        return cls(pool=pool)

    def max_delta_in(self, direction: Direction) -> FixedPointValue:
        return max_delta_in(
            direction,
            self.pool.reserve_risky,
            self.pool.reserve_stable,
            self.pool.reserve_liquidity,
            self.pool.strike,
        )

    def max_delta_out(self, direction: Direction) -> FixedPointValue:
        return max_delta_out(
            direction,
            self.pool.reserve_risky,
            self.pool.reserve_stable,
            self.pool.strike,
        )
