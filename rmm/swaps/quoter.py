"""Swap quoting on the replicating trading curve.

Every quote runs the same sequence:

1. validate the amount;
2. read the pool reserves as fixed-point values;
3. compute the current invariant k from per-liquidity reserves;
4. move the known side by the traded amount (exact-in: amount * gamma
   added; exact-out: amount removed) and divide by liquidity;
5. solve the other side on the curve k;
6. scale the solved value back up by liquidity, rounding up;
7. derive the output (exact-in) or the fee-inclusive input (exact-out);
8. recompute k' on the real post-trade reserves and require k' >= k;
9. derive the implied price.

Only steps 4, 5 and 7 depend on the SwapKind. A zero-size trade skips
steps 4-6 and leaves the pool as it is.

Rounding always favours the pool: the solved reserve and an exact-out
input round up, an exact-in output rounds down. The curve itself is
evaluated in floats, so k' can still miss k by float noise. A shortfall
within ``dust_tolerance`` per unit of liquidity is made up by trimming
the output (or raising the input) in small steps. The invariant check
in step 8 is never skipped: a quote that would leave the pool worse off
raises InvariantViolationError instead of being returned.
"""

from __future__ import annotations

import math
from decimal import Decimal

import structlog

from rmm.constants import PRICE_INFINITY, RISKY_PER_LIQUIDITY_BOUND
from rmm.curve.base import CurvePrimitives
from rmm.curve.replication import APPROXIMATE_CURVE, get_curve
from rmm.errors import (
    CurveDomainError,
    InvalidAmountError,
    InvariantViolationError,
    NegativeResultError,
    PrecisionMismatchError,
)
from rmm.math.fixed_point import FixedPointValue, Scalar, to_decimal
from rmm.swaps.config import DEFAULT_QUOTER_CONFIG, QuoterConfig
from rmm.swaps.types import Asset, CurveParameters, Direction, PoolState, SwapKind, SwapQuote

logger = structlog.get_logger()

__all__ = [
    "SwapQuoter",
    "get_default_quoter",
    "parse_amount",
    "quote_exact_in",
    "quote_exact_out",
]


def parse_amount(amount: FixedPointValue | Scalar, decimals: int) -> FixedPointValue:
    """Validate a trade size and express it at ``decimals``.

    Raises:
        InvalidAmountError: If the amount is negative or not finite
        PrecisionMismatchError: If a FixedPointValue has other decimals
    """
    if isinstance(amount, FixedPointValue):
        if amount.decimals != decimals:
            raise PrecisionMismatchError(
                f"Amount has {amount.decimals} decimals but its asset uses {decimals}; rescale it first"
            )
        return amount
    value = to_decimal(amount)
    if value < 0:
        raise InvalidAmountError(f"Amount cannot be negative: {amount}")
    return FixedPointValue.from_number(value, decimals)


class SwapQuoter:
    """Quotes the four swap kinds against a set of curve primitives.

    Stateless apart from its curve and configuration, so one instance can
    serve concurrent callers.
    """

    def __init__(
        self,
        curve: CurvePrimitives | None = None,
        config: QuoterConfig = DEFAULT_QUOTER_CONFIG,
    ) -> None:
        self.curve = curve if curve is not None else APPROXIMATE_CURVE
        self.config = config

    def quote_exact_in(
        self,
        direction: Direction,
        pool: PoolState,
        amount_in: FixedPointValue | Scalar,
    ) -> SwapQuote:
        """Quote the output for an exact amount paid in."""
        return self.quote(SwapKind.resolve(direction, exact_in=True), pool, amount_in)

    def quote_exact_out(
        self,
        direction: Direction,
        pool: PoolState,
        amount_out: FixedPointValue | Scalar,
    ) -> SwapQuote:
        """Quote the fee-inclusive input for an exact amount taken out."""
        return self.quote(SwapKind.resolve(direction, exact_in=False), pool, amount_out)

    def quote(
        self,
        kind: SwapKind,
        pool: PoolState,
        amount: FixedPointValue | Scalar,
    ) -> SwapQuote:
        """Quote one trade.

        Args:
            kind: Which side is known and whether it is paid in or taken out
            pool: Current pool state
            amount: Exact amount of the known side, at that asset's decimals

        Returns:
            SwapQuote with both amounts, both invariants and the implied price

        Raises:
            InvalidAmountError: If the amount is negative or not finite
            PrecisionMismatchError: If the amount's decimals differ from its asset's
            CurveDomainError: If the trade leaves the curve's domain, the pool has
                no liquidity or the curve returns a non-finite value
            NegativeResultError: If a reserve, output or input would be negative
            InvariantViolationError: If the post-trade invariant is below k
        """
        params = pool.params
        known_side = kind.known_side
        solved_side = kind.solved_side

        # Steps 1-2
        amount = parse_amount(amount, pool.reserve(known_side).decimals)

        # Step 3
        invariant_before = self._invariant(pool)

        old_solved = pool.reserve(solved_side)
        if amount.is_zero:
            # Nothing moves, so nothing is solved
            new_solved = old_solved
        else:
            # Step 4
            known_per_liquidity = self._known_per_liquidity(kind, pool, amount)

            # Step 5
            solved_per_liquidity = self._solve(solved_side, known_per_liquidity, params, invariant_before)

            # Step 6, rounded up: the pool keeps (or is paid) the remainder
            new_solved = FixedPointValue.from_number(
                solved_per_liquidity, old_solved.decimals, round_up=True
            ).mul_up(pool.reserve_liquidity)

        # Step 7
        noise = self._noise(old_solved.decimals, pool)
        if kind.exact_in:
            amount_in = amount
            amount_out = self._exact_in_output(old_solved, new_solved, noise)
        else:
            amount_in = self._exact_out_input(old_solved, new_solved, params.gamma, noise)
            amount_out = amount

        # Step 8
        invariant_after = self._invariant(pool.after_swap(kind.asset_in, amount_in, amount_out))
        # Float noise below the tolerance is corrected in the pool's favour
        for attempt in range(self.config.noise_corrections):
            shortfall = invariant_before - invariant_after
            if not 0.0 < shortfall <= float(self.config.dust_tolerance):
                break
            step = self._correction_step(solved_side, pool, shortfall * 2**attempt)
            if kind.exact_in:
                amount_out = amount_out.sub(min(step, amount_out))
            else:
                amount_in = amount_in.add(step)
            logger.debug(
                "invariant_noise_corrected",
                kind=kind.label,
                shortfall=shortfall,
                step=str(step),
                attempt=attempt,
            )
            invariant_after = self._invariant(pool.after_swap(kind.asset_in, amount_in, amount_out))

        if invariant_after < invariant_before:
            logger.warning(
                "invariant_decreased",
                kind=kind.label,
                amount=str(amount),
                invariant_before=invariant_before,
                invariant_after=invariant_after,
                curve=self.curve.name,
            )
            raise InvariantViolationError(invariant_before, invariant_after)

        # Step 9
        implied_price = self._implied_price(kind, pool, amount_in, amount_out)

        logger.debug(
            "swap_quoted",
            kind=kind.label,
            amount_in=str(amount_in),
            amount_out=str(amount_out),
            invariant_before=invariant_before,
            invariant_after=invariant_after,
            implied_price=implied_price,
            curve=self.curve.name,
        )
        return SwapQuote(
            kind=kind,
            amount_in=amount_in,
            amount_out=amount_out,
            invariant_before=invariant_before,
            invariant_after=invariant_after,
            implied_price=implied_price,
        )

    # =========================================================================
    # Steps
    # =========================================================================

    def _invariant(self, pool: PoolState) -> float:
        invariant = pool.invariant(self.curve)
        if not math.isfinite(invariant):
            raise CurveDomainError(
                f"Invariant is not finite for reserves risky={pool.reserve_risky}, "
                f"stable={pool.reserve_stable}, liquidity={pool.reserve_liquidity}"
            )
        return invariant

    def _known_per_liquidity(self, kind: SwapKind, pool: PoolState, amount: FixedPointValue) -> FixedPointValue:
        known = pool.reserve(kind.known_side)
        if kind.exact_in:
            updated = known.add(amount.mul(pool.params.gamma))
        else:
            updated = known.sub(amount)
        per_liquidity = updated.div(pool.reserve_liquidity)

        if kind.known_side is Asset.RISKY:
            bound = FixedPointValue.from_number(RISKY_PER_LIQUIDITY_BOUND, per_liquidity.decimals)
        else:
            bound = pool.strike
        if per_liquidity > bound:
            raise CurveDomainError(
                f"{kind.known_side.value.capitalize()} reserve per liquidity {per_liquidity} "
                f"exceeds curve bound {bound}"
            )
        return per_liquidity

    def _solve(
        self,
        solved_side: Asset,
        known_per_liquidity: FixedPointValue,
        params: CurveParameters,
        invariant: float,
    ) -> float:
        strike = float(params.strike)
        if solved_side is Asset.STABLE:
            solved = self.curve.stable_given_risky(
                known_per_liquidity.normalized, strike, params.sigma, params.tau, invariant
            )
        else:
            solved = self.curve.risky_given_stable(
                known_per_liquidity.normalized, strike, params.sigma, params.tau, invariant
            )

        if solved is None or not math.isfinite(solved):
            raise CurveDomainError(
                f"Next {solved_side.value} reserve is undefined for "
                f"{solved_side.other.value}={known_per_liquidity.normalized}, strike={strike}, "
                f"sigma={params.sigma}, tau={params.tau}, invariant={invariant}"
            )
        if solved < 0:
            if -solved > float(self.config.dust_tolerance):
                raise NegativeResultError(f"Next {solved_side.value} reserve cannot be negative: {solved}")
            solved = 0.0
        return solved

    def _noise(self, decimals: int, pool: PoolState) -> FixedPointValue:
        """Float noise bound for a reserve of the pool, scaled by its liquidity."""
        return FixedPointValue.from_number(self.config.dust_tolerance, decimals, round_up=True).mul_up(
            pool.reserve_liquidity
        )

    def _correction_step(self, solved_side: Asset, pool: PoolState, shortfall: float) -> FixedPointValue:
        """Solved-side amount that lifts the invariant by about ``shortfall``.

        k moves one for one with the stable reserve per liquidity and by the
        spot price with the risky one; the strike stands in for the spot
        price and repeated rounds double the shortfall to make up for it.
        """
        per_liquidity = shortfall
        if solved_side is Asset.RISKY:
            per_liquidity /= float(pool.params.strike)
        decimals = pool.reserve(solved_side).decimals
        return FixedPointValue.from_number(per_liquidity, decimals, round_up=True).mul_up(pool.reserve_liquidity)

    def _exact_in_output(self, old: FixedPointValue, new: FixedPointValue, noise: FixedPointValue) -> FixedPointValue:
        if new > old:
            shortfall = new.sub(old)
            if shortfall > noise:
                raise NegativeResultError(f"Output cannot be negative: -{shortfall}")
            return FixedPointValue.zero(old.decimals)
        return old.sub(new)

    def _exact_out_input(
        self,
        old: FixedPointValue,
        new: FixedPointValue,
        gamma: Decimal,
        noise: FixedPointValue,
    ) -> FixedPointValue:
        if new < old:
            surplus = old.sub(new)
            if surplus > noise:
                raise NegativeResultError(f"Input cannot be negative: -{surplus}")
            return FixedPointValue.zero(old.decimals)
        return new.sub(old).div_up(gamma)

    def _implied_price(
        self,
        kind: SwapKind,
        pool: PoolState,
        amount_in: FixedPointValue,
        amount_out: FixedPointValue,
    ) -> str:
        """Stable paid or received per risky, at the configured price decimals."""
        if amount_in.is_zero:
            return PRICE_INFINITY
        if kind.asset_in is Asset.RISKY:
            risky_flow, stable_flow = amount_in, amount_out
        else:
            risky_flow, stable_flow = amount_out, amount_in
        if risky_flow.is_zero:
            return PRICE_INFINITY

        price_decimals = self.config.price_decimals
        if price_decimals is None:
            price_decimals = pool.decimals_stable
        return str(stable_flow.rescale(price_decimals).div(risky_flow))


# =============================================================================
# Number-based entry points
# =============================================================================


def _pool_from_numbers(
    decimals_risky: int,
    decimals_stable: int,
    reserve_risky: Scalar,
    reserve_stable: Scalar,
    reserve_liquidity: Scalar,
    strike: Scalar,
    sigma: float,
    gamma: Scalar,
    tau_years: float,
) -> PoolState:
    params = CurveParameters(strike=to_decimal(strike), sigma=sigma, tau=tau_years, gamma=to_decimal(gamma))
    return PoolState.from_numbers(
        reserve_risky,
        reserve_stable,
        reserve_liquidity,
        decimals_risky,
        decimals_stable,
        params,
    )


def quote_exact_in(
    direction: Direction | str,
    amount_in: Scalar,
    decimals_risky: int,
    decimals_stable: int,
    reserve_risky: Scalar,
    reserve_stable: Scalar,
    reserve_liquidity: Scalar,
    strike: Scalar,
    sigma: float,
    gamma: Scalar,
    tau_years: float,
    *,
    curve: CurvePrimitives | None = None,
) -> SwapQuote:
    """Quote the output for an exact input, from plain decimal numbers.

    ``quote.amount`` is the output, at the decimals of the asset received.
    """
    pool = _pool_from_numbers(
        decimals_risky,
        decimals_stable,
        reserve_risky,
        reserve_stable,
        reserve_liquidity,
        strike,
        sigma,
        gamma,
        tau_years,
    )
    return SwapQuoter(curve).quote_exact_in(Direction(direction), pool, amount_in)


def quote_exact_out(
    direction: Direction | str,
    amount_out: Scalar,
    decimals_risky: int,
    decimals_stable: int,
    reserve_risky: Scalar,
    reserve_stable: Scalar,
    reserve_liquidity: Scalar,
    strike: Scalar,
    sigma: float,
    gamma: Scalar,
    tau_years: float,
    *,
    curve: CurvePrimitives | None = None,
) -> SwapQuote:
    """Quote the fee-inclusive input for an exact output, from plain decimal numbers.

    ``quote.amount`` is the input, at the decimals of the asset paid.
    """
    pool = _pool_from_numbers(
        decimals_risky,
        decimals_stable,
        reserve_risky,
        reserve_stable,
        reserve_liquidity,
        strike,
        sigma,
        gamma,
        tau_years,
    )
    return SwapQuoter(curve).quote_exact_out(Direction(direction), pool, amount_out)


# Default quoter, curve selected via RMM_CURVE
def _create_default_quoter() -> SwapQuoter:
    """Create the default quoter.

    RMM_CURVE selects the curve primitives: "approximate" (default) or
    "exact" for the scipy-backed reference.

    Raises:
        ValueError: If RMM_CURVE names an unknown curve
    """
    import os

    curve = get_curve(os.environ.get("RMM_CURVE", APPROXIMATE_CURVE.name))
    logger.info("default_quoter_created", curve=curve.name)
    return SwapQuoter(curve)


_default_quoter: SwapQuoter | None = None


def get_default_quoter() -> SwapQuoter:
    """Shared quoter instance, created on first use."""
    global _default_quoter
    if _default_quoter is None:
        _default_quoter = _create_default_quoter()
    return _default_quoter
