"""Value objects for RMM swap quoting.

All types here are immutable and built fresh for each quote; nothing
persists across calls.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from rmm.constants import LIQUIDITY_DECIMALS, MAX_TOKEN_DECIMALS
from rmm.curve.base import CurvePrimitives
from rmm.errors import CurveDomainError, InvalidParameterError
from rmm.math.fixed_point import FixedPointValue, Scalar, to_decimal
from rmm.units import tau_years


class Asset(str, Enum):
    """The two assets held by a pool."""

    RISKY = "risky"
    STABLE = "stable"

    @property
    def other(self) -> Asset:
        return Asset.STABLE if self is Asset.RISKY else Asset.RISKY


class Direction(str, Enum):
    """Which asset the trader pays in."""

    RISKY_FOR_STABLE = "riskyForStable"
    STABLE_FOR_RISKY = "stableForRisky"

    @property
    def asset_in(self) -> Asset:
        return Asset.RISKY if self is Direction.RISKY_FOR_STABLE else Asset.STABLE

    @property
    def asset_out(self) -> Asset:
        return self.asset_in.other


class SwapKind(Enum):
    """The four quoting modes and their substitution rules.

    Each member carries the side whose post-trade reserve is known up
    front (``known_side``) and whether the known amount is paid in
    (exact-in) or taken out (exact-out):

    | kind             | known side        | solved side           | fee applied to          |
    |------------------|-------------------|-----------------------|-------------------------|
    | EXACT_RISKY_IN   | risky += in*gamma | stable (output)       | input before the solve  |
    | EXACT_STABLE_IN  | stable += in*gamma| risky (output)        | input before the solve  |
    | EXACT_RISKY_OUT  | risky -= out      | stable (raw input)    | computed input, / gamma |
    | EXACT_STABLE_OUT | stable -= out     | risky (raw input)     | computed input, / gamma |
    """

    EXACT_RISKY_IN = ("exactRiskyIn", Asset.RISKY, True)
    EXACT_STABLE_IN = ("exactStableIn", Asset.STABLE, True)
    EXACT_RISKY_OUT = ("exactRiskyOut", Asset.RISKY, False)
    EXACT_STABLE_OUT = ("exactStableOut", Asset.STABLE, False)

    def __init__(self, label: str, known_side: Asset, exact_in: bool) -> None:
        self.label = label
        self.known_side = known_side
        self.exact_in = exact_in

    @property
    def solved_side(self) -> Asset:
        return self.known_side.other

    @property
    def asset_in(self) -> Asset:
        return self.known_side if self.exact_in else self.solved_side

    @property
    def asset_out(self) -> Asset:
        return self.asset_in.other

    @property
    def direction(self) -> Direction:
        return Direction.RISKY_FOR_STABLE if self.asset_in is Asset.RISKY else Direction.STABLE_FOR_RISKY

    @classmethod
    def resolve(cls, direction: Direction, exact_in: bool) -> SwapKind:
        """Kind for a trade direction and quoting mode.

        An exact-out risky-for-stable trade fixes the stable amount taken out,
        so it resolves to EXACT_STABLE_OUT.
        """
        if exact_in:
            return cls.EXACT_RISKY_IN if direction.asset_in is Asset.RISKY else cls.EXACT_STABLE_IN
        return cls.EXACT_STABLE_OUT if direction.asset_out is Asset.STABLE else cls.EXACT_RISKY_OUT


@dataclass(frozen=True)
class CurveParameters:
    """Curve calibration of a pool.

    Attributes:
        strike: Strike price, in stable units per risky unit
        sigma: Implied volatility (1.0 = 100%)
        tau: Time until expiry in years
        gamma: Fee complement, 1 - fee. Must be in (0, 1]
    """

    strike: Decimal
    sigma: float
    tau: float
    gamma: Decimal

    def __post_init__(self) -> None:
        object.__setattr__(self, "strike", to_decimal(self.strike))
        object.__setattr__(self, "gamma", to_decimal(self.gamma))
        object.__setattr__(self, "sigma", float(self.sigma))
        object.__setattr__(self, "tau", float(self.tau))

        if self.strike <= 0:
            raise InvalidParameterError(f"Strike must be positive, got {self.strike}")
        if not math.isfinite(self.sigma) or self.sigma <= 0:
            raise InvalidParameterError(f"Sigma must be positive, got {self.sigma}")
        if not math.isfinite(self.tau) or self.tau < 0:
            raise InvalidParameterError(f"Tau must be non-negative, got {self.tau}")
        if not 0 < self.gamma <= 1:
            raise InvalidParameterError(f"Gamma must be in range (0, 1], got {self.gamma}")

    @classmethod
    def from_maturity(
        cls,
        strike: Scalar,
        sigma: float,
        maturity: int,
        last_timestamp: int,
        gamma: Scalar,
    ) -> CurveParameters:
        """Build parameters with tau derived from timestamps in seconds."""
        return cls(
            strike=to_decimal(strike),
            sigma=sigma,
            tau=tau_years(maturity, last_timestamp),
            gamma=to_decimal(gamma),
        )

    @property
    def fee(self) -> Decimal:
        return 1 - self.gamma


def _check_token_decimals(name: str, decimals: int) -> None:
    if not 0 <= decimals <= MAX_TOKEN_DECIMALS:
        raise InvalidParameterError(f"{name} decimals must be in range [0, {MAX_TOKEN_DECIMALS}], got {decimals}")


@dataclass(frozen=True)
class PoolState:
    """Reserves and calibration of one pool.

    Attributes:
        reserve_risky: Risky reserve at the risky token's decimals
        reserve_stable: Stable reserve at the stable token's decimals
        reserve_liquidity: Total liquidity, always at 18 decimals
        params: Curve calibration
    """

    reserve_risky: FixedPointValue
    reserve_stable: FixedPointValue
    reserve_liquidity: FixedPointValue
    params: CurveParameters

    def __post_init__(self) -> None:
        _check_token_decimals("Risky", self.reserve_risky.decimals)
        _check_token_decimals("Stable", self.reserve_stable.decimals)
        if self.reserve_liquidity.decimals != LIQUIDITY_DECIMALS:
            raise InvalidParameterError(
                f"Liquidity must use {LIQUIDITY_DECIMALS} decimals, got {self.reserve_liquidity.decimals}"
            )

    @classmethod
    def from_raw(
        cls,
        reserve_risky: int,
        reserve_stable: int,
        reserve_liquidity: int,
        decimals_risky: int,
        decimals_stable: int,
        params: CurveParameters,
    ) -> PoolState:
        """Build from integer amounts scaled by each token's decimals."""
        _check_token_decimals("Risky", decimals_risky)
        _check_token_decimals("Stable", decimals_stable)
        return cls(
            reserve_risky=FixedPointValue.from_raw(reserve_risky, decimals_risky),
            reserve_stable=FixedPointValue.from_raw(reserve_stable, decimals_stable),
            reserve_liquidity=FixedPointValue.from_raw(reserve_liquidity, LIQUIDITY_DECIMALS),
            params=params,
        )

    @classmethod
    def from_numbers(
        cls,
        reserve_risky: Scalar,
        reserve_stable: Scalar,
        reserve_liquidity: Scalar,
        decimals_risky: int,
        decimals_stable: int,
        params: CurveParameters,
    ) -> PoolState:
        """Build from decimal amounts, truncated to each token's decimals."""
        _check_token_decimals("Risky", decimals_risky)
        _check_token_decimals("Stable", decimals_stable)
        return cls(
            reserve_risky=FixedPointValue.from_number(reserve_risky, decimals_risky),
            reserve_stable=FixedPointValue.from_number(reserve_stable, decimals_stable),
            reserve_liquidity=FixedPointValue.from_number(reserve_liquidity, LIQUIDITY_DECIMALS),
            params=params,
        )

    @classmethod
    def from_reference_price(
        cls,
        params: CurveParameters,
        reference_price: float,
        liquidity: Scalar,
        decimals_risky: int,
        decimals_stable: int,
        curve: CurvePrimitives,
    ) -> PoolState:
        """Initial reserves of a pool created at a reference price of the risky asset.

        One unit of liquidity holds ``1 - delta`` risky, where delta is the
        call delta at the reference price, and the stable amount on the
        k = 0 curve for that risky reserve.

        Raises:
            CurveDomainError: If the curve has no stable reserve for that point
        """
        strike = float(params.strike)
        delta = curve.option_delta(strike, params.sigma, params.tau, reference_price)
        risky_per_liquidity = 1.0 - delta
        stable_per_liquidity = curve.stable_given_risky(risky_per_liquidity, strike, params.sigma, params.tau, 0.0)
        if stable_per_liquidity is None or stable_per_liquidity < 0:
            raise CurveDomainError(
                f"No stable reserve on the curve for risky reserve {risky_per_liquidity} "
                f"(reference price {reference_price})"
            )

        reserve_liquidity = FixedPointValue.from_number(liquidity, LIQUIDITY_DECIMALS)
        return cls(
            reserve_risky=FixedPointValue.from_number(risky_per_liquidity, decimals_risky).mul(reserve_liquidity),
            reserve_stable=FixedPointValue.from_number(stable_per_liquidity, decimals_stable).mul(
                reserve_liquidity
            ),
            reserve_liquidity=reserve_liquidity,
            params=params,
        )

    @property
    def decimals_risky(self) -> int:
        return self.reserve_risky.decimals

    @property
    def decimals_stable(self) -> int:
        return self.reserve_stable.decimals

    @property
    def strike(self) -> FixedPointValue:
        """Strike as a fixed-point value at the stable token's decimals."""
        return FixedPointValue.from_number(self.params.strike, self.decimals_stable)

    def reserve(self, asset: Asset) -> FixedPointValue:
        return self.reserve_risky if asset is Asset.RISKY else self.reserve_stable

    def per_liquidity(self, asset: Asset) -> FixedPointValue:
        """Reserve of ``asset`` per unit of liquidity.

        Raises:
            CurveDomainError: If the pool has no liquidity
        """
        if self.reserve_liquidity.is_zero:
            raise CurveDomainError("Pool has no liquidity")
        return self.reserve(asset).div(self.reserve_liquidity)

    def invariant(self, curve: CurvePrimitives) -> float:
        """Current invariant k on this pool's curve."""
        return curve.invariant(
            self.per_liquidity(Asset.RISKY).normalized,
            self.per_liquidity(Asset.STABLE).normalized,
            float(self.params.strike),
            self.params.sigma,
            self.params.tau,
            0.0,
        )

    def reported_price(self, curve: CurvePrimitives) -> float:
        """Spot price of the risky asset in stable units."""
        return curve.spot_price(
            self.per_liquidity(Asset.RISKY).normalized,
            float(self.params.strike),
            self.params.sigma,
            self.params.tau,
        )

    def apply(self, quote: SwapQuote) -> PoolState:
        """Pool state after the quoted trade settles."""
        return self.after_swap(quote.kind.asset_in, quote.amount_in, quote.amount_out)

    def after_swap(
        self,
        asset_in: Asset,
        amount_in: FixedPointValue,
        amount_out: FixedPointValue,
    ) -> PoolState:
        """Pool state with ``amount_in`` of ``asset_in`` added and ``amount_out`` of the other removed.

        Raises:
            NegativeResultError: If the output exceeds the reserve it comes from
            PrecisionMismatchError: If an amount is not at its asset's decimals
        """
        reserves = {
            Asset.RISKY: self.reserve_risky,
            Asset.STABLE: self.reserve_stable,
        }
        reserves[asset_in] = reserves[asset_in].add(amount_in)
        reserves[asset_in.other] = reserves[asset_in.other].sub(amount_out)
        return PoolState(
            reserve_risky=reserves[Asset.RISKY],
            reserve_stable=reserves[Asset.STABLE],
            reserve_liquidity=self.reserve_liquidity,
            params=self.params,
        )


@dataclass(frozen=True)
class SwapQuote:
    """Result of a quoting operation.

    Attributes:
        kind: Quoting mode that produced this quote
        amount_in: Amount the trader pays, fee included
        amount_out: Amount the trader receives
        invariant_before: Invariant of the pool before the trade
        invariant_after: Invariant recomputed from the post-trade reserves
        implied_price: Stable per risky for this trade, "Infinity" when the input is zero
    """

    kind: SwapKind
    amount_in: FixedPointValue
    amount_out: FixedPointValue
    invariant_before: float
    invariant_after: float
    implied_price: str

    @property
    def amount(self) -> FixedPointValue:
        """The computed side: output for exact-in quotes, input for exact-out quotes."""
        return self.amount_out if self.kind.exact_in else self.amount_in

    @property
    def direction(self) -> Direction:
        return self.kind.direction
