"""Pydantic models for the quoting service requests and responses.

All token amounts cross the wire as raw integers (decimal strings) scaled
by the token's decimals; liquidity is always scaled by 10^18.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from rmm.math.fixed_point import FixedPointValue
from rmm.models.types import TokenDecimals, Uint256
from rmm.swaps.types import CurveParameters, Direction, PoolState, SwapQuote
from rmm.units import gamma_from_fee_bps, tau_years


class PoolModel(BaseModel):
    """Pool reserves and curve calibration.

    Time to expiry is given either directly as ``tau`` (years) or as
    ``maturity`` and ``lastTimestamp`` (seconds). The fee is given either
    as ``gamma`` or as ``feeBps``.
    """

    reserve_risky: Uint256 = Field(alias="reserveRisky")
    reserve_stable: Uint256 = Field(alias="reserveStable")
    reserve_liquidity: Uint256 = Field(alias="reserveLiquidity", description="Total liquidity, 18 decimals")
    decimals_risky: TokenDecimals = Field(alias="decimalsRisky")
    decimals_stable: TokenDecimals = Field(alias="decimalsStable")
    strike: Uint256 = Field(description="Strike price, scaled by the stable token's decimals")
    sigma: float = Field(gt=0, description="Implied volatility, 1.0 = 100%")
    tau: float | None = Field(default=None, ge=0, description="Years until expiry")
    maturity: int | None = Field(default=None, ge=0)
    last_timestamp: int | None = Field(default=None, ge=0, alias="lastTimestamp")
    gamma: Decimal | None = Field(default=None, gt=0, le=1)
    fee_bps: int | None = Field(default=None, ge=0, lt=10_000, alias="feeBps")

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def _check_alternatives(self) -> PoolModel:
        if self.tau is None and (self.maturity is None or self.last_timestamp is None):
            raise ValueError("Either tau or both maturity and lastTimestamp are required")
        if (self.gamma is None) == (self.fee_bps is None):
            raise ValueError("Exactly one of gamma and feeBps is required")
        return self

    def to_pool_state(self) -> PoolState:
        """Build the core pool state.

        Raises:
            InvalidParameterError: If the curve parameters are out of range
            ValueError: If expiry or fee is missing (only possible when the
                model was built without validation)
        """
        if self.tau is not None:
            tau = self.tau
        elif self.maturity is not None and self.last_timestamp is not None:
            tau = tau_years(self.maturity, self.last_timestamp)
        else:
            raise ValueError("Either tau or both maturity and lastTimestamp are required")

        if self.gamma is not None:
            gamma = self.gamma
        elif self.fee_bps is not None:
            gamma = gamma_from_fee_bps(self.fee_bps)
        else:
            raise ValueError("Exactly one of gamma and feeBps is required")

        params = CurveParameters(
            strike=FixedPointValue.from_raw(int(self.strike), self.decimals_stable).to_decimal(),
            sigma=self.sigma,
            tau=tau,
            gamma=gamma,
        )
        return PoolState.from_raw(
            int(self.reserve_risky),
            int(self.reserve_stable),
            int(self.reserve_liquidity),
            self.decimals_risky,
            self.decimals_stable,
            params,
        )


class QuoteRequest(BaseModel):
    """Request body of the exact-in and exact-out quote endpoints.

    ``amount`` is the amount paid in for exact-in quotes and the amount
    taken out for exact-out quotes, scaled by that token's decimals.
    """

    direction: Direction
    amount: Uint256
    pool: PoolModel


class QuoteResponse(BaseModel):
    """A computed quote, amounts as raw integers."""

    kind: str
    direction: Direction
    amount_in: Uint256 = Field(alias="amountIn", description="Amount paid, fee included")
    amount_out: Uint256 = Field(alias="amountOut")
    decimals_in: int = Field(alias="decimalsIn")
    decimals_out: int = Field(alias="decimalsOut")
    invariant_before: float = Field(alias="invariantBefore")
    invariant_after: float = Field(alias="invariantAfter")
    implied_price: str = Field(alias="impliedPrice", description="Stable per risky, or 'Infinity'")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_quote(cls, quote: SwapQuote) -> QuoteResponse:
        return cls(
            kind=quote.kind.label,
            direction=quote.direction,
            amount_in=str(quote.amount_in.raw),
            amount_out=str(quote.amount_out.raw),
            decimals_in=quote.amount_in.decimals,
            decimals_out=quote.amount_out.decimals,
            invariant_before=quote.invariant_before,
            invariant_after=quote.invariant_after,
            implied_price=quote.implied_price,
        )


class LimitsRequest(BaseModel):
    """Request body of the trade-size limits endpoint."""

    direction: Direction
    pool: PoolModel


class LimitsResponse(BaseModel):
    """Largest input and output for a direction, as raw integers."""

    direction: Direction
    max_delta_in: Uint256 = Field(alias="maxDeltaIn")
    max_delta_out: Uint256 = Field(alias="maxDeltaOut")
    decimals_in: int = Field(alias="decimalsIn")
    decimals_out: int = Field(alias="decimalsOut")

    model_config = {"populate_by_name": True}


class ErrorResponse(BaseModel):
    """Body returned when a quote cannot be produced."""

    error: str = Field(description="Stable error code")
    detail: str
