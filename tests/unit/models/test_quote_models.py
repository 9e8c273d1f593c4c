"""Tests for the service request and response models."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from rmm.constants import YEAR_IN_SECONDS
from rmm.math.fixed_point import FixedPointValue
from rmm.models import LimitsResponse, PoolModel, QuoteRequest, QuoteResponse
from rmm.models.types import UINT256_MAX, validate_uint256
from rmm.swaps.quoter import SwapQuoter
from rmm.swaps.types import Direction
from tests.helpers import USDC_DECIMALS, make_pool, make_pool_payload


class TestUint256:
    def test_accepts_string_and_int(self) -> None:
        assert validate_uint256("123") == "123"
        assert validate_uint256(123) == "123"

    def test_max_value(self) -> None:
        assert validate_uint256(str(UINT256_MAX)) == str(UINT256_MAX)

    @pytest.mark.parametrize("value", [-1, "-1", UINT256_MAX + 1, "1.5", "abc", True, 1.0, None])
    def test_rejects(self, value: object) -> None:
        with pytest.raises(ValueError):
            validate_uint256(value)


class TestPoolModel:
    def test_to_pool_state(self) -> None:
        pool = PoolModel.model_validate(make_pool_payload()).to_pool_state()
        assert pool == make_pool()

    def test_strike_uses_stable_decimals(self) -> None:
        payload = make_pool_payload(reserve_stable=300 * 10**6, decimals_stable=USDC_DECIMALS)
        pool = PoolModel.model_validate(payload).to_pool_state()
        assert pool.params.strike == Decimal(1000)
        assert pool.strike == FixedPointValue.from_number(1000, USDC_DECIMALS)

    def test_maturity(self) -> None:
        payload = make_pool_payload(tau=None, maturity=YEAR_IN_SECONDS // 2, lastTimestamp=0)
        pool = PoolModel.model_validate(payload).to_pool_state()
        assert pool.params.tau == pytest.approx(0.5)

    def test_fee_bps(self) -> None:
        payload = make_pool_payload(gamma=None, feeBps=15)
        assert PoolModel.model_validate(payload).to_pool_state().params.gamma == Decimal("0.9985")

    def test_populate_by_name(self) -> None:
        model = PoolModel(
            reserve_risky="1",
            reserve_stable="1",
            reserve_liquidity="1",
            decimals_risky=18,
            decimals_stable=18,
            strike="1",
            sigma=1.0,
            tau=1.0,
            gamma=Decimal(1),
        )
        assert model.reserve_liquidity == "1"

    def test_tau_takes_precedence(self) -> None:
        payload = make_pool_payload(maturity=0, lastTimestamp=0)
        assert PoolModel.model_validate(payload).to_pool_state().params.tau == 1.0

    @pytest.mark.parametrize(
        "overrides",
        [
            {"tau": None},
            {"tau": None, "maturity": 10},
            {"gamma": None},
            {"feeBps": 10},
            {"feeBps": 10_000, "gamma": None},
            {"tau": -1.0},
            {"decimalsStable": -1},
        ],
    )
    def test_invalid(self, overrides: dict) -> None:
        with pytest.raises(ValidationError):
            PoolModel.model_validate(make_pool_payload(**overrides))

    @pytest.mark.parametrize("missing", ["tau", "gamma"])
    def test_unvalidated_model_missing_alternative(self, missing: str) -> None:
        """model_construct skips validation, so conversion checks the alternatives itself."""
        fields: dict = {
            "reserve_risky": str(5 * 10**17),
            "reserve_stable": str(300 * 10**18),
            "reserve_liquidity": str(10**18),
            "decimals_risky": 18,
            "decimals_stable": 18,
            "strike": str(1000 * 10**18),
            "sigma": 1.0,
            "tau": 1.0,
            "gamma": Decimal("0.99"),
        }
        fields[missing] = None
        model = PoolModel.model_construct(**fields)
        with pytest.raises(ValueError, match=missing):
            model.to_pool_state()


class TestQuoteModels:
    def test_request(self) -> None:
        request = QuoteRequest.model_validate(
            {"direction": "stableForRisky", "amount": 10**18, "pool": make_pool_payload()}
        )
        assert request.direction is Direction.STABLE_FOR_RISKY
        assert request.amount == str(10**18)

    def test_response_from_quote(self) -> None:
        quote = SwapQuoter().quote_exact_out(Direction.RISKY_FOR_STABLE, make_pool(decimals_stable=6), 10)
        response = QuoteResponse.from_quote(quote)
        data = response.model_dump(by_alias=True, mode="json")

        assert data["kind"] == "exactStableOut"
        assert data["direction"] == "riskyForStable"
        assert data["amountOut"] == str(10 * 10**6)
        assert data["decimalsOut"] == 6
        assert data["decimalsIn"] == 18
        assert data["impliedPrice"] == quote.implied_price

    def test_limits_response_aliases(self) -> None:
        response = LimitsResponse(
            direction=Direction.RISKY_FOR_STABLE,
            max_delta_in="5",
            max_delta_out="7",
            decimals_in=18,
            decimals_out=6,
        )
        assert response.model_dump(by_alias=True)["maxDeltaIn"] == "5"
