"""Pytest configuration and fixtures."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from rmm.api.endpoints import get_quoter
from rmm.api.main import app
from rmm.curve.replication import APPROXIMATE_CURVE, EXACT_CURVE
from rmm.swaps.quoter import SwapQuoter
from rmm.swaps.types import PoolState
from tests.helpers import USDC_DECIMALS, make_pool, make_reference_pool


@pytest.fixture
def quoter() -> SwapQuoter:
    """Quoter on the default (approximate) curve."""
    return SwapQuoter(APPROXIMATE_CURVE)


@pytest.fixture
def exact_quoter() -> SwapQuoter:
    """Quoter on the scipy-backed reference curve."""
    return SwapQuoter(EXACT_CURVE)


@pytest.fixture
def pool() -> PoolState:
    """0.5 risky / 300 stable / 1 liquidity, strike 1000, 18 decimals each."""
    return make_pool()


@pytest.fixture
def reference_pool() -> PoolState:
    """At-the-money pool on the k = 0 curve with 10 units of liquidity."""
    return make_reference_pool(liquidity=10)


@pytest.fixture
def usdc_pool() -> PoolState:
    """At-the-money pool with a 6-decimal stable token."""
    return make_reference_pool(liquidity=10, decimals_stable=USDC_DECIMALS)


# =============================================================================
# API client
# =============================================================================


@pytest.fixture
def client() -> Iterator[TestClient]:
    """Test client with the approximate quoter injected."""
    app.dependency_overrides[get_quoter] = lambda: SwapQuoter(APPROXIMATE_CURVE)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
