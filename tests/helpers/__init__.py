"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Curve calibration, token precisions and the worked-example pool
- factories: Parameter, pool and API payload factory functions
"""

from tests.helpers.constants import (
    DAI_DECIMALS,
    GAMMA,
    REFERENCE_PRICE,
    SCENARIO_AMOUNT_IN,
    SCENARIO_RESERVE_RISKY,
    SCENARIO_RESERVE_STABLE,
    SIGMA,
    STRIKE,
    TAU,
    USDC_DECIMALS,
    WETH_DECIMALS,
)
from tests.helpers.factories import make_params, make_pool, make_pool_payload, make_reference_pool

__all__ = [
    # Constants
    "STRIKE",
    "SIGMA",
    "TAU",
    "GAMMA",
    "REFERENCE_PRICE",
    "WETH_DECIMALS",
    "DAI_DECIMALS",
    "USDC_DECIMALS",
    "SCENARIO_RESERVE_RISKY",
    "SCENARIO_RESERVE_STABLE",
    "SCENARIO_AMOUNT_IN",
    # Factories
    "make_params",
    "make_pool",
    "make_reference_pool",
    "make_pool_payload",
]
