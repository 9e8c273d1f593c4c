"""Shared pool constants for tests.

Usage:
    from tests.helpers import STRIKE, SIGMA
    # or
    from tests.helpers.constants import STRIKE, SIGMA
"""

from decimal import Decimal

# =============================================================================
# Curve calibration used across most tests
# =============================================================================

STRIKE = 1000
SIGMA = 1.0
TAU = 1.0
GAMMA = Decimal("0.99")

# Reference price at which the standard pool is created (at the money)
REFERENCE_PRICE = 1000.0

# =============================================================================
# Token precisions
# =============================================================================

WETH_DECIMALS = 18
DAI_DECIMALS = 18
USDC_DECIMALS = 6

# =============================================================================
# Pool from the worked example: 1 risky, 500 stable per unit of liquidity
# =============================================================================

SCENARIO_RESERVE_RISKY = 1
SCENARIO_RESERVE_STABLE = 500
SCENARIO_AMOUNT_IN = Decimal("0.1")
