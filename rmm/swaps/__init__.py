"""Swap quoting for replicating market maker pools."""

from rmm.swaps.config import DEFAULT_QUOTER_CONFIG, QuoterConfig
from rmm.swaps.limits import MaxSwapCalculator, max_delta_in, max_delta_out
from rmm.swaps.pricing import (
    marginal_price_after_swap,
    reported_price_of_risky,
    risky_reserves_given_reference_price,
)
from rmm.swaps.quoter import SwapQuoter, get_default_quoter, quote_exact_in, quote_exact_out
from rmm.swaps.types import (
    Asset,
    CurveParameters,
    Direction,
    PoolState,
    SwapKind,
    SwapQuote,
)

__all__ = [
    # Types
    "Asset",
    "Direction",
    "SwapKind",
    "CurveParameters",
    "PoolState",
    "SwapQuote",
    # Config
    "QuoterConfig",
    "DEFAULT_QUOTER_CONFIG",
    # Quoting
    "SwapQuoter",
    "get_default_quoter",
    "quote_exact_in",
    "quote_exact_out",
    # Limits
    "MaxSwapCalculator",
    "max_delta_in",
    "max_delta_out",
    # Pricing
    "marginal_price_after_swap",
    "reported_price_of_risky",
    "risky_reserves_given_reference_price",
]
