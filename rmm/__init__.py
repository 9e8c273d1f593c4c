"""Replicating Market Maker swap quoter - Python Implementation."""

__version__ = "0.1.0"

from rmm.math.fixed_point import FixedPointValue  # noqa: E402
from rmm.swaps.quoter import SwapQuoter, get_default_quoter, quote_exact_in, quote_exact_out  # noqa: E402

__all__ = [
    "FixedPointValue",
    "SwapQuoter",
    "get_default_quoter",
    "quote_exact_in",
    "quote_exact_out",
    "__version__",
]
