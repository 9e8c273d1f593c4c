"""Quoter configuration."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class QuoterConfig:
    """Tunable behavior of the swap quoter.

    Attributes:
        dust_tolerance: Float noise allowed per unit of liquidity. A solved
            reserve that overshoots the current one by at most this much
            (times liquidity) quotes a zero output or input instead of a
            negative one, and a post-trade invariant short of k by at most
            this much is corrected in the pool's favour rather than
            rejected. Positive outputs are never snapped to zero.
            Default: 1e-9
        noise_corrections: How many pool-favouring correction rounds a
            quote may take before an invariant shortfall is rejected.
            Default: 8
        price_decimals: Decimals used for the implied price. None means the
            stable token's decimals.
    """

    dust_tolerance: Decimal = Decimal("1e-9")
    noise_corrections: int = 8
    price_decimals: int | None = None


# Default configuration instance
DEFAULT_QUOTER_CONFIG = QuoterConfig()
