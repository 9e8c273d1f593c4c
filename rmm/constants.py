"""Protocol constants for RMM quoting.

Centralizes precision conventions shared with the settlement layer.
"""

from decimal import Decimal

# Liquidity is always tracked with 18 decimals
LIQUIDITY_DECIMALS = 18

# Largest decimal count a pool token may use
MAX_TOKEN_DECIMALS = 18

# Largest decimal count the fixed-point layer accepts (fits a uint256)
MAX_DECIMALS = 77

# Fee complements are expressed against a 10_000 basis point mantissa
BPS_MANTISSA = 10_000

# The settlement layer counts a year as 364 days
YEAR_IN_SECONDS = 31_449_600

# Reported when a trade's input is zero and a price is undefined
PRICE_INFINITY = "Infinity"

# Risky reserves per unit of liquidity live in [0, 1]
RISKY_PER_LIQUIDITY_BOUND = Decimal(1)
