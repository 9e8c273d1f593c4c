"""Unit helpers for time-to-expiry and fee complements."""

from decimal import Decimal

from rmm.constants import BPS_MANTISSA, YEAR_IN_SECONDS
from rmm.errors import InvalidParameterError


def seconds_to_years(seconds: int) -> float:
    """Convert a duration in seconds to years of YEAR_IN_SECONDS."""
    return seconds / YEAR_IN_SECONDS


def tau_years(maturity: int, last_timestamp: int) -> float:
    """Time until expiry in years.

    Args:
        maturity: Expiry timestamp in seconds
        last_timestamp: Timestamp the pool was last updated at, in seconds

    Returns:
        Years until maturity, 0 once the pool has expired
    """
    return seconds_to_years(max(maturity - last_timestamp, 0))


def gamma_from_fee_bps(fee_bps: int) -> Decimal:
    """Fee complement for a fee expressed in basis points.

    A 15 bps fee gives gamma = 9985 / 10000 = 0.9985.

    Raises:
        InvalidParameterError: If fee_bps is not in [0, 10000)
    """
    if fee_bps < 0 or fee_bps >= BPS_MANTISSA:
        raise InvalidParameterError(f"Fee must be in range [0, {BPS_MANTISSA}) bps, got {fee_bps}")
    return Decimal(BPS_MANTISSA - fee_bps) / Decimal(BPS_MANTISSA)
