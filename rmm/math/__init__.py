"""Mathematical utilities for RMM quoting.

This package provides the fixed-point layer shared by every quote:
- FixedPointValue: decimal-tagged, non-negative fixed-point arithmetic
"""

from rmm.math.fixed_point import FixedPointValue, Scalar, to_decimal

__all__ = ["FixedPointValue", "Scalar", "to_decimal"]
