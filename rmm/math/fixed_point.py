"""Decimal-tagged fixed-point values.

This module implements the fixed-point convention of the settlement layer:
every amount is a non-negative integer scaled by 10^decimals, where the
decimal count is carried with the value. Risky and stable tokens may use
different precisions (e.g. 6 or 18) while liquidity always uses 18.

All arithmetic is exact integer arithmetic on the scaled value, truncated
toward zero at the caller's precision. The ``_up`` variants round up
instead, for amounts that must be rounded in the pool's favour. Floats
only appear at the edges:
when a value is built from a float, and in ``normalized`` where it is
handed to the curve primitives.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from rmm.constants import MAX_DECIMALS
from rmm.errors import (
    InvalidAmountError,
    InvalidParameterError,
    NegativeResultError,
    PrecisionMismatchError,
)

__all__ = [
    "FixedPointValue",
    "Scalar",
    "to_decimal",
]

Scalar = int | float | Decimal | str


# =============================================================================
# Scalar conversion
# =============================================================================


def to_decimal(value: Scalar) -> Decimal:
    """Convert a plain scalar to an exact, finite Decimal.

    Floats go through their shortest round-trip representation, so 0.1
    becomes Decimal("0.1") rather than its binary expansion.

    Raises:
        InvalidAmountError: If the value is NaN, infinite or not a number
        TypeError: If the value is not a supported scalar type
    """
    if isinstance(value, bool):
        raise TypeError("Booleans are not fixed-point scalars")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(repr(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value)
        except InvalidOperation as err:
            raise InvalidAmountError(f"Not a decimal number: '{value}'") from err
    else:
        raise TypeError(f"Unsupported scalar type: {type(value).__name__}")

    if not result.is_finite():
        raise InvalidAmountError(f"Amount must be finite, got {value}")
    return result


def _ceil_div(numerator: int, denominator: int) -> int:
    return -(-numerator // denominator)


def _scale(value: Scalar, decimals: int, round_up: bool = False) -> int:
    """Scale a scalar by 10^decimals, truncating toward zero (or away from it)."""
    numerator, denominator = to_decimal(value).as_integer_ratio()
    magnitude = abs(numerator) * 10**decimals
    scaled = _ceil_div(magnitude, denominator) if round_up else magnitude // denominator
    return scaled if numerator >= 0 else -scaled


def _check_decimals(decimals: int) -> None:
    if not 0 <= decimals <= MAX_DECIMALS:
        raise InvalidParameterError(f"Decimals must be in range [0, {MAX_DECIMALS}], got {decimals}")


# =============================================================================
# FixedPointValue
# =============================================================================


class FixedPointValue:
    """Non-negative decimal quantity with an explicit precision tag.

    Stored as ``raw`` scaled by 10^decimals.
    Example: 1.5 at 6 decimals is stored as raw=1_500_000.

    Combining rules:
    - add/sub with another value require equal decimals (an amount of a
      6-decimal token is never silently added to an 18-decimal one);
    - mul/div with another value form a ratio, so any precision is accepted;
    - a plain scalar is interpreted at this value's precision;
    - results always carry this value's decimals.
    """

    __slots__ = ("_raw", "_decimals")

    def __init__(self, raw: int, decimals: int) -> None:
        """Create from a raw scaled integer.

        Raises:
            InvalidParameterError: If decimals is outside [0, 77]
            NegativeResultError: If raw is negative
        """
        _check_decimals(decimals)
        if raw < 0:
            raise NegativeResultError(f"Fixed-point value cannot be negative: {raw} (decimals={decimals})")
        self._raw = raw
        self._decimals = decimals

    @classmethod
    def from_raw(cls, raw: int, decimals: int) -> FixedPointValue:
        """Create from a raw integer already scaled by 10^decimals."""
        return cls(raw, decimals)

    @classmethod
    def from_number(cls, value: Scalar, decimals: int, *, round_up: bool = False) -> FixedPointValue:
        """Create from a decimal number, truncating to ``decimals`` places.

        With ``round_up`` any remainder beyond ``decimals`` places rounds
        up to the next raw unit instead.

        Raises:
            InvalidAmountError: If the value is not finite
            NegativeResultError: If the value is negative
        """
        _check_decimals(decimals)
        return cls(_scale(value, decimals, round_up), decimals)

    @classmethod
    def zero(cls, decimals: int) -> FixedPointValue:
        return cls(0, decimals)

    # --- Views ---

    @property
    def raw(self) -> int:
        """The underlying scaled integer."""
        return self._raw

    @property
    def decimals(self) -> int:
        return self._decimals

    @property
    def scale(self) -> int:
        """10^decimals."""
        return 10**self._decimals

    @property
    def normalized(self) -> float:
        """Float view of the value, for the curve primitives."""
        return self._raw / self.scale

    @property
    def is_zero(self) -> bool:
        return self._raw == 0

    def to_decimal(self) -> Decimal:
        """Exact Decimal view of the value."""
        return Decimal(f"{self._raw}E-{self._decimals}")

    # --- Arithmetic ---

    def _same_precision_raw(self, other: FixedPointValue | Scalar) -> int:
        if isinstance(other, FixedPointValue):
            if other._decimals != self._decimals:
                raise PrecisionMismatchError(
                    f"Cannot combine {self._decimals}-decimal value with {other._decimals}-decimal value; "
                    "rescale one side first"
                )
            return other._raw
        return _scale(other, self._decimals)

    def add(self, other: FixedPointValue | Scalar) -> FixedPointValue:
        """Add another value of the same precision, or a scalar."""
        return FixedPointValue(self._raw + self._same_precision_raw(other), self._decimals)

    def sub(self, other: FixedPointValue | Scalar) -> FixedPointValue:
        """Subtract another value of the same precision, or a scalar.

        Raises:
            NegativeResultError: If the result would be negative
        """
        other_raw = self._same_precision_raw(other)
        result = self._raw - other_raw
        if result < 0:
            raise NegativeResultError(
                f"Fixed-point underflow: {self} - {FixedPointValue._format_raw(other_raw, self._decimals)}"
            )
        return FixedPointValue(result, self._decimals)

    def _product(self, other: FixedPointValue | Scalar) -> tuple[int, int]:
        """Exact raw product as a numerator/denominator pair."""
        if isinstance(other, FixedPointValue):
            return self._raw * other._raw, other.scale
        numerator, denominator = to_decimal(other).as_integer_ratio()
        if numerator < 0:
            raise NegativeResultError(f"Cannot multiply {self} by negative scalar {other}")
        return self._raw * numerator, denominator

    def _quotient(self, other: FixedPointValue | Scalar) -> tuple[int, int]:
        """Exact raw quotient as a numerator/denominator pair."""
        if isinstance(other, FixedPointValue):
            if other._raw == 0:
                raise ZeroDivisionError("Fixed-point division by zero")
            return self._raw * other.scale, other._raw
        numerator, denominator = to_decimal(other).as_integer_ratio()
        if numerator == 0:
            raise ZeroDivisionError("Fixed-point division by zero")
        if numerator < 0:
            raise NegativeResultError(f"Cannot divide {self} by negative scalar {other}")
        return self._raw * denominator, numerator

    def mul(self, other: FixedPointValue | Scalar) -> FixedPointValue:
        """Multiply, keeping this value's precision (truncated)."""
        numerator, denominator = self._product(other)
        return FixedPointValue(numerator // denominator, self._decimals)

    def mul_up(self, other: FixedPointValue | Scalar) -> FixedPointValue:
        """Multiply, keeping this value's precision (rounded up)."""
        numerator, denominator = self._product(other)
        return FixedPointValue(_ceil_div(numerator, denominator), self._decimals)

    def div(self, other: FixedPointValue | Scalar) -> FixedPointValue:
        """Divide, keeping this value's precision (truncated).

        Raises:
            ZeroDivisionError: If the divisor is zero
        """
        numerator, denominator = self._quotient(other)
        return FixedPointValue(numerator // denominator, self._decimals)

    def div_up(self, other: FixedPointValue | Scalar) -> FixedPointValue:
        """Divide, keeping this value's precision (rounded up)."""
        numerator, denominator = self._quotient(other)
        return FixedPointValue(_ceil_div(numerator, denominator), self._decimals)

    def rescale(self, decimals: int) -> FixedPointValue:
        """Return the same quantity at another precision (truncated when narrowing)."""
        _check_decimals(decimals)
        if decimals >= self._decimals:
            return FixedPointValue(self._raw * 10 ** (decimals - self._decimals), decimals)
        return FixedPointValue(self._raw // 10 ** (self._decimals - decimals), decimals)

    # --- Comparison ---

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FixedPointValue):
            return NotImplemented
        return self._raw == other._raw and self._decimals == other._decimals

    def __hash__(self) -> int:
        return hash((self._raw, self._decimals))

    def __lt__(self, other: FixedPointValue) -> bool:
        return self._raw < self._same_precision_raw(other)

    def __le__(self, other: FixedPointValue) -> bool:
        return self._raw <= self._same_precision_raw(other)

    def __gt__(self, other: FixedPointValue) -> bool:
        return self._raw > self._same_precision_raw(other)

    def __ge__(self, other: FixedPointValue) -> bool:
        return self._raw >= self._same_precision_raw(other)

    # --- Display ---

    @staticmethod
    def _format_raw(raw: int, decimals: int) -> str:
        text = format(Decimal(f"{raw}E-{decimals}"), "f")
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return text

    def __repr__(self) -> str:
        return f"FixedPointValue({self._raw}, decimals={self._decimals})"

    def __str__(self) -> str:
        return self._format_raw(self._raw, self._decimals)
