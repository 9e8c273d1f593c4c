"""Error taxonomy for RMM quoting.

Every error is terminal for the quote that raised it: the inputs caused
it, so nothing is retried. Each class carries a stable ``code`` used by
the service layer when reporting the failure.
"""


class RmmError(Exception):
    """Base error for RMM quoting operations."""

    code = "rmm_error"


class InvalidAmountError(RmmError):
    """Trade size is negative or not a finite number."""

    code = "invalid_amount"


class InvalidParameterError(RmmError):
    """Curve parameters or decimal counts are outside their valid range."""

    code = "invalid_parameter"


class PrecisionMismatchError(RmmError):
    """Two fixed-point values with different decimals were combined without a rescale."""

    code = "precision_mismatch"


class CurveDomainError(RmmError):
    """The trade pushes a reserve outside the trading curve's valid domain."""

    code = "curve_domain"


class NegativeResultError(RmmError):
    """A computed reserve, output or input amount is negative."""

    code = "negative_result"


class InvariantViolationError(RmmError):
    """Post-trade invariant is strictly less than the pre-trade invariant.

    Attributes:
        invariant_before: Invariant of the pool before the trade
        invariant_after: Invariant recomputed from the post-trade reserves
    """

    code = "invariant_violation"

    def __init__(self, invariant_before: float, invariant_after: float) -> None:
        self.invariant_before = invariant_before
        self.invariant_after = invariant_after
        super().__init__(f"Invariant decreased by: {invariant_before - invariant_after}")
