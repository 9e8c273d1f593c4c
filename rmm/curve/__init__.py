"""Trading-curve primitives for the replicating market maker.

Curves:
- APPROXIMATE_CURVE: closed-form approximations (default for quoting)
- EXACT_CURVE: scipy-backed reference, for checking approximation error
"""

from rmm.curve.base import CurvePrimitives, NormalDistribution
from rmm.curve.normal import ApproximateNormal, ScipyNormal
from rmm.curve.replication import (
    APPROXIMATE_CURVE,
    EXACT_CURVE,
    ReplicatingCurve,
    get_curve,
    proportional_volatility,
)

__all__ = [
    # Protocols
    "CurvePrimitives",
    "NormalDistribution",
    # Normal distributions
    "ApproximateNormal",
    "ScipyNormal",
    # Curves
    "ReplicatingCurve",
    "APPROXIMATE_CURVE",
    "EXACT_CURVE",
    "get_curve",
    "proportional_volatility",
]
