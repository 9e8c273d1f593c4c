"""Standard normal distribution implementations.

Two implementations back the trading curve:

- ApproximateNormal: closed-form approximations of the kind evaluated by
  the settlement layer. Phi uses Abramowitz & Stegun formula 7.1.26 for
  erfc (absolute error below 1.5e-7), rescaled so that Phi(0) is exactly
  0.5. Phi^-1 starts from a rational approximation (central region) or
  a tail formula and is then refined with Halley steps against this same
  Phi, so that ``cdf(ppf(p)) == p`` to double precision. Without that refinement the
  forward and inverse curve functions disagree by ~1e-4 and a round trip
  through the curve would not return to its starting point.

- ScipyNormal: scipy.stats.norm, used as the high-precision reference.
"""

import math

from scipy.stats import norm

__all__ = [
    "ApproximateNormal",
    "ScipyNormal",
]

SQRT_2 = math.sqrt(2.0)
SQRT_2PI = math.sqrt(2.0 * math.pi)

# =============================================================================
# Abramowitz & Stegun 7.1.26 coefficients
# =============================================================================

ERFC_P = 0.3275911
ERFC_A1 = 0.254829592
ERFC_A2 = -0.284496736
ERFC_A3 = 1.421413741
ERFC_A4 = -1.453152027
ERFC_A5 = 1.061405429

# The coefficients sum to 0.999999999 rather than 1, so erfc(0) is rescaled to
# exactly 1 to keep Phi continuous at zero with Phi(0) == 0.5. Same Horner
# order as _erfc_non_negative at t = 1.
ERFC_NORM = (((ERFC_A5 + ERFC_A4) + ERFC_A3) + ERFC_A2) + ERFC_A1

# =============================================================================
# Inverse CDF coefficients
# =============================================================================

# Central region rational approximation, valid for LOW_TAIL <= p <= HIGH_TAIL
CENTRAL_A0 = 0.151015506
CENTRAL_A1 = -0.530357263
CENTRAL_A2 = 1.365020123
CENTRAL_B0 = 0.132089632
CENTRAL_B1 = -0.760732499

LOW_TAIL = 0.025
HIGH_TAIL = 1.0 - LOW_TAIL

# Tail region (Acklam), in terms of q = sqrt(-2 ln p)
TAIL_C = (
    -7.784894002430293e-03,
    -3.223964580411365e-01,
    -2.400758277161838e00,
    -2.549732539343734e00,
    4.374664141464968e00,
    2.938163982698783e00,
)
TAIL_D = (
    7.784695709041462e-03,
    3.224671290700398e-01,
    2.445134137142996e00,
    3.754408661907416e00,
)

PPF_REFINEMENT_STEPS = 2

# Beyond this |x| the refinement's exp(x^2 / 2) term overflows
PPF_REFINEMENT_LIMIT = 37.0


def _erfc_non_negative(z: float) -> float:
    """A&S 7.1.26 erfc(z) for z >= 0, normalised so that erfc(0) == 1."""
    t = 1.0 / (1.0 + ERFC_P * z)
    poly = ((((ERFC_A5 * t + ERFC_A4) * t + ERFC_A3) * t + ERFC_A2) * t + ERFC_A1) * t
    return poly / ERFC_NORM * math.exp(-z * z)


def _tail_ppf(p: float) -> float:
    """Lower-tail inverse CDF for 0 < p < LOW_TAIL."""
    q = math.sqrt(-2.0 * math.log(p))
    c0, c1, c2, c3, c4, c5 = TAIL_C
    d0, d1, d2, d3 = TAIL_D
    numerator = ((((c0 * q + c1) * q + c2) * q + c3) * q + c4) * q + c5
    denominator = (((d0 * q + d1) * q + d2) * q + d3) * q + 1.0
    return numerator / denominator


def _central_ppf(p: float) -> float:
    q = p - 0.5
    r = q * q
    numerator = CENTRAL_A1 * r + CENTRAL_A0
    denominator = r * r + CENTRAL_B1 * r + CENTRAL_B0
    return q * (CENTRAL_A2 + numerator / denominator)


class ApproximateNormal:
    """Closed-form standard normal approximations."""

    def cdf(self, x: float) -> float:
        if math.isnan(x):
            return math.nan
        tail = 0.5 * _erfc_non_negative(abs(x) / SQRT_2)
        return tail if x < 0 else 1.0 - tail

    def pdf(self, x: float) -> float:
        return math.exp(-0.5 * x * x) / SQRT_2PI

    def ppf(self, p: float) -> float:
        if math.isnan(p) or p < 0.0 or p > 1.0:
            return math.nan
        if p == 0.0:
            return -math.inf
        if p == 1.0:
            return math.inf

        if p < LOW_TAIL:
            x = _tail_ppf(p)
        elif p > HIGH_TAIL:
            x = -_tail_ppf(1.0 - p)
        else:
            x = _central_ppf(p)

        # Halley refinement against this cdf
        for _ in range(PPF_REFINEMENT_STEPS):
            if abs(x) >= PPF_REFINEMENT_LIMIT:
                break
            error = self.cdf(x) - p
            u = error * SQRT_2PI * math.exp(0.5 * x * x)
            x = x - u / (1.0 + 0.5 * x * u)
        return x


class ScipyNormal:
    """Reference standard normal backed by scipy.stats.norm."""

    def cdf(self, x: float) -> float:
        return float(norm.cdf(x))

    def pdf(self, x: float) -> float:
        return float(norm.pdf(x))

    def ppf(self, p: float) -> float:
        if math.isnan(p) or p < 0.0 or p > 1.0:
            return math.nan
        return float(norm.ppf(p))
