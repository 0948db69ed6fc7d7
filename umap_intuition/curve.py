"""
THE LOW-DIMENSIONAL KERNEL — fitting a and b

===============================================================
WHAT IT IS
===============================================================

In the embedding, similarity as a function of distance d is

    ν(d) = (1 + a · d^(2b))^(-1)

Smooth, cheap, with a simple gradient. But what we actually WANT is

    ψ(d) = 1                              at d = 0
           exp(-(d - min_dist) / spread)  for every d > 0

exponential decay measured from min_dist. Inside min_dist the target
rises ABOVE 1, which ν can never reach, so the fit pushes ν to stay
flat near 1 out to about min_dist: points that close count as
"touching".

ψ jumps at 0, so fit ν to ψ once by nonlinear least squares
(Levenberg–Marquardt via scipy), on 300 points over [0, 3·spread],
starting from a = b = 1.

Typical values:
    min_dist=0.1, spread=1.0  →  a ≈ 1.576, b ≈ 0.897

Deterministic: same (min_dist, spread), same (a, b).

===============================================================
"""

import numpy as np
from scipy.optimize import curve_fit

from .errors import CurveFitError, InvalidParameterError


N_CURVE_SAMPLES = 300


def low_dim_kernel(d, a, b):
    """ν(d) = (1 + a d^(2b))^(-1)"""
    return 1.0 / (1.0 + a * np.power(d, 2.0 * b))


def target_kernel(d, min_dist, spread):
    """ψ(d): 1 at d = 0, exp(-(d - min_dist) / spread) for d > 0."""
    d = np.asarray(d, dtype=np.float64)
    return np.where(d > 0.0, np.exp(-(d - min_dist) / spread), 1.0)


def fit_ab_params(min_dist, spread=1.0):
    """
    Fit (a, b) so that ν approximates ψ.

    Raises CurveFitError if the optimizer fails or lands on unusable
    parameters: the embedding optimizer cannot run without them.
    """
    if min_dist <= 0:
        raise InvalidParameterError(f"min_dist must be greater than 0, got {min_dist}")
    if spread <= 0:
        raise InvalidParameterError(f"spread must be greater than 0, got {spread}")

    xs = np.linspace(0.0, spread * 3.0, N_CURVE_SAMPLES)
    ys = target_kernel(xs, min_dist, spread)

    try:
        params, _ = curve_fit(low_dim_kernel, xs, ys, p0=(1.0, 1.0))
    except (RuntimeError, ValueError) as e:
        raise CurveFitError(
            f"curve fit failed for min_dist={min_dist}, spread={spread}: {e}") from e

    a, b = float(params[0]), float(params[1])
    if not (np.isfinite(a) and np.isfinite(b) and a > 0 and b > 0):
        raise CurveFitError(
            f"curve fit gave unusable parameters a={a}, b={b} "
            f"for min_dist={min_dist}, spread={spread}")
    return a, b
