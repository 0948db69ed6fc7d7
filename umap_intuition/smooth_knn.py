"""
SMOOTH k-NN DISTANCES — per-point scale calibration

===============================================================
WHAT IT IS
===============================================================

Raw distances mean different things in dense and sparse regions.
A distance of 1.0 might be "very far" in a tight cluster and
"right next door" in a sparse one.

So every point gets its OWN ruler:

    ρ_i = distance to the nearest neighbor at a non-zero distance
    σ_i = bandwidth, chosen so that

        Σ_j exp(-max(d_ij - ρ_i, 0) / σ_i) = log₂(k)

After this, every point "sees" the same effective number of
neighbors, whatever the local density.

===============================================================
WHY BISECTION WORKS
===============================================================

The left-hand sum only grows as σ grows:
    σ → 0:  only neighbors at exactly ρ count (each contributes 1)
    σ → ∞:  every neighbor contributes 1, sum → k

Monotone in σ, so bisect. The upper end is unbounded, so start at
σ = 1 and DOUBLE until the sum overshoots, then halve as usual.

If the search does not hit the tolerance in niter steps, the best
midpoint is used anyway. That is an approximation, not an error.

===============================================================
LOCAL CONNECTIVITY
===============================================================

ρ_i says "the first local_connectivity neighbors are connected with
certainty". local_connectivity = 1 gives the plain nearest non-zero
distance; fractional values interpolate between neighbors.

===============================================================
"""

import numpy as np

from .errors import DegenerateDistancesError, InvalidParameterError


SMOOTH_K_TOLERANCE = 1e-5


def membership_sum(dists, rho, sigma):
    """
    Σ_j exp(-max(d_j - ρ, 0) / σ) — the quantity the bisection targets.

    Non-decreasing in σ for σ > 0.
    """
    return np.sum(np.exp(-np.maximum(np.asarray(dists) - rho, 0.0) / sigma))


def nearest_nonzero_distance(dists, local_connectivity=1.0, point=None):
    """
    ρ for one point: the local_connectivity-th smallest non-zero distance
    (interpolated for fractional values).
    """
    dists = np.asarray(dists, dtype=np.float64)
    non_zero = np.sort(dists[dists > 0.0])
    if non_zero.size == 0:
        raise DegenerateDistancesError(point)

    index = int(np.floor(local_connectivity))
    interpolation = local_connectivity - index

    if non_zero.size < local_connectivity:
        return non_zero[-1]
    if index == 0:
        return interpolation * non_zero[0]

    rho = non_zero[index - 1]
    if interpolation > SMOOTH_K_TOLERANCE:
        rho += interpolation * (non_zero[index] - non_zero[index - 1])
    return rho


def smooth_knn_dist(dists, k, niter=64, rho=0.0, ktol=SMOOTH_K_TOLERANCE, bandwidth=1.0):
    """
    Bisection for σ of a single point.

    Args:
        dists: Distances from the point to its k neighbors
        k: Effective neighbor count (may be non-integer)
        niter: Maximum bisection steps
        rho: The point's ρ
        ktol: Stop once |sum - target| < ktol

    Returns:
        σ (the last midpoint)
    """
    target = np.log2(k) * bandwidth
    lo, mid, hi = 0.0, 1.0, np.inf

    for _ in range(niter):
        psum = membership_sum(dists, rho, mid)
        if abs(psum - target) < ktol:
            break

        if psum > target:
            # Too many neighbors count: shrink
            hi = mid
            mid = (lo + hi) / 2.0
        else:
            lo = mid
            if hi == np.inf:
                mid *= 2.0
            else:
                mid = (lo + hi) / 2.0

    return mid


def smooth_knn_dists(knn_dists, k, niter=64, local_connectivity=1.0,
                     bandwidth=1.0, ktol=SMOOTH_K_TOLERANCE):
    """
    Calibrate every point of a neighbor table.

    Args:
        knn_dists: (k, n_samples) neighbor distances, one column per point
        k: Target neighbor count; the bisection aims at log₂(k)

    Returns:
        rhos: (n_samples,) nearest non-zero neighbor distances
        sigmas: (n_samples,) fitted bandwidths
    """
    knn_dists = np.asarray(knn_dists, dtype=np.float64)
    if knn_dists.ndim != 2:
        raise InvalidParameterError(
            f"knn_dists must be a (k, n_samples) array, got shape {knn_dists.shape}")
    if k <= 0:
        raise InvalidParameterError(f"k must be positive, got {k}")

    n = knn_dists.shape[1]
    rhos = np.zeros(n)
    sigmas = np.zeros(n)

    for i in range(n):
        column = knn_dists[:, i]
        rhos[i] = nearest_nonzero_distance(column, local_connectivity, point=i)
        sigmas[i] = smooth_knn_dist(column, k, niter, rhos[i], ktol, bandwidth)

    return rhos, sigmas
