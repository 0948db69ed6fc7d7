"""
NEAREST NEIGHBORS — the input to everything else

===============================================================
WHAT IT IS
===============================================================

UMAP never looks at the whole distance matrix. It only needs, for each
point, its k nearest neighbors and the distances to them:

    knns[j, i]  = index of the j-th nearest neighbor of point i
    dists[j, i] = distance from point i to that neighbor

One COLUMN per point, k ROWS, nearest first. Everything downstream
(calibration, membership strengths) walks these columns.

The search itself is pluggable. Any callable

    provider(X, k) -> (knns, dists)     both of shape (k, n_samples)

can replace the brute-force default here (an approximate index for
large data, a precomputed table, ...).

===============================================================
BRUTE FORCE
===============================================================

    1. All pairwise distances: O(n²) memory, fine for a few thousand points
    2. A point is never its own neighbor (diagonal set to ∞)
    3. Stable sort, so ties keep index order

===============================================================
"""

import numpy as np
from scipy.spatial.distance import cdist

from .errors import InvalidParameterError


# Friendly names → scipy names
METRIC_ALIASES = {
    'l2': 'euclidean',
    'l1': 'cityblock',
    'manhattan': 'cityblock',
    'taxicab': 'cityblock',
    'linf': 'chebyshev',
}


def resolve_metric(metric):
    """Map a metric alias to the name scipy understands; callables pass through."""
    if callable(metric):
        return metric
    if not isinstance(metric, str):
        raise InvalidParameterError(f"metric must be a string or callable, got {metric!r}")
    return METRIC_ALIASES.get(metric.lower(), metric.lower())


def pairwise_distances(X, metric='euclidean'):
    """
    All pairwise distances between the rows of X.

    metric may be any scipy.spatial.distance name (or alias above), or a
    callable d(u, v) -> float. The callable only needs to be symmetric and
    non-negative: a semimetric is enough.
    """
    X = np.asarray(X, dtype=np.float64)
    try:
        distances = cdist(X, X, metric=resolve_metric(metric))
    except ValueError as e:
        raise InvalidParameterError(f"Unsupported metric {metric!r}: {e}") from e

    if np.any(distances < 0) or not np.all(np.isfinite(distances)):
        raise InvalidParameterError(
            "metric produced negative or non-finite distances")
    return distances


def pairwise_knn(X, k, metric='euclidean'):
    """
    Exact k-nearest neighbors by brute force.

    Args:
        X: Data, shape (n_samples, n_features)
        k: Number of neighbors (self excluded), 0 < k < n_samples
        metric: Distance name or callable

    Returns:
        knns: (k, n_samples) neighbor indices, nearest first
        dists: (k, n_samples) matching distances
    """
    X = np.asarray(X, dtype=np.float64)
    n = X.shape[0]
    if not 0 < k < n:
        raise InvalidParameterError(f"k must satisfy 0 < k < n_samples ({n}), got {k}")

    distances = pairwise_distances(X, metric)
    np.fill_diagonal(distances, np.inf)  # exclude self

    # Each row sorted independently; stable so ties resolve by index
    order = np.argsort(distances, axis=1, kind='stable')[:, :k]
    knn_dists = np.take_along_axis(distances, order, axis=1)

    return order.T.copy(), knn_dists.T.copy()


def check_neighbor_table(knns, dists, n_samples):
    """
    Validate a neighbor table coming from an external provider.

    Returns the table as (int64 indices, float64 distances).
    """
    knns = np.asarray(knns)
    dists = np.asarray(dists, dtype=np.float64)

    if knns.ndim != 2 or knns.shape != dists.shape:
        raise InvalidParameterError(
            f"neighbor indices {knns.shape} and distances {dists.shape} "
            f"must be matching (k, n_samples) arrays")
    if knns.shape[1] != n_samples:
        raise InvalidParameterError(
            f"neighbor table has {knns.shape[1]} columns, expected {n_samples}")
    if not np.issubdtype(knns.dtype, np.integer):
        raise InvalidParameterError("neighbor indices must be integers")
    if knns.size and (knns.min() < 0 or knns.max() >= n_samples):
        raise InvalidParameterError("neighbor index out of range")
    if np.any(dists < 0) or not np.all(np.isfinite(dists)):
        raise InvalidParameterError("neighbor distances must be finite and non-negative")

    return knns.astype(np.int64), dists
