"""
EMBEDDING QUALITY — how well did the layout keep the structure?

cluster_distance_ratio:
    mean intra-cluster distance / mean inter-cluster distance.
    Well below 1 means clusters stayed together and apart.

fuzzy_set_cross_entropy:
    The loss UMAP actually minimizes, evaluated exactly over all pairs:

    CE = Σ_{i≠j} μ_ij log(μ_ij / ν_ij) + (1 - μ_ij) log((1 - μ_ij) / (1 - ν_ij))

    O(n²) — for small datasets and ablations only.
"""

import numpy as np
from scipy.spatial.distance import pdist, squareform

from .curve import low_dim_kernel
from .errors import InvalidParameterError


def _points(embedding):
    # (n_components, n_samples) → one row per point
    return np.asarray(embedding, dtype=np.float64).T


def cluster_distance_ratio(embedding, labels):
    """
    Args:
        embedding: (n_components, n_samples) embedding
        labels: (n_samples,) cluster labels

    Returns:
        mean intra-cluster pairwise distance / mean inter-cluster pairwise distance
    """
    labels = np.asarray(labels)
    points = _points(embedding)
    if points.shape[0] != len(labels):
        raise InvalidParameterError(
            f"{len(labels)} labels for {points.shape[0]} embedded points")

    distances = squareform(pdist(points))
    same = labels[:, None] == labels[None, :]
    off_diagonal = ~np.eye(len(labels), dtype=bool)

    intra = distances[same & off_diagonal]
    inter = distances[~same]
    if intra.size == 0 or inter.size == 0:
        raise InvalidParameterError("need at least two clusters with two points each")
    return intra.mean() / inter.mean()


def fuzzy_set_cross_entropy(graph, embedding, a, b, eps=1e-4):
    """
    Exact fuzzy set cross-entropy between the graph and the embedding.

    Args:
        graph: FuzzySimplicialSet (or dense/sparse symmetric matrix)
        embedding: (n_components, n_samples) embedding
        a, b: Low-dimensional kernel parameters
    """
    mu = graph.toarray() if hasattr(graph, 'toarray') else np.asarray(graph, dtype=np.float64)
    points = _points(embedding)

    nu = low_dim_kernel(squareform(pdist(points)), a, b)
    mu = np.clip(mu, eps, 1.0 - eps)
    nu = np.clip(nu, eps, 1.0 - eps)

    ce = mu * np.log(mu / nu) + (1.0 - mu) * np.log((1.0 - mu) / (1.0 - nu))
    np.fill_diagonal(ce, 0.0)
    return ce.sum()
