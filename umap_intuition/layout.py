"""
EMBEDDING OPTIMIZATION — SGD with negative sampling

===============================================================
WHAT IT IS
===============================================================

Make the low-D similarities ν(y_i, y_j) = (1 + a||y_i - y_j||^(2b))^(-1)
match the fuzzy simplicial set μ_ij. Cross-entropy has two sides:

    ATTRACTION:  μ_ij log(μ_ij / ν_ij)            pull neighbors together
    REPULSION:   (1-μ_ij) log((1-μ_ij)/(1-ν_ij))   push everyone else apart

Summing repulsion over all n² pairs is too expensive, so sample it.

===============================================================
ONE EPOCH
===============================================================

For every stored edge (i, j, p) of the graph:

    1. ACTIVATE with probability p (draw u, active if u ≤ p)

    2. ATTRACT (with sdist = ||y_i - y_j||²):
           δ = -2ab · sdist^(b-1) / (1 + a · sdist^b)
           g = clip(δ · (y_i - y_j))              clip to [-4, 4]
           y_i += α g,  y_j -= α g

    3. REPEL, neg_sample_rate times, k uniform over all points:
           δ = 2b / (0.001 + sdist) · (1 + a · sdist^b)
           g = clip(δ · (y_i - y_k))   if δ > 0
           g = 4                       if the points coincide
           y_i += α g                  (y_k is left alone)
       Drawing k == i is legal and contributes nothing.

After epoch e:  α = α₀ · (1 - e / n_epochs)

===============================================================
NOTES
===============================================================

- Edges are activated by a fresh Bernoulli draw every epoch, rather
  than on a precomputed per-edge schedule. Strong edges are visited
  almost every epoch, weak ones rarely.
- Coinciding (non-self) negative samples get the maximal push of 4 in
  every coordinate.
- The embedding is (n_components, n_samples): one COLUMN per point.
  It is updated in place.

===============================================================
"""

import numpy as np

from .errors import InvalidParameterError
from .utils import check_random_state


GRADIENT_CLIP = 4.0
REPULSION_EPS = 0.001


def clip(values, bound=GRADIENT_CLIP):
    """Clamp every coordinate of a gradient to [-bound, bound]."""
    return np.clip(values, -bound, bound)


def attractive_coefficient(sdist, a, b):
    """δ for a positive edge at squared distance sdist (0 when sdist is 0)."""
    if sdist > 0.0:
        return (-2.0 * a * b * sdist ** (b - 1.0)) / (1.0 + a * sdist ** b)
    return 0.0


def repulsive_coefficient(sdist, a, b):
    """δ for a negative sample at squared distance sdist > 0."""
    return (2.0 * b) / (REPULSION_EPS + sdist) * (1.0 + a * sdist ** b)


def sample_negatives(rng, n_vertices, n_samples):
    """Negative sample indices, uniform over all vertices (self included)."""
    return rng.integers(0, n_vertices, size=n_samples)


def optimize_embedding(graph, embedding, n_epochs, initial_alpha, a, b,
                       neg_sample_rate=5, random_state=None, verbose=False):
    """
    Refine an embedding by SGD over the edges of a fuzzy simplicial set.

    Args:
        graph: FuzzySimplicialSet
        embedding: (n_components, n_samples) float array, updated in place
        n_epochs: Number of passes over the stored edges
        initial_alpha: Learning rate of the first epoch
        a, b: Low-dimensional kernel parameters (see curve.fit_ab_params)
        neg_sample_rate: Negative samples per active edge
        random_state: Seed or Generator for activation and negative draws

    Returns:
        The same embedding array, optimized
    """
    if embedding.ndim != 2 or embedding.shape[1] != graph.n_vertices:
        raise InvalidParameterError(
            f"embedding must have shape (n_components, {graph.n_vertices}), "
            f"got {embedding.shape}")
    if not np.issubdtype(embedding.dtype, np.floating):
        raise InvalidParameterError("embedding must be a floating point array")

    rng = check_random_state(random_state)
    n_vertices = graph.n_vertices
    heads, tails, weights = graph.edges()
    n_edges = len(weights)

    # Row i of Y is column i of the embedding: writes go straight through
    Y = embedding.T
    alpha = initial_alpha
    report_every = max(n_epochs // 10, 1)

    for e in range(1, n_epochs + 1):
        activation = rng.random(n_edges)

        for edge in range(n_edges):
            if activation[edge] > weights[edge]:
                continue
            i = heads[edge]
            j = tails[edge]

            diff = Y[i] - Y[j]
            sdist = float(diff @ diff)
            delta = attractive_coefficient(sdist, a, b)
            grad = clip(delta * diff)
            Y[i] += alpha * grad
            Y[j] -= alpha * grad

            for k in sample_negatives(rng, n_vertices, neg_sample_rate):
                diff = Y[i] - Y[k]
                sdist = float(diff @ diff)
                if sdist > 0.0:
                    delta = repulsive_coefficient(sdist, a, b)
                elif k == i:
                    continue
                else:
                    delta = 0.0

                if delta > 0.0:
                    grad = clip(delta * diff)
                else:
                    grad = np.full_like(diff, GRADIENT_CLIP)
                Y[i] += alpha * grad

        alpha = initial_alpha * (1.0 - e / n_epochs)

        if verbose and (e % report_every == 0 or e == n_epochs):
            print(f"   epoch {e:>4}/{n_epochs}  alpha={alpha:.4f}")

    return embedding
