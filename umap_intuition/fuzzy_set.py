"""
FUZZY SIMPLICIAL SET — the high-dimensional graph

===============================================================
WHAT IT IS
===============================================================

Each point builds its own little weighted star of neighbors:

    μ(i → j) = exp(-max(d_ij - ρ_i, 0) / σ_i)

The nearest neighbor gets weight 1, further ones decay. Self-edges
get weight 0.

These local views DISAGREE: j may be close from i's point of view
and far from j's own. Treat each directed weight as an independent
probability that the edge exists, and ask: what is the probability
that EITHER end considers them connected?

    μ_sym = μ + μᵀ - μ ⊙ μᵀ            (probabilistic OR)

That symmetric matrix is the fuzzy simplicial set.

===============================================================
UNION vs INTERSECTION
===============================================================

More generally two fuzzy sets A and B combine as

    ratio · (A + B - A ⊙ B)  +  (1 - ratio) · (A ⊙ B)
      └── fuzzy union ──┘          └ intersection ┘

ratio = 1: pure union (the default, and the formula above with B = Aᵀ)
ratio = 0: pure intersection (both ends must agree)

===============================================================
INVARIANTS
===============================================================

    - symmetric, exactly (not just approximately)
    - every weight in [0, 1]
    - zero diagonal, structural zeros dropped

===============================================================
"""

import numpy as np
import scipy.sparse

from .errors import AsymmetricGraphError, InvalidParameterError
from .neighbors import check_neighbor_table, pairwise_knn
from .smooth_knn import smooth_knn_dists


class FuzzySimplicialSet:
    """
    A symmetric sparse weight matrix with fast access to its stored edges.

    The matrix is validated once here; after that nothing mutates it.
    Construction from an asymmetric matrix raises AsymmetricGraphError.
    """

    def __init__(self, graph):
        if scipy.sparse.issparse(graph):
            graph = scipy.sparse.csr_matrix(graph, dtype=np.float64, copy=True)
        else:
            graph = scipy.sparse.csr_matrix(np.asarray(graph, dtype=np.float64))

        if graph.shape[0] != graph.shape[1]:
            raise AsymmetricGraphError(
                f"fuzzy simplicial set must be square, got shape {graph.shape}")
        if (graph != graph.T).nnz != 0:
            raise AsymmetricGraphError("fuzzy simplicial set must be symmetric")

        graph.eliminate_zeros()
        graph.sort_indices()
        self.graph = graph

        # Stored entries in row order; by symmetry this is also column order
        coo = graph.tocoo()
        self._heads = coo.row.astype(np.int64)
        self._tails = coo.col.astype(np.int64)
        self._weights = coo.data.copy()

    @property
    def n_vertices(self):
        return self.graph.shape[0]

    @property
    def n_edges(self):
        """Number of STORED entries (each undirected edge counts twice)."""
        return self.graph.nnz

    @property
    def shape(self):
        return self.graph.shape

    def edges(self):
        """(heads, tails, weights) of every stored entry."""
        return self._heads, self._tails, self._weights

    def degrees(self):
        """Row sums: the weighted degree of each vertex."""
        return np.asarray(self.graph.sum(axis=1)).ravel()

    def toarray(self):
        return self.graph.toarray()

    def __repr__(self):
        return f"FuzzySimplicialSet(n_vertices={self.n_vertices}, n_edges={self.n_edges})"


def compute_membership_strengths(knns, dists, rhos, sigmas):
    """
    Directed membership strengths of the 1-skeleton.

    For point i (a column) and its j-th neighbor:
        rows = knns[j, i]   (the neighbor)
        cols = i            (the source)
        vals = 0 if the neighbor is i itself, else exp(-max(d - ρ_i, 0) / σ_i)

    Returns:
        rows, cols, vals — flat arrays of length k × n_samples
    """
    knns = np.asarray(knns)
    dists = np.asarray(dists, dtype=np.float64)
    k, n = knns.shape

    cols = np.repeat(np.arange(n), k)
    rows = knns.T.ravel()
    d = dists.T.ravel()

    vals = np.exp(-np.maximum(d - rhos[cols], 0.0) / sigmas[cols])
    vals[rows == cols] = 0.0  # distance to self

    return rows.astype(np.int64), cols.astype(np.int64), vals


def _elementwise_product(A, B):
    if scipy.sparse.issparse(A):
        return A.multiply(B)
    if scipy.sparse.issparse(B):
        return B.multiply(A)
    return A * B


def general_fuzzy_set_combination(A, B, set_op_ratio=1.0):
    """
    ratio · (A + B - A ⊙ B) + (1 - ratio) · (A ⊙ B)

    Works on dense arrays and scipy sparse matrices alike.
    """
    if not 0.0 <= set_op_ratio <= 1.0:
        raise InvalidParameterError(
            f"set_op_ratio must be between 0 and 1, got {set_op_ratio}")

    if scipy.sparse.issparse(A) or scipy.sparse.issparse(B):
        A = scipy.sparse.csr_matrix(A, dtype=np.float64)
        B = scipy.sparse.csr_matrix(B, dtype=np.float64)
    else:
        A = np.asarray(A, dtype=np.float64)
        B = np.asarray(B, dtype=np.float64)
    if A.shape != B.shape:
        raise InvalidParameterError(f"cannot combine shapes {A.shape} and {B.shape}")

    prod = _elementwise_product(A, B)
    union = A + B - prod

    if set_op_ratio == 1.0:
        result = union
    elif set_op_ratio == 0.0:
        result = prod
    else:
        result = set_op_ratio * union + (1.0 - set_op_ratio) * prod

    if scipy.sparse.issparse(result):
        result = scipy.sparse.csr_matrix(result)
        result.eliminate_zeros()
    else:
        result = np.asarray(result)
    return result


def combine_fuzzy_sets(fs_set, set_op_ratio=1.0):
    """Combine a directed fuzzy set with its own transpose."""
    return general_fuzzy_set_combination(fs_set, fs_set.T, set_op_ratio)


def fuzzy_simplicial_set(X, n_neighbors, metric='euclidean', knn_provider=None,
                         set_operation_ratio=1.0, local_connectivity=1.0,
                         knns=None, dists=None):
    """
    Build the global fuzzy simplicial set of X.

    THE ALGORITHM:
        1. k nearest neighbors (provider, or a precomputed table)
        2. ρ, σ per point (smooth k-NN calibration)
        3. Directed membership strengths → sparse M[neighbor, source]
        4. Combine M with Mᵀ (fuzzy union by default)

    Returns:
        fs_set: FuzzySimplicialSet
        rhos, sigmas: the calibration of each point
    """
    n = X.shape[0] if X is not None else np.asarray(knns).shape[1]

    if knns is None or dists is None:
        if knn_provider is None:
            knns, dists = pairwise_knn(X, n_neighbors, metric)
        else:
            knns, dists = knn_provider(X, n_neighbors)
    knns, dists = check_neighbor_table(knns, dists, n)

    rhos, sigmas = smooth_knn_dists(dists, n_neighbors,
                                    local_connectivity=local_connectivity)

    rows, cols, vals = compute_membership_strengths(knns, dists, rhos, sigmas)
    # M[i, j] = probability that i is in the local simplicial set of j
    directed = scipy.sparse.coo_matrix((vals, (rows, cols)), shape=(n, n)).tocsr()
    directed.eliminate_zeros()

    combined = combine_fuzzy_sets(directed, set_operation_ratio)
    return FuzzySimplicialSet(combined), rhos, sigmas
