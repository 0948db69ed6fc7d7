"""
SPECTRAL INITIALIZATION — a structure-aware starting layout

===============================================================
WHAT IT IS
===============================================================

SGD from a random start has to discover the global arrangement of
the data by itself. Start it from the graph's own "low frequencies"
instead:

    D = diag(row sums of S)
    L = I - D^(-1/2) · S · D^(-1/2)        (normalized Laplacian)

The eigenvectors of L with the SMALLEST eigenvalues vary slowly over
the graph: connected points get similar values. The very first one
is trivial (∝ √degree), so skip it and use the next n_components
as coordinates.

This is exactly the spectral clustering embedding, used here only as
a starting point.

===============================================================
NUMERICAL POLICY
===============================================================

ARPACK (scipy.sparse.linalg.eigsh, which='SM'):
    - k = n_components + 1 eigenpairs
    - ncv = max(2k + 1, round(√N)) Lanczos vectors
    - maxiter = 5 · N, tol = 1e-4, start vector = all ones

The solver CAN fail (no convergence, isolated vertices, at most
n_components + 1 vertices). That is not fatal: the layout falls back
to uniform random coordinates in [-10, 10], a warning is emitted, and
the returned SpectralLayout says converged=False with the reason.

===============================================================
DISCONNECTED GRAPHS
===============================================================

Several connected components mean a zero eigenvalue per component
and an eigenproblem ARPACK handles badly. So lay out each component
on its own and translate it to a "meta" position:

    ≤ 2·dim components:  ±unit axis vectors
    more:                spectral layout of the component centroids

Each component is scaled to half the distance to its nearest
neighboring component, so components never overlap.

===============================================================
"""

from typing import NamedTuple, Optional
from warnings import warn

import numpy as np
import scipy.sparse
import scipy.sparse.csgraph
from scipy.sparse.linalg import ArpackError, eigsh
from scipy.spatial.distance import cdist

from .errors import InvalidParameterError
from .utils import check_random_state


INIT_SCALE = 10.0
INIT_NOISE = 1e-4


class SpectralLayout(NamedTuple):
    """Outcome of spectral initialization: converged, or fell back to random."""
    layout: np.ndarray
    converged: bool
    reason: Optional[str] = None


class _SolverFailure(Exception):
    pass


def random_layout(dim, n_vertices, random_state=None):
    """Uniform random coordinates in [-10, 10], shape (dim, n_vertices)."""
    rng = check_random_state(random_state)
    return rng.uniform(-INIT_SCALE, INIT_SCALE, size=(dim, n_vertices))


def _graph_matrix(graph):
    # Accept a FuzzySimplicialSet or any square matrix
    graph = getattr(graph, 'graph', graph)
    if scipy.sparse.issparse(graph):
        return scipy.sparse.csr_matrix(graph, dtype=np.float64)
    return scipy.sparse.csr_matrix(np.asarray(graph, dtype=np.float64))


def _connected_spectral_layout(graph, dim, tol=1e-4, maxiter=None):
    """
    Spectral layout of ONE connected graph. Raises on any solver trouble.

    Returns:
        (dim, n_vertices) layout
    """
    n = graph.shape[0]
    if n <= dim + 1:
        raise _SolverFailure(f"{n} vertices cannot give {dim} non-trivial eigenvectors")
    degrees = np.asarray(graph.sum(axis=1)).ravel()
    if np.any(degrees <= 0):
        raise _SolverFailure("graph has isolated vertices")

    D = scipy.sparse.diags(1.0 / np.sqrt(degrees))
    L = scipy.sparse.identity(n, format='csr') - D @ graph @ D

    k = dim + 1
    num_lanczos_vectors = min(max(2 * k + 1, int(round(np.sqrt(n)))), n)

    eigenvalues, eigenvectors = eigsh(L, k,
                                      which='SM',
                                      ncv=num_lanczos_vectors,
                                      tol=tol,
                                      v0=np.ones(n),
                                      maxiter=maxiter or n * 5)

    # Skip the trivial eigenvector (smallest eigenvalue)
    order = np.argsort(eigenvalues)[1:k]
    layout = eigenvectors[:, order].T

    if not np.all(np.isfinite(layout)):
        raise _SolverFailure("eigenvectors contain non-finite values")
    return layout


def _try_connected_layout(graph, dim, tol, maxiter):
    """(layout, None) on success, (None, reason) on failure."""
    try:
        with np.errstate(divide='ignore', invalid='ignore'):
            return _connected_spectral_layout(graph, dim, tol, maxiter), None
    except (ArpackError, ValueError, TypeError, np.linalg.LinAlgError, _SolverFailure) as e:
        return None, f"{type(e).__name__}: {e}"


def component_layout(data, n_components, component_labels, dim, random_state=None):
    """
    Relative positions of the connected components, shape (n_components, dim).

    With data: a dense spectral embedding of the component centroids,
    affinity exp(-d²). Without data there is nothing to go on, so guess.
    """
    rng = check_random_state(random_state)
    if data is None:
        return rng.random((n_components, dim)) * 10.0

    data = np.asarray(data, dtype=np.float64)
    centroids = np.vstack([data[component_labels == label].mean(axis=0)
                           for label in range(n_components)])
    affinity = np.exp(-cdist(centroids, centroids) ** 2)

    degrees = affinity.sum(axis=1)
    d_inv_sqrt = 1.0 / np.sqrt(degrees + 1e-10)
    L_norm = np.eye(n_components) - d_inv_sqrt[:, None] * affinity * d_inv_sqrt[None, :]

    _, eigenvectors = np.linalg.eigh(L_norm)
    embedding = eigenvectors[:, 1:dim + 1]
    return embedding / np.max(np.abs(embedding))


def multi_component_layout(graph, n_components, component_labels, dim,
                           random_state=None, data=None, tol=1e-4, maxiter=None):
    """
    Lay out each connected component separately, placed at its meta position.

    Returns:
        SpectralLayout with a (dim, n_vertices) layout; converged is False
        if any component needed the random fallback.
    """
    rng = check_random_state(random_state)
    graph = _graph_matrix(graph)
    result = np.empty((dim, graph.shape[0]))

    if n_components > 2 * dim:
        meta_embedding = component_layout(data, n_components, component_labels, dim, rng)
    else:
        k = int(np.ceil(n_components / 2.0))
        base = np.hstack([np.eye(k), np.zeros((k, dim - k))])
        meta_embedding = np.vstack([base, -base])[:n_components]

    failures = []
    for label in range(n_components):
        mask = component_labels == label
        size = int(mask.sum())
        center = meta_embedding[label][:, None]

        distances = np.linalg.norm(meta_embedding - meta_embedding[label], axis=1)
        positive = distances[distances > 0.0]
        data_range = positive.min() / 2.0 if positive.size else 1.0

        if size < 2 * dim or size <= dim + 1:
            result[:, mask] = rng.uniform(-data_range, data_range, size=(dim, size)) + center
            continue

        component_graph = graph[mask][:, mask]
        component_embedding, reason = _try_connected_layout(component_graph, dim, tol, maxiter)
        if component_embedding is None:
            failures.append(f"component {label}: {reason}")
            component_embedding = rng.uniform(-1.0, 1.0, size=(dim, size))

        scale = np.max(np.abs(component_embedding))
        expansion = data_range / scale if scale > 0 else data_range
        result[:, mask] = component_embedding * expansion + center

    if failures:
        reason = "; ".join(failures)
        warn(f"Spectral initialisation failed for some components ({reason}); "
             f"those components use a random layout.")
        return SpectralLayout(result, False, reason)
    return SpectralLayout(result, True, None)


def spectral_layout(graph, dim, random_state=None, data=None, tol=1e-4, maxiter=None):
    """
    Spectral layout of a fuzzy simplicial set.

    Args:
        graph: FuzzySimplicialSet or symmetric (n, n) matrix
        dim: Number of output coordinates
        random_state: Seed or Generator for the fallback paths
        data: Optional (n, n_features) data, used to place many components
        tol, maxiter: ARPACK controls (maxiter defaults to 5 · n)

    Returns:
        SpectralLayout(layout of shape (dim, n), converged, reason)
    """
    rng = check_random_state(random_state)
    graph = _graph_matrix(graph)
    n = graph.shape[0]

    n_components, labels = scipy.sparse.csgraph.connected_components(graph, directed=False)
    if n_components > 1:
        return multi_component_layout(graph, n_components, labels, dim, rng,
                                      data=data, tol=tol, maxiter=maxiter)

    layout, reason = _try_connected_layout(graph, dim, tol, maxiter)
    if layout is None:
        warn(f"Spectral initialisation failed ({reason}); "
             f"falling back to random layout.")
        return SpectralLayout(random_layout(dim, n, rng), False, reason)
    return SpectralLayout(layout, True, None)


def initialize_embedding(graph, dim, init='spectral', random_state=None, data=None):
    """
    Starting embedding for the optimizer, shape (dim, n_vertices).

    'spectral': spectral layout (or its fallback), rescaled so the largest
                |coordinate| is 10, plus N(0, 1e-4²) noise to break ties
    'random':   uniform in [-10, 10]
    array:      used as given (copied)

    Returns:
        embedding, converged — converged is None unless init='spectral'
    """
    rng = check_random_state(random_state)
    graph = _graph_matrix(graph)
    n = graph.shape[0]

    if isinstance(init, str) and init == 'spectral':
        result = spectral_layout(graph, dim, rng, data=data)
        embedding = result.layout
        scale = np.max(np.abs(embedding))
        if scale > 0:
            embedding = embedding * (INIT_SCALE / scale)
        embedding = embedding + rng.normal(scale=INIT_NOISE, size=embedding.shape)
        return embedding, result.converged

    if isinstance(init, str) and init == 'random':
        return random_layout(dim, n, rng), None

    if isinstance(init, str):
        raise InvalidParameterError(f"init must be 'spectral', 'random' or an array, got {init!r}")

    embedding = np.array(init, dtype=np.float64)
    if embedding.shape != (dim, n):
        raise InvalidParameterError(f"init array must have shape {(dim, n)}, got {embedding.shape}")
    return embedding, None
