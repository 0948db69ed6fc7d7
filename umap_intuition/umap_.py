"""
UNIFORM MANIFOLD APPROXIMATION AND PROJECTION (UMAP) — Paradigm: TOPOLOGICAL EMBEDDING

===============================================================
WHAT IT IS (THE CORE IDEA)
===============================================================

Build a GRAPH of neighborhoods in high-D. Optimize a low-D layout
to have a SIMILAR graph. Preserves local AND some global structure.

    1. In high-D: connect each point to its k nearest neighbors
       (fuzzy edges, closer = stronger), one local ruler per point
    2. In low-D: place points so that the connection pattern is as
       similar as possible

===============================================================
THE PIPELINE
===============================================================

    neighbors    →  k-NN table                      (neighbors.py)
    smooth_knn   →  ρ, σ per point                  (smooth_knn.py)
    fuzzy_set    →  symmetric fuzzy simplicial set  (fuzzy_set.py)
    curve        →  a, b from (min_dist, spread)    (curve.py)
    spectral     →  initial layout                  (spectral.py)
    layout       →  SGD refinement                  (layout.py)

===============================================================
SHAPES
===============================================================

    X:          (n_samples, n_features)
    graph:      (n_samples, n_samples) sparse, symmetric
    embedding:  (n_components, n_samples) — one COLUMN per point

UMAP.fit_transform returns the transpose, (n_samples, n_components),
like every other estimator in this collection.

===============================================================
"""

import numpy as np

from .curve import fit_ab_params
from .errors import AsymmetricGraphError, InvalidParameterError
from .fuzzy_set import FuzzySimplicialSet, fuzzy_simplicial_set
from .layout import optimize_embedding
from .spectral import initialize_embedding
from .utils import check_random_state


class UMAPResult:
    """
    The output of a UMAP run: the fuzzy graph and the embedding.

    The graph must be symmetric; anything else is a construction bug.
    """

    def __init__(self, graph, embedding):
        if not isinstance(graph, FuzzySimplicialSet):
            try:
                graph = FuzzySimplicialSet(graph)
            except AsymmetricGraphError as e:
                raise AsymmetricGraphError(
                    f"UMAPResult expected a symmetric graph: {e}") from e
        self.graph = graph
        self.embedding = embedding

    def __iter__(self):
        # Allows: graph, embedding = embed(X)
        return iter((self.graph, self.embedding))

    def __repr__(self):
        return (f"UMAPResult(n_samples={self.graph.n_vertices}, "
                f"n_components={self.embedding.shape[0]})")


def check_parameters(X, n_neighbors, n_components, min_dist, spread=1.0,
                     init='spectral', set_operation_ratio=1.0, n_epochs=300,
                     learning_rate=1.0, local_connectivity=1.0, neg_sample_rate=5,
                     a=None, b=None):
    """
    Validate everything before any computation starts.

    Returns X as a float64 array of shape (n_samples, n_features).
    """
    X = np.asarray(X, dtype=np.float64)
    if X.ndim != 2:
        raise InvalidParameterError(
            f"X must be a sequence of equal-length vectors, got shape {X.shape}")
    n, d = X.shape

    if not n > n_neighbors > 0:
        raise InvalidParameterError(
            "number of samples must be greater than n_neighbors and "
            f"n_neighbors must be greater than 0 (n_samples={n}, n_neighbors={n_neighbors})")
    if not d > n_components > 1:
        raise InvalidParameterError(
            "n_components must be greater than 1 and less than the dimensionality "
            f"of the data (n_components={n_components}, n_features={d})")
    if not min_dist > 0:
        raise InvalidParameterError(f"min_dist must be greater than 0, got {min_dist}")
    if not spread > 0:
        raise InvalidParameterError(f"spread must be greater than 0, got {spread}")
    if not 0.0 <= set_operation_ratio <= 1.0:
        raise InvalidParameterError(
            f"set_operation_ratio must be between 0 and 1, got {set_operation_ratio}")
    if n_epochs < 0:
        raise InvalidParameterError(f"n_epochs must be non-negative, got {n_epochs}")
    if not learning_rate > 0:
        raise InvalidParameterError(f"learning_rate must be positive, got {learning_rate}")
    if not local_connectivity > 0:
        raise InvalidParameterError(
            f"local_connectivity must be positive, got {local_connectivity}")
    if neg_sample_rate < 0:
        raise InvalidParameterError(
            f"neg_sample_rate must be non-negative, got {neg_sample_rate}")
    if (a is None) != (b is None):
        raise InvalidParameterError("a and b must be given together")
    if a is not None and not (a > 0 and b > 0):
        raise InvalidParameterError(f"a and b must be positive, got a={a}, b={b}")

    if isinstance(init, str):
        if init not in ('spectral', 'random'):
            raise InvalidParameterError(
                f"init must be 'spectral', 'random' or an array, got {init!r}")
    elif np.shape(init) != (n_components, n):
        raise InvalidParameterError(
            f"init array must have shape {(n_components, n)}, got {np.shape(init)}")

    return X


def embed(X, n_neighbors=15, n_components=2, metric='euclidean', n_epochs=300,
          learning_rate=1.0, init='spectral', min_dist=0.1, spread=1.0,
          set_operation_ratio=1.0, local_connectivity=1.0, neg_sample_rate=5,
          a=None, b=None, random_state=None, knn_provider=None, verbose=False):
    """
    Embed X into n_components dimensions.

    Args:
        X: Data, shape (n_samples, n_features)
        n_neighbors: Neighborhood size (small = local, large = global)
        n_components: Output dimensionality, 1 < n_components < n_features
        metric: Input-space distance (scipy name or callable)
        n_epochs: SGD epochs
        learning_rate: Initial SGD step size
        init: 'spectral', 'random', or an (n_components, n_samples) array
        min_dist: Minimum spacing of embedded points (> 0)
        spread: Scale of embedded points
        set_operation_ratio: 1 = fuzzy union, 0 = fuzzy intersection
        local_connectivity: Neighbors assumed connected with certainty
        neg_sample_rate: Negative samples per active edge
        a, b: Kernel parameters; fitted from min_dist/spread when omitted
        random_state: None, int seed, or numpy Generator
        knn_provider: callable (X, k) -> (knns, dists), both (k, n_samples)
        verbose: Print progress

    Returns:
        UMAPResult(graph, embedding) with embedding of shape (n_components, n_samples)
    """
    X = check_parameters(X, n_neighbors, n_components, min_dist, spread, init,
                         set_operation_ratio, n_epochs, learning_rate,
                         local_connectivity, neg_sample_rate, a, b)
    result, _ = _run(X, n_neighbors, n_components, metric, n_epochs, learning_rate,
                     init, min_dist, spread, set_operation_ratio, local_connectivity,
                     neg_sample_rate, a, b, random_state, knn_provider, verbose)
    return result


def _run(X, n_neighbors, n_components, metric, n_epochs, learning_rate, init,
         min_dist, spread, set_operation_ratio, local_connectivity, neg_sample_rate,
         a, b, random_state, knn_provider, verbose):
    rng = check_random_state(random_state)

    if verbose:
        print(f"   Step 1: Building fuzzy simplicial set ({n_neighbors} neighbors)...")
    graph, rhos, sigmas = fuzzy_simplicial_set(
        X, n_neighbors, metric, knn_provider=knn_provider,
        set_operation_ratio=set_operation_ratio,
        local_connectivity=local_connectivity)

    if a is None:
        if verbose:
            print(f"   Step 2: Fitting a, b (min_dist={min_dist}, spread={spread})...")
        a, b = fit_ab_params(min_dist, spread)

    if verbose:
        label = init if isinstance(init, str) else 'array'
        print(f"   Step 3: Initializing embedding ({label})...")
    embedding, converged = initialize_embedding(graph, n_components, init, rng, data=X)

    if verbose:
        print(f"   Step 4: Optimizing ({n_epochs} epochs)...")
    embedding = optimize_embedding(graph, embedding, n_epochs, learning_rate, a, b,
                                   neg_sample_rate=neg_sample_rate,
                                   random_state=rng, verbose=verbose)

    details = {'a': a, 'b': b, 'rhos': rhos, 'sigmas': sigmas, 'init_converged': converged}
    return UMAPResult(graph, embedding), details


class UMAP:
    """
    Uniform Manifold Approximation and Projection — TOPOLOGICAL EMBEDDING.

    Build a fuzzy graph in high-D, optimize low-D to match it.

    Parameters:
    -----------
    n_components : int
        Output dimensionality (usually 2).
    n_neighbors : int
        Number of nearest neighbors (controls local vs global).
    min_dist : float
        Minimum distance in embedding (controls cluster tightness).
    spread : float
        Effective scale of embedded points.
    n_epochs : int
        Number of optimization epochs.
    learning_rate : float
        Initial SGD learning rate.
    random_state : int, Generator or None
        Random seed.
    init : str or array
        Initialization: 'spectral', 'random', or (n_components, n_samples).
    negative_sample_rate : int
        Number of negative samples per positive edge.
    metric : str or callable
        Distance in the input space.
    set_operation_ratio : float
        1.0 = fuzzy union, 0.0 = fuzzy intersection.
    local_connectivity : float
        Number of neighbors assumed connected with certainty.
    a, b : float or None
        Kernel parameters; fitted from min_dist and spread when None.
    knn_provider : callable or None
        (X, k) -> (knns, dists); brute force when None.
    verbose : bool
        Print progress.
    """

    def __init__(self, n_components=2, n_neighbors=15, min_dist=0.1, spread=1.0,
                 n_epochs=300, learning_rate=1.0, random_state=None,
                 init='spectral', negative_sample_rate=5, metric='euclidean',
                 set_operation_ratio=1.0, local_connectivity=1.0,
                 a=None, b=None, knn_provider=None, verbose=False):
        self.n_components = n_components
        self.n_neighbors = n_neighbors
        self.min_dist = min_dist
        self.spread = spread
        self.n_epochs = n_epochs
        self.learning_rate = learning_rate
        self.random_state = random_state
        self.init = init
        self.negative_sample_rate = negative_sample_rate
        self.metric = metric
        self.set_operation_ratio = set_operation_ratio
        self.local_connectivity = local_connectivity
        self.a = a
        self.b = b
        self.knn_provider = knn_provider
        self.verbose = verbose

        # Attributes set after fit
        self.graph_ = None
        self.embedding_ = None
        self.a_ = None
        self.b_ = None
        self.rhos_ = None
        self.sigmas_ = None
        self.init_converged_ = None

    def fit(self, X):
        """
        Compute the fuzzy graph and the embedding of X.

        THE ALGORITHM:
            1. Find k-nearest neighbors, calibrate ρ and σ
            2. Compute fuzzy membership strengths, symmetrize
            3. Fit a, b
            4. Initialize embedding (spectral or random)
            5. Optimize via SGD with negative sampling
        """
        X = check_parameters(X, self.n_neighbors, self.n_components, self.min_dist,
                             self.spread, self.init, self.set_operation_ratio,
                             self.n_epochs, self.learning_rate,
                             self.local_connectivity, self.negative_sample_rate,
                             self.a, self.b)
        result, details = _run(X, self.n_neighbors, self.n_components, self.metric,
                               self.n_epochs, self.learning_rate, self.init,
                               self.min_dist, self.spread, self.set_operation_ratio,
                               self.local_connectivity, self.negative_sample_rate,
                               self.a, self.b, self.random_state, self.knn_provider,
                               self.verbose)

        self.graph_ = result.graph
        self.embedding_ = result.embedding
        self.a_ = details['a']
        self.b_ = details['b']
        self.rhos_ = details['rhos']
        self.sigmas_ = details['sigmas']
        self.init_converged_ = details['init_converged']
        return self

    def fit_transform(self, X):
        """
        Args:
            X: Data, shape (n_samples, n_features)

        Returns:
            Y: Embedding, shape (n_samples, n_components)
        """
        return self.fit(X).embedding_.T
