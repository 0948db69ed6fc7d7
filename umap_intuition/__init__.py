"""
umap_intuition — Uniform Manifold Approximation and Projection in numpy/scipy.

    from umap_intuition import embed, UMAP

    graph, embedding = embed(X, n_neighbors=15, n_components=2)
    Y = UMAP(n_neighbors=15, random_state=42).fit_transform(X)
"""

from .curve import fit_ab_params
from .errors import (
    AsymmetricGraphError,
    CurveFitError,
    DegenerateDistancesError,
    InvalidParameterError,
    UMAPError,
)
from .fuzzy_set import (
    FuzzySimplicialSet,
    combine_fuzzy_sets,
    compute_membership_strengths,
    fuzzy_simplicial_set,
    general_fuzzy_set_combination,
)
from .layout import optimize_embedding
from .neighbors import pairwise_knn
from .smooth_knn import smooth_knn_dist, smooth_knn_dists
from .spectral import SpectralLayout, initialize_embedding, random_layout, spectral_layout
from .umap_ import UMAP, UMAPResult, embed

__version__ = '0.1.0'

__all__ = [
    'UMAP',
    'UMAPResult',
    'embed',
    'pairwise_knn',
    'smooth_knn_dist',
    'smooth_knn_dists',
    'compute_membership_strengths',
    'combine_fuzzy_sets',
    'general_fuzzy_set_combination',
    'fuzzy_simplicial_set',
    'FuzzySimplicialSet',
    'fit_ab_params',
    'spectral_layout',
    'random_layout',
    'initialize_embedding',
    'SpectralLayout',
    'optimize_embedding',
    'UMAPError',
    'InvalidParameterError',
    'AsymmetricGraphError',
    'DegenerateDistancesError',
    'CurveFitError',
]
