import numpy as np
import pytest
import scipy.sparse

from umap_intuition.errors import AsymmetricGraphError, InvalidParameterError
from umap_intuition.fuzzy_set import (
    FuzzySimplicialSet,
    combine_fuzzy_sets,
    compute_membership_strengths,
    fuzzy_simplicial_set,
    general_fuzzy_set_combination,
)
from umap_intuition.neighbors import pairwise_knn


A = np.array([[1.0, 0.1], [0.4, 1.0]])


def test_fuzzy_union():
    res = combine_fuzzy_sets(A, 1.0)
    np.testing.assert_allclose(res, [[1.0, 0.46], [0.46, 1.0]], atol=1e-6)


def test_fuzzy_intersection():
    res = combine_fuzzy_sets(A, 0.0)
    np.testing.assert_allclose(res, [[1.0, 0.04], [0.04, 1.0]], atol=1e-6)


def test_mixed_ratio_interpolates():
    res = combine_fuzzy_sets(A, 0.5)
    np.testing.assert_allclose(res, [[1.0, 0.25], [0.25, 1.0]], atol=1e-6)


def test_sparse_combination_matches_dense():
    res = combine_fuzzy_sets(scipy.sparse.csr_matrix(A), 1.0)
    assert scipy.sparse.issparse(res)
    np.testing.assert_allclose(res.toarray(), [[1.0, 0.46], [0.46, 1.0]], atol=1e-6)


def test_general_combination_of_two_sets():
    B = np.array([[0.0, 0.5], [0.5, 0.0]])
    res = general_fuzzy_set_combination(A, B, 1.0)
    np.testing.assert_allclose(res, A + B - A * B)


def test_ratio_out_of_range():
    with pytest.raises(InvalidParameterError):
        combine_fuzzy_sets(A, 1.5)


def test_membership_strengths_skip_self():
    knns = np.array([[0, 0],
                     [1, 0]])
    dists = np.array([[0.0, 1.0],
                      [1.0, 2.0]])
    rhos = np.array([1.0, 1.0])
    sigmas = np.array([1.0, 1.0])
    rows, cols, vals = compute_membership_strengths(knns, dists, rhos, sigmas)

    np.testing.assert_array_equal(rows, [0, 1, 0, 0])
    np.testing.assert_array_equal(cols, [0, 0, 1, 1])
    np.testing.assert_allclose(vals, [0.0, 1.0, 1.0, np.exp(-1.0)])


def test_graph_is_exactly_symmetric(blob):
    graph, _, _ = fuzzy_simplicial_set(blob, 10)
    S = graph.graph
    assert (S != S.T).nnz == 0


def test_graph_weights_in_unit_interval_with_zero_diagonal(blob):
    graph, _, _ = fuzzy_simplicial_set(blob, 10)
    S = graph.graph
    assert S.data.min() > 0.0
    assert S.data.max() <= 1.0
    assert np.all(S.diagonal() == 0.0)


def test_intersection_graph_is_sparser(blob):
    union, _, _ = fuzzy_simplicial_set(blob, 10, set_operation_ratio=1.0)
    inter, _, _ = fuzzy_simplicial_set(blob, 10, set_operation_ratio=0.0)
    assert inter.n_edges < union.n_edges
    assert (inter.graph != inter.graph.T).nnz == 0


def test_precomputed_table_matches_provider(blob):
    knns, dists = pairwise_knn(blob, 8)
    direct, _, _ = fuzzy_simplicial_set(blob, 8)
    given, _, _ = fuzzy_simplicial_set(blob, 8, knns=knns, dists=dists)
    np.testing.assert_array_equal(direct.toarray(), given.toarray())


def test_custom_provider_is_used(blob):
    calls = []

    def provider(X, k):
        calls.append(k)
        return pairwise_knn(X, k, metric='cityblock')

    fuzzy_simplicial_set(blob, 6, knn_provider=provider)
    assert calls == [6]


def test_asymmetric_matrix_rejected():
    with pytest.raises(AsymmetricGraphError):
        FuzzySimplicialSet(A)
    with pytest.raises(AsymmetricGraphError):
        FuzzySimplicialSet(np.zeros((2, 3)))


def test_edges_cover_every_stored_entry(blob):
    graph, _, _ = fuzzy_simplicial_set(blob, 5)
    heads, tails, weights = graph.edges()
    assert len(heads) == graph.n_edges
    rebuilt = scipy.sparse.coo_matrix((weights, (heads, tails)), shape=graph.shape)
    np.testing.assert_array_equal(rebuilt.toarray(), graph.toarray())
    np.testing.assert_allclose(graph.degrees(), graph.toarray().sum(axis=1))


def test_constructor_does_not_mutate_input():
    S = scipy.sparse.csr_matrix(np.array([[0.0, 0.5], [0.5, 0.0]]))
    S.data[0] = 0.0
    S.data[1] = 0.0
    FuzzySimplicialSet(S)
    assert S.nnz == 2
