import numpy as np
import pytest

from umap_intuition.curve import fit_ab_params
from umap_intuition.datasets import (
    make_gaussian_clusters,
    make_high_dim_clusters,
    make_swiss_roll,
    make_two_moons_hd,
)
from umap_intuition.errors import InvalidParameterError
from umap_intuition.fuzzy_set import fuzzy_simplicial_set
from umap_intuition.metrics import cluster_distance_ratio, fuzzy_set_cross_entropy


def test_cluster_ratio_separated_vs_mixed():
    labels = np.array([0, 0, 1, 1])
    apart = np.array([[0.0, 0.1, 10.0, 10.1],
                      [0.0, 0.0, 0.0, 0.0]])
    mixed = np.array([[0.0, 10.0, 0.1, 10.1],
                      [0.0, 0.0, 0.0, 0.0]])
    assert cluster_distance_ratio(apart, labels) < 0.05
    assert cluster_distance_ratio(mixed, labels) > 1.0


def test_cluster_ratio_needs_two_clusters():
    with pytest.raises(InvalidParameterError):
        cluster_distance_ratio(np.zeros((2, 3)), np.array([0, 0, 0]))
    with pytest.raises(InvalidParameterError):
        cluster_distance_ratio(np.zeros((2, 3)), np.array([0, 1]))


def test_cross_entropy_prefers_faithful_layout():
    X, labels = make_gaussian_clusters(n_per_cluster=15, n_features=4, random_state=0)
    graph, _, _ = fuzzy_simplicial_set(X, 5)
    a, b = fit_ab_params(0.1, 1.0)

    faithful = X[:, :2].T
    scrambled = np.random.default_rng(0).permutation(X[:, :2]).T
    assert fuzzy_set_cross_entropy(graph, faithful, a, b) < \
        fuzzy_set_cross_entropy(graph, scrambled, a, b)


@pytest.mark.parametrize('make', [make_high_dim_clusters, make_swiss_roll, make_two_moons_hd])
def test_datasets_are_reproducible(make):
    X1, y1 = make(random_state=1)
    X2, y2 = make(random_state=1)
    np.testing.assert_array_equal(X1, X2)
    np.testing.assert_array_equal(y1, y2)
    assert X1.shape[0] == y1.shape[0]


def test_gaussian_clusters_shape():
    X, labels = make_gaussian_clusters(n_per_cluster=20, n_features=6, n_clusters=3)
    assert X.shape == (60, 6)
    np.testing.assert_array_equal(np.bincount(labels), [20, 20, 20])


def test_ablation_runs(capsys):
    from umap_intuition.ablation import ablation_experiments

    ablation_experiments(n_epochs=1)
    out = capsys.readouterr().out
    assert 'EFFECT OF min_dist' in out
    assert 'FUZZY UNION vs INTERSECTION' in out
