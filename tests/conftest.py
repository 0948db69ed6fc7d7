import numpy as np
import pytest

from umap_intuition.datasets import make_gaussian_clusters


@pytest.fixture
def rng():
    return np.random.default_rng(0)


@pytest.fixture
def three_points():
    # Points (0, 0), (0, 1.5), (0, 2), one per row
    return np.array([[0.0, 0.0], [0.0, 1.5], [0.0, 2.0]])


@pytest.fixture
def two_clusters():
    return make_gaussian_clusters(n_per_cluster=50, n_features=10, n_clusters=2,
                                  random_state=7)


@pytest.fixture
def blob(rng):
    return rng.normal(size=(60, 5))
