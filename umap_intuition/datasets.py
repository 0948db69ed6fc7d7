"""
SYNTHETIC DATASETS — controlled structure to embed

Each generator returns (X, labels) with X of shape (n_samples, n_features)
and is reproducible from random_state.

    make_gaussian_clusters:  a few far-apart blobs — clusters must stay apart
    make_high_dim_clusters:  many blobs hidden in a few coordinates each
    make_swiss_roll:         a 2-D sheet rolled up in 3-D — unrolling test
    make_two_moons_hd:       interleaved moons linearly lifted to high-D
"""

import numpy as np


def make_gaussian_clusters(n_per_cluster=50, n_features=10, n_clusters=2,
                           separation=10.0, scale=1.0, random_state=42):
    """
    WHAT: n_clusters isotropic Gaussians, centers `separation` apart along
          successive axes.
    TESTS: Same-cluster points must end up closer than cross-cluster points.
    """
    rng = np.random.default_rng(random_state)
    X, labels = [], []
    for c in range(n_clusters):
        center = np.zeros(n_features)
        center[c % n_features] = separation * (c + 1)
        X.append(rng.normal(size=(n_per_cluster, n_features)) * scale + center)
        labels.append(np.full(n_per_cluster, c))
    return np.vstack(X), np.concatenate(labels)


def make_high_dim_clusters(n_samples=300, n_features=50, n_clusters=5, random_state=42):
    """High-dimensional clusters."""
    rng = np.random.default_rng(random_state)
    n_per = n_samples // n_clusters
    X, labels = [], []
    for c in range(n_clusters):
        center = np.zeros(n_features)
        center[c * 3:(c + 1) * 3] = 5.0
        X.append(rng.normal(size=(n_per, n_features)) * 0.8 + center)
        labels.append(np.full(n_per, c))
    return np.vstack(X), np.concatenate(labels)


def make_swiss_roll(n_samples=500, random_state=42):
    """Swiss roll in 3D. The 'label' is the position along the roll."""
    rng = np.random.default_rng(random_state)
    t = 1.5 * np.pi * (1 + 2 * rng.random(n_samples))
    x = t * np.cos(t)
    y = 30 * rng.random(n_samples)
    z = t * np.sin(t)
    return np.column_stack([x, y, z]), t


def make_two_moons_hd(n_samples=300, n_features=20, noise=0.1, random_state=42):
    """Two moons in high dimensions."""
    rng = np.random.default_rng(random_state)
    n = n_samples // 2
    theta = np.linspace(0, np.pi, n)
    X_2d = np.vstack([
        np.column_stack([np.cos(theta), np.sin(theta)]),
        np.column_stack([1 - np.cos(theta), -np.sin(theta) + 0.5])
    ]) + rng.normal(size=(2 * n, 2)) * noise
    W = rng.normal(size=(2, n_features))
    X = X_2d @ W + rng.normal(size=(2 * n, n_features)) * 0.1
    labels = np.array([0] * n + [1] * n)
    return X, labels
