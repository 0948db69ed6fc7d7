"""
ABLATION EXPERIMENTS — what does each UMAP knob actually do?

Run with:
    python -m umap_intuition.ablation
"""

import time

import numpy as np

from .curve import fit_ab_params
from .datasets import make_gaussian_clusters, make_high_dim_clusters
from .metrics import cluster_distance_ratio, fuzzy_set_cross_entropy
from .umap_ import UMAP


def _run(X, labels, **params):
    start = time.time()
    umap = UMAP(random_state=42, **params).fit(X)
    elapsed = time.time() - start
    ratio = cluster_distance_ratio(umap.embedding_, labels)
    loss = fuzzy_set_cross_entropy(umap.graph_, umap.embedding_, umap.a_, umap.b_)
    return umap, ratio, loss, elapsed


def ablation_experiments(n_epochs=50):
    """
    ABLATION: What happens when you change each UMAP parameter?
    """
    print("\n" + "=" * 60)
    print("ABLATION EXPERIMENTS")
    print("=" * 60)

    X, labels = make_high_dim_clusters(150, n_features=20, n_clusters=3)

    # -------- Experiment 1: n_neighbors --------
    print("\n1. EFFECT OF n_neighbors")
    print("-" * 40)
    print("n_neighbors controls local vs global structure")
    for nn in [5, 15, 40]:
        umap, ratio, loss, elapsed = _run(X, labels, n_neighbors=nn, n_epochs=n_epochs)
        print(f"   n_neighbors={nn:<4} edges={umap.graph_.n_edges:<6} "
              f"ratio={ratio:.3f}  CE={loss:10.1f}  ({elapsed:.1f}s)")
    print("→ More neighbors: denser graph, more global organization")

    # -------- Experiment 2: min_dist --------
    print("\n2. EFFECT OF min_dist")
    print("-" * 40)
    print("min_dist sets where the target kernel starts to decay → a, b")
    for md in [0.01, 0.1, 0.5, 1.0]:
        a, b = fit_ab_params(md, 1.0)
        print(f"   min_dist={md:<5} a={a:.3f}  b={b:.3f}")
    print("→ Small min_dist: sharp kernel, tightly packed clusters")
    print("→ Large min_dist: flat kernel, points spread out")

    # -------- Experiment 3: Initialization --------
    print("\n3. EFFECT OF INITIALIZATION")
    print("-" * 40)
    X2, labels2 = make_gaussian_clusters(50, n_features=10, n_clusters=2)
    for init in ['random', 'spectral']:
        umap, ratio, loss, elapsed = _run(X2, labels2, n_neighbors=10,
                                          n_epochs=n_epochs, init=init)
        print(f"   init={init:<10} ratio={ratio:.3f}  CE={loss:10.1f}")
    print("→ Spectral: starts from the graph's own low-frequency structure")
    print("→ Random: clusters have to be found by SGD alone")

    # -------- Experiment 4: Negative sampling --------
    print("\n4. EFFECT OF neg_sample_rate")
    print("-" * 40)
    for rate in [0, 1, 5]:
        umap, ratio, loss, elapsed = _run(X2, labels2, n_neighbors=10,
                                          n_epochs=n_epochs, negative_sample_rate=rate)
        spread = np.abs(umap.embedding_).max()
        print(f"   neg_sample_rate={rate:<3} ratio={ratio:.3f}  "
              f"max|y|={spread:10.1f}  ({elapsed:.1f}s)")
    print("→ No repulsion: nothing keeps unrelated points apart")
    print("→ More samples: stronger repulsion, slower epochs")

    # -------- Experiment 5: Union vs intersection --------
    print("\n5. FUZZY UNION vs INTERSECTION")
    print("-" * 40)
    for ratio_op in [1.0, 0.5, 0.0]:
        umap, ratio, loss, elapsed = _run(X2, labels2, n_neighbors=10, n_epochs=n_epochs,
                                          set_operation_ratio=ratio_op)
        print(f"   set_operation_ratio={ratio_op:<4} edges={umap.graph_.n_edges:<6} "
              f"ratio={ratio:.3f}")
    print("→ Intersection keeps only edges both endpoints agree on")


if __name__ == '__main__':
    print("=" * 60)
    print("UNIFORM MANIFOLD APPROXIMATION AND PROJECTION (UMAP)")
    print("Paradigm: TOPOLOGICAL EMBEDDING")
    print("=" * 60)

    print("""
THE KEY EQUATIONS:
    High-D: μ(x_i, x_j) = exp(-(d_ij - ρ_i) / σ_i)
    Low-D:  ν(y_i, y_j) = (1 + a||y_i - y_j||^(2b))^(-1)
    Loss:   Cross-entropy between μ and ν
    """)

    ablation_experiments()
