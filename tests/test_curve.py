import numpy as np
import pytest

from umap_intuition.curve import fit_ab_params, low_dim_kernel, target_kernel
from umap_intuition.errors import CurveFitError, InvalidParameterError


def test_default_parameters():
    a, b = fit_ab_params(0.1, 1.0)
    assert a == pytest.approx(1.5762, abs=1e-3)
    assert b == pytest.approx(0.8965, abs=1e-3)


def test_fit_is_idempotent():
    assert fit_ab_params(0.25, 1.5) == fit_ab_params(0.25, 1.5)


@pytest.mark.parametrize('min_dist,spread', [(0.05, 1.0), (0.1, 1.0), (0.2, 1.0), (0.3, 2.0)])
def test_parameters_positive_and_curve_close(min_dist, spread):
    a, b = fit_ab_params(min_dist, spread)
    assert a > 0 and b > 0

    xs = np.linspace(0, 3 * spread, 300)
    error = np.abs(low_dim_kernel(xs, a, b) - target_kernel(xs, min_dist, spread))
    assert error.mean() < 0.05


def test_larger_min_dist_flattens_kernel():
    a_small, _ = fit_ab_params(0.01, 1.0)
    a_large, _ = fit_ab_params(0.8, 1.0)
    assert a_large < a_small


def test_target_kernel_decays_from_min_dist():
    ys = target_kernel(np.array([0.0, 0.05, 0.1, 1.1]), 0.1, 1.0)
    # Only d = 0 is pinned to 1; inside min_dist the target exceeds 1
    np.testing.assert_allclose(ys, [1.0, np.exp(0.05), 1.0, np.exp(-1.0)])


@pytest.mark.parametrize('min_dist,spread', [(0.0, 1.0), (-0.1, 1.0), (0.1, 0.0)])
def test_invalid_arguments(min_dist, spread):
    with pytest.raises(InvalidParameterError):
        fit_ab_params(min_dist, spread)


def test_solver_failure_is_hard_error(monkeypatch):
    import umap_intuition.curve as curve

    def failing_fit(*args, **kwargs):
        raise RuntimeError("Optimal parameters not found")

    monkeypatch.setattr(curve, 'curve_fit', failing_fit)
    with pytest.raises(CurveFitError):
        curve.fit_ab_params(0.1, 1.0)
