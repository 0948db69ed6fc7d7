import numpy as np

from umap_intuition.utils import check_random_state


def test_generator_passes_through():
    rng = np.random.default_rng(0)
    assert check_random_state(rng) is rng


def test_int_seed_is_reproducible():
    first = check_random_state(5).random(4)
    second = check_random_state(5).random(4)
    np.testing.assert_array_equal(first, second)


def test_legacy_random_state_becomes_generator():
    rng = check_random_state(np.random.RandomState(0))
    assert isinstance(rng, np.random.Generator)

    # Same legacy seed, same derived stream
    first = check_random_state(np.random.RandomState(0)).random(4)
    second = check_random_state(np.random.RandomState(0)).random(4)
    np.testing.assert_array_equal(first, second)


def test_legacy_random_state_is_advanced():
    legacy = np.random.RandomState(0)
    first = check_random_state(legacy).random(4)
    second = check_random_state(legacy).random(4)
    assert not np.array_equal(first, second)


def test_none_gives_fresh_generator():
    assert isinstance(check_random_state(None), np.random.Generator)
