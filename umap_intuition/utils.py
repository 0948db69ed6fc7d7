"""Small shared helpers."""

import numpy as np


def check_random_state(random_state):
    """
    Turn None, an int seed, or an existing Generator into a Generator.

    Every random draw in the pipeline goes through the returned handle,
    never through the global numpy state.
    """
    if isinstance(random_state, np.random.Generator):
        return random_state
    if isinstance(random_state, np.random.RandomState):
        # Legacy handle: derive a Generator from it deterministically
        return np.random.default_rng(random_state.randint(np.iinfo(np.int32).max))
    return np.random.default_rng(random_state)
