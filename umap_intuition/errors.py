"""
Exceptions raised by the UMAP pipeline.

Four kinds of things go wrong:
    ARGUMENT ERRORS      — bad shapes or parameters, caught before any work
    INVARIANT VIOLATIONS — an asymmetric graph where a fuzzy set is expected
    DEGENERATE DISTANCES — a point whose neighbors are all at distance zero
    CURVE FIT FAILURES   — no (a, b) means no optimizer, so this is fatal

Eigen-solver trouble is NOT in this list: the spectral initializer recovers
with a random layout and reports it through its result instead.
"""


class UMAPError(Exception):
    """Base class for every error raised by umap_intuition."""


class InvalidParameterError(UMAPError, ValueError):
    """A parameter or input shape failed validation."""


class AsymmetricGraphError(UMAPError, ValueError):
    """A fuzzy simplicial set was built from a non-symmetric matrix."""


class DegenerateDistancesError(UMAPError, ValueError):
    """A point has no neighbor at a strictly positive distance."""

    def __init__(self, point):
        self.point = point
        super().__init__(
            f"Point {point} has no neighbor at a non-zero distance; "
            f"cannot calibrate its local scale (duplicate points?)")


class CurveFitError(UMAPError, RuntimeError):
    """The (a, b) curve fit did not produce usable parameters."""
