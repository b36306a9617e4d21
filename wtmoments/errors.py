from __future__ import annotations

__all__ = [
    "WeightedMomentError",
    "InvalidWeightsError",
    "AllocationError",
]


class WeightedMomentError(Exception):
    """Base class for failures of the weighted moment pipeline."""


class InvalidWeightsError(WeightedMomentError, ValueError):
    """Raised when a weight vector is not a valid distribution over the rows.

    A valid vector is one-dimensional, has length 1 (the uniform
    sentinel) or one entry per row, contains no negative or NaN entries
    and sums to exactly one.
    """


class AllocationError(WeightedMomentError, MemoryError):
    """Raised when the working copy of the data cannot be allocated."""
