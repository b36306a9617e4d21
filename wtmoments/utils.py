from __future__ import annotations

import logging
import math
import os
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

import numpy as np

from wtmoments.errors import InvalidWeightsError
from wtmoments.types import MAXIMUM_LIKELIHOOD, UNBIASED, Array, Method

__all__ = [
    "DEFAULT_MIN_PARALLEL_SIZE",
    "uniform_weights",
    "check_weights",
    "column_blocks",
    "weighted_colmeans",
    "scale_columns",
    "bias_correction",
    "crossprod",
    "symmetrize",
    "cov_to_cor",
]

logger = logging.getLogger(__name__)

# Below this many matrix entries the column loop runs sequentially.
DEFAULT_MIN_PARALLEL_SIZE = 1000


def uniform_weights(m: int) -> Array:
    """Return the uniform weight sentinel for :math:`m` rows.

    The sentinel is a length-1 vector holding :math:`1/m`; consumers use
    the single value for every row instead of indexing it per row.

    Parameters
    ----------
    m : int
        Number of observations.

    Returns
    -------
    ndarray of shape ``(1,)``
        The vector ``[1/m]``.
    """
    return np.array([1.0 / m])


def check_weights(wt, m: int, sum_tol: float = 0.0) -> Array:
    """Validate a weight vector against :math:`m` observations.

    The weights must be non-negative and sum to one.  The sum is
    accumulated left to right and, with the default ``sum_tol=0``,
    compared to ``1.0`` with exact equality, so a vector such as
    ``[0.1] * 10`` whose floating point sum is ``0.9999999999999999``
    is rejected.

    A length-1 vector is read as the uniform sentinel: its single value
    stands in for every row, so it must equal :math:`1/m`.

    Parameters
    ----------
    wt : array_like
        Weights of length 1 or ``m``.
    m : int
        Number of observations.
    sum_tol : float, default=0.0
        Allowed absolute deviation of the total mass from one.

    Returns
    -------
    ndarray
        The weights as a float64 vector.

    Raises
    ------
    InvalidWeightsError
        If the vector has the wrong shape, contains a negative or NaN
        entry, or does not sum to one.
    """
    wt = np.asarray(wt, dtype=float)
    if wt.ndim != 1:
        raise InvalidWeightsError(f"weights must be a 1-D vector, got shape {wt.shape}")
    if wt.size not in (1, m):
        raise InvalidWeightsError(f"weights must have length 1 or {m}, got {wt.size}")
    if np.isnan(wt).any():
        raise InvalidWeightsError("weights contain NaN")
    if (wt < 0).any():
        raise InvalidWeightsError("weights must be non-negative")

    if wt.size == 1 and m != 1:
        if abs(float(wt[0]) - 1.0 / m) * m > sum_tol:
            raise InvalidWeightsError(
                f"a single weight is the uniform sentinel and must equal 1/{m}, got {wt[0]!r}"
            )
        return wt

    # cumsum accumulates sequentially, unlike the pairwise np.sum
    total = float(np.cumsum(wt)[-1])
    if abs(total - 1.0) > sum_tol:
        raise InvalidWeightsError(f"weights must sum to 1, got {total!r}")
    return wt


def column_blocks(n: int, n_blocks: int) -> List[slice]:
    """Split ``range(n)`` into at most ``n_blocks`` contiguous slices."""
    n_blocks = max(1, min(int(n_blocks), n))
    bounds = np.linspace(0, n, n_blocks + 1).astype(int)
    return [slice(int(a), int(b)) for a, b in zip(bounds[:-1], bounds[1:]) if b > a]


def weighted_colmeans(
    X: Array,
    wt: Array,
    out: Optional[Array] = None,
    min_parallel_size: int = DEFAULT_MIN_PARALLEL_SIZE,
    n_jobs: Optional[int] = None,
) -> Array:
    r"""Weighted column means :math:`\mu_j = \sum_i w_i x_{ij}`.

    Columns are reduced independently.  When ``m * n`` exceeds
    ``min_parallel_size`` they are split into disjoint blocks that are
    reduced on a thread pool, each worker writing only its own slice of
    ``out``.

    Parameters
    ----------
    X : ndarray of shape ``(m, n)``
        Data matrix.
    wt : ndarray of shape ``(1,)`` or ``(m,)``
        Validated weights.  A length-1 vector multiplies every row by
        its single value.
    out : ndarray of shape ``(n,)``, optional
        Output buffer.  Allocated when omitted.
    min_parallel_size : int
        Entry count at or below which the reduction runs sequentially.
    n_jobs : int, optional
        Worker threads.  Defaults to the CPU count, capped at ``n``.

    Returns
    -------
    ndarray of shape ``(n,)``
        The weighted means (``out`` when given).
    """
    if n_jobs is not None and n_jobs < 1:
        raise ValueError("n_jobs must be a positive integer")
    m, n = X.shape
    if out is None:
        out = np.empty(n)

    if wt.size == 1:
        w0 = float(wt[0])

        def _reduce(cols: slice) -> None:
            out[cols] = (X[:, cols] * w0).sum(axis=0)

    else:

        def _reduce(cols: slice) -> None:
            out[cols] = wt @ X[:, cols]

    if m * n <= min_parallel_size or n < 2:
        _reduce(slice(0, n))
        return out

    workers = min(n_jobs or os.cpu_count() or 1, n)
    blocks = column_blocks(n, workers)
    logger.debug("weighted_colmeans: %d column blocks on %d threads", len(blocks), workers)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(_reduce, cols) for cols in blocks]
        for fut in futures:
            fut.result()
    return out


def scale_columns(
    X: Array,
    center: bool = True,
    scale: bool = False,
    colmeans: Optional[Array] = None,
    colsds: Optional[Array] = None,
) -> Array:
    """Center and/or scale the columns of ``X`` in place.

    Parameters
    ----------
    X : ndarray of shape ``(m, n)``
        Writable float array; modified in place.
    center : bool, default=True
        Subtract ``colmeans`` from every column.
    scale : bool, default=False
        Divide every column by ``colsds``.
    colmeans : ndarray of shape ``(n,)``, optional
        Column centers.  The plain column means when omitted.
    colsds : ndarray of shape ``(n,)``, optional
        Column scales.  The sample standard deviations when omitted.

    Returns
    -------
    ndarray
        ``X`` itself.
    """
    if center:
        if colmeans is None:
            colmeans = X.mean(axis=0)
        X -= colmeans
    if scale:
        if colsds is None:
            colsds = X.std(axis=0, ddof=1)
        X /= colsds
    return X


def bias_correction(method: Method, m: int, wt: Array) -> float:
    r"""Scale factor turning a weighted cross-product into a covariance.

    For the maximum-likelihood estimator :math:`\alpha = 1`.  For the
    unbiased estimator

    .. math::

        \alpha = \frac{1}{1 - \sum_i w_i^2},

    which is :math:`m/(m-1)` for uniform weights.  With the length-1
    sentinel the sum is :math:`m w_0^2`.

    Parameters
    ----------
    method : {"unbiased", "ml"}
        Estimator.
    m : int
        Number of observations.
    wt : ndarray of shape ``(1,)`` or ``(m,)``
        Validated weights.

    Returns
    -------
    float
        :math:`\alpha`.  ``inf`` when all mass sits on one observation.
    """
    if method == MAXIMUM_LIKELIHOOD:
        return 1.0
    if method != UNBIASED:
        raise ValueError(f"unknown method {method!r}")

    if wt.size == 1:
        w0 = float(wt[0])
        sumsq = m * w0 * w0
    else:
        sumsq = float(np.dot(wt, wt))

    denom = 1.0 - sumsq
    if denom <= 0.0:
        logger.warning(
            "unbiased correction undefined: sum of squared weights is %r; "
            "covariance will be NaN",
            sumsq,
        )
        return math.inf
    return 1.0 / denom


def crossprod(Xc: Array, wt: Array, alpha: float = 1.0, out: Optional[Array] = None) -> Array:
    r"""Scaled weighted cross-product :math:`\alpha\, X_c^\top \mathrm{diag}(w) X_c`.

    Parameters
    ----------
    Xc : ndarray of shape ``(m, n)``
        Centered data.
    wt : ndarray of shape ``(1,)`` or ``(m,)``
        Weights.
    alpha : float, default=1.0
        Scale factor.
    out : ndarray of shape ``(n, n)``, optional
        Output buffer.

    Returns
    -------
    ndarray of shape ``(n, n)``
        The product.  Only the upper triangle is authoritative; pass the
        result through :func:`symmetrize` for exact symmetry.
    """
    cp = (Xc.T * wt) @ Xc
    with np.errstate(invalid="ignore"):
        return np.multiply(cp, alpha, out=out)


def symmetrize(A: Array) -> Array:
    """Copy the upper triangle of a square matrix onto its lower triangle.

    Afterwards ``A[i, j] == A[j, i]`` holds bit for bit.  Applying it to
    a matrix that is already symmetric leaves it unchanged.

    Parameters
    ----------
    A : ndarray of shape ``(n, n)``
        Modified in place.

    Returns
    -------
    ndarray
        ``A`` itself.
    """
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise ValueError(f"symmetrize needs a square matrix, got shape {A.shape}")
    lower = np.tril_indices(A.shape[0], k=-1)
    A[lower] = A.T[lower]
    return A


def cov_to_cor(cov: Array) -> Array:
    """Convert a covariance matrix to a correlation matrix.

    Variables with zero variance get NaN in their row and column,
    including the diagonal entry.

    Parameters
    ----------
    cov : ndarray of shape ``(n, n)``
        Symmetric covariance matrix.

    Returns
    -------
    ndarray of shape ``(n, n)``
        A new, exactly symmetric correlation matrix.
    """
    cov = np.asarray(cov, dtype=float)
    sd = np.sqrt(np.diag(cov))
    with np.errstate(divide="ignore", invalid="ignore"):
        cor = cov / np.outer(sd, sd)
    np.fill_diagonal(cor, np.where(sd > 0, 1.0, np.nan))
    return symmetrize(cor)
