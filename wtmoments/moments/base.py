from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from wtmoments.errors import AllocationError
from wtmoments.moments.options import CovarianceOptions
from wtmoments.types import Array, Method
from wtmoments.utils import (
    DEFAULT_MIN_PARALLEL_SIZE,
    check_weights,
    cov_to_cor,
    crossprod,
    scale_columns,
    symmetrize,
    uniform_weights,
    weighted_colmeans,
)

logger = logging.getLogger(__name__)


@dataclass
class MomentResult:
    """Container for the output of :meth:`BaseWeightedMoment.run`.

    Supports both attribute and dictionary-like access to fields.

    Parameters
    ----------
    colmeans : ndarray of shape ``(n,)``
        Weighted column means.
    cov : ndarray of shape ``(n, n)``
        Weighted covariance matrix, exactly symmetric.
    alpha : float
        Bias-correction factor applied to the weighted cross-product.
    method : str
        ``'unbiased'`` or ``'ml'``.
    n_obs : int
        Number of observations (rows) used.
    """

    colmeans: Array
    cov: Array
    alpha: float
    method: str
    n_obs: int

    def __getitem__(self, key: str):
        # Allow dictionary-like access to attributes
        return getattr(self, key)

    def correlation(self) -> Array:
        """Weighted Pearson correlation matrix derived from :attr:`cov`."""
        return cov_to_cor(self.cov)


def _fortran_copy(X: Array) -> Array:
    return np.array(X, dtype=float, order="F", copy=True)


class BaseWeightedMoment(ABC):
    r"""Shared pipeline for weighted covariance estimators.

    Given observations :math:`x_i \in \mathbb{R}^n` with weights
    :math:`w_i \ge 0`, :math:`\sum_i w_i = 1`, the estimators compute the
    weighted mean :math:`\mu_w = \sum_i w_i x_i` and

    .. math::

        \Sigma_w = \alpha \sum_i w_i (x_i - \mu_w)(x_i - \mu_w)^\top,

    where the factor :math:`\alpha` is supplied by the subclass via
    :meth:`_bias_correction`:

    - ``UnbiasedCovariance`` uses :math:`\alpha = 1/(1 - \sum_i w_i^2)`.
    - ``MaxLikelihoodCovariance`` uses :math:`\alpha = 1`.

    Each call to :meth:`run` validates the weights, centers a private
    column-major copy of the data, forms the scaled cross-product and
    mirrors its upper triangle so the result is symmetric bit for bit.
    Nothing is kept between calls.
    """

    method: Method

    def __init__(
        self,
        X: Array,
        min_parallel_size: int = DEFAULT_MIN_PARALLEL_SIZE,
        n_jobs: Optional[int] = None,
        copy: bool = True,
        sum_tol: float = 0.0,
        verbose: bool = False,
    ):
        """Initialize an estimator.

        Parameters
        ----------
        X : ndarray
            Data matrix of shape (m, n), one observation per row.
        min_parallel_size : int
            Entry count m·n above which column means use a thread pool.
        n_jobs : Optional[int]
            Worker threads for the parallel path.
        copy : bool
            If False, ``X`` is centered in place.  It must then be a
            writable float64 ndarray, and :meth:`run` can be called
            only once.
        sum_tol : float
            Allowed deviation of the weight total from one.
        verbose : bool
            If True, logs the per-call summary at INFO level.
        """
        if copy:
            X = np.asarray(X)
        elif not isinstance(X, np.ndarray) or X.dtype != np.float64 or not X.flags.writeable:
            raise ValueError("copy=False requires a writable float64 ndarray")
        if X.ndim != 2:
            raise ValueError(f"X must be a 2D array, got shape {X.shape}")
        if X.shape[0] < 1 or X.shape[1] < 1:
            raise ValueError(f"X must have at least one row and one column, got shape {X.shape}")
        if sum_tol < 0:
            raise ValueError("sum_tol must be non-negative")
        if n_jobs is not None and n_jobs < 1:
            raise ValueError("n_jobs must be a positive integer")

        self.X = X
        self.m, self.n = X.shape
        self.min_parallel_size = int(min_parallel_size)
        self.n_jobs = n_jobs
        self.copy = bool(copy)
        self.sum_tol = float(sum_tol)
        self.verbose = bool(verbose)
        self._consumed = False

    @classmethod
    def from_options(cls, X: Array, options: CovarianceOptions) -> "BaseWeightedMoment":
        """Build an estimator from :class:`CovarianceOptions`.

        ``options.method`` is ignored; the class fixes the estimator.
        """
        return cls(
            X,
            min_parallel_size=options.min_parallel_size,
            n_jobs=options.n_jobs,
            copy=options.copy,
            sum_tol=options.sum_tol,
            verbose=options.verbose,
        )

    def run(
        self,
        weights: Optional[Array] = None,
        out_colmeans: Optional[Array] = None,
        out_cov: Optional[Array] = None,
    ) -> MomentResult:
        """Compute the weighted column means and covariance matrix.

        Parameters
        ----------
        weights : ndarray of shape ``(m,)`` or ``(1,)``, optional
            Non-negative weights summing to one.  If ``None``, every row
            gets weight :math:`1/m`.
        out_colmeans : ndarray of shape ``(n,)``, optional
            Buffer receiving the column means.
        out_cov : ndarray of shape ``(n, n)``, optional
            Buffer receiving the covariance matrix.

        Returns
        -------
        MomentResult
            Column means, covariance, the factor :math:`\\alpha`, the
            method and the number of observations.

        Raises
        ------
        InvalidWeightsError
            If the weights are not a valid distribution over the rows.
        AllocationError
            If the working copy of ``X`` cannot be allocated.

        Examples
        --------
        >>> import numpy as np
        >>> from wtmoments.moments import MaxLikelihoodCovariance
        >>> X = np.array([[1.0], [2.0], [3.0]])
        >>> out = MaxLikelihoodCovariance(X).run(np.array([0.2, 0.3, 0.5]))
        >>> round(float(out['colmeans'][0]), 12)
        2.3
        """
        m, n = self.m, self.n

        # Step 1: resolve weights; the uniform sentinel is valid by construction
        if weights is None:
            wt = uniform_weights(m)
        else:
            # Step 2: validate caller-supplied weights
            wt = check_weights(weights, m, sum_tol=self.sum_tol)

        colmeans, cov = self._outputs(out_colmeans, out_cov)

        # Step 3: private column-major working copy (or X itself when copy=False)
        work = self._working_copy()

        # Step 4: weighted column means μ_j = Σ_i w_i x_ij
        weighted_colmeans(
            work,
            wt,
            out=colmeans,
            min_parallel_size=self.min_parallel_size,
            n_jobs=self.n_jobs,
        )

        # Step 5: center the working copy, x_ij − μ_j
        scale_columns(work, center=True, scale=False, colmeans=colmeans)

        # Step 6: Σ = α Xcᵀ diag(w) Xc
        alpha = self._bias_correction(wt)
        crossprod(work, wt, alpha, out=cov)

        # Step 7: exact symmetry
        symmetrize(cov)

        # Step 8: release the working copy
        del work

        level = logging.INFO if self.verbose else logging.DEBUG
        logger.log(
            level,
            "[%s] m=%d n=%d weights=%s alpha=%.6g",
            type(self).__name__,
            m,
            n,
            "uniform" if wt.size == 1 else "per-row",
            alpha,
        )
        return MomentResult(colmeans=colmeans, cov=cov, alpha=alpha, method=self.method, n_obs=m)

    def _working_copy(self) -> Array:
        if not self.copy:
            # X is centered in place, so it can only be used once
            if self._consumed:
                raise ValueError(
                    "copy=False estimator already centered its input; build a new estimator to run again"
                )
            self._consumed = True
            return self.X
        try:
            return _fortran_copy(self.X)
        except MemoryError as e:
            raise AllocationError(f"could not allocate a {self.m}x{self.n} working copy") from e

    def _outputs(self, out_colmeans: Optional[Array], out_cov: Optional[Array]) -> Tuple[Array, Array]:
        n = self.n
        colmeans = np.empty(n) if out_colmeans is None else out_colmeans
        cov = np.empty((n, n)) if out_cov is None else out_cov
        for name, buf, shape in (("out_colmeans", colmeans, (n,)), ("out_cov", cov, (n, n))):
            if not isinstance(buf, np.ndarray) or buf.shape != shape or buf.dtype != np.float64:
                raise ValueError(f"{name} must be a float64 ndarray of shape {shape}")
        return colmeans, cov

    @abstractmethod
    def _bias_correction(self, wt: Array) -> float:
        pass
