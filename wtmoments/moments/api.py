from __future__ import annotations

from dataclasses import replace
from typing import Dict, Optional, Type

from wtmoments.moments.base import BaseWeightedMoment, MomentResult
from wtmoments.moments.ml import MaxLikelihoodCovariance
from wtmoments.moments.options import CovarianceOptions
from wtmoments.moments.unbiased import UnbiasedCovariance
from wtmoments.types import MAXIMUM_LIKELIHOOD, UNBIASED, Array, Method

__all__ = ["ESTIMATORS", "get_estimator", "weighted_covariance", "weighted_correlation"]

ESTIMATORS: Dict[str, Type[BaseWeightedMoment]] = {
    UNBIASED: UnbiasedCovariance,
    MAXIMUM_LIKELIHOOD: MaxLikelihoodCovariance,
}


def get_estimator(method: Method) -> Type[BaseWeightedMoment]:
    try:
        return ESTIMATORS[method]
    except KeyError:
        raise ValueError(f"method must be one of {sorted(ESTIMATORS)}, got {method!r}") from None


def weighted_covariance(
    X: Array,
    weights: Optional[Array] = None,
    method: Optional[Method] = None,
    options: Optional[CovarianceOptions] = None,
    out_colmeans: Optional[Array] = None,
    out_cov: Optional[Array] = None,
) -> MomentResult:
    """Weighted covariance matrix of the columns of ``X``.

    Parameters
    ----------
    X : ndarray of shape ``(m, n)``
        Observations in rows, variables in columns.
    weights : ndarray of shape ``(m,)`` or ``(1,)``, optional
        Non-negative row weights summing to exactly one.  Uniform if
        omitted.
    method : {"unbiased", "ml"}, optional
        Overrides ``options.method``.
    options : CovarianceOptions, optional
        Remaining knobs; defaults to ``CovarianceOptions()``.
    out_colmeans, out_cov : ndarray, optional
        Caller-allocated output buffers.

    Returns
    -------
    MomentResult

    Examples
    --------
    >>> import numpy as np
    >>> from wtmoments import weighted_covariance
    >>> X = np.array([[1.0, 2.0], [3.0, 5.0], [4.0, 4.0], [0.0, 1.0]])
    >>> w = np.array([0.125, 0.375, 0.25, 0.25])
    >>> out = weighted_covariance(X, w, method="ml")
    >>> np.allclose(out.cov, np.cov(X, rowvar=False, aweights=w, bias=True))
    True
    """
    options = CovarianceOptions() if options is None else options
    if method is not None:
        options = replace(options, method=method)
    estimator = get_estimator(options.method).from_options(X, options)
    return estimator.run(weights, out_colmeans=out_colmeans, out_cov=out_cov)


def weighted_correlation(
    X: Array,
    weights: Optional[Array] = None,
    options: Optional[CovarianceOptions] = None,
) -> Array:
    """Weighted Pearson correlation matrix of the columns of ``X``.

    The bias correction cancels, so ``options.method`` has no effect on
    the result.  Columns with zero weighted variance give NaN rows and
    columns.
    """
    return weighted_covariance(X, weights, options=options).correlation()
