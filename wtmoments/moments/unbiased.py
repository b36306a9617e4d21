from __future__ import annotations

from wtmoments.moments.base import BaseWeightedMoment
from wtmoments.types import UNBIASED, Array
from wtmoments.utils import bias_correction

__all__ = ["UnbiasedCovariance"]


class UnbiasedCovariance(BaseWeightedMoment):
    r"""Weighted covariance with the unbiased (reliability weight) correction.

    Scales the weighted cross-product by :math:`1/(1 - \sum_i w_i^2)`,
    one over the complement of the inverse Kish effective sample size.
    For uniform weights this is :math:`m/(m-1)` and the result matches
    the classical sample covariance.

    Examples
    --------
    >>> import numpy as np
    >>> from wtmoments.moments import UnbiasedCovariance
    >>> X = np.random.default_rng(0).normal(size=(50, 3))
    >>> out = UnbiasedCovariance(X).run()
    >>> np.allclose(out.cov, np.cov(X, rowvar=False))
    True
    """

    method = UNBIASED

    def _bias_correction(self, wt: Array) -> float:
        return bias_correction(UNBIASED, self.m, wt)
