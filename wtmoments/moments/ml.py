from __future__ import annotations

from wtmoments.moments.base import BaseWeightedMoment
from wtmoments.types import MAXIMUM_LIKELIHOOD, Array

__all__ = ["MaxLikelihoodCovariance"]


class MaxLikelihoodCovariance(BaseWeightedMoment):
    r"""Weighted covariance with the maximum-likelihood normalization.

    The weighted cross-product is used as is (:math:`\alpha = 1`), i.e.
    :math:`\Sigma_w = \sum_i w_i (x_i - \mu_w)(x_i - \mu_w)^\top`.

    Examples
    --------
    >>> import numpy as np
    >>> from wtmoments.moments import MaxLikelihoodCovariance
    >>> X = np.random.default_rng(1).normal(size=(20, 2))
    >>> out = MaxLikelihoodCovariance(X).run()
    >>> out.alpha
    1.0
    """

    method = MAXIMUM_LIKELIHOOD

    def _bias_correction(self, wt: Array) -> float:
        return 1.0
