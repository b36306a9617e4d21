from wtmoments.moments.api import weighted_correlation, weighted_covariance
from wtmoments.moments.base import BaseWeightedMoment, MomentResult
from wtmoments.moments.ml import MaxLikelihoodCovariance
from wtmoments.moments.options import CovarianceOptions
from wtmoments.moments.unbiased import UnbiasedCovariance

__all__ = [
    "BaseWeightedMoment",
    "CovarianceOptions",
    "MaxLikelihoodCovariance",
    "MomentResult",
    "UnbiasedCovariance",
    "weighted_correlation",
    "weighted_covariance",
]
