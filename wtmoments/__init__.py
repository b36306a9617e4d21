from wtmoments.errors import AllocationError, InvalidWeightsError, WeightedMomentError
from wtmoments.moments import (
    BaseWeightedMoment,
    CovarianceOptions,
    MaxLikelihoodCovariance,
    MomentResult,
    UnbiasedCovariance,
    weighted_correlation,
    weighted_covariance,
)
from wtmoments.types import MAXIMUM_LIKELIHOOD, UNBIASED

__version__ = "0.1.0"

__all__ = [
    "AllocationError",
    "BaseWeightedMoment",
    "CovarianceOptions",
    "InvalidWeightsError",
    "MAXIMUM_LIKELIHOOD",
    "MaxLikelihoodCovariance",
    "MomentResult",
    "UNBIASED",
    "UnbiasedCovariance",
    "WeightedMomentError",
    "weighted_correlation",
    "weighted_covariance",
]
