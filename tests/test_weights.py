import numpy as np
import pytest

from wtmoments import InvalidWeightsError, UnbiasedCovariance
from wtmoments.utils import check_weights, uniform_weights
from .utils import make_weighted_data


def test_valid_weights_pass_through():
    w = check_weights([0.2, 0.3, 0.5], 3)
    assert w.dtype == np.float64
    assert np.array_equal(w, [0.2, 0.3, 0.5])


@pytest.mark.parametrize("w", [[0.2, 0.3, 0.49], [0.2, 0.3, 0.51]])
def test_weight_sum_off_by_one_percent_rejected(w):
    assert abs(sum(w) - 1.0) > 0.009
    with pytest.raises(InvalidWeightsError):
        check_weights(w, 3)


@pytest.mark.parametrize("w", [[-0.5, 1.0, 0.5], [-0.1, 0.6, 0.4], [-1.0, 0.0, 0.0]])
def test_negative_weight_rejected_regardless_of_sum(w):
    with pytest.raises(InvalidWeightsError, match="non-negative"):
        check_weights(w, 3)


def test_nan_weight_rejected():
    with pytest.raises(InvalidWeightsError):
        check_weights([np.nan, 0.5, 0.5], 3)


@pytest.mark.parametrize("w", [[0.5, 0.5], [0.25] * 4 + [0.0]])
def test_wrong_length_rejected(w):
    with pytest.raises(InvalidWeightsError, match="length"):
        check_weights(w, 3)


def test_two_dimensional_weights_rejected():
    with pytest.raises(InvalidWeightsError):
        check_weights(np.full((2, 2), 0.25), 4)


def test_sum_check_is_exact_by_default():
    # ten copies of 0.1 add up to 0.9999999999999999
    w = [0.1] * 10
    with pytest.raises(InvalidWeightsError, match="sum to 1"):
        check_weights(w, 10)
    assert check_weights(w, 10, sum_tol=1e-12).shape == (10,)


def test_single_weight_is_uniform_sentinel():
    assert np.array_equal(check_weights([0.25], 4), [0.25])
    assert np.array_equal(check_weights(uniform_weights(3), 3), uniform_weights(3))
    with pytest.raises(InvalidWeightsError, match="sentinel"):
        check_weights([0.5], 3)


def test_single_row_single_weight():
    assert np.array_equal(check_weights([1.0], 1), [1.0])
    with pytest.raises(InvalidWeightsError):
        check_weights([0.9], 1)


def test_invalid_weights_error_is_value_error():
    assert issubclass(InvalidWeightsError, ValueError)


def test_estimator_rejects_bad_weights():
    X, w = make_weighted_data(m=10, n=2)
    bad = w.copy()
    bad[0] += 0.01
    with pytest.raises(InvalidWeightsError):
        UnbiasedCovariance(X).run(bad)
