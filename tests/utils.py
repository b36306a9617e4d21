import numpy as np


def make_weighted_data(m=40, n=4, seed=0, resolution=1024):
    """Random data with weights whose left-to-right sum is exactly one.

    Every weight is a multiple of 1/resolution (a power of two), so all
    partial sums are representable and the strict sum check passes.
    """
    rng = np.random.default_rng(seed)
    X = rng.normal(size=(m, n)) @ rng.normal(size=(n, n))
    counts = rng.multinomial(resolution, np.full(m, 1.0 / m))
    w = counts / resolution
    return X, w
