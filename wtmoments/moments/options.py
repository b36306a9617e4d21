from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from wtmoments.types import Method
from wtmoments.utils import DEFAULT_MIN_PARALLEL_SIZE


@dataclass
class CovarianceOptions:
    """Estimator choice and tuning knobs for weighted covariance.


    Attributes
    ----------
    method : {"unbiased", "ml"}
        Bias correction. ``"unbiased"`` scales by 1/(1 - Σ w_i²), ``"ml"`` by 1.
    min_parallel_size : int
        Entry count m·n above which column means are reduced on a thread pool.
    n_jobs : Optional[int]
        Worker threads for the parallel path; defaults to the CPU count.
    copy : bool
        If False, the input matrix is centered in place instead of copied.
    sum_tol : float
        Allowed deviation of the weight total from one. 0 means exact equality.
    verbose : bool
        Log the per-call summary at INFO instead of DEBUG.
    """
    method: Method = "unbiased"
    min_parallel_size: int = DEFAULT_MIN_PARALLEL_SIZE
    n_jobs: Optional[int] = None
    copy: bool = True
    sum_tol: float = 0.0
    verbose: bool = False
