from __future__ import annotations

from typing import Literal

import numpy as np

Array = np.ndarray

Method = Literal["unbiased", "ml"]

UNBIASED: Method = "unbiased"
MAXIMUM_LIKELIHOOD: Method = "ml"

METHODS = (UNBIASED, MAXIMUM_LIKELIHOOD)
