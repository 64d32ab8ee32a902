"""Vector helpers used alongside matrices."""

from __future__ import annotations

import math
from typing import Sequence, Union

import numpy as np

__all__ = ['linspace', 'real_to_complex']


def linspace(start: float, stop: float, step: float) -> np.ndarray:
    """
    Evenly spaced float64 values ``start + n * step``.

    The count is ``floor((stop - start) / step) + 1``, so stop is included
    only when it lands on the grid. The step sign is not checked; a step
    pointing away from stop gives an empty array once the quotient drops
    below zero.

    Example:
        >>> linspace(0.0, 1.0, 0.25)
        array([0.  , 0.25, 0.5 , 0.75, 1.  ])
    """
    n = math.floor((stop - start) / step) + 1
    return start + np.arange(max(n, 0), dtype=np.float64) * step


def real_to_complex(values: Union[np.ndarray, Sequence[float]]) -> np.ndarray:
    """Lift real values to complex128 with zero imaginary part."""
    return np.asarray(values, dtype=np.float64).astype(np.complex128)
