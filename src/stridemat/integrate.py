"""
Numerical integration over matrix rows.

Trapezoidal rule:
    integral = sum(0.5 * (x[i+1] - x[i]) * (v[i+1] + v[i]) for i in range(n - 1))
"""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np

from ._dtypes import DType, infer_dtype, promote_dtype
from .error import ShapeMismatchError
from .matrix import Matrix

__all__ = ['trapezoidal', 'integrate_rows']

Scalar = Union[float, complex]
VectorInput = Union[np.ndarray, Sequence[Scalar]]


def _as_vector(values: VectorInput) -> np.ndarray:
    if isinstance(values, np.ndarray):
        arr = values
    else:
        arr = np.asarray(list(values))
    if arr.ndim != 1:
        raise ShapeMismatchError(message=f"Expected 1D vector, got {arr.ndim}D")
    dtype = infer_dtype(arr)
    return arr.astype(dtype.numpy_dtype, copy=False)


def _trapezoid(v: np.ndarray, x: np.ndarray, dtype: DType) -> Scalar:
    if v.size < 2:
        return dtype.zero
    dx = x[1:] - x[:-1]
    return (0.5 * dx * (v[1:] + v[:-1])).sum().item()


def trapezoidal(values: VectorInput, coordinates: VectorInput) -> Scalar:
    """
    Trapezoidal-rule integral of values sampled at coordinates.

    Args:
        values: Samples v[0..n-1]
        coordinates: Sample positions x[0..n-1]

    Returns:
        Integral as float (complex if either input is complex). Fewer than
        two samples integrate to zero.

    Raises:
        ShapeMismatchError: If the lengths differ

    Example:
        >>> trapezoidal([1.0, 1.0, 1.0], [0.0, 1.0, 2.0])
        2.0
    """
    v = _as_vector(values)
    x = _as_vector(coordinates)
    if v.size != x.size:
        raise ShapeMismatchError(
            message=f"values ({v.size}) and coordinates ({x.size}) differ in length"
        )
    dtype = promote_dtype(infer_dtype(v), infer_dtype(x))
    return _trapezoid(v, x, dtype)


def integrate_rows(mat: Matrix, coordinates: VectorInput) -> np.ndarray:
    """
    Integrate each row of mat against a shared coordinate vector.

    Rows are visited with iter_rows(), so views with stride > cols are
    handled correctly.

    Args:
        mat: Matrix whose rows are sample vectors
        coordinates: Sample positions, length mat.cols

    Returns:
        1-D array of length mat.rows, integral of row i at index i

    Raises:
        ShapeMismatchError: If len(coordinates) != mat.cols
    """
    x = _as_vector(coordinates)
    if x.size != mat.cols:
        raise ShapeMismatchError(
            message=f"coordinates ({x.size}) do not match row length ({mat.cols})"
        )
    dtype = promote_dtype(mat.dtype, infer_dtype(x))
    out = np.zeros(mat.rows, dtype=dtype.numpy_dtype)
    for i, row in enumerate(mat.iter_rows()):
        out[i] = _trapezoid(row, x, dtype)
    return out
