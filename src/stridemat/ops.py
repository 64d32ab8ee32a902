"""
stridemat Ops - Elementwise arithmetic over matrices.

Every operation walks its operands row by row through ``iter_rows``, so
operands with different strides (a view against a packed matrix, say) line
up by logical (i, j) rather than by raw buffer position. Results are always
freshly allocated and packed.
"""

from __future__ import annotations

import logging
from typing import Callable, Union

import numpy as np

from ._dtypes import BINARY_OPS, promote_dtype
from .error import ShapeMismatchError, TypeMismatchError
from .matrix import Matrix

logger = logging.getLogger("stridemat.ops")

__all__ = [
    'add', 'subtract', 'multiply', 'divide',
    'apply_in_place', 'apply',
]

Scalar = Union[float, complex]


def _check_same_shape(a: Matrix, b: Matrix, op: str) -> None:
    # Stride is layout, not shape.
    if a.shape != b.shape:
        raise ShapeMismatchError(
            message=f"{op}: operand shapes {a.shape} and {b.shape} differ"
        )


def _elementwise(op: str, a: Matrix, b: Matrix) -> Matrix:
    """Apply BINARY_OPS[op] row by row into a new packed matrix."""
    _check_same_shape(a, b, op)
    ufunc = BINARY_OPS[op]

    out = Matrix.zeros(a.rows, a.cols, dtype=promote_dtype(a.dtype, b.dtype))
    logger.debug("%s: %dx%d (strides %d, %d) -> packed %s",
                 op, a.rows, a.cols, a.stride, b.stride, out.dtype)

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        for dst, row_a, row_b in zip(out.iter_rows(), a.iter_rows(), b.iter_rows()):
            ufunc(row_a, row_b, out=dst)
    return out


# =============================================================================
# Arithmetic
# =============================================================================

def add(a: Matrix, b: Matrix) -> Matrix:
    """
    Elementwise a + b.

    Args:
        a, b: Matrices of identical (rows, cols); strides may differ

    Returns:
        New packed matrix

    Raises:
        ShapeMismatchError: If shapes differ
    """
    return _elementwise("add", a, b)


def subtract(a: Matrix, b: Matrix) -> Matrix:
    """Elementwise a - b. Same contract as add()."""
    return _elementwise("subtract", a, b)


def multiply(a: Matrix, b: Matrix) -> Matrix:
    """
    Elementwise (Hadamard) a * b. Same contract as add().

    Example:
        >>> a = Matrix.from_data(2, 2, [3.0, 3.0, 3.0, 3.0])
        >>> b = Matrix.wrap_strided(2, 2, 3, [4.0, 4.0, 4.0, 7.0, 7.0])
        >>> multiply(a, b).to_list()
        [[12.0, 12.0], [21.0, 21.0]]
    """
    return _elementwise("multiply", a, b)


def divide(a: Matrix, b: Matrix) -> Matrix:
    """
    Elementwise a / b. Same contract as add().

    Division by zero follows IEEE rules (inf or nan), without warnings.
    """
    return _elementwise("divide", a, b)


# =============================================================================
# Element Transforms
# =============================================================================

def apply_in_place(mat: Matrix, f: Callable[[Scalar], Scalar]) -> None:
    """
    Replace every logical element of mat with f(element).

    Writes go through the shared buffer, so views aliasing mat see the
    change. Buffer elements between the rows of a view are left alone.
    Every result is checked against mat.dtype before anything is written,
    so a rejected value leaves mat unchanged.

    Raises:
        TypeMismatchError: If f returns a value mat.dtype cannot hold
    """
    results = []
    for i, row in enumerate(mat.iter_rows()):
        values = [f(v.item()) for v in row]
        for j, value in enumerate(values):
            if not mat.dtype.accepts(value):
                raise TypeMismatchError(
                    message=f"f returned {type(value).__name__} at ({i}, {j}); "
                            f"cannot store in {mat.dtype} matrix"
                )
        results.append(values)

    for row, values in zip(mat.iter_rows(), results):
        row[:] = values


def apply(mat: Matrix, f: Callable[[Scalar], Scalar]) -> Matrix:
    """New packed matrix of f(element); mat is untouched."""
    out = mat.clone()
    apply_in_place(out, f)
    return out
