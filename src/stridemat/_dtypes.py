"""
Element Kind Definitions

Provides the two supported element kinds and the closed set of
arithmetic capabilities dispatched over them.
"""

from __future__ import annotations

import numbers
from enum import Enum
from typing import Any, Callable, Dict, Union

import numpy as np

__all__ = [
    'DType', 'float64', 'complex128',
    'BINARY_OPS',
    'normalize_dtype', 'infer_dtype', 'promote_dtype',
]


class DType(Enum):
    """
    Matrix element kind.

    Only real and complex double precision are supported. Every matrix
    carries exactly one of these.

    Example:
        >>> from stridemat import Matrix, DType
        >>> m = Matrix.zeros(2, 3, dtype=DType.complex128)
        >>>
        >>> # Or use module-level constants
        >>> import stridemat as sm
        >>> m = Matrix.zeros(2, 3, dtype=sm.complex128)
    """

    float64 = 'float64'
    complex128 = 'complex128'

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"DType.{self.name}"

    @property
    def numpy_dtype(self) -> np.dtype:
        """Storage dtype of the backing buffer."""
        return _DTYPE_INFO[self]["numpy"]

    @property
    def zero(self) -> Union[float, complex]:
        """Additive identity."""
        return _DTYPE_INFO[self]["zero"]

    @property
    def is_complex(self) -> bool:
        return self is DType.complex128

    def accepts(self, value: Any) -> bool:
        """Check whether a scalar can be stored without losing information."""
        if isinstance(value, (bool, np.bool_)):
            return False
        if self is DType.float64:
            return isinstance(value, numbers.Real)
        return isinstance(value, numbers.Complex)


_DTYPE_INFO: Dict[DType, Dict[str, Any]] = {
    DType.float64: {
        "numpy": np.dtype(np.float64),
        "zero": 0.0,
    },
    DType.complex128: {
        "numpy": np.dtype(np.complex128),
        "zero": 0j,
    },
}


# =============================================================================
# Module-Level Constants (For Clean Syntax)
# =============================================================================

float64 = DType.float64
complex128 = DType.complex128


# =============================================================================
# Arithmetic Capabilities
# =============================================================================

# Elementwise operations every element kind supports. Nothing outside this
# table is ever dispatched over matrix rows.
BINARY_OPS: Dict[str, Callable[..., np.ndarray]] = {
    "add": np.add,
    "subtract": np.subtract,
    "multiply": np.multiply,
    "divide": np.true_divide,
}


# =============================================================================
# Type Utilities
# =============================================================================

_ALIASES = {
    'float64': DType.float64,
    'real': DType.float64,
    'real64': DType.float64,
    'double': DType.float64,
    'f64': DType.float64,
    'complex128': DType.complex128,
    'complex': DType.complex128,
    'c128': DType.complex128,
}


def normalize_dtype(dtype: Any) -> DType:
    """
    Normalize a dtype name or type to a DType.

    Args:
        dtype: DType, name string, numpy dtype, or the Python types
            ``float`` / ``complex``

    Returns:
        DType member

    Raises:
        TypeError: If dtype names an unsupported element kind

    Example:
        >>> normalize_dtype('real')
        DType.float64
        >>> normalize_dtype(np.complex128)
        DType.complex128
    """
    if isinstance(dtype, DType):
        return dtype
    if isinstance(dtype, str):
        key = dtype.lower()
        if key in _ALIASES:
            return _ALIASES[key]
        raise TypeError(f"Unsupported dtype: {dtype!r}. "
                        f"Supported: {sorted(_ALIASES)}")
    if dtype is float:
        return DType.float64
    if dtype is complex:
        return DType.complex128
    try:
        np_dtype = np.dtype(dtype)
    except TypeError:
        raise TypeError(f"Cannot convert {dtype!r} to DType") from None
    if np_dtype == np.float64:
        return DType.float64
    if np_dtype == np.complex128:
        return DType.complex128
    raise TypeError(f"Unsupported dtype: {np_dtype}. "
                    f"Supported: float64, complex128")


def infer_dtype(data: Any) -> DType:
    """Pick complex128 if data holds complex values, else float64."""
    if isinstance(data, np.ndarray):
        return DType.complex128 if np.iscomplexobj(data) else DType.float64
    for value in data:
        if isinstance(value, (complex, np.complexfloating)):
            return DType.complex128
    return DType.float64


def promote_dtype(a: DType, b: DType) -> DType:
    """Common element kind of two operands (complex wins)."""
    if a is b:
        return a
    return DType.complex128
