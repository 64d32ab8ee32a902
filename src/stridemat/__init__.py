"""
stridemat - Strided dense matrices over shared buffers

Small dense-matrix library for real (float64) and complex (complex128)
elements, built around views that alias their parent's storage.

Matrices:
    Matrix: (rows, cols, stride) descriptor over a flat Buffer
    allocate / from_data: packed construction

Views:
    Matrix.slice: zero-copy sub-matrix sharing the parent's buffer and stride
    Matrix.slice_with_copy: independent packed copy

Operations:
    add, subtract, multiply, divide: elementwise, stride-aware
    apply_in_place, apply: per-element transforms
    trapezoidal, integrate_rows: trapezoidal rule over rows

Usage:
    >>> import stridemat as sm
    >>> m = sm.Matrix.from_data(2, 3, [1.0, 2.0, 3.0, 4.0, 5.0, 6.0])
    >>> v = m.slice(0, 2, 1, 2)          # view, stride 3
    >>> (v * v).to_list()
    [[4.0, 9.0], [25.0, 36.0]]
    >>> sm.integrate_rows(v, [0.0, 1.0])
    array([2.5, 5.5])
"""

__version__ = '0.1.0'

from ._dtypes import (
    DType,
    float64,
    complex128,
    normalize_dtype,
    promote_dtype,
)

from ._ownership import (
    Buffer,
    OwnershipMode,
    RefChain,
)

from .error import (
    MatrixError,
    InvalidArgumentError,
    ShapeMismatchError,
    IndexOutOfBoundsError,
    SliceOutOfBoundsError,
    TypeMismatchError,
    # Error codes
    MAT_OK,
    MAT_ERROR_INVALID_ARGUMENT,
    MAT_ERROR_DIMENSION_MISMATCH,
    MAT_ERROR_INDEX_OUT_OF_BOUNDS,
    MAT_ERROR_SLICE_OUT_OF_BOUNDS,
    MAT_ERROR_TYPE_MISMATCH,
)

from .config import (
    MatrixConfig,
    get_config,
    set_default_dtype,
    get_default_dtype,
    config_context,
)

from .matrix import (
    Matrix,
    allocate,
    from_data,
)

from .ops import (
    add,
    subtract,
    multiply,
    divide,
    apply_in_place,
    apply,
)

from .integrate import (
    trapezoidal,
    integrate_rows,
)

from .utils import (
    linspace,
    real_to_complex,
)

__all__ = [
    # Version
    "__version__",
    # Element kinds
    "DType",
    "float64",
    "complex128",
    "normalize_dtype",
    "promote_dtype",
    # Storage
    "Buffer",
    "OwnershipMode",
    "RefChain",
    # Error handling
    "MatrixError",
    "InvalidArgumentError",
    "ShapeMismatchError",
    "IndexOutOfBoundsError",
    "SliceOutOfBoundsError",
    "TypeMismatchError",
    "MAT_OK",
    "MAT_ERROR_INVALID_ARGUMENT",
    "MAT_ERROR_DIMENSION_MISMATCH",
    "MAT_ERROR_INDEX_OUT_OF_BOUNDS",
    "MAT_ERROR_SLICE_OUT_OF_BOUNDS",
    "MAT_ERROR_TYPE_MISMATCH",
    # Configuration
    "MatrixConfig",
    "get_config",
    "set_default_dtype",
    "get_default_dtype",
    "config_context",
    # Matrices
    "Matrix",
    "allocate",
    "from_data",
    # Operations
    "add",
    "subtract",
    "multiply",
    "divide",
    "apply_in_place",
    "apply",
    # Integration
    "trapezoidal",
    "integrate_rows",
    # Vector helpers
    "linspace",
    "real_to_complex",
]
