"""
Matrix - Strided dense matrix over a shared flat buffer.

A Matrix is a (rows, cols, stride) descriptor over a window of a Buffer.
Element (i, j) lives at window offset ``i * stride + j``. A freshly
constructed matrix is packed (stride == cols); a view sliced from it keeps
the parent's stride, so its rows are not adjacent in the buffer whenever
it is narrower than the parent.

Aliasing:
    - ``slice`` returns a view. ``set`` on the view or on the source is
      visible through both.
    - ``slice_with_copy``, ``clone`` and every arithmetic result are
      independent, packed matrices.

Always visit rows through ``iter_rows`` (or ``get_row``). The flat window
of a view also contains the parent's elements between the view's rows.

Typical usage:
    >>> m = Matrix.from_data(2, 3, [1.0, 2.0, 3.0, 4.0, 5.0, 6.0])
    >>> v = m.slice(0, 2, 1, 2)
    >>> v.to_list()
    [[2.0, 3.0], [5.0, 6.0]]
    >>> v[1, 0] = 50.0
    >>> m[1, 1]
    50.0
"""

from __future__ import annotations

import logging
import operator
from typing import Any, Callable, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from ._dtypes import DType, infer_dtype, normalize_dtype
from ._ownership import Buffer, OwnershipMode, RefChain
from .config import _resolve_dtype, get_config
from .error import (
    IndexOutOfBoundsError,
    InvalidArgumentError,
    ShapeMismatchError,
    SliceOutOfBoundsError,
    TypeMismatchError,
)

logger = logging.getLogger("stridemat.matrix")

__all__ = ['Matrix', 'allocate', 'from_data']

Scalar = Union[float, complex]


def _span(rows: int, cols: int, stride: int) -> int:
    """Buffer elements needed to reach the last element of the last row."""
    if rows == 0 or cols == 0:
        return 0
    return (rows - 1) * stride + cols


def _check_extent(name: str, value: Any) -> int:
    value = operator.index(value)
    if value < 0:
        raise InvalidArgumentError(message=f"{name} must be non-negative, got {value}")
    return value


def _as_storage(data: Any, dtype: Optional[Union[DType, str]]) -> Tuple[np.ndarray, DType, OwnershipMode]:
    """
    Turn caller data into 1-D storage.

    A 1-D numpy array already holding the target element kind is used as
    is (BORROWED). Anything else is converted into a new array (OWNED).
    """
    if isinstance(data, np.ndarray):
        if data.ndim != 1:
            raise InvalidArgumentError(
                message=f"Expected 1D data, got {data.ndim}D. Flatten it first."
            )
        values = data
    else:
        values = list(data)

    found = infer_dtype(values)
    if dtype is not None:
        target = normalize_dtype(dtype)
    elif found.is_complex:
        target = found
    elif isinstance(values, np.ndarray) and values.dtype == np.float64:
        target = DType.float64
    else:
        target = _resolve_dtype(None)
    if found.is_complex and not target.is_complex:
        raise TypeMismatchError(message=f"Cannot store complex data as {target}")

    if isinstance(values, np.ndarray) and values.dtype == target.numpy_dtype:
        return values, target, OwnershipMode.BORROWED
    array = np.array(values, dtype=target.numpy_dtype)
    if array.ndim != 1:
        raise InvalidArgumentError(
            message=f"Expected flat data, got {array.ndim}D. Flatten it first."
        )
    return array, target, OwnershipMode.OWNED


class Matrix:
    """
    Dense matrix with row stride over a shared flat buffer.

    Construct through the factory methods (``zeros``, ``from_data``,
    ``wrap_strided``, ``from_rows``) or by slicing an existing matrix.

    Attributes:
        rows, cols: Logical extents.
        stride: Buffer elements between the starts of consecutive rows.
        dtype: Element kind (float64 or complex128).
        ownership: OWNED, BORROWED or VIEW.
    """

    __slots__ = (
        "_buffer", "_data", "_offset",
        "_rows", "_cols", "_stride",
        "_ownership", "_ref_chain",
        "__weakref__",
    )

    def __init__(
        self,
        buffer: Buffer,
        rows: int,
        cols: int,
        stride: int,
        offset: int = 0,
        ownership: OwnershipMode = OwnershipMode.OWNED,
        source: Optional["Matrix"] = None,
    ):
        """
        Initialize descriptor over buffer.

        Internal constructor - use the factory methods or slicing instead.

        Args:
            buffer: Backing storage (shared with source for views)
            rows, cols: Logical extents
            stride: Row stride in elements, at least cols
            offset: Buffer position of element (0, 0)
            ownership: Relation to buffer
            source: Matrix this one was sliced from, if any
        """
        if stride < cols:
            raise InvalidArgumentError(
                message=f"stride ({stride}) must be at least cols ({cols})"
            )
        span = _span(rows, cols, stride)
        if offset < 0 or offset + span > buffer.size:
            raise ShapeMismatchError(
                message=f"{rows}x{cols} window with stride {stride} at offset "
                        f"{offset} does not fit a buffer of {buffer.size} elements"
            )

        self._buffer = buffer
        self._data = buffer.array[offset:offset + span]
        self._offset = offset
        self._rows = rows
        self._cols = cols
        self._stride = stride
        self._ownership = ownership
        self._ref_chain: Optional[RefChain] = None
        if source is not None:
            self._ref_chain = RefChain()
            self._ref_chain.add(source)

        buffer.attach(self)

    # =========================================================================
    # Factory Methods
    # =========================================================================

    @classmethod
    def zeros(cls, rows: int, cols: int, dtype: Optional[Union[DType, str]] = None) -> "Matrix":
        """
        Allocate a packed matrix filled with the additive identity.

        Args:
            rows, cols: Extents, non-negative
            dtype: Element kind (configured default if None)

        Raises:
            InvalidArgumentError: If rows or cols is negative
        """
        rows = _check_extent("rows", rows)
        cols = _check_extent("cols", cols)
        dt = _resolve_dtype(dtype)
        return cls(Buffer.allocate(rows * cols, dt), rows, cols, cols)

    @classmethod
    def from_data(
        cls,
        rows: int,
        cols: int,
        data: Union[np.ndarray, Sequence[Scalar]],
        dtype: Optional[Union[DType, str]] = None,
    ) -> "Matrix":
        """
        Wrap flat row-major data as a packed matrix.

        A 1-D numpy array of float64 or complex128 is used directly: writes
        through the matrix are visible in the caller's array and vice versa.
        Other sequences are copied once into new storage.

        Args:
            rows, cols: Extents
            data: Exactly rows * cols values, row-major
            dtype: Element kind. If None, complex data gives complex128,
                a float64 array stays float64, anything else takes the
                configured default

        Returns:
            Packed Matrix (stride == cols)

        Raises:
            ShapeMismatchError: If len(data) != rows * cols
            TypeMismatchError: If complex data is given a real dtype

        Example:
            >>> buf = np.arange(6, dtype=np.float64)
            >>> m = Matrix.from_data(2, 3, buf)
            >>> m[1, 0] = -1.0
            >>> buf[3]
            -1.0
        """
        rows = _check_extent("rows", rows)
        cols = _check_extent("cols", cols)
        array, dt, mode = _as_storage(data, dtype)
        if array.size != rows * cols:
            raise ShapeMismatchError(
                message=f"data length {array.size} does not match "
                        f"{rows}x{cols} = {rows * cols} elements"
            )
        if mode is OwnershipMode.BORROWED:
            logger.debug("Wrapping caller array as %dx%d %s matrix", rows, cols, dt)
        return cls(Buffer(array, dt), rows, cols, cols, ownership=mode)

    @classmethod
    def wrap_strided(
        cls,
        rows: int,
        cols: int,
        stride: int,
        data: Union[np.ndarray, Sequence[Scalar]],
        dtype: Optional[Union[DType, str]] = None,
    ) -> "Matrix":
        """
        Wrap flat data under an explicit row stride.

        Row i is ``data[i * stride : i * stride + cols]``; elements between
        rows are never read. Useful for describing storage produced elsewhere
        with padding between rows.

        Raises:
            InvalidArgumentError: If stride < cols
            ShapeMismatchError: If data is too short for the last row

        Example:
            >>> m = Matrix.wrap_strided(2, 2, 3, [4.0, 4.0, 0.0, 7.0, 7.0])
            >>> m.to_list()
            [[4.0, 4.0], [7.0, 7.0]]
        """
        rows = _check_extent("rows", rows)
        cols = _check_extent("cols", cols)
        stride = _check_extent("stride", stride)
        if stride < cols:
            raise InvalidArgumentError(
                message=f"stride ({stride}) must be at least cols ({cols})"
            )
        array, dt, mode = _as_storage(data, dtype)
        needed = _span(rows, cols, stride)
        if array.size < needed:
            raise ShapeMismatchError(
                message=f"data length {array.size} too short for {rows}x{cols} "
                        f"with stride {stride} (needs {needed})"
            )
        return cls(Buffer(array, dt), rows, cols, stride, ownership=mode)

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[Sequence[Scalar]],
        dtype: Optional[Union[DType, str]] = None,
    ) -> "Matrix":
        """Create a packed matrix from a list of equal-length rows."""
        nrows = len(rows)
        ncols = len(rows[0]) if nrows else 0
        flat: List[Scalar] = []
        for i, row in enumerate(rows):
            if len(row) != ncols:
                raise ShapeMismatchError(
                    message=f"row {i} has {len(row)} values, expected {ncols}"
                )
            flat.extend(row)
        return cls.from_data(nrows, ncols, flat, dtype=dtype)

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def stride(self) -> int:
        return self._stride

    @property
    def shape(self) -> Tuple[int, int]:
        """Logical shape (rows, cols). Stride is not part of the shape."""
        return (self._rows, self._cols)

    @property
    def size(self) -> int:
        """Number of logical elements."""
        return self._rows * self._cols

    @property
    def dtype(self) -> DType:
        return self._buffer.dtype

    @property
    def ownership(self) -> OwnershipMode:
        return self._ownership

    @property
    def is_view(self) -> bool:
        return self._ownership is OwnershipMode.VIEW

    @property
    def owns_data(self) -> bool:
        return self._ownership is OwnershipMode.OWNED

    @property
    def is_contiguous(self) -> bool:
        """Check if rows are adjacent in the buffer (packed)."""
        return self._stride == self._cols or self._rows <= 1

    @property
    def buffer(self) -> Buffer:
        """Backing storage, shared with every aliasing matrix."""
        return self._buffer

    @property
    def base(self) -> Optional["Matrix"]:
        """Matrix this view was sliced from (None if not a view)."""
        if self._ref_chain is None or self._ref_chain.is_empty:
            return None
        return self._ref_chain._refs[0]

    @property
    def window(self) -> np.ndarray:
        """
        Flat buffer window covered by this matrix.

        For a view this includes the source's elements between rows.
        Use iter_rows() to visit logical rows.
        """
        return self._data

    # =========================================================================
    # Element Access
    # =========================================================================

    def _check_index(self, i: int, j: int) -> int:
        """Validate (i, j) and return its window offset."""
        i = operator.index(i)
        j = operator.index(j)
        if i < 0 or j < 0:
            raise IndexOutOfBoundsError(
                message=f"negative index ({i}, {j})"
            )
        if i >= self._rows or j >= self._cols:
            raise IndexOutOfBoundsError(
                message=f"index ({i}, {j}) out of bounds for {self._rows}x{self._cols} matrix"
            )
        return i * self._stride + j

    def get(self, i: int, j: int) -> Scalar:
        """
        Get element at (i, j).

        Raises:
            IndexOutOfBoundsError: If i or j is negative or past the extent
        """
        return self._data[self._check_index(i, j)].item()

    def set(self, i: int, j: int, value: Scalar) -> None:
        """
        Set element at (i, j) in place.

        The write goes through the shared buffer, so every matrix aliasing
        that element sees it.

        Raises:
            IndexOutOfBoundsError: If i or j is negative or past the extent
            TypeMismatchError: If value cannot be held by dtype
        """
        offset = self._check_index(i, j)
        if not self.dtype.accepts(value):
            raise TypeMismatchError(
                message=f"cannot store {type(value).__name__} in {self.dtype} matrix"
            )
        self._data[offset] = value

    def __getitem__(self, key) -> Scalar:
        """Get element at (row, col)."""
        if not isinstance(key, tuple) or len(key) != 2:
            raise TypeError("Index must be (row, col) tuple")
        return self.get(key[0], key[1])

    def __setitem__(self, key, value: Scalar) -> None:
        """Set element at (row, col)."""
        if not isinstance(key, tuple) or len(key) != 2:
            raise TypeError("Index must be (row, col) tuple")
        self.set(key[0], key[1], value)

    # =========================================================================
    # Slicing
    # =========================================================================

    def _check_slice(self, i: int, k: int, j: int, l: int) -> None:
        k = operator.index(k)
        l = operator.index(l)
        if k < 0 or l < 0:
            raise SliceOutOfBoundsError(
                message=f"negative slice extent ({k}, {l})"
            )
        if i + k > self._rows or j + l > self._cols:
            raise SliceOutOfBoundsError(
                message=f"{k}x{l} slice at ({i}, {j}) runs past "
                        f"{self._rows}x{self._cols} matrix"
            )

    def _view(self, i: int, k: int, j: int, l: int) -> "Matrix":
        # Corner first, then extent: callers rely on the distinct errors.
        self._check_index(i, j)
        self._check_slice(i, k, j, l)
        offset = self._offset + i * self._stride + j
        return Matrix(
            self._buffer, k, l, self._stride,
            offset=offset, ownership=OwnershipMode.VIEW, source=self,
        )

    def slice(self, i: int, k: int, j: int, l: int) -> "Matrix":
        """
        View of the k x l sub-matrix starting at (i, j).

        The view shares this matrix's buffer and stride. Writes through
        either are visible in both.

        Args:
            i, j: Starting corner, must be a valid element index
            k, l: Number of rows and columns, non-negative

        Raises:
            IndexOutOfBoundsError: If (i, j) is not a valid index
            SliceOutOfBoundsError: If k or l is negative, or
                i + k > rows, or j + l > cols
        """
        view = self._view(i, k, j, l)
        logger.debug("Sliced %dx%d view at (%d, %d), stride %d", k, l, i, j, self._stride)
        return view

    def slice_with_copy(self, i: int, k: int, j: int, l: int) -> "Matrix":
        """
        Independent copy of the k x l sub-matrix starting at (i, j).

        Same bounds rules as slice(). The result owns a fresh packed buffer
        (stride == l) and never aliases this matrix.
        """
        copied = self._view(i, k, j, l).clone()
        logger.debug("Copied %dx%d slice at (%d, %d)", k, l, i, j)
        return copied

    def clone(self) -> "Matrix":
        """Packed, independent copy with the same logical values."""
        out = Matrix.zeros(self._rows, self._cols, dtype=self.dtype)
        for dst, src in zip(out.iter_rows(), self.iter_rows()):
            dst[:] = src
        return out

    # =========================================================================
    # Row Iteration
    # =========================================================================

    def iter_rows(self) -> Iterator[np.ndarray]:
        """
        Yield each logical row in order.

        Row i is the buffer run ``[i * stride, i * stride + cols)`` of this
        matrix's window, returned as a writable numpy view of length cols.
        Each call starts a new pass; stopping early has no side effects.
        """
        data = self._data
        cols = self._cols
        stride = self._stride
        for i in range(self._rows):
            start = i * stride
            yield data[start:start + cols]

    def __iter__(self) -> Iterator[np.ndarray]:
        return self.iter_rows()

    def get_row(self, i: int) -> np.ndarray:
        """Row i as a numpy view of length cols."""
        i = operator.index(i)
        if i < 0 or i >= self._rows:
            raise IndexOutOfBoundsError(
                message=f"row {i} out of bounds for {self._rows} rows"
            )
        start = i * self._stride
        return self._data[start:start + self._cols]

    # =========================================================================
    # Reductions and Element Transforms
    # =========================================================================

    def sum(self) -> Scalar:
        """Sum of all logical elements (zero for an empty matrix)."""
        total = self.dtype.zero
        for row in self.iter_rows():
            total += row.sum().item()
        return total

    def apply_in_place(self, f: Callable[[Scalar], Scalar]) -> "Matrix":
        """Replace every element with f(element). Returns self."""
        from .ops import apply_in_place
        apply_in_place(self, f)
        return self

    def map(self, f: Callable[[Scalar], Scalar]) -> "Matrix":
        """New packed matrix of f(element); self is untouched."""
        from .ops import apply
        return apply(self, f)

    def integrate_rows(self, coordinates: Union[np.ndarray, Sequence[Scalar]]) -> np.ndarray:
        """Trapezoidal integral of each row against coordinates."""
        from .integrate import integrate_rows
        return integrate_rows(self, coordinates)

    # =========================================================================
    # Conversion
    # =========================================================================

    def to_list(self) -> List[List[Scalar]]:
        """Nested Python lists, one per row."""
        return [row.tolist() for row in self.iter_rows()]

    def to_numpy(self) -> np.ndarray:
        """Packed 2-D numpy copy."""
        out = np.empty(self.shape, dtype=self.dtype.numpy_dtype)
        for i, row in enumerate(self.iter_rows()):
            out[i] = row
        return out

    # =========================================================================
    # Magic Methods
    # =========================================================================

    def __add__(self, other: Any) -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        from .ops import add
        return add(self, other)

    def __sub__(self, other: Any) -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        from .ops import subtract
        return subtract(self, other)

    def __mul__(self, other: Any) -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        from .ops import multiply
        return multiply(self, other)

    def __truediv__(self, other: Any) -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        from .ops import divide
        return divide(self, other)

    def __len__(self) -> int:
        return self._rows

    def __repr__(self) -> str:
        kind = self._ownership.value
        header = (f"<Matrix {self._rows}x{self._cols} stride={self._stride} "
                  f"dtype={self.dtype} [{kind}]")
        if self.size == 0:
            return header + ">"
        limit = get_config().repr_max_rows
        lines = []
        for i, row in enumerate(self.iter_rows()):
            if i == limit:
                lines.append(f"  ... ({self._rows - limit} more rows)")
                break
            lines.append("  " + np.array2string(row, separator=", "))
        return header + "\n" + "\n".join(lines) + ">"


# =============================================================================
# Module-Level Factories
# =============================================================================

def allocate(rows: int, cols: int, dtype: Optional[Union[DType, str]] = None) -> Matrix:
    """Zero-filled packed matrix. Same as Matrix.zeros."""
    return Matrix.zeros(rows, cols, dtype=dtype)


def from_data(
    rows: int,
    cols: int,
    data: Union[np.ndarray, Sequence[Scalar]],
    dtype: Optional[Union[DType, str]] = None,
) -> Matrix:
    """Packed matrix over row-major data. Same as Matrix.from_data."""
    return Matrix.from_data(rows, cols, data, dtype=dtype)
