"""Ownership and Reference Management.

This module provides the backing storage shared between a matrix and
the views sliced from it, plus the reference chain that keeps a view's
ancestors alive.

Key Concepts:
    - Buffer: One flat numpy array. Every matrix describing a
      window of it holds the same Buffer object.
    - Reference Chain: When view B is sliced from A, B holds a
      reference to A. Nested chains are flattened so a view of a view
      references the root directly.
    - Release: Python reference counting frees the buffer once the
      owner and every view are gone. There is no destroy step.

Ownership Model:
    1. OWNED data: Allocated by the library, no external holder
    2. BORROWED data: Caller's numpy array wrapped without a copy
    3. VIEW data: Window into another matrix's buffer
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List
from weakref import WeakSet

import numpy as np

from ._dtypes import DType

__all__ = [
    'OwnershipMode',
    'Buffer',
    'RefChain',
]


class OwnershipMode(Enum):
    """How a matrix relates to its backing storage."""
    OWNED = 'owned'
    BORROWED = 'borrowed'
    VIEW = 'view'


# =============================================================================
# Buffer
# =============================================================================

class Buffer:
    """
    Flat backing store for one or more matrices.

    Holds a 1-D numpy array and remembers which matrices currently
    describe a window of it. Holders are tracked weakly, so the count
    drops as soon as a matrix is garbage collected.

    Attributes:
        array: 1-D storage. A borrowed caller array may itself be a
            strided numpy view; offsets index its logical elements.
        dtype: Element kind of array.

    Example:
        >>> buf = Buffer.allocate(6, DType.float64)
        >>> buf.array
        array([0., 0., 0., 0., 0., 0.])
    """

    __slots__ = ("_array", "_dtype", "_holders", "__weakref__")

    def __init__(self, array: np.ndarray, dtype: DType):
        if array.ndim != 1:
            raise ValueError(f"Buffer storage must be 1-D, got {array.ndim}D")
        if array.dtype != dtype.numpy_dtype:
            raise TypeError(
                f"Buffer storage dtype {array.dtype} does not match {dtype}"
            )
        self._array = array
        self._dtype = dtype
        self._holders: WeakSet = WeakSet()

    @classmethod
    def allocate(cls, size: int, dtype: DType) -> "Buffer":
        """Create zero-initialized storage of size elements."""
        return cls(np.zeros(size, dtype=dtype.numpy_dtype), dtype)

    @property
    def array(self) -> np.ndarray:
        return self._array

    @property
    def dtype(self) -> DType:
        return self._dtype

    @property
    def size(self) -> int:
        return self._array.size

    def attach(self, holder: Any) -> None:
        """Register a matrix that describes a window of this buffer."""
        self._holders.add(holder)

    @property
    def holder_count(self) -> int:
        """Number of live matrices sharing this buffer."""
        return len(self._holders)

    @property
    def is_shared(self) -> bool:
        return self.holder_count > 1

    def __len__(self) -> int:
        return self._array.size

    def __repr__(self) -> str:
        return (f"Buffer(size={self.size}, dtype={self._dtype}, "
                f"holders={self.holder_count})")


# =============================================================================
# Reference Chain
# =============================================================================

@dataclass
class RefChain:
    """Maintains reference chain for view matrices.

    When a matrix is created as a view of another, the source
    is kept reachable from the view. RefChain stores strong
    references to all ancestors in the view hierarchy.

    Attributes:
        _refs: List of strong references to ancestors.

    Example:
        >>> m1 = Matrix.zeros(10, 10)
        >>> m2 = m1.slice(0, 5, 0, 5)   # m2._ref_chain contains m1
        >>> m3 = m2.slice(1, 2, 1, 2)   # m3._ref_chain contains m2, m1
        >>> del m1, m2                  # m3 still valid, holds refs
    """
    _refs: List[Any] = field(default_factory=list)

    def add(self, source: Any) -> None:
        """Add source to reference chain.

        If source has its own RefChain, flatten it by
        adding all its references too.

        Args:
            source: Source matrix to reference.
        """
        if source is None or self._contains(source):
            return

        self._refs.append(source)

        chain = getattr(source, '_ref_chain', None)
        if chain is not None:
            for ancestor in chain._refs:
                if not self._contains(ancestor):
                    self._refs.append(ancestor)

    def _contains(self, obj: Any) -> bool:
        # Identity, not equality: matrices define elementwise operators.
        return any(ref is obj for ref in self._refs)

    @property
    def root(self) -> Any:
        """Outermost ancestor, or None for an empty chain."""
        return self._refs[-1] if self._refs else None

    @property
    def count(self) -> int:
        """Number of held references."""
        return len(self._refs)

    @property
    def is_empty(self) -> bool:
        return not self._refs

    def __repr__(self) -> str:
        return f"RefChain(count={self.count})"
