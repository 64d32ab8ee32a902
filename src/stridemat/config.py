"""
Global configuration for stridemat.

Provides:
- Default element kind for freshly allocated matrices
- Display settings for Matrix repr
- Thread-local overrides via a context manager
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, fields, replace
from typing import Any, Iterator, Optional, Union

from ._dtypes import DType, normalize_dtype
from .error import InvalidArgumentError


@dataclass
class MatrixConfig:
    """Settings consulted by Matrix construction and display."""
    default_dtype: DType = DType.float64
    repr_max_rows: int = 6         # Rows shown before repr truncates


# =============================================================================
# Global Configuration State
# =============================================================================

class _Config:
    """
    Global configuration singleton.

    Holds the process-wide settings and a per-thread override stack.

    Example:
        # Global configuration
        stridemat.set_default_dtype('complex128')

        # Local configuration (context manager)
        with stridemat.config_context(default_dtype='complex128'):
            m = Matrix.zeros(2, 2)   # complex128 here
        # Back to global config
    """

    def __init__(self):
        self._global = MatrixConfig()

        # Thread-local storage for context overrides
        self._local = threading.local()

    def _stack(self) -> list:
        if not hasattr(self._local, "stack"):
            self._local.stack = []
        return self._local.stack

    @property
    def current(self) -> MatrixConfig:
        """Effective settings for the calling thread."""
        stack = self._stack()
        return stack[-1] if stack else self._global

    @property
    def default_dtype(self) -> DType:
        return self.current.default_dtype

    @default_dtype.setter
    def default_dtype(self, value: Union[DType, str]):
        self._global.default_dtype = normalize_dtype(value)

    @property
    def repr_max_rows(self) -> int:
        return self.current.repr_max_rows

    @repr_max_rows.setter
    def repr_max_rows(self, value: int):
        if value < 1:
            raise InvalidArgumentError(message=f"repr_max_rows must be positive, got {value}")
        self._global.repr_max_rows = value

    @contextmanager
    def local(self, **overrides: Any) -> Iterator[MatrixConfig]:
        """Override settings for the current thread within a with-block."""
        known = {f.name for f in fields(MatrixConfig)}
        unknown = set(overrides) - known
        if unknown:
            raise TypeError(f"Unknown config option(s): {sorted(unknown)}")
        if "default_dtype" in overrides:
            overrides["default_dtype"] = normalize_dtype(overrides["default_dtype"])

        cfg = replace(self.current, **overrides)
        stack = self._stack()
        stack.append(cfg)
        try:
            yield cfg
        finally:
            stack.pop()

    def reset(self) -> None:
        """Restore global defaults."""
        self._global = MatrixConfig()


# Global config instance
_config = _Config()


# =============================================================================
# Public API
# =============================================================================

def get_config() -> _Config:
    """Get global configuration instance."""
    return _config


def set_default_dtype(dtype: Union[DType, str]) -> None:
    """
    Set element kind used when no dtype is given.

    Args:
        dtype: DType or name ('float64', 'complex128', 'real', 'complex')

    Example:
        >>> stridemat.set_default_dtype('complex128')
        >>> Matrix.zeros(2, 2).dtype
        DType.complex128
    """
    _config.default_dtype = dtype


def get_default_dtype() -> DType:
    """Get element kind used when no dtype is given."""
    return _config.default_dtype


def config_context(**overrides: Any):
    """Thread-local override of config settings (context manager)."""
    return _config.local(**overrides)


# =============================================================================
# Internal Helpers
# =============================================================================

def _resolve_dtype(dtype: Optional[Union[DType, str]]) -> DType:
    """Internal: explicit dtype if given, else the configured default."""
    if dtype is None:
        return _config.default_dtype
    return normalize_dtype(dtype)
