"""
Error handling for stridemat.

Every failure carries a numeric code from the table below. Each code maps to
its own exception subclass so callers can tell a bad corner index apart from
a slice extent that runs past the edge.
"""

from __future__ import annotations

from typing import Optional


# =============================================================================
# Error Codes
# =============================================================================

# Success
MAT_OK = 0

# General errors (1-9)
MAT_ERROR_UNKNOWN = 1

# Argument errors (10-19)
MAT_ERROR_INVALID_ARGUMENT = 10
MAT_ERROR_DIMENSION_MISMATCH = 11
MAT_ERROR_INDEX_OUT_OF_BOUNDS = 14
MAT_ERROR_SLICE_OUT_OF_BOUNDS = 15

# Type errors (20-29)
MAT_ERROR_TYPE_MISMATCH = 21


# Error code to message mapping
_ERROR_MESSAGES = {
    MAT_OK: "Success",
    MAT_ERROR_UNKNOWN: "Unknown error",
    MAT_ERROR_INVALID_ARGUMENT: "Invalid argument",
    MAT_ERROR_DIMENSION_MISMATCH: "Dimension mismatch",
    MAT_ERROR_INDEX_OUT_OF_BOUNDS: "Index out of bounds",
    MAT_ERROR_SLICE_OUT_OF_BOUNDS: "Slice out of bounds",
    MAT_ERROR_TYPE_MISMATCH: "Type mismatch",
}


# =============================================================================
# Exception Classes
# =============================================================================

class MatrixError(Exception):
    """
    Base exception for all stridemat errors.

    Subclasses also derive from the closest builtin exception, so
    ``except IndexError`` catches out-of-bounds access as usual.
    """

    # Re-export error codes as class attributes for convenience
    OK = MAT_OK
    ERROR_UNKNOWN = MAT_ERROR_UNKNOWN
    ERROR_INVALID_ARGUMENT = MAT_ERROR_INVALID_ARGUMENT
    ERROR_DIMENSION_MISMATCH = MAT_ERROR_DIMENSION_MISMATCH
    ERROR_INDEX_OUT_OF_BOUNDS = MAT_ERROR_INDEX_OUT_OF_BOUNDS
    ERROR_SLICE_OUT_OF_BOUNDS = MAT_ERROR_SLICE_OUT_OF_BOUNDS
    ERROR_TYPE_MISMATCH = MAT_ERROR_TYPE_MISMATCH

    default_code = MAT_ERROR_UNKNOWN

    def __init__(self, code: Optional[int] = None, message: Optional[str] = None):
        """
        Create exception.

        Args:
            code: Error code (defaults to the subclass code)
            message: Optional detailed message (generic text if not provided)
        """
        if code is None:
            code = self.default_code
        self.code = code
        if message is None:
            message = _ERROR_MESSAGES.get(code, f"Unknown error (code={code})")
        self.message = message
        super().__init__(f"Matrix Error {code}: {message}")


class InvalidArgumentError(MatrixError, ValueError):
    """Argument outside its domain (negative extent, wrong rank, ...)."""
    default_code = MAT_ERROR_INVALID_ARGUMENT


class ShapeMismatchError(MatrixError, ValueError):
    """Data length or operand shape disagrees with what was asked for."""
    default_code = MAT_ERROR_DIMENSION_MISMATCH


class IndexOutOfBoundsError(MatrixError, IndexError):
    """Element index negative or past the matrix extent."""
    default_code = MAT_ERROR_INDEX_OUT_OF_BOUNDS


class SliceOutOfBoundsError(MatrixError, IndexError):
    """Slice extent negative or running past the source matrix."""
    default_code = MAT_ERROR_SLICE_OUT_OF_BOUNDS


class TypeMismatchError(MatrixError, TypeError):
    """Value cannot be stored in the matrix element kind."""
    default_code = MAT_ERROR_TYPE_MISMATCH

