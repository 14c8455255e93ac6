"""
Exception hierarchy for densemat.

All exceptions inherit from DenseMatError so callers can catch any
library-specific error. Input problems derive from ValidationError (and
therefore ValueError); failures of the arithmetic itself derive from
NumericalError.

Exceptions carry the offending values as attributes, and messages state
the actual against the expected value.
"""
from __future__ import annotations


class DenseMatError(Exception):
    """Base exception for all densemat errors."""
    pass


class ValidationError(DenseMatError, ValueError):
    """
    Input validation failed.

    Raised when caller-provided shapes, indices or data fail validation.
    """
    pass


class DimensionMismatchError(ValidationError):
    """
    Operand shapes are incompatible.

    Raised by multiply, solve, set_to, vcat/hcat and the swap helpers.

    Attributes:
        expected: The dimension that was required
        actual: The dimension that was supplied
    """

    def __init__(self, message: str, expected=None, actual=None):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class InvalidShapeError(ValidationError):
    """
    A shape is not acceptable for the requested operation.

    Raised for non-positive shapes, non-square operands to determinant or
    inverse, and element-count mismatches in reshape or diag.

    Attributes:
        shape: The offending (rows, cols) pair, if available
    """

    def __init__(self, message: str, shape: tuple[int, ...] | None = None):
        super().__init__(message)
        self.shape = shape


class InsufficientDataError(ValidationError):
    """
    Not enough values to populate a matrix.

    Attributes:
        required: Number of values needed
        available: Number of values supplied
    """

    def __init__(self, message: str, required: int, available: int):
        super().__init__(message)
        self.required = required
        self.available = available


class BoundsViolationError(ValidationError, IndexError):
    """
    An index or view span falls outside the backing buffer or matrix.
    """
    pass


class NumericalError(DenseMatError):
    """
    Numerical computation failed.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or nearly singular.

    Raised when Gauss-Jordan elimination finds no usable pivot.

    Attributes:
        pivot_column: Column for which no pivot above tolerance was found
        tolerance: The pivot tolerance in force
    """

    def __init__(
        self,
        message: str,
        pivot_column: int | None = None,
        tolerance: float | None = None,
    ):
        super().__init__(message)
        self.pivot_column = pivot_column
        self.tolerance = tolerance
