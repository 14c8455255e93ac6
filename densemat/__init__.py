from . import buffer, errors, manipulation, matrix, tolerances, types
from .buffer import Buffer
from .errors import (
    BoundsViolationError,
    DenseMatError,
    DimensionMismatchError,
    InsufficientDataError,
    InvalidShapeError,
    NumericalError,
    SingularMatrixError,
    ValidationError,
)
from .manipulation import diag, hcat, minor, repmat, reshape, swap_cols, swap_rows, vcat
from .matrix import Matrix

__all__ = [
    "Buffer",
    "Matrix",
    "manipulation",
    "errors",
    "tolerances",
    "diag",
    "reshape",
    "swap_rows",
    "swap_cols",
    "minor",
    "repmat",
    "vcat",
    "hcat",
    "zeros",
    "ones",
    "eye",
    "random",
    "DenseMatError",
    "ValidationError",
    "DimensionMismatchError",
    "InvalidShapeError",
    "InsufficientDataError",
    "BoundsViolationError",
    "NumericalError",
    "SingularMatrixError",
]

zeros = Matrix.zeros
ones = Matrix.ones
eye = Matrix.eye
random = Matrix.random
