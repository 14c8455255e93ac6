"""Helpers that rebuild matrices out of rows, columns and blocks of others.

Everything here goes through the public Matrix interface: views to address
blocks, set_to() to copy into them, and fresh owned matrices for results.
"""
from __future__ import annotations

import numbers
from typing import Callable, Iterable, Optional, Sequence, Union

import numpy as np

from densemat.errors import (
    BoundsViolationError,
    DimensionMismatchError,
    InvalidShapeError,
)
from densemat.matrix import Matrix, Scalar

Indices = Union[int, Iterable[int]]
DiagonalSource = Union[Scalar, Callable[[float, int], Scalar], Sequence[Scalar], Matrix]


def _as_indices(indices: Indices) -> list[int]:
    if isinstance(indices, numbers.Integral):
        return [int(indices)]
    return [int(i) for i in indices]


def diag(matrix: Matrix, values: Optional[DiagonalSource] = None) -> Matrix:
    """Get, set or build a diagonal.

    - ``diag(v)`` for a column vector ``v`` builds a square matrix with ``v``
      on its diagonal.
    - ``diag(m)`` returns the diagonal of ``m`` as a new column vector.
    - ``diag(m, values)`` writes ``values`` (a number, a ``fn(value, i)``
      callable, or ``min(rows, cols)`` values) onto the diagonal of ``m`` in
      place and returns ``m``.
    """
    length = min(matrix.rows, matrix.cols)

    if values is None:
        if matrix.cols == 1 and matrix.rows > 1:
            vector = matrix.to_array()
            return Matrix.zeros(matrix.rows).set_diag(lambda value, i: vector[i])

        return Matrix.from_values(length, 1, [matrix.get(i, i) for i in range(length)])

    if callable(values):
        return matrix.set_diag(values)
    if isinstance(values, numbers.Real):
        return matrix.set_diag(lambda value, i: values)

    flat = values.to_array() if isinstance(values, Matrix) else np.array(values, dtype=np.float64).reshape(-1)
    if flat.size != length:
        raise InvalidShapeError(
            f"Diagonal of a {matrix.shape} matrix holds {length} values, got {flat.size}",
            shape=matrix.shape,
        )

    return matrix.set_diag(lambda value, i: flat[i])


def reshape(matrix: Matrix, rows: int, cols: int) -> Matrix:
    """Refill a new ``rows x cols`` matrix from the row-major order of ``matrix``."""
    if rows * cols != matrix.size:
        raise InvalidShapeError(
            f"Cannot reshape {matrix.size} values into ({rows}, {cols})",
            shape=(rows, cols),
        )

    return Matrix.from_numpy(np.fromiter(matrix, np.float64, matrix.size).reshape(rows, cols))


def _pairs(first: Indices, second: Indices, limit: int, axis: str) -> list[tuple[int, int]]:
    first, second = _as_indices(first), _as_indices(second)

    if len(first) != len(second):
        raise DimensionMismatchError(
            f"Cannot pair {len(first)} {axis}s with {len(second)} {axis}s",
            expected=len(first),
            actual=len(second),
        )
    for i in first + second:
        if not 0 <= i < limit:
            raise BoundsViolationError(f"{axis.capitalize()} {i} is out of range for {limit} {axis}s")

    return list(zip(first, second))


def swap_rows(matrix: Matrix, rows_a: Indices, rows_b: Indices) -> Matrix:
    """Exchange rows ``rows_a[i]`` and ``rows_b[i]`` in place, pair by pair."""
    for a, b in _pairs(rows_a, rows_b, matrix.rows, "row"):
        held = matrix.row(a).to_array()
        matrix.row(a).set_to(matrix.row(b))
        matrix.row(b).set_to(held)

    return matrix


def swap_cols(matrix: Matrix, cols_a: Indices, cols_b: Indices) -> Matrix:
    """Exchange columns ``cols_a[i]`` and ``cols_b[i]`` in place, pair by pair."""
    for a, b in _pairs(cols_a, cols_b, matrix.cols, "column"):
        held = matrix.column(a).to_array()
        matrix.column(a).set_to(matrix.column(b))
        matrix.column(b).set_to(held)

    return matrix


def minor(matrix: Matrix, row: int, col: int) -> Matrix:
    return matrix.minor(row, col)


def repmat(matrix: Matrix, v_repeat: int = 1, h_repeat: int = 1) -> Matrix:
    """Tile ``matrix`` ``v_repeat`` times down and ``h_repeat`` times across."""
    if v_repeat < 1 or h_repeat < 1:
        raise InvalidShapeError(
            f"Repeat counts must be positive, got ({v_repeat}, {h_repeat})",
            shape=(v_repeat, h_repeat),
        )

    rows, cols = matrix.shape
    out = Matrix.owned(rows * v_repeat, cols * h_repeat)
    tile = matrix.to_array()

    for i in range(v_repeat):
        for j in range(h_repeat):
            out.sub_matrix(i * rows, j * cols, rows, cols).set_to(tile)

    return out


def _require_operands(matrices: Sequence[Matrix], name: str) -> None:
    if not matrices:
        raise InvalidShapeError(f"{name}() needs at least one matrix")


def vcat(*matrices: Matrix) -> Matrix:
    """Stack matrices of equal width on top of each other."""
    _require_operands(matrices, "vcat")

    width = matrices[0].cols
    for m in matrices:
        if m.cols != width:
            raise DimensionMismatchError(
                f"vcat() needs equal widths, got {width} and {m.cols}",
                expected=width,
                actual=m.cols,
            )

    out = Matrix.owned(sum(m.rows for m in matrices), width)
    top = 0
    for m in matrices:
        out.sub_matrix(top, 0, m.rows, width).set_to(m)
        top += m.rows

    return out


def hcat(*matrices: Matrix) -> Matrix:
    """Place matrices of equal height side by side."""
    _require_operands(matrices, "hcat")

    height = matrices[0].rows
    for m in matrices:
        if m.rows != height:
            raise DimensionMismatchError(
                f"hcat() needs equal heights, got {height} and {m.rows}",
                expected=height,
                actual=m.rows,
            )

    out = Matrix.owned(height, sum(m.cols for m in matrices))
    left = 0
    for m in matrices:
        out.sub_matrix(0, left, height, m.cols).set_to(m)
        left += m.cols

    return out
