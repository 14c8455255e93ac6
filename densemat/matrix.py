"""A module for the dense, column-major matrix and its views."""
from __future__ import annotations

import logging
import numbers
from typing import Callable, Iterable, Iterator, Optional, Sequence, Union

import numpy as np

from densemat.buffer import Buffer
from densemat.errors import (
    BoundsViolationError,
    DimensionMismatchError,
    InsufficientDataError,
    InvalidShapeError,
    SingularMatrixError,
)
from densemat.tolerances import COFACTOR_WARNING_SIZE, resolve_tolerance

logger = logging.getLogger(__name__)

Scalar = Union[int, float]


def _check_shape(rows: int, cols: int) -> None:
    if rows < 1 or cols < 1:
        raise InvalidShapeError(
            f"Matrix shape must be positive, got ({rows}, {cols})", shape=(rows, cols)
        )


def _flat_values(values) -> np.ndarray:
    """Copy of ``values`` as a 1-D float64 array in storage order.

    Nested input is refused: its row-major layout would be read back as
    column-major and silently transpose the matrix.
    """
    values = np.array(values, dtype=np.float64)

    if values.ndim > 1:
        raise DimensionMismatchError(
            f"Expected a flat sequence of values, got {values.ndim} dimensions "
            f"{values.shape}; use from_numpy() or from_rows() for 2-D data",
            expected=1,
            actual=values.ndim,
        )

    return values.reshape(-1)


class Matrix:
    """Column-major matrix of doubles laid over a shared Buffer.

    Element (r, c) lives at ``offset + r + c * stride`` in the buffer. For an
    owned matrix the stride equals the row count; views made by row(),
    column() and sub_matrix() keep their parent's stride and therefore skip
    ``stride - rows`` cells at the end of every column.

    Views share the buffer with the matrix they were taken from: a write
    through one is visible through every other. Use clone() or to_array()
    to detach.
    """

    __slots__ = ("_rows", "_cols", "_stride", "_offset", "_buffer", "_view")

    def __init__(
        self,
        rows: int,
        cols: int,
        buffer: Optional[Buffer] = None,
        stride: Optional[int] = None,
        offset: int = 0,
    ) -> None:
        _check_shape(rows, cols)

        buffer = Buffer(rows * cols) if buffer is None else buffer
        stride = rows if stride is None else stride

        if stride < rows:
            raise BoundsViolationError(
                f"Column stride {stride} is smaller than the row count {rows}"
            )
        if offset < 0:
            raise BoundsViolationError(f"Buffer offset must be non-negative, got {offset}")

        last = offset + (rows - 1) + (cols - 1) * stride
        if last >= len(buffer):
            raise BoundsViolationError(
                f"A ({rows}, {cols}) matrix with stride {stride} at offset {offset} "
                f"needs {last + 1} buffer cells, the buffer holds {len(buffer)}"
            )

        self._rows = int(rows)
        self._cols = int(cols)
        self._stride = int(stride)
        self._offset = int(offset)
        self._buffer = buffer
        self._view = False

    # Construction

    @classmethod
    def owned(cls, rows: int, cols: int) -> Matrix:
        """Allocate a zero-filled matrix with its own buffer."""
        return cls(rows, cols)

    @classmethod
    def from_values(
        cls,
        rows: int,
        cols: int,
        values: Iterable[Scalar],
        stride: Optional[int] = None,
        offset: int = 0,
    ) -> Matrix:
        """Copy flat ``values`` into a new buffer and lay a matrix over them.

        Values are taken in storage (column-major) order. ``values[offset:]``
        is copied; with an explicit ``stride`` the trailing ``stride - rows``
        values of each column are kept in the buffer but are not part of the
        matrix.
        """
        _check_shape(rows, cols)

        values = _flat_values(
            values if isinstance(values, np.ndarray) else list(values)
        )
        span = rows if stride is None else stride
        required = offset + (cols - 1) * span + rows

        if values.size < required:
            raise InsufficientDataError(
                f"A ({rows}, {cols}) matrix needs {required} values, got {values.size}",
                required=required,
                available=values.size,
            )
        if stride is None and values.size > required:
            raise InvalidShapeError(
                f"Expected exactly {required} values for a ({rows}, {cols}) matrix, "
                f"got {values.size}",
                shape=(rows, cols),
            )

        return cls(rows, cols, Buffer(values[offset:]), stride=span)

    @classmethod
    def view(
        cls,
        rows: int,
        cols: int,
        source: Matrix,
        stride: Optional[int] = None,
        offset: int = 0,
    ) -> Matrix:
        """Alias ``source``'s buffer without copying.

        ``offset`` counts buffer cells from the origin of ``source``, so a
        view of a view still addresses the one root buffer.
        """
        out = cls(rows, cols, source._buffer, stride=stride, offset=source._offset + offset)
        out._view = True

        return out

    @classmethod
    def zeros(cls, rows: int, cols: Optional[int] = None) -> Matrix:
        return cls.owned(rows, rows if cols is None else cols)

    @classmethod
    def ones(cls, rows: int, cols: Optional[int] = None) -> Matrix:
        return cls.zeros(rows, cols).fill(1.0)

    @classmethod
    def eye(cls, rows: int, cols: Optional[int] = None) -> Matrix:
        return cls.zeros(rows, cols).set_diag(lambda value, i: 1.0)

    @classmethod
    def random(
        cls, rows: int, cols: Optional[int] = None, seed: Optional[int] = None
    ) -> Matrix:
        """Uniform samples from [0, 1)."""
        rng = np.random.default_rng(seed)
        return cls.from_numpy(rng.random((rows, rows if cols is None else cols)))

    @classmethod
    def from_numpy(cls, array: np.ndarray) -> Matrix:
        """Copy a 2-D array (a 1-D array becomes a column vector)."""
        array = np.asarray(array, dtype=np.float64)

        if array.ndim == 1:
            array = array[:, np.newaxis]
        if array.ndim != 2:
            raise InvalidShapeError(
                f"Expected a 1-D or 2-D array, got {array.ndim} dimensions",
                shape=array.shape,
            )

        rows, cols = array.shape
        return cls.from_values(rows, cols, array.ravel(order="F"))

    @classmethod
    def from_rows(cls, content: Iterable[Iterable[Scalar]]) -> Matrix:
        """Build a matrix from row-major nested sequences."""
        return cls.from_numpy(np.asarray(content, dtype=np.float64))

    # Shape

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def shape(self) -> tuple[int, int]:
        return self._rows, self._cols

    @property
    def size(self) -> int:
        return self._rows * self._cols

    @property
    def is_view(self) -> bool:
        """True when this matrix was taken from another one's buffer."""
        return self._view

    def aliases(self, other: Matrix) -> bool:
        """Whether both matrices write to the same buffer."""
        return self._buffer is other._buffer

    # Element access

    def get(self, r: int, c: int) -> float:
        return self._buffer.buffer[self._offset + r + c * self._stride]

    def set(self, r: int, c: int, value: Scalar) -> Matrix:
        self._buffer.buffer[self._offset + r + c * self._stride] = value
        return self

    def _check_index(self, r: int, c: int) -> None:
        if not (0 <= r < self._rows and 0 <= c < self._cols):
            raise BoundsViolationError(
                f"Index ({r}, {c}) is out of range for a {self.shape} matrix"
            )

    def __getitem__(self, key: tuple[int, int]) -> float:
        r, c = key
        self._check_index(r, c)
        return self.get(r, c)

    def __setitem__(self, key: tuple[int, int], value: Scalar) -> None:
        r, c = key
        self._check_index(r, c)
        self.set(r, c, value)

    # Traversal

    def set_each(self, fn: Callable[[float, int, int], Scalar]) -> Matrix:
        """Replace every cell with ``fn(value, r, c)``, column by column."""
        cells = self._buffer.buffer
        skip = self._stride - self._rows
        i = self._offset

        for c in range(self._cols):
            for r in range(self._rows):
                cells[i] = fn(cells[i], r, c)
                i += 1
            i += skip

        return self

    def for_each(self, fn: Callable[[float, int, int], None]) -> Matrix:
        cells = self._buffer.buffer
        skip = self._stride - self._rows
        i = self._offset

        for c in range(self._cols):
            for r in range(self._rows):
                fn(cells[i], r, c)
                i += 1
            i += skip

        return self

    def map(self, fn: Callable[[float, int, int], Scalar]) -> Matrix:
        return self.clone().set_each(fn)

    def fill(self, value: Scalar) -> Matrix:
        return self.set_each(lambda current, r, c: value)

    def set_diag(self, fn: Callable[[float, int], Scalar]) -> Matrix:
        """Replace each diagonal cell with ``fn(value, i)``."""
        cells = self._buffer.buffer
        step = self._stride + 1
        i = self._offset

        for d in range(min(self._rows, self._cols)):
            cells[i] = fn(cells[i], d)
            i += step

        return self

    def set_to(self, source: Union[Matrix, Sequence[Scalar], np.ndarray]) -> Matrix:
        """Copy ``source`` into this matrix.

        A Matrix source must have the same shape; a flat sequence must hold
        ``rows * cols`` values in column-major order. The source is read in
        full before anything is written, so overlapping views are safe.
        """
        if isinstance(source, Matrix):
            if source.shape != self.shape:
                raise DimensionMismatchError(
                    f"Cannot copy a {source.shape} matrix into a {self.shape} matrix",
                    expected=self.shape,
                    actual=source.shape,
                )
            values = source.to_array()
        else:
            values = _flat_values(source)
            if values.size != self.size:
                raise DimensionMismatchError(
                    f"Expected {self.size} values, got {values.size}",
                    expected=self.size,
                    actual=values.size,
                )

        self._buffer.cells()[self._indices()] = values.reshape(self._cols, self._rows).T

        return self

    def _indices(self) -> np.ndarray:
        """Buffer index of every logical cell, laid out (rows, cols)."""
        return (
            self._offset
            + np.arange(self._rows)[:, np.newaxis]
            + np.arange(self._cols)[np.newaxis, :] * self._stride
        )

    def to_array(self) -> np.ndarray:
        """Fresh, contiguous column-major copy of the logical cells."""
        return self._buffer.cells()[self._indices()].ravel(order="F")

    def to_numpy(self) -> np.ndarray:
        return self._buffer.cells()[self._indices()]

    def to_2d_array(self) -> list[list[float]]:
        return self.to_numpy().tolist()

    def iter_rows(self) -> Iterator[list[float]]:
        for r in range(self._rows):
            yield [self.get(r, c) for c in range(self._cols)]

    def __iter__(self) -> Iterator[float]:
        """Values in row-major order."""
        for row in self.iter_rows():
            yield from row

    def clone(self) -> Matrix:
        return Matrix.from_values(self._rows, self._cols, self.to_array())

    # Views

    def column(self, c: int) -> Matrix:
        self._check_index(0, c)
        return Matrix.view(self._rows, 1, self, self._stride, c * self._stride)

    def row(self, r: int) -> Matrix:
        self._check_index(r, 0)
        return Matrix.view(1, self._cols, self, self._stride, r)

    def sub_matrix(self, r: int, c: int, rows: int, cols: int) -> Matrix:
        _check_shape(rows, cols)
        self._check_index(r, c)
        self._check_index(r + rows - 1, c + cols - 1)

        return Matrix.view(rows, cols, self, self._stride, r + c * self._stride)

    def minor(self, row: int, col: int) -> Matrix:
        """Copy of this matrix without ``row`` and ``col``."""
        if self._rows < 2 or self._cols < 2:
            raise InvalidShapeError(
                f"A {self.shape} matrix has no minor", shape=self.shape
            )
        self._check_index(row, col)

        values = self.to_numpy()
        kept = values[np.arange(self._rows) != row][:, np.arange(self._cols) != col]

        return Matrix.from_numpy(kept)

    def transpose(self) -> Matrix:
        return Matrix.from_numpy(self.to_numpy().T)

    @property
    def T(self) -> Matrix:
        return self.transpose()

    # Algebra

    def scale(self, s: Scalar) -> Matrix:
        return self.map(lambda value, r, c: value * s)

    def neg(self) -> Matrix:
        return self.map(lambda value, r, c: -value)

    def multiply(self, other: Union[Matrix, Scalar]) -> Matrix:
        """Matrix product, or scaling when ``other`` is a number."""
        if isinstance(other, numbers.Real):
            return self.scale(other)
        if not isinstance(other, Matrix):
            raise TypeError(f"Cannot multiply a Matrix by {type(other).__name__}")
        if self._cols != other._rows:
            raise DimensionMismatchError(
                f"Cannot multiply a {self.shape} matrix by a {other.shape} matrix",
                expected=self._cols,
                actual=other._rows,
            )

        result = Matrix.owned(self._rows, other._cols)
        a, b, out = self._buffer.buffer, other._buffer.buffer, result._buffer.buffer

        for k in range(other._cols):
            b_col = other._offset + k * other._stride
            for i in range(self._rows):
                total = 0.0
                for j in range(self._cols):
                    total += a[self._offset + i + j * self._stride] * b[b_col + j]
                out[i + k * self._rows] = total

        return result

    def _require_square(self, operation: str) -> None:
        if self._rows != self._cols:
            raise InvalidShapeError(
                f"{operation} needs a square matrix, got {self.shape}", shape=self.shape
            )

    def determinant(self) -> float:
        """Determinant by cofactor expansion down the first column.

        Sizes up to 3 use closed forms. Larger matrices recurse through
        minor(i, 0), which costs O(n!) and is only practical for small n.
        """
        self._require_square("determinant")

        if self._rows > COFACTOR_WARNING_SIZE:
            logger.warning(
                "determinant(): cofactor expansion of a %dx%d matrix is O(n!)",
                self._rows,
                self._rows,
            )

        return self._cofactor_expansion()

    def _cofactor_expansion(self) -> float:
        n, get = self._rows, self.get

        if n == 1:
            return get(0, 0)
        if n == 2:
            return get(0, 0) * get(1, 1) - get(1, 0) * get(0, 1)
        if n == 3:
            return (
                get(0, 0) * (get(1, 1) * get(2, 2) - get(1, 2) * get(2, 1))
                + get(1, 0) * (get(2, 1) * get(0, 2) - get(2, 2) * get(0, 1))
                + get(2, 0) * (get(0, 1) * get(1, 2) - get(0, 2) * get(1, 1))
            )

        det = 0.0
        for i in range(n):
            sign = 1.0 if i % 2 == 0 else -1.0
            det += sign * get(i, 0) * self.minor(i, 0)._cofactor_expansion()

        return det

    def solve(self, rhs: Matrix, tolerance: Optional[float] = None) -> Matrix:
        """Solve ``self @ X = rhs`` by Gauss-Jordan elimination.

        A pivot smaller than ``tolerance`` (default 1e-10) is repaired by
        adding the first lower row with a usable entry in that column, rather
        than by swapping rows. Work happens on copies; neither operand is
        modified, also when SingularMatrixError is raised.
        """
        if not isinstance(rhs, Matrix):
            raise TypeError(f"Cannot solve against {type(rhs).__name__}, expected a Matrix")
        self._require_square("solve")
        if rhs._rows != self._rows:
            raise DimensionMismatchError(
                f"Right-hand side has {rhs._rows} rows, expected {self._rows}",
                expected=self._rows,
                actual=rhs._rows,
            )
        tolerance = resolve_tolerance(tolerance)

        working = self.clone()
        result = rhs.clone()

        n = self._rows
        wd, rd = working._buffer.buffer, result._buffer.buffer
        w_end, r_end = n * n, n * result._cols

        for r in range(n):
            d = r + r * n

            if abs(wd[d]) < tolerance:
                for r2 in range(r + 1, n):
                    if abs(wd[r2 + r * n]) > tolerance:
                        logger.debug("solve(): pivot %d is below %g, adding row %d", r, tolerance, r2)
                        for k in range(0, w_end, n):
                            wd[k + r] += wd[k + r2]
                        for k in range(0, r_end, n):
                            rd[k + r] += rd[k + r2]
                        break
                else:
                    logger.debug("solve(): no usable pivot for column %d", r)
                    raise SingularMatrixError(
                        f"Matrix is singular: no pivot above {tolerance:g} in column {r}",
                        pivot_column=r,
                        tolerance=tolerance,
                    )

            p = 1.0 / wd[d]
            for k in range(r, w_end, n):
                wd[k] *= p
            for k in range(r, r_end, n):
                rd[k] *= p

            for r2 in range(n):
                if r2 == r:
                    continue
                q = wd[r2 + r * n]
                for k in range(0, w_end, n):
                    wd[k + r2] -= q * wd[k + r]
                for k in range(0, r_end, n):
                    rd[k + r2] -= q * rd[k + r]

        return result

    def inverse(self, tolerance: Optional[float] = None) -> Matrix:
        self._require_square("inverse")
        return self.solve(Matrix.eye(self._rows), tolerance=tolerance)

    # Operators

    def __matmul__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.multiply(other)

    def __mul__(self, other):
        if not isinstance(other, (Matrix, numbers.Real)):
            return NotImplemented
        return self.multiply(other)

    def __rmul__(self, other):
        if not isinstance(other, numbers.Real):
            return NotImplemented
        return self.scale(other)

    def __neg__(self) -> Matrix:
        return self.neg()

    def __repr__(self) -> str:
        return f"Matrix<{self.shape}>"
