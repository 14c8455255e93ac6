"""A module containing the shared storage behind every matrix."""
import ctypes
import numbers
from typing import Iterable, Union

import numpy as np

from densemat.types import DataType, Float64


class Buffer:
    """Contiguous, fixed-length run of doubles shared by one or more matrices."""

    def __init__(self, content: Union[int, Iterable], dtype: DataType = Float64()) -> None:
        if isinstance(content, numbers.Integral):
            content = np.zeros(content, dtype=dtype.numpy)

        content: np.ndarray = np.ascontiguousarray(
            content
            if isinstance(content, np.ndarray)
            else np.fromiter(content, dtype.numpy),
            dtype=dtype.numpy,
        ).reshape(-1)

        self.dtype = dtype
        self.length: int = content.size
        self.buffer = (dtype.ctype * self.length)()

        ctypes.memmove(
            self.buffer,
            content.ctypes.data,
            self.length * dtype.itemsize,
        )

    def __len__(self) -> int:
        return self.length

    def cells(self) -> np.ndarray:
        """Zero-copy NumPy view over the buffer memory."""
        return np.ctypeslib.as_array(self.buffer)

    def to_numpy(self) -> np.ndarray:
        return self.cells()[: self.length].copy()

    def __repr__(self) -> str:
        return f"Buffer<{self.length}>"
