"""Internal type menu card."""
from __future__ import annotations

import ctypes
from abc import ABC, abstractmethod

import numpy as np


class DataType(ABC):
    """Generic element-type class."""

    @property
    @abstractmethod
    def ctype(self) -> type:
        """Get corresponding ctypes element type.

        Returns:
            type: ctypes scalar type used for buffer cells.
        """

    @property
    @abstractmethod
    def numpy(self) -> np.dtype:
        """Get corresponding NumPy type.

        Returns:
            np.dtype: NumPy data-type.
        """

    @property
    def itemsize(self) -> int:
        return ctypes.sizeof(self.ctype)


class Float64(DataType):
    ctype = ctypes.c_double
    numpy = np.float64
