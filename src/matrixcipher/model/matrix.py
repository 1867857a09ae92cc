"""
Immutable Square Matrix
=======================
Value type used for plaintexts, ciphertexts and keys.

The entries live in a read-only numpy array, so a Matrix can be shared
freely between the key series, the playback state and the renderer.
"""
from __future__ import annotations

from typing import Iterator, TYPE_CHECKING

import numpy as np

from matrixcipher.model.errors import InvalidDimension

if TYPE_CHECKING:
    import numpy.typing as npt

# Absolute tolerance used for round-trip comparisons
DEFAULT_TOLERANCE: float = 1e-9


class Matrix:
    """
    A dense n-by-n matrix of real numbers.

    Every operation returns a new Matrix; the wrapped array is never
    modified after construction.
    """
    __slots__ = ("_data",)

    def __init__(self, data: npt.ArrayLike) -> None:
        array = np.array(data, dtype=np.float64)
        if array.ndim != 2 or array.shape[0] != array.shape[1] or array.shape[0] == 0:
            raise InvalidDimension(f"Matrix must be square and non-empty, got shape {array.shape}.")
        array.flags.writeable = False
        self._data = array

    @classmethod
    def identity(cls, n: int) -> Matrix:
        if n < 1:
            raise InvalidDimension(f"Identity size must be positive, got {n}.")
        return cls(np.eye(n))

    @property
    def size(self) -> int:
        return self._data.shape[0]

    @property
    def data(self) -> npt.NDArray[np.float64]:
        """Read-only view of the entries."""
        return self._data

    @property
    def T(self) -> Matrix:
        return self.transpose()

    def transpose(self) -> Matrix:
        return Matrix(self._data.T)

    def multiply(self, other: Matrix) -> Matrix:
        """Matrix product ``self @ other``."""
        if self.size != other.size:
            raise InvalidDimension(f"Cannot multiply {self.size}x{self.size} by {other.size}x{other.size}.")
        return Matrix(self._data @ other._data)

    def __matmul__(self, other: Matrix) -> Matrix:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.multiply(other)

    def allclose(self, other: Matrix, atol: float = DEFAULT_TOLERANCE) -> bool:
        if self.size != other.size:
            return False
        return bool(np.allclose(self._data, other._data, rtol=0.0, atol=atol))

    def to_array(self) -> npt.NDArray[np.float64]:
        """Writable copy of the entries."""
        return self._data.copy()

    def __getitem__(self, index: tuple[int, int]) -> float:
        return float(self._data[index])

    def __iter__(self) -> Iterator[npt.NDArray[np.float64]]:
        return iter(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.size == other.size and bool(np.array_equal(self._data, other._data))

    def __hash__(self) -> int:
        # Adding 0.0 turns -0.0 into 0.0 so equal matrices hash equally
        return hash((self.size, (self._data + 0.0).tobytes()))

    def __repr__(self) -> str:
        return f"Matrix({self._data.tolist()!r})"


def gen_plaintext(n: int) -> Matrix:
    """Default plaintext: the n-by-n identity."""
    return Matrix.identity(n)
