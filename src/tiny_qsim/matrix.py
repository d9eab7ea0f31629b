"""
Dense complex matrices.

Entries live in a ``complex128`` numpy buffer; individual entries are read
and written as :class:`~tiny_qsim.complex_number.Complex` values. Matrices
are mutable (``set`` writes in place), so take a ``clone()`` before handing
one to code that may modify it.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from numpy import ndarray

from tiny_qsim.complex_number import Complex
from tiny_qsim.constants import UNITARY_TOLERANCE
from tiny_qsim.errors import DimensionMismatch, NotSquare


def _to_complex(value) -> complex:
    # Complex defines __complex__
    return complex(value)


class Matrix:
    """
    rows × cols complex matrix.

    Parameters
    ----------
    data : array_like
        2-D array of numbers. Copied into a new ``complex128`` buffer.
    """

    __slots__ = ("data",)

    def __init__(self, data) -> None:
        arr = np.array(data, dtype=np.complex128)
        if arr.ndim != 2 or arr.shape[0] < 1 or arr.shape[1] < 1:
            raise ValueError(f"Matrix needs a non-empty 2-D array, got shape {arr.shape}")
        self.data: ndarray = arr

    # -- Construction -------------------------------------------------------

    @classmethod
    def identity(cls, size: int) -> Matrix:
        return cls(np.eye(size, dtype=np.complex128))

    @classmethod
    def zeros(cls, rows: int, cols: int) -> Matrix:
        return cls(np.zeros((rows, cols), dtype=np.complex128))

    @classmethod
    def from_array(cls, rows: Sequence[Sequence]) -> Matrix:
        """Build from nested rows of numbers and/or Complex values."""
        return cls([[_to_complex(v) for v in row] for row in rows])

    # -- Shape and access ---------------------------------------------------

    @property
    def rows(self) -> int:
        return self.data.shape[0]

    @property
    def cols(self) -> int:
        return self.data.shape[1]

    @property
    def shape(self) -> tuple[int, int]:
        return self.data.shape

    def get(self, row: int, col: int) -> Complex:
        return Complex.coerce(self.data[row, col])

    def set(self, row: int, col: int, value) -> None:
        self.data[row, col] = _to_complex(value)

    def __getitem__(self, key: tuple[int, int]) -> Complex:
        row, col = key
        return self.get(row, col)

    def __setitem__(self, key: tuple[int, int], value) -> None:
        row, col = key
        self.set(row, col, value)

    def __array__(self, dtype=None, copy=None) -> ndarray:
        if copy is False and dtype is None:
            return self.data
        if dtype is None:
            return self.data.copy()
        return self.data.astype(dtype)

    def to_numpy(self) -> ndarray:
        """Copy of the underlying buffer."""
        return self.data.copy()

    def clone(self) -> Matrix:
        return Matrix(self.data)

    # -- Arithmetic ---------------------------------------------------------

    def multiply(self, other: Matrix) -> Matrix:
        """
        Matrix product ``self · other``.

        Raises
        ------
        DimensionMismatch
            If ``self.cols != other.rows``.
        """
        if self.cols != other.rows:
            raise DimensionMismatch(
                f"Cannot multiply {self.rows}x{self.cols} by {other.rows}x{other.cols}"
            )
        return Matrix(self.data @ other.data)

    def multiply_scalar(self, scalar) -> Matrix:
        return Matrix(self.data * _to_complex(scalar))

    def add(self, other: Matrix) -> Matrix:
        if self.shape != other.shape:
            raise DimensionMismatch(
                f"Cannot add {self.rows}x{self.cols} and {other.rows}x{other.cols}"
            )
        return Matrix(self.data + other.data)

    def __matmul__(self, other: Matrix) -> Matrix:
        return self.multiply(other)

    def __add__(self, other: Matrix) -> Matrix:
        return self.add(other)

    def transpose(self) -> Matrix:
        return Matrix(self.data.T)

    def conjugate(self) -> Matrix:
        return Matrix(self.data.conj())

    def dagger(self) -> Matrix:
        """Conjugate transpose."""
        return self.conjugate().transpose()

    # -- Properties ---------------------------------------------------------

    def is_unitary(self, tolerance: float = UNITARY_TOLERANCE) -> bool:
        """True if every entry of ``M·M† − I`` has magnitude ≤ tolerance."""
        if self.rows != self.cols:
            return False
        product = self.data @ self.data.conj().T
        diff = np.abs(product - np.eye(self.rows))
        return bool(np.all(diff <= tolerance))

    def trace(self) -> Complex:
        n = min(self.rows, self.cols)
        return Complex.coerce(np.sum(np.diagonal(self.data)[:n]))

    def determinant(self) -> Complex:
        """
        Determinant by Laplace expansion along row 0.

        Exponential in the matrix size; fine for gate-sized matrices.

        Raises
        ------
        NotSquare
            If the matrix is not square.
        """
        if self.rows != self.cols:
            raise NotSquare(f"Determinant needs a square matrix, got {self.rows}x{self.cols}")
        d = self.data
        if self.rows == 1:
            return Complex.coerce(d[0, 0])
        if self.rows == 2:
            return Complex.coerce(d[0, 0] * d[1, 1] - d[0, 1] * d[1, 0])

        det = Complex(0.0, 0.0)
        for j in range(self.cols):
            if d[0, j] == 0:
                continue
            sign = 1.0 if j % 2 == 0 else -1.0
            term = self.get(0, j).multiply(Complex(sign)).multiply(self.minor(0, j).determinant())
            det = det.add(term)
        return det

    def minor(self, row: int, col: int) -> Matrix:
        """Sub-matrix with ``row`` and ``col`` removed."""
        sub = np.delete(np.delete(self.data, row, axis=0), col, axis=1)
        return Matrix(sub)

    # -- Display ------------------------------------------------------------

    def __str__(self) -> str:
        rows = [
            "[" + ", ".join(str(Complex.coerce(v)) for v in row) + "]"
            for row in self.data
        ]
        return "[" + ",\n ".join(rows) + "]"

    def __repr__(self) -> str:
        return f"Matrix(rows={self.rows}, cols={self.cols})"


def kronecker_product(matrices: Sequence[Matrix]) -> Matrix:
    """Kronecker product ``M0 ⊗ M1 ⊗ …`` of a non-empty list."""
    if not matrices:
        raise ValueError("At least one matrix required")
    result = matrices[0].data
    for m in matrices[1:]:
        result = np.kron(result, m.data)
    return Matrix(result)


def tensor_product(a: Matrix, b: Matrix) -> Matrix:
    return kronecker_product([a, b])
