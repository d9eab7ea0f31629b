"""Tests for Matrix algebra."""

import numpy as np
import pytest

from tiny_qsim import (
    Complex,
    DimensionMismatch,
    Matrix,
    NotSquare,
    kronecker_product,
    tensor_product,
)
from tiny_qsim import gates as g


@pytest.fixture
def m22():
    return Matrix([[1, 2], [3, 4]])


# ---------------------------------------------------------------------------
# Construction and access
# ---------------------------------------------------------------------------

def test_identity_and_zeros():
    np.testing.assert_allclose(Matrix.identity(3).data, np.eye(3))
    z = Matrix.zeros(2, 3)
    assert z.shape == (2, 3)
    assert z.rows == 2 and z.cols == 3
    assert not np.any(z.data)


def test_from_array_promotes_complex_entries():
    m = Matrix.from_array([[Complex(1, 1), 2], [0, Complex(0, -1)]])
    assert m.get(0, 0) == Complex(1, 1)
    assert m.get(0, 1) == Complex(2, 0)
    assert m.get(1, 1) == Complex(0, -1)


@pytest.mark.parametrize("bad", [[], [1, 2], [[]]])
def test_rejects_non_2d(bad):
    with pytest.raises(ValueError):
        Matrix(bad)


def test_get_set_in_place(m22):
    m22.set(0, 1, Complex(0, 5))
    assert m22.get(0, 1) == Complex(0, 5)
    m22[1, 0] = 7
    assert m22[1, 0] == Complex(7, 0)


def test_clone_is_independent(m22):
    copy = m22.clone()
    copy.set(0, 0, 99)
    assert m22.get(0, 0) == Complex(1, 0)


def test_constructor_copies_input():
    arr = np.eye(2, dtype=np.complex128)
    m = Matrix(arr)
    arr[0, 0] = 5
    assert m.get(0, 0) == Complex(1, 0)


def test_np_array_returns_copy():
    m = Matrix.identity(2)
    arr = np.array(m)
    arr[0, 0] = 5
    assert m.get(0, 0) == Complex(1, 0)
    np.testing.assert_allclose(np.asarray(m, dtype=np.complex64), np.eye(2))


# ---------------------------------------------------------------------------
# Arithmetic
# ---------------------------------------------------------------------------

def test_multiply(m22):
    swap = Matrix([[0, 1], [1, 0]])
    np.testing.assert_allclose((m22 @ swap).data, [[2, 1], [4, 3]])
    np.testing.assert_allclose(m22.multiply(swap).data, [[2, 1], [4, 3]])


def test_multiply_dimension_mismatch(m22):
    with pytest.raises(DimensionMismatch):
        m22.multiply(Matrix([[1, 2, 3]]))
    with pytest.raises(ValueError):
        m22 @ Matrix.zeros(3, 3)


def test_add_and_scalar(m22):
    np.testing.assert_allclose((m22 + m22).data, m22.multiply_scalar(2).data)
    np.testing.assert_allclose(m22.multiply_scalar(Complex(0, 1)).data,
                               [[1j, 2j], [3j, 4j]])
    with pytest.raises(DimensionMismatch):
        m22.add(Matrix.identity(3))


def test_transpose_conjugate_dagger():
    m = Matrix([[1, 1j], [0, 2]])
    np.testing.assert_allclose(m.transpose().data, [[1, 0], [1j, 2]])
    np.testing.assert_allclose(m.conjugate().data, [[1, -1j], [0, 2]])
    np.testing.assert_allclose(m.dagger().data, [[1, 0], [-1j, 2]])


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------

def test_is_unitary():
    assert g.hadamard().is_unitary()
    assert not Matrix([[1, 1], [0, 1]]).is_unitary()
    assert not Matrix([[1, 0, 0], [0, 1, 0]]).is_unitary()


def test_is_unitary_tolerance():
    nearly = Matrix([[1 + 1e-6, 0], [0, 1]])
    assert not nearly.is_unitary()
    assert nearly.is_unitary(tolerance=1e-5)


def test_trace(m22):
    assert m22.trace() == Complex(5, 0)
    assert Matrix([[1, 2, 3], [4, 5, 6]]).trace() == Complex(6, 0)


def test_determinant_small(m22):
    assert Matrix([[3]]).determinant() == Complex(3, 0)
    assert m22.determinant().isclose(-2)


def test_determinant_3x3():
    m = Matrix([[6, 1, 1], [4, -2, 5], [2, 8, 7]])
    assert m.determinant().isclose(-306)


def test_determinant_matches_numpy():
    rng = np.random.default_rng(3)
    data = rng.normal(size=(4, 4)) + 1j * rng.normal(size=(4, 4))
    det = Matrix(data).determinant()
    assert det.isclose(complex(np.linalg.det(data)), tol=1e-9)


@pytest.mark.parametrize("gate", [g.pauli_x, g.hadamard, g.cnot, g.swap, g.toffoli])
def test_determinant_of_gates_is_minus_one(gate):
    assert gate().determinant().isclose(-1, tol=1e-9)


def test_determinant_not_square():
    with pytest.raises(NotSquare):
        Matrix([[1, 2, 3], [4, 5, 6]]).determinant()


def test_minor():
    m = Matrix([[1, 2, 3], [4, 5, 6], [7, 8, 9]])
    np.testing.assert_allclose(m.minor(1, 1).data, [[1, 3], [7, 9]])


# ---------------------------------------------------------------------------
# Tensor products
# ---------------------------------------------------------------------------

def test_kronecker_product():
    x, i = g.pauli_x(), Matrix.identity(2)
    np.testing.assert_allclose(kronecker_product([x, i]).data, np.kron(x.data, i.data))
    np.testing.assert_allclose(tensor_product(i, x).data, np.kron(i.data, x.data))
    assert kronecker_product([x, x, x]).shape == (8, 8)


def test_kronecker_product_empty():
    with pytest.raises(ValueError):
        kronecker_product([])


def test_str_uses_complex_format():
    assert str(Matrix([[1, 1j]])) == "[[1.0000, 1.0000i]]"
