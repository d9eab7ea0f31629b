"""Tests for the Complex value type."""

import dataclasses
import math

import numpy as np
import pytest

from tiny_qsim import Complex, DivisionByZero, QuantumSimulatorError


# ---------------------------------------------------------------------------
# Arithmetic
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("a,b,c,d", [
    (1.0, 2.0, 3.0, 4.0),
    (-0.5, 0.25, 1e6, -1e-6),
    (0.0, 0.0, 7.0, -3.0),
    (1e-12, -1e12, 2.5, 2.5),
])
def test_add_then_subtract_roundtrip(a, b, c, d):
    z = Complex(a, b).add(Complex(c, d)).subtract(Complex(c, d))
    assert z.isclose(Complex(a, b), tol=1e-3)
    assert z.re == pytest.approx(a, abs=1e-3)
    assert z.im == pytest.approx(b, abs=1e-3)


def test_magnitude_3_4_5():
    assert Complex(3, 4).magnitude() == 5


def test_multiply():
    z = Complex(1, 2).multiply(Complex(3, 4))
    assert z == Complex(-5, 10)


def test_divide():
    z = Complex(1, 2).divide(Complex(3, 4))
    assert z.re == pytest.approx(0.44)
    assert z.im == pytest.approx(0.08)


def test_divide_by_zero():
    with pytest.raises(DivisionByZero):
        Complex(1, 1).divide(Complex(0, 0))


def test_divide_by_zero_is_zero_division_error():
    with pytest.raises(ZeroDivisionError):
        Complex(1, 1) / 0
    assert issubclass(DivisionByZero, QuantumSimulatorError)


def test_phase_and_conjugate():
    assert Complex(0, 1).phase() == pytest.approx(math.pi / 2)
    assert Complex(-1, 0).phase() == pytest.approx(math.pi)
    assert Complex(2, -3).conjugate() == Complex(2, 3)


def test_from_polar():
    z = Complex.from_polar(2.0, math.pi / 2)
    assert z.isclose(Complex(0, 2))


# ---------------------------------------------------------------------------
# Operators and interop
# ---------------------------------------------------------------------------

def test_operators():
    a = Complex(1, 2)
    assert a + Complex(1, 1) == Complex(2, 3)
    assert a - 1 == Complex(0, 2)
    assert 1 - a == Complex(0, -2)
    assert a * 2 == Complex(2, 4)
    assert 2 * a == Complex(2, 4)
    assert (a / 2).isclose(Complex(0.5, 1))
    assert -a == Complex(-1, -2)
    assert abs(Complex(3, 4)) == 5


def test_coerce_python_and_numpy():
    assert Complex.coerce(3) == Complex(3, 0)
    assert Complex.coerce(1 - 2j) == Complex(1, -2)
    assert Complex.coerce(np.complex128(0.5 + 0.5j)) == Complex(0.5, 0.5)
    z = Complex(1, 1)
    assert Complex.coerce(z) is z


def test_complex_builtin():
    assert complex(Complex(1.5, -2)) == 1.5 - 2j


def test_immutable():
    z = Complex(1, 2)
    with pytest.raises(dataclasses.FrozenInstanceError):
        z.re = 5


# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("z,text", [
    (Complex(1, 0), "1.0000"),
    (Complex(-0.5, 1e-12), "-0.5000"),
    (Complex(0, 1), "1.0000i"),
    (Complex(1, 2), "(1.0000 + 2.0000i)"),
    (Complex(1, -2), "(1.0000 - 2.0000i)"),
    (Complex(0.70710678, 0.70710678), "(0.7071 + 0.7071i)"),
])
def test_str(z, text):
    assert str(z) == text
