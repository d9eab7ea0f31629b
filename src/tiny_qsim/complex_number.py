"""
Complex scalar value type.

``Complex`` is immutable: every operation returns a new value. It
interoperates with Python and numpy numbers through :meth:`Complex.coerce`
and ``complex(z)``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Number

from tiny_qsim.constants import DIVISION_EPSILON, NORM_TOLERANCE
from tiny_qsim.errors import DivisionByZero


@dataclass(frozen=True)
class Complex:
    """Complex number ``re + im·i``."""

    re: float
    im: float = 0.0

    # -- Construction -------------------------------------------------------

    @classmethod
    def from_polar(cls, magnitude: float, angle: float) -> Complex:
        """Build ``magnitude · e^(i·angle)``."""
        return cls(magnitude * math.cos(angle), magnitude * math.sin(angle))

    @classmethod
    def coerce(cls, value: Complex | Number) -> Complex:
        """Promote a Python/numpy number (or pass a Complex through)."""
        if isinstance(value, Complex):
            return value
        z = complex(value)
        return cls(z.real, z.imag)

    # -- Algebra ------------------------------------------------------------

    def add(self, other: Complex) -> Complex:
        return Complex(self.re + other.re, self.im + other.im)

    def subtract(self, other: Complex) -> Complex:
        return Complex(self.re - other.re, self.im - other.im)

    def multiply(self, other: Complex) -> Complex:
        return Complex(
            self.re * other.re - self.im * other.im,
            self.re * other.im + self.im * other.re,
        )

    def divide(self, other: Complex) -> Complex:
        """
        Complex division.

        Raises
        ------
        DivisionByZero
            If the divisor's squared magnitude is ~0.
        """
        denominator = other.re * other.re + other.im * other.im
        if denominator < DIVISION_EPSILON:
            raise DivisionByZero(f"Cannot divide {self} by {other}")
        return Complex(
            (self.re * other.re + self.im * other.im) / denominator,
            (self.im * other.re - self.re * other.im) / denominator,
        )

    def magnitude(self) -> float:
        return math.sqrt(self.re * self.re + self.im * self.im)

    def phase(self) -> float:
        return math.atan2(self.im, self.re)

    def conjugate(self) -> Complex:
        return Complex(self.re, -self.im)

    def isclose(self, other: Complex | Number, tol: float = 1e-9) -> bool:
        """True if ``|self - other| <= tol``."""
        return self.subtract(Complex.coerce(other)).magnitude() <= tol

    # -- Operator forms -----------------------------------------------------

    def __add__(self, other):
        return self.add(Complex.coerce(other))

    __radd__ = __add__

    def __sub__(self, other):
        return self.subtract(Complex.coerce(other))

    def __rsub__(self, other):
        return Complex.coerce(other).subtract(self)

    def __mul__(self, other):
        return self.multiply(Complex.coerce(other))

    __rmul__ = __mul__

    def __truediv__(self, other):
        return self.divide(Complex.coerce(other))

    def __rtruediv__(self, other):
        return Complex.coerce(other).divide(self)

    def __neg__(self) -> Complex:
        return Complex(-self.re, -self.im)

    def __abs__(self) -> float:
        return self.magnitude()

    def __complex__(self) -> complex:
        return complex(self.re, self.im)

    def __str__(self) -> str:
        if abs(self.im) < NORM_TOLERANCE:
            return f"{self.re:.4f}"
        if abs(self.re) < NORM_TOLERANCE:
            return f"{self.im:.4f}i"
        if self.im >= 0:
            return f"({self.re:.4f} + {self.im:.4f}i)"
        return f"({self.re:.4f} - {abs(self.im):.4f}i)"
