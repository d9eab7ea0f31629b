"""
Exception taxonomy for the simulator.

Every error derives from :class:`QuantumSimulatorError` and from the builtin
exception it specialises, so callers may catch either.
"""

from __future__ import annotations


class QuantumSimulatorError(Exception):
    """Base class for all simulator errors."""


class DivisionByZero(QuantumSimulatorError, ZeroDivisionError):
    """Complex division by a value of (near) zero magnitude."""


class DimensionMismatch(QuantumSimulatorError, ValueError):
    """Matrix shapes are incompatible for the requested operation."""


class NotSquare(QuantumSimulatorError, ValueError):
    """Operation only defined for square matrices."""


class InvalidDimension(QuantumSimulatorError, ValueError):
    """Vector or gate size is not a power of two."""


class ZeroState(QuantumSimulatorError, ValueError):
    """Attempt to normalize or build a state from the zero vector."""


class GateArityMismatch(QuantumSimulatorError, ValueError):
    """Number of target qubits disagrees with the gate size."""


class UnknownGate(QuantumSimulatorError, KeyError):
    """Gate name is not in the registry."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class MissingParameter(QuantumSimulatorError, ValueError):
    """Parameterized gate requested without its parameters."""


class QubitIndexOutOfRange(QuantumSimulatorError, ValueError):
    """Qubit index outside [0, num_qubits)."""


class QubitCountMismatch(QuantumSimulatorError, ValueError):
    """Two states with different qubit counts were compared."""


class NotUnitary(QuantumSimulatorError, ValueError):
    """Matrix failed the unitarity check."""
