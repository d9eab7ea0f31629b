"""
tiny-qsim: a small state-vector quantum circuit simulator.

Features:
- Exact complex arithmetic and dense matrix algebra on numpy buffers
- Catalog of 18 standard gates with case-insensitive aliases
- Circuits with timeline insertion, classical pseudo-gates and multi-shot runs
- Textbook algorithm circuits: Deutsch-Jozsa, Grover, QFT, teleportation

Quick Start:
    >>> from tiny_qsim import create_circuit
    >>> qc = create_circuit(2, seed=1)
    >>> _ = qc.add_gate("H", [0]).add_gate("CNOT", [0, 1]).measure_all()
    >>> result = qc.run(shots=100)
    >>> sorted(result.bit_string_probabilities)  # doctest: +SKIP
    ['00', '11']
"""
__version__ = "1.0.0"

from tiny_qsim import gates
from tiny_qsim.circuit import (
    AggregatedResult,
    CircuitBuilder,
    QuantumCircuit,
    QubitMeasurement,
    ShotResult,
    StateVectorEntry,
    create_circuit,
)
from tiny_qsim.complex_number import Complex
from tiny_qsim.errors import (
    DimensionMismatch,
    DivisionByZero,
    GateArityMismatch,
    InvalidDimension,
    MissingParameter,
    NotSquare,
    NotUnitary,
    QuantumSimulatorError,
    QubitCountMismatch,
    QubitIndexOutOfRange,
    UnknownGate,
    ZeroState,
)
from tiny_qsim.matrix import Matrix, kronecker_product, tensor_product
from tiny_qsim.state import BasisMeasurement, QuantumState

__all__ = [
    # Core
    "Complex",
    "Matrix",
    "kronecker_product",
    "tensor_product",
    "gates",
    "QuantumState",
    "BasisMeasurement",
    # Circuits
    "QuantumCircuit",
    "CircuitBuilder",
    "create_circuit",
    "ShotResult",
    "AggregatedResult",
    "QubitMeasurement",
    "StateVectorEntry",
    # Errors
    "QuantumSimulatorError",
    "DivisionByZero",
    "DimensionMismatch",
    "NotSquare",
    "InvalidDimension",
    "ZeroState",
    "GateArityMismatch",
    "UnknownGate",
    "MissingParameter",
    "QubitIndexOutOfRange",
    "QubitCountMismatch",
    "NotUnitary",
]
