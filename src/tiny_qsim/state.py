"""
Quantum register as an explicit amplitude vector.

Indexing convention: qubit 0 is the most significant bit of the basis index,
so the bit of qubit ``q`` at index ``i`` is ``(i >> (n - 1 - q)) & 1``.

Gate application is dense: every call builds the full
``2^n × 2^n`` operator and multiplies it into the amplitude vector, costing
O(4^n) time and memory per gate. That bounds practical use to a handful of
qubits (the circuit engine caps registers at ``MAX_QUBITS``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np
from numpy import ndarray

from tiny_qsim.complex_number import Complex
from tiny_qsim.constants import NORM_TOLERANCE
from tiny_qsim.errors import (
    GateArityMismatch,
    InvalidDimension,
    QubitCountMismatch,
    QubitIndexOutOfRange,
    ZeroState,
)
from tiny_qsim.matrix import Matrix


@dataclass(frozen=True)
class BasisMeasurement:
    """Outcome of measuring the whole register."""

    basis_index: int
    bit_string: str
    probability: float


def _as_amplitudes(values: Sequence) -> ndarray:
    return np.array([complex(v) for v in values], dtype=np.complex128)


def _log2_exact(size: int) -> int | None:
    """log2(size) if size is a positive power of two, else None."""
    if size < 1 or size & (size - 1):
        return None
    return size.bit_length() - 1


class QuantumState:
    """
    n-qubit pure state, initialised to ``|0…0⟩``.

    Parameters
    ----------
    num_qubits : int
        Register size, at least 1.

    Example
    -------
    >>> from tiny_qsim import QuantumState, gates
    >>> psi = QuantumState(2)
    >>> _ = psi.apply_gate(gates.hadamard(), [0]).apply_gate(gates.cnot(), [0, 1])
    >>> print(psi)
    |ψ⟩ = 0.7071|00⟩ + 0.7071|11⟩
    """

    def __init__(self, num_qubits: int) -> None:
        if num_qubits < 1:
            raise ValueError(f"Need at least 1 qubit, got {num_qubits}")
        self.num_qubits = num_qubits
        self.dimension = 2 ** num_qubits
        self.amplitudes: ndarray = np.zeros(self.dimension, dtype=np.complex128)
        self.amplitudes[0] = 1.0

    # -- Construction -------------------------------------------------------

    @classmethod
    def from_amplitudes(cls, values: Sequence) -> QuantumState:
        """
        Build a normalized state from arbitrary amplitudes.

        The input is copied, never aliased.

        Raises
        ------
        InvalidDimension
            If the length is not a power of two (or is 1).
        ZeroState
            If every amplitude is zero.
        """
        amps = _as_amplitudes(values)
        num_qubits = _log2_exact(len(amps))
        if not num_qubits:
            raise InvalidDimension(
                f"Number of amplitudes must be a power of 2 (>= 2), got {len(amps)}"
            )
        if np.linalg.norm(amps) < NORM_TOLERANCE:
            raise ZeroState("Cannot normalize zero vector - all amplitudes are zero")

        state = cls(num_qubits)
        state.amplitudes = amps
        return state.normalize()

    @classmethod
    def from_basis_state(cls, num_qubits: int, basis_index: int) -> QuantumState:
        state = cls(num_qubits)
        if not 0 <= basis_index < state.dimension:
            raise ValueError(
                f"Basis index {basis_index} out of range for {num_qubits} qubits"
            )
        state.amplitudes[0] = 0.0
        state.amplitudes[basis_index] = 1.0
        return state

    @classmethod
    def from_bit_string(cls, bit_string: str) -> QuantumState:
        """``'101'`` -> ``|101⟩``."""
        if not bit_string or set(bit_string) - {"0", "1"}:
            raise ValueError(f"Not a bit string: {bit_string!r}")
        return cls.from_basis_state(len(bit_string), int(bit_string, 2))

    # -- Basic properties ---------------------------------------------------

    def amplitude(self, index: int) -> Complex:
        return Complex.coerce(self.amplitudes[index])

    def norm(self) -> float:
        return float(np.linalg.norm(self.amplitudes))

    def bit(self, index: int, qubit: int) -> int:
        """Value of ``qubit`` in basis index ``index``."""
        return (index >> (self.num_qubits - 1 - qubit)) & 1

    def bit_string(self, index: int) -> str:
        return format(index, f"0{self.num_qubits}b")

    def normalize(self) -> QuantumState:
        """
        Scale to unit norm in place and return self.

        Raises
        ------
        ZeroState
            If the norm is below ``NORM_TOLERANCE``.
        """
        norm = self.norm()
        if norm < NORM_TOLERANCE:
            raise ZeroState("Cannot normalize zero vector")
        self.amplitudes = self.amplitudes / norm
        return self

    def clone(self) -> QuantumState:
        cloned = QuantumState(self.num_qubits)
        cloned.amplitudes = self.amplitudes.copy()
        return cloned

    # -- Gate application ---------------------------------------------------

    def _check_qubits(self, qubits: Sequence[int]) -> None:
        for q in qubits:
            if not 0 <= q < self.num_qubits:
                raise QubitIndexOutOfRange(
                    f"Qubit index {q} out of range [0, {self.num_qubits - 1}]"
                )

    def full_gate_matrix(self, gate: Matrix, target_qubits: Sequence[int]) -> Matrix:
        """
        Embed a k-qubit gate into the full 2^n × 2^n operator.

        Entry (i, j) is zero unless i and j agree on every non-target qubit;
        otherwise it is ``gate[sub(i), sub(j)]`` where ``sub`` packs the
        target-qubit bits, first target most significant.
        """
        gate_qubits = _log2_exact(gate.rows)
        if gate_qubits is None or gate.rows != gate.cols:
            raise InvalidDimension(f"Gate matrix size must be a power of 2, got {gate.shape}")
        if len(target_qubits) != gate_qubits:
            raise GateArityMismatch(
                f"Number of target qubits ({len(target_qubits)}) must match "
                f"gate size ({gate_qubits} qubit(s))"
            )
        self._check_qubits(target_qubits)

        n = self.num_qubits
        indices = np.arange(self.dimension)
        # bits[i, q] = value of qubit q in basis index i
        bits = (indices[:, None] >> (n - 1 - np.arange(n))) & 1

        others = np.array([q for q in range(n) if q not in target_qubits], dtype=np.intp)
        allowed = np.all(bits[:, None, others] == bits[None, :, others], axis=-1)

        sub = np.zeros(self.dimension, dtype=np.int64)
        for q in target_qubits:
            sub = (sub << 1) | bits[:, q]

        full = np.where(allowed, gate.data[sub[:, None], sub[None, :]], 0)
        return Matrix(full)

    def apply_gate(self, gate: Matrix, target_qubits: Sequence[int]) -> QuantumState:
        """
        Apply ``gate`` to ``target_qubits`` in place and return self.

        Raises
        ------
        InvalidDimension
            If the gate size is not a power of two.
        GateArityMismatch
            If ``len(target_qubits)`` disagrees with the gate size.
        QubitIndexOutOfRange
            If a target is outside the register.
        """
        full = self.full_gate_matrix(gate, list(target_qubits))
        self.amplitudes = full.data @ self.amplitudes
        return self

    # -- Measurement --------------------------------------------------------

    def measure(self, rng: np.random.Generator | None = None) -> BasisMeasurement:
        """
        Measure every qubit, collapsing to one basis state.

        Walks the cumulative probability and picks the first index whose
        running sum exceeds a uniform sample; rounding shortfall falls back
        to the last index.
        """
        rng = rng if rng is not None else np.random.default_rng()
        probabilities = self.get_probabilities()
        sample = rng.random()

        selected = self.dimension - 1
        cumulative = 0.0
        for i, p in enumerate(probabilities):
            cumulative += p
            if sample < cumulative:
                selected = i
                break

        self.amplitudes = np.zeros(self.dimension, dtype=np.complex128)
        self.amplitudes[selected] = 1.0
        return BasisMeasurement(
            basis_index=selected,
            bit_string=self.bit_string(selected),
            probability=float(probabilities[selected]),
        )

    def get_probabilities(self) -> ndarray:
        """``|amp_i|²`` for every basis index."""
        return np.abs(self.amplitudes) ** 2

    def get_density_matrix(self) -> Matrix:
        """Pure-state density matrix ``ρ_ij = a_i · conj(a_j)``."""
        return Matrix(np.outer(self.amplitudes, self.amplitudes.conj()))

    def fidelity(self, other: QuantumState) -> float:
        """
        Overlap magnitude ``|Σ a_i · conj(b_i)|``.

        Raises
        ------
        QubitCountMismatch
            If the states have different qubit counts.
        """
        if self.num_qubits != other.num_qubits:
            raise QubitCountMismatch(
                f"States must have the same number of qubits "
                f"({self.num_qubits} != {other.num_qubits})"
            )
        return float(abs(np.sum(self.amplitudes * other.amplitudes.conj())))

    # -- Display ------------------------------------------------------------

    def __str__(self) -> str:
        terms = []
        for i, amp in enumerate(self.amplitudes):
            if abs(amp) > NORM_TOLERANCE:
                terms.append(f"{Complex.coerce(amp)}|{self.bit_string(i)}⟩")
        return "|ψ⟩ = " + " + ".join(terms)

    def __repr__(self) -> str:
        return f"QuantumState(qubits={self.num_qubits}, dim={self.dimension})"
