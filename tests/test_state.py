"""Tests for QuantumState."""

import numpy as np
import pytest

from tiny_qsim import (
    Complex,
    GateArityMismatch,
    InvalidDimension,
    Matrix,
    QuantumState,
    QubitCountMismatch,
    QubitIndexOutOfRange,
    ZeroState,
)
from tiny_qsim import gates as g


def basis(n, index):
    v = np.zeros(2 ** n, dtype=np.complex128)
    v[index] = 1.0
    return v


@pytest.fixture
def rng():
    return np.random.default_rng(42)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("n", [1, 2, 4])
def test_initial_state(n):
    psi = QuantumState(n)
    assert psi.dimension == 2 ** n
    np.testing.assert_allclose(psi.amplitudes, basis(n, 0))


def test_requires_one_qubit():
    with pytest.raises(ValueError):
        QuantumState(0)


def test_from_amplitudes_normalizes():
    psi = QuantumState.from_amplitudes([1, 1, 1, 1])
    assert psi.num_qubits == 2
    np.testing.assert_allclose(psi.amplitudes, [0.5] * 4)


def test_from_amplitudes_accepts_complex_values():
    psi = QuantumState.from_amplitudes([Complex(1, 0), Complex(0, 1)])
    np.testing.assert_allclose(psi.amplitudes, np.array([1, 1j]) / np.sqrt(2))


def test_from_amplitudes_copies_input():
    values = np.array([1, 0], dtype=np.complex128)
    psi = QuantumState.from_amplitudes(values)
    values[0] = 0
    assert psi.amplitude(0) == Complex(1, 0)


def test_from_amplitudes_zero_vector():
    with pytest.raises(ZeroState):
        QuantumState.from_amplitudes([0, 0, 0, 0])


@pytest.mark.parametrize("length", [1, 3, 5, 6])
def test_from_amplitudes_bad_length(length):
    with pytest.raises(InvalidDimension):
        QuantumState.from_amplitudes([1] * length)


def test_from_basis_state_and_bit_string():
    np.testing.assert_allclose(QuantumState.from_basis_state(3, 5).amplitudes, basis(3, 5))
    np.testing.assert_allclose(QuantumState.from_bit_string("101").amplitudes, basis(3, 5))
    with pytest.raises(ValueError):
        QuantumState.from_basis_state(2, 4)
    with pytest.raises(ValueError):
        QuantumState.from_bit_string("10a")


# ---------------------------------------------------------------------------
# Normalisation
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("seed", range(5))
def test_normalize_random_vectors(seed):
    rng = np.random.default_rng(seed)
    psi = QuantumState(3)
    psi.amplitudes = rng.normal(size=8) + 1j * rng.normal(size=8)
    assert psi.normalize() is psi
    assert np.sum(np.abs(psi.amplitudes) ** 2) == pytest.approx(1.0, abs=1e-9)
    assert psi.norm() == pytest.approx(1.0)


def test_normalize_zero():
    psi = QuantumState(1)
    psi.amplitudes = np.zeros(2, dtype=np.complex128)
    with pytest.raises(ZeroState):
        psi.normalize()


def test_bit_convention_qubit0_is_msb():
    psi = QuantumState(3)
    assert psi.bit(0b100, 0) == 1
    assert psi.bit(0b100, 2) == 0
    assert psi.bit(0b001, 2) == 1
    assert psi.bit_string(1) == "001"


# ---------------------------------------------------------------------------
# Gate application
# ---------------------------------------------------------------------------

def test_hadamard_twice_is_identity():
    psi = QuantumState(1)
    psi.apply_gate(g.hadamard(), [0]).apply_gate(g.hadamard(), [0])
    np.testing.assert_allclose(psi.amplitudes, [1, 0], atol=1e-12)


def test_bell_state():
    psi = QuantumState(2)
    psi.apply_gate(g.hadamard(), [0]).apply_gate(g.cnot(), [0, 1])
    np.testing.assert_allclose(psi.get_probabilities(), [0.5, 0, 0, 0.5], atol=1e-12)


def test_cnot_on_10_gives_11():
    psi = QuantumState.from_bit_string("10")
    psi.apply_gate(g.cnot(), [0, 1])
    np.testing.assert_allclose(psi.amplitudes, basis(2, 3), atol=1e-12)


def test_cnot_reversed_control():
    psi = QuantumState.from_bit_string("01")
    psi.apply_gate(g.cnot(), [1, 0])
    np.testing.assert_allclose(psi.amplitudes, basis(2, 3), atol=1e-12)


def test_cnot_non_adjacent_qubits():
    psi = QuantumState.from_bit_string("100")
    psi.apply_gate(g.cnot(), [0, 2])
    np.testing.assert_allclose(psi.amplitudes, basis(3, 0b101), atol=1e-12)


@pytest.mark.parametrize("bits,expected", [("110", "111"), ("111", "110"), ("100", "100")])
def test_toffoli(bits, expected):
    psi = QuantumState.from_bit_string(bits)
    psi.apply_gate(g.toffoli(), [0, 1, 2])
    np.testing.assert_allclose(psi.amplitudes, basis(3, int(expected, 2)), atol=1e-12)


def test_fredkin_swaps_when_control_set():
    psi = QuantumState.from_bit_string("110")
    psi.apply_gate(g.fredkin(), [0, 1, 2])
    np.testing.assert_allclose(psi.amplitudes, basis(3, 0b101), atol=1e-12)


def test_full_gate_matrix_matches_kron():
    psi = QuantumState(2)
    h, i = g.hadamard().data, np.eye(2)
    np.testing.assert_allclose(psi.full_gate_matrix(g.hadamard(), [0]).data, np.kron(h, i))
    np.testing.assert_allclose(psi.full_gate_matrix(g.hadamard(), [1]).data, np.kron(i, h))


def test_full_gate_matrix_is_unitary():
    psi = QuantumState(3)
    assert psi.full_gate_matrix(g.toffoli(), [2, 0, 1]).is_unitary()


def test_apply_gate_errors():
    psi = QuantumState(2)
    with pytest.raises(GateArityMismatch):
        psi.apply_gate(g.hadamard(), [0, 1])
    with pytest.raises(QubitIndexOutOfRange):
        psi.apply_gate(g.hadamard(), [2])
    with pytest.raises(InvalidDimension):
        psi.apply_gate(Matrix.identity(3), [0])


# ---------------------------------------------------------------------------
# Measurement and inspection
# ---------------------------------------------------------------------------

def test_measure_basis_state(rng):
    psi = QuantumState.from_bit_string("011")
    outcome = psi.measure(rng)
    assert outcome.basis_index == 3
    assert outcome.bit_string == "011"
    assert outcome.probability == pytest.approx(1.0)


def test_measure_collapses(rng):
    psi = QuantumState(2)
    psi.apply_gate(g.hadamard(), [0]).apply_gate(g.cnot(), [0, 1])
    outcome = psi.measure(rng)
    assert outcome.bit_string in ("00", "11")
    assert outcome.probability == pytest.approx(0.5)
    np.testing.assert_allclose(psi.amplitudes, basis(2, outcome.basis_index))


def test_measure_statistics():
    rng = np.random.default_rng(0)
    counts = np.zeros(2)
    for _ in range(2000):
        psi = QuantumState(1).apply_gate(g.hadamard(), [0])
        counts[psi.measure(rng).basis_index] += 1
    assert counts[0] / 2000 == pytest.approx(0.5, abs=0.05)


def test_density_matrix():
    psi = QuantumState(1).apply_gate(g.hadamard(), [0])
    rho = psi.get_density_matrix()
    np.testing.assert_allclose(rho.data, np.full((2, 2), 0.5), atol=1e-12)
    assert rho.trace().isclose(1)


def test_fidelity():
    zero = QuantumState(1)
    one = QuantumState.from_bit_string("1")
    plus = QuantumState(1).apply_gate(g.hadamard(), [0])
    assert zero.fidelity(zero) == pytest.approx(1.0)
    assert zero.fidelity(one) == pytest.approx(0.0)
    assert zero.fidelity(plus) == pytest.approx(1 / np.sqrt(2))
    with pytest.raises(QubitCountMismatch):
        zero.fidelity(QuantumState(2))


def test_clone_is_independent():
    psi = QuantumState(1)
    copy = psi.clone()
    copy.apply_gate(g.pauli_x(), [0])
    np.testing.assert_allclose(psi.amplitudes, [1, 0])


def test_str():
    psi = QuantumState(2)
    psi.apply_gate(g.hadamard(), [0]).apply_gate(g.cnot(), [0, 1])
    assert str(psi) == "|ψ⟩ = 0.7071|00⟩ + 0.7071|11⟩"
    assert str(QuantumState.from_amplitudes([1, -1j])) == "|ψ⟩ = 0.7071|0⟩ + -0.7071i|1⟩"
