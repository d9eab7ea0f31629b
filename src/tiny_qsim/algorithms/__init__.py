"""
Pre-built algorithm circuits
==============================
Textbook circuits assembled from catalog gates. Each factory returns a
ready-to-run :class:`~tiny_qsim.circuit.QuantumCircuit` whose ``metadata``
describes what was built.

Usage:
    from tiny_qsim.algorithms import grover_search

    qc = grover_search(num_qubits=3, marked_index=5)
    result = qc.run()
    print(qc.get_probabilities()[5])   # ~0.945 after 2 iterations on 3 qubits
"""

from __future__ import annotations

import math
from typing import Sequence

from tiny_qsim.circuit import QuantumCircuit


def _bit(value: int, position: int, width: int) -> int:
    """Bit ``position`` of ``value``, position 0 most significant."""
    return (value >> (width - 1 - position)) & 1


def deutsch_jozsa(
    num_qubits: int = 2,
    function_type: str = "constant",
    constant_value: int = 0,
    balanced_type: str = "first-bit",
    custom_inputs: Sequence[int] | None = None,
    seed: int | None = None,
) -> QuantumCircuit:
    """
    Deutsch-Jozsa: decide whether f is constant or balanced in one query.

    The first ``num_qubits - 1`` qubits hold the input, the last one is the
    ancilla. Measuring the inputs gives all zeros iff f is constant.

    Parameters
    ----------
    function_type : {'constant', 'balanced'}
    constant_value : {0, 1}
        Output of a constant f.
    balanced_type : {'first-bit', 'parity', 'custom'}
        ``'custom'`` marks f(x) = 1 for every x in ``custom_inputs`` (at most
        two input qubits, using CNOT / TOFFOLI).
    """
    if num_qubits < 2:
        raise ValueError("Deutsch-Jozsa needs at least 2 qubits (input + ancilla)")
    if function_type not in ("constant", "balanced"):
        raise ValueError(f"Unknown function type '{function_type}'")

    n_inputs = num_qubits - 1
    ancilla = num_qubits - 1
    qc = QuantumCircuit(num_qubits, seed=seed)

    # Ancilla in |−⟩ for phase kickback, inputs in uniform superposition
    qc.x(ancilla)
    for q in range(num_qubits):
        qc.h(q)

    if function_type == "constant":
        if constant_value == 1:
            qc.x(ancilla)
    elif balanced_type == "first-bit":
        qc.cnot(0, ancilla)
    elif balanced_type == "parity":
        for q in range(n_inputs):
            qc.cnot(q, ancilla)
    elif balanced_type == "custom":
        if not custom_inputs:
            raise ValueError("balanced_type='custom' needs custom_inputs")
        if n_inputs > 2:
            raise ValueError("Custom oracles support at most 2 input qubits")
        for x in custom_inputs:
            zeros = [q for q in range(n_inputs) if not _bit(x, q, n_inputs)]
            for q in zeros:
                qc.x(q)
            if n_inputs == 1:
                qc.cnot(0, ancilla)
            else:
                qc.toffoli(0, 1, ancilla)
            for q in zeros:
                qc.x(q)
    else:
        raise ValueError(f"Unknown balanced type '{balanced_type}'")

    for q in range(n_inputs):
        qc.h(q)
        qc.add_measurement(q)

    qc.metadata = {
        "algorithm": "Deutsch-Jozsa",
        "function_type": function_type,
        "constant_value": constant_value,
        "balanced_type": balanced_type,
        "custom_inputs": list(custom_inputs) if custom_inputs else None,
        "description": (
            f"Determines if function f(x) is {function_type}. "
            "Result: |00...0⟩ = constant, other states = balanced"
        ),
    }
    return qc


def _multi_controlled_z(qc: QuantumCircuit, num_qubits: int) -> None:
    if num_qubits == 1:
        qc.z(0)
    elif num_qubits == 2:
        qc.cz(0, 1)
    else:
        last = num_qubits - 1
        qc.h(last)
        qc.toffoli(0, 1, last)
        qc.h(last)


def grover_search(
    num_qubits: int = 3,
    dataset: Sequence | None = None,
    target_element=None,
    marked_index: int | None = None,
    iterations: int | None = None,
    seed: int | None = None,
) -> QuantumCircuit:
    """
    Grover search for one marked basis state.

    The marked index comes from ``target_element``'s position in
    ``dataset``, else ``marked_index``, else the middle of the search space.
    Limited to 3 qubits, where the multi-controlled Z is a single TOFFOLI
    between Hadamards.
    """
    if not 1 <= num_qubits <= 3:
        raise ValueError(f"Grover search supports 1 to 3 qubits, got {num_qubits}")
    space = 2 ** num_qubits

    if dataset is not None and target_element is not None:
        if len(dataset) > space:
            raise ValueError(f"Dataset size ({len(dataset)}) exceeds search space ({space})")
        if target_element not in dataset:
            raise ValueError("Target element not found in dataset")
        marked = list(dataset).index(target_element)
    elif marked_index is not None:
        if not 0 <= marked_index < space:
            raise ValueError(
                f"Marked index {marked_index} out of range for {num_qubits} qubits"
            )
        marked = marked_index
    else:
        marked = space // 2

    rounds = iterations if iterations is not None else int(math.pi / 4 * math.sqrt(space))
    qc = QuantumCircuit(num_qubits, seed=seed)

    for q in range(num_qubits):
        qc.h(q)

    for _ in range(rounds):
        # Oracle: phase-flip the marked state
        zeros = [q for q in range(num_qubits) if not _bit(marked, q, num_qubits)]
        for q in zeros:
            qc.x(q)
        _multi_controlled_z(qc, num_qubits)
        for q in reversed(zeros):
            qc.x(q)

        # Diffusion
        for q in range(num_qubits):
            qc.h(q)
        for q in range(num_qubits):
            qc.x(q)
        _multi_controlled_z(qc, num_qubits)
        for q in range(num_qubits):
            qc.x(q)
        for q in range(num_qubits):
            qc.h(q)

    qc.metadata = {
        "algorithm": "Grover's Search",
        "search_space_size": space,
        "marked_index": marked,
        "target_element": dataset[marked] if dataset is not None else marked,
        "iterations": rounds,
        "description": (
            f"Finds element {marked} among {space} possibilities "
            "by amplitude amplification"
        ),
    }
    return qc


def quantum_fourier_transform(num_qubits: int, seed: int | None = None) -> QuantumCircuit:
    """
    QFT on the whole register, qubit 0 most significant.

    Each controlled phase R_k is a CRZ(2π/2^k) followed by RK(k+1) on the
    control, which removes CRZ's relative phase.
    """
    qc = QuantumCircuit(num_qubits, seed=seed)
    for i in range(num_qubits):
        qc.h(i)
        for j in range(i + 1, num_qubits):
            k = j - i + 1
            qc.add_gate("CRZ", [j, i], {"angle": 2 * math.pi / 2 ** k})
            qc.add_gate("RK", [j], {"k": k + 1})
    for i in range(num_qubits // 2):
        qc.swap(i, num_qubits - 1 - i)

    qc.metadata = {
        "algorithm": "Quantum Fourier Transform",
        "num_qubits": num_qubits,
        "description": f"Transforms computational basis to Fourier basis on {num_qubits} qubits",
    }
    return qc


def quantum_teleportation(
    initial_state: str = "|+⟩",
    num_qubits: int = 3,
    seed: int | None = None,
) -> QuantumCircuit:
    """
    Teleport qubit 0's state to qubit 2 through a Bell pair on qubits 1, 2.

    ``initial_state`` is one of ``'|0⟩'``, ``'|1⟩'``, ``'|+⟩'``, ``'|−⟩'``
    (``'|-⟩'`` is accepted too). Classical corrections are not applied; all
    three qubits are measured.
    """
    if num_qubits < 3:
        raise ValueError("Teleportation needs 3 qubits")
    qc = QuantumCircuit(num_qubits, seed=seed)

    if initial_state == "|1⟩":
        qc.x(0)
    elif initial_state == "|+⟩":
        qc.h(0)
    elif initial_state in ("|−⟩", "|-⟩"):
        qc.h(0).z(0)
    elif initial_state != "|0⟩":
        raise ValueError(f"Unsupported initial state {initial_state!r}")

    qc.h(1).cnot(1, 2)
    qc.cnot(0, 1).h(0)
    qc.add_measurement(0).add_measurement(1).add_measurement(2)

    qc.metadata = {
        "algorithm": "Quantum Teleportation",
        "initial_state": initial_state,
        "description": (
            f"Teleports quantum state {initial_state} from qubit 0 to qubit 2 "
            "using entanglement"
        ),
    }
    return qc


def superdense_coding(message: str | None = None, seed: int | None = None) -> QuantumCircuit:
    """
    Superdense coding on a Bell pair.

    With no ``message`` only the pair is prepared. With a two-bit message the
    sender encodes it on qubit 0 (X for the second bit, Z for the first)
    and the receiver decodes and measures both qubits, reading the message.
    """
    qc = QuantumCircuit(2, seed=seed)
    qc.h(0).cnot(0, 1)

    if message is not None:
        if len(message) != 2 or set(message) - {"0", "1"}:
            raise ValueError(f"Message must be two bits, got {message!r}")
        if message[1] == "1":
            qc.x(0)
        if message[0] == "1":
            qc.z(0)
        qc.cnot(0, 1).h(0)
        qc.measure_all()

    qc.metadata = {
        "algorithm": "Superdense Coding",
        "message": message,
        "description": "Sends two classical bits with one qubit of a shared Bell pair",
    }
    return qc


__all__ = [
    "deutsch_jozsa",
    "grover_search",
    "quantum_fourier_transform",
    "quantum_teleportation",
    "superdense_coding",
]
