"""
Quantum circuit engine.

A :class:`QuantumCircuit` owns one :class:`~tiny_qsim.state.QuantumState`, an
ordered program of operations and a list of measurement slots. Running the
circuit applies every operation in order, then resolves the measurements.

The owned state is *not* reset between runs or between shots: a state
supplied through :meth:`QuantumCircuit.set_input_state` (or assigned to
``circuit.state``) is what every run starts from, and each shot continues
from wherever the previous one left the register.

Cost is O(shots · gates · 4^n) because every gate is embedded densely.

Example
-------
>>> from tiny_qsim import QuantumCircuit
>>> qc = QuantumCircuit(2, seed=7)
>>> _ = qc.add_gate("H", [0]).add_gate("CNOT", [0, 1])
>>> qc.get_probabilities()
array([0.5, 0. , 0. , 0.5])
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence, Union

import numpy as np
from numpy import ndarray

from tiny_qsim import gates as g
from tiny_qsim.complex_number import Complex
from tiny_qsim.constants import DOMINANT_AMPLITUDE, MAX_QUBITS, NORM_TOLERANCE
from tiny_qsim.errors import (
    GateArityMismatch,
    QubitCountMismatch,
    QubitIndexOutOfRange,
    UnknownGate,
)
from tiny_qsim.matrix import Matrix
from tiny_qsim.state import QuantumState

logger = logging.getLogger(__name__)

CLASSICAL_GATES: dict[str, int] = {"NOT": 1, "AND": 2, "OR": 2}
"""Classical pseudo-gate name -> number of input qubits."""


# ---------------------------------------------------------------------------
# Program operations
# ---------------------------------------------------------------------------

@dataclass
class GateOperation:
    """A unitary gate with its matrix materialised at insertion time."""

    name: str
    target_qubits: tuple[int, ...]
    matrix: Matrix
    params: dict[str, Any] = field(default_factory=dict)
    position: float | None = None

    @property
    def qubits(self) -> tuple[int, ...]:
        return self.target_qubits


@dataclass
class ClassicalOperation:
    """Irreversible NOT / AND / OR acting on basis-state bit patterns."""

    name: str
    input_qubits: tuple[int, ...]
    output_qubit: int
    position: float | None = None

    @property
    def qubits(self) -> tuple[int, ...]:
        return (*self.input_qubits, self.output_qubit)


Operation = Union[GateOperation, ClassicalOperation]


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class QubitMeasurement:
    """Outcome of measuring one qubit."""

    qubit: int
    result: int
    probabilities: tuple[float, float]


@dataclass
class Measurement:
    """A queued measurement slot and its most recent outcome."""

    qubit: int
    result: QubitMeasurement | None = None


@dataclass
class GateRecord:
    """State snapshots around one executed operation."""

    gate: str
    qubits: tuple[int, ...]
    params: dict[str, Any]
    before_state: QuantumState
    after_state: QuantumState


@dataclass
class ShotResult:
    """Everything observed during one shot."""

    initial_state: QuantumState
    final_state: QuantumState | None = None
    measurements: list[QubitMeasurement] = field(default_factory=list)
    gate_operations: list[GateRecord] = field(default_factory=list)

    @property
    def aggregated(self) -> bool:
        return False

    def most_probable_bit_string(self) -> str:
        """Basis state with the highest final probability (lowest index on ties)."""
        state = self.final_state if self.final_state is not None else self.initial_state
        return state.bit_string(int(np.argmax(state.get_probabilities())))


@dataclass
class AggregatedResult:
    """
    Statistics over several shots.

    Attributes
    ----------
    shots : int
        Number of shots executed.
    measurement_stats : dict[int, dict[int, float]]
        Per measured qubit, frequency of outcome 0 and 1.
    bit_string_probabilities : dict[str, float]
        Frequency of each shot's most probable final basis state.
    results : list[ShotResult]
        Raw per-shot results, in execution order.
    """

    shots: int
    measurement_stats: dict[int, dict[int, float]]
    bit_string_probabilities: dict[str, float]
    results: list[ShotResult]

    @property
    def aggregated(self) -> bool:
        return True

    # First-shot view, so callers can treat both result types alike.
    @property
    def initial_state(self) -> QuantumState:
        return self.results[0].initial_state

    @property
    def final_state(self) -> QuantumState | None:
        return self.results[0].final_state

    @property
    def measurements(self) -> list[QubitMeasurement]:
        return self.results[0].measurements

    @property
    def gate_operations(self) -> list[GateRecord]:
        return self.results[0].gate_operations


@dataclass(frozen=True)
class StateVectorEntry:
    """Read model of one basis state, as consumed by visualisation."""

    index: int
    bit_string: str
    amplitude: Complex
    probability: float


# ---------------------------------------------------------------------------
# Circuit
# ---------------------------------------------------------------------------

class QuantumCircuit:
    """
    Quantum circuit over ``num_qubits`` qubits.

    Parameters
    ----------
    num_qubits : int
        Register size, between 1 and ``MAX_QUBITS``.
    seed : int, optional
        Seed for measurement sampling.
    rng : numpy.random.Generator, optional
        Random source; overrides ``seed``.
    """

    def __init__(
        self,
        num_qubits: int,
        seed: int | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        if not 1 <= num_qubits <= MAX_QUBITS:
            raise ValueError(
                f"Circuit needs between 1 and {MAX_QUBITS} qubits, got {num_qubits}"
            )
        self.num_qubits = num_qubits
        self._state = QuantumState(num_qubits)
        self.execution_history: list[ShotResult] = []
        self.metadata: dict[str, Any] = {}
        self._operations: list[Operation] = []
        self._measurements: list[Measurement] = []
        self._rng = rng if rng is not None else np.random.default_rng(seed)

    # -- Properties ---------------------------------------------------------

    @property
    def state(self) -> QuantumState:
        """The register every run starts from."""
        return self._state

    @state.setter
    def state(self, state: QuantumState) -> None:
        if state.num_qubits != self.num_qubits:
            raise QubitCountMismatch(
                f"State has {state.num_qubits} qubits, circuit has {self.num_qubits}"
            )
        self._state = state

    @property
    def operations(self) -> list[Operation]:
        """Program operations in execution order."""
        return list(self._operations)

    @property
    def measurements(self) -> list[Measurement]:
        return list(self._measurements)

    @property
    def num_gates(self) -> int:
        return len(self._operations)

    def __len__(self) -> int:
        return len(self._operations)

    # -- Internal helpers ---------------------------------------------------

    def _validate_qubits(self, qubits: Sequence[int]) -> None:
        for q in qubits:
            if not 0 <= q < self.num_qubits:
                raise QubitIndexOutOfRange(
                    f"Qubit index {q} out of range [0, {self.num_qubits - 1}]"
                )
        if len(set(qubits)) != len(qubits):
            raise ValueError(f"Duplicate qubits in {list(qubits)}")

    def _insert(self, op: Operation) -> None:
        """
        Place ``op`` on the editable timeline.

        Without a position the operation is appended. With one, it goes right
        after the last earlier operation sharing a qubit with it, scanning
        stops at the first operation whose position is >= the requested one,
        and it is appended when nothing earlier shares a qubit.
        """
        if op.position is None:
            self._operations.append(op)
            return

        insert_index = len(self._operations)
        qubits = set(op.qubits)
        for i, existing in enumerate(self._operations):
            existing_position = existing.position if existing.position is not None else i
            if qubits.intersection(existing.qubits) and existing_position < op.position:
                insert_index = i + 1
            elif existing_position >= op.position:
                break
        self._operations.insert(insert_index, op)

    # -- Building -----------------------------------------------------------

    def add_gate(
        self,
        name: str,
        target_qubits: Sequence[int],
        params: Mapping[str, Any] | None = None,
    ) -> QuantumCircuit:
        """
        Queue a catalog gate.

        Parameters
        ----------
        name : str
            Gate name or alias (case-insensitive).
        target_qubits : sequence of int
            Qubits the gate acts on; for controlled gates controls come first.
        params : mapping, optional
            Gate parameters by name (``angle``; ``theta``/``phi``/``lambda``;
            ``k``; ``phi``) and an optional ``position`` for timeline
            insertion.

        Raises
        ------
        UnknownGate, GateArityMismatch, QubitIndexOutOfRange, MissingParameter
        """
        info = g.gate_info(name)
        if info is None:
            raise UnknownGate(f"Unknown gate: {name}")
        targets = tuple(target_qubits)
        if len(targets) != info.n_qubits:
            raise GateArityMismatch(
                f"Gate {name} requires {info.n_qubits} qubits, got {len(targets)}"
            )
        self._validate_qubits(targets)

        params = dict(params or {})
        values = [params[p] for p in info.param_names if p in params]
        op = GateOperation(
            name=info.name,
            target_qubits=targets,
            matrix=info.matrix(*values),
            params=params,
            position=params.get("position"),
        )
        self._insert(op)
        return self

    def add_classical_gate(
        self,
        name: str,
        input_qubits: Sequence[int],
        output_qubit: int,
        position: float | None = None,
    ) -> QuantumCircuit:
        """
        Queue a classical NOT / AND / OR pseudo-gate.

        These are not unitary: they rewrite basis-state bit patterns and
        may discard amplitude.
        """
        kind = name.upper()
        if kind not in CLASSICAL_GATES:
            raise UnknownGate(f"Unknown classical gate: {name}")
        inputs = tuple(input_qubits)
        if len(inputs) != CLASSICAL_GATES[kind]:
            raise GateArityMismatch(
                f"Classical gate {kind} takes {CLASSICAL_GATES[kind]} input(s), "
                f"got {len(inputs)}"
            )
        self._validate_qubits(inputs)
        self._validate_qubits([output_qubit])
        self._insert(ClassicalOperation(kind, inputs, output_qubit, position))
        return self

    def add_measurement(self, qubit: int) -> QuantumCircuit:
        self._validate_qubits([qubit])
        self._measurements.append(Measurement(qubit))
        return self

    # Builder shorthands

    def h(self, qubit: int) -> QuantumCircuit:
        return self.add_gate("H", [qubit])

    def x(self, qubit: int) -> QuantumCircuit:
        return self.add_gate("X", [qubit])

    def y(self, qubit: int) -> QuantumCircuit:
        return self.add_gate("Y", [qubit])

    def z(self, qubit: int) -> QuantumCircuit:
        return self.add_gate("Z", [qubit])

    def rx(self, angle: float, qubit: int) -> QuantumCircuit:
        return self.add_gate("RX", [qubit], {"angle": angle})

    def ry(self, angle: float, qubit: int) -> QuantumCircuit:
        return self.add_gate("RY", [qubit], {"angle": angle})

    def rz(self, angle: float, qubit: int) -> QuantumCircuit:
        return self.add_gate("RZ", [qubit], {"angle": angle})

    def cnot(self, control: int, target: int) -> QuantumCircuit:
        return self.add_gate("CNOT", [control, target])

    def cz(self, control: int, target: int) -> QuantumCircuit:
        return self.add_gate("CZ", [control, target])

    def swap(self, qubit1: int, qubit2: int) -> QuantumCircuit:
        return self.add_gate("SWAP", [qubit1, qubit2])

    def toffoli(self, control1: int, control2: int, target: int) -> QuantumCircuit:
        return self.add_gate("TOFFOLI", [control1, control2, target])

    def measure_all(self) -> QuantumCircuit:
        for q in range(self.num_qubits):
            self.add_measurement(q)
        return self

    def set_input_state(self, state: QuantumState) -> QuantumCircuit:
        """Replace the register; later runs start from a copy of ``state``."""
        self.state = state.clone()
        return self

    # -- Execution ----------------------------------------------------------

    def reset(self) -> QuantumCircuit:
        """Clear measurement results and history; the state is kept."""
        for m in self._measurements:
            m.result = None
        self.execution_history = []
        return self

    def run(self, shots: int = 1) -> ShotResult | AggregatedResult:
        """
        Execute the circuit ``shots`` times.

        Returns
        -------
        ShotResult
            When ``shots == 1``.
        AggregatedResult
            When ``shots > 1``.
        """
        if shots < 1:
            raise ValueError(f"shots must be >= 1, got {shots}")
        results = []
        for _ in range(shots):
            self.reset()
            results.append(self._execute_single_shot())
        return self._aggregate(results)

    def _execute_single_shot(self) -> ShotResult:
        logger.debug("Shot start: %s", self.state)
        result = ShotResult(initial_state=self.state.clone())

        for op in self._operations:
            before = self.state.clone()
            if isinstance(op, ClassicalOperation):
                self._apply_classical_gate(op)
                params: dict[str, Any] = {}
            else:
                self.state.apply_gate(op.matrix, op.target_qubits)
                params = op.params
            result.gate_operations.append(
                GateRecord(op.name, op.qubits, params, before, self.state.clone())
            )

        for m in self._measurements:
            m.result = self.measure_qubit(m.qubit)
            result.measurements.append(m.result)

        result.final_state = self.state.clone()
        logger.debug("Shot end: %s", self.state)
        self.execution_history.append(result)
        return result

    def _apply_classical_gate(self, op: ClassicalOperation) -> None:
        state = self.state
        n = self.num_qubits
        out_mask = 1 << (n - 1 - op.output_qubit)

        if op.name == "NOT":
            (inp,) = op.input_qubits
            new_amplitudes = np.zeros(state.dimension, dtype=np.complex128)
            for i in range(state.dimension):
                flipped = 1 - state.bit(i, inp)
                target = i if state.bit(i, op.output_qubit) == flipped else i ^ out_mask
                new_amplitudes[target] = state.amplitudes[i]
            state.amplitudes = new_amplitudes
            logger.debug("NOT %d -> %d: %s", inp, op.output_qubit, state)
            return

        dominant = np.flatnonzero(np.abs(state.amplitudes) > DOMINANT_AMPLITUDE)
        if dominant.size == 0:
            logger.warning(
                "%s gate skipped: register is not in a single basis state", op.name
            )
            return

        index = int(dominant[0])
        bit1 = state.bit(index, op.input_qubits[0])
        bit2 = state.bit(index, op.input_qubits[1])
        value = bit1 & bit2 if op.name == "AND" else bit1 | bit2

        target = (index & ~out_mask) | (out_mask if value else 0)
        state.amplitudes = np.zeros(state.dimension, dtype=np.complex128)
        state.amplitudes[target] = 1.0
        logger.debug(
            "%s(%d, %d) on %s -> %s",
            op.name, bit1, bit2, state.bit_string(index), state.bit_string(target),
        )

    def _aggregate(self, results: list[ShotResult]) -> ShotResult | AggregatedResult:
        if len(results) == 1:
            return results[0]

        total = len(results)
        counts: dict[int, dict[int, int]] = {}
        bit_strings: dict[str, int] = {}
        for result in results:
            for meas in result.measurements:
                stats = counts.setdefault(meas.qubit, {0: 0, 1: 0})
                stats[meas.result] += 1
            key = result.most_probable_bit_string()
            bit_strings[key] = bit_strings.get(key, 0) + 1

        return AggregatedResult(
            shots=total,
            measurement_stats={
                q: {outcome: c / total for outcome, c in stats.items()}
                for q, stats in counts.items()
            },
            bit_string_probabilities={k: c / total for k, c in bit_strings.items()},
            results=results,
        )

    # -- Measurement --------------------------------------------------------

    def _qubit_mask(self, qubit: int) -> ndarray:
        """Boolean array: True where ``qubit`` is 1."""
        indices = np.arange(self.state.dimension)
        return ((indices >> (self.num_qubits - 1 - qubit)) & 1).astype(bool)

    def get_qubit_probabilities(self, qubit: int) -> tuple[float, float]:
        """``(p0, p1)`` for a single qubit."""
        self._validate_qubits([qubit])
        probs = self.state.get_probabilities()
        ones = self._qubit_mask(qubit)
        return float(np.sum(probs[~ones])), float(np.sum(probs[ones]))

    def measure_qubit(self, qubit: int) -> QubitMeasurement:
        """Sample one qubit and collapse the register onto the outcome."""
        probabilities = self.get_qubit_probabilities(qubit)
        result = 0 if self._rng.random() < probabilities[0] else 1
        self.collapse_qubit(qubit, result)
        return QubitMeasurement(qubit, result, probabilities)

    def collapse_qubit(self, qubit: int, result: int) -> None:
        """
        Project ``qubit`` onto ``result`` and renormalize.

        If the retained probability mass is ~0 the state is left untouched.
        """
        self._validate_qubits([qubit])
        keep = self._qubit_mask(qubit) == bool(result)
        retained = np.where(keep, self.state.amplitudes, 0)
        mass = float(np.sum(np.abs(retained) ** 2))
        if mass <= NORM_TOLERANCE:
            logger.warning(
                "Collapse of qubit %d onto %d has zero probability; state left as-is",
                qubit, result,
            )
            return
        self.state.amplitudes = retained / np.sqrt(mass)

    def measure_joint_state(self, qubits: Sequence[int]) -> dict[int, int]:
        """Sample the full register once and report the bits of ``qubits``."""
        self._validate_qubits(qubits)
        outcome = self.state.measure(self._rng)
        return {q: self.state.bit(outcome.basis_index, q) for q in qubits}

    def prepare_qubit_state(self, qubit: int, value: int) -> None:
        """
        Force ``qubit`` to ``value`` by projection and renormalization.

        Leaves the state alone if no amplitude has ``qubit == value``.
        """
        self._validate_qubits([qubit])
        keep = self._qubit_mask(qubit) == bool(value)
        projected = np.where(keep, self.state.amplitudes, 0)
        norm = np.linalg.norm(projected)
        if norm <= NORM_TOLERANCE:
            logger.warning("Qubit %d has no |%d⟩ component; keeping state", qubit, value)
            return
        self.state.amplitudes = projected / norm

    # -- Inspection ---------------------------------------------------------

    def get_state_vector(self) -> list[StateVectorEntry]:
        probs = self.state.get_probabilities()
        return [
            StateVectorEntry(
                index=i,
                bit_string=self.state.bit_string(i),
                amplitude=self.state.amplitude(i),
                probability=float(probs[i]),
            )
            for i in range(self.state.dimension)
        ]

    def get_probabilities(self) -> ndarray:
        return self.state.get_probabilities()

    def get_density_matrix(self) -> Matrix:
        return self.state.get_density_matrix()

    def clone(self) -> QuantumCircuit:
        """Independent copy sharing no mutable state with this circuit."""
        cloned = QuantumCircuit(self.num_qubits)
        cloned._operations = list(self._operations)
        cloned._measurements = copy.deepcopy(self._measurements)
        cloned.state = self.state.clone()
        cloned.execution_history = list(self.execution_history)
        cloned.metadata = dict(self.metadata)
        cloned._rng = copy.deepcopy(self._rng)
        return cloned

    def __str__(self) -> str:
        lines = [
            f"Quantum Circuit ({self.num_qubits} qubits)",
            f"Gates: {len(self._operations)}",
            f"Measurements: {len(self._measurements)}",
            "",
        ]
        for i, op in enumerate(self._operations, start=1):
            lines.append(f"{i}. {op.name} on qubits [{', '.join(map(str, op.qubits))}]")
        return "\n".join(lines) + "\n"

    def __repr__(self) -> str:
        return f"QuantumCircuit(qubits={self.num_qubits}, ops={len(self._operations)})"


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

class CircuitBuilder:
    """
    Stateful front end holding the circuit being edited.

    Example
    -------
    >>> builder = CircuitBuilder().create_circuit(2)
    >>> _ = builder.add_gate("H", [0]).add_measurement(0)
    >>> result = builder.run()
    """

    max_qubits = MAX_QUBITS

    def __init__(self, seed: int | None = None) -> None:
        self.circuit: QuantumCircuit | None = None
        self.current_qubits = 2
        self._seed = seed

    def _require_circuit(self) -> QuantumCircuit:
        if self.circuit is None:
            raise RuntimeError("No circuit created. Call create_circuit() first.")
        return self.circuit

    def create_circuit(self, num_qubits: int = 2) -> CircuitBuilder:
        self.circuit = QuantumCircuit(num_qubits, seed=self._seed)
        self.current_qubits = num_qubits
        return self

    def add_gate(
        self,
        name: str,
        target_qubits: Sequence[int],
        params: Mapping[str, Any] | None = None,
    ) -> CircuitBuilder:
        self._require_circuit().add_gate(name, target_qubits, params)
        return self

    def add_measurement(self, qubit: int) -> CircuitBuilder:
        self._require_circuit().add_measurement(qubit)
        return self

    def run(self, shots: int = 1) -> ShotResult | AggregatedResult:
        return self._require_circuit().run(shots)

    def get_circuit(self) -> QuantumCircuit | None:
        return self.circuit

    def reset(self) -> CircuitBuilder:
        """Drop all gates and measurements, keeping the register."""
        if self.circuit is not None:
            self.circuit._operations.clear()
            self.circuit._measurements.clear()
        return self


def create_circuit(num_qubits: int, seed: int | None = None) -> QuantumCircuit:
    """Shorthand for ``QuantumCircuit(num_qubits, seed=seed)``."""
    return QuantumCircuit(num_qubits, seed=seed)
