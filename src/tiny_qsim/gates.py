"""
Quantum gate catalog.

Every gate is a unitary :class:`~tiny_qsim.matrix.Matrix` of size
``2^k × 2^k`` for a k-qubit gate. Factories return a fresh matrix on each
call, since matrices are mutable.

Gate categories:
    - Single-qubit: H, X, Y, Z, S (phase), T
    - Rotations: RX, RY, RZ, U (universal), RK (QFT phase)
    - Two-qubit: CNOT, CZ, CRZ, SWAP
    - Three-qubit: TOFFOLI (CCX), FREDKIN (CSWAP), CCPHASE
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

import numpy as np

from tiny_qsim.errors import MissingParameter, NotUnitary, UnknownGate
from tiny_qsim.matrix import Matrix

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
_SQRT2_INV = 1.0 / np.sqrt(2.0)

_H = np.array([[1, 1], [1, -1]], dtype=np.complex128) * _SQRT2_INV
_X = np.array([[0, 1], [1, 0]], dtype=np.complex128)
_Y = np.array([[0, -1j], [1j, 0]], dtype=np.complex128)
_Z = np.array([[1, 0], [0, -1]], dtype=np.complex128)
_S = np.array([[1, 0], [0, 1j]], dtype=np.complex128)
_T = np.array([[1, 0], [0, np.exp(1j * np.pi / 4)]], dtype=np.complex128)

_CNOT = np.array(
    [[1, 0, 0, 0], [0, 1, 0, 0], [0, 0, 0, 1], [0, 0, 1, 0]],
    dtype=np.complex128,
)
_CZ = np.diag([1, 1, 1, -1]).astype(np.complex128)
_SWAP = np.array(
    [[1, 0, 0, 0], [0, 0, 1, 0], [0, 1, 0, 0], [0, 0, 0, 1]],
    dtype=np.complex128,
)

_CCX = np.eye(8, dtype=np.complex128)
_CCX[6, 6] = 0
_CCX[7, 7] = 0
_CCX[6, 7] = 1
_CCX[7, 6] = 1

_CSWAP = np.eye(8, dtype=np.complex128)
_CSWAP[5, 5] = 0
_CSWAP[6, 6] = 0
_CSWAP[5, 6] = 1
_CSWAP[6, 5] = 1

# ---------------------------------------------------------------------------
# Single-qubit fixed gates
# ---------------------------------------------------------------------------

def hadamard() -> Matrix:
    """Hadamard gate."""
    return Matrix(_H)


def pauli_x() -> Matrix:
    """Pauli-X (bit flip) gate."""
    return Matrix(_X)


def pauli_y() -> Matrix:
    """Pauli-Y gate."""
    return Matrix(_Y)


def pauli_z() -> Matrix:
    """Pauli-Z (phase flip) gate."""
    return Matrix(_Z)


def phase() -> Matrix:
    """S gate: π/2 phase shift."""
    return Matrix(_S)


def t_gate() -> Matrix:
    """T gate: π/4 phase shift."""
    return Matrix(_T)


# ---------------------------------------------------------------------------
# Single-qubit parameterized gates
# ---------------------------------------------------------------------------

def rx(theta: float) -> Matrix:
    """Rotation around X-axis by angle theta."""
    c = np.cos(theta / 2)
    s = np.sin(theta / 2)
    return Matrix([[c, -1j * s], [-1j * s, c]])


def ry(theta: float) -> Matrix:
    """Rotation around Y-axis by angle theta."""
    c = np.cos(theta / 2)
    s = np.sin(theta / 2)
    return Matrix([[c, -s], [s, c]])


def rz(theta: float) -> Matrix:
    """Rotation around Z-axis by angle theta."""
    return Matrix([[np.exp(-1j * theta / 2), 0], [0, np.exp(1j * theta / 2)]])


def u(theta: float, phi: float, lam: float) -> Matrix:
    """
    Universal single-qubit gate.

    U(θ, φ, λ) = [[cos(θ/2), -e^(iλ) sin(θ/2)],
                  [e^(iφ) sin(θ/2), e^(i(φ+λ)) cos(θ/2)]]
    """
    c = np.cos(theta / 2)
    s = np.sin(theta / 2)
    return Matrix(
        [
            [c, -np.exp(1j * lam) * s],
            [np.exp(1j * phi) * s, np.exp(1j * (phi + lam)) * c],
        ]
    )


def rk(k: float) -> Matrix:
    """QFT phase gate: diag(1, e^(2πi / 2^k))."""
    angle = 2 * np.pi / 2 ** k
    return Matrix([[1, 0], [0, np.exp(1j * angle)]])


# ---------------------------------------------------------------------------
# Two-qubit gates (4x4 matrices)
# ---------------------------------------------------------------------------

def cnot() -> Matrix:
    """Controlled-NOT gate; first target is the control."""
    return Matrix(_CNOT)


def cz() -> Matrix:
    """Controlled-Z gate."""
    return Matrix(_CZ)


def crz(theta: float) -> Matrix:
    """Controlled-Rz gate."""
    return Matrix(
        np.diag([1, 1, np.exp(-1j * theta / 2), np.exp(1j * theta / 2)])
    )


def swap() -> Matrix:
    """SWAP gate."""
    return Matrix(_SWAP)


# ---------------------------------------------------------------------------
# Three-qubit gates (8x8 matrices)
# ---------------------------------------------------------------------------

def toffoli() -> Matrix:
    """Toffoli (CCX) gate."""
    return Matrix(_CCX)


def fredkin() -> Matrix:
    """Fredkin (CSWAP) gate."""
    return Matrix(_CSWAP)


def controlled_phase_shift(phi: float) -> Matrix:
    """Doubly-controlled phase: e^(iφ) on |111⟩."""
    m = np.eye(8, dtype=np.complex128)
    m[7, 7] = np.exp(1j * phi)
    return Matrix(m)


# ---------------------------------------------------------------------------
# Gate metadata registry
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GateInfo:
    """Metadata for one catalog gate."""

    name: str
    display_name: str
    n_qubits: int
    factory: Callable[..., Matrix]
    description: str = ""
    param_names: tuple[str, ...] = ()
    aliases: tuple[str, ...] = ()

    @property
    def n_params(self) -> int:
        return len(self.param_names)

    def matrix(self, *params: float) -> Matrix:
        """Build the gate matrix, checking the parameter count."""
        if len(params) < self.n_params:
            raise MissingParameter(
                f"{self.name} gate requires {', '.join(self.param_names)} "
                f"parameter(s), got {len(params)}"
            )
        return self.factory(*params[: self.n_params])


GATE_REGISTRY: dict[str, GateInfo] = {
    info.name: info
    for info in [
        GateInfo("H", "Hadamard", 1, hadamard, "Creates superposition", aliases=("HADAMARD",)),
        GateInfo("X", "Pauli-X", 1, pauli_x, "Bit flip gate", aliases=("PAULI_X",)),
        GateInfo("Y", "Pauli-Y", 1, pauli_y, "Bit and phase flip gate", aliases=("PAULI_Y",)),
        GateInfo("Z", "Pauli-Z", 1, pauli_z, "Phase flip gate", aliases=("PAULI_Z",)),
        GateInfo("S", "Phase", 1, phase, "π/2 phase shift", aliases=("PHASE",)),
        GateInfo("T", "T-Gate", 1, t_gate, "π/4 phase shift", aliases=("T_GATE",)),
        GateInfo("RX", "Rotation-X", 1, rx, "Rotation around X axis",
                 ("angle",), ("ROTATION_X",)),
        GateInfo("RY", "Rotation-Y", 1, ry, "Rotation around Y axis",
                 ("angle",), ("ROTATION_Y",)),
        GateInfo("RZ", "Rotation-Z", 1, rz, "Rotation around Z axis",
                 ("angle",), ("ROTATION_Z",)),
        GateInfo("U", "Universal", 1, u, "General single-qubit unitary",
                 ("theta", "phi", "lambda")),
        GateInfo("RK", "Phase-Rk", 1, rk, "2π/2^k phase shift", ("k",)),
        GateInfo("CNOT", "Controlled-NOT", 2, cnot, "Conditional bit flip",
                 aliases=("CONTROLLED_NOT", "CX")),
        GateInfo("CZ", "Controlled-Z", 2, cz, "Conditional phase flip",
                 aliases=("CONTROLLED_Z",)),
        GateInfo("CRZ", "Controlled-RZ", 2, crz, "Conditional Z rotation",
                 ("angle",), ("CONTROLLED_RZ",)),
        GateInfo("SWAP", "SWAP", 2, swap, "Exchanges two qubits"),
        GateInfo("TOFFOLI", "Toffoli", 3, toffoli, "Controlled-controlled-NOT",
                 aliases=("CCNOT", "CCX")),
        GateInfo("FREDKIN", "Fredkin", 3, fredkin, "Controlled-SWAP", aliases=("CSWAP",)),
        GateInfo("CCPHASE", "Controlled-Phase-Shift", 3, controlled_phase_shift,
                 "Phase shift on |111⟩", ("phi",), ("CONTROLLED_PHASE_SHIFT",)),
    ]
}

_ALIASES: dict[str, str] = {
    alias: info.name for info in GATE_REGISTRY.values() for alias in (info.name, *info.aliases)
}


def gate_info(name: str) -> GateInfo | None:
    """Metadata for a gate name or alias (case-insensitive), or None."""
    canonical = _ALIASES.get(name.upper())
    return GATE_REGISTRY[canonical] if canonical else None


def get_gate(name: str, *params: float) -> Matrix:
    """
    Look up a gate matrix by name, with optional parameters.

    Parameters
    ----------
    name : str
        Gate name or alias (case-insensitive).
    *params : float
        Angle / phase / (θ, φ, λ) / k for parameterized gates. Extra
        parameters are ignored.

    Raises
    ------
    UnknownGate
        If the name is not recognised.
    MissingParameter
        If a parameterized gate is given too few parameters.
    """
    info = gate_info(name)
    if info is None:
        raise UnknownGate(f"Unknown gate: '{name}'. Available: {all_gates()}")
    return info.matrix(*params)


def all_gates() -> list[str]:
    """Canonical gate names in catalog order."""
    return list(GATE_REGISTRY)


def parameter_names(name: str) -> list[str]:
    """Form field names for a gate's parameters (empty if none or unknown)."""
    info = gate_info(name)
    return list(info.param_names) if info else []


# ---------------------------------------------------------------------------
# Utilities
# ---------------------------------------------------------------------------

def compose(gates: Sequence[Matrix]) -> Matrix:
    """Single matrix equivalent to applying ``gates`` in list order."""
    if not gates:
        raise ValueError("compose() needs at least one gate")
    result = Matrix.identity(gates[0].rows)
    for gate in gates:
        result = gate.multiply(result)
    return result


def verify_unitary(gate: Matrix) -> bool:
    """Return True, or raise NotUnitary."""
    if not gate.is_unitary():
        raise NotUnitary("Gate is not unitary")
    return True


def gate_properties() -> list[dict]:
    """Unitarity and determinant of every parameter-free catalog gate."""
    report = []
    for info in GATE_REGISTRY.values():
        if info.n_params:
            continue
        m = info.factory()
        report.append(
            {
                "name": info.name,
                "is_unitary": m.is_unitary(),
                "determinant": str(m.determinant()),
            }
        )
    return report
