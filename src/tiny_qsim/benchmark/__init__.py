"""
Simulator Benchmarks
======================
Wall-clock timings for gate construction, state size scaling and circuit
depth. Dense gate embedding makes every gate cost O(4^n), which the state
size sweep shows directly.

Usage:
    from tiny_qsim.benchmark import run_benchmarks

    report = run_benchmarks(max_qubits=6)
    print(report.summary())
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, List

from ..circuit import QuantumCircuit
from ..constants import MAX_QUBITS
from ..gates import GATE_REGISTRY, hadamard
from ..state import QuantumState

logger = logging.getLogger(__name__)


@dataclass
class TimingResult:
    """One timed measurement."""
    label: str
    size: int
    total_seconds: float
    repeats: int = 1

    @property
    def mean_ms(self) -> float:
        return 1000.0 * self.total_seconds / self.repeats

    def __str__(self):
        return f"{self.label:>12s}  size={self.size:<3d}  {self.mean_ms:9.4f} ms"


@dataclass
class BenchmarkReport:
    """Collected timings from :func:`run_benchmarks`."""
    gate_operations: List[TimingResult] = field(default_factory=list)
    state_vector_size: List[TimingResult] = field(default_factory=list)
    circuit_depth: List[TimingResult] = field(default_factory=list)

    def summary(self) -> str:
        lines = []
        for title, results in (
            ("Gate construction", self.gate_operations),
            ("State vector size (H on every qubit)", self.state_vector_size),
            ("Circuit depth (2 qubits)", self.circuit_depth),
        ):
            lines.append(title)
            lines.append("-" * 44)
            lines.extend(f"  {r}" for r in results)
            lines.append("")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, List[dict]]:
        return {
            name: [
                {"label": r.label, "size": r.size, "mean_ms": r.mean_ms}
                for r in getattr(self, name)
            ]
            for name in ("gate_operations", "state_vector_size", "circuit_depth")
        }


def benchmark_gate_operations(repeats: int = 100) -> List[TimingResult]:
    """Time building every parameter-free catalog gate ``repeats`` times."""
    results = []
    for info in GATE_REGISTRY.values():
        if info.n_params:
            continue
        start = time.perf_counter()
        for _ in range(repeats):
            info.factory()
        elapsed = time.perf_counter() - start
        results.append(TimingResult(info.name, 2 ** info.n_qubits, elapsed, repeats))
    logger.debug("Timed %d gate factories", len(results))
    return results


def benchmark_state_vector_size(max_qubits: int = MAX_QUBITS) -> List[TimingResult]:
    """Time a Hadamard layer on registers of 1..max_qubits qubits."""
    h = hadamard()
    results = []
    for n in range(1, max_qubits + 1):
        state = QuantumState(n)
        start = time.perf_counter()
        for q in range(n):
            state.apply_gate(h, [q])
        elapsed = time.perf_counter() - start
        results.append(TimingResult(f"{n} qubits", n, elapsed))
        logger.debug("%d qubits: %.4f s", n, elapsed)
    return results


def benchmark_circuit_depth(max_depth: int = 20, step: int = 5) -> List[TimingResult]:
    """Time a run of a 2-qubit H/CNOT circuit at increasing depth."""
    results = []
    for depth in range(step, max_depth + 1, step):
        qc = QuantumCircuit(2, seed=0)
        for _ in range(depth):
            qc.h(0).cnot(0, 1)
        start = time.perf_counter()
        qc.run()
        elapsed = time.perf_counter() - start
        results.append(TimingResult(f"depth {depth}", depth, elapsed))
    return results


def run_benchmarks(
    repeats: int = 100,
    max_qubits: int = MAX_QUBITS,
    max_depth: int = 20,
) -> BenchmarkReport:
    """Run all three benchmarks."""
    return BenchmarkReport(
        gate_operations=benchmark_gate_operations(repeats),
        state_vector_size=benchmark_state_vector_size(max_qubits),
        circuit_depth=benchmark_circuit_depth(max_depth),
    )


__all__ = [
    "TimingResult",
    "BenchmarkReport",
    "benchmark_gate_operations",
    "benchmark_state_vector_size",
    "benchmark_circuit_depth",
    "run_benchmarks",
]
