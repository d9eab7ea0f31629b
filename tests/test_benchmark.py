"""Tests for the simulator benchmarks."""

from tiny_qsim.benchmark import (
    BenchmarkReport,
    benchmark_circuit_depth,
    benchmark_gate_operations,
    benchmark_state_vector_size,
    run_benchmarks,
)


def test_gate_operations():
    results = benchmark_gate_operations(repeats=2)
    assert [r.label for r in results] == [
        "H", "X", "Y", "Z", "S", "T", "CNOT", "CZ", "SWAP", "TOFFOLI", "FREDKIN",
    ]
    assert all(r.repeats == 2 and r.total_seconds >= 0 for r in results)
    assert results[-1].size == 8


def test_state_vector_size():
    results = benchmark_state_vector_size(max_qubits=3)
    assert [r.size for r in results] == [1, 2, 3]
    assert results[0].label == "1 qubits"


def test_circuit_depth():
    results = benchmark_circuit_depth(max_depth=10)
    assert [r.size for r in results] == [5, 10]


def test_run_benchmarks_report():
    report = run_benchmarks(repeats=1, max_qubits=2, max_depth=5)
    assert isinstance(report, BenchmarkReport)
    assert len(report.state_vector_size) == 2
    assert len(report.circuit_depth) == 1

    text = report.summary()
    assert "Gate construction" in text
    assert "depth 5" in text

    data = report.to_dict()
    assert set(data) == {"gate_operations", "state_vector_size", "circuit_depth"}
    assert data["circuit_depth"][0]["size"] == 5
    assert data["circuit_depth"][0]["mean_ms"] >= 0
