"""Example: Run a Bell state on tiny-qsim."""
from collections import Counter

from tiny_qsim import QuantumState, create_circuit

print("=" * 50)
print("tiny-qsim: Bell State Example")
print("=" * 50)

qc = create_circuit(2, seed=42)
qc.add_gate("H", [0]).add_gate("CNOT", [0, 1]).measure_all()
print(f"\n{qc}")

# The register persists between runs, so restart each shot from |00⟩
shots = 1000
counts = Counter()
for _ in range(shots):
    qc.set_input_state(QuantumState(2))
    result = qc.run()
    counts[''.join(str(m.result) for m in result.measurements)] += 1

print("Measurement Results:")
for state, count in sorted(counts.items()):
    print(f"  |{state}⟩: {count:4d} ({100 * count / shots:5.1f}%)")

print("\nExpected: ~50% |00⟩ and ~50% |11⟩ (entangled!)")
