"""Numerical tolerances and simulator limits."""

# Norm below which a vector is treated as the zero vector.
NORM_TOLERANCE = 1e-10

# Default elementwise tolerance for Matrix.is_unitary.
UNITARY_TOLERANCE = 1e-10

# Squared divisor magnitude below which Complex.divide refuses to divide.
DIVISION_EPSILON = 1e-20

# Amplitude magnitude that marks a register as a single basis state
# for the AND / OR classical gates.
DOMINANT_AMPLITUDE = 0.9

# Dense gate embedding builds a 2^n x 2^n operator per gate.
MAX_QUBITS = 8

DEFAULT_SHOTS = 1024
