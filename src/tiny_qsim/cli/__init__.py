"""
Command-line interface for tiny-qsim.

Usage:
    tiny-qsim run bell --shots 1000
    tiny-qsim run grover --qubits 3 --seed 7
    tiny-qsim gates
    tiny-qsim bench --max-qubits 6
"""
import argparse
import logging
import time

from ..constants import DEFAULT_SHOTS, MAX_QUBITS

DEMOS = ('bell', 'ghz', 'teleport', 'grover', 'qft')


def _build_demo(name, num_qubits, seed):
    from .. import algorithms
    from ..circuit import QuantumCircuit

    if name == 'bell':
        return QuantumCircuit(2, seed=seed).h(0).cnot(0, 1).measure_all()
    if name == 'ghz':
        n = num_qubits or 3
        qc = QuantumCircuit(n, seed=seed).h(0)
        for q in range(n - 1):
            qc.cnot(q, q + 1)
        return qc.measure_all()
    if name == 'teleport':
        return algorithms.quantum_teleportation(seed=seed)
    if name == 'grover':
        n = num_qubits or 3
        return algorithms.grover_search(num_qubits=n, seed=seed).measure_all()
    return algorithms.quantum_fourier_transform(num_qubits or 3, seed=seed)


def sample_counts(qc, shots):
    """
    Measurement counts over ``shots`` independent runs.

    The circuit keeps its register between runs, so each shot restarts from
    the state the circuit held on entry.
    """
    initial = qc.state.clone()
    counts = {}
    for _ in range(shots):
        qc.set_input_state(initial)
        result = qc.run()
        key = ''.join(str(m.result) for m in result.measurements)
        counts[key] = counts.get(key, 0) + 1
    qc.set_input_state(initial)
    return counts


def cmd_run(args):
    """Run a demo circuit."""
    qc = _build_demo(args.circuit, args.qubits, args.seed)
    print(qc)
    if qc.metadata:
        print(qc.metadata['description'])
        print()

    if not qc.measurements:
        qc.run()
        print(f"Final state: {qc.state}")
        return

    start = time.perf_counter()
    counts = sample_counts(qc, args.shots)
    elapsed = time.perf_counter() - start

    print(f"Results ({args.shots} shots):")
    for state, count in sorted(counts.items()):
        pct = 100 * count / args.shots
        bar = '█' * int(pct / 2)
        print(f"  |{state}⟩: {count:4d} ({pct:5.1f}%) {bar}")
    print(f"Time: {elapsed:.3f}s")


def cmd_gates(args):
    """List the gate catalog."""
    from ..gates import GATE_REGISTRY

    print(f"{'Name':<8s} {'Qubits':>6s}  {'Params':<18s} {'Aliases':<28s} Description")
    print("-" * 90)
    for info in GATE_REGISTRY.values():
        params = ', '.join(info.param_names) or '-'
        aliases = ', '.join(info.aliases) or '-'
        print(f"{info.name:<8s} {info.n_qubits:>6d}  {params:<18s} {aliases:<28s} {info.description}")


def cmd_bench(args):
    """Run simulator benchmarks."""
    from ..benchmark import run_benchmarks

    print(f"Running benchmarks up to {args.max_qubits} qubits...\n")
    report = run_benchmarks(repeats=args.repeats, max_qubits=args.max_qubits)
    print(report.summary())


def cmd_info(args):
    """Show tiny-qsim information."""
    from .. import __version__
    from ..gates import all_gates

    print(f"""
tiny-qsim v{__version__}
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

A small state-vector quantum circuit simulator.

  • Qubits per circuit: 1-{MAX_QUBITS} (dense 2^n x 2^n gate embedding)
  • Gates: {', '.join(all_gates())}
  • Algorithms: Deutsch-Jozsa, Grover, QFT, teleportation, superdense coding

Usage:
  tiny-qsim run bell --shots 1000
  tiny-qsim run grover --qubits 3
  tiny-qsim gates
  tiny-qsim bench
""")


def build_parser():
    parser = argparse.ArgumentParser(
        prog='tiny-qsim',
        description='A small state-vector quantum circuit simulator'
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Run command
    run_parser = subparsers.add_parser('run', help='Run a demo circuit')
    run_parser.add_argument('circuit', choices=DEMOS, help='Demo circuit')
    run_parser.add_argument('--qubits', type=int, help='Register size (ghz, grover, qft)')
    run_parser.add_argument('--shots', type=int, default=DEFAULT_SHOTS, help='Number of shots')
    run_parser.add_argument('--seed', type=int, help='Random seed')
    run_parser.set_defaults(func=cmd_run)

    # Gates command
    gates_parser = subparsers.add_parser('gates', help='List available gates')
    gates_parser.set_defaults(func=cmd_gates)

    # Bench command
    bench_parser = subparsers.add_parser('bench', help='Time the simulator')
    bench_parser.add_argument('--max-qubits', type=int, default=MAX_QUBITS,
                              help='Largest register in the size sweep')
    bench_parser.add_argument('--repeats', type=int, default=100,
                              help='Repeats per gate construction')
    bench_parser.set_defaults(func=cmd_bench)

    # Info command
    info_parser = subparsers.add_parser('info', help='Show tiny-qsim info')
    info_parser.set_defaults(func=cmd_info)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    if args.command is None:
        parser.print_help()
        return 0

    args.func(args)
    return 0


if __name__ == '__main__':
    main()
