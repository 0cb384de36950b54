"""
QAOA (Quantum Approximate Optimization Algorithm) demo using varqsim.

Optimizes a depth-2 QAOA ansatz for MaxCut on a small graph with the
tick-driven optimizer runtime, then compares the expected cut against the
exact optimum.
"""

import logging

import numpy as np


def demo_qaoa_optimization():
    """
    Run gradient ascent on the expected cut of a 4-vertex cycle.
    """
    from varqsim import OptimizerRuntime
    from varqsim.utils.validation import approximation_ratio

    runtime = OptimizerRuntime()
    graph = runtime.snapshot.graph

    print("=" * 60)
    print("QAOA MaxCut Demo with varqsim")
    print("=" * 60)
    print(f"Graph: {graph.node_count} vertices, {graph.num_edges} edges")
    print(f"Edges: {list(graph.edge_keys())}")
    print(f"Depth: {runtime.snapshot.depth}")
    print()

    runtime.start()
    while runtime.is_running and runtime.iteration < 150:
        result = runtime.tick()
        if result.iteration % 25 == 0:
            print(f"  iter {result.iteration:4d}: cut={result.metric:.4f}, "
                  f"|grad|={result.gradient_norm:.4f}")
    runtime.stop()

    partition, best = graph.max_cut()
    snap = runtime.snapshot
    print(f"\nFinal gammas: {np.round(snap.gammas, 3).tolist()}")
    print(f"Final betas:  {np.round(snap.betas, 3).tolist()}")
    print(f"Expected cut: {runtime.current_metric:.4f} / {best} (exact optimum)")
    print(f"Optimal partition: {partition}")
    print(f"Approximation ratio: {approximation_ratio(snap):.4f}")

    print()
    print("=" * 60)

    return runtime


def demo_qaoa_sweep():
    """
    Sweep gamma at fixed beta on a 3-vertex path.
    """
    from varqsim.observables.expectation import evaluate_qaoa_cost

    print("\n" + "=" * 60)
    print("QAOA Parameter Sweep Demo")
    print("=" * 60)

    num_qubits = 3
    edges = [(0, 1), (1, 2)]
    beta_fixed = 0.5

    print(f"Sweeping gamma at beta={beta_fixed}:")
    for g in np.linspace(0, np.pi, 10):
        cost = evaluate_qaoa_cost(num_qubits, edges, [g], [beta_fixed])
        print(f"  gamma={g:.2f}: <cut>={cost:.3f}")

    print("=" * 60)


def demo_qiskit_check(runtime):
    """
    Cross-check the optimized state against Qiskit.
    """
    try:
        from varqsim.utils.validation import validate_against_qiskit
        result = validate_against_qiskit(runtime.snapshot, verbose=True)
    except ImportError:
        print("\nQiskit not installed; skipping cross-check")
        return None
    return result


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    runtime = demo_qaoa_optimization()
    demo_qaoa_sweep()
    demo_qiskit_check(runtime)
