"""
VQE (Variational Quantum Eigensolver) demo using varqsim.

Minimizes the energy of a two-qubit molecular Hamiltonian with the
optimizer runtime (scheduled learning rate, early stopping) and compares
the result with SciPy's optimizer and the exact ground state.
"""

import logging

import numpy as np


def demo_vqe_runtime():
    """
    Run VQE for H2 at equilibrium until early stopping fires.
    """
    from varqsim import OptimizerRuntime
    from varqsim.core.molecules import get_molecule
    from varqsim.utils.validation import exact_ground_energy

    runtime = OptimizerRuntime()
    runtime.set_algorithm("vqe")
    snap = runtime.snapshot
    molecule = get_molecule(snap.molecule_key)

    print("=" * 60)
    print("VQE Demo with varqsim")
    print("=" * 60)
    print(f"System: {molecule.label}")
    print(f"Ansatz depth: {snap.depth}")
    print(f"Parameters: {len(snap.thetas)}")
    print()
    print("Hamiltonian:")
    for term, coeff in zip(["II", "Z0", "Z1", "Z0Z1", "X0X1"], molecule.coeffs.as_tuple()):
        print(f"  {coeff:+.4f} * {term}")
    print()

    print("Running VQE optimization...")
    print(f"Initial energy: {runtime.current_metric:.6f}")
    print()

    results = runtime.run(2000)
    for result in results[::100]:
        print(f"  Iteration {result.iteration}: energy = {result.metric:.6f}, "
              f"lr = {result.learning_rate:.5f}")

    last = results[-1]
    print(f"\nOptimization complete!")
    print(f"Final energy: {last.metric:.6f}")
    print(f"Iterations: {last.iteration}")
    print(f"Stopped by: {runtime.stop_reason.value}")

    exact = exact_ground_energy(snap.molecule_key)
    print(f"\nExact ground state energy: {exact:.6f}")
    print(f"Reference energy: ~{molecule.theoretical_min:.3f}")
    print(f"Error: {abs(last.metric - exact):.4f}")

    print("=" * 60)

    return last.metric


def demo_vqe_scipy():
    """
    Same ansatz, minimized with SciPy's COBYLA for comparison.
    """
    from scipy.optimize import minimize
    from varqsim.observables.expectation import evaluate_vqe_energy
    from varqsim.utils.params import default_thetas

    print("\n" + "=" * 60)
    print("VQE with SciPy COBYLA")
    print("=" * 60)

    for key in ["H2_0.74", "H2_1.5", "HeH"]:
        result = minimize(
            lambda thetas: evaluate_vqe_energy(thetas, key),
            np.array(default_thetas(2)),
            method="COBYLA",
            options={"maxiter": 500},
        )
        print(f"  {key:<8}: energy = {result.fun:.6f} ({result.nfev} evaluations)")

    print("=" * 60)


def demo_vqe_parameter_landscape():
    """
    Print a coarse energy landscape for a single layer.
    """
    from varqsim.observables.expectation import evaluate_vqe_energy

    print("\n" + "=" * 60)
    print("VQE Energy Landscape")
    print("=" * 60)

    theta_range = np.linspace(-np.pi, np.pi, 13)

    print("Energy landscape (theta1 x theta2):")
    print()
    print("theta2:  " + "  ".join(f"{t:+.1f}" for t in theta_range[::2]))
    print("-" * 60)
    for t1 in theta_range[::2]:
        row = "  ".join(
            f"{evaluate_vqe_energy([t1, t2], 'H2_0.74'):+.2f}" for t2 in theta_range[::2]
        )
        print(f"{t1:+.1f} | {row}")

    print("=" * 60)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    demo_vqe_runtime()
    demo_vqe_scipy()
    demo_vqe_parameter_landscape()
