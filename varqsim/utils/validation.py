"""
Validation utilities for varqsim.

Cross-checks the engine against Qiskit's exact statevector, the gradient
engine against central finite differences, and VQE energies against the
exact ground state of each molecule's Hamiltonian.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

import numpy as np
from scipy import linalg

from varqsim.core.gates import GateOp
from varqsim.core.io_spec import Algorithm, CircuitMode, ProblemSnapshot
from varqsim.core.molecules import get_molecule
from varqsim.core.statevector import StateVector


@dataclass
class ValidationResult:
    """Result of validating the engine against an exact reference."""
    engine_values: Dict[str, float]
    exact_values: Dict[str, float]
    errors: Dict[str, float]
    max_error: float
    passed: bool
    threshold: float
    details: Dict[str, Any]


def direct_exp_xx(sv: StateVector, q1: int, q2: int) -> float:
    """
    <X_q1 X_q2> computed directly: X⊗X flips both bits, so the expectation
    is Σ_i conj(a_i) · a_(i XOR mask).
    """
    amps = sv.amplitudes
    mask = (1 << q1) | (1 << q2)
    flipped = amps[np.arange(sv.dim) ^ mask]
    return float(np.real(np.vdot(amps, flipped)))


def finite_difference_gradient(
    f: Callable[[Sequence[float]], float],
    params: Sequence[float],
    step: float = 1e-4,
) -> List[float]:
    """Central-difference gradient, (f(p + h) - f(p - h)) / 2h per entry."""
    grads = []
    for i in range(len(params)):
        plus = list(params)
        minus = list(params)
        plus[i] += step
        minus[i] -= step
        grads.append((f(plus) - f(minus)) / (2 * step))
    return grads


def exact_ground_energy(molecule_key: str) -> float:
    """Lowest eigenvalue of the molecule's 4x4 Hamiltonian."""
    hamiltonian = get_molecule(molecule_key).hamiltonian_matrix()
    eigenvalues = linalg.eigh(hamiltonian, eigvals_only=True)
    return float(eigenvalues[0])


def exact_statevector(ops: Sequence[GateOp], num_qubits: int) -> np.ndarray:
    """Qiskit statevector of a native gate sequence (little-endian, like the engine)."""
    try:
        from qiskit.quantum_info import Statevector
    except ImportError:
        raise ImportError("Qiskit required for validation")

    from varqsim.compiler.circuits import to_qiskit_circuit

    qc = to_qiskit_circuit(ops, num_qubits)
    return np.asarray(Statevector.from_instruction(qc).data)


def _exact_metric(snapshot: ProblemSnapshot, amplitudes: np.ndarray) -> float:
    """Cut size or energy computed from Qiskit amplitudes with dense operators."""
    n = snapshot.qubit_count
    probs = np.abs(amplitudes) ** 2
    indices = np.arange(1 << n)

    if snapshot.algorithm is Algorithm.QAOA:
        cut = 0.0
        for a, b in snapshot.edges:
            differ = ((indices >> a) & 1) ^ ((indices >> b) & 1)
            cut += float(np.dot(differ, probs))
        return cut

    hamiltonian = get_molecule(snapshot.molecule_key).hamiltonian_matrix()
    return float(np.real(np.vdot(amplitudes, hamiltonian @ amplitudes)))


def validate_against_qiskit(
    snapshot: ProblemSnapshot,
    threshold: float = 1e-9,
    verbose: bool = False,
) -> ValidationResult:
    """
    Validate the engine against Qiskit's exact simulation.

    Compares the final amplitudes of the native circuit and the metric the
    optimizer records (cut size for QAOA, energy for VQE).

    Args:
        snapshot: Problem instance and parameters to check
        threshold: Maximum allowed absolute error
        verbose: Print a comparison table

    Returns:
        ValidationResult with comparison data
    """
    from varqsim.compiler.circuits import build_circuit, native_gate_sequence, run_native
    from varqsim.observables.expectation import evaluate_metric

    ops = native_gate_sequence(build_circuit(snapshot, CircuitMode.NATIVE))
    sv = run_native(ops, snapshot.qubit_count)
    exact = exact_statevector(ops, snapshot.qubit_count)

    engine_values = {
        "metric": evaluate_metric(snapshot),
        "norm": sv.norm(),
    }
    exact_values = {
        "metric": _exact_metric(snapshot, exact),
        "norm": float(np.sum(np.abs(exact) ** 2)),
    }
    errors = {k: abs(engine_values[k] - exact_values[k]) for k in engine_values}
    errors["amplitudes"] = float(np.max(np.abs(sv.amplitudes - exact)))

    max_error = max(errors.values())
    passed = max_error <= threshold

    if verbose:
        print(f"\n{'Quantity':<15} {'Engine':<14} {'Exact':<14} {'Error':<12}")
        print("-" * 55)
        for key in engine_values:
            print(f"{key:<15} {engine_values[key]:<14.8f} "
                  f"{exact_values[key]:<14.8f} {errors[key]:<12.2e}")
        print(f"{'amplitudes':<15} {'':<14} {'':<14} {errors['amplitudes']:<12.2e}")
        print("-" * 55)
        print(f"Result: {'PASSED' if passed else 'FAILED'}")

    return ValidationResult(
        engine_values=engine_values,
        exact_values=exact_values,
        errors=errors,
        max_error=max_error,
        passed=passed,
        threshold=threshold,
        details={
            "algorithm": snapshot.algorithm.value,
            "num_qubits": snapshot.qubit_count,
            "num_gates": len(ops),
        },
    )


def approximation_ratio(snapshot: ProblemSnapshot, cost: Optional[float] = None) -> float:
    """Expected cut divided by the exact MaxCut value (1.0 for edgeless graphs)."""
    from varqsim.observables.expectation import evaluate_metric

    if cost is None:
        cost = evaluate_metric(snapshot)
    _, best = snapshot.graph.max_cut()
    if best == 0:
        return 1.0
    return cost / best
