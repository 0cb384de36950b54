"""
Integration tests: full optimization runs and Qiskit cross-validation.
"""

import pytest
import numpy as np

from dataclasses import replace

from varqsim.core.graph import GraphInstance
from varqsim.core.io_spec import Algorithm, CircuitMode, ProblemSnapshot
from varqsim.runtime.engine import OptimizerRuntime


def _snapshot(**changes):
    return replace(ProblemSnapshot.default(), **changes)


class TestQiskitValidation:
    """Engine amplitudes and metrics against Qiskit's exact statevector."""

    def test_qaoa_default(self):
        pytest.importorskip("qiskit")
        from varqsim.utils.validation import validate_against_qiskit

        result = validate_against_qiskit(_snapshot())
        assert result.passed, result.errors
        assert result.details["num_qubits"] == 4

    @pytest.mark.parametrize("seed", range(3))
    def test_qaoa_random(self, seed):
        pytest.importorskip("qiskit")
        from varqsim.utils.validation import validate_against_qiskit

        rng = np.random.default_rng(seed)
        graph = GraphInstance.from_edges(5, [(0, 1), (1, 2), (0, 2), (2, 4), (3, 4)])
        snap = _snapshot(
            graph=graph,
            depth=2,
            gammas=tuple(rng.uniform(-np.pi, np.pi, size=2)),
            betas=tuple(rng.uniform(-np.pi, np.pi, size=2)),
        )
        result = validate_against_qiskit(snap)
        assert result.passed, result.errors

    @pytest.mark.parametrize("key", ["H2_0.74", "H2_1.5", "HeH"])
    def test_vqe(self, key):
        pytest.importorskip("qiskit")
        from varqsim.utils.validation import validate_against_qiskit

        snap = _snapshot(
            algorithm=Algorithm.VQE,
            molecule_key=key,
            thetas=(0.4, -1.2, 0.9, 0.3),
        )
        result = validate_against_qiskit(snap)
        assert result.passed, result.errors
        assert result.details["num_qubits"] == 2

    def test_exported_circuit(self):
        pytest.importorskip("qiskit")
        from qiskit.quantum_info import Statevector
        from varqsim.compiler.circuits import (
            build_circuit,
            native_gate_sequence,
            run_native,
            to_qiskit_circuit,
        )

        snap = _snapshot()
        ops = native_gate_sequence(build_circuit(snap, CircuitMode.NATIVE))
        qc = to_qiskit_circuit(ops, snap.qubit_count)
        assert qc.num_qubits == 4
        assert len(qc.data) == len(ops)

        expected = Statevector.from_instruction(qc).data
        assert np.allclose(run_native(ops, 4).amplitudes, expected)


class TestEndToEnd:
    """Full optimization runs."""

    def test_vqe_approaches_ground_energy(self):
        from varqsim.utils.validation import exact_ground_energy

        runtime = OptimizerRuntime()
        runtime.set_algorithm(Algorithm.VQE)
        runtime.run(200)

        ground = exact_ground_energy("H2_0.74")
        assert runtime.history[-1] >= ground - 1e-9
        assert runtime.history[-1] < runtime.history[0]

    def test_exact_ground_energy(self):
        from varqsim.core.molecules import get_molecule
        from varqsim.utils.validation import exact_ground_energy

        for key in ["H2_0.74", "H2_1.5", "HeH"]:
            h = get_molecule(key).hamiltonian_matrix()
            assert np.isclose(exact_ground_energy(key), np.linalg.eigvalsh(h)[0])

    def test_qaoa_approximation_ratio(self):
        from varqsim.utils.validation import approximation_ratio

        runtime = OptimizerRuntime()
        start_ratio = approximation_ratio(runtime.snapshot)
        runtime.run(40)
        end_ratio = approximation_ratio(runtime.snapshot)
        assert 0.0 <= start_ratio <= 1.0
        assert start_ratio < end_ratio <= 1.0

    def test_switching_algorithms_keeps_parameters(self):
        runtime = OptimizerRuntime()
        runtime.run(5)
        gammas = runtime.snapshot.gammas
        runtime.set_algorithm(Algorithm.VQE)
        runtime.run(5)
        runtime.set_algorithm(Algorithm.QAOA)
        assert runtime.snapshot.gammas == gammas
        assert runtime.iteration == 0

    def test_edgeless_graph_runs(self):
        runtime = OptimizerRuntime()
        runtime.set_graph(GraphInstance(node_count=3))
        results = runtime.run(3)
        assert all(r.metric == 0.0 for r in results)
        assert all(r.gradient_norm == 0.0 for r in results)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
