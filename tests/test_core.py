"""
Tests for varqsim core components.
"""

import pytest
import numpy as np

from varqsim.core.statevector import StateVector, MAX_QUBITS
from varqsim.core.gates import GateOp, rx_matrix, ry_matrix, rxx_matrix, PAULI_I
from varqsim.core.graph import (
    GraphInstance,
    canonical_edge,
    canonical_edges,
    edge_key,
    parse_edge,
)
from varqsim.core.molecules import MOLECULES, get_molecule
from varqsim.core.errors import (
    InvalidDimensionError,
    MalformedEdgeError,
    QubitIndexError,
    SimulatorError,
    UnknownMoleculeError,
)
from varqsim.utils.validation import direct_exp_xx


def _dense_single(num_qubits, qubit, matrix):
    """Full operator for a single-qubit gate; qubit 0 is the rightmost factor."""
    op = np.array([[1.0]], dtype=np.complex128)
    for q in reversed(range(num_qubits)):
        op = np.kron(op, matrix if q == qubit else PAULI_I)
    return op


def _random_circuit(sv, rng, num_gates=30):
    n = sv.num_qubits
    for _ in range(num_gates):
        choice = rng.integers(3) if n > 1 else rng.integers(2)
        angle = rng.uniform(-np.pi, np.pi)
        if choice == 0:
            sv.apply_rx(int(rng.integers(n)), angle)
        elif choice == 1:
            sv.apply_ry(int(rng.integers(n)), angle)
        else:
            a, b = rng.choice(n, size=2, replace=False)
            sv.apply_xx(int(a), int(b), angle)


class TestGates:
    """Tests for gate matrices."""

    @pytest.mark.parametrize("factory", [rx_matrix, ry_matrix, rxx_matrix])
    def test_unitary(self, factory):
        m = factory(0.731)
        assert np.allclose(m.conj().T @ m, np.eye(m.shape[0]))

    def test_zero_angle_is_identity(self):
        assert np.allclose(rx_matrix(0.0), np.eye(2))
        assert np.allclose(ry_matrix(0.0), np.eye(2))
        assert np.allclose(rxx_matrix(0.0), np.eye(4))

    def test_full_turn_is_minus_identity(self):
        assert np.allclose(rx_matrix(2 * np.pi), -np.eye(2))
        assert np.allclose(ry_matrix(2 * np.pi), -np.eye(2))

    def test_gate_op_matrix(self):
        op = GateOp(name="XX", qubits=(0, 1), angle=0.4)
        assert op.num_qubits == 2
        assert np.allclose(op.matrix(), rxx_matrix(0.4))

    def test_gate_op_unknown(self):
        with pytest.raises(ValueError):
            GateOp(name="H", qubits=(0,)).matrix()


class TestStateVector:
    """Tests for the state-vector engine."""

    def test_initial_state(self):
        sv = StateVector(3)
        assert sv.dim == 8
        assert sv.amplitudes[0] == 1.0
        assert np.isclose(sv.norm(), 1.0)
        for q in range(3):
            assert np.isclose(sv.exp_z(q), 1.0)

    @pytest.mark.parametrize("n", [0, MAX_QUBITS + 1, -2])
    def test_invalid_dimension(self, n):
        with pytest.raises(InvalidDimensionError):
            StateVector(n)

    def test_invalid_dimension_is_value_error(self):
        with pytest.raises(ValueError):
            StateVector(0)

    def test_qubit_out_of_range(self):
        sv = StateVector(2)
        with pytest.raises(QubitIndexError):
            sv.apply_rx(2, 0.1)
        with pytest.raises(QubitIndexError):
            sv.apply_xx(0, 5, 0.1)
        with pytest.raises(QubitIndexError):
            sv.exp_z(-1)
        with pytest.raises(SimulatorError):
            sv.exp_zz(0, 3)

    def test_amplitudes_read_only(self):
        sv = StateVector(1)
        with pytest.raises(ValueError):
            sv.amplitudes[0] = 0.0

    @pytest.mark.parametrize("n", [1, 2, 3, 4])
    def test_norm_preserved(self, n):
        rng = np.random.default_rng(n)
        sv = StateVector(n)
        _random_circuit(sv, rng)
        assert abs(sv.norm() - 1.0) < 1e-12

    def test_zero_rotations_leave_state_unchanged(self):
        rng = np.random.default_rng(5)
        sv = StateVector(3)
        _random_circuit(sv, rng)
        before = sv.amplitudes.copy()
        for q in range(3):
            sv.apply_rx(q, 0.0)
            sv.apply_ry(q, 0.0)
        sv.apply_xx(0, 2, 0.0)
        assert np.allclose(sv.amplitudes, before)

    @pytest.mark.parametrize("gate", ["rx", "ry", "xx"])
    @pytest.mark.parametrize("n", [1, 2, 3, 4])
    def test_each_gate_unitary(self, gate, n):
        if gate == "xx" and n < 2:
            pytest.skip("XX needs two qubits")
        rng = np.random.default_rng(n)
        sv = StateVector(n)
        _random_circuit(sv, rng)
        before = sv.amplitudes.copy()
        theta = 0.917
        target = n - 1

        if gate == "rx":
            sv.apply_rx(target, theta)
        elif gate == "ry":
            sv.apply_ry(target, theta)
        else:
            sv.apply_xx(0, target, theta)
        assert abs(sv.norm() - 1.0) < 1e-12

        # Undo with the inverse rotation
        if gate == "rx":
            sv.apply_rx(target, -theta)
        elif gate == "ry":
            sv.apply_ry(target, -theta)
        else:
            sv.apply_xx(0, target, -theta)
        assert np.allclose(sv.amplitudes, before)

    def test_ry_pi_flips(self):
        sv = StateVector(1)
        sv.apply_ry(0, np.pi)
        assert np.isclose(abs(sv.amplitudes[1]), 1.0)
        assert np.isclose(sv.exp_z(0), -1.0)

    def test_rx_full_turn(self):
        sv = StateVector(2)
        sv.apply_ry(1, 0.3)
        before = sv.amplitudes.copy()
        sv.apply_rx(0, 2 * np.pi)
        assert np.allclose(sv.amplitudes, -before)

    @pytest.mark.parametrize("qubit", [0, 1, 2])
    def test_single_qubit_matches_dense(self, qubit):
        rng = np.random.default_rng(7)
        sv = StateVector(3)
        _random_circuit(sv, rng)
        before = sv.amplitudes.copy()
        sv.apply_ry(qubit, 0.9)
        expected = _dense_single(3, qubit, ry_matrix(0.9)) @ before
        assert np.allclose(sv.amplitudes, expected)

    @pytest.mark.parametrize("q1,q2", [(0, 1), (0, 2), (2, 1), (1, 3)])
    def test_xx_matches_direct_form(self, q1, q2):
        rng = np.random.default_rng(11)
        sv = StateVector(4)
        _random_circuit(sv, rng)
        before = sv.amplitudes.copy()
        theta = 1.234
        sv.apply_xx(q1, q2, theta)

        mask = (1 << q1) | (1 << q2)
        flipped = before[np.arange(16) ^ mask]
        expected = np.cos(theta / 2) * before - 1j * np.sin(theta / 2) * flipped
        assert np.allclose(sv.amplitudes, expected)

    def test_xx_same_qubit_noop(self):
        sv = StateVector(2)
        sv.apply_ry(0, 0.5)
        before = sv.amplitudes.copy()
        sv.apply_xx(1, 1, 0.8)
        assert np.allclose(sv.amplitudes, before)

    def test_xx_entangles(self):
        sv = StateVector(2)
        sv.apply_xx(0, 1, np.pi / 2)
        # (|00> - i|11>) / sqrt(2)
        assert np.isclose(abs(sv.amplitudes[0]) ** 2, 0.5)
        assert np.isclose(abs(sv.amplitudes[3]) ** 2, 0.5)
        assert np.isclose(sv.exp_zz(0, 1), 1.0)
        assert np.isclose(sv.exp_z(0), 0.0)

    def test_exp_xx_matches_direct(self):
        rng = np.random.default_rng(3)
        sv = StateVector(3)
        _random_circuit(sv, rng)
        for q1, q2 in [(0, 1), (0, 2), (1, 2)]:
            assert np.isclose(sv.exp_xx(q1, q2), direct_exp_xx(sv, q1, q2))

    def test_exp_xx_does_not_mutate(self):
        sv = StateVector(2)
        sv.apply_ry(0, 0.4)
        before = sv.amplitudes.copy()
        sv.exp_xx(0, 1)
        assert np.allclose(sv.amplitudes, before)

    def test_plus_state_xx(self):
        sv = StateVector(2)
        sv.apply_ry(0, np.pi / 2)
        sv.apply_ry(1, np.pi / 2)
        assert np.isclose(sv.exp_xx(0, 1), 1.0)
        assert np.isclose(sv.exp_zz(0, 1), 0.0)

    def test_clone_independent(self):
        sv = StateVector(2)
        other = sv.clone()
        other.apply_rx(0, 1.0)
        assert np.isclose(sv.exp_z(0), 1.0)
        assert not np.isclose(other.exp_z(0), 1.0)


class TestGraph:
    """Tests for MaxCut graph instances."""

    def test_parse_edge(self):
        assert parse_edge("2-0") == (2, 0)
        assert parse_edge((1, 3)) == (1, 3)

    @pytest.mark.parametrize("bad", ["1", "a-b", "1-2-3", (1,), (1, 2, 3)])
    def test_parse_malformed(self, bad):
        with pytest.raises(MalformedEdgeError):
            parse_edge(bad)

    def test_canonical_edge(self):
        assert canonical_edge("3-1") == (1, 3)
        assert edge_key(3, 1) == "1-3"
        with pytest.raises(MalformedEdgeError):
            canonical_edge((2, 2))
        with pytest.raises(MalformedEdgeError):
            canonical_edge((-1, 2))

    def test_canonical_edges_dedup_and_order(self):
        edges = canonical_edges(["2-3", (1, 0), "3-2", (0, 1)], 4)
        assert edges == ((2, 3), (0, 1))

    def test_canonical_edges_out_of_range(self):
        with pytest.raises(MalformedEdgeError):
            canonical_edges([(0, 4)], 4)

    def test_cycle(self):
        graph = GraphInstance.cycle(4)
        assert graph.sorted_edges == ((0, 1), (0, 3), (1, 2), (2, 3))
        assert graph.edge_keys() == ("0-1", "0-3", "1-2", "2-3")
        assert GraphInstance.cycle(2).num_edges == 1
        assert GraphInstance.cycle(1).num_edges == 0

    def test_invalid_node_count(self):
        with pytest.raises(InvalidDimensionError):
            GraphInstance(node_count=0)

    def test_toggle_edge(self):
        graph = GraphInstance.cycle(4)
        removed = graph.toggle_edge(1, 0)
        assert not removed.has_edge(0, 1)
        assert graph.has_edge(0, 1)
        restored = removed.toggle_edge(0, 1)
        assert restored == graph
        with pytest.raises(MalformedEdgeError):
            graph.toggle_edge(0, 4)

    def test_with_node_count(self):
        graph = GraphInstance.cycle(4).with_node_count(3)
        assert graph.node_count == 3
        assert graph.sorted_edges == ((0, 1), (1, 2))
        grown = graph.with_node_count(6)
        assert grown.sorted_edges == graph.sorted_edges

    def test_to_networkx(self):
        g = GraphInstance.cycle(5).to_networkx()
        assert g.number_of_nodes() == 5
        assert g.number_of_edges() == 5

    def test_cut_value(self):
        graph = GraphInstance.cycle(4)
        assert graph.cut_value([0, 1, 0, 1]) == 4
        assert graph.cut_value([0, 0, 1, 1]) == 2
        assert graph.cut_value([0, 0, 0, 0]) == 0
        with pytest.raises(ValueError):
            graph.cut_value([0, 1])

    def test_max_cut(self):
        assert GraphInstance.cycle(4).max_cut()[1] == 4
        assert GraphInstance.cycle(3).max_cut()[1] == 2
        partition, value = GraphInstance.cycle(5).max_cut()
        assert value == 4
        assert partition[0] == 0


class TestMolecules:
    """Tests for the molecule registry."""

    def test_registry(self):
        assert set(MOLECULES) == {"H2_0.74", "H2_1.5", "HeH"}
        h2 = get_molecule("H2_0.74")
        assert np.isclose(h2.coeffs.g0, -1.0523732)
        assert np.isclose(h2.theoretical_min, -1.13727)

    def test_unknown_molecule(self):
        with pytest.raises(UnknownMoleculeError):
            get_molecule("LiH")
        with pytest.raises(KeyError):
            get_molecule("")

    @pytest.mark.parametrize("key", sorted(MOLECULES))
    def test_hamiltonian_hermitian(self, key):
        h = get_molecule(key).hamiltonian_matrix()
        assert h.shape == (4, 4)
        assert np.allclose(h, h.conj().T)

    def test_hamiltonian_diagonal(self):
        g0, g1, g2, g3, _ = get_molecule("HeH").coeffs.as_tuple()
        h = get_molecule("HeH").hamiltonian_matrix()
        # Index 1 is qubit 0 = 1, qubit 1 = 0
        assert np.isclose(h[1, 1].real, g0 - g1 + g2 - g3)
        assert np.isclose(h[2, 2].real, g0 + g1 - g2 - g3)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
