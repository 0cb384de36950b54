"""
Objective evaluators for QAOA and VQE.

Each evaluation builds a fresh ``StateVector``, runs the ansatz for the given
parameters and reduces the final state to a scalar. Nothing is cached or
shared between calls, so evaluations are pure and can run side by side.
"""

from __future__ import annotations

import numpy as np
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from varqsim.core.graph import EdgeLike, canonical_edges
from varqsim.core.io_spec import Algorithm, ProblemSnapshot
from varqsim.core.molecules import get_molecule
from varqsim.core.statevector import StateVector
from varqsim.utils.params import param_at


HALF_PI = np.pi / 2
# Fixed entangling angle of the VQE ansatz; not trainable.
VQE_ENTANGLER_ANGLE = np.pi / 4


@dataclass(frozen=True)
class QaoaShift:
    """
    A ±π/2 shift applied to a single gate instance of the QAOA circuit.

    For ``kind == "gamma"`` the shift hits the cost gate of edge
    ``edge_index`` in ``layer``; for ``kind == "beta"`` it hits the mixer
    rotation on ``qubit`` in ``layer``. Every other use of the same shared
    parameter is left unshifted.
    """
    kind: str
    layer: int
    sign: int
    edge_index: int = -1
    qubit: int = -1

    @classmethod
    def gamma(cls, layer: int, edge_index: int, sign: int) -> QaoaShift:
        return cls(kind="gamma", layer=layer, sign=sign, edge_index=edge_index)

    @classmethod
    def beta(cls, layer: int, qubit: int, sign: int) -> QaoaShift:
        return cls(kind="beta", layer=layer, sign=sign, qubit=qubit)

    def offset_for_edge(self, layer: int, edge_index: int) -> float:
        if self.kind == "gamma" and self.layer == layer and self.edge_index == edge_index:
            return self.sign * HALF_PI
        return 0.0

    def offset_for_qubit(self, layer: int, qubit: int) -> float:
        if self.kind == "beta" and self.layer == layer and self.qubit == qubit:
            return self.sign * HALF_PI
        return 0.0


def qaoa_layer_count(gammas: Sequence[float], betas: Sequence[float]) -> int:
    return max(len(gammas), len(betas))


def qaoa_objective(
    node_count: int,
    edges: Iterable[EdgeLike],
    gammas: Sequence[float],
    betas: Sequence[float],
    shift: Optional[QaoaShift] = None,
) -> float:
    """
    Minimization form of the MaxCut objective, ``-Σ_e (1 - <Z_a Z_b>) / 2``.

    Circuit:
        Ry(π/2) on every qubit, then per layer l:
          for each edge (a, b): Ry(π/2)⊗Ry(π/2), XX(γ_l), Ry(-π/2)⊗Ry(-π/2)
          Rx(2β_l) on every qubit

    The Ry sandwich turns the native XX coupling into an effective ZZ
    rotation. Missing γ_l / β_l read as 0.

    Args:
        node_count: Number of graph nodes (qubits)
        edges: Edges as (a, b) pairs or "a-b" strings
        gammas: Cost-layer angles, one per layer
        betas: Mixer angles, one per layer
        shift: Optional single-gate parameter shift

    Raises:
        MalformedEdgeError: If an edge references a node >= node_count
    """
    if node_count < 1:
        return 0.0
    edge_pairs = canonical_edges(edges, node_count)
    layers = qaoa_layer_count(gammas, betas)

    sv = StateVector(node_count)
    for q in range(node_count):
        sv.apply_ry(q, HALF_PI)

    for layer in range(layers):
        base_gamma = param_at(gammas, layer)
        for e, (a, b) in enumerate(edge_pairs):
            gamma = base_gamma
            if shift is not None:
                gamma += shift.offset_for_edge(layer, e)
            sv.apply_ry(a, HALF_PI)
            sv.apply_ry(b, HALF_PI)
            sv.apply_xx(a, b, gamma)
            sv.apply_ry(a, -HALF_PI)
            sv.apply_ry(b, -HALF_PI)

        beta = param_at(betas, layer)
        for q in range(node_count):
            mixer_angle = 2 * beta
            if shift is not None:
                mixer_angle += shift.offset_for_qubit(layer, q)
            sv.apply_rx(q, mixer_angle)

    cost = 0.0
    for a, b in edge_pairs:
        cost += (1 - sv.exp_zz(a, b)) / 2
    return -cost


def evaluate_qaoa_cost(
    node_count: int,
    edges: Iterable[EdgeLike],
    gammas: Sequence[float],
    betas: Sequence[float],
) -> float:
    """
    Expected cut size of the QAOA state, in [0, |edges|]. Higher is better.
    """
    return -qaoa_objective(node_count, edges, gammas, betas)


def evaluate_vqe_energy(thetas: Sequence[float], molecule_key: str) -> float:
    """
    Energy of the two-qubit VQE ansatz for a molecule.

    Circuit, per layer l < len(thetas) // 2:
        Ry(θ_2l) on qubit 0, Ry(θ_2l+1) on qubit 1, XX(π/4)

    Energy:
        g0 + g1<Z0> + g2<Z1> + g3<Z0Z1> + g4<X0X1>

    Raises:
        UnknownMoleculeError: If molecule_key is not registered
    """
    coeffs = get_molecule(molecule_key).coeffs
    sv = StateVector(2)
    layers = len(thetas) // 2

    for layer in range(layers):
        sv.apply_ry(0, param_at(thetas, 2 * layer))
        sv.apply_ry(1, param_at(thetas, 2 * layer + 1))
        sv.apply_xx(0, 1, VQE_ENTANGLER_ANGLE)

    return (
        coeffs.g0
        + coeffs.g1 * sv.exp_z(0)
        + coeffs.g2 * sv.exp_z(1)
        + coeffs.g3 * sv.exp_zz(0, 1)
        + coeffs.g4 * sv.exp_xx(0, 1)
    )


def evaluate_objective_from_flat(
    algorithm: Algorithm,
    depth: int,
    flat_params: Sequence[float],
    node_count: int,
    edges: Iterable[EdgeLike],
    molecule_key: str,
) -> float:
    """
    Minimization-form objective from a flat parameter list.

    QAOA reads ``flat_params`` as gammas followed by betas (``depth`` each)
    and returns ``-cost``; VQE reads it as thetas and returns the energy.
    """
    if algorithm is Algorithm.QAOA:
        gammas = tuple(flat_params[:depth])
        betas = tuple(flat_params[depth:depth * 2])
        return -evaluate_qaoa_cost(node_count, edges, gammas, betas)
    return evaluate_vqe_energy(flat_params, molecule_key)


def evaluate_metric(snapshot: ProblemSnapshot) -> float:
    """The value the optimizer records: cut size for QAOA, energy for VQE."""
    if snapshot.algorithm is Algorithm.QAOA:
        return evaluate_qaoa_cost(
            snapshot.node_count, snapshot.edges, snapshot.gammas, snapshot.betas
        )
    return evaluate_vqe_energy(snapshot.thetas, snapshot.molecule_key)


def evaluate_objective(snapshot: ProblemSnapshot) -> float:
    """Minimization-form objective of a snapshot (what gradients descend)."""
    metric = evaluate_metric(snapshot)
    return -metric if snapshot.algorithm is Algorithm.QAOA else metric
