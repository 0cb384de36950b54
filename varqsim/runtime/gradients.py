"""
Parameter-shift gradients.

For a gate exp(-iθP/2) whose generator P has eigenvalues ±1,

    d<O>/dθ = (f(θ + π/2) - f(θ - π/2)) / 2

exactly. QAOA parameters are shared by many gate instances, so the gradient
of a shared parameter is the sum of per-instance shift terms, one circuit
pair per instance.
"""

from __future__ import annotations

import logging
import numpy as np
from typing import Iterable, List, Sequence, Tuple

from varqsim.core.graph import EdgeLike, canonical_edges
from varqsim.core.io_spec import Algorithm, ProblemSnapshot
from varqsim.observables.expectation import (
    QaoaShift,
    evaluate_vqe_energy,
    qaoa_layer_count,
    qaoa_objective,
)


logger = logging.getLogger(__name__)

PARAMETER_SHIFT = np.pi / 2

# γ enters XX(γ) directly: 0.5 * (f+ - f-) per edge.
# β enters as Rx(2β): the chain rule doubles the coefficient to 1.0 per qubit.
GAMMA_SHIFT_COEFF = 0.5
BETA_SHIFT_COEFF = 1.0
THETA_SHIFT_COEFF = 0.5


def qaoa_gradients(
    node_count: int,
    edges: Iterable[EdgeLike],
    gammas: Sequence[float],
    betas: Sequence[float],
) -> Tuple[List[float], List[float]]:
    """
    Gradient of the minimization-form QAOA objective (``-cost``).

    Costs ``2 * layers * (|edges| + node_count)`` circuit evaluations.

    Returns:
        (gamma_grads, beta_grads), each of length max(len(gammas), len(betas))
    """
    edge_pairs = canonical_edges(edges, node_count) if node_count >= 1 else ()
    layers = qaoa_layer_count(gammas, betas)
    gamma_grads = [0.0] * layers
    beta_grads = [0.0] * layers

    for layer in range(layers):
        for e in range(len(edge_pairs)):
            plus = qaoa_objective(
                node_count, edge_pairs, gammas, betas, QaoaShift.gamma(layer, e, +1)
            )
            minus = qaoa_objective(
                node_count, edge_pairs, gammas, betas, QaoaShift.gamma(layer, e, -1)
            )
            gamma_grads[layer] += GAMMA_SHIFT_COEFF * (plus - minus)

        for q in range(node_count):
            plus = qaoa_objective(
                node_count, edge_pairs, gammas, betas, QaoaShift.beta(layer, q, +1)
            )
            minus = qaoa_objective(
                node_count, edge_pairs, gammas, betas, QaoaShift.beta(layer, q, -1)
            )
            beta_grads[layer] += BETA_SHIFT_COEFF * (plus - minus)

    logger.debug(
        "QAOA gradients over %d layers: gamma=%s beta=%s",
        layers, gamma_grads, beta_grads,
    )
    return gamma_grads, beta_grads


def vqe_gradients(thetas: Sequence[float], molecule_key: str) -> List[float]:
    """Gradient of the VQE energy, two evaluations per angle."""
    grads = []
    for idx in range(len(thetas)):
        plus = list(thetas)
        minus = list(thetas)
        plus[idx] += PARAMETER_SHIFT
        minus[idx] -= PARAMETER_SHIFT
        f_plus = evaluate_vqe_energy(plus, molecule_key)
        f_minus = evaluate_vqe_energy(minus, molecule_key)
        grads.append(THETA_SHIFT_COEFF * (f_plus - f_minus))
    logger.debug("VQE gradients for %s: %s", molecule_key, grads)
    return grads


def snapshot_gradients(snapshot: ProblemSnapshot) -> Tuple[List[float], ...]:
    """
    Gradients for whichever algorithm the snapshot selects.

    Returns:
        (gamma_grads, beta_grads) for QAOA, (theta_grads,) for VQE
    """
    if snapshot.algorithm is Algorithm.QAOA:
        return qaoa_gradients(
            snapshot.node_count, snapshot.edges, snapshot.gammas, snapshot.betas
        )
    return (vqe_gradients(snapshot.thetas, snapshot.molecule_key),)
