"""Objective evaluators for QAOA and VQE."""

from varqsim.observables.expectation import (
    evaluate_qaoa_cost,
    evaluate_vqe_energy,
    evaluate_objective_from_flat,
    evaluate_metric,
    evaluate_objective,
)

__all__ = [
    "evaluate_qaoa_cost",
    "evaluate_vqe_energy",
    "evaluate_objective_from_flat",
    "evaluate_metric",
    "evaluate_objective",
]
