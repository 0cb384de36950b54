"""Utility functions for varqsim."""

from varqsim.utils.params import param_at, resize_params, ensure_finite
from varqsim.utils.validation import (
    exact_ground_energy,
    finite_difference_gradient,
    validate_against_qiskit,
)

__all__ = [
    "param_at",
    "resize_params",
    "ensure_finite",
    "exact_ground_energy",
    "finite_difference_gradient",
    "validate_against_qiskit",
]
