"""Circuit builders: logical and native column projections, Qiskit export."""

from varqsim.compiler.circuits import (
    GateDescriptor,
    CircuitColumn,
    build_circuit,
    build_qaoa_circuit,
    build_vqe_circuit,
    native_gate_sequence,
    run_native,
    to_qiskit_circuit,
)

__all__ = [
    "GateDescriptor",
    "CircuitColumn",
    "build_circuit",
    "build_qaoa_circuit",
    "build_vqe_circuit",
    "native_gate_sequence",
    "run_native",
    "to_qiskit_circuit",
]
