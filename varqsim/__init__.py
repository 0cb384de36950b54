"""
varqsim - Variational Quantum Simulator

An exact state-vector simulator with gradient-descent runtimes for QAOA
MaxCut and two-qubit molecular VQE.
"""

from varqsim.compiler.circuits import build_circuit
from varqsim.runtime.engine import OptimizerRuntime

__version__ = "0.1.0"
__all__ = ["build_circuit", "OptimizerRuntime"]
