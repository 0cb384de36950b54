"""Core varqsim components: state vector, gates, graphs, molecules, and I/O specs."""

from varqsim.core.statevector import StateVector, MAX_QUBITS
from varqsim.core.gates import GateOp
from varqsim.core.graph import GraphInstance, canonical_edges, parse_edge
from varqsim.core.molecules import MOLECULES, MoleculeSpec, get_molecule
from varqsim.core.errors import (
    SimulatorError,
    InvalidDimensionError,
    QubitIndexError,
    MalformedEdgeError,
    NonFiniteParameterError,
    UnknownMoleculeError,
)
from varqsim.core.io_spec import (
    Algorithm,
    CircuitMode,
    DecayMode,
    RunStatus,
    StopReason,
    ParameterKind,
    LearningRateSchedule,
    EarlyStopConfig,
    HyperParameters,
    ProblemSnapshot,
    TickResult,
)

__all__ = [
    # State vector
    "StateVector",
    "MAX_QUBITS",
    # Gates
    "GateOp",
    # Problem instances
    "GraphInstance",
    "canonical_edges",
    "parse_edge",
    "MOLECULES",
    "MoleculeSpec",
    "get_molecule",
    # Errors
    "SimulatorError",
    "InvalidDimensionError",
    "QubitIndexError",
    "MalformedEdgeError",
    "NonFiniteParameterError",
    "UnknownMoleculeError",
    # I/O specifications
    "Algorithm",
    "CircuitMode",
    "DecayMode",
    "RunStatus",
    "StopReason",
    "ParameterKind",
    "LearningRateSchedule",
    "EarlyStopConfig",
    "HyperParameters",
    "ProblemSnapshot",
    "TickResult",
]
