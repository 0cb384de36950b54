"""Exception hierarchy for varqsim."""


class SimulatorError(Exception):
    """Base exception for all simulator errors."""
    pass


class InvalidDimensionError(SimulatorError, ValueError):
    """Raised when a register is requested with an unsupported qubit count."""
    pass


class QubitIndexError(SimulatorError, IndexError):
    """Raised when a gate or observable addresses a qubit outside the register."""
    pass


class MalformedEdgeError(SimulatorError, ValueError):
    """Raised when an edge is unparsable, a self-loop, or outside the graph."""
    pass


class NonFiniteParameterError(SimulatorError, ValueError):
    """Raised when NaN or infinity would be written into a parameter vector."""
    pass


class UnknownMoleculeError(SimulatorError, KeyError):
    """Raised when a molecule key is not in the registry."""
    pass
