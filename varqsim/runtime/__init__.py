"""Runtime: gradients, learning-rate schedule, and the optimizer state machine."""

from varqsim.runtime.engine import OptimizerRuntime
from varqsim.runtime.gradients import qaoa_gradients, vqe_gradients
from varqsim.runtime.schedule import EarlyStopMonitor, effective_learning_rate

__all__ = [
    "OptimizerRuntime",
    "qaoa_gradients",
    "vqe_gradients",
    "EarlyStopMonitor",
    "effective_learning_rate",
]
