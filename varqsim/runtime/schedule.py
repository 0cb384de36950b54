"""
Learning-rate schedule and early-stopping policy.

Both are driven only by the iteration count and the configs; the schedule
keeps no state at all and the early-stop monitor keeps a single counter.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from varqsim.core.io_spec import (
    Algorithm,
    DecayMode,
    EarlyStopConfig,
    LearningRateSchedule,
)


logger = logging.getLogger(__name__)


def effective_learning_rate(
    algorithm: Algorithm,
    base_learning_rate: float,
    iteration: int,
    schedule: LearningRateSchedule,
) -> float:
    """
    Learning rate for ``iteration``.

    The schedule only applies to VQE; QAOA and a disabled schedule return
    the base rate.

    Exponential:  max(min_lr, base * exp_gamma ** iteration)
    Step:         max(min_lr, base * step_factor ** floor(iteration / step_every))
    """
    if algorithm is not Algorithm.VQE or not schedule.enabled:
        return base_learning_rate
    if schedule.mode is DecayMode.EXPONENTIAL:
        return max(
            schedule.min_learning_rate,
            base_learning_rate * math.pow(schedule.exp_gamma, iteration),
        )
    decay_steps = iteration // max(1, schedule.step_every)
    return max(
        schedule.min_learning_rate,
        base_learning_rate * math.pow(schedule.step_factor, decay_steps),
    )


@dataclass
class EarlyStopMonitor:
    """
    Counts consecutive stalled VQE ticks.

    A tick is stalled when the energy moved by less than
    ``config.delta_threshold``. The monitor only counts once the iteration
    reached ``config.min_iterations``; before that, or while disabled, the
    counter is held at 0.

    Attributes:
        config: Early-stopping configuration
        stall_count: Current run of stalled ticks
    """
    config: EarlyStopConfig = field(default_factory=EarlyStopConfig)
    stall_count: int = 0

    def reset(self) -> None:
        self.stall_count = 0

    def update(self, iteration: int, previous: float, current: float) -> bool:
        """
        Record one tick.

        Args:
            iteration: Iteration count after the tick
            previous: Energy before the parameter update
            current: Energy after the parameter update

        Returns:
            True once the stall counter reaches ``patience``
        """
        if not self.config.enabled or iteration < self.config.min_iterations:
            self.stall_count = 0
            return False

        delta = abs(current - previous)
        if delta < self.config.delta_threshold:
            self.stall_count += 1
        else:
            self.stall_count = 0

        if self.stall_count >= self.config.patience:
            logger.info(
                "Converged at iteration %d: %d ticks with |dE| < %g",
                iteration, self.stall_count, self.config.delta_threshold,
            )
            return True
        return False
