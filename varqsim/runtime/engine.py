"""
Variational optimizer runtime.

A gradient-descent state machine (idle -> running -> idle | converged)
advanced one step per external ``tick``. The runtime owns no timers; whoever
drives the animation calls ``tick`` on its own cadence and stops calling it
to cancel.
"""

from __future__ import annotations

import logging
import math
from collections import deque
from dataclasses import dataclass, field, replace
from typing import Deque, List, Optional, Sequence, Tuple, Union

from varqsim.core.errors import InvalidDimensionError
from varqsim.core.graph import GraphInstance
from varqsim.core.io_spec import (
    HISTORY_LIMIT,
    Algorithm,
    CircuitMode,
    EarlyStopConfig,
    HyperParameters,
    LearningRateSchedule,
    ParameterKind,
    ProblemSnapshot,
    RunStatus,
    StopReason,
    TickResult,
)
from varqsim.core.molecules import get_molecule
from varqsim.core.statevector import MAX_QUBITS
from varqsim.observables.expectation import (
    evaluate_metric,
    evaluate_qaoa_cost,
    evaluate_vqe_energy,
)
from varqsim.runtime.gradients import snapshot_gradients
from varqsim.runtime.schedule import EarlyStopMonitor, effective_learning_rate
from varqsim.utils.params import (
    default_beta,
    default_betas,
    default_gamma,
    default_gammas,
    default_theta,
    default_thetas,
    ensure_all_finite,
    ensure_finite,
    param_at,
    replace_at,
    resize_params,
)


logger = logging.getLogger(__name__)


def _descend(
    params: Sequence[float], grads: Sequence[float], learning_rate: float
) -> Tuple[float, ...]:
    return tuple(p - learning_rate * param_at(grads, i) for i, p in enumerate(params))


def _padded(params: Sequence[float], size: int) -> Tuple[float, ...]:
    return tuple(param_at(params, i) for i in range(size))


@dataclass
class OptimizerRuntime:
    """
    Runtime driving QAOA / VQE parameter optimization.

    Usage:
        runtime = OptimizerRuntime()
        runtime.start()
        while runtime.is_running and runtime.iteration < 100:
            result = runtime.tick()
        print(runtime.history[-1])

    Attributes:
        snapshot: Current problem instance and parameters
        hyperparameters: Learning rates, decay schedule, early stopping
        status: Run state
        iteration: Completed ticks since the last reset
        stop_reason: Why the last run ended on its own
    """
    snapshot: ProblemSnapshot = field(default_factory=ProblemSnapshot.default)
    hyperparameters: HyperParameters = field(default_factory=HyperParameters.default)
    status: RunStatus = RunStatus.IDLE
    iteration: int = 0
    stop_reason: StopReason = StopReason.NONE
    _history: Deque[float] = field(
        default_factory=lambda: deque(maxlen=HISTORY_LIMIT), repr=False
    )
    _monitor: Optional[EarlyStopMonitor] = field(default=None, repr=False)

    def __post_init__(self):
        """Validate the initial snapshot and seed the history."""
        get_molecule(self.snapshot.molecule_key)
        ensure_all_finite(self.snapshot.gammas, "gammas")
        ensure_all_finite(self.snapshot.betas, "betas")
        ensure_all_finite(self.snapshot.thetas, "thetas")
        if self._monitor is None:
            self._monitor = EarlyStopMonitor(config=self.hyperparameters.early_stop)
        if not self._history:
            self._seed_history()

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def algorithm(self) -> Algorithm:
        return self.snapshot.algorithm

    @property
    def history(self) -> Tuple[float, ...]:
        return tuple(self._history)

    @property
    def is_running(self) -> bool:
        return self.status is RunStatus.RUNNING

    @property
    def stall_count(self) -> int:
        return self._monitor.stall_count

    @property
    def current_metric(self) -> float:
        """Cut size (QAOA) or energy (VQE) at the current parameters."""
        return evaluate_metric(self.snapshot)

    @property
    def effective_learning_rate(self) -> float:
        return effective_learning_rate(
            self.algorithm,
            self.hyperparameters.base_learning_rate(self.algorithm),
            self.iteration,
            self.hyperparameters.schedule,
        )

    def circuit(self, mode: CircuitMode = CircuitMode.LOGICAL):
        """Circuit columns for the current parameters."""
        from varqsim.compiler.circuits import build_circuit

        return build_circuit(self.snapshot, mode)

    # ------------------------------------------------------------------
    # Run control
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Begin (or resume) ticking. Clears any previous stop reason."""
        if self.is_running:
            return
        self.status = RunStatus.RUNNING
        self.stop_reason = StopReason.NONE
        self._monitor.reset()
        logger.info(
            "Optimizer started: %s, depth=%d, iteration=%d",
            self.algorithm.value, self.snapshot.depth, self.iteration,
        )

    def stop(self) -> None:
        if self.is_running:
            self.status = RunStatus.IDLE
            logger.info("Optimizer stopped at iteration %d", self.iteration)

    def tick(self) -> Optional[TickResult]:
        """
        Advance one gradient-descent step.

        Reads the current snapshot, computes the scheduled learning rate and
        parameter-shift gradients, replaces the parameter vectors with
        ``p - lr * grad``, evaluates the new metric and appends it to the
        history. For VQE the early-stop policy may move the runtime to
        ``CONVERGED``.

        Returns:
            TickResult, or None when the runtime is not running
        """
        if not self.is_running:
            return None

        snap = self.snapshot
        lr = self.effective_learning_rate
        next_iteration = self.iteration + 1
        converged = False

        if snap.algorithm is Algorithm.QAOA:
            self._monitor.reset()
            gammas = _padded(snap.gammas, snap.depth)
            betas = _padded(snap.betas, snap.depth)
            gamma_grads, beta_grads = snapshot_gradients(
                replace(snap, gammas=gammas, betas=betas)
            )
            grads = list(gamma_grads) + list(beta_grads)
            next_snap = replace(
                snap,
                gammas=_descend(gammas, gamma_grads, lr),
                betas=_descend(betas, beta_grads, lr),
            )
            metric = evaluate_qaoa_cost(
                next_snap.node_count, next_snap.edges, next_snap.gammas, next_snap.betas
            )
        else:
            thetas = _padded(snap.thetas, snap.depth * 2)
            previous = evaluate_vqe_energy(thetas, snap.molecule_key)
            (grads,) = snapshot_gradients(replace(snap, thetas=thetas))
            next_snap = replace(snap, thetas=_descend(thetas, grads, lr))
            metric = evaluate_vqe_energy(next_snap.thetas, next_snap.molecule_key)
            converged = self._monitor.update(next_iteration, previous, metric)

        self.snapshot = next_snap
        self._history.append(metric)
        self.iteration = next_iteration

        if converged:
            self.status = RunStatus.CONVERGED
            self.stop_reason = StopReason.CONVERGED

        grad_norm = math.sqrt(sum(g * g for g in grads))
        logger.debug(
            "tick %d: lr=%.5f metric=%.6f |grad|=%.6f stall=%d",
            next_iteration, lr, metric, grad_norm, self._monitor.stall_count,
        )
        return TickResult(
            iteration=next_iteration,
            learning_rate=lr,
            metric=metric,
            gammas=next_snap.gammas,
            betas=next_snap.betas,
            thetas=next_snap.thetas,
            history=self.history,
            stall_count=self._monitor.stall_count,
            stop_reason=self.stop_reason,
            gradient_norm=grad_norm,
        )

    def run(self, max_ticks: int) -> List[TickResult]:
        """Start and tick until the run stops on its own or ``max_ticks`` is hit."""
        self.start()
        results = []
        for _ in range(max_ticks):
            result = self.tick()
            if result is None:
                break
            results.append(result)
            if not self.is_running:
                break
        self.stop()
        return results

    def reset(self) -> None:
        """
        Stop and restore default parameters for the active algorithm.

        History becomes a single value, the metric at the defaults.
        """
        self.stop()
        depth = self.snapshot.depth
        if self.algorithm is Algorithm.QAOA:
            self.snapshot = replace(
                self.snapshot, gammas=default_gammas(depth), betas=default_betas(depth)
            )
        else:
            self.snapshot = replace(self.snapshot, thetas=default_thetas(depth))
        self._clear_run()
        logger.info("Optimizer reset: %s, depth=%d", self.algorithm.value, depth)

    # ------------------------------------------------------------------
    # Structural changes: stop, clear the run, keep parameters
    # ------------------------------------------------------------------

    def set_algorithm(self, algorithm: Union[Algorithm, str]) -> None:
        self._restructure(algorithm=Algorithm(algorithm))

    def set_depth(self, depth: int) -> None:
        """Resize every parameter vector, keeping finite values by index."""
        if depth < 1:
            raise ValueError(f"depth must be >= 1, got {depth}")
        snap = self.snapshot
        self._restructure(
            depth=depth,
            gammas=resize_params(snap.gammas, depth, default_gamma),
            betas=resize_params(snap.betas, depth, default_beta),
            thetas=resize_params(snap.thetas, depth * 2, default_theta),
        )

    def set_node_count(self, node_count: int) -> None:
        if node_count > MAX_QUBITS:
            raise InvalidDimensionError(
                f"node_count must be <= {MAX_QUBITS}, got {node_count}"
            )
        self._restructure(graph=self.snapshot.graph.with_node_count(node_count))

    def set_graph(self, graph: GraphInstance) -> None:
        if graph.node_count > MAX_QUBITS:
            raise InvalidDimensionError(
                f"node_count must be <= {MAX_QUBITS}, got {graph.node_count}"
            )
        self._restructure(graph=graph)

    def toggle_edge(self, a: int, b: int) -> None:
        self._restructure(graph=self.snapshot.graph.toggle_edge(a, b))

    def set_molecule(self, molecule_key: str) -> None:
        get_molecule(molecule_key)
        self._restructure(molecule_key=molecule_key)

    # ------------------------------------------------------------------
    # Non-structural edits
    # ------------------------------------------------------------------

    def set_parameter(
        self, kind: Union[ParameterKind, str], index: int, value: float
    ) -> bool:
        """
        Overwrite one parameter while idle.

        Returns:
            False if the edit was ignored because the optimizer is running

        Raises:
            NonFiniteParameterError: If value is NaN or infinite
            IndexError: If index is outside the vector
        """
        kind = ParameterKind(kind)
        value = ensure_finite(value, kind.value)
        if self.is_running:
            logger.warning("Ignoring %s[%d] edit while the optimizer is running", kind.value, index)
            return False

        field_name = {
            ParameterKind.GAMMA: "gammas",
            ParameterKind.BETA: "betas",
            ParameterKind.THETA: "thetas",
        }[kind]
        current = getattr(self.snapshot, field_name)
        self.snapshot = replace(
            self.snapshot, **{field_name: replace_at(current, index, value)}
        )
        if self.iteration == 0:
            self._seed_history()
        return True

    def set_learning_rate(self, algorithm: Union[Algorithm, str], value: float) -> None:
        algorithm = Algorithm(algorithm)
        value = ensure_finite(value, "learning_rate")
        if value <= 0:
            raise ValueError(f"learning_rate must be positive, got {value}")
        rates = dict(self.hyperparameters.learning_rates)
        rates[algorithm] = value
        self.hyperparameters = replace(self.hyperparameters, learning_rates=rates)

    def set_schedule(self, schedule: LearningRateSchedule) -> None:
        self.hyperparameters = replace(self.hyperparameters, schedule=schedule)

    def set_early_stop(self, config: EarlyStopConfig) -> None:
        self.hyperparameters = replace(self.hyperparameters, early_stop=config)
        self._monitor.config = config

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _restructure(self, **changes) -> None:
        self.stop()
        self.snapshot = replace(self.snapshot, **changes)
        self._clear_run()
        logger.debug("Structural change %s; run cleared", sorted(changes))

    def _clear_run(self) -> None:
        self.iteration = 0
        self.stop_reason = StopReason.NONE
        if self.status is RunStatus.CONVERGED:
            self.status = RunStatus.IDLE
        self._monitor.reset()
        self._seed_history()

    def _seed_history(self) -> None:
        self._history.clear()
        self._history.append(evaluate_metric(self.snapshot))
