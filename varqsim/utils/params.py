"""
Parameter-vector helpers.

Parameter vectors are plain tuples of floats. Missing entries read as 0
through ``param_at``; the circuit builders and the optimizer rely on that
leniency instead of raising on short vectors.
"""

from __future__ import annotations

import math
from typing import Callable, Sequence, Tuple

from varqsim.core.errors import NonFiniteParameterError


def param_at(params: Sequence[float], index: int, default: float = 0.0) -> float:
    """Bounds-checked read; out-of-range or negative indices return ``default``."""
    if 0 <= index < len(params):
        return float(params[index])
    return default


def default_gamma(index: int) -> float:
    return 0.7 / (index + 1)


def default_beta(index: int) -> float:
    return 0.35 / (index + 1)


def default_theta(index: int) -> float:
    return 0.25 / (index + 1)


def default_gammas(depth: int) -> Tuple[float, ...]:
    return tuple(default_gamma(i) for i in range(depth))


def default_betas(depth: int) -> Tuple[float, ...]:
    return tuple(default_beta(i) for i in range(depth))


def default_thetas(depth: int) -> Tuple[float, ...]:
    """Two VQE angles per layer."""
    return tuple(default_theta(i) for i in range(depth * 2))


def resize_params(
    params: Sequence[float],
    size: int,
    seed: Callable[[int], float],
) -> Tuple[float, ...]:
    """
    Truncate or pad ``params`` to ``size``.

    Finite values are kept by index; missing or non-finite slots are filled
    with ``seed(index)``.
    """
    result = []
    for i in range(size):
        value = params[i] if i < len(params) else None
        if value is not None and math.isfinite(value):
            result.append(float(value))
        else:
            result.append(seed(i))
    return tuple(result)


def ensure_finite(value: float, name: str = "parameter") -> float:
    """Reject NaN and infinities before they reach a parameter vector."""
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise NonFiniteParameterError(f"{name} must be a real number, got {value!r}") from None
    if not math.isfinite(value):
        raise NonFiniteParameterError(f"{name} must be finite, got {value}")
    return value


def ensure_all_finite(params: Sequence[float], name: str = "parameters") -> Tuple[float, ...]:
    return tuple(ensure_finite(p, f"{name}[{i}]") for i, p in enumerate(params))


def replace_at(params: Sequence[float], index: int, value: float) -> Tuple[float, ...]:
    """Functional single-entry update; raises IndexError outside the vector."""
    if not 0 <= index < len(params):
        raise IndexError(f"index {index} out of range for {len(params)} parameters")
    updated = list(params)
    updated[index] = value
    return tuple(updated)
