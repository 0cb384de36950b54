"""
Gate matrices used by the state-vector engine.

Only the rotations the variational circuits need are defined here. Each
matrix follows the exp(-iθP/2) convention, so every generator has
eigenvalues ±1 and the parameter-shift rule applies with a shift of π/2.
"""

from __future__ import annotations

import numpy as np
from dataclasses import dataclass
from typing import Tuple


PAULI_I = np.array([[1, 0], [0, 1]], dtype=np.complex128)
PAULI_X = np.array([[0, 1], [1, 0]], dtype=np.complex128)
PAULI_Z = np.array([[1, 0], [0, -1]], dtype=np.complex128)


def rx_matrix(theta: float) -> np.ndarray:
    """Rotation around X-axis: Rx(θ) = exp(-iθX/2)"""
    c, s = np.cos(theta / 2), np.sin(theta / 2)
    return np.array([[c, -1j * s], [-1j * s, c]], dtype=np.complex128)


def ry_matrix(theta: float) -> np.ndarray:
    """Rotation around Y-axis: Ry(θ) = exp(-iθY/2)"""
    c, s = np.cos(theta / 2), np.sin(theta / 2)
    return np.array([[c, -s], [s, c]], dtype=np.complex128)


def rxx_matrix(theta: float) -> np.ndarray:
    """XX rotation: Rxx(θ) = exp(-iθXX/2), basis order |00>, |01>, |10>, |11>."""
    c, s = np.cos(theta / 2), np.sin(theta / 2)
    return np.array([
        [c, 0, 0, -1j * s],
        [0, c, -1j * s, 0],
        [0, -1j * s, c, 0],
        [-1j * s, 0, 0, c]
    ], dtype=np.complex128)


SINGLE_QUBIT_MATRICES = {
    "Rx": rx_matrix,
    "Ry": ry_matrix,
}

TWO_QUBIT_MATRICES = {
    "XX": rxx_matrix,
}


@dataclass(frozen=True)
class GateOp:
    """
    One executable gate in a native gate sequence.

    Attributes:
        name: "Rx", "Ry" or "XX"
        qubits: Target qubit(s)
        angle: Rotation angle in radians
    """
    name: str
    qubits: Tuple[int, ...]
    angle: float = 0.0

    @property
    def num_qubits(self) -> int:
        return len(self.qubits)

    def matrix(self) -> np.ndarray:
        if self.name in SINGLE_QUBIT_MATRICES:
            return SINGLE_QUBIT_MATRICES[self.name](self.angle)
        if self.name in TWO_QUBIT_MATRICES:
            return TWO_QUBIT_MATRICES[self.name](self.angle)
        raise ValueError(f"Unknown gate: {self.name}")

    def __repr__(self) -> str:
        return f"{self.name}({self.angle:.4f}) @ {self.qubits}"

