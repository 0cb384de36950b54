"""
Exact state-vector engine.

The register is a flat complex128 array of 2**n amplitudes. Bit q of an
amplitude's index is the computational-basis value of qubit q, so qubit 0 is
the least significant bit (the same little-endian convention Qiskit uses).
Gates are applied in place through reshaped views of the buffer; no gate
allocates more than a constant number of amplitude-sized temporaries.
"""

from __future__ import annotations

import logging
import numpy as np

from varqsim.core.errors import InvalidDimensionError, QubitIndexError
from varqsim.core.gates import rx_matrix, ry_matrix


logger = logging.getLogger(__name__)

# Memory grows as 2**n; 12 qubits is 4096 amplitudes, far above the
# node counts the optimizer is driven with.
MAX_QUBITS = 12


class StateVector:
    """
    Pure-state register of ``num_qubits`` qubits.

    Usage:
        sv = StateVector(2)
        sv.apply_ry(0, np.pi / 2)
        sv.apply_xx(0, 1, np.pi / 4)
        print(sv.exp_zz(0, 1))

    Every operation mutates this instance. Use ``clone`` for an independent
    copy.
    """

    def __init__(self, num_qubits: int):
        if num_qubits < 1 or num_qubits > MAX_QUBITS:
            raise InvalidDimensionError(
                f"num_qubits must be in [1, {MAX_QUBITS}], got {num_qubits}"
            )
        self._num_qubits = int(num_qubits)
        self._dim = 1 << self._num_qubits
        self._amplitudes = np.zeros(self._dim, dtype=np.complex128)
        self._amplitudes[0] = 1.0

    @property
    def num_qubits(self) -> int:
        return self._num_qubits

    @property
    def dim(self) -> int:
        return self._dim

    @property
    def amplitudes(self) -> np.ndarray:
        """Read-only view of the amplitude buffer."""
        view = self._amplitudes.view()
        view.flags.writeable = False
        return view

    def clone(self) -> StateVector:
        """Deep copy of the register."""
        other = StateVector.__new__(StateVector)
        other._num_qubits = self._num_qubits
        other._dim = self._dim
        other._amplitudes = self._amplitudes.copy()
        return other

    def _check_qubit(self, qubit: int) -> None:
        if not 0 <= qubit < self._num_qubits:
            raise QubitIndexError(
                f"qubit {qubit} out of range for {self._num_qubits}-qubit register"
            )

    # ------------------------------------------------------------------
    # Gates
    # ------------------------------------------------------------------

    def apply_single_qubit(self, qubit: int, matrix: np.ndarray) -> None:
        """
        Apply a 2x2 unitary to ``qubit``.

        The buffer is viewed as (high, bit, low) so that axis 1 is the target
        bit; every (bit=0, bit=1) pair is updated at once.
        """
        self._check_qubit(qubit)
        view = self._amplitudes.reshape(-1, 2, 1 << qubit)
        a0 = view[:, 0, :].copy()
        a1 = view[:, 1, :].copy()
        view[:, 0, :] = matrix[0, 0] * a0 + matrix[0, 1] * a1
        view[:, 1, :] = matrix[1, 0] * a0 + matrix[1, 1] * a1

    def apply_rx(self, qubit: int, theta: float) -> None:
        """Rx(θ) = [[cos θ/2, -i sin θ/2], [-i sin θ/2, cos θ/2]]"""
        self.apply_single_qubit(qubit, rx_matrix(theta))

    def apply_ry(self, qubit: int, theta: float) -> None:
        """Ry(θ) = [[cos θ/2, -sin θ/2], [sin θ/2, cos θ/2]]"""
        self.apply_single_qubit(qubit, ry_matrix(theta))

    def apply_xx(self, q1: int, q2: int, theta: float) -> None:
        """
        Ising XX coupling exp(-iθ X⊗X / 2) on qubits ``q1`` and ``q2``.

        Mixes |00>↔|11> and |01>↔|10> within every four-amplitude block.
        Equal qubit indices leave the state unchanged.
        """
        self._check_qubit(q1)
        self._check_qubit(q2)
        if q1 == q2:
            logger.debug("apply_xx on identical qubits %d ignored", q1)
            return

        qa, qb = min(q1, q2), max(q1, q2)
        # Axes: (high, bit qb, middle, bit qa, low)
        view = self._amplitudes.reshape(-1, 2, 1 << (qb - qa - 1), 2, 1 << qa)
        c = np.cos(theta / 2)
        minus_is = -1j * np.sin(theta / 2)

        a00 = view[:, 0, :, 0, :].copy()
        a01 = view[:, 0, :, 1, :].copy()
        a10 = view[:, 1, :, 0, :].copy()
        a11 = view[:, 1, :, 1, :].copy()

        view[:, 0, :, 0, :] = c * a00 + minus_is * a11
        view[:, 1, :, 1, :] = minus_is * a00 + c * a11
        view[:, 0, :, 1, :] = c * a01 + minus_is * a10
        view[:, 1, :, 0, :] = minus_is * a01 + c * a10

    # ------------------------------------------------------------------
    # Observables
    # ------------------------------------------------------------------

    def probabilities(self) -> np.ndarray:
        """|amplitude|² for every basis index."""
        return self._amplitudes.real ** 2 + self._amplitudes.imag ** 2

    def norm(self) -> float:
        """Total probability; 1 up to rounding for any gate sequence."""
        return float(np.sum(self.probabilities()))

    def _bits(self, qubit: int) -> np.ndarray:
        return (np.arange(self._dim) >> qubit) & 1

    def exp_z(self, qubit: int) -> float:
        """<Z_q>: +1 weight where the qubit's bit is 0, -1 where it is 1."""
        self._check_qubit(qubit)
        signs = 1 - 2 * self._bits(qubit)
        return float(np.dot(signs, self.probabilities()))

    def exp_zz(self, q1: int, q2: int) -> float:
        """<Z_q1 Z_q2>: +1 weight where the two bits agree, -1 otherwise."""
        self._check_qubit(q1)
        self._check_qubit(q2)
        parity = self._bits(q1) ^ self._bits(q2)
        signs = 1 - 2 * parity
        return float(np.dot(signs, self.probabilities()))

    def exp_xx(self, q1: int, q2: int) -> float:
        """
        <X_q1 X_q2> via a basis change.

        Ry(-π/2)† Z Ry(-π/2) = X, so rotating both qubits of a copy by
        Ry(-π/2) turns the XX expectation into a ZZ expectation.
        """
        rotated = self.clone()
        rotated.apply_ry(q1, -np.pi / 2)
        rotated.apply_ry(q2, -np.pi / 2)
        return rotated.exp_zz(q1, q2)

    def __repr__(self) -> str:
        return f"StateVector(qubits={self._num_qubits}, norm={self.norm():.6f})"
