"""
Two-qubit molecular Hamiltonians for VQE.

Every molecule is reduced to the same five-coefficient form

    H = g0·I + g1·Z0 + g2·Z1 + g3·Z0Z1 + g4·X0X1

so the energy reducer never changes shape between molecules.
"""

from __future__ import annotations

import numpy as np
from dataclasses import dataclass
from typing import Dict, Tuple

from varqsim.core.errors import UnknownMoleculeError
from varqsim.core.gates import PAULI_I, PAULI_X, PAULI_Z


@dataclass(frozen=True)
class HamiltonianCoefficients:
    """Coefficients g0..g4 of the five-term Hamiltonian."""
    g0: float
    g1: float
    g2: float
    g3: float
    g4: float

    def as_tuple(self) -> Tuple[float, float, float, float, float]:
        return (self.g0, self.g1, self.g2, self.g3, self.g4)


@dataclass(frozen=True)
class MoleculeSpec:
    """
    A molecule's Hamiltonian and its reference ground-state energy.

    Attributes:
        label: Human-readable name
        coeffs: Hamiltonian coefficients
        theoretical_min: Reference energy for display; not used in simulation
    """
    label: str
    coeffs: HamiltonianCoefficients
    theoretical_min: float

    def hamiltonian_matrix(self) -> np.ndarray:
        """
        Dense 4x4 Hamiltonian in the engine's basis.

        Index bit 0 is qubit 0, so qubit 1's operator is the left Kronecker
        factor.
        """
        g0, g1, g2, g3, g4 = self.coeffs.as_tuple()
        return (
            g0 * np.kron(PAULI_I, PAULI_I)
            + g1 * np.kron(PAULI_I, PAULI_Z)
            + g2 * np.kron(PAULI_Z, PAULI_I)
            + g3 * np.kron(PAULI_Z, PAULI_Z)
            + g4 * np.kron(PAULI_X, PAULI_X)
        )


MOLECULES: Dict[str, MoleculeSpec] = {
    "H2_0.74": MoleculeSpec(
        label="H2 (Equilibrium 0.74 A)",
        coeffs=HamiltonianCoefficients(
            g0=-1.0523732, g1=0.3979374, g2=-0.3979374, g3=-0.0112801, g4=0.1809312
        ),
        theoretical_min=-1.13727,
    ),
    "H2_1.5": MoleculeSpec(
        label="H2 (Stretched 1.5 A)",
        coeffs=HamiltonianCoefficients(
            g0=-0.8604, g1=0.355, g2=-0.355, g3=-0.032, g4=0.14
        ),
        theoretical_min=-0.998,
    ),
    "HeH": MoleculeSpec(
        label="HeH (Helium Hydride)",
        coeffs=HamiltonianCoefficients(
            g0=-2.845, g1=0.47, g2=-0.13, g3=-0.07, g4=0.22
        ),
        theoretical_min=-2.99,
    ),
}

DEFAULT_MOLECULE = "H2_0.74"


def get_molecule(key: str) -> MoleculeSpec:
    """Look up a molecule by key."""
    try:
        return MOLECULES[key]
    except KeyError:
        raise UnknownMoleculeError(
            f"Unknown molecule {key!r}; available: {sorted(MOLECULES)}"
        ) from None
