"""
Circuit projections for display and export.

The builders turn the same parameters the evaluators simulate into columns
of gate descriptors. Two variants exist:

- logical: the textbook form (H, ZZ(γ), Rx(2β) for QAOA; Ry, CNOT for VQE)
- native: the Ry / Rx / XX gates the state-vector engine actually applies

The native variant can be flattened back into ``GateOp``s and replayed,
which keeps the drawing and the simulation from drifting apart.
"""

from __future__ import annotations

import numpy as np
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from varqsim.core.gates import GateOp
from varqsim.core.graph import EdgeLike, canonical_edges
from varqsim.core.io_spec import Algorithm, CircuitMode, ProblemSnapshot
from varqsim.core.statevector import StateVector
from varqsim.observables.expectation import VQE_ENTANGLER_ANGLE, qaoa_layer_count
from varqsim.utils.params import param_at


HALF_PI = np.pi / 2
TWO_QUBIT_LABELS = frozenset({"XX", "ZZ", "CNOT"})


@dataclass(frozen=True)
class GateDescriptor:
    """
    One gate box in a circuit column.

    Attributes:
        qubit: Wire the box is drawn on
        label: Gate name ("H", "Ry", "Rx", "XX", "ZZ", "CNOT")
        angle: Rotation angle, if the gate has one
        paired_qubit: Partner wire for two-qubit gates (and grouped rotations)
    """
    qubit: int
    label: str
    angle: Optional[float] = None
    paired_qubit: Optional[int] = None

    @property
    def is_two_qubit(self) -> bool:
        return self.label in TWO_QUBIT_LABELS and self.paired_qubit is not None


@dataclass(frozen=True)
class CircuitColumn:
    """Gates drawn in the same time slice."""
    gates: Tuple[GateDescriptor, ...]

    def __len__(self) -> int:
        return len(self.gates)


def _pair_column(label: str, a: int, b: int, angle: Optional[float]) -> CircuitColumn:
    return CircuitColumn(gates=(
        GateDescriptor(qubit=a, label=label, angle=angle, paired_qubit=b),
        GateDescriptor(qubit=b, label=label, angle=angle, paired_qubit=a),
    ))


def build_qaoa_circuit(
    mode: CircuitMode,
    node_count: int,
    edges: Iterable[EdgeLike],
    gammas: Sequence[float],
    betas: Sequence[float],
) -> List[CircuitColumn]:
    """Columns for the QAOA ansatz."""
    mode = CircuitMode(mode)
    edge_pairs = canonical_edges(edges, node_count) if node_count >= 1 else ()
    columns: List[CircuitColumn] = []

    if mode is CircuitMode.LOGICAL:
        prep = tuple(GateDescriptor(qubit=q, label="H") for q in range(node_count))
    else:
        prep = tuple(
            GateDescriptor(qubit=q, label="Ry", angle=HALF_PI) for q in range(node_count)
        )
    columns.append(CircuitColumn(gates=prep))

    for layer in range(qaoa_layer_count(gammas, betas)):
        gamma = param_at(gammas, layer)
        beta = param_at(betas, layer)

        for a, b in edge_pairs:
            if mode is CircuitMode.LOGICAL:
                columns.append(_pair_column("ZZ", a, b, gamma))
            else:
                columns.append(_pair_column("Ry", a, b, HALF_PI))
                columns.append(_pair_column("XX", a, b, gamma))
                columns.append(_pair_column("Ry", a, b, -HALF_PI))

        columns.append(CircuitColumn(gates=tuple(
            GateDescriptor(qubit=q, label="Rx", angle=2 * beta) for q in range(node_count)
        )))

    return columns


def build_vqe_circuit(mode: CircuitMode, thetas: Sequence[float]) -> List[CircuitColumn]:
    """Columns for the two-qubit VQE ansatz."""
    mode = CircuitMode(mode)
    columns: List[CircuitColumn] = []

    for layer in range(len(thetas) // 2):
        columns.append(CircuitColumn(gates=(
            GateDescriptor(qubit=0, label="Ry", angle=param_at(thetas, 2 * layer)),
            GateDescriptor(qubit=1, label="Ry", angle=param_at(thetas, 2 * layer + 1)),
        )))
        if mode is CircuitMode.LOGICAL:
            columns.append(_pair_column("CNOT", 0, 1, None))
        else:
            columns.append(_pair_column("XX", 0, 1, VQE_ENTANGLER_ANGLE))

    return columns


def build_circuit(snapshot: ProblemSnapshot, mode: CircuitMode) -> List[CircuitColumn]:
    """Columns for whichever algorithm the snapshot selects."""
    if snapshot.algorithm is Algorithm.QAOA:
        return build_qaoa_circuit(
            mode, snapshot.node_count, snapshot.edges, snapshot.gammas, snapshot.betas
        )
    return build_vqe_circuit(mode, snapshot.thetas)


def native_gate_sequence(columns: Iterable[CircuitColumn]) -> List[GateOp]:
    """
    Flatten native-mode columns into executable gates.

    A two-qubit box pair becomes a single gate, emitted for the first of its
    two descriptors.

    Raises:
        ValueError: If a column contains a logical-only gate (H, ZZ, CNOT)
    """
    ops: List[GateOp] = []
    for column in columns:
        emitted = set()
        for gate in column.gates:
            if gate.label in ("Rx", "Ry"):
                ops.append(GateOp(name=gate.label, qubits=(gate.qubit,), angle=gate.angle or 0.0))
            elif gate.label == "XX":
                pair = frozenset((gate.qubit, gate.paired_qubit))
                if pair in emitted:
                    continue
                emitted.add(pair)
                ops.append(GateOp(
                    name="XX", qubits=(gate.qubit, gate.paired_qubit), angle=gate.angle or 0.0
                ))
            else:
                raise ValueError(f"Gate {gate.label!r} has no native form; build in native mode")
    return ops


def run_native(ops: Iterable[GateOp], num_qubits: int) -> StateVector:
    """Replay a native gate sequence on a fresh register."""
    sv = StateVector(num_qubits)
    for op in ops:
        if op.name == "Rx":
            sv.apply_rx(op.qubits[0], op.angle)
        elif op.name == "Ry":
            sv.apply_ry(op.qubits[0], op.angle)
        elif op.name == "XX":
            sv.apply_xx(op.qubits[0], op.qubits[1], op.angle)
        else:
            raise ValueError(f"Unknown gate: {op.name}")
    return sv


def to_qiskit_circuit(ops: Iterable[GateOp], num_qubits: int):
    """
    Export a native gate sequence as a Qiskit QuantumCircuit.

    Qiskit's RXX(θ) is exp(-iθ XX/2) and its qubit ordering is little-endian,
    so the exported circuit's statevector matches ``run_native`` amplitude
    for amplitude.
    """
    try:
        from qiskit import QuantumCircuit
    except ImportError:
        raise ImportError("Qiskit is required for circuit export. "
                         "Install with: pip install qiskit")

    qc = QuantumCircuit(num_qubits)
    for op in ops:
        if op.name == "Rx":
            qc.rx(op.angle, op.qubits[0])
        elif op.name == "Ry":
            qc.ry(op.angle, op.qubits[0])
        elif op.name == "XX":
            qc.rxx(op.angle, op.qubits[0], op.qubits[1])
        else:
            raise ValueError(f"Unknown gate: {op.name}")
    return qc
