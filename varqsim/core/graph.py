"""
MaxCut graph instances for QAOA.

A graph is a node count plus a set of undirected edges stored in canonical
(low, high) order. Edges can be given as tuples or as "a-b" strings, the
form the graph editor produces.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import product
from typing import FrozenSet, Iterable, Sequence, Tuple, Union

import networkx as nx

from varqsim.core.errors import InvalidDimensionError, MalformedEdgeError


Edge = Tuple[int, int]
EdgeLike = Union[str, Sequence[int]]


def edge_key(a: int, b: int) -> str:
    """Canonical "low-high" string key for an edge."""
    lo, hi = canonical_edge((a, b))
    return f"{lo}-{hi}"


def parse_edge(key: EdgeLike) -> Edge:
    """
    Parse an edge from "a-b" or an (a, b) pair without reordering it.

    Raises:
        MalformedEdgeError: If the edge does not have exactly two integer ends
    """
    if isinstance(key, str):
        parts = key.split("-")
        if len(parts) != 2:
            raise MalformedEdgeError(f"Edge key must look like 'a-b', got {key!r}")
        try:
            return int(parts[0]), int(parts[1])
        except ValueError:
            raise MalformedEdgeError(f"Edge key must contain integers, got {key!r}") from None

    pair = tuple(key)
    if len(pair) != 2:
        raise MalformedEdgeError(f"Edge must have two endpoints, got {key!r}")
    return int(pair[0]), int(pair[1])


def canonical_edge(edge: EdgeLike) -> Edge:
    """Return the edge with the smaller index first; rejects self-loops."""
    a, b = parse_edge(edge)
    if a == b:
        raise MalformedEdgeError(f"Self-loop on node {a} is not a valid edge")
    if a < 0 or b < 0:
        raise MalformedEdgeError(f"Negative node index in edge {edge!r}")
    return (a, b) if a < b else (b, a)


def canonical_edges(edges: Iterable[EdgeLike], node_count: int) -> Tuple[Edge, ...]:
    """
    Canonicalize and validate an edge list, keeping first-seen order.

    Duplicates (in either orientation) are dropped.

    Raises:
        MalformedEdgeError: If an edge references a node >= node_count
    """
    seen = set()
    result = []
    for edge in edges:
        pair = canonical_edge(edge)
        if pair[1] >= node_count:
            raise MalformedEdgeError(
                f"Edge {pair} references a node outside [0, {node_count})"
            )
        if pair not in seen:
            seen.add(pair)
            result.append(pair)
    return tuple(result)


@dataclass(frozen=True)
class GraphInstance:
    """
    MaxCut problem graph.

    Attributes:
        node_count: Number of nodes (one qubit per node)
        edges: Canonical edges, each (a, b) with a < b
    """
    node_count: int
    edges: FrozenSet[Edge] = field(default_factory=frozenset)

    def __post_init__(self):
        if self.node_count < 1:
            raise InvalidDimensionError(f"node_count must be >= 1, got {self.node_count}")
        object.__setattr__(
            self, "edges", frozenset(canonical_edges(self.edges, self.node_count))
        )

    @classmethod
    def from_edges(cls, node_count: int, edges: Iterable[EdgeLike]) -> GraphInstance:
        return cls(node_count=node_count, edges=frozenset(canonical_edges(edges, node_count)))

    @classmethod
    def cycle(cls, node_count: int) -> GraphInstance:
        """Ring graph 0-1-...-(n-1)-0."""
        if node_count < 3:
            edges = [(0, 1)] if node_count == 2 else []
        else:
            edges = [(i, (i + 1) % node_count) for i in range(node_count)]
        return cls.from_edges(node_count, edges)

    @property
    def sorted_edges(self) -> Tuple[Edge, ...]:
        """Edges in ascending order; the order circuits are built in."""
        return tuple(sorted(self.edges))

    @property
    def num_edges(self) -> int:
        return len(self.edges)

    def edge_keys(self) -> Tuple[str, ...]:
        return tuple(f"{a}-{b}" for a, b in self.sorted_edges)

    def has_edge(self, a: int, b: int) -> bool:
        return canonical_edge((a, b)) in self.edges

    def toggle_edge(self, a: int, b: int) -> GraphInstance:
        """Return a copy with edge (a, b) added if absent, removed if present."""
        pair = canonical_edge((a, b))
        if pair[1] >= self.node_count:
            raise MalformedEdgeError(
                f"Edge {pair} references a node outside [0, {self.node_count})"
            )
        edges = set(self.edges)
        if pair in edges:
            edges.remove(pair)
        else:
            edges.add(pair)
        return GraphInstance(node_count=self.node_count, edges=frozenset(edges))

    def with_node_count(self, node_count: int) -> GraphInstance:
        """Resize the graph, dropping edges that touch removed nodes."""
        kept = frozenset(e for e in self.edges if e[1] < node_count)
        return GraphInstance(node_count=node_count, edges=kept)

    def to_networkx(self) -> nx.Graph:
        graph = nx.Graph()
        graph.add_nodes_from(range(self.node_count))
        graph.add_edges_from(self.sorted_edges)
        return graph

    def cut_value(self, partition: Sequence[int]) -> int:
        """
        Number of edges crossing a partition.

        Args:
            partition: 0/1 side label per node
        """
        if len(partition) != self.node_count:
            raise ValueError(
                f"partition has {len(partition)} labels for {self.node_count} nodes"
            )
        side = {n for n, label in enumerate(partition) if label}
        if not side or len(side) == self.node_count:
            return 0
        return int(nx.cut_size(self.to_networkx(), side))

    def max_cut(self) -> Tuple[Tuple[int, ...], int]:
        """
        Exact MaxCut by enumeration (node 0 fixed to side 0).

        Only meant for the small graphs that fit in a state vector.

        Returns:
            (best partition, best cut value)
        """
        best_partition: Tuple[int, ...] = (0,) * self.node_count
        best_value = 0
        for rest in product((0, 1), repeat=self.node_count - 1):
            partition = (0,) + rest
            value = self.cut_value(partition)
            if value > best_value:
                best_partition, best_value = partition, value
        return best_partition, best_value

    def __repr__(self) -> str:
        return f"GraphInstance(nodes={self.node_count}, edges={list(self.edge_keys())})"
