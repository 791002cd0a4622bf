"""Genome representation and structural mutation operators.

Nodes and edges live in index-stable slot lists. Removing an element
tombstones its slot (sets it to ``None``) so every index handed out stays
valid for the lifetime of the genome.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import NamedTuple, TypeVar

from .activations import ActivationType
from .errors import EdgeNotFoundError, NotFound, SlotKind
from .genes import EdgeGene, NodeGene

logger = logging.getLogger("brainlab.genome")

_T = TypeVar("_T")


class Insertion(NamedTuple):
    """Indices produced by splicing a node into an edge."""

    node: int
    left_edge: int
    right_edge: int


def _slot(slots: list[_T | None], index: int) -> _T | None:
    if index < 0 or index >= len(slots):
        return None
    return slots[index]


@dataclass(slots=True)
class Genome:
    """Mutable store of nodes and edges addressed by stable indices."""

    nodes: list[NodeGene | None] = field(default_factory=list)
    edges: list[EdgeGene | None] = field(default_factory=list)
    revision: int = 0

    def __post_init__(self) -> None:
        # Endpoints may be tombstoned but must have been issued.
        for index, edge in enumerate(self.edges):
            if edge is None:
                continue
            for endpoint in (edge.source, edge.target):
                if endpoint >= len(self.nodes):
                    msg = f"Edge {index} references unknown node {endpoint}."
                    raise ValueError(msg)

    def copy(self) -> Genome:
        """Return a deep copy; tombstones and the revision are preserved."""
        return Genome(
            nodes=[None if node is None else node.copy() for node in self.nodes],
            edges=[None if edge is None else edge.copy() for edge in self.edges],
            revision=self.revision,
        )

    def get_node(self, index: int) -> NodeGene | None:
        return _slot(self.nodes, index)

    def get_edge(self, index: int) -> EdgeGene | None:
        return _slot(self.edges, index)

    def live_nodes(self) -> Iterator[tuple[int, NodeGene]]:
        for index, node in enumerate(self.nodes):
            if node is not None:
                yield index, node

    def live_edges(self) -> Iterator[tuple[int, EdgeGene]]:
        for index, edge in enumerate(self.edges):
            if edge is not None:
                yield index, edge

    def enabled_edges(self) -> Iterator[tuple[int, EdgeGene]]:
        for index, edge in self.live_edges():
            if edge.enabled:
                yield index, edge

    def active_edges(self) -> Iterator[tuple[int, EdgeGene]]:
        """Enabled edges whose endpoints are both live nodes."""
        for index, edge in self.enabled_edges():
            if self.get_node(edge.source) is None:
                continue
            if self.get_node(edge.target) is None:
                continue
            yield index, edge

    def input_indices(self) -> list[int]:
        """Live nodes that no active edge targets."""
        targeted = {edge.target for _, edge in self.active_edges()}
        return [index for index, _ in self.live_nodes() if index not in targeted]

    def output_indices(self) -> list[int]:
        """Live nodes that are not the source of any active edge."""
        sources = {edge.source for _, edge in self.active_edges()}
        return [index for index, _ in self.live_nodes() if index not in sources]

    def add_node(
        self,
        activation: ActivationType | str = ActivationType.CONSTANT,
        description: str = "",
    ) -> int:
        """Append a new live node and return its index."""
        index = len(self.nodes)
        self.nodes.append(NodeGene(activation=activation, description=description))
        self.revision += 1
        return index

    def remove_node(self, index: int) -> int | NotFound:
        """Tombstone a node together with every edge touching it."""
        if self.get_node(index) is None:
            return self._missing("node", index, "remove_node")
        for edge_index, edge in list(self.live_edges()):
            if edge.source == index or edge.target == index:
                self.remove_edge(edge_index)
        self.nodes[index] = None
        self.revision += 1
        return index

    def add_edge(self, source: int, target: int, weight: float = 1.0) -> int:
        """Append a new enabled edge and return its index.

        Endpoints must have been issued by ``add_node`` but are not checked
        for liveness.

        Raises:
            ValueError: If ``source`` or ``target`` was never a node index.
        """
        for field_name, endpoint in (("source", source), ("target", target)):
            if endpoint >= len(self.nodes):
                msg = f"{field_name} {endpoint} is not an issued node index."
                raise ValueError(msg)
        index = len(self.edges)
        self.edges.append(EdgeGene(source=source, target=target, weight=weight))
        self.revision += 1
        return index

    def remove_edge(self, index: int) -> int | NotFound:
        if self.get_edge(index) is None:
            return self._missing("edge", index, "remove_edge")
        self.edges[index] = None
        self.revision += 1
        return index

    def set_edge_enabled(self, index: int, enabled: bool) -> int | NotFound:
        edge = self.get_edge(index)
        if edge is None:
            return self._missing("edge", index, "set_edge_enabled")
        enabled = bool(enabled)
        if edge.enabled != enabled:
            edge.enabled = enabled
            self.revision += 1
        return index

    def set_edge_weight(self, index: int, weight: float) -> int | NotFound:
        """Overwrite an edge weight. Does not change the topology revision."""
        edge = self.get_edge(index)
        if edge is None:
            return self._missing("edge", index, "set_edge_weight")
        edge.set_weight(weight)
        return index

    def set_node_activation(
        self,
        index: int,
        activation: ActivationType | str,
    ) -> int | NotFound:
        node = self.get_node(index)
        if node is None:
            return self._missing("node", index, "set_node_activation")
        node.set_activation(activation)
        return index

    def insert_node(
        self,
        edge_index: int,
        activation: ActivationType | str = ActivationType.CONSTANT,
        description: str = "",
    ) -> Insertion:
        """Splice a new node into an existing edge.

        The left edge gets weight 1 and the right edge inherits the original
        weight, so an identity node leaves the network output unchanged. The
        original edge is disabled, not removed.

        Raises:
            EdgeNotFoundError: If ``edge_index`` is tombstoned or out of range.
        """
        edge = self.get_edge(edge_index)
        if edge is None:
            raise EdgeNotFoundError(edge_index)

        node = self.add_node(activation, description)
        left = self.add_edge(edge.source, node, 1.0)
        right = self.add_edge(node, edge.target, edge.weight)
        self.set_edge_enabled(edge_index, False)
        return Insertion(node=node, left_edge=left, right_edge=right)

    def _missing(self, kind: SlotKind, index: int, operation: str) -> NotFound:
        logger.debug("%s: could not find %s with index %d", operation, kind, index)
        return NotFound(kind, index)


__all__ = ["Genome", "Insertion"]
