"""Compilation of a genome's enabled topology into an evaluation plan."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from .genome import Genome

EdgeLink = tuple[int, int, int]
"""An enabled edge as ``(edge_index, source, target)``."""

Layers = tuple[tuple[int, ...], ...]


class PlanEntry(NamedTuple):
    """One node evaluation and the enabled edges that feed it."""

    node: int
    edges: tuple[int, ...]


@dataclass(frozen=True, slots=True)
class EvaluationPlan:
    """Dependency-ordered node evaluations derived from a genome."""

    entries: tuple[PlanEntry, ...]
    layers: Layers
    inputs: tuple[int, ...]
    outputs: tuple[int, ...]
    revision: int

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[PlanEntry]:
        return iter(self.entries)


def compute_required_nodes(
    input_indices: Iterable[int],
    output_indices: Iterable[int],
    connections: Iterable[EdgeLink],
) -> set[int]:
    """Collect the nodes needed to compute the outputs.

    Walks backwards from the outputs along the given edges. Inputs end the
    walk and are never part of the result.
    """
    inputs = set(input_indices)
    links = list(connections)
    required = set(output_indices)
    remaining = set(required)

    while True:
        predecessors = {
            source
            for _, source, target in links
            if source not in remaining and target in remaining
        }
        if not predecessors:
            break
        layer_nodes = predecessors - inputs
        if not layer_nodes:
            break
        required |= layer_nodes
        remaining |= predecessors

    return required


def compute_layers(
    input_indices: Iterable[int],
    output_indices: Iterable[int],
    connections: Iterable[EdgeLink],
) -> Layers:
    """Batch the required nodes into dependency-respecting layers.

    A node joins a layer once every enabled edge targeting it starts at an
    input or at a node from an earlier layer. Nodes inside a layer do not
    depend on each other and are sorted by index.
    """
    inputs = list(input_indices)
    links = list(connections)
    required = compute_required_nodes(inputs, output_indices, links)

    dependencies: dict[int, set[int]] = defaultdict(set)
    for _, source, target in links:
        dependencies[target].add(source)

    remaining = set(inputs)
    layers: list[tuple[int, ...]] = []

    while True:
        candidates = {
            target
            for _, source, target in links
            if source in remaining and target not in remaining
        }
        layer = tuple(
            sorted(
                node
                for node in candidates
                if node in required and dependencies[node] <= remaining
            )
        )
        if not layer:
            break
        layers.append(layer)
        remaining.update(layer)

    return tuple(layers)


def compile_plan(genome: Genome) -> EvaluationPlan:
    """Build the evaluation plan for the genome's current topology.

    Inputs and outputs are derived structurally. Enabled edges whose
    endpoints are no longer live contribute nothing and are left out.
    """
    links: list[EdgeLink] = [
        (index, edge.source, edge.target) for index, edge in genome.active_edges()
    ]
    inputs = tuple(genome.input_indices())
    outputs = tuple(genome.output_indices())
    layers = compute_layers(inputs, outputs, links)

    incoming: dict[int, list[int]] = defaultdict(list)
    for index, _, target in links:
        incoming[target].append(index)

    entries = tuple(
        PlanEntry(node=node, edges=tuple(incoming[node]))
        for layer in layers
        for node in layer
    )
    return EvaluationPlan(
        entries=entries,
        layers=layers,
        inputs=inputs,
        outputs=outputs,
        revision=genome.revision,
    )


__all__ = [
    "EdgeLink",
    "EvaluationPlan",
    "Layers",
    "PlanEntry",
    "compile_plan",
    "compute_layers",
    "compute_required_nodes",
]
