"""Random structural and parametric mutation of a single genome.

These operators only edit the genome. Brains built on it become stale and
must be recompiled once the whole batch of mutations has been applied.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from random import Random

from .activations import DEFAULT_ACTIVATIONS, ActivationType
from .genome import Genome, Insertion

logger = logging.getLogger("brainlab.mutation")

WeightInitializer = Callable[[Random], float]


def _default_weight_init(rng: Random) -> float:
    return rng.uniform(-1.0, 1.0)


def _check_rate(label: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        msg = f"{label} must be in [0, 1]."
        raise ValueError(msg)


def _check_activations(activations: tuple[str, ...]) -> None:
    if not activations:
        msg = "activations must not be empty."
        raise ValueError(msg)
    for name in activations:
        if not isinstance(name, str) or not name.strip():
            msg = "activations must be non-empty strings."
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class WeightMutationConfig:
    """Configuration for weight mutation behaviour."""

    mutate_rate: float = 0.8
    perturb_sd: float = 0.5
    reset_rate: float = 0.1
    weight_init: WeightInitializer = _default_weight_init

    def __post_init__(self) -> None:
        _check_rate("mutate_rate", self.mutate_rate)
        _check_rate("reset_rate", self.reset_rate)
        if self.perturb_sd <= 0.0:
            msg = "perturb_sd must be positive."
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class AddEdgeConfig:
    """Configuration for add-edge mutation."""

    allow_recurrent: bool = False
    max_attempts: int = 32
    weight_init: WeightInitializer = _default_weight_init

    def __post_init__(self) -> None:
        if self.max_attempts <= 0:
            msg = "max_attempts must be positive."
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class InsertNodeConfig:
    """Configuration for splicing a hidden node into an edge."""

    activations: tuple[str, ...] = (ActivationType.CONSTANT.value,)
    description: str = "hidden"

    def __post_init__(self) -> None:
        _check_activations(self.activations)


@dataclass(frozen=True, slots=True)
class ActivationMutationConfig:
    """Activation tags a node may be switched to."""

    activations: tuple[str, ...] = tuple(DEFAULT_ACTIVATIONS)

    def __post_init__(self) -> None:
        _check_activations(self.activations)


def _roles(genome: Genome) -> tuple[list[int], list[int]]:
    """Return candidate (sources, targets) that keep inputs and outputs intact."""
    inputs = set(genome.input_indices())
    outputs = set(genome.output_indices())
    live = [index for index, _ in genome.live_nodes()]
    sources = [index for index in live if index not in outputs or index in inputs]
    targets = [index for index in live if index not in inputs]
    return sources, targets


def _iter_edge_candidates(genome: Genome) -> Iterator[tuple[int, int]]:
    existing = {(edge.source, edge.target) for _, edge in genome.live_edges()}
    sources, targets = _roles(genome)
    for source in sources:
        for target in targets:
            if source == target or (source, target) in existing:
                continue
            yield (source, target)


def _introduces_cycle(genome: Genome, source: int, target: int) -> bool:
    """Detect whether an edge source -> target would close an enabled cycle."""
    outgoing: dict[int, list[int]] = defaultdict(list)
    for _, edge in genome.active_edges():
        outgoing[edge.source].append(edge.target)

    stack = [target]
    visited: set[int] = set()
    while stack:
        current = stack.pop()
        if current == source:
            return True
        if current in visited:
            continue
        visited.add(current)
        stack.extend(outgoing.get(current, ()))
    return False


def mutate_weights(genome: Genome, rng: Random, config: WeightMutationConfig) -> int:
    """Perturb or reset edge weights in place.

    Returns:
        The number of edges that had their weight modified.
    """
    mutated = 0
    for index, edge in list(genome.live_edges()):
        if rng.random() > config.mutate_rate:
            continue
        mutated += 1
        if rng.random() < config.reset_rate:
            weight = config.weight_init(rng)
        else:
            weight = edge.weight + rng.gauss(0.0, config.perturb_sd)
        genome.set_edge_weight(index, weight)
    return mutated


def mutate_add_edge(
    genome: Genome,
    rng: Random,
    config: AddEdgeConfig,
) -> int | None:
    """Add a new edge between two unconnected nodes if a valid pair exists."""
    candidates = list(_iter_edge_candidates(genome))
    if not candidates:
        return None

    attempts = min(config.max_attempts, len(candidates))
    for source, target in rng.sample(candidates, k=attempts):
        if not config.allow_recurrent and _introduces_cycle(genome, source, target):
            continue
        index = genome.add_edge(source, target, config.weight_init(rng))
        logger.debug("added edge %d: %d -> %d", index, source, target)
        return index
    return None


def mutate_insert_node(
    genome: Genome,
    rng: Random,
    config: InsertNodeConfig,
) -> Insertion | None:
    """Split a random enabled edge by inserting a hidden node."""
    enabled = [index for index, _ in genome.active_edges()]
    if not enabled:
        return None
    edge_index = rng.choice(enabled)
    activation = rng.choice(config.activations)
    insertion = genome.insert_node(edge_index, activation, config.description)
    logger.debug("inserted node %d into edge %d", insertion.node, edge_index)
    return insertion


def mutate_toggle_edge(genome: Genome, rng: Random) -> int | None:
    """Flip the enabled flag of a random live edge."""
    live = list(genome.live_edges())
    if not live:
        return None
    index, edge = rng.choice(live)
    genome.set_edge_enabled(index, not edge.enabled)
    return index


def mutate_remove_node(genome: Genome, rng: Random) -> int | None:
    """Remove a random hidden node together with its edges."""
    inputs = set(genome.input_indices())
    outputs = set(genome.output_indices())
    hidden = [
        index
        for index, _ in genome.live_nodes()
        if index not in inputs and index not in outputs
    ]
    if not hidden:
        return None
    index = rng.choice(hidden)
    genome.remove_node(index)
    logger.debug("removed node %d", index)
    return index


def mutate_activation(
    genome: Genome,
    rng: Random,
    config: ActivationMutationConfig,
) -> int | None:
    """Switch the activation of a random node that receives input."""
    inputs = set(genome.input_indices())
    eligible = [index for index, _ in genome.live_nodes() if index not in inputs]
    if not eligible:
        return None
    index = rng.choice(eligible)
    genome.set_node_activation(index, rng.choice(config.activations))
    return index


@dataclass(slots=True)
class MutationSummary:
    """Record of what a single :class:`MutationOperators` call changed."""

    weights: int = 0
    added_edge: int | None = None
    insertion: Insertion | None = None
    toggled_edge: int | None = None
    removed_node: int | None = None
    activation_node: int | None = None

    @property
    def topology_changed(self) -> bool:
        return any(
            item is not None
            for item in (
                self.added_edge,
                self.insertion,
                self.toggled_edge,
                self.removed_node,
            )
        )


@dataclass(frozen=True, slots=True)
class MutationOperators:
    """Bundle of mutation operators applied with configured probabilities."""

    weight: WeightMutationConfig = field(default_factory=WeightMutationConfig)
    add_edge: AddEdgeConfig = field(default_factory=AddEdgeConfig)
    insert_node: InsertNodeConfig = field(default_factory=InsertNodeConfig)
    activation: ActivationMutationConfig = field(
        default_factory=ActivationMutationConfig
    )
    add_edge_rate: float = 0.05
    insert_node_rate: float = 0.03
    toggle_edge_rate: float = 0.01
    remove_node_rate: float = 0.0
    activation_rate: float = 0.05

    def __post_init__(self) -> None:
        for label, value in (
            ("add_edge_rate", self.add_edge_rate),
            ("insert_node_rate", self.insert_node_rate),
            ("toggle_edge_rate", self.toggle_edge_rate),
            ("remove_node_rate", self.remove_node_rate),
            ("activation_rate", self.activation_rate),
        ):
            _check_rate(label, value)

    def __call__(self, genome: Genome, rng: Random) -> MutationSummary:
        summary = MutationSummary()
        summary.weights = mutate_weights(genome, rng, self.weight)
        if rng.random() < self.add_edge_rate:
            summary.added_edge = mutate_add_edge(genome, rng, self.add_edge)
        if rng.random() < self.insert_node_rate:
            summary.insertion = mutate_insert_node(genome, rng, self.insert_node)
        if rng.random() < self.toggle_edge_rate:
            summary.toggled_edge = mutate_toggle_edge(genome, rng)
        if rng.random() < self.remove_node_rate:
            summary.removed_node = mutate_remove_node(genome, rng)
        if rng.random() < self.activation_rate:
            summary.activation_node = mutate_activation(genome, rng, self.activation)
        return summary


__all__ = [
    "ActivationMutationConfig",
    "AddEdgeConfig",
    "InsertNodeConfig",
    "MutationOperators",
    "MutationSummary",
    "WeightMutationConfig",
    "mutate_activation",
    "mutate_add_edge",
    "mutate_insert_node",
    "mutate_remove_node",
    "mutate_toggle_edge",
    "mutate_weights",
]
