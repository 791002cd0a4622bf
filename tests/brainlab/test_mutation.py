from __future__ import annotations

import math
from random import Random
from statistics import mean, pstdev

import pytest
from brainlab.brain import Brain
from brainlab.genome import Genome
from brainlab.mutation import (
    ActivationMutationConfig,
    AddEdgeConfig,
    InsertNodeConfig,
    MutationOperators,
    WeightMutationConfig,
    mutate_activation,
    mutate_add_edge,
    mutate_insert_node,
    mutate_remove_node,
    mutate_toggle_edge,
    mutate_weights,
)


def build_pass_through() -> Genome:
    genome = Genome()
    genome.add_node("constant", "input")
    genome.add_node("constant", "output")
    genome.add_edge(0, 1)
    return genome


def build_dense_genome() -> Genome:
    genome = Genome()
    for _ in range(4):
        genome.add_node()
    for source, target in ((0, 1), (0, 2), (0, 3), (1, 2), (1, 3), (2, 3)):
        genome.add_edge(source, target, 0.5)
    return genome


def test_mutate_weights_statistics() -> None:
    genome = Genome()
    source = genome.add_node()
    for _ in range(100):
        genome.add_edge(source, genome.add_node(), 0.0)
    config = WeightMutationConfig(mutate_rate=1.0, perturb_sd=0.5, reset_rate=0.0)

    mutated = mutate_weights(genome, Random(0), config)

    weights = [edge.weight for _, edge in genome.live_edges()]
    assert mutated == len(weights)
    assert abs(mean(weights)) < 0.1
    assert math.isclose(pstdev(weights), config.perturb_sd, rel_tol=0.25)


def test_mutate_weights_reset() -> None:
    genome = build_pass_through()

    def constant_init(random: Random) -> float:
        return 0.75

    config = WeightMutationConfig(
        mutate_rate=1.0,
        perturb_sd=0.5,
        reset_rate=1.0,
        weight_init=constant_init,
    )
    mutate_weights(genome, Random(1), config)

    assert genome.edges[0].weight == pytest.approx(0.75)


def test_mutate_weights_respects_rate_and_topology() -> None:
    genome = build_pass_through()
    revision = genome.revision
    config = WeightMutationConfig(mutate_rate=0.0, perturb_sd=0.5, reset_rate=0.5)

    assert mutate_weights(genome, Random(2), config) == 0
    assert genome.edges[0].weight == 1.0
    assert genome.revision == revision


def test_mutate_add_edge_connects_unwired_input() -> None:
    genome = build_pass_through()
    spare = genome.add_node("constant", "spare input")

    def zero_init(random: Random) -> float:
        return 0.0

    index = mutate_add_edge(genome, Random(3), AddEdgeConfig(weight_init=zero_init))

    assert index == 1
    edge = genome.edges[index]
    assert (edge.source, edge.target, edge.weight) == (spare, 1, 0.0)


def test_mutate_add_edge_prevents_cycles() -> None:
    genome = build_dense_genome()

    assert mutate_add_edge(genome, Random(4), AddEdgeConfig()) is None
    assert len(genome.edges) == 6


def test_mutate_add_edge_allows_recurrent_when_configured() -> None:
    genome = build_dense_genome()

    index = mutate_add_edge(genome, Random(4), AddEdgeConfig(allow_recurrent=True))

    assert index == 6
    edge = genome.edges[index]
    assert (edge.source, edge.target) == (2, 1)


def test_mutate_add_edge_without_candidates() -> None:
    genome = build_pass_through()
    assert mutate_add_edge(genome, Random(5), AddEdgeConfig()) is None


def test_mutate_insert_node() -> None:
    genome = build_pass_through()
    config = InsertNodeConfig(activations=("tanh",), description="grown")

    insertion = mutate_insert_node(genome, Random(6), config)

    assert insertion is not None
    node = genome.nodes[insertion.node]
    assert node.activation == "tanh"
    assert node.description == "grown"
    assert genome.edges[0].enabled is False

    genome.set_edge_enabled(insertion.left_edge, False)
    genome.set_edge_enabled(insertion.right_edge, False)
    assert mutate_insert_node(genome, Random(6), config) is None


def test_mutate_toggle_edge() -> None:
    genome = build_pass_through()

    assert mutate_toggle_edge(genome, Random(7)) == 0
    assert genome.edges[0].enabled is False
    assert mutate_toggle_edge(genome, Random(7)) == 0
    assert genome.edges[0].enabled is True

    genome.remove_edge(0)
    assert mutate_toggle_edge(genome, Random(7)) is None


def test_mutate_remove_node_only_removes_hidden_nodes() -> None:
    genome = build_pass_through()
    assert mutate_remove_node(genome, Random(8)) is None

    hidden = genome.insert_node(0).node
    assert mutate_remove_node(genome, Random(8)) == hidden
    assert genome.get_node(hidden) is None
    assert genome.get_node(0) is not None
    assert genome.get_node(1) is not None


def test_mutate_activation_skips_inputs() -> None:
    genome = build_pass_through()
    config = ActivationMutationConfig(activations=("sigmoid",))

    assert mutate_activation(genome, Random(9), config) == 1
    assert genome.nodes[1].activation == "sigmoid"
    assert genome.nodes[0].activation == "constant"


def test_configs_reject_invalid_values() -> None:
    with pytest.raises(ValueError):
        WeightMutationConfig(mutate_rate=1.5)
    with pytest.raises(ValueError):
        WeightMutationConfig(perturb_sd=0.0)
    with pytest.raises(ValueError):
        AddEdgeConfig(max_attempts=0)
    with pytest.raises(ValueError):
        InsertNodeConfig(activations=())
    with pytest.raises(ValueError):
        ActivationMutationConfig(activations=(" ",))
    with pytest.raises(ValueError):
        MutationOperators(add_edge_rate=-0.1)


def test_operators_apply_configured_mutations() -> None:
    genome = Genome()
    a = genome.add_node()
    b = genome.add_node()
    out = genome.add_node()
    genome.add_edge(a, out)
    genome.add_edge(b, out)
    brain = Brain(genome)
    operators = MutationOperators(
        insert_node_rate=1.0,
        toggle_edge_rate=1.0,
        activation_rate=0.0,
    )

    summary = operators(genome, Random(10))

    assert summary.weights >= 0
    assert summary.insertion is not None
    assert summary.toggled_edge is not None
    assert summary.topology_changed
    assert brain.is_stale
    brain.recompile()
    brain.think({a: 1.0, b: 1.0})


def test_operators_without_structural_rates_keep_topology() -> None:
    genome = build_pass_through()
    revision = genome.revision
    operators = MutationOperators(
        weight=WeightMutationConfig(mutate_rate=1.0),
        add_edge_rate=0.0,
        insert_node_rate=0.0,
        toggle_edge_rate=0.0,
        activation_rate=0.0,
    )

    summary = operators(genome, Random(11))

    assert summary.weights == 1
    assert not summary.topology_changed
    assert genome.revision == revision
