from __future__ import annotations

import math

import pytest
from brainlab.activations import ActivationType
from brainlab.genes import EdgeGene, NodeGene


def test_node_gene_defaults_and_copy() -> None:
    node = NodeGene(activation=ActivationType.LATCH, description="memory")
    assert node.activation == "latch"
    assert (node.value, node.last_input, node.last_output) == (0.0, 0.0, 0.0)

    node.value = 3.0
    node.last_output = 1.0
    copied = node.copy()
    copied.value = -1.0
    assert node.value == 3.0
    assert copied.last_output == 1.0
    assert copied.description == "memory"


def test_node_gene_set_activation_keeps_state() -> None:
    node = NodeGene(activation="constant")
    node.value = 2.0
    node.last_input = 4.0
    node.set_activation(" Sigmoid ")
    assert node.activation == "sigmoid"
    assert node.value == 2.0
    assert node.last_input == 4.0

    node.reset_state()
    assert (node.value, node.last_input, node.last_output) == (0.0, 0.0, 0.0)


def test_node_gene_rejects_invalid_values() -> None:
    with pytest.raises(ValueError):
        NodeGene(activation=" ")
    with pytest.raises(ValueError):
        NodeGene(activation=None)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        NodeGene(activation="constant", description=3)  # type: ignore[arg-type]


def test_edge_gene_creation_and_copy() -> None:
    edge = EdgeGene(source=1, target=2, weight="0.5")  # type: ignore[arg-type]
    assert math.isclose(edge.weight, 0.5)
    assert edge.enabled

    updated = edge.copy(weight=1.25, enabled=False)
    assert (updated.source, updated.target) == (1, 2)
    assert math.isclose(updated.weight, 1.25)
    assert not updated.enabled
    assert edge.enabled


def test_edge_gene_rejects_invalid_inputs() -> None:
    with pytest.raises(ValueError):
        EdgeGene(source=-1, target=0)
    with pytest.raises(ValueError):
        EdgeGene(source=0, target=-3)
    with pytest.raises(ValueError):
        EdgeGene(source=0, target=1, weight=float("nan"))
    with pytest.raises(ValueError):
        EdgeGene(source=0, target=1, weight=object())  # type: ignore[arg-type]

    edge = EdgeGene(source=0, target=1)
    with pytest.raises(ValueError):
        edge.set_weight(float("inf"))
    assert edge.weight == 1.0


def test_node_gene_accepts_camel_cased_tags() -> None:
    node = NodeGene(activation="leakyRelu")
    assert node.activation == ActivationType.LEAKY_RELU.value
    node.set_activation("LeakyReLU")
    assert node.activation == "leaky_relu"
