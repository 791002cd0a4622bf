"""Configuration loading utilities for genome mutation."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .activations import DEFAULT_ACTIVATIONS, ActivationType, normalize_activation_name
from .errors import UnknownActivationError
from .mutation import (
    ActivationMutationConfig,
    AddEdgeConfig,
    InsertNodeConfig,
    MutationOperators,
    WeightMutationConfig,
)


@dataclass(slots=True)
class MutationSettings:
    weight_mutate_rate: float = 0.8
    weight_perturb_sd: float = 0.5
    weight_reset_rate: float = 0.1
    add_edge_rate: float = 0.05
    insert_node_rate: float = 0.03
    toggle_edge_rate: float = 0.01
    remove_node_rate: float = 0.0
    activation_rate: float = 0.05
    allow_recurrent: bool = False
    max_attempts: int = 32
    hidden_activations: tuple[str, ...] = (ActivationType.CONSTANT.value,)
    activations: tuple[str, ...] = tuple(DEFAULT_ACTIVATIONS)

    def weight_mutation_config(self) -> WeightMutationConfig:
        return WeightMutationConfig(
            mutate_rate=self.weight_mutate_rate,
            perturb_sd=self.weight_perturb_sd,
            reset_rate=self.weight_reset_rate,
        )

    def add_edge_config(self) -> AddEdgeConfig:
        return AddEdgeConfig(
            allow_recurrent=self.allow_recurrent,
            max_attempts=self.max_attempts,
        )

    def insert_node_config(self) -> InsertNodeConfig:
        return InsertNodeConfig(activations=self.hidden_activations)

    def activation_mutation_config(self) -> ActivationMutationConfig:
        return ActivationMutationConfig(activations=self.activations)

    def operators(self) -> MutationOperators:
        return MutationOperators(
            weight=self.weight_mutation_config(),
            add_edge=self.add_edge_config(),
            insert_node=self.insert_node_config(),
            activation=self.activation_mutation_config(),
            add_edge_rate=self.add_edge_rate,
            insert_node_rate=self.insert_node_rate,
            toggle_edge_rate=self.toggle_edge_rate,
            remove_node_rate=self.remove_node_rate,
            activation_rate=self.activation_rate,
        )


def _load_yaml(path: Path) -> Mapping[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, Mapping):
        msg = f"Expected mapping in YAML file: {path}"
        raise ValueError(msg)
    return data


def _activation_list(
    value: Any,
    default: tuple[str, ...],
    known: set[str],
) -> tuple[str, ...]:
    if value is None:
        return default
    if isinstance(value, str):
        value = [value]
    names = tuple(normalize_activation_name(str(name)) for name in value)
    for name in names:
        if name not in known:
            raise UnknownActivationError(name)
    return names


def load_mutation_settings(
    path: Path,
    *,
    known_activations: Iterable[str] | None = None,
) -> MutationSettings:
    """Read mutation settings from a YAML file.

    Activation names are checked against ``known_activations``, which
    defaults to the built-in registry.
    """
    data = _load_yaml(Path(path))
    known = {
        normalize_activation_name(name)
        for name in (
            DEFAULT_ACTIVATIONS if known_activations is None else known_activations
        )
    }
    defaults = MutationSettings()
    return MutationSettings(
        weight_mutate_rate=float(
            data.get("weight_mutate_rate", defaults.weight_mutate_rate)
        ),
        weight_perturb_sd=float(
            data.get("weight_perturb_sd", defaults.weight_perturb_sd)
        ),
        weight_reset_rate=float(
            data.get("weight_reset_rate", defaults.weight_reset_rate)
        ),
        add_edge_rate=float(data.get("add_edge_rate", defaults.add_edge_rate)),
        insert_node_rate=float(
            data.get("insert_node_rate", defaults.insert_node_rate)
        ),
        toggle_edge_rate=float(
            data.get("toggle_edge_rate", defaults.toggle_edge_rate)
        ),
        remove_node_rate=float(
            data.get("remove_node_rate", defaults.remove_node_rate)
        ),
        activation_rate=float(data.get("activation_rate", defaults.activation_rate)),
        allow_recurrent=bool(data.get("allow_recurrent", defaults.allow_recurrent)),
        max_attempts=int(data.get("max_attempts", defaults.max_attempts)),
        hidden_activations=_activation_list(
            data.get("hidden_activations"), defaults.hidden_activations, known
        ),
        activations=_activation_list(
            data.get("activations"), defaults.activations, known
        ),
    )


__all__ = ["MutationSettings", "load_mutation_settings"]
