"""Gene primitives (nodes and edges) stored in a brain genome."""

from __future__ import annotations

import math
from dataclasses import dataclass

from .activations import ActivationType, normalize_activation_name


def _coerce_activation(value: ActivationType | str) -> str:
    if isinstance(value, ActivationType):
        return value.value
    if not isinstance(value, str) or not value.strip():
        msg = "Activation must be a non-empty string."
        raise ValueError(msg)
    return normalize_activation_name(value)


def _coerce_weight(value: float) -> float:
    try:
        weight = float(value)
    except (TypeError, ValueError) as error:
        msg = f"weight must be convertible to float, got {value!r}"
        raise ValueError(msg) from error
    if not math.isfinite(weight):
        msg = "weight must be a finite number."
        raise ValueError(msg)
    return weight


@dataclass(slots=True)
class NodeGene:
    """A computational unit holding a scalar value and its activation history.

    ``value`` is rewritten on every evaluation pass. ``last_input`` and
    ``last_output`` survive between passes for stateful activations such as
    ``latch`` and ``diff``.
    """

    activation: str
    description: str = ""
    value: float = 0.0
    last_input: float = 0.0
    last_output: float = 0.0

    def __post_init__(self) -> None:
        self.activation = _coerce_activation(self.activation)
        if not isinstance(self.description, str):
            msg = "description must be a string."
            raise TypeError(msg)

    def set_activation(self, activation: ActivationType | str) -> None:
        """Swap the activation tag, leaving value and history untouched."""
        self.activation = _coerce_activation(activation)

    def reset_state(self) -> None:
        """Zero the current value and the carried history."""
        self.value = 0.0
        self.last_input = 0.0
        self.last_output = 0.0

    def copy(self) -> NodeGene:
        return NodeGene(
            activation=self.activation,
            description=self.description,
            value=self.value,
            last_input=self.last_input,
            last_output=self.last_output,
        )


@dataclass(slots=True)
class EdgeGene:
    """A directed, weighted link between two node indices."""

    source: int
    target: int
    weight: float = 1.0
    enabled: bool = True

    def __post_init__(self) -> None:
        for field_name, value in (
            ("source", self.source),
            ("target", self.target),
        ):
            if value < 0:
                msg = f"{field_name} must be non-negative."
                raise ValueError(msg)
        self.weight = _coerce_weight(self.weight)
        self.enabled = bool(self.enabled)

    def set_weight(self, weight: float) -> None:
        self.weight = _coerce_weight(weight)

    def copy(
        self,
        *,
        weight: float | None = None,
        enabled: bool | None = None,
    ) -> EdgeGene:
        """Return a copy with optional field overrides."""
        return EdgeGene(
            source=self.source,
            target=self.target,
            weight=self.weight if weight is None else weight,
            enabled=self.enabled if enabled is None else enabled,
        )


__all__ = ["EdgeGene", "NodeGene"]
