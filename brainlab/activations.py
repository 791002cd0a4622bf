"""Activation functions available to brain nodes."""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from enum import Enum

from .errors import UnknownActivationError

ActivationFunction = Callable[[float, float, float], float]
ActivationMap = Mapping[str, ActivationFunction]

_LIMIT = 100.0


class ActivationType(str, Enum):
    """Names of the built-in activation functions."""

    CONSTANT = "constant"
    ABSOLUTE = "absolute"
    LINEAR = "linear"
    RELU = "relu"
    LEAKY_RELU = "leaky_relu"
    SIGMOID = "sigmoid"
    TANH = "tanh"
    SIN = "sin"
    GAUSSIAN = "gaussian"
    LATCH = "latch"
    DIFF = "diff"

    @classmethod
    def coerce(cls, value: ActivationType | str) -> ActivationType:
        """Coerce a string or ActivationType into an ActivationType instance."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            msg = f"Unsupported activation value: {value!r}"
            raise TypeError(msg)
        try:
            return cls(normalize_activation_name(value))
        except ValueError as error:
            valid = ", ".join(member.value for member in cls)
            msg = f"Invalid activation {value!r}. Expected one of: {valid}"
            raise ValueError(msg) from error


_ALIASES = {"leakyrelu": "leaky_relu"}


def normalize_activation_name(name: str) -> str:
    """Lower-case a tag and map camel-cased spellings such as ``leakyRelu``."""
    name = name.strip().lower()
    return _ALIASES.get(name, name)


def _clamp(x: float, low: float, high: float) -> float:
    return max(min(x, high), low)


def constant(x: float, last_input: float, last_output: float) -> float:
    return x


def absolute(x: float, last_input: float, last_output: float) -> float:
    return min(abs(x), _LIMIT)


def linear(x: float, last_input: float, last_output: float) -> float:
    return _clamp(x, -_LIMIT, _LIMIT)


def relu(x: float, last_input: float, last_output: float) -> float:
    return _clamp(x, 0.0, _LIMIT)


def leaky_relu(x: float, last_input: float, last_output: float) -> float:
    if x > 0.0:
        return min(x, _LIMIT)
    return max(x * 0.01, -_LIMIT)


def sigmoid(x: float, last_input: float, last_output: float) -> float:
    if x >= 0:
        z = math.exp(-x)
        return 1.0 / (1.0 + z)
    z = math.exp(x)
    return z / (1.0 + z)


def tanh(x: float, last_input: float, last_output: float) -> float:
    return math.tanh(x)


def sin(x: float, last_input: float, last_output: float) -> float:
    return math.sin(x)


def gaussian(x: float, last_input: float, last_output: float) -> float:
    return 1.0 / (1.0 + x * x)


def latch(x: float, last_input: float, last_output: float) -> float:
    """Bistable memory: set above 1, reset below 0, otherwise hold."""
    if x > 1.0:
        return 1.0
    if x < 0.0:
        return 0.0
    return last_output


def diff(x: float, last_input: float, last_output: float) -> float:
    """Change in input since the previous pass."""
    return x - last_input


DEFAULT_ACTIVATIONS: dict[str, ActivationFunction] = {
    ActivationType.CONSTANT.value: constant,
    ActivationType.ABSOLUTE.value: absolute,
    ActivationType.LINEAR.value: linear,
    ActivationType.RELU.value: relu,
    ActivationType.LEAKY_RELU.value: leaky_relu,
    ActivationType.SIGMOID.value: sigmoid,
    ActivationType.TANH.value: tanh,
    ActivationType.SIN.value: sin,
    ActivationType.GAUSSIAN.value: gaussian,
    ActivationType.LATCH.value: latch,
    ActivationType.DIFF.value: diff,
}


def build_registry(extra: ActivationMap | None = None) -> dict[str, ActivationFunction]:
    """Return the default activations merged with caller-supplied ones."""
    registry = dict(DEFAULT_ACTIVATIONS)
    if extra is not None:
        for name, function in extra.items():
            if not callable(function):
                msg = f"Activation {name!r} must be callable."
                raise TypeError(msg)
            registry[normalize_activation_name(name)] = function
    return registry


def resolve_activation(
    name: str,
    registry: ActivationMap,
    *,
    node: int | None = None,
) -> ActivationFunction:
    """Look up an activation function by name."""
    function = registry.get(normalize_activation_name(name))
    if function is None:
        raise UnknownActivationError(name, node=node)
    return function


__all__ = [
    "ActivationFunction",
    "ActivationMap",
    "ActivationType",
    "DEFAULT_ACTIVATIONS",
    "build_registry",
    "normalize_activation_name",
    "resolve_activation",
]
