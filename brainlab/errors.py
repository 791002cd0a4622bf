"""Exception hierarchy and failure values shared across the package."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

SlotKind = Literal["node", "edge"]


class BrainError(Exception):
    """Base class for errors raised by brainlab."""


class EdgeNotFoundError(BrainError, LookupError):
    """Raised when an operation requires an edge that does not exist."""

    def __init__(self, index: int) -> None:
        super().__init__(f"Could not find edge with index {index}")
        self.index = index


class UnknownActivationError(BrainError, ValueError):
    """Raised when a node names an activation missing from the registry."""

    def __init__(self, name: str, *, node: int | None = None) -> None:
        where = "" if node is None else f" on node {node}"
        super().__init__(f"Unknown activation function {name!r}{where}")
        self.name = name
        self.node = node


@dataclass(frozen=True, slots=True)
class NotFound:
    """Failure value for an index that is tombstoned or out of range.

    Operations return the affected index on success, and index 0 is valid,
    so check results with ``isinstance(result, NotFound)``.
    """

    kind: SlotKind
    index: int

    def __str__(self) -> str:
        return f"Could not find {self.kind} with index {self.index}"


__all__ = [
    "BrainError",
    "EdgeNotFoundError",
    "NotFound",
    "SlotKind",
    "UnknownActivationError",
]
