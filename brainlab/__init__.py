"""Evolvable feed-forward brains: genome, compiler and evaluator."""

from __future__ import annotations

from .activations import (
    DEFAULT_ACTIVATIONS,
    ActivationFunction,
    ActivationType,
    build_registry,
    resolve_activation,
)
from .brain import Brain, ThinkReport
from .compiler import (
    EvaluationPlan,
    PlanEntry,
    compile_plan,
    compute_layers,
    compute_required_nodes,
)
from .config import MutationSettings, load_mutation_settings
from .errors import BrainError, EdgeNotFoundError, NotFound, UnknownActivationError
from .genes import EdgeGene, NodeGene
from .genome import Genome, Insertion
from .mutation import (
    ActivationMutationConfig,
    AddEdgeConfig,
    InsertNodeConfig,
    MutationOperators,
    MutationSummary,
    WeightMutationConfig,
)

__all__ = [
    "ActivationFunction",
    "ActivationType",
    "DEFAULT_ACTIVATIONS",
    "build_registry",
    "resolve_activation",
    "Brain",
    "ThinkReport",
    "EvaluationPlan",
    "PlanEntry",
    "compile_plan",
    "compute_layers",
    "compute_required_nodes",
    "MutationSettings",
    "load_mutation_settings",
    "BrainError",
    "EdgeNotFoundError",
    "NotFound",
    "UnknownActivationError",
    "EdgeGene",
    "NodeGene",
    "Genome",
    "Insertion",
    "ActivationMutationConfig",
    "AddEdgeConfig",
    "InsertNodeConfig",
    "MutationOperators",
    "MutationSummary",
    "WeightMutationConfig",
]
