"""Evaluation of a compiled genome with carried-over node state."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from .activations import ActivationMap, build_registry, resolve_activation
from .compiler import EvaluationPlan, compile_plan
from .errors import NotFound
from .genome import Genome

logger = logging.getLogger("brainlab.brain")


@dataclass(slots=True)
class ThinkReport:
    """Diagnostics gathered during a single ``think`` pass."""

    evaluated: int = 0
    stale: bool = False
    missing_inputs: list[NotFound] = field(default_factory=list)
    skipped: list[NotFound] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.missing_inputs and not self.skipped


class Brain:
    """Executable view over a genome.

    The brain holds a reference to its genome, so structural mutations made
    through the genome are visible immediately but only take effect in
    evaluation after :meth:`recompile`. Until then the brain is stale and
    evaluates the previous plan, skipping entries that no longer resolve.
    """

    def __init__(
        self,
        genome: Genome,
        *,
        activation_functions: ActivationMap | None = None,
    ) -> None:
        self.genome = genome
        self.activation_functions = build_registry(activation_functions)
        self.last_report = ThinkReport()
        self.plan = self._compile()

    @property
    def is_stale(self) -> bool:
        """Whether the topology changed since the plan was compiled."""
        return self.plan.revision != self.genome.revision

    def recompile(self) -> EvaluationPlan:
        """Rebuild the evaluation plan from the genome's current topology.

        Raises:
            UnknownActivationError: If a live node names an unregistered
                activation. The previous plan is kept in that case.
        """
        self.plan = self._compile()
        return self.plan

    def _compile(self) -> EvaluationPlan:
        for index, node in self.genome.live_nodes():
            resolve_activation(node.activation, self.activation_functions, node=index)
        plan = compile_plan(self.genome)
        logger.debug(
            "compiled %d evaluations in %d layers at revision %d",
            len(plan),
            len(plan.layers),
            plan.revision,
        )
        return plan

    def think(self, inputs: Mapping[int, float]) -> ThinkReport:
        """Run one inference pass.

        Every node value is reset to zero, the given inputs are injected and
        the plan is evaluated in order. Each evaluated node records the
        summed input and its new value as history for the next pass.

        Activations are resolved and inputs converted before any node state
        changes, so a failing pass leaves values and history untouched.

        Raises:
            UnknownActivationError: If a scheduled node names an unregistered
                activation.
        """
        genome = self.genome
        functions = {
            entry.node: resolve_activation(
                node.activation,
                self.activation_functions,
                node=entry.node,
            )
            for entry in self.plan
            if (node := genome.get_node(entry.node)) is not None
        }
        values = {index: float(value) for index, value in inputs.items()}

        report = ThinkReport(stale=self.is_stale)
        if report.stale:
            logger.debug(
                "evaluating stale plan (revision %d, genome at %d)",
                self.plan.revision,
                genome.revision,
            )

        for _, node in genome.live_nodes():
            node.value = 0.0

        for index, value in values.items():
            node = genome.get_node(index)
            if node is None:
                logger.debug("ignoring input for missing node %d", index)
                report.missing_inputs.append(NotFound("node", index))
                continue
            node.value = value

        for entry in self.plan:
            node = genome.get_node(entry.node)
            if node is None:
                logger.warning("Could not find node with index %d", entry.node)
                report.skipped.append(NotFound("node", entry.node))
                continue

            total = 0.0
            for edge_index in entry.edges:
                edge = genome.get_edge(edge_index)
                if edge is None:
                    logger.warning("Could not find edge with index %d", edge_index)
                    report.skipped.append(NotFound("edge", edge_index))
                    continue
                if not edge.enabled:
                    continue
                source = genome.get_node(edge.source)
                if source is None:
                    logger.warning(
                        "Could not find source node %d of edge %d",
                        edge.source,
                        edge_index,
                    )
                    report.skipped.append(NotFound("node", edge.source))
                    continue
                total += source.value * edge.weight

            node.value = functions[entry.node](total, node.last_input, node.last_output)
            node.last_input = total
            node.last_output = node.value
            report.evaluated += 1

        self.last_report = report
        return report

    def get_value(self, index: int) -> float | None:
        """Return the node's current value, or ``None`` if it is gone."""
        node = self.genome.get_node(index)
        if node is None:
            return None
        return node.value

    def outputs(self) -> dict[int, float]:
        """Values of the nodes the plan treats as outputs."""
        values: dict[int, float] = {}
        for index in self.plan.outputs:
            value = self.get_value(index)
            if value is not None:
                values[index] = value
        return values

    def reset_state(self) -> None:
        """Clear values and activation history on every live node."""
        for _, node in self.genome.live_nodes():
            node.reset_state()

    def clone(self) -> Brain:
        """Return an independent brain over a private copy of the genome."""
        return Brain(
            self.genome.copy(),
            activation_functions=self.activation_functions,
        )


__all__ = ["Brain", "ThinkReport"]
