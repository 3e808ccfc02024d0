"""Use Case: walk a Document and dispatch every node to the interested rules."""

import dataclasses
import logging
from typing import Optional

from markup_style_linter.domain.aggregator import ViolationAggregator
from markup_style_linter.domain.errors import RuleEvaluationError
from markup_style_linter.domain.nodes import Document, Node, iter_children
from markup_style_linter.domain.registry import ConfiguredRegistry
from markup_style_linter.domain.rules import BaseRule, Violation

logger = logging.getLogger(__name__)


class TraversalEngine:
    """
    Single-pass, depth-first, pre-order walk over an immutable Document.

    The Document itself is visited first with an empty ancestor path, then
    its children in document order. A rule that raises is recorded as a
    synthetic error violation and skipped for that node only.
    """

    def __init__(self, registry: ConfiguredRegistry) -> None:
        self.registry = registry

    def run(
        self, document: Document, aggregator: Optional[ViolationAggregator] = None
    ) -> ViolationAggregator:
        """Evaluate every active rule against ``document``; returns the aggregator used."""
        if aggregator is None:
            aggregator = ViolationAggregator(self.registry.order)
        # Explicit stack of (node, ancestors) keeps deep trees off the call stack.
        pending: list[tuple[Node, tuple[Node, ...]]] = [(document, ())]
        while pending:
            node, ancestors = pending.pop()
            self._visit(node, ancestors, aggregator)
            path = ancestors + (node,)
            for child in reversed(iter_children(node)):
                pending.append((child, path))
        return aggregator

    def _visit(
        self, node: Node, ancestors: tuple[Node, ...], aggregator: ViolationAggregator
    ) -> None:
        for rule in self.registry.rules_for(node.kind):
            try:
                produced = rule.evaluate(node, ancestors)
            except Exception as exc:
                failure = RuleEvaluationError(rule.name, node, exc)
                logger.error("%s", failure, exc_info=exc)
                aggregator.add(failure.to_violation())
                continue
            aggregator.extend(self._with_severity(rule, violation) for violation in produced)

    def _with_severity(self, rule: BaseRule, violation: Violation) -> Violation:
        severity = self.registry.severity_of(rule.name)
        if severity is None or severity is violation.severity:
            return violation
        return dataclasses.replace(violation, severity=severity)
