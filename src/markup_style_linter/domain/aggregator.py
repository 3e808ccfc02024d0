"""Violation aggregator: collects, deduplicates and orders findings."""

from dataclasses import dataclass
from typing import Iterable, Mapping

from markup_style_linter.domain.nodes import Span
from markup_style_linter.domain.rules import Severity, Violation


@dataclass(frozen=True)
class ViolationSummary:
    """Counts used by reporters and for exit-status decisions."""

    errors: int = 0
    warnings: int = 0
    fixable: int = 0

    @property
    def total(self) -> int:
        return self.errors + self.warnings


class ViolationAggregator:
    """
    Collects violations produced during one traversal.

    Ordering: span start ascending, then registry order of the producing
    rule, then arrival order. A violation sharing (rule name, span, message)
    with an earlier one is discarded.
    """

    def __init__(self, rule_order: Mapping[str, int]) -> None:
        self._rule_order = rule_order
        self._violations: list[Violation] = []
        self._seen: set[tuple[str, Span, str]] = set()

    def add(self, violation: Violation) -> bool:
        """Record a violation. Returns False if it was a duplicate."""
        key = violation.dedup_key
        if key in self._seen:
            return False
        self._seen.add(key)
        self._violations.append(violation)
        return True

    def extend(self, violations: Iterable[Violation]) -> None:
        for violation in violations:
            self.add(violation)

    def report(self) -> list[Violation]:
        """Violations in deterministic report order."""
        fallback = len(self._rule_order)
        indexed = list(enumerate(self._violations))
        indexed.sort(
            key=lambda item: (
                item[1].span.start,
                self._rule_order.get(item[1].rule_name, fallback),
                item[0],
            )
        )
        return [violation for _, violation in indexed]

    def has_errors(self) -> bool:
        return any(v.severity is Severity.ERROR for v in self._violations)

    def summary(self) -> ViolationSummary:
        return ViolationSummary(
            errors=sum(1 for v in self._violations if v.severity is Severity.ERROR),
            warnings=sum(1 for v in self._violations if v.severity is Severity.WARNING),
            fixable=sum(1 for v in self._violations if v.fixable),
        )

    def __len__(self) -> int:
        return len(self._violations)
