"""Use Case: Apply Fixes to Source Text."""

from dataclasses import dataclass, field
from typing import Iterable, Mapping

from markup_style_linter.domain.nodes import Document, Span
from markup_style_linter.domain.rules import TextEdit, Violation


@dataclass(frozen=True)
class PatchedRegion:
    """Where an applied edit's replacement text landed in the patched source."""

    rule_name: str
    span: Span


@dataclass(frozen=True)
class FixResult:
    """Outcome of one fix pass over a document."""

    text: str
    applied: tuple[Violation, ...] = ()
    deferred: tuple[Violation, ...] = ()
    patched_regions: tuple[PatchedRegion, ...] = field(default_factory=tuple)

    @property
    def applied_count(self) -> int:
        return len(self.applied)

    @property
    def deferred_count(self) -> int:
        return len(self.deferred)

    @property
    def changed(self) -> bool:
        return bool(self.applied)


class Fixer:
    """
    Selects a conflict-free subset of fixes and applies it in one pass.

    Candidates are considered in rule registry order, then span start, then
    span end. A candidate is accepted only if none of its edits conflicts
    with an edit already accepted; otherwise it is deferred to a later pass.
    Fixes are never merged.
    """

    def __init__(self, rule_order: Mapping[str, int]) -> None:
        self._rule_order = rule_order

    def apply(self, document: Document, violations: Iterable[Violation]) -> FixResult:
        candidates = sorted(
            ((v, v.fix) for v in violations if v.fix),
            key=lambda pair: (
                self._rule_order.get(pair[0].rule_name, len(self._rule_order)),
                pair[0].span.start,
                pair[0].span.end,
            ),
        )
        accepted: list[tuple[str, TextEdit]] = []
        applied: list[Violation] = []
        deferred: list[Violation] = []
        for violation, fix in candidates:
            if any(edit.conflicts_with(taken) for edit in fix.edits for _, taken in accepted):
                deferred.append(violation)
                continue
            accepted.extend((violation.rule_name, edit) for edit in fix.edits)
            applied.append(violation)

        return FixResult(
            text=self._patch(document.source, [edit for _, edit in accepted]),
            applied=tuple(applied),
            deferred=tuple(deferred),
            patched_regions=self._regions(accepted),
        )

    @staticmethod
    def _patch(source: str, edits: list[TextEdit]) -> str:
        """Apply edits back to front so earlier offsets stay valid."""
        text = source
        for edit in sorted(edits, key=lambda e: (e.span.start, e.span.end), reverse=True):
            text = text[:edit.span.start] + edit.replacement + text[edit.span.end:]
        return text

    @staticmethod
    def _regions(accepted: list[tuple[str, TextEdit]]) -> tuple[PatchedRegion, ...]:
        """Map each applied edit to its range in the patched text."""
        regions: list[PatchedRegion] = []
        shift = 0
        for rule_name, edit in sorted(accepted, key=lambda item: (item[1].span.start, item[1].span.end)):
            start = edit.span.start + shift
            regions.append(PatchedRegion(rule_name, Span(start, start + len(edit.replacement))))
            shift += len(edit.replacement) - edit.span.length
        return tuple(regions)
