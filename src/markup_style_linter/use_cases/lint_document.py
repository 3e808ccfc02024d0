"""Use Case: lint and fix a single document."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from markup_style_linter.domain.aggregator import ViolationAggregator, ViolationSummary
from markup_style_linter.domain.config import LinterConfig
from markup_style_linter.domain.errors import (
    RULE_FAILURE_CODE,
    FixVerificationError,
    PipelineStateError,
)
from markup_style_linter.domain.nodes import Document
from markup_style_linter.domain.protocols import DocumentParserProtocol
from markup_style_linter.domain.registry import ConfiguredRegistry
from markup_style_linter.domain.rules import Violation
from markup_style_linter.use_cases.apply_fixes import Fixer, FixResult
from markup_style_linter.use_cases.traversal import TraversalEngine

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    """Stages a document passes through, in order."""

    PARSED = "parsed"
    TRAVERSED = "traversed"
    AGGREGATED = "aggregated"
    FIXED = "fixed"
    VERIFIED = "verified"


_ORDER = list(PipelineState)


class PipelineRun:
    """Tracks one pass of a document through the pipeline; states only move forward."""

    def __init__(self) -> None:
        self.state: Optional[PipelineState] = None
        self.history: list[PipelineState] = []

    def advance(self, state: PipelineState) -> None:
        if state in self.history:
            raise PipelineStateError(f"Pipeline already passed through '{state.value}'")
        expected = _ORDER[len(self.history)] if len(self.history) < len(_ORDER) else None
        if state is not expected:
            current = self.state.value if self.state else "start"
            raise PipelineStateError(f"Cannot move from '{current}' to '{state.value}'")
        self.state = state
        self.history.append(state)


@dataclass(frozen=True)
class LintReport:
    """Ordered findings for one document."""

    language: str
    source: str = ""
    violations: tuple[Violation, ...] = ()
    summary: ViolationSummary = field(default_factory=ViolationSummary)

    @property
    def has_errors(self) -> bool:
        return self.summary.errors > 0

    @property
    def fixable(self) -> tuple[Violation, ...]:
        return tuple(v for v in self.violations if v.fixable)


@dataclass(frozen=True)
class FixOutcome:
    """Final text after all fix passes, plus the re-lint of that text."""

    text: str
    applied_count: int
    deferred_count: int
    passes: int
    report: LintReport

    @property
    def changed(self) -> bool:
        return self.applied_count > 0


class LintDocumentUseCase:
    """Orchestrate parse, traversal, aggregation and (optionally) fixing of one document."""

    def __init__(
        self,
        parser: DocumentParserProtocol,
        registry: ConfiguredRegistry,
        config: Optional[LinterConfig] = None,
    ) -> None:
        self.parser = parser
        self.registry = registry
        self.config = config or LinterConfig()
        self.engine = TraversalEngine(registry)
        self.fixer = Fixer(registry.order)

    def lint(self, source: str, language: str) -> LintReport:
        """Report mode: parse, traverse and aggregate. Raises AdapterError on bad input."""
        run = PipelineRun()
        document = self._parse(run, source, language)
        return self._lint(run, document)

    def lint_document(self, document: Document) -> LintReport:
        run = PipelineRun()
        run.advance(PipelineState.PARSED)
        return self._lint(run, document)

    def fix(self, source: str, language: str) -> FixOutcome:
        """
        Fix mode: apply conflict-free fixes, verify, and repeat.

        Another pass runs while the previous one applied something and the
        patched text still has fixable violations, up to ``max_fix_passes``.
        """
        run = PipelineRun()
        document = self._parse(run, source, language)
        report = self._lint(run, document)
        applied = 0
        deferred = 0
        passes = 0
        while passes < self.config.max_fix_passes and report.fixable:
            result = self._fix(run, document, report)
            passes += 1
            applied += result.applied_count
            deferred = result.deferred_count
            if not result.changed:
                break
            next_run = PipelineRun()
            document = self._parse(next_run, result.text, language)
            report = self._lint(next_run, document)
            self._verify(run, result, report)
            run = next_run
            logger.debug(
                "Fix pass %d: %d applied, %d deferred", passes, result.applied_count, deferred
            )
        if not report.fixable:
            deferred = 0
        return FixOutcome(
            text=document.source,
            applied_count=applied,
            deferred_count=deferred,
            passes=passes,
            report=report,
        )

    # -- stages -----------------------------------------------------------

    def _parse(self, run: PipelineRun, source: str, language: str) -> Document:
        document = self.parser.parse(source, language)
        run.advance(PipelineState.PARSED)
        return document

    def _lint(self, run: PipelineRun, document: Document) -> LintReport:
        aggregator = ViolationAggregator(self.registry.order)
        self.engine.run(document, aggregator)
        run.advance(PipelineState.TRAVERSED)
        report = LintReport(
            language=document.language,
            source=document.source,
            violations=tuple(aggregator.report()),
            summary=aggregator.summary(),
        )
        run.advance(PipelineState.AGGREGATED)
        return report

    def _fix(self, run: PipelineRun, document: Document, report: LintReport) -> FixResult:
        result = self.fixer.apply(document, report.violations)
        run.advance(PipelineState.FIXED)
        return result

    @staticmethod
    def _verify(run: PipelineRun, result: FixResult, report: LintReport) -> None:
        """No rule may still report a violation touching a region it patched."""
        failing: list[str] = []
        for region in result.patched_regions:
            for violation in report.violations:
                if violation.code == RULE_FAILURE_CODE or violation.rule_name != region.rule_name:
                    continue
                if violation.span.touches(region.span):
                    if region.rule_name not in failing:
                        failing.append(region.rule_name)
        if failing:
            raise FixVerificationError(failing)
        run.advance(PipelineState.VERIFIED)
