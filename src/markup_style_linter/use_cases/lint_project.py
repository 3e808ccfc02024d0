"""Use Case: lint or fix every supported file under a set of paths."""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional, Sequence

from markup_style_linter.domain.errors import LinterError
from markup_style_linter.domain.protocols import (
    DocumentParserProtocol,
    FileSystemProtocol,
    TelemetryPort,
)
from markup_style_linter.use_cases.lint_document import (
    FixOutcome,
    LintDocumentUseCase,
    LintReport,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_VIOLATIONS = 1
EXIT_INTERNAL_ERROR = 2


@dataclass(frozen=True)
class DocumentResult:
    """Result for one file: a report, a fix outcome, or the error that stopped it."""

    path: str
    source: str = ""
    report: Optional[LintReport] = None
    fix: Optional[FixOutcome] = None
    error: Optional[LinterError] = None

    @property
    def final_report(self) -> Optional[LintReport]:
        return self.fix.report if self.fix is not None else self.report

    @property
    def final_source(self) -> str:
        """Text the reported spans refer to."""
        report = self.final_report
        return report.source if report is not None else self.source


@dataclass(frozen=True)
class ProjectResult:
    """Per-file results, sorted by path."""

    documents: tuple[DocumentResult, ...] = ()

    @property
    def exit_code(self) -> int:
        """0 when clean or warnings only, 1 for any error violation, 2 for internal failures."""
        if any(d.error is not None for d in self.documents):
            return EXIT_INTERNAL_ERROR
        for document in self.documents:
            report = document.final_report
            if report is not None and report.has_errors:
                return EXIT_VIOLATIONS
        return EXIT_OK

    @property
    def files_changed(self) -> int:
        return sum(1 for d in self.documents if d.fix is not None and d.fix.changed)


class LintProjectUseCase:
    """
    Fan documents out over a thread pool.

    Each task owns its Document and Aggregator; the configured registry
    held by the document use case is shared read-only.
    """

    def __init__(
        self,
        document_use_case: LintDocumentUseCase,
        parser: DocumentParserProtocol,
        filesystem: FileSystemProtocol,
        telemetry: Optional[TelemetryPort] = None,
        jobs: int = 1,
    ) -> None:
        self.document_use_case = document_use_case
        self.parser = parser
        self.filesystem = filesystem
        self.telemetry = telemetry
        self.jobs = max(1, jobs)

    def collect_files(self, paths: Sequence[str]) -> list[str]:
        files: set[str] = set()
        for path in paths:
            if not self.filesystem.exists(path):
                if self.telemetry:
                    self.telemetry.warning(f"Path not found: {path}")
                continue
            files.update(self.filesystem.glob_source_files(path))
        return sorted(files)

    def execute(self, paths: Sequence[str], fix: bool = False, write: bool = True) -> ProjectResult:
        """Lint (or fix) every file; ``write=False`` keeps fixed text in memory only."""
        files = self.collect_files(paths)
        if self.telemetry:
            action = "Fixing" if fix else "Checking"
            self.telemetry.step(f"{action} {len(files)} file(s)")
        with ThreadPoolExecutor(max_workers=self.jobs) as pool:
            results = list(pool.map(lambda path: self._process(path, fix), files))
        if fix and write:
            for result in results:
                if result.fix is not None and result.fix.changed:
                    self.filesystem.write_text(result.path, result.fix.text)
        return ProjectResult(documents=tuple(sorted(results, key=lambda r: r.path)))

    def _process(self, path: str, fix: bool) -> DocumentResult:
        language = self.parser.language_for_path(path)
        source = ""
        try:
            source = self.filesystem.read_text(path)
            if language is None:
                raise LinterError(f"Unsupported file type: {path}")
            if fix:
                return DocumentResult(
                    path=path, source=source, fix=self.document_use_case.fix(source, language)
                )
            return DocumentResult(
                path=path, source=source, report=self.document_use_case.lint(source, language)
            )
        except LinterError as exc:
            logger.error("%s: %s", path, exc)
            return DocumentResult(path=path, source=source, error=exc)
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Cannot read %s: %s", path, exc)
            return DocumentResult(path=path, error=LinterError(f"Cannot read {path}: {exc}"))
