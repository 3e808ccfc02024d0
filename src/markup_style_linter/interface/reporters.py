"""Reporters: render project results as text lines, JSON lines or a rich table."""

import json
from typing import Iterator, Optional, Protocol, TextIO

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from markup_style_linter.domain.rules import Severity, Violation
from markup_style_linter.infrastructure.parsers.positions import LineIndex
from markup_style_linter.infrastructure.services.guidance_service import GuidanceService
from markup_style_linter.use_cases.lint_project import DocumentResult, ProjectResult

REPORT_FORMATS = ("text", "json", "table")


class Reporter(Protocol):
    """Protocol for reporting project results."""

    def report(self, result: ProjectResult) -> None:
        ...


def located(document: DocumentResult) -> Iterator[tuple[int, int, Violation]]:
    """Yield ``(line, column, violation)`` for a document's final report, 1-based."""
    report = document.final_report
    if report is None:
        return
    lines = LineIndex(document.final_source)
    for violation in report.violations:
        line, column = lines.position(violation.span.start)
        yield line, column, violation


class TextReporter:
    """One ``path:line:col: severity code name message`` line per violation."""

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream

    def report(self, result: ProjectResult) -> None:
        for document in result.documents:
            if document.error is not None:
                self.stream.write(f"{document.path}: error: {document.error}\n")
                continue
            for line, column, v in located(document):
                self.stream.write(
                    f"{document.path}:{line}:{column}: {v.severity.value} "
                    f"{v.code} {v.rule_name} {v.message}\n"
                )


class JsonLinesReporter:
    """One JSON object per line; document failures carry an ``error`` key."""

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream

    def report(self, result: ProjectResult) -> None:
        for document in result.documents:
            if document.error is not None:
                record: dict[str, object] = {"path": document.path, "error": str(document.error)}
                self.stream.write(json.dumps(record) + "\n")
                continue
            for line, column, violation in located(document):
                record = {"path": document.path, "line": line, "column": column}
                record.update(violation.to_dict())
                self.stream.write(json.dumps(record) + "\n")


class TableReporter:
    """Rich table per run, with guidance display names and a summary line."""

    def __init__(self, console: Console, guidance: Optional[GuidanceService] = None) -> None:
        self.console = console
        self.guidance = guidance

    def report(self, result: ProjectResult) -> None:
        table = Table(title="Markup Style Report", header_style="bold cyan")
        table.add_column("Location", style="dim")
        table.add_column("Severity")
        table.add_column("Code", style="cyan")
        table.add_column("Rule")
        table.add_column("Fix?", justify="center")
        table.add_column("Message")
        errors = warnings = 0
        for document in result.documents:
            if document.error is not None:
                table.add_row(
                    escape(document.path), "[bold red]failed[/]", "-", "-", "-", escape(str(document.error))
                )
                continue
            for line, column, v in located(document):
                if v.severity is Severity.ERROR:
                    errors += 1
                    severity = "[red]error[/]"
                else:
                    warnings += 1
                    severity = "[yellow]warning[/]"
                rule = self.guidance.get_display_name(v.rule_name) if self.guidance else v.rule_name
                table.add_row(
                    escape(f"{document.path}:{line}:{column}"),
                    severity,
                    v.code,
                    rule,
                    "yes" if v.fixable else "",
                    escape(v.message),
                )
        if table.row_count:
            self.console.print(table)
        else:
            self.console.print("[green]No style violations detected.[/]")
        self.console.print(
            f"{len(result.documents)} file(s): {errors} error(s), {warnings} warning(s)"
        )


def create_reporter(
    fmt: str,
    stream: TextIO,
    console: Optional[Console] = None,
    guidance: Optional[GuidanceService] = None,
) -> Reporter:
    """Reporter for one of REPORT_FORMATS. Raises ValueError for anything else."""
    if fmt == "text":
        return TextReporter(stream)
    if fmt == "json":
        return JsonLinesReporter(stream)
    if fmt == "table":
        return TableReporter(console or Console(file=stream), guidance)
    raise ValueError(f"Unknown report format '{fmt}'")
