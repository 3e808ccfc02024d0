"""Unit tests for the report renderers."""

import io
import json

import pytest
from rich.console import Console

from markup_style_linter.domain.errors import AdapterError
from markup_style_linter.infrastructure.services.guidance_service import GuidanceService
from markup_style_linter.interface.reporters import (
    JsonLinesReporter,
    TableReporter,
    TextReporter,
    create_reporter,
    located,
)
from markup_style_linter.use_cases.lint_project import DocumentResult, ProjectResult
from tests.conftest import make_linter

SOURCE = "a {\n  color: #FFF;\n}\n"


def _result() -> ProjectResult:
    report = make_linter("hex-case").lint(SOURCE, "css")
    failed = DocumentResult("b.html", error=AdapterError("Processing instructions are not supported", offset=0))
    return ProjectResult((DocumentResult("a.css", source=SOURCE, report=report), failed))


class TestLocated:
    def test_positions_are_one_based(self) -> None:
        ((line, column, violation),) = list(located(_result().documents[0]))
        assert (line, column) == (2, 10)
        assert violation.rule_name == "hex-case"

    def test_failed_document_has_no_locations(self) -> None:
        assert list(located(_result().documents[1])) == []


class TestTextReporter:
    def test_lines(self) -> None:
        stream = io.StringIO()
        TextReporter(stream).report(_result())
        assert stream.getvalue().splitlines() == [
            "a.css:2:10: warning C003 hex-case Hex color '#FFF' should be lowercase",
            "b.html: error: Processing instructions are not supported at offset 0",
        ]


class TestJsonLinesReporter:
    def test_records(self) -> None:
        stream = io.StringIO()
        JsonLinesReporter(stream).report(_result())
        first, second = [json.loads(line) for line in stream.getvalue().splitlines()]
        assert first["path"] == "a.css"
        assert (first["line"], first["column"], first["code"]) == (2, 10, "C003")
        assert first["fixable"] is True
        assert second == {
            "path": "b.html",
            "error": "Processing instructions are not supported at offset 0",
        }


class TestTableReporter:
    def test_table_and_summary(self) -> None:
        output = io.StringIO()
        TableReporter(Console(file=output, width=200), GuidanceService()).report(_result())
        text = output.getvalue()
        assert "Markup Style Report" in text
        assert "Hex Color Case" in text
        assert "a.css:2:10" in text
        assert "2 file(s): 0 error(s), 1 warning(s)" in text

    def test_clean_run(self) -> None:
        output = io.StringIO()
        TableReporter(Console(file=output, width=200)).report(ProjectResult())
        assert "No style violations detected." in output.getvalue()
        assert "0 file(s): 0 error(s), 0 warning(s)" in output.getvalue()


class TestCreateReporter:
    def test_known_formats(self) -> None:
        stream = io.StringIO()
        assert isinstance(create_reporter("text", stream), TextReporter)
        assert isinstance(create_reporter("json", stream), JsonLinesReporter)
        assert isinstance(create_reporter("table", stream), TableReporter)

    def test_unknown_format(self) -> None:
        with pytest.raises(ValueError, match="xml"):
            create_reporter("xml", io.StringIO())
