"""Unit tests for LintProjectUseCase."""

from pathlib import Path
from unittest.mock import MagicMock

from markup_style_linter.domain.errors import AdapterError
from markup_style_linter.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from markup_style_linter.use_cases.lint_project import (
    EXIT_INTERNAL_ERROR,
    EXIT_OK,
    EXIT_VIOLATIONS,
    DocumentResult,
    LintProjectUseCase,
    ProjectResult,
)
from tests.conftest import make_linter, project_use_case_deps


def _use_case(**overrides: object) -> LintProjectUseCase:
    deps = project_use_case_deps(filesystem=FileSystemGateway())
    deps.update(overrides)
    return LintProjectUseCase(**deps)  # type: ignore[arg-type]


def _site(tmp_path: Path, broken: bool = False) -> Path:
    (tmp_path / "good.css").write_text("a { color: red; }\n", encoding="utf-8")
    (tmp_path / "bad.html").write_text("<DIV></DIV>\n", encoding="utf-8")
    if broken:
        (tmp_path / "broken.html").write_text("<?php echo 1; ?>\n", encoding="utf-8")
    return tmp_path


class TestCheck:
    """Report mode over a directory."""

    def test_results_are_sorted_and_exit_code_reflects_errors(self, tmp_path: Path) -> None:
        result = _use_case().execute([str(_site(tmp_path))])
        assert [Path(d.path).name for d in result.documents] == ["bad.html", "good.css"]
        bad, good = result.documents
        assert bad.report is not None and bad.report.has_errors
        assert good.report is not None and good.report.violations == ()
        assert result.exit_code == EXIT_VIOLATIONS

    def test_adapter_error_is_a_document_failure(self, tmp_path: Path) -> None:
        result = _use_case(jobs=3).execute([str(_site(tmp_path, broken=True))])
        assert [Path(d.path).name for d in result.documents] == ["bad.html", "broken.html", "good.css"]
        broken = result.documents[1]
        assert isinstance(broken.error, AdapterError)
        assert broken.report is None
        assert result.exit_code == EXIT_INTERNAL_ERROR

    def test_warnings_only_exit_zero(self, tmp_path: Path) -> None:
        (tmp_path / "warn.css").write_text(".a{margin:0px;}\n", encoding="utf-8")
        result = _use_case().execute([str(tmp_path)])
        assert result.documents[0].report is not None
        assert result.documents[0].report.summary.warnings > 0
        assert result.exit_code == EXIT_OK

    def test_empty_files_are_clean(self, tmp_path: Path) -> None:
        (tmp_path / "empty.css").write_text("", encoding="utf-8")
        (tmp_path / "empty.html").write_text("", encoding="utf-8")
        result = _use_case().execute([str(tmp_path)])
        assert all(d.report is not None and d.report.violations == () for d in result.documents)
        assert result.exit_code == EXIT_OK

    def test_missing_path_is_reported(self, tmp_path: Path) -> None:
        telemetry = MagicMock()
        result = _use_case(telemetry=telemetry).execute([str(tmp_path / "nope")])
        assert result.documents == ()
        telemetry.warning.assert_called_once_with(f"Path not found: {tmp_path / 'nope'}")
        telemetry.step.assert_called_once_with("Checking 0 file(s)")

    def test_read_failure_is_a_document_failure(self) -> None:
        filesystem = MagicMock()
        filesystem.exists.return_value = True
        filesystem.glob_source_files.return_value = ["/site/a.css"]
        filesystem.read_text.side_effect = OSError("permission denied")
        result = _use_case(filesystem=filesystem).execute(["/site"])
        (document,) = result.documents
        assert "Cannot read /site/a.css" in str(document.error)
        assert result.exit_code == EXIT_INTERNAL_ERROR


class TestFix:
    """Fix mode writes changed files back."""

    def test_changed_files_are_written(self, tmp_path: Path) -> None:
        _site(tmp_path)
        result = _use_case().execute([str(tmp_path)], fix=True)
        assert (tmp_path / "bad.html").read_text(encoding="utf-8") == "<div></div>\n"
        assert result.files_changed == 1
        assert result.exit_code == EXIT_OK

    def test_dry_run_keeps_files(self, tmp_path: Path) -> None:
        _site(tmp_path)
        result = _use_case().execute([str(tmp_path)], fix=True, write=False)
        assert (tmp_path / "bad.html").read_text(encoding="utf-8") == "<DIV></DIV>\n"
        fix = result.documents[0].fix
        assert fix is not None and fix.text == "<div></div>\n"

    def test_unchanged_crlf_file_is_not_rewritten(self, tmp_path: Path) -> None:
        target = tmp_path / "a.css"
        target.write_bytes(b"a {\r\n  color: red;\r\n}\r\n")
        result = _use_case().execute([str(tmp_path)], fix=True)
        assert result.files_changed == 0
        assert target.read_bytes() == b"a {\r\n  color: red;\r\n}\r\n"

    def test_fixed_crlf_file_keeps_its_line_endings(self, tmp_path: Path) -> None:
        target = tmp_path / "a.css"
        target.write_bytes(b"a {\r\n  margin: 0px;\r\n  color: red;\r\n}\r\n")
        use_case = _use_case(document_use_case=make_linter("zero-unit"))
        result = use_case.execute([str(tmp_path)], fix=True)
        assert result.files_changed == 1
        assert target.read_bytes() == b"a {\r\n  margin: 0;\r\n  color: red;\r\n}\r\n"


class TestProjectResult:
    """Exit codes and convenience accessors."""

    def test_exit_codes(self) -> None:
        clean = make_linter().lint("a { color: red; }", "css")
        failing = make_linter().lint("<DIV></DIV>", "html")
        assert ProjectResult().exit_code == EXIT_OK
        assert ProjectResult((DocumentResult("a.css", report=clean),)).exit_code == EXIT_OK
        assert ProjectResult((DocumentResult("b.html", report=failing),)).exit_code == EXIT_VIOLATIONS

    def test_final_source_prefers_fixed_text(self) -> None:
        outcome = make_linter("zero-unit").fix(".a{margin:0px;}", "css")
        document = DocumentResult("a.css", source=".a{margin:0px;}", fix=outcome)
        assert document.final_report is outcome.report
        assert document.final_source == ".a{margin:0;}"
