"""Unit tests for TraversalEngine."""

import logging

import pytest

from markup_style_linter.domain.config import LinterConfig
from markup_style_linter.domain.errors import RULE_FAILURE_CODE
from markup_style_linter.domain.nodes import Node, NodeKind
from markup_style_linter.domain.registry import RuleRegistry
from markup_style_linter.domain.rules import Severity, StyleRule, Violation
from markup_style_linter.domain.rules.html_rules import HtmlLangRule, TagCaseRule
from markup_style_linter.infrastructure.parsers import parse_document
from markup_style_linter.use_cases.traversal import TraversalEngine


class RecordingRule(StyleRule):
    name = "recording"
    code = "T001"
    kinds = frozenset(NodeKind)

    def __init__(self) -> None:
        self.seen: list[tuple[str, int]] = []

    def evaluate(self, node: Node, ancestors: tuple[Node, ...]) -> list[Violation]:
        self.seen.append((node.kind.value, len(ancestors)))
        return []


class ExplodingRule(StyleRule):
    name = "exploding"
    code = "T002"
    kinds = frozenset({NodeKind.ELEMENT})

    def evaluate(self, node: Node, ancestors: tuple[Node, ...]) -> list[Violation]:
        raise RuntimeError("boom")


def _engine(*rules: StyleRule, config: LinterConfig = LinterConfig()) -> TraversalEngine:
    registry = RuleRegistry()
    for rule in rules:
        registry.register(rule)
    return TraversalEngine(registry.configured(config))


class TestTraversalOrder:
    """Pre-order walk, Document first."""

    def test_pre_order_with_ancestor_depth(self) -> None:
        recorder = RecordingRule()
        _engine(recorder).run(parse_document("<div><p>x</p></div><br>", "html"))
        assert recorder.seen == [
            ("document", 0),
            ("element", 1),
            ("element", 2),
            ("text", 3),
            ("element", 1),
        ]

    def test_css_nodes(self) -> None:
        recorder = RecordingRule()
        _engine(recorder).run(parse_document("@media print { a { color: red; } }", "css"))
        assert [kind for kind, _ in recorder.seen] == ["document", "at-rule", "ruleset", "declaration"]

    def test_empty_document_yields_no_violations(self) -> None:
        engine = _engine(TagCaseRule(), HtmlLangRule())
        assert engine.run(parse_document("", "html")).report() == []
        assert engine.run(parse_document("", "css")).report() == []


class TestRuleFailures:
    """A raising rule is recorded and the walk continues."""

    def test_failure_becomes_synthetic_error(self, caplog: pytest.LogCaptureFixture) -> None:
        engine = _engine(ExplodingRule(), TagCaseRule())
        with caplog.at_level(logging.ERROR):
            report = engine.run(parse_document("<DIV></DIV>", "html")).report()
        assert [v.code for v in report] == [RULE_FAILURE_CODE, "H002"]
        failure = report[0]
        assert failure.rule_name == "exploding"
        assert failure.severity is Severity.ERROR
        assert "RuntimeError: boom" in failure.message
        assert not failure.fixable
        assert "Rule 'exploding' failed on <DIV>" in caplog.text


class TestSeverityOverrides:
    """Configured severities replace rule defaults."""

    def test_override_applies_to_reported_violations(self) -> None:
        config = LinterConfig(severity_overrides={"html-lang": Severity.ERROR})
        (violation,) = _engine(HtmlLangRule(), config=config).run(
            parse_document("<html></html>", "html")
        ).report()
        assert violation.severity is Severity.ERROR
