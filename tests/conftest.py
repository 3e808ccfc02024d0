"""Pytest configuration and shared builders for the markup style linter tests.

Run pytest from the project root; pythonpath in pyproject.toml puts src/ and
the root on sys.path so tests can import these helpers as ``tests.conftest``.
"""

from typing import Optional
from unittest.mock import MagicMock

import pytest

from markup_style_linter.domain.config import LinterConfig
from markup_style_linter.domain.nodes import Document
from markup_style_linter.domain.registry import ConfiguredRegistry
from markup_style_linter.domain.rules import Violation
from markup_style_linter.domain.rules.catalog import build_default_registry
from markup_style_linter.infrastructure.parsers import DocumentParser, parse_document
from markup_style_linter.use_cases.lint_document import LintDocumentUseCase
from markup_style_linter.use_cases.traversal import TraversalEngine


def only_rules(*names: str, **options: object) -> LinterConfig:
    """Config that enables exactly ``names``."""
    return LinterConfig(enabled_rules=frozenset(names), **options)  # type: ignore[arg-type]


def configured_registry(config: Optional[LinterConfig] = None) -> ConfiguredRegistry:
    config = config or LinterConfig()
    return build_default_registry(config).configured(config)


def make_linter(*names: str, **options: object) -> LintDocumentUseCase:
    """Document use case over the built-in rules; ``names`` restricts the active set."""
    config = only_rules(*names, **options) if names else LinterConfig(**options)  # type: ignore[arg-type]
    return LintDocumentUseCase(DocumentParser(), configured_registry(config), config)


def lint(source: str, language: str, *names: str, **options: object) -> list[Violation]:
    return list(make_linter(*names, **options).lint(source, language).violations)


def evaluate_rule(rule: object, source: str, language: str) -> list[Violation]:
    """Run one rule instance over every node it is interested in."""
    from markup_style_linter.domain.registry import RuleRegistry

    registry = RuleRegistry()
    registry.register(rule)  # type: ignore[arg-type]
    config = LinterConfig(enabled_rules=frozenset({rule.name}))  # type: ignore[attr-defined]
    document: Document = parse_document(source, language)
    return TraversalEngine(registry.configured(config)).run(document).report()


def project_use_case_deps(**overrides: object) -> dict[str, object]:
    """Return required dependency mocks for LintProjectUseCase. Pass overrides to customize."""
    base: dict[str, object] = {
        "document_use_case": make_linter(),
        "parser": DocumentParser(),
        "filesystem": MagicMock(),
        "telemetry": MagicMock(),
    }
    base.update(overrides)
    return base


@pytest.fixture
def parser() -> DocumentParser:
    return DocumentParser()
