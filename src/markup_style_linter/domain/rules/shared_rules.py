"""Rules that apply to both HTML and CSS documents."""

import re
from typing import Iterator

from markup_style_linter.domain.constants import PREFORMATTED_ELEMENTS
from markup_style_linter.domain.nodes import (
    Comment,
    Document,
    Element,
    Node,
    NodeKind,
    RuleSet,
    Span,
    iter_children,
)
from markup_style_linter.domain.rules import Fix, StyleRule, TextEdit, Violation

_LINE_RE = re.compile(r"[^\r\n]*(?:\r\n|\r|\n)?")
_CLASS_NAME_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
_TEMPLATE_MARKERS = ("{", "}", "$", "<", "%")


def iter_lines(source: str) -> Iterator[tuple[int, str]]:
    """Yield ``(start offset, line text without its terminator)``."""
    for match in _LINE_RE.finditer(source):
        if match.start() == match.end():
            continue
        yield match.start(), match.group().rstrip("\r\n")


def preformatted_regions(document: Document) -> list[Span]:
    """Content spans of ``<pre>``/``<textarea>`` elements, where whitespace is significant."""
    regions: list[Span] = []
    pending: list[Node] = list(document.children)
    while pending:
        node = pending.pop()
        if isinstance(node, Element) and node.name in PREFORMATTED_ELEMENTS:
            end = node.close_span.start if node.close_span else node.span.end
            regions.append(Span(node.open_span.end, max(end, node.open_span.end)))
            continue
        pending.extend(iter_children(node))
    return regions


def _inside(offset: int, regions: list[Span]) -> bool:
    return any(region.start <= offset <= region.end for region in regions)


class TrailingWhitespaceRule(StyleRule):
    """Lines must not end with spaces or tabs."""

    name = "trailing-whitespace"
    code = "S001"
    description = "Remove trailing white space."
    kinds = frozenset({NodeKind.DOCUMENT})

    def evaluate(self, node: Node, ancestors: tuple[Node, ...]) -> list[Violation]:
        if not isinstance(node, Document):
            return []
        skipped = preformatted_regions(node)
        violations: list[Violation] = []
        for start, line in iter_lines(node.source):
            content = line.rstrip(" \t")
            if len(content) == len(line):
                continue
            span = Span(start + len(content), start + len(line))
            if _inside(span.start, skipped):
                continue
            violations.append(self.violation(span, "Trailing whitespace", Fix.delete(span)))
        return violations


class NoTabsRule(StyleRule):
    """Indent with spaces only."""

    name = "no-tabs"
    code = "S002"
    description = "Indent with spaces; do not use tabs."
    kinds = frozenset({NodeKind.DOCUMENT})

    def __init__(self, indent_width: int = 2) -> None:
        self.indent_width = indent_width

    def evaluate(self, node: Node, ancestors: tuple[Node, ...]) -> list[Violation]:
        if not isinstance(node, Document):
            return []
        skipped = preformatted_regions(node)
        violations: list[Violation] = []
        for start, line in iter_lines(node.source):
            indent = line[: len(line) - len(line.lstrip(" \t"))]
            if "\t" not in indent or _inside(start, skipped):
                continue
            span = Span(start, start + len(indent))
            violations.append(
                self.violation(
                    span,
                    f"Tab used for indentation; use {self.indent_width} spaces",
                    Fix.replace(span, indent.replace("\t", " " * self.indent_width)),
                )
            )
        return violations


class CommentSpacingRule(StyleRule):
    """Comment text is separated from its delimiters by white space."""

    name = "comment-spacing"
    code = "S003"
    description = "Pad comment text with a space after the opening and before the closing delimiter."
    kinds = frozenset({NodeKind.COMMENT})

    def evaluate(self, node: Node, ancestors: tuple[Node, ...]) -> list[Violation]:
        if not isinstance(node, Comment):
            return []
        body = node.body
        # Conditional comments and preserved banners keep their exact form.
        if not body.strip() or body[0] in "[!":
            return []
        edits: list[TextEdit] = []
        if not body[0].isspace():
            edits.append(TextEdit(Span(node.body_span.start, node.body_span.start), " "))
        if not body[-1].isspace():
            edits.append(TextEdit(Span(node.body_span.end, node.body_span.end), " "))
        if not edits:
            return []
        return [
            self.violation(
                node.span, "Comment text should be padded with spaces", Fix(edits=tuple(edits))
            )
        ]


class ClassNamingRule(StyleRule):
    """Class names are lowercase words separated by hyphens, in markup and selectors alike."""

    name = "class-naming"
    code = "S004"
    description = "Use lowercase, hyphen-separated class names."
    kinds = frozenset({NodeKind.ELEMENT, NodeKind.RULESET})

    def evaluate(self, node: Node, ancestors: tuple[Node, ...]) -> list[Violation]:
        if isinstance(node, Element):
            attribute = node.get_attribute("class")
            if attribute is None:
                return []
            span = attribute.value_span or attribute.span
            return [self._bad_name(class_name, span) for class_name in node.class_names
                    if self._is_bad(class_name)]
        if isinstance(node, RuleSet):
            return [
                self._bad_name(class_name, selector.span)
                for selector in node.selectors
                for class_name in selector.class_names
                if self._is_bad(class_name)
            ]
        return []

    @staticmethod
    def _is_bad(class_name: str) -> bool:
        if any(marker in class_name for marker in _TEMPLATE_MARKERS):
            return False
        return _CLASS_NAME_RE.match(class_name) is None

    def _bad_name(self, class_name: str, span: Span) -> Violation:
        return self.violation(
            span, f"Class name '{class_name}' should be lowercase words separated by hyphens"
        )
