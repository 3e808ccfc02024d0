"""HTML markup rules."""

from typing import Optional

from markup_style_linter.domain.config import QuoteStyle
from markup_style_linter.domain.constants import (
    BOOLEAN_ATTRIBUTES,
    HTML5_DOCTYPE,
    JAVASCRIPT_MIME_TYPES,
    VOID_ELEMENTS,
)
from markup_style_linter.domain.nodes import (
    Attribute,
    Doctype,
    Document,
    Element,
    Node,
    NodeKind,
    Span,
)
from markup_style_linter.domain.rules import Fix, Severity, StyleRule, TextEdit, Violation

# Foreign content keeps its camelCase names (viewBox, linearGradient, ...).
_FOREIGN_ROOTS = frozenset({"svg", "math"})


def _in_foreign_content(node: Element, ancestors: tuple[Node, ...]) -> bool:
    if node.name in _FOREIGN_ROOTS:
        return True
    return any(isinstance(a, Element) and a.name in _FOREIGN_ROOTS for a in ancestors)


class DoctypeRule(StyleRule):
    """HTML documents start with the HTML5 doctype."""

    name = "doctype"
    code = "H001"
    description = "Use the HTML5 doctype."
    default_severity = Severity.ERROR
    kinds = frozenset({NodeKind.DOCUMENT, NodeKind.DOCTYPE})

    def evaluate(self, node: Node, ancestors: tuple[Node, ...]) -> list[Violation]:
        if isinstance(node, Doctype):
            return self._check_declaration(node)
        if isinstance(node, Document) and node.language == "html":
            return self._check_missing(node)
        return []

    def _check_declaration(self, node: Doctype) -> list[Violation]:
        if node.text == HTML5_DOCTYPE:
            return []
        normalized = " ".join(node.text[2:-1].split()).lower()
        if normalized == "doctype html":
            message = f"Write the doctype as '{HTML5_DOCTYPE}'"
        else:
            message = f"Legacy doctype; use '{HTML5_DOCTYPE}'"
        return [self.violation(node.span, message, Fix.replace(node.span, HTML5_DOCTYPE))]

    def _check_missing(self, document: Document) -> list[Violation]:
        for child in document.children:
            if isinstance(child, Doctype):
                return []
            if isinstance(child, Element) and child.name == "html":
                return [
                    self.violation(
                        Span(0, 0),
                        "Missing doctype",
                        Fix.insert(0, f"{HTML5_DOCTYPE}\n"),
                    )
                ]
        return []


class TagCaseRule(StyleRule):
    """Element names are written in lowercase."""

    name = "tag-case"
    code = "H002"
    description = "Use lowercase element names."
    default_severity = Severity.ERROR
    kinds = frozenset({NodeKind.ELEMENT})

    def evaluate(self, node: Node, ancestors: tuple[Node, ...]) -> list[Violation]:
        if not isinstance(node, Element):
            return []
        if _in_foreign_content(node, ancestors):
            return []
        edits: list[TextEdit] = []
        if node.tag_name != node.tag_name.lower():
            edits.append(TextEdit(node.name_span, node.tag_name.lower()))
        close_name = node.close_tag_name
        if close_name and node.close_name_span and close_name != close_name.lower():
            edits.append(TextEdit(node.close_name_span, close_name.lower()))
        if not edits:
            return []
        written = node.tag_name if node.tag_name != node.name else close_name
        return [
            self.violation(
                node.open_span,
                f"Uppercase tag name '{written}'; use '{node.name}'",
                Fix(edits=tuple(edits)),
            )
        ]


class AttrCaseRule(StyleRule):
    """Attribute names are written in lowercase."""

    name = "attr-case"
    code = "H003"
    description = "Use lowercase attribute names."
    default_severity = Severity.ERROR
    kinds = frozenset({NodeKind.ELEMENT})

    def evaluate(self, node: Node, ancestors: tuple[Node, ...]) -> list[Violation]:
        if not isinstance(node, Element):
            return []
        if _in_foreign_content(node, ancestors):
            return []
        return [
            self.violation(
                attribute.name_span,
                f"Uppercase attribute name '{attribute.name}'; use '{attribute.lower_name}'",
                Fix.replace(attribute.name_span, attribute.lower_name),
            )
            for attribute in node.attributes
            if attribute.name != attribute.lower_name
        ]


class AttrQuotesRule(StyleRule):
    """Attribute values are quoted with the configured quote character."""

    name = "attr-quotes"
    code = "H004"
    description = "Use double quotes around attribute values."
    default_severity = Severity.ERROR
    kinds = frozenset({NodeKind.ELEMENT})

    def __init__(self, quote_style: QuoteStyle = QuoteStyle.DOUBLE) -> None:
        self.quote = quote_style.char

    def evaluate(self, node: Node, ancestors: tuple[Node, ...]) -> list[Violation]:
        if not isinstance(node, Element):
            return []
        violations: list[Violation] = []
        for attribute in node.attributes:
            if attribute.value is None or attribute.value_span is None:
                continue
            if attribute.quote == self.quote or self.quote in attribute.value:
                continue
            violations.append(
                self.violation(
                    attribute.value_span,
                    f"Quote the value of '{attribute.name}' with {self.quote}",
                    Fix.replace(attribute.value_span, f"{self.quote}{attribute.value}{self.quote}"),
                )
            )
        return violations


class BooleanAttrRule(StyleRule):
    """Boolean attributes are written without a value."""

    name = "boolean-attr"
    code = "H005"
    description = "Omit values of boolean attributes."
    kinds = frozenset({NodeKind.ELEMENT})

    def evaluate(self, node: Node, ancestors: tuple[Node, ...]) -> list[Violation]:
        if not isinstance(node, Element):
            return []
        violations: list[Violation] = []
        for attribute in node.attributes:
            if attribute.lower_name not in BOOLEAN_ATTRIBUTES or attribute.value is None:
                continue
            # hidden="until-found" is an enumerated state, not a boolean.
            if attribute.lower_name == "hidden" and attribute.value.lower() == "until-found":
                continue
            violations.append(
                self.violation(
                    attribute.span,
                    f"Boolean attribute '{attribute.name}' should not have a value",
                    Fix.replace(attribute.span, attribute.name),
                )
            )
        return violations


class TypeAttrRule(StyleRule):
    """Omit ``type`` where it only restates the default for stylesheets and scripts."""

    name = "type-attr"
    code = "H006"
    description = "Omit type attributes for style sheets and scripts."
    kinds = frozenset({NodeKind.ELEMENT})

    def evaluate(self, node: Node, ancestors: tuple[Node, ...]) -> list[Violation]:
        if not isinstance(node, Element):
            return []
        if node.name not in ("link", "style", "script"):
            return []
        index = self._type_index(node)
        if index is None:
            return []
        attribute = node.attributes[index]
        if not self._is_redundant(node, (attribute.value or "").strip().lower()):
            return []
        removal_start = node.attributes[index - 1].span.end if index else node.name_span.end
        removal = Span(removal_start, attribute.span.end)
        return [
            self.violation(
                attribute.span,
                f"Redundant type attribute on <{node.name}>",
                Fix.delete(removal),
            )
        ]

    @staticmethod
    def _type_index(node: Element) -> Optional[int]:
        for index, attribute in enumerate(node.attributes):
            if attribute.lower_name == "type":
                return index if attribute.value is not None else None
        return None

    @staticmethod
    def _is_redundant(node: Element, value: str) -> bool:
        if node.name == "script":
            return value in JAVASCRIPT_MIME_TYPES
        if node.name == "style":
            return value == "text/css"
        rel: Optional[Attribute] = node.get_attribute("rel")
        is_stylesheet = rel is not None and "stylesheet" in (rel.value or "").lower().split()
        return is_stylesheet and value == "text/css"


class VoidSlashRule(StyleRule):
    """Void elements are not self-closed."""

    name = "void-slash"
    code = "H007"
    description = "Do not close void elements with a trailing slash."
    kinds = frozenset({NodeKind.ELEMENT})

    def evaluate(self, node: Node, ancestors: tuple[Node, ...]) -> list[Violation]:
        if not isinstance(node, Element):
            return []
        if node.name not in VOID_ELEMENTS or not node.self_closing or node.slash_span is None:
            return []
        slash = node.slash_span
        # An unquoted value can swallow the slash (<img src=a/>); leave it alone.
        if any(attribute.span.overlaps(slash) for attribute in node.attributes):
            return []
        return [
            self.violation(
                node.open_span,
                f"Void element <{node.name}> should not be self-closed",
                Fix.delete(slash),
            )
        ]


class HtmlLangRule(StyleRule):
    """The root element declares the document language."""

    name = "html-lang"
    code = "H008"
    description = "Declare a lang attribute on the html element."
    kinds = frozenset({NodeKind.ELEMENT})

    def evaluate(self, node: Node, ancestors: tuple[Node, ...]) -> list[Violation]:
        if not isinstance(node, Element):
            return []
        if node.name != "html":
            return []
        lang = node.get_attribute("lang")
        if lang is not None and (lang.value or "").strip():
            return []
        return [self.violation(node.open_span, "The <html> element should declare a lang attribute")]


class ClassPrefixRule(StyleRule):
    """Nested elements carry a class prefixed by their closest classed ancestor."""

    name = "class-prefix"
    code = "H009"
    description = "Prefix class names with the closest parent's base class."
    enabled_by_default = False
    kinds = frozenset({NodeKind.ELEMENT})

    def evaluate(self, node: Node, ancestors: tuple[Node, ...]) -> list[Violation]:
        if not isinstance(node, Element) or not node.class_names:
            return []
        base = self._closest_base(ancestors)
        if base is None:
            return []
        if any(name == base or name.startswith(f"{base}-") for name in node.class_names):
            return []
        attribute = node.get_attribute("class")
        if attribute is None:
            return []
        return [
            self.violation(
                attribute.span,
                f"Classes on <{node.name}> should be prefixed with '{base}-'",
            )
        ]

    @staticmethod
    def _closest_base(ancestors: tuple[Node, ...]) -> Optional[str]:
        for ancestor in reversed(ancestors):
            if isinstance(ancestor, Element) and ancestor.class_names:
                return ancestor.class_names[0]
        return None
