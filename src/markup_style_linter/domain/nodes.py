"""Normalized node model shared by the HTML and CSS frontends."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class NodeKind(str, Enum):
    """Variant tag of a node. Rules declare the kinds they inspect."""

    DOCUMENT = "document"
    ELEMENT = "element"
    DOCTYPE = "doctype"
    COMMENT = "comment"
    TEXT = "text"
    RULESET = "ruleset"
    AT_RULE = "at-rule"
    DECLARATION = "declaration"


@dataclass(frozen=True)
class Span:
    """
    Half-open offset range ``[start, end)`` into the document source.

    Offsets index the decoded ``str``, so they count code points rather than
    bytes of the encoded file. Reporters turn them into line and column.
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid span [{self.start}, {self.end})")

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def overlaps(self, other: "Span") -> bool:
        """True if the two ranges share at least one offset."""
        return self.start < other.end and other.start < self.end

    def touches(self, other: "Span") -> bool:
        """True if the ranges overlap or meet; empty spans touch their boundaries."""
        return self.start <= other.end and other.start <= self.end

    def contains(self, offset: int) -> bool:
        return self.start <= offset < self.end


@dataclass(frozen=True)
class Attribute:
    """An HTML attribute as written in the start tag."""

    name: str
    value: Optional[str]
    quote: str
    span: Span
    name_span: Span
    value_span: Optional[Span] = None

    @property
    def lower_name(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class Element:
    """An HTML element with its open tag, attributes and children."""

    tag_name: str
    attributes: tuple[Attribute, ...]
    children: tuple["Node", ...]
    span: Span
    open_span: Span
    name_span: Span
    close_span: Optional[Span] = None
    close_name_span: Optional[Span] = None
    close_tag_name: Optional[str] = None
    self_closing: bool = False
    slash_span: Optional[Span] = None
    kind: NodeKind = field(default=NodeKind.ELEMENT, init=False)

    @property
    def name(self) -> str:
        return self.tag_name.lower()

    def get_attribute(self, name: str) -> Optional[Attribute]:
        """Return the first attribute matching ``name`` case-insensitively."""
        wanted = name.lower()
        for attribute in self.attributes:
            if attribute.lower_name == wanted:
                return attribute
        return None

    @property
    def class_names(self) -> tuple[str, ...]:
        attribute = self.get_attribute("class")
        if attribute is None or not attribute.value:
            return ()
        return tuple(attribute.value.split())


@dataclass(frozen=True)
class Doctype:
    """A ``<!DOCTYPE ...>`` declaration."""

    text: str
    span: Span
    kind: NodeKind = field(default=NodeKind.DOCTYPE, init=False)


@dataclass(frozen=True)
class Comment:
    """An HTML or CSS comment; ``body`` excludes the delimiters."""

    body: str
    span: Span
    body_span: Span
    language: str
    kind: NodeKind = field(default=NodeKind.COMMENT, init=False)


@dataclass(frozen=True)
class Text:
    """A run of character data between markup."""

    content: str
    span: Span
    kind: NodeKind = field(default=NodeKind.TEXT, init=False)


@dataclass(frozen=True)
class ValueToken:
    """A leaf token of a declaration value.

    ``function`` names the innermost CSS function the token sits in, if any.
    """

    type: str
    text: str
    span: Span
    function: Optional[str] = None


@dataclass(frozen=True)
class Declaration:
    """A CSS ``property: value`` pair."""

    name: str
    value_tokens: tuple[ValueToken, ...]
    span: Span
    name_span: Span
    separator: str
    separator_span: Span
    important: bool = False
    terminated: bool = True
    kind: NodeKind = field(default=NodeKind.DECLARATION, init=False)

    @property
    def lower_name(self) -> str:
        return self.name.lower()

    @property
    def is_custom_property(self) -> bool:
        return self.name.startswith("--")


@dataclass(frozen=True)
class Selector:
    """One complex selector out of a comma-separated selector list."""

    text: str
    span: Span
    compound_count: int
    class_names: tuple[str, ...] = ()
    id_names: tuple[str, ...] = ()
    nested: bool = False


@dataclass(frozen=True)
class RuleSet:
    """A CSS qualified rule: selectors plus a block."""

    selector_text: str
    selectors: tuple[Selector, ...]
    children: tuple["Node", ...]
    span: Span
    prelude_span: Span
    kind: NodeKind = field(default=NodeKind.RULESET, init=False)


@dataclass(frozen=True)
class AtRule:
    """A CSS at-rule such as ``@media`` or ``@import``."""

    keyword: str
    prelude: str
    children: tuple["Node", ...]
    span: Span
    kind: NodeKind = field(default=NodeKind.AT_RULE, init=False)


@dataclass(frozen=True)
class Document:
    """Root of a parsed source file. Immutable once built."""

    language: str
    source: str
    children: tuple["Node", ...]
    kind: NodeKind = field(default=NodeKind.DOCUMENT, init=False)

    @property
    def span(self) -> Span:
        return Span(0, len(self.source))


Node = Union[Document, Element, Doctype, Comment, Text, RuleSet, AtRule, Declaration]


def iter_children(node: Node) -> tuple[Node, ...]:
    """Children of a node in document order; leaves return an empty tuple."""
    return getattr(node, "children", ())


def describe(node: Node) -> str:
    """Short human label for a node, used in diagnostics."""
    if isinstance(node, Element):
        return f"<{node.tag_name}>"
    if isinstance(node, Declaration):
        return f"declaration '{node.name}'"
    if isinstance(node, RuleSet):
        return f"rule '{node.selector_text}'"
    if isinstance(node, AtRule):
        return f"@{node.keyword}"
    return node.kind.value
