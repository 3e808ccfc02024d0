"""HTML frontend: builds a raw tree from ``html.parser`` events and normalizes it."""

import re
from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import Optional

from markup_style_linter.domain.constants import VOID_ELEMENTS
from markup_style_linter.domain.errors import AdapterError
from markup_style_linter.domain.nodes import (
    Attribute,
    Comment,
    Doctype,
    Document,
    Element,
    Node,
    Span,
    Text,
)
from markup_style_linter.infrastructure.parsers.positions import LineIndex

_TAG_NAME_RE = re.compile(r"</?\s*([^\s/>]+)")
_ATTRIBUTE_RE = re.compile(
    r"""(?P<name>[^\s"'>/=][^\s"'>/=]*)(?:\s*=\s*(?P<value>"[^"]*"|'[^']*'|(?![\s"'])[^\s>]*))?"""
)


@dataclass
class RawAttribute:
    """Attribute exactly as it appears in the start tag."""

    name: str
    start: int
    end: int
    name_end: int
    value: Optional[str] = None
    quote: str = ""
    value_start: Optional[int] = None


@dataclass
class RawMarkupNode:
    """One event-level construct reported by ``html.parser``, with offsets."""

    kind: str
    start: int
    end: int
    name: str = ""
    name_start: int = 0
    attributes: list[RawAttribute] = field(default_factory=list)
    children: list["RawMarkupNode"] = field(default_factory=list)
    open_end: int = 0
    close_start: Optional[int] = None
    close_end: Optional[int] = None
    close_name: Optional[str] = None
    close_name_start: Optional[int] = None
    self_closing: bool = False
    slash_start: Optional[int] = None
    slash_end: Optional[int] = None
    body_start: int = 0
    body_end: int = 0


@dataclass
class RawHtmlTree:
    """Root of the raw HTML tree plus the source it was read from."""

    source: str
    root: RawMarkupNode


class HtmlSourceParser(HTMLParser):
    """
    Event-to-tree builder on top of the standard library tokenizer.

    Offsets come from ``getpos()`` and the raw start-tag text, so spans match
    the source byte-for-byte. Character references are kept raw.
    """

    def __init__(self) -> None:
        super().__init__(convert_charrefs=False)
        self._source = ""
        self._lines = LineIndex("")
        self._root = RawMarkupNode(kind="root", start=0, end=0)
        self._stack: list[RawMarkupNode] = [self._root]
        self._text_start: Optional[int] = None

    def parse(self, source: str) -> RawHtmlTree:
        """Tokenize ``source`` and return its raw tree."""
        self.reset()
        self._source = source
        self._lines = LineIndex(source)
        self._root = RawMarkupNode(kind="root", start=0, end=len(source))
        self._stack = [self._root]
        self._text_start = None
        self.feed(source)
        self.close()
        self._flush_text(len(source))
        while len(self._stack) > 1:
            self._finish_unclosed(self._stack.pop())
        return RawHtmlTree(source=source, root=self._root)

    # -- position helpers -------------------------------------------------

    def _here(self) -> int:
        line, column = self.getpos()
        return self._lines.offset(line, column)

    def _tag_end(self, start: int) -> int:
        end = self._source.find(">", start)
        return len(self._source) if end == -1 else end + 1

    def _append(self, node: RawMarkupNode) -> None:
        self._stack[-1].children.append(node)

    def _flush_text(self, end: int) -> None:
        if self._text_start is None:
            return
        if end > self._text_start:
            self._append(RawMarkupNode(kind="text", start=self._text_start, end=end))
        self._text_start = None

    def _mark_text(self) -> None:
        if self._text_start is None:
            self._text_start = self._here()

    # -- character data ---------------------------------------------------

    def handle_data(self, data: str) -> None:
        self._mark_text()

    def handle_entityref(self, name: str) -> None:
        self._mark_text()

    def handle_charref(self, name: str) -> None:
        self._mark_text()

    # -- markup -----------------------------------------------------------

    def handle_starttag(self, tag: str, attrs: list[tuple[str, Optional[str]]]) -> None:
        node = self._start_node(self_closing=False)
        self._append(node)
        if node.name.lower() not in VOID_ELEMENTS:
            self._stack.append(node)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, Optional[str]]]) -> None:
        self._append(self._start_node(self_closing=True))

    def handle_endtag(self, tag: str) -> None:
        start = self._here()
        self._flush_text(start)
        end = self._tag_end(start)
        match = _TAG_NAME_RE.match(self._source, start)
        close_name = match.group(1) if match else tag
        close_name_start = match.start(1) if match else start + 2
        for depth in range(len(self._stack) - 1, 0, -1):
            if self._stack[depth].name.lower() == tag.lower():
                while len(self._stack) - 1 > depth:
                    self._finish_unclosed(self._stack.pop())
                node = self._stack.pop()
                node.close_start = start
                node.close_end = end
                node.close_name = close_name
                node.close_name_start = close_name_start
                node.end = end
                return
        self._append(
            RawMarkupNode(kind="stray-endtag", start=start, end=end, name=close_name)
        )

    def handle_comment(self, data: str) -> None:
        start = self._here()
        self._flush_text(start)
        body_start = start + (4 if self._source.startswith("<!--", start) else 2)
        body_end = body_start + len(data)
        self._append(
            RawMarkupNode(
                kind="comment",
                start=start,
                end=self._tag_end(body_end),
                body_start=body_start,
                body_end=body_end,
            )
        )

    def handle_decl(self, decl: str) -> None:
        start = self._here()
        self._flush_text(start)
        self._append(RawMarkupNode(kind="doctype", start=start, end=self._tag_end(start)))

    def handle_pi(self, data: str) -> None:
        start = self._here()
        self._flush_text(start)
        self._append(RawMarkupNode(kind="pi", start=start, end=self._tag_end(start)))

    def unknown_decl(self, data: str) -> None:
        start = self._here()
        self._flush_text(start)
        self._append(
            RawMarkupNode(kind="unknown-decl", start=start, end=self._tag_end(start), name=data[:20])
        )

    # -- tree building ----------------------------------------------------

    def _start_node(self, self_closing: bool) -> RawMarkupNode:
        start = self._here()
        self._flush_text(start)
        raw = self.get_starttag_text() or ""
        end = start + len(raw)
        match = _TAG_NAME_RE.match(raw)
        name = match.group(1) if match else ""
        name_start = start + (match.start(1) if match else 1)
        node = RawMarkupNode(
            kind="element",
            start=start,
            end=end,
            name=name,
            name_start=name_start,
            open_end=end,
            self_closing=self_closing,
        )
        node.attributes = self._scan_attributes(raw, start, match.end(1) if match else 1)
        if self_closing:
            slash = raw.rfind("/", 0, len(raw) - 1)
            if slash != -1:
                lead = slash
                while lead > 0 and raw[lead - 1].isspace():
                    lead -= 1
                node.slash_start = start + lead
                node.slash_end = start + slash + 1
        return node

    @staticmethod
    def _scan_attributes(raw: str, base: int, position: int) -> list[RawAttribute]:
        attributes: list[RawAttribute] = []
        limit = len(raw) - 1 if raw.endswith(">") else len(raw)
        while position < limit:
            if raw[position].isspace() or raw[position] == "/":
                position += 1
                continue
            match = _ATTRIBUTE_RE.match(raw, position, limit)
            if not match or match.end() == position:
                position += 1
                continue
            value = match.group("value")
            attribute = RawAttribute(
                name=match.group("name"),
                start=base + match.start(),
                end=base + match.end(),
                name_end=base + match.end("name"),
            )
            if value is not None:
                quote = value[0] if value[:1] in ("'", '"') else ""
                attribute.quote = quote
                attribute.value = value[1:-1] if quote else value
                attribute.value_start = base + match.start("value")
            attributes.append(attribute)
            position = match.end()
        return attributes

    @staticmethod
    def _finish_unclosed(node: RawMarkupNode) -> None:
        if node.children:
            node.end = max(node.open_end, node.children[-1].end)


class HtmlAdapter:
    """Maps a raw HTML tree onto the normalized node model."""

    def normalize(self, raw: RawHtmlTree) -> Document:
        children = tuple(self._convert(child, raw.source) for child in raw.root.children)
        return Document(language="html", source=raw.source, children=children)

    def _convert(self, node: RawMarkupNode, source: str) -> Node:
        if node.kind == "element":
            return self._element(node, source)
        if node.kind == "text":
            return Text(content=source[node.start:node.end], span=Span(node.start, node.end))
        if node.kind == "comment":
            return Comment(
                body=source[node.body_start:node.body_end],
                span=Span(node.start, node.end),
                body_span=Span(node.body_start, node.body_end),
                language="html",
            )
        if node.kind == "doctype":
            return Doctype(text=source[node.start:node.end], span=Span(node.start, node.end))
        if node.kind == "pi":
            raise AdapterError("Processing instructions are not supported", "processing-instruction", node.start)
        if node.kind == "unknown-decl":
            raise AdapterError(
                f"Unsupported markup declaration '<![{node.name}'", "unknown-declaration", node.start
            )
        if node.kind == "stray-endtag":
            raise AdapterError(
                f"Closing tag </{node.name}> has no matching open element", "stray-end-tag", node.start
            )
        raise AdapterError(f"Unknown raw node kind '{node.kind}'", node.kind, node.start)

    def _element(self, node: RawMarkupNode, source: str) -> Element:
        attributes = tuple(
            Attribute(
                name=a.name,
                value=a.value,
                quote=a.quote,
                span=Span(a.start, a.end),
                name_span=Span(a.start, a.name_end),
                value_span=Span(a.value_start, a.end) if a.value_start is not None else None,
            )
            for a in node.attributes
        )
        close_span = close_name_span = None
        if node.close_start is not None and node.close_end is not None:
            close_span = Span(node.close_start, node.close_end)
            if node.close_name is not None and node.close_name_start is not None:
                close_name_span = Span(
                    node.close_name_start, node.close_name_start + len(node.close_name)
                )
        slash_span = None
        if node.slash_start is not None and node.slash_end is not None:
            slash_span = Span(node.slash_start, node.slash_end)
        return Element(
            tag_name=node.name,
            attributes=attributes,
            children=tuple(self._convert(child, source) for child in node.children),
            span=Span(node.start, node.end),
            open_span=Span(node.start, node.open_end),
            name_span=Span(node.name_start, node.name_start + len(node.name)),
            close_span=close_span,
            close_name_span=close_name_span,
            close_tag_name=node.close_name,
            self_closing=node.self_closing,
            slash_span=slash_span,
        )
