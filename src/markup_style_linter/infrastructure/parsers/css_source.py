"""CSS frontend: tinycss2 parse trees normalized into the node model."""

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

import tinycss2
import tinycss2.ast

from markup_style_linter.domain.errors import AdapterError
from markup_style_linter.domain.nodes import (
    AtRule,
    Comment,
    Declaration,
    Document,
    Node,
    RuleSet,
    Selector,
    Span,
    ValueToken,
)
from markup_style_linter.infrastructure.parsers.positions import CollapsedNewlines, LineIndex

_IMPORTANT_RE = re.compile(r"\s*!\s*important", re.IGNORECASE)
_TERMINATOR_RE = re.compile(r"(?:\s|/\*.*?\*/)*;", re.DOTALL)
_UNICODE_RANGE_RE = re.compile(r"[uU]\+[0-9a-fA-F?]{1,6}(?:-[0-9a-fA-F]{1,6})?")
_COMBINATORS = frozenset({">", "+", "~"})
_BLOCK_CLOSERS = {"() block": ")", "[] block": "]", "{} block": "}", "function": ")"}
_DIGITS = frozenset("0123456789")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_SIGNS = ("+", "-")


@dataclass(frozen=True)
class RawCssTree:
    """tinycss2 top-level nodes, the preprocessed text they refer to, and the text as written."""

    source: str
    nodes: list[object]
    original: str = ""


class CssSourceParser:
    """Runs tinycss2 over a stylesheet, keeping comments and whitespace."""

    @staticmethod
    def normalize_newlines(source: str) -> str:
        """Apply the same preprocessing tinycss2 does, so offsets line up."""
        return (
            source.replace("\0", "\ufffd")
            .replace("\r\n", "\n")
            .replace("\r", "\n")
            .replace("\f", "\n")
        )

    def parse(self, source: str) -> RawCssTree:
        text = self.normalize_newlines(source)
        nodes = tinycss2.parse_stylesheet(text, skip_comments=False, skip_whitespace=False)
        return RawCssTree(source=text, nodes=list(nodes), original=source)


class CssAdapter:
    """Maps tinycss2 rules, declarations and tokens onto the node model."""

    def normalize(self, raw: RawCssTree) -> Document:
        original = raw.original or raw.source
        converter = _CssConverter(raw.source, original)
        return Document(language="css", source=original, children=converter.convert_all(raw.nodes))


# -- token scanning ---------------------------------------------------------
# tinycss2 reports where a token starts but not where it ends, and its values
# are unescaped; ends are scanned from the source text.


def _escape_end(source: str, offset: int) -> int:
    """End of the escape sequence whose backslash is at ``offset``."""
    index = offset + 1
    if source[index:index + 1] in _HEX_DIGITS:
        stop = min(index + 6, len(source))
        while index < stop and source[index] in _HEX_DIGITS:
            index += 1
        if source[index:index + 1] in (" ", "\t", "\n"):
            index += 1
        return index
    return min(index + 1, len(source))


def _name_end(source: str, offset: int) -> int:
    index = offset
    while index < len(source):
        char = source[index]
        if char in "-_" or (char.isascii() and char.isalnum()) or ord(char) >= 0x80:
            index += 1
        elif char == "\\" and source[index + 1:index + 2] not in ("", "\n"):
            index = _escape_end(source, index)
        else:
            break
    return index


def _digits_end(source: str, offset: int) -> int:
    index = offset
    while source[index:index + 1] in _DIGITS:
        index += 1
    return index


def _number_end(source: str, offset: int) -> int:
    index = offset + 1 if source[offset:offset + 1] in _SIGNS else offset
    index = _digits_end(source, index)
    if source[index:index + 1] == "." and source[index + 1:index + 2] in _DIGITS:
        index = _digits_end(source, index + 1)
    if source[index:index + 1] in ("e", "E"):
        exponent = index + 1
        if source[exponent:exponent + 1] in _SIGNS:
            exponent += 1
        if source[exponent:exponent + 1] in _DIGITS:
            index = _digits_end(source, exponent)
    return index


def _string_end(source: str, offset: int) -> int:
    quote = source[offset]
    index = offset + 1
    while index < len(source):
        char = source[index]
        if char == quote:
            return index + 1
        if char == "\n":
            return index
        index += 2 if char == "\\" else 1
    return len(source)


def _url_end(source: str, offset: int) -> int:
    index = _name_end(source, offset) + 1
    while index < len(source):
        char = source[index]
        if char == ")":
            return index + 1
        index = _escape_end(source, index) if char == "\\" else index + 1
    return len(source)


class _CssConverter:
    """
    Per-document conversion state.

    Positions are worked out in the preprocessed text tinycss2 saw; spans and
    text handed to nodes refer to the stylesheet as written.
    """

    def __init__(self, source: str, original: str) -> None:
        self.source = source
        self.original = original
        self.lines = LineIndex(source)
        self.newlines = CollapsedNewlines(original)

    # -- positions --------------------------------------------------------

    def start_of(self, node: object) -> int:
        return self.lines.offset(node.source_line, node.source_column - 1)  # type: ignore[attr-defined]

    def end_of(self, token: object) -> int:
        """End offset of a token or block, scanned from its reported start."""
        start = self.start_of(token)
        kind = getattr(token, "type", "")
        if kind == "whitespace":
            return start + len(token.value)  # type: ignore[attr-defined]
        if kind == "comment":
            close = self.source.find("*/", start + 2)
            return len(self.source) if close == -1 else close + 2
        if kind == "string":
            return _string_end(self.source, start)
        if kind == "url":
            return _url_end(self.source, start)
        if kind == "ident":
            return _name_end(self.source, start)
        if kind in ("hash", "at-keyword"):
            return _name_end(self.source, start + 1)
        if kind == "number":
            return _number_end(self.source, start)
        if kind == "percentage":
            return _number_end(self.source, start) + 1
        if kind == "dimension":
            return _name_end(self.source, _number_end(self.source, start))
        if kind == "literal":
            return start + len(token.value)  # type: ignore[attr-defined]
        if kind == "unicode-range":
            match = _UNICODE_RANGE_RE.match(self.source, start)
            if match:
                return match.end()
        if kind in _BLOCK_CLOSERS:
            children = token.arguments if kind == "function" else token.content  # type: ignore[attr-defined]
            if children:
                search_from = self.end_of(children[-1])
            elif kind == "function":
                search_from = _name_end(self.source, start) + 1
            else:
                search_from = start + 1
            close = self.source.find(_BLOCK_CLOSERS[kind], search_from)
            return len(self.source) if close == -1 else close + 1
        return start + len(token.serialize())  # type: ignore[attr-defined]

    def find_after(self, char: str, offset: int) -> int:
        found = self.source.find(char, offset)
        return len(self.source) if found == -1 else found

    def span(self, start: int, end: int) -> Span:
        return Span(self.newlines.original_offset(start), self.newlines.original_offset(end))

    def text(self, start: int, end: int) -> str:
        span = self.span(start, end)
        return self.original[span.start:span.end]

    # -- nodes ------------------------------------------------------------

    def convert_all(self, nodes: Iterable[object]) -> tuple[Node, ...]:
        converted: list[Node] = []
        for node in nodes:
            kind = getattr(node, "type", None)
            if kind == "whitespace":
                continue
            if kind == "qualified-rule":
                converted.append(self.ruleset(node))  # type: ignore[arg-type]
            elif kind == "at-rule":
                converted.append(self.at_rule(node))  # type: ignore[arg-type]
            elif kind == "declaration":
                converted.append(self.declaration(node))  # type: ignore[arg-type]
            elif kind == "comment":
                converted.append(self.comment(node))  # type: ignore[arg-type]
            elif kind == "error":
                raise self.parse_error(node)
            else:
                offset = self.start_of(node) if hasattr(node, "source_line") else None
                raise AdapterError(f"Unexpected CSS construct '{kind}'", str(kind), offset)
        return tuple(converted)

    def parse_error(self, error: object) -> AdapterError:
        return AdapterError(
            f"CSS parse error ({error.kind}): {error.message}",  # type: ignore[attr-defined]
            error.kind,  # type: ignore[attr-defined]
            self.newlines.original_offset(self.start_of(error)),
        )

    def block_children(self, content: Optional[Sequence[object]]) -> tuple[Node, ...]:
        if not content:
            return ()
        return self.convert_all(
            tinycss2.parse_blocks_contents(content, skip_comments=False, skip_whitespace=True)
        )

    def block_span_end(self, open_brace: int, content: Optional[Sequence[object]]) -> int:
        search_from = self.end_of(content[-1]) if content else open_brace + 1
        close = self.source.find("}", search_from)
        return len(self.source) if close == -1 else close + 1

    def ruleset(self, rule: tinycss2.ast.QualifiedRule) -> RuleSet:
        start = self.start_of(rule)
        prelude = list(rule.prelude)
        prelude_end = self.end_of(prelude[-1]) if prelude else start
        brace = self.find_after("{", prelude_end)
        return RuleSet(
            selector_text=self.text(start, brace).strip(),
            selectors=tuple(self.selectors(prelude)),
            children=self.block_children(rule.content),
            span=self.span(start, self.block_span_end(brace, rule.content)),
            prelude_span=self.span(start, start + len(self.source[start:brace].rstrip())),
        )

    def at_rule(self, rule: tinycss2.ast.AtRule) -> AtRule:
        start = self.start_of(rule)
        keyword_end = _name_end(self.source, start + 1)
        prelude = list(rule.prelude)
        prelude_end = self.end_of(prelude[-1]) if prelude else keyword_end
        if rule.content is None:
            terminator = self.source.find(";", prelude_end)
            end = prelude_end if terminator == -1 else terminator + 1
            return AtRule(
                keyword=rule.lower_at_keyword,
                prelude=self.text(keyword_end, prelude_end).strip(),
                children=(),
                span=self.span(start, end),
            )
        brace = self.find_after("{", prelude_end)
        return AtRule(
            keyword=rule.lower_at_keyword,
            prelude=self.text(keyword_end, brace).strip(),
            children=self.block_children(rule.content),
            span=self.span(start, self.block_span_end(brace, rule.content)),
        )

    def comment(self, token: tinycss2.ast.Comment) -> Comment:
        start = self.start_of(token)
        body_start = start + 2
        body_end = min(body_start + len(token.value), len(self.source))
        return Comment(
            body=self.text(body_start, body_end),
            span=self.span(start, self.end_of(token)),
            body_span=self.span(body_start, body_end),
            language="css",
        )

    def declaration(self, decl: tinycss2.ast.Declaration) -> Declaration:
        start = self.start_of(decl)
        name_end = _name_end(self.source, start)
        colon = self.source.find(":", name_end)
        colon_end = name_end if colon == -1 else colon + 1
        significant = [t for t in decl.value if t.type not in ("whitespace", "comment")]
        if significant:
            value_start = self.start_of(significant[0])
            value_end = self.end_of(significant[-1])
        else:
            value_start = value_end = colon_end
        if decl.important:
            match = _IMPORTANT_RE.match(self.source, value_end)
            if match:
                value_end = match.end()
        return Declaration(
            name=self.text(start, name_end),
            value_tokens=tuple(self.flatten(decl.value, None)),
            span=self.span(start, value_end),
            name_span=self.span(start, name_end),
            separator=self.text(name_end, value_start),
            separator_span=self.span(name_end, value_start),
            important=decl.important,
            terminated=_TERMINATOR_RE.match(self.source, value_end) is not None,
        )

    def flatten(self, tokens: Iterable[object], function: Optional[str]) -> Iterable[ValueToken]:
        """Leaf value tokens in source order, tagged with their enclosing function."""
        for token in tokens:
            kind = token.type  # type: ignore[attr-defined]
            if kind in ("whitespace", "comment"):
                continue
            if kind == "error":
                raise self.parse_error(token)
            if kind == "function":
                yield from self.flatten(token.arguments, token.lower_name)  # type: ignore[attr-defined]
                continue
            if kind in ("() block", "[] block", "{} block"):
                yield from self.flatten(token.content, function)  # type: ignore[attr-defined]
                continue
            start = self.start_of(token)
            end = self.end_of(token)
            yield ValueToken(type=kind, text=self.text(start, end), span=self.span(start, end), function=function)

    # -- selectors --------------------------------------------------------

    def selectors(self, prelude: list[object]) -> list[Selector]:
        groups: list[list[object]] = [[]]
        for token in prelude:
            if getattr(token, "type", "") == "literal" and token.value == ",":  # type: ignore[attr-defined]
                groups.append([])
            else:
                groups[-1].append(token)
        return [s for s in (self.selector(group) for group in groups) if s is not None]

    def selector(self, tokens: list[object]) -> Optional[Selector]:
        significant = [t for t in tokens if t.type not in ("whitespace", "comment")]  # type: ignore[attr-defined]
        if not significant:
            return None
        start = self.start_of(significant[0])
        end = self.end_of(significant[-1])
        compounds = 0
        in_compound = False
        nested = False
        classes: list[str] = []
        ids: list[str] = []
        previous: object = None
        for token in tokens:
            kind = token.type  # type: ignore[attr-defined]
            value = getattr(token, "value", None)
            if kind in ("whitespace", "comment") or (kind == "literal" and value in _COMBINATORS):
                in_compound = False
                previous = token
                continue
            if not in_compound:
                compounds += 1
                in_compound = True
            if kind == "literal" and value == "&":
                nested = True
            if kind == "ident" and getattr(previous, "type", "") == "literal" and previous.value == ".":  # type: ignore[attr-defined]
                classes.append(token.value)  # type: ignore[attr-defined]
            if kind == "hash" and token.is_identifier:  # type: ignore[attr-defined]
                ids.append(token.value)  # type: ignore[attr-defined]
            previous = token
        return Selector(
            text=self.text(start, end),
            span=self.span(start, end),
            compound_count=compounds,
            class_names=tuple(classes),
            id_names=tuple(ids),
            nested=nested,
        )
