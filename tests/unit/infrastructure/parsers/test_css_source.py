"""Unit tests for the CSS frontend."""

import pytest

from markup_style_linter.domain.errors import AdapterError
from markup_style_linter.domain.nodes import AtRule, Comment, Declaration, RuleSet, Span
from markup_style_linter.infrastructure.parsers import parse_document
from markup_style_linter.infrastructure.parsers.positions import CollapsedNewlines, LineIndex


def _first_rule(source: str) -> RuleSet:
    rule = parse_document(source, "css").children[0]
    assert isinstance(rule, RuleSet)
    return rule


class TestDeclarations:
    """Declaration spans and separators."""

    def test_declaration_offsets(self) -> None:
        rule = _first_rule(".a{margin:0px;}")
        assert rule.selector_text == ".a"
        assert rule.prelude_span == Span(0, 2)
        assert rule.span == Span(0, 15)
        (declaration,) = rule.children
        assert isinstance(declaration, Declaration)
        assert declaration.name == "margin"
        assert declaration.name_span == Span(3, 9)
        assert declaration.separator == ":"
        assert declaration.separator_span == Span(9, 10)
        assert declaration.terminated
        assert not declaration.important
        (token,) = declaration.value_tokens
        assert (token.type, token.text, token.span) == ("dimension", "0px", Span(10, 13))

    def test_important_and_unterminated(self) -> None:
        (declaration,) = _first_rule("a { color: red !important }").children
        assert isinstance(declaration, Declaration)
        assert declaration.important
        assert declaration.span == Span(4, 25)
        assert not declaration.terminated

    def test_tokens_inside_functions_are_tagged(self) -> None:
        (declaration,) = _first_rule("a { width: calc(0px + 1px); }").children
        assert isinstance(declaration, Declaration)
        assert [t.text for t in declaration.value_tokens] == ["0px", "+", "1px"]
        assert {t.function for t in declaration.value_tokens} == {"calc"}

    def test_source_keeps_line_endings_as_written(self) -> None:
        document = parse_document("a {\r\n  color: red;\r\n}", "css")
        assert document.source == "a {\r\n  color: red;\r\n}"
        (declaration,) = document.children[0].children  # type: ignore[union-attr]
        assert isinstance(declaration, Declaration)
        assert declaration.name_span == Span(7, 12)
        assert document.source[declaration.span.start:declaration.span.end] == "color: red"
        assert document.children[0].span == Span(0, len(document.source))

    def test_escaped_string_spans_the_whole_token(self) -> None:
        (declaration,) = _first_rule("a{content:'it\\'s'}").children
        assert isinstance(declaration, Declaration)
        (token,) = declaration.value_tokens
        assert (token.type, token.text, token.span) == ("string", "'it\\'s'", Span(10, 17))
        assert declaration.span == Span(2, 17)

    def test_escaped_unit_spans_the_whole_token(self) -> None:
        (declaration,) = _first_rule("a{width:1\\70 x}").children
        assert isinstance(declaration, Declaration)
        (token,) = declaration.value_tokens
        assert (token.type, token.text, token.span) == ("dimension", "1\\70 x", Span(8, 14))
        assert not declaration.terminated

    def test_escaped_property_name(self) -> None:
        (declaration,) = _first_rule("a{w\\69 dth: 0}").children
        assert isinstance(declaration, Declaration)
        assert declaration.name == "w\\69 dth"
        assert declaration.separator == ": "

    def test_offsets_count_characters_not_bytes(self) -> None:
        _, margin = _first_rule("a{content:'é';margin:0px}").children
        assert isinstance(margin, Declaration)
        (token,) = margin.value_tokens
        assert token.span == Span(21, 24)


class TestSelectors:
    """Selector splitting and compound counting."""

    def test_selector_list(self) -> None:
        rule = _first_rule("ul > li a, .x:hover {}")
        first, second = rule.selectors
        assert first.text == "ul > li a"
        assert first.compound_count == 3
        assert second.text == ".x:hover"
        assert second.compound_count == 1
        assert second.class_names == ("x",)

    def test_ids_and_nesting_marker(self) -> None:
        outer = _first_rule("#main .btn { & .icon { } }")
        assert outer.selectors[0].id_names == ("main",)
        assert outer.selectors[0].class_names == ("btn",)
        (inner,) = outer.children
        assert isinstance(inner, RuleSet)
        assert inner.selectors[0].nested
        assert inner.selectors[0].compound_count == 2


class TestStylesheetStructure:
    """At-rules, comments and parse errors."""

    def test_at_rules(self) -> None:
        media, import_rule = parse_document(
            '@media screen { a { color: red; } }\n@import url("x.css");', "css"
        ).children
        assert isinstance(media, AtRule)
        assert media.keyword == "media"
        assert media.prelude == "screen"
        assert isinstance(media.children[0], RuleSet)
        assert isinstance(import_rule, AtRule)
        assert import_rule.keyword == "import"
        assert import_rule.children == ()
        assert import_rule.span == Span(36, 57)

    def test_comments_are_kept(self) -> None:
        comment, rule = parse_document("/* c */ a {}", "css").children
        assert isinstance(comment, Comment)
        assert comment.body == " c "
        assert comment.span == Span(0, 7)
        assert comment.body_span == Span(2, 5)
        assert isinstance(rule, RuleSet)

    def test_parse_error_raises_adapter_error(self) -> None:
        with pytest.raises(AdapterError):
            parse_document(".broken", "css")

    def test_empty_stylesheet(self) -> None:
        assert parse_document("", "css").children == ()


class TestLineIndex:
    """Line/column conversions."""

    def test_offset_and_position(self) -> None:
        index = LineIndex("ab\ncd\n")
        assert index.offset(2, 1) == 4
        assert index.position(4) == (2, 2)
        assert index.position(0) == (1, 1)

    def test_out_of_range_line(self) -> None:
        with pytest.raises(ValueError):
            LineIndex("a").offset(3, 0)


class TestCollapsedNewlines:
    """Offsets in CRLF-collapsed text map back to the text as written."""

    def test_offsets_shift_past_each_collapsed_pair(self) -> None:
        newlines = CollapsedNewlines("a\r\nb\r\nc")
        assert [newlines.original_offset(i) for i in range(6)] == [0, 1, 3, 4, 6, 7]

    def test_lone_carriage_returns_keep_offsets(self) -> None:
        newlines = CollapsedNewlines("a\rb\fc")
        assert newlines.original_offset(4) == 4
