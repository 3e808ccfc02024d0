"""Unit tests for the HTML frontend."""

import pytest

from markup_style_linter.domain.errors import AdapterError
from markup_style_linter.domain.nodes import Comment, Doctype, Element, Span, Text
from markup_style_linter.infrastructure.parsers import DocumentParser, parse_document


class TestHtmlSpans:
    """Offsets of elements, attributes and closing tags."""

    def test_element_and_attribute_spans(self) -> None:
        document = parse_document('<DIV class="Btn">x</DIV>', "html")
        (div,) = document.children
        assert isinstance(div, Element)
        assert div.tag_name == "DIV"
        assert div.span == Span(0, 24)
        assert div.open_span == Span(0, 17)
        assert div.name_span == Span(1, 4)
        assert div.close_span == Span(18, 24)
        assert div.close_name_span == Span(20, 23)
        (attribute,) = div.attributes
        assert attribute.name == "class"
        assert attribute.value == "Btn"
        assert attribute.quote == '"'
        assert attribute.span == Span(5, 16)
        assert attribute.name_span == Span(5, 10)
        assert attribute.value_span == Span(11, 16)
        (text,) = div.children
        assert isinstance(text, Text)
        assert text.span == Span(17, 18)

    def test_unquoted_and_valueless_attributes(self) -> None:
        (element,) = parse_document("<input type=text disabled>", "html").children
        assert isinstance(element, Element)
        kind, flag = element.attributes
        assert (kind.value, kind.quote, kind.value_span) == ("text", "", Span(12, 16))
        assert flag.value is None
        assert flag.value_span is None

    def test_void_elements_do_not_nest(self) -> None:
        (paragraph,) = parse_document("<p>a<br>b</p>", "html").children
        assert isinstance(paragraph, Element)
        assert [type(child).__name__ for child in paragraph.children] == ["Text", "Element", "Text"]

    def test_self_closing_slash_span(self) -> None:
        (br,) = parse_document("<br />", "html").children
        assert isinstance(br, Element)
        assert br.self_closing
        assert br.slash_span == Span(3, 5)

    def test_entities_stay_raw_in_one_text_node(self) -> None:
        (paragraph,) = parse_document("<p>a &amp; b</p>", "html").children
        assert isinstance(paragraph, Element)
        (text,) = paragraph.children
        assert isinstance(text, Text)
        assert text.content == "a &amp; b"

    def test_unclosed_elements_are_closed_by_ancestor(self) -> None:
        (ul,) = parse_document("<ul><li>one<li>two</ul>", "html").children
        assert isinstance(ul, Element)
        assert ul.close_span == Span(18, 23)
        (first_item,) = ul.children
        assert isinstance(first_item, Element)
        assert first_item.close_span is None

    def test_doctype_and_comment(self) -> None:
        doctype, newline, comment = parse_document("<!DOCTYPE html>\n<!-- hi -->", "html").children
        assert isinstance(doctype, Doctype)
        assert doctype.text == "<!DOCTYPE html>"
        assert isinstance(newline, Text)
        assert isinstance(comment, Comment)
        assert comment.body == " hi "
        assert comment.span == Span(16, 27)
        assert comment.body_span == Span(20, 24)

    def test_empty_document(self) -> None:
        assert parse_document("", "html").children == ()

    def test_offsets_count_characters_not_bytes(self) -> None:
        document = parse_document("<p>café</p><DIV></DIV>", "html")
        paragraph, div = document.children
        assert isinstance(paragraph, Element) and isinstance(div, Element)
        assert paragraph.span == Span(0, 11)
        assert div.name_span == Span(12, 15)


class TestHtmlAdapterErrors:
    """Constructs without a node-model mapping are rejected."""

    def test_processing_instruction(self) -> None:
        with pytest.raises(AdapterError) as exc_info:
            parse_document('<?xml version="1.0"?><p>x</p>', "html")
        assert exc_info.value.construct == "processing-instruction"
        assert exc_info.value.offset == 0

    def test_stray_end_tag(self) -> None:
        with pytest.raises(AdapterError, match="</span>") as exc_info:
            parse_document("<div></span></div>", "html")
        assert exc_info.value.construct == "stray-end-tag"
        assert exc_info.value.offset == 5


class TestDocumentParser:
    """Language dispatch."""

    def test_language_for_path(self) -> None:
        assert DocumentParser.language_for_path("a/b/index.HTML") == "html"
        assert DocumentParser.language_for_path("site.htm") == "html"
        assert DocumentParser.language_for_path("main.css") == "css"
        assert DocumentParser.language_for_path("app.js") is None

    def test_unsupported_language(self) -> None:
        with pytest.raises(AdapterError):
            DocumentParser().parse("x", "scss")
