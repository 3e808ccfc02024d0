"""Parser frontends: external tokenizers plus the adapters that normalize them."""

from pathlib import PurePath
from typing import Optional

from markup_style_linter.domain.constants import LANGUAGES
from markup_style_linter.domain.errors import AdapterError
from markup_style_linter.domain.nodes import Document
from markup_style_linter.infrastructure.parsers.css_source import CssAdapter, CssSourceParser
from markup_style_linter.infrastructure.parsers.html_source import HtmlAdapter, HtmlSourceParser


class DocumentParser:
    """Parses source text of a known language into a normalized Document."""

    def parse(self, source: str, language: str) -> Document:
        """Parse and normalize. Raises AdapterError for unsupported input."""
        if language == "html":
            return HtmlAdapter().normalize(HtmlSourceParser().parse(source))
        if language == "css":
            return CssAdapter().normalize(CssSourceParser().parse(source))
        raise AdapterError(f"Unsupported language '{language}'", "language")

    @staticmethod
    def language_for_path(path: str) -> Optional[str]:
        """Language implied by a file extension, or None if unsupported."""
        return LANGUAGES.get(PurePath(path).suffix.lower())


def parse_document(source: str, language: str) -> Document:
    """Shortcut for ``DocumentParser().parse``."""
    return DocumentParser().parse(source, language)


__all__ = ["DocumentParser", "parse_document"]
