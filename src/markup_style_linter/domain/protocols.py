"""Domain Protocols - Interfaces for infrastructure the use cases depend on."""

from typing import Mapping, Optional, Protocol

from markup_style_linter.domain.nodes import Document


class TelemetryPort(Protocol):
    """Protocol for telemetry/UI updates."""

    def step(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...
    def warning(self, message: str) -> None: ...
    def debug(self, message: str) -> None: ...
    def handshake(self) -> None: ...


class DocumentParserProtocol(Protocol):
    """Turns source text into a normalized Document."""

    def parse(self, source: str, language: str) -> Document:
        """Raises AdapterError for constructs the node model cannot express."""
        ...

    def language_for_path(self, path: str) -> Optional[str]:
        """Language implied by the file name, or None if unsupported."""
        ...


class FileSystemProtocol(Protocol):
    """Protocol for filesystem operations - abstracts Path usage."""

    def resolve_path(self, path: str) -> str:
        """Resolve and normalize a path string."""
        ...

    def is_directory(self, path: str) -> bool:
        """Check if path is a directory."""
        ...

    def exists(self, path: str) -> bool:
        """Return True if path exists (file or directory)."""
        ...

    def glob_source_files(self, path: str) -> list[str]:
        """Get all lintable files in path (recursive if directory)."""
        ...

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        """Read text content from a file."""
        ...

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        """Write text content to a file."""
        ...


class ConfigLoaderProtocol(Protocol):
    """Locates and reads the raw ``[tool.markup-style]`` table."""

    def load(self, config_file: Optional[str] = None) -> Mapping[str, object]:
        ...
