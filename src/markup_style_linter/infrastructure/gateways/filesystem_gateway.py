"""Filesystem Gateway - Infrastructure implementation of FileSystemProtocol."""

from pathlib import Path

from markup_style_linter.domain.constants import LANGUAGES
from markup_style_linter.domain.protocols import FileSystemProtocol

_SKIPPED_DIRECTORIES = frozenset({".git", "node_modules", ".venv", "venv", "__pycache__"})


class FileSystemGateway(FileSystemProtocol):
    """Infrastructure implementation of FileSystemProtocol using pathlib."""

    def resolve_path(self, path: str) -> str:
        """Resolve and normalize a path string."""
        return str(Path(path).resolve())

    def is_directory(self, path: str) -> bool:
        """Check if path is a directory."""
        return Path(path).is_dir()

    def exists(self, path: str) -> bool:
        return Path(path).exists()

    def glob_source_files(self, path: str) -> list[str]:
        """Get all HTML and CSS files in path (recursive if directory)."""
        path_obj = Path(self.resolve_path(path))
        if not self.is_directory(str(path_obj)):
            return [str(path_obj)] if path_obj.suffix.lower() in LANGUAGES else []
        return sorted(
            str(p)
            for p in path_obj.rglob("*")
            if p.is_file()
            and p.suffix.lower() in LANGUAGES
            and not _SKIPPED_DIRECTORIES.intersection(p.relative_to(path_obj).parts)
        )

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        """Read text content from a file, keeping line endings as written."""
        with open(path, encoding=encoding, newline="") as f:
            return f.read()

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        """Write text content to a file without translating line endings."""
        with open(path, "w", encoding=encoding, newline="") as f:
            f.write(content)
