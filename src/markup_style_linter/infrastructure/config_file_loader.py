"""Load [tool.markup-style] from pyproject.toml. Infrastructure I/O only."""

import sys
from pathlib import Path
from typing import Optional

from markup_style_linter.domain.errors import ConfigError

if sys.version_info >= (3, 11):
    import tomllib as toml_lib
else:
    import tomli as toml_lib

TOOL_SECTION = "markup-style"


class ConfigFileLoader:
    """
    Finds the nearest pyproject.toml walking up from ``start`` (default: cwd)
    and returns its ``[tool.markup-style]`` table.
    """

    def __init__(self, start: Optional[str] = None) -> None:
        self.start = Path(start) if start else None

    def find_config_file(self, config_file: Optional[str] = None) -> Optional[Path]:
        """An explicit ``config_file`` wins over the directory walk."""
        if config_file:
            return Path(config_file)
        current_path = (self.start or Path.cwd()).resolve()
        for directory in (current_path, *current_path.parents):
            candidate = directory / "pyproject.toml"
            if candidate.is_file():
                return candidate
        return None

    def load(self, config_file: Optional[str] = None) -> dict[str, object]:
        """Raw settings table; empty when no file or no section exists."""
        path = self.find_config_file(config_file)
        if path is None:
            return {}
        try:
            with path.open("rb") as f:
                data = toml_lib.load(f)
        except OSError as exc:
            raise ConfigError(f"Cannot read {path}: {exc}") from exc
        except toml_lib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
        tool_section = data.get("tool", {}) or {}
        section = tool_section.get(TOOL_SECTION, {}) or {}
        if not isinstance(section, dict):
            raise ConfigError(f"[tool.{TOOL_SECTION}] in {path} must be a table")
        return section
