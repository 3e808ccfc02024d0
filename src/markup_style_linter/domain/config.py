"""Linter configuration: the already-parsed settings consumed by the core."""

import dataclasses
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional

from markup_style_linter.domain.errors import ConfigError
from markup_style_linter.domain.rules import Severity


class QuoteStyle(str, Enum):
    """Preferred quote character for attribute values and CSS strings."""

    DOUBLE = "double"

    @property
    def char(self) -> str:
        return '"'


@dataclass(frozen=True)
class LinterConfig:
    """
    Settings for one run.

    ``enabled_rules`` of ``None`` means "every rule enabled by default";
    an explicit set replaces the defaults entirely.
    """

    enabled_rules: Optional[frozenset[str]] = None
    disabled_rules: frozenset[str] = frozenset()
    severity_overrides: Mapping[str, Severity] = field(default_factory=dict)
    max_selector_depth: int = 3
    indent_width: int = 2
    quote_style: QuoteStyle = QuoteStyle.DOUBLE
    max_fix_passes: int = 10

    def __post_init__(self) -> None:
        if self.max_selector_depth < 1:
            raise ConfigError("max_selector_depth must be at least 1")
        if self.indent_width < 1:
            raise ConfigError("indent_width must be at least 1")
        if self.max_fix_passes < 1:
            raise ConfigError("max_fix_passes must be at least 1")

    def is_enabled(self, rule_name: str, enabled_by_default: bool = True) -> bool:
        """Whether a rule takes part in the run."""
        if rule_name in self.disabled_rules:
            return False
        if self.enabled_rules is None:
            return enabled_by_default
        return rule_name in self.enabled_rules

    def severity_for(self, rule_name: str, default: Severity) -> Severity:
        return self.severity_overrides.get(rule_name, default)

    def referenced_rules(self) -> set[str]:
        """Every rule name mentioned anywhere in the configuration."""
        names = set(self.disabled_rules) | set(self.severity_overrides)
        if self.enabled_rules is not None:
            names |= set(self.enabled_rules)
        return names

    def with_overrides(self, **changes: object) -> "LinterConfig":
        """Return a copy with non-None ``changes`` applied (CLI flags win over files)."""
        applied = {key: value for key, value in changes.items() if value is not None}
        return dataclasses.replace(self, **applied)  # type: ignore[arg-type]

    @classmethod
    def from_mapping(cls, raw: Mapping[str, object]) -> "LinterConfig":
        """
        Validate a raw mapping (e.g. a ``[tool.markup-style]`` table).

        Keys may be written in snake_case or kebab-case. Unknown keys are
        logged and ignored.
        """
        data = {str(key).replace("-", "_"): value for key, value in raw.items()}
        known = {f.name for f in dataclasses.fields(cls)}
        for key in sorted(set(data) - known):
            logging.warning("Configuration Warning: unknown option '%s' ignored.", key)

        kwargs: dict[str, object] = {}
        if "enabled_rules" in data:
            kwargs["enabled_rules"] = frozenset(_string_list(data["enabled_rules"], "enabled_rules"))
        if "disabled_rules" in data:
            kwargs["disabled_rules"] = frozenset(_string_list(data["disabled_rules"], "disabled_rules"))
        if "severity_overrides" in data:
            kwargs["severity_overrides"] = _severity_map(data["severity_overrides"])
        for key in ("max_selector_depth", "indent_width", "max_fix_passes"):
            if key in data:
                value = data[key]
                if isinstance(value, bool) or not isinstance(value, int):
                    raise ConfigError(f"{key} must be an integer, got {value!r}")
                kwargs[key] = value
        if "quote_style" in data:
            try:
                kwargs["quote_style"] = QuoteStyle(str(data["quote_style"]))
            except ValueError as exc:
                raise ConfigError(
                    f"quote_style must be one of {[q.value for q in QuoteStyle]}"
                ) from exc
        return cls(**kwargs)  # type: ignore[arg-type]


def _string_list(value: object, key: str) -> list[str]:
    if isinstance(value, str):
        return [value]
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise ConfigError(f"{key} must be a list of rule names")
    items: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ConfigError(f"{key} must only contain strings, got {item!r}")
        items.append(item)
    return items


def _severity_map(value: object) -> dict[str, Severity]:
    if not isinstance(value, Mapping):
        raise ConfigError("severity_overrides must be a table of rule name = severity")
    result: dict[str, Severity] = {}
    for name, severity in value.items():
        try:
            result[str(name)] = Severity(str(severity).lower())
        except ValueError as exc:
            raise ConfigError(
                f"Unknown severity {severity!r} for rule '{name}' (expected error or warning)"
            ) from exc
    return result
