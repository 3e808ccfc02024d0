"""GuidanceService: loads the rule registry and provides display names and manual instructions."""

from pathlib import Path
from typing import Optional, cast

import yaml

from markup_style_linter.domain.registry_types import RuleGuidanceEntry

DEFAULT_ENTRY = "_default"


class GuidanceService:
    """Loads rule_registry.yaml, keyed by rule name, with a ``_default`` fallback entry."""

    def __init__(self, registry_path: Optional[str] = None) -> None:
        if registry_path is not None:
            self._path = Path(registry_path)
        else:
            # Default: packaged resource next to this package
            _base = Path(__file__).resolve().parent.parent.parent
            self._path = _base / "resources" / "rule_registry.yaml"
        self._registry: dict[str, RuleGuidanceEntry] = {}
        self._load()

    def _load(self) -> None:
        if self._path.exists():
            with open(self._path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
                self._registry = (
                    cast(dict[str, RuleGuidanceEntry], data) if isinstance(data, dict) else {}
                )
        else:
            self._registry = {}

    def get_registry(self) -> dict[str, RuleGuidanceEntry]:
        """Return a shallow copy of the loaded registry."""
        return dict(self._registry)

    def get_entry(self, rule_name: str) -> Optional[RuleGuidanceEntry]:
        entry = self._registry.get(rule_name)
        if entry is None or rule_name == DEFAULT_ENTRY:
            return None
        return cast(RuleGuidanceEntry, dict(entry))

    def get_display_name(self, rule_name: str) -> str:
        """Return display name for a rule, falling back to a title-cased rule name."""
        entry = self.get_entry(rule_name)
        if not entry:
            return rule_name.replace("-", " ").title()
        return str(entry.get("display_name") or rule_name.replace("-", " ").title())

    def get_manual_instructions(self, rule_name: str) -> str:
        """Return manual fix instructions for the given rule."""
        entry = self.get_entry(rule_name)
        if entry and "manual_instructions" in entry:
            return str(entry["manual_instructions"]).strip()
        default_entry = self._registry.get(DEFAULT_ENTRY)
        if default_entry and "manual_instructions" in default_entry:
            return str(default_entry["manual_instructions"]).strip()
        return "Fix the violation at the reported location."

    def get_references(self, rule_name: str) -> list[str]:
        entry = self.get_entry(rule_name)
        return [str(ref) for ref in entry.get("references", [])] if entry else []

    def get_examples(self, rule_name: str) -> tuple[str, str]:
        """(bad, good) example snippets; empty strings when the registry has none."""
        entry = self.get_entry(rule_name)
        if not entry:
            return ("", "")
        return (str(entry.get("example_bad", "")), str(entry.get("example_good", "")))

    def get_fixable_rules(self) -> list[str]:
        """Rule names the registry marks as auto-fixable."""
        return sorted(
            name for name, entry in self._registry.items()
            if name != DEFAULT_ENTRY and isinstance(entry, dict) and entry.get("fixable")
        )
