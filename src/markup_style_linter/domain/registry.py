"""Ordered rule registry with capability-set dispatch."""

from types import MappingProxyType
from typing import Iterator, Mapping, Optional

from markup_style_linter.domain.config import LinterConfig
from markup_style_linter.domain.errors import ConfigError, DuplicateRuleError
from markup_style_linter.domain.nodes import NodeKind
from markup_style_linter.domain.rules import BaseRule, RuleInfo, Severity


class RuleRegistry:
    """
    Holds the ordered mapping from rule name to rule instance.

    Insertion order is the tie-break order for violations that share a
    source span and the priority order for conflicting fixes.
    """

    def __init__(self) -> None:
        self._rules: dict[str, BaseRule] = {}

    def register(self, rule: BaseRule) -> None:
        """Add a rule. Raises DuplicateRuleError if the name is taken."""
        if rule.name in self._rules:
            raise DuplicateRuleError(rule.name)
        self._rules[rule.name] = rule

    def get(self, name: str) -> Optional[BaseRule]:
        return self._rules.get(name)

    def names(self) -> list[str]:
        return list(self._rules)

    def order_of(self, name: str) -> int:
        """Registry position of a rule; unknown names sort last."""
        try:
            return list(self._rules).index(name)
        except ValueError:
            return len(self._rules)

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    def __iter__(self) -> Iterator[BaseRule]:
        return iter(self._rules.values())

    def __len__(self) -> int:
        return len(self._rules)

    def describe(self, config: Optional[LinterConfig] = None) -> list[RuleInfo]:
        """Static metadata for every registered rule, in registry order."""
        config = config or LinterConfig()
        return [
            RuleInfo(
                name=rule.name,
                code=rule.code,
                description=rule.description,
                severity=config.severity_for(rule.name, rule.default_severity),
                kinds=tuple(sorted(kind.value for kind in rule.interested_in())),
                enabled=config.is_enabled(rule.name, rule.enabled_by_default),
            )
            for rule in self._rules.values()
        ]

    def configured(self, config: LinterConfig) -> "ConfiguredRegistry":
        """
        Freeze the registry into a read-only snapshot for one configuration.

        Raises ConfigError when the configuration names rules that are not
        registered.
        """
        unknown = sorted(config.referenced_rules() - set(self._rules))
        if unknown:
            raise ConfigError(f"Unknown rule name(s) in configuration: {', '.join(unknown)}")
        active = [
            rule for rule in self._rules.values()
            if config.is_enabled(rule.name, rule.enabled_by_default)
        ]
        return ConfiguredRegistry(
            active=active,
            order={name: index for index, name in enumerate(self._rules)},
            severities={
                rule.name: config.severity_for(rule.name, rule.default_severity) for rule in active
            },
        )


class ConfiguredRegistry:
    """
    Read-only view of the active rules, shared safely between worker threads.

    The dispatch table is computed once: every node kind maps to the rules
    that declared interest in it, in registry order.
    """

    def __init__(
        self,
        active: list[BaseRule],
        order: Mapping[str, int],
        severities: Mapping[str, Severity],
    ) -> None:
        self._active = tuple(active)
        self._order = MappingProxyType(dict(order))
        self._severities = MappingProxyType(dict(severities))
        dispatch: dict[NodeKind, tuple[BaseRule, ...]] = {}
        for kind in NodeKind:
            dispatch[kind] = tuple(r for r in self._active if kind in r.interested_in())
        self._dispatch = MappingProxyType(dispatch)

    @property
    def active_rules(self) -> tuple[BaseRule, ...]:
        return self._active

    @property
    def order(self) -> Mapping[str, int]:
        return self._order

    def rules_for(self, kind: NodeKind) -> tuple[BaseRule, ...]:
        return self._dispatch[kind]

    def severity_of(self, rule_name: str) -> Optional[Severity]:
        return self._severities.get(rule_name)

    def order_of(self, rule_name: str) -> int:
        return self._order.get(rule_name, len(self._order))
