"""The built-in rule set, in registry order."""

from typing import Optional

from markup_style_linter.domain.config import LinterConfig
from markup_style_linter.domain.registry import RuleRegistry
from markup_style_linter.domain.rules import BaseRule
from markup_style_linter.domain.rules.css_rules import (
    ColonSpaceRule,
    CssQuotesRule,
    DeclarationOrderRule,
    HexCaseRule,
    HexShorthandRule,
    LeadingZeroRule,
    NoImportantRule,
    PropertyCaseRule,
    SelectorDepthRule,
    TrailingSemicolonRule,
    ZeroUnitRule,
)
from markup_style_linter.domain.rules.html_rules import (
    AttrCaseRule,
    AttrQuotesRule,
    BooleanAttrRule,
    ClassPrefixRule,
    DoctypeRule,
    HtmlLangRule,
    TagCaseRule,
    TypeAttrRule,
    VoidSlashRule,
)
from markup_style_linter.domain.rules.shared_rules import (
    ClassNamingRule,
    CommentSpacingRule,
    NoTabsRule,
    TrailingWhitespaceRule,
)


def default_rules(config: LinterConfig) -> list[BaseRule]:
    """Instantiate every built-in rule with options taken from ``config``."""
    return [
        TrailingWhitespaceRule(),
        NoTabsRule(indent_width=config.indent_width),
        CommentSpacingRule(),
        ClassNamingRule(),
        DoctypeRule(),
        TagCaseRule(),
        AttrCaseRule(),
        AttrQuotesRule(quote_style=config.quote_style),
        BooleanAttrRule(),
        TypeAttrRule(),
        VoidSlashRule(),
        HtmlLangRule(),
        ClassPrefixRule(),
        ZeroUnitRule(),
        LeadingZeroRule(),
        HexCaseRule(),
        HexShorthandRule(),
        PropertyCaseRule(),
        ColonSpaceRule(),
        TrailingSemicolonRule(),
        CssQuotesRule(quote_style=config.quote_style),
        DeclarationOrderRule(),
        SelectorDepthRule(max_depth=config.max_selector_depth),
        NoImportantRule(),
    ]


def build_default_registry(config: Optional[LinterConfig] = None) -> RuleRegistry:
    """Registry holding the built-in rules in their canonical order."""
    registry = RuleRegistry()
    for rule in default_rules(config or LinterConfig()):
        registry.register(rule)
    return registry
