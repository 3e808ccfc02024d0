"""CSS rules for declarations, values and selectors."""

import re
from typing import Optional

from markup_style_linter.domain.config import QuoteStyle
from markup_style_linter.domain.constants import LENGTH_UNITS, MATH_FUNCTIONS, VENDOR_PREFIXES
from markup_style_linter.domain.nodes import (
    Declaration,
    Node,
    NodeKind,
    RuleSet,
    Selector,
    Span,
    ValueToken,
)
from markup_style_linter.domain.rules import Fix, Severity, StyleRule, Violation

_DIMENSION_RE = re.compile(r"^([+-]?)(\d*\.?\d+(?:[eE][+-]?\d+)?)([a-zA-Z]+)$")
_LEADING_ZERO_RE = re.compile(r"^([+-]?)0\.\d")
_HEX_RE = re.compile(r"^#([0-9a-fA-F]+)$")


def _hex_digits(token: ValueToken) -> Optional[str]:
    if token.type != "hash":
        return None
    match = _HEX_RE.match(token.text)
    if not match or len(match.group(1)) not in (3, 4, 6, 8):
        return None
    return match.group(1)


class _DeclarationRule(StyleRule):
    """Base for rules that only inspect declarations."""

    kinds = frozenset({NodeKind.DECLARATION})

    def evaluate(self, node: Node, ancestors: tuple[Node, ...]) -> list[Violation]:
        if not isinstance(node, Declaration):
            return []
        return self.check(node)

    def check(self, declaration: Declaration) -> list[Violation]:
        raise NotImplementedError


class ZeroUnitRule(_DeclarationRule):
    """Zero lengths are written without a unit."""

    name = "zero-unit"
    code = "C001"
    description = "Omit units after 0 values."

    def check(self, declaration: Declaration) -> list[Violation]:
        if declaration.is_custom_property:
            return []
        violations: list[Violation] = []
        for token in declaration.value_tokens:
            if token.type != "dimension" or token.function in MATH_FUNCTIONS:
                continue
            match = _DIMENSION_RE.match(token.text)
            if not match or match.group(3).lower() not in LENGTH_UNITS:
                continue
            if float(match.group(2)) != 0:
                continue
            violations.append(
                self.violation(
                    token.span,
                    f"Unit after zero value '{token.text}' is unnecessary",
                    Fix.replace(token.span, "0"),
                )
            )
        return violations


class LeadingZeroRule(_DeclarationRule):
    """Fractions below one are written without the leading zero."""

    name = "leading-zero"
    code = "C002"
    description = "Omit leading 0s in values."

    def check(self, declaration: Declaration) -> list[Violation]:
        violations: list[Violation] = []
        for token in declaration.value_tokens:
            if token.type not in ("number", "percentage", "dimension"):
                continue
            match = _LEADING_ZERO_RE.match(token.text)
            if not match:
                continue
            zero = token.span.start + len(match.group(1))
            violations.append(
                self.violation(
                    token.span,
                    f"Leading zero in '{token.text}'",
                    Fix.delete(Span(zero, zero + 1)),
                )
            )
        return violations


class HexCaseRule(_DeclarationRule):
    """Hexadecimal colors are written in lowercase."""

    name = "hex-case"
    code = "C003"
    description = "Use lowercase hexadecimal color values."

    def check(self, declaration: Declaration) -> list[Violation]:
        violations: list[Violation] = []
        for token in declaration.value_tokens:
            if _hex_digits(token) is None or token.text == token.text.lower():
                continue
            violations.append(
                self.violation(
                    token.span,
                    f"Hex color '{token.text}' should be lowercase",
                    Fix.replace(token.span, token.text.lower()),
                )
            )
        return violations


class HexShorthandRule(_DeclarationRule):
    """Hexadecimal colors use the three- or four-digit form where possible."""

    name = "hex-shorthand"
    code = "C004"
    description = "Use 3 character hexadecimal notation where possible."

    def check(self, declaration: Declaration) -> list[Violation]:
        violations: list[Violation] = []
        for token in declaration.value_tokens:
            digits = _hex_digits(token)
            if digits is None or len(digits) not in (6, 8):
                continue
            pairs = [digits[i:i + 2] for i in range(0, len(digits), 2)]
            if any(pair[0].lower() != pair[1].lower() for pair in pairs):
                continue
            short = "#" + "".join(pair[0] for pair in pairs)
            violations.append(
                self.violation(
                    token.span,
                    f"Hex color '{token.text}' can be written as '{short}'",
                    Fix.replace(token.span, short),
                )
            )
        return violations


class PropertyCaseRule(_DeclarationRule):
    """Property names are written in lowercase."""

    name = "property-case"
    code = "C005"
    description = "Use lowercase property names."
    default_severity = Severity.ERROR

    def check(self, declaration: Declaration) -> list[Violation]:
        if declaration.is_custom_property or declaration.name == declaration.lower_name:
            return []
        return [
            self.violation(
                declaration.name_span,
                f"Property '{declaration.name}' should be lowercase",
                Fix.replace(declaration.name_span, declaration.lower_name),
            )
        ]


class ColonSpaceRule(_DeclarationRule):
    """One space after the colon, none before it."""

    name = "colon-space"
    code = "C006"
    description = "Use a single space after a property name's colon."

    def check(self, declaration: Declaration) -> list[Violation]:
        if not declaration.value_tokens or declaration.separator == ": ":
            return []
        if "/*" in declaration.separator or ":" not in declaration.separator:
            return []
        return [
            self.violation(
                declaration.separator_span,
                f"Expected ': ' after property '{declaration.name}'",
                Fix.replace(declaration.separator_span, ": "),
            )
        ]


class TrailingSemicolonRule(_DeclarationRule):
    """Every declaration ends with a semicolon."""

    name = "trailing-semicolon"
    code = "C007"
    description = "End every declaration with a semicolon."

    def check(self, declaration: Declaration) -> list[Violation]:
        if declaration.terminated:
            return []
        return [
            self.violation(
                declaration.span,
                f"Declaration '{declaration.name}' should end with a semicolon",
                Fix.insert(declaration.span.end, ";"),
            )
        ]


class CssQuotesRule(_DeclarationRule):
    """Strings in values use the configured quote character."""

    name = "css-quotes"
    code = "C008"
    description = "Use double quotes for strings and url() values."

    def __init__(self, quote_style: QuoteStyle = QuoteStyle.DOUBLE) -> None:
        self.quote = quote_style.char

    def check(self, declaration: Declaration) -> list[Violation]:
        violations: list[Violation] = []
        for token in declaration.value_tokens:
            if token.type != "string" or len(token.text) < 2 or token.text[0] == self.quote:
                continue
            inner = token.text[1:-1] if token.text[-1] == token.text[0] else token.text[1:]
            if self.quote in inner:
                continue
            violations.append(
                self.violation(
                    token.span,
                    f"Use {self.quote} quotes for {token.text}",
                    Fix.replace(token.span, f"{self.quote}{inner}{self.quote}"),
                )
            )
        return violations


class DeclarationOrderRule(StyleRule):
    """Declarations within a block are alphabetized, ignoring vendor prefixes."""

    name = "declaration-order"
    code = "C009"
    description = "Alphabetize declarations."
    kinds = frozenset({NodeKind.RULESET, NodeKind.AT_RULE})

    @staticmethod
    def sort_key(declaration: Declaration) -> str:
        name = declaration.lower_name
        for prefix in VENDOR_PREFIXES:
            if name.startswith(prefix):
                return name[len(prefix):]
        return name

    def evaluate(self, node: Node, ancestors: tuple[Node, ...]) -> list[Violation]:
        declarations = [
            child for child in getattr(node, "children", ())
            if isinstance(child, Declaration) and not child.is_custom_property
        ]
        violations: list[Violation] = []
        for previous, current in zip(declarations, declarations[1:]):
            if self.sort_key(current) < self.sort_key(previous):
                violations.append(
                    self.violation(
                        current.span,
                        f"Expected '{current.name}' to come before '{previous.name}'",
                    )
                )
        return violations


class SelectorDepthRule(StyleRule):
    """Selectors, including the parts contributed by nesting, stay shallow."""

    name = "selector-depth"
    code = "C010"
    description = "Avoid deeply qualified selectors."
    default_severity = Severity.ERROR
    kinds = frozenset({NodeKind.RULESET})

    def __init__(self, max_depth: int = 3) -> None:
        self.max_depth = max_depth

    @staticmethod
    def own_depth(selector: Selector) -> int:
        """Compounds a selector adds; a ``&`` compound continues the parent's last one."""
        return selector.compound_count - (1 if selector.nested else 0)

    def evaluate(self, node: Node, ancestors: tuple[Node, ...]) -> list[Violation]:
        if not isinstance(node, RuleSet):
            return []
        inherited = 0
        for ancestor in ancestors:
            if isinstance(ancestor, RuleSet):
                inherited += max((self.own_depth(s) for s in ancestor.selectors), default=0)
        violations: list[Violation] = []
        for selector in node.selectors:
            depth = inherited + self.own_depth(selector)
            if depth > self.max_depth:
                violations.append(
                    self.violation(
                        selector.span,
                        f"Selector '{selector.text}' has depth {depth}; maximum is {self.max_depth}",
                    )
                )
        return violations


class NoImportantRule(_DeclarationRule):
    """``!important`` is avoided."""

    name = "no-important"
    code = "C011"
    description = "Avoid !important declarations."

    def check(self, declaration: Declaration) -> list[Violation]:
        if not declaration.important:
            return []
        return [self.violation(declaration.span, f"Avoid !important on '{declaration.name}'")]
