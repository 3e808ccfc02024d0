"""Domain models for rules, violations and fixes."""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, ClassVar, Optional, Protocol

from markup_style_linter.domain.nodes import NodeKind, Span

if TYPE_CHECKING:
    from markup_style_linter.domain.nodes import Node


class Severity(str, Enum):
    """Blocking (error) or advisory (warning) classification of a violation."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class TextEdit:
    """Replace the text covered by ``span`` with ``replacement``."""

    span: Span
    replacement: str

    def conflicts_with(self, other: "TextEdit") -> bool:
        """
        Two edits conflict when applying both would be ambiguous.

        That is the case for overlapping ranges, for two insertions at the
        same offset, and for an insertion strictly inside another range.
        """
        if self.span.overlaps(other.span):
            return True
        if self.span.is_empty and other.span.is_empty:
            return self.span.start == other.span.start
        if self.span.is_empty:
            return other.span.start < self.span.start < other.span.end
        if other.span.is_empty:
            return self.span.start < other.span.start < self.span.end
        return False


@dataclass(frozen=True)
class Fix:
    """Ordered, non-overlapping text edits that resolve one violation."""

    edits: tuple[TextEdit, ...]

    def __post_init__(self) -> None:
        for previous, current in zip(self.edits, self.edits[1:]):
            if (current.span.start, current.span.end) < (previous.span.start, previous.span.end):
                raise ValueError("Fix edits must be sorted by span")
            if current.conflicts_with(previous):
                raise ValueError("Fix edits must not overlap")

    @classmethod
    def replace(cls, span: Span, replacement: str) -> "Fix":
        """Create a fix with a single replacement."""
        return cls(edits=(TextEdit(span, replacement),))

    @classmethod
    def insert(cls, offset: int, text: str) -> "Fix":
        """Create a fix that inserts ``text`` at ``offset``."""
        return cls(edits=(TextEdit(Span(offset, offset), text),))

    @classmethod
    def delete(cls, span: Span) -> "Fix":
        return cls(edits=(TextEdit(span, ""),))

    def conflicts_with(self, other: "Fix") -> bool:
        return any(a.conflicts_with(b) for a in self.edits for b in other.edits)

    def __bool__(self) -> bool:
        return bool(self.edits)


@dataclass(frozen=True)
class Violation:
    """A rule failure tied to a source span, optionally carrying a fix."""

    rule_name: str
    code: str
    severity: Severity
    message: str
    span: Span
    fix: Optional[Fix] = None

    @property
    def fixable(self) -> bool:
        return bool(self.fix)

    @property
    def dedup_key(self) -> tuple[str, Span, str]:
        return (self.rule_name, self.span, self.message)

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for reporters."""
        return {
            "rule": self.rule_name,
            "code": self.code,
            "severity": self.severity.value,
            "message": self.message,
            "start": self.span.start,
            "end": self.span.end,
            "fixable": self.fixable,
        }


class BaseRule(Protocol):
    """The contract every style rule implements."""

    name: str
    code: str
    description: str
    default_severity: Severity
    enabled_by_default: bool

    def interested_in(self) -> frozenset[NodeKind]:
        """Node kinds this rule inspects; used for dispatch filtering."""
        ...

    def evaluate(self, node: "Node", ancestors: tuple["Node", ...]) -> list[Violation]:
        """Inspect one node given its ancestor chain from the root."""
        ...


class StyleRule:
    """
    Convenience base for concrete rules.

    Subclasses set the class attributes and implement ``evaluate``. Rules are
    stateless apart from options handed to ``__init__``.
    """

    name: ClassVar[str] = ""
    code: ClassVar[str] = ""
    description: ClassVar[str] = ""
    default_severity: ClassVar[Severity] = Severity.WARNING
    enabled_by_default: ClassVar[bool] = True
    kinds: ClassVar[frozenset[NodeKind]] = frozenset()

    def interested_in(self) -> frozenset[NodeKind]:
        return self.kinds

    def evaluate(self, node: "Node", ancestors: tuple["Node", ...]) -> list[Violation]:
        raise NotImplementedError

    def violation(self, span: Span, message: str, fix: Optional[Fix] = None) -> Violation:
        return Violation(
            rule_name=self.name,
            code=self.code,
            severity=self.default_severity,
            message=message,
            span=span,
            fix=fix,
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


@dataclass(frozen=True)
class RuleInfo:
    """Static metadata about a rule, used by the ``rules`` listing."""

    name: str
    code: str
    description: str
    severity: Severity
    kinds: tuple[str, ...] = field(default_factory=tuple)
    enabled: bool = True
