"""Error hierarchy for the linter core."""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from markup_style_linter.domain.nodes import Node
    from markup_style_linter.domain.rules import Violation

RULE_FAILURE_CODE: str = "X000"


class LinterError(Exception):
    """Base class for every error raised by the linter core."""


class AdapterError(LinterError):
    """The raw parse tree holds a construct with no mapping to the node model."""

    def __init__(self, message: str, construct: str = "", offset: Optional[int] = None) -> None:
        self.construct = construct
        self.offset = offset
        location = f" at offset {offset}" if offset is not None else ""
        super().__init__(f"{message}{location}")


class DuplicateRuleError(LinterError):
    """Two rules were registered under the same name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Rule '{name}' is already registered")


class ConfigError(LinterError):
    """Configuration values are malformed or reference unknown rules."""


class FixVerificationError(LinterError):
    """Re-linting patched text still reports violations in a patched region."""

    def __init__(self, rule_names: list[str]) -> None:
        self.rule_names = rule_names
        super().__init__(
            "Fixes did not resolve their violations for rule(s): " + ", ".join(rule_names)
        )


class PipelineStateError(LinterError):
    """A pipeline run was asked to enter a state out of order or twice."""


class RuleEvaluationError(LinterError):
    """A rule raised while evaluating a node. Recovered by the traversal engine."""

    def __init__(self, rule_name: str, node: "Node", cause: BaseException) -> None:
        from markup_style_linter.domain.nodes import describe

        self.rule_name = rule_name
        self.node = node
        self.cause = cause
        super().__init__(
            f"Rule '{rule_name}' failed on {describe(node)}: "
            f"{type(cause).__name__}: {cause}"
        )

    def to_violation(self) -> "Violation":
        """Synthetic error-severity finding that keeps the failure visible in reports."""
        from markup_style_linter.domain.rules import Severity, Violation

        return Violation(
            rule_name=self.rule_name,
            code=RULE_FAILURE_CODE,
            severity=Severity.ERROR,
            message=str(self),
            span=self.node.span,
        )
