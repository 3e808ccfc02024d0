from typing import TypedDict


class RuleGuidanceEntry(TypedDict, total=False):
    display_name: str
    short_description: str
    manual_instructions: str
    fixable: bool
    references: list[str]
    example_bad: str
    example_good: str
