"""
Markup Style Linter: shared constants for rules and frontends.
"""

VOID_ELEMENTS: frozenset[str] = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "source",
        "track",
        "wbr",
    }
)

BOOLEAN_ATTRIBUTES: frozenset[str] = frozenset(
    {
        "allowfullscreen",
        "async",
        "autofocus",
        "autoplay",
        "checked",
        "controls",
        "default",
        "defer",
        "disabled",
        "formnovalidate",
        "hidden",
        "inert",
        "ismap",
        "itemscope",
        "loop",
        "multiple",
        "muted",
        "nomodule",
        "novalidate",
        "open",
        "playsinline",
        "readonly",
        "required",
        "reversed",
        "selected",
    }
)

# Script types that are the default and may be omitted.
JAVASCRIPT_MIME_TYPES: frozenset[str] = frozenset(
    {
        "text/javascript",
        "application/javascript",
        "application/ecmascript",
        "text/ecmascript",
    }
)

# Elements whose character data is preformatted; whitespace rules skip them.
PREFORMATTED_ELEMENTS: frozenset[str] = frozenset({"pre", "textarea"})

# Length units that may be dropped after a zero value.
LENGTH_UNITS: frozenset[str] = frozenset(
    {
        "px", "em", "rem", "ex", "ch", "vw", "vh", "vmin", "vmax",
        "cm", "mm", "q", "in", "pt", "pc",
    }
)

# CSS math functions; unitless zero is invalid inside them.
MATH_FUNCTIONS: frozenset[str] = frozenset({"calc", "min", "max", "clamp"})

VENDOR_PREFIXES: tuple[str, ...] = ("-webkit-", "-moz-", "-ms-", "-o-")

HTML5_DOCTYPE: str = "<!DOCTYPE html>"

LANGUAGES: dict[str, str] = {
    ".html": "html",
    ".htm": "html",
    ".css": "css",
}
