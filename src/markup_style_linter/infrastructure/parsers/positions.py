"""Line/column to offset conversion for parser-reported positions."""

import re
from bisect import bisect_left, bisect_right

_CRLF_RE = re.compile(r"\r\n")


class LineIndex:
    """Maps (line, column) pairs reported by a tokenizer to string offsets."""

    def __init__(self, source: str) -> None:
        self._length = len(source)
        self._starts = [0]
        for index, char in enumerate(source):
            if char == "\n":
                self._starts.append(index + 1)

    def offset(self, line: int, column: int) -> int:
        """Offset of a 1-based ``line`` and 0-based ``column``."""
        if line < 1 or line > len(self._starts):
            raise ValueError(f"Line {line} is outside the source")
        return min(self._starts[line - 1] + column, self._length)

    def position(self, offset: int) -> tuple[int, int]:
        """Inverse of ``offset``: 1-based line and 1-based column for reports."""
        line = bisect_right(self._starts, offset)
        return line, offset - self._starts[line - 1] + 1


class CollapsedNewlines:
    """
    Maps offsets in text where each ``\\r\\n`` was collapsed to ``\\n`` back
    to offsets in the text as written.

    Other single-character substitutions keep offsets unchanged, so only the
    collapsed pairs need tracking.
    """

    def __init__(self, original: str) -> None:
        self._collapsed = [
            match.start() - removed for removed, match in enumerate(_CRLF_RE.finditer(original))
        ]

    def original_offset(self, offset: int) -> int:
        return offset + bisect_left(self._collapsed, offset)
