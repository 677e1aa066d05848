"""Offset to line/column mapping and code frame rendering for error reports."""

from __future__ import annotations

import re
from typing import Final
from typing import NamedTuple

_LINE_BREAK: Final = re.compile(r"\r?\n")


class SourcePosition(NamedTuple):
    """1-based line and column of a character in the source text."""

    line: int
    column: int


def position_from_offset(text: str, offset: int) -> SourcePosition:
    """Convert a character offset into a 1-based line and column.

    Only ``\\n`` starts a new line; every other character, ``\\r`` included,
    advances the column by one. Offsets beyond the end of the text are
    clamped to the end so end-of-input errors point just past the last
    character.

    Args:
        text: The original, unmodified input
        offset: Character index into ``text``

    Returns:
        The line and column of ``offset``
    """
    offset = max(0, min(offset, len(text)))
    line = text.count("\n", 0, offset) + 1
    column = offset - text.rfind("\n", 0, offset)
    return SourcePosition(line, column)


def code_frame(source: str, line: int, column: int, context: int = 2) -> str:
    """Render a window of source lines around ``line`` with a caret marker.

    The target line is prefixed with ``>`` and followed by a line holding a
    ``^`` under ``column``. Up to ``context`` lines are shown on either side
    and line numbers are right-aligned to a common width.

    Args:
        source: The original, unmodified input
        line: 1-based line of the offending character
        column: 1-based column of the offending character
        context: Number of lines to show before and after the target line

    Returns:
        The rendered frame, or an empty string for empty input
    """
    if not source:
        return ""

    lines = _LINE_BREAK.split(source)
    target = max(0, min(line - 1, len(lines) - 1))
    start = max(0, target - context)
    end = min(len(lines), target + context + 1)
    width = len(str(end))

    frame = []
    for index in range(start, end):
        indicator = ">" if index == target else " "
        frame.append(f"{indicator} {index + 1:>{width}} | {lines[index]}")
        if index == target:
            # "> " + number + " | " puts the first source character at width + 5
            gutter = " " * (width + 5)
            frame.append(gutter + " " * max(column - 1, 0) + "^")
    return "\n".join(frame)
