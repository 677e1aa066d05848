"""
Relaxed-dialect preprocessing that keeps every character offset intact.

Comments and dangling commas are overwritten with spaces instead of being
removed, so line and column numbers computed on the processed text match the
original input and the strict parser downstream only ever sees whitespace.
"""

from typing import NamedTuple

from instajson._profile import ProfileContext

_WHITESPACE = frozenset(" \t\n\r")
_CLOSERS = frozenset("}]")


class LenientText(NamedTuple):
    """Processed text (same length as the input) and whether it changed."""

    text: str
    lenient_applied: bool


def _blank(span: str) -> list[str]:
    """Replaces every character except newlines with a space."""
    return ["\n" if char == "\n" else " " for char in span]


def preprocess_lenient(text: str) -> LenientText:
    """
    Neutralizes comments and trailing commas outside string literals.

    Recognizes ``//`` line comments (the newline is kept), ``/* */`` block
    comments (internal newlines kept; an unclosed comment runs to the end of
    input) and commas followed, after whitespace only, by ``}`` or ``]``.
    A comment between a comma and its closer keeps the comma, so
    ``[1, // x\\n]`` still fails in the strict parser.
    """
    with ProfileContext("preprocess_lenient", len(text)):
        out: list[str] = []
        length = len(text)
        changed = False
        in_string = False
        escaped = False
        pending_comma = -1
        i = 0

        while i < length:
            char = text[i]

            if in_string:
                out.append(char)
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                i += 1
                continue

            if char == "/" and i + 1 < length and text[i + 1] in "/*":
                if text[i + 1] == "/":
                    end = text.find("\n", i + 2)
                    end = length if end == -1 else end
                else:
                    close = text.find("*/", i + 2)
                    end = length if close == -1 else close + 2
                out.extend(_blank(text[i:end]))
                changed = True
                # Only whitespace may separate a dangling comma from its closer
                pending_comma = -1
                i = end
                continue

            if char in _WHITESPACE:
                out.append(char)
                i += 1
                continue

            if pending_comma >= 0 and char in _CLOSERS:
                out[pending_comma] = " "
                changed = True
            pending_comma = i if char == "," else -1
            if char == '"':
                in_string = True
            out.append(char)
            i += 1

        if not changed:
            return LenientText(text, False)
        return LenientText("".join(out), True)
