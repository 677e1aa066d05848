"""
Size guard and strict JSON parser.

The parser scans characters directly (no separate token stream), keeping
running line and column counters so duplicate keys can be reported with
their position. Nesting is driven by an explicit stack of open containers,
which bounds the work per level by ``max_depth`` rather than by Python's
recursion limit.
"""

import math
import re
from dataclasses import dataclass

from instajson._errors import ErrorKind
from instajson._errors import Position
from instajson._errors import RawParseError
from instajson._profile import ProfileContext
from instajson._types import DuplicatePolicy
from instajson._types import DuplicateRecord
from instajson._types import JsonObject
from instajson._types import JsonValue
from instajson._types import ParseOptions

_MIB = 1024 * 1024

_DIGITS = frozenset("0123456789")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_CLOSERS = frozenset("}]")
_BLANKS = frozenset(" \t\r")

_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_LITERALS: dict[str, tuple[str, JsonValue]] = {
    "t": ("true", True),
    "f": ("false", False),
    "n": ("null", None),
}

# Runs of string content that need no special handling
_PLAIN_STRING_RUN = re.compile(r'[^"\\\n\r]+')
_DIGIT_RUN = re.compile(r"[0-9]+")


def check_input_size(text: str, max_input_bytes: int) -> int:
    """
    Returns the UTF-8 size of ``text``, rejecting it if over the limit.

    Runs before any character is scanned; the failure always sits at
    offset 0.
    """
    size = len(text.encode("utf-8", "surrogatepass"))
    if size > max_input_bytes:
        limit_mb = math.floor(max_input_bytes / _MIB + 0.5)
        raise RawParseError(
            ErrorKind.INPUT_LIMIT,
            f"Input exceeds maximum size of {limit_mb} MB",
            0,
        )
    return size


@dataclass(slots=True)
class _OpenContainer:
    """A container whose members are still being read."""

    container: list[JsonValue] | JsonObject
    depth: int
    closer: str
    key: str = ""
    key_pos: Position = 0
    key_line: int = 0
    key_column: int = 0


class JsonParser:
    """
    Strict JSON parser over already-preprocessed text.

    After ``parse`` returns (or raises), ``depth_reached`` holds the deepest
    nesting level entered and ``duplicates`` every repeated key seen.
    """

    def __init__(self, text: str, options: ParseOptions) -> None:
        self.text = text
        self.length = len(text)
        self.options = options
        self.pos = 0
        self.line = 1
        self.column = 1
        self.depth_reached = 0
        self.duplicates: list[DuplicateRecord] = []

    def error(
        self,
        msg: str,
        pos: Position | None = None,
        kind: ErrorKind = ErrorKind.SYNTAX,
    ) -> RawParseError:
        return RawParseError(kind, msg, self.pos if pos is None else pos)

    def peek(self) -> str:
        """Returns current character without advancing, or "" at the end."""
        return self.text[self.pos] if self.pos < self.length else ""

    def advance(self) -> str:
        """Returns current character and advances position and column."""
        if self.pos >= self.length:
            return ""
        char = self.text[self.pos]
        self.pos += 1
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return char

    def _skip(self, count: int) -> None:
        # Only for runs known to contain no newline
        self.pos += count
        self.column += count

    def skip_whitespace(self) -> None:
        """Skips space, tab, carriage return and newline."""
        text = self.text
        while self.pos < self.length:
            char = text[self.pos]
            if char == "\n":
                self.line += 1
                self.column = 1
            elif char in _BLANKS:
                self.column += 1
            else:
                break
            self.pos += 1

    def parse(self) -> JsonValue:
        """Parses the whole text as exactly one JSON value."""
        with ProfileContext("parse_document", self.length):
            self.skip_whitespace()
            value = self.parse_value()
            self.skip_whitespace()
            if self.pos < self.length:
                raise self.error("Unexpected text after JSON value")
            return value

    def _enter(self, depth: int) -> None:
        if depth > self.options.max_depth:
            raise self.error(
                "Maximum depth exceeded", kind=ErrorKind.DEPTH_LIMIT
            )
        if depth > self.depth_reached:
            self.depth_reached = depth

    def parse_value(self, depth: int = 1) -> JsonValue:
        """
        Parses one value starting at the current position.

        Containers are pushed onto ``stack`` instead of recursing; each
        completed value is stored into its parent, and every container it
        completes is closed in turn, until either a comma asks for the next
        member or the stack is empty.
        """
        stack: list[_OpenContainer] = []

        while True:
            self._enter(depth)
            char = self.peek()

            if char == "{" or char == "[":
                closer = "}" if char == "{" else "]"
                self.advance()
                self.skip_whitespace()
                container: list[JsonValue] | JsonObject = (
                    JsonObject() if char == "{" else []
                )
                if self.peek() == closer:
                    self.advance()
                    value: JsonValue = container
                else:
                    frame = _OpenContainer(container, depth, closer)
                    if closer == "}":
                        self._read_key(frame)
                    stack.append(frame)
                    depth += 1
                    continue
            else:
                value = self._parse_scalar(char)

            while stack:
                frame = stack[-1]
                self._store(frame, value)
                self.skip_whitespace()
                char = self.peek()
                if char == ",":
                    comma = self.pos
                    self.advance()
                    self.skip_whitespace()
                    if self.peek() in _CLOSERS:
                        raise self.error(
                            "Trailing comma not allowed in strict JSON", comma
                        )
                    if frame.closer == "}":
                        self._read_key(frame)
                    break
                if char == frame.closer:
                    self.advance()
                    stack.pop()
                    value = frame.container
                    continue
                what = "object" if frame.closer == "}" else "array"
                raise self.error(f"Expected ',' or '{frame.closer}' in {what}")
            else:
                return value

            depth = frame.depth + 1

    def _read_key(self, frame: _OpenContainer) -> None:
        """Reads ``"key" :`` and leaves the position at the member value."""
        if self.peek() != '"':
            raise self.error("Expected string key")
        frame.key_pos = self.pos
        frame.key_line = self.line
        frame.key_column = self.column
        frame.key = self.parse_string()
        self.skip_whitespace()
        if self.peek() != ":":
            raise self.error("Expected ':' after object key")
        self.advance()
        self.skip_whitespace()

    def _store(self, frame: _OpenContainer, value: JsonValue) -> None:
        """Adds a finished value to its container, applying the key policy."""
        container = frame.container
        if isinstance(container, list):
            container.append(value)
            return

        key = frame.key
        if key not in container:
            container[key] = value
            return

        self.duplicates.append(
            DuplicateRecord(key, frame.key_line, frame.key_column)
        )
        policy = self.options.duplicate_policy
        if policy is DuplicatePolicy.ERROR:
            raise self.error(f'Duplicate key "{key}"', frame.key_pos)
        if policy is DuplicatePolicy.LAST:
            container[key] = value

    def _parse_scalar(self, char: str) -> JsonValue:
        if char == '"':
            return self.parse_string()
        if char == "-" or char in _DIGITS:
            return self.parse_number()
        literal = _LITERALS.get(char)
        if literal is not None:
            word, value = literal
            if not self.text.startswith(word, self.pos):
                raise self.error(f"Expected '{word}'")
            self._skip(len(word))
            return value
        if not char:
            raise self.error("Unexpected end of input")
        raise self.error(f"Unexpected token '{char}'")

    def parse_string(self) -> str:
        """Parses a double-quoted string, decoding escape sequences."""
        with ProfileContext("parse_string"):
            self.advance()
            chunks: list[str] = []

            while self.pos < self.length:
                run = _PLAIN_STRING_RUN.match(self.text, self.pos)
                if run is not None:
                    chunks.append(run.group())
                    self._skip(run.end() - run.start())
                    continue

                char = self.advance()
                if char == '"':
                    return "".join(chunks)
                if char == "\\":
                    self._read_escape(chunks)
                else:
                    raise self.error(
                        "Unexpected line break in string", self.pos - 1
                    )

            raise self.error("Unterminated string")

    def _read_escape(self, chunks: list[str]) -> None:
        if self.pos >= self.length:
            raise self.error("Unterminated string")

        escape = self.advance()
        decoded = _ESCAPES.get(escape)
        if decoded is not None:
            chunks.append(decoded)
            return
        if escape != "u":
            raise self.error(
                f"Invalid escape character '{escape}'", self.pos - 1
            )

        digits = self.text[self.pos : self.pos + 4]
        if len(digits) != 4 or not all(c in _HEX_DIGITS for c in digits):
            raise self.error("Invalid Unicode escape sequence")
        self._skip(4)

        # \uXXXX is a UTF-16 code unit; join a low surrogate onto a
        # preceding high surrogate so pairs become one character
        unit = int(digits, 16)
        previous = chunks[-1] if chunks else ""
        if 0xDC00 <= unit <= 0xDFFF and previous and (
            0xD800 <= ord(previous[-1]) <= 0xDBFF
        ):
            high = ord(previous[-1])
            paired = 0x10000 + ((high - 0xD800) << 10) + (unit - 0xDC00)
            chunks[-1] = previous[:-1] + chr(paired)
        else:
            chunks.append(chr(unit))

    def _consume_digits(self) -> None:
        run = _DIGIT_RUN.match(self.text, self.pos)
        if run is not None:
            self._skip(run.end() - run.start())

    def parse_number(self) -> float:
        """Parses a JSON number into a double."""
        with ProfileContext("parse_number"):
            start = self.pos
            if self.peek() == "-":
                self.advance()

            if self.peek() == "0":
                self.advance()
                if self.peek() in _DIGITS:
                    raise self.error("Leading zeros are not allowed")
            elif self.peek() in _DIGITS:
                self._consume_digits()
            else:
                raise self.error("Invalid number", start)

            if self.peek() == ".":
                self.advance()
                if self.peek() not in _DIGITS:
                    raise self.error("Expected digit after decimal point")
                self._consume_digits()

            if self.peek() in ("e", "E"):
                self.advance()
                if self.peek() in ("+", "-"):
                    self.advance()
                if self.peek() not in _DIGITS:
                    raise self.error("Expected digit in exponent")
                self._consume_digits()

            number = float(self.text[start : self.pos])
            if not math.isfinite(number):
                raise self.error("Invalid number", start)
            return number
