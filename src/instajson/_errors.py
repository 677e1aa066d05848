"""
Error taxonomy for instajson parsing.

Failures are raised in two phases: the scanner raises a lightweight
``RawParseError`` carrying only a raw character offset, and the public
``parse`` entry point converts it into a positioned ``JSONParseError``
computed against the original, unmodified input.
"""

from enum import Enum

from instajson._position import code_frame
from instajson._position import position_from_offset

type Position = int


class ErrorKind(Enum):
    """Classifies a parse failure as a limit issue or malformed input."""

    INPUT_LIMIT = "InputLimit"
    DEPTH_LIMIT = "DepthLimit"
    SYNTAX = "Syntax"


class RawParseError(Exception):
    """
    Scanner-level failure holding only a kind, message and raw offset.

    Never escapes the package; ``parse`` turns it into a ``JSONParseError``.
    """

    def __init__(self, kind: ErrorKind, msg: str, pos: Position) -> None:
        super().__init__(msg)
        self.kind = kind
        self.msg = msg
        self.pos = pos


class JSONParseError(ValueError):
    """
    Handles JSON parsing failures with precise position and context information.

    Carries the failure kind, the 1-based line and column of the offending
    character and a code frame snippet so users can locate the problem.
    """

    kind: ErrorKind = ErrorKind.SYNTAX

    def __init__(
        self,
        msg: str,
        doc: str = "",
        pos: Position = 0,
        *,
        snippet: str | None = None,
    ) -> None:
        if not isinstance(msg, str):
            raise TypeError("msg must be a string")
        if not isinstance(pos, int) or pos < 0:
            raise ValueError("pos must be a non-negative integer")

        self.msg = msg
        self.doc = doc
        self.pos = pos

        location = position_from_offset(doc, pos)
        self.lineno = location.line
        self.colno = location.column
        if snippet is None:
            snippet = code_frame(doc, self.lineno, self.colno)
        self.snippet = snippet

        super().__init__(f"{msg} at line {self.lineno}, column {self.colno}")

    @classmethod
    def from_raw(cls, raw: RawParseError, doc: str) -> "JSONParseError":
        """Builds the public error matching ``raw.kind`` against ``doc``."""
        error_class = _ERROR_CLASSES[raw.kind]
        if raw.kind is ErrorKind.INPUT_LIMIT:
            return error_class(raw.msg, doc, raw.pos, snippet="")
        return error_class(raw.msg, doc, raw.pos)


class InputLimitError(JSONParseError):
    """Input is larger than the configured byte limit; nothing was scanned."""

    kind = ErrorKind.INPUT_LIMIT


class DepthLimitError(JSONParseError):
    """Nesting went deeper than the configured maximum."""

    kind = ErrorKind.DEPTH_LIMIT


class JSONSyntaxError(JSONParseError):
    """Input violates the JSON grammar."""

    kind = ErrorKind.SYNTAX


_ERROR_CLASSES: dict[ErrorKind, type[JSONParseError]] = {
    ErrorKind.INPUT_LIMIT: InputLimitError,
    ErrorKind.DEPTH_LIMIT: DepthLimitError,
    ErrorKind.SYNTAX: JSONSyntaxError,
}
