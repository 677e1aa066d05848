"""
Guarded JSON parsing with positioned errors.

Parses JSON text under configurable input-size and nesting-depth limits,
optionally tolerating comments and trailing commas, resolving duplicate
object keys under a selectable policy, and reporting failures with exact
line/column and a code frame snippet.
"""

import logging
from collections.abc import Mapping
from typing import IO
from typing import Any

from instajson._encoder import EncodeConfig
from instajson._encoder import dump
from instajson._encoder import dumps
from instajson._errors import DepthLimitError
from instajson._errors import ErrorKind
from instajson._errors import InputLimitError
from instajson._errors import JSONParseError
from instajson._errors import JSONSyntaxError
from instajson._errors import RawParseError
from instajson._lenient import LenientText
from instajson._lenient import preprocess_lenient
from instajson._parser import JsonParser
from instajson._parser import check_input_size
from instajson._position import SourcePosition
from instajson._position import code_frame
from instajson._position import position_from_offset
from instajson._profile import HotPathStats
from instajson._profile import ProfileContext
from instajson._profile import clear_hot_path_stats
from instajson._profile import get_hot_path_stats
from instajson._types import DuplicatePolicy
from instajson._types import DuplicateRecord
from instajson._types import JsonObject
from instajson._types import JsonValue
from instajson._types import ParseMetadata
from instajson._types import ParseOptions
from instajson._types import ParseResult
from instajson._types import ParseWarnings

__version__ = "1.0.0"

logger = logging.getLogger(__name__)


def _parse_text(s: str, options: ParseOptions) -> ParseResult:
    size = check_input_size(s, options.max_input_bytes)

    if options.lenient:
        processed = preprocess_lenient(s)
        if processed.lenient_applied:
            logger.debug("Lenient preprocessing rewrote comments or commas")
    else:
        processed = LenientText(s, False)

    parser = JsonParser(processed.text, options)
    value = parser.parse()

    if parser.duplicates:
        logger.debug(
            "Resolved %d duplicate key(s) with policy %r",
            len(parser.duplicates),
            options.duplicate_policy.value,
        )
    return ParseResult(
        value=value,
        warnings=ParseWarnings(
            lenient_applied=processed.lenient_applied,
            duplicates=tuple(parser.duplicates),
        ),
        metadata=ParseMetadata(bytes=size, depth=parser.depth_reached),
    )


def parse(
    s: str,
    options: ParseOptions | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> ParseResult:
    """
    Parses JSON text into a value tree with warnings and metadata.

    ``options`` is merged over the defaults (see ``ParseOptions.resolve``)
    and keyword ``overrides`` such as ``lenient=True`` are applied last.
    Failures raise a ``JSONParseError`` subclass whose line, column and
    snippet are computed against ``s`` as given, never against the
    preprocessed text.
    """
    if not isinstance(s, str):
        raise TypeError(
            f"the JSON object must be str, not {type(s).__name__}"
        )

    resolved = ParseOptions.resolve(options)
    if overrides:
        resolved = resolved.merged(**overrides)

    with ProfileContext("parse", len(s)):
        try:
            return _parse_text(s, resolved)
        except RawParseError as exc:
            logger.debug(
                "Parse failed: %s %r at offset %d",
                exc.kind.value,
                exc.msg,
                exc.pos,
            )
            raise JSONParseError.from_raw(exc, s) from None


def load(
    fp: IO[str],
    options: ParseOptions | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> ParseResult:
    """
    Parses JSON from a text file object.
    """
    if not hasattr(fp, "read"):
        raise TypeError("fp must have a read() method")

    return parse(fp.read(), options, **overrides)


__all__ = [
    "DepthLimitError",
    "DuplicatePolicy",
    "DuplicateRecord",
    "EncodeConfig",
    "ErrorKind",
    "HotPathStats",
    "InputLimitError",
    "JSONParseError",
    "JSONSyntaxError",
    "JsonObject",
    "JsonParser",
    "JsonValue",
    "LenientText",
    "ParseMetadata",
    "ParseOptions",
    "ParseResult",
    "ParseWarnings",
    "SourcePosition",
    "clear_hot_path_stats",
    "code_frame",
    "dump",
    "dumps",
    "get_hot_path_stats",
    "load",
    "parse",
    "position_from_offset",
    "preprocess_lenient",
]
