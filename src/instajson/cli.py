"""
Command-line front end for instajson.

Exit codes: 0 on success, 1 on a syntax error, 2 when an input-size or
nesting-depth limit is hit, 3 when the input cannot be read.
"""

import argparse
import logging
import sys
from typing import IO

from instajson import __version__
from instajson import parse
from instajson._encoder import dumps
from instajson._errors import ErrorKind
from instajson._errors import JSONParseError
from instajson._types import DEFAULT_MAX_DEPTH
from instajson._types import DuplicatePolicy
from instajson._types import ParseOptions
from instajson._types import ParseResult

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_SYNTAX = 1
EXIT_LIMIT = 2
EXIT_UNREADABLE = 3

_MIB = 1024 * 1024
_MAX_SIZE_MB = 100
_BYTE_UNITS = ("B", "KB", "MB", "GB")


def format_bytes(size: int, decimals: int = 1) -> str:
    """Renders a byte count with a binary unit, e.g. ``1.5 KB``."""
    if size <= 0:
        return "0 B"
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(_BYTE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{value:.{decimals}f} {_BYTE_UNITS[unit]}"


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="instajson",
        description="Parse and pretty-print JSON with guarded limits.",
    )
    ap.add_argument(
        "file",
        nargs="?",
        default="-",
        help="JSON file to parse (default: read standard input)",
    )
    ap.add_argument(
        "--lenient",
        action="store_true",
        default=None,
        help="allow // and /* */ comments and trailing commas",
    )
    ap.add_argument(
        "--duplicates",
        choices=[policy.value for policy in DuplicatePolicy],
        help="duplicate key policy (default: error)",
    )
    ap.add_argument(
        "--max-depth",
        type=int,
        help=f"maximum nesting depth, 1-{DEFAULT_MAX_DEPTH}",
    )
    ap.add_argument(
        "--max-size-mb",
        type=int,
        help=f"maximum input size in MB, 1-{_MAX_SIZE_MB}",
    )
    ap.add_argument("--indent", type=int, choices=[2, 4], default=2)
    ap.add_argument(
        "--check",
        action="store_true",
        help="only validate; print OK instead of the formatted value",
    )
    ap.add_argument("-v", "--verbose", action="store_true")
    ap.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return ap


def options_from_args(args: argparse.Namespace) -> ParseOptions:
    """Environment defaults, then command-line flags clamped to sane ranges."""
    options = ParseOptions.from_env()
    max_depth = None
    if args.max_depth is not None:
        max_depth = _clamp(args.max_depth, 1, DEFAULT_MAX_DEPTH)
    max_input_bytes = None
    if args.max_size_mb is not None:
        max_input_bytes = _clamp(args.max_size_mb, 1, _MAX_SIZE_MB) * _MIB
    return options.merged(
        lenient=args.lenient,
        duplicate_policy=args.duplicates,
        max_depth=max_depth,
        max_input_bytes=max_input_bytes,
    )


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8", newline="") as fp:
        return fp.read()


def _report_warnings(
    result: ParseResult, options: ParseOptions, err: IO[str]
) -> None:
    warnings = result.warnings
    if warnings.lenient_applied:
        print(
            "warning: lenient mode removed comments or trailing commas",
            file=err,
        )
    policy = options.duplicate_policy.value
    for record in warnings.duplicates:
        print(
            f"warning: duplicate key {record.key!r} at line {record.line}, "
            f"column {record.column} (policy: {policy})",
            file=err,
        )


def _report_error(error: JSONParseError, err: IO[str]) -> None:
    print(
        f"{error.kind.value}: {error.msg} "
        f"(line {error.lineno}, column {error.colno})",
        file=err,
    )
    if error.snippet:
        print(error.snippet, file=err)


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    options = options_from_args(args)
    logger.debug("Parsing %s with %r", args.file, options)

    try:
        text = _read_input(args.file)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: cannot read {args.file}: {exc}", file=sys.stderr)
        return EXIT_UNREADABLE

    try:
        result = parse(text, options)
    except JSONParseError as exc:
        _report_error(exc, sys.stderr)
        if exc.kind is ErrorKind.SYNTAX:
            return EXIT_SYNTAX
        return EXIT_LIMIT

    _report_warnings(result, options, sys.stderr)
    if args.verbose:
        print(
            f"parsed {format_bytes(result.metadata.bytes)}, "
            f"depth {result.metadata.depth}",
            file=sys.stderr,
        )
    print("OK" if args.check else dumps(result.value, indent=args.indent))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
