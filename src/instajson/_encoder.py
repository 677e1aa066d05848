"""Serialization of parse results back to JSON text."""

import math
from collections.abc import Iterator
from dataclasses import dataclass
from typing import IO
from typing import Any

# Integral doubles below this print without exponent or fraction
_INTEGRAL_LIMIT = 1e21
_ASCII_LIMIT = 127

_STRING_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


@dataclass(frozen=True)
class EncodeConfig:
    """
    Configures JSON encoding behavior with immutable settings.

    ``indent`` accepts a number of spaces or a literal indent string; with
    ``None`` the output is compact.
    """

    indent: str | int | None = None
    sort_keys: bool = False
    ensure_ascii: bool = False

    def __post_init__(self) -> None:
        if self.indent is not None and not isinstance(self.indent, str | int):
            raise TypeError("indent must be an int, a string or None")
        if not isinstance(self.sort_keys, bool):
            raise TypeError("sort_keys must be a boolean")
        if not isinstance(self.ensure_ascii, bool):
            raise TypeError("ensure_ascii must be a boolean")

    @property
    def indent_unit(self) -> str | None:
        if self.indent is None:
            return None
        if isinstance(self.indent, int):
            return " " * self.indent
        return self.indent


def _encode_string(s: str, ensure_ascii: bool) -> str:
    result = ['"']
    for char in s:
        escaped = _STRING_ESCAPES.get(char)
        if escaped is not None:
            result.append(escaped)
        elif (
            ord(char) < 0x20
            or 0xD800 <= ord(char) <= 0xDFFF
            or (ensure_ascii and ord(char) > _ASCII_LIMIT)
        ):
            if ord(char) > 0xFFFF:
                # Astral characters are written as a surrogate pair
                code = ord(char) - 0x10000
                high = 0xD800 + (code >> 10)
                low = 0xDC00 + (code & 0x3FF)
                result.append(f"\\u{high:04x}\\u{low:04x}")
            else:
                result.append(f"\\u{ord(char):04x}")
        else:
            result.append(char)
    result.append('"')
    return "".join(result)


def _encode_number(n: int | float) -> str:
    """Writes numbers the way a double-only JSON reader expects them."""
    if isinstance(n, int):
        return str(n)
    if not math.isfinite(n):
        raise ValueError("Out of range float values are not JSON compliant")
    if n.is_integer() and abs(n) < _INTEGRAL_LIMIT:
        return str(int(n))
    return repr(n)


def _encode_scalar(obj: Any, config: EncodeConfig) -> str:
    if obj is None:
        return "null"
    elif obj is True:
        return "true"
    elif obj is False:
        return "false"
    elif isinstance(obj, str):
        return _encode_string(obj, config.ensure_ascii)
    elif isinstance(obj, int | float):
        return _encode_number(obj)
    msg = f"Object of type {type(obj).__name__} is not JSON serializable"
    raise TypeError(msg)


@dataclass(slots=True)
class _OpenContainer:
    """An array or object whose members are still being written."""

    members: Iterator[tuple[str | None, Any]]
    level: int
    closer: str
    ident: int
    empty: bool = True


def _object_members(
    d: dict[Any, Any], config: EncodeConfig
) -> Iterator[tuple[str | None, Any]]:
    pairs = list(d.items())
    for key, _ in pairs:
        if not isinstance(key, str):
            raise TypeError(f"keys must be str, not {type(key).__name__}")
    if config.sort_keys:
        pairs.sort(key=lambda pair: pair[0])
    return iter(pairs)


def _encode_value(obj: Any, config: EncodeConfig) -> str:
    """
    Writes ``obj`` using an explicit stack of open containers.

    Nesting depth is bounded by memory, not by the interpreter's recursion
    limit, so anything the parser accepts can be written back out.
    """
    unit = config.indent_unit
    separator = ": " if unit is not None else ":"
    chunks: list[str] = []
    stack: list[_OpenContainer] = []
    open_ids: set[int] = set()

    while True:
        if isinstance(obj, dict | list | tuple):
            if id(obj) in open_ids:
                raise ValueError("Circular reference detected")
            open_ids.add(id(obj))
            if isinstance(obj, dict):
                chunks.append("{")
                members = _object_members(obj, config)
                closer = "}"
            else:
                chunks.append("[")
                members = ((None, item) for item in obj)
                closer = "]"
            stack.append(_OpenContainer(members, len(stack), closer, id(obj)))
        else:
            chunks.append(_encode_scalar(obj, config))

        while stack:
            frame = stack[-1]
            member = next(frame.members, None)
            if member is None:
                stack.pop()
                open_ids.discard(frame.ident)
                if unit is not None and not frame.empty:
                    chunks.append("\n" + unit * frame.level)
                chunks.append(frame.closer)
                continue

            if not frame.empty:
                chunks.append(",")
            frame.empty = False
            if unit is not None:
                chunks.append("\n" + unit * (frame.level + 1))
            key, obj = member
            if key is not None:
                chunks.append(_encode_string(key, config.ensure_ascii))
                chunks.append(separator)
            break
        else:
            return "".join(chunks)


def dumps(obj: Any, **kwargs: Any) -> str:
    """
    Serializes a parsed value to JSON text.

    Integral doubles such as ``1.0`` are written as ``1``, matching how
    the parser reads every number as a double.
    """
    config = EncodeConfig(**kwargs)
    return _encode_value(obj, config)


def dump(obj: Any, fp: IO[str], **kwargs: Any) -> None:
    """Serializes a parsed value to a text file object."""
    if not hasattr(fp, "write"):
        raise TypeError("fp must have a write() method")

    fp.write(dumps(obj, **kwargs))
