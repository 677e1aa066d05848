"""
Domain types shared by the parser, orchestrator and CLI.

Options are held in an immutable dataclass that normalizes itself on
construction: unset or invalid fields fall back to documented defaults
instead of raising, so every parse runs with a fully resolved option set.
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 512
DEFAULT_MAX_INPUT_BYTES = 5 * 1024 * 1024


class JsonObject(dict[str, "JsonValue"]):
    """
    Ordered JSON object with unique keys.

    Keys iterate in first-seen order with O(1) lookup. Assigning to an
    existing key replaces its value without moving the key.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return f"JsonObject({dict.__repr__(self)})"


# Every JSON number is an IEEE-754 double
type JsonValue = None | bool | float | str | list[JsonValue] | JsonObject


class DuplicatePolicy(Enum):
    """How repeated keys inside one object are resolved."""

    ERROR = "error"
    FIRST = "first"
    LAST = "last"


def _coerce_bool(name: str, value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    logger.debug("Ignoring invalid %s=%r, using %r", name, value, default)
    return default


def _coerce_limit(name: str, value: Any, default: int) -> int:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    logger.debug("Ignoring invalid %s=%r, using %r", name, value, default)
    return default


def _coerce_policy(value: Any) -> DuplicatePolicy:
    if isinstance(value, DuplicatePolicy):
        return value
    if isinstance(value, str):
        try:
            return DuplicatePolicy(value.strip().lower())
        except ValueError:
            pass
    logger.debug("Ignoring invalid duplicate_policy=%r, using 'error'", value)
    return DuplicatePolicy.ERROR


# Accepts the settings names used by browser front ends as well
_OPTION_ALIASES = {
    "lenient": "lenient",
    "lenientMode": "lenient",
    "duplicate_policy": "duplicate_policy",
    "duplicatePolicy": "duplicate_policy",
    "max_depth": "max_depth",
    "maxDepth": "max_depth",
    "max_input_bytes": "max_input_bytes",
    "maxInputBytes": "max_input_bytes",
}

_TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True)
class ParseOptions:
    """
    Configures one parse with immutable, always-valid settings.

    Fields given invalid values (wrong type, non-positive limits, unknown
    policy names) are replaced by their defaults during construction.
    """

    lenient: bool = False
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.ERROR
    max_depth: int = DEFAULT_MAX_DEPTH
    max_input_bytes: int = DEFAULT_MAX_INPUT_BYTES

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "lenient", _coerce_bool("lenient", self.lenient, False)
        )
        object.__setattr__(
            self, "duplicate_policy", _coerce_policy(self.duplicate_policy)
        )
        object.__setattr__(
            self,
            "max_depth",
            _coerce_limit("max_depth", self.max_depth, DEFAULT_MAX_DEPTH),
        )
        object.__setattr__(
            self,
            "max_input_bytes",
            _coerce_limit(
                "max_input_bytes", self.max_input_bytes, DEFAULT_MAX_INPUT_BYTES
            ),
        )

    @classmethod
    def resolve(
        cls, overrides: "ParseOptions | Mapping[str, Any] | None" = None
    ) -> "ParseOptions":
        """
        Merges caller-supplied settings over the defaults.

        Accepts another ``ParseOptions``, a mapping with snake_case or
        camelCase keys, or ``None``. Unknown keys are ignored and ``None``
        values count as unset.
        """
        if overrides is None:
            return cls()
        if isinstance(overrides, ParseOptions):
            return overrides
        if not isinstance(overrides, Mapping):
            logger.debug("Ignoring non-mapping parse options %r", overrides)
            return cls()

        fields: dict[str, Any] = {}
        for key, value in overrides.items():
            name = _OPTION_ALIASES.get(key)
            if name is not None and value is not None:
                fields[name] = value
        return cls(**fields)

    def merged(self, **overrides: Any) -> "ParseOptions":
        """Returns a copy with ``overrides`` applied on top of this instance."""
        fields = {
            "lenient": self.lenient,
            "duplicate_policy": self.duplicate_policy,
            "max_depth": self.max_depth,
            "max_input_bytes": self.max_input_bytes,
        }
        for key, value in overrides.items():
            name = _OPTION_ALIASES.get(key)
            if name is None:
                raise TypeError(f"unexpected parse option {key!r}")
            if value is not None:
                fields[name] = value
        return ParseOptions(**fields)

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None
    ) -> "ParseOptions":
        """
        Reads defaults from ``INSTAJSON_*`` environment variables.

        Recognized: ``INSTAJSON_LENIENT``, ``INSTAJSON_DUPLICATE_POLICY``,
        ``INSTAJSON_MAX_DEPTH`` and ``INSTAJSON_MAX_INPUT_BYTES``.
        """
        env = os.environ if environ is None else environ
        fields: dict[str, Any] = {}

        lenient = env.get("INSTAJSON_LENIENT")
        if lenient is not None:
            fields["lenient"] = lenient.strip().lower() in _TRUTHY
        policy = env.get("INSTAJSON_DUPLICATE_POLICY")
        if policy is not None:
            fields["duplicate_policy"] = policy
        for name, var in (
            ("max_depth", "INSTAJSON_MAX_DEPTH"),
            ("max_input_bytes", "INSTAJSON_MAX_INPUT_BYTES"),
        ):
            raw = env.get(var)
            if raw is None:
                continue
            try:
                fields[name] = int(raw)
            except ValueError:
                logger.debug("Ignoring non-integer %s=%r", var, raw)
        return cls(**fields)


@dataclass(frozen=True)
class DuplicateRecord:
    """A repeated object key and the 1-based position of its opening quote."""

    key: str
    line: int
    column: int


@dataclass(frozen=True)
class ParseWarnings:
    """Non-fatal diagnostics gathered during a successful parse."""

    lenient_applied: bool = False
    duplicates: tuple[DuplicateRecord, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ParseMetadata:
    """Informational figures about the parsed input."""

    bytes: int
    depth: int


@dataclass(frozen=True)
class ParseResult:
    """Successful parse: the value tree plus warnings and metadata."""

    value: JsonValue
    warnings: ParseWarnings
    metadata: ParseMetadata
