"""
Test data generators for JSON parsing benchmarks.

Every generator draws from its own seeded ``random.Random`` so repeated runs
compare like with like. Strict documents are produced with ``json.dumps``;
the relaxed ones (comments, trailing commas, repeated keys) are assembled by
hand because no standard encoder writes them.
"""

import json
import random
import string
from collections.abc import Callable
from typing import Any

_SEED = 1729
_ESCAPES = ['\\"', "\\\\", "\\/", "\\b", "\\f", "\\n", "\\r", "\\t"]
_ESCAPE_PROBABILITY = 0.3


def _word(rng: random.Random, length: int) -> str:
    return "".join(rng.choices(string.ascii_letters, k=length))


def _settings(rng: random.Random) -> dict[str, Any]:
    return {
        "lenient": rng.choice([True, False]),
        "duplicate_policy": rng.choice(["error", "first", "last"]),
        "max_depth": rng.randint(16, 512),
        "max_input_bytes": rng.randint(1, 100) * 1024 * 1024,
        "theme": rng.choice(["light", "dark"]),
    }


def _small_object(rng: random.Random) -> str:
    """A settings object well under 1KB."""
    return json.dumps({"version": 3, "settings": _settings(rng)})


def _large_object(rng: random.Random) -> str:
    """A log export over 10KB: many records with mixed scalar fields."""
    records = [
        {
            "id": f"evt_{i:05d}",
            "level": rng.choice(["debug", "info", "warning", "error"]),
            "latency_ms": round(rng.uniform(0.1, 250.0), 3),
            "bytes": rng.randint(0, 5 * 1024 * 1024),
            "ok": rng.random() > 0.1,
            "message": f"request {_word(rng, 12)} finished",
            "tags": [_word(rng, 5) for _ in range(rng.randint(0, 4))],
        }
        for i in range(120)
    ]
    return json.dumps({"source": "gateway", "records": records})


def _mixed_array(rng: random.Random) -> str:
    """A flat array of every value kind."""
    makers: list[Callable[[], Any]] = [
        lambda: rng.randint(-1000, 1000),
        lambda: rng.uniform(-1e6, 1e6),
        lambda: _word(rng, rng.randint(3, 24)),
        lambda: rng.choice([True, False]),
        lambda: None,
        lambda: {"k": _word(rng, 6), "v": rng.random()},
    ]
    return json.dumps([rng.choice(makers)() for _ in range(400)])


def _nested_structure(rng: random.Random) -> str:
    """A tree seven levels deep with fan-out at every level."""

    def node(depth: int) -> dict[str, Any]:
        if depth == 0:
            return {"leaf": _word(rng, 8)}
        return {
            "depth": depth,
            "children": [node(depth - 1) for _ in range(3)],
        }

    return json.dumps(node(7))


def _string_heavy(rng: random.Random) -> str:
    """Strings dense with escapes, surrogate pairs and non-ASCII text."""

    def escaped() -> str:
        return "".join(
            rng.choice(_ESCAPES)
            if rng.random() < _ESCAPE_PROBABILITY
            else rng.choice(string.ascii_letters + " ")
            for _ in range(60)
        )

    strings = [escaped() for _ in range(150)]
    strings += ["\\ud83d\\ude00 caf\\u00e9 日本語" for _ in range(50)]
    return "{" + ",".join(
        f'"s{i}": "{s}"' for i, s in enumerate(strings)
    ) + "}"


def _commented_config(rng: random.Random) -> str:
    """A hand-edited config file with comments and trailing commas."""
    lines = ["// generated settings", "{"]
    for i in range(200):
        if i % 10 == 0:
            lines.append(f"  /* section {i // 10} */")
        value = json.dumps(_settings(rng))
        lines.append(f"  // entry {i}")
        lines.append(f'  "entry_{i}": {value[:-1]},}},')
    lines.append("}")
    return "\n".join(lines)


def _duplicate_keys(rng: random.Random) -> str:
    """An object where most keys appear several times."""
    members = [
        f'"key_{rng.randint(0, 49)}": {rng.randint(0, 9999)}'
        for _ in range(600)
    ]
    return "{" + ", ".join(members) + "}"


_GENERATORS: dict[str, Callable[[random.Random], str]] = {
    "small_object": _small_object,
    "large_object": _large_object,
    "mixed_array": _mixed_array,
    "nested_structure": _nested_structure,
    "string_heavy": _string_heavy,
    "commented_config": _commented_config,
    "duplicate_keys": _duplicate_keys,
}

STRICT_DATA_TYPES = (
    "small_object",
    "large_object",
    "mixed_array",
    "nested_structure",
    "string_heavy",
)


def generate_test_data(data_type: str) -> str:
    """Generates JSON test data based on specified type."""
    if data_type not in _GENERATORS:
        raise ValueError(f"Unknown data type: {data_type}")

    return _GENERATORS[data_type](random.Random(_SEED))
