"""
Hot path profiling tests.
"""

from collections.abc import Iterator

import pytest

import instajson
from instajson import _profile
from instajson import HotPathStats
from instajson import ProfileContext


@pytest.fixture
def profiling(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.setattr(_profile, "PROFILE_HOT_PATHS", True)
    instajson.clear_hot_path_stats()
    yield
    instajson.clear_hot_path_stats()


def test_stats_accumulate() -> None:
    stats = HotPathStats("parse")
    assert stats.mean_time_ns == 0.0

    stats.record_call(100, chars=10)
    stats.record_call(300, chars=4)
    assert stats.call_count == 2
    assert stats.total_time_ns == 400
    assert stats.chars_processed == 14
    assert stats.largest_input == 10
    assert stats.mean_time_ns == 200.0


@pytest.mark.skipif(
    _profile.PROFILE_HOT_PATHS, reason="INSTAJSON_PROFILE is set"
)
def test_disabled_by_default() -> None:
    """
    Validates nothing is recorded unless profiling was switched on.
    """
    instajson.clear_hot_path_stats()
    instajson.parse('{"a": [1, "x"]}')
    assert instajson.get_hot_path_stats() == {}


def test_parse_stages_recorded(profiling: None) -> None:
    """
    Validates each pipeline stage is timed under its own name.
    """
    text = '{"a": [1, "x"]} // done'
    instajson.parse(text, lenient=True)

    stats = instajson.get_hot_path_stats()
    assert {
        "parse",
        "preprocess_lenient",
        "parse_document",
        "parse_string",
        "parse_number",
    } <= set(stats)
    assert stats["parse"].call_count == 1
    assert stats["parse"].chars_processed == len(text)
    assert stats["parse_string"].call_count == 2


def test_failed_parse_still_recorded(profiling: None) -> None:
    """
    Validates a stage is timed even when it raises.
    """
    with pytest.raises(instajson.JSONSyntaxError):
        instajson.parse("[1,]")

    assert instajson.get_hot_path_stats()["parse"].call_count == 1


def test_context_manager_direct_use(profiling: None) -> None:
    with ProfileContext("custom", 42) as ctx:
        assert ctx.stage == "custom"

    stats = instajson.get_hot_path_stats()["custom"]
    assert stats.call_count == 1
    assert stats.largest_input == 42
    assert stats.total_time_ns >= 0


def test_snapshot_is_a_copy(profiling: None) -> None:
    instajson.parse("1")
    snapshot = instajson.get_hot_path_stats()
    instajson.clear_hot_path_stats()
    assert "parse" in snapshot
    assert instajson.get_hot_path_stats() == {}
