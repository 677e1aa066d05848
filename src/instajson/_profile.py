"""
Opt-in hot path profiling for the parsing pipeline.

Enabled by setting ``INSTAJSON_PROFILE`` in the environment before import.
When disabled, ``ProfileContext`` does nothing beyond one flag check, so the
parser stays free of shared mutable state.
"""

import os
import threading
import time
from dataclasses import dataclass
from typing import Any

PROFILE_HOT_PATHS = __debug__ and "INSTAJSON_PROFILE" in os.environ

_stats_lock = threading.Lock()
_hot_path_stats: dict[str, "HotPathStats"] = {}


@dataclass
class HotPathStats:
    """Timing and volume counters for one profiled stage."""

    function_name: str
    call_count: int = 0
    total_time_ns: int = 0
    chars_processed: int = 0
    largest_input: int = 0

    def record_call(self, duration_ns: int, chars: int = 0) -> None:
        self.call_count += 1
        self.total_time_ns += duration_ns
        self.chars_processed += chars
        self.largest_input = max(self.largest_input, chars)

    @property
    def mean_time_ns(self) -> float:
        return self.total_time_ns / self.call_count if self.call_count else 0.0


class ProfileContext:
    """Times the enclosed block under ``stage`` when profiling is on."""

    __slots__ = ("stage", "chars", "start_time")

    def __init__(self, stage: str, chars: int = 0) -> None:
        self.stage = stage
        self.chars = chars
        self.start_time = 0

    def __enter__(self) -> "ProfileContext":
        if PROFILE_HOT_PATHS:
            self.start_time = time.perf_counter_ns()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if not PROFILE_HOT_PATHS:
            return
        duration = time.perf_counter_ns() - self.start_time
        with _stats_lock:
            stats = _hot_path_stats.setdefault(
                self.stage, HotPathStats(self.stage)
            )
            stats.record_call(duration, self.chars)


def get_hot_path_stats() -> dict[str, HotPathStats]:
    """Returns a snapshot of the collected statistics, keyed by stage."""
    with _stats_lock:
        return dict(_hot_path_stats)


def clear_hot_path_stats() -> None:
    with _stats_lock:
        _hot_path_stats.clear()
