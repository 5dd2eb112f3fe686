"""Millisecond-granularity histograms for interval, sample and cumulative timings."""

from __future__ import annotations

import math
import sys
import time
from dataclasses import dataclass
from typing import TextIO


@dataclass
class HistogramBucket:
    """Hit count of one millisecond bucket and the time of its last hit."""

    count: int = 0
    last_update: float = 0.0


def _elapsed_ms(now: float, then: float) -> int:
    us = round(now * 1_000_000) - round(then * 1_000_000)
    return us // 1000 if us >= 0 else -((-us) // 1000)


def _pct(part: int, total: int) -> float:
    if total == 0:
        return math.inf if part else math.nan
    return part / total * 100.0


class Histogram:
    """Counts millisecond measurements into buckets from min_ms to max_ms."""

    def __init__(self, name: str, min_ms: int, max_ms: int) -> None:
        if name is None:
            raise ValueError("a histogram needs a name")
        if min_ms == max_ms:
            raise ValueError("min_ms and max_ms must differ")
        if max_ms < min_ms:
            raise ValueError("max_ms must exceed min_ms")
        if not max_ms:
            raise ValueError("max_ms must be non-zero")
        self.name = name[:128]
        self.min_ms = min_ms
        self.max_ms = max_ms
        self.bucket_count = max_ms - min_ms
        self.buckets: dict[int, HistogramBucket] = {}
        self.bucket_miss_count = 0
        self.total_count = 0
        self.interval_last = time.time()
        self.cumulative_ms = 0
        self.cumulative_last = 0.0
        self.sample_ms = 0
        self.sample_last = 0.0
        self.print_last = 0.0
        self.print_summary_last = 0.0
        self.reset()

    @classmethod
    def video_defaults(cls, name: str) -> Histogram:
        """Return a histogram spanning 0 to 16 seconds."""
        return cls(name, 0, 16 * 1000)

    def reset(self) -> None:
        """Empty every bucket and restart the interval clock."""
        self.buckets.clear()
        self.interval_last = time.time()
        self.bucket_miss_count = 0
        self.cumulative_ms = 0
        self.total_count = 0

    def _bucket(self, ms: int) -> HistogramBucket:
        return self.buckets.setdefault(ms, HistogramBucket())

    def _record(self, ms: int, now: float) -> bool:
        if ms < self.min_ms or ms > self.max_ms:
            self.bucket_miss_count += 1
            return False
        bucket = self._bucket(ms)
        bucket.last_update = now
        bucket.count += 1
        self.total_count += 1
        return True

    def update_with_value(self, diff_ms: int) -> int | None:
        """Count diff_ms; return it, or None if it lies outside the range."""
        return diff_ms if self._record(diff_ms, time.time()) else None

    def interval_update(self) -> int | None:
        """Count the milliseconds since the previous call; None if out of range."""
        now = time.time()
        diff_ms = _elapsed_ms(now, self.interval_last)
        self.interval_last = now
        return diff_ms if self._record(diff_ms, now) else None

    def _due(self, seconds: int, attr: str) -> bool:
        if not seconds:
            return True
        now = time.time()
        if _elapsed_ms(now, getattr(self, attr)) < seconds * 1000:
            return False
        setattr(self, attr, now)
        return True

    def _render(self) -> str:
        lines = [f"Histogram '{self.name}' (ms, count, last update time, pct)\n"]
        running = 0
        distinct = 0
        measurements = 0
        for ms in range(self.min_ms, self.min_ms + self.bucket_count):
            bucket = self.buckets.get(ms)
            if bucket is None or not bucket.count:
                continue
            running += bucket.count
            overall = _pct(bucket.count, self.total_count)
            ranked = _pct(running, self.total_count)
            stamp = time.ctime(bucket.last_update)
            lines.append(
                "-> %5d %15d  %s  %10.6f%%  %10.6f%%\n" % (ms, bucket.count, stamp, overall, ranked)
            )
            distinct += 1
            measurements += bucket.count
        if self.bucket_miss_count:
            lines.append(f"{self.bucket_miss_count} out-of-range bucket misses\n")
        lines.append(
            f"{distinct} distinct buckets with {measurements} total measurements, "
            f"range: {self.min_ms} -> {self.max_ms} ms\n"
        )
        return "".join(lines)

    def format_interval(self, seconds: int = 0) -> str | None:
        """Return the histogram as text, or None if seconds have not yet passed since the last print."""
        if not self._due(seconds, "print_last"):
            return None
        return self._render()

    def print_interval(self, file: TextIO | None = None, seconds: int = 0) -> None:
        """Write the histogram to file, at most once every seconds when seconds is set."""
        if not self._due(seconds, "print_last"):
            return
        (file or sys.stdout).write(self._render())

    def print_summary(self, file: TextIO | None = None, seconds: int = 0, bucket_size_ms: int = 10) -> None:
        """Write the histogram regrouped into buckets of bucket_size_ms."""
        if bucket_size_ms <= 0:
            raise ValueError("bucket_size_ms must be positive")
        if not self._due(seconds, "print_summary_last"):
            return
        summary = Histogram(
            f"{self.name} - Summarized into buckets of {bucket_size_ms} ms", self.min_ms, self.max_ms
        )
        for start in range(self.min_ms, self.max_ms, bucket_size_ms):
            dst = summary._bucket(start + bucket_size_ms)
            for offset in range(bucket_size_ms - 1):
                src = self.buckets.get(start + offset)
                if src is None:
                    continue
                dst.count += src.count
                if src.last_update > dst.last_update:
                    dst.last_update = src.last_update
        summary.print_interval(file, seconds)

    def cumulative_initialize(self) -> None:
        """Start a new cumulative period."""
        self.cumulative_ms = 0

    def cumulative_begin(self) -> None:
        """Mark the start of one measured stretch within the period."""
        self.cumulative_last = time.time()

    def cumulative_end(self) -> int:
        """Close the stretch, add it to the period and return its length in ms."""
        val = _elapsed_ms(time.time(), self.cumulative_last)
        self.cumulative_ms += val
        return val

    def cumulative_finalize(self) -> int:
        """Count the period total into the buckets and return it."""
        self._record(self.cumulative_ms, time.time())
        return self.cumulative_ms

    def sample_begin(self) -> None:
        """Mark the start of a sample."""
        self.sample_last = time.time()

    def sample_end(self) -> int:
        """Count the sample's length into the buckets and return it in ms."""
        now = time.time()
        self.sample_ms = _elapsed_ms(now, self.sample_last)
        self._record(self.sample_ms, now)
        return self.sample_ms