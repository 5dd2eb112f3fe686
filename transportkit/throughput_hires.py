"""Timestamped per-channel value log with windowed sums and statistics."""

from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass

_U32_MASK = 0xFFFFFFFF
_EMPTY_MIN = 1 << 62


def _to_us(ts: float) -> int:
    return round(ts * 1_000_000)


def _now_us() -> int:
    return _to_us(time.time())


def _one_second_ago_us() -> int:
    return _to_us(time.time() - 1.0)


def _cdiv(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


@dataclass
class _Item:
    timestamp: int
    channel: int
    value: int


class HiresThroughput:
    """Records (channel, value, time) items, newest first, for windowed queries.

    Timestamps are seconds since the epoch, as returned by time.time().
    """

    def __init__(self, items_per_second: int = 0) -> None:
        if items_per_second < 0:
            raise ValueError("items_per_second must not be negative")
        self.items_per_second = items_per_second
        self._items: deque[_Item] = deque()

    def __len__(self) -> int:
        return len(self._items)

    def write(self, channel: int, value: int, ts: float | None = None) -> None:
        """Record value on channel at ts, or now."""
        stamp = _now_us() if ts is None else _to_us(ts)
        self._items.appendleft(_Item(stamp, channel & _U32_MASK, value))

    def expire(self, ts: float | None = None) -> int:
        """Drop items older than ts (default: one second ago); return how many went."""
        if not self._items:
            return 0
        limit = _one_second_ago_us() if ts is None else _to_us(ts)
        kept = deque(item for item in self._items if item.timestamp >= limit)
        expired = len(self._items) - len(kept)
        self._items = kept
        return expired

    def _window(self, start: float | None, end: float | None) -> tuple[int, int]:
        begin = _one_second_ago_us() if start is None else _to_us(start)
        finish = _now_us() if end is None else _to_us(end)
        return begin, finish

    def sum_total(self, channel: int, start: float | None = None, end: float | None = None) -> int:
        """Sum values on channel between start (default one second ago) and end (default now).

        Items are scanned newest first; the scan stops at the first item
        older than start.
        """
        begin, finish = self._window(start, end)
        channel &= _U32_MASK
        total = 0
        for item in self._items:
            if item.channel == channel and begin <= item.timestamp <= finish:
                total += item.value
            if item.timestamp < begin:
                break
        return total

    def min_max_avg(
        self, channel: int, start: float | None = None, end: float | None = None
    ) -> tuple[int, int, int]:
        """Return (minimum, maximum, average) of values on channel in the window.

        Items are scanned newest first; the scan stops at the first item
        that predates end. With no matching item the result is
        (2**62, -1, -1).
        """
        begin, finish = self._window(start, end)
        channel &= _U32_MASK
        vmin, vmax, acc = _EMPTY_MIN, -1, -1
        count = 0
        for item in self._items:
            if item.channel == channel and begin <= item.timestamp <= finish:
                count += 1
                vmax = max(vmax, item.value)
                vmin = min(vmin, item.value)
                acc += item.value
            if item.timestamp < finish:
                break
        avg = _cdiv(acc, count) if count else -1
        return vmin, vmax, avg