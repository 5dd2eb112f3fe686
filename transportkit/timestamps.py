"""Local-time timestamp strings for file names and logs."""

from __future__ import annotations

import time


def _local(when: float | None) -> time.struct_time:
    return time.localtime(when)


def get_timestamp(when: float | None = None) -> str:
    """Return a compact local timestamp, YYYYMMDD-HHMMSS, for when or now."""
    tm = _local(when)
    return (
        f"{tm.tm_year:04d}{tm.tm_mon:02d}{tm.tm_mday:02d}-"
        f"{tm.tm_hour:02d}{tm.tm_min:02d}{tm.tm_sec:02d}"
    )


def get_timestamp_separated(when: float | None = None) -> str:
    """Return a local timestamp, YYYY-MM-DD HH:MM:SS, for when or now."""
    tm = _local(when)
    return (
        f"{tm.tm_year:04d}-{tm.tm_mon:02d}-{tm.tm_mday:02d} "
        f"{tm.tm_hour:02d}:{tm.tm_min:02d}:{tm.tm_sec:02d}"
    )