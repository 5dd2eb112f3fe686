"""Per-second throughput measurement based on wall-clock seconds."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable

_U32_MASK = 0xFFFFFFFF
_STALE_AFTER_SECS = 2


@dataclass
class Throughput:
    """Accumulates bytes or values per wall-clock second.

    The figure reported is the total gathered during the last complete
    second. If nothing is written for more than two seconds the figures
    drop to zero.
    """

    clock: Callable[[], float] = time.time
    _bps: int = field(default=0, init=False, repr=False)
    _window: int = field(default=0, init=False, repr=False)
    _mbps: float = field(default=0.0, init=False, repr=False)
    _last_update: int = field(default=0, init=False, repr=False)

    def _roll(self, scale: int) -> None:
        now = int(self.clock())
        if now != self._last_update:
            self._bps = self._window
            self._window = 0
            self._mbps = self._bps * scale / 1e6
            self._last_update = now

    def write_value(self, value: int) -> None:
        """Add an arbitrary value; mbps() then reports millions of units per second."""
        self._roll(1)
        self._window += value

    def write(self, buf: bytes) -> None:
        """Add the length of buf in bytes; mbps() then reports megabits per second."""
        self._roll(8)
        self._window += len(buf)

    def reset(self) -> None:
        """Zero the megabit figure."""
        self._mbps = 0.0

    def _expire(self) -> None:
        now = int(self.clock())
        if now > self._last_update + _STALE_AFTER_SECS:
            self._mbps = 0.0
            self._bps = 0
            self._window = 0

    def mbps(self) -> float:
        """Return the rate of the last complete second in mega-units."""
        self._expire()
        return self._mbps

    def bps(self) -> int:
        """Return the bit rate of the last complete second."""
        self._expire()
        return (self._bps * 8) & _U32_MASK

    def value(self) -> int:
        """Return the raw total of the last complete second."""
        self._expire()
        return self._bps & _U32_MASK