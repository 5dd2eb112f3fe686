"""Raising, clearing and reporting TR 101 290 alarms over an event table."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable

from transportkit.events import Event, EventState, default_events, event_name


def _split_timeval(ts: float) -> tuple[int, int]:
    return divmod(round(ts * 1_000_000), 1_000_000)


@dataclass
class Alarm:
    """A report of an event being raised or cleared."""

    id: Event
    priority: int
    raised: bool
    timestamp: float
    description: str
    arg: str = ""


def format_alarm(alarm: Alarm) -> str:
    """Return the one-line text form of an alarm record."""
    sec, usec = _split_timeval(alarm.timestamp)
    return "@%d.%6d -- Event P%d: %s %s - '%s'\n" % (
        sec,
        usec,
        alarm.priority,
        event_name(alarm.id),
        "raised" if alarm.raised else "cleared",
        alarm.description,
    )


class AlarmBoard:
    """A table of event states that alarms are raised against and cleared on.

    Raising an event arms a timer: once it runs out the event is due to be
    raised again unless something clears it first. A raised event lingers
    for its auto-clear period before a clear takes effect.
    """

    def __init__(self) -> None:
        self.events: list[EventState] = default_events()
        self.lock = threading.RLock()
        self.clock: Callable[[], float] = time.time

    def __getitem__(self, event: int) -> EventState:
        return self._state(event)

    def __len__(self) -> int:
        return len(self.events)

    def _state(self, event: int) -> EventState:
        if not 0 <= event < len(self.events):
            raise ValueError(f"unknown event {event}")
        return self.events[event]

    def enable(self, event: int) -> None:
        """Enable processing of event."""
        state = self._state(event)
        with self.lock:
            state.enabled = True

    def disable(self, event: int) -> None:
        """Disable processing of event."""
        state = self._state(event)
        with self.lock:
            state.enabled = False

    def enable_all(self) -> None:
        """Enable every defined event."""
        with self.lock:
            for state in self.events[1:]:
                state.enabled = True

    def disable_all(self) -> None:
        """Disable every defined event."""
        with self.lock:
            for state in self.events[1:]:
                state.enabled = False

    def clear_event(self, event: int) -> None:
        """Mark event as not raised, immediately and unconditionally."""
        state = self._state(event)
        with self.lock:
            state.raised = False

    def _arm(self, state: EventState, now: float) -> None:
        state.next_alarm = now + state.auto_clear_interval

    def raise_alarm(self, event: int, arg: str | None = None) -> None:
        """Raise event, optionally with a description of what went wrong.

        Without arg, a newly raised event has its description emptied and an
        already raised one keeps it.
        """
        state = self._state(event)
        now = self.clock()
        if not state.raised:
            state.raised = True
            state.last_changed = now
            if arg is None:
                state.arg = ""
        if arg is not None:
            state.arg = arg
        self._arm(state, now)

    def clear_alarm(self, event: int) -> None:
        """Clear event, once it has been raised for at least its auto-clear period."""
        state = self._state(event)
        now = self.clock()
        if state.raised and now >= state.last_changed + state.auto_clear_interval:
            state.raised = False
            state.last_changed = now
            state.arg = ""
        self._arm(state, now)

    def raise_all(self) -> None:
        """Raise every defined event."""
        for state in self.events[1:]:
            self.raise_alarm(state.id)

    def should_report(self, event: int) -> bool:
        """Return True if event is enabled and has changed since it was last reported."""
        state = self._state(event)
        if not state.enabled:
            return False
        if int(state.last_reported) == 0:
            state.last_reported = float(int(state.last_changed) - 1)
        return state.last_reported < state.last_changed