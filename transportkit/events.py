"""The TR 101 290 event catalogue and the per-event state kept by a monitor."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class Event(IntEnum):
    """TR 101 290 priority 1 and 2 events."""

    UNDEFINED = 0
    P1_1_TS_SYNC_LOSS = 1
    P1_2_SYNC_BYTE_ERROR = 2
    P1_3_PAT_ERROR = 3
    P1_3A_PAT_ERROR_2 = 4
    P1_4_CONTINUITY_COUNTER_ERROR = 5
    P1_5_PMT_ERROR = 6
    P1_5A_PMT_ERROR_2 = 7
    P1_6_PID_ERROR = 8
    P2_1_TRANSPORT_ERROR = 9
    P2_2_CRC_ERROR = 10
    P2_3_PCR_ERROR = 11
    P2_3A_PCR_REPETITION_ERROR = 12
    P2_4_PCR_ACCURACY_ERROR = 13
    P2_5_PTS_ERROR = 14
    P2_6_CAT_ERROR = 15


@dataclass
class EventState:
    """The live state of one event: whether it is enabled, raised, and when it changed.

    Times are seconds since the epoch; zero means never.
    """

    id: Event
    name: str
    enabled: bool
    priority: int
    raised: bool = False
    arg: str = ""
    last_changed: float = 0.0
    last_reported: float = 0.0
    next_alarm: float = 0.0
    report_interval: float = 1.0
    auto_clear_ms: int = 0

    @property
    def auto_clear_interval(self) -> float:
        """The auto-clear period in seconds."""
        return self.auto_clear_ms / 1000.0


# (event, enabled, priority, auto-clear period in ms)
_DEFAULTS = (
    (Event.UNDEFINED, False, 1, 0),
    (Event.P1_1_TS_SYNC_LOSS, True, 1, 5000),
    (Event.P1_2_SYNC_BYTE_ERROR, True, 1, 5000),
    (Event.P1_3_PAT_ERROR, True, 1, 5000),
    (Event.P1_3A_PAT_ERROR_2, True, 1, 5000),
    (Event.P1_4_CONTINUITY_COUNTER_ERROR, True, 1, 5000),
    (Event.P1_5_PMT_ERROR, True, 1, 5000),
    (Event.P1_5A_PMT_ERROR_2, True, 1, 5000),
    (Event.P1_6_PID_ERROR, True, 1, 5000),
    (Event.P2_1_TRANSPORT_ERROR, True, 2, 5000),
    (Event.P2_2_CRC_ERROR, True, 2, 5000),
    (Event.P2_3_PCR_ERROR, True, 2, 5000),
    (Event.P2_3A_PCR_REPETITION_ERROR, True, 2, 5000),
    (Event.P2_4_PCR_ACCURACY_ERROR, False, 2, 0),
    (Event.P2_5_PTS_ERROR, False, 2, 0),
    (Event.P2_6_CAT_ERROR, True, 2, 5000),
)

_NAMES = {
    Event.UNDEFINED: "E101290_UNDEFINED",
    Event.P1_1_TS_SYNC_LOSS: "E101290_P1_1__TS_SYNC_LOSS",
    Event.P1_2_SYNC_BYTE_ERROR: "E101290_P1_2__SYNC_BYTE_ERROR",
    Event.P1_3_PAT_ERROR: "E101290_P1_3__PAT_ERROR",
    Event.P1_3A_PAT_ERROR_2: "E101290_P1_3a__PAT_ERROR_2",
    Event.P1_4_CONTINUITY_COUNTER_ERROR: "E101290_P1_4__CONTINUITY_COUNTER_ERROR",
    Event.P1_5_PMT_ERROR: "E101290_P1_5__PMT_ERROR",
    Event.P1_5A_PMT_ERROR_2: "E101290_P1_5a__PMT_ERROR_2",
    Event.P1_6_PID_ERROR: "E101290_P1_6__PID_ERROR",
    Event.P2_1_TRANSPORT_ERROR: "E101290_P2_1__TRANSPORT_ERROR",
    Event.P2_2_CRC_ERROR: "E101290_P2_2__CRC_ERROR",
    Event.P2_3_PCR_ERROR: "E101290_P2_3__PCR_ERROR",
    Event.P2_3A_PCR_REPETITION_ERROR: "E101290_P2_3a__PCR_REPETITION_ERROR",
    Event.P2_4_PCR_ACCURACY_ERROR: "E101290_P2_4__PCR_ACCURACY_ERROR",
    Event.P2_5_PTS_ERROR: "E101290_P2_5__PTS_ERROR",
    Event.P2_6_CAT_ERROR: "E101290_P2_6__CAT_ERROR",
}

_PRIORITIES = {event: priority for event, _, priority, _ in _DEFAULTS}


def default_events() -> list[EventState]:
    """Return a fresh table of event states, indexed by event number."""
    return [
        EventState(
            id=event,
            name=_NAMES[event],
            enabled=enabled,
            priority=priority,
            auto_clear_ms=auto_clear_ms,
        )
        for event, enabled, priority, auto_clear_ms in _DEFAULTS
    ]


def _known(event: int) -> Event:
    try:
        return Event(event)
    except ValueError:
        return Event.UNDEFINED


def event_name(event: int) -> str:
    """Return the event's name; unknown events are reported as undefined."""
    return _NAMES[_known(event)]


def event_priority(event: int) -> int:
    """Return the event's TR 101 290 priority; unknown events report priority 1."""
    return _PRIORITIES[_known(event)]