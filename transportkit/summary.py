"""Snapshot and text report of every event's state on an alarm board."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import TextIO

from transportkit.alarms import AlarmBoard
from transportkit.events import Event, event_name


@dataclass(frozen=True)
class SummaryItem:
    """A copy of one event's state at the time the summary was taken."""

    id: Event
    enabled: bool
    priority: int
    last_update: float
    raised: bool
    arg: str


def summary_items(board: AlarmBoard) -> list[SummaryItem]:
    """Return a snapshot of every defined event on the board."""
    with board.lock:
        return [
            SummaryItem(
                id=state.id,
                enabled=state.enabled,
                priority=state.priority,
                last_update=state.last_changed,
                raised=state.raised,
                arg=state.arg,
            )
            for state in board.events[1:]
        ]


def format_summary_item(item: SummaryItem) -> str:
    """Return the one-line text form of a summary item."""
    sec, usec = divmod(round(item.last_update * 1_000_000), 1_000_000)
    return "@%d.%6d -- Event P%d (%s): %s %s\n" % (
        sec,
        usec,
        item.priority,
        "enabled " if item.enabled else "disabled",
        "raised" if item.raised else "clear ",
        event_name(item.id),
    )


def summary_report(board: AlarmBoard, file: TextIO | None = None) -> None:
    """Write one line per defined event to file, or standard output."""
    out = file or sys.stdout
    for item in summary_items(board):
        out.write(format_summary_item(item))