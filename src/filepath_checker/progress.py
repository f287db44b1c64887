"""Percentage progress channels for the reading and verifying stages."""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from .models import ProgressEvent

ProgressCallback = Callable[[ProgressEvent], None]

READING = "reading"
VERIFYING = "verifying"


def percentage(done: int, total: int) -> int:
    if total <= 0:
        return 100
    return min(100, (done * 100) // total)


class ProgressReporter:
    """Publishes one event per processed unit of a single stage.

    The reporter keeps the last event so callers can poll ``latest`` instead
    of (or in addition to) registering a callback. Percentages never go
    backwards within a reporter's lifetime.
    """

    def __init__(self, stage: str, callback: Optional[ProgressCallback] = None):
        self.stage = stage
        self.callback = callback
        self.latest: Optional[ProgressEvent] = None

    @property
    def percentage_completed(self) -> int:
        return self.latest.percentage_completed if self.latest else 0

    def report(self, done: int, total: int, items: Sequence) -> ProgressEvent:
        value = max(percentage(done, total), self.percentage_completed)
        event = ProgressEvent(
            stage=self.stage,
            percentage_completed=value,
            items=items,
            count=len(items),
        )
        self.latest = event
        if self.callback is not None:
            self.callback(event)
        return event

    def complete(self, items: Sequence) -> ProgressEvent:
        return self.report(0, 0, items)
