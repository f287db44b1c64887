"""Shared pipeline models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence


class RunState(str, Enum):
    IDLE = "idle"
    READING = "reading"
    VERIFYING = "verifying"
    DONE = "done"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class VerificationRecord:
    path: str
    exists: bool


RecordFactory = Callable[[str, bool], VerificationRecord]


@dataclass(frozen=True)
class ProgressEvent:
    """One percentage update for a stage.

    ``items`` is the stage's live buffer; only ``items[:count]`` belongs to
    this event.
    """

    stage: str
    percentage_completed: int
    items: Sequence = field(repr=False)
    count: int

    @property
    def items_so_far(self) -> Sequence:
        return self.items[: self.count]


@dataclass
class ExtractionResult:
    paths: List[str]
    rows_read: int
    total_rows: int
    cancelled: bool = False


@dataclass
class VerificationResult:
    records: List[VerificationRecord]
    total_entries: int
    cancelled: bool = False

    @property
    def missing(self) -> List[VerificationRecord]:
        return [record for record in self.records if not record.exists]


@dataclass
class RunSummary:
    total_checked: int
    total_missing: int
    elapsed: timedelta
    log_location: Optional[Path]
    state: RunState
    paths_extracted: int = 0
    stage_timings: Dict[str, float] = field(default_factory=dict)

    @property
    def cancelled(self) -> bool:
        return self.state is RunState.CANCELLED

    @property
    def elapsed_text(self) -> str:
        total = int(self.elapsed.total_seconds())
        hours, remainder = divmod(total, 3600)
        minutes, seconds = divmod(remainder, 60)
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
