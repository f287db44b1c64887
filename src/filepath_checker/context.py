"""Per-run state handed through the pipeline stages."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Optional

from .config import CheckerConfig
from .progress import READING, VERIFYING, ProgressCallback, ProgressReporter


class CancellationToken:
    """Run-scoped stop flag. Only the caller sets it; stages poll it."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


@dataclass
class RunContext:
    config: CheckerConfig
    token: CancellationToken = field(default_factory=CancellationToken)
    read_progress: ProgressReporter = field(
        default_factory=lambda: ProgressReporter(READING)
    )
    verify_progress: ProgressReporter = field(
        default_factory=lambda: ProgressReporter(VERIFYING)
    )

    @classmethod
    def create(
        cls,
        config: CheckerConfig,
        on_read_progress: Optional[ProgressCallback] = None,
        on_verify_progress: Optional[ProgressCallback] = None,
    ) -> "RunContext":
        return cls(
            config=config,
            read_progress=ProgressReporter(READING, on_read_progress),
            verify_progress=ProgressReporter(VERIFYING, on_verify_progress),
        )
