"""Run coordinator: reading, then verifying, then the summary."""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import timedelta
from pathlib import Path
from time import perf_counter
from typing import Dict, Optional

from .config import CheckerConfig
from .context import RunContext
from .errors import FilepathCheckerError
from .extractor import column_number, extract_paths
from .logging_utils import get_logger
from .miss_logger import MissLogger
from .models import RecordFactory, RunState, RunSummary, VerificationRecord
from .progress import ProgressCallback
from .verifiers import Verifier, select_verifier

_ACTIVE_STATES = (RunState.READING, RunState.VERIFYING)


class FilepathCheckPipeline:
    """Checks that every path listed in a spreadsheet column exists.

    One run at a time. Each run gets a fresh :class:`RunContext`, so the
    same pipeline can be started again once the previous run settled.
    Progress callbacks are invoked from the thread executing the run.
    """

    def __init__(
        self,
        config: Optional[CheckerConfig] = None,
        on_read_progress: Optional[ProgressCallback] = None,
        on_verify_progress: Optional[ProgressCallback] = None,
        verifier: Optional[Verifier] = None,
        record_factory: RecordFactory = VerificationRecord,
    ):
        self.config = config or CheckerConfig()
        self.on_read_progress = on_read_progress
        self.on_verify_progress = on_verify_progress
        self.record_factory = record_factory
        self.logger = get_logger("Pipeline")
        self._verifier = verifier
        self._state = RunState.IDLE
        self._context: Optional[RunContext] = None
        self._lock = threading.Lock()

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def context(self) -> Optional[RunContext]:
        return self._context

    def _set_state(self, state: RunState) -> None:
        self.logger.debug("State %s -> %s", self._state.value, state.value)
        self._state = state

    def _get_verifier(self) -> Verifier:
        if self._verifier is None:
            self._verifier = select_verifier(self.config, self.record_factory)
        return self._verifier

    def _begin(self, column: str) -> RunContext:
        column_number(column)
        # Ray must be started from the calling thread, not the run thread.
        self._get_verifier()
        with self._lock:
            if self._context is not None or self._state in _ACTIVE_STATES:
                raise RuntimeError("A run is already in progress")
            context = RunContext.create(
                self.config, self.on_read_progress, self.on_verify_progress
            )
            self._context = context
            self._set_state(RunState.READING)
        return context

    def cancel(self) -> None:
        """Request the active run to stop. Safe to call at any time."""
        context = self._context
        if context is not None and not context.token.cancelled:
            self.logger.info("Cancellation requested")
            context.token.cancel()

    def run(self, source: str | Path, column: str) -> RunSummary:
        context = self._begin(column)
        return self._execute(context, Path(source), column)

    def start(self, source: str | Path, column: str) -> "Future[RunSummary]":
        """Run in a background thread; input errors are raised before it starts."""
        context = self._begin(column)
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="filepath-check")
        try:
            return executor.submit(self._execute, context, Path(source), column)
        finally:
            executor.shutdown(wait=False)

    def _settle(self, context: RunContext, state: RunState) -> None:
        # Only the run owning the context may release it.
        with self._lock:
            if self._context is context:
                self._set_state(state)
                self._context = None

    def _execute(self, context: RunContext, source: Path, column: str) -> RunSummary:
        start = perf_counter()
        timings: Dict[str, float] = {}
        miss_logger: Optional[MissLogger] = None
        try:
            self.logger.info("Reading column %s of %s", column.upper(), source.name)
            read_start = perf_counter()
            extraction = extract_paths(
                source, column, context.token, context.read_progress, self.config.read
            )
            timings["read_seconds"] = perf_counter() - read_start

            if extraction.cancelled and not extraction.paths:
                self._settle(context, RunState.CANCELLED)
                return self._summarize(
                    RunState.CANCELLED, start, timings, 0, 0, None, len(extraction.paths)
                )

            with self._lock:
                self._set_state(RunState.VERIFYING)
            miss_logger = MissLogger(self.config.log_path, self.config.log)
            verify_start = perf_counter()
            verification = self._get_verifier().verify(
                extraction.paths, context.token, miss_logger, context.verify_progress
            )
            timings["verify_seconds"] = perf_counter() - verify_start
            miss_logger.close()

            cancelled = extraction.cancelled or verification.cancelled
            state = RunState.CANCELLED if cancelled else RunState.DONE
            self._settle(context, state)
            return self._summarize(
                state,
                start,
                timings,
                len(verification.records),
                len(verification.missing),
                miss_logger.path,
                len(extraction.paths),
            )
        except FilepathCheckerError as exc:
            self.logger.error("Run failed: %s", exc)
            raise
        except Exception:
            self.logger.exception("Run failed unexpectedly")
            raise
        finally:
            if miss_logger is not None:
                miss_logger.close()
            # No-op once settled; a failed run still owns its context here.
            self._settle(context, RunState.FAILED)

    def _summarize(
        self,
        state: RunState,
        start: float,
        timings: Dict[str, float],
        checked: int,
        missing: int,
        log_location: Optional[Path],
        extracted: int,
    ) -> RunSummary:
        summary = RunSummary(
            total_checked=checked,
            total_missing=missing,
            elapsed=timedelta(seconds=perf_counter() - start),
            log_location=log_location,
            state=state,
            paths_extracted=extracted,
            stage_timings=timings,
        )
        self.logger.info(
            "Run %s: %s checked, %s missing in %s",
            summary.state.value,
            summary.total_checked,
            summary.total_missing,
            summary.elapsed_text,
        )
        return summary
