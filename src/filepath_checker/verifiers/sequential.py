"""Single-process existence verifier."""

from __future__ import annotations

from time import perf_counter
from typing import List, Optional, Sequence

from ..config import VerifyConfig
from ..context import CancellationToken
from ..logging_utils import get_logger
from ..miss_logger import MissLogger
from ..models import RecordFactory, VerificationRecord, VerificationResult
from ..progress import ProgressReporter
from .base import path_exists, verifiable_entries


class SequentialVerifier:
    def __init__(
        self,
        config: Optional[VerifyConfig] = None,
        record_factory: RecordFactory = VerificationRecord,
    ):
        self.config = config or VerifyConfig()
        self.record_factory = record_factory
        self.logger = get_logger("SequentialVerifier")

    def verify(
        self,
        paths: Sequence[str],
        token: CancellationToken,
        miss_logger: MissLogger,
        progress: ProgressReporter,
    ) -> VerificationResult:
        start = perf_counter()
        entries = verifiable_entries(paths)
        total = len(entries)
        records: List[VerificationRecord] = []
        if total == 0:
            progress.complete(records)
            return VerificationResult(records=records, total_entries=0)

        for path in entries:
            if token.cancelled:
                self.logger.warning(
                    "Verification cancelled after %s of %s paths", len(records), total
                )
                return VerificationResult(
                    records=records, total_entries=total, cancelled=True
                )
            record = self.record_factory(path, path_exists(path))
            records.append(record)
            if not record.exists:
                self.logger.debug("Not found: %s", path)
                miss_logger.write(path)
            progress.report(len(records), total, records)

        self.logger.info(
            "Sequential verifier checked %s paths in %.2fs",
            len(records),
            perf_counter() - start,
        )
        return VerificationResult(records=records, total_entries=total)
