"""Ray-powered existence verifier fanning batches out to a bounded pool."""

from __future__ import annotations

from time import perf_counter
from typing import List, Optional, Sequence, Tuple

import ray

from ..config import VerifyConfig
from ..context import CancellationToken
from ..logging_utils import get_logger
from ..miss_logger import MissLogger
from ..models import RecordFactory, VerificationRecord, VerificationResult
from ..progress import ProgressReporter
from .base import path_exists, verifiable_entries


def _batch_paths(paths: List[str], batch_size: int) -> List[List[str]]:
    batch_size = max(1, batch_size)
    return [paths[idx : idx + batch_size] for idx in range(0, len(paths), batch_size)]


@ray.remote
def _check_batch(batch: List[str]) -> List[Tuple[str, bool]]:
    return [(path, path_exists(path)) for path in batch]


class ParallelVerifier:
    """Checks paths in Ray tasks while the driver owns logging and progress.

    At most ``num_workers`` batches are in flight. Results are consumed in
    completion order, so records are not in input order.
    """

    def __init__(
        self,
        config: Optional[VerifyConfig] = None,
        record_factory: RecordFactory = VerificationRecord,
    ):
        self.config = config or VerifyConfig()
        self.record_factory = record_factory
        self.logger = get_logger("ParallelVerifier")
        if not ray.is_initialized():
            ray.init(
                address=self.config.ray_address,
                include_dashboard=False,
                ignore_reinit_error=True,
                log_to_driver=False,
            )

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
        if token.cancelled:
            return VerificationResult(records=records, total_entries=total, cancelled=True)

        batches = iter(_batch_paths(entries, self.config.batch_size))
        pending: List[ray.ObjectRef] = []

        def submit_next() -> None:
            batch = next(batches, None)
            if batch is not None:
                pending.append(_check_batch.remote(batch))

        for _ in range(self.config.worker_count):
            submit_next()

        task_count = len(pending)
        while pending and not token.cancelled:
            ready, pending = ray.wait(pending, num_returns=1)
            if token.cancelled:
                break
            for path, exists in ray.get(ready[0]):
                record = self.record_factory(path, exists)
                records.append(record)
                if not exists:
                    self.logger.debug("Not found: %s", path)
                    miss_logger.write(path)
                progress.report(len(records), total, records)
            if not token.cancelled:
                before = len(pending)
                submit_next()
                task_count += len(pending) - before

        if token.cancelled and len(records) < total:
            for ref in pending:
                ray.cancel(ref)
            self.logger.warning(
                "Verification cancelled after %s of %s paths, %s tasks abandoned",
                len(records),
                total,
                len(pending),
            )
            return VerificationResult(records=records, total_entries=total, cancelled=True)

        self.logger.info(
            "Parallel verifier checked %s paths across %s Ray tasks in %.2fs",
            len(records),
            task_count,
            perf_counter() - start,
        )
        return VerificationResult(records=records, total_entries=total)
