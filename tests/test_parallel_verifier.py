from pathlib import Path

import pytest
import ray

from conftest import read_log
from filepath_checker.config import CheckerConfig, VerifyConfig
from filepath_checker.context import CancellationToken
from filepath_checker.miss_logger import MissLogger
from filepath_checker.progress import VERIFYING, ProgressReporter
from filepath_checker.verifiers import SequentialVerifier, select_verifier
from filepath_checker.verifiers.parallel import ParallelVerifier, _batch_paths


@pytest.fixture(scope="module", autouse=True)
def ray_runtime():
    ray.init(num_cpus=2, include_dashboard=False, ignore_reinit_error=True, log_to_driver=False)
    yield
    ray.shutdown()


def _paths(tmp_path: Path, existing_files, count: int = 25) -> list[str]:
    present = existing_files(*[f"present{idx}.txt" for idx in range(count)])
    missing = [str(tmp_path / f"missing{idx}.txt") for idx in range(count // 2)]
    return present + missing + ["", "  "]


def test_batches_cover_every_path():
    batches = _batch_paths([str(idx) for idx in range(10)], 4)
    assert [len(batch) for batch in batches] == [4, 4, 2]
    assert _batch_paths(["a"], 0) == [["a"]]


def test_totals_match_sequential(tmp_path: Path, existing_files):
    paths = _paths(tmp_path, existing_files)
    config = VerifyConfig(num_workers=2, batch_size=4)

    with MissLogger(tmp_path / "seq") as seq_logger:
        sequential = SequentialVerifier(config).verify(
            paths, CancellationToken(), seq_logger, ProgressReporter(VERIFYING)
        )
    events = []
    with MissLogger(tmp_path / "par") as par_logger:
        parallel = ParallelVerifier(config).verify(
            paths, CancellationToken(), par_logger, ProgressReporter(VERIFYING, events.append)
        )

    assert len(parallel.records) == len(sequential.records) == 37
    assert len(parallel.missing) == len(sequential.missing) == 12
    assert sorted(read_log(par_logger.path)) == sorted(read_log(seq_logger.path))
    percentages = [event.percentage_completed for event in events]
    assert percentages == sorted(percentages)
    assert percentages[-1] == 100


def test_cancelled_before_start_checks_nothing(tmp_path: Path, existing_files):
    paths = _paths(tmp_path, existing_files, count=4)
    token = CancellationToken()
    token.cancel()
    with MissLogger(tmp_path / "logs") as logger:
        result = ParallelVerifier(VerifyConfig(num_workers=2, batch_size=1)).verify(
            paths, token, logger, ProgressReporter(VERIFYING)
        )
    assert result.cancelled
    assert result.records == []
    assert read_log(logger.path) == ["Error;Filepath"]


def test_cancellation_logs_only_processed_paths(tmp_path: Path):
    paths = [str(tmp_path / f"missing{idx}.txt") for idx in range(40)]
    token = CancellationToken()

    def cancel_on_first(event):
        token.cancel()

    with MissLogger(tmp_path / "logs") as logger:
        result = ParallelVerifier(VerifyConfig(num_workers=2, batch_size=5)).verify(
            paths, token, logger, ProgressReporter(VERIFYING, cancel_on_first)
        )
    assert result.cancelled
    assert len(result.records) == 5
    logged = read_log(logger.path)[1:]
    assert sorted(logged) == sorted(f"File not found;{record.path}" for record in result.records)


def test_select_verifier_parallel():
    config = CheckerConfig(verifier_type="parallel")
    assert isinstance(select_verifier(config), ParallelVerifier)
