from pathlib import Path

from conftest import read_log
from filepath_checker.config import CheckerConfig
from filepath_checker.context import CancellationToken
from filepath_checker.miss_logger import MissLogger
from filepath_checker.models import VerificationRecord
from filepath_checker.progress import VERIFYING, ProgressReporter
from filepath_checker.verifiers import SequentialVerifier, path_exists, select_verifier


def test_path_exists_only_for_regular_files(tmp_path: Path):
    target = tmp_path / "file.txt"
    target.write_text("x")
    assert path_exists(str(target))
    assert not path_exists(str(tmp_path))
    assert not path_exists(str(tmp_path / "absent.txt"))
    assert not path_exists("bad\x00path")
    assert not path_exists("\\\\unreachable-server\\share\\file.doc")


def test_records_and_log_for_missing_paths(tmp_path: Path, existing_files):
    present = existing_files("a.txt", "b.txt")
    missing = [str(tmp_path / "gone1.txt"), str(tmp_path / "gone2.txt")]
    paths = [present[0], missing[0], present[1], missing[1]]
    events = []
    with MissLogger(tmp_path / "logs") as logger:
        result = SequentialVerifier().verify(
            paths, CancellationToken(), logger, ProgressReporter(VERIFYING, events.append)
        )

    assert [record.path for record in result.records] == paths
    assert [record.exists for record in result.records] == [True, False, True, False]
    assert [record.path for record in result.missing] == missing
    assert read_log(logger.path) == ["Error;Filepath"] + [f"File not found;{p}" for p in missing]
    assert [event.percentage_completed for event in events] == [25, 50, 75, 100]


def test_blank_entries_produce_no_records(tmp_path: Path, existing_files):
    present = existing_files("a.txt")
    paths = ["", present[0], "   ", str(tmp_path / "missing.txt")]
    with MissLogger(tmp_path / "logs") as logger:
        result = SequentialVerifier().verify(
            paths, CancellationToken(), logger, ProgressReporter(VERIFYING)
        )
    assert len(result.records) == 2
    assert result.total_entries == 2
    assert len(read_log(logger.path)) == 2


def test_empty_input_reports_complete(tmp_path: Path):
    events = []
    with MissLogger(tmp_path / "logs") as logger:
        result = SequentialVerifier().verify(
            [], CancellationToken(), logger, ProgressReporter(VERIFYING, events.append)
        )
    assert result.records == []
    assert [event.percentage_completed for event in events] == [100]


def test_cancellation_stops_after_processed_paths(tmp_path: Path):
    paths = [str(tmp_path / f"missing{idx}.txt") for idx in range(10)]
    token = CancellationToken()

    def cancel_after_four(event):
        if event.count == 4:
            token.cancel()

    with MissLogger(tmp_path / "logs") as logger:
        result = SequentialVerifier().verify(
            paths, token, logger, ProgressReporter(VERIFYING, cancel_after_four)
        )
    assert result.cancelled
    assert len(result.records) == 4
    assert read_log(logger.path)[1:] == [f"File not found;{p}" for p in paths[:4]]


def test_record_factory_is_used(tmp_path: Path):
    created = []

    def factory(path: str, exists: bool) -> VerificationRecord:
        created.append(path)
        return VerificationRecord(path=path.upper(), exists=exists)

    with MissLogger(tmp_path / "logs") as logger:
        result = SequentialVerifier(record_factory=factory).verify(
            ["x.txt"], CancellationToken(), logger, ProgressReporter(VERIFYING)
        )
    assert created == ["x.txt"]
    assert result.records[0].path == "X.TXT"


def test_repeated_runs_match(tmp_path: Path, existing_files):
    present = existing_files("a.txt")
    paths = [present[0], str(tmp_path / "m1"), str(tmp_path / "m2")]
    outputs = []
    for run in range(2):
        with MissLogger(tmp_path / f"logs{run}") as logger:
            result = SequentialVerifier().verify(
                paths, CancellationToken(), logger, ProgressReporter(VERIFYING)
            )
        outputs.append((len(result.missing), read_log(logger.path)))
    assert outputs[0] == outputs[1]


def test_select_verifier_defaults_to_sequential():
    assert isinstance(select_verifier(CheckerConfig()), SequentialVerifier)
