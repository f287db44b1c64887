"""CSV log of paths that were not found."""

from __future__ import annotations

import threading
from datetime import datetime
from pathlib import Path
from typing import Optional

from .config import LogConfig
from .errors import LogCreateError
from .logging_utils import get_logger


def _unique_path(directory: Path, filename: str) -> Path:
    candidate = directory / filename
    stem, suffix = candidate.stem, candidate.suffix
    counter = 1
    while candidate.exists():
        candidate = directory / f"{stem} ({counter}){suffix}"
        counter += 1
    return candidate


class MissLogger:
    """Writes ``File not found;<path>`` lines to a fresh timestamped CSV file.

    Appends are serialized with a lock so verifier workers can share one
    logger. Lines are buffered; everything is on disk once :meth:`close`
    returns.
    """

    def __init__(
        self,
        directory: str | Path,
        config: Optional[LogConfig] = None,
        timestamp: Optional[datetime] = None,
    ):
        self.config = config or LogConfig()
        self.logger = get_logger("MissLogger")
        self.missing_count = 0
        self._lock = threading.Lock()
        self._closed = False

        directory = Path(directory).expanduser()
        filename = (timestamp or datetime.now()).strftime(self.config.filename_format)
        try:
            directory.mkdir(parents=True, exist_ok=True)
            self.path = _unique_path(directory, filename)
            self._handle = self.path.open("x", encoding="utf-8", newline="\n")
            self._handle.write(self.config.header + "\n")
        except OSError as exc:
            raise LogCreateError(
                f"Could not create log file in {directory}: {exc}"
            ) from exc
        self.logger.debug("Logging missing files to %s", self.path)

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, path: str) -> None:
        with self._lock:
            if self._closed:
                raise ValueError(f"Log file {self.path} is already closed")
            self._handle.write(f"{self.config.line_prefix}{path}\n")
            self.missing_count += 1

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._handle.close()
        self.logger.debug(
            "Closed %s with %s missing entries", self.path, self.missing_count
        )

    def __enter__(self) -> "MissLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
