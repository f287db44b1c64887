"""Shared verifier helpers."""

from __future__ import annotations

import os
from typing import Iterable, List, Protocol, Sequence

from ..context import CancellationToken
from ..miss_logger import MissLogger
from ..models import VerificationResult
from ..progress import ProgressReporter


def path_exists(path: str) -> bool:
    """Return True when ``path`` names an existing regular file.

    The path is passed to the OS untouched, so UNC shares and relative paths
    behave as the filesystem resolves them. Paths that cannot be checked
    (permission denied, unreachable share, embedded NUL) count as missing.
    """
    return os.path.isfile(path)


def verifiable_entries(paths: Iterable[str]) -> List[str]:
    return [path for path in paths if path and path.strip()]


class Verifier(Protocol):
    def verify(
        self,
        paths: Sequence[str],
        token: CancellationToken,
        miss_logger: MissLogger,
        progress: ProgressReporter,
    ) -> VerificationResult: ...
