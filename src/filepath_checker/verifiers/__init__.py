"""Existence verifier strategies."""

from __future__ import annotations

from ..config import CheckerConfig
from ..models import RecordFactory, VerificationRecord
from .base import Verifier, path_exists, verifiable_entries
from .sequential import SequentialVerifier


def select_verifier(
    config: CheckerConfig, record_factory: RecordFactory = VerificationRecord
) -> Verifier:
    if config.verifier_type == "parallel":
        # Ray is only started when a parallel run is requested.
        from .parallel import ParallelVerifier

        return ParallelVerifier(config.verify, record_factory)
    return SequentialVerifier(config.verify, record_factory)


__all__ = [
    "SequentialVerifier",
    "Verifier",
    "path_exists",
    "select_verifier",
    "verifiable_entries",
]
