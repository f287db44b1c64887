"""Spreadsheet filepath checker with cancellable, parallel verification."""

from .config import (
    CheckerConfig,
    LogConfig,
    ReadConfig,
    VerifyConfig,
    load_checker_config,
)
from .coordinator import FilepathCheckPipeline
from .errors import (
    ConfigError,
    DocumentOpenError,
    FilepathCheckerError,
    InvalidInputError,
    LogCreateError,
)
from .models import ProgressEvent, RunState, RunSummary, VerificationRecord
from .cli import app

__all__ = [
    "CheckerConfig",
    "ConfigError",
    "DocumentOpenError",
    "FilepathCheckPipeline",
    "FilepathCheckerError",
    "InvalidInputError",
    "LogConfig",
    "LogCreateError",
    "ProgressEvent",
    "ReadConfig",
    "RunState",
    "RunSummary",
    "VerificationRecord",
    "VerifyConfig",
    "load_checker_config",
    "app",
]
