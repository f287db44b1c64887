"""Filepath checker error hierarchy.

    FilepathCheckerError
    ├── InvalidInputError      bad run request, nothing started
    ├── DocumentOpenError      source spreadsheet unreadable, run aborted
    ├── LogCreateError         miss log could not be created, run aborted
    └── ConfigError            config file missing or malformed

Cancellation is not an error; stage results carry a ``cancelled`` flag.
"""

from __future__ import annotations


class FilepathCheckerError(Exception):
    """Base class for all filepath checker errors."""


class InvalidInputError(FilepathCheckerError):
    pass


class DocumentOpenError(FilepathCheckerError):
    def __init__(self, source, message: str):
        super().__init__(message)
        self.source = source
        self.message = message


class LogCreateError(FilepathCheckerError):
    pass


class ConfigError(FilepathCheckerError):
    pass
