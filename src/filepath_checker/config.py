"""Configuration dataclasses and helpers for the checker pipeline."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import yaml

from .errors import ConfigError

# Per-user location, independent of the working directory.
DEFAULT_LOG_DIR = "~/.filepath_checker/logs"


@dataclass
class ReadConfig:
    separator: str = "|"
    header_rows: int = 1


@dataclass
class VerifyConfig:
    num_workers: Optional[int] = None
    batch_size: int = 64
    ray_address: Optional[str] = None

    @property
    def worker_count(self) -> int:
        return self.num_workers or os.cpu_count() or 1


@dataclass
class LogConfig:
    filename_format: str = "ERRORS %m-%d-%Y %H-%M-%S.csv"
    header: str = "Error;Filepath"
    line_prefix: str = "File not found;"


@dataclass
class CheckerConfig:
    log_dir: str = DEFAULT_LOG_DIR
    verifier_type: Literal["sequential", "parallel"] = "sequential"
    read: ReadConfig = field(default_factory=ReadConfig)
    verify: VerifyConfig = field(default_factory=VerifyConfig)
    log: LogConfig = field(default_factory=LogConfig)

    @property
    def log_path(self) -> Path:
        return Path(self.log_dir).expanduser()


def _load_section(data: Dict[str, Any], section_key: str, target_type: Any) -> Any:
    section = data.get(section_key) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"Config section '{section_key}' must be a mapping")
    try:
        return target_type(**section)
    except TypeError as exc:
        raise ConfigError(f"Invalid '{section_key}' section: {exc}") from exc


def load_checker_config(path: str | Path) -> CheckerConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as handle:
        try:
            raw = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Could not parse {config_path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")

    verifier_type = raw.get("verifier_type", CheckerConfig.verifier_type)
    if verifier_type not in ("sequential", "parallel"):
        raise ConfigError(f"Unknown verifier_type: {verifier_type}")

    return CheckerConfig(
        log_dir=raw.get("log_dir", CheckerConfig.log_dir),
        verifier_type=verifier_type,
        read=_load_section(raw, "read", ReadConfig),
        verify=_load_section(raw, "verify", VerifyConfig),
        log=_load_section(raw, "log", LogConfig),
    )
