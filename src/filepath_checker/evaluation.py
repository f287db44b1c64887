"""Benchmark helpers for comparing verifier strategies."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List

import pandas as pd

from .config import CheckerConfig
from .coordinator import FilepathCheckPipeline
from .models import RunSummary


@dataclass
class BenchmarkResult:
    scenario: str
    summary: RunSummary


def benchmark_pipelines(
    configs: Iterable[CheckerConfig], source: str | Path, column: str
) -> List[BenchmarkResult]:
    results: List[BenchmarkResult] = []
    for idx, config in enumerate(configs, start=1):
        summary = FilepathCheckPipeline(config).run(source, column)
        results.append(
            BenchmarkResult(scenario=f"{idx}-{config.verifier_type}", summary=summary)
        )
    return results


def results_to_frame(results: List[BenchmarkResult]) -> pd.DataFrame:
    rows = []
    for result in results:
        summary = result.summary
        rows.append(
            {
                "scenario": result.scenario,
                "state": summary.state.value,
                "checked": summary.total_checked,
                "missing": summary.total_missing,
                "read_seconds": round(summary.stage_timings.get("read_seconds", 0.0), 3),
                "verify_seconds": round(summary.stage_timings.get("verify_seconds", 0.0), 3),
                "seconds": round(summary.elapsed.total_seconds(), 3),
                "log": str(summary.log_location or ""),
            }
        )
    return pd.DataFrame(rows)
