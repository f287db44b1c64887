"""Typer CLI entrypoints."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

import typer
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn
from rich.table import Table

from .config import CheckerConfig, load_checker_config
from .context import CancellationToken
from .coordinator import FilepathCheckPipeline
from .errors import FilepathCheckerError
from .evaluation import benchmark_pipelines, results_to_frame
from .extractor import extract_paths
from .logging_utils import get_console, get_logger, set_global_log_level
from .models import ProgressEvent, RunState, RunSummary
from .progress import READING, ProgressReporter
from .verifiers import verifiable_entries

app = typer.Typer(add_completion=False, help="Check that files listed in a spreadsheet column exist")
console = Console()
logger = get_logger("CLI")

EXIT_MISSING = 1
EXIT_ERROR = 2
EXIT_CANCELLED = 130


def _load_config(
    config_path: Optional[Path],
    log_dir: Optional[Path] = None,
    strategy: Optional[str] = None,
) -> CheckerConfig:
    config = load_checker_config(config_path) if config_path else CheckerConfig()
    if log_dir is not None:
        config.log_dir = str(log_dir)
    if strategy is not None:
        if strategy not in ("sequential", "parallel"):
            raise typer.BadParameter("strategy must be 'sequential' or 'parallel'")
        config.verifier_type = strategy
    return config


def _format_stage_name(key: str) -> str:
    label = key.replace("_seconds", "").replace("_", " ").strip()
    return label.title() if label else key


def _print_timings(title: str, timings: Dict[str, float]) -> None:
    if not timings:
        return
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Stage")
    table.add_column("Seconds", justify="right")
    for stage, seconds in timings.items():
        table.add_row(_format_stage_name(stage), f"{seconds:.2f}")
    console.print(table)


def _print_summary(summary: RunSummary) -> None:
    title = "DONE!" if summary.state is RunState.DONE else "CANCELLED"
    table = Table(title=title, show_header=False)
    table.add_column("Field")
    table.add_column("Value", justify="right")
    table.add_row("Time elapsed", summary.elapsed_text)
    table.add_row("Filepaths checked", str(summary.total_checked))
    table.add_row("Missing files", str(summary.total_missing))
    table.add_row("Log file", str(summary.log_location or "-"))
    console.print(table)


def _exit_code(summary: RunSummary) -> int:
    if summary.cancelled:
        return EXIT_CANCELLED
    return EXIT_MISSING if summary.total_missing else 0


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log per-path details")
) -> None:
    if verbose:
        set_global_log_level(logging.DEBUG)


@app.command()
def check(
    workbook: Path = typer.Argument(..., help="Spreadsheet (.xlsx) or path list (.txt)"),
    column: str = typer.Option(..., "--column", "-c", help="Column letter, e.g. C or AB"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Path to YAML config"),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir", help="Directory for the miss log"),
    strategy: Optional[str] = typer.Option(
        None, "--strategy", help="Verifier strategy: sequential or parallel"
    ),
    measure: bool = typer.Option(False, "--measure", help="Print stage timings"),
) -> None:
    try:
        config = _load_config(config_path, log_dir, strategy)
    except FilepathCheckerError as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(EXIT_ERROR)

    # Bars share the log console so log lines render above them.
    with Progress(
        TextColumn("{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=get_console(),
    ) as bars:
        read_task = bars.add_task("Reading the file ...", total=100)
        verify_task = bars.add_task("Checking filepaths ...", total=100)

        def on_progress(event: ProgressEvent) -> None:
            task = read_task if event.stage == READING else verify_task
            bars.update(task, completed=event.percentage_completed)

        pipeline = FilepathCheckPipeline(
            config, on_read_progress=on_progress, on_verify_progress=on_progress
        )
        try:
            future = pipeline.start(workbook, column)
            try:
                summary = future.result()
            except KeyboardInterrupt:
                logger.warning("Stopping, waiting for the current item to finish")
                pipeline.cancel()
                summary = future.result()
        except FilepathCheckerError as exc:
            console.print(f"[bold red]{exc}[/bold red]")
            raise typer.Exit(EXIT_ERROR)

    _print_summary(summary)
    if measure:
        _print_timings("Stage Timings", summary.stage_timings)
    raise typer.Exit(_exit_code(summary))


@app.command()
def extract(
    workbook: Path = typer.Argument(..., help="Spreadsheet (.xlsx) or path list (.txt)"),
    column: str = typer.Option(..., "--column", "-c", help="Column letter, e.g. C or AB"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Path to YAML config"),
) -> None:
    try:
        config = _load_config(config_path)
        result = extract_paths(
            workbook, column, CancellationToken(), ProgressReporter(READING), config.read
        )
    except FilepathCheckerError as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(EXIT_ERROR)
    for path in verifiable_entries(result.paths):
        typer.echo(path)


@app.command()
def benchmark(
    workbook: Path = typer.Argument(..., help="Spreadsheet to check"),
    config_paths: List[Path] = typer.Argument(
        ..., help="List of config files to benchmark", metavar="CONFIG"
    ),
    column: str = typer.Option(..., "--column", "-c", help="Column letter, e.g. C or AB"),
) -> None:
    try:
        configs = [load_checker_config(path) for path in config_paths]
        results = benchmark_pipelines(configs, workbook, column)
    except FilepathCheckerError as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(EXIT_ERROR)
    frame = results_to_frame(results)
    table = Table(title="Verification Benchmarks", show_lines=False)
    for name in frame.columns:
        table.add_column(name)
    for _, row in frame.iterrows():
        table.add_row(*(str(row[name]) for name in frame.columns))
    console.print(table)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
