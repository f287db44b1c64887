"""Streaming extraction of path entries from one spreadsheet column."""

from __future__ import annotations

import re
from contextlib import closing
from pathlib import Path
from typing import Iterator, List, Optional, Tuple
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils import column_index_from_string
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.workbook.workbook import Workbook

from .config import ReadConfig
from .context import CancellationToken
from .errors import DocumentOpenError, InvalidInputError
from .logging_utils import get_logger
from .models import ExtractionResult
from .progress import ProgressReporter

SPREADSHEET_SUFFIXES = {".xlsx", ".xlsm"}
TEXT_SUFFIXES = {".txt", ".csv"}

# Errors openpyxl surfaces for missing, locked, corrupt or non-OOXML input.
_OPEN_ERRORS = (InvalidFileException, BadZipFile, OSError, KeyError, ValueError, SyntaxError)
_COLUMN_RE = re.compile(r"^[A-Z]{1,3}$")

logger = get_logger("ColumnExtractor")


def column_number(column: Optional[str]) -> int:
    """Resolve a column identifier such as ``"c"`` or ``"AB"`` to its 1-based index."""
    if column is None or not column.strip():
        raise InvalidInputError("Please specify a column.")
    letters = column.strip().upper()
    if not _COLUMN_RE.match(letters):
        raise InvalidInputError(f"Invalid column identifier: {column!r}")
    try:
        return column_index_from_string(letters)
    except ValueError as exc:
        raise InvalidInputError(f"Invalid column identifier: {column!r}") from exc


def split_cell(value, separator: str = "|") -> List[str]:
    """Split one cell value into its path entries.

    Non-text values and blank strings yield nothing. Sub-values are kept
    verbatim, including empty ones between adjacent separators.
    """
    if not isinstance(value, str) or not value.strip():
        return []
    return value.split(separator)


def _open_workbook(source: Path) -> Workbook:
    try:
        return load_workbook(source, read_only=True, data_only=True)
    except _OPEN_ERRORS as exc:
        raise DocumentOpenError(source, str(exc) or exc.__class__.__name__) from exc


def _column_rows(sheet, first_row: int, col_idx: int) -> Iterator[Tuple]:
    return sheet.iter_rows(
        min_row=first_row, min_col=col_idx, max_col=col_idx, values_only=True
    )


def _count_rows(rows: Iterator, token: CancellationToken) -> int:
    total = 0
    for _ in rows:
        if token.cancelled:
            break
        total += 1
    return total


def extract_column(
    source: str | Path,
    column: str,
    token: CancellationToken,
    progress: ProgressReporter,
    separator: str = "|",
    header_rows: int = 1,
) -> ExtractionResult:
    col_idx = column_number(column)
    source = Path(source)
    workbook = _open_workbook(source)
    paths: List[str] = []
    try:
        if not workbook.worksheets:
            raise DocumentOpenError(source, f"{source.name} contains no worksheets")
        sheet = workbook.worksheets[0]
        # Stored dimensions are often stale; stream until the sheet data ends.
        sheet.reset_dimensions()
        first_row = header_rows + 1

        try:
            with closing(_column_rows(sheet, first_row, col_idx)) as rows:
                total_rows = _count_rows(rows, token)

            if token.cancelled:
                logger.warning("Reading cancelled while counting rows")
                return ExtractionResult(
                    paths=paths, rows_read=0, total_rows=total_rows, cancelled=True
                )
            if total_rows == 0:
                progress.complete(paths)
                logger.info("No data rows in column %s of %s", column.upper(), source.name)
                return ExtractionResult(paths=paths, rows_read=0, total_rows=0)

            rows_read = 0
            with closing(_column_rows(sheet, first_row, col_idx)) as rows:
                for row in rows:
                    if token.cancelled:
                        logger.warning(
                            "Reading cancelled after %s of %s rows", rows_read, total_rows
                        )
                        return ExtractionResult(
                            paths=paths,
                            rows_read=rows_read,
                            total_rows=total_rows,
                            cancelled=True,
                        )
                    rows_read += 1
                    paths.extend(split_cell(row[0] if row else None, separator))
                    progress.report(rows_read, total_rows, paths)
        except _OPEN_ERRORS as exc:
            raise DocumentOpenError(source, str(exc) or exc.__class__.__name__) from exc
    finally:
        workbook.close()

    logger.info(
        "Read %s path entries from %s rows of column %s",
        len(paths),
        rows_read,
        column.upper(),
    )
    return ExtractionResult(paths=paths, rows_read=rows_read, total_rows=total_rows)


def _open_lines(source: Path):
    try:
        return source.open("r", encoding="utf-8-sig", newline="")
    except OSError as exc:
        raise DocumentOpenError(source, str(exc)) from exc


def read_path_list(
    source: str | Path,
    token: CancellationToken,
    progress: ProgressReporter,
    separator: str = "|",
) -> ExtractionResult:
    """Read a plain text list holding one cell value per line, without a header."""
    source = Path(source)
    paths: List[str] = []
    try:
        with _open_lines(source) as handle:
            total_rows = _count_rows(handle, token)
        if token.cancelled:
            return ExtractionResult(
                paths=paths, rows_read=0, total_rows=total_rows, cancelled=True
            )
        if total_rows == 0:
            progress.complete(paths)
            return ExtractionResult(paths=paths, rows_read=0, total_rows=0)

        rows_read = 0
        with _open_lines(source) as handle:
            for line in handle:
                if token.cancelled:
                    logger.warning(
                        "Reading cancelled after %s of %s lines", rows_read, total_rows
                    )
                    return ExtractionResult(
                        paths=paths,
                        rows_read=rows_read,
                        total_rows=total_rows,
                        cancelled=True,
                    )
                rows_read += 1
                paths.extend(split_cell(line.rstrip("\r\n"), separator))
                progress.report(rows_read, total_rows, paths)
    except UnicodeDecodeError as exc:
        raise DocumentOpenError(source, str(exc)) from exc

    logger.info("Read %s path entries from %s lines", len(paths), rows_read)
    return ExtractionResult(paths=paths, rows_read=rows_read, total_rows=total_rows)


def extract_paths(
    source: str | Path,
    column: str,
    token: CancellationToken,
    progress: ProgressReporter,
    config: Optional[ReadConfig] = None,
) -> ExtractionResult:
    config = config or ReadConfig()
    source = Path(source)
    suffix = source.suffix.lower()
    if suffix in SPREADSHEET_SUFFIXES:
        return extract_column(
            source,
            column,
            token,
            progress,
            separator=config.separator,
            header_rows=config.header_rows,
        )
    if suffix in TEXT_SUFFIXES:
        return read_path_list(source, token, progress, separator=config.separator)
    supported = sorted(SPREADSHEET_SUFFIXES | TEXT_SUFFIXES)
    raise DocumentOpenError(
        source, f"Unsupported file type '{suffix}'. Supported suffixes: {supported}"
    )
