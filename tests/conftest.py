from pathlib import Path
from typing import Iterable, Optional

import pytest
from openpyxl import Workbook
from openpyxl.utils import column_index_from_string

from filepath_checker.config import CheckerConfig


def write_workbook(
    path: Path,
    column: str,
    values: Iterable[Optional[object]],
    header: str = "Filepath",
) -> Path:
    workbook = Workbook()
    sheet = workbook.active
    col_idx = column_index_from_string(column)
    sheet.cell(row=1, column=1, value="Id")
    sheet.cell(row=1, column=col_idx, value=header)
    for row, value in enumerate(values, start=2):
        sheet.cell(row=row, column=1, value=row - 1)
        if value is not None:
            sheet.cell(row=row, column=col_idx, value=value)
    workbook.save(path)
    return path


@pytest.fixture
def make_workbook(tmp_path: Path):
    def _make(values, column: str = "C", name: str = "paths.xlsx") -> Path:
        return write_workbook(tmp_path / name, column, values)

    return _make


@pytest.fixture
def existing_files(tmp_path: Path):
    def _make(*names: str) -> list[str]:
        folder = tmp_path / "share"
        folder.mkdir(exist_ok=True)
        paths = []
        for name in names:
            target = folder / name
            target.write_text("data")
            paths.append(str(target))
        return paths

    return _make


@pytest.fixture
def checker_config(tmp_path: Path) -> CheckerConfig:
    return CheckerConfig(log_dir=str(tmp_path / "logs"))


def read_log(path: Path) -> list[str]:
    return path.read_text(encoding="utf-8").splitlines()


@pytest.fixture
def column_c_workbook(make_workbook, existing_files, tmp_path: Path) -> Path:
    """Five rows in column C holding six paths, two of them missing."""
    present = existing_files("one.doc", "two.doc", "a.doc", "five.doc")
    row3 = f"{present[2]}|{tmp_path / 'share' / 'b.doc'}"
    values = [present[0], present[1], row3, str(tmp_path / "share" / "four.doc"), present[3]]
    return make_workbook(values, column="C")
