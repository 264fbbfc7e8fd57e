"""
Spreadsheet access: one interface over .xlsx (openpyxl) and .xls (xlrd).

The decoder is picked from the file extension. Sheets are addressed by
0-based index because category sources are identified by position, not by
(frequently renamed) sheet titles.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Optional

import pandas as pd

from rostermatch.config import EXCEL_ENGINES
from rostermatch.data.normalize import is_blank
from rostermatch.errors import SheetMissing, SourceNotFound, UnreadableContainer

logger = logging.getLogger(__name__)

# One spreadsheet row: typed cell values, None where the cell is empty
Row = tuple


class Workbook:
    """An opened spreadsheet container."""

    def __init__(self, path: Path, excel: pd.ExcelFile) -> None:
        self.path = path
        self.excel = excel

    @property
    def sheet_names(self) -> list[str]:
        return [str(name) for name in self.excel.sheet_names]

    @property
    def sheet_count(self) -> int:
        return len(self.excel.sheet_names)

    def close(self) -> None:
        self.excel.close()

    def __enter__(self) -> "Workbook":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


@dataclass
class Sheet:
    index: int
    name: str
    frame: pd.DataFrame
    first_row: int = 0  # 0-based sheet row of frame row 0 (leading blank rows are dropped)

    @property
    def row_count(self) -> int:
        return len(self.frame)


def open_workbook(path: str | Path) -> Workbook:
    """Open a .xlsx/.xls file. Existence is checked before any parsing."""
    path = Path(path)
    if not path.exists():
        raise SourceNotFound(str(path))

    engine = EXCEL_ENGINES.get(path.suffix.lower())
    if engine is None:
        raise UnreadableContainer(str(path), f"unsupported file type '{path.suffix or '(none)'}'")

    try:
        excel = pd.ExcelFile(path, engine=engine)
    except ImportError:
        raise
    except Exception as exc:
        raise UnreadableContainer(str(path), str(exc) or type(exc).__name__) from exc

    logger.debug(f"Opened {path.name} ({engine}): {len(excel.sheet_names)} sheet(s)")
    return Workbook(path, excel)


def sheet_at(workbook: Workbook, index: int) -> Sheet:
    """Load the sheet at a 0-based index, with no header interpretation.

    Rows are counted from the first non-blank row, so skip counts and header
    scans are unaffected by blank rows above the data.
    """
    if index < 0 or index >= workbook.sheet_count:
        raise SheetMissing(str(workbook.path), index, workbook.sheet_count)

    try:
        frame = workbook.excel.parse(
            sheet_name=index,
            header=None,
            dtype=object,
            keep_default_na=False,
        )
    except Exception as exc:
        raise UnreadableContainer(str(workbook.path), str(exc) or type(exc).__name__) from exc

    first_row = _leading_blank_rows(frame)
    if first_row:
        frame = frame.iloc[first_row:].reset_index(drop=True)
    return Sheet(index=index, name=workbook.sheet_names[index], frame=frame, first_row=first_row)


def _leading_blank_rows(frame: pd.DataFrame) -> int:
    """Number of all-blank rows above the first row that holds a value."""
    for idx, values in enumerate(frame.itertuples(index=False, name=None)):
        if not all(is_blank(v) for v in values):
            return idx
    return len(frame)


def rows(sheet: Sheet) -> Iterator[Row]:
    """Yield the sheet's rows lazily; blank cells come back as None."""
    for values in sheet.frame.itertuples(index=False, name=None):
        yield tuple(None if is_blank(v) else v for v in values)


def cell(row: Row, column: Optional[int]) -> Optional[Any]:
    """Value at a 0-based column, None when the row is too short."""
    if column is None or column < 0 or column >= len(row):
        return None
    return row[column]
