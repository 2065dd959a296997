from __future__ import annotations

import io
import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.cell_ref import CellRef

"""Spreadsheet reader: uploaded bytes -> grid of typed cell values.

Only the first sheet of a workbook is read. pandas (openpyxl engine for
.xlsx, xlrd for legacy .xls) does the decoding; the grid keeps the
positional layout so findings can be reported by cell address.
"""

__all__ = [
    "DecodingError",
    "SheetGrid",
    "read_first_sheet",
    "read_upload",
]

logger = logging.getLogger(__name__)

EXCEL_SUFFIXES = (".xlsx", ".xls")


class DecodingError(Exception):
    """Raised when uploaded bytes cannot be decoded as a spreadsheet."""


@dataclass(frozen=True)
class SheetGrid:
    """Used range of one sheet, origin at A1. Empty cells are None."""
    sheet_name: str
    rows: list[list[Any]]

    @classmethod
    def from_frame(cls, df: pd.DataFrame, sheet_name: str) -> SheetGrid:
        rows: list[list[Any]] = []
        for raw in df.itertuples(index=False, name=None):
            rows.append([None if _is_blank(v) else v for v in raw])
        return cls(sheet_name=sheet_name, rows=rows)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Any]], sheet_name: str = "Sheet1") -> SheetGrid:
        return cls(sheet_name=sheet_name, rows=[list(r) for r in rows])

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return max((len(r) for r in self.rows), default=0)

    def value_at(self, row: int, column: int) -> Any:
        if row >= len(self.rows) or column >= len(self.rows[row]):
            return None
        return self.rows[row][column]

    @property
    def heading(self) -> str:
        """Text of the A1 cell, '' when missing or not a string."""
        value = self.value_at(0, 0)
        return value if isinstance(value, str) else ""

    def iter_row(self, row: int) -> Iterator[tuple[CellRef, Any]]:
        for column, value in enumerate(self.rows[row]):
            if value is None:
                continue
            yield CellRef(row, column), value

    def cells(self) -> Iterator[tuple[CellRef, Any]]:
        """Non-empty cells, row ascending then column ascending."""
        for row in range(len(self.rows)):
            yield from self.iter_row(row)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):  # array-like cell payloads
        return False


def read_first_sheet(data: bytes, filename: str = "") -> SheetGrid:
    """Decode spreadsheet bytes and return the first sheet as a grid.

    Parameters
    ----------
    data: raw file contents
    filename: used for log/error messages only

    Raises
    ------
    DecodingError: the bytes are empty or not a readable workbook
    """
    if not data:
        raise DecodingError(f"empty file: {filename or '<upload>'}")
    try:
        with pd.ExcelFile(io.BytesIO(data)) as xls:
            if not xls.sheet_names:
                raise DecodingError(f"workbook has no sheets: {filename or '<upload>'}")
            first = xls.sheet_names[0]
            df = xls.parse(first, header=None, dtype=object)
    except DecodingError:
        raise
    except Exception as e:
        # pandas/openpyxl/zipfile surface corrupt input through many exception types
        raise DecodingError(f"cannot read {filename or '<upload>'}: {e}") from e
    grid = SheetGrid.from_frame(df, str(first))
    logger.debug(
        "decoded file=%s sheet=%s rows=%d cols=%d",
        filename,
        grid.sheet_name,
        grid.row_count,
        grid.column_count,
    )
    return grid


def read_upload(path: Path) -> bytes:
    """Raw bytes of a workbook on disk; other file types are rejected."""
    if path.suffix.lower() not in EXCEL_SUFFIXES:
        raise DecodingError(f"unsupported file type: {path.name}")
    try:
        return path.read_bytes()
    except OSError as e:
        raise DecodingError(f"cannot open {path}: {e}") from e
