from __future__ import annotations

import io
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import pandas as pd

"""Spreadsheet writer: flat rows -> .xlsx bytes (openpyxl engine)."""

__all__ = [
    "write_rows",
]


def write_rows(
    rows: Sequence[Mapping[str, Any]],
    columns: Sequence[str],
    sheet_name: str,
    path: Path | None = None,
) -> bytes:
    """Write rows as a single-sheet workbook with ``columns`` as header row.

    The header is written even when there are no rows. When ``path`` is given
    the bytes are also written to disk.
    """
    df = pd.DataFrame(list(rows), columns=list(columns))
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)
    data = buf.getvalue()
    if path is not None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    return data
