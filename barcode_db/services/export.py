from __future__ import annotations

import io
import logging
from collections.abc import Iterable
from datetime import date, datetime
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

import pandas as pd

from ..excel.reader import DecodingError
from ..excel.writer import write_rows
from ..models.barcode_record import BarcodeRecord
from ..models.config_models import AppConfig
from ..models.sort_spec import HEADER_TO_FIELD

"""Export projection: registry records -> flat rows -> .xlsx bytes."""

__all__ = [
    "EXPORT_COLUMNS",
    "export_registry",
    "format_upload_time",
    "project",
    "read_exported_barcodes",
]

logger = logging.getLogger(__name__)

# Header -> record field, in output column order (same headers the table sorts by)
EXPORT_COLUMNS: dict[str, str] = dict(HEADER_TO_FIELD)


def format_upload_time(ts: datetime, timezone: str = "UTC", fmt: str = "%c") -> str:
    """Render the ingestion instant in ``timezone`` with a strftime pattern.

    Locale-dependent directives (%c, %x, %X) use the current LC_TIME setting.
    """
    return ts.astimezone(ZoneInfo(timezone)).strftime(fmt)


def _render(value: Any) -> Any:
    if isinstance(value, date) and not isinstance(value, datetime):
        return value.isoformat()
    return value


def project(records: Iterable[BarcodeRecord], config: AppConfig | None = None) -> list[dict[str, Any]]:
    cfg = config or AppConfig()
    rows: list[dict[str, Any]] = []
    for r in records:
        row: dict[str, Any] = {}
        for header, field in EXPORT_COLUMNS.items():
            value = getattr(r, field)
            if field == "timestamp":
                row[header] = format_upload_time(value, cfg.timezone, cfg.upload_time_format)
            else:
                row[header] = _render(value)
        rows.append(row)
    return rows


def export_registry(
    records: Iterable[BarcodeRecord],
    config: AppConfig | None = None,
    path: Path | None = None,
) -> bytes:
    """Write all records to a one-sheet workbook; returns the file bytes."""
    cfg = config or AppConfig()
    rows = project(records, cfg)
    data = write_rows(rows, list(EXPORT_COLUMNS), cfg.export.sheet_name, path=path)
    logger.info("exported rows=%d sheet=%s path=%s", len(rows), cfg.export.sheet_name, path or "-")
    return data


def read_exported_barcodes(data: bytes) -> list[str]:
    """Barcode column of a previously exported workbook, in file order."""
    try:
        df = pd.read_excel(io.BytesIO(data), sheet_name=0, dtype=str)
    except Exception as e:
        raise DecodingError(f"cannot read export: {e}") from e
    if "Barcode" not in df.columns:
        raise DecodingError("export has no 'Barcode' column")
    return [str(v) for v in df["Barcode"].dropna().tolist()]
