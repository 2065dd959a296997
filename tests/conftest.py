# Shared pytest fixtures
from __future__ import annotations

import io
import tempfile
from collections.abc import Callable
from datetime import UTC, date, datetime
from pathlib import Path

import pandas as pd
import pytest

from barcode_db.logging.init import reset_logging
from barcode_db.models.barcode_record import BarcodeRecord

FIXED_NOW = datetime(2024, 5, 1, 10, 30, 0, tzinfo=UTC)


def xlsx_bytes(rows: list[list[object]], sheets: dict[str, list[list[object]]] | None = None) -> bytes:
    """Build a workbook in memory; ``rows`` is the first sheet, A1 at rows[0][0]."""
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name="Sheet1", header=False, index=False)
        for name, extra in (sheets or {}).items():
            pd.DataFrame(extra).to_excel(writer, sheet_name=name, header=False, index=False)
    return buf.getvalue()


@pytest.fixture(autouse=True)
def _clean_logging():
    # handlers bind sys.stdout at setup time; capsys swaps it per test
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def make_xlsx() -> Callable[..., bytes]:
    return xlsx_bytes


@pytest.fixture()
def fixed_clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture()
def sample_config_yaml() -> str:
    return """timezone: UTC
upload_time_format: "%Y-%m-%d %H:%M:%S"
error_display_limit: 2
preview_limit: 3
export:
  filename: out.xlsx
  sheet_name: Codes
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "barcodes.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def make_record() -> Callable[..., BarcodeRecord]:
    def _make(barcode: str, **overrides) -> BarcodeRecord:
        values = dict(
            barcode=barcode,
            customer_name="Acme Corp",
            allocation_date=date(2024, 5, 1),
            pdi_date="",
            indent_number="IND-1",
            timestamp=FIXED_NOW,
        )
        values.update(overrides)
        return BarcodeRecord(**values)

    return _make
