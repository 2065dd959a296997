from __future__ import annotations

import io

import pandas as pd

from barcode_db.cli import main as cli_main
from barcode_db.services.export import EXPORT_COLUMNS

"""Export workbook contract: one sheet, fixed header row, one row per record."""

EXPECTED_HEADER = ["Barcode", "Customer Name", "Allocation Date", "PDI Date", "Indent Number", "Upload Time"]


def test_export_header_is_fixed():
    assert list(EXPORT_COLUMNS) == EXPECTED_HEADER


def test_cli_export_uses_configured_filename_and_sheet(write_config, temp_workdir, make_xlsx):
    path = temp_workdir / "data" / "100W-2 NOS Acme Corp.xlsx"
    path.write_bytes(make_xlsx([["ICON" + "1" * 13], ["ICON" + "2" * 13]]))
    code = cli_main([str(path), "--allocation-date", "2024-05-02", "--indent-number", "IND-9", "--export"])
    assert code == 0

    out_file = temp_workdir / "out.xlsx"
    assert out_file.exists()
    with pd.ExcelFile(io.BytesIO(out_file.read_bytes())) as xls:
        assert xls.sheet_names == ["Codes"]
        df = xls.parse("Codes", dtype=str)
    assert list(df.columns) == EXPECTED_HEADER
    assert df["Customer Name"].tolist() == ["Acme Corp", "Acme Corp"]
    assert df["Allocation Date"].tolist() == ["2024-05-02", "2024-05-02"]
    assert df["Indent Number"].tolist() == ["IND-9", "IND-9"]
    assert df["PDI Date"].isna().all()


def test_cli_export_explicit_path(temp_workdir, make_xlsx):
    path = temp_workdir / "data" / "labels.xlsx"
    path.write_bytes(make_xlsx([["ICON" + "1" * 13]]))
    target = temp_workdir / "exports" / "registry.xlsx"
    code = cli_main([str(path), "--customer-name", "Acme", "--allocation-date", "2024-05-02", "--export", str(target)])
    assert code == 0
    df = pd.read_excel(target, sheet_name="Barcodes", dtype=str)
    assert df["Barcode"].tolist() == ["ICON" + "1" * 13]
