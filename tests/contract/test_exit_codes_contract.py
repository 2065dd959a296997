from __future__ import annotations

from pathlib import Path

import pytest

from barcode_db.cli import main as cli_main

"""Exit code contract: 0 success / inspect, 1 fatal (config, unreadable file), 2 commit blocked."""

ICON17 = "ICON" + "0" * 13
ICON18 = "ICON123A" + "4" * 10
ICON20 = "ICON12345B" + "6" * 10


@pytest.fixture()
def upload(temp_workdir: Path, make_xlsx):
    def _write(rows: list[list[object]], name: str = "100W - 3 NOS Acme Corp.xlsx") -> Path:
        path = temp_workdir / "data" / name
        path.write_bytes(make_xlsx(rows))
        return path

    return _write


def test_exit_code_success(upload, capsys):
    path = upload([[ICON17], [ICON18], [ICON20]])
    code = cli_main([str(path), "--allocation-date", "2024-05-02"])
    out = capsys.readouterr().out
    assert code == 0
    assert "SUMMARY file=100W - 3 NOS Acme Corp.xlsx valid=3 invalid=0 duplicate=0 state=COMMITTED committed=3" in out


def test_exit_code_inspect_without_date(upload, capsys):
    path = upload([[ICON17], ["ICONXYZ"]])
    code = cli_main([str(path), "--inspect"])
    out = capsys.readouterr().out
    assert code == 0
    assert "WARN Invalid Barcodes:" in out
    assert "WARN   ICONXYZ (Cell: A2)" in out
    assert "state=BLOCKED committed=0" in out


@pytest.mark.parametrize(
    "rows",
    [
        [[ICON17], ["ICONXYZ"]],
        [[ICON17], [ICON17]],
    ],
)
def test_exit_code_blocked_by_scan_errors(upload, rows, capsys):
    path = upload(rows)
    code = cli_main([str(path), "--allocation-date", "2024-05-02"])
    out = capsys.readouterr().out
    assert code == 2
    assert "ERROR commit:" in out
    assert "committed=0" in out


def test_exit_code_blocked_by_missing_allocation_date(upload, capsys):
    path = upload([[ICON17]])
    code = cli_main([str(path)])
    out = capsys.readouterr().out
    assert code == 2
    assert "Required fields are missing" in out
    assert "allocation_date" in out


def test_exit_code_blocked_by_bad_date(upload, capsys):
    path = upload([[ICON17]])
    code = cli_main([str(path), "--allocation-date", "02/05/2024"])
    assert code == 2
    assert "ERROR form:" in capsys.readouterr().out


def test_exit_code_missing_explicit_config(upload, temp_workdir: Path, capsys):
    path = upload([[ICON17]])
    code = cli_main([str(path), "--config", str(temp_workdir / "config" / "nope.yml")])
    assert code == 1
    assert "ERROR config:" in capsys.readouterr().out


def test_exit_code_invalid_default_config(upload, write_config: Path, capsys):
    write_config.write_text("unknown_key: 1\n", encoding="utf-8")
    path = upload([[ICON17]])
    assert cli_main([str(path), "--allocation-date", "2024-05-02"]) == 1
    assert "config validation failed" in capsys.readouterr().out


def test_exit_code_unreadable_file(temp_workdir: Path, capsys):
    path = temp_workdir / "data" / "broken.xlsx"
    path.write_bytes(b"garbage")
    assert cli_main([str(path), "--allocation-date", "2024-05-02"]) == 1
    assert "ERROR decode:" in capsys.readouterr().out


def test_exit_code_unknown_sort_key(upload, capsys):
    path = upload([[ICON17]])
    code = cli_main([str(path), "--allocation-date", "2024-05-02", "--sort", "color"])
    assert code == 1
    assert "ERROR sort:" in capsys.readouterr().out
