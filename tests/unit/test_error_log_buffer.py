from __future__ import annotations

import json
from pathlib import Path

from barcode_db.logging.error_log import ErrorLogBuffer
from barcode_db.models.error_record import DUPLICATE, INVALID_FORMAT, ErrorRecord


def test_flush_writes_json_lines(tmp_path: Path):
    buf = ErrorLogBuffer(logs_dir=tmp_path / "logs")
    buf.append(ErrorRecord.create("a.xlsx", "A2", INVALID_FORMAT, "invalid barcode format ICONX"))
    buf.extend([ErrorRecord.create("a.xlsx", "A3", DUPLICATE, "duplicate barcode ICON0")])
    assert len(buf) == 2

    path = buf.flush()
    assert path is not None
    assert path.parent == tmp_path / "logs"
    assert path.name.startswith("errors-") and path.suffix == ".log"
    lines = path.read_text(encoding="utf-8").splitlines()
    assert [json.loads(line)["cell"] for line in lines] == ["A2", "A3"]
    assert len(buf) == 0


def test_flush_appends_to_same_file(tmp_path: Path):
    buf = ErrorLogBuffer(logs_dir=tmp_path)
    buf.append(ErrorRecord.create("a.xlsx", "A1", INVALID_FORMAT, "x"))
    first = buf.flush()
    buf.append(ErrorRecord.create("a.xlsx", "A2", INVALID_FORMAT, "y"))
    second = buf.flush()
    assert first == second
    assert len(first.read_text(encoding="utf-8").splitlines()) == 2


def test_flush_empty_writes_nothing(tmp_path: Path):
    buf = ErrorLogBuffer(logs_dir=tmp_path / "logs")
    assert buf.flush() is None
    assert not (tmp_path / "logs").exists()


def test_default_logs_dir_is_relative_to_cwd(temp_workdir: Path):
    buf = ErrorLogBuffer()
    buf.append(ErrorRecord.create("a.xlsx", "A1", INVALID_FORMAT, "x"))
    path = buf.flush()
    assert path.resolve().parent == (temp_workdir / "logs").resolve()


def test_counts_per_error_type(tmp_path: Path):
    buf = ErrorLogBuffer(logs_dir=tmp_path)
    buf.extend(
        [
            ErrorRecord.create("a.xlsx", "A1", INVALID_FORMAT, "x"),
            ErrorRecord.create("a.xlsx", "A2", INVALID_FORMAT, "y"),
            ErrorRecord.create("a.xlsx", "A3", DUPLICATE, "z"),
        ]
    )
    assert buf.counts() == {"INVALID_FORMAT": 2, "DUPLICATE": 1}
    buf.flush()
    assert buf.counts() == {}
