from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from ..models.error_record import ErrorRecord

"""Upload defect log.

Each line of ``logs/errors-YYYYMMDD-HHMMSS.log`` (UTC) is one JSON object:

    {"timestamp": "...Z", "file": "labels.xlsx", "cell": "B7",
     "error_type": "INVALID_FORMAT", "message": "invalid barcode format ICONX"}

``cell`` is empty for defects not tied to a cell (REQUIRED_FIELD,
DECODING_ERROR). Nothing is written for a clean upload.
"""

__all__ = [
    "ErrorLogBuffer",
    "LOGS_DIR",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    """Collects the defects of one or more uploads until ``flush``.

    The file name is fixed on first use, so every flush of one CLI run
    appends to the same log.
    """

    def __init__(self, logs_dir: Path | None = None) -> None:
        self._records: list[ErrorRecord] = []
        self._logs_dir = logs_dir or LOGS_DIR
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"errors-{stamp}.log"
        return self._file_path

    def append(self, record: ErrorRecord) -> None:
        self._records.append(record)

    def extend(self, records: Iterable[ErrorRecord]) -> None:
        self._records.extend(records)

    def __len__(self) -> int:
        return len(self._records)

    def counts(self) -> dict[str, int]:
        """Pending defects per error_type, e.g. {'INVALID_FORMAT': 2, 'DUPLICATE': 1}."""
        return dict(Counter(r.error_type for r in self._records))

    def flush(self) -> Path | None:
        """Append pending defects to the log; None for a clean upload (no file created)."""
        if not self._records:
            return None
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
