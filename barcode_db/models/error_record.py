from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

from .scan_result import ScanFinding

"""ErrorRecord model for upload defect logging.

One record per defect found while ingesting a sheet. Cell-level defects
(format, duplicate) carry the A1 address; session-level failures (missing
required fields, unreadable file) use an empty cell.
"""

__all__ = [
    "ErrorRecord",
    "INVALID_FORMAT",
    "DUPLICATE",
    "REQUIRED_FIELD",
    "DECODING_ERROR",
]

INVALID_FORMAT = "INVALID_FORMAT"
DUPLICATE = "DUPLICATE"
REQUIRED_FIELD = "REQUIRED_FIELD"
DECODING_ERROR = "DECODING_ERROR"


@dataclass(frozen=True)
class ErrorRecord:
    """Structured defect record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: uploaded filename
        cell: A1 address, '' when the defect is not tied to a cell
        error_type: UPPER_SNAKE classification
        message: human readable description
    """
    timestamp: str
    file: str
    cell: str
    error_type: str
    message: str

    @staticmethod
    def create(file: str, cell: str, error_type: str, message: str) -> ErrorRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            cell=cell,
            error_type=error_type,
            message=message,
        )

    @staticmethod
    def from_finding(file: str, finding: ScanFinding, error_type: str) -> ErrorRecord:
        if error_type == DUPLICATE:
            message = f"duplicate barcode {finding.barcode}"
        else:
            message = f"invalid barcode format {finding.barcode}"
        return ErrorRecord.create(file, finding.cell.label, error_type, message)

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
