from __future__ import annotations

from dataclasses import dataclass, field

from .cell_ref import CellRef

"""ScanResult model produced once per upload by the sheet scanner.

valid / invalid / duplicate are mutually exclusive: a candidate string lands
in exactly one of them for a given cell.
"""

__all__ = [
    "ScanFinding",
    "ScanResult",
]


@dataclass(frozen=True)
class ScanFinding:
    """A rejected candidate and the cell it was read from."""
    barcode: str
    cell: CellRef

    def describe(self) -> str:
        return f"{self.barcode} (Cell: {self.cell.label})"


@dataclass
class ScanResult:
    """Classification of every candidate found in one sheet.

    Attributes:
        valid: unique valid barcodes, first-seen order
        invalid: candidates matching no accepted format, row-major order
        duplicate: later occurrences of an already valid barcode, row-major order
    """
    valid: list[str] = field(default_factory=list)
    invalid: list[ScanFinding] = field(default_factory=list)
    duplicate: list[ScanFinding] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.invalid or self.duplicate)

    @property
    def candidate_count(self) -> int:
        return len(self.valid) + len(self.invalid) + len(self.duplicate)

    def is_empty(self) -> bool:
        return self.candidate_count == 0
