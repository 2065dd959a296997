from __future__ import annotations

import logging

from ..excel.reader import SheetGrid
from ..models.scan_result import ScanFinding, ScanResult
from .progress import ScanProgress
from .validator import is_candidate, is_valid

"""Sheet scanner: classify every barcode candidate of a grid.

Cells are visited row ascending then column ascending, which fixes the
order of reported invalid/duplicate findings. Each candidate is placed in
exactly one bucket:

1. fails validation      -> invalid (never duplicate-checked)
2. already seen as valid -> duplicate (first occurrence stays valid)
3. otherwise             -> valid
"""

__all__ = [
    "scan",
]

logger = logging.getLogger(__name__)


def scan(grid: SheetGrid, progress: ScanProgress | None = None) -> ScanResult:
    """Scan a grid and return the classification. Pure apart from progress updates."""
    result = ScanResult()
    seen: set[str] = set()

    for row in range(grid.row_count):
        for cell, value in grid.iter_row(row):
            if not isinstance(value, str):
                continue
            barcode = value.strip()
            if not is_candidate(barcode):
                continue
            if not is_valid(barcode):
                result.invalid.append(ScanFinding(barcode, cell))
                continue
            if barcode in seen:
                result.duplicate.append(ScanFinding(barcode, cell))
            else:
                seen.add(barcode)
                result.valid.append(barcode)
        if progress is not None:
            progress.advance()

    if progress is not None:
        progress.set_postfix(
            valid=len(result.valid),
            invalid=len(result.invalid),
            duplicate=len(result.duplicate),
        )
    logger.debug(
        "scanned sheet=%s rows=%d valid=%d invalid=%d duplicate=%d",
        grid.sheet_name,
        grid.row_count,
        len(result.valid),
        len(result.invalid),
        len(result.duplicate),
    )
    return result
