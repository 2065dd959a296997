from __future__ import annotations

from collections.abc import Sequence

from ..models.scan_result import ScanFinding, ScanResult

"""Text rendering of scan outcomes for the CLI and log output."""

__all__ = [
    "render_findings",
    "render_scan_report",
    "render_summary_line",
]


def render_findings(title: str, findings: Sequence[ScanFinding], limit: int = 5) -> list[str]:
    """Render a truncated defect list.

    Examples:
        >>> from barcode_db.models.cell_ref import CellRef
        >>> render_findings("Invalid Barcodes:", [ScanFinding("ICONX", CellRef(0, 1))])
        ['Invalid Barcodes:', '  ICONX (Cell: B1)']
    """
    if not findings:
        return []
    lines = [title]
    lines.extend(f"  {f.describe()}" for f in findings[:limit])
    if len(findings) > limit:
        lines.append(f"  ... and {len(findings) - limit} more")
    return lines


def render_scan_report(result: ScanResult, limit: int = 5) -> list[str]:
    """Invalid block first, then duplicates, as the upload dialog lists them."""
    return render_findings("Invalid Barcodes:", result.invalid, limit) + render_findings(
        "Duplicate Barcodes:", result.duplicate, limit
    )


def render_summary_line(file_name: str, result: ScanResult, state: str, committed: int = 0) -> str:
    """Single SUMMARY line for one upload.

    Format:
    SUMMARY file={name} valid={n} invalid={n} duplicate={n} state={STATE} committed={n}
    """
    return (
        f"SUMMARY file={file_name} "
        f"valid={len(result.valid)} "
        f"invalid={len(result.invalid)} "
        f"duplicate={len(result.duplicate)} "
        f"state={state} "
        f"committed={committed}"
    )
