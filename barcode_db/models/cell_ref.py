from __future__ import annotations

from dataclasses import dataclass

from openpyxl.utils import get_column_letter

"""CellRef model: where in the uploaded sheet a barcode was found.

Only used for reporting defects back to the user. Positions are zero-based
(pandas positional index), the A1 label is one-based like Excel shows it.
"""

__all__ = [
    "CellRef",
]


@dataclass(frozen=True, order=True)
class CellRef:
    """Zero-based (row, column) position inside the first sheet."""
    row: int
    column: int

    @property
    def label(self) -> str:
        """A1-style address, e.g. CellRef(0, 0) -> 'A1', CellRef(9, 27) -> 'AB10'."""
        return f"{get_column_letter(self.column + 1)}{self.row + 1}"

    def __str__(self) -> str:
        return self.label
