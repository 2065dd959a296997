from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from ..models.barcode_record import BarcodeRecord, RecordPatch
from .registry import Registry

"""SelectionSet: barcodes currently checked in the registry table."""

__all__ = [
    "SelectionSet",
]

logger = logging.getLogger(__name__)


class SelectionSet:
    def __init__(self, barcodes: Iterable[str] = ()) -> None:
        self._barcodes: set[str] = set(barcodes)

    def __len__(self) -> int:
        return len(self._barcodes)

    def __contains__(self, barcode: object) -> bool:
        return barcode in self._barcodes

    def __iter__(self) -> Iterator[str]:
        return iter(self._barcodes)

    @property
    def barcodes(self) -> frozenset[str]:
        return frozenset(self._barcodes)

    def set_checked(self, barcode: str, checked: bool) -> None:
        if checked:
            self._barcodes.add(barcode)
        else:
            self._barcodes.discard(barcode)

    def toggle(self, barcode: str) -> bool:
        """Flip one row; returns the new checked state."""
        checked = barcode not in self._barcodes
        self.set_checked(barcode, checked)
        return checked

    def select_all(self, rows: Iterable[BarcodeRecord], checked: bool = True) -> None:
        """Header checkbox: replaces the selection with the visible (filtered) rows, or clears it."""
        self._barcodes = {r.barcode for r in rows} if checked else set()

    def clear(self) -> None:
        self._barcodes.clear()

    def apply_bulk_edit(self, registry: Registry, patch: RecordPatch) -> int:
        """Apply ``patch`` to every selected record, then clear the selection."""
        count = registry.bulk_update(self._barcodes, patch)
        logger.debug("bulk edit applied selected=%d changed=%d", len(self._barcodes), count)
        self.clear()
        return count
