from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import replace
from datetime import date
from typing import Any

from ..models.barcode_record import EDITABLE_FIELDS, BarcodeRecord, RecordPatch, UnknownFieldError
from ..models.config_models import AppConfig
from ..models.sort_spec import SortSpec
from .export import project as project_rows

"""In-memory registry of committed barcode records.

The record collection is an immutable tuple that every mutation replaces
wholesale, so a snapshot handed out by ``records`` never changes under the
caller. Records are never deleted.
"""

__all__ = [
    "Registry",
]

logger = logging.getLogger(__name__)


def _sort_value(value: Any) -> str:
    # edited columns may mix dates, datetimes, numbers and free text; compare as text
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


class Registry:
    def __init__(self, records: Iterable[BarcodeRecord] = ()) -> None:
        self._records: tuple[BarcodeRecord, ...] = tuple(records)

    @property
    def records(self) -> tuple[BarcodeRecord, ...]:
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[BarcodeRecord]:
        return iter(self._records)

    def __contains__(self, barcode: object) -> bool:
        return any(r.barcode == barcode for r in self._records)

    def get(self, barcode: str) -> BarcodeRecord | None:
        for r in self._records:
            if r.barcode == barcode:
                return r
        return None

    def commit(self, records: Sequence[BarcodeRecord]) -> None:
        """Append records in the given order.

        Barcodes already in the registry are appended again; uploads are only
        deduplicated within their own sheet.
        """
        already = [r.barcode for r in records if r.barcode in self]
        if already:
            logger.warning(
                "re-adding %d barcode(s) already in registry, first=%s", len(already), already[0]
            )
        self._records = self._records + tuple(records)
        logger.info("committed records=%d registry_size=%d", len(records), len(self._records))

    def update(self, barcode: str, field: str, value: Any) -> None:
        """Set one editable field on the matching record(s). Absent barcode is a no-op.

        Values are stored as given; dates may become arbitrary strings here.
        """
        if field not in EDITABLE_FIELDS:
            raise UnknownFieldError(f"not editable: '{field}'")
        if value is None:
            value = ""
        changed = False
        updated = []
        for r in self._records:
            if r.barcode == barcode:
                r = replace(r, **{field: value})
                changed = True
            updated.append(r)
        if changed:
            self._records = tuple(updated)
        else:
            logger.debug("update skipped, barcode not found: %s", barcode)

    def bulk_update(self, barcodes: Iterable[str], patch: RecordPatch) -> int:
        """Apply the non-empty fields of ``patch`` to every selected record.

        Returns:
            number of records changed
        """
        selected = set(barcodes)
        changes = patch.changes()
        if not selected or not changes:
            return 0
        count = 0
        updated = []
        for r in self._records:
            if r.barcode in selected:
                r = replace(r, **changes)
                count += 1
            updated.append(r)
        self._records = tuple(updated)
        logger.info("bulk update records=%d fields=%s", count, sorted(changes))
        return count

    def search(self, term: str) -> list[BarcodeRecord]:
        """Case-insensitive substring match on the barcode field only."""
        needle = term.lower()
        return [r for r in self._records if needle in r.barcode.lower()]

    def sort(
        self, spec: SortSpec, records: Sequence[BarcodeRecord] | None = None
    ) -> list[BarcodeRecord]:
        """Stable ordering by ``spec.effective_key``; equal keys keep their order."""
        rows = self._records if records is None else records
        key = spec.effective_key
        if key == "timestamp":
            # not editable, always an aware datetime
            return sorted(rows, key=lambda r: r.timestamp, reverse=spec.descending)
        return sorted(rows, key=lambda r: _sort_value(getattr(r, key)), reverse=spec.descending)

    def query(self, term: str = "", spec: SortSpec | None = None) -> list[BarcodeRecord]:
        """Rows as the table shows them: filtered by ``term`` then sorted."""
        return self.sort(spec or SortSpec(), self.search(term))

    def project(self, config: AppConfig | None = None) -> list[dict[str, Any]]:
        """Export-ready flat rows in display column order."""
        return project_rows(self._records, config)
