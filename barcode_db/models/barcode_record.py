from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from datetime import date, datetime
from typing import Any

"""BarcodeRecord and RecordPatch models for the in-memory registry.

BarcodeRecord is immutable; registry edits swap in a replaced copy so that
anyone holding the previous snapshot keeps a consistent view.
RecordPatch is the only legal shape for partial updates.
"""

__all__ = [
    "BarcodeRecord",
    "DateValue",
    "EDITABLE_FIELDS",
    "RECORD_FIELDS",
    "RecordPatch",
    "UnknownFieldError",
    "coerce_date",
]

# date once set from a form, "" when empty, any string after a free-text edit
DateValue = date | str

EDITABLE_FIELDS: tuple[str, ...] = (
    "customer_name",
    "allocation_date",
    "pdi_date",
    "indent_number",
)


class UnknownFieldError(ValueError):
    """Raised when an update names a field that is not part of the record."""


@dataclass(frozen=True)
class BarcodeRecord:
    """One committed barcode with the shipment metadata of its upload.

    Attributes:
        barcode: natural key, always matches an accepted format at commit time
        customer_name: customer label from the upload form
        allocation_date: required at commit, editable afterwards
        pdi_date: optional inspection date
        indent_number: opaque business reference
        timestamp: ingestion instant shared by every record of one upload (UTC)
    """
    barcode: str
    customer_name: str
    allocation_date: DateValue
    pdi_date: DateValue
    indent_number: str
    timestamp: datetime


RECORD_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(BarcodeRecord))


def coerce_date(value: Any) -> DateValue:
    """Normalize a date input: date objects pass, ISO strings are parsed, blanks become ''.

    Raises:
        ValueError: for a non-blank string that is not an ISO date
    """
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return ""
    return date.fromisoformat(text)


@dataclass(frozen=True)
class RecordPatch:
    """Partial update applied by bulk edits.

    Empty values mean "leave unchanged"; clearing a field is not expressible.
    """
    customer_name: str = ""
    allocation_date: DateValue = ""
    pdi_date: DateValue = ""
    indent_number: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> RecordPatch:
        unknown = set(data) - set(EDITABLE_FIELDS)
        if unknown:
            raise UnknownFieldError(f"not editable: {sorted(unknown)}")
        return cls(**{k: ("" if v is None else v) for k, v in data.items()})

    def changes(self) -> dict[str, Any]:
        """Only the fields that carry a value."""
        out: dict[str, Any] = {}
        for name in EDITABLE_FIELDS:
            value = getattr(self, name)
            if value == "":
                continue
            out[name] = value
        return out

    def is_empty(self) -> bool:
        return not self.changes()
