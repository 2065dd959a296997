from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any

from .barcode_record import DateValue, UnknownFieldError, coerce_date

"""IngestionForm: metadata stamped onto every record of one upload."""

__all__ = [
    "IngestionForm",
    "FORM_FIELDS",
]


@dataclass(frozen=True)
class IngestionForm:
    customer_name: str = ""
    allocation_date: DateValue = ""  # required
    pdi_date: DateValue = ""
    indent_number: str = ""

    def updated(self, **changes: Any) -> IngestionForm:
        """Return a copy with the given fields replaced.

        Date fields accept date objects or ISO strings; anything else raises ValueError.
        """
        unknown = set(changes) - set(FORM_FIELDS)
        if unknown:
            raise UnknownFieldError(f"unknown form field(s): {sorted(unknown)}")
        for name in ("allocation_date", "pdi_date"):
            if name in changes:
                changes[name] = coerce_date(changes[name])
        for name in ("customer_name", "indent_number"):
            if name in changes and changes[name] is None:
                changes[name] = ""
        return replace(self, **changes)

    def missing_required(self) -> list[str]:
        missing = []
        if not self.customer_name.strip():
            missing.append("customer_name")
        if self.allocation_date == "":
            missing.append("allocation_date")
        return missing


FORM_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(IngestionForm))
