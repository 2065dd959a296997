from __future__ import annotations

import re
from typing import Any

"""Barcode format validation.

A cell value is a *candidate* when it is a string starting with the ICON
prefix; a candidate is *valid* when the whole string matches one of the
accepted formats below (case-sensitive, anchored at both ends).
"""

__all__ = [
    "BARCODE_FORMATS",
    "BARCODE_PREFIX",
    "is_candidate",
    "is_valid",
    "matching_format",
]

BARCODE_PREFIX = "ICON"

# Checked in this order; names follow the printed label length.
BARCODE_FORMATS: dict[str, re.Pattern[str]] = {
    "ICON-17": re.compile(r"ICON[0-9]{13}"),
    "ICON-18": re.compile(r"ICON[0-9]{3}[A-Z][0-9]{10}"),
    "ICON-20": re.compile(r"ICON[0-9]{5}[A-Z][0-9]{10}"),
}


def is_candidate(value: Any) -> bool:
    """Cheap pre-filter applied to raw cell values before validation."""
    return isinstance(value, str) and value.startswith(BARCODE_PREFIX)


def matching_format(candidate: str) -> str | None:
    """Name of the first accepted format the candidate fully matches, else None."""
    for name, pattern in BARCODE_FORMATS.items():
        if pattern.fullmatch(candidate):
            return name
    return None


def is_valid(candidate: str) -> bool:
    return matching_format(candidate) is not None
