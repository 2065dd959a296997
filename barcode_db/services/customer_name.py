from __future__ import annotations

import re

"""Customer-name extraction from the sheet heading or the upload filename.

Printed batches are titled like ``100W - 50 NOS Acme Corp``: wattage,
dash, quantity, ``NOS``, then the customer. The heading cell is preferred;
the filename is the fallback; an empty result means manual entry.
"""

__all__ = [
    "extract_name",
]

_HEADING_RE = re.compile(r"[0-9]+W\s*-\s*[0-9]+\s*NOS\s*(.*)")
# dash optional and case-insensitive in filenames
_FILENAME_RE = re.compile(r"[0-9]+W\s*-?\s*[0-9]+\s*NOS\s*(.*?)\.(xlsx|xls)$", re.IGNORECASE)


def extract_name(filename: str, heading: str = "") -> str:
    """Return the customer label or '' when neither source matches."""
    if heading:
        m = _HEADING_RE.search(heading)
        if m:
            name = m.group(1).strip()
            if name:
                return name
    if filename:
        m = _FILENAME_RE.search(filename)
        if m:
            return m.group(1).strip()
    return ""
