from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the barcode registry.

Defaults here are the effective configuration when no YAML file is given.
"""

DEFAULT_EXPORT_FILENAME = "barcode_database_export.xlsx"
DEFAULT_EXPORT_SHEET = "Barcodes"


@dataclass(frozen=True)
class ExportConfig:
    """Output file settings for the registry export."""
    filename: str = DEFAULT_EXPORT_FILENAME
    sheet_name: str = DEFAULT_EXPORT_SHEET


@dataclass(frozen=True)
class AppConfig:
    """Root configuration object.

    upload_time_format is a strftime pattern. The default '%c' follows the
    process LC_TIME locale: the CLI adopts the user's environment, library
    callers that never call locale.setlocale get the C locale rendering.
    """
    timezone: str = "UTC"  # zone used to render Upload Time
    upload_time_format: str = "%c"
    error_display_limit: int = 5  # defects listed before '... and N more'
    preview_limit: int = 5  # valid barcodes listed in the upload preview
    export: ExportConfig = field(default_factory=ExportConfig)
