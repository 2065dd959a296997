"""Domain models for the barcode registry.

Dataclasses shared by the scanner, the ingestion session and the registry.
"""

from .barcode_record import BarcodeRecord, RecordPatch, UnknownFieldError
from .cell_ref import CellRef
from .config_models import AppConfig, ExportConfig
from .ingestion_form import IngestionForm
from .scan_result import ScanFinding, ScanResult
from .sort_spec import SortDirection, SortSpec

__all__ = [
    # Configuration models
    "AppConfig",
    "ExportConfig",
    # Registry models
    "BarcodeRecord",
    "RecordPatch",
    "UnknownFieldError",
    "SortDirection",
    "SortSpec",
    # Upload models
    "CellRef",
    "IngestionForm",
    "ScanFinding",
    "ScanResult",
]
