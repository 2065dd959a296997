from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

from ..excel.reader import DecodingError, read_first_sheet, read_upload
from ..models.barcode_record import BarcodeRecord
from ..models.config_models import AppConfig
from ..models.error_record import DUPLICATE, INVALID_FORMAT, REQUIRED_FIELD, ErrorRecord
from ..models.ingestion_form import IngestionForm
from ..models.scan_result import ScanResult
from .customer_name import extract_name
from .progress import ScanProgress
from .registry import Registry
from .scanner import scan
from .summary import render_scan_report

"""Ingestion session: one upload from file selection to registry commit.

State transitions:
    IDLE -> FILE_LOADED -> (READY | BLOCKED) -> COMMITTED -> IDLE

- FILE_LOADED is held only while the sheet is decoded and scanned.
- BLOCKED while any invalid/duplicate finding is staged or a required form
  field (customer name, allocation date) is unset; READY otherwise.
- Loading another file from any state restarts the session.
- Unreadable bytes reset the session to IDLE and raise DecodingError.

Each load is tied to a token from ``begin_load``; a read that completes after
a newer load (or a reset) started is discarded instead of being staged.
"""

__all__ = [
    "CommitBlockedError",
    "IngestionError",
    "IngestionSession",
    "REQUIRED_FIELDS_MESSAGE",
    "RequiredFieldError",
    "SessionState",
    "StagedUpload",
]

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "Required fields are missing"


class IngestionError(Exception):
    """Base exception for commit attempts that must not touch the registry."""


class RequiredFieldError(IngestionError):
    """Customer name or allocation date missing at commit time."""

    def __init__(self, missing: list[str]) -> None:
        super().__init__(REQUIRED_FIELDS_MESSAGE)
        self.missing = missing


class CommitBlockedError(IngestionError):
    """Nothing staged, or the staged scan has invalid/duplicate findings."""


class SessionState(Enum):
    IDLE = "idle"
    FILE_LOADED = "file_loaded"
    READY = "ready"
    BLOCKED = "blocked"
    COMMITTED = "committed"


@dataclass(frozen=True)
class StagedUpload:
    file_name: str
    sheet_name: str
    scan: ScanResult
    timestamp: datetime  # shared by every record of this upload


class IngestionSession:
    def __init__(
        self,
        config: AppConfig | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config or AppConfig()
        self._clock = clock or (lambda: datetime.now(UTC))
        self._token = 0
        self._staged: StagedUpload | None = None
        self._state = SessionState.IDLE
        self.form = IngestionForm()
        self.last_error = ""

    # ------------------------------------------------------------------ state
    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def staged(self) -> StagedUpload | None:
        return self._staged

    @property
    def can_commit(self) -> bool:
        return self._state is SessionState.READY

    def blocking_reasons(self) -> list[str]:
        if self._staged is None:
            return ["no file loaded"]
        reasons = []
        if self._staged.scan.invalid:
            reasons.append(f"{len(self._staged.scan.invalid)} invalid barcode(s)")
        if self._staged.scan.duplicate:
            reasons.append(f"{len(self._staged.scan.duplicate)} duplicate barcode(s)")
        reasons.extend(f"missing required field: {name}" for name in self.form.missing_required())
        return reasons

    def _transition(self, new: SessionState) -> None:
        if new is not self._state:
            logger.debug("session %s -> %s", self._state.name, new.name)
        self._state = new

    def _refresh(self) -> None:
        if self._staged is None:
            self._transition(SessionState.IDLE)
        elif self.blocking_reasons():
            self._transition(SessionState.BLOCKED)
        else:
            self._transition(SessionState.READY)

    def reset(self) -> None:
        """Drop staged data and the form; any read still in flight becomes stale."""
        self._token += 1
        self._staged = None
        self.form = IngestionForm()
        self._transition(SessionState.IDLE)

    # ---------------------------------------------------------------- loading
    def begin_load(self) -> int:
        """Start a file read; pass the returned token to ``load_file``."""
        self._token += 1
        return self._token

    def load_file(
        self,
        filename: str,
        data: bytes,
        token: int | None = None,
        show_progress: bool = False,
    ) -> ScanResult | None:
        """Decode, scan and stage an upload.

        Returns:
            the staged ScanResult, or None when ``token`` is stale

        Raises:
            DecodingError: unreadable bytes; the session is back to IDLE
        """
        if token is None:
            self.begin_load()
        elif token != self._token:
            logger.warning("discarding stale read file=%s token=%d current=%d", filename, token, self._token)
            return None

        self._staged = None
        self.last_error = ""
        self._transition(SessionState.FILE_LOADED)
        try:
            grid = read_first_sheet(data, filename)
        except DecodingError as e:
            self.reset()
            self.last_error = str(e)
            logger.error("decode failed file=%s: %s", filename, e)
            raise

        if show_progress:
            with ScanProgress(grid.row_count) as progress:
                result = scan(grid, progress)
        else:
            result = scan(grid)
        # other form fields typed earlier are kept; the derived name always replaces the old one
        self.form = self.form.updated(customer_name=extract_name(filename, grid.heading))
        self._staged = StagedUpload(
            file_name=filename,
            sheet_name=grid.sheet_name,
            scan=result,
            timestamp=self._clock(),
        )
        logger.info(
            "loaded file=%s valid=%d invalid=%d duplicate=%d customer=%r",
            filename,
            len(result.valid),
            len(result.invalid),
            len(result.duplicate),
            self.form.customer_name,
        )
        self._refresh()
        return result

    def load_path(self, path: Path, show_progress: bool = False) -> ScanResult | None:
        try:
            data = read_upload(path)
        except DecodingError as e:
            self.reset()
            self.last_error = str(e)
            raise
        return self.load_file(path.name, data, show_progress=show_progress)

    async def load_async(
        self, filename: str, read: Callable[[], Awaitable[bytes]]
    ) -> ScanResult | None:
        """Await ``read`` and stage its bytes unless a newer load started meanwhile."""
        token = self.begin_load()
        data = await read()
        return self.load_file(filename, data, token=token)

    # ------------------------------------------------------------------- form
    def update_form(self, **fields: Any) -> IngestionForm:
        self.form = self.form.updated(**fields)
        if self._staged is not None:
            self._refresh()
        return self.form

    # ----------------------------------------------------------------- commit
    def commit(self, registry: Registry) -> list[BarcodeRecord]:
        """Create one record per staged valid barcode and append them to ``registry``.

        Raises:
            RequiredFieldError: customer name blank or allocation date unset
            CommitBlockedError: nothing staged, or invalid/duplicate findings staged
        """
        if self._staged is None:
            raise CommitBlockedError("no file loaded")
        missing = self.form.missing_required()
        if missing:
            self.last_error = REQUIRED_FIELDS_MESSAGE
            logger.warning("commit rejected file=%s missing=%s", self._staged.file_name, missing)
            raise RequiredFieldError(missing)
        if self._staged.scan.has_errors:
            self.last_error = "upload has invalid or duplicate barcodes"
            raise CommitBlockedError(self.last_error)

        form = self.form
        records = [
            BarcodeRecord(
                barcode=barcode,
                customer_name=form.customer_name,
                allocation_date=form.allocation_date,
                pdi_date=form.pdi_date,
                indent_number=form.indent_number,
                timestamp=self._staged.timestamp,
            )
            for barcode in self._staged.scan.valid
        ]
        self._transition(SessionState.COMMITTED)
        registry.commit(records)
        self.last_error = ""
        self.reset()
        return records

    # -------------------------------------------------------------- reporting
    def preview(self, limit: int | None = None) -> list[str]:
        if self._staged is None:
            return []
        return self._staged.scan.valid[: limit if limit is not None else self.config.preview_limit]

    def report_lines(self) -> list[str]:
        if self._staged is None:
            return []
        return render_scan_report(self._staged.scan, self.config.error_display_limit)

    def error_records(self) -> list[ErrorRecord]:
        """Every staged defect as an ErrorRecord, invalid first then duplicates."""
        if self._staged is None:
            return []
        name = self._staged.file_name
        records = [ErrorRecord.from_finding(name, f, INVALID_FORMAT) for f in self._staged.scan.invalid]
        records += [ErrorRecord.from_finding(name, f, DUPLICATE) for f in self._staged.scan.duplicate]
        missing = self.form.missing_required()
        if missing:
            records.append(
                ErrorRecord.create(name, "", REQUIRED_FIELD, f"{REQUIRED_FIELDS_MESSAGE}: {', '.join(missing)}")
            )
        return records
