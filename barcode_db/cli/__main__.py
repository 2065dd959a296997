from __future__ import annotations

import argparse
import locale
import logging
import sys
from pathlib import Path

from barcode_db.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from barcode_db.excel.reader import DecodingError
from barcode_db.logging.error_log import ErrorLogBuffer
from barcode_db.logging.init import log_summary, setup_logging
from barcode_db.models.barcode_record import UnknownFieldError
from barcode_db.models.config_models import AppConfig
from barcode_db.models.sort_spec import HEADER_TO_FIELD, SortDirection, SortSpec
from barcode_db.services.export import export_registry, project
from barcode_db.services.ingestion import IngestionError, IngestionSession
from barcode_db.services.registry import Registry
from barcode_db.services.summary import render_summary_line

"""CLI entrypoint.

One invocation is one session: load a spreadsheet, stage its barcodes,
apply the form fields given as options, commit to a fresh registry, then
optionally list and export it. Nothing survives the process.
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_BLOCKED = 2


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="barcode-db", description="Validate a barcode sheet and build an allocation registry"
    )
    p.add_argument("file", type=Path, help="Spreadsheet (.xlsx/.xls); only the first sheet is scanned")
    p.add_argument("--config", type=Path, default=None, help=f"YAML config (default: {DEFAULT_CONFIG_PATH} if present)")
    p.add_argument("--customer-name", help="Override the name derived from heading/filename")
    p.add_argument("--allocation-date", help="Required, YYYY-MM-DD")
    p.add_argument("--pdi-date", help="YYYY-MM-DD")
    p.add_argument("--indent-number")
    p.add_argument("--inspect", action="store_true", help="Report scan results and exit without committing")
    p.add_argument("--search", default="", help="List committed barcodes containing TERM")
    p.add_argument("--sort", metavar="KEY", help="Sort listing by field or column header")
    p.add_argument("--desc", action="store_true", help="Descending sort")
    p.add_argument(
        "--export",
        nargs="?",
        const="",
        default=None,
        metavar="PATH",
        help="Write the registry to PATH (default: configured export filename)",
    )
    p.add_argument("--error-log", action="store_true", help="Write defects as JSON lines under logs/")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _form_changes(args: argparse.Namespace) -> dict[str, str]:
    changes = {
        "customer_name": args.customer_name,
        "allocation_date": args.allocation_date,
        "pdi_date": args.pdi_date,
        "indent_number": args.indent_number,
    }
    return {k: v for k, v in changes.items() if v is not None}


def _print_rows(registry: Registry, term: str, spec: SortSpec, cfg: AppConfig) -> None:
    for row in project(registry.query(term, spec), cfg):
        print(" | ".join(str(v) for v in row.values()))


def _use_environment_locale(logger: logging.Logger) -> None:
    # '%c' in upload_time_format renders in LC_TIME; adopt the user's setting
    try:
        locale.setlocale(locale.LC_TIME, "")
    except locale.Error as e:
        logger.debug(f"locale: keeping C locale ({e})")


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    _use_environment_locale(logger)

    try:
        if args.config is not None:
            cfg = load_config(args.config)
        else:
            cfg = load_config(DEFAULT_CONFIG_PATH, required=False)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    session = IngestionSession(cfg)
    file_name = args.file.name
    try:
        result = session.load_path(args.file, show_progress=True)
    except DecodingError as e:
        logger.error(f"decode: {e}")
        return EXIT_FATAL
    if result is None:
        # only a stale token yields None; a synchronous load has none
        logger.error(f"load: read of {file_name} was superseded")
        return EXIT_FATAL

    try:
        session.update_form(**_form_changes(args))
    except ValueError as e:
        logger.error(f"form: {e}")
        log_summary(render_summary_line(file_name, result, "BLOCKED")[8:])
        return EXIT_BLOCKED

    for line in session.report_lines():
        logger.warning(line)
    preview = session.preview()
    if preview:
        logger.info(f"Total Valid Barcodes: {len(result.valid)} first={', '.join(preview)}")

    if args.error_log:
        buffer = ErrorLogBuffer()
        buffer.extend(session.error_records())
        counts = " ".join(f"{k}={v}" for k, v in sorted(buffer.counts().items()))
        path = buffer.flush()
        if path is not None:
            logger.info(f"error log written: {path} ({counts})")

    state = session.state.name
    if args.inspect:
        log_summary(render_summary_line(file_name, result, state)[8:])
        return EXIT_SUCCESS

    registry = Registry()
    try:
        records = session.commit(registry)
    except IngestionError as e:
        logger.error(f"commit: {e} ({'; '.join(session.blocking_reasons())})")
        log_summary(render_summary_line(file_name, result, state)[8:])
        return EXIT_BLOCKED

    if args.search or args.sort:
        direction = SortDirection.DESC if args.desc else SortDirection.ASC
        key = HEADER_TO_FIELD.get(args.sort, args.sort) if args.sort else None
        try:
            spec = SortSpec(key, direction)
        except UnknownFieldError as e:
            logger.error(f"sort: {e}")
            return EXIT_FATAL
        _print_rows(registry, args.search, spec, cfg)

    if args.export is not None:
        target = Path(args.export or cfg.export.filename)
        export_registry(registry, cfg, path=target)
        logger.info(f"exported {len(registry)} record(s) to {target}")

    log_summary(render_summary_line(file_name, result, "COMMITTED", committed=len(records))[8:])
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
