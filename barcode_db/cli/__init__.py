"""Command line entrypoint (``python -m barcode_db.cli``)."""

from .__main__ import main

__all__ = ["main"]
