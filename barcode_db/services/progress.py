from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display for sheet scanning with tqdm (TTY only).

Scan cost is linear in the used cell count; for large sheets a row
progress bar is shown on interactive terminals. In non-TTY environments
(CI, piped output) the tracker is a no-op to avoid ANSI control sequence
spam in logs.
"""

__all__ = [
    "ScanProgress",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """Check if stdout is a TTY and progress should be displayed."""
    return sys.stdout.isatty()


class ScanProgress:
    """Row-level progress bar for one sheet scan."""

    def __init__(self, total_rows: int, *, description: str = "Scanning rows") -> None:
        self.total_rows = total_rows
        self.description = description
        self.rows_done = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_rows,
                desc=description,
                unit="row",
                leave=False,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def advance(self, rows: int = 1) -> None:
        self.rows_done += rows
        if self.pbar is not None:
            self.pbar.update(rows)

    def set_postfix(self, **kwargs: Any) -> None:
        """Show running counts (valid=, invalid=, ...) next to the bar."""
        if self.pbar is not None:
            self.pbar.set_postfix(**kwargs)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ScanProgress:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
