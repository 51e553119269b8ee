from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Row progress display with tqdm (TTY only).

In non-TTY environments (CI, pipes) the bar is disabled so that no ANSI
control sequences end up in the JSON output.
"""

__all__ = [
    "RowProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """Return True if stderr is a TTY and progress should be displayed."""
    return sys.stderr.isatty()


class RowProgressTracker:
    """Progress bar over materialized rows.

    The total row count is usually unknown (rows are pulled lazily), so the
    bar shows a running count rather than a percentage.
    """

    def __init__(self, sheet_name: str, *, enabled: bool | None = None) -> None:
        self.sheet_name = sheet_name
        self.rows = 0
        self.excluded = 0
        self.enabled = is_tty_enabled() if enabled is None else enabled
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                desc=f"Reading {sheet_name}",
                unit="row",
                leave=False,
                ncols=80,
                ascii=True,
                file=sys.stderr,
            )
        else:
            self.pbar = None

    def advance(self, included: bool = True) -> None:
        """Count one processed row."""
        self.rows += 1
        if not included:
            self.excluded += 1
        if self.pbar is not None:
            self.pbar.update(1)
            # 除外行が出た時だけ postfix を更新 (表示スパム抑止)
            if not included:
                self.pbar.set_postfix(excluded=self.excluded)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> RowProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
