from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .outcome import RowOutcome

"""Read result model.

Aggregates the materialized items of one read together with the per-row
outcomes, used for diagnostics and the SUMMARY line.
"""

__all__ = [
    "ReadResult",
]


@dataclass(frozen=True)
class ReadResult:
    """Items and per-row outcomes of a single sheet read.

    ``sheet_name`` is None when the requested sheet does not exist (empty result).
    """
    sheet_name: str | None
    items: list[Any]
    start_time: datetime
    end_time: datetime
    rows: list[RowOutcome] = field(default_factory=list)

    @property
    def total_rows(self) -> int:
        return len(self.rows)

    @property
    def kept_rows(self) -> int:
        return sum(1 for r in self.rows if r.included)

    @property
    def excluded_rows(self) -> int:
        return self.total_rows - self.kept_rows

    @property
    def skipped_fields(self) -> int:
        return sum(len(r.skipped_fields) for r in self.rows)

    @property
    def elapsed_seconds(self) -> float:
        return (self.end_time - self.start_time).total_seconds()

    @property
    def throughput_rows_per_sec(self) -> float:
        elapsed = self.elapsed_seconds
        return self.total_rows / elapsed if elapsed > 0 else 0.0
