from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from sheet_mapper.models.diagnostic_record import DiagnosticRecord
from sheet_mapper.models.read_result import ReadResult

"""Diagnostics log buffering.

- JSON Lines, fixed schema (see DiagnosticRecord)
- one file per run: ``logs/diagnostics-YYYYMMDD-HHMMSS.log`` (UTC), created on
  first flush
- records are buffered in memory and written on flush()
"""

__all__ = [
    "DiagnosticRecord",
    "DiagnosticsLog",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class DiagnosticsLog:
    """In-memory buffer of diagnostic records. Flush appends JSON Lines.

    Not thread safe (reads are sequential).
    """

    def __init__(self, logs_dir: Path | None = None) -> None:
        self._records: list[DiagnosticRecord] = []
        self._file_path: Path | None = None
        self._logs_dir = logs_dir if logs_dir is not None else LOGS_DIR

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"diagnostics-{stamp}.log"
        return self._file_path

    def append(self, record: DiagnosticRecord) -> None:
        self._records.append(record)

    def collect(self, result: ReadResult) -> int:
        """Buffer every diagnostic of ``result``; returns the number added."""
        if result.sheet_name is None:
            return 0
        added = 0
        for outcome in result.rows:
            for record in DiagnosticRecord.from_row(result.sheet_name, outcome):
                self.append(record)
                added += 1
        return added

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        """Write buffered records; returns the file path or None when empty."""
        if not self._records:
            return None
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
