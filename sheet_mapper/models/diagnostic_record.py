from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

from .outcome import RowOutcome

"""DiagnosticRecord model for skipped fields and excluded rows.

One JSON Lines entry per skipped binding application or excluded row. The key
set is fixed (no extra keys), so downstream tooling can rely on it.
"""

__all__ = [
    "DiagnosticRecord",
    "ROW_EXCLUDED",
]

ROW_EXCLUDED = "REQUIRED_FIELD_MISSING"


@dataclass(frozen=True)
class DiagnosticRecord:
    """Structured diagnostic entry.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        sheet: Sheet name
        row: 1-based sheet row number (header = 1)
        column: Source column, or None for static values / row level entries
        path: Dotted property path (comma separated list for excluded rows)
        error_type: UPPER_SNAKE classification
        message: Description
    """
    timestamp: str
    sheet: str
    row: int
    column: str | None
    path: str
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(
        sheet: str, row: int, column: str | None, path: str, error_type: str, message: str
    ) -> DiagnosticRecord:
        """Create a record stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return DiagnosticRecord(
            timestamp=ts,
            sheet=sheet,
            row=row,
            column=column,
            path=path,
            error_type=error_type,
            message=message,
        )

    @staticmethod
    def from_row(sheet: str, outcome: RowOutcome) -> list[DiagnosticRecord]:
        """All diagnostics of one row (skipped fields first, then exclusion)."""
        records = [
            DiagnosticRecord.create(
                sheet=sheet,
                row=outcome.row_number,
                column=f.column,
                path=f.path,
                error_type=f.reason.value if f.reason is not None else "SKIPPED",
                message=f.detail,
            )
            for f in outcome.skipped_fields
        ]
        if not outcome.included:
            records.append(
                DiagnosticRecord.create(
                    sheet=sheet,
                    row=outcome.row_number,
                    column=None,
                    path=",".join(outcome.missing_required),
                    error_type=ROW_EXCLUDED,
                    message="required field is null or blank",
                )
            )
        return records

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
