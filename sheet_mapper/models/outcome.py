from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

"""Per-field and per-row materialization outcomes.

Bad cell data never aborts a row; instead every binding application reports
``APPLIED`` or ``SKIPPED`` (with a reason) so callers can collect diagnostics.
"""

__all__ = [
    "OutcomeStatus",
    "SkipReason",
    "FieldOutcome",
    "RowOutcome",
]


class OutcomeStatus(Enum):
    APPLIED = "applied"
    SKIPPED = "skipped"


class SkipReason(Enum):
    """Why a binding was not applied to the target."""
    UNCONVERTIBLE_VALUE = "UNCONVERTIBLE_VALUE"  # 型変換不可 (null 含む)
    UNRESOLVABLE_BINDING = "UNRESOLVABLE_BINDING"  # プロパティ無し / 読み取り専用


@dataclass(frozen=True)
class FieldOutcome:
    """Result of applying one binding to one row.

    Attributes:
        path: Dotted property path of the binding
        column: Source column name, or None when a static value was applied
        status: APPLIED or SKIPPED
        reason: Skip classification (None when applied)
        detail: Human readable explanation for skipped fields
    """
    path: str
    column: str | None
    status: OutcomeStatus
    reason: SkipReason | None = None
    detail: str = ""

    @staticmethod
    def applied(path: str, column: str | None) -> FieldOutcome:
        return FieldOutcome(path=path, column=column, status=OutcomeStatus.APPLIED)

    @staticmethod
    def skipped(path: str, column: str | None, reason: SkipReason, detail: str = "") -> FieldOutcome:
        return FieldOutcome(path=path, column=column, status=OutcomeStatus.SKIPPED, reason=reason, detail=detail)

    @property
    def is_applied(self) -> bool:
        return self.status is OutcomeStatus.APPLIED


@dataclass
class RowOutcome:
    """Materialization result of a single data row.

    ``row_number`` is the 1-based sheet row (header = 1, first data row = 2).
    The row is included in the result only when no required field is missing.
    """
    row_number: int
    target: Any
    fields: list[FieldOutcome] = field(default_factory=list)
    missing_required: list[str] = field(default_factory=list)

    @property
    def included(self) -> bool:
        return not self.missing_required

    @property
    def skipped_fields(self) -> list[FieldOutcome]:
        return [f for f in self.fields if not f.is_applied]
