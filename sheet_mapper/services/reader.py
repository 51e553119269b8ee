from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

from ..excel.source import SheetSource, SourceNotFoundError, find_sheet
from ..mapping.materializer import MaterializationPlan, RecordPlan
from ..models.binding import BindingSet, BindingsLike
from ..models.read_result import ReadResult
from ..models.record import Record
from .pipeline import filtered, filtered_and_sorted, sorted_with
from .progress import RowProgressTracker

"""Sheet read service.

Coordinates one read: locate the sheet, build the materialization plan from
the header, pull data rows lazily from the source, keep rows that satisfy the
required fields (source order), then apply the optional filter / sort.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "SheetReader",
]

T = TypeVar("T")


class SheetReader(Generic[T]):
    """Reads sheets of a SheetSource into objects of ``target`` type.

    ``target=None`` selects schema-less mode: rows become :class:`Record`.
    The reader keeps no state between calls; the same reader (or source) can
    be used for several reads.

    Example:
        >>> reader = SheetReader(source, Employee)
        >>> staff = reader.read({"id": "Emp Id", "name": "Name"}, required=["name"])
    """

    def __init__(self, source: SheetSource, target: type[T] | None = None, *, progress: bool = False) -> None:
        self.source = source
        self.target = target
        self.progress = progress

    def _locate(self, sheet_name: str | None) -> str | None:
        if sheet_name is None:
            names = self.source.sheet_names()
            if not names:
                raise SourceNotFoundError("no worksheets found in the source")
            return names[0]
        found = find_sheet(self.source, sheet_name)
        if found is None:
            logger.info(f"sheet not found: {sheet_name}")
        return found

    def read_result(
        self,
        bindings: BindingsLike,
        sheet_name: str | None = None,
        required: Iterable[str] | None = None,
        *,
        collect_rows: bool = True,
    ) -> ReadResult:
        """Materialize a sheet and return items together with per-row outcomes.

        Args:
            bindings: flat map ``{property: column}``, BindingSet or Binding sequence
            sheet_name: sheet to read (case-insensitive); None = first sheet
            required: property names / paths that must be non-null, non-blank
            collect_rows: keep every RowOutcome in ``rows`` (row counts and
                diagnostics need them); when False excluded rows are dropped
                as soon as they are materialized and ``rows`` stays empty

        Raises:
            SourceNotFoundError: first sheet requested but the source has none
            BindingError: malformed binding or unknown required property
        """
        start_time = datetime.now(UTC)
        binding_set = BindingSet.coerce(bindings)
        name = self._locate(sheet_name)
        if name is None:
            return ReadResult(sheet_name=None, items=[], start_time=start_time, end_time=datetime.now(UTC))

        header = self.source.header(name)
        plan: MaterializationPlan | RecordPlan
        if self.target is None:
            plan = RecordPlan.build(header, binding_set, required)
        else:
            plan = MaterializationPlan.build(self.target, header, binding_set, required)

        items: list[Any] = []
        outcomes = []
        with RowProgressTracker(name, enabled=None if self.progress else False) as tracker:
            # 1行目がヘッダなのでデータ行は 2 から
            for row_number, values in enumerate(self.source.rows(name), start=2):
                outcome = plan.materialize(values, row_number)
                if collect_rows:
                    outcomes.append(outcome)
                tracker.advance(outcome.included)
                if outcome.included:
                    items.append(outcome.target)
                else:
                    logger.debug(f"row {row_number} excluded: missing {outcome.missing_required}")

        end_time = datetime.now(UTC)
        logger.debug(f"sheet '{name}': {len(items)}/{tracker.rows} rows kept")
        return ReadResult(sheet_name=name, items=items, start_time=start_time, end_time=end_time, rows=outcomes)

    def read(
        self,
        bindings: BindingsLike,
        sheet_name: str | None = None,
        required: Iterable[str] | None = None,
    ) -> list[T]:
        """Materialize a sheet (source row order)."""
        return self.read_result(bindings, sheet_name, required, collect_rows=False).items

    def read_filtered(
        self,
        bindings: BindingsLike,
        predicate: Callable[[T], bool],
        sheet_name: str | None = None,
        required: Iterable[str] | None = None,
    ) -> list[T]:
        return filtered(self.read(bindings, sheet_name, required), predicate)

    def read_sorted(
        self,
        bindings: BindingsLike,
        comparator: Callable[[T, T], int],
        sheet_name: str | None = None,
        required: Iterable[str] | None = None,
    ) -> list[T]:
        return sorted_with(self.read(bindings, sheet_name, required), comparator)

    def read_filtered_and_sorted(
        self,
        bindings: BindingsLike,
        predicate: Callable[[T], bool],
        comparator: Callable[[T, T], int],
        sheet_name: str | None = None,
        required: Iterable[str] | None = None,
    ) -> list[T]:
        """Filter then sort, both after full materialization."""
        return filtered_and_sorted(self.read(bindings, sheet_name, required), predicate, comparator)

    def read_records(
        self,
        bindings: BindingsLike,
        sheet_name: str | None = None,
        required: Iterable[str] | None = None,
    ) -> list[Record]:
        """Schema-less read regardless of the reader's target type."""
        return SheetReader(self.source, None, progress=self.progress).read(bindings, sheet_name, required)

    def metadata(self) -> dict[str, str]:
        """Document properties of the source, verbatim."""
        return dict(self.source.metadata())
