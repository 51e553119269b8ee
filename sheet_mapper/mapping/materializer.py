from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from ..models.binding import Binding, BindingSet
from ..models.outcome import FieldOutcome, RowOutcome
from ..models.record import CellValue, Record
from .binder import BindingError, BoundPath, bind, compile_path, read_path
from .resolver import ColumnResolution, resolve
from .shapes import new_instance

"""Row materialization.

A plan is built once per read (header resolution + compiled property paths)
and then applied to every data row:

1. fresh target instance
2. column bindings in header order, then static values of bindings whose column is absent
3. required fields re-read from the target; null / blank -> row excluded
"""

logger = logging.getLogger(__name__)

__all__ = [
    "MaterializationPlan",
    "RecordPlan",
    "is_blank",
]


def is_blank(value: Any) -> bool:
    """Null or whitespace-only string."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def _cell(values: Sequence[Any], index: int) -> Any:
    # 行がヘッダより短い場合は空セル扱い
    return values[index] if index < len(values) else None


@dataclass(frozen=True)
class MaterializationPlan:
    """Compiled bindings for one target class and one header."""
    target_cls: type
    resolution: ColumnResolution
    paths: dict[int, BoundPath]  # id(binding) -> compiled path
    required: tuple[BoundPath, ...]

    @staticmethod
    def build(
        target_cls: type,
        header: Sequence[str],
        bindings: BindingSet,
        required: Iterable[str] | None = None,
    ) -> MaterializationPlan:
        """Resolve the header and compile every binding path.

        Raises:
            BindingError: malformed binding path, a required path that does
                not exist on ``target_cls``, or a ``target_cls`` that cannot be
                created without arguments
        """
        try:
            new_instance(target_cls)
        except TypeError as e:
            raise BindingError(f"cannot create {target_cls.__name__} without arguments: {e}") from e

        resolution = resolve(header, bindings)
        paths = {id(b): compile_path(target_cls, b.property_path) for b in bindings}
        for bound in paths.values():
            if not bound.resolved:
                logger.debug(f"binding '{bound.dotted}' unresolvable: {bound.failure}")

        required_paths: list[BoundPath] = []
        for name in required or ():
            bound = compile_path(target_cls, name.split("."), for_read=True)
            if not bound.resolved:
                raise BindingError(f"required property '{name}' not found: {bound.failure}")
            required_paths.append(bound)
        return MaterializationPlan(
            target_cls=target_cls,
            resolution=resolution,
            paths=paths,
            required=tuple(required_paths),
        )

    def _apply(self, target: Any, binding: Binding, value: Any, column: str | None) -> FieldOutcome:
        return bind(target, self.paths[id(binding)], value, column)

    def materialize(self, values: Sequence[Any], row_number: int) -> RowOutcome:
        target = new_instance(self.target_cls)
        outcome = RowOutcome(row_number=row_number, target=target)

        for index, binding in self.resolution.matched_columns():
            column = self.resolution.header[index]
            outcome.fields.append(self._apply(target, binding, _cell(values, index), column))

        for binding in self.resolution.defaulted:
            outcome.fields.append(self._apply(target, binding, binding.static_value, None))

        for bound in self.required:
            if is_blank(read_path(target, bound)):
                outcome.missing_required.append(bound.dotted)
        return outcome


@dataclass(frozen=True)
class RecordPlan:
    """Schema-less counterpart of :class:`MaterializationPlan`.

    Each binding writes ``CellValue.from_raw(raw)`` under its dotted property
    path; repeated writes to the same key keep the last value.
    """
    resolution: ColumnResolution
    required: tuple[str, ...]

    @staticmethod
    def build(header: Sequence[str], bindings: BindingSet, required: Iterable[str] | None = None) -> RecordPlan:
        """Resolve the header; required names match binding paths case-insensitively.

        Raises:
            BindingError: a required name that no binding writes
        """
        keys: dict[str, str] = {}
        for binding in bindings:
            keys.setdefault(binding.dotted_path.casefold(), binding.dotted_path)

        required_keys: list[str] = []
        for name in required or ():
            key = keys.get(name.casefold())
            if key is None:
                raise BindingError(f"required property '{name}' is not bound")
            required_keys.append(key)
        return RecordPlan(resolution=resolve(header, bindings), required=tuple(required_keys))

    def materialize(self, values: Sequence[Any], row_number: int) -> RowOutcome:
        record = Record()
        outcome = RowOutcome(row_number=row_number, target=record)

        for index, binding in self.resolution.matched_columns():
            column = self.resolution.header[index]
            record.set(binding.dotted_path, CellValue.from_raw(_cell(values, index)))
            outcome.fields.append(FieldOutcome.applied(binding.dotted_path, column))

        for binding in self.resolution.defaulted:
            record.set(binding.dotted_path, CellValue.from_raw(binding.static_value))
            outcome.fields.append(FieldOutcome.applied(binding.dotted_path, None))

        for name in self.required:
            cell = record.get(name)
            if cell is None or cell.is_blank:
                outcome.missing_required.append(name)
        return outcome
