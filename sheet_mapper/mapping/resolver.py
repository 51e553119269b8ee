from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ..models.binding import Binding, BindingSet
from .names import normalized_key, strip_control

"""Header column -> binding resolution.

For each header column the first binding (in declared order) whose column name
matches the header text is selected.  Names are compared on their normalized
form (ASCII alphanumerics only, case-insensitive), so "Emp. Id", "emp_id" and
"EMP ID" all match each other.
"""

__all__ = [
    "MAX_COLUMNS",
    "ColumnResolution",
    "resolve",
]

# 1行あたりの処理量を抑えるための列数上限
MAX_COLUMNS = 100_000


@dataclass(frozen=True)
class ColumnResolution:
    """Result of matching a header against a binding set.

    Attributes:
        header: Header actually used (capped at MAX_COLUMNS)
        assignments: Per column (0-based position) the selected binding or None
        unmatched: Bindings whose column is absent from the header, in declared order
        shadowed: Bindings whose column is present but taken by an earlier binding
    """
    header: tuple[str, ...]
    assignments: tuple[Binding | None, ...]
    unmatched: tuple[Binding, ...]
    shadowed: tuple[Binding, ...] = ()

    @property
    def defaulted(self) -> tuple[Binding, ...]:
        """Unmatched bindings carrying a static value."""
        return tuple(b for b in self.unmatched if b.has_static_value)

    def matched_columns(self) -> list[tuple[int, Binding]]:
        return [(i, b) for i, b in enumerate(self.assignments) if b is not None]


def resolve(header: Sequence[str], bindings: BindingSet) -> ColumnResolution:
    """Match header columns to bindings.

    A binding may be selected for several columns (all of them are applied);
    columns whose normalized text is empty never match.
    """
    capped = tuple(header[:MAX_COLUMNS])

    # 先勝ち: 同じ正規化名のバインディングは最初のものだけ候補になる
    by_key: dict[str, Binding] = {}
    keys: dict[int, str] = {}
    for binding in bindings:
        keys[id(binding)] = normalized_key(strip_control(binding.column_name))
        by_key.setdefault(keys[id(binding)], binding)

    assignments: list[Binding | None] = []
    used: set[int] = set()
    present: set[str] = set()
    for column in capped:
        key = normalized_key(column or "")
        if key:
            present.add(key)
        binding = by_key.get(key) if key else None
        assignments.append(binding)
        if binding is not None:
            used.add(id(binding))

    # 列が存在するが先勝ちで選ばれなかったものは static を使わない
    unmatched = tuple(b for b in bindings if id(b) not in used and keys[id(b)] not in present)
    shadowed = tuple(b for b in bindings if id(b) not in used and keys[id(b)] in present)
    return ColumnResolution(
        header=capped,
        assignments=tuple(assignments),
        unmatched=unmatched,
        shadowed=shadowed,
    )
