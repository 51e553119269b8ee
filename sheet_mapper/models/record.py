from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

"""Schema-less output records.

When no target class is given the reader produces :class:`Record` objects: an
ordered mapping from property name to a tagged :class:`CellValue`.
"""

__all__ = [
    "CellKind",
    "CellValue",
    "Record",
]


class CellKind(Enum):
    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    NULL = "null"


@dataclass(frozen=True)
class CellValue:
    kind: CellKind
    value: Any = None

    @staticmethod
    def from_raw(raw: Any) -> CellValue:
        """Tag a raw cell value (unknown types are stored as text)."""
        if raw is None:
            return CellValue(CellKind.NULL)
        if isinstance(raw, bool):
            return CellValue(CellKind.BOOLEAN, raw)
        if isinstance(raw, (int, float, Decimal)):
            return CellValue(CellKind.NUMBER, raw)
        if isinstance(raw, (datetime, date)):
            return CellValue(CellKind.DATE, raw)
        if isinstance(raw, str):
            return CellValue(CellKind.TEXT, raw)
        return CellValue(CellKind.TEXT, str(raw))

    @property
    def is_blank(self) -> bool:
        """True for null values and whitespace-only text."""
        if self.kind is CellKind.NULL:
            return True
        return self.kind is CellKind.TEXT and not str(self.value).strip()

    def to_json(self) -> Any:
        if isinstance(self.value, (datetime, date)):
            return self.value.isoformat()
        if isinstance(self.value, Decimal):
            return str(self.value)
        return self.value


@dataclass
class Record(Mapping[str, CellValue]):
    """Ordered property bag (insertion order = binding application order)."""
    fields: dict[str, CellValue] = field(default_factory=dict)

    def __getitem__(self, key: str) -> CellValue:
        return self.fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def set(self, key: str, value: CellValue) -> None:
        self.fields[key] = value

    def value(self, key: str, default: Any = None) -> Any:
        """Plain (untagged) value of ``key``."""
        cell = self.fields.get(key)
        return default if cell is None else cell.value

    def to_dict(self) -> dict[str, Any]:
        """JSON friendly plain dict."""
        return {k: v.to_json() for k, v in self.fields.items()}
