from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

"""SheetSource interface and an in-memory implementation.

A SheetSource owns the container format (workbook parsing etc.) and exposes
per sheet an ordered header plus lazily produced data rows of raw values.
The materialization engine only talks to this interface.
"""

__all__ = [
    "SheetSource",
    "SourceNotFoundError",
    "InMemorySheetSource",
    "find_sheet",
    "header_text",
]


class SourceNotFoundError(Exception):
    """Raised when the first sheet is requested but the source has none."""


@runtime_checkable
class SheetSource(Protocol):
    def sheet_names(self) -> list[str]:
        """Sheet names in workbook order."""
        ...

    def header(self, sheet_name: str) -> list[str]:
        """Column names of the header row (empty string for blank cells)."""
        ...

    def rows(self, sheet_name: str) -> Iterator[list[Any]]:
        """Data rows after the header, aligned to header positions."""
        ...

    def metadata(self) -> dict[str, str]:
        """Free-form document properties."""
        ...


def header_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def find_sheet(source: SheetSource, sheet_name: str) -> str | None:
    """Case-insensitive sheet lookup; returns the actual sheet name or None."""
    wanted = sheet_name.casefold()
    for name in source.sheet_names():
        if name.casefold() == wanted:
            return name
    return None


class InMemorySheetSource:
    """SheetSource over plain Python lists.

    Each sheet is a list of rows; the first row is the header.

    Example:
        >>> src = InMemorySheetSource({"Staff": [["ID", "Name"], [1, "Ann"]]})
        >>> src.header("Staff")
        ['ID', 'Name']
    """

    def __init__(
        self,
        sheets: Mapping[str, Sequence[Sequence[Any]]],
        metadata: Mapping[str, str] | None = None,
    ) -> None:
        self._sheets = {name: [list(r) for r in rows] for name, rows in sheets.items()}
        self._metadata = dict(metadata or {})

    def sheet_names(self) -> list[str]:
        return list(self._sheets)

    def header(self, sheet_name: str) -> list[str]:
        rows = self._sheets.get(sheet_name) or []
        if not rows:
            return []
        return [header_text(v) for v in rows[0]]

    def rows(self, sheet_name: str) -> Iterator[list[Any]]:
        rows = self._sheets.get(sheet_name) or []
        for row in rows[1:]:
            yield list(row)

    def metadata(self) -> dict[str, str]:
        return dict(self._metadata)
