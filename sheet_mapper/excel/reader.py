from __future__ import annotations

import io
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

import numpy as np
import openpyxl
import pandas as pd
from openpyxl.packaging.custom import StringProperty

from .source import header_text

"""Excel workbook SheetSource (pandas + openpyxl).

- cell values: ``pandas.ExcelFile`` (openpyxl engine), ``dtype=object`` so that
  ints stay ints; only truly empty cells become null ("NA" 等の文字列は保持)
- values are converted to plain Python types (numpy / Timestamp -> native)
- custom document properties (string valued) are exposed as metadata
"""

logger = logging.getLogger(__name__)

__all__ = [
    "ExcelSheetSource",
]


def _to_native(value: Any) -> Any:
    if value is None:
        return None
    if not isinstance(value, str) and pd.isna(value):
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if isinstance(value, np.generic):
        return value.item()
    return value


class ExcelSheetSource:
    """SheetSource backed by an .xlsx workbook.

    Parameters
    ----------
    source: workbook path or raw workbook bytes
    header_row: 0-based row index of the header (data rows follow it)
    null_sentinels: strings treated as empty cells (case-insensitive, e.g. ["NULL"])
    skip_blank_rows: drop data rows whose cells are all empty
    """

    def __init__(
        self,
        source: Path | str | bytes,
        *,
        header_row: int = 0,
        null_sentinels: Iterable[str] | None = None,
        skip_blank_rows: bool = False,
    ) -> None:
        if isinstance(source, (bytes, bytearray)):
            if not source:
                raise ValueError("invalid excel file bytes: empty content")
            self._path: Path | None = None
            self._content: bytes | None = bytes(source)
        else:
            path = Path(source)
            if not path.exists():
                raise FileNotFoundError(f"file not found: {path}")
            self._path = path
            self._content = None
        self.header_row = header_row
        self.null_sentinels = {s.strip().upper() for s in null_sentinels or ()}
        self.skip_blank_rows = skip_blank_rows
        self._sheet_names: list[str] | None = None
        self._frames: dict[str, pd.DataFrame] = {}

    @property
    def name(self) -> str:
        return self._path.name if self._path is not None else "<bytes>"

    def _handle(self) -> Path | io.BytesIO:
        if self._path is not None:
            return self._path
        return io.BytesIO(self._content or b"")

    def _frame(self, sheet_name: str) -> pd.DataFrame:
        frame = self._frames.get(sheet_name)
        if frame is None:
            with pd.ExcelFile(self._handle(), engine="openpyxl") as xls:
                # ヘッダなしで生読み (ヘッダ行は header_row で後から適用)
                frame = xls.parse(
                    sheet_name,
                    header=None,
                    dtype=object,
                    keep_default_na=False,
                    na_values=[""],
                )
            logger.debug(f"parsed sheet '{sheet_name}' shape={frame.shape}")
            self._frames[sheet_name] = frame
        return frame

    def _clean(self, value: Any) -> Any:
        value = _to_native(value)
        if isinstance(value, str) and self.null_sentinels and value.strip().upper() in self.null_sentinels:
            return None
        return value

    def sheet_names(self) -> list[str]:
        if self._sheet_names is None:
            with pd.ExcelFile(self._handle(), engine="openpyxl") as xls:
                self._sheet_names = [str(n) for n in xls.sheet_names]
        return list(self._sheet_names)

    def header(self, sheet_name: str) -> list[str]:
        frame = self._frame(sheet_name)
        if frame.shape[0] <= self.header_row:
            return []
        return [header_text(_to_native(v)) for v in frame.iloc[self.header_row].tolist()]

    def rows(self, sheet_name: str) -> Iterator[list[Any]]:
        frame = self._frame(sheet_name)
        for raw in frame.iloc[self.header_row + 1 :].itertuples(index=False, name=None):
            values = [self._clean(v) for v in raw]
            if self.skip_blank_rows and all(v is None for v in values):
                continue
            yield values

    def metadata(self) -> dict[str, str]:
        """String valued custom document properties of the workbook."""
        wb = openpyxl.load_workbook(self._handle())
        try:
            return {
                prop.name: prop.value
                for prop in wb.custom_doc_props.props
                if isinstance(prop, StringProperty) and prop.value is not None
            }
        finally:
            wb.close()
