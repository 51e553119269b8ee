from __future__ import annotations

from pathlib import Path

import openpyxl
import pytest
from openpyxl.packaging.custom import IntProperty, StringProperty

from sheet_mapper.excel.reader import ExcelSheetSource
from sheet_mapper.excel.source import SheetSource


def test_excel_source_satisfies_protocol(staff_workbook: Path):
    assert isinstance(ExcelSheetSource(staff_workbook), SheetSource)


def test_sheet_names_in_workbook_order(staff_workbook: Path):
    assert ExcelSheetSource(staff_workbook).sheet_names() == ["Staff", "Other"]


def test_header_and_rows_are_native_values(staff_workbook: Path):
    src = ExcelSheetSource(staff_workbook)
    assert src.header("Staff") == ["Emp Id", "First_Name", "Hired", "NOTE"]
    rows = list(src.rows("Staff"))
    assert len(rows) == 3
    assert rows[0] == [1, "Alice", "2020-04-01", "NA"]
    assert type(rows[0][0]) is int
    # whitespace-only strings are kept; empty cells become None
    assert rows[1][1] == "  "
    assert rows[1][3] is None


def test_null_sentinels_become_empty_cells(staff_workbook: Path):
    src = ExcelSheetSource(staff_workbook, null_sentinels=["null"])
    rows = list(src.rows("Staff"))
    assert rows[2][3] is None
    assert rows[0][3] == "NA"


def test_skip_blank_rows(temp_workdir: Path, make_excel):
    path = make_excel(
        temp_workdir / "data" / "gaps.xlsx",
        {"S": [["A", "B"], [1, "x"], [None, None], [2, "y"]]},
    )
    assert len(list(ExcelSheetSource(path).rows("S"))) == 3
    kept = list(ExcelSheetSource(path, skip_blank_rows=True).rows("S"))
    assert [r[0] for r in kept] == [1, 2]


def test_header_row_offset(temp_workdir: Path, make_excel):
    path = make_excel(
        temp_workdir / "data" / "offset.xlsx",
        {"S": [["Report title", None], ["Id", "Name"], [5, "Eve"]]},
    )
    src = ExcelSheetSource(path, header_row=1)
    assert src.header("S") == ["Id", "Name"]
    assert list(src.rows("S")) == [[5, "Eve"]]


def test_reads_from_bytes(staff_workbook: Path):
    src = ExcelSheetSource(staff_workbook.read_bytes())
    assert src.name == "<bytes>"
    assert src.header("Other") == ["x"]
    assert list(src.rows("Other")) == [[1]]


def test_missing_file_raises(temp_workdir: Path):
    with pytest.raises(FileNotFoundError):
        ExcelSheetSource(temp_workdir / "data" / "nope.xlsx")


def test_empty_bytes_raise():
    with pytest.raises(ValueError):
        ExcelSheetSource(b"")


def test_metadata_exposes_string_custom_properties(temp_workdir: Path):
    path = temp_workdir / "data" / "props.xlsx"
    wb = openpyxl.Workbook()
    wb.active.append(["Id"])
    wb.custom_doc_props.append(StringProperty(name="Owner", value="HR"))
    wb.custom_doc_props.append(IntProperty(name="Revision", value=3))
    wb.save(path)

    assert ExcelSheetSource(path).metadata() == {"Owner": "HR"}


def test_metadata_empty_without_custom_properties(staff_workbook: Path):
    assert ExcelSheetSource(staff_workbook).metadata() == {}
