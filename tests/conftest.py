# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path

import pandas as pd
import pytest


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """sheet: Staff
required: [name]
null_sentinels: [NULL]
bindings:
  - property: id
    column: Emp Id
  - property: name
    column: First_Name
  - property: dept
    column: Department
    static: Sales
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "mapping.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def make_excel():
    """Factory writing ``{sheet: rows}`` (first row = header) to an .xlsx file."""
    def _make(path: Path, sheets: dict[str, list[list[object]]]) -> Path:
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            for sheet, rows in sheets.items():
                pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
        return path
    return _make


@pytest.fixture()
def staff_workbook(temp_workdir: Path, make_excel) -> Path:
    return make_excel(
        temp_workdir / "data" / "staff.xlsx",
        {
            "Staff": [
                ["Emp Id", "First_Name", "Hired", "NOTE"],
                [1, "Alice", "2020-04-01", "NA"],
                [2, "  ", "2021-01-15", None],
                [3, "Carol", "bad date", "NULL"],
            ],
            "Other": [
                ["x"],
                [1],
            ],
        },
    )
