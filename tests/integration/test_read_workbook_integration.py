from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

from sheet_mapper.config.loader import load_config
from sheet_mapper.excel.reader import ExcelSheetSource
from sheet_mapper.logging.diagnostics import DiagnosticsLog
from sheet_mapper.services.reader import SheetReader

"""Workbook -> typed objects, end to end (pandas/openpyxl source + config)."""


@dataclass
class Address:
    city: str | None = None
    zip: str | None = None


@dataclass
class Customer:
    id: int | None = None
    name: str | None = None
    since: date | None = None
    credit: Decimal | None = None
    vip: bool | None = None
    segment: str | None = None
    address: Address | None = None
    phones: list[str] = field(default_factory=list)


CONFIG = """sheet: customers
header_row: 1
skip_blank_rows: true
null_sentinels: [NULL, "-"]
required: [name, address.city]
bindings:
  - property: id
    column: "Customer ID"
  - property: name
    column: Name
  - property: since
    column: Since
  - property: credit
    column: Credit
  - property: vip
    column: VIP
  - property: address.city
    column: City
  - property: address.zip
    column: ZIP
  - property: phones
    column: Phone 1
  - property: phones
    column: Phone 2
  - property: segment
    column: Segment
    static: retail
"""


def _workbook(temp_workdir: Path, make_excel) -> Path:
    return make_excel(
        temp_workdir / "data" / "customers.xlsx",
        {
            "Customers": [
                ["Customer export", None, None, None, None, None, None, None, None],
                ["customer_id", " NAME ", "Since", "Credit", "VIP", "City", "ZIP", "Phone 1", "Phone 2"],
                [10, "Acme", datetime(2019, 3, 1), "1,250.50", True, "Osaka", 5300001, "06-1111", "06-2222"],
                [None, None, None, None, None, None, None, None, None],
                [11, "Globex", "2020/07/15", "n/a", "FALSE", "NULL", "-", "03-3333", None],
                [12, "Initech", "not a date", 99, "maybe", "Kobe", None, None, "078-4444"],
            ],
        },
    )


def test_typed_read_end_to_end(temp_workdir: Path, make_excel):
    path = _workbook(temp_workdir, make_excel)
    cfg_path = temp_workdir / "config" / "mapping.yml"
    cfg_path.write_text(CONFIG, encoding="utf-8")
    cfg = load_config(cfg_path)

    source = ExcelSheetSource(
        path,
        header_row=cfg.header_row,
        null_sentinels=cfg.null_sentinels,
        skip_blank_rows=cfg.skip_blank_rows,
    )
    result = SheetReader(source, Customer).read_result(cfg.bindings, cfg.sheet, cfg.required)

    assert result.sheet_name == "Customers"
    assert result.total_rows == 3
    # Globex: City is a null sentinel -> excluded
    assert [c.id for c in result.items] == [10, 12]

    acme, initech = result.items
    assert acme.name == "Acme"
    assert acme.since == date(2019, 3, 1)
    assert acme.credit == Decimal("1250.50")
    assert acme.vip is True
    assert acme.address == Address(city="Osaka", zip="5300001")
    assert acme.phones == ["06-1111", "06-2222"]

    assert initech.since is None
    assert initech.credit == Decimal("99")
    assert initech.vip is None
    assert {c.segment for c in result.items} == {"retail"}
    assert initech.address.zip is None
    assert initech.phones == ["078-4444"]

    globex = result.rows[1]
    assert globex.row_number == 3
    assert globex.missing_required == ["address.city"]

    log = DiagnosticsLog(logs_dir=temp_workdir / "logs")
    assert log.collect(result) == result.skipped_fields + 1
    assert log.flush() is not None
