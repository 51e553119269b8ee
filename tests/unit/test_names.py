from __future__ import annotations

import pytest

from sheet_mapper.mapping.names import equals_normalized, normalize, normalized_key, strip_control


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Emp Id", "EmpId"),
        ("First_Name", "FirstName"),
        ("E-mail\n", "Email"),
        ("  Total (JPY) ", "TotalJPY"),
        ("Größe", "Gre"),  # 非ASCII は除去
        ("", ""),
        ("!!!", ""),
    ],
)
def test_normalize_keeps_ascii_alnum_only(raw: str, expected: str):
    assert normalize(raw) == expected


@pytest.mark.parametrize("raw", ["Emp Id", "a_b-c.d", "", "日本語ABC", "x\ty\nz"])
def test_normalize_is_idempotent(raw: str):
    assert normalize(normalize(raw)) == normalize(raw)


def test_equals_normalized_ignores_case_and_punctuation():
    assert equals_normalized("Emp Id", "EMP_ID")
    assert equals_normalized("first-name", "FirstName")
    assert not equals_normalized("FirstName", "LastName")
    assert equals_normalized("", "---")


def test_normalized_key_is_casefolded():
    assert normalized_key("Emp. ID") == "empid"


def test_strip_control_removes_tabs_and_newlines():
    assert strip_control("Dept\r\n\tName\v\f") == "DeptName"
    assert strip_control("Dept Name") == "Dept Name"
