from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from sheet_mapper.mapping.coercion import UNCONVERTIBLE, Kind, coerce, stringify


@pytest.mark.parametrize("kind", list(Kind))
def test_none_is_unconvertible_for_every_kind(kind: Kind):
    assert coerce(None, kind) is UNCONVERTIBLE


def test_unconvertible_is_falsy_singleton():
    assert not UNCONVERTIBLE
    assert repr(UNCONVERTIBLE) == "UNCONVERTIBLE"


@pytest.mark.parametrize(
    "raw, expected",
    [
        (True, True),
        ("true", True),
        (" FALSE ", False),
    ],
)
def test_coerce_boolean(raw, expected):
    assert coerce(raw, Kind.BOOLEAN) is expected


@pytest.mark.parametrize("raw", ["yes", "1", 1, 0.0])
def test_coerce_boolean_rejects(raw):
    assert coerce(raw, Kind.BOOLEAN) is UNCONVERTIBLE


@pytest.mark.parametrize(
    "raw, expected",
    [
        (7, 7),
        (7.0, 7),
        (Decimal("12"), 12),
        (" -42 ", -42),
        ("+3", 3),
    ],
)
def test_coerce_integer(raw, expected):
    result = coerce(raw, Kind.INTEGER)
    assert result == expected
    assert type(result) is int


@pytest.mark.parametrize("raw", ["abc", "7.5", 7.5, True, "1_000", "", datetime(2020, 1, 1)])
def test_coerce_integer_rejects(raw):
    assert coerce(raw, Kind.INTEGER) is UNCONVERTIBLE


@pytest.mark.parametrize(
    "raw, expected",
    [
        (3, 3.0),
        ("3.25", 3.25),
        ("1,234.5", 1234.5),
        ("-1e3", -1000.0),
        (".5", 0.5),
        (Decimal("2.5"), 2.5),
    ],
)
def test_coerce_float(raw, expected):
    assert coerce(raw, Kind.FLOAT) == pytest.approx(expected)


@pytest.mark.parametrize("raw", ["1,2", "abc", "3,5", False, "nan"])
def test_coerce_float_rejects(raw):
    assert coerce(raw, Kind.FLOAT) is UNCONVERTIBLE


def test_coerce_decimal():
    assert coerce("1,000.10", Kind.DECIMAL) == Decimal("1000.10")
    assert coerce(0.1, Kind.DECIMAL) == Decimal("0.1")
    assert coerce(5, Kind.DECIMAL) == Decimal(5)
    assert coerce("1e3", Kind.DECIMAL) is UNCONVERTIBLE


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2001-05-01", datetime(2001, 5, 1)),
        ("2001-05-01T10:30:00", datetime(2001, 5, 1, 10, 30)),
        ("2001/05/01", datetime(2001, 5, 1)),
        ("2001/05/01 08:15", datetime(2001, 5, 1, 8, 15)),
        ("01.05.2001", datetime(2001, 5, 1)),
        ("05/01/2001", datetime(2001, 5, 1)),
        (date(2001, 5, 1), datetime(2001, 5, 1)),
    ],
)
def test_coerce_datetime(raw, expected):
    assert coerce(raw, Kind.DATETIME) == expected


def test_coerce_date_from_datetime_and_text():
    assert coerce(datetime(2001, 5, 1, 12, 0), Kind.DATE) == date(2001, 5, 1)
    assert coerce("2001-05-01", Kind.DATE) == date(2001, 5, 1)
    assert coerce("not a date", Kind.DATE) is UNCONVERTIBLE
    assert coerce(37000, Kind.DATE) is UNCONVERTIBLE


def test_stringify():
    assert stringify("abc") == "abc"
    assert stringify(7.0) == "7"
    assert stringify(7.5) == "7.5"
    assert stringify(True) == "True"
    assert stringify(date(2001, 5, 1)) == "2001-05-01"
    assert stringify(Decimal("1.10")) == "1.10"
