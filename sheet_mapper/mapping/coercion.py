from __future__ import annotations

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

"""Best-effort conversion of raw cell values into leaf types.

Conversion never raises: a value that cannot be converted yields the
``UNCONVERTIBLE`` sentinel and the caller leaves the target untouched.
String parsing is locale-stable (``.`` decimal point, optional ``,`` grouping).
"""

__all__ = [
    "Kind",
    "UNCONVERTIBLE",
    "coerce",
    "stringify",
]


class Kind(Enum):
    """Leaf (scalar) kinds supported by the coercer."""
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    DATETIME = "datetime"
    DATE = "date"


class _Unconvertible:
    _instance: _Unconvertible | None = None

    def __new__(cls) -> _Unconvertible:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNCONVERTIBLE"

    def __bool__(self) -> bool:
        return False


UNCONVERTIBLE = _Unconvertible()

_INT_RE = re.compile(r"^[+-]?\d+$")
_GROUPED = r"(?:\d{1,3}(?:,\d{3})+|\d+)"
_DECIMAL_RE = re.compile(rf"^[+-]?(?:{_GROUPED}(?:\.\d*)?|\.\d+)$")
_FLOAT_RE = re.compile(rf"^[+-]?(?:{_GROUPED}(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")
_BOOL_TEXT = {"true": True, "false": False}

# ISO-8601 は fromisoformat で先に処理する
_DATE_FORMATS = (
    "%Y/%m/%d",
    "%Y.%m.%d",
    "%d.%m.%Y",
    "%m/%d/%Y",
)
_TIME_SUFFIXES = ("", " %H:%M", " %H:%M:%S")


def _to_bool(raw: Any) -> Any:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        return _BOOL_TEXT.get(raw.strip().lower(), UNCONVERTIBLE)
    return UNCONVERTIBLE


def _to_int(raw: Any) -> Any:
    if isinstance(raw, bool):
        return UNCONVERTIBLE
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() else UNCONVERTIBLE
    if isinstance(raw, Decimal):
        if raw.is_finite() and raw == raw.to_integral_value():
            return int(raw)
        return UNCONVERTIBLE
    if isinstance(raw, str):
        text = raw.strip()
        return int(text) if _INT_RE.match(text) else UNCONVERTIBLE
    return UNCONVERTIBLE


def _to_float(raw: Any) -> Any:
    if isinstance(raw, bool):
        return UNCONVERTIBLE
    if isinstance(raw, (int, float, Decimal)):
        return float(raw)
    if isinstance(raw, str):
        text = raw.strip()
        if _FLOAT_RE.match(text):
            return float(text.replace(",", ""))
    return UNCONVERTIBLE


def _to_decimal(raw: Any) -> Any:
    if isinstance(raw, bool):
        return UNCONVERTIBLE
    if isinstance(raw, Decimal):
        return raw
    if isinstance(raw, int):
        return Decimal(raw)
    if isinstance(raw, float):
        # repr は最短表現 (0.1 -> "0.1")
        return Decimal(repr(raw))
    if isinstance(raw, str):
        text = raw.strip()
        if _DECIMAL_RE.match(text):
            try:
                return Decimal(text.replace(",", ""))
            except InvalidOperation:  # pragma: no cover (regex already guards)
                return UNCONVERTIBLE
    return UNCONVERTIBLE


def _parse_datetime_text(text: str) -> datetime | None:
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        for suffix in _TIME_SUFFIXES:
            try:
                return datetime.strptime(text, fmt + suffix)
            except ValueError:
                continue
    return None


def _to_datetime(raw: Any) -> Any:
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, date):
        return datetime(raw.year, raw.month, raw.day)
    if isinstance(raw, str):
        parsed = _parse_datetime_text(raw.strip())
        return parsed if parsed is not None else UNCONVERTIBLE
    return UNCONVERTIBLE


def _to_date(raw: Any) -> Any:
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    converted = _to_datetime(raw)
    if converted is UNCONVERTIBLE:
        return UNCONVERTIBLE
    return converted.date()


_CONVERTERS = {
    Kind.BOOLEAN: _to_bool,
    Kind.INTEGER: _to_int,
    Kind.FLOAT: _to_float,
    Kind.DECIMAL: _to_decimal,
    Kind.DATETIME: _to_datetime,
    Kind.DATE: _to_date,
}


def coerce(raw: Any, kind: Kind) -> Any:
    """Convert ``raw`` to ``kind`` or return ``UNCONVERTIBLE``.

    ``None`` is unconvertible for every kind; it never turns into a zero value.
    """
    if raw is None:
        return UNCONVERTIBLE
    return _CONVERTERS[kind](raw)


def stringify(raw: Any) -> str:
    """Text form used for free-form text / opaque targets."""
    if isinstance(raw, str):
        return raw
    if isinstance(raw, bool):
        return str(raw)
    if isinstance(raw, float) and raw.is_integer():
        return str(int(raw))
    if isinstance(raw, (datetime, date)):
        return raw.isoformat()
    return str(raw)
