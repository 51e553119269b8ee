from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, ClassVar, Optional

from sheet_mapper.mapping.coercion import Kind
from sheet_mapper.mapping.shapes import (
    FixedArray,
    GrowableList,
    Nested,
    Opaque,
    Scalar,
    Text,
    describe,
    new_instance,
    shape_of,
    zero_value,
)


@dataclass
class Address:
    city: str | None = None


@dataclass
class Person:
    id: int | None = None
    name: str | None = None
    active: bool | None = None
    score: float | None = None
    balance: Optional[Decimal] = None
    born: date | None = None
    seen: datetime | None = None
    tags: list[str] = field(default_factory=list)
    codes: tuple[int, ...] = ()
    address: Address | None = None
    extra: Any = None
    kind: ClassVar[str] = "person"

    @property
    def display(self) -> str:
        return f"{self.name} ({self.id})"


@dataclass(frozen=True)
class Frozen:
    value: int = 0


class Plain:
    label: str

    def __init__(self) -> None:
        self.label = ""
        self._nick = ""

    @property
    def nick(self) -> str:
        return self._nick

    @nick.setter
    def nick(self, value: str) -> None:
        self._nick = value


def test_shape_of_classifies_annotations():
    assert shape_of(int) == Scalar(Kind.INTEGER)
    assert shape_of(bool) == Scalar(Kind.BOOLEAN)
    assert shape_of(Optional[float]) == Scalar(Kind.FLOAT)
    assert shape_of(date | None) == Scalar(Kind.DATE)
    assert shape_of(str) == Text()
    assert shape_of(list[str]) == GrowableList(Text())
    assert shape_of(tuple[int, ...]) == FixedArray(Scalar(Kind.INTEGER))
    assert shape_of(Address) == Nested(Address)
    assert shape_of(Any) == Opaque()
    assert shape_of(int | str) == Opaque()


def test_describe_builds_case_insensitive_table():
    shape = describe(Person)
    assert shape.lookup("ID").name == "id"
    assert shape.lookup("Tags").shape == GrowableList(Text())
    assert shape.lookup("address").shape == Nested(Address)
    assert shape.lookup("missing") is None
    # ClassVar は対象外
    assert shape.lookup("kind") is None


def test_describe_marks_read_only_properties():
    person = describe(Person)
    assert person.lookup("display").writable is False
    assert person.lookup("display").shape == Text()

    plain = describe(Plain)
    assert plain.lookup("nick").writable is True
    assert plain.lookup("label").writable is True


def test_describe_frozen_dataclass_fields_are_read_only():
    assert describe(Frozen).lookup("value").writable is False


def test_describe_is_cached():
    assert describe(Person) is describe(Person)


def test_new_instance_fills_missing_defaults_with_none():
    @dataclass
    class NoDefaults:
        a: int
        b: str

    obj = new_instance(NoDefaults)
    assert obj.a is None and obj.b is None


def test_zero_values():
    assert zero_value(Text()) == ""
    assert zero_value(Scalar(Kind.INTEGER)) == 0
    assert zero_value(GrowableList(Text())) == []
    assert zero_value(FixedArray(Text())) == ()
    assert isinstance(zero_value(Nested(Address)), Address)
    assert zero_value(Opaque()) is None
