from __future__ import annotations

import dataclasses
import types
import typing
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from functools import lru_cache
from typing import Any, Union

from .coercion import Kind

"""Target shape registry.

Each target class is described once (cached) as a table of writable / readable
properties, each carrying a closed tagged description of its shape:

- ``Scalar(kind)``       bool / int / float / Decimal / datetime / date
- ``Text()``             str
- ``GrowableList(elem)`` list[X]
- ``FixedArray(elem)``   tuple[X, ...]
- ``Nested(cls)``        dataclass or annotated class
- ``Opaque()``           anything else (Any, object, unknown types)

The binder consumes these descriptions instead of inspecting types per cell.
"""

__all__ = [
    "Scalar",
    "Text",
    "GrowableList",
    "FixedArray",
    "Nested",
    "Opaque",
    "Shape",
    "PropertySpec",
    "TargetShape",
    "describe",
    "shape_of",
    "new_instance",
    "zero_value",
]


@dataclass(frozen=True)
class Scalar:
    kind: Kind


@dataclass(frozen=True)
class Text:
    pass


@dataclass(frozen=True)
class GrowableList:
    element: Shape


@dataclass(frozen=True)
class FixedArray:
    element: Shape


@dataclass(frozen=True)
class Nested:
    cls: type


@dataclass(frozen=True)
class Opaque:
    pass


Shape = Union[Scalar, Text, GrowableList, FixedArray, Nested, Opaque]

# bool は int のサブクラスなので先に判定する
_SCALAR_TYPES: tuple[tuple[type, Kind], ...] = (
    (bool, Kind.BOOLEAN),
    (int, Kind.INTEGER),
    (float, Kind.FLOAT),
    (Decimal, Kind.DECIMAL),
    (datetime, Kind.DATETIME),
    (date, Kind.DATE),
)

_SCALAR_ZERO = {
    Kind.BOOLEAN: False,
    Kind.INTEGER: 0,
    Kind.FLOAT: 0.0,
    Kind.DECIMAL: Decimal(0),
    Kind.DATETIME: datetime.min,
    Kind.DATE: date.min,
}


@dataclass(frozen=True)
class PropertySpec:
    """One property of a target class."""
    name: str  # 実際の属性名
    shape: Shape
    writable: bool


@dataclass(frozen=True)
class TargetShape:
    """Property table of a target class, keyed by case-folded name."""
    cls: type
    properties: dict[str, PropertySpec]

    def lookup(self, segment: str) -> PropertySpec | None:
        return self.properties.get(segment.casefold())


def _is_structured(tp: Any) -> bool:
    if not isinstance(tp, type):
        return False
    if dataclasses.is_dataclass(tp):
        return True
    return bool(getattr(tp, "__annotations__", None)) and tp.__module__ != "builtins"


def shape_of(tp: Any) -> Shape:
    """Classify a type annotation into a tagged shape."""
    origin = typing.get_origin(tp)
    if origin is Union or origin is types.UnionType:
        args = [a for a in typing.get_args(tp) if a is not type(None)]
        if len(args) == 1:
            return shape_of(args[0])
        return Opaque()
    if origin is list:
        args = typing.get_args(tp)
        return GrowableList(shape_of(args[0]) if args else Opaque())
    if origin is tuple:
        args = typing.get_args(tp)
        return FixedArray(shape_of(args[0]) if args else Opaque())
    if tp is list:
        return GrowableList(Opaque())
    if tp is tuple:
        return FixedArray(Opaque())
    if tp is str:
        return Text()
    if isinstance(tp, type):
        for scalar_type, kind in _SCALAR_TYPES:
            if tp is scalar_type:
                return Scalar(kind)
    if _is_structured(tp):
        return Nested(tp)
    return Opaque()


def _class_hints(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError):
        # 前方参照が解決できない場合は生の __annotations__ を使う
        hints: dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            hints.update(getattr(klass, "__annotations__", {}))
        return hints


def _property_hint(prop: property) -> Any:
    if prop.fget is None:
        return Any
    try:
        return typing.get_type_hints(prop.fget).get("return", Any)
    except (NameError, TypeError):
        return Any


@lru_cache(maxsize=None)
def describe(cls: type) -> TargetShape:
    """Build (once) the property table for ``cls``.

    Declaration order decides which property wins when two names differ only
    by case.
    """
    frozen = dataclasses.is_dataclass(cls) and cls.__dataclass_params__.frozen  # type: ignore[attr-defined]
    properties: dict[str, PropertySpec] = {}

    for name, hint in _class_hints(cls).items():
        if name.startswith("_") or typing.get_origin(hint) is typing.ClassVar:
            continue
        properties.setdefault(
            name.casefold(), PropertySpec(name=name, shape=shape_of(hint), writable=not frozen)
        )

    for klass in cls.__mro__:
        for name, attr in vars(klass).items():
            if not isinstance(attr, property) or name.startswith("_"):
                continue
            properties.setdefault(
                name.casefold(),
                PropertySpec(name=name, shape=shape_of(_property_hint(attr)), writable=attr.fset is not None),
            )

    return TargetShape(cls=cls, properties=properties)


def new_instance(cls: type) -> Any:
    """Create a default instance of ``cls``.

    Dataclass fields without a default are filled with ``None`` so that target
    classes do not need to declare defaults for every field.
    """
    if dataclasses.is_dataclass(cls):
        kwargs = {
            f.name: None
            for f in dataclasses.fields(cls)
            if f.init
            and f.default is dataclasses.MISSING
            and f.default_factory is dataclasses.MISSING  # type: ignore[misc]
        }
        return cls(**kwargs)
    return cls()


def zero_value(shape: Shape) -> Any:
    """Default value attached for an absent intermediate node."""
    if isinstance(shape, Text):
        return ""
    if isinstance(shape, Scalar):
        return _SCALAR_ZERO[shape.kind]
    if isinstance(shape, GrowableList):
        return []
    if isinstance(shape, FixedArray):
        return ()
    if isinstance(shape, Nested):
        return new_instance(shape.cls)
    return None
