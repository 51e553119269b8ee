from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Union

"""Binding models: property path <-> column name (+ optional static value).

Two declaration forms are accepted by the reader:

- flat map form ``{"name": "Name", "birth_date": "DOB"}`` (property -> column)
- ordered form, a sequence of :class:`Binding` (or a :class:`BindingSet`)
"""

__all__ = [
    "Binding",
    "BindingSet",
    "BindingsLike",
]


@dataclass(frozen=True)
class Binding:
    """Link from a target property path to a source column.

    ``static_value`` is applied to every row when no header column matches
    ``column_name``. ``None`` means "no static value".
    """
    property_path: tuple[str, ...]
    column_name: str
    static_value: Any = None

    @staticmethod
    def of(property_name: str, column_name: str, static_value: Any = None) -> Binding:
        """Build a binding from a dotted property name (``"Orders.Item.Name"``)."""
        return Binding(
            property_path=tuple(property_name.split(".")),
            column_name=column_name,
            static_value=static_value,
        )

    @property
    def dotted_path(self) -> str:
        return ".".join(self.property_path)

    @property
    def has_static_value(self) -> bool:
        return self.static_value is not None


class BindingSet:
    """Ordered, read-only sequence of bindings.

    Built once by the caller; declaration order decides ties when several
    bindings name the same column.
    """

    def __init__(self, bindings: Iterable[Binding] = ()) -> None:
        self._bindings: tuple[Binding, ...] = tuple(bindings)

    @staticmethod
    def create() -> _BindingSetBuilder:
        """Start a fluent builder: ``BindingSet.create().add("Id", "ID").build()``."""
        return _BindingSetBuilder()

    @staticmethod
    def from_mapping(mapping: Mapping[str, str]) -> BindingSet:
        """Flat map form: property name -> column name, no static values."""
        return BindingSet(Binding.of(prop, column) for prop, column in mapping.items())

    @staticmethod
    def coerce(bindings: BindingsLike) -> BindingSet:
        """Accept any supported declaration form."""
        if isinstance(bindings, BindingSet):
            return bindings
        if isinstance(bindings, Mapping):
            return BindingSet.from_mapping(bindings)
        return BindingSet(bindings)

    def __iter__(self) -> Iterator[Binding]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def __getitem__(self, index: int) -> Binding:
        return self._bindings[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BindingSet):
            return NotImplemented
        return self._bindings == other._bindings

    def __hash__(self) -> int:
        return hash(self._bindings)

    def __repr__(self) -> str:
        return f"BindingSet({list(self._bindings)!r})"


class _BindingSetBuilder:
    def __init__(self) -> None:
        self._bindings: list[Binding] = []

    def add(self, property_name: str, column_name: str, static_value: Any = None) -> _BindingSetBuilder:
        self._bindings.append(Binding.of(property_name, column_name, static_value))
        return self

    def build(self) -> BindingSet:
        return BindingSet(self._bindings)


BindingsLike = Union[BindingSet, Mapping[str, str], Iterable[Binding]]
