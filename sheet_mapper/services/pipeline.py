from __future__ import annotations

from collections.abc import Callable, Iterable
from functools import cmp_to_key
from typing import Any, TypeVar

"""Post-materialization pipeline: filter, sort, or both.

Always applied to a fully materialized sequence, so predicates and comparators
only ever see completely populated objects.  Inputs are never mutated.
"""

__all__ = [
    "Predicate",
    "Comparator",
    "filtered",
    "sorted_with",
    "filtered_and_sorted",
]

T = TypeVar("T")

Predicate = Callable[[Any], bool]
Comparator = Callable[[Any, Any], int]


def filtered(items: Iterable[T], predicate: Callable[[T], bool]) -> list[T]:
    """Keep items for which ``predicate`` holds (relative order preserved)."""
    return [item for item in items if predicate(item)]


def sorted_with(items: Iterable[T], comparator: Callable[[T, T], int]) -> list[T]:
    """Stable sort by a three-way comparator (negative / zero / positive)."""
    return sorted(items, key=cmp_to_key(comparator))


def filtered_and_sorted(
    items: Iterable[T],
    predicate: Callable[[T], bool],
    comparator: Callable[[T, T], int],
) -> list[T]:
    """Filter first, then sort."""
    return sorted_with(filtered(items, predicate), comparator)
