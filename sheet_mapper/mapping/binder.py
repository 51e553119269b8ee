from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from ..models.outcome import FieldOutcome, SkipReason
from .coercion import UNCONVERTIBLE, coerce, stringify
from .shapes import (
    FixedArray,
    GrowableList,
    Nested,
    Opaque,
    PropertySpec,
    Scalar,
    Shape,
    TargetShape,
    Text,
    describe,
    zero_value,
)

"""Property path binder.

Walks a dotted property path (``Orders.Item.Name``) against a target object,
creating intermediate nodes on demand, and assigns the leaf:

- scalar leaves are coerced (unconvertible -> left untouched)
- ``list[X]`` leaves grow by one element per bind
- ``tuple[X, ...]`` leaves are re-allocated one slot longer per bind
- text / opaque leaves receive the stringified value

Intermediate ``list`` nodes are only addressable through their first element:
``Orders.Item.Name`` always writes ``Orders[0].Item.Name``.  This single-slot
behaviour is kept for compatibility with existing binding sets.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "BindingError",
    "BoundPath",
    "compile_path",
    "bind",
    "bind_path",
    "read_path",
]


class BindingError(ValueError):
    """Raised for malformed bindings (empty path / segment, bad required path)."""


@dataclass(frozen=True)
class BoundPath:
    """A property path resolved once against a target class.

    ``steps`` holds the resolved prefix of the path; when ``failure`` is set the
    segment right after the last step could not be resolved (or is read-only).
    """
    path: tuple[str, ...]
    steps: tuple[PropertySpec, ...]
    failure: str | None = None

    @property
    def dotted(self) -> str:
        return ".".join(self.path)

    @property
    def resolved(self) -> bool:
        return self.failure is None


def _child_shape(shape: Shape) -> TargetShape | None:
    if isinstance(shape, Nested):
        return describe(shape.cls)
    if isinstance(shape, GrowableList) and isinstance(shape.element, Nested):
        return describe(shape.element.cls)
    return None


def compile_path(cls: type, path: Sequence[str], *, for_read: bool = False) -> BoundPath:
    """Resolve ``path`` against ``cls`` (case-insensitive exact match).

    Args:
        cls: Target class
        path: Path segments
        for_read: When True read-only properties are accepted (required checks)

    Raises:
        BindingError: empty path or empty segment
    """
    segments = tuple(path)
    if not segments or any(not s.strip() for s in segments):
        raise BindingError(f"invalid property path: {'.'.join(segments)!r}")

    shape: TargetShape | None = describe(cls)
    steps: list[PropertySpec] = []
    failure: str | None = None
    for index, segment in enumerate(segments):
        if shape is None:
            failure = f"'{segment}' is below a node without properties"
            break
        spec = shape.lookup(segment)
        if spec is None:
            failure = f"{shape.cls.__name__} has no property '{segment}'"
            break
        if not spec.writable and not for_read:
            failure = f"{shape.cls.__name__}.{spec.name} is read-only"
            break
        steps.append(spec)
        if index < len(segments) - 1:
            shape = _child_shape(spec.shape)
    return BoundPath(path=segments, steps=tuple(steps), failure=failure)


def _convert(shape: Shape, value: Any, *, element: bool = False) -> Any:
    if isinstance(shape, Scalar):
        return coerce(value, shape.kind)
    if isinstance(shape, Text):
        return stringify(value)
    if isinstance(shape, Opaque):
        # コレクション要素はそのまま、単体リーフは文字列化
        return value if element else stringify(value)
    return UNCONVERTIBLE


def _fresh(shape: Shape) -> Any:
    try:
        return zero_value(shape)
    except TypeError as e:
        # 引数なしで生成できないクラス
        logger.debug(f"cannot create {shape}: {e}")
        return None


def _is_class_default(node: Any, name: str, value: Any) -> bool:
    """True when ``value`` is the class level default shared by all instances."""
    return getattr(type(node), name, None) is value


def _descend(node: Any, spec: PropertySpec) -> Any:
    """Return the child node of ``spec`` owned by ``node``, creating it if needed."""
    current = getattr(node, spec.name, None)
    if current is None or _is_class_default(node, spec.name, current):
        current = _fresh(spec.shape)
        if current is None:
            return None
        setattr(node, spec.name, current)
    if isinstance(spec.shape, GrowableList):
        if not current:
            element = _fresh(spec.shape.element)
            if element is None:
                return None
            current = [element]
            setattr(node, spec.name, current)
        return current[0]
    return current


def _assign_leaf(node: Any, spec: PropertySpec, value: Any) -> str | None:
    """Assign ``value``; return a skip detail when nothing was written."""
    if value is None:
        return "null value"
    shape = spec.shape
    if isinstance(shape, GrowableList):
        item = _convert(shape.element, value, element=True)
        if item is UNCONVERTIBLE:
            return f"cannot convert {value!r} for list element"
        current = getattr(node, spec.name, None) or []
        # 新しい list を割り当てる (クラス属性の共有を避ける)
        setattr(node, spec.name, [*current, item])
        return None
    if isinstance(shape, FixedArray):
        item = _convert(shape.element, value, element=True)
        if item is UNCONVERTIBLE:
            return f"cannot convert {value!r} for array element"
        current = getattr(node, spec.name, None) or ()
        setattr(node, spec.name, (*current, item))
        return None
    converted = _convert(shape, value)
    if converted is UNCONVERTIBLE:
        return f"cannot convert {value!r} to {type(shape).__name__.lower()}"
    setattr(node, spec.name, converted)
    return None


def bind(target: Any, bound: BoundPath, value: Any, column: str | None = None) -> FieldOutcome:
    """Apply ``value`` to ``target`` along a compiled path (in place)."""
    node = target
    last = len(bound.path) - 1
    for index, spec in enumerate(bound.steps):
        if index == last:
            detail = _assign_leaf(node, spec, value)
            if detail is not None:
                logger.debug(f"skip {bound.dotted}: {detail}")
                return FieldOutcome.skipped(bound.dotted, column, SkipReason.UNCONVERTIBLE_VALUE, detail)
            return FieldOutcome.applied(bound.dotted, column)
        node = _descend(node, spec)
        if node is None:
            break

    detail = bound.failure or f"cannot create intermediate node of '{bound.dotted}'"
    logger.debug(f"skip {bound.dotted}: {detail}")
    return FieldOutcome.skipped(bound.dotted, column, SkipReason.UNRESOLVABLE_BINDING, detail)


def bind_path(target: Any, path: str | Sequence[str], value: Any) -> FieldOutcome:
    """Convenience wrapper: compile ``path`` for ``type(target)`` and bind."""
    segments = path.split(".") if isinstance(path, str) else path
    return bind(target, compile_path(type(target), segments), value)


def read_path(target: Any, bound: BoundPath) -> Any:
    """Read the leaf value of ``bound`` without creating anything.

    List intermediates are read through their first element, mirroring ``bind``.
    """
    node = target
    last = len(bound.path) - 1
    for index, spec in enumerate(bound.steps):
        node = getattr(node, spec.name, None)
        if index == last or node is None:
            return node
        if isinstance(spec.shape, GrowableList):
            node = node[0] if node else None
    return None
