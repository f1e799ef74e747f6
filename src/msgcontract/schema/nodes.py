"""Schema nodes: Leaf, Branch and Passthrough.

Nodes are built once when messages are declared and never change afterwards.
Plain Python literals are turned into nodes by ``to_node``:

    {"userId": str}                      -> Passthrough (structural literal)
    [int]                                -> Passthrough (sequence of int)
    str, int, float, bool, type(None)    -> Passthrough (scalar kind)
    "abc", 1, 2.5, True, None            -> Passthrough (kind of the value)
    BaseModel subclass, Literal[...],
    Union[...], TypeAdapter              -> Leaf (validated by pydantic)
    any LeafValidator                    -> Leaf
"""
from __future__ import annotations

import typing
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Union

from pydantic import BaseModel, TypeAdapter

from .leaves import LeafValidator, PydanticLeaf

NoneType = type(None)
PRIMITIVE_TYPES = (str, int, float, bool, NoneType)


class SchemaNodeError(TypeError):
    """A value that cannot be used as a schema node."""


@dataclass(frozen=True, eq=False)
class Leaf:
    validator: LeafValidator

    def __post_init__(self):
        if not isinstance(self.validator, LeafValidator):
            raise SchemaNodeError(
                f"Leaf needs an object with infer_shape() and validate(), got {type(self.validator).__name__}"
            )


@dataclass(frozen=True, eq=False)
class Branch:
    """Ordered, keyed aggregate of child nodes.

    Field names listed in ``optional`` may be absent from a value.
    """

    fields: Mapping[str, "SchemaNode"]
    optional: frozenset = frozenset()

    def __init__(self, fields: Mapping[str, Any] = None, optional: Iterable[str] = ()):
        children = {}
        for name, child in (fields or {}).items():
            if not isinstance(name, str) or not name:
                raise SchemaNodeError(f"Branch field names must be non-empty strings, got {name!r}")
            try:
                children[name] = to_node(child)
            except SchemaNodeError as exc:
                raise SchemaNodeError(f"field {name!r}: {exc}") from exc
        optional = frozenset(optional)
        unknown = sorted(optional - set(children))
        if unknown:
            raise SchemaNodeError(f"optional names not declared as fields: {unknown}")
        object.__setattr__(self, "fields", MappingProxyType(children))
        object.__setattr__(self, "optional", optional)

    def is_required(self, name: str) -> bool:
        return name not in self.optional


@dataclass(frozen=True, eq=False)
class Passthrough:
    """A literal whose own structure is the shape."""

    literal: Any

    def __post_init__(self):
        _check_literal(self.literal)


SchemaNode = Union[Leaf, Branch, Passthrough]


def _is_typing_construct(value: Any) -> bool:
    return typing.get_origin(value) is not None


def _is_leaf_source(value: Any) -> bool:
    if isinstance(value, TypeAdapter):
        return True
    if isinstance(value, type) and issubclass(value, BaseModel):
        return True
    return _is_typing_construct(value)


def _check_literal(value: Any) -> None:
    if isinstance(value, (Leaf, Branch, Passthrough)) or _is_leaf_source(value):
        return
    if isinstance(value, LeafValidator) and not isinstance(value, type):
        return
    if value in PRIMITIVE_TYPES or isinstance(value, PRIMITIVE_TYPES):
        return
    if isinstance(value, dict):
        for key, child in value.items():
            if not isinstance(key, str) or not key:
                raise SchemaNodeError(f"field names must be non-empty strings, got {key!r}")
            try:
                _check_literal(child)
            except SchemaNodeError as exc:
                raise SchemaNodeError(f"field {key!r}: {exc}") from exc
        return
    if isinstance(value, (list, tuple)):
        if len(value) != 1:
            raise SchemaNodeError("sequence literals must hold exactly one item schema, e.g. [str]")
        _check_literal(value[0])
        return
    raise SchemaNodeError(f"cannot use {type(value).__name__} value {value!r} as a schema node")


def to_node(value: Any) -> SchemaNode:
    """Coerce a declared value into a SchemaNode."""
    if isinstance(value, (Leaf, Branch, Passthrough)):
        return value
    if isinstance(value, TypeAdapter):
        return Leaf(PydanticLeaf.from_adapter(value))
    if _is_leaf_source(value):
        return Leaf(PydanticLeaf(value))
    if isinstance(value, LeafValidator) and not isinstance(value, type):
        return Leaf(value)
    return Passthrough(value)
