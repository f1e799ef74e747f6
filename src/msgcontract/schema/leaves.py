"""Leaf validators: the single integration point with an external validation library.

A leaf is anything that can report the shape it stands for and validate a
value against it. The core never looks further into a leaf than that, so any
structural-validation library can sit behind this protocol. pydantic is the
one shipped here.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Hashable, List, Optional, Protocol, Sequence, Tuple, Union, runtime_checkable

from pydantic import TypeAdapter, ValidationError
from pydantic.errors import PydanticInvalidForJsonSchema


@dataclass(frozen=True)
class LeafValid:
    value: Any


@dataclass(frozen=True)
class LeafInvalid:
    reason: str
    # location inside the leaf value, relative to the leaf itself
    loc: Tuple[Union[str, int], ...] = ()


LeafOutcome = Union[LeafValid, LeafInvalid]


@runtime_checkable
class LeafValidator(Protocol):
    """Capability interface every leaf must satisfy."""

    def infer_shape(self) -> Hashable:
        ...

    def validate(self, value: Any) -> LeafOutcome:
        ...


class PydanticLeaf:
    """Leaf backed by a pydantic TypeAdapter.

    Accepts anything TypeAdapter accepts: BaseModel subclasses, Literal[...],
    Union[...], List[int], constrained types, and so on. Validation is strict
    by default, so values of the wrong kind are rejected instead of coerced
    (True is not a number, b"a" is not a string).
    """

    def __init__(self, annotation: Any, adapter: Optional[TypeAdapter] = None, strict: Optional[bool] = True):
        self.annotation = annotation
        self.adapter = adapter if adapter is not None else TypeAdapter(annotation)
        self.strict = strict

    @classmethod
    def from_adapter(cls, adapter: TypeAdapter, annotation: Any = None, strict: Optional[bool] = True) -> "PydanticLeaf":
        return cls(annotation, adapter=adapter, strict=strict)

    def infer_shape(self) -> Hashable:
        # the canonical JSON schema makes two independently built leaves for
        # the same type compare equal
        try:
            schema = self.adapter.json_schema()
        except PydanticInvalidForJsonSchema:
            return ("python-type", repr(self.annotation))
        return json.dumps(schema, sort_keys=True)

    def validate(self, value: Any) -> LeafOutcome:
        try:
            return LeafValid(self.adapter.validate_python(value, strict=self.strict))
        except ValidationError as exc:
            errors = exc.errors()
            loc = field_loc(self.adapter.core_schema, errors[0].get("loc", ()))
            # a failed union reports one error per member; merge those sharing the location
            reasons: List[str] = []
            for err in errors:
                if field_loc(self.adapter.core_schema, err.get("loc", ())) == loc and err["msg"] not in reasons:
                    reasons.append(err["msg"])
            return LeafInvalid(reason="; ".join(reasons), loc=loc)

    def __repr__(self) -> str:
        return f"PydanticLeaf({self.annotation!r})"


_WRAPPERS = ("nullable", "default", "function-after", "function-before", "function-wrap", "model")


def field_loc(schema: Dict[str, Any], loc: Sequence[Union[str, int]]) -> Tuple[Union[str, int], ...]:
    """Drop the union member labels pydantic puts into an error location.

    Walks the core schema alongside ``loc`` so only field names and indices
    remain. Once the schema cannot be followed, the rest of ``loc`` is kept.
    """
    defs: Dict[str, Any] = {}
    out: List[Union[str, int]] = []
    items = list(loc)
    node: Optional[Dict[str, Any]] = schema
    while items:
        if node is None:
            out.extend(items)
            break
        kind = node.get("type")
        if kind == "definitions":
            defs.update({d["ref"]: d for d in node.get("definitions", ()) if "ref" in d})
            node = node.get("schema")
        elif kind == "definition-ref":
            node = defs.get(node.get("schema_ref"))
        elif kind == "json-or-python":
            node = node.get("python_schema")
        elif kind in _WRAPPERS:
            node = node.get("schema")
        elif kind == "union":
            # the next item names the member that was tried, not a field
            items.pop(0)
            node = None
        elif kind in ("model-fields", "typed-dict"):
            name = items.pop(0)
            out.append(name)
            field = node.get("fields", {}).get(name)
            node = field.get("schema") if field else None
        elif kind in ("list", "set", "frozenset"):
            out.append(items.pop(0))
            node = node.get("items_schema")
        elif kind == "dict":
            out.append(items.pop(0))
            node = node.get("values_schema")
        else:
            node = None
    return tuple(out)
