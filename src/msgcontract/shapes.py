"""Shape inference: the canonical value-shape a schema node stands for.

Shapes are plain frozen values and compare structurally, so two schema trees
built independently with the same fields denote the same shape.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Tuple, Union

from msgcontract.schema.leaves import LeafValidator
from msgcontract.schema.nodes import Branch, Leaf, NoneType, Passthrough, SchemaNode, to_node

KIND_NAMES = {
    str: "string",
    int: "integer",
    float: "number",
    bool: "boolean",
    NoneType: "null",
}


@dataclass(frozen=True)
class ScalarShape:
    kind: type

    @property
    def kind_name(self) -> str:
        return KIND_NAMES.get(self.kind, self.kind.__name__)


@dataclass(frozen=True)
class FieldShape:
    name: str
    shape: "Shape"
    required: bool = True


@dataclass(frozen=True, eq=False)
class StructShape:
    # declared order is kept for error reporting; equality ignores it
    fields: Tuple[FieldShape, ...] = ()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StructShape):
            return NotImplemented
        return frozenset(self.fields) == frozenset(other.fields)

    def __hash__(self) -> int:
        return hash(frozenset(self.fields))

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields)


@dataclass(frozen=True)
class SequenceShape:
    item: "Shape"


@dataclass(frozen=True)
class LeafShape:
    descriptor: Hashable
    validator: LeafValidator = field(compare=False, repr=False)


Shape = Union[ScalarShape, StructShape, SequenceShape, LeafShape]


def infer_shape(node: SchemaNode) -> Shape:
    """Recursively compute the shape of a schema node."""
    if isinstance(node, Leaf):
        return LeafShape(node.validator.infer_shape(), node.validator)
    if isinstance(node, Branch):
        return StructShape(tuple(
            FieldShape(name, infer_shape(child), node.is_required(name))
            for name, child in node.fields.items()
        ))
    if isinstance(node, Passthrough):
        return _infer_literal(node.literal)
    # nodes are checked when declared, so this only trips on direct misuse
    raise TypeError(f"not a schema node: {node!r}")


def _infer_literal(value: Any) -> Shape:
    if isinstance(value, (Leaf, Branch, Passthrough)):
        return infer_shape(value)
    if isinstance(value, dict):
        return StructShape(tuple(
            FieldShape(name, _infer_literal(child)) for name, child in value.items()
        ))
    if isinstance(value, (list, tuple)):
        return SequenceShape(_infer_literal(value[0]))
    if isinstance(value, type) and value in KIND_NAMES:
        return ScalarShape(value)
    if isinstance(value, tuple(KIND_NAMES)):
        return ScalarShape(type(value))
    # pydantic models, typing constructs and custom leaves
    return infer_shape(to_node(value))


def describe(shape: Shape) -> Any:
    """JSON-friendly rendering of a shape, for clients inspecting a contract."""
    if isinstance(shape, ScalarShape):
        return shape.kind_name
    if isinstance(shape, StructShape):
        out: Dict[str, Any] = {}
        for f in shape.fields:
            out[f.name if f.required else f"{f.name}?"] = describe(f.shape)
        return out
    if isinstance(shape, SequenceShape):
        return [describe(shape.item)]
    if isinstance(shape, LeafShape):
        annotation = getattr(shape.validator, "annotation", None)
        if isinstance(annotation, type):
            return {"leaf": annotation.__name__}
        if annotation is not None:
            return {"leaf": repr(annotation)}
        return {"leaf": repr(shape.validator)}
    raise TypeError(f"not a shape: {shape!r}")
