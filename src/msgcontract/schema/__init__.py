"""Message declarations: schema nodes, leaf validators and the registry."""

from .leaves import LeafInvalid, LeafOutcome, LeafValid, LeafValidator, PydanticLeaf
from .nodes import Branch, Leaf, Passthrough, SchemaNode, SchemaNodeError, to_node
from .registry import MessageDeclaration, SchemaRegistry, define_messages

__all__ = [
    "Branch",
    "Leaf",
    "LeafInvalid",
    "LeafOutcome",
    "LeafValid",
    "LeafValidator",
    "MessageDeclaration",
    "Passthrough",
    "PydanticLeaf",
    "SchemaNode",
    "SchemaNodeError",
    "SchemaRegistry",
    "define_messages",
    "to_node",
]
