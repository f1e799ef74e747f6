"""Message contracts for a two-way host/peer channel.

Declare every message once, per direction, and get a runtime validator plus a
sender per direction that refuses payloads the contract does not allow.
"""

from .contracts import Direction, DirectionContract, ToHostContract, ToPeerContract, project
from .errors import MessageValidationError, MsgContractError, SchemaDeclarationError, UnknownMessageError
from .receiver import ReceivedMessage, TypedReceiver
from .schema import Branch, Leaf, MessageDeclaration, Passthrough, PydanticLeaf, SchemaRegistry, define_messages
from .sender import MemoryTransport, Transport, TypedSender, to_host, to_peer
from .shapes import describe, infer_shape
from .validator import Invalid, Valid, ValidationOutcome, validate

__all__ = [
    "Branch",
    "Direction",
    "DirectionContract",
    "Invalid",
    "Leaf",
    "MemoryTransport",
    "MessageDeclaration",
    "MessageValidationError",
    "MsgContractError",
    "Passthrough",
    "PydanticLeaf",
    "ReceivedMessage",
    "SchemaDeclarationError",
    "SchemaRegistry",
    "ToHostContract",
    "ToPeerContract",
    "Transport",
    "TypedReceiver",
    "TypedSender",
    "UnknownMessageError",
    "Valid",
    "ValidationOutcome",
    "define_messages",
    "describe",
    "infer_shape",
    "project",
    "to_host",
    "to_peer",
    "validate",
]
