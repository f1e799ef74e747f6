"""Typed senders: one per direction, validating every payload before handoff."""
from __future__ import annotations

from typing import Any, Generic, List, Protocol, Tuple

from msgcontract.contracts import C, DirectionContract, ToHostContract, ToPeerContract
from msgcontract.errors import MessageValidationError
from msgcontract.schema.registry import SchemaRegistry
from msgcontract.utils.logger_util import get_logger, logging
from msgcontract.validator import Invalid, ValidationOutcome

logger = get_logger(__name__, logging.DEBUG)


class Transport(Protocol):
    """Sink that receives messages once they pass validation."""

    def accept(self, message_name: str, value: Any) -> None:
        ...


class MemoryTransport:
    """Records accepted messages in order. Used in tests and local dev."""

    def __init__(self):
        self.sent: List[Tuple[str, Any]] = []

    def accept(self, message_name: str, value: Any) -> None:
        self.sent.append((message_name, value))


class TypedSender(Generic[C]):
    """Sender bound to exactly one direction contract.

    ``send`` validates the payload against the bound contract and hands the
    validated value to the transport only when it passes.
    """

    def __init__(self, contract: C, transport: Transport, extra: str = "ignore"):
        if not isinstance(contract, DirectionContract):
            raise TypeError(f"TypedSender needs a DirectionContract, got {type(contract).__name__}")
        self.contract = contract
        self.transport = transport
        self.extra = extra

    @property
    def direction(self) -> str:
        return self.contract.direction.value

    def check(self, message_name: str, payload: Any) -> ValidationOutcome:
        """Validate without sending. Raises UnknownMessageError for unknown names."""
        return self.contract.validate(message_name, payload, extra=self.extra)

    def send(self, message_name: str, payload: Any) -> Any:
        outcome = self.check(message_name, payload)
        if isinstance(outcome, Invalid):
            logger.warning(
                "%s send rejected: message=%s path=%s reason=%s",
                self.direction, message_name, outcome.dotted_path, outcome.reason,
            )
            raise MessageValidationError(message_name, outcome.path, outcome.reason, self.direction)
        self.transport.accept(message_name, outcome.value)
        logger.debug("%s sent %s", self.direction, message_name)
        return outcome.value

    def __repr__(self) -> str:
        return f"TypedSender({self.contract!r})"


def to_host(registry: SchemaRegistry, transport: Transport, extra: str = "ignore") -> TypedSender[ToHostContract]:
    """Sender for messages travelling from the peer to the host."""
    host_contract, _ = registry.contracts
    return TypedSender(host_contract, transport, extra=extra)


def to_peer(registry: SchemaRegistry, transport: Transport, extra: str = "ignore") -> TypedSender[ToPeerContract]:
    """Sender for messages travelling from the host to the peer."""
    _, peer_contract = registry.contracts
    return TypedSender(peer_contract, transport, extra=extra)
