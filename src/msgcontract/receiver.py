"""Inbound side: validate frames arriving on a channel against one direction."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Mapping

from msgcontract.contracts import C
from msgcontract.errors import MessageValidationError
from msgcontract.utils.logger_util import get_logger, logging
from msgcontract.validator import Invalid

logger = get_logger(__name__, logging.DEBUG)


@dataclass(frozen=True)
class ReceivedMessage:
    name: str
    value: Any
    direction: str


class TypedReceiver(Generic[C]):
    """Checks ``{"type": name, "payload": body}`` frames against a contract.

    A host receives with its to-host contract, a peer with its to-peer one.
    """

    def __init__(self, contract: C, extra: str = "ignore"):
        self.contract = contract
        self.extra = extra

    @property
    def direction(self) -> str:
        return self.contract.direction.value

    def receive(self, frame: Any) -> ReceivedMessage:
        if not isinstance(frame, Mapping):
            raise MessageValidationError("", (), "frame must be an object", self.direction)
        name = frame.get("type")
        if not isinstance(name, str):
            raise MessageValidationError("", ("type",), "frame type must be a string", self.direction)
        if "payload" not in frame:
            raise MessageValidationError(name, ("payload",), "missing required field", self.direction)

        outcome = self.contract.validate(name, frame["payload"], extra=self.extra)
        if isinstance(outcome, Invalid):
            logger.warning(
                "%s frame rejected: message=%s path=%s reason=%s",
                self.direction, name, outcome.dotted_path, outcome.reason,
            )
            raise MessageValidationError(name, outcome.path, outcome.reason, self.direction)
        return ReceivedMessage(name, outcome.value, self.direction)
