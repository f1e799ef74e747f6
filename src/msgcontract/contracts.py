"""Direction contracts: message name -> shape, one mapping per direction.

The to-host and to-peer contracts are separate classes with separate
mappings. A name declared in both directions appears in both, each time with
the shape of its own direction.
"""
from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar, Dict, Iterator, Mapping, Tuple, TypeVar

from msgcontract.errors import UnknownMessageError
from msgcontract.shapes import Shape, infer_shape
from msgcontract.utils.logger_util import get_logger, logging
from msgcontract.validator import ValidationOutcome, validate

if TYPE_CHECKING:
    from msgcontract.schema.registry import SchemaRegistry

logger = get_logger(__name__, logging.DEBUG)


class Direction(str, Enum):
    TO_HOST = "to_host"
    TO_PEER = "to_peer"


class DirectionContract(Mapping[str, Shape]):
    """Read-only mapping from message name to shape for one direction."""

    direction: ClassVar[Direction]

    def __init__(self, shapes: Mapping[str, Shape]):
        self._shapes: Mapping[str, Shape] = MappingProxyType(dict(shapes))

    def __getitem__(self, name: str) -> Shape:
        return self._shapes[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._shapes)

    def __len__(self) -> int:
        return len(self._shapes)

    def __eq__(self, other: object) -> bool:
        # a to-host contract never equals a to-peer one, even with equal entries
        if type(self) is not type(other):
            return NotImplemented
        return dict(self._shapes) == dict(other._shapes)

    __hash__ = None

    def shape_for(self, message_name: str) -> Shape:
        try:
            return self._shapes[message_name]
        except (KeyError, TypeError):
            raise UnknownMessageError(str(message_name), self.direction.value) from None

    def validate(self, message_name: str, payload: Any, extra: str = "ignore") -> ValidationOutcome:
        """Validate ``payload`` as the body of ``message_name`` in this direction.

        Raises UnknownMessageError if the name is not part of this contract.
        """
        return validate(self.shape_for(message_name), payload, extra=extra)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._shapes)!r})"


C = TypeVar("C", bound=DirectionContract)


class ToHostContract(DirectionContract):
    direction = Direction.TO_HOST


class ToPeerContract(DirectionContract):
    direction = Direction.TO_PEER


def project(registry: "SchemaRegistry") -> Tuple[ToHostContract, ToPeerContract]:
    """Derive both direction contracts from the registry in one pass."""
    to_host: Dict[str, Shape] = {}
    to_peer: Dict[str, Shape] = {}
    for decl in registry:
        if decl.to_host is not None:
            to_host[decl.name] = infer_shape(decl.to_host)
        if decl.to_peer is not None:
            to_peer[decl.name] = infer_shape(decl.to_peer)
    logger.debug("projected contracts: to_host=%s to_peer=%s", list(to_host), list(to_peer))
    return ToHostContract(to_host), ToPeerContract(to_peer)
