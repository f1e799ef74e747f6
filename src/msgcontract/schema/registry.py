"""Schema registry: the single, immutable declaration of every message."""
from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, TYPE_CHECKING

from msgcontract.errors import SchemaDeclarationError
from msgcontract.utils.logger_util import get_logger, logging

from .nodes import SchemaNode, SchemaNodeError, to_node

if TYPE_CHECKING:
    from msgcontract.contracts import ToHostContract, ToPeerContract

logger = get_logger(__name__, logging.DEBUG)

DIRECTION_KEYS = ("to_host", "to_peer")


@dataclass(frozen=True, eq=False)
class MessageDeclaration:
    """One message name plus the schema for each direction it travels in.

    Values may be SchemaNodes or plain literals; the registry coerces them.
    """

    name: str
    to_host: Optional[Any] = None
    to_peer: Optional[Any] = None

    def node(self, direction: str) -> Optional[SchemaNode]:
        if direction not in DIRECTION_KEYS:
            raise ValueError(f"unknown direction {direction!r}")
        return getattr(self, direction)


class SchemaRegistry:
    """Immutable set of message declarations.

    Construction validates every declaration and fails with all violations at
    once. There is no way to add or replace a declaration afterwards.
    """

    def __init__(self, declarations: Iterable[MessageDeclaration]):
        violations: List[Tuple[str, str]] = []
        seen: Dict[str, MessageDeclaration] = {}

        for decl in declarations:
            name = getattr(decl, "name", None)
            if not isinstance(decl, MessageDeclaration):
                violations.append((str(name), f"expected MessageDeclaration, got {type(decl).__name__}"))
                continue
            if not isinstance(name, str) or not name:
                violations.append((repr(name), "message name must be a non-empty string"))
                continue
            if name in seen:
                violations.append((name, "duplicate message name"))
                continue
            normalized, problems = self._normalize(decl)
            violations.extend((name, p) for p in problems)
            # keep the name reserved even if invalid so later duplicates are reported
            seen[name] = normalized

        if violations:
            logger.error("rejected message declarations: %s", violations)
            raise SchemaDeclarationError(violations)

        self._declarations: Mapping[str, MessageDeclaration] = MappingProxyType(seen)
        logger.debug("schema registry built with %d message(s): %s", len(seen), list(seen))

    @staticmethod
    def _normalize(decl: MessageDeclaration) -> Tuple[MessageDeclaration, List[str]]:
        problems: List[str] = []
        nodes: Dict[str, Optional[SchemaNode]] = {}
        for direction in DIRECTION_KEYS:
            raw = getattr(decl, direction)
            if raw is None:
                nodes[direction] = None
                continue
            try:
                nodes[direction] = to_node(raw)
            except SchemaNodeError as exc:
                problems.append(f"{direction}: {exc}")
                nodes[direction] = None
        if decl.to_host is None and decl.to_peer is None:
            problems.append("declaration supplies neither to_host nor to_peer")
        return MessageDeclaration(decl.name, **nodes), problems

    def __iter__(self) -> Iterator[MessageDeclaration]:
        return iter(self._declarations.values())

    def __len__(self) -> int:
        return len(self._declarations)

    def __contains__(self, name: object) -> bool:
        return name in self._declarations

    def __getitem__(self, name: str) -> MessageDeclaration:
        return self._declarations[name]

    def get(self, name: str) -> Optional[MessageDeclaration]:
        return self._declarations.get(name)

    def names(self) -> List[str]:
        return list(self._declarations)

    @cached_property
    def contracts(self) -> Tuple["ToHostContract", "ToPeerContract"]:
        """The (to_host, to_peer) contracts, projected once and reused."""
        from msgcontract.contracts import project

        return project(self)

    def __repr__(self) -> str:
        return f"SchemaRegistry({self.names()!r})"


def define_messages(schemas: Mapping[str, Mapping[str, Any]]) -> SchemaRegistry:
    """Build a registry from a literal ``{name: {"to_host": ..., "to_peer": ...}}`` mapping.

    Example:
        registry = define_messages({
            "join": {"to_host": {"id": str}, "to_peer": {"id": str, "name": str}},
            "leave": {"to_host": {"userId": str}},
        })
    """
    declarations: List[Any] = []
    violations: List[Tuple[str, str]] = []
    for name, entry in schemas.items():
        if not isinstance(entry, Mapping):
            violations.append((str(name), f"expected a mapping of directions, got {type(entry).__name__}"))
            continue
        unknown = sorted(set(entry) - set(DIRECTION_KEYS))
        if unknown:
            violations.append((str(name), f"unknown direction key(s): {unknown}"))
            continue
        declarations.append(MessageDeclaration(name, entry.get("to_host"), entry.get("to_peer")))

    try:
        registry = SchemaRegistry(declarations)
    except SchemaDeclarationError as exc:
        raise SchemaDeclarationError(violations + exc.violations) from None
    if violations:
        logger.error("rejected message declarations: %s", violations)
        raise SchemaDeclarationError(violations)
    return registry
