"""Contract system exceptions."""
from __future__ import annotations

from typing import List, Sequence, Tuple, Union

PathItem = Union[str, int]


def format_path(path: Sequence[PathItem]) -> str:
    """Render a validation path as ``a.b[0].c`` (empty path -> ``<root>``)."""
    out = ""
    for item in path:
        if isinstance(item, int):
            out += f"[{item}]"
        elif out:
            out += f".{item}"
        else:
            out = str(item)
    return out or "<root>"


class MsgContractError(Exception):
    """Base class for every error raised by msgcontract."""


class SchemaDeclarationError(MsgContractError):
    """Raised when the declared message set is invalid.

    Carries every violation found, not just the first.
    """

    def __init__(self, violations: List[Tuple[str, str]]):
        self.violations = list(violations)
        lines = "; ".join(f"{name!r}: {reason}" for name, reason in self.violations)
        super().__init__(f"{len(self.violations)} invalid message declaration(s): {lines}")

    @property
    def names(self) -> List[str]:
        seen: List[str] = []
        for name, _ in self.violations:
            if name not in seen:
                seen.append(name)
        return seen


class UnknownMessageError(MsgContractError):
    """Raised when a message name is not part of the contract for a direction."""

    def __init__(self, message_name: str, direction: str):
        super().__init__(f"unknown message for direction {direction}: {message_name!r}")
        self.message_name = message_name
        self.direction = direction


class MessageValidationError(MsgContractError):
    """Raised when a payload does not match its declared shape."""

    def __init__(self, message_name: str, path: Sequence[PathItem], reason: str, direction: str = ""):
        self.message_name = message_name
        self.path = tuple(path)
        self.reason = reason
        self.direction = direction
        super().__init__(f"invalid {message_name!r} payload at {self.dotted_path}: {reason}")

    @property
    def dotted_path(self) -> str:
        return format_path(self.path)
