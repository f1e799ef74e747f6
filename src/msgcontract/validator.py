"""Runtime validation of a value against an inferred shape."""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple, Union

from msgcontract.config import EXTRA_FIELD_POLICIES
from msgcontract.errors import PathItem, format_path
from msgcontract.schema.leaves import LeafInvalid
from msgcontract.shapes import (
    KIND_NAMES,
    LeafShape,
    ScalarShape,
    SequenceShape,
    Shape,
    StructShape,
)

Path = Tuple[PathItem, ...]


@dataclass(frozen=True)
class Valid:
    value: Any

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Invalid:
    path: Path
    reason: str

    @property
    def ok(self) -> bool:
        return False

    @property
    def dotted_path(self) -> str:
        return format_path(self.path)


ValidationOutcome = Union[Valid, Invalid]


def _type_name(value: Any) -> str:
    return KIND_NAMES.get(type(value), type(value).__name__)


def _kind_matches(kind: type, value: Any) -> bool:
    # bool is an int subclass in Python but a distinct kind on the wire
    if kind is bool:
        return isinstance(value, bool)
    if kind is int:
        return isinstance(value, int) and not isinstance(value, bool)
    if kind is float:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    return isinstance(value, kind)


def validate(shape: Shape, value: Any, path: Path = (), extra: str = "ignore") -> ValidationOutcome:
    """Check ``value`` against ``shape``.

    Returns Valid with a freshly built value, or Invalid pointing at the first
    offending location. ``extra`` sets the policy for keys a structural shape
    does not declare: ``ignore`` carries them through, ``forbid`` rejects them.
    """
    if extra not in EXTRA_FIELD_POLICIES:
        raise ValueError(f"extra must be one of {EXTRA_FIELD_POLICIES}, got {extra!r}")
    return _validate(shape, value, tuple(path), extra)


def _validate(shape: Shape, value: Any, path: Path, extra: str) -> ValidationOutcome:
    if isinstance(shape, ScalarShape):
        if _kind_matches(shape.kind, value):
            return Valid(value)
        return Invalid(path, f"kind mismatch: expected {shape.kind_name}, got {_type_name(value)}")

    if isinstance(shape, StructShape):
        return _validate_struct(shape, value, path, extra)

    if isinstance(shape, SequenceShape):
        if not isinstance(value, (list, tuple)):
            return Invalid(path, f"kind mismatch: expected array, got {_type_name(value)}")
        items: List[Any] = []
        for index, item in enumerate(value):
            outcome = _validate(shape.item, item, path + (index,), extra)
            if isinstance(outcome, Invalid):
                return outcome
            items.append(outcome.value)
        return Valid(items)

    if isinstance(shape, LeafShape):
        result = shape.validator.validate(value)
        if isinstance(result, LeafInvalid):
            return Invalid(path + tuple(result.loc), result.reason)
        return Valid(result.value)

    raise TypeError(f"not a shape: {shape!r}")


def _validate_struct(shape: StructShape, value: Any, path: Path, extra: str) -> ValidationOutcome:
    if not isinstance(value, Mapping):
        return Invalid(path, f"kind mismatch: expected object, got {_type_name(value)}")

    out: Dict[str, Any] = {}
    for field in shape.fields:
        if field.name not in value:
            if field.required:
                return Invalid(path + (field.name,), "missing required field")
            continue
        outcome = _validate(field.shape, value[field.name], path + (field.name,), extra)
        if isinstance(outcome, Invalid):
            return outcome
        out[field.name] = outcome.value

    declared = set(shape.names)
    for key in value:
        if key in declared:
            continue
        if extra == "forbid":
            return Invalid(path + (key,), "unexpected field")
        out[key] = value[key]
    return Valid(out)
