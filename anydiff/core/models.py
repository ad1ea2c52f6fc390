"""Data models for value differences and member descriptors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Literal, NamedTuple

MemberKind = Literal["property", "field"]
ValueConverter = Callable[[Any], Any]


@dataclass(frozen=True, slots=True)
class Difference:
    """A single mismatch between two compared values."""

    type: type
    property_name: str
    path: str
    left_value: Any
    right_value: Any
    array_index: int | None = None
    value_converter: ValueConverter | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": _type_name(self.type),
            "property_name": self.property_name,
            "path": self.path,
            "array_index": self.array_index,
            "left_value": self.left_value,
            "right_value": self.right_value,
            "has_converter": self.value_converter is not None,
        }


class KeyValuePair(NamedTuple):
    """Element shape produced when iterating a mapping."""

    key: Any
    value: Any


@dataclass(frozen=True, slots=True)
class MemberInfo:
    """Introspected member of a type."""

    name: str
    kind: MemberKind
    declared_type: Any = None
    ignored: bool = False
    converter: ValueConverter | None = None


def _type_name(value_type: type) -> str:
    module = getattr(value_type, "__module__", "")
    qualname = getattr(value_type, "__qualname__", repr(value_type))
    if module in ("builtins", ""):
        return qualname
    return f"{module}.{qualname}"
