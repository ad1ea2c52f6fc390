"""Type introspection capability used by the comparison engine.

The engine never inspects classes directly; it asks an ``Introspector`` for
the members of a type, how to read them and how to classify values. The
default ``ReflectionIntrospector`` understands properties, dataclass fields,
``__slots__`` and instance ``__dict__`` attributes.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
import dataclasses
import datetime
import decimal
import enum
import fractions
import functools
import inspect
import logging
import pathlib
import types
import typing
from typing import Any, Protocol, Union
import uuid

from anydiff.core.markers import (
    CONVERTER_METADATA_KEY,
    IGNORE_MEMBERS_ATTR,
    IGNORE_METADATA_KEY,
    converter_of,
    is_ignore_marked,
)
from anydiff.core.models import KeyValuePair, MemberInfo

logger = logging.getLogger(__name__)

SCALAR_TYPES: tuple[type, ...] = (
    str,
    bytes,
    bytearray,
    memoryview,
    bool,
    int,
    float,
    complex,
    decimal.Decimal,
    fractions.Fraction,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    datetime.tzinfo,
    uuid.UUID,
    pathlib.PurePath,
    enum.Enum,
    range,
    type,
)

_STRING_TYPES: tuple[type, ...] = (str, bytes, bytearray, memoryview)
_SKIPPED_SLOTS = frozenset({"__dict__", "__weakref__"})
_PROPERTY_TYPES = (property, functools.cached_property)


class Introspector(Protocol):
    """Capability the engine needs from its runtime environment."""

    def members(
        self,
        instance_type: type,
        left: Any,
        right: Any,
        *,
        include_properties: bool,
        include_fields: bool,
    ) -> list[MemberInfo]: ...

    def is_excluded_type(self, value_type: type) -> bool: ...

    def is_delegate(self, value: Any) -> bool: ...

    def is_scalar(self, value_type: type) -> bool: ...

    def is_collection(self, value_type: type) -> bool: ...

    def resolve_type(self, declared_type: Any, fallback: Any) -> type: ...

    def iterate(self, value: Any) -> Iterator[Any] | None: ...

    def read_property(self, instance: Any, member: MemberInfo) -> Any: ...

    def read_field(self, instance: Any, member: MemberInfo) -> Any: ...

    def lookup_member_value(self, instance: Any, name: str) -> Any: ...


class ReflectionIntrospector:
    """Default introspector built on ``inspect``, ``dataclasses`` and ``typing``."""

    def __init__(self, *, scalar_types: Iterable[type] = ()) -> None:
        self._scalar_types = SCALAR_TYPES + tuple(scalar_types)
        self._class_cache: dict[type, tuple[list[MemberInfo], list[MemberInfo]]] = {}

    def members(
        self,
        instance_type: type,
        left: Any,
        right: Any,
        *,
        include_properties: bool,
        include_fields: bool,
    ) -> list[MemberInfo]:
        """Ordered members of ``instance_type``: properties first, then fields."""
        properties, declared_fields = self._class_members(instance_type)
        result: list[MemberInfo] = []
        if include_properties:
            result.extend(properties)
        if include_fields:
            result.extend(declared_fields)
            result.extend(
                self._dynamic_fields(instance_type, left, right, properties, declared_fields)
            )
        return result

    def is_excluded_type(self, value_type: type) -> bool:
        return is_ignore_marked(value_type)

    def is_delegate(self, value: Any) -> bool:
        return inspect.isroutine(value) or isinstance(value, functools.partial)

    def is_scalar(self, value_type: type) -> bool:
        return issubclass(value_type, self._scalar_types) or value_type is type(None)

    def is_collection(self, value_type: type) -> bool:
        if issubclass(value_type, _STRING_TYPES) or self.is_scalar(value_type):
            return False
        return issubclass(value_type, Iterable)

    def resolve_type(self, declared_type: Any, fallback: Any) -> type:
        """Class for a member's declared type, or the runtime type of ``fallback``."""
        resolved = _annotation_class(declared_type)
        if resolved is None or resolved is object:
            return type(fallback)
        return resolved

    def iterate(self, value: Any) -> Iterator[Any] | None:
        if value is None or isinstance(value, _STRING_TYPES):
            return None
        if isinstance(value, Mapping):
            return (KeyValuePair(key, item) for key, item in value.items())
        if not isinstance(value, Iterable):
            return None
        return iter(value)

    def read_property(self, instance: Any, member: MemberInfo) -> Any:
        return getattr(instance, member.name)

    def read_field(self, instance: Any, member: MemberInfo) -> Any:
        namespace = getattr(instance, "__dict__", None)
        if namespace is not None and member.name in namespace:
            return namespace[member.name]
        if namespace is not None and not _declares_field(type(instance), member.name):
            # Dynamic attribute this instance never set.
            return None
        if isinstance(
            inspect.getattr_static(type(instance), member.name, None), types.MemberDescriptorType
        ):
            try:
                return getattr(instance, member.name)
            except AttributeError:
                # Declared slot that was never assigned.
                return None
        return getattr(instance, member.name)

    def lookup_member_value(self, instance: Any, name: str) -> Any:
        """Read ``name`` from ``instance``; ``None`` when the type has no such member."""
        if instance is None:
            raise ValueError("instance must not be None")
        namespace = getattr(instance, "__dict__", None)
        if namespace is not None and name in namespace:
            return namespace[name]
        descriptor = inspect.getattr_static(type(instance), name, None)
        if isinstance(descriptor, _PROPERTY_TYPES):
            try:
                return getattr(instance, name)
            except Exception:
                logger.debug("property read failed: %s.%s", type(instance).__name__, name)
                return None
        if hasattr(type(instance), "_fields") and name in type(instance)._fields:
            return getattr(instance, name)
        if _declares_slot(type(instance), name):
            return getattr(instance, name, None)
        return None

    def _class_members(self, instance_type: type) -> tuple[list[MemberInfo], list[MemberInfo]]:
        cached = self._class_cache.get(instance_type)
        if cached is not None:
            return cached

        hints = _type_hints(instance_type)
        ignored_names = _ignored_member_names(instance_type)

        properties: dict[str, MemberInfo] = {}
        for klass in reversed(instance_type.__mro__):
            if klass is object:
                continue
            for name, attribute in vars(klass).items():
                if not isinstance(attribute, _PROPERTY_TYPES):
                    properties.pop(name, None)
                    continue
                getter = attribute.fget if isinstance(attribute, property) else attribute.func
                properties[name] = MemberInfo(
                    name=name,
                    kind="property",
                    declared_type=_return_annotation(getter),
                    ignored=name in ignored_names or is_ignore_marked(getter),
                    converter=converter_of(getter),
                )

        fields: dict[str, MemberInfo] = {}
        if dataclasses.is_dataclass(instance_type):
            for item in dataclasses.fields(instance_type):
                if item.name in properties:
                    continue
                fields[item.name] = MemberInfo(
                    name=item.name,
                    kind="field",
                    declared_type=hints.get(item.name, item.type),
                    ignored=(
                        item.name in ignored_names
                        or not item.compare
                        or item.metadata.get(IGNORE_METADATA_KEY) is True
                    ),
                    converter=_callable_or_none(item.metadata.get(CONVERTER_METADATA_KEY)),
                )

        for klass in reversed(instance_type.__mro__):
            for name in _slot_names(klass):
                if name in fields or name in properties or _is_backing_field(name, properties):
                    continue
                fields[name] = MemberInfo(
                    name=name,
                    kind="field",
                    declared_type=hints.get(name),
                    ignored=name in ignored_names,
                )

        result = (list(properties.values()), list(fields.values()))
        self._class_cache[instance_type] = result
        return result

    def _dynamic_fields(
        self,
        instance_type: type,
        left: Any,
        right: Any,
        properties: list[MemberInfo],
        declared_fields: list[MemberInfo],
    ) -> list[MemberInfo]:
        known = {member.name for member in declared_fields}
        property_names = {member.name: member for member in properties}
        ignored_names = _ignored_member_names(instance_type)
        hints = _type_hints(instance_type)

        dynamic: dict[str, MemberInfo] = {}
        for instance in (left, right):
            if instance is None or type(instance) is not instance_type:
                continue
            namespace = getattr(instance, "__dict__", None)
            if not isinstance(namespace, Mapping):
                continue
            for name in namespace:
                if (
                    not isinstance(name, str)
                    or name in known
                    or name in dynamic
                    or name in property_names
                    or _is_backing_field(name, property_names)
                ):
                    continue
                dynamic[name] = MemberInfo(
                    name=name,
                    kind="field",
                    declared_type=hints.get(name),
                    ignored=name in ignored_names,
                )
        return list(dynamic.values())


def _annotation_class(annotation: Any) -> type | None:
    if annotation is None or annotation is Any:
        return None
    if isinstance(annotation, type) and typing.get_origin(annotation) is None:
        return annotation

    origin = typing.get_origin(annotation)
    if origin is Union or _is_union_type(origin):
        candidates = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(candidates) == 1:
            return _annotation_class(candidates[0])
        return None
    if origin is typing.Annotated:
        return _annotation_class(typing.get_args(annotation)[0])
    if isinstance(origin, type):
        return origin
    return None


def _is_union_type(origin: Any) -> bool:
    return origin is types.UnionType


def _type_hints(instance_type: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(instance_type, include_extras=True)
    except Exception:
        # Unresolvable forward references; fall back to raw annotations.
        hints: dict[str, Any] = {}
        for klass in reversed(instance_type.__mro__):
            hints.update(getattr(klass, "__annotations__", {}) or {})
        return {name: value for name, value in hints.items() if not isinstance(value, str)}


def _return_annotation(getter: Any) -> Any:
    try:
        return typing.get_type_hints(getter).get("return")
    except Exception:
        annotation = getattr(getter, "__annotations__", {}).get("return")
        return None if isinstance(annotation, str) else annotation


def _ignored_member_names(instance_type: type) -> frozenset[str]:
    names: set[str] = set()
    for klass in instance_type.__mro__:
        names.update(klass.__dict__.get(IGNORE_MEMBERS_ATTR, ()))
    return frozenset(names)


def _slot_names(klass: type) -> list[str]:
    slots = klass.__dict__.get("__slots__", ())
    if isinstance(slots, str):
        slots = (slots,)
    return [name for name in slots if name not in _SKIPPED_SLOTS]


def _declares_slot(instance_type: type, name: str) -> bool:
    return any(name in _slot_names(klass) for klass in instance_type.__mro__)


def _declares_field(instance_type: type, name: str) -> bool:
    if dataclasses.is_dataclass(instance_type) and any(
        item.name == name for item in dataclasses.fields(instance_type)
    ):
        return True
    return _declares_slot(instance_type, name)


def _is_backing_field(name: str, properties: Mapping[str, MemberInfo]) -> bool:
    return name.startswith("_") and name[1:] in properties


def _callable_or_none(value: Any) -> Any:
    return value if callable(value) else None
