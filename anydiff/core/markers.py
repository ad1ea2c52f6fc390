"""Markers that exclude types or members from comparison and attach converters.

A marked type is skipped entirely. A marked member is never visited::

    @ignore
    class Session: ...

    @dataclass
    class Account:
        name: str
        token: str = ignored_field(default="")

        @property
        @ignore
        def cached(self) -> str: ...

Conversion hooks are carried on emitted differences for downstream
formatting and are never evaluated by the comparison itself.
"""

from __future__ import annotations

from dataclasses import field
from typing import Any, Callable, TypeVar

from anydiff.core.models import ValueConverter

IGNORE_MARKER = "__anydiff_ignore__"
IGNORE_MEMBERS_ATTR = "__anydiff_ignore_members__"
CONVERTER_MARKER = "__anydiff_converter__"
IGNORE_METADATA_KEY = "anydiff.ignore"
CONVERTER_METADATA_KEY = "anydiff.converter"

_T = TypeVar("_T")


def ignore(target: _T) -> _T:
    """Mark a class, property or property getter as excluded from comparison."""
    holder = target.fget if isinstance(target, property) else target
    setattr(holder, IGNORE_MARKER, True)
    return target


def convert_with(converter: ValueConverter) -> Callable[[_T], _T]:
    """Attach a conversion hook to a property getter."""

    def decorate(target: _T) -> _T:
        holder = target.fget if isinstance(target, property) else target
        setattr(holder, CONVERTER_MARKER, converter)
        return target

    return decorate


def ignored_field(**kwargs: Any) -> Any:
    """Dataclass field that the comparison never visits."""
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[IGNORE_METADATA_KEY] = True
    return field(metadata=metadata, **kwargs)


def converted_field(converter: ValueConverter, **kwargs: Any) -> Any:
    """Dataclass field whose differences carry ``converter``."""
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[CONVERTER_METADATA_KEY] = converter
    return field(metadata=metadata, **kwargs)


def is_ignore_marked(target: object) -> bool:
    # Own namespace only; subclasses of a marked class are still compared.
    if isinstance(target, type):
        return target.__dict__.get(IGNORE_MARKER) is True
    return getattr(target, IGNORE_MARKER, False) is True


def converter_of(target: object) -> ValueConverter | None:
    converter = getattr(target, CONVERTER_MARKER, None)
    return converter if callable(converter) else None
