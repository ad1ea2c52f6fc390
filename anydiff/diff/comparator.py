"""Leaf comparison and difference emission."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Callable, Collection, Iterator

from anydiff.core.models import Difference, KeyValuePair, ValueConverter
from anydiff.core.options import ComparisonOptions, is_ignored, options_include
from anydiff.diff.introspection import Introspector

logger = logging.getLogger(__name__)

Recurse = Callable[[Any, Any, Any, int, str], None]


@dataclass(slots=True)
class ComparisonContext:
    """State shared by one top-level comparison."""

    introspector: Introspector
    options: ComparisonOptions
    ignore: Collection[str]
    differences: list[Difference] = field(default_factory=list)


class ValueComparator:
    """Decides equality of one member pair and records differences."""

    def __init__(self, context: ComparisonContext, recurse: Recurse) -> None:
        self._context = context
        self._recurse = recurse

    def compare_member(
        self,
        *,
        name: str,
        declared_type: Any,
        converter: ValueConverter | None,
        left: Any,
        right: Any,
        parent: Any,
        depth: int,
        path: str,
        index: int | None = None,
    ) -> None:
        context = self._context
        if is_ignored(name, path, context.ignore):
            return

        if (left is None) != (right is None):
            present = left if left is not None else right
            self._emit(type(present), name, path, left, right, index, converter)
            return

        if left is None:
            return

        introspector = context.introspector
        value_type = introspector.resolve_type(declared_type, left)

        if introspector.is_collection(value_type):
            self.compare_collection(
                name=name,
                converter=converter,
                left=left,
                right=right,
                parent=parent,
                depth=depth,
                path=path,
            )
            return

        if not introspector.is_scalar(value_type):
            self._recurse(left, right, left, depth, path)
            return

        if not is_match(left, right):
            self._emit(value_type, name, path, left, right, index, converter)

    def compare_collection(
        self,
        *,
        name: str,
        converter: ValueConverter | None,
        left: Any,
        right: Any,
        parent: Any,
        depth: int,
        path: str,
    ) -> None:
        """Positional walk of ``left``; ``right`` advances in lock-step.

        Excess elements on the right are not reported.
        """
        if not options_include(self._context.options, ComparisonOptions.COMPARE_COLLECTIONS):
            return

        introspector = self._context.introspector
        left_items = introspector.iterate(left)
        if left_items is None:
            return
        right_items = introspector.iterate(right)
        if right_items is None:
            logger.debug("right value at %r is not iterable", path)

        for index, left_item in enumerate(left_items):
            has_right, right_item = _advance(right_items)
            if not has_right:
                self._emit(type(left_item), name, path, left_item, None, index, converter)
                continue

            if left_item is None or right_item is None:
                if not is_match(left_item, right_item):
                    present = left_item if left_item is not None else right_item
                    self._emit(type(present), name, path, left_item, right_item, index, converter)
                continue

            if isinstance(left_item, KeyValuePair):
                self._compare_pair(
                    name=name,
                    converter=converter,
                    left=left_item,
                    right=right_item,
                    depth=depth,
                    path=path,
                    index=index,
                )
                continue

            if not introspector.is_scalar(type(left_item)):
                self._recurse(left_item, right_item, parent, depth, path)
                continue

            if not is_match(left_item, right_item):
                self._emit(type(left_item), name, path, left_item, right_item, index, converter)

    def _compare_pair(
        self,
        *,
        name: str,
        converter: ValueConverter | None,
        left: KeyValuePair,
        right: Any,
        depth: int,
        path: str,
        index: int,
    ) -> None:
        lookup = self._context.introspector.lookup_member_value
        # Keys and values are independent comparisons under the same path.
        for part in ("key", "value"):
            self.compare_member(
                name=name,
                declared_type=None,
                converter=converter,
                left=lookup(left, part),
                right=lookup(right, part),
                parent=left,
                depth=depth,
                path=path,
                index=index,
            )

    def _emit(
        self,
        value_type: type,
        name: str,
        path: str,
        left: Any,
        right: Any,
        index: int | None,
        converter: ValueConverter | None,
    ) -> None:
        self._context.differences.append(
            Difference(
                type=value_type,
                property_name=name,
                path=path,
                left_value=left,
                right_value=right,
                array_index=index,
                value_converter=converter,
            )
        )


def is_match(left: Any, right: Any) -> bool:
    """Default equality: ``None`` only matches ``None``, otherwise ``==``."""
    if left is None and right is None:
        return True
    if left is None or right is None:
        return False
    return bool(left == right)


def _advance(items: Iterator[Any] | None) -> tuple[bool, Any]:
    if items is None:
        return False, None
    try:
        return True, next(items)
    except StopIteration:
        return False, None
