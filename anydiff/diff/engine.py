"""Recursive object-graph diff engine with cycle and depth guards."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from anydiff.core.exceptions import InvalidComparisonError
from anydiff.core.models import Difference, MemberInfo
from anydiff.core.options import ComparisonOptions, is_ignored, option_names, options_include
from anydiff.diff.comparator import ComparisonContext, ValueComparator
from anydiff.diff.introspection import Introspector, ReflectionIntrospector
from anydiff.plugins import DiffEndEvent, DiffStartEvent, get_active_plugin_manager

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 32

# Immutable containers compare by value; equal instances may share one identity.
_UNGUARDED_TYPES: tuple[type, ...] = (tuple, frozenset)


def compute_diff(
    left: Any,
    right: Any,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    allow_type_mismatch: bool = False,
    options: ComparisonOptions = ComparisonOptions.ALL,
    ignore: Iterable[str] = (),
    introspector: Introspector | None = None,
) -> list[Difference]:
    """Compare two values and return their differences in discovery order.

    ``max_depth`` of 0 disables the depth limit. Values of different runtime
    types raise ``InvalidComparisonError`` unless ``allow_type_mismatch`` is
    set.
    """
    ignore_set = frozenset(ignore)
    left_type = _type_label(left)
    right_type = _type_label(right)

    plugin_manager = get_active_plugin_manager()
    plugin_manager.on_diff_start(
        DiffStartEvent(
            left_type=left_type,
            right_type=right_type,
            max_depth=max_depth,
            allow_type_mismatch=allow_type_mismatch,
            options=option_names(options),
            ignore=sorted(ignore_set),
        )
    )

    try:
        differences = diff_values(
            left,
            right,
            max_depth=max_depth,
            allow_type_mismatch=allow_type_mismatch,
            options=options,
            ignore=ignore_set,
            introspector=introspector,
        )
    except Exception as error:
        plugin_manager.on_diff_end(
            DiffEndEvent(
                left_type=left_type,
                right_type=right_type,
                status="error",
                error_type=error.__class__.__name__,
                error_message=str(error),
            )
        )
        raise

    plugin_manager.on_diff_end(
        DiffEndEvent(
            left_type=left_type,
            right_type=right_type,
            status="ok",
            difference_count=len(differences),
        )
    )
    return differences


def diff_values(
    left: Any,
    right: Any,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    allow_type_mismatch: bool = False,
    options: ComparisonOptions = ComparisonOptions.ALL,
    ignore: Iterable[str] = (),
    introspector: Introspector | None = None,
) -> list[Difference]:
    """Run one comparison without lifecycle hooks."""
    walker = DiffWalker(
        introspector=introspector or ReflectionIntrospector(),
        max_depth=max_depth,
        allow_type_mismatch=allow_type_mismatch,
        options=options,
        ignore=frozenset(ignore),
    )
    return walker.run(left, right)


class DiffWalker:
    """Walks two object graphs in lock-step for a single comparison.

    A walker owns the visited-object guard and the growing difference list,
    so it must not be reused across comparisons.
    """

    def __init__(
        self,
        *,
        introspector: Introspector,
        max_depth: int,
        allow_type_mismatch: bool,
        options: ComparisonOptions,
        ignore: frozenset[str],
    ) -> None:
        self.max_depth = max_depth
        self.allow_type_mismatch = allow_type_mismatch
        self.context = ComparisonContext(
            introspector=introspector,
            options=options,
            ignore=ignore,
        )
        self.comparator = ValueComparator(self.context, self.walk)
        # id -> object; holding the reference keeps ids stable for the walk.
        self._visited: dict[int, Any] = {}
        self._started = False

    @property
    def differences(self) -> list[Difference]:
        return self.context.differences

    def run(self, left: Any, right: Any) -> list[Difference]:
        if self._started:
            raise RuntimeError("DiffWalker instances are single-use")
        self._started = True
        self.walk(left, right, None, 0, "")
        return self.differences

    def walk(self, left: Any, right: Any, parent: Any, depth: int, path: str) -> None:
        if (
            not self.allow_type_mismatch
            and left is not None
            and right is not None
            and type(left) is not type(right)
        ):
            raise InvalidComparisonError(
                "Left and right values must be of the same type "
                f"(left={type(left).__name__}, right={type(right).__name__}"
                f"{', path=' + path if path else ''})."
            )

        if left is None and right is None:
            return

        if self.max_depth > 0 and depth >= self.max_depth:
            logger.debug("max depth %d reached at %r", self.max_depth, path)
            return

        introspector = self.context.introspector
        subject = left if left is not None else right
        subject_type = type(subject)
        if introspector.is_excluded_type(subject_type):
            logger.debug("skipping excluded type %s at %r", subject_type.__name__, path)
            return
        if introspector.is_delegate(subject):
            return

        depth += 1

        if left is not None and not isinstance(left, _UNGUARDED_TYPES):
            marker = id(left)
            if marker in self._visited:
                logger.debug("cycle guard hit for %s at %r", subject_type.__name__, path)
                return
            self._visited[marker] = left

        options = self.context.options
        if introspector.is_collection(subject_type):
            self.comparator.compare_collection(
                name=path.rpartition(".")[2],
                converter=None,
                left=left,
                right=right,
                parent=parent,
                depth=depth,
                path=path,
            )

        members = introspector.members(
            subject_type,
            left,
            right,
            include_properties=options_include(options, ComparisonOptions.COMPARE_PROPERTIES),
            include_fields=options_include(options, ComparisonOptions.COMPARE_FIELDS),
        )
        for member in members:
            member_path = f"{path}.{member.name}"
            if member.ignored or is_ignored(member.name, member_path, self.context.ignore):
                continue
            self.comparator.compare_member(
                name=member.name,
                declared_type=member.declared_type,
                converter=member.converter,
                left=self._read(left, member, subject_type),
                right=self._read(right, member, subject_type),
                parent=parent,
                depth=depth,
                path=member_path,
            )

    def _read(self, instance: Any, member: MemberInfo, subject_type: type) -> Any:
        if instance is None:
            return None
        introspector = self.context.introspector
        if type(instance) is not subject_type:
            return introspector.lookup_member_value(instance, member.name)
        if member.kind == "field":
            return introspector.read_field(instance, member)
        try:
            return introspector.read_property(instance, member)
        except Exception as error:
            logger.debug(
                "property read failed: %s.%s (%s: %s)",
                subject_type.__name__,
                member.name,
                error.__class__.__name__,
                error,
            )
            return None


def _type_label(value: Any) -> str | None:
    return None if value is None else type(value).__qualname__
