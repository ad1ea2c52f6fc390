"""Stable public API surface for AnyDiff.

Compare two object graphs and get back an ordered list of differences::

    from anydiff import compute_diff

    for difference in compute_diff(before, after, ignore=["updated_at"]):
        print(difference.path, difference.left_value, difference.right_value)
"""

from __future__ import annotations

from typing import Any

from anydiff.core.exceptions import DiffError, InvalidComparisonError, InvalidSelectorError
from anydiff.core.markers import convert_with, converted_field, ignore, ignored_field
from anydiff.core.models import Difference
from anydiff.core.options import ComparisonOptions
from anydiff.diff.engine import DEFAULT_MAX_DEPTH, compute_diff
from anydiff.diff.introspection import Introspector
from anydiff.diff.selectors import Selector, selector_names

__version__ = "0.1.0"


def compute_diff_ignoring(
    left: Any,
    right: Any,
    *selectors: Selector,
    max_depth: int = DEFAULT_MAX_DEPTH,
    allow_type_mismatch: bool = False,
    options: ComparisonOptions = ComparisonOptions.ALL,
    introspector: Introspector | None = None,
) -> list[Difference]:
    """Like ``compute_diff`` with ignored members given as selectors.

    ``compute_diff_ignoring(a, b, lambda item: item.updated_at)`` ignores every
    member named ``updated_at``.
    """
    return compute_diff(
        left,
        right,
        max_depth=max_depth,
        allow_type_mismatch=allow_type_mismatch,
        options=options,
        ignore=selector_names(selectors),
        introspector=introspector,
    )


__all__ = [
    "__version__",
    "DEFAULT_MAX_DEPTH",
    "ComparisonOptions",
    "Difference",
    "DiffError",
    "InvalidComparisonError",
    "InvalidSelectorError",
    "compute_diff",
    "compute_diff_ignoring",
    "ignore",
    "ignored_field",
    "convert_with",
    "converted_field",
]
