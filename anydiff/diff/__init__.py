"""Diff subsystem for AnyDiff."""

from anydiff.diff.comparator import is_match
from anydiff.diff.engine import DEFAULT_MAX_DEPTH, DiffWalker, compute_diff, diff_values
from anydiff.diff.formatting import render_diff_summary, render_difference, render_differences
from anydiff.diff.introspection import Introspector, ReflectionIntrospector
from anydiff.diff.selectors import selector_name, selector_names

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "DiffWalker",
    "Introspector",
    "ReflectionIntrospector",
    "compute_diff",
    "diff_values",
    "is_match",
    "render_diff_summary",
    "render_difference",
    "render_differences",
    "selector_name",
    "selector_names",
]
