"""Core models, option flags and markers for AnyDiff."""

from anydiff.core.exceptions import (
    DiffConfigError,
    DiffError,
    InvalidComparisonError,
    InvalidSelectorError,
)
from anydiff.core.markers import convert_with, converted_field, ignore, ignored_field
from anydiff.core.models import Difference, KeyValuePair, MemberInfo
from anydiff.core.options import ComparisonOptions, is_ignored, options_include, parse_options

__all__ = [
    "ComparisonOptions",
    "Difference",
    "DiffConfigError",
    "DiffError",
    "InvalidComparisonError",
    "InvalidSelectorError",
    "KeyValuePair",
    "MemberInfo",
    "convert_with",
    "converted_field",
    "ignore",
    "ignored_field",
    "is_ignored",
    "options_include",
    "parse_options",
]
