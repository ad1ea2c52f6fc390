"""Comparison option flags and ignore-filter predicates."""

from __future__ import annotations

from enum import Flag
from typing import Collection, Iterable


class ComparisonOptions(Flag):
    """Member categories that participate in a comparison."""

    COMPARE_PROPERTIES = 1
    COMPARE_FIELDS = 2
    COMPARE_COLLECTIONS = 4
    ALL = COMPARE_PROPERTIES | COMPARE_FIELDS | COMPARE_COLLECTIONS


OPTION_NAMES: dict[str, ComparisonOptions] = {
    "properties": ComparisonOptions.COMPARE_PROPERTIES,
    "fields": ComparisonOptions.COMPARE_FIELDS,
    "collections": ComparisonOptions.COMPARE_COLLECTIONS,
    "all": ComparisonOptions.ALL,
}


def options_include(options: ComparisonOptions, flag: ComparisonOptions) -> bool:
    return (options & flag) == flag


def is_ignored(name: str, path: str, ignore: Collection[str]) -> bool:
    """Exact-string match on either the simple member name or its full path."""
    return name in ignore or path in ignore


def parse_options(names: Iterable[str]) -> ComparisonOptions:
    """Build an option set from names such as ``properties`` or ``all``."""
    resolved = ComparisonOptions(0)
    seen = False
    for raw in names:
        key = raw.strip().lower()
        if key not in OPTION_NAMES:
            raise ValueError(
                f"Unsupported comparison option {raw!r}; "
                f"expected one of: {', '.join(OPTION_NAMES)}"
            )
        resolved |= OPTION_NAMES[key]
        seen = True
    return resolved if seen else ComparisonOptions.ALL


def option_names(options: ComparisonOptions) -> list[str]:
    if options == ComparisonOptions.ALL:
        return ["all"]
    return [
        name
        for name, flag in OPTION_NAMES.items()
        if flag != ComparisonOptions.ALL and options_include(options, flag)
    ]
