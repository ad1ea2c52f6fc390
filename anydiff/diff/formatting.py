"""CLI-friendly rendering for difference lists."""

from __future__ import annotations

from typing import Any, Sequence

from anydiff.core.models import Difference


def display_value(difference: Difference, value: Any) -> Any:
    """Value as it should be shown, after the member's conversion hook."""
    if value is None or difference.value_converter is None:
        return value
    return difference.value_converter(value)


def render_difference(difference: Difference) -> str:
    location = difference.path or "<root>"
    if difference.array_index is not None:
        location = f"{location}[{difference.array_index}]"
    left = display_value(difference, difference.left_value)
    right = display_value(difference, difference.right_value)
    return f"{location}: {left!r} -> {right!r} ({difference.type.__name__})"


def render_diff_summary(differences: Sequence[Difference]) -> str:
    if not differences:
        return "no differences detected"
    paths = {difference.path for difference in differences}
    return f"differences={len(differences)} paths={len(paths)}"


def render_differences(differences: Sequence[Difference], *, max_items: int = 8) -> str:
    if not differences:
        return "no differences detected"

    limit = max(1, max_items)
    lines = [render_difference(difference) for difference in differences[:limit]]
    remaining = len(differences) - limit
    if remaining > 0:
        lines.append(f"... {remaining} additional difference(s) omitted")
    return "\n".join(lines)
