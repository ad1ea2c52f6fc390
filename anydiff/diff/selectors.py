"""Resolve member-selector callables to member names.

``lambda item: item.name`` and ``operator.attrgetter("name")`` both select the
member ``name``. A selector is run against a recording stand-in; the last
attribute it touches is the selected member.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable

from anydiff.core.exceptions import InvalidSelectorError

Selector = Callable[[Any], Any]


class _MemberRecorder:
    __slots__ = ("accessed",)

    def __init__(self) -> None:
        object.__setattr__(self, "accessed", [])

    def __getattr__(self, name: str) -> "_MemberRecorder":
        self.accessed.append(name)
        return self


def selector_name(selector: Selector) -> str:
    if isinstance(selector, str):
        return selector
    if not callable(selector):
        raise InvalidSelectorError(f"Unsupported selector: {selector!r}")

    recorder = _MemberRecorder()
    try:
        selector(recorder)
    except Exception as error:
        raise InvalidSelectorError(f"Selector {selector!r} failed: {error}") from error

    if not recorder.accessed:
        raise InvalidSelectorError(f"Selector {selector!r} does not access a member.")
    # ``item.address.city`` selects ``city``.
    return recorder.accessed[-1]


def selector_names(selectors: Iterable[Selector]) -> list[str]:
    return [selector_name(selector) for selector in selectors]
