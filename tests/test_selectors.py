from __future__ import annotations

from dataclasses import dataclass
from operator import attrgetter

import pytest

from anydiff import InvalidSelectorError, compute_diff_ignoring
from anydiff.diff import selector_name, selector_names


@dataclass
class Address:
    city: str


@dataclass
class Customer:
    name: str
    updated_at: str
    address: Address


def test_selector_name_from_lambda_and_attrgetter() -> None:
    assert selector_name(lambda item: item.updated_at) == "updated_at"
    assert selector_name(attrgetter("name")) == "name"
    assert selector_name("raw_name") == "raw_name"


def test_nested_selector_selects_last_member() -> None:
    assert selector_name(lambda item: item.address.city) == "city"


def test_selector_without_member_access_is_rejected() -> None:
    with pytest.raises(InvalidSelectorError, match="does not access a member"):
        selector_name(lambda item: item)


def test_failing_selector_is_rejected() -> None:
    with pytest.raises(InvalidSelectorError, match="failed"):
        selector_name(lambda item: item.name + 1)


def test_non_callable_selector_is_rejected() -> None:
    with pytest.raises(InvalidSelectorError, match="Unsupported selector"):
        selector_name(42)


def test_selector_names_preserve_order() -> None:
    assert selector_names([lambda item: item.b, lambda item: item.a]) == ["b", "a"]


def test_compute_diff_ignoring_skips_selected_members() -> None:
    left = Customer("Ann", "2024-01-01", Address("Oslo"))
    right = Customer("Ann", "2024-02-01", Address("Bergen"))

    result = compute_diff_ignoring(left, right, lambda item: item.updated_at)

    assert [item.path for item in result] == [".address.city"]
    assert compute_diff_ignoring(
        left,
        right,
        lambda item: item.updated_at,
        lambda item: item.address.city,
    ) == []
