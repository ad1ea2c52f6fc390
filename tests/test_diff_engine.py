from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from anydiff import ComparisonOptions, InvalidComparisonError, compute_diff, ignore, ignored_field
from anydiff.diff import DiffWalker, ReflectionIntrospector, diff_values


@dataclass
class Record:
    Name: str
    Tags: list[str]


@dataclass
class Inner:
    value: int


@dataclass
class Outer:
    label: str
    inner: Inner | None


@dataclass
class Node:
    value: int
    next: Node | None = None


class Linked:
    def __init__(self, value: int) -> None:
        self.value = value
        self.next: Linked | None = None


class Account:
    def __init__(self, owner: str, balance: int) -> None:
        self._owner = owner
        self.balance = balance

    @property
    def owner(self) -> str:
        return self._owner


class Flaky:
    def __init__(self, fail: bool) -> None:
        self.fail = fail

    @property
    def status(self) -> str:
        if self.fail:
            raise RuntimeError("status unavailable")
        return "ok"


class Slotted:
    __slots__ = ("value",)


class Sealed:
    __slots__ = ("value",)

    def __getattribute__(self, name: str):
        if name == "value":
            raise RuntimeError("value is sealed")
        return object.__getattribute__(self, name)


@dataclass
class Location:
    path: Path


@dataclass
class Person:
    name: str
    age: int


@dataclass
class Employee:
    name: str
    title: str


@dataclass
class Line:
    sku: str
    qty: int


@dataclass
class Order:
    lines: list[Line]


@dataclass
class Inventory:
    counts: dict[str, int]


@ignore
@dataclass
class Secret:
    token: str


@dataclass
class Holder:
    name: str
    secret: Secret


@dataclass
class Credentials:
    user: str
    password: str = ignored_field(default="")
    session: str = field(default="", compare=False)


@dataclass
class Handler:
    name: str
    callback: object


def _chain(length: int, last_value: int) -> Node:
    head = Node(value=0)
    current = head
    for _ in range(length - 2):
        current.next = Node(value=0)
        current = current.next
    current.next = Node(value=last_value)
    return head


def test_record_scenario_reports_scalar_and_collection_index() -> None:
    result = compute_diff(Record("A", ["x", "y"]), Record("B", ["x", "z"]))

    assert len(result) == 2
    name, tags = result
    assert (name.property_name, name.path, name.left_value, name.right_value) == (
        "Name",
        ".Name",
        "A",
        "B",
    )
    assert name.array_index is None
    assert name.type is str
    assert (tags.property_name, tags.path, tags.array_index) == ("Tags", ".Tags", 1)
    assert (tags.left_value, tags.right_value) == ("y", "z")


def test_identical_values_have_no_differences() -> None:
    record = Record("A", ["x", "y"])

    assert compute_diff(record, record) == []
    assert compute_diff(record, Record("A", ["x", "y"])) == []


def test_diff_is_deterministic() -> None:
    left = Order([Line("a", 1), Line("b", 2)])
    right = Order([Line("a", 2), Line("c", 2)])

    assert compute_diff(left, right) == compute_diff(left, right)


def test_root_collection_positional_diff() -> None:
    result = compute_diff([1, 2, 3], [1, 9, 3])

    assert len(result) == 1
    assert result[0].array_index == 1
    assert (result[0].left_value, result[0].right_value) == (2, 9)


def test_excess_left_element_reported_with_null_right() -> None:
    result = compute_diff([1, 2], [1])

    assert len(result) == 1
    assert result[0].array_index == 1
    assert result[0].left_value == 2
    assert result[0].right_value is None


def test_excess_right_element_is_not_reported() -> None:
    assert compute_diff([1], [1, 2]) == []


def test_both_null_is_equal() -> None:
    assert compute_diff(None, None) == []


def test_null_left_reports_each_top_level_member() -> None:
    result = compute_diff(None, Record("A", ["x"]))

    assert [item.property_name for item in result] == ["Name", "Tags"]
    assert all(item.left_value is None for item in result)
    assert result[0].type is str
    assert result[1].type is list


def test_type_mismatch_raises_by_default() -> None:
    with pytest.raises(InvalidComparisonError, match="same type"):
        compute_diff(1, "1")


def test_type_mismatch_allowed_compares_members_by_name() -> None:
    assert compute_diff(1, "1", allow_type_mismatch=True) == []

    result = compute_diff(Person("Ann", 30), Employee("Bob", "dev"), allow_type_mismatch=True)

    assert [item.property_name for item in result] == ["name", "age"]
    assert (result[0].left_value, result[0].right_value) == ("Ann", "Bob")
    assert (result[1].left_value, result[1].right_value) == (30, None)


def test_nested_type_mismatch_raises() -> None:
    left = Handler(name="a", callback=Inner(1))
    right = Handler(name="a", callback=Line("x", 1))

    with pytest.raises(InvalidComparisonError):
        compute_diff(left, right)


def test_max_depth_one_compares_only_top_level_scalars() -> None:
    left = Outer("a", Inner(1))
    right = Outer("b", Inner(2))

    result = compute_diff(left, right, max_depth=1)

    assert [item.path for item in result] == [".label"]


def test_nested_member_path_is_dotted() -> None:
    result = compute_diff(Outer("a", Inner(1)), Outer("a", Inner(2)))

    assert len(result) == 1
    assert result[0].path == ".inner.value"
    assert result[0].property_name == "value"


def test_default_depth_truncates_long_chains_and_zero_disables_limit() -> None:
    left = _chain(50, last_value=1)
    right = _chain(50, last_value=2)

    assert compute_diff(left, right) == []

    unlimited = compute_diff(left, right, max_depth=0)
    assert len(unlimited) == 1
    assert unlimited[0].path == ".next" * 49 + ".value"


def test_cycle_guard_terminates_on_self_reference() -> None:
    node = Linked(1)
    node.next = node

    assert compute_diff(node, node) == []


def test_cycle_guard_still_reports_differences() -> None:
    left = Linked(1)
    left.next = left
    right = Linked(2)
    right.next = right

    result = compute_diff(left, right)

    assert [item.path for item in result] == [".value"]


def test_ignore_by_member_name_and_by_path() -> None:
    left = Record("A", ["x", "y"])
    right = Record("B", ["x", "z"])

    assert [item.path for item in compute_diff(left, right, ignore=["Name"])] == [".Tags"]
    assert [item.path for item in compute_diff(left, right, ignore=[".Tags"])] == [".Name"]


def test_ignore_nested_path_is_exact() -> None:
    left = Outer("a", Inner(1))
    right = Outer("b", Inner(2))

    assert [item.path for item in compute_diff(left, right, ignore=[".inner.value"])] == [
        ".label"
    ]
    # Paths match exactly, leading separator included.
    assert len(compute_diff(left, right, ignore=["inner.value"])) == 2


def test_properties_before_fields_and_backing_field_excluded() -> None:
    result = compute_diff(Account("ann", 1), Account("bob", 2))

    assert [item.property_name for item in result] == ["owner", "balance"]


def test_options_gate_member_categories() -> None:
    left = Account("ann", 1)
    right = Account("bob", 2)

    properties = compute_diff(left, right, options=ComparisonOptions.COMPARE_PROPERTIES)
    fields = compute_diff(left, right, options=ComparisonOptions.COMPARE_FIELDS)

    assert [item.property_name for item in properties] == ["owner"]
    assert [item.property_name for item in fields] == ["balance"]


def test_collections_skipped_without_collection_option() -> None:
    options = ComparisonOptions.COMPARE_PROPERTIES | ComparisonOptions.COMPARE_FIELDS

    result = compute_diff(Record("A", ["x"]), Record("B", ["y"]), options=options)

    assert [item.path for item in result] == [".Name"]


def test_property_read_failure_is_treated_as_null() -> None:
    result = compute_diff(Flaky(True), Flaky(False))

    assert [item.property_name for item in result] == ["status", "fail"]
    assert result[0].left_value is None
    assert result[0].right_value == "ok"


def test_field_read_failure_propagates() -> None:
    with pytest.raises(RuntimeError, match="sealed"):
        compute_diff(Sealed(), Sealed())


def test_unassigned_slot_reads_as_null() -> None:
    left = Slotted()
    left.value = 1

    result = compute_diff(left, Slotted())

    assert [(item.path, item.left_value, item.right_value) for item in result] == [
        (".value", 1, None)
    ]
    assert compute_diff(Slotted(), Slotted()) == []


def test_path_members_compare_by_value() -> None:
    result = compute_diff(Location(Path("/a/b")), Location(Path("/a/c")))

    assert [(item.path, item.left_value, item.right_value) for item in result] == [
        (".path", Path("/a/b"), Path("/a/c"))
    ]
    assert compute_diff(Location(Path("/a/b")), Location(Path("/a/b"))) == []


def test_repeated_tuple_elements_are_each_compared() -> None:
    shared = [(0, 0), (0, 0)]
    repeated = [(0, 0)] * 3

    assert [
        (item.array_index, item.left_value, item.right_value)
        for item in compute_diff(shared, [(0, 0), (0, 1)])
    ] == [(1, 0, 1)]
    assert [
        (item.array_index, item.left_value, item.right_value)
        for item in compute_diff(repeated, [(0, 0), (1, 1), (0, 0)])
    ] == [(0, 0, 1), (1, 0, 1)]


def test_repeated_tuple_members_are_each_compared() -> None:
    pair = (1, 2)

    result = compute_diff(Handler("a", [pair, pair]), Handler("a", [(1, 2), (1, 3)]))

    assert [(item.path, item.left_value, item.right_value) for item in result] == [
        (".callback", 2, 3)
    ]


def test_collection_of_objects_recurses_with_collection_path() -> None:
    left = Order([Line("a", 1), Line("b", 2)])
    right = Order([Line("a", 1), Line("b", 3)])

    result = compute_diff(left, right)

    assert len(result) == 1
    assert result[0].path == ".lines.qty"
    assert result[0].array_index is None
    assert (result[0].left_value, result[0].right_value) == (2, 3)


def test_mapping_keys_and_values_compared_independently() -> None:
    values = compute_diff(Inventory({"a": 1, "b": 2}), Inventory({"a": 1, "b": 3}))
    keys = compute_diff(Inventory({"a": 1}), Inventory({"z": 1}))

    assert len(values) == 1
    assert (values[0].path, values[0].array_index) == (".counts", 1)
    assert (values[0].left_value, values[0].right_value) == (2, 3)
    assert len(keys) == 1
    assert (keys[0].left_value, keys[0].right_value) == ("a", "z")


def test_root_mapping_is_compared_positionally() -> None:
    result = compute_diff({"a": 1, "b": 2}, {"a": 1, "b": 5})

    assert [(item.array_index, item.left_value, item.right_value) for item in result] == [
        (1, 2, 5)
    ]


def test_excluded_type_is_skipped() -> None:
    assert compute_diff(Holder("a", Secret("x")), Holder("a", Secret("y"))) == []


def test_ignore_marked_fields_are_skipped() -> None:
    left = Credentials(user="ann", password="one", session="s1")
    right = Credentials(user="ann", password="two", session="s2")

    assert compute_diff(left, right) == []


def test_callables_are_not_compared() -> None:
    left = Handler(name="a", callback=lambda: 1)
    right = Handler(name="a", callback=lambda: 2)

    assert compute_diff(left, right) == []


def test_custom_scalar_types_use_equality() -> None:
    class Version:
        def __init__(self, text: str) -> None:
            self._text = text

        def __eq__(self, other: object) -> bool:
            return isinstance(other, Version) and self._text.lstrip("v") == other._text.lstrip("v")

    left = Handler(name="a", callback=None)
    right = Handler(name="a", callback=None)
    left.callback = Version("v1")
    right.callback = Version("1")

    assert len(compute_diff(left, right)) == 1
    assert (
        compute_diff(left, right, introspector=ReflectionIntrospector(scalar_types=[Version]))
        == []
    )


def test_diff_values_runs_without_plugins() -> None:
    result = diff_values([1, 2], [1, 3])

    assert [item.right_value for item in result] == [3]


def test_walker_is_single_use() -> None:
    walker = DiffWalker(
        introspector=ReflectionIntrospector(),
        max_depth=32,
        allow_type_mismatch=False,
        options=ComparisonOptions.ALL,
        ignore=frozenset(),
    )
    walker.run([1], [2])

    with pytest.raises(RuntimeError):
        walker.run([1], [2])
