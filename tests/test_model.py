import math

import pytest

from phpcfg.config_model import KeyValuePair, Value, ValueKind, pairs_from_native, pairs_to_native


def test_values_sort_by_kind_then_payload() -> None:
    values = [
        Value.set_of(),
        Value.string("b"),
        Value.floating(0.5),
        Value.integer(10),
        Value.integer(-1),
        Value.boolean(True),
        Value.boolean(False),
        Value.null(),
        Value.string("a"),
    ]

    assert [v.kind for v in sorted(values)] == [
        ValueKind.NULL,
        ValueKind.BOOL,
        ValueKind.BOOL,
        ValueKind.INT,
        ValueKind.INT,
        ValueKind.FLOAT,
        ValueKind.STR,
        ValueKind.STR,
        ValueKind.SET,
    ]
    assert sorted(values)[1:5] == [
        Value.boolean(False),
        Value.boolean(True),
        Value.integer(-1),
        Value.integer(10),
    ]


def test_kinds_never_compare_equal() -> None:
    assert Value.integer(1) != Value.floating(1.0)
    assert Value.integer(1) != Value.boolean(True)
    assert Value.null() == Value.null()
    assert Value.integer(1) < Value.floating(0.0)


def test_sets_compare_member_by_member() -> None:
    small = Value.set_of([KeyValuePair("a", Value.integer(1))])
    large = Value.set_of([KeyValuePair("a", Value.integer(2))])
    longer = Value.set_of([KeyValuePair("a", Value.integer(1)), KeyValuePair(None, Value.null())])

    assert small < large
    assert small < longer
    assert large >= longer


def test_unkeyed_pairs_sort_first() -> None:
    pairs = [
        KeyValuePair("b", Value.null()),
        KeyValuePair(None, Value.integer(2)),
        KeyValuePair("a", Value.null()),
        KeyValuePair(None, Value.integer(1)),
    ]

    assert sorted(pairs) == [
        KeyValuePair(None, Value.integer(1)),
        KeyValuePair(None, Value.integer(2)),
        KeyValuePair("a", Value.null()),
        KeyValuePair("b", Value.null()),
    ]


def test_nan_has_no_ordering() -> None:
    with pytest.raises(ValueError):
        Value.floating(math.nan) < Value.floating(1.0)
    with pytest.raises(ValueError):
        sorted([Value.floating(1.0), Value.floating(math.nan)])


def test_get_returns_first_matching_member() -> None:
    config = Value.set_of(
        [
            KeyValuePair("name", Value.string("first")),
            KeyValuePair(None, Value.integer(0)),
            KeyValuePair("name", Value.string("second")),
        ]
    )

    assert config.get("name") == Value.string("first")
    assert config.get("missing") is None
    assert Value.integer(3).get("name", Value.null()) == Value.null()


def test_to_native_numbers_unkeyed_members_like_php() -> None:
    pairs = [
        KeyValuePair(None, Value.string("a")),
        KeyValuePair("k", Value.integer(1)),
        KeyValuePair(None, Value.set_of([KeyValuePair(None, Value.boolean(True))])),
    ]

    assert pairs_to_native(pairs) == {0: "a", "k": 1, 1: [True]}


def test_from_native_builds_tree() -> None:
    pairs = pairs_from_native({"debug": False, "hosts": ["a", "b"], "port": 80, "ratio": 0.5, "x": None})

    assert pairs == [
        KeyValuePair("debug", Value.boolean(False)),
        KeyValuePair(
            "hosts",
            Value.set_of([KeyValuePair(None, Value.string("a")), KeyValuePair(None, Value.string("b"))]),
        ),
        KeyValuePair("port", Value.integer(80)),
        KeyValuePair("ratio", Value.floating(0.5)),
        KeyValuePair("x", Value.null()),
    ]
    assert pairs_to_native(pairs) == {"debug": False, "hosts": ["a", "b"], "port": 80, "ratio": 0.5, "x": None}


def test_integers_are_limited_to_64_bits() -> None:
    assert Value.integer(2**63 - 1).data == 2**63 - 1
    assert Value.integer(-(2**63)).data == -(2**63)
    with pytest.raises(ValueError):
        Value.integer(2**63)
    with pytest.raises(ValueError):
        Value.from_native({"big": -(2**63) - 1})


def test_from_native_rejects_unsupported_data() -> None:
    with pytest.raises(TypeError):
        Value.from_native({1, 2})
    with pytest.raises(TypeError):
        pairs_from_native({1: "one"})
