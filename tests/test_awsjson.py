from __future__ import annotations

import json
from decimal import Decimal

import pytest

from aws_lite.codecs.awsjson import (
    is_typed_value,
    marshall,
    marshall_value,
    unmarshall,
    unmarshall_value,
)
from aws_lite.errors import MarshallError


def test_marshall_attribute_map_scalars() -> None:
    encoded = marshall({"name": "x", "count": 3, "ratio": 1.5, "on": True, "gone": None})

    assert encoded == {
        "name": {"S": "x"},
        "count": {"N": "3"},
        "ratio": {"N": "1.5"},
        "on": {"BOOL": True},
        "gone": {"NULL": True},
    }


def test_bool_is_not_encoded_as_number() -> None:
    assert marshall_value(False) == {"BOOL": False}
    assert marshall_value(0) == {"N": "0"}


def test_nested_map_and_list() -> None:
    encoded = marshall_value({"tags": ["a", 1], "meta": {"deep": {"x": None}}})

    assert encoded == {
        "M": {
            "tags": {"L": [{"S": "a"}, {"N": "1"}]},
            "meta": {"M": {"deep": {"M": {"x": {"NULL": True}}}}},
        }
    }


def test_round_trip_preserves_values() -> None:
    item = {
        "id": "abc",
        "n": 42,
        "f": 2.25,
        "flag": False,
        "nothing": None,
        "blob": b"\x00\x01",
        "list": [1, "two", {"three": 3}],
        "strings": {"a", "b"},
        "numbers": {1, 2},
    }

    assert unmarshall(marshall(item)) == item


def test_binary_is_base64() -> None:
    assert marshall_value(b"hi") == {"B": "aGk="}
    assert unmarshall_value({"B": "aGk="}) == b"hi"


def test_sets_are_sorted_and_typed() -> None:
    assert marshall_value({"b", "a"}) == {"SS": ["a", "b"]}
    assert marshall_value(frozenset({3, 1})) == {"NS": ["1", "3"]}
    assert marshall_value({b"b", b"a"}) == {"BS": ["YQ==", "Yg=="]}


def test_lists_never_become_sets() -> None:
    assert marshall_value(["a", "b"]) == {"L": [{"S": "a"}, {"S": "b"}]}


def test_empty_set_rejected() -> None:
    with pytest.raises(MarshallError, match="Empty sets"):
        marshall_value(set())


def test_mixed_set_rejected() -> None:
    with pytest.raises(MarshallError):
        marshall_value({"a", 1})


def test_decimal_and_non_finite() -> None:
    assert marshall_value(Decimal("10.50")) == {"N": "10.50"}
    with pytest.raises(MarshallError, match="non-finite"):
        marshall_value(float("nan"))


def test_floats_travel_as_shortest_decimal_text() -> None:
    assert marshall_value(0.1) == {"N": "0.1"}
    assert marshall_value({1.5, 2}) == {"NS": ["1.5", "2"]}
    assert marshall_value([1e-7]) == {"L": [{"N": "1E-7"}]}


def test_number_beyond_38_digits_rejected() -> None:
    with pytest.raises(MarshallError, match="at 'big'"):
        marshall({"big": Decimal("1." + "1" * 40)})
    with pytest.raises(MarshallError):
        unmarshall_value({"N": "1." + "1" * 40})


def test_decimal_nan_rejected() -> None:
    with pytest.raises(MarshallError):
        marshall_value(Decimal("NaN"))


def test_unsupported_type_reports_path() -> None:
    with pytest.raises(MarshallError, match="at 'outer.inner'"):
        marshall({"outer": {"inner": object()}})


def test_depth_limit() -> None:
    value: object = "leaf"
    for _ in range(40):
        value = [value]
    with pytest.raises(MarshallError, match="nested too deeply"):
        marshall_value(value)


def test_number_decoding() -> None:
    assert unmarshall_value({"N": "12"}) == 12
    assert isinstance(unmarshall_value({"N": "12"}), int)
    assert unmarshall_value({"N": "-0.5"}) == -0.5
    assert unmarshall_value({"N": "1e3"}) == 1000.0
    assert isinstance(unmarshall_value({"N": "1.0"}), float)
    assert unmarshall_value({"NS": ["2", "0.5"]}) == {2, 0.5}
    with pytest.raises(MarshallError, match="Invalid number"):
        unmarshall_value({"N": "twelve"})


def test_selector_encodes_only_named_fields() -> None:
    payload = {"Item": {"name": "x"}, "Table": "t", "Key": None}

    encoded = marshall(payload, ["Item", "Key"])

    assert encoded == {"Item": {"name": {"S": "x"}}, "Table": "t", "Key": None}
    assert payload["Item"] == {"name": "x"}


def test_selector_false_is_identity() -> None:
    payload = {"Item": {"name": "x"}}
    assert marshall(payload, False) is payload
    assert marshall(payload, None) is payload


def test_selector_requires_mapping() -> None:
    with pytest.raises(MarshallError, match="mapping payload"):
        marshall(["a"], ["Item"])


def test_selector_scenario_serializes_to_expected_json() -> None:
    encoded = marshall({"Item": {"name": "x"}, "Table": "t"}, ["Item"])

    assert json.loads(json.dumps(encoded)) == {"Item": {"name": {"S": "x"}}, "Table": "t"}


def test_unmarshall_single_typed_value() -> None:
    assert unmarshall({"S": "x"}) == "x"
    assert unmarshall({"L": [{"N": "1"}]}) == [1]


def test_unmarshall_prefers_attribute_map() -> None:
    # {"S": {"S": "x"}} is an attribute named "S", not a string attribute
    assert unmarshall({"S": {"S": "x"}}) == {"S": "x"}


def test_unmarshall_rejects_plain_values() -> None:
    with pytest.raises(MarshallError):
        unmarshall({"name": "x"})
    with pytest.raises(MarshallError):
        unmarshall("x")


def test_invalid_base64() -> None:
    with pytest.raises(MarshallError, match="base64"):
        unmarshall_value({"B": "not base64!"})


def test_is_typed_value() -> None:
    assert is_typed_value({"BOOL": True})
    assert not is_typed_value({"BOOL": "true"})
    assert not is_typed_value({"S": "a", "N": "1"})
    assert not is_typed_value({"X": "a"})
