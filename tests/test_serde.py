import pytest

from proxywasm.serde import (
    decode_string,
    deserialize_map,
    serialize_map,
    serialize_property_path,
)

MAP_CASES = [
    (
        [("a", "A")],
        bytes.fromhex("01000000 01000000 01000000") + b"a\0A\0",
    ),
    (
        [("a", "A"), ("b", "B")],
        bytes.fromhex("02000000 01000000 01000000 01000000 01000000")
        + b"a\0A\0b\0B\0",
    ),
    (
        [("a", "ABCDEFG"), ("@AB", "<1234")],
        bytes.fromhex("02000000 01000000 07000000 03000000 05000000")
        + b"a\0ABCDEFG\0@AB\0<1234\0",
    ),
]


@pytest.mark.parametrize("pairs, data", MAP_CASES)
def test_deserialize_map(pairs, data):
    assert deserialize_map(data) == pairs


@pytest.mark.parametrize("pairs, data", MAP_CASES)
def test_serialize_map(pairs, data):
    assert serialize_map(pairs) == data


@pytest.mark.parametrize(
    "path, expected",
    [
        (["path", "to", "a"], b"path\0to\0a"),
        (["a", "b"], b"a\0b"),
        ([], b""),
    ],
)
def test_serialize_property_path(path, expected):
    assert serialize_property_path(path) == expected


def test_decode_string():
    assert decode_string(b"abcd") == "abcd"


def test_decode_string_none_is_empty():
    assert decode_string(None) == ""


def test_map_round_trip_with_empty_and_unicode():
    pairs = [("", ""), ("x-ünï", "värde"), (":path", "/")]
    assert deserialize_map(serialize_map(pairs)) == pairs


def test_empty_map_round_trip():
    data = serialize_map([])
    assert deserialize_map(data) == []
    assert len(data) == 4


def test_truncated_size_table_raises():
    with pytest.raises(ValueError):
        deserialize_map(bytes.fromhex("02000000 01000000"))


def test_truncated_data_raises():
    data = serialize_map([("key", "value")])
    with pytest.raises(ValueError):
        deserialize_map(data[:-4])