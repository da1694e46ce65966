from __future__ import annotations

import pytest

from dissect.bplist.exceptions import NotFoundError
from dissect.bplist.value import (
    UID,
    Array,
    Bool,
    Data,
    Dict,
    Filler,
    Int,
    Null,
    Real,
    Str,
    Value,
    as_value,
    get,
    geti,
    gets,
    pformat,
)


@pytest.mark.parametrize(
    ("left", "right", "equal"),
    [
        (Null(), Null(), True),
        (Filler(), Filler(), True),
        (Null(), Filler(), False),
        (Bool(True), Bool(True), True),
        (Bool(True), Bool(False), False),
        (Bool(True), Int(1), False),
        (Int(1337), Int(1337), True),
        (Int(1337), Int(1338), False),
        (Data(b"\x01\x02"), Data(b"\x01\x02"), True),
        (Data(b"\x01\x02"), UID(b"\x01\x02"), False),
        (Str("NS.string"), Str("NS.string"), True),
        (Str("NS.string"), Str("NS.bytes"), False),
        (Str("1"), Int(1), False),
        (UID(b"\x12"), UID(b"\x12"), True),
        (UID(b"\x12"), UID(b"\x00\x12"), False),
        (Real(1.5), Real(1.5), False),
        (Array([]), Array([]), False),
        (Dict([]), Dict([]), False),
    ],
)
def test_value_equality(left: Value, right: Value, equal: bool) -> None:
    assert (left == right) is equal
    assert (right == left) is equal


@pytest.mark.parametrize("value", [Real(0.0), Real(float("nan")), Array([Int(1)]), Dict([(Str("a"), Int(1))])])
def test_value_never_equal_to_itself(value: Value) -> None:
    assert not value == value  # noqa: PLR0124, SIM201

    with pytest.raises(TypeError):
        hash(value)


def test_value_hashable_scalars() -> None:
    assert len({Null(), Null(), Int(1), Int(1), Str("a"), Str("a"), Bool(True)}) == 4


def test_value_as_value() -> None:
    assert as_value("key") == Str("key")
    assert as_value(5) == Int(5)
    assert as_value(True) == Bool(True)
    assert as_value(b"\x00") == Data(b"\x00")

    uid = UID(b"\x01")
    assert as_value(uid) is uid

    with pytest.raises(TypeError, match="Unsupported key type: float"):
        as_value(1.0)


def test_value_uid_index() -> None:
    assert UID(b"\x12").index == 18
    assert UID(b"\x01\x00").index == 256


def test_dict_lookup() -> None:
    obj = Dict(
        [
            (Str("$class"), UID(b"\x12")),
            (Int(1), Str("one")),
            (Str("dup"), Int(1)),
            (Str("dup"), Int(2)),
            (Null(), Str("null")),
        ]
    )

    assert gets(obj, "$class") == UID(b"\x12")
    assert geti(obj, 1) == Str("one")
    assert get(obj, Null()) == Str("null")
    assert get(obj, "dup") == Int(1)

    assert obj["$class"] == UID(b"\x12")
    assert obj[1] == Str("one")
    assert obj.get("missing") is None
    assert obj.get("missing", Int(0)) == Int(0)
    assert "dup" in obj
    assert "missing" not in obj

    assert len(obj) == 5
    assert list(obj)[:2] == [Str("$class"), Int(1)]
    assert obj.values()[2:4] == [Int(1), Int(2)]


def test_dict_lookup_not_found() -> None:
    obj = Dict([(Str("key"), Int(1))])

    with pytest.raises(NotFoundError, match="Key not found: Str\\('missing'\\)"):
        gets(obj, "missing")

    with pytest.raises(NotFoundError):
        geti(obj, 1)

    with pytest.raises(NotFoundError):
        obj["missing"]


@pytest.mark.parametrize("key", [Real(1.5), Array([]), Dict([])])
def test_dict_lookup_unequal_keys(key: Value) -> None:
    obj = Dict([(key, Str("unreachable"))])

    assert obj.get(key) is None
    assert key not in obj
    with pytest.raises(NotFoundError):
        get(obj, key)


@pytest.mark.parametrize("value", [Array([Str("key")]), Str("key"), Null()])
def test_lookup_not_a_dict(value: Value) -> None:
    with pytest.raises(NotFoundError, match="Cannot look up"):
        gets(value, "key")


def test_array() -> None:
    obj = Array([Int(1), Str("two")])

    assert len(obj) == 2
    assert obj[1] == Str("two")
    assert list(obj) == obj.items


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (Null(), "null"),
        (Filler(), "filler"),
        (Bool(True), "true"),
        (Bool(False), "false"),
        (Int(-5), "-5"),
        (Real(1.5), "1.5"),
        (Str("abc"), '"abc"'),
        (Str('a"b\n'), '"a\\"b\\n"'),
        (Str("é"), '"é"'),
        (Data(b"\x01\x02\xff"), "[ 1 2 255 ]"),
        (Data(b""), "[ ]"),
        (UID(b"\x12"), "[ 18 ]"),
        (Array([]), "[\n]"),
    ],
)
def test_pformat_scalar(value: Value, expected: str) -> None:
    assert pformat(value) == expected
    assert str(value) == expected


def test_pformat_nested() -> None:
    obj = Dict(
        [
            (Str("$objects"), Array([Str("$null"), Data(b"\x01\x02"), Dict([(Int(1), Bool(False))])])),
            (Str("$version"), Int(100000)),
        ]
    )

    assert pformat(obj) == "\n".join(
        [
            "{",
            '  "$objects" -> [',
            '    "$null",',
            "    [ 1 2 ],",
            "    {",
            "      1 -> false,",
            "    },",
            "  ],",
            '  "$version" -> 100000,',
            "}",
        ]
    )


def test_pformat_depth() -> None:
    assert pformat(Array([Int(1)]), depth=2) == "[\n      1,\n    ]"


def test_value_repr() -> None:
    assert repr(Null()) == "Null()"
    assert repr(Int(1)) == "Int(1)"
    assert repr(Array([Str("a")])) == "Array([Str('a')])"
    assert repr(Dict([(Str("a"), Filler())])) == "Dict([(Str('a'), Filler())])"
