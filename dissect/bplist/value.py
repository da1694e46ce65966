from __future__ import annotations

import json
from typing import Iterator, Union

from dissect.bplist.exceptions import NotFoundError

INDENT = "  "


class Value:
    """Base class for every decoded binary plist value.

    Equality is structural and only meant for dictionary key lookup. :class:`Real`, :class:`Array` and
    :class:`Dict` never compare equal to anything, not even to themselves. Values are not meant to be mutated
    after decoding.
    """

    __slots__ = ()

    def __eq__(self, other: object) -> bool:
        return False

    __hash__ = None

    def __str__(self) -> str:
        return pformat(self)


class _Singleton(Value):
    __slots__ = ()

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self)

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class Null(_Singleton):
    __slots__ = ()


class Filler(_Singleton):
    """Fill byte, carries no payload."""

    __slots__ = ()


class _Scalar(Value):
    __slots__ = ("value",)

    def __init__(self, value: bool | int | float | bytes | str):
        self.value = value

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self) and other.value == self.value

    def __hash__(self) -> int:
        return hash((type(self), self.value))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value!r})"


class Bool(_Scalar):
    __slots__ = ()
    value: bool


class Int(_Scalar):
    """Integer value.

    16 byte integers are decoded in full, so :attr:`value` is not guaranteed to fit in a signed 64-bit integer.
    """

    __slots__ = ()
    value: int


class Real(_Scalar):
    __slots__ = ()
    value: float

    def __eq__(self, other: object) -> bool:
        return False

    __hash__ = None


class Data(_Scalar):
    __slots__ = ()
    value: bytes


class Str(_Scalar):
    __slots__ = ()
    value: str


class UID(_Scalar):
    """Opaque object identifier, as used by ``NSKeyedArchiver``.

    The raw bytes are kept as-is, use :attr:`index` to interpret them as a big-endian integer.
    """

    __slots__ = ()
    value: bytes

    @property
    def index(self) -> int:
        return int.from_bytes(self.value, "big")


class Array(Value):
    __slots__ = ("items",)

    def __init__(self, items: list[Value]):
        self.items = items

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.items)

    def __getitem__(self, index: int) -> Value:
        return self.items[index]

    def __repr__(self) -> str:
        return f"Array({self.items!r})"


class Dict(Value):
    """Ordered list of key/value pairs.

    Keys are values themselves and not all of them are hashable, so this is an association list and lookups are a
    linear scan. Duplicate keys are kept, a lookup returns the first match.
    """

    __slots__ = ("pairs",)

    def __init__(self, pairs: list[tuple[Value, Value]]):
        self.pairs = pairs

    def __len__(self) -> int:
        return len(self.pairs)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.keys())

    def __contains__(self, key: KeyType) -> bool:
        try:
            self.lookup(as_value(key))
        except NotFoundError:
            return False
        return True

    def __getitem__(self, key: KeyType) -> Value:
        return self.lookup(as_value(key))

    def __repr__(self) -> str:
        return f"Dict({self.pairs!r})"

    def lookup(self, key: Value) -> Value:
        """Return the value of the first pair whose key is structurally equal to ``key``."""
        for candidate, value in self.pairs:
            if candidate == key:
                return value
        raise NotFoundError(f"Key not found: {key!r}")

    def get(self, key: KeyType, default: Value | None = None) -> Value | None:
        try:
            return self[key]
        except NotFoundError:
            return default

    def keys(self) -> list[Value]:
        return [key for key, _ in self.pairs]

    def values(self) -> list[Value]:
        return [value for _, value in self.pairs]

    def items(self) -> list[tuple[Value, Value]]:
        return list(self.pairs)


KeyType = Union[Value, str, int, bytes]


def as_value(key: KeyType) -> Value:
    """Wrap a native Python object into the matching :class:`Value` type."""
    if isinstance(key, Value):
        return key
    if isinstance(key, bool):
        return Bool(key)
    if isinstance(key, int):
        return Int(key)
    if isinstance(key, str):
        return Str(key)
    if isinstance(key, (bytes, bytearray)):
        return Data(bytes(key))
    raise TypeError(f"Unsupported key type: {type(key).__name__}")


def get(value: Value, key: KeyType) -> Value:
    """Look up ``key`` in ``value``, which must be a :class:`Dict`.

    Raises:
        NotFoundError: If ``value`` is not a dictionary or has no matching key.
    """
    if not isinstance(value, Dict):
        raise NotFoundError(f"Cannot look up {key!r} in {type(value).__name__}")
    return value.lookup(as_value(key))


def gets(value: Value, key: str) -> Value:
    return get(value, Str(key))


def geti(value: Value, key: int) -> Value:
    return get(value, Int(key))


def pformat(value: Value, depth: int = 0) -> str:
    """Render ``value`` as indented text, indenting nested lines relative to ``depth``.

    Example output::

        {
          "$version" -> 100000,
          "$objects" -> [
            "$null",
            [ 1 2 3 ],
          ],
        }
    """
    if isinstance(value, Array):
        lines = ["["]
        for item in value.items:
            lines.append(f"{INDENT * (depth + 1)}{pformat(item, depth + 1)},")
        lines.append(f"{INDENT * depth}]")
        return "\n".join(lines)

    if isinstance(value, Dict):
        lines = ["{"]
        for key, item in value.pairs:
            lines.append(f"{INDENT * (depth + 1)}{pformat(key, depth + 1)} -> {pformat(item, depth + 1)},")
        lines.append(f"{INDENT * depth}}}")
        return "\n".join(lines)

    if isinstance(value, Null):
        return "null"

    if isinstance(value, Filler):
        return "filler"

    if isinstance(value, Bool):
        return "true" if value.value else "false"

    if isinstance(value, (Int, Real)):
        return str(value.value)

    if isinstance(value, Str):
        return json.dumps(value.value, ensure_ascii=False)

    if isinstance(value, (Data, UID)):
        return "[ " + "".join(f"{byte} " for byte in value.value) + "]"

    raise TypeError(f"Not a binary plist value: {value!r}")
