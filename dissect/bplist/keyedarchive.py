from __future__ import annotations

from typing import Iterator

from dissect.bplist.exceptions import MalformedFormatError, NotFoundError
from dissect.bplist.value import UID, Array, Dict, Str, Value, gets

KEYED_ARCHIVE_KEYS = ("$version", "$archiver", "$top", "$objects")


def is_keyed_archive(root: Value) -> bool:
    """Return whether ``root`` looks like the top level dictionary of an ``NSKeyedArchiver`` plist."""
    return isinstance(root, Dict) and all(key in root for key in KEYED_ARCHIVE_KEYS)


def resolve(objects: Array, value: Value) -> Value:
    """Follow ``value`` into ``$objects`` if it is a :class:`UID`."""
    if not isinstance(value, UID):
        return value

    try:
        return objects[value.index]
    except IndexError as e:
        raise NotFoundError(f"UID {value.index} is outside of $objects") from e


def class_name(objects: Array, obj: Value) -> str | None:
    """Return the ``$classname`` of an archived object, or ``None`` if it has no class."""
    try:
        klass = resolve(objects, gets(obj, "$class"))
        name = gets(klass, "$classname")
    except NotFoundError:
        return None

    return name.value if isinstance(name, Str) else None


def iter_strings(root: Value, classname: str = "NSMutableString") -> Iterator[str]:
    """Yield the ``NS.string`` field of every archived object of class ``classname``.

    This is how the text of chat messages is stored in archived conversations, for example.

    Raises:
        MalformedFormatError: If ``root`` is not an ``NSKeyedArchiver`` plist.
    """
    if not is_keyed_archive(root):
        raise MalformedFormatError("File is not an NSKeyedArchiver plist")

    objects = gets(root, "$objects")
    if not isinstance(objects, Array):
        raise MalformedFormatError("$objects is not an array")

    for obj in objects:
        if class_name(objects, obj) != classname:
            continue

        text = resolve(objects, gets(obj, "NS.string"))
        if isinstance(text, Str):
            yield text.value
