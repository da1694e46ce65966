from __future__ import annotations

import io
import logging
import os
import struct
from enum import IntEnum
from typing import BinaryIO, Callable

from dissect.bplist.exceptions import (
    MalformedFormatError,
    TextEncodingError,
    UnexpectedEndOfInputError,
    UnsupportedObjectError,
)
from dissect.bplist.stream import read_exact, seek, size, tell, unpack_uints
from dissect.bplist.trailer import (
    BPLIST_MAGIC,
    HEADER_SIZE,
    TRAILER_SIZE,
    ReferenceTable,
    Trailer,
)
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
)

log = logging.getLogger(__name__)

# Maximum nesting of arrays and dictionaries before decoding is aborted
BPLIST_MAX_DEPTH = int(os.getenv("DISSECT_BPLIST_MAX_DEPTH", 128))


class Marker(IntEnum):
    """Object type, stored in the high nibble of an object's marker byte."""

    SINGLETON = 0x0
    INT = 0x1
    REAL = 0x2
    DATE = 0x3
    DATA = 0x4
    ASCII_STRING = 0x5
    UTF16_STRING = 0x6
    UID = 0x8
    ARRAY = 0xA
    SET = 0xC
    DICT = 0xD


# Low nibble of a marker, signals that the length is stored in a following integer object
ESCAPE_LENGTH = 0xF

SINGLETONS = {
    0x0: Null(),
    0x8: Bool(False),
    0x9: Bool(True),
    0xF: Filler(),
}

REAL_FORMATS = {
    4: struct.Struct(">f"),
    8: struct.Struct(">d"),
}


class BinaryPlist:
    """Decoder for ``bplist00`` binary property lists.

    The header, trailer and offset table are read when the object is created. Objects are decoded on demand by
    following references through the offset table, every decoded object is kept so it is only decoded once.

    Args:
        fh: A seekable file-like object containing the binary plist at offset 0.
        max_depth: Maximum nesting depth of arrays and dictionaries.

    Raises:
        MalformedFormatError: If the magic or trailer is invalid.
        UnexpectedEndOfInputError: If the file is too small.
    """

    def __init__(self, fh: BinaryIO, max_depth: int = BPLIST_MAX_DEPTH):
        self.fh = fh
        self.max_depth = max_depth

        seek(fh, 0)
        try:
            magic = read_exact(fh, HEADER_SIZE)
        except UnexpectedEndOfInputError as e:
            raise MalformedFormatError("File is too small to be a binary plist") from e

        if magic != BPLIST_MAGIC:
            raise MalformedFormatError(f"Invalid binary plist magic: {magic!r}")

        self.file_size = size(fh)
        seek(fh, max(HEADER_SIZE, self.file_size - TRAILER_SIZE))
        self.trailer = Trailer.read(fh)
        self.trailer.validate(self.file_size)
        log.debug("Binary plist of %d bytes: %r", self.file_size, self.trailer)

        self.table = ReferenceTable.read(fh, self.trailer)
        self.table.validate(self.trailer)

        self._cache: dict[int, Value] = {}
        self._decoding: set[int] = set()
        self._readers: dict[Marker, Callable[[int], Value]] = {
            Marker.SINGLETON: self._read_singleton,
            Marker.INT: self._read_int,
            Marker.REAL: self._read_real,
            Marker.DATE: self._read_date,
            Marker.DATA: self._read_data,
            Marker.ASCII_STRING: self._read_ascii_string,
            Marker.UTF16_STRING: self._read_utf16_string,
            Marker.UID: self._read_uid,
            Marker.ARRAY: self._read_array,
            Marker.SET: self._read_set,
            Marker.DICT: self._read_dict,
        }

    def __repr__(self) -> str:
        return f"<BinaryPlist objects={self.trailer.num_objects} root={self.trailer.root_index}>"

    def root(self) -> Value:
        """Decode and return the top level object."""
        return self.read_object(self.trailer.root_index)

    def read_object(self, index: int) -> Value:
        """Decode the object with the given index in the offset table.

        Raises:
            ReferenceNotFoundError: If ``index`` is not in the offset table.
            MalformedFormatError: If the object refers to one of its ancestors or is nested too deep.
        """
        if index in self._cache:
            return self._cache[index]

        if index in self._decoding:
            raise MalformedFormatError(f"Reference cycle detected at object {index}")

        if len(self._decoding) >= self.max_depth:
            raise MalformedFormatError(f"Maximum nesting depth of {self.max_depth} exceeded at object {index}")

        offset = self.table[index]

        self._decoding.add(index)
        try:
            seek(self.fh, offset)
            value = self._read_value()
        finally:
            self._decoding.discard(index)

        self._cache[index] = value
        return value

    def _read_value(self) -> Value:
        """Decode the object at the current position."""
        marker = read_exact(self.fh, 1)[0]

        try:
            object_type = Marker(marker >> 4)
        except ValueError:
            raise MalformedFormatError(f"Unknown object marker: {marker:#04x}") from None

        return self._readers[object_type](marker & 0xF)

    def _read(self, length: int) -> bytes:
        """Read ``length`` bytes, failing early if the file cannot contain that many bytes anymore."""
        remaining = self.file_size - tell(self.fh)
        if length > remaining:
            raise UnexpectedEndOfInputError(f"Attempted to read {length} bytes, but only {remaining} bytes remain")
        return read_exact(self.fh, length)

    def _read_refs(self, count: int) -> tuple[int, ...]:
        ref_size = self.trailer.ref_size
        return unpack_uints(self._read(count * ref_size), ref_size)

    def _read_length(self, low: int) -> int:
        if low != ESCAPE_LENGTH:
            return low

        marker = read_exact(self.fh, 1)[0]
        if marker >> 4 != Marker.INT:
            raise MalformedFormatError(f"Expected an integer object for the length, got marker {marker:#04x}")

        length = self._read_int(marker & 0xF).value
        if length < 0:
            raise MalformedFormatError(f"Invalid negative length: {length}")
        return length

    def _read_singleton(self, low: int) -> Value:
        if low not in SINGLETONS:
            raise MalformedFormatError(f"Invalid singleton marker: {low:#04x}")
        return SINGLETONS[low]

    def _read_int(self, low: int) -> Int:
        if low > 4:
            raise MalformedFormatError(f"Invalid integer width: {1 << low} bytes")

        # 1, 2 and 4 byte integers are unsigned, 8 and 16 byte integers are signed.
        # 16 byte integers are not truncated, so the result can exceed the signed 64-bit range.
        width = 1 << low
        return Int(int.from_bytes(read_exact(self.fh, width), "big", signed=width >= 8))

    def _read_real(self, low: int) -> Real:
        width = 1 << low
        if width not in REAL_FORMATS:
            raise MalformedFormatError(f"Invalid real width: {width} bytes")

        fmt = REAL_FORMATS[width]
        return Real(fmt.unpack(read_exact(self.fh, fmt.size))[0])

    def _read_date(self, low: int) -> Value:
        raise UnsupportedObjectError("Date objects are not supported")

    def _read_data(self, low: int) -> Data:
        return Data(self._read(self._read_length(low)))

    def _read_ascii_string(self, low: int) -> Str:
        return Str(decode_utf8(self._read(self._read_length(low))))

    def _read_utf16_string(self, low: int) -> Str:
        # The length is the number of UTF-16 code units
        return Str(decode_utf16(self._read(self._read_length(low) * 2)))

    def _read_uid(self, low: int) -> UID:
        return UID(read_exact(self.fh, low + 1))

    def _read_array(self, low: int) -> Array:
        length = self._read_length(low)
        refs = self._read_refs(length)
        return Array([self.read_object(ref) for ref in refs])

    def _read_set(self, low: int) -> Value:
        raise UnsupportedObjectError("Set objects are not supported")

    def _read_dict(self, low: int) -> Dict:
        length = self._read_length(low)
        key_refs = self._read_refs(length)
        value_refs = self._read_refs(length)
        return Dict([(self.read_object(key), self.read_object(value)) for key, value in zip(key_refs, value_refs)])


def decode_utf8(buf: bytes) -> str:
    try:
        return buf.decode("utf-8")
    except UnicodeDecodeError as e:
        raise TextEncodingError(f"Invalid UTF-8 string: {e}") from e


def decode_utf16(buf: bytes) -> str:
    """Decode big-endian UTF-16 code units, surrogate pairs included."""
    if len(buf) % 2:
        raise TextEncodingError(f"UTF-16 string has an odd number of bytes: {len(buf)}")

    try:
        return buf.decode("utf-16-be")
    except UnicodeDecodeError as e:
        raise TextEncodingError(f"Invalid UTF-16 string: {e}") from e


def load(fh: BinaryIO, max_depth: int = BPLIST_MAX_DEPTH) -> Value:
    """Decode the binary plist in ``fh`` and return its top level object.

    Args:
        fh: A seekable file-like object.
        max_depth: Maximum nesting depth of arrays and dictionaries.
    """
    return BinaryPlist(fh, max_depth).root()


def loads(data: bytes, max_depth: int = BPLIST_MAX_DEPTH) -> Value:
    """Decode a binary plist from bytes and return its top level object."""
    return load(io.BytesIO(data), max_depth)
