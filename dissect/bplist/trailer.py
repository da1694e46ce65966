from __future__ import annotations

import logging
import struct
from typing import BinaryIO, NamedTuple

from dissect.bplist.exceptions import MalformedFormatError, ReferenceNotFoundError
from dissect.bplist.stream import read_exact, read_uints, seek

log = logging.getLogger(__name__)

BPLIST_MAGIC = b"bplist00"
HEADER_SIZE = len(BPLIST_MAGIC)
TRAILER_SIZE = 32


class Trailer(NamedTuple):
    """Binary plist trailer, found in the last 32 bytes of the file.

    This is equivalent to the following structure::

        typedef struct {
            uint8_t     _unused[5];
            uint8_t     _sortVersion;
            uint8_t     offsetIntSize;
            uint8_t     objectRefSize;
            uint64_t    numObjects;
            uint64_t    topObject;
            uint64_t    offsetTableOffset;
        } CFBinaryPlistTrailer;
    """

    __struct__ = struct.Struct(">6xBBQQQ")

    offset_size: int  # Width of an offset table entry
    ref_size: int  # Width of an object reference in arrays and dicts
    num_objects: int
    root_index: int
    offset_table_offset: int

    @classmethod
    def read(cls, fh: BinaryIO) -> Trailer:
        """Read a trailer from the current position of ``fh``."""
        return cls(*cls.__struct__.unpack(read_exact(fh, cls.__struct__.size)))

    def validate(self, file_size: int) -> None:
        """Check that the trailer describes a table that fits in a file of ``file_size`` bytes."""
        if not 1 <= self.offset_size <= 8:
            raise MalformedFormatError(f"Invalid offset table entry width: {self.offset_size}")

        if not 1 <= self.ref_size <= 8:
            raise MalformedFormatError(f"Invalid object reference width: {self.ref_size}")

        table_end = self.offset_table_offset + self.num_objects * self.offset_size
        if self.offset_table_offset < HEADER_SIZE or table_end > file_size - TRAILER_SIZE:
            raise MalformedFormatError(
                f"Offset table at {self.offset_table_offset:#x} with {self.num_objects} entries "
                f"does not fit in a file of {file_size} bytes"
            )

        if self.root_index >= self.num_objects:
            raise MalformedFormatError(f"Root object index {self.root_index} exceeds object count {self.num_objects}")


class ReferenceTable:
    """Lookup from object index to the absolute offset of that object's encoding.

    Args:
        offsets: The offset of every object, in object index order.
    """

    def __init__(self, offsets: tuple[int, ...]):
        self.offsets = offsets

    @classmethod
    def read(cls, fh: BinaryIO, trailer: Trailer) -> ReferenceTable:
        """Read the offset table described by ``trailer`` from ``fh``."""
        seek(fh, trailer.offset_table_offset)
        offsets = read_uints(fh, trailer.num_objects, trailer.offset_size)
        log.debug("Read %d offsets from offset table at %#x", len(offsets), trailer.offset_table_offset)
        return cls(offsets)

    def validate(self, trailer: Trailer) -> None:
        """Check that every offset points into the object table, between the header and the offset table."""
        for index, offset in enumerate(self.offsets):
            if not HEADER_SIZE <= offset < trailer.offset_table_offset:
                raise MalformedFormatError(f"Offset {offset:#x} of object {index} is outside of the object table")

    def __len__(self) -> int:
        return len(self.offsets)

    def __getitem__(self, index: int) -> int:
        if not 0 <= index < len(self.offsets):
            raise ReferenceNotFoundError(f"Object reference {index} is outside of the offset table")
        return self.offsets[index]

    def __repr__(self) -> str:
        return f"<ReferenceTable objects={len(self.offsets)}>"
