from __future__ import annotations

import io
import struct
from typing import BinaryIO

from dissect.bplist.exceptions import IOFailureError, UnexpectedEndOfInputError

_UINT_FORMATS = {1: "B", 2: "H", 4: "I", 8: "Q"}


def read_exact(fh: BinaryIO, size: int) -> bytes:
    """Read exactly ``size`` bytes from ``fh``.

    Raises:
        UnexpectedEndOfInputError: If the file object returned fewer bytes than requested.
        IOFailureError: If the file object raised an ``OSError``.
    """
    try:
        buf = fh.read(size)
    except OSError as e:
        raise IOFailureError(f"Failed to read {size} bytes: {e}") from e

    if len(buf) != size:
        raise UnexpectedEndOfInputError(f"Attempted to read {size} bytes, but only got {len(buf)} bytes")
    return buf


def unpack_uints(buf: bytes, width: int) -> tuple[int, ...]:
    """Unpack ``buf`` as big-endian unsigned integers of ``width`` bytes each."""
    count = len(buf) // width

    if fmt := _UINT_FORMATS.get(width):
        return struct.unpack(f">{count}{fmt}", buf)
    return tuple(int.from_bytes(buf[i : i + width], "big") for i in range(0, len(buf), width))


def read_uints(fh: BinaryIO, count: int, width: int) -> tuple[int, ...]:
    """Read ``count`` big-endian unsigned integers of ``width`` bytes each."""
    return unpack_uints(read_exact(fh, count * width), width)


def tell(fh: BinaryIO) -> int:
    try:
        return fh.tell()
    except OSError as e:
        raise IOFailureError(f"Failed to get the current position: {e}") from e


def seek(fh: BinaryIO, offset: int, whence: int = io.SEEK_SET) -> int:
    """Seek ``fh`` and return the new absolute position, wrapping ``OSError``."""
    try:
        return fh.seek(offset, whence)
    except OSError as e:
        raise IOFailureError(f"Failed to seek to {offset}: {e}") from e


def size(fh: BinaryIO) -> int:
    """Return the total size of ``fh``. The position of ``fh`` is left at the end."""
    return seek(fh, 0, io.SEEK_END)
