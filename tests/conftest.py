from __future__ import annotations

import struct
from typing import Callable

import pytest


def _build_bplist(objects: list[bytes], root: int = 0, offset_size: int = 1, ref_size: int = 1) -> bytes:
    """Assemble a binary plist from already encoded objects, object ``i`` gets index ``i``."""
    buf = bytearray(b"bplist00")

    offsets = []
    for obj in objects:
        offsets.append(len(buf))
        buf += obj

    offset_table_offset = len(buf)
    for offset in offsets:
        buf += offset.to_bytes(offset_size, "big")

    buf += struct.pack(">6xBBQQQ", offset_size, ref_size, len(objects), root, offset_table_offset)
    return bytes(buf)


@pytest.fixture
def build_bplist() -> Callable[..., bytes]:
    return _build_bplist
