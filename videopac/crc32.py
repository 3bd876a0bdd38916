"""CRC-32 checksums used to identify cartridge and BIOS images."""

from __future__ import annotations

import os
import zlib
from typing import Union

_CHUNK_SIZE = 64 * 1024

PathLike = Union[str, bytes, "os.PathLike[str]", "os.PathLike[bytes]"]


def crc32_bytes(data: bytes | bytearray | memoryview) -> int:
    """Return the CRC-32 (IEEE 802.3, reflected) of ``data`` as an unsigned int."""
    return zlib.crc32(data) & 0xFFFFFFFF


def crc32_file(filename: PathLike) -> int:
    """Return the CRC-32 of a file's contents.

    A file that cannot be opened yields 0, the same value an empty file gives.
    """
    crc = 0
    try:
        with open(filename, "rb") as stream:
            for chunk in iter(lambda: stream.read(_CHUNK_SIZE), b""):
                crc = zlib.crc32(chunk, crc)
    except OSError:
        return 0
    return crc & 0xFFFFFFFF