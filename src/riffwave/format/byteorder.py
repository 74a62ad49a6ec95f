"""Little-endian integer codec for RIFF streams.

RIFF stores every integer least-significant byte first, so this module only
supports that byte order.
"""

import struct
from typing import BinaryIO

from riffwave.format.riff import TruncatedStreamError

_FORMATS = {1: "<B", 2: "<H", 4: "<I", 8: "<Q"}


def read_le(stream: BinaryIO, size: int) -> int:
    """Read an unsigned little-endian integer of ``size`` bytes.

    Args:
        stream: Binary stream positioned at the integer.
        size: Width in bytes (1, 2, 4 or 8).

    Returns:
        The unsigned value.

    Raises:
        TruncatedStreamError: If fewer than ``size`` bytes remain.
    """
    raw = stream.read(size)
    if len(raw) < size:
        raise TruncatedStreamError(f"Unexpected end of file reading {size}-byte integer")
    return struct.unpack(_FORMATS[size], raw)[0]


def write_le(stream: BinaryIO, value: int, size: int) -> None:
    """Write ``value`` as an unsigned little-endian integer of ``size`` bytes."""
    stream.write(struct.pack(_FORMATS[size], value))


def read_u16(stream: BinaryIO) -> int:
    return read_le(stream, 2)


def read_u32(stream: BinaryIO) -> int:
    return read_le(stream, 4)


def write_u16(stream: BinaryIO, value: int) -> None:
    write_le(stream, value, 2)


def write_u32(stream: BinaryIO, value: int) -> None:
    write_le(stream, value, 4)
