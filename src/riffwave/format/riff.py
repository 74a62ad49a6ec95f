"""RIFF/WAVE constants and errors.

Chunk tags are kept as the unsigned 32-bit integers produced by reading the
four ASCII characters little-endian, so ``"RIFF"`` becomes ``0x46464952``.
"""

import struct
from collections.abc import Sequence

# FourCC identifiers, as little-endian u32
CHUNK_TYPE_RIFF = 0x46464952
CHUNK_TYPE_FMT = 0x20746D66
CHUNK_TYPE_DATA = 0x61746164
RIFF_TYPE_WAVE = 0x45564157

# Audio format codes
WAVE_FORMAT_PCM = 1
COMPRESSION_NONE = WAVE_FORMAT_PCM

# Default chunk sizes
DEFAULT_CHUNK_SIZE_FMT = 16
DEFAULT_CHUNK_SIZE_DATA = 0
# The default file size minus 8
DEFAULT_CHUNK_SIZE_RIFF = 4 + 8 + DEFAULT_CHUNK_SIZE_FMT + 8 + DEFAULT_CHUNK_SIZE_DATA

CHUNK_HEADER_SIZE = 8


class RiffError(Exception):
    """Error reading or writing RIFF files."""


class WaveOpenError(RiffError):
    """The file could not be opened for reading or writing."""


class FormatMismatchError(RiffError):
    """The file is not a RIFF/WAVE file."""


class TruncatedStreamError(RiffError):
    """The stream ended in the middle of a chunk header or field."""


class UnsupportedFormatError(RiffError):
    """The sample layout cannot be represented by the sample codec."""


def fourcc(chunk_type: int) -> bytes:
    """Return the four raw tag bytes for a u32 chunk type."""
    return chunk_type.to_bytes(4, "little")


def fourcc_to_type(tag: bytes | str) -> int:
    """Convert a four character tag such as ``b"LIST"`` to its u32 chunk type."""
    if isinstance(tag, str):
        tag = tag.encode("ascii")
    if len(tag) != 4:
        raise ValueError(f"Chunk tag must be exactly 4 bytes, got {tag!r}")
    return int.from_bytes(tag, "little")


def describe_chunk_type(chunk_type: int) -> str:
    """Printable form of a chunk tag for log and error messages."""
    return fourcc(chunk_type).decode("latin-1")


def padded_size(size: int) -> int:
    """Size on disk of a payload of ``size`` bytes after word alignment."""
    return size + (size % 2)


def build_chunk(tag: bytes, payload: bytes) -> bytes:
    """Serialize one chunk: tag, size, payload and pad byte if needed."""
    chunk = tag + struct.pack("<I", len(payload)) + payload
    if len(payload) % 2:
        chunk += b"\x00"
    return chunk


def build_wav(
    samples: bytes,
    sample_rate: int = 22050,
    num_channels: int = 1,
    bits_per_sample: int = 16,
    *,
    audio_format: int = WAVE_FORMAT_PCM,
    extra_chunks: Sequence[tuple[bytes, bytes]] = (),
    data_first: bool = False,
) -> bytes:
    """Build a complete WAV file in memory.

    Args:
        samples: Raw interleaved sample data, already encoded.
        sample_rate: The sample rate in Hz.
        num_channels: Number of audio channels.
        bits_per_sample: Bits per channel value.
        audio_format: Format code written to the fmt chunk.
        extra_chunks: ``(tag, payload)`` pairs written after the fmt chunk.
        data_first: Write the data chunk before the extra chunks.

    Returns:
        The complete WAV file as bytes.
    """
    bytes_per_sample = bits_per_sample // 8
    byte_rate = sample_rate * num_channels * bytes_per_sample
    block_align = num_channels * bytes_per_sample

    fmt_chunk = struct.pack(
        "<HHIIHH",
        audio_format,
        num_channels,
        sample_rate,
        byte_rate,
        block_align,
        bits_per_sample,
    )

    body = bytearray(b"WAVE")
    body.extend(build_chunk(b"fmt ", fmt_chunk))
    extras = b"".join(build_chunk(tag, payload) for tag, payload in extra_chunks)
    data = build_chunk(b"data", samples)
    if data_first:
        body.extend(data + extras)
    else:
        body.extend(extras + data)

    # RIFF size = file size - 8 (RIFF header)
    return b"RIFF" + struct.pack("<I", len(body)) + bytes(body)
