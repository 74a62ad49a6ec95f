"""RIFF chunk variants.

A WAVE file is a sequence of chunks, each a 4-byte tag followed by a 4-byte
payload size. Only three kinds are interpreted:

- ``RiffChunk``: the outer header identifying the file as RIFF/WAVE.
- ``FmtChunk``: how the samples in the data chunk are encoded.
- ``DataChunk``: an uninterpreted payload. This is both the audio ``data``
  chunk and the holder for every chunk type we do not recognize, so those
  can be written back byte for byte.

The caller reads the tag and picks the variant; ``read_from`` consumes the
rest of the chunk starting at its size field.
"""

from dataclasses import dataclass, field
from typing import BinaryIO, TypeAlias

from riffwave.format.byteorder import read_u16, read_u32, write_u16, write_u32
from riffwave.format.riff import (
    CHUNK_HEADER_SIZE,
    CHUNK_TYPE_DATA,
    CHUNK_TYPE_FMT,
    CHUNK_TYPE_RIFF,
    COMPRESSION_NONE,
    DEFAULT_CHUNK_SIZE_DATA,
    DEFAULT_CHUNK_SIZE_FMT,
    DEFAULT_CHUNK_SIZE_RIFF,
    RIFF_TYPE_WAVE,
    FormatMismatchError,
    RiffError,
    describe_chunk_type,
    padded_size,
)
from riffwave.format.validation import LoadReport

DEFAULT_COMPRESSION = COMPRESSION_NONE
DEFAULT_CHANNELS = 1
DEFAULT_SAMPLE_RATE = 22050
DEFAULT_BITS_PER_SAMPLE = 16
DEFAULT_BLOCK_ALIGN = (DEFAULT_BITS_PER_SAMPLE // 8) * DEFAULT_CHANNELS
DEFAULT_BYTES_PER_SEC = DEFAULT_SAMPLE_RATE * DEFAULT_BLOCK_ALIGN


@dataclass
class RiffChunk:
    """Outer RIFF header. ``chunk_size`` covers everything after the size field."""

    chunk_type: int = CHUNK_TYPE_RIFF
    chunk_size: int = DEFAULT_CHUNK_SIZE_RIFF
    riff_type: int = RIFF_TYPE_WAVE

    def read_from(self, stream: BinaryIO) -> None:
        """Read the size and RIFF type.

        Raises:
            FormatMismatchError: If the RIFF type is not ``WAVE``.
        """
        self.chunk_size = read_u32(stream)
        self.riff_type = read_u32(stream)
        if self.riff_type != RIFF_TYPE_WAVE:
            raise FormatMismatchError(
                f"RIFF type is {describe_chunk_type(self.riff_type)!r}, not 'WAVE'"
            )

    def write_to(self, stream: BinaryIO) -> None:
        write_u32(stream, self.chunk_type)
        write_u32(stream, self.chunk_size)
        write_u32(stream, self.riff_type)


@dataclass
class FmtChunk:
    """Sample encoding description."""

    chunk_type: int = CHUNK_TYPE_FMT
    chunk_size: int = DEFAULT_CHUNK_SIZE_FMT
    compression: int = DEFAULT_COMPRESSION
    channels: int = DEFAULT_CHANNELS
    sample_rate: int = DEFAULT_SAMPLE_RATE
    bytes_per_sec: int = DEFAULT_BYTES_PER_SEC
    block_align: int = DEFAULT_BLOCK_ALIGN
    bits_per_sample: int = DEFAULT_BITS_PER_SAMPLE

    @property
    def bytes_per_channel(self) -> int:
        """Width of one channel's value within a sample slice."""
        return self.bits_per_sample // 8

    def update_derived(self) -> None:
        """Recompute ``bytes_per_sec`` and ``block_align`` from the other fields."""
        self.block_align = self.channels * self.bytes_per_channel
        self.bytes_per_sec = self.sample_rate * self.block_align

    def disk_size(self) -> int:
        """Bytes this chunk occupies when written, header included."""
        return CHUNK_HEADER_SIZE + DEFAULT_CHUNK_SIZE_FMT

    def read_from(self, stream: BinaryIO, report: LoadReport | None = None) -> None:
        """Read the size and the six format fields.

        Extension bytes beyond the basic 16-byte layout are skipped. A
        compression code other than PCM is reported but does not stop the load.

        Raises:
            FormatMismatchError: If the declared size is below 16 bytes.
        """
        report = report if report is not None else LoadReport()

        self.chunk_size = read_u32(stream)
        if self.chunk_size < DEFAULT_CHUNK_SIZE_FMT:
            raise FormatMismatchError(f"fmt chunk too small ({self.chunk_size} bytes)")

        self.compression = read_u16(stream)
        self.channels = read_u16(stream)
        self.sample_rate = read_u32(stream)
        self.bytes_per_sec = read_u32(stream)
        self.block_align = read_u16(stream)
        self.bits_per_sample = read_u16(stream)

        extra = padded_size(self.chunk_size) - DEFAULT_CHUNK_SIZE_FMT
        if extra:
            stream.seek(extra, 1)
            report.warn(
                f"fmt chunk declares {self.chunk_size} bytes; "
                f"ignoring {self.chunk_size - DEFAULT_CHUNK_SIZE_FMT} extension bytes"
            )
            self.chunk_size = DEFAULT_CHUNK_SIZE_FMT

        if self.compression != COMPRESSION_NONE:
            report.warn(
                f"file appears to be compressed (format code {self.compression}); "
                "only uncompressed PCM can be decoded"
            )

    def write_to(self, stream: BinaryIO) -> None:
        self.chunk_size = DEFAULT_CHUNK_SIZE_FMT
        write_u32(stream, self.chunk_type)
        write_u32(stream, self.chunk_size)
        write_u16(stream, self.compression)
        write_u16(stream, self.channels)
        write_u32(stream, self.sample_rate)
        write_u32(stream, self.bytes_per_sec)
        write_u16(stream, self.block_align)
        write_u16(stream, self.bits_per_sample)


@dataclass
class DataChunk:
    """Raw chunk payload.

    ``data`` always holds ``chunk_size`` bytes plus a zero pad byte when
    ``chunk_size`` is odd, except after :meth:`skip`, which records the size
    without keeping the payload.
    """

    chunk_type: int = CHUNK_TYPE_DATA
    chunk_size: int = DEFAULT_CHUNK_SIZE_DATA
    data: bytearray = field(default_factory=bytearray, repr=False)

    @classmethod
    def generic(cls, chunk_type: int, payload: bytes) -> "DataChunk":
        """Build an arbitrary chunk holding ``payload``."""
        chunk = cls(chunk_type)
        chunk.reallocate(len(payload))
        chunk.data[: len(payload)] = payload
        return chunk

    @property
    def payload(self) -> bytes:
        """The payload without the alignment pad byte."""
        return bytes(self.data[: self.chunk_size])

    @property
    def is_loaded(self) -> bool:
        return len(self.data) == padded_size(self.chunk_size)

    def reallocate(self, length: int) -> None:
        """Replace the payload with ``length`` zero bytes (plus pad).

        Previous content is discarded; use :meth:`copy` to keep it.
        """
        self.chunk_size = length
        self.data = bytearray(padded_size(length))

    def copy(self) -> "DataChunk":
        """Return an independent chunk with the same tag, size and payload."""
        return DataChunk(self.chunk_type, self.chunk_size, bytearray(self.data))

    def disk_size(self) -> int:
        """Bytes this chunk occupies when written, header and pad included."""
        return CHUNK_HEADER_SIZE + padded_size(self.chunk_size)

    def read_from(self, stream: BinaryIO, report: LoadReport | None = None) -> None:
        """Read the size and the payload, consuming the pad byte if present.

        A payload cut short by end of file keeps the bytes that were present
        and zero-fills the rest.
        """
        report = report if report is not None else LoadReport()

        size = read_u32(stream)
        self.reallocate(size)
        raw = stream.read(len(self.data))
        self.data[: min(len(raw), size)] = raw[:size]

        if len(raw) < size:
            report.warn(
                f"{describe_chunk_type(self.chunk_type)!r} chunk declares {size} bytes "
                f"but only {len(raw)} are present; the rest is zero-filled"
            )

    def skip(self, stream: BinaryIO) -> None:
        """Read the size and step over the payload without storing it."""
        self.data = bytearray()
        self.chunk_size = read_u32(stream)
        stream.seek(padded_size(self.chunk_size), 1)

    def write_to(self, stream: BinaryIO) -> None:
        """Write header, payload and pad byte.

        Raises:
            RiffError: If the payload was skipped rather than loaded.
        """
        if not self.is_loaded:
            raise RiffError(
                f"{describe_chunk_type(self.chunk_type)!r} chunk payload was not loaded "
                f"({len(self.data)} bytes held, {padded_size(self.chunk_size)} expected)"
            )
        write_u32(stream, self.chunk_type)
        write_u32(stream, self.chunk_size)
        stream.write(self.data)


Chunk: TypeAlias = RiffChunk | FmtChunk | DataChunk
