"""Unit tests for the RIFF chunk variants."""

import io
import struct

import pytest

from riffwave.format.chunks import DataChunk, FmtChunk, RiffChunk
from riffwave.format.riff import (
    CHUNK_TYPE_DATA,
    CHUNK_TYPE_FMT,
    CHUNK_TYPE_RIFF,
    RIFF_TYPE_WAVE,
    FormatMismatchError,
    RiffError,
    fourcc_to_type,
)
from riffwave.format.validation import LoadReport


def fmt_body(
    compression: int = 1,
    channels: int = 2,
    sample_rate: int = 44100,
    bits_per_sample: int = 16,
    size: int = 16,
    extension: bytes = b"",
) -> bytes:
    block_align = channels * bits_per_sample // 8
    return (
        struct.pack("<I", size)
        + struct.pack(
            "<HHIIHH",
            compression,
            channels,
            sample_rate,
            sample_rate * block_align,
            block_align,
            bits_per_sample,
        )
        + extension
    )


class TestRiffChunk:
    """Tests for the outer RIFF header."""

    def test_defaults(self) -> None:
        chunk = RiffChunk()
        assert chunk.chunk_type == CHUNK_TYPE_RIFF
        assert chunk.riff_type == RIFF_TYPE_WAVE
        # Header-only file: WAVE + fmt chunk + empty data chunk
        assert chunk.chunk_size == 36

    def test_read_from(self) -> None:
        chunk = RiffChunk()
        chunk.read_from(io.BytesIO(struct.pack("<I", 1000) + b"WAVE"))
        assert chunk.chunk_size == 1000
        assert chunk.riff_type == RIFF_TYPE_WAVE

    def test_read_rejects_other_riff_types(self) -> None:
        chunk = RiffChunk()
        with pytest.raises(FormatMismatchError, match="AVI"):
            chunk.read_from(io.BytesIO(struct.pack("<I", 1000) + b"AVI "))

    def test_write_to(self) -> None:
        stream = io.BytesIO()
        RiffChunk(chunk_size=44).write_to(stream)
        assert stream.getvalue() == b"RIFF" + struct.pack("<I", 44) + b"WAVE"


class TestFmtChunk:
    """Tests for the format descriptor chunk."""

    def test_defaults(self) -> None:
        fmt = FmtChunk()
        assert fmt.chunk_type == CHUNK_TYPE_FMT
        assert fmt.compression == 1
        assert fmt.channels == 1
        assert fmt.sample_rate == 22050
        assert fmt.bits_per_sample == 16
        assert fmt.block_align == 2
        assert fmt.bytes_per_sec == 44100

    def test_read_from(self) -> None:
        fmt = FmtChunk()
        report = LoadReport()
        stream = io.BytesIO(fmt_body(channels=2, sample_rate=48000, bits_per_sample=24))
        fmt.read_from(stream, report)

        assert fmt.channels == 2
        assert fmt.sample_rate == 48000
        assert fmt.bits_per_sample == 24
        assert fmt.block_align == 6
        assert fmt.bytes_per_sec == 288000
        assert fmt.bytes_per_channel == 3
        assert report.warnings == []
        assert stream.tell() == 20

    def test_compressed_format_warns_and_continues(self) -> None:
        fmt = FmtChunk()
        report = LoadReport()
        fmt.read_from(io.BytesIO(fmt_body(compression=3, bits_per_sample=32)), report)

        assert fmt.compression == 3
        assert fmt.bits_per_sample == 32
        assert len(report.warnings) == 1
        assert "compressed" in report.warnings[0]

    def test_extension_bytes_are_skipped(self) -> None:
        fmt = FmtChunk()
        report = LoadReport()
        stream = io.BytesIO(fmt_body(size=18, extension=b"\x00\x00") + b"next")
        fmt.read_from(stream, report)

        assert stream.read() == b"next"
        assert fmt.chunk_size == 16
        assert any("extension" in w for w in report.warnings)

    def test_too_small_is_rejected(self) -> None:
        with pytest.raises(FormatMismatchError, match="too small"):
            FmtChunk().read_from(io.BytesIO(fmt_body(size=14)))

    def test_update_derived(self) -> None:
        fmt = FmtChunk(channels=2, sample_rate=8000, bits_per_sample=8)
        fmt.update_derived()
        assert fmt.block_align == 2
        assert fmt.bytes_per_sec == 16000

    def test_write_to(self) -> None:
        fmt = FmtChunk(channels=2, sample_rate=44100, block_align=4, bytes_per_sec=176400)
        stream = io.BytesIO()
        fmt.write_to(stream)
        assert stream.getvalue() == b"fmt " + fmt_body(channels=2, sample_rate=44100)

    def test_write_always_uses_basic_size(self) -> None:
        fmt = FmtChunk(chunk_size=40)
        stream = io.BytesIO()
        fmt.write_to(stream)
        assert struct.unpack("<I", stream.getvalue()[4:8])[0] == 16
        assert fmt.disk_size() == 24


class TestDataChunk:
    """Tests for the raw payload chunk."""

    def test_defaults(self) -> None:
        chunk = DataChunk()
        assert chunk.chunk_type == CHUNK_TYPE_DATA
        assert chunk.chunk_size == 0
        assert chunk.data == bytearray()

    def test_read_even_payload(self) -> None:
        chunk = DataChunk()
        stream = io.BytesIO(struct.pack("<I", 4) + b"\x01\x02\x03\x04" + b"tail")
        chunk.read_from(stream)

        assert chunk.chunk_size == 4
        assert chunk.payload == b"\x01\x02\x03\x04"
        assert stream.read() == b"tail"

    def test_read_odd_payload_consumes_pad(self) -> None:
        chunk = DataChunk()
        stream = io.BytesIO(struct.pack("<I", 3) + b"abc\x00" + b"tail")
        chunk.read_from(stream)

        assert chunk.chunk_size == 3
        assert chunk.data == bytearray(b"abc\x00")
        assert chunk.payload == b"abc"
        assert stream.read() == b"tail"

    def test_read_truncated_payload_is_zero_filled(self) -> None:
        chunk = DataChunk()
        report = LoadReport()
        chunk.read_from(io.BytesIO(struct.pack("<I", 6) + b"\x07\x07"), report)

        assert chunk.chunk_size == 6
        assert chunk.data == bytearray(b"\x07\x07\x00\x00\x00\x00")
        assert len(report.warnings) == 1
        assert "zero-filled" in report.warnings[0]

    def test_missing_pad_byte_is_not_reported(self) -> None:
        chunk = DataChunk()
        report = LoadReport()
        chunk.read_from(io.BytesIO(struct.pack("<I", 3) + b"abc"), report)

        assert chunk.payload == b"abc"
        assert report.warnings == []

    def test_skip_advances_like_read(self) -> None:
        raw = struct.pack("<I", 5) + b"12345\x00" + b"tail"

        read_stream = io.BytesIO(raw)
        DataChunk().read_from(read_stream)

        skipped = DataChunk()
        skip_stream = io.BytesIO(raw)
        skipped.skip(skip_stream)

        assert skip_stream.tell() == read_stream.tell()
        assert skipped.chunk_size == 5
        assert skipped.data == bytearray()
        assert not skipped.is_loaded

    def test_reallocate_even(self) -> None:
        chunk = DataChunk.generic(fourcc_to_type(b"junk"), b"\xff\xff")
        chunk.reallocate(4)
        assert chunk.chunk_size == 4
        assert chunk.data == bytearray(4)

    def test_reallocate_odd_adds_zero_pad(self) -> None:
        chunk = DataChunk()
        chunk.reallocate(5)
        assert chunk.chunk_size == 5
        assert len(chunk.data) == 6
        assert chunk.data[-1] == 0
        assert chunk.disk_size() == 14

    def test_copy_is_independent(self) -> None:
        original = DataChunk.generic(fourcc_to_type(b"LIST"), b"INFO")
        duplicate = original.copy()
        duplicate.data[0] = ord("X")

        assert original.payload == b"INFO"
        assert duplicate.payload == b"XNFO"
        assert duplicate.chunk_type == original.chunk_type

    def test_write_odd_payload_with_pad(self) -> None:
        chunk = DataChunk.generic(fourcc_to_type("abcd"), b"xyz")
        stream = io.BytesIO()
        chunk.write_to(stream)
        assert stream.getvalue() == b"abcd" + struct.pack("<I", 3) + b"xyz\x00"

    def test_write_after_skip_raises(self) -> None:
        chunk = DataChunk()
        chunk.skip(io.BytesIO(struct.pack("<I", 4) + b"\x00" * 4))
        with pytest.raises(RiffError, match="not loaded"):
            chunk.write_to(io.BytesIO())


class TestFourcc:
    """Tests for tag conversion."""

    def test_known_tags(self) -> None:
        assert fourcc_to_type(b"RIFF") == CHUNK_TYPE_RIFF
        assert fourcc_to_type("fmt ") == CHUNK_TYPE_FMT
        assert fourcc_to_type(b"data") == CHUNK_TYPE_DATA
        assert fourcc_to_type(b"WAVE") == RIFF_TYPE_WAVE

    def test_wrong_length(self) -> None:
        with pytest.raises(ValueError):
            fourcc_to_type(b"LISTS")
