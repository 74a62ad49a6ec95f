"""RIFF/WAVE container module.

This module reads and writes uncompressed PCM WAVE files and exposes their
samples as normalized doubles.

Format Overview
---------------
Every integer is little-endian. Each chunk payload is padded to an even
length with a zero byte that its size field does not count.

    +----------------------------------------+
    | RIFF chunk  "RIFF" | size | "WAVE"     |
    +----------------------------------------+
    | fmt  chunk  "fmt " | 16                |
    |   compression, channels, sample_rate,  |
    |   bytes_per_sec, block_align,          |
    |   bits_per_sample                      |
    +----------------------------------------+
    | other chunks (kept verbatim, in order) |
    +----------------------------------------+
    | data chunk  "data" | size | samples    |
    +----------------------------------------+

Example Usage
-------------
>>> from riffwave.format import WaveFile
>>> wave = WaveFile()
>>> report = wave.load("input.wav")
>>> first = wave.get_sample(0)
>>> wave.save("copy.wav")
"""

from riffwave.format.chunks import DataChunk, FmtChunk, RiffChunk
from riffwave.format.riff import (
    CHUNK_TYPE_DATA,
    CHUNK_TYPE_FMT,
    CHUNK_TYPE_RIFF,
    RIFF_TYPE_WAVE,
    WAVE_FORMAT_PCM,
    FormatMismatchError,
    RiffError,
    TruncatedStreamError,
    UnsupportedFormatError,
    WaveOpenError,
    fourcc_to_type,
)
from riffwave.format.validation import LoadReport, ValidationResult, validate_format
from riffwave.format.wave import WaveFile

__all__ = [
    # Container
    "WaveFile",
    "LoadReport",
    # Chunks
    "RiffChunk",
    "FmtChunk",
    "DataChunk",
    "fourcc_to_type",
    # Constants
    "CHUNK_TYPE_RIFF",
    "CHUNK_TYPE_FMT",
    "CHUNK_TYPE_DATA",
    "RIFF_TYPE_WAVE",
    "WAVE_FORMAT_PCM",
    # Errors
    "RiffError",
    "WaveOpenError",
    "FormatMismatchError",
    "TruncatedStreamError",
    "UnsupportedFormatError",
    # Validation
    "validate_format",
    "ValidationResult",
]
