"""riffwave - RIFF/WAVE codec with normalized sample access.

This package reads and writes uncompressed PCM WAV files, exposes each
multi-channel sample as a single double in [-1, 1], and ships a handful of
effects that work on those doubles.

Example Usage
-------------
>>> from riffwave import load_samples, save_samples, sample_count
>>> from riffwave.dsp.effects import reverse
>>>
>>> n = sample_count("input.wav")  # reads headers only
>>> samples = load_samples("input.wav")
>>> save_samples("reversed.wav", reverse(samples))
"""

# Re-export format module for convenience
from riffwave.format import (
    DataChunk,
    FmtChunk,
    FormatMismatchError,
    LoadReport,
    RiffChunk,
    RiffError,
    UnsupportedFormatError,
    WaveFile,
    WaveOpenError,
)
from riffwave.io import load_samples, sample_count, save_samples

__all__ = [
    # Container
    "WaveFile",
    "LoadReport",
    "RiffChunk",
    "FmtChunk",
    "DataChunk",
    # Errors
    "RiffError",
    "WaveOpenError",
    "FormatMismatchError",
    "UnsupportedFormatError",
    # Sample access
    "load_samples",
    "sample_count",
    "save_samples",
]
