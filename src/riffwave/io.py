"""Whole-file sample access.

These three functions are all the effects and the command line need from
the container: decode a file to normalized doubles, count its samples
cheaply, and write doubles back out as a mono file.
"""

import logging
from pathlib import Path

import numpy as np
from numpy.typing import NDArray

from riffwave.format.chunks import FmtChunk
from riffwave.format.riff import FormatMismatchError, WaveOpenError
from riffwave.format.validation import validate_format
from riffwave.format.wave import WaveFile

logger = logging.getLogger(__name__)


def load_samples(path: Path | str) -> NDArray[np.float64]:
    """Read a WAV file as one normalized double per sample slice.

    Args:
        path: Path to the WAV file.

    Returns:
        Array of ``sample_count`` values in [-1, 1], channels averaged.

    Raises:
        WaveOpenError: If the file cannot be opened.
        FormatMismatchError: If the file is not a WAVE file.
    """
    wave = WaveFile()
    wave.load(path)
    return wave.samples()


def sample_count(path: Path | str) -> int:
    """Number of samples :func:`load_samples` would return, without decoding.

    A missing file has zero samples.
    """
    wave = WaveFile()
    try:
        wave.load_metadata(path)
    except WaveOpenError:
        return 0
    return wave.sample_count


def save_samples(
    path: Path | str,
    samples: NDArray[np.floating] | list[float],
    count: int | None = None,
) -> None:
    """Write normalized doubles to a mono WAV file.

    If ``path`` already holds a WAV file, its sample rate, bit depth,
    compression code and extra chunks are kept; only the channel count is
    forced to 1 and the audio is replaced.

    Args:
        path: Output file path, created or overwritten.
        samples: Values in [-1, 1].
        count: Number of leading samples to write (default: all of them).

    Raises:
        ValueError: If ``count`` exceeds the number of samples given.
        WaveOpenError: If the file cannot be written.
    """
    path = Path(path)
    values = np.asarray(samples, dtype=np.float64).reshape(-1)
    if count is None:
        count = len(values)
    elif not 0 <= count <= len(values):
        raise ValueError(f"count ({count}) must be between 0 and {len(values)}")

    wave = WaveFile()
    try:
        wave.load_metadata(path)
    except WaveOpenError:
        pass  # New file, keep the defaults
    except FormatMismatchError:
        logger.warning("%s is not a WAV file; it will be overwritten", path)

    # A mono file holds the same information as the channel average
    wave.fmt_chunk.channels = 1

    result = validate_format(wave.fmt_chunk)
    if not result.valid:
        logger.warning(
            "Existing format of %s can't hold PCM samples (%s); using defaults",
            path,
            "; ".join(result.errors),
        )
        wave.fmt_chunk = FmtChunk(sample_rate=wave.fmt_chunk.sample_rate)

    wave.resize(count)
    wave.set_samples(values[:count])
    wave.save(path)
