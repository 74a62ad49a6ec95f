"""WAVE container.

:class:`WaveFile` owns the RIFF header, the fmt chunk, the data chunk and an
ordered list of every other chunk found in the file. Unknown chunks are
written back unchanged, between the fmt and data chunks.

Example:
    >>> wave = WaveFile()
    >>> wave.fmt_chunk.channels = 1
    >>> wave.fmt_chunk.bits_per_sample = 16
    >>> wave.resize(10000)
    >>> for i in range(wave.sample_count):
    ...     wave.set_sample(i, 0.0)
    >>> wave.save("silence.wav")
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, BinaryIO

import numpy as np
from numpy.typing import NDArray

from riffwave.format.byteorder import read_u32
from riffwave.format.chunks import DataChunk, FmtChunk, RiffChunk
from riffwave.format.pcm import (
    decode_frames,
    decode_slice,
    encode_slice,
    write_frames,
)
from riffwave.format.riff import (
    CHUNK_TYPE_DATA,
    CHUNK_TYPE_FMT,
    CHUNK_TYPE_RIFF,
    FormatMismatchError,
    RiffError,
    TruncatedStreamError,
    WaveOpenError,
    describe_chunk_type,
)
from riffwave.format.validation import LoadReport

logger = logging.getLogger(__name__)


@dataclass
class WaveFile:
    """An in-memory WAVE file."""

    riff_chunk: RiffChunk = field(default_factory=RiffChunk)
    fmt_chunk: FmtChunk = field(default_factory=FmtChunk)
    data_chunk: DataChunk = field(default_factory=DataChunk)
    other_chunks: list[DataChunk] = field(default_factory=list)
    """Chunks that are not RIFF, fmt or data, in file order."""

    @property
    def bytes_per_sample(self) -> int:
        """Bytes in one sample slice, all channels included."""
        return self.fmt_chunk.block_align

    @property
    def sample_count(self) -> int:
        """Number of sample slices in the data chunk."""
        if not self.data_chunk.chunk_size or not self.bytes_per_sample:
            return 0
        if not self.fmt_chunk.channels:
            return 0
        return self.data_chunk.chunk_size // self.bytes_per_sample

    def load(self, path: Path | str) -> LoadReport:
        """Load every chunk of a WAVE file, audio payload included.

        Args:
            path: Path to the WAV file.

        Returns:
            LoadReport listing non-fatal problems.

        Raises:
            WaveOpenError: If the file cannot be opened.
            FormatMismatchError: If the file is not RIFF/WAVE. The container
                is left in its default state.
        """
        path = Path(path)
        try:
            f = open(path, "rb")
        except OSError as e:
            logger.error("Can't open %s: %s", path, e.strerror or e)
            self._reset()
            raise WaveOpenError(f"Cannot open file: {path}") from e

        with f:
            return self._load(f, path, load_data=True)

    def load_metadata(self, path: Path | str) -> LoadReport:
        """Load the header chunks, stepping over the audio payload.

        ``sample_count`` is valid afterwards but sample values are not. A
        missing file is an expected outcome here and is not logged.

        Raises:
            WaveOpenError: If the file cannot be opened.
            FormatMismatchError: If the file is not RIFF/WAVE.
        """
        path = Path(path)
        try:
            f = open(path, "rb")
        except OSError as e:
            self._reset()
            raise WaveOpenError(f"Cannot open file: {path}") from e

        with f:
            return self._load(f, path, load_data=False)

    def save(self, path: Path | str) -> None:
        """Write the container, replacing any existing file.

        Derived header fields are recomputed first.

        Raises:
            WaveOpenError: If the file cannot be opened for writing.
            RiffError: If the data payload was never loaded. The target
                file is not touched.
        """
        path = Path(path)
        self._require_payload()
        try:
            f = open(path, "wb")
        except OSError as e:
            logger.error("Can't open %s for writing: %s", path, e.strerror or e)
            raise WaveOpenError(f"Cannot open file for writing: {path}") from e

        with f:
            self.update_riff_size()
            self.update_fmt_values()

            self.riff_chunk.write_to(f)
            self.fmt_chunk.write_to(f)
            for chunk in self.other_chunks:
                chunk.write_to(f)
            self.data_chunk.write_to(f)

        logger.debug("Saved %s (%d samples)", path, self.sample_count)

    def resize(self, new_sample_count: int) -> None:
        """Reallocate the data chunk for ``new_sample_count`` sample slices.

        The fmt derived fields are recomputed first, so the new size follows
        the current channel count and bit depth. Existing samples are
        discarded.
        """
        self.update_fmt_values()
        self.data_chunk.reallocate(new_sample_count * self.bytes_per_sample)

    def _in_range(self, offset: int) -> bool:
        # A skipped payload holds no sample values
        return self.data_chunk.is_loaded and 0 <= offset < self.sample_count

    def get_sample(self, offset: int) -> float:
        """Normalized value of one sample slice.

        Returns 0.0 if ``offset`` is out of range or the payload was skipped
        by :meth:`load_metadata`.
        """
        if not self._in_range(offset):
            return 0.0
        start = offset * self.bytes_per_sample
        segment = memoryview(self.data_chunk.data)[start : start + self.bytes_per_sample]
        return decode_slice(segment, self.fmt_chunk.channels, self.fmt_chunk.bytes_per_channel)

    def set_sample(self, offset: int, value: float) -> None:
        """Write ``value`` to every channel of one sample slice.

        Does nothing if ``offset`` is out of range or the payload was skipped.
        Only the slice's own ``block_align`` bytes are written.
        """
        if not self._in_range(offset):
            return
        start = offset * self.bytes_per_sample
        encoded = encode_slice(value, self.fmt_chunk.channels, self.fmt_chunk.bytes_per_channel)
        encoded = encoded[: self.bytes_per_sample]
        self.data_chunk.data[start : start + len(encoded)] = encoded

    def samples(self) -> NDArray[np.float64]:
        """Decode every sample slice at once.

        Raises:
            RiffError: If the payload was skipped by :meth:`load_metadata`.
        """
        self._require_payload()
        return decode_frames(
            self.data_chunk.data,
            self.fmt_chunk.channels,
            self.fmt_chunk.bytes_per_channel,
            self.sample_count,
            stride=self.bytes_per_sample,
        )

    def set_samples(self, values: NDArray[np.floating] | list[float]) -> None:
        """Overwrite the first ``len(values)`` sample slices.

        Values past ``sample_count`` are ignored, matching :meth:`set_sample`.

        Raises:
            RiffError: If the payload was skipped by :meth:`load_metadata`.
        """
        self._require_payload()
        values = np.asarray(values, dtype=np.float64).reshape(-1)[: self.sample_count]
        write_frames(
            self.data_chunk.data,
            values,
            self.fmt_chunk.channels,
            self.fmt_chunk.bytes_per_channel,
            self.bytes_per_sample,
        )

    def update_riff_size(self) -> None:
        """Recompute the RIFF size from every chunk that will be written."""
        total = 4  # The RIFF type
        total += self.fmt_chunk.disk_size()
        total += self.data_chunk.disk_size()
        total += sum(chunk.disk_size() for chunk in self.other_chunks)
        self.riff_chunk.chunk_size = total

    def update_fmt_values(self) -> None:
        self.fmt_chunk.update_derived()

    def copy(self) -> "WaveFile":
        """Return an independent copy; payload buffers are not shared."""
        return WaveFile(
            riff_chunk=RiffChunk(**vars(self.riff_chunk)),
            fmt_chunk=FmtChunk(**vars(self.fmt_chunk)),
            data_chunk=self.data_chunk.copy(),
            other_chunks=[chunk.copy() for chunk in self.other_chunks],
        )

    def info(self) -> dict[str, Any]:
        """Header fields, for display."""
        return {
            "file_size": self.riff_chunk.chunk_size + 8,
            "compression": self.fmt_chunk.compression,
            "channels": self.fmt_chunk.channels,
            "sample_rate": self.fmt_chunk.sample_rate,
            "bytes_per_sec": self.fmt_chunk.bytes_per_sec,
            "block_align": self.fmt_chunk.block_align,
            "bits_per_sample": self.fmt_chunk.bits_per_sample,
            "data_size": self.data_chunk.chunk_size,
            "sample_count": self.sample_count,
            "other_chunks": [describe_chunk_type(c.chunk_type) for c in self.other_chunks],
        }

    def _require_payload(self) -> None:
        for chunk in [self.data_chunk, *self.other_chunks]:
            if not chunk.is_loaded:
                raise RiffError(
                    f"{describe_chunk_type(chunk.chunk_type)!r} chunk payload was not loaded; "
                    "use load() rather than load_metadata()"
                )

    def _reset(self) -> None:
        self.riff_chunk = RiffChunk()
        self.fmt_chunk = FmtChunk()
        self.data_chunk = DataChunk()
        self.other_chunks = []

    def _load(self, f: BinaryIO, path: Path, load_data: bool) -> LoadReport:
        """Shared body of :meth:`load` and :meth:`load_metadata`.

        Chunks are parsed into a scratch container and only adopted once the
        RIFF header has been accepted.
        """
        report = LoadReport(path=path, data_loaded=load_data)
        loaded = WaveFile()

        try:
            chunk_type = read_u32(f)
            if chunk_type != CHUNK_TYPE_RIFF:
                raise FormatMismatchError(
                    f"first chunk is {describe_chunk_type(chunk_type)!r}, not 'RIFF'"
                )
            loaded.riff_chunk.read_from(f)
        except (FormatMismatchError, TruncatedStreamError) as e:
            logger.error("%s doesn't appear to be a WAV file: %s", path, e)
            self._reset()
            if isinstance(e, FormatMismatchError):
                raise
            raise FormatMismatchError(f"{path} doesn't appear to be a WAV file") from e

        while True:
            tag = f.read(4)
            # End of file, or a stray partial tag after the last chunk
            if len(tag) < 4:
                break
            chunk_type = int.from_bytes(tag, "little")

            try:
                if chunk_type == CHUNK_TYPE_FMT:
                    loaded.fmt_chunk.read_from(f, report)
                elif chunk_type == CHUNK_TYPE_DATA:
                    if load_data:
                        loaded.data_chunk.read_from(f, report)
                    else:
                        loaded.data_chunk.skip(f)
                else:
                    chunk = DataChunk(chunk_type)
                    chunk.read_from(f, report)
                    loaded.other_chunks.append(chunk)
            except TruncatedStreamError:
                report.warn(
                    f"file ends inside the header of a {describe_chunk_type(chunk_type)!r} chunk"
                )
                break
            except RiffError as e:
                logger.error("Can't load %s: %s", path, e)
                self._reset()
                raise

        self.riff_chunk = loaded.riff_chunk
        self.fmt_chunk = loaded.fmt_chunk
        self.data_chunk = loaded.data_chunk
        self.other_chunks = loaded.other_chunks

        logger.debug(
            "Loaded %s: %d channels, %d Hz, %d bits, %d samples, %d other chunks",
            path,
            self.fmt_chunk.channels,
            self.fmt_chunk.sample_rate,
            self.fmt_chunk.bits_per_sample,
            self.sample_count,
            len(self.other_chunks),
        )
        return report
