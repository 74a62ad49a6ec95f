"""PCM sample codec.

Converts between the integer samples stored in a data chunk and normalized
doubles in [-1, 1]. One double stands for a whole sample slice: every
channel's value is averaged on decode, and on encode a single value is
written to every channel slot.

Channel values are little-endian. One-byte samples are unsigned (the 8-bit
PCM convention); wider samples are two's complement and are shifted into
offset-binary before averaging, so the normalization is

    (average / max_unsigned_value(width)) * 2 - 1

Channel values are summed as unsigned 64-bit integers. That sum wraps for
64-bit samples with more than one channel and the wrapped value is what gets
averaged.

Supported widths: 1 through 8 bytes per channel.
"""

import math

import numpy as np
from numpy.typing import NDArray

from riffwave.format.riff import UnsupportedFormatError

MAX_BYTES_PER_CHANNEL = 8
_U64_MASK = (1 << 64) - 1


def max_unsigned_value(width: int) -> int:
    """Largest unsigned value that fits in ``width`` bytes (0xFF repeated)."""
    return (1 << (8 * width)) - 1


def max_signed_value(width: int) -> int:
    """``max_unsigned_value(width)`` with the sign bit cleared."""
    return max_unsigned_value(width) >> 1


def check_width(width: int) -> None:
    """Raise if ``width`` bytes per channel cannot be encoded or decoded."""
    if not 1 <= width <= MAX_BYTES_PER_CHANNEL:
        raise UnsupportedFormatError(
            f"Unsupported sample width: {width} bytes per channel "
            f"(supported: 1-{MAX_BYTES_PER_CHANNEL})"
        )


def flip_sign_offset(value: int, width: int) -> int:
    """Move between two's complement and offset-binary for a ``width``-byte value.

    The transform is its own inverse.
    """
    max_signed = max_signed_value(width)
    if value > max_signed:
        return value - (max_signed + 1)
    return value + (max_signed + 1)


def decode_slice(segment: bytes | bytearray | memoryview, channels: int, width: int) -> float:
    """Decode one sample slice to a normalized double.

    Args:
        segment: At least ``channels * width`` bytes, channel-interleaved.
        channels: Number of channels in the slice.
        width: Bytes per channel value.

    Returns:
        The channel average mapped onto [-1, 1].
    """
    check_width(width)
    if channels == 0:
        return 0.0
    is_signed = width != 1

    total = 0
    for i in range(channels):
        value = int.from_bytes(segment[i * width : (i + 1) * width], "little")
        if is_signed:
            value = flip_sign_offset(value, width)
        total = (total + value) & _U64_MASK

    average = float(total) / channels
    return (average / max_unsigned_value(width)) * 2.0 - 1.0


def encode_value(value: float, width: int) -> bytes:
    """Encode a normalized double as one ``width``-byte channel value.

    Values in [-1, 1] map onto the full integer range. Values outside it are
    truncated and reduced modulo ``2 ** (8 * width)``, so they wrap rather
    than clip. Non-finite values encode as 0.0.
    """
    check_width(width)
    if not math.isfinite(value):
        value = 0.0

    limit = max_unsigned_value(width)
    scaled = int((value + 1.0) / 2.0 * limit)
    if -1.0 <= value <= 1.0:
        # float rounding can overshoot the 64-bit maximum
        scaled = min(scaled, limit)
    scaled &= limit

    if width != 1:
        scaled = flip_sign_offset(scaled, width)
    return scaled.to_bytes(width, "little")


def encode_slice(value: float, channels: int, width: int) -> bytes:
    """Encode ``value`` into every channel slot of one sample slice."""
    return encode_value(value, width) * channels


def _frame_matrix(
    data: bytes | bytearray,
    channels: int,
    width: int,
    count: int,
    stride: int,
) -> NDArray[np.uint8]:
    """Lay ``count`` slices out as rows of ``channels * width`` bytes.

    Slice ``i`` starts at ``i * stride``. When ``stride`` is shorter than a
    full slice the missing channel bytes read as zero, as in
    :func:`decode_slice`; bytes past ``channels * width`` are ignored.
    """
    frame_size = channels * width
    span = min(stride, frame_size)
    raw = np.frombuffer(data, dtype=np.uint8, count=count * stride).reshape(count, stride)
    if span == frame_size:
        return raw[:, :frame_size]
    frames = np.zeros((count, frame_size), dtype=np.uint8)
    frames[:, :span] = raw[:, :span]
    return frames


def decode_frames(
    data: bytes | bytearray,
    channels: int,
    width: int,
    count: int,
    stride: int | None = None,
) -> NDArray[np.float64]:
    """Decode ``count`` sample slices at once.

    Produces the same values as calling :func:`decode_slice` on each
    ``stride``-byte slice.

    Args:
        data: Interleaved sample bytes; at least ``count * stride``.
        channels: Channels per slice.
        width: Bytes per channel value.
        count: Number of slices to decode.
        stride: Distance between slice starts, the fmt chunk's
            ``block_align``. Defaults to ``channels * width``.

    Returns:
        Array of ``count`` normalized doubles.
    """
    check_width(width)
    if count == 0 or channels == 0:
        return np.zeros(count, dtype=np.float64)
    if stride is None:
        stride = channels * width

    raw = _frame_matrix(data, channels, width, count, stride).reshape(count, channels, width)

    values = np.zeros((count, channels), dtype=np.uint64)
    for j in range(width):
        values |= raw[:, :, j].astype(np.uint64) << np.uint64(8 * j)

    if width != 1:
        # Adding or subtracting 2**(bits-1) modulo 2**bits flips the top bit
        values ^= np.uint64(1 << (8 * width - 1))

    total = values.sum(axis=1, dtype=np.uint64)
    average = total.astype(np.float64) / channels
    return (average / float(max_unsigned_value(width))) * 2.0 - 1.0


def encode_frames(
    samples: NDArray[np.floating] | list[float],
    channels: int,
    width: int,
) -> bytes:
    """Encode normalized doubles into interleaved sample bytes.

    Produces the same bytes as calling :func:`encode_slice` on each value.
    """
    check_width(width)
    values = np.asarray(samples, dtype=np.float64).reshape(-1)
    values = np.where(np.isfinite(values), values, 0.0)

    if width > 4:
        # int64 arithmetic below is exact only up to 32-bit slots
        return b"".join(encode_slice(float(v), channels, width) for v in values)

    limit = max_unsigned_value(width)
    scaled = np.trunc((values + 1.0) / 2.0 * limit)
    in_range = (values >= -1.0) & (values <= 1.0)
    scaled = np.where(in_range, np.minimum(scaled, limit), scaled)
    # fmod is exact and keeps the value congruent modulo 2**bits
    scaled = np.fmod(scaled, float(1 << (8 * width)))
    ints = scaled.astype(np.int64) & limit

    if width != 1:
        ints ^= 1 << (8 * width - 1)

    slots = ints.astype("<u8").view(np.uint8).reshape(-1, 8)[:, :width]
    frames = np.tile(slots, (1, channels))
    return np.ascontiguousarray(frames).tobytes()


def write_frames(
    buffer: bytearray,
    samples: NDArray[np.floating] | list[float],
    channels: int,
    width: int,
    stride: int,
) -> None:
    """Encode ``samples`` into ``buffer`` with slice ``i`` at ``i * stride``.

    Only the first ``min(stride, channels * width)`` bytes of each slice are
    written, so bytes between slices are left alone and a short ``stride``
    never spills into the next slice.

    Raises:
        ValueError: If ``buffer`` cannot hold ``len(samples) * stride`` bytes.
    """
    values = np.asarray(samples, dtype=np.float64).reshape(-1)
    count = len(values)
    if count == 0 or channels == 0:
        return
    if count * stride > len(buffer):
        raise ValueError(f"{count} slices of {stride} bytes do not fit in {len(buffer)} bytes")

    frame_size = channels * width
    span = min(stride, frame_size)
    encoded = np.frombuffer(encode_frames(values, channels, width), dtype=np.uint8)
    target = np.frombuffer(buffer, dtype=np.uint8, count=count * stride).reshape(count, stride)
    target[:, :span] = encoded.reshape(count, frame_size)[:, :span]
