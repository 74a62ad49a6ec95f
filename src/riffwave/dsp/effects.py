"""Effects on normalized sample arrays.

Every function takes and returns a 1-D float64 array of channel-averaged
samples, as produced by :func:`riffwave.io.load_samples`. None of them clip:
values pushed past [-1, 1] are left for the encoder to handle.
"""

import numpy as np
from numpy.typing import NDArray

from riffwave.types import EchoSettings, GainSettings, SampleArray


def faster(samples: NDArray[np.floating]) -> SampleArray:
    """Double the speed by keeping every other sample.

    Args:
        samples: Input samples.

    Returns:
        ``len(samples) // 2`` samples taken from the even indices.
    """
    samples = np.asarray(samples, dtype=np.float64)
    return samples[: (len(samples) // 2) * 2 : 2].copy()


def slower(samples: NDArray[np.floating]) -> SampleArray:
    """Halve the speed by repeating each sample once."""
    return np.repeat(np.asarray(samples, dtype=np.float64), 2)


def echo(
    samples: NDArray[np.floating],
    delay: int = EchoSettings.delay,
    intensity: float = EchoSettings.intensity,
) -> SampleArray:
    """Add a single delayed, attenuated copy of the signal.

    The output is ``delay`` samples longer than the input. Where the original
    and the echo overlap, the two are averaged; before the echo starts the
    original passes through, and after the original ends only the echo
    remains.

    Args:
        samples: Input samples.
        delay: Echo delay in samples.
        intensity: Gain applied to the delayed copy.

    Returns:
        Array of ``len(samples) + delay`` samples.
    """
    if delay < 0:
        raise ValueError(f"delay must be >= 0, got {delay}")

    samples = np.asarray(samples, dtype=np.float64)
    n = len(samples)
    result = np.zeros(n + delay, dtype=np.float64)

    # Before the echo starts
    head = min(delay, n)
    result[:head] = samples[:head]

    # Original and echo overlap
    if n > delay:
        result[delay:n] = (samples[delay:n] + intensity * samples[: n - delay]) / 2

    # Only the echo remains
    tail_start = max(delay, n)
    result[tail_start:] = intensity * samples[tail_start - delay : n]

    return result


def amplify(samples: NDArray[np.floating], factor: float) -> SampleArray:
    """Scale every sample by ``factor``."""
    return np.asarray(samples, dtype=np.float64) * factor


def louder(
    samples: NDArray[np.floating], factor: float = GainSettings.louder
) -> SampleArray:
    return amplify(samples, factor)


def quieter(
    samples: NDArray[np.floating], factor: float = GainSettings.quieter
) -> SampleArray:
    return amplify(samples, factor)


def reverse(samples: NDArray[np.floating]) -> SampleArray:
    return np.asarray(samples, dtype=np.float64)[::-1].copy()


def mix(first: NDArray[np.floating], second: NDArray[np.floating]) -> SampleArray:
    """Average two signals, looping the shorter one.

    The result is as long as the longer input. If both are the same length
    no looping takes place; if either is empty the other is returned.

    Args:
        first: First signal.
        second: Second signal.

    Returns:
        Mixed signal.
    """
    first = np.asarray(first, dtype=np.float64)
    second = np.asarray(second, dtype=np.float64)

    if len(first) > len(second):
        longest, shortest = first, second
    else:
        longest, shortest = second, first

    if len(shortest) == 0:
        return longest.copy()

    looped = np.resize(shortest, len(longest))
    return (longest + looped) / 2
