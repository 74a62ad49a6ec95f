"""Diagnostics for loaded WAVE files.

Problems that do not stop a load (an unsupported compression code, an
oversized fmt chunk, a data chunk cut short by end of file) are collected in
a :class:`LoadReport` and handed back to the caller instead of being printed.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from riffwave.format.riff import COMPRESSION_NONE

if TYPE_CHECKING:
    from riffwave.format.chunks import FmtChunk

logger = logging.getLogger(__name__)

# Widest channel slot the sample codec can hold in a u64
MAX_BYTES_PER_CHANNEL = 8


@dataclass
class ValidationResult:
    """Result of validation with optional warnings."""

    valid: bool
    errors: list[str]
    warnings: list[str]

    @classmethod
    def success(cls, warnings: list[str] | None = None) -> "ValidationResult":
        """Create a successful validation result."""
        return cls(valid=True, errors=[], warnings=warnings or [])

    @classmethod
    def failure(cls, errors: list[str], warnings: list[str] | None = None) -> "ValidationResult":
        """Create a failed validation result."""
        return cls(valid=False, errors=errors, warnings=warnings or [])


@dataclass
class LoadReport:
    """Outcome of a successful load, with any non-fatal warnings."""

    path: Path | None = None
    data_loaded: bool = False
    warnings: list[str] = field(default_factory=list)

    def warn(self, message: str) -> None:
        """Record a warning and log it."""
        if self.path is not None:
            message = f"{self.path}: {message}"
        logger.warning(message)
        self.warnings.append(message)


def validate_format(fmt: "FmtChunk") -> ValidationResult:
    """Check that a fmt chunk describes something the sample codec can decode.

    Errors mean samples cannot be read at all; warnings mean they can be read
    but the result is unspecified or the header is inconsistent.

    Args:
        fmt: The format chunk to check.

    Returns:
        ValidationResult with errors and warnings.
    """
    errors: list[str] = []
    warnings: list[str] = []

    if fmt.compression != COMPRESSION_NONE:
        warnings.append(
            f"compression code {fmt.compression} is not uncompressed PCM; "
            "decoded samples are unspecified"
        )

    if fmt.channels == 0:
        errors.append("channels must be > 0")

    if fmt.bits_per_sample < 8:
        errors.append(f"bits_per_sample must be >= 8, got {fmt.bits_per_sample}")
    else:
        if fmt.bits_per_sample % 8:
            warnings.append(
                f"bits_per_sample {fmt.bits_per_sample} is not a multiple of 8; "
                f"samples are read as {fmt.bits_per_sample // 8}-byte slots"
            )
        if fmt.bits_per_sample // 8 > MAX_BYTES_PER_CHANNEL:
            errors.append(
                f"bits_per_sample {fmt.bits_per_sample} exceeds the "
                f"{MAX_BYTES_PER_CHANNEL * 8}-bit maximum"
            )

    expected_align = fmt.channels * (fmt.bits_per_sample // 8)
    if fmt.block_align != expected_align:
        warnings.append(
            f"block_align is {fmt.block_align}, expected {expected_align}; "
            "it will be recomputed on save"
        )

    expected_rate = fmt.sample_rate * expected_align
    if fmt.bytes_per_sec != expected_rate:
        warnings.append(
            f"bytes_per_sec is {fmt.bytes_per_sec}, expected {expected_rate}; "
            "it will be recomputed on save"
        )

    if errors:
        return ValidationResult.failure(errors, warnings)
    return ValidationResult.success(warnings)
