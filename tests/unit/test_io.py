"""Unit tests for riffwave.io."""

import struct
from pathlib import Path

import numpy as np
import pytest

from riffwave import WaveFile, WaveOpenError, load_samples, sample_count, save_samples
from riffwave.format import FormatMismatchError, fourcc_to_type
from riffwave.format.riff import build_wav


class TestLoadSamples:
    """Test reading whole files."""

    def test_load_samples(self, tmp_path: Path) -> None:
        path = tmp_path / "in.wav"
        path.write_bytes(build_wav(struct.pack("<3h", -32768, 32767, 16384)))

        samples = load_samples(path)

        assert samples.dtype == np.float64
        assert samples.tolist()[:2] == [-1.0, 1.0]
        assert samples[2] == pytest.approx(0.5, abs=1e-4)

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(WaveOpenError):
            load_samples(tmp_path / "missing.wav")

    def test_not_a_wave_file_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "text.wav"
        path.write_text("hello")
        with pytest.raises(FormatMismatchError):
            load_samples(path)


class TestSampleCount:
    """Test counting samples from the headers."""

    def test_count_matches_load(self, tmp_path: Path) -> None:
        path = tmp_path / "in.wav"
        path.write_bytes(build_wav(b"\x00" * 60, num_channels=2, bits_per_sample=24))

        assert sample_count(path) == 10
        assert sample_count(path) == len(load_samples(path))

    def test_missing_file_has_no_samples(self, tmp_path: Path) -> None:
        assert sample_count(tmp_path / "missing.wav") == 0


class TestSaveSamples:
    """Test writing normalized samples."""

    def test_new_file_uses_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "new.wav"
        save_samples(path, [0.0, 0.5, -1.0])

        wave = WaveFile()
        wave.load(path)
        assert wave.fmt_chunk.channels == 1
        assert wave.fmt_chunk.sample_rate == 22050
        assert wave.fmt_chunk.bits_per_sample == 16
        assert wave.sample_count == 3
        assert wave.get_sample(2) == -1.0

    def test_existing_format_and_chunks_are_kept(self, tmp_path: Path) -> None:
        path = tmp_path / "stereo.wav"
        path.write_bytes(
            build_wav(
                b"\x80\x80" * 100,
                sample_rate=8000,
                num_channels=2,
                bits_per_sample=8,
                extra_chunks=[(b"LIST", b"INFOISFT")],
            )
        )

        save_samples(path, np.linspace(-1.0, 1.0, 5))

        wave = WaveFile()
        report = wave.load(path)
        assert report.warnings == []
        assert wave.fmt_chunk.channels == 1
        assert wave.fmt_chunk.sample_rate == 8000
        assert wave.fmt_chunk.bits_per_sample == 8
        assert wave.fmt_chunk.block_align == 1
        assert wave.fmt_chunk.bytes_per_sec == 8000
        assert wave.sample_count == 5
        assert [c.chunk_type for c in wave.other_chunks] == [fourcc_to_type(b"LIST")]
        assert wave.other_chunks[0].payload == b"INFOISFT"
        assert wave.get_sample(0) == -1.0
        assert wave.get_sample(4) == 1.0

    def test_count_limits_samples_written(self, tmp_path: Path) -> None:
        path = tmp_path / "partial.wav"
        save_samples(path, [0.1, 0.2, 0.3, 0.4], count=2)

        assert sample_count(path) == 2
        np.testing.assert_allclose(load_samples(path), [0.1, 0.2], atol=2 / 65535)

    @pytest.mark.parametrize("count", [-1, 5])
    def test_count_out_of_range(self, tmp_path: Path, count: int) -> None:
        with pytest.raises(ValueError):
            save_samples(tmp_path / "out.wav", [0.0] * 4, count=count)
        assert not (tmp_path / "out.wav").exists()

    def test_non_wave_file_is_overwritten(self, tmp_path: Path) -> None:
        path = tmp_path / "notes.wav"
        path.write_text("not audio")

        save_samples(path, [1.0])

        wave = WaveFile()
        wave.load(path)
        assert wave.fmt_chunk.sample_rate == 22050
        assert wave.get_sample(0) == 1.0

    def test_unusable_format_falls_back_to_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "nibbles.wav"
        path.write_bytes(build_wav(b"\x00\x00", sample_rate=11025, bits_per_sample=4))

        save_samples(path, [0.5, -0.5])

        wave = WaveFile()
        wave.load(path)
        assert wave.fmt_chunk.sample_rate == 11025
        assert wave.fmt_chunk.bits_per_sample == 16
        assert wave.sample_count == 2

    def test_empty_input(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.wav"
        save_samples(path, [])

        assert sample_count(path) == 0
        assert path.stat().st_size == 44
