"""
Tests for core/audio/wav.py — PCM WAVE decoding.

Covers:
- Header fields read from fixed offsets
- data chunk scanning (including chunks placed before it)
- 16-bit and 32-bit normalisation, channel averaging and clamping
- Every decode failure returns an empty signal instead of raising
"""

from __future__ import annotations

import struct

import numpy as np
import pytest

from core.audio.wav import (
    MIN_HEADER_BYTES,
    WavDecodeError,
    decode_wav,
    find_data_chunk,
    parse_wav,
    read_pcm_header,
)

from conftest import build_wav, sine

# ---------------------------------------------------------------------------
# Header and chunk scanning
# ---------------------------------------------------------------------------


class TestHeader:
    def test_reads_fixed_offsets(self) -> None:
        header = read_pcm_header(build_wav([0.0] * 4, sample_rate=44100, channels=2, bits=32))
        assert header.channels == 2
        assert header.sample_rate == 44100
        assert header.bits_per_sample == 32

    def test_short_buffer_raises(self) -> None:
        with pytest.raises(WavDecodeError, match="too short"):
            read_pcm_header(b"RIFF" + b"\x00" * 20)


class TestFindDataChunk:
    def test_canonical_layout_offset_44(self) -> None:
        chunk = find_data_chunk(build_wav([0.1, 0.2, 0.3]))
        assert chunk.offset == 44
        assert chunk.size == 6

    def test_skips_chunks_before_data(self) -> None:
        wav = build_wav([0.1, 0.2], extra_chunks=[(b"LIST", b"INFOabcd"), (b"fact", b"\x02\x00\x00\x00")])
        chunk = find_data_chunk(wav)
        assert chunk.offset == 44 + (8 + 8) + (8 + 4)
        assert chunk.size == 4

    def test_missing_data_chunk_raises(self) -> None:
        wav = build_wav([0.1, 0.2])
        broken = wav.replace(b"data", b"junk")
        with pytest.raises(WavDecodeError, match="no 'data' chunk"):
            find_data_chunk(broken)

    def test_truncated_data_chunk_raises(self) -> None:
        wav = build_wav([0.1] * 10)
        with pytest.raises(WavDecodeError, match="extends past"):
            find_data_chunk(wav[:-2])


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


class TestParseWav:
    def test_pcm16_mono_sample_count_and_range(self) -> None:
        tone = sine(0.5, amplitude=0.9)
        signal = parse_wav(build_wav(tone))
        assert signal.sample_rate == 16000
        assert len(signal) == tone.size
        assert signal.samples.dtype == np.float32
        assert float(signal.samples.max()) <= 1.0
        assert float(signal.samples.min()) >= -1.0

    def test_pcm16_normalisation(self) -> None:
        signal = parse_wav(build_wav([0.5, -0.5, 0.0]))
        np.testing.assert_allclose(signal.samples, [16384 / 32768, -16384 / 32768, 0.0], atol=1e-4)

    def test_pcm16_full_scale_negative_is_minus_one(self) -> None:
        signal = parse_wav(build_wav([-1.0]))
        # -32767 / 32768: the builder writes symmetric full scale
        assert signal.samples[0] == pytest.approx(-32767 / 32768)

    def test_pcm32_normalisation(self) -> None:
        signal = parse_wav(build_wav([0.25, -0.75], bits=32))
        np.testing.assert_allclose(signal.samples, [0.25, -0.75], atol=1e-6)

    def test_stereo_channels_are_averaged(self) -> None:
        # interleaved L, R pairs
        signal = parse_wav(build_wav([0.5, 0.1, -0.2, -0.4], channels=2))
        assert len(signal) == 2
        np.testing.assert_allclose(signal.samples, [0.3, -0.3], atol=1e-4)

    def test_partial_trailing_group_is_dropped(self) -> None:
        # 3 samples over 2 channels → 1 complete mono sample
        signal = parse_wav(build_wav([0.2, 0.4, 0.9], channels=2))
        assert len(signal) == 1
        assert signal.samples[0] == pytest.approx(0.3, abs=1e-4)

    def test_native_rate_is_preserved(self) -> None:
        signal = parse_wav(build_wav([0.0] * 8, sample_rate=48000))
        assert signal.sample_rate == 48000

    def test_unsupported_bit_depth_raises(self) -> None:
        with pytest.raises(WavDecodeError, match="unsupported bits per sample"):
            parse_wav(build_wav([0.0] * 8, bits=8))

    def test_zero_channels_raises(self) -> None:
        wav = bytearray(build_wav([0.0] * 8))
        struct.pack_into("<H", wav, 22, 0)
        with pytest.raises(WavDecodeError, match="channel count"):
            parse_wav(bytes(wav))


class TestDecodeWavFailuresAreValues:
    @pytest.mark.parametrize(
        "data",
        [
            b"",
            b"RIFF",
            b"\x00" * (MIN_HEADER_BYTES - 1),
        ],
    )
    def test_short_buffers_yield_empty(self, data: bytes) -> None:
        assert decode_wav(data).is_empty

    def test_unsupported_depth_yields_empty(self) -> None:
        assert decode_wav(build_wav([0.1] * 8, bits=24)).is_empty

    def test_truncated_data_yields_empty(self) -> None:
        assert decode_wav(build_wav([0.1] * 100)[:-10]).is_empty

    def test_no_data_chunk_yields_empty(self) -> None:
        assert decode_wav(build_wav([0.1] * 4).replace(b"data", b"DATA")).is_empty

    def test_valid_buffer_decodes(self) -> None:
        assert len(decode_wav(build_wav([0.1] * 4))) == 4
