"""
core/audio/wav.py — RIFF/WAVE PCM decoding to a mono float signal.

The format fields (channels, sample rate, bit depth) are read from the fixed
offsets of a canonical 44-byte header. Only the ``data`` sub-chunk is located
by scanning, because recorders commonly insert LIST/fact chunks before it.

Supported encodings: 16-bit and 32-bit signed little-endian PCM, any channel
count, any sample rate. Channels are averaged into a single mono channel.

Failures never raise out of ``decode_wav()`` — a malformed or unsupported
buffer yields ``MonoSignal.empty()``. ``parse_wav()`` is the raising variant
for callers that want the reason.
"""

from __future__ import annotations

import logging
import struct

import numpy as np

from core.audio.types import DataChunk, MonoSignal, PcmHeader

logger = logging.getLogger(__name__)

# Canonical header size; anything shorter cannot hold the fmt fields.
MIN_HEADER_BYTES: int = 44

# First chunk header after "RIFF" <size> "WAVE"
_FIRST_CHUNK_OFFSET: int = 12

_DATA_CHUNK_ID: bytes = b"data"

# bits per sample → (numpy dtype, full-scale divisor)
_PCM_FORMATS: dict[int, tuple[str, float]] = {
    16: ("<i2", 32768.0),
    32: ("<i4", 2147483648.0),
}


class WavDecodeError(ValueError):
    """Raised by parse_wav() when a buffer cannot be decoded."""


def read_pcm_header(data: bytes) -> PcmHeader:
    """Read channel count, sample rate and bit depth from fixed offsets.

    Raises:
        WavDecodeError: Buffer is shorter than the canonical header.
    """
    if len(data) < MIN_HEADER_BYTES:
        raise WavDecodeError(
            f"buffer too short for a WAVE header: {len(data)} < {MIN_HEADER_BYTES} bytes"
        )
    (channels,) = struct.unpack_from("<H", data, 22)
    (sample_rate,) = struct.unpack_from("<I", data, 24)
    (bits_per_sample,) = struct.unpack_from("<H", data, 34)
    return PcmHeader(channels=channels, sample_rate=sample_rate, bits_per_sample=bits_per_sample)


def find_data_chunk(data: bytes) -> DataChunk:
    """Scan chunk headers from offset 12 for the ``data`` sub-chunk.

    Raises:
        WavDecodeError: No ``data`` chunk before the end of the buffer, or the
            declared chunk size runs past the end of the buffer.
    """
    offset = _FIRST_CHUNK_OFFSET
    while offset + 8 <= len(data):
        chunk_id = data[offset : offset + 4]
        (chunk_size,) = struct.unpack_from("<I", data, offset + 4)
        if chunk_id == _DATA_CHUNK_ID:
            chunk = DataChunk(offset=offset + 8, size=chunk_size)
            if chunk.offset + chunk.size > len(data):
                raise WavDecodeError(
                    f"data chunk of {chunk.size} bytes at offset {chunk.offset} "
                    f"extends past the {len(data)}-byte buffer"
                )
            return chunk
        offset += 8 + chunk_size
    raise WavDecodeError("no 'data' chunk found")


def parse_wav(data: bytes) -> MonoSignal:
    """Decode a PCM WAVE buffer into a mono float32 signal.

    Each interleaved sample group is normalised per channel (16-bit / 2^15,
    32-bit / 2^31), averaged across channels and clamped to [-1.0, 1.0].

    Args:
        data: Complete file contents.

    Returns:
        MonoSignal at the file's native sample rate.

    Raises:
        WavDecodeError: Short buffer, missing/truncated data chunk,
            unsupported bit depth, or a zero channel count / sample rate.
    """
    header = read_pcm_header(data)
    chunk = find_data_chunk(data)

    pcm = _PCM_FORMATS.get(header.bits_per_sample)
    if pcm is None:
        raise WavDecodeError(
            f"unsupported bits per sample: {header.bits_per_sample} (expected 16 or 32)"
        )
    if header.channels == 0:
        raise WavDecodeError("channel count is zero")
    if header.sample_rate == 0:
        raise WavDecodeError("sample rate is zero")

    dtype, full_scale = pcm
    total_samples = (chunk.size * 8) // header.bits_per_sample
    mono_count = total_samples // header.channels

    interleaved = np.frombuffer(
        data,
        dtype=dtype,
        count=mono_count * header.channels,
        offset=chunk.offset,
    )
    groups = interleaved.reshape(mono_count, header.channels).astype(np.float64) / full_scale
    mono = np.clip(groups.mean(axis=1), -1.0, 1.0).astype(np.float32)

    return MonoSignal(samples=mono, sample_rate=int(header.sample_rate))


def decode_wav(data: bytes) -> MonoSignal:
    """Decode a WAVE buffer, returning an empty signal on any decode failure."""
    try:
        return parse_wav(data)
    except WavDecodeError as exc:
        logger.debug("WAV decode failed: %s", exc)
        return MonoSignal.empty()
