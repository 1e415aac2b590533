"""
core/audio/types.py — Frozen data types for decoded audio.

All types are frozen dataclasses — immutable value objects that can be
safely passed between pipeline stages.

Design principles:
    - No I/O, no state, no side effects.
    - Every stage produces a new MonoSignal; none keeps a reference to the
      buffer of the stage before it.
    - An empty MonoSignal is the decode-failure value, not an exception.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class PcmHeader:
    """Format fields read from fixed offsets of a canonical WAVE header.

    Invariants:
        bits_per_sample in {16, 32} for a decodable file
        channels >= 1
    """

    channels: int
    """Interleaved channel count (offset 22, uint16)."""

    sample_rate: int
    """Native sample rate in Hz (offset 24, uint32)."""

    bits_per_sample: int
    """Bit depth of a single channel sample (offset 34, uint16)."""


@dataclass(frozen=True)
class DataChunk:
    """Location of the ``data`` sub-chunk payload inside the file buffer."""

    offset: int
    """Byte offset of the first payload byte (chunk header + 8)."""

    size: int
    """Declared payload size in bytes."""


@dataclass(frozen=True, eq=False)
class MonoSignal:
    """Mono float32 samples in [-1.0, 1.0] at a known sample rate."""

    samples: np.ndarray
    """1-D float32 array."""

    sample_rate: int
    """Sample rate in Hz. 0 for the empty (failed) signal."""

    @classmethod
    def empty(cls, sample_rate: int = 0) -> MonoSignal:
        """Return the empty signal used to report a decode failure."""
        return cls(samples=np.zeros(0, dtype=np.float32), sample_rate=sample_rate)

    @property
    def is_empty(self) -> bool:
        return self.samples.size == 0

    @property
    def duration_sec(self) -> float:
        """Signal length in seconds (0.0 when the rate is unknown)."""
        if self.sample_rate <= 0:
            return 0.0
        return self.samples.size / self.sample_rate

    def __len__(self) -> int:
        return int(self.samples.size)


@dataclass(frozen=True, eq=False)
class Frame:
    """One fixed-length analysis window.

    Invariants:
        0 < occupancy <= len(samples)
        samples[occupancy:] are all zero (tail padding)
    """

    samples: np.ndarray
    """Float32 window of exactly the frame length."""

    start: int
    """Offset of the first sample in the source signal."""

    occupancy: int
    """Number of real (non-padded) samples at the head of the window."""
