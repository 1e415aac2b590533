"""
core/audio/energy.py — RMS energy and dBFS silence gating.

Used twice per recording: once over the whole clip (reject the recording)
and once per frame (skip that frame without counting it).

    rms  = sqrt(mean(x[:length] ** 2)),  length clamped to >= 1
    dBFS = 20 * log10(rms + epsilon)

With epsilon = 0.0 a true-zero signal maps to -inf rather than raising, so
every finite threshold rejects it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

# Added to RMS before the log by the sliding-window variants.
DEFAULT_EPSILON: float = 1e-12


def rms(samples: np.ndarray, length: int | None = None) -> float:
    """Root-mean-square of the first ``length`` samples.

    Args:
        samples: 1-D sample array.
        length: Number of leading samples to include. None = all of them.
            Values below 1 are treated as 1; positions past the end of
            ``samples`` count as silence.

    Returns:
        RMS as a Python float (0.0 for an empty buffer).
    """
    n = len(samples) if length is None else length
    n = max(1, n)
    head = np.asarray(samples[:n], dtype=np.float64)
    return math.sqrt(float(np.dot(head, head)) / n)


def to_dbfs(level: float, epsilon: float = DEFAULT_EPSILON) -> float:
    """Convert a linear RMS level to dB relative to full scale."""
    value = level + epsilon
    if value <= 0.0:
        return -math.inf
    return 20.0 * math.log10(value)


def dbfs(samples: np.ndarray, length: int | None = None, epsilon: float = DEFAULT_EPSILON) -> float:
    """RMS level of ``samples`` in dBFS."""
    return to_dbfs(rms(samples, length), epsilon)


@dataclass(frozen=True)
class EnergyGate:
    """Silence gate: passes buffers whose level is at least ``threshold_dbfs``."""

    threshold_dbfs: float
    epsilon: float = DEFAULT_EPSILON

    def level(self, samples: np.ndarray, length: int | None = None) -> float:
        return dbfs(samples, length, self.epsilon)

    def passes(self, samples: np.ndarray, length: int | None = None) -> bool:
        return self.level(samples, length) >= self.threshold_dbfs
