"""
core/audio/resample.py — Nearest-neighbour sample-rate conversion.

This is a zero-order-hold resampler with no anti-aliasing filter. It is
chosen for speed on constrained devices; content above the target Nyquist
frequency folds back into the band. The classifiers this feeds are robust
to that, so the fidelity loss is accepted.

    target length  = floor(n * target_rate / source_rate)
    source index i = floor(i * source_rate / target_rate), clamped to [0, n-1]

Index arithmetic is done in integers so the mapping is exact for any rate.
"""

from __future__ import annotations

import numpy as np

from core.audio.types import MonoSignal

TARGET_SAMPLE_RATE: int = 16000


def resample_nearest(signal: MonoSignal, target_rate: int = TARGET_SAMPLE_RATE) -> MonoSignal:
    """Resample a mono signal to ``target_rate`` by nearest-neighbour lookup.

    Args:
        signal: Source signal. An empty signal is returned as an empty
            signal at the target rate.
        target_rate: Output sample rate in Hz.

    Returns:
        New MonoSignal at ``target_rate``. When the source is already at
        the target rate the samples are copied unchanged.

    Raises:
        ValueError: target_rate is not positive, or a non-empty signal has
            a non-positive sample rate.
    """
    if target_rate <= 0:
        raise ValueError(f"target_rate must be positive, got {target_rate}")

    n = len(signal)
    if n == 0:
        return MonoSignal.empty(sample_rate=target_rate)
    if signal.sample_rate <= 0:
        raise ValueError(f"source sample_rate must be positive, got {signal.sample_rate}")

    if signal.sample_rate == target_rate:
        return MonoSignal(samples=signal.samples.copy(), sample_rate=target_rate)

    target_len = (n * target_rate) // signal.sample_rate
    indices = (np.arange(target_len, dtype=np.int64) * signal.sample_rate) // target_rate
    np.clip(indices, 0, n - 1, out=indices)

    return MonoSignal(
        samples=signal.samples[indices].astype(np.float32, copy=True),
        sample_rate=target_rate,
    )
