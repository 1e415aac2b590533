"""
Shared fixtures for the test suite.

Centralizes reusable test infrastructure so individual test files
don't need to repeat WAV-building or fake-classifier boilerplate.
"""

from __future__ import annotations

import struct
from collections.abc import Callable, Sequence

import numpy as np
import pytest

from infrastructure import metrics as metrics_module

# ---------------------------------------------------------------------------
# WAV builder
# ---------------------------------------------------------------------------


def build_wav(
    samples: np.ndarray | Sequence[float],
    *,
    sample_rate: int = 16000,
    channels: int = 1,
    bits: int = 16,
    extra_chunks: Sequence[tuple[bytes, bytes]] = (),
) -> bytes:
    """Encode float samples in [-1, 1] as a canonical PCM WAVE file.

    ``samples`` is interleaved when ``channels > 1``. ``extra_chunks`` are
    (id, payload) pairs written between ``fmt `` and ``data``.
    """
    values = np.asarray(samples, dtype=np.float64)
    if bits == 16:
        pcm = np.clip(np.round(values * 32767.0), -32768, 32767).astype("<i2").tobytes()
    elif bits == 32:
        pcm = np.clip(np.round(values * 2147483647.0), -2147483648, 2147483647).astype("<i4").tobytes()
    else:
        pcm = np.zeros(values.size * (bits // 8), dtype=np.uint8).tobytes()

    block_align = channels * bits // 8
    fmt = struct.pack(
        "<4sIHHIIHH",
        b"fmt ",
        16,
        1,
        channels,
        sample_rate,
        sample_rate * block_align,
        block_align,
        bits,
    )
    extras = b"".join(struct.pack("<4sI", cid, len(payload)) + payload for cid, payload in extra_chunks)
    data = struct.pack("<4sI", b"data", len(pcm)) + pcm
    body = b"WAVE" + fmt + extras + data
    return struct.pack("<4sI", b"RIFF", len(body)) + body


def sine(
    seconds: float,
    *,
    freq: float = 440.0,
    amplitude: float = 0.5,
    sample_rate: int = 16000,
) -> np.ndarray:
    """Mono sine tone as float64 samples."""
    t = np.arange(int(seconds * sample_rate)) / sample_rate
    return amplitude * np.sin(2 * np.pi * freq * t)


@pytest.fixture()
def make_wav() -> Callable[..., bytes]:
    """Return the WAVE byte builder."""
    return build_wav


@pytest.fixture()
def make_sine() -> Callable[..., np.ndarray]:
    """Return the sine tone generator."""
    return sine


# ---------------------------------------------------------------------------
# Fake classifier
# ---------------------------------------------------------------------------


class FakeClassifier:
    """Deterministic classifier — returns fixed scores, records every frame."""

    def __init__(
        self,
        scores: Sequence[float] | Sequence[Sequence[float]],
        *,
        input_length: int = 15600,
        extra_outputs: int = 0,
    ) -> None:
        arr = np.asarray(scores, dtype=np.float32)
        # A 2-D array gives one row per call, repeating the last row.
        self._rows = arr if arr.ndim == 2 else arr.reshape(1, -1)
        self._input_length = input_length
        self._extra_outputs = extra_outputs
        self.frames: list[np.ndarray] = []

    @property
    def input_length(self) -> int:
        return self._input_length

    @property
    def num_classes(self) -> int:
        return int(self._rows.shape[1])

    def infer(self, frame: np.ndarray) -> list[np.ndarray]:
        self.frames.append(np.array(frame, copy=True))
        row = self._rows[min(len(self.frames) - 1, len(self._rows) - 1)]
        outputs = [row.copy()]
        # Embedding + patch-count style outputs the pipeline must ignore
        outputs.extend(np.full(4, 99.0, dtype=np.float32) for _ in range(self._extra_outputs))
        return outputs


@pytest.fixture()
def fake_classifier() -> type[FakeClassifier]:
    """Return the FakeClassifier class for per-test construction."""
    return FakeClassifier


# ---------------------------------------------------------------------------
# Metrics isolation
# ---------------------------------------------------------------------------


@pytest.fixture()
def metrics_disabled(monkeypatch: pytest.MonkeyPatch) -> None:
    """Turn metric recording into a no-op for the duration of a test."""
    monkeypatch.setattr(metrics_module, "_registry_available", False)
