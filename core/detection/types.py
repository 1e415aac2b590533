"""
core/detection/types.py — Result types for instrument detection.

An empty label tuple always means "nothing confidently detected". The
``outcome`` field says why, so callers can tell a silent recording from an
unavailable model without catching exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DetectionOutcome(str, Enum):
    """Why a detection run ended the way it did."""

    DETECTED = "detected"
    DECODE_FAILED = "decode_failed"
    SILENT = "silent"
    LOW_CONFIDENCE = "low_confidence"
    MODEL_UNAVAILABLE = "model_unavailable"
    ERROR = "error"


@dataclass(frozen=True)
class DetectionResult:
    """Outcome of one pipeline run over one recording.

    Invariants:
        labels is non-empty  <=>  outcome == DETECTED
        labels holds distinct strings, best first
        frames_scored >= 0
    """

    labels: tuple[str, ...]
    """The verdict: up to K distinct labels, best first."""

    outcome: DetectionOutcome
    """Reason for the result. DETECTED only when labels is non-empty."""

    frames_scored: int = 0
    """Frames that passed the silence gate and were classified."""

    clip_dbfs: float | None = None
    """Whole-recording level. None when decoding failed or never ran."""

    @property
    def detected(self) -> bool:
        return self.outcome is DetectionOutcome.DETECTED

    @classmethod
    def empty(
        cls,
        outcome: DetectionOutcome,
        *,
        frames_scored: int = 0,
        clip_dbfs: float | None = None,
    ) -> DetectionResult:
        """Build a result with no labels for a non-detection outcome."""
        return cls(labels=(), outcome=outcome, frames_scored=frames_scored, clip_dbfs=clip_dbfs)
