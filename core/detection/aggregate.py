"""
core/detection/aggregate.py — Running mean of per-frame class scores.
"""

from __future__ import annotations

import numpy as np


class ScoreAggregator:
    """Accumulates score vectors and averages them over the frames scored.

    Vectors longer than ``num_classes`` are truncated; shorter ones are
    treated as zero for the missing classes.
    """

    def __init__(self, num_classes: int) -> None:
        if num_classes <= 0:
            raise ValueError(f"num_classes must be positive, got {num_classes}")
        self._sum = np.zeros(num_classes, dtype=np.float64)
        self._frames = 0

    @property
    def num_classes(self) -> int:
        return int(self._sum.size)

    @property
    def frames(self) -> int:
        """Number of vectors added so far."""
        return self._frames

    def add(self, scores: np.ndarray) -> None:
        """Add one frame's score vector to the running sum."""
        flat = np.asarray(scores, dtype=np.float64).reshape(-1)
        n = min(flat.size, self._sum.size)
        self._sum[:n] += flat[:n]
        self._frames += 1

    def average(self) -> np.ndarray | None:
        """Per-class mean, or None when no frame has been scored."""
        if self._frames == 0:
            return None
        return self._sum / self._frames
