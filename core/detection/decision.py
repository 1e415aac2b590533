"""
core/detection/decision.py — Turning averaged scores into a short verdict.

Rule (sliding-window variants):
    rank classes by score (stable: ties keep index order)
    best, second = top two scores (second = best for a single class)
    accept only if best >= confidence_threshold
               and best - second >= margin_threshold

Rule (whole-clip variant):
    no global check; each label must individually score > min_item_score

Accepted rankings are walked in order, resolving each index to a label
until K labels are collected. Indices with no label (past the end of the
table, or filtered by a whitelist) are skipped without using a slot.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from core.detection.labels import LabelResolver


def rank_classes(scores: np.ndarray) -> np.ndarray:
    """Class indices sorted by descending score, ties in index order."""
    values = np.asarray(scores, dtype=np.float64).reshape(-1)
    return np.argsort(-values, kind="stable")


@dataclass(frozen=True)
class DecisionPolicy:
    """Confidence/margin rule plus top-K label selection.

    Attributes:
        top_k: Maximum labels returned.
        confidence_threshold: Minimum best score. None skips the global
            confidence and margin check.
        margin_threshold: Minimum ``best - second`` gap.
        min_item_score: Per-label floor (strict). None disables it.
    """

    top_k: int = 5
    confidence_threshold: float | None = 0.35
    margin_threshold: float = 0.10
    min_item_score: float | None = None

    def is_confident(self, scores: np.ndarray, order: np.ndarray | None = None) -> bool:
        """Apply the global confidence and margin check."""
        if self.confidence_threshold is None:
            return True
        values = np.asarray(scores, dtype=np.float64).reshape(-1)
        if values.size == 0:
            return False
        ranked = rank_classes(values) if order is None else order
        best = float(values[ranked[0]])
        second = float(values[ranked[1]]) if ranked.size > 1 else best
        return best >= self.confidence_threshold and (best - second) >= self.margin_threshold

    def select_labels(self, scores: np.ndarray, resolver: LabelResolver) -> tuple[str, ...]:
        """Return up to ``top_k`` distinct labels, or () when not confident."""
        values = np.asarray(scores, dtype=np.float64).reshape(-1)
        order = rank_classes(values)
        if not self.is_confident(values, order):
            return ()

        selected: list[str] = []
        for index in order:
            if self.min_item_score is not None and values[index] <= self.min_item_score:
                # Ranked descending: nothing further can pass.
                break
            label = resolver.resolve(int(index))
            if label is None or label in selected:
                continue
            selected.append(label)
            if len(selected) == self.top_k:
                break
        return tuple(selected)
