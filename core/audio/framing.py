"""
core/audio/framing.py — Fixed-length, fixed-hop overlapping frames.

The scan starts at offset 0 and advances by ``hop``. It ends when:
    - the next offset is past the end of the signal,
    - the previous window already reached the end of the signal,
    - ``max_frames`` frames have been accepted, or
    - a window would hold fewer than ``frame_length / 4`` real samples.
      This last rule is a hard stop, not a skip: a tail that short is not
      worth classifying.

Windows shorter than ``frame_length`` are zero-padded on the tail. An
optional gate callable can reject a frame (e.g. silence); rejected frames do
not count toward ``max_frames`` and do not disturb the scan.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass

import numpy as np

from core.audio.types import Frame

FrameGate = Callable[[Frame], bool]


@dataclass(frozen=True)
class Framer:
    """Slices a mono sample array into analysis frames.

    Attributes:
        frame_length: Samples per frame (the classifier's input size).
        hop: Samples between consecutive frame starts.
        max_frames: Cap on accepted frames, bounding inference cost.
    """

    frame_length: int
    hop: int
    max_frames: int = 10

    def __post_init__(self) -> None:
        """Validate framing parameters."""
        if self.frame_length <= 0:
            raise ValueError(f"frame_length must be positive, got {self.frame_length}")
        if self.hop <= 0:
            raise ValueError(f"hop must be positive, got {self.hop}")
        if self.max_frames <= 0:
            raise ValueError(f"max_frames must be positive, got {self.max_frames}")

    def is_too_short(self, take: int) -> bool:
        """True when ``take`` real samples fall below a quarter frame."""
        # take < frame_length / 4, kept in integers
        return take * 4 < self.frame_length

    def iter_frames(self, samples: np.ndarray, gate: FrameGate | None = None) -> Iterator[Frame]:
        """Yield accepted frames in signal order.

        Args:
            samples: 1-D float32 sample array.
            gate: Optional predicate; frames for which it returns False are
                skipped without counting toward ``max_frames``.

        Yields:
            Frame objects of exactly ``frame_length`` samples.
        """
        total = len(samples)
        accepted = 0
        start = 0
        while start < total and accepted < self.max_frames:
            end = min(start + self.frame_length, total)
            take = end - start
            if self.is_too_short(take):
                break

            window = np.zeros(self.frame_length, dtype=np.float32)
            window[:take] = samples[start:end]
            frame = Frame(samples=window, start=start, occupancy=take)

            if gate is None or gate(frame):
                accepted += 1
                yield frame

            if end >= total:
                break
            start += self.hop

    def frame_offsets(self, samples: np.ndarray) -> list[int]:
        """Start offsets of the frames an ungated scan would produce."""
        return [frame.start for frame in self.iter_frames(samples)]


def whole_clip_frame(samples: np.ndarray, frame_length: int) -> Frame:
    """Copy the head of a clip into one zero-padded frame.

    Longer clips are truncated to ``frame_length``. Used by the whole-clip
    variant, which classifies a single fixed-size input.
    """
    if frame_length <= 0:
        raise ValueError(f"frame_length must be positive, got {frame_length}")
    take = min(len(samples), frame_length)
    window = np.zeros(frame_length, dtype=np.float32)
    window[:take] = samples[:take]
    return Frame(samples=window, start=0, occupancy=take)
