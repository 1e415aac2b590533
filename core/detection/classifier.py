"""
Audio classifier protocol for the detection pipeline.

Defines the contract that every inference backend must satisfy.
This module is pure — no I/O, no model loading, no side effects.
Concrete implementations (e.g., TensorFlow Lite) live outside core/.
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class Classifier(Protocol):
    """
    Protocol for audio classifiers.

    Any class that implements ``input_length``, ``num_classes`` and
    ``infer`` can be used as the inference backend of the pipeline.
    Implementations must be deterministic and keep no state between
    calls.
    """

    @property
    def input_length(self) -> int:
        """Number of samples the model expects per frame."""
        ...

    @property
    def num_classes(self) -> int:
        """Length of the class-score vector."""
        ...

    def infer(self, frame: np.ndarray) -> Sequence[np.ndarray]:
        """
        Run one frame through the model.

        Args:
            frame: 1-D float32 array of exactly ``input_length`` samples.
                Packaging into the model's tensor shape is the
                implementation's job.

        Returns:
            Every model output, in output-index order. Output 0 is
            the class-score vector for single-output models; models with
            extra outputs (embeddings, patch counts) return them too.
        """
        ...
