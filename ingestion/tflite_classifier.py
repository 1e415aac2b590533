"""
TensorFlow Lite classifier backend.

Implements the ``Classifier`` protocol from core using a LiteRT
(``ai_edge_litert``) interpreter. Lives in ingestion/ because it owns a
native runtime and model bytes (core/ must remain pure).

The interpreter class is imported lazily so tests can inject a fake via
``interpreter_factory`` without the runtime installed.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

import numpy as np

from ingestion.assets import DEFAULT_MODEL_THREADS, AssetLoadError

logger = logging.getLogger(__name__)

InterpreterFactory = Callable[..., Any]


def _default_interpreter_factory(**kwargs: Any) -> Any:
    from ai_edge_litert.interpreter import Interpreter  # deferred: heavy native import

    return Interpreter(**kwargs)


class TFLiteClassifier:
    """
    Audio classifier backed by a ``.tflite`` model.

    The input tensor shape is read once at construction: rank 2 models
    receive frames as ``[1, N]``, rank 1 models as ``[N]``. The number of
    classes is the last dimension of output 0.

    Satisfies the ``Classifier`` protocol.
    """

    def __init__(
        self,
        model_content: bytes,
        *,
        num_threads: int = DEFAULT_MODEL_THREADS,
        interpreter_factory: InterpreterFactory | None = None,
    ) -> None:
        factory = interpreter_factory or _default_interpreter_factory
        try:
            self._interpreter = factory(model_content=model_content, num_threads=num_threads)
            self._interpreter.allocate_tensors()
            input_details = self._interpreter.get_input_details()
            output_details = self._interpreter.get_output_details()
        except (ValueError, RuntimeError) as exc:
            raise AssetLoadError(f"Cannot initialise TFLite interpreter: {exc}") from exc

        if not input_details or not output_details:
            raise AssetLoadError("Model declares no input or output tensors")

        input_shape = [int(d) for d in input_details[0]["shape"]]
        output_shape = [int(d) for d in output_details[0]["shape"]]
        logger.debug("Input shape: %s", input_shape)
        logger.debug("Output shape: %s", output_shape)

        if len(input_shape) == 2:
            self._batched = True
        elif len(input_shape) == 1:
            self._batched = False
        else:
            raise AssetLoadError(
                f"Unsupported input shape {input_shape}: expected [1, N] or [N]"
            )
        if input_shape[-1] <= 0 or not output_shape or output_shape[-1] <= 0:
            raise AssetLoadError(
                f"Model shapes must be static: input {input_shape}, output {output_shape}"
            )

        self._input_index = input_details[0]["index"]
        self._output_indices = [d["index"] for d in output_details]
        self._input_length = input_shape[-1]
        self._num_classes = output_shape[-1]
        self._input_shape = tuple(input_shape)
        # Interpreter tensors are shared buffers; one invocation at a time.
        self._lock = threading.Lock()

    @property
    def input_length(self) -> int:
        """Samples per frame expected by the model."""
        return self._input_length

    @property
    def num_classes(self) -> int:
        """Length of the class-score output."""
        return self._num_classes

    @property
    def input_shape(self) -> tuple[int, ...]:
        return self._input_shape

    def infer(self, frame: np.ndarray) -> list[np.ndarray]:
        """Run one frame and return every output tensor, flattened.

        Raises:
            ValueError: Frame length differs from ``input_length``.
        """
        samples = np.asarray(frame, dtype=np.float32).reshape(-1)
        if samples.size != self._input_length:
            raise ValueError(
                f"Frame has {samples.size} samples, model expects {self._input_length}"
            )
        tensor = samples.reshape(1, -1) if self._batched else samples

        with self._lock:
            self._interpreter.set_tensor(self._input_index, tensor)
            self._interpreter.invoke()
            return [
                np.array(self._interpreter.get_tensor(index), dtype=np.float32).reshape(-1)
                for index in self._output_indices
            ]
