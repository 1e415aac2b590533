"""
ingestion/detector.py — Owned model state and the public detection entry point.

InstrumentDetector is the single integration point between:
  - I/O layer (model + label assets, recording files)
  - inference backend (TFLiteClassifier, or any Classifier)
  - pure pipeline (core/detection/pipeline.py)

One detector owns one variant's classifier and label table. Loading is an
explicit, idempotent step; once loaded both are read-only, so a detector can
serve concurrent recordings.

Usage:
    detector = create_detector("yamnet")
    if detector.ensure_loaded():
        result = detector.analyze_file("/tmp/recording.wav")
        print(result.labels, result.outcome)
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from pathlib import Path

from core.config import PRESETS, PipelineConfig
from core.detection.classifier import Classifier
from core.detection.labels import LabelResolver
from core.detection.pipeline import run_pipeline
from core.detection.types import DetectionOutcome, DetectionResult
from infrastructure.metrics import LatencyTimer, record_analysis, record_model_load_failure
from ingestion.assets import (
    AssetLoadError,
    load_label_table,
    model_path,
    read_model_bytes,
    resolve_model_threads,
)

logger = logging.getLogger(__name__)

ClassifierFactory = Callable[[bytes], Classifier]


def _tflite_factory(model_content: bytes) -> Classifier:
    from ingestion.tflite_classifier import TFLiteClassifier

    return TFLiteClassifier(model_content, num_threads=resolve_model_threads())


class InstrumentDetector:
    """Detects instruments in WAVE recordings for one model variant.

    Invariant: ``loaded`` is True exactly when both the classifier and a
    non-empty label table are present.

    Example:
        detector = InstrumentDetector(YAMNET_CONFIG, model_dir="assets/model")
        detector.ensure_loaded()
        labels = detector.detect("/path/to/take.wav")
    """

    def __init__(
        self,
        config: PipelineConfig,
        *,
        model_dir: str | Path | None = None,
        classifier_factory: ClassifierFactory | None = None,
    ) -> None:
        """Initialise an unloaded detector.

        Args:
            config: Variant descriptor.
            model_dir: Asset directory. None = ``INSTRUMENT_MODEL_DIR`` / default.
            classifier_factory: Builds a Classifier from model bytes. None
                uses the TFLite backend. Pass a fake in tests.
        """
        self._config = config
        self._model_dir = model_dir
        self._classifier_factory = classifier_factory or _tflite_factory
        self._classifier: Classifier | None = None
        self._resolver: LabelResolver | None = None
        self._load_lock = threading.Lock()

    @classmethod
    def from_components(
        cls,
        config: PipelineConfig,
        classifier: Classifier,
        labels: tuple[str, ...] | list[str],
    ) -> InstrumentDetector:
        """Build an already-loaded detector from an in-memory classifier and labels."""
        detector = cls(config)
        detector._install(classifier, tuple(labels))
        return detector

    @property
    def config(self) -> PipelineConfig:
        return self._config

    @property
    def loaded(self) -> bool:
        return self._classifier is not None and self._resolver is not None

    @property
    def labels(self) -> tuple[str, ...]:
        """Loaded label table (empty before loading)."""
        return self._resolver.labels if self._resolver is not None else ()

    def _install(self, classifier: Classifier, labels: tuple[str, ...]) -> None:
        if not labels:
            raise AssetLoadError(f"[{self._config.name}] label table is empty")
        self._resolver = LabelResolver(labels, whitelist=self._config.whitelist)
        self._classifier = classifier

    def load(self) -> None:
        """Load the model and label table. No-op when already loaded.

        Raises:
            AssetLoadError: Model or labels are missing or unusable.
        """
        with self._load_lock:
            if self.loaded:
                return
            model_bytes = read_model_bytes(model_path(self._config, self._model_dir))
            classifier = self._classifier_factory(model_bytes)
            labels = load_label_table(self._config, self._model_dir)
            self._install(classifier, labels)
            logger.info(
                "Loaded %s model: input=%d samples, classes=%d, labels=%d",
                self._config.name,
                classifier.input_length,
                classifier.num_classes,
                len(labels),
            )

    def ensure_loaded(self) -> bool:
        """Load if needed; return whether the detector is usable."""
        if self.loaded:
            return True
        try:
            self.load()
        except AssetLoadError as exc:
            logger.warning("Error loading %s model: %s", self._config.name, exc)
            record_model_load_failure(self._config.name)
            return False
        return True

    def analyze_bytes(self, wav_bytes: bytes) -> DetectionResult:
        """Run the pipeline over in-memory WAVE bytes.

        Never raises: an unloaded model yields MODEL_UNAVAILABLE and any
        unexpected failure is logged and yields ERROR.
        """
        with LatencyTimer() as timer:
            result = self._analyze(wav_bytes)
        record_analysis(
            variant=self._config.name,
            outcome=result.outcome.value,
            latency_seconds=timer.elapsed,
        )
        return result

    def _analyze(self, wav_bytes: bytes) -> DetectionResult:
        classifier, resolver = self._classifier, self._resolver
        if classifier is None or resolver is None:
            return DetectionResult.empty(DetectionOutcome.MODEL_UNAVAILABLE)
        try:
            return run_pipeline(wav_bytes, classifier, resolver, self._config)
        except Exception:
            logger.exception("Error analyzing recording with %s model", self._config.name)
            return DetectionResult.empty(DetectionOutcome.ERROR)

    def analyze_file(self, path: str | Path) -> DetectionResult:
        """Read a WAVE file and run the pipeline over it."""
        file_path = Path(path)
        try:
            wav_bytes = file_path.read_bytes()
        except OSError as exc:
            logger.warning("Cannot read recording %s: %s", file_path, exc)
            return DetectionResult.empty(DetectionOutcome.ERROR)
        return self.analyze_bytes(wav_bytes)

    def detect(self, path: str | Path) -> list[str]:
        """Labels detected in a WAVE file (empty when nothing confident)."""
        return list(self.analyze_file(path).labels)


def create_detector(
    variant: str,
    *,
    model_dir: str | Path | None = None,
    classifier_factory: ClassifierFactory | None = None,
) -> InstrumentDetector:
    """Create an unloaded detector for a named preset.

    Raises:
        ValueError: Unknown variant name.
    """
    config = PRESETS.get(variant)
    if config is None:
        raise ValueError(f"Unknown variant {variant!r}. Available: {sorted(PRESETS)}")
    return InstrumentDetector(config, model_dir=model_dir, classifier_factory=classifier_factory)
