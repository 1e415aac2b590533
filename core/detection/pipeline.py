"""
core/detection/pipeline.py — One parameterised instrument detection pipeline.

    wav bytes
        │
        ├─ decode_wav()          [core/audio/wav.py]        → MonoSignal (native rate)
        ├─ resample_nearest()    [core/audio/resample.py]   → MonoSignal (16 kHz)
        ├─ EnergyGate (clip)     [core/audio/energy.py]     → reject silent recordings
        ├─ Framer / whole clip   [core/audio/framing.py]    → frames, each frame-gated
        ├─ Classifier.infer()    [core/detection/classifier.py]
        ├─ ScoreAggregator       [core/detection/aggregate.py]
        ├─ DecisionPolicy        [core/detection/decision.py]
        └─ LabelResolver         [core/detection/labels.py] → DetectionResult

Every variant (whole-clip, sliding window with whitelist, sliding window
without) runs through ``run_pipeline()``; a PipelineConfig says which.

Malformed audio, silence and low confidence are reported through
``DetectionResult.outcome`` — nothing here raises for bad input. Only the
classifier call can raise; callers that need a hard guarantee wrap it
(see ingestion/detector.py).
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

import numpy as np

from core.audio.energy import EnergyGate
from core.audio.framing import Framer, whole_clip_frame
from core.audio.resample import resample_nearest
from core.audio.types import Frame, MonoSignal
from core.audio.wav import decode_wav
from core.config import PipelineConfig
from core.detection.aggregate import ScoreAggregator
from core.detection.classifier import Classifier
from core.detection.decision import DecisionPolicy, rank_classes
from core.detection.labels import LabelResolver
from core.detection.types import DetectionOutcome, DetectionResult

logger = logging.getLogger(__name__)

# Number of top classes written to the debug log after averaging.
_DEBUG_TOP_N = 10


def decision_policy_for(config: PipelineConfig) -> DecisionPolicy:
    """Build the DecisionPolicy described by a pipeline config."""
    return DecisionPolicy(
        top_k=config.top_k,
        confidence_threshold=config.confidence_threshold,
        margin_threshold=config.margin_threshold,
        min_item_score=config.min_item_score,
    )


def iter_pipeline_frames(
    signal: MonoSignal,
    frame_length: int,
    config: PipelineConfig,
) -> Iterator[Frame]:
    """Yield the frames a config asks to be classified, frame gate applied."""
    if config.whole_clip:
        yield whole_clip_frame(signal.samples, frame_length)
        return

    framer = Framer(
        frame_length=frame_length,
        hop=config.resolve_hop(frame_length),
        max_frames=config.max_frames,
    )
    if config.frame_gate_dbfs is None:
        yield from framer.iter_frames(signal.samples)
        return

    frame_gate = EnergyGate(config.frame_gate_dbfs, config.dbfs_epsilon)

    def _audible(frame: Frame) -> bool:
        level = frame_gate.level(frame.samples, frame.occupancy)
        if level < frame_gate.threshold_dbfs:
            logger.debug("Skipping silent frame at %d (%.1f dBFS)", frame.start, level)
            return False
        return True

    yield from framer.iter_frames(signal.samples, gate=_audible)


def score_frames(
    frames: Iterator[Frame],
    classifier: Classifier,
    score_output: int = 0,
) -> ScoreAggregator:
    """Classify frames in order and accumulate their class scores."""
    aggregator = ScoreAggregator(classifier.num_classes)
    for frame in frames:
        outputs = classifier.infer(frame.samples)
        scores = np.asarray(outputs[score_output], dtype=np.float64).reshape(-1)
        if aggregator.frames == 0:
            logger.debug("First frame scores (first %d): %s", _DEBUG_TOP_N, scores[:_DEBUG_TOP_N])
        aggregator.add(scores)
    return aggregator


def run_pipeline(
    wav_bytes: bytes,
    classifier: Classifier,
    labels: LabelResolver,
    config: PipelineConfig,
) -> DetectionResult:
    """Detect instruments in one WAVE recording.

    Args:
        wav_bytes: Complete WAVE file contents.
        classifier: Loaded inference backend.
        labels: Resolver over the model's label table.
        config: Variant descriptor.

    Returns:
        DetectionResult whose labels are empty unless the outcome is
        DETECTED.
    """
    decoded = decode_wav(wav_bytes)
    if decoded.is_empty:
        return DetectionResult.empty(DetectionOutcome.DECODE_FAILED)

    signal = resample_nearest(decoded, config.target_sample_rate)
    if signal.is_empty:
        return DetectionResult.empty(DetectionOutcome.DECODE_FAILED)

    clip_gate = EnergyGate(config.clip_gate_dbfs, config.dbfs_epsilon)
    clip_dbfs = clip_gate.level(signal.samples)
    logger.debug("[%s] clip level %.2f dBFS over %d samples", config.name, clip_dbfs, len(signal))
    if clip_dbfs < clip_gate.threshold_dbfs:
        logger.debug("[%s] recording too quiet (%.2f dBFS)", config.name, clip_dbfs)
        return DetectionResult.empty(DetectionOutcome.SILENT, clip_dbfs=clip_dbfs)

    frame_length = config.resolve_frame_length(classifier.input_length)
    aggregator = score_frames(
        iter_pipeline_frames(signal, frame_length, config),
        classifier,
        config.score_output,
    )

    averaged = aggregator.average()
    if averaged is None:
        logger.debug("[%s] every frame was silent or too short", config.name)
        return DetectionResult.empty(DetectionOutcome.SILENT, clip_dbfs=clip_dbfs)

    if logger.isEnabledFor(logging.DEBUG):
        top = rank_classes(averaged)[:_DEBUG_TOP_N]
        logger.debug(
            "[%s] %d frame(s) scored; top classes: %s",
            config.name,
            aggregator.frames,
            ", ".join(f"{int(i)}={averaged[i]:.4f}" for i in top),
        )

    verdict = decision_policy_for(config).select_labels(averaged, labels)
    if not verdict:
        return DetectionResult.empty(
            DetectionOutcome.LOW_CONFIDENCE,
            frames_scored=aggregator.frames,
            clip_dbfs=clip_dbfs,
        )

    logger.debug("[%s] verdict: %s", config.name, verdict)
    return DetectionResult(
        labels=verdict,
        outcome=DetectionOutcome.DETECTED,
        frames_scored=aggregator.frames,
        clip_dbfs=clip_dbfs,
    )
