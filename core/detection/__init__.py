"""Instrument detection — score aggregation, decisions and labels.

Exports:
    Classifier                                   (inference protocol)
    DetectionOutcome, DetectionResult            (types)
    ScoreAggregator                              (aggregate)
    DecisionPolicy, rank_classes                 (decision)
    LabelResolver, translate_label,
    parse_indexed_labels, parse_class_map_csv,
    TURKISH_LABELS, INSTRUMENT_WHITELIST         (labels)

The pipeline itself lives in ``core.detection.pipeline`` and is imported
from there directly, since it depends on ``core.config``.
"""

from core.detection.aggregate import ScoreAggregator
from core.detection.classifier import Classifier
from core.detection.decision import DecisionPolicy, rank_classes
from core.detection.labels import (
    INSTRUMENT_WHITELIST,
    TURKISH_LABELS,
    LabelResolver,
    parse_class_map_csv,
    parse_indexed_labels,
    translate_label,
)
from core.detection.types import DetectionOutcome, DetectionResult

__all__ = [
    "Classifier",
    "DetectionOutcome",
    "DetectionResult",
    "ScoreAggregator",
    "DecisionPolicy",
    "rank_classes",
    "LabelResolver",
    "translate_label",
    "parse_indexed_labels",
    "parse_class_map_csv",
    "TURKISH_LABELS",
    "INSTRUMENT_WHITELIST",
]
