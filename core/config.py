"""
Configuration dataclasses for the instrument detection pipeline.

One parameterised pipeline serves every model variant. These immutable
descriptors carry everything that differs between variants (framing, silence
gates, decision thresholds, label handling) so the pipeline itself has no
per-variant branches beyond what the descriptor asks for.
"""

from dataclasses import dataclass

from core.audio.resample import TARGET_SAMPLE_RATE
from core.detection.labels import INSTRUMENT_WHITELIST

# Label file formats understood by ingestion.assets
LABEL_FORMATS: frozenset[str] = frozenset({"indexed", "class_map_csv"})


@dataclass(frozen=True)
class PipelineConfig:
    """
    Descriptor for one pipeline variant.

    Attributes:
        name: Variant name, used for logging and metrics labels.
        model_file: Model asset file name inside the model directory.
        label_file: Label asset file name inside the model directory.
        label_format: "indexed" for ``"<index> <name>"`` lines,
            "class_map_csv" for a header-skipped CSV whose last column
            is the class name.
        whole_clip: When True the first ``frame_length`` samples form a
            single frame and the framer is bypassed.
        frame_length: Samples per frame. None means "use the classifier's
            declared input length".
        hop: Fixed hop in samples. None derives it from ``hop_fraction``.
        hop_fraction: Hop as a fraction of ``frame_length`` when ``hop``
            is None.
        max_frames: Cap on frames scored per recording.
        clip_gate_dbfs: Whole-recording silence threshold.
        frame_gate_dbfs: Per-frame silence threshold. None disables it.
        dbfs_epsilon: Added to RMS before the log. 0.0 lets a true-zero
            signal map to -inf.
        confidence_threshold: Minimum averaged top score. None disables
            the global confidence/margin check.
        margin_threshold: Minimum gap between the top two scores.
        min_item_score: Per-label score floor (strict) applied while
            building the top-K list. None disables it.
        top_k: Maximum number of labels returned.
        translate: Pass class names through the Turkish lookup table.
        whitelist: Labels allowed in the verdict. None allows all.
        score_output: Index of the classifier output holding class scores.
        target_sample_rate: Rate the decoded audio is resampled to.

    Example:
        >>> config = PipelineConfig(name="short", frame_length=8000)
        >>> result = run_pipeline(wav_bytes, classifier, labels, config)
    """

    name: str = "custom"
    model_file: str = "vggish.tflite"
    label_file: str = "instrument_labels.txt"
    label_format: str = "indexed"
    whole_clip: bool = False
    frame_length: int | None = None
    hop: int | None = None
    hop_fraction: float = 0.5
    max_frames: int = 10
    clip_gate_dbfs: float = -50.0
    frame_gate_dbfs: float | None = -55.0
    dbfs_epsilon: float = 1e-12
    confidence_threshold: float | None = 0.35
    margin_threshold: float = 0.10
    min_item_score: float | None = None
    top_k: int = 5
    translate: bool = False
    whitelist: frozenset[str] | None = None
    score_output: int = 0
    target_sample_rate: int = TARGET_SAMPLE_RATE

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if not self.name:
            raise ValueError("name must be a non-empty string")
        if self.label_format not in LABEL_FORMATS:
            raise ValueError(
                f"Unknown label_format {self.label_format!r}, "
                f"valid options: {sorted(LABEL_FORMATS)}"
            )
        if self.frame_length is not None and self.frame_length <= 0:
            raise ValueError(f"frame_length must be positive, got {self.frame_length}")
        if self.hop is not None and self.hop <= 0:
            raise ValueError(f"hop must be positive, got {self.hop}")
        if not 0.0 < self.hop_fraction <= 1.0:
            raise ValueError(f"hop_fraction must be in (0, 1], got {self.hop_fraction}")
        if self.max_frames <= 0:
            raise ValueError(f"max_frames must be positive, got {self.max_frames}")
        if self.dbfs_epsilon < 0.0:
            raise ValueError(f"dbfs_epsilon must be non-negative, got {self.dbfs_epsilon}")
        if self.margin_threshold < 0.0:
            raise ValueError(
                f"margin_threshold must be non-negative, got {self.margin_threshold}"
            )
        if self.top_k <= 0:
            raise ValueError(f"top_k must be positive, got {self.top_k}")
        if self.score_output < 0:
            raise ValueError(f"score_output must be non-negative, got {self.score_output}")
        if self.target_sample_rate <= 0:
            raise ValueError(
                f"target_sample_rate must be positive, got {self.target_sample_rate}"
            )

    def resolve_frame_length(self, input_length: int) -> int:
        """Return the frame length, falling back to the classifier input length."""
        return self.frame_length if self.frame_length is not None else input_length

    def resolve_hop(self, frame_length: int) -> int:
        """Return the hop in samples for a given frame length (never below 1)."""
        if self.hop is not None:
            return self.hop
        return max(1, int(frame_length * self.hop_fraction))


# Pre-defined configurations for the bundled model variants

TEACHABLE_CONFIG = PipelineConfig(
    name="teachable",
    whole_clip=True,
    max_frames=1,
    clip_gate_dbfs=-70.0,
    frame_gate_dbfs=None,
    dbfs_epsilon=0.0,
    confidence_threshold=None,
    min_item_score=0.01,
    top_k=3,
)
"""Teachable Machine export: whole clip as one frame, loose per-label floor."""

YAMNET_CONFIG = PipelineConfig(
    name="yamnet",
    model_file="yamnet.tflite",
    label_file="yamnet_class_map.csv",
    label_format="class_map_csv",
    frame_length=15600,
    hop=8000,
    translate=True,
    whitelist=INSTRUMENT_WHITELIST,
)
"""General-purpose YAMNet: 0.975 s windows, ~0.5 s hop, instrument whitelist."""

CUSTOM_CONFIG = PipelineConfig(name="custom")
"""Custom instrument model: sliding window sized from the model, 50% hop."""

PRESETS: dict[str, PipelineConfig] = {
    config.name: config for config in (TEACHABLE_CONFIG, YAMNET_CONFIG, CUSTOM_CONFIG)
}
"""Variant name → configuration."""

DEFAULT_VARIANT = "teachable"
