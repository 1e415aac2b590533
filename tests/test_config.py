"""
Tests for core.config module.

These tests verify PipelineConfig validation and the predefined variants.
"""

import pytest

from core.config import (
    CUSTOM_CONFIG,
    DEFAULT_VARIANT,
    PRESETS,
    TEACHABLE_CONFIG,
    YAMNET_CONFIG,
    PipelineConfig,
)
from core.detection.labels import INSTRUMENT_WHITELIST


class TestPipelineConfigValidation:
    """Test PipelineConfig parameter validation."""

    def test_default_values(self) -> None:
        config = PipelineConfig()
        assert config.max_frames == 10
        assert config.clip_gate_dbfs == -50.0
        assert config.frame_gate_dbfs == -55.0
        assert config.confidence_threshold == 0.35
        assert config.margin_threshold == 0.10
        assert config.top_k == 5
        assert config.target_sample_rate == 16000

    def test_config_is_frozen(self) -> None:
        config = PipelineConfig()
        with pytest.raises(AttributeError):
            config.top_k = 3  # type: ignore[misc]

    @pytest.mark.parametrize(
        "kwargs, message",
        [
            ({"name": ""}, "name must be a non-empty string"),
            ({"label_format": "json"}, "Unknown label_format"),
            ({"frame_length": 0}, "frame_length must be positive"),
            ({"hop": -1}, "hop must be positive"),
            ({"hop_fraction": 0.0}, "hop_fraction"),
            ({"hop_fraction": 1.5}, "hop_fraction"),
            ({"max_frames": 0}, "max_frames must be positive"),
            ({"dbfs_epsilon": -1e-9}, "dbfs_epsilon must be non-negative"),
            ({"margin_threshold": -0.1}, "margin_threshold must be non-negative"),
            ({"top_k": 0}, "top_k must be positive"),
            ({"score_output": -1}, "score_output must be non-negative"),
            ({"target_sample_rate": 0}, "target_sample_rate must be positive"),
        ],
    )
    def test_invalid_values_raise(self, kwargs: dict, message: str) -> None:
        with pytest.raises(ValueError, match=message):
            PipelineConfig(**kwargs)


class TestResolvers:
    def test_frame_length_falls_back_to_input_length(self) -> None:
        assert PipelineConfig().resolve_frame_length(960) == 960

    def test_explicit_frame_length_wins(self) -> None:
        assert PipelineConfig(frame_length=400).resolve_frame_length(960) == 400

    def test_hop_from_fraction(self) -> None:
        assert PipelineConfig().resolve_hop(15601) == 7800

    def test_hop_never_below_one(self) -> None:
        assert PipelineConfig().resolve_hop(1) == 1

    def test_explicit_hop(self) -> None:
        assert PipelineConfig(hop=123).resolve_hop(15600) == 123


class TestPresets:
    def test_all_variants_registered(self) -> None:
        assert set(PRESETS) == {"teachable", "yamnet", "custom"}
        assert DEFAULT_VARIANT in PRESETS

    def test_teachable_is_whole_clip(self) -> None:
        assert TEACHABLE_CONFIG.whole_clip is True
        assert TEACHABLE_CONFIG.clip_gate_dbfs == -70.0
        assert TEACHABLE_CONFIG.frame_gate_dbfs is None
        assert TEACHABLE_CONFIG.dbfs_epsilon == 0.0
        assert TEACHABLE_CONFIG.confidence_threshold is None
        assert TEACHABLE_CONFIG.min_item_score == 0.01
        assert TEACHABLE_CONFIG.top_k == 3

    def test_yamnet_framing_and_vocabulary(self) -> None:
        assert YAMNET_CONFIG.frame_length == 15600
        assert YAMNET_CONFIG.resolve_hop(15600) == 8000
        assert YAMNET_CONFIG.label_format == "class_map_csv"
        assert YAMNET_CONFIG.translate is True
        assert YAMNET_CONFIG.whitelist == INSTRUMENT_WHITELIST

    def test_custom_uses_model_frame_and_half_hop(self) -> None:
        assert CUSTOM_CONFIG.frame_length is None
        assert CUSTOM_CONFIG.resolve_hop(1024) == 512
        assert CUSTOM_CONFIG.whitelist is None

    def test_sliding_variants_share_gates(self) -> None:
        for config in (YAMNET_CONFIG, CUSTOM_CONFIG):
            assert config.clip_gate_dbfs == -50.0
            assert config.frame_gate_dbfs == -55.0
            assert config.max_frames == 10
