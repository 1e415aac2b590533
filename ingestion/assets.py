"""
ingestion/assets.py — File I/O boundary for model and label assets.

This is the ONLY module that reads model bytes and label files from disk.
Parsing of label text is delegated to the pure parsers in
core/detection/labels.py.

The model directory comes from ``INSTRUMENT_MODEL_DIR`` (a ``.env`` file is
honoured) and defaults to ``assets/model``.

Usage:
    from ingestion.assets import load_label_table, model_path
    labels = load_label_table(YAMNET_CONFIG)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from core.config import PipelineConfig
from core.detection.labels import parse_class_map_csv, parse_indexed_labels

logger = logging.getLogger(__name__)

MODEL_DIR_ENV: str = "INSTRUMENT_MODEL_DIR"
MODEL_THREADS_ENV: str = "INSTRUMENT_MODEL_THREADS"

DEFAULT_MODEL_DIR: str = "assets/model"
DEFAULT_MODEL_THREADS: int = 2


class AssetLoadError(RuntimeError):
    """A model or label asset is missing, unreadable or unusable."""


def resolve_model_dir(model_dir: str | Path | None = None) -> Path:
    """Return the directory holding model assets.

    An explicit argument wins; otherwise ``INSTRUMENT_MODEL_DIR`` from the
    environment (after loading ``.env``), then ``assets/model``.
    """
    if model_dir is not None:
        return Path(model_dir)
    load_dotenv()
    return Path(os.environ.get(MODEL_DIR_ENV, DEFAULT_MODEL_DIR))


def resolve_model_threads() -> int:
    """Interpreter thread count from ``INSTRUMENT_MODEL_THREADS`` (default 2)."""
    load_dotenv()
    raw = os.environ.get(MODEL_THREADS_ENV, "")
    if not raw.strip():
        return DEFAULT_MODEL_THREADS
    try:
        threads = int(raw)
    except ValueError as exc:
        raise ValueError(f"{MODEL_THREADS_ENV} must be an integer, got {raw!r}") from exc
    if threads <= 0:
        raise ValueError(f"{MODEL_THREADS_ENV} must be positive, got {threads}")
    return threads


def model_path(config: PipelineConfig, model_dir: str | Path | None = None) -> Path:
    """Path of the model file for a variant."""
    return resolve_model_dir(model_dir) / config.model_file


def label_path(config: PipelineConfig, model_dir: str | Path | None = None) -> Path:
    """Path of the label file for a variant."""
    return resolve_model_dir(model_dir) / config.label_file


def read_model_bytes(path: str | Path) -> bytes:
    """Read a model file into memory.

    Raises:
        AssetLoadError: File is missing, unreadable or empty.
    """
    file_path = Path(path)
    try:
        data = file_path.read_bytes()
    except OSError as exc:
        raise AssetLoadError(f"Cannot read model file {file_path}: {exc}") from exc
    if not data:
        raise AssetLoadError(f"Model file is empty: {file_path}")
    return data


def parse_label_text(text: str, config: PipelineConfig) -> tuple[str, ...]:
    """Parse label file contents according to the variant's label format."""
    if config.label_format == "class_map_csv":
        return parse_class_map_csv(text, translate=config.translate)
    return parse_indexed_labels(text)


def load_label_table(config: PipelineConfig, model_dir: str | Path | None = None) -> tuple[str, ...]:
    """Read and parse the label file for a variant.

    Raises:
        AssetLoadError: File is missing, not UTF-8, or yields no labels.
    """
    path = label_path(config, model_dir)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise AssetLoadError(f"Cannot read label file {path}: {exc}") from exc

    labels = parse_label_text(text, config)
    if not labels:
        raise AssetLoadError(f"Label file {path} contains no labels")
    logger.debug("Loaded %d labels from %s", len(labels), path.name)
    return labels
