"""
FastAPI dependency providers.

Provides one InstrumentDetector per variant, created once and reused across
requests. Detectors load their model lazily on first use; once loaded they
are read-only and safe to share.
"""

from core.config import PRESETS
from ingestion.detector import InstrumentDetector, create_detector

_detectors: dict[str, InstrumentDetector] | None = None


def get_detector_registry() -> dict[str, InstrumentDetector]:
    """
    Return the cached variant → detector mapping.

    Detectors are created on first call (unloaded) and reused thereafter.
    The model directory is read from ``INSTRUMENT_MODEL_DIR``.
    """
    global _detectors  # noqa: PLW0603
    if _detectors is None:
        _detectors = {name: create_detector(name) for name in PRESETS}
    return _detectors
