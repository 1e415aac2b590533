"""
api/routes/analyze.py — Instrument detection endpoint.

Endpoints:
    POST /analyze/instruments  — Detect instruments in a WAV file on the server

The endpoint accepts a file path on the server filesystem and delegates to
the InstrumentDetector for the requested variant (see api/deps.py).
"""

from __future__ import annotations

import logging
import math
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException

from api.deps import get_detector_registry
from api.schemas.analyze import InstrumentAnalyzeRequest, InstrumentAnalyzeResponse
from core.detection.types import DetectionOutcome, DetectionResult
from ingestion.detector import InstrumentDetector

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analyze", tags=["analyze"])

# Pipeline outcome → coarse status shown to clients
_STATUS_BY_OUTCOME: dict[DetectionOutcome, str] = {
    DetectionOutcome.DETECTED: "detected",
    DetectionOutcome.DECODE_FAILED: "not_found",
    DetectionOutcome.SILENT: "not_found",
    DetectionOutcome.LOW_CONFIDENCE: "not_found",
    DetectionOutcome.MODEL_UNAVAILABLE: "model_unavailable",
    DetectionOutcome.ERROR: "error",
}


def _to_response(result: DetectionResult, variant: str) -> InstrumentAnalyzeResponse:
    clip_dbfs = result.clip_dbfs
    if clip_dbfs is not None and not math.isfinite(clip_dbfs):
        clip_dbfs = None  # -inf is not valid JSON
    return InstrumentAnalyzeResponse(
        status=_STATUS_BY_OUTCOME[result.outcome],
        instruments=list(result.labels),
        outcome=result.outcome.value,
        frames_scored=result.frames_scored,
        clip_dbfs=clip_dbfs,
        variant=variant,
    )


# ---------------------------------------------------------------------------
# POST /analyze/instruments
# ---------------------------------------------------------------------------


@router.post("/instruments", response_model=InstrumentAnalyzeResponse)
def analyze_instruments(
    request: InstrumentAnalyzeRequest,
    registry: dict[str, InstrumentDetector] = Depends(get_detector_registry),
) -> InstrumentAnalyzeResponse:
    """Detect the instruments present in a short WAV recording.

    An empty instrument list with status ``not_found`` is a normal result
    (silence, unreadable audio or no confident class), distinct from
    ``model_unavailable``.

    Args:
        request: InstrumentAnalyzeRequest with file_path and variant.

    Returns:
        InstrumentAnalyzeResponse with status and instrument labels.

    Raises:
        404: file_path does not exist.
        422: Request validation failure (unknown variant, empty path).
    """
    path = Path(request.file_path)
    if not path.is_file():
        raise HTTPException(status_code=404, detail=f"Recording not found: {path}")

    detector = registry[request.variant]
    if not detector.ensure_loaded():
        result = DetectionResult.empty(DetectionOutcome.MODEL_UNAVAILABLE)
    else:
        result = detector.analyze_file(path)

    logger.info(
        "analyze_instruments variant=%s outcome=%s frames=%d",
        request.variant,
        result.outcome.value,
        result.frames_scored,
    )
    return _to_response(result, request.variant)
