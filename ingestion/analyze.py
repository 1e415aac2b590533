"""
Analyze a WAVE recording and print the detected instruments.

CLI entry point::

    python -m ingestion.analyze recording.wav --variant yamnet
"""

from __future__ import annotations

import argparse
import logging
import sys

from core.config import DEFAULT_VARIANT, PRESETS
from core.detection.types import DetectionOutcome, DetectionResult
from ingestion.detector import create_detector

logger = logging.getLogger(__name__)

# Status text shown when no labels are returned.
STATUS_MESSAGES: dict[DetectionOutcome, str] = {
    DetectionOutcome.DECODE_FAILED: "No instrument detected (unreadable or empty WAV)",
    DetectionOutcome.SILENT: "No instrument detected (recording too quiet)",
    DetectionOutcome.LOW_CONFIDENCE: "No instrument detected",
    DetectionOutcome.MODEL_UNAVAILABLE: "Model unavailable",
    DetectionOutcome.ERROR: "Analysis error",
}

# Process exit codes.
EXIT_OK = 0
EXIT_MODEL_UNAVAILABLE = 2
EXIT_ERROR = 3


def format_result(result: DetectionResult) -> str:
    """One label per line, or the status message for an empty verdict."""
    if result.labels:
        return "\n".join(result.labels)
    return STATUS_MESSAGES.get(result.outcome, "No instrument detected")


def exit_code_for(result: DetectionResult) -> int:
    if result.outcome is DetectionOutcome.MODEL_UNAVAILABLE:
        return EXIT_MODEL_UNAVAILABLE
    if result.outcome is DetectionOutcome.ERROR:
        return EXIT_ERROR
    return EXIT_OK


def run(path: str, *, variant: str = DEFAULT_VARIANT, model_dir: str | None = None) -> DetectionResult:
    """Load the variant's model and analyze one file."""
    detector = create_detector(variant, model_dir=model_dir)
    if not detector.ensure_loaded():
        return DetectionResult.empty(DetectionOutcome.MODEL_UNAVAILABLE)
    return detector.analyze_file(path)


def main(argv: list[str] | None = None) -> int:
    """Parse CLI arguments, analyze the recording and print the result."""
    parser = argparse.ArgumentParser(
        description="Detect musical instruments in a WAV recording.",
    )
    parser.add_argument("path", help="Path to a 16/32-bit PCM WAV file.")
    parser.add_argument(
        "--variant",
        choices=sorted(PRESETS),
        default=DEFAULT_VARIANT,
        help=f"Model variant to use (default: {DEFAULT_VARIANT}).",
    )
    parser.add_argument(
        "--model-dir",
        default=None,
        help="Directory with model and label files (default: $INSTRUMENT_MODEL_DIR or assets/model).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log per-frame scores and pipeline decisions.",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    result = run(args.path, variant=args.variant, model_dir=args.model_dir)
    logger.info(
        "%s: outcome=%s frames=%d",
        args.variant,
        result.outcome.value,
        result.frames_scored,
    )
    print(format_result(result))
    return exit_code_for(result)


if __name__ == "__main__":
    sys.exit(main())
