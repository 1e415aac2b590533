"""Tests for POST /analyze/instruments, /health and /metrics."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
from fastapi.testclient import TestClient

from api.deps import get_detector_registry
from api.main import app
from core.config import CUSTOM_CONFIG, TEACHABLE_CONFIG, YAMNET_CONFIG
from ingestion.detector import InstrumentDetector

from conftest import FakeClassifier, build_wav, sine

LABELS = ["Arp", "Keman", "Ney", "Ud"]
SCORES = [0.7, 0.2, 0.05, 0.05]


@pytest.fixture()
def registry(tmp_path: Path) -> dict[str, InstrumentDetector]:
    """Teachable and custom are loaded fakes; yamnet points at an empty asset dir."""
    return {
        "teachable": InstrumentDetector.from_components(
            TEACHABLE_CONFIG, FakeClassifier(SCORES, input_length=16000), LABELS
        ),
        "custom": InstrumentDetector.from_components(
            CUSTOM_CONFIG, FakeClassifier(SCORES, input_length=4000), LABELS
        ),
        "yamnet": InstrumentDetector(YAMNET_CONFIG, model_dir=tmp_path / "no-models"),
    }


@pytest.fixture(autouse=True)
def _setup_and_teardown(registry: dict[str, InstrumentDetector]):  # type: ignore[no-untyped-def]
    app.dependency_overrides.clear()
    app.dependency_overrides[get_detector_registry] = lambda: registry
    yield
    app.dependency_overrides.clear()


client = TestClient(app)


def _write(tmp_path: Path, samples: np.ndarray, name: str = "take.wav") -> str:
    path = tmp_path / name
    path.write_bytes(build_wav(samples))
    return str(path)


class TestAnalyzeInstruments:
    def test_detected(self, tmp_path: Path) -> None:
        resp = client.post("/analyze/instruments", json={"file_path": _write(tmp_path, sine(1.0))})
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "detected"
        assert data["instruments"] == ["Arp", "Keman", "Ney"]
        assert data["variant"] == "teachable"
        assert data["frames_scored"] == 1

    def test_custom_variant(self, tmp_path: Path) -> None:
        resp = client.post(
            "/analyze/instruments",
            json={"file_path": _write(tmp_path, sine(1.0)), "variant": "custom"},
        )
        data = resp.json()
        assert data["instruments"] == LABELS
        assert data["frames_scored"] == 7

    def test_silence_is_not_found(self, tmp_path: Path) -> None:
        resp = client.post(
            "/analyze/instruments",
            json={"file_path": _write(tmp_path, np.zeros(32000)), "variant": "custom"},
        )
        data = resp.json()
        assert resp.status_code == 200
        assert data["status"] == "not_found"
        assert data["outcome"] == "silent"
        assert data["instruments"] == []

    def test_negative_infinite_level_serialized_as_null(self, tmp_path: Path) -> None:
        resp = client.post("/analyze/instruments", json={"file_path": _write(tmp_path, np.zeros(16000))})
        data = resp.json()
        assert data["outcome"] == "silent"
        assert data["clip_dbfs"] is None

    def test_unreadable_wav_is_not_found(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.wav"
        path.write_bytes(b"RIFF" + b"\x00" * 10)
        resp = client.post("/analyze/instruments", json={"file_path": str(path)})
        data = resp.json()
        assert data["status"] == "not_found"
        assert data["outcome"] == "decode_failed"

    def test_missing_model_is_model_unavailable(self, tmp_path: Path) -> None:
        resp = client.post(
            "/analyze/instruments",
            json={"file_path": _write(tmp_path, sine(1.0)), "variant": "yamnet"},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "model_unavailable"
        assert data["instruments"] == []

    def test_missing_file_returns_404(self, tmp_path: Path) -> None:
        resp = client.post("/analyze/instruments", json={"file_path": str(tmp_path / "nope.wav")})
        assert resp.status_code == 404

    def test_empty_path_returns_422(self) -> None:
        resp = client.post("/analyze/instruments", json={"file_path": "   "})
        assert resp.status_code == 422

    def test_unknown_variant_returns_422(self, tmp_path: Path) -> None:
        resp = client.post(
            "/analyze/instruments",
            json={"file_path": _write(tmp_path, sine(1.0)), "variant": "spectrogram"},
        )
        assert resp.status_code == 422


class TestServiceEndpoints:
    def test_health(self) -> None:
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_metrics(self) -> None:
        resp = client.get("/metrics")
        assert resp.status_code == 200
