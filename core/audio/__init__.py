"""
core/audio — Pure audio preprocessing for instrument detection.

Turns raw WAVE bytes into classifier-ready frames. All functions are pure:
they take bytes or numpy arrays and return new values. No file I/O — that
lives in ingestion/.

Public API:
    Types:      PcmHeader, DataChunk, MonoSignal, Frame
    Decoding:   decode_wav, parse_wav, WavDecodeError
    Resampling: resample_nearest, TARGET_SAMPLE_RATE
    Energy:     rms, dbfs, to_dbfs, EnergyGate
    Framing:    Framer, whole_clip_frame
"""

from core.audio.energy import EnergyGate, dbfs, rms, to_dbfs
from core.audio.framing import Framer, whole_clip_frame
from core.audio.resample import TARGET_SAMPLE_RATE, resample_nearest
from core.audio.types import DataChunk, Frame, MonoSignal, PcmHeader
from core.audio.wav import WavDecodeError, decode_wav, parse_wav

__all__ = [
    "PcmHeader",
    "DataChunk",
    "MonoSignal",
    "Frame",
    "decode_wav",
    "parse_wav",
    "WavDecodeError",
    "resample_nearest",
    "TARGET_SAMPLE_RATE",
    "rms",
    "dbfs",
    "to_dbfs",
    "EnergyGate",
    "Framer",
    "whole_clip_frame",
]
