"""
Pydantic schemas for the ``/analyze/instruments`` endpoint.

Defines request validation and response serialization models.
"""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from core.config import DEFAULT_VARIANT

Variant = Literal["teachable", "yamnet", "custom"]
Status = Literal["detected", "not_found", "model_unavailable", "error"]


class InstrumentAnalyzeRequest(BaseModel):
    """Request body for ``POST /analyze/instruments``."""

    file_path: str = Field(
        ...,
        max_length=4096,
        description="Server-side path to a 16/32-bit PCM WAV recording.",
    )
    variant: Variant = Field(
        default=DEFAULT_VARIANT,
        description="Model variant: teachable (whole clip), yamnet (general, whitelisted), custom.",
    )

    @field_validator("file_path")
    @classmethod
    def file_path_must_not_be_empty(cls, v: str) -> str:
        """Validate that file_path is not empty or whitespace-only."""
        if not v.strip():
            raise ValueError("file_path must be a non-empty string")
        return v


class InstrumentAnalyzeResponse(BaseModel):
    """Response body for ``POST /analyze/instruments``."""

    status: Status = Field(
        ...,
        description=(
            "detected: instruments found; not_found: nothing confident "
            "(silent, unreadable or ambiguous audio); model_unavailable: "
            "model or labels failed to load; error: analysis failed."
        ),
    )
    instruments: list[str] = Field(
        default_factory=list, description="Detected instrument labels, best first."
    )
    outcome: str = Field(..., description="Detailed pipeline outcome, e.g. 'silent'.")
    frames_scored: int = Field(default=0, ge=0, description="Frames classified.")
    clip_dbfs: float | None = Field(
        default=None, description="Whole-recording level in dBFS, if computed."
    )
    variant: Variant = Field(..., description="Variant that produced the result.")
