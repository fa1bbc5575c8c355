# video_digest/analyzer/schema.py
"""
Authoritative schema definitions for the video analysis pipeline.

This module defines:
- The structure of the output JSON artifact
- The StageResult contract returned by every pipeline stage
- Typed failure categories for diagnostics
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FailureType(str, Enum):
    """Typed failure categories for machine-parsable diagnostics."""
    INPUT_ERROR = "input_error"
    CAPTIONS_UNAVAILABLE = "captions_unavailable"
    TRANSIENT_FETCH_FAILURE = "transient_fetch_failure"
    MALFORMED_CAPTION_DATA = "malformed_caption_data"
    SOURCE_ERROR = "source_error"
    INTERPRETATION_ERROR = "interpretation_error"


class StageFailure(BaseModel):
    """Structured representation of a single failure."""
    stage: str
    type: FailureType
    cause: str
    impact: str
    suggested_fixes: List[str] = Field(default_factory=list)


class StageResult(BaseModel):
    """
    Standardized result returned by every pipeline stage.

    Success is False if any error occurred, even if partial progress was made.
    """
    stage_name: str
    success: bool
    warnings: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    failures: List[StageFailure] = Field(default_factory=list)
    suggested_fixes: List[str] = Field(default_factory=list)
    execution_time_ms: Optional[float] = None

    model_config = ConfigDict(frozen=True)


class Identity(BaseModel):
    """Traceability fields."""
    content_id: uuid.UUID = Field(default_factory=uuid.uuid4)
    workflow_run_id: uuid.UUID = Field(default_factory=uuid.uuid4)
    created_at: datetime = Field(default_factory=_utcnow)
    workflow_version: str = "0.1.0"


class Source(BaseModel):
    """Origin facts about the video."""
    source_type: str = "youtube"
    url: str
    video_id: Optional[str] = None
    title: Optional[str] = None
    channel_name: Optional[str] = None
    thumbnail_url: Optional[str] = None
    duration_seconds: Optional[int] = None
    caption_language: Optional[str] = None


class TranscriptItem(BaseModel):
    """One transcript segment as written to the artifact."""
    text: str
    offset_ms: int = Field(ge=0)
    duration_ms: int = Field(ge=0)
    timestamp: str


class KeyInsight(BaseModel):
    emoji: str = Field(min_length=1, max_length=2)
    text: str


class TimedQuoteModel(BaseModel):
    text: str
    timestamp: str = Field(pattern=r"^\d{2,}:\d{2}$")
    match: Optional[str] = None


class Analysis(BaseModel):
    """Language-model output, with quotes aligned to the transcript."""
    summary: Optional[str] = None
    key_insights: List[KeyInsight] = Field(default_factory=list)
    quotes: List[TimedQuoteModel] = Field(default_factory=list)


class Diagnostics(BaseModel):
    """Explainability and audit trail."""
    stage_status: Dict[str, StageResult] = Field(default_factory=dict)
    warnings: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    suggested_fixes: List[str] = Field(default_factory=list)


class AnalysisObject(BaseModel):
    """
    Root model for the analysis artifact.

    `error` is set when a required stage failed; `suggest_manual_input` tells
    the caller whether pasting a transcript by hand is worth offering.
    """
    identity: Identity
    source: Source
    transcript: List[TranscriptItem] = Field(default_factory=list)
    analysis: Analysis = Field(default_factory=Analysis)
    diagnostics: Diagnostics = Field(default_factory=Diagnostics)
    error: Optional[str] = None
    suggest_manual_input: bool = False

    @model_validator(mode="after")
    def validate_error_state(self) -> "AnalysisObject":
        if self.suggest_manual_input and not self.error:
            raise ValueError("suggest_manual_input requires an error")
        return self
