"""
Shared contracts for the transcription subsystem.
Single responsibility: define config and value dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple


@dataclass(frozen=True)
class FetchConfig:
    """Per-request fetch policy. Never mutated during a fetch."""
    language: str = "en"
    max_retries: int = 3
    base_retry_delay_ms: int = 1000  # doubled per attempt
    timeout_ms: int = 10000  # per attempt

    def __post_init__(self) -> None:
        if not self.language:
            raise ValueError("language must be a non-empty language code")
        if self.max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        if self.base_retry_delay_ms < 0:
            raise ValueError("base_retry_delay_ms must be non-negative")
        if self.timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    def backoff_ms(self, attempt: int) -> int:
        """Exponential backoff for a zero-based attempt number."""
        return self.base_retry_delay_ms * (2 ** attempt)


@dataclass(frozen=True)
class CaptionTrack:
    """One caption track offered by the platform for a video."""
    language_code: str
    base_url: str
    name: Optional[str] = None
    kind: Optional[str] = None  # "asr" for auto-generated

    @property
    def is_generated(self) -> bool:
        return self.kind == "asr"


@dataclass(frozen=True)
class TranscriptSegment:
    """One timed unit of caption text."""
    text: str
    offset_ms: int
    duration_ms: int

    @property
    def offset_seconds(self) -> float:
        return self.offset_ms / 1000

    @property
    def duration_seconds(self) -> float:
        return self.duration_ms / 1000


@dataclass(frozen=True)
class Transcript:
    """Ordered caption segments for one video. Order is document order."""
    video_id: str
    segments: Tuple[TranscriptSegment, ...]
    language: Optional[str] = None
    track_url: Optional[str] = None

    def __iter__(self) -> Iterator[TranscriptSegment]:
        return iter(self.segments)

    def __len__(self) -> int:
        return len(self.segments)

    @property
    def full_text(self) -> str:
        """Plain caption text, as handed to the summariser."""
        return " ".join(segment.text for segment in self.segments).strip()
