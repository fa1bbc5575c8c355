# video_digest/transcription/errors.py
"""
Error taxonomy for transcript acquisition.

Every failure raised by the transcription subsystem is a TranscriptError.
Callers branch on `kind` (or the subclass) and on `suggest_manual_input`;
the original exception, when there is one, is kept as __cause__.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional


class ErrorKind(str, Enum):
    """Machine-readable failure categories."""
    INVALID_INPUT = "input_error"
    CAPTIONS_UNAVAILABLE = "captions_unavailable"
    TRANSIENT_FETCH_FAILURE = "transient_fetch_failure"
    RATE_LIMITED = "rate_limited"
    MALFORMED_CAPTION_DATA = "malformed_caption_data"


class TranscriptError(Exception):
    """Base domain error for the transcript pipeline."""

    kind: ErrorKind = ErrorKind.TRANSIENT_FETCH_FAILURE

    @property
    def suggest_manual_input(self) -> bool:
        """Whether the user should be offered manual transcript entry instead."""
        return self.kind is not ErrorKind.INVALID_INPUT

    def cause_chain(self) -> List[str]:
        """Messages from this error down through its __cause__ links."""
        chain: List[str] = []
        current: Optional[BaseException] = self
        while current is not None:
            message = str(current) or current.__class__.__name__
            if message not in chain:
                chain.append(message)
            current = current.__cause__
        return chain


class InvalidInputError(TranscriptError):
    """No video identifier could be resolved from the user's input."""
    kind = ErrorKind.INVALID_INPUT


class CaptionsUnavailableError(TranscriptError):
    """The watch page loaded but exposes no caption track."""
    kind = ErrorKind.CAPTIONS_UNAVAILABLE


class FetchError(TranscriptError):
    """A fetch failed for good: retries exhausted, timed out, or cancelled."""
    kind = ErrorKind.TRANSIENT_FETCH_FAILURE

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
        attempts: int = 0,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.attempts = attempts


class FetchTimeoutError(FetchError):
    """A single attempt exceeded its timeout. Terminal for that fetch."""


class FetchCancelledError(FetchError):
    """The caller cancelled the fetch while it was waiting or attempting."""


class RateLimitedError(TranscriptError):
    """HTTP 429. Handled inside the fetcher; only seen as a FetchError's cause."""
    kind = ErrorKind.RATE_LIMITED

    def __init__(self, message: str, *, retry_after_ms: int | None = None) -> None:
        super().__init__(message)
        self.retry_after_ms = retry_after_ms


class MalformedCaptionDataError(TranscriptError):
    """Caption data was present but unusable."""
    kind = ErrorKind.MALFORMED_CAPTION_DATA


class EmptyTranscriptError(MalformedCaptionDataError):
    """The caption track contained no timed-text chunks."""
