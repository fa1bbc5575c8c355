from video_digest.transcription.core import fetch_transcript, search_transcript
from video_digest.transcription.errors import (
    CaptionsUnavailableError,
    EmptyTranscriptError,
    ErrorKind,
    FetchCancelledError,
    FetchError,
    FetchTimeoutError,
    InvalidInputError,
    MalformedCaptionDataError,
    RateLimitedError,
    TranscriptError,
)
from video_digest.transcription.fetcher import ResilientFetcher
from video_digest.transcription.formatting import format_precise_timestamp, format_timestamp
from video_digest.transcription.locator import locate_caption_track
from video_digest.transcription.parser import parse_transcript
from video_digest.transcription.resolver import require_video_id, resolve_video_id
from video_digest.transcription.schema import CaptionTrack, FetchConfig, Transcript, TranscriptSegment

__all__ = [
    "CaptionTrack",
    "CaptionsUnavailableError",
    "EmptyTranscriptError",
    "ErrorKind",
    "FetchCancelledError",
    "FetchConfig",
    "FetchError",
    "FetchTimeoutError",
    "InvalidInputError",
    "MalformedCaptionDataError",
    "RateLimitedError",
    "ResilientFetcher",
    "Transcript",
    "TranscriptError",
    "TranscriptSegment",
    "fetch_transcript",
    "format_precise_timestamp",
    "format_timestamp",
    "locate_caption_track",
    "parse_transcript",
    "require_video_id",
    "resolve_video_id",
    "search_transcript",
]
