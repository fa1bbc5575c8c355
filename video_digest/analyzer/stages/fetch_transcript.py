# video_digest/analyzer/stages/fetch_transcript.py
"""
Stage 3: Fetch the caption transcript.

Wraps transcription.fetch_transcript and turns TranscriptError into a typed
StageFailure. Required: when this stage fails the runner stops and the
artifact carries the error.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Tuple

from video_digest.analyzer.schema import FailureType, StageFailure, StageResult
from video_digest.analyzer.stages.base import timer
from video_digest.logging_core.logger import get_logger, log_event
from video_digest.transcription import FetchConfig, ResilientFetcher, TranscriptError, fetch_transcript
from video_digest.transcription.errors import ErrorKind
from video_digest.transcription.formatting import format_precise_timestamp


MANUAL_INPUT_FIX = "Paste the transcript manually and analyze it as text"

FIXES = {
    ErrorKind.INVALID_INPUT: ["Check the video URL"],
    ErrorKind.CAPTIONS_UNAVAILABLE: ["Captions are disabled for this video", MANUAL_INPUT_FIX],
    ErrorKind.TRANSIENT_FETCH_FAILURE: ["Try again later (YouTube may be rate limiting)", MANUAL_INPUT_FIX],
    ErrorKind.RATE_LIMITED: ["Try again later (YouTube may be rate limiting)", MANUAL_INPUT_FIX],
    ErrorKind.MALFORMED_CAPTION_DATA: ["YouTube page format may have changed", MANUAL_INPUT_FIX],
}

FAILURE_TYPES = {
    ErrorKind.INVALID_INPUT: FailureType.INPUT_ERROR,
    ErrorKind.CAPTIONS_UNAVAILABLE: FailureType.CAPTIONS_UNAVAILABLE,
    ErrorKind.TRANSIENT_FETCH_FAILURE: FailureType.TRANSIENT_FETCH_FAILURE,
    ErrorKind.RATE_LIMITED: FailureType.TRANSIENT_FETCH_FAILURE,
    ErrorKind.MALFORMED_CAPTION_DATA: FailureType.MALFORMED_CAPTION_DATA,
}

TOO_SHORT_MESSAGE = (
    "The transcript is too short or unavailable for meaningful analysis. "
    "Please provide more content or try manual input."
)


def build_fetcher(config: Dict[str, Any], logger: logging.Logger) -> ResilientFetcher:
    fetch_config = config.get("fetch_config") or FetchConfig()
    return ResilientFetcher(
        fetch_config,
        client=config.get("http_client"),
        sleep=config.get("sleep"),
        cancel_event=config.get("cancel_event"),
        logger=logger,
    )


def process(content_object: Dict[str, Any], run_id: uuid.UUID, config: Dict[str, Any]) -> Tuple[Dict[str, Any], StageResult]:
    """Fetch the transcript and store it as content_object["transcript"]."""
    stage_name = "fetch_transcript"
    logger = get_logger(run_id)
    video_id = content_object["source"]["video_id"]
    fetcher = build_fetcher(config, logger)

    log_event(
        logger,
        logging.INFO,
        "Fetching transcript",
        stage_name=stage_name,
        event_type="start",
        metadata={"video_id": video_id, "language": fetcher.config.language},
    )

    with timer() as end:
        try:
            transcript = fetch_transcript(video_id, fetcher.config, fetcher=fetcher, logger=logger)
        except TranscriptError as exc:
            content_object["error"] = str(exc)
            content_object["suggest_manual_input"] = exc.suggest_manual_input
            result = StageResult(
                stage_name=stage_name,
                success=False,
                errors=exc.cause_chain(),
                failures=[
                    StageFailure(
                        stage=stage_name,
                        type=FAILURE_TYPES.get(exc.kind, FailureType.TRANSIENT_FETCH_FAILURE),
                        cause=str(exc),
                        impact="No transcript; analysis cannot continue",
                        suggested_fixes=FIXES.get(exc.kind, [MANUAL_INPUT_FIX]),
                    )
                ],
                execution_time_ms=end(),
            )
            log_event(
                logger,
                logging.ERROR,
                "Transcript fetch failed",
                stage_name=stage_name,
                event_type="failure",
                metadata={"kind": exc.kind.value, "causes": exc.cause_chain()},
            )
            return content_object, result

        if not transcript.full_text:
            content_object["error"] = TOO_SHORT_MESSAGE
            content_object["suggest_manual_input"] = True
            result = StageResult(
                stage_name=stage_name,
                success=False,
                errors=[TOO_SHORT_MESSAGE],
                failures=[
                    StageFailure(
                        stage=stage_name,
                        type=FailureType.MALFORMED_CAPTION_DATA,
                        cause="empty_transcript_text",
                        impact="Nothing to summarize",
                        suggested_fixes=[MANUAL_INPUT_FIX],
                    )
                ],
                execution_time_ms=end(),
            )
            log_event(logger, logging.WARNING, "Transcript has no text", stage_name=stage_name, event_type="failure")
            return content_object, result

        content_object["source"]["caption_language"] = transcript.language
        content_object["transcript"] = [
            {
                "text": segment.text,
                "offset_ms": segment.offset_ms,
                "duration_ms": segment.duration_ms,
                "timestamp": format_precise_timestamp(segment.offset_seconds),
            }
            for segment in transcript
        ]
        result = StageResult(stage_name=stage_name, success=True, execution_time_ms=end())

    log_event(
        logger,
        logging.INFO,
        "Transcript fetched",
        stage_name=stage_name,
        event_type="success",
        metadata={"segments": len(transcript), "language": transcript.language},
    )
    return content_object, result
