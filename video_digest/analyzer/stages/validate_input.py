# video_digest/analyzer/stages/validate_input.py
"""
Stage 1: Input validation and video_id extraction.

Responsibility:
- Resolve the user's input (bare id or URL) to the canonical video_id
- Populate source.video_id

Fails with INPUT_ERROR if nothing resolves. Never retried.
No external network calls.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Tuple

from video_digest.analyzer.schema import FailureType, StageFailure, StageResult
from video_digest.analyzer.stages.base import timer
from video_digest.logging_core.logger import get_logger, log_event
from video_digest.transcription.resolver import resolve_video_id


def process(content_object: Dict[str, Any], run_id: uuid.UUID, config: Dict[str, Any]) -> Tuple[Dict[str, Any], StageResult]:
    """Resolve the video id and store it on content_object["source"]."""
    stage_name = "validate_input"
    logger = get_logger(run_id)
    url = (content_object.get("source", {}).get("url") or "").strip()

    log_event(
        logger,
        logging.INFO,
        "Validating YouTube input",
        stage_name=stage_name,
        event_type="start",
        metadata={"raw_url": url},
    )

    with timer() as end:
        if not url:
            cause, message = "missing_url", "No URL provided"
            video_id = None
        else:
            video_id = resolve_video_id(url)
            cause, message = "invalid_youtube_url", "Invalid YouTube URL provided."

        if video_id is None:
            content_object["error"] = message
            content_object["suggest_manual_input"] = False
            failure = StageFailure(
                stage=stage_name,
                type=FailureType.INPUT_ERROR,
                cause=cause,
                impact="Cannot resolve a video id; nothing to analyze",
                suggested_fixes=[
                    "Use a youtube.com/watch?v=, youtu.be/, /shorts/, /embed/ or /v/ link",
                    "Or paste the 11-character video id directly",
                ],
            )
            result = StageResult(
                stage_name=stage_name,
                success=False,
                errors=[message],
                failures=[failure],
                execution_time_ms=end(),
            )
            log_event(
                logger,
                logging.ERROR,
                "Validation failed",
                stage_name=stage_name,
                event_type="failure",
                metadata={"url": url, "cause": cause},
            )
            return content_object, result

        content_object["source"]["video_id"] = video_id
        result = StageResult(stage_name=stage_name, success=True, execution_time_ms=end())

    log_event(
        logger,
        logging.INFO,
        "Video id resolved",
        stage_name=stage_name,
        event_type="success",
        metadata={"video_id": video_id},
    )
    return content_object, result
