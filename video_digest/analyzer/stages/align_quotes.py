# video_digest/analyzer/stages/align_quotes.py
"""
Stage 5: Attach transcript timestamps to the summariser's quotes.

An unmatched quote keeps "00:00" and adds a warning; that is not a failure.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Tuple

from video_digest.alignment.aligner import align_quotes
from video_digest.analyzer.schema import StageResult
from video_digest.analyzer.stages.base import timer
from video_digest.logging_core.logger import get_logger, log_event
from video_digest.transcription.schema import TranscriptSegment


def process(content_object: Dict[str, Any], run_id: uuid.UUID, config: Dict[str, Any]) -> Tuple[Dict[str, Any], StageResult]:
    stage_name = "align_quotes"
    logger = get_logger(run_id)
    analysis = content_object.setdefault("analysis", {})
    quotes = [quote["text"] for quote in analysis.get("quotes", [])]

    with timer() as end:
        segments = [
            TranscriptSegment(text=item["text"], offset_ms=item["offset_ms"], duration_ms=item["duration_ms"])
            for item in content_object.get("transcript", [])
        ]
        aligned = align_quotes(segments, quotes)
        analysis["quotes"] = [
            {"text": quote.text, "timestamp": quote.timestamp, "match": quote.match}
            for quote in aligned
        ]
        misses = [quote.text for quote in aligned if quote.match is None]
        result = StageResult(
            stage_name=stage_name,
            success=True,
            warnings=[f"No transcript match for quote: {text!r}" for text in misses],
            execution_time_ms=end(),
        )

    log_event(
        logger,
        logging.INFO,
        "Quotes aligned",
        stage_name=stage_name,
        event_type="success",
        metadata={"quotes": len(aligned), "unmatched": len(misses)},
    )
    return content_object, result
