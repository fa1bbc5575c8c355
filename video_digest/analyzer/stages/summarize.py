# video_digest/analyzer/stages/summarize.py
"""
Stage 4: Summary, key insights and notable quotes from the language model.

Each of the three calls degrades on its own: a failed call leaves placeholder
text and a warning, and the pipeline carries on. Quotes are stored with the
unmatched timestamp; align_quotes fills in real ones.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Tuple

from video_digest.alignment.aligner import UNMATCHED_TIMESTAMP
from video_digest.analyzer import llm as llm_mod
from video_digest.analyzer.schema import FailureType, StageFailure, StageResult
from video_digest.analyzer.stages.base import timer
from video_digest.logging_core.logger import get_logger, log_event


MISSING_KEY_SUMMARY = "AI summary generation failed: API key missing."
MISSING_KEY_INSIGHT = {"emoji": "❌", "text": "AI key insight extraction failed: API key missing."}
FAILED_SUMMARY = "AI summary generation failed."
FAILED_INSIGHT = {"emoji": "❌", "text": "AI key insight extraction failed."}
MISSING_KEY_QUOTE = "AI quote extraction failed: API key missing."
FAILED_QUOTE = "AI quote extraction failed."


def _unaligned_quote(text: str) -> Dict[str, Any]:
    """Quote entry awaiting alignment."""
    return {"text": text, "timestamp": UNMATCHED_TIMESTAMP}


def process(content_object: Dict[str, Any], run_id: uuid.UUID, config: Dict[str, Any]) -> Tuple[Dict[str, Any], StageResult]:
    """Fill content_object["analysis"] with summary, insights and raw quotes."""
    stage_name = "summarize"
    logger = get_logger(run_id)
    title = content_object["source"].get("title") or ""
    captions = " ".join(item["text"] for item in content_object.get("transcript", [])).strip()
    analysis = content_object.setdefault("analysis", {})

    log_event(
        logger,
        logging.INFO,
        "Starting summarization",
        stage_name=stage_name,
        event_type="start",
        metadata={"characters": len(captions)},
    )

    with timer() as end:
        llm = llm_mod.resolve_llm(config)
        if llm is None:
            analysis["summary"] = MISSING_KEY_SUMMARY
            analysis["key_insights"] = [dict(MISSING_KEY_INSIGHT)]
            analysis["quotes"] = [_unaligned_quote(MISSING_KEY_QUOTE)]
            result = StageResult(
                stage_name=stage_name,
                success=False,
                warnings=["OpenAI API key is missing; analysis skipped"],
                failures=[
                    StageFailure(
                        stage=stage_name,
                        type=FailureType.INTERPRETATION_ERROR,
                        cause="missing_api_key",
                        impact="No summary, insights or quotes",
                        suggested_fixes=["Set OPENAI_API_KEY in the environment or .env"],
                    )
                ],
                execution_time_ms=end(),
            )
            log_event(logger, logging.WARNING, "Summarization skipped: no API key", stage_name=stage_name, event_type="failure")
            return content_object, result

        warnings = []

        try:
            analysis["summary"] = llm_mod.generate_summary(llm, captions, title)
        except Exception as exc:  # pylint: disable=broad-except
            analysis["summary"] = FAILED_SUMMARY
            warnings.append(f"Summary generation failed: {exc}")

        try:
            insights = llm_mod.extract_key_insights(llm, captions, title)
            analysis["key_insights"] = [insight.model_dump() for insight in insights]
        except Exception as exc:  # pylint: disable=broad-except
            analysis["key_insights"] = [dict(FAILED_INSIGHT)]
            warnings.append(f"Key insight extraction failed: {exc}")

        try:
            quotes = llm_mod.extract_quotes(llm, captions, title)
            analysis["quotes"] = [_unaligned_quote(quote) for quote in quotes]
        except Exception as exc:  # pylint: disable=broad-except
            analysis["quotes"] = [_unaligned_quote(FAILED_QUOTE)]
            warnings.append(f"Quote extraction failed: {exc}")

        failures = [
            StageFailure(
                stage=stage_name,
                type=FailureType.INTERPRETATION_ERROR,
                cause=warning,
                impact="Partial analysis",
                suggested_fixes=["Retry the analysis", "Check the model name and API quota"],
            )
            for warning in warnings
        ]
        result = StageResult(
            stage_name=stage_name,
            success=not warnings,
            warnings=warnings,
            failures=failures,
            execution_time_ms=end(),
        )

    log_event(
        logger,
        logging.INFO if result.success else logging.WARNING,
        "Summarization completed",
        stage_name=stage_name,
        event_type="success" if result.success else "failure",
        metadata={"insights": len(analysis["key_insights"]), "quotes": len(analysis["quotes"])},
    )
    return content_object, result
