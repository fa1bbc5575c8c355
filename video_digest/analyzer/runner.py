# video_digest/analyzer/runner.py
"""
Orchestration runner for the video analysis pipeline.

Responsibilities:
- Initialize traceability and supporting objects
- Execute stages in fixed order, stopping after a failed required stage
- Aggregate diagnostics
- Validate and return the final content object

No business logic lives here, only orchestration.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, FrozenSet, List

from video_digest.analyzer.diagnostics.collector import DiagnosticsCollector
from video_digest.analyzer.schema import (
    AnalysisObject,
    FailureType,
    Identity,
    Source,
    StageFailure,
    StageResult,
)
from video_digest.analyzer.stages import (
    align_quotes,
    fetch_metadata,
    fetch_transcript,
    summarize,
    validate_input,
)
from video_digest.analyzer.stages.base import Stage
from video_digest.logging_core.logger import get_logger, log_event, release_logger


STAGES: List[Stage] = [
    validate_input.process,
    fetch_metadata.process,
    fetch_transcript.process,
    summarize.process,
    align_quotes.process,
]

# Later stages cannot run without these
REQUIRED_STAGES: FrozenSet[str] = frozenset({"validate_input", "fetch_transcript"})

UNEXPECTED_ERROR = "Failed to analyze video"


def _stage_name(stage_func) -> str:
    return stage_func.__module__.split(".")[-1]


def run_analysis(url: str, config: Dict[str, Any] | None = None) -> Dict[str, Any]:
    """
    Execute the analysis pipeline for a YouTube URL or video id.

    Args:
        url: YouTube URL or bare video id
        config: Optional stage configuration (fetch_config, llm, openai_api_key,
            analysis_model, fetch_metadata, http_client, sleep, cancel_event)

    Returns:
        Content object dict conforming to AnalysisObject. Always produced,
        even on failure; check "error".
    """
    config = config or {}
    identity = Identity()
    run_id = identity.workflow_run_id
    logger = get_logger(run_id)

    log_event(
        logger,
        logging.INFO,
        "Starting video analysis pipeline",
        event_type="pipeline_start",
        metadata={"url": url},
    )

    content_object: Dict[str, Any] = {
        "identity": identity.model_dump(mode="json"),
        "source": Source(url=url).model_dump(),
        "transcript": [],
        "analysis": {},
        "diagnostics": {},
        "error": None,
        "suggest_manual_input": False,
    }
    collector = DiagnosticsCollector(run_id)

    for stage_func in STAGES:
        stage_name = _stage_name(stage_func)
        try:
            content_object, stage_result = stage_func(content_object, run_id, config)
        except Exception as exc:  # pylint: disable=broad-except
            stage_result = StageResult(
                stage_name=stage_name,
                success=False,
                errors=[f"Unhandled exception: {exc}"],
                failures=[
                    StageFailure(
                        stage=stage_name,
                        type=FailureType.SOURCE_ERROR,
                        cause="unexpected_exception",
                        impact="stage aborted",
                        suggested_fixes=["Review logs", "Report bug with traceback"],
                    )
                ],
            )
            log_event(
                logger,
                logging.ERROR,
                "Unhandled exception in stage",
                stage_name=stage_name,
                event_type="failure",
                metadata={"exception": repr(exc)},
            )
            if stage_name in REQUIRED_STAGES and not content_object.get("error"):
                content_object["error"] = f"{UNEXPECTED_ERROR}: {exc}"

        collector.add_stage_result(stage_result)

        if stage_name in REQUIRED_STAGES and collector.failed(stage_name):
            log_event(
                logger,
                logging.WARNING,
                "Required stage failed; skipping remaining stages",
                stage_name=stage_name,
                event_type="pipeline_halt",
            )
            content_object["error"] = content_object.get("error") or UNEXPECTED_ERROR
            break

    content_object["diagnostics"] = collector.build_diagnostics()

    try:
        validated = AnalysisObject.model_validate(content_object)
        content_object = validated.model_dump(mode="json")
        log_event(
            logger,
            logging.INFO,
            "Pipeline finished",
            event_type="pipeline_success" if not content_object["error"] else "pipeline_failure",
            metadata={"error": content_object["error"]},
        )
    except Exception as exc:  # pylint: disable=broad-except
        log_event(
            logger,
            logging.ERROR,
            "Final schema validation failed; returning raw object",
            event_type="validation_failure",
            metadata={"validation_error": str(exc)},
        )
    finally:
        release_logger(run_id)

    return content_object
