# video_digest/analyzer/stages/fetch_metadata.py
"""
Stage 2: Fetch YouTube metadata using yt-dlp.

Responsibility:
- Title, channel, duration and thumbnail for the artifact and the summariser
- Never fatal: on failure the title falls back to "Video ID: <id>"

No media is downloaded. Skipped when config["fetch_metadata"] is False.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Tuple

import yt_dlp

from video_digest.analyzer.schema import FailureType, StageFailure, StageResult
from video_digest.analyzer.stages.base import timer
from video_digest.logging_core.logger import get_logger, log_event
from video_digest.transcription.resolver import watch_url


YDL_PARAMS = {
    "quiet": True,
    "no_warnings": True,
    "skip_download": True,
    "noplaylist": True,
}


def fallback_title(video_id: str) -> str:
    return f"Video ID: {video_id}"


def extract_info(video_id: str) -> Dict[str, Any]:
    """Metadata dict from yt-dlp. Raises yt_dlp.utils.DownloadError on failure."""
    with yt_dlp.YoutubeDL(YDL_PARAMS) as ydl:
        info = ydl.extract_info(watch_url(video_id), download=False)
    if not info:
        raise yt_dlp.utils.DownloadError("No info returned")
    return info


def process(content_object: Dict[str, Any], run_id: uuid.UUID, config: Dict[str, Any]) -> Tuple[Dict[str, Any], StageResult]:
    """Populate source metadata for the resolved video."""
    stage_name = "fetch_metadata"
    logger = get_logger(run_id)
    source = content_object["source"]
    video_id = source["video_id"]
    source["title"] = fallback_title(video_id)

    if not config.get("fetch_metadata", True):
        log_event(logger, logging.INFO, "Metadata fetch disabled", stage_name=stage_name, event_type="skipped")
        return content_object, StageResult(
            stage_name=stage_name,
            success=True,
            warnings=["Metadata fetch disabled; using placeholder title"],
        )

    log_event(
        logger,
        logging.INFO,
        "Fetching YouTube metadata",
        stage_name=stage_name,
        event_type="start",
        metadata={"video_id": video_id},
    )

    with timer() as end:
        try:
            info = config.get("metadata_extractor", extract_info)(video_id)

            source["title"] = info.get("title") or source["title"]
            source["channel_name"] = info.get("channel") or info.get("uploader")
            source["duration_seconds"] = info.get("duration")
            source["thumbnail_url"] = info.get("thumbnail")

            result = StageResult(stage_name=stage_name, success=True, execution_time_ms=end())
            log_event(
                logger,
                logging.INFO,
                "Metadata fetched successfully",
                stage_name=stage_name,
                event_type="success",
                metadata={"title": source["title"], "channel": source["channel_name"]},
            )

        except yt_dlp.utils.DownloadError as exc:
            message = str(exc).lower()
            cause = "video_unavailable" if "unavailable" in message else "download_error"
            suggested = ["Check the video is public and not deleted", "Try again later"]
            if "age-restricted" in message or "sign in" in message:
                cause = "age_restricted"
                suggested.append("Age-restricted videos need a logged-in session")

            result = StageResult(
                stage_name=stage_name,
                success=False,
                warnings=["Metadata fetch failed; using placeholder title"],
                failures=[
                    StageFailure(
                        stage=stage_name,
                        type=FailureType.SOURCE_ERROR,
                        cause=cause,
                        impact="Title and channel unavailable; analysis continues",
                        suggested_fixes=suggested,
                    )
                ],
                execution_time_ms=end(),
            )
            log_event(
                logger,
                logging.WARNING,
                "Metadata fetch failed",
                stage_name=stage_name,
                event_type="failure",
                metadata={"error": str(exc)},
            )

    return content_object, result
