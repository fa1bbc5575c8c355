"""
Orchestrator for transcript acquisition.
Single responsibility: sequence resolve -> page -> track -> parse, map failures
onto the TranscriptError taxonomy.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from video_digest.logging_core.logger import log_event
from video_digest.transcription.errors import (
    CaptionsUnavailableError,
    MalformedCaptionDataError,
    TranscriptError,
)
from video_digest.transcription.fetcher import ResilientFetcher
from video_digest.transcription.locator import (
    caption_tracks,
    extract_player_response,
    find_player_response_assignment,
    select_caption_track,
)
from video_digest.transcription.parser import parse_transcript
from video_digest.transcription.resolver import require_video_id, watch_url
from video_digest.transcription.schema import FetchConfig, Transcript, TranscriptSegment


def fetch_transcript(
    video: str,
    config: FetchConfig = FetchConfig(),
    *,
    fetcher: Optional[ResilientFetcher] = None,
    logger: Optional[logging.Logger] = None,
) -> Transcript:
    """
    Fetch and parse the caption transcript for a video id or URL.

    Raises a TranscriptError subclass on every failure; never returns a
    partial transcript.
    """
    logger = logger or logging.getLogger(__name__)
    video_id = require_video_id(video)
    fetcher = fetcher or ResilientFetcher(config, logger=logger)

    try:
        page_url = watch_url(video_id)
        log_event(logger, logging.INFO, "Fetching watch page", event_type="progress", metadata={"url": page_url})
        page = fetcher.fetch(page_url)

        player_response = extract_player_response(page)
        if player_response is None:
            if find_player_response_assignment(page) is not None:
                raise MalformedCaptionDataError(
                    f"Player configuration for {video_id} could not be parsed"
                )
            raise CaptionsUnavailableError(f"No caption data found for video {video_id}")

        tracks = caption_tracks(player_response)
        track = select_caption_track(tracks, config.language)
        if track is None:
            raise CaptionsUnavailableError(f"Captions are disabled or absent for video {video_id}")

        log_event(
            logger,
            logging.INFO,
            "Caption track located",
            event_type="progress",
            metadata={
                "video_id": video_id,
                "requested_language": config.language,
                "language": track.language_code,
                "generated": track.is_generated,
                "available": [t.language_code for t in tracks],
            },
        )

        segments = parse_transcript(fetcher.fetch(track.base_url))
    except TranscriptError:
        raise
    except Exception as exc:  # pylint: disable=broad-except
        raise TranscriptError(f"Unexpected failure fetching transcript for {video_id}: {exc}") from exc

    log_event(
        logger,
        logging.INFO,
        "Transcript parsed",
        event_type="success",
        metadata={"video_id": video_id, "segments": len(segments)},
    )
    return Transcript(
        video_id=video_id,
        segments=tuple(segments),
        language=track.language_code,
        track_url=track.base_url,
    )


def search_transcript(transcript: Transcript, term: str) -> List[TranscriptSegment]:
    """Segments whose text contains term, case-insensitively. Empty term keeps all."""
    needle = term.lower()
    return [segment for segment in transcript if needle in segment.text.lower()]
