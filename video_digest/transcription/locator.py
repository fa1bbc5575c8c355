# video_digest/transcription/locator.py
"""
Caption-track discovery from the watch page.

The watch page embeds the player configuration as a script statement:

    var ytInitialPlayerResponse = {...};

It is not a standalone JSON document, so the value is cut out of the page
(string-aware brace counting, with a `}\\s*;` delimiter cut as fallback) and
then parsed. Anything that goes wrong here means "no track found", which the
caller reports as captions being unavailable. No network access.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional

from video_digest.transcription.schema import CaptionTrack


logger = logging.getLogger(__name__)

PLAYER_RESPONSE_REGEX = re.compile(r"(?:\bvar\s+)?\bytInitialPlayerResponse\s*=\s*(?=\{)")
STATEMENT_END_REGEX = re.compile(r"\}\s*;")


def find_player_response_assignment(page: str) -> Optional[int]:
    """Index of the opening brace of the assignment, or None."""
    match = PLAYER_RESPONSE_REGEX.search(page)
    return match.end() if match else None


def _cut_balanced_object(source: str, start: int) -> Optional[str]:
    """Cut the JSON object starting at source[start] by counting braces outside strings."""
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(source)):
        char = source[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return source[start:index + 1]
    return None


def _cut_at_statement_end(source: str, start: int) -> Optional[str]:
    match = STATEMENT_END_REGEX.search(source, start)
    if not match:
        return None
    return source[start:match.start() + 1]


def extract_player_response(page: str) -> Optional[Dict[str, Any]]:
    """Parse the embedded player configuration, or None if absent/unparsable."""
    start = find_player_response_assignment(page)
    if start is None:
        return None

    for cut in (_cut_balanced_object, _cut_at_statement_end):
        block = cut(page, start)
        if block is None:
            continue
        try:
            data = json.loads(block)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data

    logger.debug("ytInitialPlayerResponse found but could not be parsed")
    return None


def _display_name(raw: Any) -> Optional[str]:
    if not isinstance(raw, dict):
        return None
    if raw.get("simpleText"):
        return str(raw["simpleText"])
    runs = raw.get("runs")
    if isinstance(runs, list):
        text = "".join(str(run.get("text", "")) for run in runs if isinstance(run, dict))
        return text or None
    return None


def caption_tracks(player_response: Dict[str, Any]) -> List[CaptionTrack]:
    """Caption tracks in platform order. Entries without a URL are skipped."""
    captions = player_response.get("captions") or {}
    renderer = captions.get("playerCaptionsTracklistRenderer") or {}
    raw_tracks = renderer.get("captionTracks") or []

    tracks: List[CaptionTrack] = []
    for raw in raw_tracks:
        if not isinstance(raw, dict) or not raw.get("baseUrl"):
            continue
        tracks.append(
            CaptionTrack(
                language_code=str(raw.get("languageCode", "")),
                base_url=str(raw["baseUrl"]),
                name=_display_name(raw.get("name")),
                kind=raw.get("kind"),
            )
        )
    return tracks


def select_caption_track(tracks: List[CaptionTrack], language: str) -> Optional[CaptionTrack]:
    """
    Pick the track for `language`.

    Case-insensitive exact match, then prefix, then substring; the first
    track in platform order wins each round. No match falls back to the
    first track.
    """
    if not tracks:
        return None
    wanted = (language or "").lower()
    if wanted:
        codes = [track.language_code.lower() for track in tracks]
        for matches in (
            lambda code: code == wanted,
            lambda code: code.startswith(wanted),
            lambda code: wanted in code,
        ):
            for track, code in zip(tracks, codes):
                if matches(code):
                    return track
    return tracks[0]


def locate_caption_track(page: str, language: str) -> Optional[str]:
    """URL of the best caption track on a watch page, or None."""
    player_response = extract_player_response(page)
    if player_response is None:
        return None
    track = select_caption_track(caption_tracks(player_response), language)
    return track.base_url if track else None
