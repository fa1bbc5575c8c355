# video_digest/transcription/resolver.py
"""
Video identifier resolution.

Turns whatever the user pasted (bare id or one of the known URL shapes) into
the canonical 11-character video id. Pure string handling, no network.
"""

from __future__ import annotations

import re
from typing import Optional, Tuple

from video_digest.transcription.errors import InvalidInputError


_ID = r"([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])"

VIDEO_ID_REGEX = re.compile(r"[A-Za-z0-9_-]{11}")

# Tried in order; first capture wins.
URL_PATTERNS: Tuple[Tuple[str, re.Pattern[str]], ...] = (
    ("watch", re.compile(r"youtube(?:-nocookie)?\.com/watch\?(?:[^#]*?&)?v=" + _ID)),
    ("short_link", re.compile(r"youtu\.be/" + _ID)),
    ("shorts", re.compile(r"youtube\.com/shorts/" + _ID)),
    ("embed", re.compile(r"youtube(?:-nocookie)?\.com/embed/" + _ID)),
    ("legacy", re.compile(r"youtube(?:-nocookie)?\.com/v/" + _ID)),
)


def resolve_video_id(value: str) -> Optional[str]:
    """
    Resolve a video id from a bare id or a YouTube URL.

    Returns None when nothing matches. Never raises for bad input.
    """
    if not value:
        return None
    candidate = value.strip()

    if VIDEO_ID_REGEX.fullmatch(candidate):
        return candidate

    for _, pattern in URL_PATTERNS:
        match = pattern.search(candidate)
        if match:
            return match.group(1)
    return None


def require_video_id(value: str) -> str:
    """Like resolve_video_id() but raises InvalidInputError on no match."""
    video_id = resolve_video_id(value)
    if video_id is None:
        raise InvalidInputError(f"Could not extract a YouTube video id from: {value!r}")
    return video_id


def watch_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"
