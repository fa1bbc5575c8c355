"""Timestamp formatting for quotes and transcript display."""

from __future__ import annotations

import math


def format_timestamp(seconds: float) -> str:
    """MM:SS, floor-truncated, zero-padded. Minutes are not wrapped into hours."""
    if math.isnan(seconds) or seconds < 0:
        return "00:00"
    minutes = int(seconds // 60)
    remaining = int(seconds % 60)
    return f"{minutes:02d}:{remaining:02d}"


def format_precise_timestamp(seconds: float) -> str:
    """HH:MM:SS.mmm as shown next to each transcript line."""
    if math.isnan(seconds) or seconds < 0:
        return "00:00:00.000"
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    whole = int(seconds % 60)
    millis = int(round((seconds - math.floor(seconds)) * 1000))
    if millis == 1000:
        # 59.9996 rounds up into the next second
        return format_precise_timestamp(math.floor(seconds) + 1)
    return f"{hours:02d}:{minutes:02d}:{whole:02d}.{millis:03d}"
