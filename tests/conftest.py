"""
Shared fixtures.
"""
import httpx
import pytest

from pages import CAPTION_TRACK_BODY, DEFAULT_TRACKS, EN_TRACK_URL, VIDEO_ID, player_response, watch_page


@pytest.fixture
def sleeps():
    """Collects backoff delays instead of sleeping."""
    return []


@pytest.fixture
def happy_routes():
    return {
        f"https://www.youtube.com/watch?v={VIDEO_ID}": [
            httpx.Response(200, text=watch_page(player_response(DEFAULT_TRACKS)))
        ],
        EN_TRACK_URL: [httpx.Response(200, text=CAPTION_TRACK_BODY)],
    }
