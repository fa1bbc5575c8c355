"""
End-to-end tests for transcript acquisition against a scripted transport.
"""
import httpx
import pytest

from pages import (
    CAPTION_TRACK_BODY,
    EN_TRACK_URL,
    ES_TRACK_URL,
    VIDEO_ID,
    ScriptedTransport,
    player_response,
    watch_page,
)
from video_digest.transcription import (
    CaptionsUnavailableError,
    EmptyTranscriptError,
    FetchConfig,
    FetchError,
    FetchTimeoutError,
    InvalidInputError,
    MalformedCaptionDataError,
    ResilientFetcher,
    TranscriptError,
    TranscriptSegment,
    fetch_transcript,
    search_transcript,
)


WATCH_URL = f"https://www.youtube.com/watch?v={VIDEO_ID}"


def run(routes, sleeps, url=f"https://youtu.be/{VIDEO_ID}", **config):
    transport = ScriptedTransport(routes)
    fetch_config = FetchConfig(**config)
    fetcher = ResilientFetcher(fetch_config, client=transport.client(), sleep=sleeps.append)
    return fetch_transcript(url, fetch_config, fetcher=fetcher), transport


class TestFetchTranscript:
    def test_happy_path(self, happy_routes, sleeps):
        transcript, transport = run(happy_routes, sleeps)

        assert transcript.video_id == VIDEO_ID
        assert transcript.language == "en"
        assert transcript.track_url == EN_TRACK_URL
        assert len(transcript) == 3
        assert transcript.segments[1] == TranscriptSegment(
            text="I think it's great honestly", offset_ms=4200, duration_ms=2800
        )
        assert [str(r.url) for r in transport.requests] == [WATCH_URL, EN_TRACK_URL]

    def test_full_text(self, happy_routes, sleeps):
        transcript, _ = run(happy_routes, sleeps)
        assert transcript.full_text.startswith("Welcome back to the channel everyone I think it's great")

    def test_language_preference(self, happy_routes, sleeps):
        happy_routes[ES_TRACK_URL] = [httpx.Response(200, text='<transcript><text start="1">hola</text></transcript>')]
        transcript, _ = run(happy_routes, sleeps, language="es")
        assert transcript.language == "es"
        assert transcript.full_text == "hola"

    def test_rate_limited_page_then_success(self, happy_routes, sleeps):
        happy_routes[WATCH_URL].insert(0, httpx.Response(429, headers={"Retry-After": "2"}))
        transcript, _ = run(happy_routes, sleeps, base_retry_delay_ms=10)
        assert len(transcript) == 3
        assert sleeps == [2.0]

    def test_invalid_input_makes_no_requests(self, happy_routes, sleeps):
        with pytest.raises(InvalidInputError) as excinfo:
            run(happy_routes, sleeps, url="not a url")
        assert excinfo.value.suggest_manual_input is False

    def test_captions_disabled(self, sleeps):
        routes = {WATCH_URL: [httpx.Response(200, text=watch_page(player_response()))]}
        with pytest.raises(CaptionsUnavailableError) as excinfo:
            run(routes, sleeps)
        assert excinfo.value.suggest_manual_input is True

    def test_no_player_response_is_captions_unavailable(self, sleeps):
        routes = {WATCH_URL: [httpx.Response(200, text="<html><body>consent page</body></html>")]}
        with pytest.raises(CaptionsUnavailableError):
            run(routes, sleeps)

    def test_unparsable_player_response_is_malformed(self, sleeps):
        page = "<script>var ytInitialPlayerResponse = {\"captions\": nope};</script>"
        routes = {WATCH_URL: [httpx.Response(200, text=page)]}
        with pytest.raises(MalformedCaptionDataError):
            run(routes, sleeps)

    def test_empty_track_body(self, happy_routes, sleeps):
        happy_routes[EN_TRACK_URL] = [httpx.Response(200, text="<transcript></transcript>")]
        with pytest.raises(EmptyTranscriptError):
            run(happy_routes, sleeps)

    def test_track_fetch_exhausted(self, happy_routes, sleeps):
        happy_routes[EN_TRACK_URL] = [httpx.Response(500)]
        with pytest.raises(FetchError) as excinfo:
            run(happy_routes, sleeps, max_retries=2)
        assert excinfo.value.url == EN_TRACK_URL
        assert excinfo.value.suggest_manual_input is True

    def test_page_timeout(self, sleeps):
        routes = {WATCH_URL: [httpx.ReadTimeout("slow")]}
        with pytest.raises(FetchTimeoutError):
            run(routes, sleeps)

    def test_unexpected_errors_are_wrapped(self, sleeps):
        class Exploding(ResilientFetcher):
            def fetch(self, url, headers=None):
                raise RuntimeError("kaboom")

        with pytest.raises(TranscriptError) as excinfo:
            fetch_transcript(VIDEO_ID, fetcher=Exploding())
        assert isinstance(excinfo.value.__cause__, RuntimeError)
        assert any("kaboom" in message for message in excinfo.value.cause_chain())


class TestSearchTranscript:
    def test_case_insensitive_filter(self, happy_routes, sleeps):
        transcript, _ = run(happy_routes, sleeps)
        assert [s.offset_ms for s in search_transcript(transcript, "GREAT")] == [4200]

    def test_empty_term_keeps_everything(self, happy_routes, sleeps):
        transcript, _ = run(happy_routes, sleeps)
        assert len(search_transcript(transcript, "")) == 3
