"""
Tests for the typer CLI. The pipeline and the transcript fetcher are
monkeypatched; only argument handling and reporting are exercised here.
"""
import json

import pytest
from typer.testing import CliRunner

from pages import VIDEO_ID
from video_digest.cli import youtube
from video_digest.transcription import CaptionsUnavailableError, Transcript, TranscriptSegment


runner = CliRunner()


def artifact(**overrides):
    content = {
        "identity": {"workflow_run_id": "run-1"},
        "source": {"video_id": VIDEO_ID},
        "transcript": [],
        "analysis": {"quotes": [{"text": "I think it's great", "timestamp": "00:04", "match": "exact"}]},
        "diagnostics": {"warnings": [], "errors": []},
        "error": None,
        "suggest_manual_input": False,
    }
    content.update(overrides)
    return content


class RecordingList(list):
    result = None


@pytest.fixture
def analysis_calls(monkeypatch):
    recorded = RecordingList()
    recorded.result = artifact()

    def fake_run_analysis(url, config=None):
        recorded.append((url, config))
        return recorded.result

    monkeypatch.setattr(youtube, "run_analysis", fake_run_analysis)
    return recorded


class TestAnalyze:
    def test_success_writes_artifact(self, analysis_calls, tmp_path):
        result = runner.invoke(youtube.app, ["analyze", VIDEO_ID, "--out", str(tmp_path)])

        assert result.exit_code == 0, result.output
        written = tmp_path / f"{VIDEO_ID}_run-1.json"
        assert json.loads(written.read_text(encoding="utf-8"))["source"]["video_id"] == VIDEO_ID
        assert "[00:04] I think it's great" in result.output

    def test_options_reach_the_pipeline(self, analysis_calls, tmp_path):
        runner.invoke(
            youtube.app,
            ["analyze", VIDEO_ID, "-o", str(tmp_path), "--lang", "es", "--max-retries", "2", "--no-metadata"],
        )

        url, config = analysis_calls[0]
        assert url == VIDEO_ID
        assert config["fetch_config"].language == "es"
        assert config["fetch_config"].max_retries == 2
        assert config["fetch_metadata"] is False

    def test_failure_exits_nonzero_with_hint(self, analysis_calls, tmp_path):
        analysis_calls.result = artifact(error="Captions are disabled", suggest_manual_input=True)
        result = runner.invoke(youtube.app, ["analyze", VIDEO_ID, "-o", str(tmp_path)])

        assert result.exit_code == 1
        assert "Captions are disabled" in result.output
        assert "paste the transcript manually" in result.output
        assert (tmp_path / f"{VIDEO_ID}_run-1.json").exists()

    def test_invalid_input_has_no_hint(self, analysis_calls, tmp_path):
        analysis_calls.result = artifact(error="Invalid YouTube URL provided.")
        result = runner.invoke(youtube.app, ["analyze", "nope", "-o", str(tmp_path)])

        assert result.exit_code == 1
        assert "paste the transcript manually" not in result.output

    def test_rejects_zero_retries(self, analysis_calls, tmp_path):
        result = runner.invoke(youtube.app, ["analyze", VIDEO_ID, "--max-retries", "0"])
        assert result.exit_code != 0
        assert analysis_calls == []


class TestTranscript:
    @pytest.fixture
    def fetched(self, monkeypatch):
        seen = []

        def fake_fetch(url, config):
            seen.append(config)
            return Transcript(
                video_id=VIDEO_ID,
                segments=(
                    TranscriptSegment("Welcome back", 500, 3500),
                    TranscriptSegment("I think it's great", 4200, 2800),
                ),
                language=config.language,
            )

        monkeypatch.setattr(youtube, "fetch_transcript", fake_fetch)
        return seen

    def test_prints_timestamped_lines(self, fetched):
        result = runner.invoke(youtube.app, ["transcript", VIDEO_ID])

        assert result.exit_code == 0, result.output
        assert "00:00:00.500  Welcome back" in result.output
        assert "00:00:04.200  I think it's great" in result.output

    def test_search_filters_lines(self, fetched):
        result = runner.invoke(youtube.app, ["transcript", VIDEO_ID, "-s", "great", "--lang", "de"])

        assert "Welcome back" not in result.output
        assert "I think it's great" in result.output
        assert fetched[0].language == "de"

    def test_search_without_hits(self, fetched):
        result = runner.invoke(youtube.app, ["transcript", VIDEO_ID, "--search", "absent"])
        assert "No matching transcript lines." in result.output

    def test_error_exits_nonzero(self, monkeypatch):
        def unavailable(url, config):
            raise CaptionsUnavailableError("Captions are disabled or absent")

        monkeypatch.setattr(youtube, "fetch_transcript", unavailable)
        result = runner.invoke(youtube.app, ["transcript", VIDEO_ID])

        assert result.exit_code == 1
        assert "Captions are disabled or absent" in result.output
