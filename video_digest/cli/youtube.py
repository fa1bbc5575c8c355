# video_digest/cli/youtube.py
"""
CLI entrypoint for YouTube video analysis.

Thin adapter, no business logic:
- Parse arguments and environment configuration
- Invoke the pipeline (or the transcript fetcher)
- Write the artifact
- Report status to the user

Structured JSON logs from the pipeline go to stdout; user-facing status
lines go through typer.echo.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer

from video_digest.analyzer.output.writer import write_artifact
from video_digest.analyzer.runner import run_analysis
from video_digest.config import Config
from video_digest.logging_core.logger import set_level
from video_digest.transcription import TranscriptError, fetch_transcript, search_transcript
from video_digest.transcription.formatting import format_precise_timestamp


app = typer.Typer(
    name="video-digest",
    help="Video Digest: summary, insights and timed quotes from YouTube captions",
    no_args_is_help=True,
)


@app.callback()
def main(
    log_level: str = typer.Option(Config.LOG_LEVEL, "--log-level", help="Log level for JSON logs"),
) -> None:
    set_level(log_level)


@app.command()
def analyze(
    url: str = typer.Argument(..., help="YouTube video URL or 11-character video id"),
    out: Path = typer.Option(Config.OUT_DIR, "--out", "-o", help="Output directory for the JSON artifact"),
    lang: Optional[str] = typer.Option(None, "--lang", help="Preferred caption language code"),
    max_retries: Optional[int] = typer.Option(None, "--max-retries", min=1, help="Fetch attempts per request"),
    timeout_ms: Optional[int] = typer.Option(None, "--timeout-ms", min=1, help="Per-attempt timeout in ms"),
    no_metadata: bool = typer.Option(False, "--no-metadata", help="Skip yt-dlp metadata lookup"),
) -> None:
    """
    Analyze a YouTube video and write a structured JSON artifact.
    """
    output_path = out.expanduser()
    typer.echo(f"Starting analysis for: {url}")

    config = {
        "fetch_config": Config.fetch_config(language=lang, max_retries=max_retries, timeout_ms=timeout_ms),
        "fetch_metadata": not no_metadata,
        "openai_api_key": Config.OPENAI_API_KEY,
        "analysis_model": Config.ANALYSIS_MODEL,
    }

    try:
        content_object = run_analysis(url, config=config)
        artifact_path = write_artifact(content_object, output_path)
    except KeyboardInterrupt:
        typer.echo("\nInterrupted by user.", err=True)
        sys.exit(1)
    except OSError as exc:
        typer.echo(typer.style("✗ Could not write artifact", fg=typer.colors.RED, bold=True), err=True)
        typer.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    typer.echo(f"Artifact written to: {artifact_path}")

    if content_object.get("error"):
        typer.echo(typer.style("✗ Analysis failed", fg=typer.colors.RED, bold=True), err=True)
        typer.echo(f"Error: {content_object['error']}", err=True)
        if content_object.get("suggest_manual_input"):
            typer.echo("Hint: paste the transcript manually and analyze it as text.", err=True)
        sys.exit(1)

    typer.echo(typer.style("✓ Analysis completed", fg=typer.colors.GREEN, bold=True))
    quotes = content_object.get("analysis", {}).get("quotes", [])
    for quote in quotes:
        typer.echo(f"  [{quote['timestamp']}] {quote['text']}")

    diagnostics = content_object.get("diagnostics", {})
    if diagnostics.get("warnings") or diagnostics.get("errors"):
        typer.echo(typer.style("⚠ Partial success, check diagnostics in the artifact.", fg=typer.colors.YELLOW))


@app.command()
def transcript(
    url: str = typer.Argument(..., help="YouTube video URL or 11-character video id"),
    lang: Optional[str] = typer.Option(None, "--lang", help="Preferred caption language code"),
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Only lines containing this text"),
) -> None:
    """
    Print a video's caption transcript with timestamps.
    """
    try:
        result = fetch_transcript(url, Config.fetch_config(language=lang))
    except TranscriptError as exc:
        typer.echo(typer.style("✗ Transcript unavailable", fg=typer.colors.RED, bold=True), err=True)
        typer.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    segments = search_transcript(result, search) if search else list(result)
    if not segments:
        typer.echo("No matching transcript lines.")
        return
    for segment in segments:
        typer.echo(f"{format_precise_timestamp(segment.offset_seconds)}  {segment.text}")


if __name__ == "__main__":
    app()
