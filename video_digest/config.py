"""Configuration management and environment variable loading."""

import os
from pathlib import Path

from dotenv import load_dotenv

from video_digest.transcription.schema import FetchConfig

# Load .env without overriding variables already set in the environment
load_dotenv(override=False)


class Config:
    """Application configuration, read from the environment."""

    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    ANALYSIS_MODEL: str = os.getenv("ANALYSIS_MODEL", "gpt-3.5-turbo")
    CAPTION_LANGUAGE: str = os.getenv("CAPTION_LANGUAGE", "en")
    FETCH_MAX_RETRIES: int = int(os.getenv("FETCH_MAX_RETRIES", "3"))
    FETCH_BASE_RETRY_DELAY_MS: int = int(os.getenv("FETCH_BASE_RETRY_DELAY_MS", "1000"))
    FETCH_TIMEOUT_MS: int = int(os.getenv("FETCH_TIMEOUT_MS", "10000"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    OUT_DIR: Path = Path(os.getenv("OUT_DIR", "./output"))

    @classmethod
    def fetch_config(cls, **overrides) -> FetchConfig:
        """FetchConfig from the environment; None-valued overrides are ignored."""
        values = {
            "language": cls.CAPTION_LANGUAGE,
            "max_retries": cls.FETCH_MAX_RETRIES,
            "base_retry_delay_ms": cls.FETCH_BASE_RETRY_DELAY_MS,
            "timeout_ms": cls.FETCH_TIMEOUT_MS,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return FetchConfig(**values)
