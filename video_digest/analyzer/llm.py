# video_digest/analyzer/llm.py
"""
Language-model collaborator.

Prompts are versioned module constants, the invocation is isolated in
call_llm(), and JSON output is validated with pydantic before use.
The pipeline treats all of this as opaque: it only needs the summary text,
the insight pairs and the list of quote strings.
"""

from __future__ import annotations

import json
from typing import Callable, List, Optional

from openai import OpenAI
from pydantic import BaseModel, Field

from video_digest.analyzer.schema import KeyInsight


LLMCall = Callable[[str, bool], str]
"""llm(prompt, json_mode) -> response text"""


SUMMARY_PROMPT = """
Based on the following transcript from a video titled "{title}", provide a concise summary (max 550 words).

Transcript:
{captions}
""".strip()

INSIGHTS_PROMPT = """
You are an expert at extracting actionable insights.
From the following video transcript titled "{title}", extract the most important key insights.
For each insight, provide a relevant emoji and a concise, insightful statement that adds context,
a lesson, or an actionable takeaway.

Respond with valid JSON only, exact schema:
{{"key_insights": [{{"emoji": string, "text": string}}]}}
Between 1 and 20 insights. Each emoji is a single emoji.

Transcript:
{captions}
""".strip()

QUOTES_PROMPT = """
You are an expert at identifying notable quotes.
Extract the most impactful and memorable quotes from the following video transcript titled "{title}".
Quote the speaker's words exactly as they appear in the transcript.

Respond with valid JSON only, exact schema:
{{"quotes": [string]}}
Between 1 and 20 quotes.

Transcript:
{captions}
""".strip()


class KeyInsightsResponse(BaseModel):
    key_insights: List[KeyInsight] = Field(min_length=1, max_length=20)

    model_config = {"extra": "forbid"}


class QuotesResponse(BaseModel):
    quotes: List[str] = Field(min_length=1, max_length=20)

    model_config = {"extra": "forbid"}


def openai_caller(api_key: str, model: str, *, temperature: float = 0.3) -> LLMCall:
    """Build an LLMCall backed by the OpenAI chat completions API."""
    client = OpenAI(api_key=api_key)

    def call_llm(prompt: str, json_mode: bool = False) -> str:
        request = {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
        }
        if json_mode:
            request["response_format"] = {"type": "json_object"}
        response = client.chat.completions.create(**request)
        return (response.choices[0].message.content or "").strip()

    return call_llm


def generate_summary(llm: LLMCall, captions: str, title: str) -> str:
    return llm(SUMMARY_PROMPT.format(title=title, captions=captions), False).strip()


def extract_key_insights(llm: LLMCall, captions: str, title: str) -> List[KeyInsight]:
    raw = llm(INSIGHTS_PROMPT.format(title=title, captions=captions), True)
    return KeyInsightsResponse.model_validate(json.loads(raw)).key_insights


def extract_quotes(llm: LLMCall, captions: str, title: str) -> List[str]:
    raw = llm(QUOTES_PROMPT.format(title=title, captions=captions), True)
    quotes = QuotesResponse.model_validate(json.loads(raw)).quotes
    return [quote.strip() for quote in quotes if quote.strip()]


def resolve_llm(config: dict) -> Optional[LLMCall]:
    """The injected caller, or an OpenAI one when an API key is configured."""
    if config.get("llm") is not None:
        return config["llm"]
    api_key = config.get("openai_api_key")
    if not api_key:
        return None
    return openai_caller(api_key, config.get("analysis_model", "gpt-3.5-turbo"))
