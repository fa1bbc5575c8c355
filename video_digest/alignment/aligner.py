# video_digest/alignment/aligner.py
"""
Quote alignment.

Quotes come back from the summariser as bare strings. This module gives each
one the timestamp of the transcript segment it most likely came from:

1. exact tier: first segment whose normalized text contains the normalized
   quote (short quotes only match inside short segments)
2. overlap tier: the segment sharing the most words with the quote, if it
   shares at least MIN_COMMON_WORDS

Unmatched quotes get UNMATCHED_TIMESTAMP. Cost is
O(quotes x segments x words per segment).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from video_digest.transcription.formatting import format_timestamp
from video_digest.transcription.schema import TranscriptSegment


UNMATCHED_TIMESTAMP = "00:00"
MIN_COMMON_WORDS = 3
SHORT_QUOTE_CHARS = 10  # quotes this short or shorter ...
LONG_SEGMENT_CHARS = 100  # ... only match segments shorter than this

EXACT = "exact"
OVERLAP = "overlap"

_PUNCTUATION_REGEX = re.compile(r"[.,!?]")


@dataclass(frozen=True)
class QuoteMatch:
    segment: TranscriptSegment
    tier: str


@dataclass(frozen=True)
class TimedQuote:
    text: str
    timestamp: str
    match: Optional[str] = None  # tier that matched; None for a miss


def normalize_text(text: str) -> str:
    return _PUNCTUATION_REGEX.sub("", text.lower().strip())


def _words(normalized: str) -> set[str]:
    return set(normalized.split())


def match_quote(segments: Sequence[TranscriptSegment], quote: str) -> Optional[QuoteMatch]:
    """Find the segment a quote most plausibly came from, or None."""
    clean_quote = normalize_text(quote)
    normalized = [normalize_text(segment.text) for segment in segments]

    for segment, clean_segment in zip(segments, normalized):
        if clean_quote in clean_segment and (
            len(clean_quote) > SHORT_QUOTE_CHARS or len(clean_segment) < LONG_SEGMENT_CHARS
        ):
            return QuoteMatch(segment, EXACT)

    quote_words = _words(clean_quote)
    best: Optional[TranscriptSegment] = None
    best_common = 0
    for segment, clean_segment in zip(segments, normalized):
        common = len(quote_words & _words(clean_segment))
        if common > best_common:
            best, best_common = segment, common

    if best is not None and best_common >= MIN_COMMON_WORDS:
        return QuoteMatch(best, OVERLAP)
    return None


def align_quotes(segments: Iterable[TranscriptSegment], quotes: Iterable[str]) -> List[TimedQuote]:
    """Attach an MM:SS timestamp to every quote. Each quote is matched independently."""
    ordered = tuple(segments)
    aligned: List[TimedQuote] = []
    for quote in quotes:
        found = match_quote(ordered, quote)
        if found is None:
            aligned.append(TimedQuote(text=quote, timestamp=UNMATCHED_TIMESTAMP))
        else:
            aligned.append(
                TimedQuote(
                    text=quote,
                    timestamp=format_timestamp(found.segment.offset_ms / 1000),
                    match=found.tier,
                )
            )
    return aligned
