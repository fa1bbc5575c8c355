# video_digest/transcription/parser.py
"""
Timed-text caption parsing.

Input is the caption track body:

    <transcript>
      <text start="1.5" dur="2.0">It&amp;#39;s great</text>
      ...
    </transcript>

Output is one TranscriptSegment per <text> chunk, in document order. Chunks
are never re-sorted: if upstream order is wrong, so is ours.
"""

from __future__ import annotations

import math
import warnings
from typing import List, Optional

from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning

from video_digest.transcription.errors import EmptyTranscriptError
from video_digest.transcription.schema import TranscriptSegment


# Caption bodies are often entity-encoded twice; the markup parser removes one layer.
ENTITY_REPLACEMENTS = (
    ("&#39;", "'"),
    ("&apos;", "'"),
    ("&amp;", "&"),
    ("&quot;", '"'),
    ("&lt;", "<"),
    ("&gt;", ">"),
)


def decode_entities(text: str) -> str:
    """Decode the handful of entities captions use. Unknown ones stay as-is."""
    for entity, literal in ENTITY_REPLACEMENTS:
        text = text.replace(entity, literal)
    return text


def seconds_to_ms(value: Optional[str]) -> int:
    """'1.5' -> 1500. Missing, unparsable or negative values become 0."""
    if value is None:
        return 0
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(seconds) or math.isinf(seconds) or seconds < 0:
        return 0
    return int(math.floor(seconds * 1000 + 0.5))


def parse_transcript(body: str) -> List[TranscriptSegment]:
    """
    Parse a caption track body into segments.

    Raises EmptyTranscriptError when the body has no <text> chunks.
    """
    with warnings.catch_warnings():
        # timed text is XML; html.parser reads it fine
        warnings.simplefilter("ignore", XMLParsedAsHTMLWarning)
        soup = BeautifulSoup(body or "", "html.parser")
    chunks = soup.find_all("text")
    if not chunks:
        raise EmptyTranscriptError("Caption track contained no timed-text chunks")

    return [
        TranscriptSegment(
            text=decode_entities(chunk.get_text()),
            offset_ms=seconds_to_ms(chunk.get("start")),
            duration_ms=seconds_to_ms(chunk.get("dur")),
        )
        for chunk in chunks
    ]
