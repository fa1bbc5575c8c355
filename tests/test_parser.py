"""
Unit tests for caption track parsing.
"""
import warnings

import pytest

from video_digest.transcription.errors import EmptyTranscriptError, MalformedCaptionDataError
from video_digest.transcription.parser import decode_entities, parse_transcript, seconds_to_ms
from video_digest.transcription.schema import TranscriptSegment


TRACK = """<?xml version="1.0" encoding="utf-8" ?><transcript>
<text start="1.5" dur="2.0">It&#39;s great</text>
<text start="3.5" dur="1.25">Tom &amp;amp; Jerry say &amp;quot;hi&amp;quot;</text>
<text start="4.75">no duration</text>
</transcript>"""


class TestParseTranscript:
    def test_segments_in_document_order(self):
        segments = parse_transcript(TRACK)

        assert segments[0] == TranscriptSegment(text="It's great", offset_ms=1500, duration_ms=2000)
        assert [s.offset_ms for s in segments] == [1500, 3500, 4750]
        assert segments[1].duration_ms == 1250

    def test_double_encoded_entities_are_decoded(self):
        segments = parse_transcript(TRACK)
        assert segments[1].text == 'Tom & Jerry say "hi"'

    def test_missing_attributes_default_to_zero(self):
        segments = parse_transcript('<transcript><text>hello</text></transcript>')
        assert segments == [TranscriptSegment(text="hello", offset_ms=0, duration_ms=0)]
        assert parse_transcript(TRACK)[2].duration_ms == 0

    def test_non_monotonic_order_is_preserved(self):
        """Upstream ordering is trusted, never re-sorted."""
        body = (
            '<transcript>'
            '<text start="10" dur="1">second</text>'
            '<text start="2" dur="1">first</text>'
            '<text start="5" dur="1">middle</text>'
            '</transcript>'
        )
        segments = parse_transcript(body)
        assert [s.text for s in segments] == ["second", "first", "middle"]
        assert [s.offset_ms for s in segments] == [10000, 2000, 5000]

    def test_nested_markup_is_stripped(self):
        body = '<transcript><text start="0" dur="1"><font color="#E5E5E5">hey</font> there</text></transcript>'
        assert parse_transcript(body)[0].text == "hey there"

    @pytest.mark.parametrize("body", ["", "<transcript></transcript>", "<html><body>nope</body></html>"])
    def test_zero_chunks_is_empty_transcript(self, body):
        with pytest.raises(EmptyTranscriptError):
            parse_transcript(body)

    def test_empty_transcript_is_malformed_caption_data(self):
        with pytest.raises(MalformedCaptionDataError):
            parse_transcript("<transcript/>")

    def test_xml_body_parses_without_warnings(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert len(parse_transcript(TRACK)) == 3


class TestDecodeEntities:
    def test_known_entities(self):
        assert decode_entities("&#39;&apos;&amp;&quot;&lt;&gt;") == "''&\"<>"

    def test_unknown_entities_left_alone(self):
        assert decode_entities("caf&eacute; &#8217;") == "caf&eacute; &#8217;"


class TestSecondsToMs:
    @pytest.mark.parametrize(
        "value, expected",
        [("1.5", 1500), ("3.0006", 3001), ("2", 2000), (None, 0), ("abc", 0), ("-1", 0), ("nan", 0)],
    )
    def test_conversion(self, value, expected):
        assert seconds_to_ms(value) == expected
