from video_digest.alignment.aligner import (
    UNMATCHED_TIMESTAMP,
    QuoteMatch,
    TimedQuote,
    align_quotes,
    match_quote,
    normalize_text,
)

__all__ = ["UNMATCHED_TIMESTAMP", "QuoteMatch", "TimedQuote", "align_quotes", "match_quote", "normalize_text"]
