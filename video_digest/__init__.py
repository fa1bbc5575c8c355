"""Caption-based YouTube video analysis: transcript, summary, insights, timed quotes."""

__version__ = "0.1.0"
