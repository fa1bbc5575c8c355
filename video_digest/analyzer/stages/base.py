# video_digest/analyzer/stages/base.py
"""
Shared base definitions for all pipeline stages.

- The Stage function contract
- A lightweight timer for consistent execution_time_ms measurement
"""

from __future__ import annotations

import time
import uuid
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Tuple, TypeAlias

from video_digest.analyzer.schema import StageResult


Stage: TypeAlias = Callable[[Dict[str, Any], uuid.UUID, Dict[str, Any]], Tuple[Dict[str, Any], StageResult]]
"""
stage(content_object: dict, run_id: uuid.UUID, config: dict) -> (content_object, StageResult)
"""


@contextmanager
def timer() -> Iterator[Callable[[], float]]:
    """
    Yield a function returning milliseconds elapsed since entry.

        with timer() as end:
            ...
        execution_time_ms = end()
    """
    start = time.perf_counter()

    def end() -> float:
        return (time.perf_counter() - start) * 1000

    yield end
