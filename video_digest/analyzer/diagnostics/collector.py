# video_digest/analyzer/diagnostics/collector.py
"""
Diagnostics aggregation for the analysis pipeline.

Collects stage results and synthesizes the diagnostics section of the artifact.
"""

from __future__ import annotations

from typing import Any, Dict, List
from uuid import UUID

from video_digest.analyzer.schema import Diagnostics, StageResult


class DiagnosticsCollector:
    """
    Accumulates StageResult objects for one run.

    Not thread-safe; a run is single-threaded.
    """

    def __init__(self, run_id: UUID) -> None:
        self.run_id = run_id
        self._stage_status: Dict[str, StageResult] = {}
        self._warnings: List[str] = []
        self._errors: List[str] = []
        self._suggested_fixes: List[str] = []

    def add_stage_result(self, result: StageResult) -> None:
        """Add a stage result and merge its global fields."""
        if result.stage_name in self._stage_status:
            raise ValueError(f"Duplicate stage result for {result.stage_name}")

        self._stage_status[result.stage_name] = result
        self._warnings.extend(result.warnings)
        self._errors.extend(result.errors)
        self._suggested_fixes.extend(result.suggested_fixes)
        for failure in result.failures:
            self._suggested_fixes.extend(failure.suggested_fixes)

    def failed(self, stage_name: str) -> bool:
        result = self._stage_status.get(stage_name)
        return result is not None and not result.success

    def build_diagnostics(self) -> Dict[str, Any]:
        """Build the diagnostics dict. Suggested fixes are de-duplicated, first seen first."""
        diag = Diagnostics(
            stage_status=dict(self._stage_status),
            warnings=list(self._warnings),
            errors=list(self._errors),
            suggested_fixes=list(dict.fromkeys(self._suggested_fixes)),
        )
        return diag.model_dump(mode="json", exclude_none=True)
