"""
Tests for diagnostics aggregation and artifact writing.
"""
import json
import uuid

import pytest

from video_digest.analyzer.diagnostics.collector import DiagnosticsCollector
from video_digest.analyzer.output.writer import artifact_name, write_artifact
from video_digest.analyzer.schema import AnalysisObject, FailureType, Identity, Source, StageFailure, StageResult


def failure(stage, *fixes):
    return StageFailure(
        stage=stage,
        type=FailureType.SOURCE_ERROR,
        cause="download_error",
        impact="none",
        suggested_fixes=list(fixes),
    )


class TestDiagnosticsCollector:
    def test_merges_stage_fields(self):
        collector = DiagnosticsCollector(uuid.uuid4())
        collector.add_stage_result(StageResult(stage_name="a", success=True, warnings=["w1"]))
        collector.add_stage_result(
            StageResult(
                stage_name="b",
                success=False,
                errors=["e1"],
                failures=[failure("b", "Try again later", "Check the URL")],
            )
        )
        collector.add_stage_result(
            StageResult(stage_name="c", success=False, failures=[failure("c", "Try again later")])
        )

        diagnostics = collector.build_diagnostics()
        assert list(diagnostics["stage_status"]) == ["a", "b", "c"]
        assert diagnostics["warnings"] == ["w1"]
        assert diagnostics["errors"] == ["e1"]
        assert diagnostics["suggested_fixes"] == ["Try again later", "Check the URL"]
        assert diagnostics["stage_status"]["b"]["failures"][0]["type"] == "source_error"

    def test_failure_queries(self):
        collector = DiagnosticsCollector(uuid.uuid4())
        collector.add_stage_result(StageResult(stage_name="a", success=True))
        collector.add_stage_result(StageResult(stage_name="b", success=False))
        assert collector.failed("b")
        assert not collector.failed("a")
        assert not collector.failed("never_ran")

    def test_duplicate_stage_rejected(self):
        collector = DiagnosticsCollector(uuid.uuid4())
        collector.add_stage_result(StageResult(stage_name="a", success=True))
        with pytest.raises(ValueError):
            collector.add_stage_result(StageResult(stage_name="a", success=True))


class TestAnalysisObject:
    def test_manual_input_requires_error(self):
        with pytest.raises(ValueError):
            AnalysisObject(identity=Identity(), source=Source(url="x"), suggest_manual_input=True)

    def test_quote_timestamp_format(self):
        with pytest.raises(ValueError):
            AnalysisObject.model_validate(
                {
                    "identity": Identity().model_dump(),
                    "source": {"url": "x"},
                    "analysis": {"quotes": [{"text": "q", "timestamp": "4s"}]},
                }
            )


class TestWriter:
    def test_writes_named_json(self, tmp_path):
        content = {
            "identity": {"workflow_run_id": "abc"},
            "source": {"video_id": "dQw4w9WgXcQ", "title": "Café ☕"},
        }
        path = write_artifact(content, tmp_path / "nested" / "out")

        assert path.name == "dQw4w9WgXcQ_abc.json"
        assert json.loads(path.read_text(encoding="utf-8")) == content
        assert "Café ☕" in path.read_text(encoding="utf-8")

    def test_name_without_video_id(self):
        assert artifact_name({"identity": {"workflow_run_id": "abc"}, "source": {}}) == "unknown_abc.json"
