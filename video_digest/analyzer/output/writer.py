"""Artifact writer: one JSON file per analysis run."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict


def artifact_name(content_object: Dict[str, Any]) -> str:
    video_id = content_object.get("source", {}).get("video_id") or "unknown"
    run_id = content_object.get("identity", {}).get("workflow_run_id", "run")
    return f"{video_id}_{run_id}.json"


def write_artifact(content_object: Dict[str, Any], out_dir: Path) -> Path:
    """Write the artifact under out_dir (created if needed) and return its path."""
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / artifact_name(content_object)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(content_object, f, indent=2, ensure_ascii=False, default=str)
    return path
