from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path

    from covfold.core.model.coverage_map import CoverageMap
    from covfold.output.base import WriterContext


def _dump(payload: dict[str, Any], destination: Path) -> Path:
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(json.dumps(payload, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    return destination


def write_json(coverage_map: CoverageMap, context: WriterContext) -> Path:
    """Write the full merged map as ``coverage-final.json``."""
    return _dump(coverage_map.to_dict(), context.directory / "coverage-final.json")


def write_json_summary(coverage_map: CoverageMap, context: WriterContext) -> Path:
    """Write per-file and total summaries as ``coverage-summary.json``."""
    payload: dict[str, Any] = {"total": coverage_map.get_summary().to_dict()}
    for path, fc in coverage_map.items():
        payload[path] = fc.to_summary().to_dict()
    return _dump(payload, context.directory / "coverage-summary.json")


__all__ = ["write_json", "write_json_summary"]
