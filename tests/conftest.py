from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner


def _loc(line: int, start: int = 0, end: int = 10) -> dict[str, dict[str, int]]:
    return {"start": {"line": line, "column": start}, "end": {"line": line, "column": end}}


def build_file_coverage(
    path: str,
    *,
    statements: Sequence[int] = (),
    functions: Sequence[int] = (),
    branches: Sequence[Sequence[int]] = (),
) -> dict[str, Any]:
    """Return an Istanbul-shaped record; statement *i* sits on line *i + 1*."""
    return {
        "path": path,
        "statementMap": {str(i): _loc(i + 1) for i in range(len(statements))},
        "s": {str(i): count for i, count in enumerate(statements)},
        "fnMap": {
            str(i): {"name": f"fn{i}", "decl": _loc(i + 1), "loc": _loc(i + 1)} for i in range(len(functions))
        },
        "f": {str(i): count for i, count in enumerate(functions)},
        "branchMap": {
            str(i): {
                "type": "if",
                "loc": _loc(i + 1),
                "locations": [_loc(i + 1, j, j + 1) for j in range(len(arms))],
            }
            for i, arms in enumerate(branches)
        },
        "b": {str(i): list(arms) for i, arms in enumerate(branches)},
    }


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Click CLI runner for invoking the command-line interface."""
    return CliRunner()


@pytest.fixture
def file_coverage() -> Callable[..., dict[str, Any]]:
    return build_file_coverage


@pytest.fixture
def payload_file(tmp_path: Path) -> Callable[..., Path]:
    def write(data: object, *, filename: str = "coverage.json") -> Path:
        target = tmp_path / "payloads" / filename
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps(data), encoding="utf-8")
        return target

    return write
