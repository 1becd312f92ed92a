from __future__ import annotations

import io
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from rich.console import Console

from covfold.core.model import CoverageMap, decode_coverage_payload
from covfold.output import ReportFormat, format_line_ranges, resolve_writer, write_reports

Builder = Callable[..., dict[str, Any]]


@pytest.fixture
def coverage_map(tmp_path: Path, file_coverage: Builder) -> CoverageMap:
    a = str(tmp_path / "src" / "a.py")
    b = str(tmp_path / "src" / "b.py")
    return CoverageMap(
        decode_coverage_payload(
            {
                a: file_coverage(a, statements=[1, 0, 0, 1, 0], functions=[1], branches=[[2, 0]]),
                b: file_coverage(b, statements=[0]),
            }
        )
    )


def _console() -> tuple[Console, io.StringIO]:
    buf = io.StringIO()
    return Console(file=buf, width=160, color_system=None), buf


@pytest.mark.parametrize(
    ("lines", "expected"),
    [
        ([], ""),
        ([4], "4"),
        ([1, 2, 3, 7, 9, 10], "1-3,7,9-10"),
        ([10, 2, 1], "1-2,10"),
    ],
)
def test_format_line_ranges(lines: list[int], expected: str) -> None:
    assert format_line_ranges(lines) == expected


def test_resolve_writer_suggests_close_match() -> None:
    fmt, _writer = resolve_writer("LCOV")
    assert fmt is ReportFormat.LCOV
    with pytest.raises(ValueError, match="Did you mean 'json-summary'"):
        resolve_writer("json-sumary")


def test_json_writers(tmp_path: Path, coverage_map: CoverageMap) -> None:
    console, _ = _console()
    out_dir = tmp_path / "out"

    outcomes = write_reports(coverage_map, directory=out_dir, formats=["json", "json-summary"], console=console)

    assert [o.path for o in outcomes] == [out_dir / "coverage-final.json", out_dir / "coverage-summary.json"]
    final = json.loads((out_dir / "coverage-final.json").read_text(encoding="utf-8"))
    assert decode_coverage_payload(final).keys() == set(coverage_map.files())

    summary = json.loads((out_dir / "coverage-summary.json").read_text(encoding="utf-8"))
    assert summary["total"]["statements"] == {"total": 6, "covered": 2, "skipped": 0, "pct": 33.33}
    assert summary["total"]["branches"]["pct"] == 50.0


def test_lcov_writer(tmp_path: Path, coverage_map: CoverageMap) -> None:
    console, _ = _console()
    [outcome] = write_reports(coverage_map, directory=tmp_path, formats=["lcov"], console=console)

    assert outcome.ok
    text = (tmp_path / "lcov.info").read_text(encoding="utf-8")
    records = text.strip().split("end_of_record")
    assert len([r for r in records if r.strip()]) == 2
    first = records[0]
    assert f"SF:{tmp_path / 'src' / 'a.py'}" in first
    assert "FN:1,fn0" in first
    assert "FNDA:1,fn0" in first
    assert "DA:1,1" in first
    assert "DA:2,0" in first
    assert "LF:5" in first
    assert "LH:2" in first
    assert "BRDA:1,0,0,2" in first
    assert "BRDA:1,0,1,-" in first
    assert "BRF:2" in first
    assert "BRH:1" in first


def test_text_writer_renders_table(tmp_path: Path, coverage_map: CoverageMap) -> None:
    console, buf = _console()
    [outcome] = write_reports(
        coverage_map,
        directory=tmp_path,
        formats=["text"],
        console=console,
        root_dir=tmp_path,
    )

    assert outcome.ok
    assert outcome.path is None
    out = buf.getvalue()
    assert "src/a.py" in out
    assert "2-3,5" in out
    assert "All files" in out
    assert "33.33%" in out


def test_text_summary_writer(tmp_path: Path, coverage_map: CoverageMap) -> None:
    console, buf = _console()
    write_reports(coverage_map, directory=tmp_path, formats=["text-summary"], console=console)
    out = buf.getvalue()
    assert "Statements : 33.33% ( 2/6 )" in out
    assert "Functions  : 100% ( 1/1 )" in out
