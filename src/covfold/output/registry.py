"""Writer registry for covfold report formats."""

from __future__ import annotations

import difflib
from typing import TYPE_CHECKING

from covfold._meta import logger
from covfold.errors import ReportWriteError
from covfold.output.base import ReportFormat, WriteOutcome, WriterContext
from covfold.output.json import write_json, write_json_summary
from covfold.output.lcov import write_lcov
from covfold.output.text import write_text, write_text_summary

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from rich.console import Console

    from covfold.core.model.coverage_map import CoverageMap
    from covfold.output.base import Writer

WRITERS: dict[ReportFormat, Writer] = {
    ReportFormat.JSON: write_json,
    ReportFormat.JSON_SUMMARY: write_json_summary,
    ReportFormat.LCOV: write_lcov,
    ReportFormat.TEXT: write_text,
    ReportFormat.TEXT_SUMMARY: write_text_summary,
}


def resolve_writer(format_str: str) -> tuple[ReportFormat, Writer]:
    """Resolve *format_str* to a :class:`ReportFormat` and its writer."""
    try:
        fmt = ReportFormat(format_str.strip().lower())
    except ValueError as err:
        choices = [f.value for f in ReportFormat]
        suggestion = difflib.get_close_matches(format_str, choices, n=1)
        hint = f". Did you mean {suggestion[0]!r}?" if suggestion else ""
        msg = f"{format_str!r} is not one of {', '.join(choices)}{hint}"
        raise ValueError(msg) from err

    logger.debug("selected writer %s", fmt.value)
    return fmt, WRITERS[fmt]


def write_reports(
    coverage_map: CoverageMap,
    *,
    directory: Path,
    formats: Sequence[str],
    console: Console,
    root_dir: Path | None = None,
) -> list[WriteOutcome]:
    """Run every writer in *formats*; a failing writer does not stop the others."""
    context = WriterContext(directory=directory, console=console, root_dir=root_dir)
    outcomes: list[WriteOutcome] = []
    for name in formats:
        try:
            fmt, writer = resolve_writer(name)
            path = writer(coverage_map, context)
        except Exception as exc:  # noqa: BLE001 - any writer failure becomes a result
            err = ReportWriteError(f"Failed to write {name} coverage report: {exc}", report_format=name)
            err.__cause__ = exc
            logger.error("%s", err, exc_info=exc)
            outcomes.append(WriteOutcome(report_format=name, error=err))
            continue
        if path is not None:
            logger.debug("wrote %s report to %s", fmt.value, path)
        outcomes.append(WriteOutcome(report_format=fmt.value, path=path))
    return outcomes


__all__ = ["WRITERS", "resolve_writer", "write_reports"]
