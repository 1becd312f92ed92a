"""Report writers for merged coverage."""

from __future__ import annotations

from covfold.output.base import ReportFormat, WriteOutcome, WriterContext
from covfold.output.registry import WRITERS, resolve_writer, write_reports
from covfold.output.text import build_table, format_line_ranges

__all__ = [
    "WRITERS",
    "ReportFormat",
    "WriteOutcome",
    "WriterContext",
    "build_table",
    "format_line_ranges",
    "resolve_writer",
    "write_reports",
]
