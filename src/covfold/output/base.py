"""Base types and interface for report writers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from pathlib import Path

    from rich.console import Console

    from covfold.core.model.coverage_map import CoverageMap
    from covfold.errors import ReportWriteError


class ReportFormat(StrEnum):
    """Supported report formats."""

    JSON = "json"
    JSON_SUMMARY = "json-summary"
    LCOV = "lcov"
    TEXT = "text"
    TEXT_SUMMARY = "text-summary"


@dataclass(slots=True)
class WriterContext:
    """Options shared by all writers."""

    directory: Path
    console: Console
    root_dir: Path | None = None


@dataclass(frozen=True, slots=True)
class WriteOutcome:
    """Result of running one writer; ``error`` is set when it failed."""

    report_format: str
    path: Path | None = None
    error: ReportWriteError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Writer(Protocol):
    def __call__(self, coverage_map: CoverageMap, context: WriterContext) -> Path | None: ...
