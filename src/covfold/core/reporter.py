"""Run-level coverage reporter: merge per test file, report and enforce at the end."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from rich.console import Console

from covfold._meta import logger
from covfold.core.model.coverage import decode_coverage_payload
from covfold.core.model.coverage_map import CoverageMap
from covfold.core.model.thresholds import ThresholdsResult, evaluate_policy
from covfold.core.reconcile import ReconcileOutcome, add_untested_files
from covfold.errors import MergeDecodeError, ThresholdError
from covfold.output.registry import write_reports

if TYPE_CHECKING:
    from covfold.core.config import CoverageConfig
    from covfold.core.reconcile import ModuleIndex
    from covfold.output.base import WriteOutcome


@dataclass(frozen=True, slots=True)
class RunContext:
    """Collaborators available when the run completes."""

    module_index: ModuleIndex


@dataclass(slots=True)
class RunOutcome:
    reconcile: ReconcileOutcome = field(default_factory=ReconcileOutcome)
    writes: list[WriteOutcome] = field(default_factory=list)
    thresholds: ThresholdsResult = field(default_factory=lambda: ThresholdsResult(passed=True, failures=[]))

    @property
    def passed(self) -> bool:
        return self.thresholds.passed


class Reporter(Protocol):
    def on_file_complete(self, coverage: object | None) -> None: ...

    def on_run_complete(self, config: CoverageConfig, context: RunContext) -> RunOutcome: ...


class CoverageReporter:
    """Owns one :class:`CoverageMap` for a single test run.

    ``on_file_complete`` may be called from several worker threads; merges
    are serialised on an internal lock.
    """

    def __init__(self, *, console: Console | None = None) -> None:
        self._coverage_map = CoverageMap()
        self._lock = threading.Lock()
        self._console = console or Console()
        self._error: ThresholdError | None = None

    @property
    def error(self) -> ThresholdError | None:
        """Terminal error state set when thresholds are violated."""
        return self._error

    @property
    def has_failed(self) -> bool:
        return self._error is not None

    def get_coverage_map(self) -> CoverageMap:
        return self._coverage_map

    def on_file_complete(self, coverage: object | None) -> None:
        """Merge one test file's coverage payload; malformed payloads are dropped."""
        if not coverage:
            return
        try:
            files = decode_coverage_payload(coverage)
        except MergeDecodeError as exc:
            logger.error("Dropping malformed coverage payload: %s", exc)
            return
        with self._lock:
            self._coverage_map.merge(files)

    def on_run_complete(self, config: CoverageConfig, context: RunContext) -> RunOutcome:
        with self._lock:
            outcome = RunOutcome()
            outcome.reconcile = add_untested_files(
                self._coverage_map,
                collect_coverage_from=config.collect_coverage_from,
                root_dir=config.root_dir,
                module_index=context.module_index,
            )
            outcome.writes = write_reports(
                self._coverage_map,
                directory=config.output_directory,
                formats=config.coverage_reporters,
                console=self._console,
                root_dir=config.root_dir,
            )
            outcome.thresholds = self._check_threshold(config)
        return outcome

    def _check_threshold(self, config: CoverageConfig) -> ThresholdsResult:
        if config.coverage_threshold.is_empty():
            return ThresholdsResult(passed=True, failures=[])

        result = evaluate_policy(self._coverage_map.get_summary(), config.coverage_threshold)
        if not result.passed:
            for message in result.messages:
                logger.error("%s", message)
            self._error = ThresholdError(result)
        return result


__all__ = ["CoverageReporter", "Reporter", "RunContext", "RunOutcome"]
