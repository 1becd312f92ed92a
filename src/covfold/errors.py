"""Centralised exception hierarchy for covfold."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from covfold.core.model.thresholds import ThresholdsResult


class CovfoldError(Exception):
    """Base class for all custom covfold exceptions."""


class MergeDecodeError(CovfoldError):
    """A per-file coverage payload is malformed and cannot be merged."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class ReconcileReadError(CovfoldError):
    """An in-scope source file could not be read or parsed for empty coverage."""

    def __init__(self, message: str, *, path: str) -> None:
        super().__init__(message)
        self.path = path


class ReportWriteError(CovfoldError):
    """A report writer failed to produce its output."""

    def __init__(self, message: str, *, report_format: str) -> None:
        super().__init__(message)
        self.report_format = report_format


class ThresholdError(CovfoldError):
    """Coverage did not satisfy the configured thresholds."""

    def __init__(self, result: ThresholdsResult) -> None:
        super().__init__("\n".join(v.message for v in result.failures) or "threshold failed")
        self.result = result


__all__ = [
    "CovfoldError",
    "MergeDecodeError",
    "ReconcileReadError",
    "ReportWriteError",
    "ThresholdError",
]
