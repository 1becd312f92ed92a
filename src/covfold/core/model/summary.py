from __future__ import annotations

from dataclasses import dataclass

from covfold.core.model.metrics import pct
from covfold.core.model.types import METRIC_ORDER, Metric


@dataclass(frozen=True, slots=True)
class Totals:
    """Trackable and exercised unit counts for one metric."""

    total: int = 0
    covered: int = 0

    def __post_init__(self) -> None:
        """Validate that counts are non-negative and consistent."""
        if self.total < 0 or self.covered < 0:
            msg = "Totals fields must be >= 0"
            raise ValueError(msg)
        if self.covered > self.total:
            msg = "Totals requires covered <= total"
            raise ValueError(msg)

    @property
    def uncovered(self) -> int:
        return self.total - self.covered

    @property
    def pct(self) -> float:
        return pct(self.covered, self.total)

    def __add__(self, other: Totals) -> Totals:
        return Totals(total=self.total + other.total, covered=self.covered + other.covered)

    def to_dict(self) -> dict[str, float | int]:
        return {
            "total": self.total,
            "covered": self.covered,
            "skipped": 0,
            "pct": self.pct,
        }


@dataclass(frozen=True, slots=True)
class CoverageSummary:
    """Aggregate totals for statements, branches, lines and functions."""

    statements: Totals = Totals()
    branches: Totals = Totals()
    lines: Totals = Totals()
    functions: Totals = Totals()

    @classmethod
    def empty(cls) -> CoverageSummary:
        return cls()

    def metric(self, metric: Metric | str) -> Totals:
        return getattr(self, Metric(metric).value)

    def merge(self, other: CoverageSummary) -> CoverageSummary:
        return CoverageSummary(
            statements=self.statements + other.statements,
            branches=self.branches + other.branches,
            lines=self.lines + other.lines,
            functions=self.functions + other.functions,
        )

    def to_dict(self) -> dict[str, dict[str, float | int]]:
        return {m.value: self.metric(m).to_dict() for m in METRIC_ORDER}


__all__ = ["CoverageSummary", "Totals"]
