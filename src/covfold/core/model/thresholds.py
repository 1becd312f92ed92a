"""Coverage threshold policy parsing and evaluation."""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Literal

from covfold._meta import logger
from covfold.core.model.types import FULL_COVERAGE, METRIC_ORDER, Metric

if TYPE_CHECKING:
    from covfold.core.model.summary import CoverageSummary

_THRESHOLD_PATTERN = re.compile(r"^[a-zA-Z_-]+=")

GLOBAL_SCOPE = "global"

_ALIASES: dict[str, Metric] = {
    "stmt": Metric.STATEMENTS,
    "statement": Metric.STATEMENTS,
    "statements": Metric.STATEMENTS,
    "br": Metric.BRANCHES,
    "branch": Metric.BRANCHES,
    "branches": Metric.BRANCHES,
    "line": Metric.LINES,
    "lines": Metric.LINES,
    "fn": Metric.FUNCTIONS,
    "func": Metric.FUNCTIONS,
    "function": Metric.FUNCTIONS,
    "functions": Metric.FUNCTIONS,
}

ViolationKind = Literal["percentage", "uncovered"]


@dataclass(frozen=True, slots=True)
class Threshold:
    """Per-metric thresholds for one scope.

    Fields
    ------
    statements, branches, lines, functions:
        ``None`` means no constraint. A non-negative value is the minimum
        coverage percentage. A negative value caps the number of uncovered
        units at its magnitude.
    """

    statements: float | None = None
    branches: float | None = None
    lines: float | None = None
    functions: float | None = None

    def is_empty(self) -> bool:
        return all(self.value(m) is None for m in METRIC_ORDER)

    def value(self, metric: Metric | str) -> float | None:
        return getattr(self, Metric(metric).value)

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> Threshold:
        """Build a threshold from a config table such as ``{"branches": -10}``."""
        if not isinstance(data, Mapping):
            msg = f"threshold must be a table of metrics, got {type(data).__name__}"
            raise TypeError(msg)
        values: dict[str, float | None] = {}
        for key, raw in data.items():
            metric = _ALIASES.get(str(key).strip().lower())
            if metric is None:
                msg = f"unknown threshold metric: {key!r}"
                raise ValueError(msg)
            if metric.value in values:
                msg = f"duplicate threshold for {metric.value!r}"
                raise ValueError(msg)
            values[metric.value] = _coerce_number(raw, key=str(key))
        return cls(**values)


@dataclass(frozen=True, slots=True)
class ThresholdPolicy:
    """Immutable mapping of scope name to :class:`Threshold`."""

    scopes: Mapping[str, Threshold] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "scopes", MappingProxyType(dict(self.scopes)))

    @classmethod
    def from_mapping(cls, data: Mapping[str, object] | None) -> ThresholdPolicy:
        if not data:
            return cls()
        if not isinstance(data, Mapping):
            msg = f"coverage threshold must be a table of scopes, got {type(data).__name__}"
            raise TypeError(msg)
        scopes: dict[str, Threshold] = {}
        for scope, table in data.items():
            if not isinstance(table, Mapping):
                msg = f"threshold scope {scope!r} must be a table of metrics"
                raise TypeError(msg)
            scopes[str(scope)] = Threshold.from_mapping(table)
        return cls(scopes=scopes)

    @property
    def global_threshold(self) -> Threshold | None:
        return self.scopes.get(GLOBAL_SCOPE)

    def is_empty(self) -> bool:
        return all(t.is_empty() for t in self.scopes.values())


@dataclass(frozen=True, slots=True)
class ThresholdViolation:
    """A single metric that failed its threshold."""

    scope: str
    metric: Metric
    actual: float | int
    threshold: float
    kind: ViolationKind

    @property
    def message(self) -> str:
        if self.kind == "uncovered":
            return (
                f"Uncovered count for {self.metric.value} ({_fmt(self.actual)}) "
                f"exceeds {self.scope} threshold ({_fmt(self.threshold)})"
            )
        return (
            f"Coverage for {self.metric.value} ({_fmt(self.actual)}%) "
            f"does not meet {self.scope} threshold ({_fmt(self.threshold)}%)"
        )

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class ThresholdsResult:
    """Outcome of evaluating thresholds for one or more scopes."""

    passed: bool
    failures: list[ThresholdViolation]

    @property
    def messages(self) -> list[str]:
        return [f.message for f in self.failures]


def parse_threshold(expression: str) -> Threshold:
    """Parse a threshold expression like 'statements=90,branches=-10,functions=75'."""
    if not expression or not expression.strip():
        msg = "threshold expression must be non-empty"
        raise ValueError(msg)

    values: dict[str, float] = {}
    tokens = [token.strip() for token in re.split(r"[,\s]+", expression) if token.strip()]
    for token in tokens:
        if "=" not in token or not _THRESHOLD_PATTERN.match(token):
            msg = f"invalid threshold token: {token!r}"
            raise ValueError(msg)

        key, raw_value = token.split("=", 1)
        key = key.strip().lower()
        value = raw_value.strip().rstrip("%")

        metric = _ALIASES.get(key)
        if metric is None:
            msg = f"unknown threshold metric: {key!r}"
            raise ValueError(msg)
        if metric.value in values:
            msg = f"duplicate constraint in {token!r}"
            raise ValueError(msg)
        values[metric.value] = _parse_number(value, token=token)

    threshold = Threshold(**values)
    if threshold.is_empty():
        msg = "threshold must specify at least one metric"
        raise ValueError(msg)
    return threshold


def evaluate(
    summary: CoverageSummary,
    threshold: Threshold | None,
    *,
    scope: str = GLOBAL_SCOPE,
) -> ThresholdsResult:
    """Evaluate *threshold* against *summary*.

    Metrics are checked in the fixed order statements, branches, lines,
    functions and every failure is reported. A metric with no trackable units
    sits at 100% and never fails a percentage floor.
    """
    if threshold is None or threshold.is_empty():
        return ThresholdsResult(passed=True, failures=[])

    failures: list[ThresholdViolation] = []
    for metric in METRIC_ORDER:
        required = threshold.value(metric)
        if required is None:
            continue
        totals = summary.metric(metric)
        if required < 0:
            ceiling = -required
            if totals.uncovered > ceiling:
                failures.append(
                    ThresholdViolation(
                        scope=scope,
                        metric=metric,
                        actual=totals.uncovered,
                        threshold=ceiling,
                        kind="uncovered",
                    )
                )
        elif totals.pct < required:
            failures.append(
                ThresholdViolation(
                    scope=scope,
                    metric=metric,
                    actual=totals.pct,
                    threshold=required,
                    kind="percentage",
                )
            )

    return ThresholdsResult(passed=not failures, failures=failures)


def check_thresholds(
    summary: CoverageSummary,
    threshold: Threshold | None,
    *,
    scope: str = GLOBAL_SCOPE,
) -> list[str]:
    """Return violation messages only; empty means the thresholds pass."""
    return evaluate(summary, threshold, scope=scope).messages


def evaluate_policy(summary: CoverageSummary, policy: ThresholdPolicy) -> ThresholdsResult:
    """Evaluate the global scope of *policy* against the aggregate *summary*."""
    for scope in policy.scopes:
        if scope != GLOBAL_SCOPE:
            logger.debug("threshold scope %r is not evaluated; only %r is supported", scope, GLOBAL_SCOPE)
    return evaluate(summary, policy.global_threshold, scope=GLOBAL_SCOPE)


def _fmt(value: float) -> str:
    return f"{value:g}"


def _coerce_number(raw: object, *, key: str) -> float | None:
    if raw is None:
        return None
    if isinstance(raw, bool) or not isinstance(raw, int | float):
        msg = f"threshold for {key!r} must be a number, got {raw!r}"
        raise ValueError(msg)
    return _check_range(float(raw), token=key)


def _parse_number(value: str, *, token: str) -> float:
    try:
        number = float(value)
    except ValueError as exc:
        msg = f"invalid numeric value in {token!r}: {value!r}"
        raise ValueError(msg) from exc
    return _check_range(number, token=token)


def _check_range(number: float, *, token: str) -> float:
    if math.isnan(number) or math.isinf(number):
        msg = f"threshold must be finite in {token!r}: {number}"
        raise ValueError(msg)
    if number > float(FULL_COVERAGE):
        msg = f"percentage out of range in {token!r}: {number}"
        raise ValueError(msg)
    return number


__all__ = [
    "GLOBAL_SCOPE",
    "Threshold",
    "ThresholdPolicy",
    "ThresholdViolation",
    "ThresholdsResult",
    "check_thresholds",
    "evaluate",
    "evaluate_policy",
    "parse_threshold",
]
