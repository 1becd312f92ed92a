"""Shared type aliases and enumerations used across covfold."""

from __future__ import annotations

from enum import StrEnum

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Metric(StrEnum):
    """Coverage metric categories, in threshold evaluation order."""

    STATEMENTS = "statements"
    BRANCHES = "branches"
    LINES = "lines"
    FUNCTIONS = "functions"


class BranchType(StrEnum):
    """Kinds of branch points recorded in a branch map."""

    IF = "if"
    COND_EXPR = "cond-expr"
    BINARY_EXPR = "binary-expr"
    SWITCH = "switch"


FULL_COVERAGE: int = 100

METRIC_ORDER: tuple[Metric, ...] = (
    Metric.STATEMENTS,
    Metric.BRANCHES,
    Metric.LINES,
    Metric.FUNCTIONS,
)


__all__ = [
    "FULL_COVERAGE",
    "METRIC_ORDER",
    "BranchType",
    "Metric",
]
