"""Domain model for covfold (pure types + policy; no IO)."""

from .coverage import BranchMeta, FileCoverage, FunctionMeta, Location, decode_coverage_payload
from .coverage_map import CoverageMap
from .metrics import pct
from .path_filter import GlobMatcher, match_files_with_globs
from .summary import CoverageSummary, Totals
from .thresholds import (
    GLOBAL_SCOPE,
    Threshold,
    ThresholdPolicy,
    ThresholdsResult,
    ThresholdViolation,
    check_thresholds,
    evaluate,
    evaluate_policy,
    parse_threshold,
)
from .types import FULL_COVERAGE, METRIC_ORDER, BranchType, Metric

__all__ = [
    "FULL_COVERAGE",
    "GLOBAL_SCOPE",
    "METRIC_ORDER",
    "BranchMeta",
    "BranchType",
    "CoverageMap",
    "CoverageSummary",
    "FileCoverage",
    "FunctionMeta",
    "GlobMatcher",
    "Location",
    "Metric",
    "Threshold",
    "ThresholdPolicy",
    "ThresholdViolation",
    "ThresholdsResult",
    "Totals",
    "check_thresholds",
    "decode_coverage_payload",
    "evaluate",
    "evaluate_policy",
    "match_files_with_globs",
    "parse_threshold",
    "pct",
]
