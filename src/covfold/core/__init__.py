"""Coverage model, configuration and untested-file reconciliation.

The run-level reporter lives in :mod:`covfold.core.reporter`; it is not
re-exported here because it depends on :mod:`covfold.output`.
"""

from covfold.core.config import LOG_FORMAT, CoverageConfig, load_config
from covfold.core.empty import generate_empty_coverage
from covfold.core.model import (
    CoverageMap,
    CoverageSummary,
    FileCoverage,
    Threshold,
    ThresholdPolicy,
    ThresholdsResult,
    ThresholdViolation,
    Totals,
    decode_coverage_payload,
    evaluate,
    match_files_with_globs,
    parse_threshold,
)
from covfold.core.reconcile import (
    DirectoryModuleIndex,
    ModuleIndex,
    ReconcileOutcome,
    StaticModuleIndex,
    add_untested_files,
)
from covfold.core.schema import get_schema

__all__ = [
    "LOG_FORMAT",
    "CoverageConfig",
    "CoverageMap",
    "CoverageSummary",
    "DirectoryModuleIndex",
    "FileCoverage",
    "ModuleIndex",
    "ReconcileOutcome",
    "StaticModuleIndex",
    "Threshold",
    "ThresholdPolicy",
    "ThresholdViolation",
    "ThresholdsResult",
    "Totals",
    "add_untested_files",
    "decode_coverage_payload",
    "evaluate",
    "generate_empty_coverage",
    "get_schema",
    "load_config",
    "match_files_with_globs",
    "parse_threshold",
]
