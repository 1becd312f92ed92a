"""Central configuration and constants for ``covfold``."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from covfold._meta import logger
from covfold.core.model.path_filter import GlobMatcher
from covfold.core.model.thresholds import ThresholdPolicy

# Default logging format used by the CLI entry point.
LOG_FORMAT = "%(levelname)s: %(message)s"

DEFAULT_REPORTERS: tuple[str, ...] = ("json", "lcov", "text")

_CONFIG_KEYS = frozenset(
    {
        "collect_coverage_from",
        "coverage_directory",
        "coverage_reporters",
        "coverage_threshold",
    }
)


@dataclass(frozen=True, slots=True)
class CoverageConfig:
    """Settings consumed by the coverage reporter at run completion."""

    root_dir: Path
    collect_coverage_from: tuple[str, ...] = ()
    coverage_directory: Path | None = None
    coverage_reporters: tuple[str, ...] = DEFAULT_REPORTERS
    coverage_threshold: ThresholdPolicy = field(default_factory=ThresholdPolicy)

    @property
    def output_directory(self) -> Path:
        if self.coverage_directory is None:
            return self.root_dir / "coverage"
        if self.coverage_directory.is_absolute():
            return self.coverage_directory
        return self.root_dir / self.coverage_directory

    @classmethod
    def from_mapping(cls, root_dir: Path, data: Mapping[str, Any]) -> CoverageConfig:
        """Build a config from a ``[tool.covfold]``-style table.

        Raises ``ValueError``/``TypeError`` for malformed values.
        """
        unknown = sorted(set(data) - _CONFIG_KEYS)
        if unknown:
            logger.warning("ignoring unknown covfold settings: %s", ", ".join(unknown))

        directory = data.get("coverage_directory")
        reporters = data.get("coverage_reporters")
        globs = _string_tuple(data.get("collect_coverage_from"), "collect_coverage_from")
        GlobMatcher(globs)  # raises ValueError on an invalid pattern
        return cls(
            root_dir=root_dir,
            collect_coverage_from=globs,
            coverage_directory=Path(directory) if directory else None,
            coverage_reporters=(
                DEFAULT_REPORTERS if reporters is None else _string_tuple(reporters, "coverage_reporters")
            ),
            coverage_threshold=ThresholdPolicy.from_mapping(data.get("coverage_threshold")),
        )


def _string_tuple(value: object, key: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, list | tuple) or not all(isinstance(v, str) for v in value):
        msg = f"{key} must be a list of strings"
        raise TypeError(msg)
    return tuple(value)


def _get_settings_from_pyproject(pyproject: Path) -> dict[str, Any]:
    """Extract the ``[tool.covfold]`` table from pyproject.toml."""
    try:
        with pyproject.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Failed to parse %s: %s", pyproject, e)
        return {}

    settings = data.get("tool", {}).get("covfold", {})
    if not isinstance(settings, dict):
        logger.warning("Ignoring [tool.covfold] in %s: expected a table", pyproject)
        return {}
    return settings


def load_config(root_dir: Path, overrides: Mapping[str, Any] | None = None) -> CoverageConfig:
    """Load settings from ``<root_dir>/pyproject.toml`` and apply *overrides*.

    Override values of ``None`` or empty sequences leave the file setting
    in place.
    """
    root = root_dir.resolve()
    settings: dict[str, Any] = {}
    pyproject = root / "pyproject.toml"
    if pyproject.exists():
        settings = _get_settings_from_pyproject(pyproject)
        if settings:
            logger.info("Using covfold settings from %s", pyproject)

    for key, value in (overrides or {}).items():
        if value is None or (isinstance(value, list | tuple) and not value):
            continue
        settings[key] = value
    return CoverageConfig.from_mapping(root, settings)


def with_threshold(config: CoverageConfig, policy: ThresholdPolicy) -> CoverageConfig:
    return replace(config, coverage_threshold=policy)


__all__ = [
    "DEFAULT_REPORTERS",
    "LOG_FORMAT",
    "CoverageConfig",
    "load_config",
    "with_threshold",
]
