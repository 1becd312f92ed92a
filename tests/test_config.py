"""Tests for configuration loading and packaged schema access."""

from __future__ import annotations

import logging
import textwrap
from typing import TYPE_CHECKING

import pytest

from covfold.core.config import DEFAULT_REPORTERS, CoverageConfig, load_config
from covfold.core.model import Threshold

if TYPE_CHECKING:
    from pathlib import Path

    from _pytest.monkeypatch import MonkeyPatch


def _write_pyproject(root: Path, body: str) -> None:
    (root / "pyproject.toml").write_text(textwrap.dedent(body), encoding="utf-8")


def test_get_schema_cached(monkeypatch: MonkeyPatch) -> None:
    """``get_schema`` should load the schema once and cache the result."""
    from covfold.core import schema

    schema.get_schema.cache_clear()
    calls = 0
    original = schema.resources.files

    def tracking_files(package: str):
        nonlocal calls
        calls += 1
        return original(package)

    monkeypatch.setattr(schema.resources, "files", tracking_files)

    schema1 = schema.get_schema()
    schema2 = schema.get_schema()

    assert schema1 == schema2
    assert calls == 1


def test_get_schema_rejects_unknown_name() -> None:
    from covfold.core.schema import get_schema

    with pytest.raises(ValueError, match="Unsupported schema"):
        get_schema("nope")


def test_defaults_without_pyproject(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert config.root_dir == tmp_path.resolve()
    assert config.collect_coverage_from == ()
    assert config.coverage_reporters == DEFAULT_REPORTERS
    assert config.output_directory == tmp_path.resolve() / "coverage"
    assert config.coverage_threshold.is_empty()


def test_load_config_reads_tool_table(tmp_path: Path) -> None:
    _write_pyproject(
        tmp_path,
        """
        [tool.covfold]
        collect_coverage_from = ["src/**/*.py", "!src/**/test_*.py"]
        coverage_directory = "build/cov"
        coverage_reporters = ["lcov"]

        [tool.covfold.coverage_threshold.global]
        statements = 90
        branches = -5
        """,
    )

    config = load_config(tmp_path)

    assert config.collect_coverage_from == ("src/**/*.py", "!src/**/test_*.py")
    assert config.output_directory == tmp_path.resolve() / "build" / "cov"
    assert config.coverage_reporters == ("lcov",)
    assert config.coverage_threshold.global_threshold == Threshold(statements=90.0, branches=-5.0)


def test_overrides_win_over_file(tmp_path: Path) -> None:
    _write_pyproject(
        tmp_path,
        """
        [tool.covfold]
        collect_coverage_from = ["src/*.py"]
        coverage_reporters = ["lcov"]
        """,
    )

    config = load_config(
        tmp_path,
        {"collect_coverage_from": ["lib/*.py"], "coverage_reporters": [], "coverage_directory": None},
    )

    assert config.collect_coverage_from == ("lib/*.py",)
    # empty overrides leave the file value in place
    assert config.coverage_reporters == ("lcov",)


def test_invalid_toml_is_ignored_with_warning(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    (tmp_path / "pyproject.toml").write_text("[tool.covfold\n", encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="covfold"):
        config = load_config(tmp_path)

    assert "Failed to parse" in caplog.text
    assert config.collect_coverage_from == ()


def test_unknown_keys_warn(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    _write_pyproject(
        tmp_path,
        """
        [tool.covfold]
        collectCoverageFrom = ["src/*.py"]
        """,
    )
    with caplog.at_level(logging.WARNING, logger="covfold"):
        load_config(tmp_path)
    assert "ignoring unknown covfold settings: collectCoverageFrom" in caplog.text


def test_malformed_values_raise(tmp_path: Path) -> None:
    with pytest.raises(TypeError, match="list of strings"):
        CoverageConfig.from_mapping(tmp_path, {"coverage_reporters": [1, 2]})
    with pytest.raises(ValueError, match="unknown threshold metric"):
        CoverageConfig.from_mapping(tmp_path, {"coverage_threshold": {"global": {"coverage": 1}}})


def test_absolute_coverage_directory_is_kept(tmp_path: Path) -> None:
    target = tmp_path / "elsewhere"
    config = CoverageConfig.from_mapping(tmp_path, {"coverage_directory": str(target)})
    assert config.output_directory == target


@pytest.mark.parametrize("globs", [["!"], ["src/*.py", "**/[z-a].py"]])
def test_invalid_collect_globs_are_config_errors(tmp_path: Path, globs: list[str]) -> None:
    with pytest.raises(ValueError, match="invalid glob pattern"):
        load_config(tmp_path, {"collect_coverage_from": globs})
