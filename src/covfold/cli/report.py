from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console

from covfold._meta import logger
from covfold.cli.exit_codes import EXIT_CONFIG, EXIT_GENERIC, EXIT_OK, EXIT_THRESHOLD
from covfold.core.config import LOG_FORMAT, CoverageConfig, load_config, with_threshold
from covfold.core.model.thresholds import GLOBAL_SCOPE, ThresholdPolicy, parse_threshold
from covfold.core.reconcile import DirectoryModuleIndex
from covfold.core.reporter import CoverageReporter, RunContext
from covfold.errors import CovfoldError, ThresholdError

_BOOL_FALSE = False


def _configure_runtime(*, quiet: bool, verbose: bool) -> None:
    """Configure logging based on *quiet*/*verbose*."""
    level = logging.ERROR if quiet else (logging.DEBUG if verbose else logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logger.setLevel(level)


def _load_payload(path: Path) -> Any | None:
    """Read one test file's coverage JSON; unreadable files are logged and skipped."""
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        logger.error("Failed to read coverage payload %s: %s", path, exc)
    except json.JSONDecodeError as exc:
        logger.error("Dropping malformed coverage payload %s: %s", path, exc)
    return None


def _resolve_config(
    *,
    root_dir: Path,
    collect_from: list[str],
    reporters: list[str],
    coverage_dir: Path | None,
    threshold: str | None,
) -> CoverageConfig:
    try:
        config = load_config(
            root_dir,
            {
                "collect_coverage_from": collect_from,
                "coverage_reporters": reporters,
                "coverage_directory": str(coverage_dir) if coverage_dir else None,
            },
        )
        if threshold is not None:
            policy = ThresholdPolicy(scopes={GLOBAL_SCOPE: parse_threshold(threshold)})
            config = with_threshold(config, policy)
    except (TypeError, ValueError) as exc:
        typer.echo(f"ERROR: invalid configuration: {exc}", err=True)
        raise typer.Exit(code=EXIT_CONFIG) from exc
    return config


def report_cmd(
    payloads: Annotated[
        list[Path] | None,
        typer.Argument(help="Per-test-file coverage JSON payloads to merge."),
    ] = None,
    root_dir: Annotated[
        Path,
        typer.Option("--root-dir", help="Project root used to resolve globs and settings."),
    ] = Path(),
    collect_from: Annotated[
        list[str] | None,
        typer.Option(
            "-c",
            "--collect-from",
            help="Glob of files that must appear in coverage (repeatable, '!' negates).",
        ),
    ] = None,
    reporters: Annotated[
        list[str] | None,
        typer.Option("-r", "--reporter", help="Report format to write (repeatable)."),
    ] = None,
    coverage_dir: Annotated[
        Path | None,
        typer.Option("--coverage-dir", help="Directory for report files."),
    ] = None,
    threshold: Annotated[
        str | None,
        typer.Option(
            "--threshold",
            help="Global thresholds, e.g. 'statements=80,branches=-10' (negative caps uncovered count).",
        ),
    ] = None,
    quiet: Annotated[
        bool,
        typer.Option("-q", "--quiet", help="Suppress INFO logs, emit only errors"),
    ] = _BOOL_FALSE,
    verbose: Annotated[
        bool,
        typer.Option("-v", "--verbose", help="Emit diagnostic logging"),
    ] = _BOOL_FALSE,
) -> None:
    _configure_runtime(quiet=quiet, verbose=verbose)

    config = _resolve_config(
        root_dir=root_dir,
        collect_from=collect_from or [],
        reporters=reporters or [],
        coverage_dir=coverage_dir,
        threshold=threshold,
    )

    reporter = CoverageReporter(console=Console())
    try:
        for path in payloads or []:
            reporter.on_file_complete(_load_payload(path))
        reporter.on_run_complete(config, RunContext(module_index=DirectoryModuleIndex(config.root_dir)))
    except CovfoldError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=EXIT_GENERIC) from exc

    if isinstance(reporter.error, ThresholdError):
        for failure in reporter.error.result.failures:
            typer.echo(f"Threshold failed: {failure.message}", err=True)
        raise typer.Exit(code=EXIT_THRESHOLD) from reporter.error
    raise typer.Exit(code=EXIT_OK)


def register(app: typer.Typer) -> None:
    app.command("report")(report_cmd)


__all__ = ["register"]
