"""Fill in zero-coverage records for in-scope files that no test touched."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from covfold._meta import logger
from covfold.core.empty import generate_empty_coverage
from covfold.core.model.path_filter import match_files_with_globs
from covfold.errors import ReconcileReadError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from covfold.core.model.coverage import FileCoverage
    from covfold.core.model.coverage_map import CoverageMap

_IGNORED_DIRS = frozenset({".git", ".hg", ".svn", "__pycache__", ".venv", "node_modules", ".tox", ".nox"})


class ModuleIndex(Protocol):
    """Queryable set of the project's known file paths."""

    @property
    def files(self) -> Iterable[str]: ...


@dataclass(frozen=True, slots=True)
class StaticModuleIndex:
    """Module index over a fixed collection of paths."""

    paths: tuple[str, ...]

    def __init__(self, paths: Iterable[str | Path]) -> None:
        object.__setattr__(self, "paths", tuple(str(p) for p in paths))

    @property
    def files(self) -> tuple[str, ...]:
        return self.paths


@dataclass(frozen=True, slots=True)
class DirectoryModuleIndex:
    """Module index that enumerates regular files below *root*."""

    root: Path
    ignore: frozenset[str] = _IGNORED_DIRS

    @property
    def files(self) -> list[str]:
        out: list[str] = []
        root = self.root.resolve()
        for p in root.rglob("*"):
            rel_parts = p.relative_to(root).parts
            if any(part in self.ignore for part in rel_parts[:-1]):
                continue
            if p.is_file():
                out.append(str(p))
        return sorted(out)


@dataclass(frozen=True, slots=True)
class SourceRead:
    """Result of reading one candidate file."""

    path: str
    source: bytes | None = None
    error: ReconcileReadError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class ReconcileOutcome:
    """Files added with empty coverage and files skipped with an error."""

    added: list[str] = field(default_factory=list)
    failures: list[ReconcileReadError] = field(default_factory=list)

    @property
    def skipped(self) -> list[str]:
        return [f.path for f in self.failures]


def read_source(path: str) -> SourceRead:
    try:
        source = Path(path).read_bytes()
    except OSError as exc:
        err = ReconcileReadError(f"failed to read {path}: {exc}", path=path)
        err.__cause__ = exc
        return SourceRead(path=path, error=err)
    return SourceRead(path=path, source=source)


def _synthesize(read: SourceRead) -> FileCoverage | ReconcileReadError:
    if read.error is not None:
        return read.error
    try:
        return generate_empty_coverage(read.source or b"", read.path)
    except (SyntaxError, ValueError) as exc:
        err = ReconcileReadError(f"failed to collect coverage from {read.path}: {exc}", path=read.path)
        err.__cause__ = exc
        return err


def add_untested_files(
    coverage_map: CoverageMap,
    *,
    collect_coverage_from: Sequence[str] | None,
    root_dir: Path,
    module_index: ModuleIndex,
) -> ReconcileOutcome:
    """Insert empty coverage for files matched by *collect_coverage_from* but absent from the map.

    One unreadable or unparsable file is logged and skipped; the rest are
    still processed. Invalid globs are logged and nothing is added. Records already in the map are never replaced.
    """
    outcome = ReconcileOutcome()
    if not collect_coverage_from:
        return outcome

    try:
        candidates = match_files_with_globs(module_index.files, collect_coverage_from, root_dir)
    except ValueError as exc:
        logger.error("skipping untested-file collection: %s", exc)
        return outcome
    untested = sorted(path for path in candidates if path not in coverage_map)
    logger.debug("%d in-scope file(s), %d without coverage", len(candidates), len(untested))

    for path in untested:
        result = _synthesize(read_source(path))
        if isinstance(result, ReconcileReadError):
            logger.error("%s", result, exc_info=result.__cause__)
            outcome.failures.append(result)
            continue
        coverage_map.add_file_coverage(result)
        outcome.added.append(path)

    if outcome.added:
        logger.info("added empty coverage for %d untested file(s)", len(outcome.added))
    return outcome


__all__ = [
    "DirectoryModuleIndex",
    "ModuleIndex",
    "ReconcileOutcome",
    "SourceRead",
    "StaticModuleIndex",
    "add_untested_files",
    "read_source",
]
