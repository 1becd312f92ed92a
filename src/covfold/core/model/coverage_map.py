from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from covfold._meta import logger
from covfold.core.model.coverage import FileCoverage
from covfold.core.model.summary import CoverageSummary

if TYPE_CHECKING:
    from collections.abc import Iterator


class CoverageMap:
    """Accumulated coverage for a run, keyed by absolute file path.

    Not safe for concurrent mutation; callers serialise :meth:`merge` and
    :meth:`add_file_coverage`.
    """

    def __init__(self, files: Mapping[str, FileCoverage] | None = None) -> None:
        self._files: dict[str, FileCoverage] = {}
        if files:
            self.merge(files)

    def __contains__(self, path: object) -> bool:
        return path in self._files

    def __len__(self) -> int:
        return len(self._files)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._files))

    def __repr__(self) -> str:
        return f"CoverageMap(files={len(self._files)})"

    def merge(self, partial: CoverageMap | Mapping[str, FileCoverage]) -> None:
        """Fold *partial* into the map, summing counters for files already present."""
        for path, incoming in list(partial.items()):
            existing = self._files.get(path)
            if existing is None:
                self._files[path] = incoming
            else:
                self._files[path] = existing.merge(incoming)
        logger.debug("merged coverage for %d file(s); map holds %d", len(partial), len(self._files))

    def add_file_coverage(self, entry: FileCoverage) -> None:
        """Insert *entry* under its own path, replacing any existing record."""
        if entry.path in self._files:
            logger.debug("replacing existing coverage for %s", entry.path)
        self._files[entry.path] = entry

    def file_coverage_for(self, path: str) -> FileCoverage:
        return self._files[path]

    def files(self) -> list[str]:
        return sorted(self._files)

    def items(self) -> list[tuple[str, FileCoverage]]:
        return [(path, self._files[path]) for path in sorted(self._files)]

    def get_summary(self) -> CoverageSummary:
        """Recompute totals across every stored file."""
        summary = CoverageSummary.empty()
        for fc in self._files.values():
            summary = summary.merge(fc.to_summary())
        return summary

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {path: fc.to_dict() for path, fc in self.items()}


__all__ = ["CoverageMap"]
