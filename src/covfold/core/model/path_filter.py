from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from pathspec import GitIgnoreSpec

from covfold._meta import logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence


def _relative_label(path: str | Path, root: Path) -> str | None:
    p = Path(path)
    try:
        absolute = p if p.is_absolute() else (root / p)
        return absolute.resolve().relative_to(root.resolve()).as_posix()
    except (OSError, RuntimeError, ValueError):
        return None


@dataclass(frozen=True, slots=True)
class GlobMatcher:
    """Ordered glob list with ``!`` negation.

    Patterns use gitignore syntax. A path is selected when the last pattern
    matching it is a positive one, so a negation only removes paths selected
    by patterns listed before it. Invalid patterns raise ``ValueError``.
    """

    patterns: tuple[str, ...]
    spec: GitIgnoreSpec

    def __init__(self, patterns: Sequence[str]) -> None:
        cleaned = tuple(p.strip().replace("\\", "/") for p in patterns if p and p.strip())
        object.__setattr__(self, "patterns", cleaned)
        try:
            spec = GitIgnoreSpec.from_lines(cleaned)
        except (ValueError, re.error) as exc:
            msg = f"invalid glob pattern in {list(cleaned)}: {exc}"
            raise ValueError(msg) from exc
        object.__setattr__(self, "spec", spec)

    def __bool__(self) -> bool:
        return bool(self.patterns)

    def match(self, relative_path: str) -> bool:
        return self.spec.match_file(relative_path)


def match_files_with_globs(
    files: Iterable[str | Path],
    globs: Sequence[str],
    root_dir: Path,
) -> set[str]:
    """Return the absolute paths in *files* selected by *globs* relative to *root_dir*.

    Files outside *root_dir* are never selected.
    """
    matcher = GlobMatcher(globs)
    selected: set[str] = set()
    if not matcher:
        return selected
    for file in files:
        rel = _relative_label(file, root_dir)
        if rel is None:
            logger.debug("glob match skipped %s: outside %s", file, root_dir)
            continue
        if matcher.match(rel):
            p = Path(file)
            selected.add(str(p) if p.is_absolute() else str((root_dir / p).resolve()))
    return selected


__all__ = ["GlobMatcher", "match_files_with_globs"]
