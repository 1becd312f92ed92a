"""Per-file coverage counters and their Istanbul-style JSON shape.

A :class:`FileCoverage` carries three parallel maps: statement locations with
hit counts, function metadata with call counts, and branch metadata with one
count per branch arm. Line coverage is derived from statement start lines.

Merging two records for the same file sums counts unit by unit. Counts are
cumulative execution counts, so merging a payload twice doubles them.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, cast

from jsonschema import ValidationError, validate

from covfold.core.model.summary import CoverageSummary, Totals
from covfold.core.schema import get_schema
from covfold.errors import MergeDecodeError

if TYPE_CHECKING:
    from collections.abc import Iterable


# --------------------------- Locations ---------------------------------------
@dataclass(frozen=True, slots=True)
class Location:
    """Source span, 1-indexed lines and 0-indexed columns.

    ``start_line == 0`` marks a span with no source position, such as the
    implicit ``else`` arm of an ``if`` (written as ``{"start": {}, "end": {}}``).
    """

    start_line: int
    start_column: int | None = 0
    end_line: int | None = None
    end_column: int | None = None

    @property
    def is_empty(self) -> bool:
        return self.start_line == 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Location:
        start = data.get("start") or {}
        end = data.get("end") or {}
        return cls(
            start_line=int(start.get("line") or 0),
            start_column=start.get("column"),
            end_line=end.get("line"),
            end_column=end.get("column"),
        )

    def to_dict(self) -> dict[str, dict[str, int | None]]:
        return {
            "start": _position(self.start_line, self.start_column),
            "end": _position(self.end_line if self.end_line is not None else self.start_line, self.end_column),
        }


def _position(line: int | None, column: int | None) -> dict[str, int | None]:
    if not line:
        return {}
    return {"line": line, "column": column}


@dataclass(frozen=True, slots=True)
class FunctionMeta:
    name: str
    decl: Location
    loc: Location

    @property
    def line(self) -> int:
        return self.decl.start_line

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FunctionMeta:
        loc = Location.from_dict(data["loc"])
        decl = Location.from_dict(data["decl"]) if "decl" in data else loc
        return cls(name=str(data["name"]), decl=decl, loc=loc)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "decl": self.decl.to_dict(),
            "loc": self.loc.to_dict(),
            "line": self.line,
        }


@dataclass(frozen=True, slots=True)
class BranchMeta:
    type: str
    loc: Location
    locations: tuple[Location, ...]

    @property
    def line(self) -> int:
        return self.loc.start_line

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BranchMeta:
        locations = tuple(Location.from_dict(item) for item in data["locations"])
        if "loc" in data:
            loc = Location.from_dict(data["loc"])
        elif locations:
            loc = locations[0]
        else:
            loc = Location(start_line=int(data.get("line", 0)))
        return cls(type=str(data["type"]), loc=loc, locations=locations)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "loc": self.loc.to_dict(),
            "locations": [item.to_dict() for item in self.locations],
            "line": self.line,
        }


# --------------------------- File coverage -----------------------------------
@dataclass(frozen=True, slots=True)
class FileCoverage:
    """Instrumentation counters for a single source file."""

    path: str
    statement_map: Mapping[str, Location] = field(default_factory=dict)
    statements: Mapping[str, int] = field(default_factory=dict)
    fn_map: Mapping[str, FunctionMeta] = field(default_factory=dict)
    functions: Mapping[str, int] = field(default_factory=dict)
    branch_map: Mapping[str, BranchMeta] = field(default_factory=dict)
    branches: Mapping[str, tuple[int, ...]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, path: str | None = None) -> FileCoverage:
        """Build a record from the Istanbul JSON shape.

        Expects already validated input; see :func:`decode_coverage_payload`.
        """
        return cls(
            path=path or str(data["path"]),
            statement_map={k: Location.from_dict(v) for k, v in data["statementMap"].items()},
            statements={k: int(v) for k, v in data["s"].items()},
            fn_map={k: FunctionMeta.from_dict(v) for k, v in data["fnMap"].items()},
            functions={k: int(v) for k, v in data["f"].items()},
            branch_map={k: BranchMeta.from_dict(v) for k, v in data["branchMap"].items()},
            branches={k: tuple(int(c) for c in v) for k, v in data["b"].items()},
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "statementMap": {k: v.to_dict() for k, v in self.statement_map.items()},
            "s": dict(self.statements),
            "fnMap": {k: v.to_dict() for k, v in self.fn_map.items()},
            "f": dict(self.functions),
            "branchMap": {k: v.to_dict() for k, v in self.branch_map.items()},
            "b": {k: list(v) for k, v in self.branches.items()},
        }

    # ------------------------------------------------------------------ merge
    def merge(self, other: FileCoverage) -> FileCoverage:
        """Return a record holding the unit-wise sum of ``self`` and ``other``."""
        statement_map, statements = _merge_counts(
            self.statement_map, self.statements, other.statement_map, other.statements
        )
        fn_map, functions = _merge_counts(self.fn_map, self.functions, other.fn_map, other.functions)

        branch_map = dict(self.branch_map)
        branches = dict(self.branches)
        for key, counts in other.branches.items():
            branches[key] = _sum_arms(branches.get(key, ()), tuple(counts))
            if key not in branch_map and key in other.branch_map:
                branch_map[key] = other.branch_map[key]

        return FileCoverage(
            path=self.path,
            statement_map=statement_map,
            statements=statements,
            fn_map=fn_map,
            functions=functions,
            branch_map=branch_map,
            branches=branches,
        )

    # ---------------------------------------------------------------- queries
    def line_hits(self) -> dict[int, int]:
        """Return line -> hit count, using each statement's start line."""
        lines: dict[int, int] = {}
        for key, count in self.statements.items():
            loc = self.statement_map.get(key)
            if loc is None or loc.is_empty:
                continue
            line = loc.start_line
            if line not in lines or lines[line] < count:
                lines[line] = count
        return lines

    def uncovered_lines(self) -> list[int]:
        return sorted(line for line, hits in self.line_hits().items() if hits == 0)

    def to_summary(self) -> CoverageSummary:
        lines = self.line_hits()
        branch_counts = [c for arms in self.branches.values() for c in arms]
        return CoverageSummary(
            statements=_totals(self.statements.values()),
            branches=_totals(branch_counts),
            lines=_totals(lines.values()),
            functions=_totals(self.functions.values()),
        )


def _totals(counts: Iterable[int]) -> Totals:
    values = list(counts)
    return Totals(total=len(values), covered=sum(1 for c in values if c > 0))


def _merge_counts(
    left_map: Mapping[str, Any],
    left: Mapping[str, int],
    right_map: Mapping[str, Any],
    right: Mapping[str, int],
) -> tuple[dict[str, Any], dict[str, int]]:
    merged_map = dict(left_map)
    merged = dict(left)
    for key, count in right.items():
        merged[key] = merged.get(key, 0) + count
        if key not in merged_map and key in right_map:
            merged_map[key] = right_map[key]
    return merged_map, merged


def _sum_arms(left: tuple[int, ...], right: tuple[int, ...]) -> tuple[int, ...]:
    width = max(len(left), len(right))
    padded_left = left + (0,) * (width - len(left))
    padded_right = right + (0,) * (width - len(right))
    return tuple(a + b for a, b in zip(padded_left, padded_right, strict=True))


# --------------------------- Decoding ----------------------------------------
_KEYED_MAPS = ("statementMap", "s", "fnMap", "f", "branchMap", "b")


def _normalise(value: object) -> object:
    # coverage-final.json written by some tools nests the record under "data"
    if isinstance(value, Mapping) and "data" in value and isinstance(value["data"], Mapping):
        value = value["data"]
    if not isinstance(value, Mapping):
        return value
    # counter ids are JSON object keys; payloads built in Python may use ints
    return {
        key: {str(k): v for k, v in inner.items()} if key in _KEYED_MAPS and isinstance(inner, Mapping) else inner
        for key, inner in value.items()
    }


def _check_consistency(path: str, data: Mapping[str, Any]) -> None:
    pairs = (("s", "statementMap"), ("f", "fnMap"), ("b", "branchMap"))
    for counts_key, map_key in pairs:
        missing = sorted(set(data[counts_key]) - set(data[map_key]))
        if missing:
            msg = f"{path}: {counts_key!r} has keys without {map_key!r} entries: {', '.join(map(str, missing))}"
            raise MergeDecodeError(msg, path=path)
    for key, arms in data["b"].items():
        expected = len(data["branchMap"][key]["locations"])
        if expected and len(arms) != expected:
            msg = f"{path}: branch {key!r} has {len(arms)} counts for {expected} locations"
            raise MergeDecodeError(msg, path=path)


def decode_coverage_payload(payload: object) -> dict[str, FileCoverage]:
    """Validate a JSON-decoded per-file payload and return typed records.

    Raises
    ------
    MergeDecodeError
        If the payload does not match the file coverage schema or its maps
        and counters disagree.
    """
    if not isinstance(payload, Mapping):
        msg = f"coverage payload must be an object, got {type(payload).__name__}"
        raise MergeDecodeError(msg)

    unwrapped = {str(path): _normalise(value) for path, value in payload.items()}
    try:
        validate(unwrapped, get_schema("file_coverage"))
    except ValidationError as exc:
        location = "/".join(str(part) for part in exc.absolute_path)
        bad_path = str(exc.absolute_path[0]) if exc.absolute_path else None
        msg = f"invalid coverage payload at {location or '<root>'}: {exc.message}"
        raise MergeDecodeError(msg, path=bad_path) from exc

    out: dict[str, FileCoverage] = {}
    for path, data in unwrapped.items():
        record = cast("Mapping[str, Any]", data)
        _check_consistency(path, record)
        try:
            out[path] = FileCoverage.from_dict(record, path=path)
        except (KeyError, TypeError, ValueError) as exc:
            msg = f"{path}: cannot decode coverage record: {exc}"
            raise MergeDecodeError(msg, path=path) from exc
    return out


__all__ = [
    "BranchMeta",
    "FileCoverage",
    "FunctionMeta",
    "Location",
    "decode_coverage_payload",
]
