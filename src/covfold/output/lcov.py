"""LCOV tracefile writer."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from covfold.core.model.coverage import FileCoverage
    from covfold.core.model.coverage_map import CoverageMap
    from covfold.output.base import WriterContext


def _format_record(fc: FileCoverage) -> list[str]:
    out = ["TN:", f"SF:{fc.path}"]

    for meta in fc.fn_map.values():
        out.append(f"FN:{meta.line},{meta.name}")
    hit_functions = 0
    for key, meta in fc.fn_map.items():
        count = fc.functions.get(key, 0)
        hit_functions += count > 0
        out.append(f"FNDA:{count},{meta.name}")
    out.append(f"FNF:{len(fc.fn_map)}")
    out.append(f"FNH:{hit_functions}")

    lines = fc.line_hits()
    for line in sorted(lines):
        out.append(f"DA:{line},{lines[line]}")
    out.append(f"LF:{len(lines)}")
    out.append(f"LH:{sum(1 for hits in lines.values() if hits > 0)}")

    found = hit = 0
    for block, (key, arms) in enumerate(fc.branches.items()):
        meta = fc.branch_map.get(key)
        line = meta.line if meta is not None else 0
        for arm, count in enumerate(arms):
            found += 1
            hit += count > 0
            out.append(f"BRDA:{line},{block},{arm},{count if count > 0 else '-'}")
    out.append(f"BRF:{found}")
    out.append(f"BRH:{hit}")
    out.append("end_of_record")
    return out


def write_lcov(coverage_map: CoverageMap, context: WriterContext) -> Path:
    destination = context.directory / "lcov.info"
    destination.parent.mkdir(parents=True, exist_ok=True)
    lines: list[str] = []
    for _path, fc in coverage_map.items():
        lines.extend(_format_record(fc))
    destination.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return destination


__all__ = ["write_lcov"]
