from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from more_itertools import consecutive_groups
from rich import box
from rich.markup import escape
from rich.table import Table

from covfold.core.model.types import METRIC_ORDER

if TYPE_CHECKING:
    from collections.abc import Iterable

    from covfold.core.model.coverage_map import CoverageMap
    from covfold.core.model.summary import CoverageSummary
    from covfold.output.base import WriterContext


# --------------------------- Formatting --------------------------------------
def _style_percent(pct: float, green: float, yellow: float) -> str:
    text = f"{pct:g}%"
    if pct >= green:
        return f"[green]{text}[/green]"
    if pct >= yellow:
        return f"[yellow]{text}[/yellow]"
    return f"[red]{text}[/red]"


def format_line_ranges(lines: Iterable[int]) -> str:
    """Collapse sorted line numbers into ``1-3,7`` form."""
    parts: list[str] = []
    for group in consecutive_groups(sorted(lines)):
        nums = list(group)
        parts.append(str(nums[0]) if len(nums) == 1 else f"{nums[0]}-{nums[-1]}")
    return ",".join(parts)


def _display_path(path: str, root: Path | None) -> str:
    if root is None:
        return path
    try:
        return Path(path).relative_to(root).as_posix()
    except ValueError:
        return path


def _summary_cells(summary: CoverageSummary, *, green: float, yellow: float) -> list[str]:
    return [_style_percent(summary.metric(m).pct, green, yellow) for m in METRIC_ORDER]


# --------------------------- Table -------------------------------------------
def build_table(
    coverage_map: CoverageMap,
    *,
    root_dir: Path | None = None,
    green: float = 80.0,
    yellow: float = 50.0,
) -> Table:
    table = Table(title="Coverage Report", box=box.SIMPLE_HEAVY, header_style="bold", expand=True)

    table.add_column("File", style="cyan", overflow="fold")
    table.add_column("% Stmts", justify="right")
    table.add_column("% Branch", justify="right")
    table.add_column("% Lines", justify="right")
    table.add_column("% Funcs", justify="right")
    table.add_column("Uncovered Line #s", overflow="fold")

    for path, fc in coverage_map.items():
        table.add_row(
            escape(_display_path(path, root_dir)),
            *_summary_cells(fc.to_summary(), green=green, yellow=yellow),
            format_line_ranges(fc.uncovered_lines()),
        )

    table.add_section()
    table.add_row(
        "All files",
        *_summary_cells(coverage_map.get_summary(), green=green, yellow=yellow),
        "",
    )
    return table


def write_text(coverage_map: CoverageMap, context: WriterContext) -> None:
    """Print the per-file table to the console."""
    context.console.print(build_table(coverage_map, root_dir=context.root_dir))


def write_text_summary(coverage_map: CoverageMap, context: WriterContext) -> None:
    """Print aggregate totals to the console."""
    summary = coverage_map.get_summary()
    labels = {"statements": "Statements", "branches": "Branches", "lines": "Lines", "functions": "Functions"}
    context.console.print("[bold]Coverage summary[/bold]")
    for metric in METRIC_ORDER:
        totals = summary.metric(metric)
        context.console.print(
            f"{labels[metric.value]:<11}: {totals.pct:g}% ( {totals.covered}/{totals.total} )",
            highlight=False,
        )


__all__ = ["build_table", "format_line_ranges", "write_text", "write_text_summary"]
