from __future__ import annotations

import textwrap

import pytest

from covfold.core.empty import generate_empty_coverage
from covfold.core.model import Totals

SOURCE = textwrap.dedent(
    """\
    import os


    def pick(a, b=None):
        if a and b:
            return a
        else:
            return b


    async def fetch(x):
        return x if x else os.sep


    square = lambda n: n * n
    """
)


def test_every_unit_is_present_and_unexecuted() -> None:
    fc = generate_empty_coverage(SOURCE, "/src/mod.py")

    assert fc.path == "/src/mod.py"
    assert set(fc.statements.values()) == {0}
    assert set(fc.functions.values()) == {0}
    assert all(set(arms) == {0} for arms in fc.branches.values())


def test_skeleton_matches_source_structure() -> None:
    fc = generate_empty_coverage(SOURCE, "/src/mod.py")
    summary = fc.to_summary()

    # import, def, if, return, return, async def, return, assignment
    assert summary.statements == Totals(total=8, covered=0)
    assert [meta.name for meta in fc.fn_map.values()] == ["pick", "fetch", "(anonymous_2)"]
    assert sorted(meta.type for meta in fc.branch_map.values()) == ["binary-expr", "cond-expr", "if"]
    # if (2 arms) + "a and b" (2 operands) + conditional expression (2 arms)
    assert summary.branches == Totals(total=6, covered=0)
    assert fc.uncovered_lines() == [1, 4, 5, 6, 8, 11, 12, 15]


def test_function_declaration_points_at_name() -> None:
    fc = generate_empty_coverage(SOURCE, "/src/mod.py")
    pick = next(meta for meta in fc.fn_map.values() if meta.name == "pick")
    assert pick.decl.start_line == 4
    assert pick.decl.start_column == 4
    assert pick.decl.end_column == 8


def test_match_statement_is_a_switch_branch() -> None:
    source = textwrap.dedent(
        """\
        match command:
            case "go":
                pass
            case _:
                pass
        """
    )
    fc = generate_empty_coverage(source, "/m.py")
    [branch] = fc.branch_map.values()
    assert branch.type == "switch"
    assert len(branch.locations) == 2
    assert fc.branches == {"0": (0, 0)}


def test_empty_source_yields_empty_skeleton() -> None:
    fc = generate_empty_coverage("", "/empty.py")
    assert fc.to_summary().statements == Totals(total=0, covered=0)
    assert fc.to_summary().statements.pct == 100.0


def test_unparsable_source_raises() -> None:
    with pytest.raises(SyntaxError):
        generate_empty_coverage("def broken(:\n", "/broken.py")
