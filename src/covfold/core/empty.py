"""Zero-count coverage skeletons for source files no test executed."""

from __future__ import annotations

import ast

from covfold.core.model.coverage import BranchMeta, FileCoverage, FunctionMeta, Location
from covfold.core.model.types import BranchType


def _location(node: ast.AST) -> Location:
    return Location(
        start_line=node.lineno,
        start_column=node.col_offset,
        end_line=node.end_lineno,
        end_column=node.end_col_offset,
    )


def _span(nodes: list[ast.stmt], fallback: ast.AST) -> Location:
    if not nodes:
        return _location(fallback)
    first, last = nodes[0], nodes[-1]
    return Location(
        start_line=first.lineno,
        start_column=first.col_offset,
        end_line=last.end_lineno,
        end_column=last.end_col_offset,
    )


def _function_decl(node: ast.FunctionDef | ast.AsyncFunctionDef | ast.Lambda) -> Location:
    if isinstance(node, ast.Lambda):
        return _location(node)
    # the name sits after "def " / "async def ", past any decorators
    offset = len("async def ") if isinstance(node, ast.AsyncFunctionDef) else len("def ")
    line = node.lineno
    column = node.col_offset + offset
    return Location(start_line=line, start_column=column, end_line=line, end_column=column + len(node.name))


class _SkeletonBuilder(ast.NodeVisitor):
    def __init__(self) -> None:
        self.statement_map: dict[str, Location] = {}
        self.fn_map: dict[str, FunctionMeta] = {}
        self.branch_map: dict[str, BranchMeta] = {}

    # statements --------------------------------------------------------
    def generic_visit(self, node: ast.AST) -> None:
        if isinstance(node, ast.stmt):
            self.statement_map[str(len(self.statement_map))] = _location(node)
        super().generic_visit(node)

    # functions ---------------------------------------------------------
    def _add_function(self, node: ast.FunctionDef | ast.AsyncFunctionDef | ast.Lambda, name: str) -> None:
        self.fn_map[str(len(self.fn_map))] = FunctionMeta(
            name=name,
            decl=_function_decl(node),
            loc=_location(node),
        )

    def visit_FunctionDef(self, node: ast.FunctionDef) -> None:  # noqa: N802
        self._add_function(node, node.name)
        self.generic_visit(node)

    def visit_AsyncFunctionDef(self, node: ast.AsyncFunctionDef) -> None:  # noqa: N802
        self._add_function(node, node.name)
        self.generic_visit(node)

    def visit_Lambda(self, node: ast.Lambda) -> None:  # noqa: N802
        self._add_function(node, f"(anonymous_{len(self.fn_map)})")
        self.generic_visit(node)

    # branches ----------------------------------------------------------
    def _add_branch(self, kind: BranchType, node: ast.AST, locations: list[Location]) -> None:
        self.branch_map[str(len(self.branch_map))] = BranchMeta(
            type=kind.value,
            loc=_location(node),
            locations=tuple(locations),
        )

    def visit_If(self, node: ast.If) -> None:  # noqa: N802
        self._add_branch(BranchType.IF, node, [_span(node.body, node), _span(node.orelse, node)])
        self.generic_visit(node)

    def visit_IfExp(self, node: ast.IfExp) -> None:  # noqa: N802
        self._add_branch(BranchType.COND_EXPR, node, [_location(node.body), _location(node.orelse)])
        self.generic_visit(node)

    def visit_BoolOp(self, node: ast.BoolOp) -> None:  # noqa: N802
        self._add_branch(BranchType.BINARY_EXPR, node, [_location(v) for v in node.values])
        self.generic_visit(node)

    def visit_Match(self, node: ast.Match) -> None:  # noqa: N802
        self._add_branch(BranchType.SWITCH, node, [_location(case.pattern) for case in node.cases])
        self.generic_visit(node)


def generate_empty_coverage(source: str | bytes, filename: str) -> FileCoverage:
    """Return a :class:`FileCoverage` for *source* with every unit unexecuted.

    Bytes are decoded by the parser, honouring a PEP 263 coding declaration.
    Raises ``SyntaxError`` or ``ValueError`` when *source* cannot be parsed.
    """
    tree = ast.parse(source, filename=filename)
    builder = _SkeletonBuilder()
    builder.visit(tree)
    return FileCoverage(
        path=filename,
        statement_map=builder.statement_map,
        statements=dict.fromkeys(builder.statement_map, 0),
        fn_map=builder.fn_map,
        functions=dict.fromkeys(builder.fn_map, 0),
        branch_map=builder.branch_map,
        branches={key: (0,) * len(meta.locations) for key, meta in builder.branch_map.items()},
    )


__all__ = ["generate_empty_coverage"]
