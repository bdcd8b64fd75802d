#!/usr/bin/env python
"""Cap functions and methods under src/ at 60 code lines.

Nested functions are measured on their own and also count toward the
function that contains them.
"""

from __future__ import annotations

import ast
import sys

from common import SRC_DIR, rel, report, code_lines, load_module, iter_python_files

FUNCTION_LIMIT = 60

FunctionNode = ast.FunctionDef | ast.AsyncFunctionDef


def iter_functions(tree: ast.Module):
    """Yield ``(qualified_name, node)`` for every function, methods included."""
    pending: list[tuple[str, ast.AST]] = [("", tree)]
    while pending:
        prefix, parent = pending.pop()
        for node in ast.iter_child_nodes(parent):
            if isinstance(node, (ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)):
                name = f"{prefix}{node.name}"
                if isinstance(node, FunctionNode):
                    yield name, node
                pending.append((f"{name}.", node))


def main() -> int:
    violations: list[str] = []
    for path in iter_python_files(SRC_DIR):
        loaded = load_module(path)
        if loaded is None:
            continue
        source, tree = loaded
        counted = code_lines(source, tree)
        for name, node in sorted(iter_functions(tree), key=lambda item: item[1].lineno):
            size = sum(1 for line in range(node.lineno, (node.end_lineno or node.lineno) + 1) if line in counted)
            if size > FUNCTION_LIMIT:
                violations.append(f"{rel(path)}:{node.lineno} {name} -> {size} code lines (limit {FUNCTION_LIMIT})")
    return report("Function length violations", violations)


if __name__ == "__main__":
    sys.exit(main())
