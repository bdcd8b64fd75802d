#!/usr/bin/env python
"""Cap modules under src/ at 300 code lines.

Blank lines, comment-only lines and docstrings are not counted. Package
``__init__.py`` files that only re-export (imports, docstring, ``__all__``)
are exempt.
"""

from __future__ import annotations

import ast
import sys

from common import SRC_DIR, rel, report, code_lines, load_module, iter_python_files

MODULE_LIMIT = 300

_REEXPORT_NODES = (ast.Import, ast.ImportFrom, ast.Pass)


def _is_reexport(node: ast.stmt) -> bool:
    if isinstance(node, _REEXPORT_NODES):
        return True
    if isinstance(node, ast.Expr):
        return isinstance(node.value, ast.Constant)
    if isinstance(node, ast.Assign):
        return [getattr(t, "id", None) for t in node.targets] == ["__all__"]
    return False


def main() -> int:
    violations: list[str] = []
    for path in iter_python_files(SRC_DIR):
        loaded = load_module(path)
        if loaded is None:
            continue
        source, tree = loaded
        if path.name == "__init__.py" and all(_is_reexport(node) for node in tree.body):
            continue
        count = len(code_lines(source, tree))
        if count > MODULE_LIMIT:
            violations.append(f"{rel(path)}: {count} code lines (limit {MODULE_LIMIT})")
    return report("File length violations", violations)


if __name__ == "__main__":
    sys.exit(main())
