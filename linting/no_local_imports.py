#!/usr/bin/env python
"""Reject imports inside functions or classes in the request-serving packages.

Everything the relay touches per connection is imported at module scope so a
missing dependency fails at startup, not on the first client.
"""

from __future__ import annotations

import ast
import sys

from common import SRC_DIR, rel, report, load_module, iter_python_files

TARGET_DIRS = [SRC_DIR / name for name in ("handlers", "realtime", "runtime", "upstream")]

_SCOPES = (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef, ast.Lambda)


def local_imports(tree: ast.Module) -> list[int]:
    lines: list[int] = []
    for scope in ast.walk(tree):
        if not isinstance(scope, _SCOPES):
            continue
        for node in ast.iter_child_nodes(scope):
            for inner in ast.walk(node):
                if isinstance(inner, (ast.Import, ast.ImportFrom)):
                    lines.append(inner.lineno)
    return sorted(set(lines))


def main() -> int:
    violations: list[str] = []
    for path in iter_python_files(*TARGET_DIRS):
        loaded = load_module(path)
        if loaded is None:
            continue
        violations.extend(f"{rel(path)}:{line} local import is forbidden" for line in local_imports(loaded[1]))
    return report("Local import violations", violations)


if __name__ == "__main__":
    sys.exit(main())
