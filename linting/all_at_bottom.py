#!/usr/bin/env python
"""Require ``__all__`` to be one literal assignment and the last top-level statement.

Modules without ``__all__`` are skipped. Augmented assignments, ``.append`` or
``.extend`` calls and a second assignment all count as violations.
"""

from __future__ import annotations

import ast
import sys
import argparse

from common import ROOT, rel, report, load_module, iter_python_files


def _names_all(node: ast.AST) -> bool:
    return isinstance(node, ast.Name) and node.id == "__all__"


def _is_definition(node: ast.stmt) -> bool:
    if isinstance(node, ast.Assign):
        return len(node.targets) == 1 and _names_all(node.targets[0])
    return isinstance(node, ast.AnnAssign) and _names_all(node.target) and node.value is not None


def _is_mutation(node: ast.stmt) -> bool:
    if isinstance(node, ast.Assign):
        return any(_names_all(t) for t in node.targets) and not _is_definition(node)
    if isinstance(node, (ast.AugAssign, ast.AnnAssign)):
        return _names_all(node.target) and not _is_definition(node)
    if isinstance(node, ast.Delete):
        return any(_names_all(t) for t in node.targets)
    if isinstance(node, ast.Expr) and isinstance(node.value, ast.Call):
        func = node.value.func
        return isinstance(func, ast.Attribute) and _names_all(func.value)
    return False


def _label(node: ast.stmt) -> str:
    name = getattr(node, "name", None)
    if name:
        return f"{type(node).__name__} `{name}`"
    return type(node).__name__


def check_module(label: str, tree: ast.Module) -> list[str]:
    definitions = [i for i, node in enumerate(tree.body) if _is_definition(node)]
    mutations = [node for node in tree.body if _is_mutation(node)]
    if not definitions and not mutations:
        return []

    violations = [f"{label}:{node.lineno} `__all__` must not be mutated" for node in mutations]
    if len(definitions) != 1:
        violations.append(f"{label}: expected one `__all__` assignment, found {len(definitions)}")
        return violations

    index = definitions[0]
    value = tree.body[index].value
    if value is not None and any(_names_all(n) for n in ast.walk(value)):
        violations.append(f"{label}:{tree.body[index].lineno} `__all__` must not reference itself")
    for node in tree.body[index + 1 :]:
        violations.append(f"{label}:{node.lineno} {_label(node)} after `__all__`")
    return violations


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--dirs", nargs="+", default=["src", "tests", "linting"])
    args = parser.parse_args()

    violations: list[str] = []
    for path in iter_python_files(*(ROOT / d for d in args.dirs)):
        loaded = load_module(path)
        if loaded is not None:
            violations.extend(check_module(rel(path), loaded[1]))
    return report("__all__ placement violations", violations)


if __name__ == "__main__":
    sys.exit(main())
