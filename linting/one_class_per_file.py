#!/usr/bin/env python
"""Allow at most one top-level non-dataclass class per module under src/.

Enums, protocols, exceptions and plain classes all count; ``@dataclass``
value types may sit beside the one class they describe.
"""

from __future__ import annotations

import ast
import sys

from common import SRC_DIR, rel, report, load_module, iter_python_files


def _decorator_name(decorator: ast.expr) -> str | None:
    target = decorator.func if isinstance(decorator, ast.Call) else decorator
    if isinstance(target, ast.Attribute):
        return target.attr
    if isinstance(target, ast.Name):
        return target.id
    return None


def counted_classes(tree: ast.Module) -> list[str]:
    return [
        node.name
        for node in tree.body
        if isinstance(node, ast.ClassDef)
        and not any(_decorator_name(d) == "dataclass" for d in node.decorator_list)
    ]


def main() -> int:
    violations: list[str] = []
    for path in iter_python_files(SRC_DIR):
        loaded = load_module(path)
        if loaded is None:
            continue
        names = counted_classes(loaded[1])
        if len(names) > 1:
            violations.append(f"{rel(path)}: {len(names)} classes ({', '.join(names)})")
    return report("One non-dataclass class per file violations", violations)


if __name__ == "__main__":
    sys.exit(main())
