"""Shared helpers for the repository lint scripts in this directory."""

from __future__ import annotations

import ast
import sys
from pathlib import Path
from collections.abc import Iterator

ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT / "src"

_DOCSTRING_OWNERS = (ast.Module, ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)


def iter_python_files(*dirs: Path) -> Iterator[Path]:
    for base in dirs:
        if not base.is_dir():
            continue
        for path in sorted(base.rglob("*.py")):
            if "__pycache__" not in path.parts:
                yield path


def load_module(path: Path) -> tuple[str, ast.Module] | None:
    """Read and parse ``path``; unreadable or unparsable files are skipped."""
    try:
        source = path.read_text(encoding="utf-8")
        return source, ast.parse(source, filename=str(path))
    except (OSError, UnicodeDecodeError, SyntaxError):
        return None


def rel(path: Path) -> str:
    return str(path.relative_to(ROOT))


def _docstring_lines(tree: ast.Module) -> set[int]:
    lines: set[int] = set()
    for node in ast.walk(tree):
        if not isinstance(node, _DOCSTRING_OWNERS) or not node.body:
            continue
        first = node.body[0]
        if isinstance(first, ast.Expr) and isinstance(first.value, ast.Constant) and isinstance(first.value.value, str):
            lines.update(range(first.lineno, (first.end_lineno or first.lineno) + 1))
    return lines


def code_lines(source: str, tree: ast.Module) -> set[int]:
    """Line numbers holding code: not blank, not comment-only, not docstring."""
    docstrings = _docstring_lines(tree)
    return {
        number
        for number, line in enumerate(source.splitlines(), start=1)
        if line.strip() and not line.lstrip().startswith("#") and number not in docstrings
    }


def report(title: str, violations: list[str]) -> int:
    if not violations:
        return 0
    print(f"{title}:", file=sys.stderr)
    for violation in violations:
        print(f"  {violation}", file=sys.stderr)
    return 1


__all__ = ["ROOT", "SRC_DIR", "code_lines", "iter_python_files", "load_module", "rel", "report"]
