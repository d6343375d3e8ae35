#!/usr/bin/env python3
"""Project-specific lint rules that ruff does not cover.

Rules:
1. No class-based tests in test files (Hypothesis stateful TestCases excepted)
2. No imports inside library functions
3. No mutable default arguments
4. No print() in library code (use logging)
5. No TODO/FIXME comments without issue references
6. No use of the process-wide generators in library code. Samplers own a
   numpy Generator; calls like ``np.random.rand()`` or ``random.random()``
   would couple them to global state.

Usage: python scripts/extra_lints.py [paths...]
"""

import ast
import re
import sys
from dataclasses import dataclass
from pathlib import Path

# numpy.random attributes that create independent generators rather than
# reading the legacy global RandomState.
NUMPY_RANDOM_ALLOWED = frozenset(
    {
        "default_rng",
        "Generator",
        "SeedSequence",
        "BitGenerator",
        "PCG64",
        "PCG64DXSM",
        "Philox",
        "SFC64",
        "MT19937",
    }
)
STDLIB_RANDOM_ALLOWED = frozenset({"Random", "SystemRandom"})

TODO_PATTERN = re.compile(r"#\s*(TODO|FIXME)(?!:\s*\w+-\d+)", re.IGNORECASE)


@dataclass
class LintError:
    file: Path
    line: int
    column: int
    rule: str
    message: str

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}: {self.rule}: {self.message}"


def _dotted_name(node: ast.expr) -> str | None:
    parts: list[str] = []
    while isinstance(node, ast.Attribute):
        parts.append(node.attr)
        node = node.value
    if not isinstance(node, ast.Name):
        return None
    parts.append(node.id)
    return ".".join(reversed(parts))


class LintVisitor(ast.NodeVisitor):
    """Collects rule violations for one file."""

    def __init__(self, file: Path) -> None:
        self.file = file
        self.errors: list[LintError] = []
        self._is_test_file = file.name.startswith("test_") or file.name == "conftest.py"
        self._function_depth = 0
        # Local name -> fully qualified module, e.g. {"np": "numpy"}.
        self._aliases: dict[str, str] = {}

    def _add_error(self, node: ast.AST, rule: str, message: str) -> None:
        lineno = getattr(node, "lineno", 0)
        col_offset = getattr(node, "col_offset", 0)
        self.errors.append(LintError(self.file, lineno, col_offset, rule, message))

    def visit_ClassDef(self, node: ast.ClassDef) -> None:
        if self._is_test_file and node.name.startswith("Test"):
            is_hypothesis_stateful = any(
                isinstance(base, ast.Attribute) and base.attr == "TestCase"
                for base in node.bases
            )
            if not is_hypothesis_stateful:
                msg = f"Class-based test '{node.name}' found. Use functions."
                self._add_error(node, "no-class-tests", msg)
        self.generic_visit(node)

    def _visit_function(self, node: ast.FunctionDef | ast.AsyncFunctionDef) -> None:
        self._function_depth += 1
        for default in node.args.defaults + node.args.kw_defaults:
            if default is not None and self._is_mutable_default(default):
                msg = "Mutable default argument. Use None instead."
                self._add_error(default, "mutable-default", msg)
        self.generic_visit(node)
        self._function_depth -= 1

    visit_FunctionDef = _visit_function
    visit_AsyncFunctionDef = _visit_function

    @staticmethod
    def _is_mutable_default(node: ast.expr) -> bool:
        if isinstance(node, (ast.List, ast.Dict, ast.Set)):
            return True
        return (
            isinstance(node, ast.Call)
            and isinstance(node.func, ast.Name)
            and node.func.id in ("list", "dict", "set")
        )

    def _check_import_placement(self, node: ast.Import | ast.ImportFrom) -> None:
        if self._function_depth > 0 and not self._is_test_file:
            self._add_error(
                node,
                "import-in-function",
                "Import inside function. Move to module level.",
            )

    def visit_Import(self, node: ast.Import) -> None:
        self._check_import_placement(node)
        for alias in node.names:
            self._aliases[alias.asname or alias.name.split(".")[0]] = (
                alias.name if alias.asname else alias.name.split(".")[0]
            )
        self.generic_visit(node)

    def visit_ImportFrom(self, node: ast.ImportFrom) -> None:
        self._check_import_placement(node)
        if not self._is_test_file:
            self._check_random_import(node)
        for alias in node.names:
            if node.module:
                self._aliases[alias.asname or alias.name] = f"{node.module}.{alias.name}"
        self.generic_visit(node)

    def _check_random_import(self, node: ast.ImportFrom) -> None:
        allowed = {
            "random": STDLIB_RANDOM_ALLOWED,
            "numpy.random": NUMPY_RANDOM_ALLOWED,
        }.get(node.module or "")
        if allowed is None:
            return
        for alias in node.names:
            if alias.name not in allowed:
                self._add_error(
                    node,
                    "global-random",
                    f"'{node.module}.{alias.name}' uses the global generator.",
                )

    def visit_Call(self, node: ast.Call) -> None:
        if not self._is_test_file:
            if isinstance(node.func, ast.Name) and node.func.id == "print":
                self._add_error(
                    node,
                    "no-print",
                    "Use logging instead of print() in library code.",
                )
            self._check_global_random_call(node)
        self.generic_visit(node)

    def _check_global_random_call(self, node: ast.Call) -> None:
        dotted = _dotted_name(node.func)
        if dotted is None:
            return
        head, _, rest = dotted.partition(".")
        qualified = f"{self._aliases.get(head, head)}.{rest}" if rest else dotted
        module, _, attr = qualified.rpartition(".")
        uses_global = (module == "numpy.random" and attr not in NUMPY_RANDOM_ALLOWED) or (
            module == "random" and attr not in STDLIB_RANDOM_ALLOWED
        )
        if not uses_global:
            return
        self._add_error(
            node,
            "global-random",
            f"'{qualified}' uses the global generator. Use a per-instance Generator.",
        )


def check_todo_comments(file: Path, source: str) -> list[LintError]:
    """Flag TODO/FIXME comments without an issue reference."""
    errors: list[LintError] = []
    for i, line in enumerate(source.splitlines(), 1):
        match = TODO_PATTERN.search(line)
        if match:
            msg = f"{match.group(1)} needs issue reference (e.g., TODO: PROJ-123)."
            errors.append(LintError(file, i, match.start(), "todo-needs-issue", msg))
    return errors


def lint_source(path: Path, source: str) -> list[LintError]:
    """Lint ``source`` as if it were the contents of ``path``."""
    try:
        tree = ast.parse(source)
    except SyntaxError as e:
        return [LintError(path, e.lineno or 0, e.offset or 0, "syntax-error", str(e))]
    visitor = LintVisitor(path)
    visitor.visit(tree)
    return visitor.errors + check_todo_comments(path, source)


def lint_file(path: Path) -> list[LintError]:
    return lint_source(path, path.read_text())


def lint_paths(paths: list[Path]) -> list[LintError]:
    errors: list[LintError] = []
    for root in paths:
        files = [root] if root.is_file() else sorted(root.rglob("*.py"))
        for py_file in files:
            errors.extend(lint_file(py_file))
    return sorted(errors, key=lambda e: (str(e.file), e.line, e.column))


def main(argv: list[str] | None = None) -> int:
    """Lint src and tests (or the given paths)."""
    args = sys.argv[1:] if argv is None else argv
    paths = [Path(a) for a in args] or [p for p in (Path("src"), Path("tests")) if p.exists()]
    errors = lint_paths(paths)

    if errors:
        for error in errors:
            print(error)
        print(f"\nFound {len(errors)} custom lint error(s)")
        return 1

    print("All custom lint checks passed!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
