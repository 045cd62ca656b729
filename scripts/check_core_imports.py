#!/usr/bin/env python3
"""
Fail if the navigation core imports concrete transports, typed endpoints or config.
Checks all Python files under src/rest_navigator/core/.
"""

from __future__ import annotations

import ast
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
CORE_DIR = REPO_ROOT / "src" / "rest_navigator" / "core"

FORBIDDEN_PREFIXES = (
    "dotenv",
    "respx",
    "rest_navigator.config",
    "rest_navigator.endpoints",
    "rest_navigator.transports",
)

# Relative imports that climb out of core/ (e.g. `from ..transports import x`).
FORBIDDEN_RELATIVE = ("config", "endpoints", "transports")


def is_forbidden(module: str) -> bool:
    return any(
        module == prefix or module.startswith(prefix + ".")
        for prefix in FORBIDDEN_PREFIXES
    )


def scan_file(path: Path) -> list[str]:
    errors: list[str] = []
    tree = ast.parse(path.read_text())
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                mod = alias.name
                if is_forbidden(mod):
                    errors.append(f"{path}: forbidden import '{mod}'")
        elif isinstance(node, ast.ImportFrom):
            mod = node.module or ""
            if node.level == 0:
                if mod and is_forbidden(mod):
                    errors.append(f"{path}: forbidden import '{mod}'")
            elif node.level >= 2 and mod.split(".")[0] in FORBIDDEN_RELATIVE:
                errors.append(f"{path}: forbidden import '{'.' * node.level}{mod}'")
    return errors


def main() -> int:
    violations: list[str] = []
    for py_file in sorted(CORE_DIR.rglob("*.py")):
        violations.extend(scan_file(py_file))

    if violations:
        for v in violations:
            print(v, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
