#!/usr/bin/env python3
"""Check layer import boundaries of the badge_consensus package.

Layering rules:
- domain/: voters, rounds, badges, errors, events; imports no other layer
- application/: ports and the consensus controller; imports domain/ only
- infrastructure/: in-memory ledger, event sink, logging; imports domain/
  and application/
- api/: HTTP surface; imports application/, domain/ and infrastructure/
  (observability only in practice)

bootstrap/ and config/ wire the layers together; their own imports are not
checked, and only api/ may import them.

Usage:
    python scripts/check_imports.py [package_directory]

Exit codes:
    0: No violations found
    1: Violations found
"""
import ast
import sys
from pathlib import Path

PACKAGE_NAME = "badge_consensus"

# Lower number = inner layer
LAYER_HIERARCHY: dict[str, int] = {
    "domain": 0,
    "application": 1,
    "infrastructure": 2,
    "api": 3,
}

ALLOWED_IMPORTS: dict[str, set[str]] = {
    "domain": set(),
    "application": {"domain"},
    "infrastructure": {"domain", "application"},
    "api": {"application", "domain", "infrastructure"},
}


def get_import_module(node: ast.Import | ast.ImportFrom) -> str | None:
    """Extract the module name from an import statement."""
    if isinstance(node, ast.ImportFrom):
        return node.module
    if isinstance(node, ast.Import) and node.names:
        return node.names[0].name
    return None


def get_file_layer(py_file: Path, package_dir: Path) -> str | None:
    """Layer a file belongs to, or None for unchecked files.

    Args:
        py_file: Path to the Python file
        package_dir: Path to the badge_consensus directory
    """
    try:
        relative = py_file.relative_to(package_dir)
    except ValueError:
        return None

    if not relative.parts:
        return None
    layer = relative.parts[0]
    return layer if layer in LAYER_HIERARCHY else None


def check_import_violation(
    module: str, file_layer: str, allowed_layers: set[str]
) -> str | None:
    """Check if an import crosses a forbidden boundary.

    Args:
        module: The imported module (e.g., "badge_consensus.domain.models")
        file_layer: The layer of the importing file
        allowed_layers: Layers this file may import from

    Returns:
        Error message on violation, None otherwise
    """
    module_parts = module.split(".")
    if len(module_parts) < 2 or module_parts[0] != PACKAGE_NAME:
        return None

    target_layer = module_parts[1]
    if target_layer in ("bootstrap", "config") and file_layer != "api":
        return f"{file_layer} layer cannot import from {target_layer}"
    if target_layer not in LAYER_HIERARCHY or target_layer == file_layer:
        return None
    if target_layer not in allowed_layers:
        return f"{file_layer} layer cannot import from {target_layer}"
    return None


def check_file_imports(py_file: Path, package_dir: Path) -> list[tuple[str, int, str]]:
    """Check a single file for import boundary violations.

    Returns:
        List of (file_path, line_number, violation_message) tuples
    """
    file_layer = get_file_layer(py_file, package_dir)
    if file_layer is None:
        return []

    try:
        tree = ast.parse(py_file.read_text(encoding="utf-8"), filename=str(py_file))
    except (SyntaxError, UnicodeDecodeError) as e:
        print(f"Warning: Could not parse {py_file}: {e}", file=sys.stderr)
        return []

    violations: list[tuple[str, int, str]] = []
    allowed_layers = ALLOWED_IMPORTS.get(file_layer, set())
    for node in ast.walk(tree):
        if isinstance(node, (ast.Import, ast.ImportFrom)):
            module = get_import_module(node)
            if module:
                error_msg = check_import_violation(module, file_layer, allowed_layers)
                if error_msg:
                    violations.append((str(py_file), node.lineno, error_msg))
    return violations


def check_import_boundaries(package_dir: Path) -> list[tuple[str, int, str]]:
    """Check every Python file under package_dir."""
    violations: list[tuple[str, int, str]] = []

    if not package_dir.exists():
        print(f"Error: Package directory '{package_dir}' does not exist", file=sys.stderr)
        return violations

    for py_file in package_dir.rglob("*.py"):
        violations.extend(check_file_imports(py_file, package_dir))
    return violations


def format_violations(violations: list[tuple[str, int, str]]) -> str:
    """Format violations for human-readable output."""
    if not violations:
        return ""

    lines = ["Import boundary violations found:", ""]
    for file_path, line_no, message in sorted(violations):
        lines.append(f"  {file_path}:{line_no}: {message}")
    lines.append("")
    lines.append(f"Total: {len(violations)} violation(s)")
    return "\n".join(lines)


def main() -> int:
    """Main entry point.

    Returns:
        0 if no violations, 1 if violations found
    """
    if len(sys.argv) > 1:
        package_dir = Path(sys.argv[1])
    else:
        package_dir = Path(__file__).parent.parent / PACKAGE_NAME

    violations = check_import_boundaries(package_dir)
    if violations:
        print(format_violations(violations))
        return 1

    print("No import boundary violations found.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
