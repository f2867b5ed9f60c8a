"""
Architectural tests: enforce layer boundaries.

These tests verify that the codebase maintains proper separation of concerns:
- models/validation are the shared contract and depend on nothing local
- adapters/ wrap external programs and services; they don't know about tools
- tool files only see the contract and adapters, never the registry or server
- registry.py knows nothing about the transport

This keeps a tool file loadable on its own and the registry testable
without FastMCP.
"""

import ast
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent.parent

LOCAL_MODULES = {"adapters", "cli", "config", "models", "registry", "resources", "server", "tools", "validation"}

# Layers and their forbidden imports
LAYER_RULES = {
    "models.py": LOCAL_MODULES - {"models"},
    "validation.py": LOCAL_MODULES - {"models", "validation"},
    "registry.py": {"adapters", "cli", "config", "resources", "server", "tools"},
    "adapters": {"cli", "registry", "resources", "server", "tools"},
}

# Tool files may use the contract, adapters and config
TOOL_FORBIDDEN = {"cli", "registry", "resources", "server", "validation"}


def get_imports_from_file(filepath: Path) -> set[str]:
    """Extract all top-level import names from a Python file."""
    try:
        with open(filepath) as f:
            tree = ast.parse(f.read(), filename=str(filepath))
    except SyntaxError:
        return set()

    imports = set()

    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                imports.add(alias.name.split(".")[0])
        elif isinstance(node, ast.ImportFrom):
            if node.module and node.level == 0:
                imports.add(node.module.split(".")[0])

    return imports


def get_python_files(target: Path) -> list[Path]:
    """A single module, or every module directly inside a package directory."""
    if target.is_file():
        return [target]
    if not target.exists():
        return []
    return sorted(target.glob("*.py"))


def tool_files() -> list[Path]:
    tools_dir = PROJECT_ROOT / "tools"
    return sorted(
        p for p in tools_dir.rglob("*.py")
        if p.parent != tools_dir and not p.name.startswith("_")
    )


class TestLayerBoundaries:
    """Verify that layer boundaries are respected."""

    @pytest.mark.parametrize("layer,forbidden", list(LAYER_RULES.items()))
    def test_layer_does_not_import_forbidden(self, layer: str, forbidden: set[str]) -> None:
        """Each layer must not import from its forbidden layers."""
        violations = []

        for filepath in get_python_files(PROJECT_ROOT / layer):
            bad_imports = get_imports_from_file(filepath) & forbidden
            if bad_imports:
                violations.append(f"{filepath.name} imports {bad_imports}")

        assert not violations, (
            f"Layer '{layer}' has forbidden imports:\n" +
            "\n".join(f"  - {v}" for v in violations)
        )

    def test_tool_files_only_use_contract_and_adapters(self) -> None:
        files = tool_files()
        assert files, "no tool files found"

        violations = []
        for filepath in files:
            bad_imports = get_imports_from_file(filepath) & TOOL_FORBIDDEN
            if bad_imports:
                violations.append(f"{filepath.relative_to(PROJECT_ROOT)} imports {bad_imports}")

        assert not violations, (
            "Tool files must not reach into the loader or transport:\n" +
            "\n".join(f"  - {v}" for v in violations)
        )


class TestToolFileConventions:
    """Every shipped tool file follows the loader's contract."""

    @pytest.mark.parametrize("filepath", tool_files(), ids=lambda p: str(p.relative_to(PROJECT_ROOT)))
    def test_defines_module_level_tool(self, filepath: Path) -> None:
        tree = ast.parse(filepath.read_text(), filename=str(filepath))
        assigned = {
            target.id
            for node in tree.body if isinstance(node, ast.Assign)
            for target in node.targets if isinstance(target, ast.Name)
        }
        assert "tool" in assigned

    def test_tool_trees_are_not_packages(self) -> None:
        """Tool trees are walked by path, not imported as packages."""
        inits = [p for p in (PROJECT_ROOT / "tools").rglob("__init__.py") if p.parent != PROJECT_ROOT / "tools"]
        assert inits == []
