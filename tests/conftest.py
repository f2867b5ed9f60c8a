"""
Shared pytest fixtures for devtools-mcp tests.

tool_tree writes throwaway tool files under tmp_path; the profile
registries load the tool trees shipped in tools/.
"""

from pathlib import Path
from typing import Callable

import pytest

from registry import ToolRegistry
from tools import TOOLS_DIR

# Environment the code reads at call time; tests start from a clean slate
DEVTOOLS_ENV_VARS = (
    "DEVTOOLS_LOG_LEVEL",
    "DEVTOOLS_SERVER",
    "DEVTOOLS_TOOLS_DIR",
    "DEVTOOLS_COMMAND_TIMEOUT",
    "REST_API_AUTH_TOKEN",
    "REST_API_TIMEOUT",
    "GIT_REPO_PATH",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in DEVTOOLS_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def tool_tree(tmp_path: Path) -> Callable[[str, str], Path]:
    """
    Writer for files in a temporary tool tree rooted at tmp_path / "tools".

    Example:
        tool_tree("a/one.py", valid_tool_source("echo"))
    """
    root = tmp_path / "tools"
    root.mkdir()

    def write(relative: str, source: str) -> Path:
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source)
        return path

    write.root = root  # type: ignore[attr-defined]
    return write


def _load_profile_tree(subdir: str, prefix: str) -> ToolRegistry:
    registry = ToolRegistry(prefix=prefix)
    registry.load_from_directory(TOOLS_DIR / subdir)
    return registry


@pytest.fixture
def docker_registry() -> ToolRegistry:
    return _load_profile_tree("docker", "docker_")


@pytest.fixture
def git_registry() -> ToolRegistry:
    return _load_profile_tree("git", "git_")


@pytest.fixture
def rest_registry() -> ToolRegistry:
    return _load_profile_tree("rest", "rest_")


@pytest.fixture
def examples_registry() -> ToolRegistry:
    return _load_profile_tree("examples", "examples_")
