"""
Server profiles and environment settings.

Each profile is one MCP server: a tool tree under tools/, a name prefix
for its tools, and the name it reports to the host.

Environment variables (read when called, so tests can monkeypatch):
    DEVTOOLS_LOG_LEVEL        Log level for the devtools logger (default INFO)
    DEVTOOLS_SERVER           Profile `python server.py` serves without an argument
    DEVTOOLS_TOOLS_DIR        Root containing the profile tool trees
    DEVTOOLS_COMMAND_TIMEOUT  Seconds before an external command is killed
    REST_API_AUTH_TOKEN       Bearer token sent by the rest tools
    REST_API_TIMEOUT          Seconds before a REST request times out
    GIT_REPO_PATH             Working directory for the git tools
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from models import DevtoolsError, ErrorKind
from tools import TOOLS_DIR

DEFAULT_COMMAND_TIMEOUT = 30.0
DEFAULT_REST_TIMEOUT = 30.0


@dataclass(frozen=True)
class ServerProfile:
    name: str
    server_name: str
    prefix: str
    tools_subdir: str
    description: str
    version: str = "1.0.0"
    # Category (or "category/subcategory") → label for the generated docs
    categories: dict[str, str] = field(default_factory=dict, compare=False)

    def tools_path(self, root: Path | None = None) -> Path:
        """Tool tree for this profile, under root (default: tools_root())."""
        return (root or tools_root()) / self.tools_subdir


PROFILES: dict[str, ServerProfile] = {
    "docker": ServerProfile(
        name="docker",
        server_name="docker-mcp",
        prefix="docker_",
        tools_subdir="docker",
        description="Docker container and image management",
        categories={
            "containers": "Container operations",
            "images": "Image management",
        },
    ),
    "git": ServerProfile(
        name="git",
        server_name="git-mcp",
        prefix="git_",
        tools_subdir="git",
        description="Git version control",
        categories={
            "repository": "Repository management",
            "commits": "Commit operations",
            "branches": "Branch management",
        },
    ),
    "rest": ServerProfile(
        name="rest",
        server_name="rest-mcp",
        prefix="rest_",
        tools_subdir="rest",
        description="REST API requests",
    ),
    "examples": ServerProfile(
        name="examples",
        server_name="examples-mcp",
        prefix="examples_",
        tools_subdir="examples",
        description="Example tools for demonstration",
        categories={
            "examples": "Example tools for demonstration",
            "examples/test": "Test examples",
        },
    ),
}


def get_profile(name: str) -> ServerProfile:
    """
    Look up a server profile by name.

    Raises:
        DevtoolsError(INVALID_INPUT): Unknown profile
    """
    profile = PROFILES.get(name)
    if profile is None:
        raise DevtoolsError(
            ErrorKind.INVALID_INPUT,
            f"Unknown server profile: {name}. Known: {sorted(PROFILES)}",
        )
    return profile


def _float_env(var: str, default: float) -> float:
    raw = os.environ.get(var)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def log_level() -> str:
    return os.environ.get("DEVTOOLS_LOG_LEVEL", "INFO")


def tools_root() -> Path:
    override = os.environ.get("DEVTOOLS_TOOLS_DIR")
    return Path(override) if override else TOOLS_DIR


def command_timeout() -> float:
    return _float_env("DEVTOOLS_COMMAND_TIMEOUT", DEFAULT_COMMAND_TIMEOUT)


def rest_auth_token() -> str | None:
    return os.environ.get("REST_API_AUTH_TOKEN") or None


def rest_timeout() -> float:
    return _float_env("REST_API_TIMEOUT", DEFAULT_REST_TIMEOUT)


def git_repo_path() -> str | None:
    return os.environ.get("GIT_REPO_PATH") or None
