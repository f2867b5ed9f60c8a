"""
Git Adapter: thin wrapper over the git CLI.

Commands run in GIT_REPO_PATH when set, otherwise the server's working
directory.
"""

import config
from adapters import process
from models import CommandResult

__all__ = [
    "git",
    "is_not_a_repository",
]


async def git(*args: str, cwd: str | None = None, timeout: float | None = None) -> CommandResult:
    """
    Run `git <args>`.

    Raises:
        DevtoolsError(COMMAND_NOT_FOUND): git isn't installed
        DevtoolsError(TIMEOUT): Command exceeded the timeout
    """
    binary = process.require_binary("git")
    return await process.run_command(
        [binary, *args],
        cwd=cwd or config.git_repo_path(),
        timeout=timeout,
    )


def is_not_a_repository(result: CommandResult) -> bool:
    return not result.ok and "not a git repository" in result.stderr.lower()
