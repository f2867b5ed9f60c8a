"""
Docker Adapter: thin wrapper over the docker CLI.

Tool handlers build the argument list; this adapter resolves the binary and
runs it. JSON-lines output (`--format "{{json .}}"`) is parsed here.
"""

import json
from typing import Any

from adapters import process
from models import CommandResult

__all__ = [
    "docker",
    "parse_json_lines",
]


async def docker(*args: str, timeout: float | None = None) -> CommandResult:
    """
    Run `docker <args>`.

    Raises:
        DevtoolsError(COMMAND_NOT_FOUND): docker isn't installed
        DevtoolsError(TIMEOUT): Command exceeded the timeout
    """
    binary = process.require_binary("docker")
    return await process.run_command([binary, *args], timeout=timeout)


def parse_json_lines(output: str) -> list[Any]:
    """Parse one JSON document per line, skipping blank lines."""
    return [json.loads(line) for line in output.splitlines() if line.strip()]
