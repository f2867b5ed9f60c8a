"""
Process Adapter: runs external CLIs (docker, git) for tool handlers.

Commands are exec'd directly (no shell), so arguments never need quoting.
A non-zero exit is a normal result; only "couldn't run it at all" and
timeouts raise.
"""

import asyncio
import shutil

import config
from logging_config import log_command, logger
from models import CommandResult, DevtoolsError, ErrorKind

__all__ = [
    "run_command",
    "require_binary",
]

# Cap on captured output per stream; docker logs can be enormous
MAX_OUTPUT_BYTES = 10 * 1024 * 1024  # 10 MB


def require_binary(name: str) -> str:
    """
    Resolve an executable on PATH.

    Raises:
        DevtoolsError(COMMAND_NOT_FOUND): Not installed / not on PATH
    """
    path = shutil.which(name)
    if path is None:
        raise DevtoolsError(
            ErrorKind.COMMAND_NOT_FOUND,
            f"{name} not found on PATH. Is it installed?",
        )
    return path


def _decode(data: bytes) -> str:
    if len(data) > MAX_OUTPUT_BYTES:
        data = data[:MAX_OUTPUT_BYTES]
    return data.decode("utf-8", errors="replace")


async def run_command(
    argv: list[str],
    cwd: str | None = None,
    timeout: float | None = None,
) -> CommandResult:
    """
    Run a command and capture its output.

    Args:
        argv: Program and arguments, e.g. ["docker", "ps", "-a"]
        cwd: Working directory
        timeout: Seconds before the process is killed
            (default: DEVTOOLS_COMMAND_TIMEOUT)

    Returns:
        CommandResult with exit code and decoded stdout/stderr

    Raises:
        DevtoolsError(COMMAND_NOT_FOUND): Executable missing
        DevtoolsError(TIMEOUT): Process exceeded the timeout (it is killed)
    """
    if not argv:
        raise ValueError("argv must not be empty")

    timeout = timeout if timeout is not None else config.command_timeout()
    log_command(argv, cwd)

    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            cwd=cwd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as e:
        raise DevtoolsError(
            ErrorKind.COMMAND_NOT_FOUND,
            f"{argv[0]} not found on PATH. Is it installed?",
        ) from e

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError as e:
        proc.kill()
        await proc.wait()
        logger.warning(f"Command timed out after {timeout}s: {' '.join(argv)}")
        raise DevtoolsError(
            ErrorKind.TIMEOUT,
            f"Command timed out after {timeout:g}s: {' '.join(argv)}",
        ) from e

    result = CommandResult(
        argv=list(argv),
        exit_code=proc.returncode if proc.returncode is not None else -1,
        stdout=_decode(stdout).strip(),
        stderr=_decode(stderr).strip(),
    )
    if not result.ok:
        logger.debug(f"Exit {result.exit_code}: {result.command}")
    return result
