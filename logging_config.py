"""
Logging configuration for devtools-mcp.

Simple setup that the registry, adapters and server can import.
Everything goes to stderr: stdout is the MCP stdio channel.
"""

import logging
import sys

# Create logger for the package
logger = logging.getLogger("devtools")


def configure_logging(level: str = "INFO") -> None:
    """
    Configure logging for devtools-mcp.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
    """
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Only add handler if not already configured
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(logging.DEBUG)

        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)


# NOTE: Call configure_logging() explicitly in server.py / cli.py or test setup.
# We don't auto-configure to avoid side effects on import.


def log_tool_registered(qualified_name: str) -> None:
    logger.info(f"Registered tool: {qualified_name}")


def log_tool_skipped(path: object, reason: str) -> None:
    """Log a tool file the loader could not use."""
    logger.warning(f"Skipping tool file {path}: {reason}")


def log_command(argv: list[str], cwd: str | None = None) -> None:
    """Log an external command about to run."""
    where = f" (cwd={cwd})" if cwd else ""
    logger.debug(f"Exec: {' '.join(argv)}{where}")
