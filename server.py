#!/usr/bin/env python3
"""
devtools-mcp Server

One MCP server per profile (docker, git, rest, examples), all built the same
way: load the profile's tool tree into a ToolRegistry, bind every entry to
FastMCP, serve on stdio.

Tools are never declared here. They live as files under tools/<profile>/
and are discovered at startup (see registry.py). A broken tool file is
skipped; the server still starts, even with 0 tools.

Architecture:
- tools/: Tool files (one ToolDefinition per file, exposed as `tool`)
- adapters/: Thin CLI / HTTP wrappers used by tool handlers
- registry.py: Discovery, validation, namespacing, handler wrapping
- resources/: Generated tool documentation
- server.py: FastMCP binding (this file)
"""

import inspect
import os
import signal
import sys
from pathlib import Path
from typing import Annotated, Any, Mapping

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from mcp.types import TextContent as MCPTextContent
from pydantic import Field
from pydantic.fields import FieldInfo

import config
from logging_config import configure_logging, logger
from models import DevtoolsError, ToolResponse
from registry import RegisteredTool, ToolRegistry
from resources.tools import ToolResourceRegistry


# ============================================================================
# TOOL BINDING
# ============================================================================

def _parameter(name: str, info: Any) -> inspect.Parameter:
    """
    Build a keyword-only parameter describing one input field.

    FastMCP derives each tool's JSON input schema from the function
    signature, so annotation, constraints, default and description are
    carried over from the field.
    """
    if isinstance(info, FieldInfo):
        annotation = info.annotation if info.annotation is not None else Any
        extras = [*info.metadata, Field(description=info.description)]
        if info.is_required():
            default = inspect.Parameter.empty
        else:
            default = info.get_default(call_default_factory=True)
    else:
        # Plain objects: optional when they carry a `default` attribute
        annotation = getattr(info, "annotation", None) or Any
        extras = [Field(description=getattr(info, "description", None))]
        default = getattr(info, "default", inspect.Parameter.empty)

    return inspect.Parameter(
        name,
        inspect.Parameter.KEYWORD_ONLY,
        default=default,
        annotation=Annotated[(annotation, *extras)],
    )


def _transport_function(entry: RegisteredTool) -> Any:
    """
    Async function FastMCP can register for one registry entry.

    Calls the wrapped handler and converts the ToolResponse to MCP content.
    DevtoolsErrors and error responses become ToolError, which FastMCP
    reports as an isError result rather than a crash.
    """
    # FastMCP passes every parameter, omitted ones as their defaults. None for
    # a field that defaults to None is dropped so the schema fills it in.
    none_defaults = {
        name for name, info in entry.shape.items()
        if isinstance(info, FieldInfo) and not info.is_required() and info.default is None
    }

    async def invoke(**arguments: Any) -> list[MCPTextContent]:
        arguments = {
            k: v for k, v in arguments.items() if not (v is None and k in none_defaults)
        }
        try:
            response = ToolResponse.coerce(await entry.call(arguments))
        except DevtoolsError as e:
            raise ToolError(e.message) from e
        except TypeError as e:
            raise ToolError(f"Tool {entry.qualified_name} returned an invalid response: {e}") from e

        if response.is_error:
            raise ToolError(response.text)
        return [MCPTextContent(type="text", text=block.text) for block in response.content]

    parameters = [_parameter(name, info) for name, info in entry.shape.items()]
    invoke.__signature__ = inspect.Signature(parameters)  # type: ignore[attr-defined]
    invoke.__annotations__ = {p.name: p.annotation for p in parameters}
    invoke.__name__ = entry.qualified_name
    invoke.__qualname__ = entry.qualified_name
    invoke.__doc__ = entry.description
    return invoke


def bind_registry(mcp: FastMCP, registry: ToolRegistry) -> int:
    """
    Register every registry entry as an MCP tool.

    A tool the transport can't describe (field types FastMCP can't put in
    a JSON schema) is logged and left unbound; the others still bind.

    Returns:
        Number of tools bound
    """
    count = 0
    for name, entry in registry.get_entries().items():
        try:
            mcp.add_tool(_transport_function(entry), name=name, description=entry.description)
        except Exception as e:
            logger.warning(f"Not binding tool {name} from {entry.source}: {type(e).__name__}: {e}")
            continue
        count += 1
    return count


# ============================================================================
# RESOURCES: Self-documenting MCP capabilities
# ============================================================================

def register_resources(
    mcp: FastMCP,
    server_name: str,
    description: str,
    registry: ToolRegistry,
    categories: Mapping[str, str] | None = None,
) -> ToolResourceRegistry:
    docs = ToolResourceRegistry(registry, categories)

    @mcp.resource("devtools://docs/overview")
    def docs_overview() -> str:
        """Overview of this server and its tools."""
        return docs.overview_markdown(server_name, description, prefix=registry.prefix)

    @mcp.resource("devtools://tools/{tool_name}")
    def tool_resource(tool_name: str) -> str:
        """Auto-generated documentation for a specific tool."""
        try:
            return docs.get_resource(f"devtools://tools/{tool_name}")["text"]
        except KeyError:
            return f"# {tool_name}\n\nTool not found."

    return docs


# ============================================================================
# SERVER CONSTRUCTION
# ============================================================================

def create_server(
    profile_name: str,
    tools_dir: str | Path | None = None,
    prefix: str | None = None,
) -> tuple[FastMCP, ToolRegistry]:
    """
    Build a ready-to-run server for a profile.

    Args:
        profile_name: docker, git, rest or examples
        tools_dir: Tool tree to load instead of the profile's own
        prefix: Tool name prefix instead of the profile's own

    Raises:
        DevtoolsError(INVALID_INPUT): Unknown profile
    """
    profile = config.get_profile(profile_name)
    registry = ToolRegistry(prefix=profile.prefix if prefix is None else prefix)
    tree = Path(tools_dir) if tools_dir else profile.tools_path()
    registry.load_from_directory(tree)

    mcp = FastMCP(profile.server_name, instructions=profile.description)
    count = bind_registry(mcp, registry)
    register_resources(mcp, profile.server_name, profile.description, registry, profile.categories)

    logger.info(f"{profile.server_name} ready: {count} tools")
    return mcp, registry


# ============================================================================
# SERVER ENTRY POINT
# ============================================================================

def _shutdown_handler(signum: int, frame: object) -> None:
    """Handle termination signals by exiting immediately.

    os._exit() is required because sys.exit() raises SystemExit,
    which asyncio's event loop catches and ignores. The server
    would survive SIGTERM until stdin closes.
    """
    os._exit(0)


def serve(
    profile_name: str,
    tools_dir: str | Path | None = None,
    prefix: str | None = None,
) -> None:
    """Load tools, then run on stdio. Loading always finishes first."""
    configure_logging(config.log_level())
    mcp, _ = create_server(profile_name, tools_dir=tools_dir, prefix=prefix)

    signal.signal(signal.SIGTERM, _shutdown_handler)
    signal.signal(signal.SIGINT, _shutdown_handler)
    mcp.run()


def main(argv: list[str] | None = None) -> None:
    """`python server.py <profile>`; profile defaults to DEVTOOLS_SERVER, then examples."""
    args = sys.argv[1:] if argv is None else argv
    serve(args[0] if args else os.environ.get("DEVTOOLS_SERVER", "examples"))


if __name__ == "__main__":
    main()
