#!/usr/bin/env python3
"""
CLI interface for devtools-mcp.

Usage:
    devtools-mcp serve docker
    devtools-mcp list git
    devtools-mcp call examples hello_world --args '{"name": "Ada"}'

`serve` runs an MCP server on stdio. `list` and `call` load the same tool
tree in-process, for checking a tree or running a tool without an MCP client.
"""

import argparse
import asyncio
import json
import sys

import config
from logging_config import configure_logging
from models import DevtoolsError, ToolResponse
from registry import ToolRegistry, qualified_name


def _load(args: argparse.Namespace) -> ToolRegistry:
    profile = config.get_profile(args.profile)
    registry = ToolRegistry(prefix=profile.prefix if args.prefix is None else args.prefix)
    registry.load_from_directory(args.tools_dir or profile.tools_path())
    return registry


def cmd_serve(args: argparse.Namespace) -> None:
    """Run the MCP server on stdio."""
    from server import serve

    serve(args.profile, tools_dir=args.tools_dir, prefix=args.prefix)


def cmd_list(args: argparse.Namespace) -> None:
    """List registered tools."""
    registry = _load(args)
    tools = [
        {
            "name": name,
            "description": entry.description.strip().split("\n")[0],
            "category": entry.category,
            "subcategory": entry.subcategory,
            "params": list(entry.shape),
        }
        for name, entry in registry.get_entries().items()
    ]
    print(json.dumps(tools, indent=2))


def cmd_call(args: argparse.Namespace) -> None:
    """Call one tool and print its text output."""
    registry = _load(args)

    entry = registry.get(args.tool) or registry.get(qualified_name(registry.prefix, args.tool))
    if entry is None:
        print(f"Unknown tool: {args.tool}", file=sys.stderr)
        sys.exit(1)

    try:
        arguments = json.loads(args.args)
    except json.JSONDecodeError as e:
        print(f"--args is not valid JSON: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        response = ToolResponse.coerce(asyncio.run(entry.call(arguments)))
    except DevtoolsError as e:
        print(json.dumps(e.to_dict(), indent=2), file=sys.stderr)
        sys.exit(1)

    print(response.text)
    if response.is_error:
        sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="devtools-mcp",
        description="MCP tool servers for Docker, Git and REST APIs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    devtools-mcp serve docker
    devtools-mcp serve rest --tools-dir ./my-tools --prefix api_
    devtools-mcp list git
    devtools-mcp call docker ps --args '{"all": true}'
    devtools-mcp call examples examples_hello_world --args '{"name": "Ada", "language": "fr"}'
""",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_common(p: argparse.ArgumentParser) -> None:
        p.add_argument("profile", choices=sorted(config.PROFILES), help="Server profile")
        p.add_argument("--tools-dir", help="Tool tree to load instead of the profile's own")
        p.add_argument("--prefix", help="Tool name prefix instead of the profile's own")

    serve_p = subparsers.add_parser("serve", help="Run an MCP server on stdio")
    add_common(serve_p)
    serve_p.set_defaults(func=cmd_serve)

    list_p = subparsers.add_parser("list", help="List tools a server would register")
    add_common(list_p)
    list_p.set_defaults(func=cmd_list)

    call_p = subparsers.add_parser("call", help="Call one tool in-process")
    add_common(call_p)
    call_p.add_argument("tool", help="Tool name, with or without the prefix")
    call_p.add_argument("--args", default="{}", help="Tool arguments as a JSON object")
    call_p.set_defaults(func=cmd_call)

    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(config.log_level())
    args.func(args)


if __name__ == "__main__":
    main()
