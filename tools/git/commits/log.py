"""git log: list commits."""

from typing import Literal

from pydantic import BaseModel, Field

from adapters import git as git_cli
from models import DevtoolsError, ToolDefinition, ToolResponse, error_response, text_response

MEDIUM_FORMAT = "--pretty=format:%H - %an (%ar)%n  %s%n"


class LogInput(BaseModel):
    count: int = Field(20, ge=1, le=1000, description="Number of commits to show")
    graph: bool = Field(False, description="Show ASCII graph of branch structure")
    author: str | None = Field(None, description="Filter by author name or email")
    since: str | None = Field(None, description='Show commits since date (e.g. "2 weeks ago")')
    until: str | None = Field(None, description="Show commits until date")
    grep: str | None = Field(None, description="Filter commits by message")
    branch: str | None = Field(None, description="Show commits from specific branch")
    format: Literal["full", "medium", "short", "oneline", "hash"] = Field(
        "medium", description="Output format"
    )


def build_args(params: LogInput) -> list[str]:
    args = ["log", "-n", str(params.count)]

    if params.format == "hash":
        args.append("--pretty=format:%H")
    elif params.format == "oneline":
        args.append("--oneline")
    elif params.format == "short":
        args.append("--pretty=short")
    elif params.format == "full":
        args.append("--pretty=full")
    else:
        args.append(MEDIUM_FORMAT)

    if params.graph:
        args.append("--graph")
    if params.author:
        args.append(f"--author={params.author}")
    if params.since:
        args.append(f"--since={params.since}")
    if params.until:
        args.append(f"--until={params.until}")
    if params.grep:
        args.append(f"--grep={params.grep}")
    if params.branch:
        args.extend([params.branch, "--"])
    return args


async def handler(params: LogInput) -> ToolResponse:
    try:
        result = await git_cli.git(*build_args(params))
    except DevtoolsError as e:
        return error_response(f"Error executing git log: {e.message}")

    if git_cli.is_not_a_repository(result):
        return error_response("Error: Not in a git repository")
    if not result.ok:
        # Fresh repository: HEAD has no commits yet
        if "does not have any commits" in result.stderr:
            return text_response("No commits found")
        return error_response(f"Error executing git log: {result.output}")
    return text_response(result.stdout or "No commits found")


tool = ToolDefinition(
    name="log",
    description="List Git commits with their hashes and information",
    input_schema=LogInput,
    handler=handler,
)
