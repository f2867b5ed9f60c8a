"""git status: working tree status."""

from typing import Literal

from pydantic import BaseModel, Field

from adapters import git as git_cli
from models import DevtoolsError, ToolDefinition, ToolResponse, error_response, text_response


class StatusInput(BaseModel):
    short: bool = Field(False, description="Give output in short format")
    branch: bool = Field(True, description="Show branch information")
    porcelain: bool = Field(False, description="Machine-readable output")
    ignored: bool = Field(False, description="Show ignored files")
    untracked: Literal["normal", "all", "no"] = Field("normal", description="Show untracked files")


def build_args(params: StatusInput) -> list[str]:
    args = ["status"]
    if params.short:
        args.append("-s")
    if params.branch and not params.porcelain:
        args.append("-b")
    if params.porcelain:
        args.append("--porcelain=v1")
    if params.ignored:
        args.append("--ignored")
    if params.untracked == "all":
        args.append("-uall")
    elif params.untracked == "no":
        args.append("-uno")
    return args


async def handler(params: StatusInput) -> ToolResponse:
    try:
        result = await git_cli.git(*build_args(params))
    except DevtoolsError as e:
        return error_response(f"Error executing git status: {e.message}")

    if git_cli.is_not_a_repository(result):
        return error_response("Error: Not in a git repository")
    if not result.ok:
        return error_response(f"Error executing git status: {result.output}")

    if not result.stdout and (params.short or params.porcelain):
        return text_response("Working tree clean")
    return text_response(result.stdout or "No status information available")


tool = ToolDefinition(
    name="status",
    description="Show the working tree status",
    input_schema=StatusInput,
    handler=handler,
)
