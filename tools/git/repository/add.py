"""git add: stage files."""

from pydantic import BaseModel, Field

from adapters import git as git_cli
from models import DevtoolsError, ToolDefinition, ToolResponse, error_response, text_response


class AddInput(BaseModel):
    paths: list[str] = Field(min_length=1, description="Files or directories to add")
    all: bool = Field(False, description="Add all changes (equivalent to git add -A)")
    update: bool = Field(False, description="Update tracked files only")
    force: bool = Field(False, description="Add ignored files")
    dry_run: bool = Field(False, description="Show what would be added")


def build_args(params: AddInput) -> list[str]:
    args = ["add", "--verbose"]
    if params.all:
        args.append("-A")
    if params.update:
        args.append("-u")
    if params.force:
        args.append("-f")
    if params.dry_run:
        args.append("--dry-run")
    args.append("--")
    args.extend(params.paths)
    return args


async def handler(params: AddInput) -> ToolResponse:
    try:
        result = await git_cli.git(*build_args(params))
    except DevtoolsError as e:
        return error_response(f"Error executing git add: {e.message}")

    if git_cli.is_not_a_repository(result):
        return error_response("Error: Not in a git repository")
    if not result.ok:
        return error_response(f"Error executing git add: {result.output}")

    prefix = "Would add" if params.dry_run else "Added"
    return text_response(result.stdout or f"{prefix}: {', '.join(params.paths)} (no changes)")


tool = ToolDefinition(
    name="add",
    description="Add file contents to the staging area",
    input_schema=AddInput,
    handler=handler,
)
