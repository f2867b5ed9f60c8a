"""git commit: record staged changes."""

from pydantic import BaseModel, Field

from adapters import git as git_cli
from models import DevtoolsError, ToolDefinition, ToolResponse, error_response, text_response


class CommitInput(BaseModel):
    message: str = Field(min_length=1, description="Commit message")
    amend: bool = Field(False, description="Amend the previous commit")
    all: bool = Field(False, description="Automatically stage all modified files")
    author: str | None = Field(None, description='Override author (format: "Name <email>")')
    date: str | None = Field(None, description="Override commit date")
    no_verify: bool = Field(False, description="Skip pre-commit hooks")
    signoff: bool = Field(False, description="Add Signed-off-by line")
    allow_empty: bool = Field(False, description="Allow empty commit")


def build_args(params: CommitInput) -> list[str]:
    args = ["commit", "-m", params.message]
    if params.amend:
        args.append("--amend")
    if params.all:
        args.append("-a")
    if params.author:
        args.append(f"--author={params.author}")
    if params.date:
        args.append(f"--date={params.date}")
    if params.no_verify:
        args.append("--no-verify")
    if params.signoff:
        args.append("--signoff")
    if params.allow_empty:
        args.append("--allow-empty")
    return args


async def handler(params: CommitInput) -> ToolResponse:
    try:
        result = await git_cli.git(*build_args(params))
    except DevtoolsError as e:
        return error_response(f"Error executing git commit: {e.message}")

    if git_cli.is_not_a_repository(result):
        return error_response("Error: Not in a git repository")
    if not result.ok:
        # git reports "nothing to commit" on stdout with exit 1
        if "nothing to commit" in result.stdout:
            return error_response("Nothing to commit (use git_add to stage changes)")
        return error_response(f"Error executing git commit: {result.output}")
    return text_response(result.stdout)


tool = ToolDefinition(
    name="commit",
    description="Record changes to the repository",
    input_schema=CommitInput,
    handler=handler,
)
