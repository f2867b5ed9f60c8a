"""git checkout: switch branches or detach HEAD."""

from pydantic import BaseModel, Field, model_validator

from adapters import git as git_cli
from models import DevtoolsError, ToolDefinition, ToolResponse, error_response, text_response


class CheckoutInput(BaseModel):
    target: str = Field(min_length=1, description="Branch name, tag, or commit to checkout")
    create: bool = Field(False, description="Create new branch")
    force: bool = Field(False, description="Force checkout (discard local changes)")
    detach: bool = Field(False, description="Detach HEAD at the commit")
    orphan: bool = Field(False, description="Create new orphan branch")

    @model_validator(mode="after")
    def _one_mode(self) -> "CheckoutInput":
        if sum([self.create, self.detach, self.orphan]) > 1:
            raise ValueError("create, detach and orphan are mutually exclusive")
        return self


def build_args(params: CheckoutInput) -> list[str]:
    args = ["checkout"]
    if params.force:
        args.append("-f")
    if params.create:
        args.extend(["-b", params.target])
    elif params.orphan:
        args.extend(["--orphan", params.target])
    elif params.detach:
        args.extend(["--detach", params.target])
    else:
        args.append(params.target)
    return args


async def handler(params: CheckoutInput) -> ToolResponse:
    try:
        result = await git_cli.git(*build_args(params))
    except DevtoolsError as e:
        return error_response(f"Error executing git checkout: {e.message}")

    if git_cli.is_not_a_repository(result):
        return error_response("Error: Not in a git repository")
    if not result.ok:
        return error_response(f"Error executing git checkout: {result.output}")

    # git prints "Switched to branch ..." on stderr
    return text_response(result.stderr or result.stdout or f"Checked out {params.target}")


tool = ToolDefinition(
    name="checkout",
    description="Switch branches or restore working tree files",
    input_schema=CheckoutInput,
    handler=handler,
)
