"""docker pull: pull an image from a registry."""

from pydantic import BaseModel, Field

from adapters import docker as docker_cli
from models import DevtoolsError, ToolDefinition, ToolResponse, error_response, text_response

# Pulls of large images routinely take minutes
PULL_TIMEOUT = 600.0


class PullInput(BaseModel):
    image: str = Field(min_length=1, description='Image name with optional tag (e.g. "ubuntu:latest")')
    platform: str | None = Field(None, description='Platform to pull for (e.g. "linux/amd64")')
    all_tags: bool = Field(False, description="Download all tagged images")
    quiet: bool = Field(False, description="Suppress verbose output")


def build_args(params: PullInput) -> list[str]:
    args = ["pull"]
    if params.platform:
        args.extend(["--platform", params.platform])
    if params.all_tags:
        args.append("--all-tags")
    if params.quiet:
        args.append("-q")
    args.append(params.image)
    return args


async def handler(params: PullInput) -> ToolResponse:
    try:
        result = await docker_cli.docker(*build_args(params), timeout=PULL_TIMEOUT)
    except DevtoolsError as e:
        return error_response(f"Error pulling {params.image}: {e.message}")

    if not result.ok:
        return error_response(f"Error pulling {params.image}: {result.output}")
    return text_response(f"Successfully pulled {params.image}\n\n{result.stdout}".rstrip())


tool = ToolDefinition(
    name="pull",
    description="Pull a Docker image from a registry",
    input_schema=PullInput,
    handler=handler,
)
