"""docker images: list local images."""

import json

from pydantic import BaseModel, Field

from adapters import docker as docker_cli
from models import DevtoolsError, ToolDefinition, ToolResponse, error_response, text_response


class ImagesInput(BaseModel):
    repository: str | None = Field(None, description='Only show images from this repository (e.g. "nginx")')
    all: bool = Field(False, description="Show all images (default hides intermediate images)")
    dangling: bool | None = Field(None, description="Filter by dangling state")
    json_output: bool = Field(False, description="Return parsed JSON instead of a table")


def build_args(params: ImagesInput) -> list[str]:
    args = ["images"]
    if params.all:
        args.append("-a")
    if params.dangling is not None:
        args.extend(["--filter", f"dangling={str(params.dangling).lower()}"])
    if params.json_output:
        args.extend(["--format", "{{json .}}"])
    if params.repository:
        args.append(params.repository)
    return args


async def handler(params: ImagesInput) -> ToolResponse:
    try:
        result = await docker_cli.docker(*build_args(params))
    except DevtoolsError as e:
        return error_response(f"Error listing images: {e.message}")

    if not result.ok:
        return error_response(f"Error listing images: {result.output}")

    output = result.stdout
    if params.json_output and output:
        output = json.dumps(docker_cli.parse_json_lines(output), indent=2)
    return text_response(output or "No images found")


tool = ToolDefinition(
    name="images",
    description="List Docker images",
    input_schema=ImagesInput,
    handler=handler,
)
