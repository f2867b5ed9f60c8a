"""docker ps: list containers."""

import json
from typing import Literal

from pydantic import BaseModel, Field

from adapters import docker as docker_cli
from models import DevtoolsError, ToolDefinition, ToolResponse, error_response, text_response


class PsInput(BaseModel):
    all: bool = Field(False, description="Show all containers (default shows just running)")
    filter: str | None = Field(
        None, description='Filter output based on conditions (e.g. "status=running")'
    )
    format: Literal["table", "json", "id", "name"] = Field("table", description="Output format")
    last: int | None = Field(None, ge=1, description="Show n last created containers")
    size: bool = Field(False, description="Display total file sizes")


def build_args(params: PsInput) -> list[str]:
    args = ["ps"]
    if params.all:
        args.append("-a")
    if params.filter:
        args.extend(["--filter", params.filter])
    if params.last:
        args.extend(["--last", str(params.last)])
    if params.size:
        args.append("-s")

    if params.format == "json":
        args.extend(["--format", "{{json .}}"])
    elif params.format == "id":
        args.append("-q")
    elif params.format == "name":
        args.extend(["--format", "{{.Names}}"])
    return args


async def handler(params: PsInput) -> ToolResponse:
    try:
        result = await docker_cli.docker(*build_args(params))
    except DevtoolsError as e:
        return error_response(f"Error executing docker ps: {e.message}")

    if not result.ok:
        return error_response(f"Error executing docker ps: {result.output}")

    output = result.stdout
    if params.format == "json" and output:
        output = json.dumps(docker_cli.parse_json_lines(output), indent=2)
    return text_response(output or "No containers found")


tool = ToolDefinition(
    name="ps",
    description="List Docker containers with various filtering and formatting options",
    input_schema=PsInput,
    handler=handler,
)
