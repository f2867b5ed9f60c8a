"""docker logs: fetch container logs (no streaming)."""

from pydantic import BaseModel, Field

from adapters import docker as docker_cli
from models import DevtoolsError, ToolDefinition, ToolResponse, error_response, text_response


class LogsInput(BaseModel):
    container: str = Field(min_length=1, description="Container name or ID")
    tail: int | None = Field(None, ge=0, description="Number of lines to show from the end of logs")
    since: str | None = Field(
        None, description='Show logs since timestamp (e.g. "2023-01-01T00:00:00") or relative ("10m")'
    )
    until: str | None = Field(None, description="Show logs before timestamp")
    timestamps: bool = Field(False, description="Show timestamps")
    details: bool = Field(False, description="Show extra details")


def build_args(params: LogsInput) -> list[str]:
    args = ["logs"]
    if params.timestamps:
        args.append("-t")
    if params.details:
        args.append("--details")
    if params.tail is not None:
        args.extend(["--tail", str(params.tail)])
    if params.since:
        args.extend(["--since", params.since])
    if params.until:
        args.extend(["--until", params.until])
    args.append(params.container)
    return args


async def handler(params: LogsInput) -> ToolResponse:
    try:
        result = await docker_cli.docker(*build_args(params))
    except DevtoolsError as e:
        return error_response(f"Error fetching logs: {e.message}")

    if not result.ok:
        return error_response(f"Error fetching logs for {params.container}: {result.output}")

    # docker writes container stderr to our stderr; show both streams
    output = "\n".join(part for part in (result.stdout, result.stderr) if part)
    return text_response(output or f"No logs found for container {params.container}")


tool = ToolDefinition(
    name="logs",
    description="Fetch logs from a Docker container",
    input_schema=LogsInput,
    handler=handler,
)
