"""docker stop: stop one or more containers, reporting each."""

from pydantic import BaseModel, Field

from adapters import docker as docker_cli
from models import DevtoolsError, ToolDefinition, ToolResponse, error_response, text_response


class StopInput(BaseModel):
    containers: list[str] = Field(min_length=1, description="Container names or IDs to stop")
    time: int = Field(10, ge=0, description="Seconds to wait before killing the container")


async def handler(params: StopInput) -> ToolResponse:
    lines = []
    stopped = failed = 0
    for container in params.containers:
        try:
            result = await docker_cli.docker("stop", "-t", str(params.time), container)
        except DevtoolsError as e:
            return error_response(f"Error executing docker stop: {e.message}")
        if result.ok:
            stopped += 1
            lines.append(f"✓ {container}: stopped")
        else:
            failed += 1
            lines.append(f"✗ {container}: {result.output}")

    summary = f"Stopped {stopped} container(s)"
    if failed:
        summary += f", {failed} failed"
    text = summary + "\n\n" + "\n".join(lines)

    if stopped == 0:
        return error_response(text)
    return text_response(text)


tool = ToolDefinition(
    name="stop",
    description="Stop one or more running Docker containers",
    input_schema=StopInput,
    handler=handler,
)
