"""rest_post: POST request to an API endpoint."""

import json
from typing import Any

from pydantic import BaseModel, Field

import config
from adapters import http
from models import DevtoolsError, ToolDefinition, ToolResponse, error_response, text_response


class PostInput(BaseModel):
    url: str = Field(min_length=1, description="The URL to send the POST request to")
    body: Any = Field(None, description="The request body (sent as JSON unless it is a string)")
    content_type: str | None = Field(None, description="Content-Type header (default: application/json)")
    headers: dict[str, str] | None = Field(None, description="Additional headers to include")
    without_authorization: bool = Field(False, description="Skip authorization header")
    query_params: dict[str, Any] | None = Field(None, description="Query parameters to append to URL")


async def handler(params: PostInput) -> ToolResponse:
    options = http.RequestOptions(
        url=params.url,
        method="POST",
        headers=params.headers or {},
        query_params=params.query_params,
        body=params.body,
        content_type=params.content_type,
        without_authorization=params.without_authorization,
    )
    try:
        result = await http.make_request(options, auth_token=config.rest_auth_token())
    except DevtoolsError as e:
        return error_response(f"Error: {e.message}")
    return text_response(json.dumps(result.to_dict(), indent=2, default=str))


tool = ToolDefinition(
    name="post",
    description="Make a POST request to an API endpoint",
    input_schema=PostInput,
    handler=handler,
)
