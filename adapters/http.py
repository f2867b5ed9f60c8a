"""
HTTP Adapter: REST requests for the rest tools.

Every status code is returned as a result so the agent sees 4xx/5xx bodies.
Only transport failures (connection refused, DNS, timeout) raise.
"""

from dataclasses import dataclass, field
from typing import Any

import httpx

import config
from logging_config import logger
from models import DevtoolsError, ErrorKind, HttpResult

__all__ = [
    "RequestOptions",
    "make_request",
    "authorization_header",
]

USER_AGENT = "devtools-mcp/1.0 (rest tools)"

# Methods that carry a request body
BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


@dataclass
class RequestOptions:
    url: str
    method: str
    headers: dict[str, str] = field(default_factory=dict)
    query_params: dict[str, Any] | None = None
    body: Any = None
    content_type: str | None = None
    without_authorization: bool = False


def authorization_header(token: str) -> str:
    """Bearer header value; tokens already carrying a scheme are kept as-is."""
    if token.lower().startswith("bearer "):
        return token
    return f"Bearer {token}"


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


async def make_request(
    options: RequestOptions,
    auth_token: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> HttpResult:
    """
    Send one HTTP request.

    Args:
        options: URL, method, headers, params, body
        auth_token: Bearer token (skipped when options.without_authorization)
        transport: Custom httpx transport (tests pass httpx.MockTransport)

    Returns:
        HttpResult for any status code

    Raises:
        DevtoolsError(TIMEOUT): Request timed out
        DevtoolsError(NETWORK_ERROR): Connection-level failure
    """
    method = options.method.upper()
    headers = {"User-Agent": USER_AGENT, **options.headers}

    if method in BODY_METHODS:
        headers["Content-Type"] = options.content_type or "application/json"

    if auth_token and not options.without_authorization:
        headers["Authorization"] = authorization_header(auth_token)

    request_kwargs: dict[str, Any] = {"headers": headers, "params": options.query_params}
    if method in BODY_METHODS and options.body is not None:
        if isinstance(options.body, (str, bytes)):
            request_kwargs["content"] = options.body
        else:
            request_kwargs["json"] = options.body

    logger.info(f"[Request] {method} {options.url}")
    try:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(config.rest_timeout()),
            follow_redirects=True,
            transport=transport,
        ) as client:
            response = await client.request(method, options.url, **request_kwargs)
    except httpx.TimeoutException as e:
        raise DevtoolsError(ErrorKind.TIMEOUT, f"Request timed out: {method} {options.url}") from e
    except httpx.RequestError as e:
        logger.error(f"[Network Error] {e}")
        raise DevtoolsError(ErrorKind.NETWORK_ERROR, f"Request failed: {e}") from e

    logger.info(f"[Response] Status: {response.status_code} {response.reason_phrase}")
    return HttpResult(
        status=response.status_code,
        status_text=response.reason_phrase,
        headers={k: v for k, v in response.headers.items()},
        data=_decode_body(response),
    )
