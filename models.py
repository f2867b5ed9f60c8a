"""
Type definitions for devtools-mcp.

Dataclasses defining the contracts between layers:
- Tool files build a ToolDefinition and expose it as module-level `tool`
- The registry wraps each definition into a RegisteredTool
- Handlers return ToolResponse, which the server converts for MCP
- Adapters return CommandResult / HttpResult

These types make the tool→registry→server contract explicit and IDE-checkable.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Mapping


# ============================================================================
# ERROR TYPES
# ============================================================================

class ErrorKind(Enum):
    """Categories of errors for consistent handling."""
    MODULE_LOAD = "module_load"                # Tool file failed to import
    INVALID_TOOL_SHAPE = "invalid_tool_shape"  # Module has no usable `tool`
    DIRECTORY_READ = "directory_read"          # Tool tree couldn't be listed
    DUPLICATE_TOOL = "duplicate_tool"          # Qualified name already taken
    INVALID_INPUT = "invalid_input"            # Call arguments failed the schema
    HANDLER_FAILED = "handler_failed"          # Tool handler raised
    COMMAND_NOT_FOUND = "command_not_found"    # docker/git not on PATH
    TIMEOUT = "timeout"                        # Command or request timed out
    NETWORK_ERROR = "network_error"            # HTTP connection failed
    UNKNOWN = "unknown"                        # Unexpected error


class DevtoolsError(Exception):
    """
    Structured error for consistent handling across layers.

    The loader records these for skipped modules.
    Wrapped handlers raise them for call-level failures.
    Adapters raise them; tool bodies catch and report.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for CLI / MCP output."""
        return {
            "error": True,
            "kind": self.kind.value,
            "message": self.message,
            **self.details,
        }


# ============================================================================
# TOOL RESPONSE
# ============================================================================

@dataclass
class TextContent:
    """A single content block returned to the calling agent."""
    text: str
    type: str = "text"

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type, "text": self.text}


@dataclass
class ToolResponse:
    """
    What every tool handler returns.

    A sequence of content blocks plus an optional error flag. Handlers may
    also return the plain-dict form ({"content": [...], "isError": bool});
    use coerce() to normalise either.
    """
    content: list[TextContent] = field(default_factory=list)
    is_error: bool = False

    @property
    def text(self) -> str:
        """All text blocks joined, for logs and CLI output."""
        return "".join(block.text for block in self.content)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"content": [c.to_dict() for c in self.content]}
        if self.is_error:
            result["isError"] = True
        return result

    @classmethod
    def coerce(cls, value: Any) -> "ToolResponse":
        """
        Normalise a handler result into a ToolResponse.

        Accepts a ToolResponse, a mapping with a `content` list, or a bare
        string (treated as a single text block).

        Raises:
            TypeError: If the value has none of those forms
        """
        if isinstance(value, ToolResponse):
            return value
        if isinstance(value, str):
            return cls(content=[TextContent(text=value)])
        if isinstance(value, Mapping) and isinstance(value.get("content"), list):
            blocks = []
            for block in value["content"]:
                if isinstance(block, TextContent):
                    blocks.append(block)
                elif isinstance(block, Mapping):
                    blocks.append(TextContent(
                        text=str(block.get("text", "")),
                        type=str(block.get("type", "text")),
                    ))
                else:
                    blocks.append(TextContent(text=str(block)))
            return cls(content=blocks, is_error=bool(value.get("isError", False)))
        raise TypeError(f"Not a tool response: {type(value).__name__}")


def text_response(*texts: str) -> ToolResponse:
    """Successful response with one text block per argument."""
    return ToolResponse(content=[TextContent(text=t) for t in texts])


def error_response(message: str) -> ToolResponse:
    """Error response: the call completed but the tool reports failure."""
    return ToolResponse(content=[TextContent(text=message)], is_error=True)


# ============================================================================
# TOOL DEFINITION
# ============================================================================

ToolHandler = Callable[[Any], Awaitable[ToolResponse] | ToolResponse]


@dataclass(frozen=True)
class ToolDefinition:
    """
    Static description of one tool, exposed by a tool file as `tool`.

    input_schema is usually a pydantic model class. Anything
    validation.parse_input() understands works (TypeAdapter, or an object
    implementing the InputSchema protocol).

    category/subcategory are cosmetic. When omitted, the registry derives
    them from the file's location in the tool tree.
    """
    name: str
    description: str
    input_schema: Any
    handler: ToolHandler
    category: str | None = None
    subcategory: str | None = None
    version: str = "1.0.0"


# ============================================================================
# ADAPTER RESULTS
# ============================================================================

@dataclass
class CommandResult:
    """Outcome of running an external command (docker, git, ...)."""
    argv: list[str]
    exit_code: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    @property
    def output(self) -> str:
        """stdout on success, stderr (falling back to stdout) on failure."""
        if self.ok:
            return self.stdout
        return self.stderr or self.stdout

    @property
    def command(self) -> str:
        return " ".join(self.argv)


@dataclass
class HttpResult:
    """Response from the REST adapter. Any status code is a result, not an error."""
    status: int
    status_text: str
    headers: dict[str, str]
    data: Any

    def to_dict(self) -> dict[str, Any]:
        return {
            "response": self.data,
            "status": self.status,
            "statusText": self.status_text,
            "headers": self.headers,
        }
