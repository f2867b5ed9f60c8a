"""
Shared test helpers for devtools-mcp.

Tool-file sources for building throwaway tool trees, plus shortcuts for
reaching into a loaded tool's module.
"""

from __future__ import annotations

import sys
from contextlib import contextmanager
from types import ModuleType
from typing import Any, Iterator
from unittest.mock import AsyncMock, patch

from models import CommandResult
from registry import RegisteredTool


def valid_tool_source(name: str, description: str = "Echo text back") -> str:
    """A well-formed tool file: required `text`, optional `times`, records calls."""
    return f'''
from pydantic import BaseModel, Field

from models import ToolDefinition, text_response

CALLS = []


class EchoInput(BaseModel):
    text: str = Field(description="Text to echo")
    times: int = Field(1, ge=1)


async def handler(params):
    CALLS.append(params)
    return text_response(params.text * params.times)


tool = ToolDefinition(
    name="{name}",
    description="{description}",
    input_schema=EchoInput,
    handler=handler,
)
'''


SYNTAX_ERROR_SOURCE = "def broken(:\n    pass\n"

RAISES_ON_IMPORT_SOURCE = "raise RuntimeError('boom at import')\n"

EXITS_ON_IMPORT_SOURCE = "import sys\nsys.exit(2)\n"

NO_TOOL_SOURCE = "VALUE = 1\n"

DICT_TOOL_SOURCE = "tool = {'name': 'dict_tool', 'description': 'not an object'}\n"

UNCALLABLE_HANDLER_SOURCE = '''
from types import SimpleNamespace

from pydantic import BaseModel


class Empty(BaseModel):
    pass


tool = SimpleNamespace(
    name="no_handler",
    description="Handler is a string",
    input_schema=Empty,
    handler="not callable",
)
'''

RAISING_NAME_SOURCE = '''
class Exploding:
    description = "Name property raises"
    input_schema = dict
    handler = staticmethod(lambda params: None)

    @property
    def name(self):
        raise RuntimeError("boom")


tool = Exploding()
'''

LAZY_TOOL_RAISES_SOURCE = '''
def __getattr__(name):
    raise RuntimeError(f"cannot build {name}")
'''

DICT_SCHEMA_SOURCE = '''
from models import ToolDefinition, text_response


async def handler(params):
    return text_response("unreachable")


tool = ToolDefinition(
    name="dict_schema",
    description="JSON schema dict instead of a model",
    input_schema={"type": "object", "properties": {"q": {"type": "string"}}},
    handler=handler,
)
'''

HYPHENATED_FIELD_SOURCE = '''
from pydantic.fields import FieldInfo

from models import ToolDefinition, text_response


class HyphenSchema:
    def validate(self, raw):
        return dict(raw)

    def shape(self):
        return {"max-results": FieldInfo(annotation=int)}


async def handler(params):
    return text_response("unreachable")


tool = ToolDefinition(
    name="hyphenated",
    description="Field name that can't be a keyword argument",
    input_schema=HyphenSchema(),
    handler=handler,
)
'''

ERROR_RESPONSE_SOURCE = '''
from pydantic import BaseModel

from models import ToolDefinition, error_response


class Empty(BaseModel):
    pass


async def handler(params):
    return error_response("it went wrong")


tool = ToolDefinition(name="fails", description="Always reports failure", input_schema=Empty, handler=handler)
'''


def tool_module(entry: RegisteredTool) -> ModuleType:
    """The module a registered tool was loaded from."""
    return sys.modules[entry.definition.handler.__module__]


def command_result(stdout: str = "", stderr: str = "", exit_code: int = 0, argv: list[str] | None = None) -> CommandResult:
    return CommandResult(argv=argv or [], exit_code=exit_code, stdout=stdout, stderr=stderr)


@contextmanager
def mock_cli(result: CommandResult | None = None, *, side_effect: Any = None) -> Iterator[AsyncMock]:
    """Patch the process adapter so docker/git tools never exec anything.

    require_binary returns the bare name, so argv[0] is "docker" / "git".
    Yields the run_command mock for argv assertions.
    """
    run = AsyncMock(return_value=result if result is not None else command_result())
    if side_effect is not None:
        run.side_effect = side_effect
    with patch("adapters.process.require_binary", side_effect=lambda name: name), \
         patch("adapters.process.run_command", run):
        yield run
