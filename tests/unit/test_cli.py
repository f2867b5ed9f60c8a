"""
Tests for the command-line interface.
"""

import json
from unittest.mock import patch

import pytest

import cli
from tests.helpers import ERROR_RESPONSE_SOURCE, valid_tool_source


@pytest.fixture(autouse=True)
def no_log_handlers():
    """Keep configure_logging from binding a handler to captured stderr."""
    with patch("cli.configure_logging"):
        yield


class TestList:

    def test_lists_profile_tools(self, capsys) -> None:
        cli.main(["list", "examples"])

        tools = json.loads(capsys.readouterr().out)
        assert [t["name"] for t in tools] == ["examples_hello_world"]
        assert tools[0]["params"] == ["name", "language"]
        assert tools[0]["category"] == "examples"

    def test_tools_dir_override(self, tool_tree, capsys) -> None:
        tool_tree("echo.py", valid_tool_source("echo"))

        cli.main(["list", "rest", "--tools-dir", str(tool_tree.root), "--prefix", ""])

        assert [t["name"] for t in json.loads(capsys.readouterr().out)] == ["echo"]

    def test_unknown_profile_rejected_by_parser(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["list", "kubernetes"])
        assert exc_info.value.code == 2


class TestCall:

    def test_call_by_short_name(self, capsys) -> None:
        cli.main(["call", "examples", "hello_world", "--args", '{"name": "Ada", "language": "de"}'])
        assert capsys.readouterr().out.startswith("Hallo, Ada!")

    def test_call_by_qualified_name(self, capsys) -> None:
        cli.main(["call", "examples", "examples_hello_world"])
        assert capsys.readouterr().out.startswith("Hello, World!")

    def test_unknown_tool(self, capsys) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["call", "examples", "goodbye"])
        assert exc_info.value.code == 1
        assert "Unknown tool: goodbye" in capsys.readouterr().err

    def test_bad_json(self, capsys) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["call", "examples", "hello_world", "--args", "{nope"])
        assert exc_info.value.code == 1
        assert "not valid JSON" in capsys.readouterr().err

    def test_invalid_input(self, capsys) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["call", "examples", "hello_world", "--args", '{"language": "xx"}'])

        assert exc_info.value.code == 1
        error = json.loads(capsys.readouterr().err)
        assert error["kind"] == "invalid_input"
        assert error["message"].startswith("Invalid input for examples_hello_world")

    def test_error_response_exits_nonzero(self, tool_tree, capsys) -> None:
        tool_tree("fails.py", ERROR_RESPONSE_SOURCE)

        with pytest.raises(SystemExit) as exc_info:
            cli.main(["call", "git", "fails", "--tools-dir", str(tool_tree.root)])

        assert exc_info.value.code == 1
        assert "it went wrong" in capsys.readouterr().out


class TestServe:

    def test_serve_delegates_to_server(self) -> None:
        with patch("server.serve") as mock_serve:
            cli.main(["serve", "docker", "--prefix", "d"])
        mock_serve.assert_called_once_with("docker", tools_dir=None, prefix="d")
