"""
Tests for the git tool tree, with the process adapter mocked.
"""

import pytest

from models import DevtoolsError, ErrorKind
from registry import ToolRegistry
from tests.helpers import command_result, mock_cli

NOT_A_REPO = command_result(
    stderr="fatal: not a git repository (or any of the parent directories): .git", exit_code=128
)


class TestGitTree:

    def test_all_tools_load(self, git_registry: ToolRegistry) -> None:
        assert list(git_registry.get_all_tools()) == [
            "git_checkout", "git_commit", "git_log", "git_add", "git_status",
        ]

    @pytest.mark.asyncio
    async def test_runs_in_configured_repo(self, git_registry: ToolRegistry, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GIT_REPO_PATH", "/srv/repo")
        with mock_cli(command_result(stdout="## main")) as run:
            await git_registry.get("git_status").call({})
        assert run.await_args.kwargs["cwd"] == "/srv/repo"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tool,arguments", [
        ("git_status", {}),
        ("git_log", {}),
        ("git_add", {"paths": ["."]}),
        ("git_commit", {"message": "m"}),
        ("git_checkout", {"target": "main"}),
    ])
    async def test_not_a_repository(self, git_registry: ToolRegistry, tool: str, arguments: dict) -> None:
        with mock_cli(NOT_A_REPO):
            result = await git_registry.get(tool).call(arguments)

        assert result.is_error
        assert result.text == "Error: Not in a git repository"


class TestStatus:

    @pytest.mark.asyncio
    async def test_default_args(self, git_registry: ToolRegistry) -> None:
        with mock_cli(command_result(stdout="## main\n M file.py")) as run:
            result = await git_registry.get("git_status").call({})

        assert run.await_args.args[0] == ["git", "status", "-b"]
        assert result.text == "## main\n M file.py"

    @pytest.mark.asyncio
    async def test_porcelain_skips_branch(self, git_registry: ToolRegistry) -> None:
        with mock_cli(command_result()) as run:
            result = await git_registry.get("git_status").call({"porcelain": True, "untracked": "no"})

        assert run.await_args.args[0] == ["git", "status", "--porcelain=v1", "-uno"]
        assert result.text == "Working tree clean"


class TestLog:

    @pytest.mark.asyncio
    async def test_default_args(self, git_registry: ToolRegistry) -> None:
        with mock_cli(command_result(stdout="abc - Ada (2 days ago)")) as run:
            await git_registry.get("git_log").call({})

        argv = run.await_args.args[0]
        assert argv[:4] == ["git", "log", "-n", "20"]
        assert argv[4].startswith("--pretty=format:%H - %an")

    @pytest.mark.asyncio
    async def test_filters_and_branch(self, git_registry: ToolRegistry) -> None:
        with mock_cli(command_result(stdout="abc")) as run:
            await git_registry.get("git_log").call(
                {"count": 5, "format": "oneline", "author": "ada", "grep": "fix", "branch": "dev"}
            )

        assert run.await_args.args[0] == [
            "git", "log", "-n", "5", "--oneline", "--author=ada", "--grep=fix", "dev", "--",
        ]

    @pytest.mark.asyncio
    async def test_fresh_repository(self, git_registry: ToolRegistry) -> None:
        fresh = command_result(
            stderr="fatal: your current branch 'main' does not have any commits yet", exit_code=128
        )
        with mock_cli(fresh):
            result = await git_registry.get("git_log").call({})

        assert not result.is_error
        assert result.text == "No commits found"

    @pytest.mark.asyncio
    async def test_count_bounds(self, git_registry: ToolRegistry) -> None:
        with pytest.raises(DevtoolsError) as exc_info:
            await git_registry.get("git_log").call({"count": 0})
        assert exc_info.value.kind == ErrorKind.INVALID_INPUT


class TestAdd:

    @pytest.mark.asyncio
    async def test_paths_after_separator(self, git_registry: ToolRegistry) -> None:
        with mock_cli(command_result(stdout="add 'a.py'")) as run:
            await git_registry.get("git_add").call({"paths": ["a.py", "-weird-name"], "force": True})

        assert run.await_args.args[0] == ["git", "add", "--verbose", "-f", "--", "a.py", "-weird-name"]

    @pytest.mark.asyncio
    async def test_no_changes(self, git_registry: ToolRegistry) -> None:
        with mock_cli(command_result()):
            result = await git_registry.get("git_add").call({"paths": ["a.py"], "dry_run": True})
        assert result.text == "Would add: a.py (no changes)"

    @pytest.mark.asyncio
    async def test_paths_required(self, git_registry: ToolRegistry) -> None:
        with pytest.raises(DevtoolsError):
            await git_registry.get("git_add").call({"paths": []})


class TestCommit:

    @pytest.mark.asyncio
    async def test_args(self, git_registry: ToolRegistry) -> None:
        with mock_cli(command_result(stdout="[main abc123] msg")) as run:
            result = await git_registry.get("git_commit").call(
                {"message": "Fix bug", "all": True, "author": "Ada <ada@example.com>", "signoff": True}
            )

        assert run.await_args.args[0] == [
            "git", "commit", "-m", "Fix bug", "-a", "--author=Ada <ada@example.com>", "--signoff",
        ]
        assert result.text == "[main abc123] msg"

    @pytest.mark.asyncio
    async def test_nothing_to_commit(self, git_registry: ToolRegistry) -> None:
        with mock_cli(command_result(stdout="nothing to commit, working tree clean", exit_code=1)):
            result = await git_registry.get("git_commit").call({"message": "m"})

        assert result.is_error
        assert result.text.startswith("Nothing to commit")

    @pytest.mark.asyncio
    async def test_empty_message_rejected(self, git_registry: ToolRegistry) -> None:
        with pytest.raises(DevtoolsError):
            await git_registry.get("git_commit").call({"message": ""})


class TestCheckout:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("arguments,expected", [
        ({"target": "main"}, ["git", "checkout", "main"]),
        ({"target": "feature", "create": True}, ["git", "checkout", "-b", "feature"]),
        ({"target": "abc123", "detach": True, "force": True}, ["git", "checkout", "-f", "--detach", "abc123"]),
        ({"target": "pages", "orphan": True}, ["git", "checkout", "--orphan", "pages"]),
    ])
    async def test_args(self, git_registry: ToolRegistry, arguments: dict, expected: list[str]) -> None:
        with mock_cli(command_result(stderr="Switched to branch")) as run:
            result = await git_registry.get("git_checkout").call(arguments)

        assert run.await_args.args[0] == expected
        assert result.text == "Switched to branch"

    @pytest.mark.asyncio
    async def test_modes_are_exclusive(self, git_registry: ToolRegistry) -> None:
        with mock_cli() as run:
            with pytest.raises(DevtoolsError) as exc_info:
                await git_registry.get("git_checkout").call({"target": "x", "create": True, "detach": True})

        assert "mutually exclusive" in exc_info.value.message
        run.assert_not_awaited()
