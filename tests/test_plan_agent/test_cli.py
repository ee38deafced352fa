"""Tests for the plan-agent CLI."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from plan_agent import __version__
from plan_agent.cli import run as run_module
from plan_agent.cli.main import cli
from plan_agent.errors import StreamError
from plan_agent.llm.stub import StubTransport


@pytest.fixture()
def stub(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> list[StubTransport]:
    """Route the CLI to a stub transport and run it inside a scratch directory."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "app.py").write_text("print('hi')\n", encoding="utf-8")
    created: list[StubTransport] = []

    def factory(_config) -> StubTransport:
        transport = created[0] if created else StubTransport.from_text("1. Add import\n", "2. Insert log call\n")
        created[:] = [transport]
        return transport

    monkeypatch.setattr(run_module, "create_transport", factory)
    return created


class TestRun:
    def test_auto_approved_run(self, stub: list[StubTransport]) -> None:
        result = CliRunner().invoke(cli, ["run", "add logging", "--file", "app.py", "--yes", "--step-delay-ms", "0"])
        assert result.exit_code == 0, result.output
        assert "Starting agent for task: add logging" in result.output
        assert "Executing step 1: Add import" in result.output
        assert "Executing step 2: Insert log call" in result.output
        assert result.output.rstrip().endswith("Task completed successfully.")
        assert stub[0].closed

    def test_focused_file_is_sent_as_context(self, stub: list[StubTransport]) -> None:
        CliRunner().invoke(cli, ["run", "t", "--file", "app.py", "--yes", "--step-delay-ms", "0"])
        assert "File: app.py\n```\nprint('hi')\n\n```" in stub[0].requests[0].prompt

    def test_console_confirmation(self, stub: list[StubTransport]) -> None:
        result = CliRunner().invoke(cli, ["run", "add logging", "--step-delay-ms", "0"], input="y\n")
        assert result.exit_code == 0, result.output
        assert "Agent Plan" in result.output
        assert "Plan for: add logging" in result.output
        assert "Plan confirmed, executing..." in result.output

    def test_console_cancel(self, stub: list[StubTransport]) -> None:
        result = CliRunner().invoke(cli, ["run", "add logging", "--step-delay-ms", "0"], input="n\n")
        assert result.exit_code == 0, result.output
        assert "Executing step" not in result.output
        assert result.output.rstrip().endswith("Plan cancelled by the user.")

    def test_planning_failure_exits_nonzero(self, stub: list[StubTransport]) -> None:
        stub.append(StubTransport.failing(StreamError("upstream unavailable")))
        result = CliRunner().invoke(cli, ["run", "t", "--yes"])
        assert result.exit_code == 1
        assert "Agent planning failed: upstream unavailable" in result.output

    def test_missing_api_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("PLAN_AGENT_PROVIDER", "OPENAI_API_KEY", "ANTHROPIC_API_KEY"):
            monkeypatch.delenv(name, raising=False)
        result = CliRunner().invoke(cli, ["run", "t", "--provider", "openai", "--yes"])
        assert result.exit_code == 2
        assert "Configuration error: No API key configured for provider: openai" in result.output


class TestTools:
    def test_lists_capabilities(self) -> None:
        result = CliRunner().invoke(cli, ["tools"])
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert len(lines) == 7
        assert lines[0].startswith("list-directory")
        assert any(line.startswith("run-shell") for line in lines)


class TestVersion:
    def test_version(self) -> None:
        result = CliRunner().invoke(cli, ["--version"])
        assert __version__ in result.output
