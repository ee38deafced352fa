"""CLI command: plan-agent run -- plan a task, confirm it, execute the steps."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from plan_agent.config import AgentConfig
from plan_agent.errors import ConfigurationError
from plan_agent.files import LocalFileReader
from plan_agent.gate import AutoApprovePresenter, ConsolePresenter, PlanPresenter
from plan_agent.llm import create_transport
from plan_agent.models import UNTITLED, Artifact
from plan_agent.orchestrator import Orchestrator


def _focus_provider(reader: LocalFileReader, path: str | None):
    """Return a callable reading the focused file's live content at collection time."""

    def current() -> Artifact:
        if path is None:
            return Artifact(identifier=UNTITLED)
        return Artifact(
            identifier=path,
            content=reader.read_all(path) or "",
            handle=Path(reader.working_directory, path).resolve(),
        )

    return current


@click.command()
@click.argument("task")
@click.option(
    "--file", "file_paths", multiple=True,
    help="Extra file to include as context (repeatable).",
)
@click.option("--focus", default=None, help="The file being worked on. Defaults to the first --file.")
@click.option(
    "--provider", type=click.Choice(["anthropic", "openai", "stub"]), default=None,
    help="LLM provider. Defaults to PLAN_AGENT_PROVIDER or the first API key found.",
)
@click.option("--model", default=None, help="Model name. Defaults to the provider's default.")
@click.option("--step-delay-ms", type=int, default=None, help="Pause between steps in milliseconds.")
@click.option("--yes", "auto_approve", is_flag=True, help="Confirm the plan without asking.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def run(
    task: str,
    file_paths: tuple[str, ...],
    focus: str | None,
    provider: str | None,
    model: str | None,
    step_delay_ms: int | None,
    auto_approve: bool,
    verbose: bool,
) -> None:
    """Plan TASK with the LLM, show the plan, and run its steps once confirmed."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = AgentConfig.from_env(provider=provider, model=model, step_delay_ms=step_delay_ms)
    try:
        transport = create_transport(config)
    except ConfigurationError as exc:
        click.echo(f"Configuration error: {exc}", err=True)
        sys.exit(2)

    reader = LocalFileReader()
    focus_path = focus or (file_paths[0] if file_paths else None)
    presenter: PlanPresenter = AutoApprovePresenter() if auto_approve else ConsolePresenter()
    orchestrator = Orchestrator(
        transport,
        presenter,
        reader=reader,
        focus=_focus_provider(reader, focus_path),
        config=config,
    )

    outcome: dict[str, str | None] = {}

    def on_complete(result: str | None, error: str | None) -> None:
        outcome["result"] = result
        outcome["error"] = error

    accepted, reason = orchestrator.run(task, list(file_paths), on_log=click.echo, on_complete=on_complete)
    if not accepted:
        click.echo(f"Rejected: {reason}", err=True)
        sys.exit(1)

    try:
        orchestrator.wait()
    except KeyboardInterrupt:
        orchestrator.cancel()
        orchestrator.wait()
    finally:
        transport.close()

    if outcome.get("error"):
        click.echo(outcome["error"], err=True)
        sys.exit(1)
    click.echo(outcome.get("result") or "")
