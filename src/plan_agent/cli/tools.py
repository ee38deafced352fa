"""CLI command: plan-agent tools -- list the step capabilities."""

from __future__ import annotations

import click

from plan_agent.tools import default_tool_registry


@click.command()
def tools() -> None:
    """List the tool capabilities a step may use."""
    registry = default_tool_registry()
    width = max(len(name) for name in registry.names())
    for definition in registry.definitions():
        click.echo(f"{definition.name:<{width}}  {definition.description}")
