"""Plan Agent CLI entry point: Click group with subcommands."""

import click

from plan_agent import __version__


@click.group()
@click.version_option(version=__version__, prog_name="plan-agent")
def cli() -> None:
    """Plan Agent - plan a coding task with an LLM, confirm it, run it step by step."""


from plan_agent.cli.run import run  # noqa: E402
from plan_agent.cli.tools import tools  # noqa: E402

cli.add_command(run)
cli.add_command(tools)
