from __future__ import annotations

import click

import runtask
from runtask.cli.cmd_list import list_tasks
from runtask.cli.cmd_run import run


@click.group(context_settings={"help_option_names": ["-h", "--help"], "max_content_width": 120})
@click.version_option(version=runtask.__version__)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Runtask - Run named tasks in series and in parallel."""


cli.add_command(run)
cli.add_command(list_tasks)
