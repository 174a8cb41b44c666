"""CLI ``list`` command for inspecting the tasks registered on a runner."""

from __future__ import annotations

from typing import Any

import click

from runtask.cli._shared import load_runner
from runtask.definitions import TaskKind


@click.command("list")
@click.argument("runner")
def list_tasks(runner: str) -> None:
    r"""
    List the tasks registered on a runner.

    RUNNER should be a dotted path to a RunTask instance, e.g. 'myproject.tasks.runner'.

    Examples:
    \b
    # List all tasks
    runtask list myproject.tasks.runner
    """
    try:
        runner_obj = load_runner(runner)
    except (ValueError, ModuleNotFoundError, AttributeError, TypeError) as e:
        raise click.ClickException(str(e)) from e

    definitions = list(runner_obj.registry)
    if not definitions:
        click.echo("No tasks registered.")
        return

    col_width = max(max(len(definition.name) for definition in definitions), 20)
    for definition in definitions:
        if definition.kind is TaskKind.ALIAS:
            detail = f"alias -> {_as_list(definition.target)!r}"
        else:
            detail = definition.kind.value
        click.echo(f"{definition.name:<{col_width}}  {detail}")


def _as_list(body: Any) -> Any:
    if isinstance(body, tuple):
        return [_as_list(item) for item in body]
    return body
