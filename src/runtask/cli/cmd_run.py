"""CLI ``run`` command for executing tasks of a runner."""

from __future__ import annotations

import dataclasses

import click

from runtask.cli._shared import load_runner
from runtask.cli._shared import parse_data
from runtask.cli._shared import parse_settings_overrides
from runtask.cli._shared import parse_task_spec
from runtask.exceptions import RunTaskError


@click.command()
@click.argument("runner")
@click.argument("tasks", nargs=-1, required=True, metavar="TASK [TASK...]")
@click.option(
    "--data",
    "-d",
    multiple=True,
    help="Shared data entry in format 'name=value' (JSON literals are decoded). "
    "Can be specified multiple times.",
)
@click.option(
    "--settings",
    "-s",
    multiple=True,
    help="Setting override in format 'name=value'. Can be specified multiple times.",
)
@click.option("--verbose", "-v", is_flag=True, help="Log task lifecycle events to stderr.")
def run(
    runner: str,
    tasks: tuple[str, ...],
    data: tuple[str, ...],
    settings: tuple[str, ...],
    verbose: bool,
) -> None:
    r"""
    Run tasks registered on a runtask runner.

    RUNNER should be a dotted path to a RunTask instance, e.g. 'myproject.tasks.runner'.
    Several TASK arguments run in series; a comma separated TASK (e.g. 'a,b') runs its
    members concurrently.

    Examples:
    \b
    # Run a single task or alias
    runtask run myproject.tasks.runner build

    \b
    # Run 'clean', then 'lint' and 'test' concurrently, then 'package'
    runtask run myproject.tasks.runner clean lint,test package

    \b
    # Pass shared data and settings
    runtask run myproject.tasks.runner deploy --data env=prod --data replicas=3
    --settings offload_sync_tasks=true
    """
    try:
        runner_obj = load_runner(runner)
    except (ValueError, ModuleNotFoundError, AttributeError, TypeError) as e:
        raise click.ClickException(str(e)) from e

    spec = parse_task_spec(tasks)
    shared_data = parse_data(data)

    overrides = parse_settings_overrides(settings)
    if overrides:
        try:
            runner_obj.settings = dataclasses.replace(runner_obj.settings, **overrides)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--settings") from e

    if verbose:
        _setup_cli_plugins()

    click.echo(f"Running {spec!r} on '{runner}'")
    if shared_data:
        click.echo(f"Data: {shared_data}")

    try:
        result = runner_obj.run(spec, shared_data)
    except RunTaskError as e:
        raise click.ClickException(str(e)) from e

    if result is not None:
        click.echo(f"Result: {result!r}")
    click.echo("Done")


def _setup_cli_plugins() -> None:
    """Register the lifecycle logging plugin with the bundled console configuration."""
    from runtask.plugins.default import LifecycleLoggingPlugin
    from runtask.plugins.manager import register_plugins

    config = LifecycleLoggingPlugin.default_config()
    register_plugins(LifecycleLoggingPlugin(config=config))
