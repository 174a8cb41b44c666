"""Utility functions for CLI argument parsing and runner loading."""

import importlib
import json
import sys
import types
import typing
from pathlib import Path
from typing import TYPE_CHECKING, Any, Union, get_args, get_origin

import click

if TYPE_CHECKING:
    from runtask.engine import RunTask


def load_runner(runner_path: str) -> "RunTask":
    """
    Load a `RunTask` instance from a module path.

    Args:
        runner_path: Dotted path to the runner (e.g., 'mymodule.runner').

    Returns:
        The loaded RunTask instance.

    Raises:
        ValueError: If the runner path is invalid.
        ModuleNotFoundError: If the module cannot be found.
        AttributeError: If the runner attribute does not exist in the module.
        TypeError: If the loaded object is not a RunTask instance.
    """
    from runtask.engine import RunTask

    if "." not in runner_path:
        raise ValueError(
            f"Invalid runner path: '{runner_path}'. Expected format: 'module.runner_name'"
        )

    module_path, attr_name = runner_path.rsplit(".", 1)

    # Add current directory to Python path if not already there
    cwd = str(Path.cwd())
    if cwd not in sys.path:  # pragma: no cover
        sys.path.insert(0, cwd)

    module = importlib.import_module(module_path)

    if not hasattr(module, attr_name):
        raise AttributeError(f"Runner '{attr_name}' not found in module '{module_path}'")

    runner = getattr(module, attr_name)

    if not isinstance(runner, RunTask):
        raise TypeError(f"'{runner_path}' is not a RunTask instance.")

    return runner


def parse_task_spec(tasks: tuple[str, ...]) -> Any:
    """
    Build a task specification from CLI task arguments.

    A single argument is passed through as a task name. Several arguments form a series, and an
    argument containing commas (`a,b`) becomes a group whose members run concurrently.
    """
    if len(tasks) == 1 and "," not in tasks[0]:
        return tasks[0]

    spec: list[Any] = []
    for item in tasks:
        names = [name.strip() for name in item.split(",") if name.strip()]
        if not names:
            raise click.BadParameter(f"Invalid task argument: '{item}'")
        spec.append(names if "," in item else names[0])
    return spec


def parse_data_value(value: str) -> Any:
    """Parse a data value as a JSON literal, falling back to the raw string."""
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value


def parse_data(data: tuple[str, ...]) -> dict[str, Any]:
    """
    Parse `--data` strings into the shared data dict.

    Raises:
        click.BadParameter: For entries not in `name=value` format.
    """
    values: dict[str, Any] = {}
    for item in data:
        if "=" not in item:
            raise click.BadParameter(f"Invalid data format: '{item}'. Expected 'name=value'")
        name, value = item.split("=", 1)
        values[name] = parse_data_value(value)
    return values


def parse_param_value(value: str, param_type: type | None) -> Any:
    """
    Parse a parameter value string into the appropriate type.

    Args:
        value: String value to parse.
        param_type: Target type to convert to, or None for string.

    Returns:
        Parsed value in the appropriate type.

    Raises:
        ValueError: If the value cannot be converted to the target type.
    """
    if param_type is None or param_type is str:
        return value
    if param_type is bool:
        return value.lower() in ("true", "1", "yes", "y")
    if param_type is int:
        try:
            return int(value)
        except ValueError as e:
            raise ValueError(f"Cannot convert '{value}' to int") from e
    return param_type(value)


def parse_settings_overrides(settings: tuple[str, ...]) -> dict[str, Any]:
    """
    Parse `--settings` override strings into a validated dict.

    Each entry must be in `name=value` format and must correspond to a known field on
    `RunTaskSettings`. Values are coerced to the field's declared type.

    Raises:
        click.BadParameter: For malformed entries, unknown names, or bad values.
    """
    from runtask.settings import RunTaskSettings

    overrides: dict[str, Any] = {}
    fields = RunTaskSettings.__dataclass_fields__
    type_hints = typing.get_type_hints(RunTaskSettings)

    for s in settings:
        if "=" not in s:
            raise click.BadParameter(f"Invalid setting format: '{s}'. Expected 'name=value'")

        setting_name, setting_value = s.split("=", 1)

        if setting_name not in fields:
            raise click.BadParameter(
                f"Unknown setting: '{setting_name}'. Available settings: {', '.join(fields)}"
            )

        field_type = type_hints[setting_name]
        # For optional types (e.g. int | None), use the first concrete type
        if get_origin(field_type) is Union or isinstance(field_type, types.UnionType):
            field_type = get_args(field_type)[0]
        try:
            overrides[setting_name] = parse_param_value(setting_value, field_type)
        except ValueError as e:
            raise click.BadParameter(
                f"Invalid value for setting '{setting_name}': '{setting_value}'. {e}"
            ) from e

    return overrides
