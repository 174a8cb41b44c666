"""Task registry mapping task names to task definitions."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from runtask.definitions import TaskDefinition
from runtask.exceptions import UnknownTaskError

logger = logging.getLogger(__name__)


class TaskRegistry:
    """
    Registry of named task definitions owned by a single engine.

    Registering a name that already exists overwrites the previous definition for subsequent
    run requests; plans that were already resolved keep the definitions they captured.
    """

    def __init__(self) -> None:
        self._definitions: dict[str, TaskDefinition] = {}

    def register(self, name: str, definition: Any) -> TaskDefinition:
        """
        Register (or overwrite) a task definition under `name`.

        Args:
            name: Unique task name.
            definition: A callable, an object exposing `execute`, or a list of task references.

        Returns:
            The tagged definition that was stored.
        """
        if not isinstance(name, str) or not name:
            raise TypeError(f"Task names must be non-empty strings, got {name!r}")

        task_definition = TaskDefinition.from_object(name, definition)
        if name in self._definitions:
            logger.debug(f"Overwriting task '{name}' as {task_definition.kind.value}")
        else:
            logger.debug(f"Registered task '{name}' as {task_definition.kind.value}")
        self._definitions[name] = task_definition
        return task_definition

    def lookup(self, name: str) -> TaskDefinition | None:
        """Return the definition registered under `name`, or None."""
        return self._definitions.get(name)

    def get(self, name: str) -> TaskDefinition:
        """
        Return the definition registered under `name`.

        Raises:
            UnknownTaskError: If no task is registered under `name`.
        """
        try:
            return self._definitions[name]
        except KeyError:
            raise UnknownTaskError(name) from None

    def names(self) -> list[str]:
        """Registered task names in registration order."""
        return list(self._definitions)

    def snapshot(self) -> Mapping[str, TaskDefinition]:
        """Read-only copy of the current definitions."""
        return MappingProxyType(dict(self._definitions))

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __iter__(self) -> Iterator[TaskDefinition]:
        return iter(list(self._definitions.values()))

    def __len__(self) -> int:
        return len(self._definitions)
