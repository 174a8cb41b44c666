"""Task definitions and task references."""

from __future__ import annotations

import enum
import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, ParamSpec, TypeAlias, TypeVar

from typing_extensions import Self, TypeIs

from runtask.exceptions import InvalidSpecificationError

P = ParamSpec("P")
R = TypeVar("R")

TaskReference: TypeAlias = "str | tuple[TaskReference, ...]"
"""A task name, or a nested group of task references."""


class TaskKind(enum.Enum):
    """Kind of a registered task definition."""

    CALLABLE = "callable"
    """A plain callable invoked with the shared data value."""

    CAPABILITY = "capability"
    """An object exposing an `execute` method invoked with the shared data value."""

    ALIAS = "alias"
    """An ordered group of task references stored under a name."""


@dataclass(frozen=True)
class CallbackTask(Generic[P, R]):
    """
    Task callable that signals completion through an explicit `done` callback.

    Users should **not** directly instantiate this class, use the `@callback_task` decorator
    instead.
    """

    func: Callable[..., Any]
    """Wrapped function, called as `func(data, done)`."""

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self.func(*args, **kwargs)


def callback_task(func: Callable[..., Any]) -> CallbackTask[Any, Any]:
    """
    Decorator marking a function that reports completion by calling `done`.

    The wrapped function receives the shared data value and a `done(error=None, result=None)`
    callable. The run waits until `done` is called; passing an `error` fails the task. `done`
    may be called from any thread, only the first call is honoured.

    Examples:
        >>> from runtask import RunTask, callback_task
        >>> @callback_task
        ... def fetch(data, done):
        ...     data["fetched"] = True
        ...     done(result="ok")
        >>> runner = RunTask()
        >>> runner.register("fetch", fetch)
        >>> runner.run("fetch")
        'ok'
    """
    if inspect.isclass(func) or not callable(func):
        raise TypeError("`@callback_task` can only be applied to callable functions.")
    return CallbackTask(func=func)


@dataclass(frozen=True)
class TaskDefinition:
    """A registry entry: a leaf callable, a capability object, or an alias."""

    name: str
    """Name the definition is registered under."""

    kind: TaskKind
    """Tag used by the scheduler to decide how the definition is executed."""

    target: Any
    """The callable, the capability object, or a tuple copy of the alias body."""

    @classmethod
    def from_object(cls, name: str, obj: Any) -> Self:
        """
        Classify a registered object into a task definition.

        Args:
            name: Name the object is registered under.
            obj: A callable, an object with an `execute` method, or a list/tuple of task
                references.

        Returns:
            Tagged task definition. Alias bodies are copied into nested tuples, so later changes
            to the registered list have no effect. The shape of alias bodies and leaf objects is
            not validated here; malformed entries fail when they are resolved or invoked.
        """
        if isinstance(obj, (list, tuple)):
            return cls(name=name, kind=TaskKind.ALIAS, target=_freeze(obj))
        if _is_capability(obj):
            return cls(name=name, kind=TaskKind.CAPABILITY, target=obj)
        return cls(name=name, kind=TaskKind.CALLABLE, target=obj)

    @property
    def is_alias(self) -> bool:
        return self.kind is TaskKind.ALIAS

    @property
    def body(self) -> tuple[TaskReference, ...]:
        """Normalized alias body."""
        if not self.is_alias:
            raise TypeError(f"Task '{self.name}' is not an alias")
        return tuple(normalize_reference(ref) for ref in self.target)


def normalize_reference(ref: Any) -> TaskReference:
    """
    Convert a task reference into its immutable form.

    Strings are kept as-is, lists and tuples become tuples (recursively).

    Raises:
        InvalidSpecificationError: If `ref` (or any nested element) is neither a string nor a
            list/tuple.
    """
    if isinstance(ref, str):
        return ref
    if isinstance(ref, (list, tuple)):
        return tuple(normalize_reference(item) for item in ref)
    raise InvalidSpecificationError(
        f"Invalid task reference {ref!r}; expected a task name or a list of task references"
    )


def _freeze(body: Any) -> Any:
    if isinstance(body, (list, tuple)):
        return tuple(_freeze(item) for item in body)
    return body


def _is_capability(obj: Any) -> bool:
    if inspect.isclass(obj) or inspect.isroutine(obj) or isinstance(obj, CallbackTask):
        return False
    return callable(getattr(obj, "execute", None))


def is_group(ref: TaskReference) -> TypeIs[tuple[TaskReference, ...]]:
    """Check if a normalized task reference is a group rather than a task name."""
    return isinstance(ref, tuple)
