"""Uniform invocation of leaf task definitions."""

from __future__ import annotations

import asyncio
import inspect
import logging
import types
from collections.abc import Callable
from concurrent.futures import Future as ConcurrentFuture
from typing import Any

from runtask.definitions import CallbackTask
from runtask.definitions import TaskDefinition
from runtask.definitions import TaskKind

logger = logging.getLogger(__name__)

_POSITIONAL_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
    inspect.Parameter.VAR_POSITIONAL,
)


async def invoke(
    definition: TaskDefinition,
    data: Any,
    *,
    bind: Any = None,
    offload_sync: bool = False,
) -> Any:
    """
    Invoke a leaf task definition against the shared data value and wait for its outcome.

    Synchronous return values, awaitables and explicit `done` callbacks are all normalized into
    a single awaited result. Any other returned value is passed through unchanged.

    Args:
        definition: A `CALLABLE` or `CAPABILITY` task definition.
        data: Shared data value of the run; passed when the callable accepts a positional
            argument.
        bind: Optional receiver bound to plain functions as `self`. Capability objects and
            already-bound methods are never rebound. A plain function must then take the
            receiver and the data value as its first two positional parameters.
        offload_sync: Run synchronous callables in a worker thread instead of on the event loop.

    Returns:
        The task's result.

    Raises:
        TypeError: If `definition` is an alias, or `bind` is set and the function cannot take
            both the receiver and the data value.
        Exception: Whatever the task itself raises or reports.
    """
    if definition.kind is TaskKind.ALIAS:
        raise TypeError(f"Task '{definition.name}' is an alias and cannot be invoked directly")

    if definition.kind is TaskKind.CAPABILITY:
        func = definition.target.execute
    else:
        func = definition.target
        if bind is not None:
            func = bind_receiver(func, bind)

    if isinstance(func, CallbackTask):
        return await _invoke_with_callback(func, data)

    args = (data,) if accepts_data(func) else ()
    if offload_sync and not inspect.iscoroutinefunction(func):
        result = await asyncio.to_thread(func, *args)
    else:
        result = func(*args)

    return await materialize(result)


def bind_receiver(func: Any, receiver: Any) -> Any:
    """
    Bind `receiver` as the implicit `self` of a plain function; other objects are unchanged.

    Raises:
        TypeError: If the function has no positional parameter left for the data value (and
            the `done` callback of a `@callback_task`) once the receiver is bound.
    """
    if isinstance(func, CallbackTask):
        if not inspect.isfunction(func.func):
            return func
        _check_bindable(func.func, ("self", "data", "done"))
        return CallbackTask(func=types.MethodType(func.func, receiver))
    if inspect.isfunction(func):
        _check_bindable(func, ("self", "data"))
        return types.MethodType(func, receiver)
    return func


def _check_bindable(func: Callable[..., Any], expected: tuple[str, ...]) -> None:
    params = inspect.signature(func).parameters.values()
    if any(param.kind is inspect.Parameter.VAR_POSITIONAL for param in params):
        return
    positional = [param for param in params if param.kind in _POSITIONAL_KINDS]
    if len(positional) < len(expected):
        raise TypeError(
            f"Cannot bind a receiver to {func.__qualname__!r}: expected positional parameters "
            f"({', '.join(expected)}), got {len(positional)}"
        )


def accepts_data(func: Callable[..., Any]) -> bool:
    """Check whether `func` can take the shared data value as a positional argument."""
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        # builtins without signature metadata and non-callables: let the call decide
        return True
    return any(param.kind in _POSITIONAL_KINDS for param in signature.parameters.values())


async def materialize(result: Any) -> Any:
    """
    Wait for a task result that is still pending.

    Coroutines, asyncio futures and `concurrent.futures.Future` objects are awaited; every other
    value is returned as-is.
    """
    if isinstance(result, ConcurrentFuture):
        return await asyncio.wrap_future(result)
    if inspect.isawaitable(result):
        return await result
    return result


async def _invoke_with_callback(task: CallbackTask[Any, Any], data: Any) -> Any:
    """Call a `@callback_task` function and wait until it reports completion through `done`."""
    loop = asyncio.get_running_loop()
    future: asyncio.Future[Any] = loop.create_future()

    def _settle(error: Any, result: Any) -> None:
        if future.done():
            logger.debug("Ignoring repeated completion signal from callback task")
            return
        if error is None:
            future.set_result(result)
        elif isinstance(error, BaseException):
            future.set_exception(error)
        else:
            future.set_exception(RuntimeError(str(error)))

    def done(error: Any = None, result: Any = None) -> None:
        if loop.is_closed():
            logger.debug("Ignoring completion signal received after the run finished")
            return
        loop.call_soon_threadsafe(_settle, error, result)

    returned = task.func(data, done)
    if inspect.isawaitable(returned):
        await returned
    return await future
