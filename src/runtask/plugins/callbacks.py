"""Adapter exposing plain `on_start` / `on_finish` callables as hook implementations."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from runtask.plugins.hooks.markers import hook_impl

StartCallback = Callable[[str, Any], None]
FinishCallback = Callable[[str, Any, Any], None]


class CallbackPlugin:
    """
    Plugin forwarding leaf task events to user supplied callables.

    `on_finish` is called on success and on failure; when the task failed, `result` is None.

    Args:
        on_start: Called as `on_start(name, data)` before each leaf task.
        on_finish: Called as `on_finish(name, data, result)` after each leaf task.
    """

    def __init__(
        self,
        on_start: StartCallback | None = None,
        on_finish: FinishCallback | None = None,
    ):
        self._on_start = on_start
        self._on_finish = on_finish

    @hook_impl
    def before_task_execute(self, name: str, data: Any) -> None:
        if self._on_start is not None:
            self._on_start(name, data)

    @hook_impl
    def after_task_execute(self, name: str, data: Any, result: Any) -> None:
        if self._on_finish is not None:
            self._on_finish(name, data, result)
