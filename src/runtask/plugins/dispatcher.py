"""Dispatches leaf lifecycle notifications to registered plugins."""

from __future__ import annotations

from typing import Any

from pluggy import PluginManager


class HookDispatcher:
    """
    Thin wrapper firing task hooks on a plugin manager.

    Exceptions raised by a hook implementation are not caught; they fail the task being
    notified like any other error.
    """

    def __init__(self, plugin_manager: PluginManager) -> None:
        self._plugin_manager = plugin_manager

    @property
    def plugin_manager(self) -> PluginManager:
        return self._plugin_manager

    def start(self, name: str, data: Any) -> None:
        self._plugin_manager.hook.before_task_execute(name=name, data=data)

    def finish(
        self,
        name: str,
        data: Any,
        result: Any = None,
        error: BaseException | None = None,
        duration: float = 0.0,
    ) -> None:
        self._plugin_manager.hook.after_task_execute(
            name=name, data=data, result=result, error=error, duration=duration
        )

    def before_run(self, spec: Any, data: Any) -> None:
        self._plugin_manager.hook.before_run(spec=spec, data=data)

    def after_run(self, spec: Any, data: Any, result: Any, duration: float) -> None:
        self._plugin_manager.hook.after_run(spec=spec, data=data, result=result, duration=duration)

    def run_error(self, spec: Any, data: Any, error: BaseException, duration: float) -> None:
        self._plugin_manager.hook.on_run_error(spec=spec, data=data, error=error, duration=duration)
