"""Task engine: registration and run requests."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from dataclasses import field
from typing import TYPE_CHECKING, Any

from runtask.plugins.callbacks import FinishCallback
from runtask.plugins.callbacks import StartCallback
from runtask.plugins.dispatcher import HookDispatcher
from runtask.registry import TaskRegistry
from runtask.resolver import Plan
from runtask.resolver import resolve
from runtask.scheduler import Scheduler
from runtask.settings import RunTaskSettings
from runtask.settings import get_global_settings

if TYPE_CHECKING:
    from pluggy import PluginManager

logger = logging.getLogger(__name__)


@dataclass
class RunTask:
    """
    Engine that registers named tasks and runs task specifications.

    A task is a plain callable, an object exposing an `execute` method, or an alias: a list of
    task references (names or nested lists). A run request names a single task or a list of
    references. Top-level entries run in series; entries of a nested list run concurrently and
    are joined before the next top-level entry starts. The same data value is passed to every
    task of a run.

    Args:
        on_start: Optional callable invoked as `on_start(name, data)` before each leaf task.
        on_finish: Optional callable invoked as `on_finish(name, data, result)` after each leaf
            task, also when it failed (with `result` None).
        bind: Optional receiver bound as `self` to plain function tasks, which then take
            `(self, data)`.
        plugins: Optional list of hook implementations for this engine only. These are
            combined with any globally registered plugins.
        settings: Engine settings. Defaults to the global settings at creation time.

    Examples:
        >>> runner = RunTask()
        >>> runner.register("load", lambda data: data.setdefault("rows", [1, 2, 3]))
        >>> runner.register("total", lambda data: sum(data["rows"]))
        >>> runner.register("pipeline", ["load", "total"])
        >>> runner.run("pipeline")
        6
    """

    on_start: StartCallback | None = None
    """Callable notified before each leaf task."""

    on_finish: FinishCallback | None = None
    """Callable notified after each leaf task."""

    bind: Any = None
    """Receiver bound to plain function tasks."""

    plugins: list[Any] | None = None
    """Engine-specific hook implementations."""

    settings: RunTaskSettings = field(default_factory=get_global_settings)
    """Runtask configuration settings."""

    _registry: TaskRegistry = field(default_factory=TaskRegistry, init=False, repr=False)

    @property
    def registry(self) -> TaskRegistry:
        """Registry holding this engine's task definitions."""
        return self._registry

    def register(self, name: str, definition: Any) -> None:
        """
        Register a task, overwriting any previous task with the same name.

        Args:
            name: Unique task name.
            definition: A callable, an object exposing `execute`, or a list of task references.
        """
        self._registry.register(name, definition)

    def resolve(self, spec: Any) -> Plan:
        """Resolve `spec` against the current registry without running it."""
        return resolve(spec, self._registry)

    def run(self, spec: Any, data: Any = None) -> Any:
        """
        Run a task specification synchronously.

        Cannot be called from within a running event loop, use `run_async()` instead.

        Args:
            spec: A task name, or a list of task references.
            data: Value shared by every task of the run. Defaults to a new empty dict.

        Returns:
            The outcome of the last top-level step.

        Raises:
            RuntimeError: If called from within an async context.
            RunTaskError: If resolution or any task failed.
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(self.run_async(spec, data))
        raise RuntimeError(
            "RunTask.run() cannot be called from within an async context; "
            "use `await RunTask.run_async()` instead."
        )

    async def run_async(self, spec: Any, data: Any = None) -> Any:
        """
        Run a task specification within the current event loop.

        Args:
            spec: A task name, or a list of task references.
            data: Value shared by every task of the run. Defaults to a new empty dict.

        Returns:
            The outcome of the last top-level step.

        Raises:
            UnknownTaskError: If a referenced task is not registered; nothing is executed.
            MissingSpecificationError: If `spec` is None or empty.
            InvalidSpecificationError: If `spec` is malformed.
            CyclicAliasError: If an alias references itself.
            TaskFailedError: If a task failed; the first failure is reported.
        """
        if data is None:
            data = {}

        dispatcher = HookDispatcher(self._get_plugin_manager())
        dispatcher.before_run(spec, data)

        start_time = time.perf_counter()
        try:
            plan = resolve(spec, self._registry)
            scheduler = Scheduler(
                dispatcher,
                bind=self.bind,
                offload_sync=self.settings.offload_sync_tasks,
                max_concurrency=self.settings.max_concurrency,
            )
            result = await scheduler.run(plan, data)
        except Exception as e:
            duration = time.perf_counter() - start_time
            logger.debug(f"Run of {spec!r} failed: {e!r}")
            dispatcher.run_error(spec, data, e, duration)
            raise

        duration = time.perf_counter() - start_time
        dispatcher.after_run(spec, data, result, duration)
        return result

    def _get_plugin_manager(self) -> PluginManager:
        """
        Get the plugin manager for one run.

        Engine-specific plugins and callbacks are combined with the plugins registered globally
        at the time of the run.
        """
        from runtask.plugins.callbacks import CallbackPlugin
        from runtask.plugins.manager import _get_global_plugin_manager
        from runtask.plugins.manager import create_plugin_manager_with_plugins

        plugins = list(self.plugins or [])
        if self.on_start is not None or self.on_finish is not None:
            plugins.append(CallbackPlugin(on_start=self.on_start, on_finish=self.on_finish))

        if plugins:
            return create_plugin_manager_with_plugins(plugins)
        return _get_global_plugin_manager()
