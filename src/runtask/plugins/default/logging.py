"""
Lifecycle logging plugin.

Logs run and task lifecycle events through Python's standard logging system.

Example:
    >>> import logging
    >>> from runtask import RunTask
    >>> from runtask.plugins import LifecycleLoggingPlugin
    >>>
    >>> runner = RunTask(plugins=[LifecycleLoggingPlugin(level=logging.DEBUG)])
"""

import json
import logging
import logging.config
from pathlib import Path
from typing import Any

from runtask.plugins.hooks.markers import hook_impl

DEFAULT_LOGGER_NAME = "runtask.lifecycle"


class LifecycleLoggingPlugin:
    """
    Plugin that logs the start, finish and failure of runs and leaf tasks.

    Task starts are logged at DEBUG, finishes at `level`, failures at ERROR.

    Args:
        name: Optional logger name to use (default: "runtask.lifecycle").
        level: Level used for successful run and task completion (default: INFO).
        config: Optional `logging.config.dictConfig` dictionary applied on creation. Pass
            `LifecycleLoggingPlugin.default_config()` for a console handler on stderr.
    """

    def __init__(
        self,
        name: str | None = None,
        level: int = logging.INFO,
        config: dict[str, Any] | None = None,
    ):
        if config is not None:
            logging.config.dictConfig(config)
        self._logger = logging.getLogger(name or DEFAULT_LOGGER_NAME)
        self._level = level

    @classmethod
    def default_config(cls) -> dict[str, Any]:
        """Load the logging configuration shipped with runtask."""
        return json.loads(cls._config_path().read_text(encoding="utf-8"))

    @staticmethod
    def _config_path() -> Path:
        return Path(__file__).parent / "logging.json"

    @hook_impl
    def before_run(self, spec: Any, data: Any) -> None:
        self._logger.debug(f"Starting run of {spec!r}")

    @hook_impl
    def after_run(self, spec: Any, duration: float) -> None:
        self._logger.log(self._level, f"Run of {spec!r} completed in {duration:.3f}s")

    @hook_impl
    def on_run_error(self, spec: Any, error: BaseException, duration: float) -> None:
        self._logger.error(f"Run of {spec!r} failed after {duration:.3f}s: {error}")

    @hook_impl
    def before_task_execute(self, name: str) -> None:
        self._logger.debug(f"Task '{name}' started")

    @hook_impl
    def after_task_execute(self, name: str, error: BaseException | None, duration: float) -> None:
        if error is None:
            self._logger.log(self._level, f"Task '{name}' finished in {duration:.3f}s")
        else:
            self._logger.error(f"Task '{name}' failed after {duration:.3f}s: {error!r}")
