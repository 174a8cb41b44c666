from __future__ import annotations

import threading
from dataclasses import dataclass

_GLOBAL_RUNTASK_SETTINGS: RunTaskSettings | None = None
_SETTINGS_LOCK = threading.RLock()


@dataclass(frozen=True)
class RunTaskSettings:
    """Configuration settings for runtask."""

    offload_sync_tasks: bool = False
    """
    Run synchronous task callables in a worker thread via `asyncio.to_thread`.

    When False (default), synchronous tasks run on the event loop and block their concurrent
    siblings until they return.
    """

    max_concurrency: int | None = None
    """
    Maximum number of leaf tasks allowed to run at the same time within one run request.

    If None, concurrent groups fan out without limit.
    """

    def __post_init__(self) -> None:
        if self.max_concurrency is not None and self.max_concurrency < 1:
            raise ValueError(f"max_concurrency must be at least 1, got {self.max_concurrency}")


def get_global_settings() -> RunTaskSettings:
    """
    Get the global runtask settings instance (thread-safe).

    If no global settings have been set, returns a default instance.
    """
    with _SETTINGS_LOCK:
        global _GLOBAL_RUNTASK_SETTINGS
        if _GLOBAL_RUNTASK_SETTINGS is None:
            _GLOBAL_RUNTASK_SETTINGS = RunTaskSettings()
        return _GLOBAL_RUNTASK_SETTINGS


def set_global_settings(settings: RunTaskSettings) -> None:
    """
    Set the global runtask settings instance (thread-safe).

    Note: Engines read the global settings when they are created. Changing them afterwards does
    not affect existing `RunTask` instances.

    Args:
        settings (RunTaskSettings): Settings to set as global.
    """
    with _SETTINGS_LOCK:
        global _GLOBAL_RUNTASK_SETTINGS
        _GLOBAL_RUNTASK_SETTINGS = settings
