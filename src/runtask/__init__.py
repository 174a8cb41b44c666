"""Runtask: lightweight engine running named tasks in series and in parallel."""

__version__ = "0.3.0"

from . import settings
from .definitions import callback_task
from .engine import RunTask
from .plugins.hooks.markers import hook_impl
from .plugins.manager import _initialize_plugin_system
from .plugins.manager import register_plugins

# Initialize hooks system on module import
_initialize_plugin_system()

__all__ = [
    "RunTask",
    "callback_task",
    "hook_impl",
    "register_plugins",
    "settings",
]
