from runtask.plugins.callbacks import CallbackPlugin
from runtask.plugins.default import LifecycleLoggingPlugin

from .hooks.markers import hook_impl

__all__ = [
    "hook_impl",
    "CallbackPlugin",
    "LifecycleLoggingPlugin",
]
