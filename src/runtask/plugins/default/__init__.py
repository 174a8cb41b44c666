"""Default plugins shipped with runtask."""

from runtask.plugins.default.logging import LifecycleLoggingPlugin

__all__ = [
    "LifecycleLoggingPlugin",
]
