"""Utility functions to manage the project-wide hook configuration."""

import logging
from inspect import isclass
from typing import Any

from pluggy import PluginManager

from .hooks.markers import HOOK_NAMESPACE
from .hooks.specs import RunSpec
from .hooks.specs import TaskSpec

logger = logging.getLogger(__name__)

_PLUGIN_ENTRY_POINT = "runtask.hooks"  # entry-point to load hooks from for installed plugins
_PLUGIN_MANAGER: PluginManager | None = None


# region API


def register_plugins(*plugins: Any) -> None:
    """Register runtask hook implementations globally, for every engine."""
    plugin_manager = _get_global_plugin_manager()
    for plugin in plugins:
        if not plugin_manager.is_registered(plugin):
            _check_instance(plugin)
            plugin_manager.register(plugin)


def register_plugins_entry_points(_plugin_manager: PluginManager | None = None) -> int:
    """
    Register runtask plugins from Python package entry points.

    Returns:
        Number of plugins loaded.
    """
    _plugin_manager = _plugin_manager if _plugin_manager else _get_global_plugin_manager()
    return _plugin_manager.load_setuptools_entrypoints(_PLUGIN_ENTRY_POINT)


def create_plugin_manager_with_plugins(plugins: list[Any]) -> PluginManager:
    """
    Create a new plugin manager with both global and engine-specific plugins.

    Used internally by `RunTask` so that hooks passed to one engine never leak into another.

    Args:
        plugins: Additional hook implementations to register.

    Returns:
        A new PluginManager with global + engine-specific hooks.
    """
    manager = _create_plugin_manager()

    global_manager = _get_global_plugin_manager()
    for plugin in global_manager.get_plugins():
        if not manager.is_registered(plugin):  # pragma: no branch
            manager.register(plugin)

    for plugin in plugins:
        if not manager.is_registered(plugin):  # pragma: no branch
            _check_instance(plugin)
            manager.register(plugin)

    return manager


def reset_global_plugin_manager() -> None:
    """Drop every globally registered plugin (mostly useful in tests)."""
    _initialize_plugin_system()


# region Helpers


def _initialize_plugin_system() -> PluginManager:
    """Initializes hooks for the runtask library."""
    manager = _create_plugin_manager()
    global _PLUGIN_MANAGER
    _PLUGIN_MANAGER = manager
    return manager


def _get_global_plugin_manager() -> PluginManager:
    """Returns initialized global plugin manager, creating it on first use."""
    plugin_manager = _PLUGIN_MANAGER
    if plugin_manager is None:
        plugin_manager = _initialize_plugin_system()
    return plugin_manager


def _create_plugin_manager() -> PluginManager:
    """Create a new PluginManager instance and register runtask's hook specs."""
    manager = PluginManager(HOOK_NAMESPACE)
    manager.trace.root.setwriter(
        logger.debug if logger.getEffectiveLevel() == logging.DEBUG else None
    )
    manager.enable_tracing()
    manager.add_hookspecs(TaskSpec)
    manager.add_hookspecs(RunSpec)
    return manager


def _check_instance(plugin: Any) -> None:
    if isclass(plugin):
        raise TypeError(
            "runtask expects plugins to be registered as instances. "
            "Have you forgotten the `()` when registering a plugin class?"
        )
