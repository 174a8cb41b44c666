"""Shared fixtures for CLI tests."""

from __future__ import annotations

import logging

import pytest

from runtask.plugins.manager import reset_global_plugin_manager


@pytest.fixture(autouse=True)
def reset_plugins_and_logging():
    """Reset plugin manager and logging state around each CLI test.

    ``runtask run --verbose`` registers ``LifecycleLoggingPlugin`` in the *global* plugin
    manager and applies its ``dictConfig``, which sets the ``runtask`` logger to
    ``propagate=False``. That breaks ``caplog`` for later tests expecting records from
    ``runtask.*`` loggers, so both are saved and restored here.
    """
    _watched = ["runtask", "runtask.lifecycle"]
    _saved: dict[str, tuple[bool, int, list[logging.Handler]]] = {}
    for name in _watched:
        lg = logging.getLogger(name)
        _saved[name] = (lg.propagate, lg.level, lg.handlers[:])

    root_level = logging.root.level
    root_handlers = logging.root.handlers[:]

    reset_global_plugin_manager()

    yield

    reset_global_plugin_manager()

    for name, (propagate, level, handlers) in _saved.items():
        lg = logging.getLogger(name)
        lg.propagate = propagate
        lg.setLevel(level)
        lg.handlers = handlers

    logging.root.handlers = root_handlers
    logging.root.setLevel(root_level)
