"""Conftest for all pytest configuration - fixtures, hooks, and doctest setup."""

import doctest

import pytest

from runtask.plugins.manager import reset_global_plugin_manager
from runtask.settings import RunTaskSettings
from runtask.settings import set_global_settings

# Doctest Configuration


def pytest_configure(config):
    """Configure pytest with custom doctest options."""
    doctest.ELLIPSIS_MARKER = "..."


def pytest_collection_modifyitems(items):
    """Automatically mark doctest items with the 'doctest' marker."""
    for item in items:
        if isinstance(item, pytest.DoctestItem):
            item.add_marker(pytest.mark.doctest)


@pytest.fixture(autouse=True)
def reset_global_state():
    """Isolate globally registered plugins and settings between tests."""
    reset_global_plugin_manager()
    set_global_settings(RunTaskSettings())
    yield
    reset_global_plugin_manager()
    set_global_settings(RunTaskSettings())
