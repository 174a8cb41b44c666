from runtask.plugins.hooks.markers import hook_impl
from runtask.plugins.hooks.markers import hook_spec

__all__ = ["hook_impl", "hook_spec"]
