"""
Centralized exception classes for the runtask library.

All runtask-specific exceptions inherit from RunTaskError for easy catching.
"""

from __future__ import annotations


class RunTaskError(Exception):
    """Base exception for all runtask errors."""


class UnknownTaskError(RunTaskError):
    """Raised when a task name does not exist in the registry."""

    def __init__(self, name: str):
        super().__init__(f"Task '{name}' does not exist")
        self.name = name


class MissingSpecificationError(RunTaskError):
    """Raised when a run request has no task specification."""


class InvalidSpecificationError(RunTaskError):
    """Raised when a task reference is neither a task name nor a group of references."""


class CyclicAliasError(RunTaskError):
    """Raised when an alias references itself, directly or transitively."""

    def __init__(self, chain: tuple[str, ...]):
        super().__init__(f"Cyclic alias reference: {' -> '.join(chain)}")
        self.chain = chain


class TaskFailedError(RunTaskError):
    """Raised when a leaf task fails; the original error is available as `cause`."""

    def __init__(self, name: str, cause: BaseException):
        super().__init__(f"Task '{name}' failed: {cause!r}")
        self.name = name
        self.cause = cause
