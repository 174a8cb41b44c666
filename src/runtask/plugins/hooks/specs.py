"""Hook specifications for runtask execution lifecycle events."""

from typing import Any

from runtask.plugins.hooks.markers import hook_spec


class TaskSpec:
    """Hook specifications for leaf task events. Never fired for groups or aliases."""

    @hook_spec
    def before_task_execute(self, name: str, data: Any) -> None:
        """
        Called immediately before a leaf task is invoked.

        Args:
            name: Registered name of the task.
            data: Shared data value of the run.
        """

    @hook_spec
    def after_task_execute(
        self,
        name: str,
        data: Any,
        result: Any,
        error: BaseException | None,
        duration: float,
    ) -> None:
        """
        Called immediately after a leaf task's outcome is known, whether it succeeded or failed.

        Args:
            name: Registered name of the task.
            data: Shared data value of the run.
            result: Value produced by the task, or None if it failed.
            error: The error raised or reported by the task, or None on success.
            duration: Time taken by the task in seconds.
        """


class RunSpec:
    """Hook specifications for run-level events."""

    @hook_spec
    def before_run(self, spec: Any, data: Any) -> None:
        """
        Called before a run request is resolved.

        Args:
            spec: Task specification as passed by the caller.
            data: Shared data value of the run.
        """

    @hook_spec
    def after_run(self, spec: Any, data: Any, result: Any, duration: float) -> None:
        """
        Called after every step of a run request completed successfully.

        Args:
            spec: Task specification as passed by the caller.
            data: Shared data value of the run.
            result: Outcome of the last top-level step.
            duration: Time taken by the whole run in seconds.
        """

    @hook_spec
    def on_run_error(self, spec: Any, data: Any, error: BaseException, duration: float) -> None:
        """
        Called when a run request fails, during resolution or execution.

        Args:
            spec: Task specification as passed by the caller.
            data: Shared data value of the run.
            error: The error reported to the caller.
            duration: Time taken before the failure in seconds.
        """
