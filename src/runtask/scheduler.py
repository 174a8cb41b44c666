"""Execution of resolved plans: series at the top level, fan-out/join below it."""

from __future__ import annotations

import asyncio
import logging
import time
from contextlib import AbstractAsyncContextManager
from contextlib import nullcontext
from typing import Any

from runtask.definitions import TaskDefinition
from runtask.definitions import TaskReference
from runtask.definitions import is_group
from runtask.exceptions import TaskFailedError
from runtask.invoker import invoke
from runtask.plugins.dispatcher import HookDispatcher
from runtask.resolver import Plan

logger = logging.getLogger(__name__)


class Scheduler:
    """
    Walks a plan and executes it.

    Execution Rules:
        - Top-level steps of the plan run strictly in series; a step starts only after the
          previous step's whole subtree has finished.
        - A group nested in a step fans out: all members start concurrently and the step
          completes once every member has finished (join). Deeper groups fan out again.
        - An alias name found below the top level runs as one concurrent group.

    Failure Policy:
        A failure stops the remaining top-level steps. Inside a fan-out every launched member is
        still awaited, then the first failure (in completion order) is raised.
        A hook raising while a failure is reported is logged; the task failure is still raised.

    The shared data value is handed to every leaf as-is; concurrent members may read and
    mutate it at the same time and no locking is provided.

    Args:
        dispatcher: Hook dispatcher notified around every leaf.
        bind: Optional receiver bound to plain function tasks.
        offload_sync: Run synchronous task callables in worker threads.
        max_concurrency: Optional limit on simultaneously running leaves.
    """

    def __init__(
        self,
        dispatcher: HookDispatcher,
        *,
        bind: Any = None,
        offload_sync: bool = False,
        max_concurrency: int | None = None,
    ) -> None:
        self._dispatcher = dispatcher
        self._bind = bind
        self._offload_sync = offload_sync
        self._semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency else None

    async def run(self, plan: Plan, data: Any) -> Any:
        """
        Run every top-level step of `plan` in series.

        Returns:
            The outcome of the last step: a leaf's result, or the list of member outcomes of a
            group. None for an empty plan.

        Raises:
            TaskFailedError: If a leaf task failed.
        """
        result = None
        for index, step in enumerate(plan.steps):
            logger.debug(f"Running step {index + 1}/{len(plan)}: {step!r}")
            result = await self._run_reference(step, plan, data)
        return result

    async def _run_reference(self, ref: TaskReference, plan: Plan, data: Any) -> Any:
        if is_group(ref):
            return await self._run_group(ref, plan, data)

        definition = plan.lookup(ref)
        if definition.is_alias:
            return await self._run_group(definition.body, plan, data)
        return await self._run_leaf(definition, data)

    async def _run_group(
        self, members: tuple[TaskReference, ...], plan: Plan, data: Any
    ) -> list[Any]:
        """Fan out every member concurrently and join them all."""
        tasks = [
            asyncio.create_task(self._run_reference(member, plan, data)) for member in members
        ]

        first_error: Exception | None = None
        try:
            for next_done in asyncio.as_completed(tasks):
                try:
                    await next_done
                except Exception as e:
                    if first_error is None:
                        first_error = e
                    else:
                        logger.debug(f"Suppressing additional failure in concurrent group: {e!r}")
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        if first_error is not None:
            raise first_error
        return [task.result() for task in tasks]

    async def _run_leaf(self, definition: TaskDefinition, data: Any) -> Any:
        name = definition.name
        async with self._slot():
            self._dispatcher.start(name, data)
            start_time = time.perf_counter()
            try:
                result = await invoke(
                    definition, data, bind=self._bind, offload_sync=self._offload_sync
                )
            except Exception as e:
                duration = time.perf_counter() - start_time
                self._notify_failure(name, data, e, duration)
                raise TaskFailedError(name, e) from e

            duration = time.perf_counter() - start_time
            self._dispatcher.finish(name, data, result=result, error=None, duration=duration)
        return result

    def _notify_failure(self, name: str, data: Any, error: Exception, duration: float) -> None:
        """Fire the finish hook of a failed leaf; hook errors are logged, the leaf error wins."""
        try:
            self._dispatcher.finish(name, data, result=None, error=error, duration=duration)
        except Exception:
            logger.exception(f"Hook failed while reporting the failure of task '{name}'")

    def _slot(self) -> AbstractAsyncContextManager[Any]:
        if self._semaphore is None:
            return nullcontext()
        return self._semaphore
