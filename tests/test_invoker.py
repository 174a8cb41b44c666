"""Unit tests for leaf invocation."""

import asyncio
import inspect
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from runtask.definitions import TaskDefinition
from runtask.definitions import callback_task
from runtask.invoker import accepts_data
from runtask.invoker import bind_receiver
from runtask.invoker import invoke
from runtask.invoker import materialize


def _invoke(obj, data=None, **kwargs):
    return asyncio.run(invoke(TaskDefinition.from_object("task", obj), data, **kwargs))


class TestCallingConventions:
    """Tests that every calling convention yields a single result."""

    def test_sync_function(self) -> None:
        assert _invoke(lambda data: data + 1, 1) == 2

    def test_async_function(self) -> None:
        async def work(data):
            await asyncio.sleep(0)
            return data * 2

        assert _invoke(work, 21) == 42

    def test_concurrent_future(self) -> None:
        with ThreadPoolExecutor(max_workers=1) as executor:
            assert _invoke(lambda data: executor.submit(lambda: data + 1), 1) == 2

    def test_generator_is_returned_unchanged(self) -> None:
        def work(data):
            yield from range(data)

        result = _invoke(work, 3)
        assert inspect.isgenerator(result)
        assert list(result) == [0, 1, 2]

    def test_iterator_data_is_not_consumed(self) -> None:
        data = iter([1, 2])
        assert _invoke(lambda data: data, data) is data
        assert list(data) == [1, 2]

    def test_async_generator_is_returned_unchanged(self) -> None:
        async def work(data):
            for i in range(data):
                yield i

        assert inspect.isasyncgen(_invoke(work, 2))

    def test_function_without_data_parameter(self) -> None:
        assert _invoke(lambda: "no data", {"ignored": True}) == "no data"

    def test_capability_object(self) -> None:
        class Doubler:
            def __init__(self):
                self.factor = 2

            def execute(self, data):
                return data * self.factor

        assert _invoke(Doubler(), 4) == 8

    def test_async_capability_object(self) -> None:
        class Job:
            async def execute(self, data):
                return data["value"]

        assert _invoke(Job(), {"value": "ok"}) == "ok"

    def test_exception_propagates(self) -> None:
        def work(data):
            raise ValueError("bad input")

        with pytest.raises(ValueError, match="bad input"):
            _invoke(work, 1)

    def test_non_callable_fails_at_invocation(self) -> None:
        with pytest.raises(TypeError):
            _invoke(42, 1)

    def test_alias_cannot_be_invoked(self) -> None:
        with pytest.raises(TypeError, match="is an alias"):
            _invoke(["a", "b"])

    def test_offload_sync_runs_in_worker_thread(self) -> None:
        main_thread = threading.get_ident()

        def work(data):
            return threading.get_ident()

        assert _invoke(work, None, offload_sync=True) != main_thread
        assert _invoke(work, None, offload_sync=False) == main_thread

    def test_offload_sync_keeps_async_on_loop(self) -> None:
        main_thread = threading.get_ident()

        async def work(data):
            return threading.get_ident()

        assert _invoke(work, None, offload_sync=True) == main_thread


class TestCallbackConvention:
    """Tests for @callback_task leaves."""

    def test_done_with_result(self) -> None:
        @callback_task
        def work(data, done):
            data["seen"] = True
            done(result="finished")

        data = {}
        assert _invoke(work, data) == "finished"
        assert data == {"seen": True}

    def test_done_from_another_thread(self) -> None:
        @callback_task
        def work(data, done):
            threading.Timer(0.01, lambda: done(result=data + 1)).start()

        assert _invoke(work, 1) == 2

    def test_done_with_exception(self) -> None:
        @callback_task
        def work(data, done):
            done(KeyError("missing"))

        with pytest.raises(KeyError):
            _invoke(work, 1)

    def test_done_with_non_exception_error(self) -> None:
        @callback_task
        def work(data, done):
            done("something went wrong")

        with pytest.raises(RuntimeError, match="something went wrong"):
            _invoke(work, 1)

    def test_only_first_done_counts(self) -> None:
        @callback_task
        def work(data, done):
            done(result="first")
            done(result="second")
            done(ValueError("ignored"))

        assert _invoke(work, None) == "first"

    def test_async_callback_function(self) -> None:
        @callback_task
        async def work(data, done):
            await asyncio.sleep(0)
            done(result="async")

        assert _invoke(work, None) == "async"


class TestBinding:
    """Tests for receiver binding."""

    def test_plain_function_is_bound(self) -> None:
        receiver = {"blah": "123"}

        def work(self, data):
            return self["blah"], data

        assert _invoke(work, "data", bind=receiver) == ("123", "data")

    def test_function_without_data_slot_cannot_be_bound(self) -> None:
        class Receiver:
            blah = "123"

        def work(self):
            return self.blah

        with pytest.raises(TypeError, match="expected positional parameters \\(self, data\\)"):
            _invoke(work, {}, bind=Receiver())

    def test_single_parameter_lambda_cannot_be_bound(self) -> None:
        seen = []
        with pytest.raises(TypeError, match="Cannot bind a receiver"):
            _invoke(lambda data: seen.append(data), {"k": 1}, bind=object())
        assert seen == []

    def test_varargs_function_is_bound(self) -> None:
        receiver = object()

        def work(*args):
            return args

        assert _invoke(work, "data", bind=receiver) == (receiver, "data")

    def test_capability_is_not_rebound(self) -> None:
        class Job:
            name = "job"

            def execute(self, data):
                return self.name

        assert _invoke(Job(), None, bind=object()) == "job"

    def test_bound_method_is_not_rebound(self) -> None:
        class Job:
            name = "job"

            def run(self, data):
                return self.name

        method = Job().run
        assert bind_receiver(method, object()) is method
        assert _invoke(Job().run, None, bind=object()) == "job"

    def test_callback_task_is_bound(self) -> None:
        class Receiver:
            value = 7

        @callback_task
        def work(self, data, done):
            done(result=self.value + data)

        assert _invoke(work, 1, bind=Receiver()) == 8

    def test_callback_task_without_done_slot_cannot_be_bound(self) -> None:
        @callback_task
        def work(self, done):
            done()  # pragma: no cover

        with pytest.raises(TypeError, match="\\(self, data, done\\)"):
            _invoke(work, 1, bind=object())


class TestHelpers:
    """Tests for invoker helpers."""

    def test_accepts_data(self) -> None:
        def no_args():
            pass

        def keyword_only(*, data):
            pass

        def varargs(*args):
            pass

        assert accepts_data(lambda data: None)
        assert accepts_data(varargs)
        assert not accepts_data(no_args)
        assert not accepts_data(keyword_only)

    def test_accepts_data_without_signature(self) -> None:
        assert accepts_data(42)  # type: ignore[arg-type]

    def test_materialize_plain_values(self) -> None:
        assert asyncio.run(materialize("text")) == "text"
        assert asyncio.run(materialize({"a": 1})) == {"a": 1}
        assert asyncio.run(materialize(None)) is None

    def test_materialize_awaits_pending_results(self) -> None:
        async def value():
            return "ready"

        assert asyncio.run(materialize(value())) == "ready"

    def test_materialize_keeps_iterators(self) -> None:
        items = iter("ab")
        assert asyncio.run(materialize(items)) is items
