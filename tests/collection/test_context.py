"""
Tests for the ambient collection context, task contexts and timeout wrapping.
"""

import asyncio

import pytest

from casetree import Runner, Test, describe, it
from casetree.assertions import Expect
from casetree.collection import SuiteCollector, get_current_suite, run_with_suite, with_timeout
from casetree.collection.context import (
    TaskContext,
    accepts_argument,
    create_task_context,
    get_bound_suite,
)
from casetree.exceptions import PendingError, TaskTimeoutError


class TestRunWithSuite:
    def test_binds_and_restores(self):
        outer = SuiteCollector("outer")
        inner = SuiteCollector("inner")

        assert get_bound_suite() is None
        with run_with_suite(outer):
            assert get_current_suite() is outer
            with run_with_suite(inner):
                assert get_current_suite() is inner
            assert get_current_suite() is outer
        assert get_bound_suite() is None

    def test_restores_on_error(self):
        with pytest.raises(ValueError):
            with run_with_suite(SuiteCollector("outer")):
                raise ValueError("fail")
        assert get_bound_suite() is None


class TestWithTimeout:
    def test_fast_coroutine_returns_its_result(self):
        async def quick():
            return 42

        assert asyncio.run(with_timeout(quick, 1.0)()) == 42

    def test_sync_result_returned_directly(self):
        assert asyncio.run(with_timeout(lambda x: x * 2, 1.0)(21)) == 42

    def test_slow_coroutine_times_out(self):
        async def slow():
            await asyncio.sleep(1)

        with pytest.raises(TaskTimeoutError) as exc_info:
            asyncio.run(with_timeout(slow, 0.01)())

        assert exc_info.value.kind == "timeout"
        assert exc_info.value.is_hook is False
        assert "Test timed out in 0.01s" in str(exc_info.value)

    def test_hook_timeout_message(self):
        async def slow():
            await asyncio.sleep(1)

        with pytest.raises(TaskTimeoutError, match="Hook timed out"):
            asyncio.run(with_timeout(slow, 0.01, is_hook=True)())

    def test_timed_out_work_is_not_cancelled(self):
        events = []

        async def slow():
            await asyncio.sleep(0.05)
            events.append("finished")

        async def scenario():
            with pytest.raises(TaskTimeoutError):
                await with_timeout(slow, 0.01)()
            await asyncio.sleep(0.1)

        asyncio.run(scenario())
        assert events == ["finished"]

    def test_user_errors_propagate(self):
        async def broken():
            raise RuntimeError("inside test")

        with pytest.raises(RuntimeError, match="inside test"):
            asyncio.run(with_timeout(broken, 1.0)())

    @pytest.mark.parametrize("timeout", [None, 0, -1, float("inf")])
    def test_disabled_bound(self, timeout):
        async def quick():
            await asyncio.sleep(0.02)
            return "done"

        assert asyncio.run(with_timeout(quick, timeout)()) == "done"


class TestAcceptsArgument:
    def test_positional_parameters(self):
        assert accepts_argument(lambda ctx: None)
        assert accepts_argument(lambda *args: None)

    def test_no_parameters(self):
        assert not accepts_argument(lambda: None)
        assert not accepts_argument(lambda *, key=None: None)


class TestTaskContext:
    def test_context_created_for_each_test(self):
        seen = []
        describe("wrapper", lambda: it("uses context", seen.append))
        suite = asyncio.run(get_current_suite().collect()).tasks[0]
        test = suite.tasks[0]

        asyncio.run(test.fn())

        assert seen == [test.context]
        assert isinstance(test.context, TaskContext)
        assert test.context.task is test
        assert test.context.suite is suite

    def test_expect_is_lazy_and_cached(self):
        context = TaskContext(Test(name="t"), Runner())
        assert "expect" not in context.__dict__
        first = context.expect
        assert isinstance(first, Expect)
        assert context.expect is first

    def test_custom_expect_factory(self):
        runner = Runner(expect_factory=lambda test: ("engine", test.name))
        context = TaskContext(Test(name="named"), runner)
        assert context.expect == ("engine", "named")

    def test_skip_marks_pending(self):
        test = Test(name="t")
        context = TaskContext(test, Runner())

        with pytest.raises(PendingError) as exc_info:
            context.skip()

        assert test.pending is True
        assert exc_info.value.task is test

    def test_on_test_failed_appends(self):
        test = Test(name="t")
        context = TaskContext(test, Runner())
        context.on_test_failed(print)
        assert test.on_failed == [print]

    def test_runner_can_extend_context(self):
        class TaggingRunner(Runner):
            def extend_task_context(self, context):
                context.tag = "extended"
                return context

        context = create_task_context(Test(name="t"), TaggingRunner())
        assert context.tag == "extended"
