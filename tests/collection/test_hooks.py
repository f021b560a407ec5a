"""
Tests for lifecycle hook registration helpers.
"""

import asyncio

import pytest

from casetree import Runner, RunnerConfig, after_all, after_each, before_all, before_each, clear_collector_context, describe
from casetree.collection import get_current_suite
from casetree.exceptions import TaskTimeoutError


def collect_top_level():
    return asyncio.run(get_current_suite().collect())


class TestHookHelpers:
    def test_top_level_hooks_attach_to_default_suite(self):
        before_all(lambda: None)
        after_all(lambda: None)
        before_each(lambda: None)
        after_each(lambda: None)

        hooks = get_current_suite().suite.hooks
        assert len(hooks.before_all) == 1
        assert len(hooks.after_all) == 1
        assert len(hooks.before_each) == 1
        assert len(hooks.after_each) == 1

    def test_hooks_inside_factory_attach_to_that_suite(self):
        def factory():
            before_each(lambda: None)
            before_each(lambda: None)

        describe("with hooks", factory)
        root = collect_top_level()

        assert root.hooks.before_each == []
        assert len(root.tasks[0].hooks.before_each) == 2

    def test_hooks_are_wrapped_and_forward_arguments(self):
        seen = []
        before_each(lambda context, suite: seen.append((context, suite)))

        hook = get_current_suite().suite.hooks.before_each[0]
        asyncio.run(hook("ctx", "suite"))

        assert seen == [("ctx", "suite")]

    def test_hook_timeout_defaults_to_config(self):
        clear_collector_context(Runner(RunnerConfig(hook_timeout=0.01)))

        async def slow():
            await asyncio.sleep(1)

        before_all(slow)
        hook = get_current_suite().suite.hooks.before_all[0]

        with pytest.raises(TaskTimeoutError, match="Hook timed out"):
            asyncio.run(hook())

    def test_explicit_hook_timeout(self):
        async def slow():
            await asyncio.sleep(1)

        after_all(slow, timeout=0.01)
        hook = get_current_suite().suite.hooks.after_all[0]

        with pytest.raises(TaskTimeoutError):
            asyncio.run(hook())
