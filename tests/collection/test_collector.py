"""
Tests for SuiteCollector collection.

Focus Areas:
1. Declaration order and queue concatenation
2. Back-references and file propagation
3. clear() and repeated collect()
4. Factory failures and sequential resolution of nested collectors
"""

import asyncio

import pytest

from casetree import File, RunMode, Suite, Test, describe, it
from casetree.collection import SuiteCollector, get_current_suite
from casetree.core.tasks import CustomTask
from casetree.exceptions import DeclarationError


def names(suite):
    return [task.name for task in suite.tasks]


def walk(node):
    yield node
    for child in getattr(node, "tasks", []):
        yield from walk(child)


class TestCollectOrdering:
    """Children resolve in declaration order."""

    def test_mixed_declarations_keep_source_order(self, collect):
        def factory():
            it("first")
            describe("nested", lambda: it("inner"))
            it("second")
            describe("other")

        outer = SuiteCollector("outer", factory)
        suite = collect(outer)

        assert names(suite) == ["first", "nested", "second", "other"]
        assert isinstance(suite.tasks[1], Suite)
        assert names(suite.tasks[1]) == ["inner"]

    def test_factory_declarations_precede_direct_declarations(self, collect):
        collector = SuiteCollector("outer", lambda: it("from factory"))
        collector.test("direct")

        suite = collect(collector)

        assert names(suite) == ["from factory", "direct"]

    def test_top_level_declarations_go_to_default_suite(self, collect):
        it("a")
        describe("b", lambda: it("b1"))
        it("c")

        suite = collect(get_current_suite())

        assert names(suite) == ["a", "b", "c"]

    def test_tasks_empty_until_collected(self):
        collector = SuiteCollector("outer", lambda: it("x"))
        assert collector.suite.tasks == []


class TestBackReferences:
    def test_every_node_points_at_its_parent_and_file(self, collect):
        file = File(name="math_cases.py", filepath="math_cases.py")

        def factory():
            it("a")
            describe("level2", lambda: describe("level3", lambda: it("deep")))

        root = SuiteCollector("root", factory)
        suite = collect(root, file)

        assert suite.suite is None
        assert suite.file is file
        for node in walk(suite):
            assert node.file is file
            for child in getattr(node, "tasks", []):
                assert child.suite is node

    def test_collect_without_file_leaves_file_unset(self, collect):
        suite = collect(SuiteCollector("root", lambda: it("a")))
        assert suite.tasks[0].file is None
        assert suite.tasks[0].suite is suite


class TestClearAndRecollect:
    def test_repeated_collect_does_not_duplicate_children(self, collect):
        collector = SuiteCollector("root", lambda: (it("a"), describe("b", lambda: it("b1"))))
        collector.test("direct")

        first = collect(collector)
        first_names = names(first)
        second = collect(collector)

        assert names(second) == first_names == ["a", "b", "direct"]
        assert names(second.tasks[1]) == ["b1"]

    def test_repeated_collect_does_not_duplicate_factory_hooks(self, collect):
        def hook():
            pass

        collector = SuiteCollector("root", lambda: get_current_suite().on("before_each", hook))

        collect(collector)
        suite = collect(collector)

        assert suite.hooks.before_each == [hook]

    def test_hooks_registered_outside_factory_survive_recollect(self, collect):
        def hook():
            pass

        collector = SuiteCollector("root", lambda: it("a"))
        collector.on("after_all", hook)

        collect(collector)
        suite = collect(collector)

        assert suite.hooks.after_all == [hook]

    def test_clear_resets_queues_and_hooks(self, collect):
        collector = SuiteCollector("root")
        collector.test("a")
        collector.custom("c")
        collector.on("before_all", print)
        old_suite = collector.suite

        collector.clear()

        assert collector.tasks == []
        assert collector.factory_queue == []
        assert collector.suite is not old_suite
        assert collector.suite.hooks.before_all == []
        assert collect(collector).tasks == []

    def test_clear_recomputes_mode_from_captured_flags(self):
        collector = describe.repeats.skip("flagged")
        collector.clear()
        assert collector.suite.mode is RunMode.SKIP
        assert collector.mode is RunMode.SKIP


class TestHookRegistration:
    def test_on_appends_in_registration_order(self):
        collector = SuiteCollector("root")

        def one():
            pass

        def two():
            pass

        def three():
            pass

        collector.on("before_each", one, two)
        collector.on("before_each", three)

        assert collector.suite.hooks.before_each == [one, two, three]

    def test_unknown_hook_name_rejected(self):
        with pytest.raises(DeclarationError, match="before_everything"):
            SuiteCollector("root").on("before_everything", print)

    def test_non_callable_hook_rejected(self):
        with pytest.raises(DeclarationError):
            SuiteCollector("root").on("after_each", 42)


class TestFactoryExecution:
    def test_factory_error_propagates(self, collect):
        def factory():
            it("queued before failure")
            raise RuntimeError("boom")

        collector = SuiteCollector("root", factory)

        with pytest.raises(RuntimeError, match="boom"):
            collect(collector)
        assert collector.factory_queue == []

    def test_nested_factory_error_aborts_parent(self, collect):
        def broken():
            raise KeyError("missing")

        collector = SuiteCollector("root", lambda: describe("child", broken))

        with pytest.raises(KeyError):
            collect(collector)

    def test_current_suite_restored_after_failure(self, collect):
        default = get_current_suite()
        collector = SuiteCollector("root", lambda: 1 / 0)

        with pytest.raises(ZeroDivisionError):
            collect(collector)

        assert get_current_suite() is default

    def test_async_factory_declarations_attach_across_awaits(self, collect):
        async def factory():
            it("before await")
            await asyncio.sleep(0)
            it("after await")

        suite = collect(SuiteCollector("root", factory))

        assert names(suite) == ["before await", "after await"]

    def test_siblings_collected_sequentially(self, collect):
        events = []

        def make_factory(label):
            async def factory():
                events.append(f"{label} start")
                await asyncio.sleep(0.01)
                events.append(f"{label} end")
                it(label)

            return factory

        def root_factory():
            describe("one", make_factory("one"))
            describe("two", make_factory("two"))

        suite = collect(SuiteCollector("root", root_factory))

        assert events == ["one start", "one end", "two start", "two end"]
        assert [names(child) for child in suite.tasks] == [["one"], ["two"]]


class TestCustomTasks:
    def test_custom_returns_queued_placeholder(self, collect):
        collector = SuiteCollector("root")
        task = collector.custom("bench")
        skipped = collector.custom.skip()

        suite = collect(collector)

        assert isinstance(task, CustomTask)
        assert suite.tasks == [task, skipped]
        assert skipped.name == ""
        assert skipped.mode is RunMode.SKIP
        assert task.suite is suite


class TestDirectTestDeclaration:
    def test_direct_test_creates_leaf(self, collect):
        collector = SuiteCollector("root")
        collector.test.fails("expected failure")

        leaf = collect(collector).tasks[0]

        assert isinstance(leaf, Test)
        assert leaf.fails is True
        assert leaf.mode is RunMode.RUN
