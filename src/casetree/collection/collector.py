"""
Suite collectors: transient builders that turn declarations into a `Suite`.

A collector is created synchronously by `describe(...)` and registered with
its enclosing collector. Its factory runs, and its children resolve, only
when `collect` is awaited.
"""

import inspect
import logging
from collections.abc import Callable, Mapping
from typing import Any, Union

from casetree.collection.context import (
    accepts_argument,
    collect_task,
    create_task_context,
    get_runner,
    run_with_suite,
    with_timeout,
)
from casetree.collection.declaration import (
    CUSTOM_MODIFIERS,
    TEST_MODIFIERS,
    DeclarationChain,
)
from casetree.config import TaskOptions
from casetree.core.chain import Chainable
from casetree.core.tasks import HOOK_NAMES, CustomTask, File, Suite, SuiteHooks, Task, Test
from casetree.core.types import NO_MODIFIERS, Modifiers, resolve_mode, resolve_repeats
from casetree.exceptions import DeclarationError

logger = logging.getLogger(__name__)

SuiteFactory = Callable[[], Any]
TestFunction = Callable[..., Any]
OptionsArg = Union[TaskOptions, Mapping[str, Any], float, None]


def _noop(*args: Any) -> None:
    return None


def _merge_options(base: TaskOptions, override: TaskOptions) -> TaskOptions:
    """Options explicitly set on `override` win, the rest come from `base`."""
    if not override.model_fields_set:
        return base
    return base.model_copy(
        update={name: getattr(override, name) for name in override.model_fields_set}
    )


class SuiteCollector:
    """Builder accumulating the pending children of one suite.

    Declarations made while this collector's own factory runs are queued in
    `factory_queue`, which is rebuilt on every `collect`. Declarations made
    from outside (module top level for the default suite, or explicit
    `collector.test(...)` calls) are queued in `tasks`. Children resolve in
    the order `[*factory_queue, *tasks]`.
    """

    type = "collector"

    def __init__(
        self,
        name: str,
        factory: SuiteFactory | None = None,
        modifiers: Modifiers = NO_MODIFIERS,
        options: OptionsArg = None,
        parent: "SuiteCollector | None" = None,
    ):
        """
        Initialize the collector and its placeholder suite.

        Params:
            name: Suite display name
            factory: Callable performing nested declarations when collected
            modifiers: Flags from the declaration chain
            options: Defaults (`timeout`, `retry`, `repeats`) for child tests
            parent: Enclosing collector whose `concurrent`/`shuffle` is inherited
        """
        self.name = name
        self.factory = factory
        self.modifiers = modifiers
        self.mode = resolve_mode(modifiers)
        self.concurrent = modifiers.concurrent or (parent is not None and parent.concurrent)
        self.shuffle = modifiers.shuffle or (parent is not None and parent.shuffle)
        self.suite_options = TaskOptions.coerce(options, f"suite {name!r}")

        self.tasks: list[Task | SuiteCollector] = []
        self.factory_queue: list[Task | SuiteCollector] = []
        self._collecting = False
        self._factory_hooks: list[tuple[str, Callable[..., Any]]] = []

        self.test = DeclarationChain(self._declare_test, TEST_MODIFIERS)
        self.custom = Chainable(self._declare_custom, CUSTOM_MODIFIERS)

        self.suite: Suite
        self._init_suite()

    def __repr__(self) -> str:
        return f"SuiteCollector(name={self.name!r}, mode={self.mode.value})"

    def _init_suite(self) -> None:
        self.mode = resolve_mode(self.modifiers)
        self.suite = Suite(
            name=self.name,
            mode=self.mode,
            shuffle=self.shuffle,
            repeats=resolve_repeats(self.mode, self.suite_options.repeats),
            hooks=SuiteHooks(),
        )

    def enqueue(self, task: "Task | SuiteCollector") -> None:
        """Queue a declared child on the queue matching the current phase."""
        if self._collecting:
            self.factory_queue.append(task)
        else:
            self.tasks.append(task)

    def _declare_test(
        self,
        modifiers: Modifiers,
        name: str,
        fn: TestFunction | None = None,
        options: OptionsArg = None,
    ) -> None:
        subject = f"test {name!r}"
        if not isinstance(name, str):
            raise DeclarationError(subject, f"name must be a string, got {type(name).__name__}")
        if fn is not None and not callable(fn):
            raise DeclarationError(subject, f"{type(fn).__name__} object is not callable")

        resolved = _merge_options(self.suite_options, TaskOptions.coerce(options, subject))
        mode = resolve_mode(modifiers)
        test = Test(
            name=name,
            mode=mode,
            fails=modifiers.fails,
            retry=resolved.retry,
            repeats=resolve_repeats(mode, resolved.repeats),
            concurrent=modifiers.concurrent or self.concurrent,
            shuffle=self.shuffle,
        )

        runner = get_runner()
        context = create_task_context(test, runner)
        body = fn or _noop
        pass_context = accepts_argument(body)

        def run() -> Any:
            return body(context) if pass_context else body()

        timeout = resolved.timeout if resolved.timeout is not None else runner.config.test_timeout
        test.bind(with_timeout(run, timeout), context)
        self.enqueue(test)

    def _declare_custom(self, modifiers: Modifiers, name: str = "") -> CustomTask:
        task = CustomTask(name=name, mode=resolve_mode(modifiers))
        self.enqueue(task)
        return task

    def on(self, hook_name: str, *fns: Callable[..., Any]) -> None:
        """Append callbacks to one of the suite's hook sequences.

        Params:
            hook_name: One of `before_all`, `after_all`, `before_each`, `after_each`
            fns: Callbacks appended in the given order

        Raises:
            DeclarationError: If the hook name is unknown or a callback is not callable
        """
        if hook_name not in HOOK_NAMES:
            raise DeclarationError(
                f"hook {hook_name!r}", f"expected one of {', '.join(HOOK_NAMES)}"
            )
        for fn in fns:
            if not callable(fn):
                raise DeclarationError(
                    f"hook {hook_name!r}", f"{type(fn).__name__} object is not callable"
                )
        self.suite.hooks.get(hook_name).extend(fns)
        if self._collecting:
            self._factory_hooks.extend((hook_name, fn) for fn in fns)

    def _discard_factory_hooks(self) -> None:
        for hook_name, fn in self._factory_hooks:
            callbacks = self.suite.hooks.get(hook_name)
            for index in range(len(callbacks) - 1, -1, -1):
                if callbacks[index] is fn:
                    del callbacks[index]
                    break
        self._factory_hooks.clear()

    def clear(self) -> None:
        """Discard every queued child and rebuild the placeholder suite."""
        self.tasks.clear()
        self.factory_queue.clear()
        self._factory_hooks.clear()
        self._init_suite()
        logger.debug("Cleared collector %r", self.name)

    async def collect(self, file: File | None = None) -> Suite:
        """Run the factory and resolve all pending children into the suite.

        Nested collectors are collected one at a time, each awaited before
        the next sibling starts.

        Params:
            file: Declaration unit assigned to the suite and every child

        Returns:
            The finalized `Suite`

        Raises:
            Exception: Whatever the factory raises, unchanged
        """
        self.factory_queue.clear()
        self._discard_factory_hooks()

        if self.factory is not None:
            self._collecting = True
            try:
                with run_with_suite(self):
                    result = self.factory()
                    if inspect.isawaitable(result):
                        await result
            except BaseException:
                self.factory_queue.clear()
                self._discard_factory_hooks()
                raise
            finally:
                self._collecting = False

        children: list[Task] = []
        # Source order: nested collectors are not hoisted ahead of tests.
        for child in [*self.factory_queue, *self.tasks]:
            if isinstance(child, SuiteCollector):
                children.append(await child.collect(file))
            else:
                children.append(child)

        self.suite.file = file
        self.suite.tasks = children
        for task in children:
            task.suite = self.suite
            if file is not None:
                task.file = file

        logger.debug("Collected suite %r with %d children", self.name, len(children))
        return self.suite


def create_suite_collector(
    name: str,
    factory: SuiteFactory | None = None,
    modifiers: Modifiers = NO_MODIFIERS,
    options: OptionsArg = None,
    parent: SuiteCollector | None = None,
) -> SuiteCollector:
    """Create a collector and register it with `parent`."""
    subject = f"suite {name!r}"
    if not isinstance(name, str):
        raise DeclarationError(subject, f"name must be a string, got {type(name).__name__}")
    if factory is not None and not callable(factory):
        raise DeclarationError(subject, f"{type(factory).__name__} object is not callable")

    collector = SuiteCollector(name, factory, modifiers, options, parent=parent)
    collect_task(parent, collector)
    return collector
