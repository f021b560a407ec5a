"""
Ambient collection context, per-test contexts and timeout wrapping.

The collector that nested declarations attach to is held in a `ContextVar`
bound for the duration of a factory run (`run_with_suite`) and restored on
exit, so `describe`/`it` calls need no explicit parent argument.
"""

import asyncio
import inspect
import logging
import math
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from functools import cached_property
from typing import TYPE_CHECKING, Any

from casetree.exceptions import PendingError, TaskTimeoutError

if TYPE_CHECKING:
    from casetree.collection.collector import SuiteCollector
    from casetree.core.tasks import File, Suite, Task, Test
    from casetree.runner import Runner

logger = logging.getLogger(__name__)

_current_suite: ContextVar["SuiteCollector | None"] = ContextVar(
    "casetree_current_suite", default=None
)


_runner: "Runner | None" = None


def get_runner() -> "Runner":
    """Current runner; a default `Runner()` is installed on first use."""
    global _runner
    if _runner is None:
        from casetree.runner import Runner

        _runner = Runner()
    return _runner


def set_runner(runner: "Runner") -> None:
    global _runner
    _runner = runner


def get_bound_suite() -> "SuiteCollector | None":
    """Collector bound by the innermost active factory run, if any."""
    return _current_suite.get()


@contextmanager
def run_with_suite(collector: "SuiteCollector") -> Iterator["SuiteCollector"]:
    """Bind `collector` as the ambient current suite for the enclosed block."""
    token = _current_suite.set(collector)
    try:
        yield collector
    finally:
        _current_suite.reset(token)


def collect_task(parent: "SuiteCollector | None", task: "Task | SuiteCollector") -> None:
    """Register a freshly declared node with its enclosing collector."""
    if parent is not None:
        parent.enqueue(task)


def accepts_argument(fn: Callable[..., Any]) -> bool:
    """Whether `fn` can be called with one positional argument."""
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return True
    for param in signature.parameters.values():
        if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD, param.VAR_POSITIONAL):
            return True
    return False


def _log_late_outcome(task: "asyncio.Future[Any]") -> None:
    if task.cancelled():
        logger.debug("Timed-out work was cancelled after its wait expired")
    elif task.exception() is not None:
        logger.debug("Timed-out work failed after its wait expired: %r", task.exception())
    else:
        logger.debug("Timed-out work finished after its wait expired")


def with_timeout(
    fn: Callable[..., Any], timeout: float | None, is_hook: bool = False
) -> Callable[..., Any]:
    """Wrap `fn` in a coroutine function that bounds how long it is awaited.

    If `fn` returns an awaitable, it is raced against `timeout` seconds. When
    the bound elapses first, `TaskTimeoutError` is raised and the underlying
    work keeps running unobserved; it is not cancelled. Synchronous results
    are returned as they are.

    Params:
        fn: User test or hook function
        timeout: Bound in seconds; `None`, zero, negative or infinite disables it
        is_hook: Selects the hook wording for the timeout message

    Returns:
        Coroutine function with the same call signature as `fn`
    """
    bounded = timeout is not None and timeout > 0 and not math.isinf(timeout)

    async def wrapped(*args: Any, **kwargs: Any) -> Any:
        result = fn(*args, **kwargs)
        if not inspect.isawaitable(result):
            return result
        if not bounded:
            return await result

        work = asyncio.ensure_future(result)
        done, _ = await asyncio.wait({work}, timeout=timeout)
        if work in done:
            return work.result()

        logger.debug("%s exceeded %ss", "Hook" if is_hook else "Test", timeout)
        work.add_done_callback(_log_late_outcome)
        raise TaskTimeoutError(timeout, is_hook=is_hook)

    wrapped.__wrapped__ = fn  # type: ignore[attr-defined]
    return wrapped


class TaskContext:
    """Per-test object handed to the test body.

    Exposes the test itself, the suite metadata it was collected into, and
    a lazily created assertion-engine handle.
    """

    def __init__(self, task: "Test", runner: "Runner"):
        self.task = task
        self._runner = runner

    @property
    def suite(self) -> "Suite | None":
        return self.task.suite

    @property
    def file(self) -> "File | None":
        return self.task.file

    @cached_property
    def expect(self) -> Any:
        return self._runner.create_expect(self.task)

    def skip(self) -> None:
        """Mark the test as pending and abort its body."""
        self.task.pending = True
        raise PendingError("test is skipped; abort execution", self.task)

    def on_test_failed(self, fn: Callable[..., Any]) -> None:
        self.task.on_failed.append(fn)

    def __repr__(self) -> str:
        return f"TaskContext(task={self.task.name!r})"


def create_task_context(test: "Test", runner: "Runner") -> TaskContext:
    context = TaskContext(test, runner)
    return runner.extend_task_context(context) or context
