"""
Public declaration API: `describe`/`suite` and `it`/`test`.

Both entry points are `DeclarationChain`s. Declarations attach to the
collector whose factory is currently running, or to the default suite of
the declaration unit when no factory is running.
"""

import inspect
import logging
from collections.abc import Callable
from typing import Any

from casetree.collection.collector import (
    OptionsArg,
    SuiteCollector,
    SuiteFactory,
    TestFunction,
    create_suite_collector,
)
from casetree.collection.context import get_bound_suite, get_runner, set_runner
from casetree.collection.declaration import (
    SUITE_MODIFIERS,
    TEST_MODIFIERS,
    DeclarationChain,
)
from casetree.core.tasks import File
from casetree.core.types import Modifiers
from casetree.runner import Runner

logger = logging.getLogger(__name__)

_default_suite: SuiteCollector | None = None


def _create_default_suite(runner: Runner) -> SuiteCollector:
    modifiers = Modifiers(shuffle=runner.config.sequence.shuffle)
    return SuiteCollector("", modifiers=modifiers)


def get_default_suite() -> SuiteCollector:
    """Collector of the current declaration unit's top level."""
    global _default_suite
    if _default_suite is None:
        _default_suite = _create_default_suite(get_runner())
    return _default_suite


def get_current_suite() -> SuiteCollector:
    """Collector that a declaration made right now attaches to."""
    bound = get_bound_suite()
    if bound is not None:
        return bound
    return get_default_suite()


def clear_collector_context(runner: Runner) -> None:
    """Install `runner` and reset the default suite for a new declaration unit."""
    global _default_suite
    set_runner(runner)
    shuffle = runner.config.sequence.shuffle
    if _default_suite is None or _default_suite.shuffle != shuffle:
        _default_suite = _create_default_suite(runner)
    _default_suite.clear()
    logger.debug("Collector context cleared (shuffle=%s)", shuffle)


def _suite(
    modifiers: Modifiers,
    name: str,
    factory: SuiteFactory | None = None,
    options: OptionsArg = None,
) -> SuiteCollector:
    return create_suite_collector(
        name, factory, modifiers, options, parent=get_current_suite()
    )


def _test(
    modifiers: Modifiers,
    name: str,
    fn: TestFunction | None = None,
    options: OptionsArg = None,
) -> None:
    get_current_suite().test.fn(modifiers, name, fn, options)


suite = DeclarationChain(_suite, SUITE_MODIFIERS)
test = DeclarationChain(_test, TEST_MODIFIERS)

describe = suite
it = test


async def collect_file(
    file: File, declare: Callable[[], Any], runner: Runner | None = None
) -> File:
    """Collect one declaration unit into `file`.

    `declare` performs the unit's top-level declarations (typically by
    importing or executing a module). The default suite is then collected
    and its hooks and children are moved onto `file`.

    Params:
        file: Root node for the unit
        declare: Callable evaluating the unit; awaited if it returns an awaitable
        runner: Runner to install; the current runner when omitted

    Returns:
        `file`, with `tasks` and `hooks` populated

    Raises:
        Exception: Whatever `declare` or a suite factory raises
    """
    clear_collector_context(runner or get_runner())
    result = declare()
    if inspect.isawaitable(result):
        await result

    collected = await get_default_suite().collect(file)
    file.hooks = collected.hooks
    file.tasks = list(collected.tasks)
    for task in file.tasks:
        task.suite = file
        task.file = file

    logger.debug("Collected %s: %d top-level tasks", file.filepath, len(file.tasks))
    return file
