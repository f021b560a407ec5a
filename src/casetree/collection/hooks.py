"""Lifecycle hook registration on the current suite.

Each hook is wrapped with `with_timeout`, bounded by the runner's
`hook_timeout` unless an explicit timeout (seconds) is given.
"""

from collections.abc import Callable
from typing import Any

from casetree.collection.api import get_current_suite
from casetree.collection.context import get_runner, with_timeout


def _register(hook_name: str, fn: Callable[..., Any], timeout: float | None) -> None:
    if timeout is None:
        timeout = get_runner().config.hook_timeout
    get_current_suite().on(hook_name, with_timeout(fn, timeout, is_hook=True))


def before_all(fn: Callable[..., Any], timeout: float | None = None) -> None:
    _register("before_all", fn, timeout)


def after_all(fn: Callable[..., Any], timeout: float | None = None) -> None:
    _register("after_all", fn, timeout)


def before_each(fn: Callable[..., Any], timeout: float | None = None) -> None:
    _register("before_each", fn, timeout)


def after_each(fn: Callable[..., Any], timeout: float | None = None) -> None:
    _register("after_each", fn, timeout)
