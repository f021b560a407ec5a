"""
casetree collection components.

This package provides the declaration API, the suite collector that
resolves declarations into a finalized tree, lifecycle hooks, and the
per-test execution context.
"""

from casetree.collection.api import (
    clear_collector_context,
    collect_file,
    describe,
    get_current_suite,
    get_default_suite,
    it,
    suite,
    test,
)
from casetree.collection.collector import SuiteCollector, create_suite_collector
from casetree.collection.context import (
    TaskContext,
    create_task_context,
    get_runner,
    run_with_suite,
    with_timeout,
)
from casetree.collection.declaration import DeclarationChain
from casetree.collection.hooks import after_all, after_each, before_all, before_each

__all__ = [
    "DeclarationChain",
    "SuiteCollector",
    "TaskContext",
    "after_all",
    "after_each",
    "before_all",
    "before_each",
    "clear_collector_context",
    "collect_file",
    "create_suite_collector",
    "create_task_context",
    "describe",
    "get_current_suite",
    "get_default_suite",
    "get_runner",
    "it",
    "run_with_suite",
    "suite",
    "test",
    "with_timeout",
]
