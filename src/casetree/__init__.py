"""
casetree - declaration and collection engine for describe/it style tests

casetree turns nested `describe`/`it` declarations into an ordered tree of
`Suite`, `Test` and `CustomTask` nodes ready for an execution engine.
"""

from importlib.metadata import version

from casetree.collection import (
    after_all,
    after_each,
    before_all,
    before_each,
    clear_collector_context,
    collect_file,
    describe,
    get_current_suite,
    it,
    suite,
    test,
)
from casetree.config import RunnerConfig, TaskOptions
from casetree.core import CustomTask, File, RunMode, Suite, Test
from casetree.runner import Runner

__version__ = version("casetree")

__all__ = [
    "__version__",
    "CustomTask",
    "File",
    "RunMode",
    "Runner",
    "RunnerConfig",
    "Suite",
    "TaskOptions",
    "Test",
    "after_all",
    "after_each",
    "before_all",
    "before_each",
    "clear_collector_context",
    "collect_file",
    "describe",
    "get_current_suite",
    "it",
    "suite",
    "test",
]
