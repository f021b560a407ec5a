"""
Core casetree components.

This package provides the node shapes of the collected tree, the run-mode
vocabulary, and the chainable builder used by the declaration API.
"""

from casetree.core.chain import Chainable
from casetree.core.tasks import (
    HOOK_NAMES,
    CustomTask,
    File,
    Suite,
    SuiteHooks,
    Task,
    Test,
    get_full_name,
    get_names,
)
from casetree.core.types import (
    DEFAULT_REPEATS,
    Modifiers,
    RunMode,
    resolve_mode,
    resolve_repeats,
)

__all__ = [
    "Chainable",
    "CustomTask",
    "DEFAULT_REPEATS",
    "File",
    "HOOK_NAMES",
    "Modifiers",
    "RunMode",
    "Suite",
    "SuiteHooks",
    "Task",
    "Test",
    "get_full_name",
    "get_names",
    "resolve_mode",
    "resolve_repeats",
]
