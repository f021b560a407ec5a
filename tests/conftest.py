"""
Shared test fixtures and utilities for the casetree test suite.
"""

import asyncio

import pytest

from casetree import Runner, RunnerConfig, clear_collector_context
from casetree.assertions import reset_equality_testers


@pytest.fixture(autouse=True)
def fresh_collector_context():
    """Start every test from an empty default suite and a default runner.

    Declarations made at the top level of a test attach to the default
    suite, so it must not leak between tests.
    """
    runner = Runner(RunnerConfig())
    clear_collector_context(runner)
    reset_equality_testers()
    yield runner
    reset_equality_testers()


@pytest.fixture
def collect():
    """Run a collector's `collect` coroutine to completion.

    Usage:
        def test_something(collect):
            suite = collect(collector, file)
    """

    def run(collector, file=None):
        return asyncio.run(collector.collect(file))

    return run
