"""Runner handle consumed during collection.

The execution engine itself lives elsewhere; collection only needs its
configuration, an assertion-engine factory, and a hook to decorate test
contexts.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from casetree.config import RunnerConfig

if TYPE_CHECKING:
    from casetree.collection.context import TaskContext
    from casetree.core.tasks import Test

ExpectFactory = Callable[["Test | None"], Any]


class Runner:
    """Configuration and capabilities supplied by the execution engine.

    Notes:
      - `expect_factory` defaults to `casetree.assertions.create_expect`.
      - Subclasses override `extend_task_context` to attach extra helpers
        to every test context.
    """

    def __init__(
        self,
        config: RunnerConfig | None = None,
        expect_factory: ExpectFactory | None = None,
    ):
        self.config = config or RunnerConfig()
        self._expect_factory = expect_factory

    def create_expect(self, test: "Test | None") -> Any:
        """Build the assertion-engine handle for one test."""
        if self._expect_factory is not None:
            return self._expect_factory(test)
        from casetree.assertions import create_expect

        return create_expect(test)

    def extend_task_context(self, context: "TaskContext") -> "TaskContext":
        return context
