"""
Exception classes for casetree declaration and collection.

This module defines specific exception types for the error conditions that
can occur while declaring suites and tests, collecting them into a tree, and
running wrapped test bodies.
"""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from casetree.core.tasks import Task


class CaseTreeError(Exception):
    """Base exception for all casetree errors."""

    pass


class DeclarationError(CaseTreeError):
    """Raised synchronously when a declaration call receives bad arguments."""

    def __init__(self, subject: str, reason: str):
        """
        Initialize the exception.

        Params:
            subject: What was being declared (e.g. "test 'adds numbers'")
            reason: Why the declaration was rejected
        """
        self.subject = subject
        self.reason = reason
        super().__init__(f"Invalid declaration of {subject}: {reason}")


class TaskTimeoutError(CaseTreeError):
    """Raised by a wrapped body when its bounded wait elapses first.

    The underlying user work is not cancelled; only the wait stops.
    """

    kind = "timeout"

    def __init__(self, timeout: float, is_hook: bool = False):
        """
        Initialize the exception.

        Params:
            timeout: The bound in seconds that elapsed
            is_hook: Whether the wrapped callable was a hook rather than a test
        """
        self.timeout = timeout
        self.is_hook = is_hook
        subject = "Hook" if is_hook else "Test"
        setting = "hook_timeout" if is_hook else "test_timeout"
        super().__init__(
            f"{subject} timed out in {timeout}s.\n"
            f"If this is a long-running {subject.lower()}, pass a timeout value "
            f'as the last argument or configure it globally with "{setting}".'
        )


class PendingError(CaseTreeError):
    """Raised from a test body that skipped itself through its context."""

    def __init__(self, message: str, task: "Task"):
        self.task = task
        super().__init__(message)


class ExpectationError(CaseTreeError, AssertionError):
    """Raised when an assertion made through an `Expect` handle fails."""

    def __init__(self, message: str, actual: Any = None, expected: Any = None):
        """
        Initialize the exception.

        Params:
            message: Description of the failed expectation
            actual: Value under test
            expected: Value it was compared against
        """
        self.actual = actual
        self.expected = expected
        super().__init__(message)
