"""
Minimal assertion-engine handle attached to every test context.

The full matcher library is supplied by the execution engine; this handle
covers what collection-time code relies on: assertion counting, expected
assertion numbers, process-wide custom equality testers, and the
test-identity state (`test_path`, `current_test_name`).
"""

from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from casetree.core.tasks import get_full_name
from casetree.exceptions import ExpectationError

if TYPE_CHECKING:
    from casetree.core.tasks import Test

EqualityTester = Callable[[Any, Any], "bool | None"]

# Shared by every Expect handle in the process.
_custom_equality_testers: list[EqualityTester] = []


def get_equality_testers() -> list[EqualityTester]:
    return list(_custom_equality_testers)


def reset_equality_testers() -> None:
    _custom_equality_testers.clear()


def add_equality_testers(testers: list[EqualityTester]) -> None:
    """Register custom equality testers used by `to_equal`.

    Raises:
        TypeError: If `testers` is not a list
    """
    if not isinstance(testers, list):
        raise TypeError(
            "expect.custom_equality_testers: Must be set to a list of testers. "
            f'Was given "{type(testers).__name__}"'
        )
    _custom_equality_testers.extend(testers)


def equals(actual: Any, expected: Any) -> bool:
    """Equality consulting custom testers before `==`.

    A tester returns `True`/`False` to decide, or `None` to defer.
    """
    for tester in _custom_equality_testers:
        verdict = tester(actual, expected)
        if verdict is not None:
            return bool(verdict)
    return actual == expected


@dataclass(frozen=True)
class MatcherState:
    """Per-handle assertion bookkeeping."""

    assertion_calls: int = 0
    is_expecting_assertions: bool = False
    expected_assertions_number: int | None = None
    test_path: str | None = None
    current_test_name: str | None = None


class Assertion:
    """Assertion on one value."""

    def __init__(self, actual: Any, message: str | None = None):
        self.actual = actual
        self.message = message

    def _fail(self, description: str, expected: Any) -> None:
        prefix = f"{self.message}: " if self.message else ""
        raise ExpectationError(f"{prefix}{description}", self.actual, expected)

    def to_be(self, expected: Any) -> None:
        if self.actual is not expected and not (
            type(self.actual) is type(expected) and self.actual == expected
        ):
            self._fail(f"expected {self.actual!r} to be {expected!r}", expected)

    def to_equal(self, expected: Any) -> None:
        if not equals(self.actual, expected):
            self._fail(f"expected {self.actual!r} to equal {expected!r}", expected)


class Expect:
    """Callable `expect(value)` handle bound to one test."""

    def __init__(self, test: "Test | None" = None):
        self.test = test
        test_path = None
        current_test_name = None
        if test is not None:
            test_path = test.file.filepath if test.file is not None else None
            current_test_name = get_full_name(test)
        self.state = MatcherState(test_path=test_path, current_test_name=current_test_name)

    def __call__(self, value: Any, message: str | None = None) -> Assertion:
        self.set_state(assertion_calls=self.state.assertion_calls + 1)
        return Assertion(value, message)

    def get_state(self) -> MatcherState:
        return self.state

    def set_state(self, **changes: Any) -> None:
        self.state = replace(self.state, **changes)

    def assertions(self, expected: int) -> None:
        self.set_state(expected_assertions_number=expected)

    def has_assertions(self) -> None:
        self.set_state(is_expecting_assertions=True)

    def add_equality_testers(self, testers: list[EqualityTester]) -> None:
        add_equality_testers(testers)

    def verify(self) -> None:
        """Check the expected assertion counts once the test body finished.

        Raises:
            ExpectationError: If `assertions(n)` or `has_assertions()` was not satisfied
        """
        calls = self.state.assertion_calls
        expected = self.state.expected_assertions_number
        if expected is not None and calls != expected:
            raise ExpectationError(
                f"expected number of assertions to be {expected}, but got {calls}",
                calls,
                expected,
            )
        if self.state.is_expecting_assertions and calls == 0:
            raise ExpectationError("expected any number of assertion, but got none")


def create_expect(test: "Test | None" = None) -> Expect:
    return Expect(test)
