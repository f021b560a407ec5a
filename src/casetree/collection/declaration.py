"""
Declaration chains shared by suites and tests.

`DeclarationChain` adds the `each`, `skip_if` and `run_if` combinators on top
of plain modifier chaining. All three act on the chain they are called on,
so `it.concurrent.each(...)` declares concurrent tests.
"""

from collections.abc import Callable, Iterable
from typing import Any

from casetree.core.chain import Chainable
from casetree.templates.each import expand_cases

SUITE_MODIFIERS = ("concurrent", "shuffle", "skip", "only", "todo", "repeats")
TEST_MODIFIERS = ("concurrent", "skip", "only", "todo", "fails", "repeats")
CUSTOM_MODIFIERS = ("skip", "only", "todo", "repeats")


class DeclarationChain(Chainable):
    """Chainable suite/test entry point."""

    def each(self, cases: Iterable[Any] | str, *args: Any) -> Callable[..., None]:
        """Parameterize the declaration over `cases`.

        Params:
            cases: Sequence of case values, or a `|`-separated table string
            args: Flat table values grouped into rows by the table header

        Returns:
            Function `(name, fn, options=None)` registering one child per case
        """
        return expand_cases(self, cases, args)

    def skip_if(self, condition: Any) -> "DeclarationChain":
        return self.skip if condition else self

    def run_if(self, condition: Any) -> "DeclarationChain":
        return self if condition else self.skip
