"""
Core type definitions for casetree.

This module contains the run-mode vocabulary and the immutable modifier
record that declaration chains accumulate before a node is created.
"""

from enum import Enum

from attrs import evolve, frozen

DEFAULT_REPEATS = 5


class RunMode(Enum):
    """Resolved disposition of a node."""

    RUN = "run"
    SKIP = "skip"
    ONLY = "only"
    TODO = "todo"
    REPEATS = "repeats"


@frozen
class Modifiers:
    """Boolean modifiers collected by chaining (`describe.skip.concurrent`).

    Every chained attribute produces a new record; nothing is mutated, so the
    order in which modifiers are chained cannot influence the outcome.
    """

    concurrent: bool = False
    shuffle: bool = False
    skip: bool = False
    only: bool = False
    todo: bool = False
    fails: bool = False
    repeats: bool = False

    def with_flag(self, name: str) -> "Modifiers":
        return evolve(self, **{name: True})


NO_MODIFIERS = Modifiers()

MODIFIER_NAMES = frozenset(
    ("concurrent", "shuffle", "skip", "only", "todo", "fails", "repeats")
)


def resolve_mode(modifiers: Modifiers) -> RunMode:
    """Resolve the single run mode for a set of modifiers.

    Precedence is fixed: only > skip > todo > repeats > run.

    Params:
        modifiers: Flags accumulated on a declaration chain.

    Returns:
        The winning `RunMode`.
    """
    if modifiers.only:
        return RunMode.ONLY
    if modifiers.skip:
        return RunMode.SKIP
    if modifiers.todo:
        return RunMode.TODO
    if modifiers.repeats:
        return RunMode.REPEATS
    return RunMode.RUN


def resolve_repeats(mode: RunMode, repeats: int | None) -> int | None:
    """Repeat count for a node: an explicit count wins, `repeats` mode defaults to 5."""
    if mode is RunMode.REPEATS and not repeats:
        return DEFAULT_REPEATS
    return repeats
