"""Assertion-engine handle attached to test contexts."""

from casetree.assertions.expect import (
    Assertion,
    Expect,
    MatcherState,
    add_equality_testers,
    create_expect,
    equals,
    get_equality_testers,
    reset_equality_testers,
)

__all__ = [
    "Assertion",
    "Expect",
    "MatcherState",
    "add_equality_testers",
    "create_expect",
    "equals",
    "get_equality_testers",
    "reset_equality_testers",
]
