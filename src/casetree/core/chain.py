"""
Chainable declaration callables.

A `Chainable` wraps a base function that takes a `Modifiers` record as its
first argument. Accessing one of the allowed modifier names as an attribute
returns a new `Chainable` with that flag set, so `describe.skip.concurrent`
and `describe.concurrent.skip` build equal records.
"""

from collections.abc import Callable, Iterable
from typing import Any

from casetree.core.types import MODIFIER_NAMES, NO_MODIFIERS, Modifiers
from casetree.exceptions import DeclarationError


class Chainable:
    """Immutable builder over a declaration function."""

    def __init__(
        self,
        fn: Callable[..., Any],
        keys: Iterable[str],
        modifiers: Modifiers = NO_MODIFIERS,
    ):
        """
        Initialize a chain.

        Params:
            fn: Base function called as `fn(modifiers, *args, **kwargs)`
            keys: Modifier names this chain accepts as attributes
            modifiers: Flags accumulated so far
        """
        keys = frozenset(keys)
        unknown = keys - MODIFIER_NAMES
        if unknown:
            raise DeclarationError("chain", f"unknown modifiers {sorted(unknown)}")
        self.fn = fn
        self.keys = keys
        self.modifiers = modifiers

    def _derive(self, modifiers: Modifiers) -> "Chainable":
        return type(self)(self.fn, self.keys, modifiers)

    def __getattr__(self, name: str) -> "Chainable":
        # Only reached for names that are not regular attributes.
        if name in self.__dict__.get("keys", ()):
            return self._derive(self.modifiers.with_flag(name))
        raise AttributeError(
            f"'{type(self).__name__}' object has no attribute or modifier '{name}'"
        )

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self.fn(self.modifiers, *args, **kwargs)

    def __repr__(self) -> str:
        active = [name for name in sorted(self.keys) if getattr(self.modifiers, name)]
        suffix = "".join(f".{name}" for name in active)
        return f"<{type(self).__name__} {getattr(self.fn, '__name__', 'fn')}{suffix}>"
