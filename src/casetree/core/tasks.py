"""
Task node shapes for the collected tree.

The finalized tree handed to an execution engine is made of `Suite`, `Test`
and `CustomTask` nodes. Parent links (`suite`) and the owning declaration
unit (`file`) are back-references, so they are excluded from `repr` and nodes
compare by identity.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Literal

from casetree.core.types import RunMode

if TYPE_CHECKING:
    from casetree.collection.context import TaskContext

HookFunction = Callable[..., Any]

HOOK_NAMES = ("before_all", "after_all", "before_each", "after_each")


@dataclass
class SuiteHooks:
    """Ordered callback sequences registered on a suite."""

    before_all: list[HookFunction] = field(default_factory=list)
    after_all: list[HookFunction] = field(default_factory=list)
    before_each: list[HookFunction] = field(default_factory=list)
    after_each: list[HookFunction] = field(default_factory=list)

    def get(self, hook_name: str) -> list[HookFunction]:
        return getattr(self, hook_name)


@dataclass(eq=False)
class Task:
    """Shape shared by every node kind."""

    name: str
    mode: RunMode = RunMode.RUN
    id: str = ""
    suite: "Suite | None" = field(default=None, repr=False)
    file: "File | None" = field(default=None, repr=False)


@dataclass(eq=False)
class Suite(Task):
    """Internal node: ordered children plus hooks."""

    type: Literal["suite"] = field(default="suite", init=False)
    tasks: list[Task] = field(default_factory=list)
    shuffle: bool = False
    repeats: int | None = None
    hooks: SuiteHooks = field(default_factory=SuiteHooks, repr=False)


@dataclass(eq=False)
class File(Suite):
    """Root suite standing for one declaration unit."""

    filepath: str = ""


@dataclass(eq=False)
class Test(Task):
    """Leaf node holding a wrapped user function.

    The wrapped body and the per-test context are plain attributes rather
    than dataclass fields so that field-based traversal (`fields`, `asdict`)
    never sees them.
    """

    __test__ = False

    type: Literal["test"] = field(default="test", init=False)
    concurrent: bool = False
    shuffle: bool = False
    retry: int | None = None
    fails: bool = False
    repeats: int | None = None
    pending: bool = False
    on_failed: list[Callable[..., Any]] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        self._fn: Callable[[], Awaitable[Any]] | None = None
        self._context: "TaskContext | None" = None

    @property
    def fn(self) -> Callable[[], Awaitable[Any]] | None:
        return self._fn

    @property
    def context(self) -> "TaskContext | None":
        return self._context

    def bind(self, fn: Callable[[], Awaitable[Any]], context: "TaskContext") -> None:
        """Attach the wrapped body and its context."""
        self._fn = fn
        self._context = context


@dataclass(eq=False)
class CustomTask(Task):
    """Non-executable placeholder leaf for extensions with their own semantics."""

    type: Literal["custom"] = field(default="custom", init=False)


def get_names(task: Task) -> list[str]:
    """Names from the outermost named ancestor down to `task`."""
    names = [task.name]
    current: Task | None = task
    while current is not None:
        parent = current.suite or current.file
        if parent is current:
            break
        current = parent
        if current is not None and current.name:
            names.insert(0, current.name)
    return names


def get_full_name(task: Task) -> str:
    return " > ".join(get_names(task))
