"""Operation context: who is saving and whether history is recorded.

The context lives in a ContextVar, so each asyncio task and thread sees
its own value. ``without_histories()`` and ``as_user()`` scope a change
to a block; ``Record.save(context=...)`` accepts one explicitly.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, replace

from dossier.providers.users import CurrentUser


@dataclass(frozen=True)
class OperationContext:
    """Per-operation audit settings."""

    user: CurrentUser | None = None
    record_history: bool = True


_operation_context: ContextVar[OperationContext | None] = ContextVar(
    "operation_context", default=None
)


def get_operation_context() -> OperationContext:
    """Get the operation context for the current task."""
    return _operation_context.get() or OperationContext()


def set_operation_context(ctx: OperationContext) -> None:
    """Set the operation context for the current task."""
    _operation_context.set(ctx)


def clear_operation_context() -> None:
    """Clear the operation context."""
    _operation_context.set(None)


@contextmanager
def operation_context(ctx: OperationContext) -> Iterator[OperationContext]:
    """Run a block under ``ctx``, restoring the previous context afterwards."""
    token = _operation_context.set(ctx)
    try:
        yield ctx
    finally:
        _operation_context.reset(token)


@contextmanager
def without_histories() -> Iterator[OperationContext]:
    """Suppress history entries for saves made inside the block.

    Existing history is untouched; only new entries are skipped.
    """
    with operation_context(replace(get_operation_context(), record_history=False)) as ctx:
        yield ctx


@contextmanager
def as_user(user: CurrentUser) -> Iterator[OperationContext]:
    """Attribute saves made inside the block to ``user``."""
    with operation_context(replace(get_operation_context(), user=user)) as ctx:
        yield ctx
