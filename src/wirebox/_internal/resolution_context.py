from __future__ import annotations

import asyncio
import threading
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field

from wirebox.exceptions import WireboxCircularDependencyError


@dataclass(frozen=True, slots=True)
class ResolutionFrame:
    """One identifier under construction: canonical key plus its display label."""

    key: str
    label: str


@dataclass(slots=True)
class ResolutionContext:
    """Track the identifiers currently being resolved by one top-level call.

    The stack is empty at rest. Every frame is pushed on entry and popped on
    exit regardless of how the frame ends, so an error never leaves stale
    breadcrumbs behind.
    """

    frames: list[ResolutionFrame] = field(default_factory=list)

    def push(self, key: str, label: str) -> None:
        """Push a frame, failing when ``key`` is already under construction."""
        if any(frame.key == key for frame in self.frames):
            raise WireboxCircularDependencyError([*self.chain(), label])
        self.frames.append(ResolutionFrame(key=key, label=label))

    def pop(self) -> None:
        self.frames.pop()

    @contextmanager
    def frame(self, key: str, label: str) -> Generator[None, None, None]:
        self.push(key, label)
        try:
            yield
        finally:
            self.pop()

    def chain(self) -> list[str]:
        return [frame.label for frame in self.frames]

    def breadcrumb(self) -> str:
        return " -> ".join(self.chain()) if self.frames else "(root)"


# Stores (owner_id, context) so a context inherited by another thread or task is cloned
_resolution_context: ContextVar[tuple[tuple[int, int | None], ResolutionContext] | None] = (
    ContextVar("wirebox_resolution_context", default=None)
)


def _get_owner_id() -> tuple[int, int | None]:
    """Identify the current thread and, when running inside one, the async task."""
    try:
        task = asyncio.current_task()
    except RuntimeError:
        task = None
    return threading.get_ident(), id(task) if task is not None else None


def get_resolution_context() -> ResolutionContext:
    """Get the current thread's (or task's) resolution context.

    When called from a different thread or task than the one that created the
    context, returns a cloned copy so concurrent resolutions never share a
    stack.
    """
    owner_id = _get_owner_id()
    stored = _resolution_context.get()

    if stored is None:
        context = ResolutionContext()
        _resolution_context.set((owner_id, context))
        return context

    stored_owner_id, context = stored
    if stored_owner_id != owner_id:
        cloned = ResolutionContext(frames=list(context.frames))
        _resolution_context.set((owner_id, cloned))
        return cloned

    return context


__all__ = ["ResolutionContext", "ResolutionFrame", "get_resolution_context"]
