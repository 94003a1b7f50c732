"""Host-side collaborators a decorator talks to."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from hotpotato.freshness.delta import ChangeEvent

ChangeListener = Callable[[ChangeEvent], None]


@runtime_checkable
class DecorationHost(Protocol):
    """Rendering side: owns the thread that draws decorations."""

    def sync_exec(self, fn: Callable[[], None]) -> None:
        """Run *fn* on the render thread and block until it returns."""
        ...

    def update_decorations(self) -> None:
        """Recompute decorations for every visible element."""
        ...


@runtime_checkable
class NotificationSource(Protocol):
    """Delivers change trees after resources are modified."""

    def add_listener(self, listener: ChangeListener) -> None: ...

    def remove_listener(self, listener: ChangeListener) -> None: ...
