"""Executor contract shared by the live, dry-run and test adapters."""

from __future__ import annotations

from ..models import ScreenContext, Slot


class SlotExecutor:
    """Side-effecting adapter between the planning engine and a window manager.

    Subclasses supply the three primitives below.  The planning core never
    calls them directly: callers capture a snapshot with
    :meth:`get_screen_context` before planning, and only the execution
    coordinator calls :meth:`create_named_slot`, once per planned creation.
    Failures are reported by raising :class:`~tagplan.errors.ExecutorError`.
    """

    #: Short label used in logs and CLI output.
    label = "executor"

    def get_screen_context(self) -> ScreenContext:
        """Capture an immutable snapshot of the focused screen."""
        raise NotImplementedError

    def find_named_slot(self, name: str) -> Slot | None:
        """Return the slot named ``name`` if it exists."""
        raise NotImplementedError

    def create_named_slot(self, name: str) -> Slot:
        """Create a slot named ``name`` and return it."""
        raise NotImplementedError


__all__ = ["SlotExecutor"]
