"""Executor that simulates slot operations and records them for previews."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List

from ..errors import SlotCreationError, utc_now
from ..models import DEFAULT_MAX_INDEX, ScreenContext, Slot
from .base import SlotExecutor

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DryRunOperation:
    """Single simulated operation recorded by :class:`DryRunExecutor`."""

    operation: str
    slot_name: str
    details: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=utc_now, compare=False)


def default_context(slot_count: int = DEFAULT_MAX_INDEX, current_index: int = 1) -> ScreenContext:
    """Build a snapshot of ``slot_count`` numbered slots named after their index."""
    slots = tuple(Slot(index=index, name=str(index)) for index in range(1, slot_count + 1))
    return ScreenContext(current_index=current_index, existing_slots=slots, slot_count=slot_count)


class DryRunExecutor(SlotExecutor):
    """Record intended slot mutations without touching the window manager."""

    label = "dry-run"

    def __init__(self, context: ScreenContext | None = None) -> None:
        self._base_context = context or default_context()
        self._simulated: List[Slot] = []
        self._log: List[DryRunOperation] = []

    @property
    def operations(self) -> tuple[DryRunOperation, ...]:
        """Return the operations recorded during this session."""
        return tuple(self._log)

    @property
    def simulated_slots(self) -> tuple[Slot, ...]:
        return tuple(self._simulated)

    def clear(self) -> None:
        """Reset simulated slots and the operation log for a new session."""
        self._simulated.clear()
        self._log.clear()

    def get_screen_context(self) -> ScreenContext:
        return self._base_context

    def find_named_slot(self, name: str) -> Slot | None:
        slot = self._lookup(name)
        self._record("find_slot", name, found=slot is not None)
        return slot

    def create_named_slot(self, name: str) -> Slot:
        if not name or not name.strip():
            raise SlotCreationError("slot name must be a non-empty string")

        existing = self._lookup(name)
        if existing is not None:
            self._record("create_slot", name, result="existing_found", index=existing.index)
            return existing

        slot = Slot(index=self._next_index(), name=name)
        self._simulated.append(slot)
        self._record("create_slot", name, result="created", index=slot.index)
        LOGGER.info("[dry-run] would create slot %s at index %d", name, slot.index)
        return slot

    def _lookup(self, name: str) -> Slot | None:
        if not name:
            return None
        found = self._base_context.find_slot(name)
        if found is not None:
            return found
        for slot in self._simulated:
            if slot.name == name:
                return slot
        return None

    def _next_index(self) -> int:
        """Return the index a new slot would get: one past every existing slot.

        Window managers append created slots after the existing ones, so this
        can exceed ``max_index``; only planned targets are clamped, never
        creation results.
        """
        indices = [slot.index for slot in self._base_context.existing_slots]
        indices.extend(slot.index for slot in self._simulated)
        highest = max(indices, default=0)
        return max(highest, self._base_context.slot_count) + 1

    def _record(self, operation: str, name: str, **details: Any) -> None:
        self._log.append(DryRunOperation(operation=operation, slot_name=name, details=details))


__all__ = ["DryRunExecutor", "DryRunOperation", "default_context"]
