"""Typed records exchanged between the tag planning engine and its callers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from .errors import TagError

DEFAULT_MAX_INDEX = 9


class RecordModel(BaseModel):
    """Base Pydantic model for immutable input values."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class TargetKind(str, Enum):
    """Addressing mode a resolved target was produced from."""

    RELATIVE = "relative"
    ABSOLUTE = "absolute"
    NAMED = "named"


class ExecutionStatus(str, Enum):
    """Overall outcome of executing an operation plan."""

    SUCCESS = "success"
    PARTIAL_SUCCESS = "partial_success"
    FAILURE = "failure"


class Slot(RecordModel):
    """Addressable placement target on the screen."""

    index: int
    name: Optional[str] = None


class ScreenContext(RecordModel):
    """Snapshot of the slots available at the moment a plan is requested."""

    current_index: int
    existing_slots: Tuple[Slot, ...] = ()
    slot_count: int = 0

    def is_valid(self) -> bool:
        return 1 <= self.current_index <= self.slot_count

    def find_slot(self, name: str) -> Slot | None:
        """Return the first slot carrying ``name`` or ``None``."""
        for slot in self.existing_slots:
            if slot.name == name:
                return slot
        return None


class RelativeSpec(RecordModel):
    """Offset from the current slot; ``0`` keeps the resource in place."""

    kind: Literal["relative"] = "relative"
    offset: int


class AbsoluteSpec(RecordModel):
    """Explicit slot index, given either as a number or a digit string."""

    kind: Literal["absolute"] = "absolute"
    index: Union[int, str]


class NamedSpec(RecordModel):
    """Slot addressed by a human-readable name, created on demand."""

    kind: Literal["named"] = "named"
    name: str


TagSpecification = Annotated[
    Union[RelativeSpec, AbsoluteSpec, NamedSpec],
    Field(discriminator="kind"),
]


class Resource(RecordModel):
    """Planning input: a uniquely named resource and where it should go."""

    name: str
    spec: TagSpecification


@dataclass(frozen=True, slots=True)
class ResolvedTarget:
    """Concrete slot a specification resolved to."""

    kind: TargetKind
    resolved_index: int | None
    name: str | None = None
    overflow: bool = False
    needs_creation: bool = False
    original_index: int | None = None


@dataclass(frozen=True, slots=True)
class Assignment:
    """Binding of one resource to its resolved target."""

    resource_name: str
    target: ResolvedTarget


@dataclass(frozen=True, slots=True)
class PlanError:
    """Resolution failure recorded against a single resource."""

    resource_name: str
    error: TagError


@dataclass(frozen=True, slots=True)
class OperationPlan:
    """Immutable output of pure planning, prior to any side effect."""

    assignments: Tuple[Assignment, ...] = ()
    creations: Tuple[str, ...] = ()
    warnings: Tuple[TagError, ...] = ()
    errors: Tuple[PlanError, ...] = ()
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def total_resources(self) -> int:
        return len(self.assignments) + len(self.errors)

    @property
    def is_empty(self) -> bool:
        """Return True when nothing in the plan can be executed."""
        return not self.assignments and not self.creations


@dataclass(frozen=True, slots=True)
class CreatedSlot:
    """Slot created (or simulated) while executing a plan."""

    name: str
    slot: Slot


@dataclass(frozen=True, slots=True)
class ExecutionFailure:
    """Creation or binding failure, keyed by slot name or resource name."""

    subject: str
    error: TagError


@dataclass(slots=True)
class ExecutionResult:
    """Summary of realizing an operation plan through an executor."""

    created: List[CreatedSlot] = field(default_factory=list)
    bound_assignments: List[Assignment] = field(default_factory=list)
    failures: List[ExecutionFailure] = field(default_factory=list)
    overall_status: ExecutionStatus = ExecutionStatus.SUCCESS

    @property
    def ok(self) -> bool:
        return self.overall_status == ExecutionStatus.SUCCESS

    def index_for(self, resource_name: str) -> int | None:
        """Return the bound slot index for ``resource_name`` if it was bound."""
        for assignment in self.bound_assignments:
            if assignment.resource_name == resource_name:
                return assignment.target.resolved_index
        return None


__all__ = [
    "AbsoluteSpec",
    "Assignment",
    "CreatedSlot",
    "DEFAULT_MAX_INDEX",
    "ExecutionFailure",
    "ExecutionResult",
    "ExecutionStatus",
    "NamedSpec",
    "OperationPlan",
    "PlanError",
    "RecordModel",
    "RelativeSpec",
    "ResolvedTarget",
    "Resource",
    "ScreenContext",
    "Slot",
    "TagSpecification",
    "TargetKind",
]
