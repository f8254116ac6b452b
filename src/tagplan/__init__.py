"""Tag resolution and planning engine for window-manager slot placement."""

from .errors import (
    AggregateError,
    ErrorCategory,
    ErrorPhase,
    ErrorType,
    ExecutorError,
    InvalidSnapshotError,
    SlotCreationError,
    TagError,
    aggregate,
    suggest,
)
from .models import (
    AbsoluteSpec,
    Assignment,
    ExecutionResult,
    ExecutionStatus,
    NamedSpec,
    OperationPlan,
    RelativeSpec,
    ResolvedTarget,
    Resource,
    ScreenContext,
    Slot,
    TargetKind,
)

__all__ = [
    "AbsoluteSpec",
    "AggregateError",
    "Assignment",
    "ErrorCategory",
    "ErrorPhase",
    "ErrorType",
    "ExecutionResult",
    "ExecutionStatus",
    "ExecutorError",
    "InvalidSnapshotError",
    "NamedSpec",
    "OperationPlan",
    "RelativeSpec",
    "ResolvedTarget",
    "Resource",
    "ScreenContext",
    "Slot",
    "SlotCreationError",
    "TagError",
    "TargetKind",
    "aggregate",
    "suggest",
]
