"""Structured error objects, remediation hints and aggregation helpers.

Every failure inside the engine is represented as a :class:`TagError` rather
than a bare string or an exception.  Errors carry a ``type`` from
:class:`ErrorType`, a coarse :class:`ErrorCategory`, the resource they relate
to (when known), free-form ``context`` and a list of canned ``suggestions``.

Exceptions are reserved for the IO boundary (executor adapters) and for the
single fatal precondition of a planning cycle, an invalid screen snapshot.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping


def utc_now() -> datetime:
    """Return a timezone-aware UTC timestamp."""
    return datetime.now(timezone.utc)


class ErrorType(str, Enum):
    """Classification of planning and execution failures."""

    NEGATIVE_OFFSET = "NEGATIVE_OFFSET"
    INVALID_ABSOLUTE_SPEC = "INVALID_ABSOLUTE_SPEC"
    INVALID_NAME = "INVALID_NAME"
    DEPENDENT_CREATION_FAILED = "DEPENDENT_CREATION_FAILED"
    CREATION_FAILED = "CREATION_FAILED"
    INVALID_SNAPSHOT = "INVALID_SNAPSHOT"
    TAG_OVERFLOW = "TAG_OVERFLOW"


class ErrorCategory(str, Enum):
    """Where a failure originates and how recoverable it is."""

    VALIDATION = "validation"
    EXECUTION = "execution"
    SYSTEM = "system"


class ErrorPhase(str, Enum):
    """Pipeline phase used to group errors for presentation."""

    TAG_RESOLUTION = "tag_resolution"
    EXECUTION = "execution"


_DEFAULT_CATEGORY: Dict[ErrorType, ErrorCategory] = {
    ErrorType.NEGATIVE_OFFSET: ErrorCategory.VALIDATION,
    ErrorType.INVALID_ABSOLUTE_SPEC: ErrorCategory.VALIDATION,
    ErrorType.INVALID_NAME: ErrorCategory.VALIDATION,
    ErrorType.TAG_OVERFLOW: ErrorCategory.VALIDATION,
    ErrorType.DEPENDENT_CREATION_FAILED: ErrorCategory.EXECUTION,
    ErrorType.CREATION_FAILED: ErrorCategory.EXECUTION,
    ErrorType.INVALID_SNAPSHOT: ErrorCategory.SYSTEM,
}

_DEFAULT_PHASE: Dict[ErrorCategory, ErrorPhase] = {
    ErrorCategory.VALIDATION: ErrorPhase.TAG_RESOLUTION,
    ErrorCategory.SYSTEM: ErrorPhase.TAG_RESOLUTION,
    ErrorCategory.EXECUTION: ErrorPhase.EXECUTION,
}


@dataclass(frozen=True, slots=True)
class ErrorMetadata:
    """When and in which phase an error was produced."""

    phase: ErrorPhase
    timestamp: datetime = field(default_factory=utc_now, compare=False)


@dataclass(frozen=True, slots=True)
class TagError:
    """Structured failure or warning raised anywhere in the pipeline."""

    type: ErrorType
    category: ErrorCategory
    message: str
    metadata: ErrorMetadata
    resource_id: str | None = None
    context: Dict[str, Any] = field(default_factory=dict)
    suggestions: tuple[str, ...] = ()

    @property
    def phase(self) -> ErrorPhase:
        return self.metadata.phase

    def with_resource(self, resource_id: str) -> "TagError":
        """Return a copy of the error attached to ``resource_id``."""
        return TagError(
            type=self.type,
            category=self.category,
            message=self.message,
            metadata=self.metadata,
            resource_id=resource_id,
            context=dict(self.context),
            suggestions=self.suggestions,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return a serialisable view of the error."""

        return {
            "type": self.type.value,
            "category": self.category.value,
            "resource_id": self.resource_id,
            "message": self.message,
            "context": dict(self.context),
            "suggestions": list(self.suggestions),
            "metadata": {
                "timestamp": self.metadata.timestamp.isoformat(),
                "phase": self.metadata.phase.value,
            },
        }


@dataclass(slots=True)
class AggregateError:
    """Several errors grouped for presentation."""

    message: str
    errors: List[TagError] = field(default_factory=list)
    by_phase: Dict[ErrorPhase, List[TagError]] = field(default_factory=dict)
    type_counts: Dict[ErrorType, int] = field(default_factory=dict)

    @property
    def count(self) -> int:
        return len(self.errors)


class InvalidSnapshotError(RuntimeError):
    """Raised when a planning cycle receives a snapshot it cannot resolve against."""

    def __init__(self, error: TagError) -> None:
        super().__init__(error.message)
        self.error = error


class ExecutorError(RuntimeError):
    """Raised when an executor cannot talk to its environment."""


class SlotCreationError(ExecutorError):
    """Raised when an executor fails to create a named slot."""


def suggest(error_type: ErrorType | str, context: Mapping[str, Any] | None = None) -> List[str]:
    """Return canned remediation hints for ``error_type``."""
    context = context or {}
    try:
        kind = ErrorType(error_type)
    except ValueError:
        kind = None

    if kind is ErrorType.TAG_OVERFLOW:
        max_index = context.get("max_index", 9)
        suggestions = [f'Use an absolute specification instead (e.g., "{max_index}")']
        original = context.get("original_index")
        current = context.get("current_index")
        relative = context.get("kind", "relative") == "relative"
        if relative and isinstance(original, int) and isinstance(current, int):
            suggestions.append(f"Check if relative offset +{original - current} was intended")
        return suggestions
    if kind is ErrorType.NEGATIVE_OFFSET:
        return [
            "Use an offset that keeps the target at or above slot 1",
            'Use an absolute specification such as "1" to target the first slot',
        ]
    if kind is ErrorType.INVALID_ABSOLUTE_SPEC:
        return [
            "Absolute slot indices must be whole numbers of 1 or more",
            'Valid examples: tag = "3" (absolute), tag = 2 (relative), tag = "editor" (named)',
        ]
    if kind is ErrorType.INVALID_NAME:
        return [
            "Slot names must be non-empty strings",
            "Use only letters, numbers, underscore, or dash in slot names",
        ]
    if kind is ErrorType.CREATION_FAILED:
        return [
            "Check that the window manager is running and reachable",
            "Retry with --dry-run to preview the planned slot creations",
        ]
    if kind is ErrorType.DEPENDENT_CREATION_FAILED:
        return [
            "Fix the failed slot creation this resource depends on",
            "Point the resource at an existing slot instead",
        ]
    if kind is ErrorType.INVALID_SNAPSHOT:
        return [
            "Ensure the focused screen has a selected slot",
            "Capture a fresh screen snapshot and plan again",
        ]
    return ["Report this issue if the problem persists"]


def make_error(
    error_type: ErrorType,
    message: str,
    *,
    resource_id: str | None = None,
    context: Mapping[str, Any] | None = None,
    category: ErrorCategory | None = None,
    phase: ErrorPhase | None = None,
) -> TagError:
    """Build a :class:`TagError` with default category, phase and suggestions."""
    resolved_category = category or _DEFAULT_CATEGORY[error_type]
    resolved_phase = phase or _DEFAULT_PHASE[resolved_category]
    payload = dict(context or {})
    return TagError(
        type=error_type,
        category=resolved_category,
        message=message,
        metadata=ErrorMetadata(phase=resolved_phase),
        resource_id=resource_id,
        context=payload,
        suggestions=tuple(suggest(error_type, payload)),
    )


def aggregate(errors: Iterable[TagError]) -> AggregateError:
    """Group ``errors`` by phase and summarise them by type."""
    collected = list(errors)
    if not collected:
        return AggregateError(message="No errors occurred")

    by_phase: Dict[ErrorPhase, List[TagError]] = {}
    for error in collected:
        by_phase.setdefault(error.phase, []).append(error)

    counts = Counter(error.type for error in collected)
    if len(collected) == 1:
        message = collected[0].message
    else:
        parts = [
            error_type.value if count == 1 else f"{count}x {error_type.value}"
            for error_type, count in counts.items()
        ]
        message = f"{len(collected)} errors occurred: {', '.join(parts)}"

    return AggregateError(
        message=message,
        errors=collected,
        by_phase=by_phase,
        type_counts=dict(counts),
    )


__all__ = [
    "AggregateError",
    "ErrorCategory",
    "ErrorMetadata",
    "ErrorPhase",
    "ErrorType",
    "ExecutorError",
    "InvalidSnapshotError",
    "SlotCreationError",
    "TagError",
    "aggregate",
    "make_error",
    "suggest",
    "utc_now",
]
