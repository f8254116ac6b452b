"""End-to-end tag resolution: snapshot, plan, execute and place every resource."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from .errors import AggregateError, TagError, aggregate
from .executors.base import SlotExecutor
from .models import (
    DEFAULT_MAX_INDEX,
    ExecutionResult,
    OperationPlan,
    Resource,
    ScreenContext,
    TagSpecification,
    TargetKind,
)
from .planning.coordinator import execute
from .planning.planner import plan

LOGGER = logging.getLogger(__name__)

_SINGLE_RESOURCE = "single"


@dataclass(frozen=True, slots=True)
class Placement:
    """Slot a resource should be spawned on, possibly a fallback."""

    resource_name: str
    index: int
    name: str | None = None
    fallback: bool = False
    overflow: bool = False


@dataclass(slots=True)
class WorkflowResult:
    """Everything produced by one resolution cycle."""

    context: ScreenContext
    plan: OperationPlan
    execution: ExecutionResult
    placements: Dict[str, Placement] = field(default_factory=dict)

    @property
    def fallbacks(self) -> List[Placement]:
        return [placement for placement in self.placements.values() if placement.fallback]

    def errors(self) -> List[TagError]:
        """Return plan errors followed by execution failures."""
        collected = [entry.error for entry in self.plan.errors]
        collected.extend(failure.error for failure in self.execution.failures)
        return collected

    def aggregated_errors(self) -> AggregateError:
        return aggregate(self.errors())


def resolve_tags_for_project(
    resources: Iterable[Resource],
    executor: SlotExecutor,
    *,
    max_index: int = DEFAULT_MAX_INDEX,
) -> WorkflowResult:
    """Capture one snapshot, plan all resources and execute the plan.

    Every resource receives a :class:`Placement`.  Resources that failed to
    resolve, or whose named slot could not be created, fall back to the
    snapshot's current slot so spawning can still proceed.  An invalid
    snapshot raises :class:`~tagplan.errors.InvalidSnapshotError`.
    """
    batch = list(resources)
    context = executor.get_screen_context()
    LOGGER.debug(
        "Captured snapshot from %s: current=%d slots=%d",
        executor.label,
        context.current_index,
        context.slot_count,
    )
    operation_plan = plan(batch, context, max_index=max_index)
    execution = execute(operation_plan, executor)
    placements = _placements(batch, context, operation_plan, execution)

    fallbacks = [placement.resource_name for placement in placements.values() if placement.fallback]
    if fallbacks:
        LOGGER.warning(
            "Placing %d resource(s) on current slot %d after failures: %s",
            len(fallbacks),
            context.current_index,
            ", ".join(fallbacks),
        )

    return WorkflowResult(
        context=context,
        plan=operation_plan,
        execution=execution,
        placements=placements,
    )


def resolve_tag(
    spec: TagSpecification,
    executor: SlotExecutor,
    *,
    max_index: int = DEFAULT_MAX_INDEX,
) -> Placement:
    """Resolve a single specification through the batch workflow."""
    result = resolve_tags_for_project(
        [Resource(name=_SINGLE_RESOURCE, spec=spec)],
        executor,
        max_index=max_index,
    )
    return result.placements[_SINGLE_RESOURCE]


def _placements(
    resources: List[Resource],
    context: ScreenContext,
    operation_plan: OperationPlan,
    execution: ExecutionResult,
) -> Dict[str, Placement]:
    bound = {assignment.resource_name: assignment for assignment in execution.bound_assignments}
    planned = {assignment.resource_name: assignment for assignment in operation_plan.assignments}

    placements: Dict[str, Placement] = {}
    for resource in resources:
        if resource.name in placements:
            continue
        assignment = bound.get(resource.name)
        if assignment is not None and assignment.target.resolved_index is not None:
            target = assignment.target
            placements[resource.name] = Placement(
                resource_name=resource.name,
                index=target.resolved_index,
                name=target.name,
                overflow=target.overflow,
            )
            continue

        pending = planned.get(resource.name)
        name = None
        if pending is not None and pending.target.kind == TargetKind.NAMED:
            name = pending.target.name
        placements[resource.name] = Placement(
            resource_name=resource.name,
            index=context.current_index,
            name=name,
            fallback=True,
        )
    return placements


__all__ = [
    "Placement",
    "WorkflowResult",
    "resolve_tag",
    "resolve_tags_for_project",
]
