"""Batch planning of tag operations for a list of resources."""

from __future__ import annotations

import logging
from typing import Iterable, List

from ..errors import ErrorType, InvalidSnapshotError, TagError, make_error
from ..models import (
    DEFAULT_MAX_INDEX,
    Assignment,
    OperationPlan,
    PlanError,
    Resource,
    ScreenContext,
)
from .resolver import resolve, snapshot_error

LOGGER = logging.getLogger(__name__)


def plan(
    resources: Iterable[Resource],
    ctx: ScreenContext,
    *,
    max_index: int = DEFAULT_MAX_INDEX,
) -> OperationPlan:
    """Resolve every resource against ``ctx`` and collect an :class:`OperationPlan`.

    Individual resolution failures are recorded in ``errors`` and never abort
    the batch.  Named slots that need creation are listed once in
    ``creations`` no matter how many resources reference them.  The only
    failure that aborts planning is an invalid snapshot, raised as
    :class:`InvalidSnapshotError` before any resource is examined.
    """
    invalid = snapshot_error(ctx)
    if invalid is not None:
        LOGGER.error("Rejecting screen snapshot: %s", invalid.message)
        raise InvalidSnapshotError(invalid)

    assignments: List[Assignment] = []
    errors: List[PlanError] = []
    warnings: List[TagError] = []
    creations: dict[str, None] = {}
    seen_names: set[str] = set()

    batch = list(resources)
    for resource in batch:
        if resource.name in seen_names:
            duplicate = make_error(
                ErrorType.INVALID_NAME,
                f"Resource name '{resource.name}' is used more than once in this batch",
                resource_id=resource.name,
                context={"resource_name": resource.name, "reason": "duplicate_resource"},
            )
            errors.append(PlanError(resource_name=resource.name, error=duplicate))
            continue
        seen_names.add(resource.name)

        resolution = resolve(resource.spec, ctx, max_index=max_index)
        warnings.extend(warning.with_resource(resource.name) for warning in resolution.warnings)

        if not resolution.ok:
            assert resolution.error is not None
            LOGGER.debug(
                "Resource %s failed to resolve: %s",
                resource.name,
                resolution.error.message,
            )
            errors.append(
                PlanError(
                    resource_name=resource.name,
                    error=resolution.error.with_resource(resource.name),
                )
            )
            continue

        target = resolution.target
        assert target is not None
        assignments.append(Assignment(resource_name=resource.name, target=target))
        if target.needs_creation and target.name is not None:
            creations.setdefault(target.name, None)

    LOGGER.debug(
        "Planned %d assignment(s), %d creation(s), %d warning(s), %d error(s)",
        len(assignments),
        len(creations),
        len(warnings),
        len(errors),
    )

    return OperationPlan(
        assignments=tuple(assignments),
        creations=tuple(creations),
        warnings=tuple(warnings),
        errors=tuple(errors),
        metadata={
            "current_index": ctx.current_index,
            "max_index": max_index,
            "total_resources": len(batch),
        },
    )


__all__ = ["plan"]
