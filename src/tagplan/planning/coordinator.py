"""Execution coordinator that realizes an operation plan through an executor."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict

from ..errors import ErrorType, ExecutorError, make_error
from ..executors.base import SlotExecutor
from ..models import (
    Assignment,
    CreatedSlot,
    ExecutionFailure,
    ExecutionResult,
    ExecutionStatus,
    OperationPlan,
    Slot,
)

LOGGER = logging.getLogger(__name__)


def execute(plan: OperationPlan, executor: SlotExecutor) -> ExecutionResult:
    """Create the plan's missing slots and bind its assignments.

    Creation failures are recorded and do not stop the remaining creations.
    Assignments that depend on a failed creation are reported as
    ``DEPENDENT_CREATION_FAILED``; every other assignment is bound.
    """
    result = ExecutionResult()
    created: Dict[str, Slot] = {}
    failed: Dict[str, str] = {}

    for name in plan.creations:
        try:
            slot = executor.create_named_slot(name)
        except ExecutorError as error:
            LOGGER.warning("Failed to create slot %s: %s", name, error)
            _record_creation_failure(result, failed, name, str(error))
            continue
        except Exception as error:
            LOGGER.exception("Unexpected error from %s creating slot %s", executor.label, name)
            _record_creation_failure(result, failed, name, f"{type(error).__name__}: {error}")
            continue

        LOGGER.info("Created slot %s at index %d", name, slot.index)
        created[name] = slot
        result.created.append(CreatedSlot(name=name, slot=slot))

    for assignment in plan.assignments:
        target = assignment.target
        if not target.needs_creation:
            result.bound_assignments.append(assignment)
            continue

        name = target.name or ""
        slot = created.get(name)
        if slot is None:
            reason = failed.get(name, "slot was not created")
            result.failures.append(
                ExecutionFailure(
                    subject=assignment.resource_name,
                    error=make_error(
                        ErrorType.DEPENDENT_CREATION_FAILED,
                        f"Resource '{assignment.resource_name}' depends on slot '{name}', "
                        f"which could not be created",
                        resource_id=assignment.resource_name,
                        context={"slot_name": name, "reason": reason},
                    ),
                )
            )
            continue

        bound_target = replace(target, resolved_index=slot.index)
        result.bound_assignments.append(
            Assignment(resource_name=assignment.resource_name, target=bound_target)
        )

    result.overall_status = _overall_status(plan, result)
    LOGGER.debug(
        "Executed plan: %d created, %d bound, %d failure(s) -> %s",
        len(result.created),
        len(result.bound_assignments),
        len(result.failures),
        result.overall_status.value,
    )
    return result


def _record_creation_failure(
    result: ExecutionResult,
    failed: Dict[str, str],
    name: str,
    reason: str,
) -> None:
    failed[name] = reason
    result.failures.append(
        ExecutionFailure(
            subject=name,
            error=make_error(
                ErrorType.CREATION_FAILED,
                f"Failed to create slot '{name}': {reason}",
                context={"slot_name": name, "reason": reason},
            ),
        )
    )


def _overall_status(plan: OperationPlan, result: ExecutionResult) -> ExecutionStatus:
    if not result.failures and not plan.errors:
        return ExecutionStatus.SUCCESS
    if not result.bound_assignments and plan.total_resources > 0:
        return ExecutionStatus.FAILURE
    return ExecutionStatus.PARTIAL_SUCCESS


__all__ = ["execute"]
