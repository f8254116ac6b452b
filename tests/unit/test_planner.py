from __future__ import annotations

import inspect

import pytest

from tagplan.errors import ErrorType, InvalidSnapshotError
from tagplan.models import AbsoluteSpec, NamedSpec, RelativeSpec, Resource, ScreenContext
from tagplan.planning import planner, resolver
from tagplan.planning.planner import plan


def test_single_invalid_resource_does_not_abort_batch(make_context) -> None:
    resources = [
        Resource(name="editor", spec=RelativeSpec(offset=1)),
        Resource(name="broken", spec=AbsoluteSpec(index="abc")),
        Resource(name="browser", spec=AbsoluteSpec(index="3")),
        Resource(name="notes", spec=NamedSpec(name="notes")),
    ]

    result = plan(resources, make_context(current=2))

    assert len(result.assignments) == 3
    assert len(result.errors) == 1
    assert result.errors[0].resource_name == "broken"
    assert result.errors[0].error.type == ErrorType.INVALID_ABSOLUTE_SPEC
    assert result.errors[0].error.resource_id == "broken"
    assert [entry.resource_name for entry in result.assignments] == ["editor", "browser", "notes"]
    assert result.total_resources == len(resources)


def test_oversized_absolute_index_is_contained_to_its_resource(make_context) -> None:
    resources = [
        Resource(name="ok", spec=RelativeSpec(offset=1)),
        Resource(name="huge", spec=AbsoluteSpec(index="9" * 5000)),
    ]

    result = plan(resources, make_context())

    assert [entry.resource_name for entry in result.assignments] == ["ok"]
    assert [entry.resource_name for entry in result.errors] == ["huge"]
    assert result.errors[0].error.type == ErrorType.INVALID_ABSOLUTE_SPEC


def test_named_creation_is_deduplicated(make_context) -> None:
    resources = [
        Resource(name="term", spec=NamedSpec(name="workspace")),
        Resource(name="editor", spec=NamedSpec(name="workspace")),
        Resource(name="chat", spec=NamedSpec(name="comms")),
        Resource(name="mail", spec=NamedSpec(name="comms")),
    ]

    result = plan(resources, make_context())

    assert result.creations == ("workspace", "comms")
    assert all(entry.target.needs_creation for entry in result.assignments)


def test_existing_named_slot_is_not_created(make_context) -> None:
    ctx = make_context(named=[(10, "workspace")])

    result = plan([Resource(name="term", spec=NamedSpec(name="workspace"))], ctx)

    assert result.creations == ()
    assert result.assignments[0].target.resolved_index == 10


def test_overflow_warnings_are_attached_to_resources(make_context) -> None:
    resources = [
        Resource(name="x", spec=RelativeSpec(offset=9)),
        Resource(name="y", spec=AbsoluteSpec(index=20)),
    ]

    result = plan(resources, make_context(current=2))

    assert [warning.resource_id for warning in result.warnings] == ["x", "y"]
    assert all(warning.type == ErrorType.TAG_OVERFLOW for warning in result.warnings)
    assert result.errors == ()
    assert [entry.target.resolved_index for entry in result.assignments] == [9, 9]


def test_planning_is_idempotent(make_context) -> None:
    ctx = make_context(current=4, named=[(10, "docs")])
    resources = [
        Resource(name="a", spec=RelativeSpec(offset=7)),
        Resource(name="b", spec=AbsoluteSpec(index="0")),
        Resource(name="c", spec=NamedSpec(name="docs")),
        Resource(name="d", spec=NamedSpec(name="fresh")),
    ]

    assert plan(resources, ctx) == plan(resources, ctx)


def test_duplicate_resource_names_are_reported(make_context) -> None:
    resources = [
        Resource(name="app", spec=RelativeSpec(offset=0)),
        Resource(name="app", spec=RelativeSpec(offset=1)),
    ]

    result = plan(resources, make_context())

    assert len(result.assignments) == 1
    assert result.errors[0].error.type == ErrorType.INVALID_NAME
    assert result.errors[0].error.context["reason"] == "duplicate_resource"


def test_invalid_snapshot_aborts_planning() -> None:
    ctx = ScreenContext(current_index=5, existing_slots=(), slot_count=3)

    with pytest.raises(InvalidSnapshotError) as excinfo:
        plan([Resource(name="a", spec=RelativeSpec(offset=0))], ctx)

    assert excinfo.value.error.type == ErrorType.INVALID_SNAPSHOT


def test_empty_batch_yields_empty_plan(make_context) -> None:
    result = plan([], make_context())

    assert result.assignments == ()
    assert result.errors == ()
    assert result.is_empty
    assert result.metadata["total_resources"] == 0


def test_plan_metadata_records_snapshot_parameters(make_context) -> None:
    result = plan([Resource(name="a", spec=RelativeSpec(offset=1))], make_context(current=3), max_index=6)

    assert result.metadata == {"current_index": 3, "max_index": 6, "total_resources": 1}


def test_resource_accepts_raw_specification_payload(make_context) -> None:
    resource = Resource.model_validate({"name": "editor", "spec": {"kind": "relative", "offset": 2}})

    result = plan([resource], make_context(current=2))

    assert result.assignments[0].target.resolved_index == 4


def test_pure_planning_modules_do_not_depend_on_executors() -> None:
    for module in (planner, resolver):
        assert "executors" not in inspect.getsource(module)
