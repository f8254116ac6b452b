from __future__ import annotations

import pytest

from tagplan.errors import ErrorCategory, ErrorType
from tagplan.models import AbsoluteSpec, NamedSpec, RelativeSpec, ScreenContext, TargetKind
from tagplan.planning.resolver import resolve


def test_relative_offset_adds_to_current_slot(make_context) -> None:
    resolution = resolve(RelativeSpec(offset=2), make_context(current=2))

    assert resolution.ok
    assert resolution.target.kind == TargetKind.RELATIVE
    assert resolution.target.resolved_index == 4
    assert resolution.target.overflow is False
    assert resolution.warnings == ()


def test_relative_offsets_within_range_are_exact(make_context) -> None:
    for current in range(1, 10):
        ctx = make_context(current=current)
        for offset in range(1 - current, 10 - current):
            resolution = resolve(RelativeSpec(offset=offset), ctx)
            assert resolution.target.resolved_index == current + offset
            assert not resolution.target.overflow


def test_relative_overflow_clamps_to_max_index_with_warning(make_context) -> None:
    resolution = resolve(RelativeSpec(offset=9), make_context(current=2), max_index=9)

    assert resolution.ok
    assert resolution.target.resolved_index == 9
    assert resolution.target.overflow is True
    assert resolution.target.original_index == 11
    assert len(resolution.warnings) == 1
    warning = resolution.warnings[0]
    assert warning.type == ErrorType.TAG_OVERFLOW
    assert any("absolute" in hint for hint in warning.suggestions)
    assert any("+9" in hint for hint in warning.suggestions)


def test_relative_below_first_slot_is_rejected(make_context) -> None:
    resolution = resolve(RelativeSpec(offset=-2), make_context(current=2))

    assert not resolution.ok
    assert resolution.target is None
    assert resolution.error.type == ErrorType.NEGATIVE_OFFSET
    assert resolution.error.category == ErrorCategory.VALIDATION
    assert resolution.error.context["resolved_index"] == 0


def test_relative_negative_offset_reaching_first_slot_is_allowed(make_context) -> None:
    resolution = resolve(RelativeSpec(offset=-1), make_context(current=2))

    assert resolution.target.resolved_index == 1


def test_max_index_is_configurable(make_context) -> None:
    resolution = resolve(RelativeSpec(offset=4), make_context(current=2), max_index=5)

    assert resolution.target.resolved_index == 5
    assert resolution.target.overflow is True


@pytest.mark.parametrize("index", [3, "3", " 3 "])
def test_absolute_index_accepts_numbers_and_digit_strings(make_context, index) -> None:
    resolution = resolve(AbsoluteSpec(index=index), make_context(current=5))

    assert resolution.target.kind == TargetKind.ABSOLUTE
    assert resolution.target.resolved_index == 3


def test_absolute_overflow_is_clamped(make_context) -> None:
    resolution = resolve(AbsoluteSpec(index="12"), make_context())

    assert resolution.target.resolved_index == 9
    assert resolution.target.overflow is True
    assert resolution.warnings[0].context["original_index"] == 12
    assert not any("relative offset" in hint for hint in resolution.warnings[0].suggestions)


@pytest.mark.parametrize("index", ["0", "abc", "-1", "", 0, "3.5"])
def test_absolute_invalid_indices_are_validation_errors(make_context, index) -> None:
    resolution = resolve(AbsoluteSpec(index=index), make_context())

    assert not resolution.ok
    assert resolution.error.type == ErrorType.INVALID_ABSOLUTE_SPEC
    assert resolution.error.suggestions


def test_absolute_index_beyond_int_conversion_limit_is_invalid(make_context) -> None:
    resolution = resolve(AbsoluteSpec(index="9" * 5000), make_context())

    assert not resolution.ok
    assert resolution.error.type == ErrorType.INVALID_ABSOLUTE_SPEC


def test_named_existing_slot_resolves_to_its_index(make_context) -> None:
    ctx = make_context(named=[(10, "editor")])

    resolution = resolve(NamedSpec(name="editor"), ctx)

    assert resolution.target.kind == TargetKind.NAMED
    assert resolution.target.resolved_index == 10
    assert resolution.target.needs_creation is False
    assert resolution.target.name == "editor"


def test_named_missing_slot_needs_creation(make_context) -> None:
    resolution = resolve(NamedSpec(name="workspace"), make_context())

    assert resolution.ok
    assert resolution.target.needs_creation is True
    assert resolution.target.resolved_index is None


@pytest.mark.parametrize("name", ["", "   "])
def test_named_empty_name_is_invalid(make_context, name) -> None:
    resolution = resolve(NamedSpec(name=name), make_context())

    assert resolution.error.type == ErrorType.INVALID_NAME


def test_invalid_snapshot_is_a_system_error() -> None:
    ctx = ScreenContext(current_index=0, existing_slots=(), slot_count=0)

    resolution = resolve(RelativeSpec(offset=1), ctx)

    assert resolution.error.type == ErrorType.INVALID_SNAPSHOT
    assert resolution.error.category == ErrorCategory.SYSTEM


def test_resolution_is_referentially_transparent(make_context) -> None:
    ctx = make_context(current=3)
    for spec in (RelativeSpec(offset=20), AbsoluteSpec(index="x"), NamedSpec(name="web")):
        assert resolve(spec, ctx) == resolve(spec, ctx)


def test_unknown_specification_type_is_rejected(make_context) -> None:
    with pytest.raises(TypeError):
        resolve(object(), make_context())  # type: ignore[arg-type]
