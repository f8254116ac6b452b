"""Pure resolution of a single tag specification against a screen snapshot."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from ..errors import ErrorType, TagError, make_error
from ..models import (
    DEFAULT_MAX_INDEX,
    AbsoluteSpec,
    NamedSpec,
    RelativeSpec,
    ResolvedTarget,
    ScreenContext,
    TagSpecification,
    TargetKind,
)

_DIGITS_RE = re.compile(r"^[+-]?\d+$")


@dataclass(frozen=True, slots=True)
class Resolution:
    """Outcome of resolving one specification: a target or an error, plus warnings."""

    target: ResolvedTarget | None = None
    error: TagError | None = None
    warnings: tuple[TagError, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return self.error is None and self.target is not None


def snapshot_error(ctx: ScreenContext) -> TagError | None:
    """Return an ``INVALID_SNAPSHOT`` error when ``ctx`` cannot be resolved against."""
    if ctx.is_valid():
        return None
    return make_error(
        ErrorType.INVALID_SNAPSHOT,
        f"Current slot {ctx.current_index} is outside the addressable range 1..{ctx.slot_count}",
        context={"current_index": ctx.current_index, "slot_count": ctx.slot_count},
    )


def resolve(
    spec: TagSpecification,
    ctx: ScreenContext,
    *,
    max_index: int = DEFAULT_MAX_INDEX,
) -> Resolution:
    """Resolve ``spec`` against ``ctx`` without performing any IO.

    Relative and absolute targets above ``max_index`` are clamped and flagged
    with an overflow warning; targets below slot 1 are validation errors.
    Named targets that do not exist yet are marked ``needs_creation`` and keep
    an undetermined index until the slot is created.
    """
    invalid = snapshot_error(ctx)
    if invalid is not None:
        return Resolution(error=invalid)

    if isinstance(spec, RelativeSpec):
        return _resolve_relative(spec, ctx, max_index)
    if isinstance(spec, AbsoluteSpec):
        return _resolve_absolute(spec, ctx, max_index)
    if isinstance(spec, NamedSpec):
        return _resolve_named(spec, ctx)
    raise TypeError(f"Unsupported tag specification: {type(spec).__name__}")


def _resolve_relative(spec: RelativeSpec, ctx: ScreenContext, max_index: int) -> Resolution:
    raw = ctx.current_index + spec.offset
    if raw < 1:
        return Resolution(
            error=make_error(
                ErrorType.NEGATIVE_OFFSET,
                f"Relative offset {spec.offset:+d} from slot {ctx.current_index} "
                f"resolves to {raw}, below the first slot",
                context={
                    "offset": spec.offset,
                    "current_index": ctx.current_index,
                    "resolved_index": raw,
                },
            )
        )
    return _clamped(TargetKind.RELATIVE, raw, ctx, max_index)


def _resolve_absolute(spec: AbsoluteSpec, ctx: ScreenContext, max_index: int) -> Resolution:
    index = _parse_index(spec.index)
    if index is None or index < 1:
        return Resolution(
            error=make_error(
                ErrorType.INVALID_ABSOLUTE_SPEC,
                f"Absolute slot index {spec.index!r} must be a whole number of 1 or more",
                context={"index": spec.index},
            )
        )
    return _clamped(TargetKind.ABSOLUTE, index, ctx, max_index)


def _resolve_named(spec: NamedSpec, ctx: ScreenContext) -> Resolution:
    name = spec.name
    if not isinstance(name, str) or not name.strip():
        return Resolution(
            error=make_error(
                ErrorType.INVALID_NAME,
                "Named slot requires a non-empty string name",
                context={"name": name},
            )
        )
    existing = ctx.find_slot(name)
    if existing is not None:
        target = ResolvedTarget(kind=TargetKind.NAMED, resolved_index=existing.index, name=name)
    else:
        target = ResolvedTarget(
            kind=TargetKind.NAMED,
            resolved_index=None,
            name=name,
            needs_creation=True,
        )
    return Resolution(target=target)


def _clamped(kind: TargetKind, raw: int, ctx: ScreenContext, max_index: int) -> Resolution:
    if raw <= max_index:
        return Resolution(target=ResolvedTarget(kind=kind, resolved_index=raw))

    target = ResolvedTarget(
        kind=kind,
        resolved_index=max_index,
        overflow=True,
        original_index=raw,
    )
    warning = make_error(
        ErrorType.TAG_OVERFLOW,
        f"Slot {raw} exceeds the maximum addressable slot {max_index}; using {max_index}",
        context={
            "original_index": raw,
            "final_index": max_index,
            "max_index": max_index,
            "current_index": ctx.current_index,
            "kind": kind.value,
        },
    )
    return Resolution(target=target, warnings=(warning,))


def _parse_index(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        candidate = value.strip()
        if _DIGITS_RE.match(candidate):
            try:
                return int(candidate)
            except ValueError:
                # Digit strings past the interpreter's int conversion limit.
                return None
    return None


__all__ = ["Resolution", "resolve", "snapshot_error"]
