"""Parsing and description of tag values written in project files.

Project files express placement with a bare ``tag`` value:

* integers are relative offsets from the current slot (``0`` stays put),
* ``"+N"`` / ``"-N"`` strings are relative offsets as well, ``"0"`` included,
* other digit strings are absolute slot indices (``"3"``),
* any other string names a slot (``"editor"``).

Only the syntax is checked here; offsets, overflow and slot existence are
resolved later against a screen snapshot.
"""

from __future__ import annotations

import re
from typing import Any

from .models import AbsoluteSpec, NamedSpec, RelativeSpec, TagSpecification

_SIGNED_RE = re.compile(r"^([+-])(\d+)$")
_DIGITS_RE = re.compile(r"^\d+$")
NAME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9_-]*$")


class TagValueError(ValueError):
    """Raised when a tag value is not a plausible relative, absolute or named value."""


def parse_tag_value(value: Any) -> TagSpecification:
    """Convert a raw project-file tag value into a typed specification."""
    if isinstance(value, bool):
        raise TagValueError(f"tag must be a number or string, got {type(value).__name__}")
    if isinstance(value, int):
        return RelativeSpec(offset=value)
    if not isinstance(value, str):
        raise TagValueError(f"tag must be a number or string, got {type(value).__name__}")

    text = value.strip()
    if not text:
        raise TagValueError("tag specification cannot be an empty string")

    signed = _SIGNED_RE.match(text)
    if signed:
        try:
            offset = int(signed.group(2))
        except ValueError as error:
            raise TagValueError(f"relative offset '{text[:20]}...' is too large") from error
        return RelativeSpec(offset=-offset if signed.group(1) == "-" else offset)
    if text == "0":
        return RelativeSpec(offset=0)
    if _DIGITS_RE.match(text):
        return AbsoluteSpec(index=text)
    if not NAME_RE.match(text):
        raise TagValueError(
            f"invalid tag name '{text}': must start with a letter and contain only "
            "letters, numbers, underscore, or dash"
        )
    return NamedSpec(name=text)


def describe_tag_spec(spec: TagSpecification) -> str:
    """Return a human-readable description of ``spec``."""
    if isinstance(spec, RelativeSpec):
        if spec.offset == 0:
            return "current tag (relative offset 0)"
        return f"relative offset {spec.offset:+d}"
    if isinstance(spec, AbsoluteSpec):
        return f"absolute tag {spec.index}"
    if isinstance(spec, NamedSpec):
        return f"named tag '{spec.name}'"
    raise TypeError(f"Unsupported tag specification: {type(spec).__name__}")


__all__ = ["NAME_RE", "TagValueError", "describe_tag_spec", "parse_tag_value"]
